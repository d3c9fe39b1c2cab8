from __future__ import annotations

from typing import Optional, Protocol

from .model import User


class UserDirectory(Protocol):
    """Giao diện tra cứu User.

    Lưu ý (DIP): tầng service phụ thuộc vào interface này, không phụ thuộc trực tiếp DB cụ thể.
    """

    def exists(self, user_id: int) -> bool:
        raise NotImplementedError

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError
