from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class User:
    """Thực thể miền (domain): User.

    Lưu ý: chỉ đọc với lõi nghiệp vụ; đơn nghỉ và phiên chấm công tham chiếu
    tới user bằng ``user_id`` chứ không giữ đối tượng.
    """

    user_id: int
    username: str
    full_name: str
    email: Optional[str] = None
    department: Optional[str] = None
    is_active: bool = True
