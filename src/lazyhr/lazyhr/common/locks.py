from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Hashable, Iterator, Optional

from ..core.constants import DEFAULT_LOCK_TIMEOUT_SECONDS
from ..core.exceptions import OperationTimeoutError

logger = logging.getLogger(__name__)


class _Entry:
    __slots__ = ("lock", "users")

    def __init__(self):
        self.lock = threading.Lock()
        self.users = 0


class KeyedLocks:
    """One mutex per entity key, created on demand and dropped when idle.

    Used around read-modify-write sequences on a single leave request or
    attendance session. Keys are usually ``(kind, id)`` tuples.
    """

    def __init__(self, *, timeout: float = DEFAULT_LOCK_TIMEOUT_SECONDS):
        self._timeout = float(timeout)
        self._guard = threading.Lock()
        self._entries: dict[Hashable, _Entry] = {}

    @contextmanager
    def hold(self, key: Hashable, *, timeout: Optional[float] = None) -> Iterator[None]:
        wait = self._timeout if timeout is None else float(timeout)

        with self._guard:
            entry = self._entries.get(key)
            if entry is None:
                entry = _Entry()
                self._entries[key] = entry
            entry.users += 1

        try:
            if not entry.lock.acquire(timeout=wait):
                logger.warning("lock timeout key=%r after %.2fs", key, wait)
                raise OperationTimeoutError(key, wait)
            try:
                yield
            finally:
                entry.lock.release()
        finally:
            with self._guard:
                entry.users -= 1
                if entry.users == 0:
                    self._entries.pop(key, None)

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)
