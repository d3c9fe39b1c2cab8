from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceSession:
    """Thực thể miền (domain): một phiên chấm công vào/ra.

    ``clock_out_time`` là None khi phiên còn mở; khi đó chưa có số giờ.
    """

    session_id: int
    user_id: int
    attendance_date: int
    clock_in_time: int
    status: AttendanceStatus
    created_at: int
    updated_at: int
    clock_out_time: Optional[int] = None
    break_duration_minutes: int = 0
    total_hours: Optional[Decimal] = None
    overtime_hours: Optional[Decimal] = None
    notes: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.clock_out_time is None
