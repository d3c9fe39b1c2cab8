from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..core.enums import LeaveCategory, LeavePeriod, LeaveStatus


@dataclass(frozen=True)
class LeaveRequest:
    """Đơn nghỉ phép. Mọi mốc thời gian là epoch milliseconds (UTC)."""

    leave_id: int
    user_id: int
    category: LeaveCategory
    period: LeavePeriod
    start_date: int
    end_date: int
    total_days: Decimal
    reason: str
    status: LeaveStatus
    applied_at: int
    created_at: int
    updated_at: int
    approver_id: Optional[int] = None
    approved_at: Optional[int] = None
    comments: Optional[str] = None

    @property
    def is_pending(self) -> bool:
        return self.status == LeaveStatus.PENDING

    def covers(self, instant: int) -> bool:
        return self.start_date == instant or self.start_date <= instant <= self.end_date


@dataclass(frozen=True)
class NewLeaveRequest:
    """Validated input for a leave application, before the store assigns an id."""

    user_id: int
    category: LeaveCategory
    period: LeavePeriod
    start_date: int
    end_date: int
    total_days: Decimal
    reason: str
    applied_at: int
