from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveCategory, LeaveStatus
from .model import LeaveRequest, NewLeaveRequest


class LeaveRequestRepository(Protocol):
    def create(self, new: NewLeaveRequest) -> int:
        """Persist a PENDING request; ``applied_at`` doubles as created/updated."""

        raise NotImplementedError

    def get_by_id(self, leave_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def decide(
        self,
        *,
        leave_id: int,
        status: LeaveStatus,
        approver_id: int,
        approved_at: int,
        comments: Optional[str] = None,
    ) -> bool:
        """Move a PENDING request to ``status``; False when it is no longer PENDING."""

        raise NotImplementedError

    def delete_pending(self, leave_id: int) -> bool:
        raise NotImplementedError

    def list_by_user(self, user_id: int) -> Sequence[LeaveRequest]:
        """Newest application first."""

        raise NotImplementedError

    def list_by_user_and_status(self, user_id: int, status: LeaveStatus) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def list_by_status(self, status: LeaveStatus) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def list_pending(self) -> Sequence[LeaveRequest]:
        """Oldest application first (review queue order)."""

        raise NotImplementedError

    def list_by_department_and_status(self, department: str, status: LeaveStatus) -> Sequence[LeaveRequest]:
        """Requests of users in ``department``, newest application first."""

        raise NotImplementedError

    def find_overlapping_approved(self, *, user_id: int, start_date: int, end_date: int) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def list_for_timestamp(self, instant: int) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def sum_approved_days(
        self,
        *,
        user_id: int,
        category: LeaveCategory,
        start_inclusive: int,
        end_exclusive: int,
    ) -> Decimal:
        """Sum of ``total_days`` of APPROVED requests starting inside the window."""

        raise NotImplementedError

    def count_pending(self) -> int:
        raise NotImplementedError
