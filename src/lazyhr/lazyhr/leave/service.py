from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from ..common.clock import Clock
from ..common.datetime_utils import leave_total_days
from ..common.locks import KeyedLocks
from ..common.validators import optional_text, require_enum, require_non_empty
from ..core.constants import CANCEL_NOTICE_MILLIS
from ..core.enums import (
    ConflictReason,
    EntityKind,
    LeaveCategory,
    LeavePeriod,
    LeaveStatus,
    ValidationReason,
)
from ..core.exceptions import ConflictError, ForbiddenError, NotFoundError, ValidationError
from ..users.repository import UserDirectory
from .model import LeaveRequest, NewLeaveRequest
from .repository import LeaveRequestRepository

logger = logging.getLogger(__name__)


class LeaveService:
    """Leave request lifecycle: apply, approve, reject, cancel and lookups.

    State machine per request::

        PENDING --approve--> APPROVED
        PENDING --reject---> REJECTED
        PENDING --cancel---> (deleted)

    Approve/reject/cancel run under a per-request lock and the store writes
    are conditional on the row still being PENDING, so two concurrent
    decisions on the same request cannot both succeed.
    """

    def __init__(
        self,
        leaves: LeaveRequestRepository,
        users: UserDirectory,
        *,
        clock: Clock,
        locks: Optional[KeyedLocks] = None,
    ):
        self._leaves = leaves
        self._users = users
        self._clock = clock
        self._locks = locks or KeyedLocks()

    def _require_user(self, user_id: int) -> None:
        if not self._users.exists(int(user_id)):
            raise NotFoundError(EntityKind.USER, user_id)

    def _require_leave(self, leave_id: int) -> LeaveRequest:
        leave = self._leaves.get_by_id(int(leave_id))
        if not leave:
            raise NotFoundError(EntityKind.LEAVE_REQUEST, leave_id)
        return leave

    @staticmethod
    def _require_pending(leave: LeaveRequest, message: str) -> None:
        if leave.status != LeaveStatus.PENDING:
            raise ConflictError(ConflictReason.NOT_PENDING, message)

    def apply(
        self,
        *,
        user_id: int,
        category: Any,
        period: Any,
        start_date: int,
        end_date: int,
        reason: str,
    ) -> LeaveRequest:
        self._require_user(user_id)

        category = require_enum(LeaveCategory, category, "category")
        period = require_enum(LeavePeriod, period, "period")
        reason = require_non_empty(reason, "reason")
        start_date, end_date = int(start_date), int(end_date)

        if start_date > end_date:
            raise ValidationError(ValidationReason.INVALID_RANGE, "Start date cannot be after end date")

        now = self._clock.now_millis()
        if start_date < now:
            raise ValidationError(ValidationReason.PAST_DATE, "Cannot apply for leave in the past")

        # Raises INVALID_RANGE for timestamps outside the calendar.
        total_days = leave_total_days(start_date, end_date, period, self._clock.tz)

        # Only APPROVED leave blocks a new application; PENDING ones may overlap.
        overlapping = self._leaves.find_overlapping_approved(
            user_id=int(user_id), start_date=start_date, end_date=end_date
        )
        if overlapping:
            first = overlapping[0]
            logger.warning(
                "leave apply rejected user=%s overlaps approved leave=%s", user_id, first.leave_id
            )
            raise ConflictError(
                ConflictReason.OVERLAP,
                "Leave request overlaps with existing approved leave",
                conflicting_start=first.start_date,
                conflicting_end=first.end_date,
            )

        new = NewLeaveRequest(
            user_id=int(user_id),
            category=category,
            period=period,
            start_date=start_date,
            end_date=end_date,
            total_days=total_days,
            reason=reason,
            applied_at=now,
        )
        leave_id = self._leaves.create(new)
        logger.info(
            "leave applied id=%s user=%s category=%s days=%s", leave_id, user_id, category.value, new.total_days
        )
        return self._require_leave(leave_id)

    def _decide(self, *, leave_id: int, approver_id: int, comments: Optional[str], status: LeaveStatus) -> LeaveRequest:
        with self._locks.hold((EntityKind.LEAVE_REQUEST, int(leave_id))):
            leave = self._require_leave(leave_id)
            self._require_user(approver_id)
            self._require_pending(leave, "Leave request is not in pending status")

            decided = self._leaves.decide(
                leave_id=int(leave_id),
                status=status,
                approver_id=int(approver_id),
                approved_at=self._clock.now_millis(),
                comments=optional_text(comments),
            )
            if not decided:
                raise ConflictError(ConflictReason.NOT_PENDING, "Leave request is not in pending status")

            logger.info("leave %s id=%s by approver=%s", status.value.lower(), leave_id, approver_id)
            return self._require_leave(leave_id)

    def approve(self, *, leave_id: int, approver_id: int, comments: Optional[str] = None) -> LeaveRequest:
        return self._decide(leave_id=leave_id, approver_id=approver_id, comments=comments, status=LeaveStatus.APPROVED)

    def reject(self, *, leave_id: int, approver_id: int, comments: Optional[str] = None) -> LeaveRequest:
        return self._decide(leave_id=leave_id, approver_id=approver_id, comments=comments, status=LeaveStatus.REJECTED)

    def cancel(self, *, leave_id: int, user_id: int) -> None:
        with self._locks.hold((EntityKind.LEAVE_REQUEST, int(leave_id))):
            leave = self._require_leave(leave_id)
            if leave.user_id != int(user_id):
                raise ForbiddenError("Leave request does not belong to the user")
            self._require_pending(leave, "Only pending leave requests can be cancelled")

            if leave.start_date < self._clock.now_millis() + CANCEL_NOTICE_MILLIS:
                raise ConflictError(
                    ConflictReason.TOO_LATE_TO_CANCEL,
                    "Cannot cancel leave request that starts today or in the past",
                )

            if not self._leaves.delete_pending(int(leave_id)):
                raise ConflictError(ConflictReason.NOT_PENDING, "Only pending leave requests can be cancelled")
            logger.info("leave cancelled id=%s user=%s", leave_id, user_id)

    def get(self, leave_id: int) -> LeaveRequest:
        return self._require_leave(leave_id)

    def list_for_user(self, user_id: int) -> Sequence[LeaveRequest]:
        self._require_user(user_id)
        return self._leaves.list_by_user(int(user_id))

    def list_for_user_by_status(self, user_id: int, status: Any) -> Sequence[LeaveRequest]:
        self._require_user(user_id)
        return self._leaves.list_by_user_and_status(int(user_id), require_enum(LeaveStatus, status, "status"))

    def list_by_status(self, status: Any) -> Sequence[LeaveRequest]:
        return self._leaves.list_by_status(require_enum(LeaveStatus, status, "status"))

    def list_pending(self) -> Sequence[LeaveRequest]:
        return self._leaves.list_pending()

    def list_by_department_and_status(self, department: str, status: Any) -> Sequence[LeaveRequest]:
        department = require_non_empty(department, "department")
        return self._leaves.list_by_department_and_status(department, require_enum(LeaveStatus, status, "status"))

    def list_for_timestamp(self, instant: int) -> Sequence[LeaveRequest]:
        return self._leaves.list_for_timestamp(int(instant))

    def has_pending(self, user_id: int) -> bool:
        self._require_user(user_id)
        return bool(self._leaves.list_by_user_and_status(int(user_id), LeaveStatus.PENDING))

    def count_pending(self) -> int:
        return self._leaves.count_pending()
