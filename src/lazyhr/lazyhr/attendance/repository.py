from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceSession


class AttendanceRepository(Protocol):
    def create(
        self,
        *,
        user_id: int,
        attendance_date: int,
        clock_in_time: int,
        status: AttendanceStatus,
    ) -> int:
        """Open a session; created_at/updated_at are the clock-in instant."""

        raise NotImplementedError

    def get_by_id(self, session_id: int) -> Optional[AttendanceSession]:
        raise NotImplementedError

    def close(
        self,
        *,
        session_id: int,
        clock_out_time: int,
        total_hours: Decimal,
        overtime_hours: Decimal,
        break_minutes: int,
    ) -> bool:
        """Record the clock-out.

        False when the session is already closed or its break no longer equals
        ``break_minutes`` (the hours were computed from a stale break).
        """

        raise NotImplementedError

    def update(self, session: AttendanceSession, *, expected: AttendanceSession) -> bool:
        """Write back break, hours, status, notes and updated_at of ``session``.

        Optimistic write: only applies while the stored row still has the
        ``clock_out_time``, ``break_duration_minutes`` and ``updated_at`` of
        ``expected`` (the copy the change was computed from). False otherwise.
        """

        raise NotImplementedError

    def list_by_user_and_date(self, user_id: int, attendance_date: int) -> Sequence[AttendanceSession]:
        """Newest clock-in first."""

        raise NotImplementedError

    def list_open_for_user(self, user_id: int) -> Sequence[AttendanceSession]:
        """Sessions without clock-out, newest clock-in first."""

        raise NotImplementedError

    def list_by_user_and_range(self, user_id: int, start_date: int, end_date: int) -> Sequence[AttendanceSession]:
        """``attendance_date`` within [start_date, end_date], newest day first."""

        raise NotImplementedError

    def list_by_user(self, user_id: int) -> Sequence[AttendanceSession]:
        raise NotImplementedError

    def list_for_date(self, attendance_date: int) -> Sequence[AttendanceSession]:
        raise NotImplementedError

    def list_by_range(self, start_date: int, end_date: int) -> Sequence[AttendanceSession]:
        """All users, ``attendance_date`` within [start_date, end_date], newest day first."""

        raise NotImplementedError

    def list_by_department_and_range(
        self, department: str, start_date: int, end_date: int
    ) -> Sequence[AttendanceSession]:
        """Sessions of users in ``department`` within the date range, newest day first."""

        raise NotImplementedError

    def count_users_for_date(self, attendance_date: int) -> int:
        raise NotImplementedError

    def sum_overtime_hours(self, user_id: int, start_date: int, end_date: int) -> Decimal:
        raise NotImplementedError
