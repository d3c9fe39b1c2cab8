from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Callable, Optional, Sequence

from ..common.clock import Clock
from ..common.datetime_utils import start_of_day_millis
from ..common.locks import KeyedLocks
from ..common.validators import optional_text, require_non_empty, require_non_negative
from ..core.enums import AttendanceStatus, ConflictReason, EntityKind, ValidationReason
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..users.repository import UserDirectory
from .calculator.base import WorkedHoursCalculator
from .calculator.standard_calculator import StandardWorkedHoursCalculator
from .model import AttendanceSession
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

_USER_CLOCK = "attendance-user"
# A session is closed at most once, so one retry normally suffices.
_WRITE_ATTEMPTS = 3


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserDirectory,
        *,
        clock: Clock,
        calculator: Optional[WorkedHoursCalculator] = None,
        locks: Optional[KeyedLocks] = None,
        single_open_session: bool = False,
    ):
        self._attendance = attendance
        self._users = users
        self._clock = clock
        self._calculator = calculator or StandardWorkedHoursCalculator()
        self._locks = locks or KeyedLocks()
        self._single_open_session = bool(single_open_session)

    def _require_user(self, user_id: int) -> None:
        if not self._users.exists(int(user_id)):
            raise NotFoundError(EntityKind.USER, user_id)

    def _require_session(self, session_id: int) -> AttendanceSession:
        session = self._attendance.get_by_id(int(session_id))
        if not session:
            raise NotFoundError(EntityKind.ATTENDANCE_SESSION, session_id)
        return session

    def _with_hours(self, session: AttendanceSession) -> AttendanceSession:
        if session.clock_out_time is None:
            return session
        hours = self._calculator.compute(
            clock_in_time=session.clock_in_time,
            clock_out_time=session.clock_out_time,
            break_minutes=session.break_duration_minutes,
        )
        return replace(session, total_hours=hours.total_hours, overtime_hours=hours.overtime_hours)

    def _modify(self, session_id: int, change: Callable[[AttendanceSession], AttendanceSession]) -> AttendanceSession:
        """Apply ``change`` to the stored session with an optimistic write.

        Another process may close the session or change its break between our
        read and write; the store then rejects the write and the change is
        re-applied to a fresh copy.
        """

        with self._locks.hold((EntityKind.ATTENDANCE_SESSION, int(session_id))):
            for _ in range(_WRITE_ATTEMPTS):
                current = self._require_session(session_id)
                updated = replace(change(current), updated_at=self._clock.now_millis())
                if self._attendance.update(updated, expected=current):
                    return updated
                logger.warning("session=%s changed during update, retrying", session_id)

        raise ConflictError(ConflictReason.CONCURRENT_UPDATE, "Attendance session was modified concurrently")

    def clock_in(self, user_id: int) -> AttendanceSession:
        self._require_user(user_id)

        with self._locks.hold((_USER_CLOCK, int(user_id))):
            if self._single_open_session and self._attendance.list_open_for_user(int(user_id)):
                raise ConflictError(ConflictReason.ALREADY_CLOCKED_IN, "User is already clocked in")

            now = self._clock.now_millis()
            session_id = self._attendance.create(
                user_id=int(user_id),
                attendance_date=self._clock.start_of_day_millis(now),
                clock_in_time=now,
                status=AttendanceStatus.PRESENT,
            )

        logger.info("clock-in user=%s session=%s", user_id, session_id)
        return self._require_session(session_id)

    def _close(self, session_id: int) -> AttendanceSession:
        for _ in range(_WRITE_ATTEMPTS):
            session = self._require_session(session_id)
            if not session.is_open:
                raise ConflictError(ConflictReason.NO_ACTIVE_SESSION, "No active clock-in found")

            now = self._clock.now_millis()
            closed = self._with_hours(replace(session, clock_out_time=now, updated_at=now))
            if self._attendance.close(
                session_id=session_id,
                clock_out_time=now,
                total_hours=closed.total_hours,
                overtime_hours=closed.overtime_hours,
                break_minutes=session.break_duration_minutes,
            ):
                return closed
            logger.warning("session=%s changed during clock-out, retrying", session_id)

        raise ConflictError(ConflictReason.CONCURRENT_UPDATE, "Attendance session was modified concurrently")

    def clock_out(self, user_id: int) -> AttendanceSession:
        with self._locks.hold((_USER_CLOCK, int(user_id))):
            active = self._attendance.list_open_for_user(int(user_id))
            if not active:
                raise ConflictError(ConflictReason.NO_ACTIVE_SESSION, "No active clock-in found")

            session_id = active[0].session_id
            with self._locks.hold((EntityKind.ATTENDANCE_SESSION, session_id)):
                closed = self._close(session_id)

        logger.info("clock-out user=%s session=%s hours=%s", user_id, session_id, closed.total_hours)
        return closed

    def update_break_duration(self, *, session_id: int, minutes: int) -> AttendanceSession:
        minutes = require_non_negative(minutes, "breakMinutes")
        return self._modify(session_id, lambda s: self._with_hours(replace(s, break_duration_minutes=minutes)))

    def update_notes(self, *, session_id: int, notes: Optional[str]) -> AttendanceSession:
        notes = optional_text(notes)
        return self._modify(session_id, lambda s: replace(s, notes=notes))

    def _mark(self, session_id: int, status: AttendanceStatus) -> AttendanceSession:
        updated = self._modify(session_id, lambda s: replace(s, status=status))
        logger.info("session=%s marked %s", session_id, status.value)
        return updated

    def mark_late(self, session_id: int) -> AttendanceSession:
        return self._mark(session_id, AttendanceStatus.LATE)

    def mark_half_day(self, session_id: int) -> AttendanceSession:
        return self._mark(session_id, AttendanceStatus.HALF_DAY)

    def get_session(self, session_id: int) -> AttendanceSession:
        return self._require_session(session_id)

    def list_today_sessions(self, user_id: int) -> Sequence[AttendanceSession]:
        self._require_user(user_id)
        return self._attendance.list_by_user_and_date(int(user_id), self._clock.start_of_today_millis())

    def get_today_session(self, user_id: int) -> Optional[AttendanceSession]:
        """Most recent session of today, if any."""
        sessions = self.list_today_sessions(user_id)
        return sessions[0] if sessions else None

    def list_open_sessions(self, user_id: int) -> Sequence[AttendanceSession]:
        return self._attendance.list_open_for_user(int(user_id))

    def get_active_session(self, user_id: int) -> Optional[AttendanceSession]:
        active = self.list_open_sessions(user_id)
        return active[0] if active else None

    def is_clocked_in(self, user_id: int) -> bool:
        return bool(self.list_open_sessions(user_id))

    def list_sessions_in_range(self, *, user_id: int, start_date: int, end_date: int) -> Sequence[AttendanceSession]:
        self._require_user(user_id)
        if int(start_date) > int(end_date):
            raise ValidationError(ValidationReason.INVALID_RANGE, "Start date cannot be after end date")
        return self._attendance.list_by_user_and_range(int(user_id), int(start_date), int(end_date))

    def list_history(self, user_id: int) -> Sequence[AttendanceSession]:
        self._require_user(user_id)
        return self._attendance.list_by_user(int(user_id))

    def list_today_all(self) -> Sequence[AttendanceSession]:
        return self._attendance.list_for_date(self._clock.start_of_today_millis())

    def count_clocked_in_today(self) -> int:
        return self._attendance.count_users_for_date(self._clock.start_of_today_millis())

    def total_overtime_hours(self, *, user_id: int, start_date: int, end_date: int) -> Decimal:
        self._require_user(user_id)
        return self._attendance.sum_overtime_hours(int(user_id), int(start_date), int(end_date))

    def _day_bounds(self, start_day: date, end_day: date) -> tuple[int, int]:
        if start_day > end_day:
            raise ValidationError(ValidationReason.INVALID_RANGE, "Start date cannot be after end date")
        tz = self._clock.tz
        return start_of_day_millis(start_day, tz), start_of_day_millis(end_day, tz)

    def list_sessions_between(self, *, start_day: date, end_day: date) -> Sequence[AttendanceSession]:
        """Sessions of every user whose attendance day lies in [start_day, end_day]."""
        start, end = self._day_bounds(start_day, end_day)
        return self._attendance.list_by_range(start, end)

    def list_department_sessions(self, *, department: str, start_day: date, end_day: date) -> Sequence[AttendanceSession]:
        department = require_non_empty(department, "department")
        start, end = self._day_bounds(start_day, end_day)
        return self._attendance.list_by_department_and_range(department, start, end)
