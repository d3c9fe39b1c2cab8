from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Optional

import pytest

from src.lazyhr.lazyhr.attendance.model import AttendanceSession
from src.lazyhr.lazyhr.common.clock import Clock
from src.lazyhr.lazyhr.common.datetime_utils import to_epoch_millis
from src.lazyhr.lazyhr.core.enums import AttendanceStatus, LeaveCategory, LeaveStatus
from src.lazyhr.lazyhr.leave.model import LeaveRequest, NewLeaveRequest
from src.lazyhr.lazyhr.users.model import User

FIXED_NOW = datetime(2026, 2, 2, 9, 0, 0, tzinfo=timezone.utc)


def ms(**delta) -> int:
    """Milliseconds in a timedelta, e.g. ``ms(hours=9, minutes=30)``."""
    return int(timedelta(**delta) / timedelta(milliseconds=1))


class FakeNow:
    def __init__(self, start: datetime):
        self.millis = to_epoch_millis(start)

    def __call__(self) -> int:
        return self.millis

    def advance(self, **delta) -> None:
        self.millis += ms(**delta)


class InMemoryUsers:
    def __init__(self, users: dict[int, User]):
        self._users = users

    def in_department(self, user_id: int, department: str) -> bool:
        user = self._users.get(int(user_id))
        return bool(user) and user.department == department

    def exists(self, user_id: int) -> bool:
        return int(user_id) in self._users

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._users.get(int(user_id))


class InMemoryLeaves:
    def __init__(self, users: Optional[InMemoryUsers] = None):
        self._users = users
        self._by_id: dict[int, LeaveRequest] = {}
        self._next_id = 1

    def add(self, leave: LeaveRequest) -> LeaveRequest:
        """Seed a request directly (bypasses the service rules)."""
        self._by_id[leave.leave_id] = leave
        self._next_id = max(self._next_id, leave.leave_id + 1)
        return leave

    def create(self, new: NewLeaveRequest) -> int:
        lid = self._next_id
        self._next_id += 1
        self._by_id[lid] = LeaveRequest(
            leave_id=lid,
            user_id=new.user_id,
            category=new.category,
            period=new.period,
            start_date=new.start_date,
            end_date=new.end_date,
            total_days=new.total_days,
            reason=new.reason,
            status=LeaveStatus.PENDING,
            applied_at=new.applied_at,
            created_at=new.applied_at,
            updated_at=new.applied_at,
        )
        return lid

    def get_by_id(self, leave_id: int) -> Optional[LeaveRequest]:
        return self._by_id.get(int(leave_id))

    def decide(self, *, leave_id, status, approver_id, approved_at, comments=None) -> bool:
        req = self._by_id.get(int(leave_id))
        if not req or req.status != LeaveStatus.PENDING:
            return False
        self._by_id[int(leave_id)] = replace(
            req,
            status=status,
            approver_id=int(approver_id),
            approved_at=approved_at,
            comments=comments,
            updated_at=approved_at,
        )
        return True

    def delete_pending(self, leave_id: int) -> bool:
        req = self._by_id.get(int(leave_id))
        if not req or req.status != LeaveStatus.PENDING:
            return False
        del self._by_id[int(leave_id)]
        return True

    def _newest_first(self, rows):
        return sorted(rows, key=lambda r: r.applied_at, reverse=True)

    def list_by_user(self, user_id):
        return self._newest_first(r for r in self._by_id.values() if r.user_id == user_id)

    def list_by_user_and_status(self, user_id, status):
        return self._newest_first(r for r in self._by_id.values() if r.user_id == user_id and r.status == status)

    def list_by_status(self, status):
        return self._newest_first(r for r in self._by_id.values() if r.status == status)

    def list_pending(self):
        return sorted(
            (r for r in self._by_id.values() if r.status == LeaveStatus.PENDING),
            key=lambda r: r.applied_at,
        )

    def list_by_department_and_status(self, department, status):
        return self._newest_first(
            r
            for r in self._by_id.values()
            if r.status == status and self._users.in_department(r.user_id, department)
        )

    def find_overlapping_approved(self, *, user_id, start_date, end_date):
        return [
            r
            for r in self._by_id.values()
            if r.user_id == user_id
            and r.status == LeaveStatus.APPROVED
            and r.start_date <= end_date
            and r.end_date >= start_date
        ]

    def list_for_timestamp(self, instant):
        return [r for r in self._by_id.values() if r.covers(instant)]

    def sum_approved_days(self, *, user_id, category: LeaveCategory, start_inclusive, end_exclusive) -> Decimal:
        total = Decimal("0.0")
        for r in self._by_id.values():
            if (
                r.user_id == user_id
                and r.category == category
                and r.status == LeaveStatus.APPROVED
                and start_inclusive <= r.start_date < end_exclusive
            ):
                total += r.total_days
        return total

    def count_pending(self) -> int:
        return len([r for r in self._by_id.values() if r.status == LeaveStatus.PENDING])


class InMemoryAttendance:
    def __init__(self, users: Optional[InMemoryUsers] = None):
        self._users = users
        self._by_id: dict[int, AttendanceSession] = {}
        self._id = 0

    def create(self, *, user_id, attendance_date, clock_in_time, status: AttendanceStatus) -> int:
        self._id += 1
        self._by_id[self._id] = AttendanceSession(
            session_id=self._id,
            user_id=user_id,
            attendance_date=attendance_date,
            clock_in_time=clock_in_time,
            status=status,
            created_at=clock_in_time,
            updated_at=clock_in_time,
        )
        return self._id

    def get_by_id(self, session_id) -> Optional[AttendanceSession]:
        return self._by_id.get(int(session_id))

    def close(self, *, session_id, clock_out_time, total_hours, overtime_hours, break_minutes) -> bool:
        s = self._by_id.get(int(session_id))
        if not s or s.clock_out_time is not None or s.break_duration_minutes != break_minutes:
            return False
        self._by_id[s.session_id] = replace(
            s,
            clock_out_time=clock_out_time,
            total_hours=total_hours,
            overtime_hours=overtime_hours,
            updated_at=clock_out_time,
        )
        return True

    def update(self, session: AttendanceSession, *, expected: AttendanceSession) -> bool:
        current = self._by_id.get(session.session_id)
        if (
            not current
            or current.clock_out_time != expected.clock_out_time
            or current.break_duration_minutes != expected.break_duration_minutes
            or current.updated_at != expected.updated_at
        ):
            return False
        self._by_id[session.session_id] = replace(
            current,
            break_duration_minutes=session.break_duration_minutes,
            total_hours=session.total_hours,
            overtime_hours=session.overtime_hours,
            status=session.status,
            notes=session.notes,
            updated_at=session.updated_at,
        )
        return True

    def _latest_first(self, rows):
        return sorted(rows, key=lambda s: (s.attendance_date, s.clock_in_time), reverse=True)

    def list_by_user_and_date(self, user_id, attendance_date):
        return self._latest_first(
            s for s in self._by_id.values() if s.user_id == user_id and s.attendance_date == attendance_date
        )

    def list_open_for_user(self, user_id):
        return self._latest_first(s for s in self._by_id.values() if s.user_id == user_id and s.is_open)

    def list_by_user_and_range(self, user_id, start_date, end_date):
        return self._latest_first(
            s for s in self._by_id.values() if s.user_id == user_id and start_date <= s.attendance_date <= end_date
        )

    def list_by_user(self, user_id):
        return self._latest_first(s for s in self._by_id.values() if s.user_id == user_id)

    def list_for_date(self, attendance_date):
        return self._latest_first(s for s in self._by_id.values() if s.attendance_date == attendance_date)

    def list_by_range(self, start_date, end_date):
        return self._latest_first(s for s in self._by_id.values() if start_date <= s.attendance_date <= end_date)

    def list_by_department_and_range(self, department, start_date, end_date):
        return self._latest_first(
            s
            for s in self.list_by_range(start_date, end_date)
            if self._users.in_department(s.user_id, department)
        )

    def count_users_for_date(self, attendance_date) -> int:
        return len({s.user_id for s in self._by_id.values() if s.attendance_date == attendance_date})

    def sum_overtime_hours(self, user_id, start_date, end_date) -> Decimal:
        total = Decimal("0.00")
        for s in self.list_by_user_and_range(user_id, start_date, end_date):
            total += s.overtime_hours or Decimal("0.00")
        return total


@pytest.fixture
def now() -> FakeNow:
    return FakeNow(FIXED_NOW)


@pytest.fixture
def clock(now) -> Clock:
    return Clock("UTC", now_fn=now)


@pytest.fixture
def users() -> InMemoryUsers:
    return InMemoryUsers(
        {
            1: User(user_id=1, username="admin", full_name="Admin Demo", department="HR"),
            2: User(user_id=2, username="alice", full_name="Alice Employee", department="IT"),
            3: User(user_id=3, username="bob", full_name="Bob Employee", department="IT"),
        }
    )


@pytest.fixture
def leaves_repo(users) -> InMemoryLeaves:
    return InMemoryLeaves(users)


@pytest.fixture
def attendance_repo(users) -> InMemoryAttendance:
    return InMemoryAttendance(users)
