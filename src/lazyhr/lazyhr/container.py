from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.calculator.standard_calculator import StandardWorkedHoursCalculator
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .common.clock import Clock
from .common.locks import KeyedLocks
from .core.constants import DEFAULT_LOCK_TIMEOUT_SECONDS, DEFAULT_TIMEZONE
from .database.bootstrap import as_db_config
from .database.connection import DatabaseConnection
from .leave.balance import LeaveBalanceCalculator
from .leave.mysql_leave_repository import MySQLLeaveRequestRepository
from .leave.repository import LeaveRequestRepository
from .leave.service import LeaveService
from .users.mysql_user_repository import MySQLUserDirectory
from .users.repository import UserDirectory


@dataclass(frozen=True)
class Container:
    clock: Clock
    locks: KeyedLocks

    users_repo: UserDirectory
    leaves_repo: LeaveRequestRepository
    attendance_repo: AttendanceRepository

    leave_service: LeaveService
    leave_balance: LeaveBalanceCalculator
    attendance_service: AttendanceService


def wire_services(
    *,
    users_repo: UserDirectory,
    leaves_repo: LeaveRequestRepository,
    attendance_repo: AttendanceRepository,
    clock: Optional[Clock] = None,
    lock_timeout: float = DEFAULT_LOCK_TIMEOUT_SECONDS,
    single_open_session: bool = False,
) -> Container:
    """Build services over any repository implementations (MySQL or in-memory)."""

    clock = clock or Clock(DEFAULT_TIMEZONE)
    locks = KeyedLocks(timeout=lock_timeout)

    return Container(
        clock=clock,
        locks=locks,
        users_repo=users_repo,
        leaves_repo=leaves_repo,
        attendance_repo=attendance_repo,
        leave_service=LeaveService(leaves_repo, users_repo, clock=clock, locks=locks),
        leave_balance=LeaveBalanceCalculator(leaves_repo, users_repo, clock=clock),
        attendance_service=AttendanceService(
            attendance_repo,
            users_repo,
            clock=clock,
            calculator=StandardWorkedHoursCalculator(),
            locks=locks,
            single_open_session=single_open_session,
        ),
    )


def build_container(
    *,
    db_config: dict,
    timezone: str = DEFAULT_TIMEZONE,
    lock_timeout: float = DEFAULT_LOCK_TIMEOUT_SECONDS,
    single_open_session: bool = False,
) -> Container:
    conn = DatabaseConnection.get_instance(as_db_config(db_config))

    return wire_services(
        users_repo=MySQLUserDirectory(conn),
        leaves_repo=MySQLLeaveRequestRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        clock=Clock(timezone),
        lock_timeout=lock_timeout,
        single_open_session=single_open_session,
    )
