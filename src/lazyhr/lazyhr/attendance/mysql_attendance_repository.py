from __future__ import annotations

from decimal import Decimal
from typing import Any, Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, optional_int, to_decimal
from .model import AttendanceSession
from .repository import AttendanceRepository

_COLUMNS = """
    session_id, user_id, attendance_date, clock_in_time, clock_out_time,
    break_duration_minutes, total_hours, overtime_hours, status, notes,
    created_at, updated_at
"""

_QUALIFIED_COLUMNS = ", ".join("a." + c.strip() for c in _COLUMNS.split(","))


def _row_to_session(r: dict[str, Any]) -> AttendanceSession:
    return AttendanceSession(
        session_id=int(r["session_id"]),
        user_id=int(r["user_id"]),
        attendance_date=int(r["attendance_date"]),
        clock_in_time=int(r["clock_in_time"]),
        clock_out_time=optional_int(r.get("clock_out_time")),
        break_duration_minutes=int(r.get("break_duration_minutes") or 0),
        total_hours=to_decimal(r.get("total_hours"), "0.01"),
        overtime_hours=to_decimal(r.get("overtime_hours"), "0.01"),
        status=AttendanceStatus(r["status"]),
        notes=r.get("notes"),
        created_at=int(r["created_at"]),
        updated_at=int(r["updated_at"]),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _select(self, where: str, params: tuple, order_by: str) -> list[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_sessions WHERE {where} ORDER BY {order_by}",
                params,
            )
            return [_row_to_session(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        user_id: int,
        attendance_date: int,
        clock_in_time: int,
        status: AttendanceStatus,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_sessions(
                    user_id, attendance_date, clock_in_time, break_duration_minutes,
                    status, created_at, updated_at
                )
                VALUES(%s,%s,%s,0,%s,%s,%s)
                """,
                (
                    int(user_id),
                    int(attendance_date),
                    int(clock_in_time),
                    status.value,
                    int(clock_in_time),
                    int(clock_in_time),
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, session_id: int) -> Optional[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_sessions WHERE session_id=%s", (int(session_id),))
            r = fetchone(cur)
            return _row_to_session(r) if r else None

    def close(
        self,
        *,
        session_id: int,
        clock_out_time: int,
        total_hours: Decimal,
        overtime_hours: Decimal,
        break_minutes: int,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_sessions
                SET clock_out_time=%s, total_hours=%s, overtime_hours=%s, updated_at=%s
                WHERE session_id=%s AND clock_out_time IS NULL AND break_duration_minutes=%s
                """,
                (
                    int(clock_out_time),
                    total_hours,
                    overtime_hours,
                    int(clock_out_time),
                    int(session_id),
                    int(break_minutes),
                ),
            )
            return cur.rowcount > 0

    def update(self, session: AttendanceSession, *, expected: AttendanceSession) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            # <=> matches NULL to NULL, so an open session only updates while still open.
            cur.execute(
                """
                UPDATE attendance_sessions
                SET break_duration_minutes=%s, total_hours=%s, overtime_hours=%s,
                    status=%s, notes=%s, updated_at=%s
                WHERE session_id=%s
                  AND clock_out_time <=> %s
                  AND break_duration_minutes=%s
                  AND updated_at=%s
                """,
                (
                    int(session.break_duration_minutes),
                    session.total_hours,
                    session.overtime_hours,
                    session.status.value,
                    session.notes,
                    int(session.updated_at),
                    int(session.session_id),
                    expected.clock_out_time,
                    int(expected.break_duration_minutes),
                    int(expected.updated_at),
                ),
            )
            return cur.rowcount > 0

    def list_by_user_and_date(self, user_id: int, attendance_date: int) -> Sequence[AttendanceSession]:
        return self._select(
            "user_id=%s AND attendance_date=%s",
            (int(user_id), int(attendance_date)),
            order_by="clock_in_time DESC",
        )

    def list_open_for_user(self, user_id: int) -> Sequence[AttendanceSession]:
        return self._select(
            "user_id=%s AND clock_out_time IS NULL",
            (int(user_id),),
            order_by="clock_in_time DESC",
        )

    def list_by_user_and_range(self, user_id: int, start_date: int, end_date: int) -> Sequence[AttendanceSession]:
        return self._select(
            "user_id=%s AND attendance_date >= %s AND attendance_date <= %s",
            (int(user_id), int(start_date), int(end_date)),
            order_by="attendance_date DESC, clock_in_time DESC",
        )

    def list_by_user(self, user_id: int) -> Sequence[AttendanceSession]:
        return self._select("user_id=%s", (int(user_id),), order_by="attendance_date DESC, clock_in_time DESC")

    def list_for_date(self, attendance_date: int) -> Sequence[AttendanceSession]:
        return self._select("attendance_date=%s", (int(attendance_date),), order_by="clock_in_time DESC")

    def count_users_for_date(self, attendance_date: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(DISTINCT user_id) AS total FROM attendance_sessions WHERE attendance_date=%s",
                (int(attendance_date),),
            )
            r = fetchone(cur)
            return int(r["total"]) if r else 0

    def sum_overtime_hours(self, user_id: int, start_date: int, end_date: int) -> Decimal:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT SUM(overtime_hours) AS overtime
                FROM attendance_sessions
                WHERE user_id=%s AND attendance_date >= %s AND attendance_date <= %s
                """,
                (int(user_id), int(start_date), int(end_date)),
            )
            r = fetchone(cur)
            overtime = to_decimal(r.get("overtime") if r else None, "0.01")
            return overtime if overtime is not None else Decimal("0.00")

    def list_by_range(self, start_date: int, end_date: int) -> Sequence[AttendanceSession]:
        return self._select(
            "attendance_date >= %s AND attendance_date <= %s",
            (int(start_date), int(end_date)),
            order_by="attendance_date DESC, clock_in_time DESC",
        )

    def list_by_department_and_range(
        self, department: str, start_date: int, end_date: int
    ) -> Sequence[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_QUALIFIED_COLUMNS}
                FROM attendance_sessions a
                JOIN users u ON u.user_id = a.user_id
                WHERE u.department=%s AND a.attendance_date >= %s AND a.attendance_date <= %s
                ORDER BY a.attendance_date DESC, a.clock_in_time DESC
                """,
                (department, int(start_date), int(end_date)),
            )
            return [_row_to_session(r) for r in fetchall(cur)]
