from __future__ import annotations

from decimal import Decimal
from typing import Any, Optional, Sequence

from ..core.enums import LeaveCategory, LeavePeriod, LeaveStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, optional_int, to_decimal
from .model import LeaveRequest, NewLeaveRequest
from .repository import LeaveRequestRepository

_COLUMNS = """
    leave_id, user_id, category, period, start_date, end_date, total_days,
    reason, status, approver_id, approved_at, comments,
    applied_at, created_at, updated_at
"""

_QUALIFIED_COLUMNS = ", ".join("lr." + c.strip() for c in _COLUMNS.split(","))


def _row_to_leave(r: dict[str, Any]) -> LeaveRequest:
    return LeaveRequest(
        leave_id=int(r["leave_id"]),
        user_id=int(r["user_id"]),
        category=LeaveCategory(r["category"]),
        period=LeavePeriod(r["period"]),
        start_date=int(r["start_date"]),
        end_date=int(r["end_date"]),
        total_days=to_decimal(r["total_days"], "0.1"),
        reason=r["reason"],
        status=LeaveStatus(r["status"]),
        applied_at=int(r["applied_at"]),
        created_at=int(r["created_at"]),
        updated_at=int(r["updated_at"]),
        approver_id=optional_int(r.get("approver_id")),
        approved_at=optional_int(r.get("approved_at")),
        comments=r.get("comments"),
    )


class MySQLLeaveRequestRepository(LeaveRequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _select(self, where: str, params: tuple, order_by: str = "applied_at DESC") -> list[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM leave_requests WHERE {where} ORDER BY {order_by}",
                params,
            )
            return [_row_to_leave(r) for r in fetchall(cur)]

    def create(self, new: NewLeaveRequest) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(
                    user_id, category, period, start_date, end_date, total_days,
                    reason, status, applied_at, created_at, updated_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(new.user_id),
                    new.category.value,
                    new.period.value,
                    int(new.start_date),
                    int(new.end_date),
                    new.total_days,
                    new.reason,
                    LeaveStatus.PENDING.value,
                    int(new.applied_at),
                    int(new.applied_at),
                    int(new.applied_at),
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, leave_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM leave_requests WHERE leave_id=%s", (int(leave_id),))
            r = fetchone(cur)
            return _row_to_leave(r) if r else None

    def decide(
        self,
        *,
        leave_id: int,
        status: LeaveStatus,
        approver_id: int,
        approved_at: int,
        comments: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, approver_id=%s, approved_at=%s, comments=%s, updated_at=%s
                WHERE leave_id=%s AND status=%s
                """,
                (
                    status.value,
                    int(approver_id),
                    int(approved_at),
                    comments,
                    int(approved_at),
                    int(leave_id),
                    LeaveStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def delete_pending(self, leave_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM leave_requests WHERE leave_id=%s AND status=%s",
                (int(leave_id), LeaveStatus.PENDING.value),
            )
            return cur.rowcount > 0

    def list_by_user(self, user_id: int) -> Sequence[LeaveRequest]:
        return self._select("user_id=%s", (int(user_id),))

    def list_by_user_and_status(self, user_id: int, status: LeaveStatus) -> Sequence[LeaveRequest]:
        return self._select("user_id=%s AND status=%s", (int(user_id), status.value))

    def list_by_status(self, status: LeaveStatus) -> Sequence[LeaveRequest]:
        return self._select("status=%s", (status.value,))

    def list_pending(self) -> Sequence[LeaveRequest]:
        return self._select("status=%s", (LeaveStatus.PENDING.value,), order_by="applied_at ASC")

    def list_by_department_and_status(self, department: str, status: LeaveStatus) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_QUALIFIED_COLUMNS}
                FROM leave_requests lr
                JOIN users u ON u.user_id = lr.user_id
                WHERE u.department=%s AND lr.status=%s
                ORDER BY lr.applied_at DESC
                """,
                (department, status.value),
            )
            return [_row_to_leave(r) for r in fetchall(cur)]

    def find_overlapping_approved(self, *, user_id: int, start_date: int, end_date: int) -> Sequence[LeaveRequest]:
        return self._select(
            "user_id=%s AND status=%s AND start_date <= %s AND end_date >= %s",
            (int(user_id), LeaveStatus.APPROVED.value, int(end_date), int(start_date)),
            order_by="start_date ASC",
        )

    def list_for_timestamp(self, instant: int) -> Sequence[LeaveRequest]:
        return self._select(
            "start_date = %s OR (start_date <= %s AND end_date >= %s)",
            (int(instant), int(instant), int(instant)),
            order_by="start_date ASC",
        )

    def sum_approved_days(
        self,
        *,
        user_id: int,
        category: LeaveCategory,
        start_inclusive: int,
        end_exclusive: int,
    ) -> Decimal:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT SUM(total_days) AS used
                FROM leave_requests
                WHERE user_id=%s AND category=%s AND status=%s
                  AND start_date >= %s AND start_date < %s
                """,
                (
                    int(user_id),
                    category.value,
                    LeaveStatus.APPROVED.value,
                    int(start_inclusive),
                    int(end_exclusive),
                ),
            )
            r = fetchone(cur)
            used = to_decimal(r.get("used") if r else None, "0.1")
            return used if used is not None else Decimal("0.0")

    def count_pending(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS total FROM leave_requests WHERE status=%s",
                (LeaveStatus.PENDING.value,),
            )
            r = fetchone(cur)
            return int(r["total"]) if r else 0
