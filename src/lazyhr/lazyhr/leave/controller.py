from __future__ import annotations

from flask import Blueprint, Flask

from ..common.http import decimal_str, int_param, ok, str_param
from ..container import Container
from .balance import LeaveBalanceSummary
from .model import LeaveRequest


def leave_to_json(leave: LeaveRequest) -> dict:
    return {
        "id": leave.leave_id,
        "userId": leave.user_id,
        "leaveCategory": leave.category.value,
        "leavePeriod": leave.period.value,
        "startDate": leave.start_date,
        "endDate": leave.end_date,
        "totalDays": decimal_str(leave.total_days),
        "reason": leave.reason,
        "status": leave.status.value,
        "approverId": leave.approver_id,
        "approvedDate": leave.approved_at,
        "comments": leave.comments,
        "appliedDate": leave.applied_at,
        "createdAt": leave.created_at,
        "updatedAt": leave.updated_at,
    }


def balance_to_json(summary: LeaveBalanceSummary) -> dict:
    return {
        "userId": summary.user_id,
        "year": summary.year,
        "categories": [
            {
                "category": item.category.value,
                "allocated": decimal_str(item.allocated),
                "used": decimal_str(item.used),
                "remaining": decimal_str(item.remaining),
            }
            for item in summary.categories
        ],
    }


def register(app: Flask, container: Container) -> None:
    bp = Blueprint("leave", __name__, url_prefix="/api/leave")
    leaves = container.leave_service

    @bp.route("/apply", methods=["POST"])
    def apply_leave():
        leave = leaves.apply(
            user_id=int_param("userId"),
            category=str_param("leaveCategory"),
            period=str_param("leavePeriod") or "FULL_DAY",
            start_date=int_param("startDate"),
            end_date=int_param("endDate"),
            reason=str_param("reason"),
        )
        return ok(leave_to_json(leave), "Leave application submitted successfully", 201)

    @bp.route("/<int:leave_id>/approve", methods=["POST"])
    def approve_leave(leave_id: int):
        leave = leaves.approve(leave_id=leave_id, approver_id=int_param("approverId"), comments=str_param("comments"))
        return ok(leave_to_json(leave), "Leave request approved")

    @bp.route("/<int:leave_id>/reject", methods=["POST"])
    def reject_leave(leave_id: int):
        leave = leaves.reject(leave_id=leave_id, approver_id=int_param("approverId"), comments=str_param("comments"))
        return ok(leave_to_json(leave), "Leave request rejected")

    @bp.route("/<int:leave_id>/cancel", methods=["DELETE"])
    def cancel_leave(leave_id: int):
        leaves.cancel(leave_id=leave_id, user_id=int_param("userId"))
        return ok(None, "Leave request cancelled successfully")

    @bp.route("/<int:leave_id>", methods=["GET"])
    def get_leave(leave_id: int):
        return ok(leave_to_json(leaves.get(leave_id)), "Leave request retrieved")

    @bp.route("/user/<int:user_id>", methods=["GET"])
    def user_leaves(user_id: int):
        status = str_param("status")
        rows = leaves.list_for_user_by_status(user_id, status) if status else leaves.list_for_user(user_id)
        return ok([leave_to_json(r) for r in rows], "User leave requests retrieved")

    @bp.route("/status/<status>", methods=["GET"])
    def leaves_by_status(status: str):
        return ok([leave_to_json(r) for r in leaves.list_by_status(status)], "Leave requests retrieved by status")

    @bp.route("/department/<department>", methods=["GET"])
    def department_leaves(department: str):
        rows = leaves.list_by_department_and_status(department, str_param("status") or "PENDING")
        return ok([leave_to_json(r) for r in rows], "Department leave requests retrieved")

    @bp.route("/pending", methods=["GET"])
    def pending_leaves():
        return ok([leave_to_json(r) for r in leaves.list_pending()], "Pending leave requests retrieved")

    @bp.route("/date/<int:timestamp>", methods=["GET"])
    def leaves_for_timestamp(timestamp: int):
        rows = leaves.list_for_timestamp(timestamp)
        return ok([leave_to_json(r) for r in rows], "Leave requests for date retrieved")

    @bp.route("/balance/<int:user_id>", methods=["GET"])
    def leave_balance(user_id: int):
        year = int_param("year", required=False, default=container.clock.today().year)
        summary = container.leave_balance.get_balance(user_id=user_id, year=year)
        return ok(balance_to_json(summary), "Leave balance retrieved")

    @bp.route("/stats/pending-count", methods=["GET"])
    def pending_count():
        return ok({"count": leaves.count_pending()}, "Pending leave requests count")

    app.register_blueprint(bp)
