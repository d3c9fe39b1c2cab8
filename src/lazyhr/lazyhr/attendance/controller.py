from __future__ import annotations

from typing import Optional

from flask import Blueprint, Flask, request

from ..common.http import date_param, decimal_str, int_param, ok, str_param
from ..container import Container
from .model import AttendanceSession


def session_to_json(session: Optional[AttendanceSession]) -> Optional[dict]:
    if session is None:
        return None
    return {
        "id": session.session_id,
        "userId": session.user_id,
        "attendanceDate": session.attendance_date,
        "clockInTime": session.clock_in_time,
        "clockOutTime": session.clock_out_time,
        "breakDurationMinutes": session.break_duration_minutes,
        "totalHours": decimal_str(session.total_hours),
        "overtimeHours": decimal_str(session.overtime_hours),
        "status": session.status.value,
        "notes": session.notes,
        "createdAt": session.created_at,
        "updatedAt": session.updated_at,
    }


def register(app: Flask, container: Container) -> None:
    bp = Blueprint("attendance", __name__, url_prefix="/api/attendance")
    attendance = container.attendance_service

    @bp.route("/clock-in", methods=["POST"])
    def clock_in():
        session = attendance.clock_in(int_param("userId"))
        return ok(session_to_json(session), "Clocked in successfully", 201)

    @bp.route("/clock-out", methods=["POST"])
    def clock_out():
        session = attendance.clock_out(int_param("userId"))
        return ok(session_to_json(session), "Clocked out successfully")

    @bp.route("/<int:session_id>/break", methods=["PUT"])
    def update_break(session_id: int):
        session = attendance.update_break_duration(session_id=session_id, minutes=int_param("breakMinutes"))
        return ok(session_to_json(session), "Break duration updated")

    @bp.route("/<int:session_id>/notes", methods=["PUT"])
    def update_notes(session_id: int):
        notes = str_param("notes")
        if notes is None and not request.is_json:
            notes = request.get_data(as_text=True)
        session = attendance.update_notes(session_id=session_id, notes=notes)
        return ok(session_to_json(session), "Attendance notes updated")

    @bp.route("/<int:session_id>/late", methods=["POST"])
    def mark_late(session_id: int):
        return ok(session_to_json(attendance.mark_late(session_id)), "Attendance marked as late")

    @bp.route("/<int:session_id>/half-day", methods=["POST"])
    def mark_half_day(session_id: int):
        return ok(session_to_json(attendance.mark_half_day(session_id)), "Attendance marked as half day")

    @bp.route("/today/<int:user_id>", methods=["GET"])
    def today_for_user(user_id: int):
        return ok(session_to_json(attendance.get_today_session(user_id)), "Today's attendance retrieved")

    @bp.route("/user/<int:user_id>", methods=["GET"])
    def sessions_in_range(user_id: int):
        rows = attendance.list_sessions_in_range(
            user_id=user_id,
            start_date=int_param("startTimestamp"),
            end_date=int_param("endTimestamp"),
        )
        return ok([session_to_json(r) for r in rows], "Attendance records retrieved")

    @bp.route("/history/<int:user_id>", methods=["GET"])
    def history(user_id: int):
        return ok([session_to_json(r) for r in attendance.list_history(user_id)], "Attendance history retrieved")

    @bp.route("/status/<int:user_id>", methods=["GET"])
    def clock_status(user_id: int):
        active = attendance.get_active_session(user_id)
        data = {"isClockedIn": active is not None, "activeAttendance": session_to_json(active)}
        return ok(data, "Attendance status retrieved")

    @bp.route("/today", methods=["GET"])
    def today_all():
        return ok([session_to_json(r) for r in attendance.list_today_all()], "Today's attendance retrieved")

    @bp.route("/stats/today", methods=["GET"])
    def today_count():
        return ok({"count": attendance.count_clocked_in_today()}, "Today's attendance count")

    @bp.route("/range", methods=["GET"])
    def sessions_between():
        rows = attendance.list_sessions_between(start_day=date_param("startDate"), end_day=date_param("endDate"))
        return ok([session_to_json(r) for r in rows], "Attendance records retrieved")

    @bp.route("/department/<department>", methods=["GET"])
    def department_sessions(department: str):
        rows = attendance.list_department_sessions(
            department=department,
            start_day=date_param("startDate"),
            end_day=date_param("endDate"),
        )
        return ok([session_to_json(r) for r in rows], "Department attendance retrieved")

    @bp.route("/overtime/<int:user_id>", methods=["GET"])
    def overtime(user_id: int):
        total = attendance.total_overtime_hours(
            user_id=user_id,
            start_date=int_param("startTimestamp"),
            end_date=int_param("endTimestamp"),
        )
        return ok({"overtimeHours": decimal_str(total)}, "Overtime hours retrieved")

    app.register_blueprint(bp)
