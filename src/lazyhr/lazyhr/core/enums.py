from __future__ import annotations

from enum import Enum


class LeaveCategory(str, Enum):
    """Loại nghỉ phép, quyết định hạn mức được cấp."""

    ANNUAL = "ANNUAL"
    SICK = "SICK"
    PRIVATE = "PRIVATE"
    SPECIAL_HOLIDAY = "SPECIAL_HOLIDAY"


class LeavePeriod(str, Enum):
    """Granularity of a leave day: whole day or one half."""

    FULL_DAY = "FULL_DAY"
    AM = "AM"
    PM = "PM"


class LeaveStatus(str, Enum):
    """Trạng thái luồng duyệt đơn nghỉ. Huỷ đơn = xoá, không có trạng thái riêng."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class AttendanceStatus(str, Enum):
    PRESENT = "PRESENT"
    LATE = "LATE"
    HALF_DAY = "HALF_DAY"


class EntityKind(str, Enum):
    USER = "USER"
    LEAVE_REQUEST = "LEAVE_REQUEST"
    ATTENDANCE_SESSION = "ATTENDANCE_SESSION"


class ValidationReason(str, Enum):
    INVALID_RANGE = "INVALID_RANGE"
    PAST_DATE = "PAST_DATE"
    INVALID_VALUE = "INVALID_VALUE"


class ConflictReason(str, Enum):
    NOT_PENDING = "NOT_PENDING"
    OVERLAP = "OVERLAP"
    TOO_LATE_TO_CANCEL = "TOO_LATE_TO_CANCEL"
    NO_ACTIVE_SESSION = "NO_ACTIVE_SESSION"
    ALREADY_CLOCKED_IN = "ALREADY_CLOCKED_IN"
    CONCURRENT_UPDATE = "CONCURRENT_UPDATE"
