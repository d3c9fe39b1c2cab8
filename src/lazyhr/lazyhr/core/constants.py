"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

from .enums import LeaveCategory

MILLIS_PER_MINUTE = 60 * 1000
MILLIS_PER_DAY = 24 * 60 * MILLIS_PER_MINUTE

# A pending request can only be cancelled this far ahead of its start.
CANCEL_NOTICE_MILLIS = MILLIS_PER_DAY

STANDARD_WORK_HOURS = Decimal("8")
HALF_DAY_FACTOR = Decimal("0.5")

# SPECIAL_HOLIDAY has no allocation: it is reported as used days only.
LEAVE_ALLOCATIONS: dict[LeaveCategory, Decimal] = {
    LeaveCategory.ANNUAL: Decimal("21"),
    LeaveCategory.SICK: Decimal("14"),
    LeaveCategory.PRIVATE: Decimal("5"),
}

DEFAULT_TIMEZONE = "UTC"
DEFAULT_LOCK_TIMEOUT_SECONDS = 5.0
