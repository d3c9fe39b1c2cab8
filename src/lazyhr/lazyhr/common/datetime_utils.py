from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone, tzinfo
from decimal import Decimal

from ..core.constants import HALF_DAY_FACTOR
from ..core.enums import LeavePeriod, ValidationReason
from ..core.exceptions import ValidationError

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MILLI = timedelta(milliseconds=1)


def to_epoch_millis(value: datetime) -> int:
    """Aware datetime -> epoch milliseconds. Naive values are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return (value - _EPOCH) // _ONE_MILLI


def from_epoch_millis(millis: int, tz: tzinfo = timezone.utc) -> datetime:
    try:
        return (_EPOCH + timedelta(milliseconds=int(millis))).astimezone(tz)
    except (OverflowError, ValueError):
        raise ValidationError(ValidationReason.INVALID_RANGE, f"Timestamp out of range: {millis}")


def local_date(millis: int, tz: tzinfo) -> date:
    return from_epoch_millis(millis, tz).date()


def start_of_day_millis(day: date, tz: tzinfo) -> int:
    return to_epoch_millis(datetime.combine(day, time.min, tzinfo=tz))


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def inclusive_days(start_millis: int, end_millis: int, tz: tzinfo) -> int:
    """Number of calendar days touched by [start, end] in ``tz``."""
    return (local_date(end_millis, tz) - local_date(start_millis, tz)).days + 1


def leave_total_days(start_millis: int, end_millis: int, period: LeavePeriod, tz: tzinfo) -> Decimal:
    days = Decimal(inclusive_days(start_millis, end_millis, tz))
    if period != LeavePeriod.FULL_DAY:
        days = days * HALF_DAY_FACTOR
    return days.quantize(Decimal("0.1"))
