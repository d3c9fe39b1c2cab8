from datetime import date, datetime, timezone
from decimal import Decimal
from zoneinfo import ZoneInfo

import pytest

from src.lazyhr.lazyhr.common.clock import Clock
from src.lazyhr.lazyhr.common.datetime_utils import (
    inclusive_days,
    leave_total_days,
    local_date,
    parse_iso_date,
    to_epoch_millis,
)
from src.lazyhr.lazyhr.core.enums import LeavePeriod, ValidationReason
from src.lazyhr.lazyhr.core.exceptions import ValidationError

UTC = timezone.utc


def test_epoch_millis_treats_naive_as_utc():
    aware = datetime(2026, 2, 2, 9, 0, tzinfo=UTC)
    assert to_epoch_millis(aware) == to_epoch_millis(datetime(2026, 2, 2, 9, 0))
    assert to_epoch_millis(datetime(1970, 1, 1, 0, 0, 1, tzinfo=UTC)) == 1000


def test_inclusive_days_counts_calendar_dates_not_hours():
    start = to_epoch_millis(datetime(2026, 2, 10, 23, 0, tzinfo=UTC))
    end = to_epoch_millis(datetime(2026, 2, 11, 1, 0, tzinfo=UTC))
    assert inclusive_days(start, end, UTC) == 2
    assert inclusive_days(start, start, UTC) == 1


def test_leave_total_days_depends_on_period():
    start = to_epoch_millis(datetime(2026, 2, 10, tzinfo=UTC))
    end = to_epoch_millis(datetime(2026, 2, 12, tzinfo=UTC))
    assert leave_total_days(start, end, LeavePeriod.FULL_DAY, UTC) == Decimal("3.0")
    assert leave_total_days(start, end, LeavePeriod.PM, UTC) == Decimal("1.5")


def test_calendar_dates_follow_the_configured_zone():
    tokyo = ZoneInfo("Asia/Tokyo")
    instant = to_epoch_millis(datetime(2026, 2, 10, 20, 0, tzinfo=UTC))
    assert local_date(instant, UTC) == date(2026, 2, 10)
    assert local_date(instant, tokyo) == date(2026, 2, 11)


def test_clock_year_bounds_are_half_open():
    clock = Clock("UTC", now_fn=lambda: 0)
    start, end = clock.year_bounds_millis(2026)
    assert start == to_epoch_millis(datetime(2026, 1, 1, tzinfo=UTC))
    assert end == to_epoch_millis(datetime(2027, 1, 1, tzinfo=UTC))
    assert clock.today() == date(1970, 1, 1)
    assert not hasattr(clock, "now")


def test_parse_iso_date():
    assert parse_iso_date("2026-02-28") == date(2026, 2, 28)


def test_timestamps_beyond_the_calendar_are_invalid_range():
    with pytest.raises(ValidationError) as exc:
        local_date(10**17, UTC)
    assert exc.value.reason == ValidationReason.INVALID_RANGE
    with pytest.raises(ValidationError):
        inclusive_days(0, -(10**17), UTC)
