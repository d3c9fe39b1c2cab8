from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from src.lazyhr.lazyhr.common.datetime_utils import to_epoch_millis
from src.lazyhr.lazyhr.core.enums import LeaveCategory, LeavePeriod, LeaveStatus, ValidationReason
from src.lazyhr.lazyhr.core.exceptions import NotFoundError, ValidationError
from src.lazyhr.lazyhr.leave.balance import LeaveBalanceCalculator
from src.lazyhr.lazyhr.leave.model import LeaveRequest


def utc_ms(*args) -> int:
    return to_epoch_millis(datetime(*args, tzinfo=timezone.utc))


def seeded(leave_id, *, start, days, category=LeaveCategory.ANNUAL, status=LeaveStatus.APPROVED, user_id=2):
    return LeaveRequest(
        leave_id=leave_id,
        user_id=user_id,
        category=category,
        period=LeavePeriod.FULL_DAY,
        start_date=start,
        end_date=start,
        total_days=Decimal(days),
        reason="seed",
        status=status,
        applied_at=start,
        created_at=start,
        updated_at=start,
    )


@pytest.fixture
def calculator(leaves_repo, users, clock):
    return LeaveBalanceCalculator(leaves_repo, users, clock=clock)


def test_remaining_goes_negative_when_over_allocation(calculator, leaves_repo):
    leaves_repo.add(seeded(1, start=utc_ms(2026, 3, 1), days="20.0"))
    leaves_repo.add(seeded(2, start=utc_ms(2026, 6, 1), days="6.0"))

    annual = calculator.get_balance(user_id=2, year=2026).for_category(LeaveCategory.ANNUAL)

    assert annual.allocated == Decimal("21")
    assert annual.used == Decimal("26.0")
    assert annual.remaining == Decimal("-5.0")


def test_only_approved_leave_in_the_year_counts(calculator, leaves_repo):
    leaves_repo.add(seeded(1, start=utc_ms(2026, 1, 1), days="2.0", category=LeaveCategory.SICK))
    leaves_repo.add(seeded(2, start=utc_ms(2026, 2, 5), days="1.5", category=LeaveCategory.SICK))
    leaves_repo.add(seeded(3, start=utc_ms(2026, 2, 6), days="4.0", category=LeaveCategory.SICK, status=LeaveStatus.PENDING))
    leaves_repo.add(seeded(4, start=utc_ms(2025, 12, 31, 23, 59), days="3.0", category=LeaveCategory.SICK))
    leaves_repo.add(seeded(5, start=utc_ms(2027, 1, 1), days="3.0", category=LeaveCategory.SICK))
    leaves_repo.add(seeded(6, start=utc_ms(2026, 2, 5), days="9.0", category=LeaveCategory.SICK, user_id=3))

    used = calculator.total_days_used(user_id=2, category=LeaveCategory.SICK, year=2026)

    assert used == Decimal("3.5")


def test_balance_is_stable_across_repeated_reads(calculator, leaves_repo):
    leaves_repo.add(seeded(1, start=utc_ms(2026, 4, 1), days="1.0", category=LeaveCategory.PRIVATE))

    first = calculator.get_balance(user_id=2, year=2026)
    second = calculator.get_balance(user_id=2, year=2026)

    assert first == second
    assert first.for_category(LeaveCategory.PRIVATE).remaining == Decimal("4.0")


def test_special_holiday_has_no_allocation(calculator, leaves_repo):
    leaves_repo.add(seeded(1, start=utc_ms(2026, 5, 1), days="1.0", category=LeaveCategory.SPECIAL_HOLIDAY))

    special = calculator.get_balance(user_id=2, year=2026).for_category(LeaveCategory.SPECIAL_HOLIDAY)

    assert special.allocated is None
    assert special.remaining is None
    assert special.used == Decimal("1.0")


def test_every_category_is_reported(calculator):
    summary = calculator.get_balance(user_id=2, year=2026)
    assert [c.category for c in summary.categories] == list(LeaveCategory)
    assert all(c.used == Decimal("0") for c in summary.categories)


def test_unknown_user_raises_not_found(calculator):
    with pytest.raises(NotFoundError):
        calculator.get_balance(user_id=999, year=2026)


@pytest.mark.parametrize("year", [0, -1, 9999, 10_000])
def test_year_outside_the_calendar_is_a_validation_error(calculator, year):
    with pytest.raises(ValidationError) as exc:
        calculator.get_balance(user_id=2, year=year)
    assert exc.value.reason == ValidationReason.INVALID_VALUE


def test_last_supported_year_is_accepted(calculator):
    assert calculator.total_days_used(user_id=2, category=LeaveCategory.ANNUAL, year=9998) == Decimal("0")
