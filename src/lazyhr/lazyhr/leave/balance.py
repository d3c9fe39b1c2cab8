from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Mapping, Optional

from ..common.clock import Clock
from ..core.constants import LEAVE_ALLOCATIONS
from ..core.enums import EntityKind, LeaveCategory
from ..core.exceptions import NotFoundError
from ..users.repository import UserDirectory
from .repository import LeaveRequestRepository


@dataclass(frozen=True)
class CategoryBalance:
    category: LeaveCategory
    allocated: Optional[Decimal]
    used: Decimal

    @property
    def remaining(self) -> Optional[Decimal]:
        # Not clamped: using more than the allocation reports a negative remainder.
        if self.allocated is None:
            return None
        return self.allocated - self.used


@dataclass(frozen=True)
class LeaveBalanceSummary:
    user_id: int
    year: int
    categories: tuple[CategoryBalance, ...]

    def for_category(self, category: LeaveCategory) -> CategoryBalance:
        for item in self.categories:
            if item.category == category:
                return item
        raise KeyError(category)


class LeaveBalanceCalculator:
    """Approved leave days per category and calendar year against fixed allocations."""

    def __init__(
        self,
        leaves: LeaveRequestRepository,
        users: UserDirectory,
        *,
        clock: Clock,
        allocations: Optional[Mapping[LeaveCategory, Decimal]] = None,
    ):
        self._leaves = leaves
        self._users = users
        self._clock = clock
        self._allocations = dict(LEAVE_ALLOCATIONS if allocations is None else allocations)

    def _require_user(self, user_id: int) -> None:
        if not self._users.exists(int(user_id)):
            raise NotFoundError(EntityKind.USER, user_id)

    def _used(self, user_id: int, category: LeaveCategory, year: int) -> Decimal:
        start, end = self._clock.year_bounds_millis(int(year))
        return self._leaves.sum_approved_days(
            user_id=int(user_id),
            category=category,
            start_inclusive=start,
            end_exclusive=end,
        )

    def total_days_used(self, *, user_id: int, category: LeaveCategory, year: int) -> Decimal:
        self._require_user(user_id)
        return self._used(user_id, category, year)

    def get_balance(self, *, user_id: int, year: int) -> LeaveBalanceSummary:
        self._require_user(user_id)
        return LeaveBalanceSummary(
            user_id=int(user_id),
            year=int(year),
            categories=tuple(
                CategoryBalance(
                    category=category,
                    allocated=self._allocations.get(category),
                    used=self._used(user_id, category, year),
                )
                for category in LeaveCategory
            ),
        )
