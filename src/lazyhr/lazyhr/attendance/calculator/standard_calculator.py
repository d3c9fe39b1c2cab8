from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from ...core.constants import MILLIS_PER_MINUTE, STANDARD_WORK_HOURS
from .base import WorkedHours, WorkedHoursCalculator

_TWO_PLACES = Decimal("0.01")


class StandardWorkedHoursCalculator(WorkedHoursCalculator):
    """Standard rule: whole minutes of (out - in) minus break, not below 0.

    Hours are minutes / 60 rounded half-up to 2 places; anything above the
    standard day counts as overtime.
    """

    def __init__(self, standard_hours: Decimal = STANDARD_WORK_HOURS):
        self._standard_hours = Decimal(standard_hours)

    def compute(self, *, clock_in_time: int, clock_out_time: int, break_minutes: int) -> WorkedHours:
        elapsed = int(clock_out_time) - int(clock_in_time)
        # Truncate toward zero so a partial minute never counts.
        minutes = abs(elapsed) // MILLIS_PER_MINUTE
        if elapsed < 0:
            minutes = -minutes
        minutes = max(minutes - int(break_minutes or 0), 0)

        total = (Decimal(minutes) / Decimal(60)).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)
        overtime = max(total - self._standard_hours, Decimal(0)).quantize(_TWO_PLACES)
        return WorkedHours(total_hours=total, overtime_hours=overtime)
