from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class WorkedHours:
    total_hours: Decimal
    overtime_hours: Decimal


class WorkedHoursCalculator(ABC):
    """Calculator interface (Strategy Pattern for time accounting)."""

    @abstractmethod
    def compute(self, *, clock_in_time: int, clock_out_time: int, break_minutes: int) -> WorkedHours:
        raise NotImplementedError
