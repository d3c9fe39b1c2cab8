from __future__ import annotations

import time as _time
from datetime import MAXYEAR, MINYEAR, date, tzinfo
from typing import Callable, Optional, Union
from zoneinfo import ZoneInfo

from ..core.constants import DEFAULT_TIMEZONE
from ..core.enums import ValidationReason
from ..core.exceptions import ValidationError
from .datetime_utils import local_date, start_of_day_millis


def _system_millis() -> int:
    return _time.time_ns() // 1_000_000


class Clock:
    """Current instant plus calendar boundaries for one configured zone.

    Note: ``now_fn`` is injectable so tests can pin or advance time.
    """

    def __init__(
        self,
        zone: Union[str, tzinfo] = DEFAULT_TIMEZONE,
        *,
        now_fn: Optional[Callable[[], int]] = None,
    ):
        self._tz = ZoneInfo(zone) if isinstance(zone, str) else zone
        self._now_fn = now_fn or _system_millis

    @property
    def tz(self) -> tzinfo:
        return self._tz

    def now_millis(self) -> int:
        return int(self._now_fn())

    def today(self) -> date:
        return local_date(self.now_millis(), self._tz)

    def start_of_today_millis(self) -> int:
        return start_of_day_millis(self.today(), self._tz)

    def start_of_day_millis(self, instant_millis: int) -> int:
        return start_of_day_millis(local_date(instant_millis, self._tz), self._tz)

    def year_bounds_millis(self, year: int) -> tuple[int, int]:
        """[start of ``year``, start of ``year + 1``) in the configured zone."""
        if not MINYEAR <= year < MAXYEAR:
            raise ValidationError(ValidationReason.INVALID_VALUE, f"year must be between {MINYEAR} and {MAXYEAR - 1}")
        return (
            start_of_day_millis(date(year, 1, 1), self._tz),
            start_of_day_millis(date(year + 1, 1, 1), self._tz),
        )
