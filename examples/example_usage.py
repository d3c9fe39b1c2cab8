"""Example: drive the service layer directly (no Flask).

Controllers are a thin layer; the leave and attendance rules live in the services.

    python -m examples.example_usage 2026-03-02
"""

import importlib
import sys
from datetime import timedelta

from config import get_settings_module

from src.lazyhr.lazyhr.common.datetime_utils import parse_iso_date, start_of_day_millis
from src.lazyhr.lazyhr.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, timezone=settings.TIMEZONE)
    tz = container.clock.tz

    if len(sys.argv) > 1:
        first_day = parse_iso_date(sys.argv[1])
    else:
        first_day = container.clock.today() + timedelta(days=7)

    leave = container.leave_service.apply(
        user_id=1,
        category="ANNUAL",
        period="FULL_DAY",
        start_date=start_of_day_millis(first_day, tz),
        end_date=start_of_day_millis(first_day + timedelta(days=2), tz),
        reason="Family trip",
    )
    print(leave)
    print(container.leave_balance.get_balance(user_id=1, year=first_day.year))


if __name__ == "__main__":
    main()
