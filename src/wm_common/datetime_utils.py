"""Datetime utilities: UTC now, business-timezone now, business-day arithmetic.

Business days are Monday-Friday. Public holidays are not modelled.
"""

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from config.settings import settings


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def business_now() -> datetime:
    """Return now in the marketplace's business timezone."""
    return datetime.now(ZoneInfo(settings.BUSINESS_TIMEZONE))


def is_business_day(day: date) -> bool:
    # weekday(): Monday=0 ... Saturday=5, Sunday=6
    return day.weekday() < 5


def add_business_days(start: datetime, business_days: int) -> datetime:
    """Advance start by business_days weekdays, keeping the time of day.

    Each step moves one calendar day forward and only weekdays count, so a
    Friday start with 1 business day lands on Monday.
    """
    if business_days < 0:
        raise ValueError(f"business_days must be >= 0, got {business_days}")
    result = start
    added = 0
    while added < business_days:
        result += timedelta(days=1)
        if is_business_day(result):
            added += 1
    return result
