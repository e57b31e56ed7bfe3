"""
Date Utilities — Naive-UTC timestamps and calendar-year arithmetic.
"""
from datetime import datetime, timezone

from dateutil.relativedelta import relativedelta


def utcnow() -> datetime:
    """Current UTC time as a naive datetime (the form stored in the database)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def add_years(value: datetime, years: int) -> datetime:
    """Advance a datetime by whole calendar years.

    Feb 29 advanced into a non-leap year lands on Feb 28.
    """
    return value + relativedelta(years=years)


def to_naive_utc(value: datetime | None) -> datetime | None:
    """Normalize an incoming datetime to naive UTC; naive values are assumed UTC."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def epoch_millis(value: datetime) -> int:
    """Milliseconds since the epoch for a naive-UTC datetime."""
    return int(value.replace(tzinfo=timezone.utc).timestamp() * 1000)
