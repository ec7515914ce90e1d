# civil_registry/utils/dates.py
"""Calendar helpers for bucketing naive-UTC timestamps."""
from datetime import datetime, timedelta, timezone


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, the form every column stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def start_of_week(moment: datetime, first_weekday: int = 6) -> datetime:
    """
    Midnight of the first day of the week containing ``moment``.

    ``first_weekday`` follows ``datetime.weekday()``: 0 is Monday, 6 is Sunday.
    """
    offset = (moment.weekday() - first_weekday) % 7
    return start_of_day(moment) - timedelta(days=offset)


def start_of_month(moment: datetime) -> datetime:
    return start_of_day(moment).replace(day=1)


def start_of_previous_month(moment: datetime) -> datetime:
    last_day_previous = start_of_month(moment) - timedelta(days=1)
    return start_of_month(last_day_previous)


def hours_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 3600
