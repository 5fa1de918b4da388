"""Day and week boundaries in the workspace calendar.

All returned boundaries are timezone-aware UTC datetimes so they can be
compared with stored timestamps regardless of the database backend.
"""

from datetime import datetime, time, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo


def as_utc(value: datetime) -> datetime:
    """Convert to aware UTC; naive values are assumed to be UTC already."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def get_zone(name: str) -> tzinfo:
    return timezone.utc if name.upper() == "UTC" else ZoneInfo(name)


def start_of_day(now: datetime, tz: tzinfo) -> datetime:
    local = as_utc(now).astimezone(tz)
    midnight = datetime.combine(local.date(), time.min, tzinfo=tz)
    return midnight.astimezone(timezone.utc)


def start_of_next_day(now: datetime, tz: tzinfo) -> datetime:
    local = as_utc(now).astimezone(tz)
    midnight = datetime.combine(local.date() + timedelta(days=1), time.min, tzinfo=tz)
    return midnight.astimezone(timezone.utc)


def end_of_day(now: datetime, tz: tzinfo) -> datetime:
    return start_of_next_day(now, tz) - timedelta(microseconds=1)


def start_of_week(now: datetime, tz: tzinfo, week_starts_on: int = 6) -> datetime:
    """Midnight of the first day of the week (0=Monday ... 6=Sunday)."""
    local = as_utc(now).astimezone(tz)
    offset = (local.weekday() - week_starts_on) % 7
    first = local.date() - timedelta(days=offset)
    return datetime.combine(first, time.min, tzinfo=tz).astimezone(timezone.utc)


def end_of_week(now: datetime, tz: tzinfo, week_starts_on: int = 6) -> datetime:
    local_start = start_of_week(now, tz, week_starts_on).astimezone(tz)
    next_start = datetime.combine(local_start.date() + timedelta(days=7), time.min, tzinfo=tz)
    return next_start.astimezone(timezone.utc) - timedelta(microseconds=1)
