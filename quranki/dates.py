"""
Local calendar-day helpers.

Every "today" in the system (the review date stamped by the scheduler, the
daily log key, the due-today window and the streak walk) goes through these
functions so that they agree on where a day starts.
"""

from __future__ import annotations

from datetime import date, datetime, time, timezone
from typing import Optional, Union
from zoneinfo import ZoneInfo

from quranki import config


TzLike = Union[str, ZoneInfo, None]


def resolve_tz(tz: TzLike = None) -> ZoneInfo:
    """Return a ZoneInfo, defaulting to the configured review time zone."""
    if tz is None:
        return ZoneInfo(config.get_timezone_name())
    if isinstance(tz, ZoneInfo):
        return tz
    return ZoneInfo(tz)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """
    Normalize a timestamp to aware UTC.

    Naive values are assumed to already be UTC (SQLite drops tzinfo).
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def local_day(value: datetime, tz: TzLike = None) -> date:
    """Calendar date of a timestamp in the review time zone."""
    return as_utc(value).astimezone(resolve_tz(tz)).date()


def day_bounds(value: datetime, tz: TzLike = None) -> tuple[datetime, datetime]:
    """
    Inclusive [start, end] of the local day containing `value`, in UTC.
    """
    zone = resolve_tz(tz)
    day = local_day(value, zone)
    start = datetime.combine(day, time.min, tzinfo=zone)
    end = datetime.combine(day, time.max, tzinfo=zone)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


def to_date_string(day: date) -> str:
    """YYYY-MM-DD, the format stored in daily logs."""
    return day.isoformat()


def parse_date_string(value: Union[str, date]) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def today(now: Optional[datetime] = None, tz: TzLike = None) -> date:
    return local_day(now or utcnow(), tz)
