"""Datetime utilities for timezone-aware timestamps and wall-clock arithmetic.

Usage:
    from libs.common.datetime_utils import utc_now, local_now

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
"""

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from libs.common.config import get_settings


def utc_now() -> datetime:
    """Return timezone-aware UTC datetime.

    Always use this for timestamps in the database.
    """
    return datetime.now(timezone.utc)


def school_timezone() -> ZoneInfo:
    """Return the configured wall-clock zone of the school."""
    return ZoneInfo(get_settings().TIMEZONE)


def local_now(tz: Optional[ZoneInfo] = None) -> datetime:
    """Return the current instant expressed in the school's timezone."""
    return datetime.now(tz or school_timezone())


def to_local(moment: datetime, tz: Optional[ZoneInfo] = None) -> datetime:
    """Express ``moment`` in the school's timezone.

    Naive datetimes are taken to already be local wall-clock time.
    """
    tz = tz or school_timezone()
    if moment.tzinfo is None:
        return moment.replace(tzinfo=tz)
    return moment.astimezone(tz)


def combine_local(day: date, at: time, tz: Optional[ZoneInfo] = None) -> datetime:
    """Build an aware instant from a calendar date and a wall-clock time.

    The date's year/month/day are used as-is, never shifted through UTC.
    """
    return datetime.combine(day, at.replace(tzinfo=None), tzinfo=tz or school_timezone())


def add_minutes(at: time, minutes: int) -> time:
    """Add minutes to a time of day, wrapping past midnight."""
    shifted = datetime.combine(date(2000, 1, 1), at.replace(tzinfo=None)) + timedelta(
        minutes=minutes
    )
    return shifted.time()


def minutes_since_midnight(at: time) -> int:
    return at.hour * 60 + at.minute
