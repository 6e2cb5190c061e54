"""
Date and time helpers shared by the dashboard services.

Functions:
    system_clock: Current local time as an aware datetime
    to_local_datetime_string: Format for datetime-local form inputs
    local_day_bounds: First and last instant of a calendar day
    format_long_date: "January 5, 2025"
    format_relative: "3 days ago"
"""

from datetime import date, datetime, time, timedelta, tzinfo
from typing import Callable, Optional, Tuple

from dateutil.tz import tzlocal

Clock = Callable[[], datetime]


def system_clock() -> datetime:
    """
    Return the current wall-clock time in the local timezone.

    The tzinfo is the system zone itself rather than today's fixed offset,
    so calendar arithmetic across a daylight saving change stays on local
    wall time.
    """
    return datetime.now(tzlocal())


def to_local_datetime_string(value: datetime, tz: Optional[tzinfo] = None) -> str:
    """
    Format a datetime as ``YYYY-MM-DDTHH:MM`` in local time.

    Seconds are dropped, matching what a datetime-local input accepts.
    """
    if value.tzinfo is not None:
        value = value.astimezone(tz)
    return value.strftime("%Y-%m-%dT%H:%M")


def local_day_bounds(day: date, tz: tzinfo) -> Tuple[datetime, datetime]:
    """Return the first and last instant of ``day`` in ``tz``."""
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = datetime.combine(day, time.max, tzinfo=tz)
    return start, end


def format_long_date(value: datetime) -> str:
    return f"{value.strftime('%B')} {value.day}, {value.year}"


def format_relative(then: datetime, now: datetime) -> str:
    """
    Describe how long ago ``then`` was, in the coarse style of a feed.

    Example:
        >>> from datetime import timezone
        >>> now = datetime(2025, 1, 10, tzinfo=timezone.utc)
        >>> format_relative(now - timedelta(days=3), now)
        '3 days ago'
    """
    delta = now - then
    future = delta < timedelta(0)
    seconds = abs(delta.total_seconds())

    if seconds < 45:
        text = "less than a minute"
    elif seconds < 45 * 60:
        minutes = max(1, round(seconds / 60))
        text = f"{minutes} minute" + ("s" if minutes != 1 else "")
    elif seconds < 22 * 3600:
        hours = max(1, round(seconds / 3600))
        text = f"about {hours} hour" + ("s" if hours != 1 else "")
    elif seconds < 30 * 86400:
        days = max(1, round(seconds / 86400))
        text = f"{days} day" + ("s" if days != 1 else "")
    elif seconds < 365 * 86400:
        months = max(1, round(seconds / (30 * 86400)))
        text = f"{months} month" + ("s" if months != 1 else "")
    else:
        years = max(1, round(seconds / (365 * 86400)))
        text = f"about {years} year" + ("s" if years != 1 else "")

    return f"in {text}" if future else f"{text} ago"
