"""
Time range filtering for the ActivityDash application.

This module turns a selected TimeRange into a cutoff instant relative to
"now" and keeps the records whose timestamp falls on or after it. It is a
pure function pipeline: "now" is read once per call from an injected clock,
and no derived state is cached between calls.

Functions:
    compute_cutoff: Map a TimeRange and the current time to a cutoff instant
    parse_timestamp: Lenient ISO-8601 parsing that never raises
    filter_logs_by_range: Keep the records inside a TimeRange
"""

from datetime import datetime, timedelta, tzinfo
from typing import Any, Callable, Iterable, List, Optional, TypeVar

from dateutil.parser import isoparse
from dateutil.relativedelta import relativedelta
from dateutil.tz import tzlocal

from ..models.time_range import TimeRange
from ..utils.time import Clock, system_clock

T = TypeVar("T")

# Offsets subtracted from "now"; YEAR_TO_DATE and MAX are handled separately.
_LOOKBACKS = {
    TimeRange.ONE_DAY: timedelta(days=1),
    TimeRange.FIVE_DAYS: timedelta(days=5),
    TimeRange.ONE_MONTH: relativedelta(months=1),
    TimeRange.SIX_MONTHS: relativedelta(months=6),
    TimeRange.ONE_YEAR: relativedelta(years=1),
    TimeRange.FIVE_YEARS: relativedelta(years=5),
}


def _now(clock: Clock) -> datetime:
    now = clock()
    if now.tzinfo is None:
        now = now.replace(tzinfo=tzlocal())
    return now


def compute_cutoff(time_range: TimeRange, clock: Clock = system_clock) -> Optional[datetime]:
    """
    Compute the earliest instant a record must reach to be inside a range.

    Calendar months and years are subtracted with ``relativedelta``, which
    clamps to the last valid day of the target month: one month before
    March 31 is February 28 (or 29), one year before February 29 is
    February 28.

    Arithmetic happens on the wall time of the clock's zone, so with a
    real zone (as ``system_clock`` returns) Jan 1 00:00 and "one month ago"
    get that day's offset even across a daylight saving change. A naive
    clock value is taken as local time.

    Args:
        time_range: Selected range
        clock: Zero-argument callable returning the current time

    Returns:
        Timezone-aware cutoff, or None for TimeRange.MAX (no cutoff)

    Raises:
        ValueError: If ``time_range`` is not a TimeRange member

    Example:
        >>> from datetime import timezone
        >>> fixed = lambda: datetime(2025, 3, 31, 12, 0, tzinfo=timezone.utc)
        >>> compute_cutoff(TimeRange.ONE_MONTH, fixed).date()
        datetime.date(2025, 2, 28)
    """
    if not isinstance(time_range, TimeRange):
        raise ValueError(f"Unknown time range: {time_range!r}")

    if time_range is TimeRange.MAX:
        return None

    now = _now(clock)

    if time_range is TimeRange.YEAR_TO_DATE:
        return now.replace(month=1, day=1, hour=0, minute=0, second=0, microsecond=0)

    if time_range not in _LOOKBACKS:
        raise ValueError(f"No cutoff rule for time range: {time_range!r}")

    return now - _LOOKBACKS[time_range]


def parse_timestamp(value: Any, default_tz: Optional[tzinfo] = None) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp into an aware datetime.

    Naive values (no offset) are taken to be in ``default_tz``. Anything
    that cannot be parsed returns None instead of raising, so a single bad
    record never breaks a statistics panel.

    Args:
        value: ISO-8601 string or datetime
        default_tz: Timezone for naive values; local time when omitted

    Returns:
        Aware datetime, or None if the value is not a valid timestamp
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        try:
            parsed = isoparse(value.strip())
        except (ValueError, OverflowError):
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=default_tz if default_tz is not None else tzlocal())
    return parsed


def filter_logs_by_range(
    records: Iterable[T],
    time_range: TimeRange,
    get_timestamp: Callable[[T], Any],
    clock: Clock = system_clock,
) -> List[T]:
    """
    Keep the records whose timestamp is on or after the range cutoff.

    The cutoff is computed once per call. The input is never mutated and
    the relative order of the kept records is preserved. Records with an
    unparseable timestamp are excluded from every bounded range and kept
    under TimeRange.MAX, which returns every record unchanged.

    Args:
        records: Records to filter
        time_range: Selected range
        get_timestamp: Projection from a record to its ISO-8601 timestamp
        clock: Zero-argument callable returning the current time

    Returns:
        New list with the records inside the range

    Raises:
        ValueError: If ``time_range`` is not a TimeRange member
    """
    cutoff = compute_cutoff(time_range, clock)
    if cutoff is None:
        return list(records)

    kept = []
    for record in records:
        timestamp = parse_timestamp(get_timestamp(record), cutoff.tzinfo)
        if timestamp is not None and timestamp >= cutoff:
            kept.append(record)
    return kept
