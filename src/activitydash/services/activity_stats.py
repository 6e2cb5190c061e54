"""
Per-activity statistics reductions for the ActivityDash application.

Each reduction turns the logs inside the selected range into the ordered
statistics shown on that activity's panel. Reductions are pure, and every
one of them returns zero values for an empty list.

Functions:
    meters_to_miles, format_duration, format_pace: Display helpers
    running_stats, hiking_stats, surfing_stats, snorkeling_stats,
    skiing_stats, weight_stats, lifting_stats: Reductions
    estimate_sessions_to_goal: Lifting goal projection
"""

import math
from typing import Callable, Dict, List, Optional

from pydantic import ValidationError

from ..models.activity_data import LIFTS, ActivityKind, parse_log_data
from ..models.log import LogRow
from ..models.stats import StatItem
from .range_filter import parse_timestamp

METERS_PER_MILE = 1609.34


def meters_to_miles(meters: float) -> float:
    return meters / METERS_PER_MILE


def format_duration(duration_seconds: float) -> str:
    """
    Format a duration as ``1h 02m 03s``, or ``4m 05s`` under an hour.
    """
    total_seconds = int(round(duration_seconds or 0))
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)

    if hours > 0:
        return f"{hours}h {minutes:02d}m {seconds:02d}s"
    return f"{minutes}m {seconds:02d}s"


def format_pace(duration_seconds: Optional[float], distance_miles: Optional[float]) -> str:
    """
    Format a pace as ``M:SS / mi``.

    Returns "Pace N/A" when either input is missing or the distance is zero.
    """
    if duration_seconds is None or distance_miles is None or distance_miles == 0:
        return "Pace N/A"

    seconds_per_mile = int(round(duration_seconds / distance_miles))
    minutes, seconds = divmod(seconds_per_mile, 60)
    return f"{minutes}:{seconds:02d} / mi"


def _number(log: LogRow, key: str) -> float:
    value = log.data.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return value


def _hours(minutes: float) -> str:
    return f"{minutes / 60:.1f}"


def _route_stats(logs: List[LogRow], noun: str) -> List[StatItem]:
    distance = sum(_number(log, "distance") for log in logs)
    elevation = sum(_number(log, "total_elevation_gain") for log in logs)
    moving = sum(_number(log, "moving_time") for log in logs)

    return [
        StatItem(label=f"Total {noun}", value=len(logs)),
        StatItem(label="Total Distance", value=f"{meters_to_miles(distance):.2f} mi"),
        StatItem(label="Total Elevation Gain", value=f"{elevation:.0f} ft"),
        StatItem(label="Total Moving Time", value=format_duration(moving)),
    ]


def running_stats(logs: List[LogRow]) -> List[StatItem]:
    return _route_stats(logs, "Runs")


def hiking_stats(logs: List[LogRow]) -> List[StatItem]:
    return _route_stats(logs, "Hikes")


def snorkeling_stats(logs: List[LogRow]) -> List[StatItem]:
    minutes = sum(_number(log, "duration") for log in logs)
    return [
        StatItem(label="Total sessions", value=len(logs)),
        StatItem(label="Total hours", value=_hours(minutes)),
    ]


def surfing_stats(logs: List[LogRow]) -> List[StatItem]:
    minutes = sum(_number(log, "duration") for log in logs)
    waves = sum(_number(log, "waves") for log in logs)
    return [
        StatItem(label="Total sessions", value=len(logs)),
        StatItem(label="Waves caught", value=int(waves)),
        StatItem(label="Total hours", value=_hours(minutes)),
    ]


def skiing_stats(logs: List[LogRow]) -> List[StatItem]:
    minutes = sum(_number(log, "duration") for log in logs)
    runs = sum(_number(log, "runs") for log in logs)
    vertical = sum(_number(log, "vertical") for log in logs)
    return [
        StatItem(label="Days skied", value=len(logs)),
        StatItem(label="Total runs", value=int(runs)),
        StatItem(label="Total vertical", value=f"{vertical:,.0f} ft"),
        StatItem(label="Total hours", value=_hours(minutes)),
    ]


def weight_stats(logs: List[LogRow]) -> List[StatItem]:
    """
    Body weight summary over the window.

    Entries are ordered by their timestamp so that "Latest" and "Change"
    do not depend on the order the store returned them in; entries with an
    unparseable timestamp are only counted in the average and extremes.
    """
    weighted = [log for log in logs if _number(log, "weight") > 0]
    if not weighted:
        return [
            StatItem(label="Entries", value=0),
            StatItem(label="Latest", value="N/A"),
            StatItem(label="Lowest", value="N/A"),
            StatItem(label="Highest", value="N/A"),
            StatItem(label="Change", value="+0.0 lbs"),
            StatItem(label="Average", value="N/A"),
        ]

    weights = [_number(log, "weight") for log in weighted]
    dated = [
        (parse_timestamp(log.datetime), _number(log, "weight"))
        for log in weighted
    ]
    dated = sorted((d for d in dated if d[0] is not None), key=lambda d: d[0])

    latest = dated[-1][1] if dated else weights[-1]
    change = dated[-1][1] - dated[0][1] if len(dated) > 1 else 0.0

    return [
        StatItem(label="Entries", value=len(weighted)),
        StatItem(label="Latest", value=f"{latest:.1f} lbs"),
        StatItem(label="Lowest", value=f"{min(weights):.1f} lbs"),
        StatItem(label="Highest", value=f"{max(weights):.1f} lbs"),
        StatItem(label="Change", value=f"{change:+.1f} lbs"),
        StatItem(label="Average", value=f"{sum(weights) / len(weights):.1f} lbs"),
    ]


def lifting_stats(logs: List[LogRow]) -> List[StatItem]:
    """
    Lifting summary: session count, heaviest work set per lift and total
    pull-up reps. Sessions that fail schema validation are counted but
    contribute no lifts.
    """
    heaviest: Dict[str, Optional[float]] = {lift: None for lift in LIFTS}
    pullups = 0

    for log in logs:
        try:
            session = parse_log_data(ActivityKind.LIFTING, log.data)
        except ValidationError:
            continue
        for lift in LIFTS:
            section = getattr(session, lift)
            top = section.heaviest_work_weight() if section else None
            if top is not None and (heaviest[lift] is None or top > heaviest[lift]):
                heaviest[lift] = top
        pullups += session.total_pullups()

    items = [StatItem(label="Sessions", value=len(logs))]
    for lift in LIFTS:
        top = heaviest[lift]
        items.append(
            StatItem(
                label=f"Top {lift.title()}",
                value=f"{top:g} lbs" if top is not None else "N/A",
            )
        )
    items.append(StatItem(label="Total Pull-ups", value=pullups))
    return items


def estimate_sessions_to_goal(current: Optional[float], goal: float, increment: float = 5) -> int:
    """
    Sessions needed to reach ``goal`` adding ``increment`` lbs per session.

    Example:
        >>> estimate_sessions_to_goal(280, 300)
        4
    """
    if current is None or current >= goal:
        return 0
    if increment <= 0:
        raise ValueError("Increment must be positive")
    return math.ceil((goal - current) / increment)


STAT_REDUCERS: Dict[ActivityKind, Callable[[List[LogRow]], List[StatItem]]] = {
    ActivityKind.WEIGHT: weight_stats,
    ActivityKind.LIFTING: lifting_stats,
    ActivityKind.HIKING: hiking_stats,
    ActivityKind.RUNNING: running_stats,
    ActivityKind.SURFING: surfing_stats,
    ActivityKind.SNORKELING: snorkeling_stats,
    ActivityKind.SKIING: skiing_stats,
}
