"""
Data models for the ActivityDash application.

This module contains the Pydantic models and enums shared by the filter and
statistics engine, the log store and the API layer.

Classes:
    TimeRange: Enum of selectable statistics windows
    StatItem: One labeled statistic
    StatisticsPanel: Rendered statistics panel contents
    ActivityKind: Enum of loggable activities
    LogRow: One logged activity entry
    LocationRow: A named place attached to an activity
"""

from .activity_data import ACTIVITY_SCHEMAS, ActivityKind, validate_log_data
from .log import LocationRow, LogRow
from .stats import RangeOption, StatisticsPanel, StatItem
from .time_range import TimeRange

__all__ = [
    "ACTIVITY_SCHEMAS",
    "ActivityKind",
    "LocationRow",
    "LogRow",
    "RangeOption",
    "StatItem",
    "StatisticsPanel",
    "TimeRange",
    "validate_log_data",
]
