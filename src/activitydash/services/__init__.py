"""
Service layer for the ActivityDash application.

This module contains the range filter and statistics engine, the
per-activity reductions, route helpers and the DynamoDB integration.

Classes:
    ActivityLogService: Business logic for activity logs and statistics
    DynamoDBService: DynamoDB integration for data persistence
    RangeSelector: Selected time range plus change callback

Functions:
    compute_cutoff: Cutoff instant for a TimeRange
    filter_logs_by_range: Keep the records inside a TimeRange
    build_statistics_section: Compose filter and reduction into a panel
"""

from .activity_service import ActivityLogService
from .dynamodb_service import DynamoDBService
from .range_filter import compute_cutoff, filter_logs_by_range, parse_timestamp
from .statistics_service import RangeSelector, aggregate_statistics, build_statistics_section

__all__ = [
    "ActivityLogService",
    "DynamoDBService",
    "RangeSelector",
    "aggregate_statistics",
    "build_statistics_section",
    "compute_cutoff",
    "filter_logs_by_range",
    "parse_timestamp",
]
