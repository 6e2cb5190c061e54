"""
ActivityDash: personal activity-tracking dashboard backend.

This package records workouts, body weight and outdoor sessions, and
computes the time-range statistics, route overviews and latest-entry
summaries shown on the dashboard. Data is stored in DynamoDB and served
through an API Gateway Lambda handler.

Modules:
    lambdas: AWS Lambda function handlers for the dashboard API
    services: Range filtering, statistics and DynamoDB integration
    models: Data models and validation using Pydantic
    utils: Logging and time helpers
"""

__version__ = "0.1.0"

from .models import ActivityKind, LogRow, StatisticsPanel, StatItem, TimeRange
from .services import (
    ActivityLogService,
    DynamoDBService,
    RangeSelector,
    build_statistics_section,
    compute_cutoff,
    filter_logs_by_range,
)

__all__ = [
    "ActivityKind",
    "ActivityLogService",
    "DynamoDBService",
    "LogRow",
    "RangeSelector",
    "StatItem",
    "StatisticsPanel",
    "TimeRange",
    "build_statistics_section",
    "compute_cutoff",
    "filter_logs_by_range",
]
