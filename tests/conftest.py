"""
Pytest configuration and shared fixtures for ActivityDash tests.

This module sets up mocked DynamoDB tables, fixed clocks and sample logs
shared across test modules.

Fixtures:
    aws_credentials: Fake AWS credentials for moto
    mock_tables: Mocked logs and locations tables
    dynamodb_service: DynamoDBService bound to the mocked tables
    activity_service: ActivityLogService bound to the mocked tables
    fixed_now: The instant every fixed clock returns
    fixed_clock: Zero-argument clock returning fixed_now
    sample_records: Timestamped dict records around fixed_now
"""

import os
from datetime import datetime, timezone
from typing import Any, Dict, List

import boto3
import pytest
from moto import mock_aws

from src.activitydash.models.activity_data import ActivityKind
from src.activitydash.models.log import LogRow
from src.activitydash.services.activity_service import ActivityLogService
from src.activitydash.services.dynamodb_service import DynamoDBService


# Test configuration constants
TEST_LOGS_TABLE = "test-logs-table"
TEST_LOCATIONS_TABLE = "test-locations-table"
TEST_USER_ID = "user-1234"
FIXED_NOW = datetime(2025, 1, 10, 0, 0, 0, tzinfo=timezone.utc)


def make_clock(now: datetime):
    """Return a zero-argument clock that always reports ``now``."""
    return lambda: now


@pytest.fixture(scope="session")
def aws_credentials():
    """
    Set fake AWS credentials for moto.

    These are never sent anywhere; moto intercepts every call.
    """
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "us-east-1"


@pytest.fixture
def mock_tables(aws_credentials, monkeypatch):
    """
    Create in-memory logs and locations tables.

    Both tables use the ``owner_activity`` partition key; logs sort on
    ``datetime`` and locations on ``name``. The table names are also
    exported as environment variables for code that builds its own
    services, such as the Lambda handler.
    """
    monkeypatch.setenv("LOGS_TABLE", TEST_LOGS_TABLE)
    monkeypatch.setenv("LOCATIONS_TABLE", TEST_LOCATIONS_TABLE)

    with mock_aws():
        dynamodb = boto3.resource("dynamodb", region_name="us-east-1")

        tables = {}
        for name, sort_key in ((TEST_LOGS_TABLE, "datetime"), (TEST_LOCATIONS_TABLE, "name")):
            table = dynamodb.create_table(
                TableName=name,
                KeySchema=[
                    {"AttributeName": "owner_activity", "KeyType": "HASH"},
                    {"AttributeName": sort_key, "KeyType": "RANGE"},
                ],
                AttributeDefinitions=[
                    {"AttributeName": "owner_activity", "AttributeType": "S"},
                    {"AttributeName": sort_key, "AttributeType": "S"},
                ],
                BillingMode="PAY_PER_REQUEST",
            )
            table.wait_until_exists()
            tables[name] = table

        yield tables


@pytest.fixture
def dynamodb_service(mock_tables):
    return DynamoDBService(
        logs_table_name=TEST_LOGS_TABLE, locations_table_name=TEST_LOCATIONS_TABLE
    )


@pytest.fixture
def activity_service(dynamodb_service):
    return ActivityLogService(db_service=dynamodb_service)


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def fixed_clock(fixed_now):
    return make_clock(fixed_now)


@pytest.fixture
def sample_records() -> List[Dict[str, Any]]:
    """
    Records spread from a few hours to several years before FIXED_NOW,
    plus one record with a malformed timestamp.
    """
    return [
        {"id": "a", "t": "2019-06-01T12:00:00Z"},
        {"id": "b", "t": "2022-03-15T08:00:00Z"},
        {"id": "c", "t": "2024-03-01T00:00:00Z"},
        {"id": "d", "t": "2024-08-20T00:00:00Z"},
        {"id": "e", "t": "2024-12-25T00:00:00Z"},
        {"id": "f", "t": "2025-01-01T00:00:00Z"},
        {"id": "g", "t": "2025-01-07T00:00:00Z"},
        {"id": "h", "t": "2025-01-09T18:00:00Z"},
        {"id": "bad", "t": "not-a-date"},
    ]


def create_test_log(**kwargs) -> LogRow:
    """
    Create a LogRow with sensible defaults, overriding fields as needed.
    """
    defaults = {
        "user_id": TEST_USER_ID,
        "activity": ActivityKind.WEIGHT,
        "datetime": "2025-01-05T07:30:00+00:00",
        "data": {"weight": 182.0},
    }
    defaults.update(kwargs)
    return LogRow(**defaults)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "aws: mark test as requiring mocked AWS services")
