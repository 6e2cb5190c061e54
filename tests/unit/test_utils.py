"""
Unit tests for the logging and time helpers.
"""

import json
from datetime import date, datetime, timedelta, timezone

import pytest
from dateutil.tz import tzlocal

from src.activitydash.utils.logging import log_error, log_event
from src.activitydash.utils.time import (
    format_long_date,
    format_relative,
    local_day_bounds,
    system_clock,
    to_local_datetime_string,
)

NOW = datetime(2025, 1, 10, 12, 0, tzinfo=timezone.utc)


class TestLogging:
    """Test cases for structured log lines."""

    def test_log_event_prints_json(self, capsys):
        log_event("LOG_SAVED", logId="log_1", activity="weight")

        line = json.loads(capsys.readouterr().out)
        assert line["event"] == "LOG_SAVED"
        assert line["logId"] == "log_1"
        assert "timestamp" in line

    def test_sensitive_keys_are_dropped(self, capsys):
        log_event("API_REQUEST", user_id="u1", body="{}", notes="private", resource="/health")

        line = json.loads(capsys.readouterr().out)
        assert "user_id" not in line
        assert "body" not in line
        assert "notes" not in line
        assert line["resource"] == "/health"

    def test_log_error_scrubs_context(self, capsys):
        log_error("SAVE_LOG_ERROR", "boom", {"logId": "log_1", "lat": 37.7})

        line = json.loads(capsys.readouterr().out)
        assert line["event"] == "ERROR"
        assert line["errorType"] == "SAVE_LOG_ERROR"
        assert line["errorMessage"] == "boom"
        assert line["context"] == {"logId": "log_1"}


class TestTimeHelpers:
    """Test cases for date formatting helpers."""

    def test_system_clock_is_aware(self):
        assert system_clock().tzinfo is not None

    def test_system_clock_uses_local_zone_not_fixed_offset(self):
        assert isinstance(system_clock().tzinfo, tzlocal)

    def test_to_local_datetime_string(self):
        tz = timezone(timedelta(hours=-5))
        assert to_local_datetime_string(NOW, tz) == "2025-01-10T07:00"
        assert to_local_datetime_string(datetime(2025, 1, 10, 9, 5, 33)) == "2025-01-10T09:05"

    def test_local_day_bounds(self):
        start, end = local_day_bounds(date(2025, 1, 5), timezone.utc)

        assert start == datetime(2025, 1, 5, tzinfo=timezone.utc)
        assert end.date() == date(2025, 1, 5)
        assert end - start < timedelta(days=1)

    def test_format_long_date(self):
        assert format_long_date(datetime(2025, 1, 5)) == "January 5, 2025"

    @pytest.mark.parametrize("delta,expected", [
        (timedelta(seconds=10), "less than a minute ago"),
        (timedelta(minutes=1), "1 minute ago"),
        (timedelta(minutes=20), "20 minutes ago"),
        (timedelta(hours=1), "about 1 hour ago"),
        (timedelta(hours=5), "about 5 hours ago"),
        (timedelta(days=1), "1 day ago"),
        (timedelta(days=3), "3 days ago"),
        (timedelta(days=60), "2 months ago"),
        (timedelta(days=800), "about 2 years ago"),
        (-timedelta(days=2), "in 2 days"),
    ])
    def test_format_relative(self, delta, expected):
        assert format_relative(NOW - delta, NOW) == expected
