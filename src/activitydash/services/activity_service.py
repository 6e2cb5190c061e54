"""
Activity service for the ActivityDash application.

This service contains the business logic behind every activity page. It
coordinates payload validation, location lookup, storage, range filtering
and statistics so that all activities share one code path.

Classes:
    ActivityLogService: Core business logic service for activity logs
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError

from ..models.activity_data import ActivityKind, validate_log_data
from ..models.log import LocationRow, LogRow
from ..models.stats import StatisticsPanel
from ..models.time_range import TimeRange
from ..utils.logging import log_error, log_event
from ..utils.time import Clock, format_long_date, format_relative, system_clock
from .activity_stats import STAT_REDUCERS
from .dynamodb_service import DynamoDBService
from .range_filter import filter_logs_by_range, parse_timestamp
from .route_service import route_bounds, start_coordinates
from .statistics_service import build_statistics_section


def _log_timestamp(log: LogRow) -> str:
    return log.datetime


class ActivityLogService:
    """
    Core business logic service for activity logs.

    Attributes:
        db_service: DynamoDB service for data persistence

    Example:
        >>> service = ActivityLogService()
        >>> result = service.log_activity(
        ...     "user-1", ActivityKind.WEIGHT, datetime.now(), {"weight": 181.2}
        ... )
        >>> result["success"]
        True
        >>> panel = service.get_statistics("user-1", ActivityKind.WEIGHT, TimeRange.ONE_MONTH)
    """

    def __init__(self, db_service: Optional[DynamoDBService] = None):
        """
        Initialize the activity service.

        Args:
            db_service: Optional DynamoDB service instance, created from the
                environment when omitted
        """
        self.db_service = db_service or DynamoDBService()

    def log_activity(
        self,
        user_id: str,
        kind: ActivityKind,
        when: Union[datetime, str],
        data: Dict[str, Any],
        location_name: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Validate and upsert one activity entry.

        The entry's instant is normalized to UTC ISO-8601 so that logging
        the same moment twice (from any timezone) replaces the earlier entry.

        Args:
            user_id: Owner of the entry
            kind: Activity kind
            when: When the activity happened; naive values are local time
            data: Activity-specific payload
            location_name: Saved location to attach, for activities with locations

        Returns:
            Dictionary containing:
            - success: boolean indicating if the entry was saved
            - log: LogRow if saved
            - error: error message if saving failed
        """
        result: Dict[str, Any] = {"success": False, "log": None, "error": None}

        try:
            kind = ActivityKind(kind)
        except ValueError:
            result["error"] = f"Unknown activity '{kind}'"
            return result

        instant = parse_timestamp(when)
        if instant is None:
            result["error"] = f"Invalid datetime '{when}'"
            return result

        try:
            payload = validate_log_data(kind, data)
        except ValidationError as e:
            result["error"] = f"Invalid {kind.value} data: {e.errors()[0].get('msg', str(e))}"
            return result

        location_id = None
        if location_name:
            location = self.db_service.find_location_by_name(user_id, kind, location_name)
            if location is None:
                result["error"] = f"Unknown location '{location_name}'"
                return result
            location_id = location.id

        log = LogRow(
            user_id=user_id,
            activity=kind,
            datetime=instant.astimezone(timezone.utc).isoformat(),
            location_id=location_id,
            data=payload,
        )

        if self.db_service.save_log(log):
            result["success"] = True
            result["log"] = log
        else:
            result["error"] = "Failed to save log to database"

        return result

    def add_location(
        self, user_id: str, kind: ActivityKind, name: str, lat: float, lon: float
    ) -> Dict[str, Any]:
        """
        Save a named location for an activity.

        Returns:
            Dictionary with success, location and error keys
        """
        result: Dict[str, Any] = {"success": False, "location": None, "error": None}

        try:
            location = LocationRow(user_id=user_id, activity=kind, name=name, lat=lat, lon=lon)
        except ValidationError as e:
            result["error"] = f"Invalid location: {e.errors()[0].get('msg', str(e))}"
            return result

        if self.db_service.save_location(location):
            result["success"] = True
            result["location"] = location
        else:
            result["error"] = f"Location '{location.name}' already exists or could not be saved"
        return result

    def get_locations(self, user_id: str, kind: ActivityKind) -> List[LocationRow]:
        return self.db_service.get_locations(user_id, ActivityKind(kind))

    def get_logs(
        self,
        user_id: str,
        kind: ActivityKind,
        time_range: TimeRange = TimeRange.MAX,
        clock: Clock = system_clock,
    ) -> List[LogRow]:
        """Return a user's logs for an activity inside ``time_range``, oldest first."""
        logs = self.db_service.get_logs(user_id, ActivityKind(kind))
        return filter_logs_by_range(logs, time_range, _log_timestamp, clock)

    def get_statistics(
        self,
        user_id: str,
        kind: ActivityKind,
        time_range: TimeRange,
        clock: Clock = system_clock,
    ) -> Optional[StatisticsPanel]:
        """
        Build the statistics panel for an activity.

        Returns:
            StatisticsPanel, or None when the user has never logged the activity
        """
        kind = ActivityKind(kind)
        logs = self.db_service.get_logs(user_id, kind)
        panel = build_statistics_section(
            logs, _log_timestamp, STAT_REDUCERS[kind], time_range, clock
        )

        log_event(
            "STATISTICS_COMPUTED",
            activity=kind.value,
            range=time_range.value,
            totalRecords=len(logs),
            filteredRecords=panel.filtered_records if panel else 0,
        )
        return panel

    def get_latest_summary(
        self, user_id: str, kind: ActivityKind, clock: Clock = system_clock
    ) -> Optional[Dict[str, Any]]:
        """
        Summarize the most recent entry for the home page card.

        Returns:
            Dictionary with the log, its location (if any), a long date such
            as "January 5, 2025" and a relative age such as "3 days ago", or
            None when nothing has been logged
        """
        kind = ActivityKind(kind)
        latest = self.db_service.get_latest_log(user_id, kind)
        if latest is None:
            return None

        location = None
        if latest.location_id:
            location = self.db_service.get_location(user_id, kind, latest.location_id)

        now = clock()
        when = parse_timestamp(latest.datetime, now.tzinfo)
        return {
            "log": latest,
            "location": location,
            "date": format_long_date(when.astimezone(now.tzinfo)) if when else "",
            "relative": format_relative(when, now) if when else "",
        }

    def get_route_overview(self, user_id: str, kind: ActivityKind) -> Dict[str, Any]:
        """
        Start points and bounding box of every recorded route.

        Raises:
            ValueError: If the activity does not record routes
        """
        kind = ActivityKind(kind)
        if not kind.has_routes:
            raise ValueError(f"Activity '{kind.value}' does not record routes")

        starts = start_coordinates(self.db_service.get_logs(user_id, kind))
        return {"starts": starts, "bounds": route_bounds(starts)}

    def health_check(self) -> Dict[str, Any]:
        """
        Perform a health check of the service and its storage.

        Returns:
            Dictionary with health check results
        """
        health_status: Dict[str, Any] = {
            "status": "healthy",
            "services": {},
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

        try:
            db_health = self.db_service.health_check()
            health_status["services"]["database"] = db_health
            if db_health["status"] != "healthy":
                health_status["status"] = "degraded"
        except Exception as e:
            log_error("HEALTH_CHECK_ERROR", str(e))
            health_status["status"] = "unhealthy"
            health_status["error"] = str(e)

        return health_status
