"""
DynamoDB service for the ActivityDash application.

This service handles all interactions with DynamoDB for storing and
retrieving activity logs and saved locations. It provides high-level
methods for CRUD operations with error handling and data conversion.

Table layout:
    logs:      owner_activity (HASH, "user#activity"), datetime (RANGE)
    locations: owner_activity (HASH, "user#activity"), name (RANGE)

Classes:
    DynamoDBService: Service for DynamoDB operations and data persistence
"""

import os
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

import boto3
from boto3.dynamodb.conditions import Attr, Key
from botocore.exceptions import ClientError
from dateutil.tz import tzlocal

from ..models.activity_data import ActivityKind
from ..models.log import LocationRow, LogRow, owner_key
from ..utils.logging import log_error, log_event
from ..utils.time import local_day_bounds
from .range_filter import parse_timestamp


def _utc_key(value: datetime) -> str:
    """Render a bound the way log datetimes are stored: ISO-8601 in UTC."""
    return value.astimezone(timezone.utc).isoformat()


class DynamoDBService:
    """
    Service for managing ActivityDash data in DynamoDB.

    Logs are keyed by owner and datetime, so saving a log for an instant
    that already has one replaces it (upsert). Reads return logs in
    ascending datetime order, which the chart and statistics views expect.

    Attributes:
        logs_table_name: Name of the logs table
        locations_table_name: Name of the locations table
        dynamodb: Boto3 DynamoDB resource
        logs_table: Logs table resource
        locations_table: Locations table resource

    Example:
        >>> db_service = DynamoDBService()
        >>> db_service.save_log(log)
        True
        >>> db_service.get_logs("user-1", ActivityKind.WEIGHT)
        [LogRow(...), ...]
    """

    def __init__(
        self,
        logs_table_name: Optional[str] = None,
        locations_table_name: Optional[str] = None,
    ):
        """
        Initialize the DynamoDB service.

        Args:
            logs_table_name: Logs table override, defaults to LOGS_TABLE env var
            locations_table_name: Locations table override, defaults to
                LOCATIONS_TABLE env var

        Raises:
            ValueError: If a table name is missing or the table does not exist
        """
        self.logs_table_name = logs_table_name or os.getenv("LOGS_TABLE")
        self.locations_table_name = locations_table_name or os.getenv("LOCATIONS_TABLE")

        if not self.logs_table_name:
            raise ValueError(
                "Logs table name must be provided either as parameter or LOGS_TABLE environment variable"
            )
        if not self.locations_table_name:
            raise ValueError(
                "Locations table name must be provided either as parameter or LOCATIONS_TABLE environment variable"
            )

        try:
            self.dynamodb = boto3.resource("dynamodb")
            self.logs_table = self.dynamodb.Table(self.logs_table_name)
            self.locations_table = self.dynamodb.Table(self.locations_table_name)

            self.logs_table.load()
            self.locations_table.load()

        except ClientError as e:
            if e.response["Error"]["Code"] == "ResourceNotFoundException":
                raise ValueError(f"DynamoDB table not found: {e}") from e
            raise

    # Logs

    def save_log(self, log: LogRow) -> bool:
        """
        Upsert a log on (user, activity, datetime).

        When an entry already exists for the same instant it is replaced,
        keeping its original ``id`` and ``created_at``.

        Args:
            log: Log to save

        Returns:
            True if the save succeeded, False otherwise
        """
        try:
            existing = self.logs_table.get_item(
                Key={"owner_activity": log.owner_activity, "datetime": log.datetime}
            ).get("Item")
            if existing:
                log.id = existing.get("id", log.id)
                log.created_at = existing.get("created_at", log.created_at)
            log.updated_at = datetime.now(timezone.utc).isoformat()

            response = self.logs_table.put_item(Item=log.to_dynamodb_item())
            saved = response["ResponseMetadata"]["HTTPStatusCode"] == 200

            log_event(
                "LOG_SAVED",
                logId=log.id,
                activity=log.activity.value,
                replaced=bool(existing),
            )
            return saved

        except ClientError as e:
            log_error("SAVE_LOG_ERROR", str(e), {"logId": log.id})
            return False

    def get_logs(
        self,
        user_id: str,
        activity: ActivityKind,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[LogRow]:
        """
        Retrieve a user's logs for one activity in ascending datetime order.

        Optional bounds are converted to UTC and applied on the stored ISO
        strings, which log_activity writes in UTC. They are intended for
        coarse server-side narrowing; exact range semantics belong to the
        range filter.

        Args:
            user_id: Owner of the logs
            activity: Activity kind
            start: Optional inclusive lower bound
            end: Optional inclusive upper bound

        Returns:
            List of LogRow objects (empty on error)
        """
        key_condition = Key("owner_activity").eq(owner_key(user_id, activity))
        if start and end:
            key_condition = key_condition & Key("datetime").between(
                _utc_key(start), _utc_key(end)
            )
        elif start:
            key_condition = key_condition & Key("datetime").gte(_utc_key(start))
        elif end:
            key_condition = key_condition & Key("datetime").lte(_utc_key(end))

        try:
            items = self._query_all(
                self.logs_table,
                KeyConditionExpression=key_condition,
                ScanIndexForward=True,
            )
        except ClientError as e:
            log_error("GET_LOGS_ERROR", str(e), {"activity": str(activity)})
            return []

        return self._to_logs(items)

    def get_latest_log(self, user_id: str, activity: ActivityKind) -> Optional[LogRow]:
        """Return the most recent log of an activity, or None."""
        try:
            response = self.logs_table.query(
                KeyConditionExpression=Key("owner_activity").eq(owner_key(user_id, activity)),
                ScanIndexForward=False,
                Limit=1,
            )
        except ClientError as e:
            log_error("GET_LATEST_LOG_ERROR", str(e), {"activity": str(activity)})
            return None

        logs = self._to_logs(response.get("Items", []))
        return logs[0] if logs else None

    def get_log_for_date(
        self, user_id: str, activity: ActivityKind, day: date, tz=None
    ) -> Optional[LogRow]:
        """
        Return the first log on a calendar day, used to prefill the log form.

        Day bounds are taken in ``tz`` (local time when omitted). The query is
        narrowed to the day in storage, then matched as instants.
        """
        tz = tz or tzlocal()
        start, end = local_day_bounds(day, tz)

        for log in self.get_logs(user_id, activity, start=start, end=end):
            when = parse_timestamp(log.datetime, tz)
            if when is not None and start <= when <= end:
                return log
        return None

    def delete_log(self, user_id: str, activity: ActivityKind, log_datetime: str) -> bool:
        """
        Delete the log at ``log_datetime``.

        Returns:
            True if a log existed and was deleted, False otherwise
        """
        try:
            response = self.logs_table.delete_item(
                Key={"owner_activity": owner_key(user_id, activity), "datetime": log_datetime},
                ReturnValues="ALL_OLD",
            )
            return "Attributes" in response
        except ClientError as e:
            log_error("DELETE_LOG_ERROR", str(e), {"activity": str(activity)})
            return False

    # Locations

    def save_location(self, location: LocationRow) -> bool:
        """
        Save a new location. Names are unique per user and activity, so a
        second location with an existing name is rejected.

        Returns:
            True if saved, False if the name is taken or the write failed
        """
        try:
            self.locations_table.put_item(
                Item=location.to_dynamodb_item(),
                ConditionExpression=Attr("name").not_exists(),
            )
            log_event("LOCATION_SAVED", locationId=location.id, activity=location.activity.value)
            return True
        except ClientError as e:
            if e.response["Error"]["Code"] == "ConditionalCheckFailedException":
                log_event("LOCATION_EXISTS", activity=location.activity.value)
            else:
                log_error("SAVE_LOCATION_ERROR", str(e), {"locationId": location.id})
            return False

    def get_locations(self, user_id: str, activity: ActivityKind) -> List[LocationRow]:
        """Return a user's locations for an activity, ordered by name."""
        try:
            items = self._query_all(
                self.locations_table,
                KeyConditionExpression=Key("owner_activity").eq(owner_key(user_id, activity)),
            )
        except ClientError as e:
            log_error("GET_LOCATIONS_ERROR", str(e), {"activity": str(activity)})
            return []

        locations = []
        for item in items:
            try:
                locations.append(LocationRow.from_dynamodb_item(item))
            except ValueError as e:
                log_error("LOCATION_CONVERSION_ERROR", str(e))
        return locations

    def find_location_by_name(
        self, user_id: str, activity: ActivityKind, name: str
    ) -> Optional[LocationRow]:
        """Look up a location by its (whitespace-normalized) name."""
        cleaned = " ".join(name.split())
        if not cleaned:
            return None
        try:
            response = self.locations_table.get_item(
                Key={"owner_activity": owner_key(user_id, activity), "name": cleaned}
            )
        except ClientError as e:
            log_error("GET_LOCATION_ERROR", str(e), {"activity": str(activity)})
            return None

        item = response.get("Item")
        return LocationRow.from_dynamodb_item(item) if item else None

    def get_location(
        self, user_id: str, activity: ActivityKind, location_id: str
    ) -> Optional[LocationRow]:
        """Look up a location by id within a user's activity."""
        for location in self.get_locations(user_id, activity):
            if location.id == location_id:
                return location
        return None

    # Helpers

    @staticmethod
    def _query_all(table: Any, **kwargs: Any) -> List[Dict[str, Any]]:
        items: List[Dict[str, Any]] = []
        while True:
            response = table.query(**kwargs)
            items.extend(response.get("Items", []))
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                return items
            kwargs["ExclusiveStartKey"] = last_key

    @staticmethod
    def _to_logs(items: List[Dict[str, Any]]) -> List[LogRow]:
        logs = []
        for item in items:
            try:
                logs.append(LogRow.from_dynamodb_item(item))
            except ValueError as e:
                log_error("LOG_CONVERSION_ERROR", str(e))
        return logs

    def health_check(self) -> Dict[str, Any]:
        """
        Perform a health check on both tables.

        Returns:
            Dictionary with health check results
        """
        try:
            client = self.dynamodb.meta.client
            tables = {}
            for name in (self.logs_table_name, self.locations_table_name):
                description = client.describe_table(TableName=name)["Table"]
                tables[name] = {
                    "table_status": description["TableStatus"],
                    "item_count": description.get("ItemCount", "unknown"),
                }

            return {
                "status": "healthy",
                "tables": tables,
                "region": client.meta.region_name,
            }

        except Exception as e:
            return {
                "status": "unhealthy",
                "error": str(e),
                "tables": [self.logs_table_name, self.locations_table_name],
            }
