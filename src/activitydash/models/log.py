"""
Log and location models for the ActivityDash application.

A log row is one dated entry of one activity for one user; its
activity-specific fields live in ``data`` (see ``activity_data``). Log rows
and saved locations are persisted in DynamoDB, which stores numbers as
``Decimal``; the conversion helpers here translate in both directions.

Classes:
    LogRow: One logged activity entry
    LocationRow: A named place attached to an activity (surf spot, ski area)
"""

import json
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

from .activity_data import ActivityKind


def owner_key(user_id: str, activity: ActivityKind) -> str:
    """Partition key shared by a user's rows for one activity."""
    return f"{user_id}#{ActivityKind(activity).value}"


def to_dynamodb_value(value: Any) -> Any:
    """Convert floats (at any depth) to Decimal for DynamoDB."""
    return json.loads(json.dumps(value), parse_float=Decimal)


def from_dynamodb_value(value: Any) -> Any:
    """Convert DynamoDB Decimals (at any depth) back to int or float."""
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, dict):
        return {k: from_dynamodb_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [from_dynamodb_value(v) for v in value]
    return value


def _utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class LogRow(BaseModel):
    """
    Pydantic model for one logged activity entry.

    ``datetime`` is kept as the ISO-8601 string the client sent; it is the
    sort key in storage and the timestamp the range filter reads. Entries
    are unique per (user, activity, datetime): logging again at the same
    instant replaces the previous entry.

    Attributes:
        id: Unique log identifier (auto-generated)
        user_id: Owner of the entry
        activity: Activity kind
        datetime: When the activity happened (ISO-8601)
        location_id: Optional reference to a LocationRow
        data: Activity-specific payload
        created_at: When the entry was first stored
        updated_at: When the entry was last written

    Example:
        >>> log = LogRow(
        ...     user_id="user-1",
        ...     activity=ActivityKind.WEIGHT,
        ...     datetime="2025-01-05T07:30:00+00:00",
        ...     data={"weight": 182.4},
        ... )
        >>> log.id.startswith("log_")
        True
    """

    id: str = Field(default_factory=lambda: f"log_{uuid.uuid4().hex[:12]}")
    user_id: str = Field(..., min_length=1)
    activity: ActivityKind
    datetime: str = Field(..., min_length=1)
    location_id: Optional[str] = None
    data: Dict[str, Any] = Field(default_factory=dict)
    created_at: str = Field(default_factory=_utcnow_iso)
    updated_at: str = Field(default_factory=_utcnow_iso)

    @field_validator("datetime", mode="before")
    @classmethod
    def normalize_datetime(cls, v: Any) -> Any:
        if isinstance(v, datetime):
            return v.isoformat()
        return v

    @property
    def owner_activity(self) -> str:
        return owner_key(self.user_id, self.activity)

    def to_dynamodb_item(self) -> Dict[str, Any]:
        """
        Convert the log to a DynamoDB item.

        Adds the ``owner_activity`` partition key and drops unset optional
        attributes, which DynamoDB cannot index as null.
        """
        item = self.model_dump(mode="json", exclude_none=True)
        item["owner_activity"] = self.owner_activity
        return to_dynamodb_value(item)

    @classmethod
    def from_dynamodb_item(cls, item: Dict[str, Any]) -> "LogRow":
        data = from_dynamodb_value(dict(item))
        data.pop("owner_activity", None)
        return cls(**data)


class LocationRow(BaseModel):
    """
    A named place an activity happens at.

    Locations are unique by name within a user's activity.
    """

    id: str = Field(default_factory=lambda: f"loc_{uuid.uuid4().hex[:12]}")
    user_id: str = Field(..., min_length=1)
    activity: ActivityKind
    name: str = Field(..., min_length=1, max_length=200)
    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)
    created_at: str = Field(default_factory=_utcnow_iso)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        cleaned = " ".join(v.split())
        if not cleaned:
            raise ValueError("Location name cannot be blank")
        return cleaned

    @property
    def owner_activity(self) -> str:
        return owner_key(self.user_id, self.activity)

    def to_dynamodb_item(self) -> Dict[str, Any]:
        item = self.model_dump(mode="json")
        item["owner_activity"] = self.owner_activity
        return to_dynamodb_value(item)

    @classmethod
    def from_dynamodb_item(cls, item: Dict[str, Any]) -> "LocationRow":
        data = from_dynamodb_value(dict(item))
        data.pop("owner_activity", None)
        return cls(**data)
