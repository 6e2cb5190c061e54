"""
Activity payload models for the ActivityDash application.

Every loggable activity stores its activity-specific fields in the ``data``
column of a log row. This module defines one Pydantic model per activity
kind and a registry mapping each kind to its model, so that logging,
validation and statistics share one generic code path instead of one copy
per activity page.

Classes:
    ActivityKind: Enum of the loggable activities
    SetEntry, LiftSection, PullupSet: Building blocks of a lifting session
    WeightLogData, LiftingLogData, SurfLogData, SnorkelingLogData,
    SkiingLogData, RouteLogData: Per-activity payloads

Functions:
    validate_log_data: Validate a raw payload against its activity schema
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ActivityKind(str, Enum):
    """
    Enumeration of activities that can be logged.

    Hiking and running entries are imported from the fitness-data importer;
    all other kinds are entered manually.
    """

    WEIGHT = "weight"
    LIFTING = "lifting"
    HIKING = "hiking"
    RUNNING = "running"
    SURFING = "surfing"
    SNORKELING = "snorkeling"
    SKIING = "skiing"

    @property
    def uses_locations(self) -> bool:
        """Activities whose entries reference a saved location."""
        return self in (ActivityKind.SURFING, ActivityKind.SNORKELING, ActivityKind.SKIING)

    @property
    def has_routes(self) -> bool:
        """Activities whose entries carry an encoded GPS route."""
        return self in (ActivityKind.HIKING, ActivityKind.RUNNING)


class _LogData(BaseModel):
    model_config = ConfigDict(extra="forbid")


class WeightLogData(_LogData):
    """Body weight entry, in pounds."""

    weight: float = Field(..., gt=0, le=1500, description="Body weight (lbs)")


class SetEntry(BaseModel):
    """
    One line of a lifting section.

    ``weight`` is optional for bodyweight movements and ``sets`` defaults
    to 1 when the lifter records a single set.
    """

    model_config = ConfigDict(extra="forbid")

    reps: int = Field(..., ge=0)
    weight: Optional[float] = Field(None, ge=0)
    sets: int = Field(1, ge=1)

    @field_validator("sets", mode="before")
    @classmethod
    def default_sets(cls, v: Any) -> Any:
        return 1 if v is None else v


class LiftSection(BaseModel):
    model_config = ConfigDict(extra="forbid")

    warmup: List[SetEntry] = Field(default_factory=list)
    work: List[SetEntry] = Field(default_factory=list)

    def heaviest_work_weight(self) -> Optional[float]:
        """Heaviest weight lifted in a work set, if any were weighted."""
        weights = [s.weight for s in self.work if s.weight is not None]
        return max(weights) if weights else None


class PullupSet(BaseModel):
    model_config = ConfigDict(extra="forbid")

    reps: int = Field(..., ge=0)
    sets: int = Field(1, ge=1)

    @field_validator("sets", mode="before")
    @classmethod
    def default_sets(cls, v: Any) -> Any:
        return 1 if v is None else v


LIFTS = ("squat", "bench", "overhead", "deadlift", "clean")


class LiftingLogData(_LogData):
    """
    Lifting session with the tracked barbell lifts and pull-ups.

    Example:
        >>> data = LiftingLogData(squat={"warmup": [], "work": [{"reps": 5, "weight": 225}]})
        >>> data.squat.heaviest_work_weight()
        225.0
    """

    squat: Optional[LiftSection] = None
    bench: Optional[LiftSection] = None
    overhead: Optional[LiftSection] = None
    deadlift: Optional[LiftSection] = None
    clean: Optional[LiftSection] = None
    pullups: List[PullupSet] = Field(default_factory=list)
    notes: Optional[str] = Field(None, max_length=2000)

    def total_pullups(self) -> int:
        return sum(p.reps * p.sets for p in self.pullups)


class SurfLogData(_LogData):
    board: Optional[str] = Field(None, max_length=100)
    height: Optional[str] = Field(None, max_length=50, description="Wave height")
    duration: Optional[float] = Field(None, ge=0, description="Minutes in the water")
    waves: Optional[int] = Field(None, ge=0, description="Waves caught")
    notes: Optional[str] = Field(None, max_length=2000)


class SnorkelingLogData(_LogData):
    duration: Optional[float] = Field(None, ge=0, description="Minutes in the water")
    notes: Optional[str] = Field(None, max_length=2000)


class SkiingLogData(_LogData):
    runs: Optional[int] = Field(None, ge=0)
    vertical: Optional[float] = Field(None, ge=0, description="Vertical feet")
    duration: Optional[float] = Field(None, ge=0, description="Minutes on the mountain")
    notes: Optional[str] = Field(None, max_length=2000)


class RouteMap(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    summary_polyline: Optional[str] = None


class RouteLogData(BaseModel):
    """
    Hike or run imported from the fitness-data importer.

    Only the fields the dashboard reads are declared; the importer sends
    many more, which are kept as-is.
    """

    model_config = ConfigDict(extra="allow")

    name: str = ""
    distance: float = Field(0.0, ge=0, description="Meters")
    elapsed_time: float = Field(0.0, ge=0, description="Seconds")
    moving_time: float = Field(0.0, ge=0, description="Seconds")
    total_elevation_gain: float = Field(0.0, description="Elevation gain")
    sport_type: Optional[str] = None
    start_date: Optional[str] = None
    map: RouteMap = Field(default_factory=RouteMap)

    @field_validator("distance", "elapsed_time", "moving_time", "total_elevation_gain", mode="before")
    @classmethod
    def missing_as_zero(cls, v: Any) -> Any:
        return 0.0 if v is None else v


ACTIVITY_SCHEMAS: Dict[ActivityKind, Type[BaseModel]] = {
    ActivityKind.WEIGHT: WeightLogData,
    ActivityKind.LIFTING: LiftingLogData,
    ActivityKind.HIKING: RouteLogData,
    ActivityKind.RUNNING: RouteLogData,
    ActivityKind.SURFING: SurfLogData,
    ActivityKind.SNORKELING: SnorkelingLogData,
    ActivityKind.SKIING: SkiingLogData,
}


def parse_log_data(kind: ActivityKind, data: Dict[str, Any]) -> BaseModel:
    """
    Parse a stored or submitted payload into its activity model.

    Raises:
        pydantic.ValidationError: If the payload does not match the schema
    """
    return ACTIVITY_SCHEMAS[ActivityKind(kind)].model_validate(data or {})


def validate_log_data(kind: ActivityKind, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate a payload against its activity schema.

    Returns the normalized payload (defaults filled in, ``None`` fields
    dropped) ready to be stored in a log row.

    Args:
        kind: Activity the payload belongs to
        data: Raw payload from a form or API request

    Returns:
        Normalized payload dictionary

    Raises:
        pydantic.ValidationError: If the payload does not match the schema
        ValueError: If ``kind`` is not a known activity
    """
    return parse_log_data(kind, data).model_dump(exclude_none=True)
