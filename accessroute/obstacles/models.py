"""Community-reported obstacle models."""

from datetime import datetime
from enum import StrEnum

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field

from accessroute.geometry.models import Location
from accessroute.sidewalk.models import SidewalkInfo

# Active windows by local hour, [start, end)
_MORNING_HOURS: tuple[int, int] = (6, 10)
_AFTERNOON_HOURS: tuple[int, int] = (12, 18)
_EVENING_START_HOUR: int = 18
_EVENING_END_HOUR: int = 6
_SATURDAY: int = 5
_SUNDAY: int = 6


class ObstacleType(StrEnum):
    """Kinds of obstacles travelers can report."""

    VENDOR_BLOCKING = "vendor_blocking"
    PARKED_VEHICLES = "parked_vehicles"
    STAIRS_NO_RAMP = "stairs_no_ramp"
    NARROW_PASSAGE = "narrow_passage"
    BROKEN_PAVEMENT = "broken_pavement"
    FLOODING = "flooding"
    CONSTRUCTION = "construction"
    ELECTRICAL_POST = "electrical_post"
    TREE_ROOTS = "tree_roots"
    NO_SIDEWALK = "no_sidewalk"
    STEEP_SLOPE = "steep_slope"
    OTHER = "other"


class Severity(StrEnum):
    """How badly an obstacle impedes passage."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    BLOCKING = "blocking"


class TimePattern(StrEnum):
    """When a recurring obstacle is present."""

    PERMANENT = "permanent"
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    WEEKEND = "weekend"


class Obstacle(BaseModel):
    """A single community report."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    type: ObstacleType
    severity: Severity
    location: Location
    reported_at: AwareDatetime
    upvotes: int = Field(default=0, ge=0)
    downvotes: int = Field(default=0, ge=0)
    verified: bool = False
    time_pattern: TimePattern | None = None
    description: str | None = None
    sidewalk: SidewalkInfo | None = None

    @property
    def readable_type(self) -> str:
        """Type name with underscores replaced, e.g. ``stairs no ramp``."""
        return self.type.value.replace("_", " ")

    @property
    def total_votes(self) -> int:
        return self.upvotes + self.downvotes


def is_active(time_pattern: TimePattern | None, now: datetime) -> bool:
    """Whether an obstacle with ``time_pattern`` is present at ``now``.

    Permanent and unknown patterns are always active.
    """
    hour = now.hour
    match time_pattern:
        case TimePattern.MORNING:
            return _MORNING_HOURS[0] <= hour < _MORNING_HOURS[1]
        case TimePattern.AFTERNOON:
            return _AFTERNOON_HOURS[0] <= hour < _AFTERNOON_HOURS[1]
        case TimePattern.EVENING:
            return hour >= _EVENING_START_HOUR or hour < _EVENING_END_HOUR
        case TimePattern.WEEKEND:
            return now.weekday() in (_SATURDAY, _SUNDAY)
        case _:
            return True
