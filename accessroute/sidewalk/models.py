"""Sidewalk-level data models."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from accessroute.geometry.models import Location
from accessroute.profiles.models import DeviceType
from accessroute.scoring.models import AccessibilityScore


class StreetSide(StrEnum):
    """Side of the street a sidewalk runs along."""

    NORTH = "north"
    SOUTH = "south"
    EAST = "east"
    WEST = "west"


class SidewalkPosition(StrEnum):
    """Where on the sidewalk an obstacle sits."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class CrossingKind(StrEnum):
    """Type of street crossing."""

    TRAFFIC_LIGHT = "traffic_light"
    PEDESTRIAN_CROSSING = "pedestrian_crossing"
    INTERSECTION = "intersection"
    INFORMAL = "informal"


class CrossingRating(StrEnum):
    """How usable a crossing is for a given device."""

    ACCESSIBLE = "accessible"
    EASY = "easy"
    MODERATE = "moderate"
    DIFFICULT = "difficult"
    IMPOSSIBLE = "impossible"


SUITABLE_RATINGS: frozenset[CrossingRating] = frozenset({CrossingRating.ACCESSIBLE, CrossingRating.EASY})


class SidewalkInfo(BaseModel):
    """Sidewalk placement of an obstacle."""

    model_config = ConfigDict(frozen=True)

    sidewalk_id: str = Field(min_length=1)
    side: StreetSide
    position: SidewalkPosition = SidewalkPosition.CENTER
    blocks_width: float = Field(default=0.0, ge=0, le=100)
    alternative_exists: bool = False
    nearest_crossing: Location | None = None


class CrossingAccessibility(BaseModel):
    """Physical facts about a crossing."""

    model_config = ConfigDict(frozen=True)

    has_ramp: bool = False
    has_visual_signals: bool = False
    has_tactile_indicators: bool = False
    crossing_time: float = Field(default=15.0, ge=0)
    safety_rating: int = Field(default=3, ge=1, le=5)
    wait_time: float = Field(default=0.0, ge=0)


class CrossingPoint(BaseModel):
    """A place where the traveler can switch sidewalks."""

    model_config = ConfigDict(frozen=True)

    id: str
    location: Location
    kind: CrossingKind
    accessibility: CrossingAccessibility = Field(default_factory=CrossingAccessibility)
    connects: tuple[str, str] | None = None
    ratings: dict[DeviceType, CrossingRating] = Field(default_factory=dict)

    def rating_for(self, device: DeviceType) -> CrossingRating:
        """Rating for ``device``; unrated devices count as difficult."""
        return self.ratings.get(device, CrossingRating.DIFFICULT)

    def is_suitable_for(self, device: DeviceType) -> bool:
        return self.rating_for(device) in SUITABLE_RATINGS


class SidewalkRouteKind(StrEnum):
    """Whether a sidewalk route stays on its side or crosses over."""

    STANDARD = "standard"
    OPTIMIZED = "optimized"


class SidewalkRoute(BaseModel):
    """One way of walking a base route at sidewalk granularity."""

    model_config = ConfigDict(frozen=True)

    id: str
    kind: SidewalkRouteKind
    total_distance: float = Field(ge=0)
    total_time: float = Field(ge=0)
    crossings: tuple[CrossingPoint, ...] = ()
    obstacle_ids: tuple[str, ...] = ()
    score: AccessibilityScore
    reasons: tuple[str, ...] = ()


class SidewalkRouteComparison(BaseModel):
    """Trade-off between the standard and the sidewalk-optimized route."""

    model_config = ConfigDict(frozen=True)

    time_difference: float
    crossing_count: int = Field(ge=0)
    accessibility_improvement: float
    obstacle_reduction: int = Field(ge=0)
    recommendation: str


class SidewalkComparison(BaseModel):
    """Result of a sidewalk optimization pass."""

    model_config = ConfigDict(frozen=True)

    route_id: str
    standard: SidewalkRoute
    optimized: SidewalkRoute
    comparison: SidewalkRouteComparison
    device: DeviceType
