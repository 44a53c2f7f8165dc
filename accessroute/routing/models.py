"""Route candidates and selection results."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from accessroute.geometry.models import Location
from accessroute.obstacles.models import Obstacle
from accessroute.scoring.models import AccessibilityScore, RecommendationCategory, RouteConfidence


class RouteOrigin(StrEnum):
    """Where a candidate route came from."""

    PROVIDER = "provider"
    FALLBACK = "fallback"
    SYNTHETIC = "synthetic"


class RouteStrategy(StrEnum):
    """Optimization a route was derived with."""

    NONE = "none"
    ACCESSIBILITY_OPTIMIZED = "accessibility_optimized"
    SAFER_MAIN_ROADS = "safer_main_roads"
    SIDEWALK_OPTIMIZED = "sidewalk_optimized"


class RouteStep(BaseModel):
    """One turn-by-turn instruction."""

    model_config = ConfigDict(frozen=True)

    start: Location
    end: Location
    distance: float = Field(ge=0)
    duration: float = Field(ge=0)
    instructions: str = ""


class CandidateRoute(BaseModel):
    """A walking route as returned by the routing provider."""

    model_config = ConfigDict(frozen=True)

    id: str
    summary: str = ""
    polyline: tuple[Location, ...] = Field(min_length=1)
    distance: float = Field(ge=0)
    duration: float = Field(ge=0)
    steps: tuple[RouteStep, ...] = ()
    warnings: tuple[str, ...] = ()
    origin: RouteOrigin = RouteOrigin.PROVIDER
    strategy: RouteStrategy = RouteStrategy.NONE
    avoided_obstacle_ids: frozenset[str] = frozenset()

    @property
    def is_accessibility_optimized(self) -> bool:
        return self.strategy in (RouteStrategy.ACCESSIBILITY_OPTIMIZED, RouteStrategy.SIDEWALK_OPTIMIZED)


class ScoredRoute(BaseModel):
    """A candidate route with its score, confidence and associated obstacles."""

    model_config = ConfigDict(frozen=True)

    route: CandidateRoute
    score: AccessibilityScore
    confidence: RouteConfidence
    obstacles: tuple[Obstacle, ...] = ()
    obstacle_count: int = Field(ge=0)
    warnings: tuple[str, ...] = Field(default=(), max_length=3)
    recommendation: RecommendationCategory


class RouteComparison(BaseModel):
    """Accessible route relative to the fastest one."""

    model_config = ConfigDict(frozen=True)

    time_difference: float
    distance_difference: float
    accessibility_improvement: float
    recommendation: str


class RouteSelection(BaseModel):
    """Fastest and most accessible routes out of the scored candidates."""

    model_config = ConfigDict(frozen=True)

    fastest: ScoredRoute
    accessible: ScoredRoute
    comparison: RouteComparison
    routes: tuple[ScoredRoute, ...]
