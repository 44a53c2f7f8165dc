"""Analytic Hierarchy Process accessibility scoring.

Scores a stretch of sidewalk on three weighted criteria (traversability,
safety, comfort) and adds a profile-specific adjustment. Penalty tables are
tuned for dense urban sidewalks with street vendors and seasonal flooding.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import TYPE_CHECKING

from accessroute.exceptions import ScoringError
from accessroute.obstacles.models import ObstacleType, Severity, is_active
from accessroute.profiles.models import DeviceType

if TYPE_CHECKING:
    from collections.abc import Sequence

    from accessroute.obstacles.models import Obstacle
    from accessroute.profiles.models import MobilityProfile

logger = logging.getLogger(__name__)

_WEIGHT_SUM_TOLERANCE: float = 0.01

_BASE_PENALTIES: dict[ObstacleType, float] = {
    ObstacleType.VENDOR_BLOCKING: 15,
    ObstacleType.PARKED_VEHICLES: 20,
    ObstacleType.STAIRS_NO_RAMP: 50,
    ObstacleType.NARROW_PASSAGE: 25,
    ObstacleType.BROKEN_PAVEMENT: 20,
    ObstacleType.FLOODING: 30,
    ObstacleType.CONSTRUCTION: 35,
    ObstacleType.ELECTRICAL_POST: 15,
    ObstacleType.TREE_ROOTS: 18,
    ObstacleType.NO_SIDEWALK: 40,
    ObstacleType.STEEP_SLOPE: 30,
    ObstacleType.OTHER: 10,
}

_SEVERITY_MULTIPLIERS: dict[Severity, float] = {
    Severity.LOW: 0.5,
    Severity.MEDIUM: 1.0,
    Severity.HIGH: 1.5,
    Severity.BLOCKING: 2.5,
}

# Per obstacle type: wheelchair, walker, cane, crutches. Missing entries are 1.0.
_DEVICE_MULTIPLIERS: dict[ObstacleType, dict[DeviceType, float]] = {
    ObstacleType.STAIRS_NO_RAMP: {
        DeviceType.WHEELCHAIR: 2.0,
        DeviceType.WALKER: 1.5,
        DeviceType.CANE: 1.2,
        DeviceType.CRUTCHES: 1.8,
    },
    ObstacleType.NARROW_PASSAGE: {
        DeviceType.WHEELCHAIR: 1.8,
        DeviceType.WALKER: 1.5,
        DeviceType.CANE: 1.0,
        DeviceType.CRUTCHES: 1.3,
    },
    ObstacleType.BROKEN_PAVEMENT: {
        DeviceType.WHEELCHAIR: 1.6,
        DeviceType.WALKER: 1.4,
        DeviceType.CANE: 1.2,
        DeviceType.CRUTCHES: 1.5,
    },
    ObstacleType.VENDOR_BLOCKING: {
        DeviceType.WHEELCHAIR: 1.3,
        DeviceType.WALKER: 1.2,
        DeviceType.CANE: 1.0,
        DeviceType.CRUTCHES: 1.1,
    },
    ObstacleType.PARKED_VEHICLES: {
        DeviceType.WHEELCHAIR: 1.4,
        DeviceType.WALKER: 1.2,
        DeviceType.CANE: 1.0,
        DeviceType.CRUTCHES: 1.1,
    },
    ObstacleType.FLOODING: {
        DeviceType.WHEELCHAIR: 1.5,
        DeviceType.WALKER: 1.3,
        DeviceType.CANE: 1.2,
        DeviceType.CRUTCHES: 1.4,
    },
    ObstacleType.NO_SIDEWALK: {
        DeviceType.WHEELCHAIR: 1.8,
        DeviceType.WALKER: 1.6,
        DeviceType.CANE: 1.3,
        DeviceType.CRUTCHES: 1.7,
    },
    ObstacleType.CONSTRUCTION: {
        DeviceType.WHEELCHAIR: 1.6,
        DeviceType.WALKER: 1.4,
        DeviceType.CANE: 1.2,
        DeviceType.CRUTCHES: 1.5,
    },
}

_CROWD_AVERSION_MULTIPLIER: float = 1.5
_ACTIVE_NOW_MULTIPLIER: float = 1.2

_SAFETY_PENALTIES: dict[ObstacleType, float] = {
    ObstacleType.FLOODING: 25,
    ObstacleType.BROKEN_PAVEMENT: 20,
    ObstacleType.PARKED_VEHICLES: 15,
    ObstacleType.STAIRS_NO_RAMP: 10,
    ObstacleType.VENDOR_BLOCKING: 5,
    ObstacleType.NARROW_PASSAGE: 8,
    ObstacleType.CONSTRUCTION: 30,
    ObstacleType.NO_SIDEWALK: 35,
    ObstacleType.STEEP_SLOPE: 15,
    ObstacleType.ELECTRICAL_POST: 5,
    ObstacleType.TREE_ROOTS: 12,
    ObstacleType.OTHER: 8,
}
_BLOCKING_SAFETY_MULTIPLIER: float = 1.5

# Meters of clear width each device needs
_REQUIRED_WIDTH: dict[DeviceType, float] = {
    DeviceType.WHEELCHAIR: 0.9,
    DeviceType.WALKER: 0.7,
    DeviceType.CRUTCHES: 0.6,
    DeviceType.CANE: 0.5,
    DeviceType.NONE: 0.5,
}
_MAX_WIDTH_PENALTY: float = 40.0
_WIDTH_PENALTY_PER_METER: float = 20.0

_MAX_SLOPE_PENALTY: float = 50.0
_SLOPE_PENALTY_PER_DEGREE: float = 8.0
_RAMP_BONUS: float = 5.0
_HANDRAIL_COMFORT_BONUS: float = 10.0

_SHORT_WALK_THRESHOLD_METERS: float = 500.0
_SHORT_WALK_OBSTACLE_COUNT: int = 2
_SHORT_WALK_ADJUSTMENT: float = -5.0
_COVERED_SHADE_ADJUSTMENT: float = 3.0
_WHEELCHAIR_RAMP_ADJUSTMENT: float = 5.0
_WHEELCHAIR_HANDRAIL_ADJUSTMENT: float = 3.0


class Surface(StrEnum):
    SMOOTH = "smooth"
    ROUGH = "rough"
    BROKEN = "broken"


class Traffic(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Lighting(StrEnum):
    NONE = "none"
    POOR = "poor"
    GOOD = "good"


class Shade(StrEnum):
    NONE = "none"
    PARTIAL = "partial"
    COVERED = "covered"


_TRAFFIC_PENALTIES: dict[Traffic, float] = {Traffic.HIGH: 30, Traffic.MEDIUM: 15, Traffic.LOW: 5}
_LIGHTING_PENALTIES: dict[Lighting, float] = {Lighting.NONE: 25, Lighting.POOR: 10, Lighting.GOOD: 0}
_SHADE_PENALTIES: dict[Shade, float] = {Shade.NONE: 40, Shade.PARTIAL: 20, Shade.COVERED: 0}
_SURFACE_COMFORT_PENALTIES: dict[Surface, float] = {Surface.BROKEN: 30, Surface.ROUGH: 15, Surface.SMOOTH: 0}


@dataclass(frozen=True)
class AHPWeights:
    """Relative importance of the three criteria."""

    traversability: float = 0.7
    safety: float = 0.2
    comfort: float = 0.1

    @property
    def total(self) -> float:
        return self.traversability + self.safety + self.comfort


@dataclass(frozen=True)
class SidewalkConditions:
    """Physical conditions of the stretch being scored.

    Defaults describe an average urban sidewalk for which no survey exists.
    """

    obstacles: tuple[Obstacle, ...] = field(default_factory=tuple)
    width: float = 1.5
    surface: Surface = Surface.SMOOTH
    slope: float = 0.0
    lighting: Lighting = Lighting.GOOD
    shade: Shade = Shade.PARTIAL
    traffic: Traffic = Traffic.MEDIUM
    has_ramp: bool = False
    has_handrails: bool = False


@dataclass(frozen=True)
class AHPResult:
    """Unrounded criteria scores; overall already includes the adjustment."""

    traversability: float
    safety: float
    comfort: float
    overall: float
    adjustment: float


def _clamp(value: float) -> float:
    return max(0.0, min(100.0, value))


class AHPCalculator:
    """Weighted three-criteria accessibility calculator."""

    def __init__(self, weights: AHPWeights | None = None) -> None:
        self._weights = weights or AHPWeights()

    @property
    def weights(self) -> AHPWeights:
        return self._weights

    def update_weights(self, weights: AHPWeights) -> None:
        """Replace the criteria weights.

        Weights that do not sum to 1.0 are accepted but logged.
        """
        if not math.isclose(weights.total, 1.0, abs_tol=_WEIGHT_SUM_TOLERANCE):
            logger.warning("AHP weights sum to %.3f, not 1.0", weights.total)
        self._weights = weights

    def calculate(
        self,
        conditions: SidewalkConditions,
        profile: MobilityProfile,
        *,
        now: datetime | None = None,
    ) -> AHPResult:
        """Score ``conditions`` for ``profile``.

        Raises:
            ScoringError: If an obstacle carries values the tables cannot score.
        """
        now = now or datetime.now(UTC)
        traversability = self._traversability(conditions, profile, now)
        safety = self._safety(conditions)
        comfort = self._comfort(conditions, profile)
        adjustment = self._user_adjustment(conditions, profile)

        weighted = (
            traversability * self._weights.traversability
            + safety * self._weights.safety
            + comfort * self._weights.comfort
        )
        return AHPResult(
            traversability=traversability,
            safety=safety,
            comfort=comfort,
            overall=_clamp(weighted + adjustment),
            adjustment=adjustment,
        )

    def obstacle_penalty(self, obstacle: Obstacle, profile: MobilityProfile, now: datetime) -> float:
        """Traversability penalty of one obstacle for ``profile`` at ``now``."""
        try:
            penalty = _BASE_PENALTIES[obstacle.type] * _SEVERITY_MULTIPLIERS[obstacle.severity]
        except KeyError as exc:
            raise ScoringError(
                "Obstacle cannot be scored",
                context={"obstacle_id": obstacle.id, "key": str(exc)},
            ) from exc

        penalty *= _DEVICE_MULTIPLIERS.get(obstacle.type, {}).get(profile.device, 1.0)
        if profile.avoid_crowds and obstacle.type == ObstacleType.VENDOR_BLOCKING:
            penalty *= _CROWD_AVERSION_MULTIPLIER
        if is_active(obstacle.time_pattern, now):
            penalty *= _ACTIVE_NOW_MULTIPLIER
        return float(round(penalty))

    def _traversability(self, conditions: SidewalkConditions, profile: MobilityProfile, now: datetime) -> float:
        score = 100.0
        for obstacle in conditions.obstacles:
            score -= self.obstacle_penalty(obstacle, profile, now)

        required_width = _REQUIRED_WIDTH[profile.device]
        if conditions.width < required_width:
            score -= min(_MAX_WIDTH_PENALTY, (required_width - conditions.width) * _WIDTH_PENALTY_PER_METER)

        is_wheelchair = profile.device == DeviceType.WHEELCHAIR
        if conditions.surface == Surface.BROKEN:
            score -= 35 if is_wheelchair else 25
        elif conditions.surface == Surface.ROUGH:
            score -= 15 if is_wheelchair else 10

        if is_wheelchair and conditions.slope > profile.max_ramp_slope:
            score -= min(_MAX_SLOPE_PENALTY, conditions.slope * _SLOPE_PENALTY_PER_DEGREE)
        if is_wheelchair and conditions.has_ramp:
            score += _RAMP_BONUS

        return _clamp(score)

    def _safety(self, conditions: SidewalkConditions) -> float:
        score = 100.0 - _TRAFFIC_PENALTIES[conditions.traffic] - _LIGHTING_PENALTIES[conditions.lighting]
        for obstacle in conditions.obstacles:
            penalty = _SAFETY_PENALTIES[obstacle.type]
            if obstacle.severity == Severity.BLOCKING:
                penalty *= _BLOCKING_SAFETY_MULTIPLIER
            score -= penalty
        return _clamp(score)

    def _comfort(self, conditions: SidewalkConditions, profile: MobilityProfile) -> float:
        score = 100.0
        if profile.prefer_shade:
            score -= _SHADE_PENALTIES[conditions.shade]
        score -= _SURFACE_COMFORT_PENALTIES[conditions.surface]
        if profile.device in (DeviceType.WALKER, DeviceType.CANE) and conditions.has_handrails:
            score += _HANDRAIL_COMFORT_BONUS
        return _clamp(score)

    def _user_adjustment(self, conditions: SidewalkConditions, profile: MobilityProfile) -> float:
        adjustment = 0.0
        if (
            profile.max_walking_distance < _SHORT_WALK_THRESHOLD_METERS
            and len(conditions.obstacles) > _SHORT_WALK_OBSTACLE_COUNT
        ):
            adjustment += _SHORT_WALK_ADJUSTMENT
        if profile.prefer_shade and conditions.shade == Shade.COVERED:
            adjustment += _COVERED_SHADE_ADJUSTMENT
        if profile.device == DeviceType.WHEELCHAIR:
            if conditions.has_ramp:
                adjustment += _WHEELCHAIR_RAMP_ADJUSTMENT
            if conditions.has_handrails:
                adjustment += _WHEELCHAIR_HANDRAIL_ADJUSTMENT
        return adjustment


def conditions_for(obstacles: Sequence[Obstacle]) -> SidewalkConditions:
    """Default sidewalk conditions carrying ``obstacles``."""
    return SidewalkConditions(obstacles=tuple(obstacles))
