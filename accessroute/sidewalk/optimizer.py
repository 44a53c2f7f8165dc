"""Sidewalk-level refinement of a single route.

Compares walking a route on its current sidewalk with crossing the street
to avoid obstacles that block the traveler's device. Avoided obstacles are
grouped by the sidewalk they sit on; each group needs one suitable
crossing, and a group without one stays on the route.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from accessroute.exceptions import ValidationError
from accessroute.geometry.distance import haversine_distance
from accessroute.obstacles.models import ObstacleType, Severity
from accessroute.profiles.models import DeviceType
from accessroute.routing.models import CandidateRoute, RouteOrigin, RouteStrategy
from accessroute.scoring.engine import AccessibilityScoringEngine
from accessroute.sidewalk.models import (
    CrossingPoint,
    SidewalkComparison,
    SidewalkInfo,
    SidewalkPosition,
    SidewalkRoute,
    SidewalkRouteComparison,
    SidewalkRouteKind,
    StreetSide,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from accessroute.geometry.models import Location
    from accessroute.obstacles.models import Obstacle
    from accessroute.profiles.models import MobilityProfile

logger = logging.getLogger(__name__)

_CROSSING_SECONDS: float = 30.0
_DETOUR_DISTANCE_FACTOR: float = 1.05
_UNKNOWN_SIDEWALK = "unknown_sidewalk"

_HIGHLY_RECOMMENDED_IMPROVEMENT: float = 20
_HIGHLY_RECOMMENDED_REDUCTION: int = 2
_RECOMMENDED_IMPROVEMENT: float = 10
_RECOMMENDED_MAX_SECONDS: float = 60

_WHEELCHAIR_AVOIDABLE: frozenset[ObstacleType] = frozenset(
    {ObstacleType.STAIRS_NO_RAMP, ObstacleType.PARKED_VEHICLES, ObstacleType.NARROW_PASSAGE}
)
_SURFACE_AVOIDABLE: frozenset[ObstacleType] = frozenset({ObstacleType.BROKEN_PAVEMENT, ObstacleType.FLOODING})
_SEVERE: frozenset[Severity] = frozenset({Severity.HIGH, Severity.BLOCKING})

# Share of sidewalk width each type typically blocks, and whether it can be passed on the same side
_WIDTH_IMPACT: dict[ObstacleType, float] = {
    ObstacleType.VENDOR_BLOCKING: 70,
    ObstacleType.PARKED_VEHICLES: 90,
    ObstacleType.STAIRS_NO_RAMP: 100,
    ObstacleType.BROKEN_PAVEMENT: 30,
    ObstacleType.FLOODING: 80,
    ObstacleType.CONSTRUCTION: 95,
    ObstacleType.ELECTRICAL_POST: 40,
    ObstacleType.NARROW_PASSAGE: 60,
}
_DEFAULT_WIDTH_IMPACT: float = 50
_PASSABLE_IN_PLACE: frozenset[ObstacleType] = frozenset(
    {
        ObstacleType.VENDOR_BLOCKING,
        ObstacleType.BROKEN_PAVEMENT,
        ObstacleType.ELECTRICAL_POST,
        ObstacleType.NARROW_PASSAGE,
    }
)


def is_avoidable(obstacle: Obstacle, device: DeviceType) -> bool:
    """Whether crossing the street is worth it to avoid ``obstacle``."""
    if obstacle.sidewalk is not None and obstacle.sidewalk.alternative_exists:
        return False
    match device:
        case DeviceType.WHEELCHAIR:
            return obstacle.type in _WHEELCHAIR_AVOIDABLE
        case DeviceType.WALKER | DeviceType.CANE | DeviceType.CRUTCHES:
            return obstacle.type in _SURFACE_AVOIDABLE and obstacle.severity in _SEVERE
        case DeviceType.NONE:
            return False


def tag_street_side(location: Location, street_start: Location, street_end: Location) -> StreetSide:
    """Cardinal side of the street ``street_start``-``street_end`` that ``location`` is on.

    East-west streets yield north or south; north-south streets yield east or west.

    Raises:
        ValidationError: If the street has zero length.
    """
    if street_start.latitude == street_end.latitude and street_start.longitude == street_end.longitude:
        raise ValidationError("Street must have two distinct endpoints", field="street_end")

    d_lat = street_end.latitude - street_start.latitude
    d_lon = street_end.longitude - street_start.longitude

    # The dominant axis is nonzero for any street with distinct endpoints.
    if abs(d_lon) >= abs(d_lat):
        t = (location.longitude - street_start.longitude) / d_lon
        street_latitude = street_start.latitude + t * d_lat
        return StreetSide.NORTH if location.latitude >= street_latitude else StreetSide.SOUTH

    t = (location.latitude - street_start.latitude) / d_lat
    street_longitude = street_start.longitude + t * d_lon
    return StreetSide.EAST if location.longitude >= street_longitude else StreetSide.WEST


def apply_sidewalk_mapping(
    obstacle: Obstacle,
    street: str,
    side: StreetSide,
    *,
    nearest_crossing: Location | None = None,
) -> Obstacle:
    """Attach sidewalk metadata for a manually tagged obstacle.

    The sidewalk id is derived from the street name and side, e.g.
    ``c_raymundo_ave_north``.
    """
    sidewalk_id = f"{'_'.join(street.lower().split())}_{side.value}"
    info = SidewalkInfo(
        sidewalk_id=sidewalk_id,
        side=side,
        position=SidewalkPosition.CENTER,
        blocks_width=_WIDTH_IMPACT.get(obstacle.type, _DEFAULT_WIDTH_IMPACT),
        alternative_exists=obstacle.type in _PASSABLE_IN_PLACE,
        nearest_crossing=nearest_crossing,
    )
    return obstacle.model_copy(update={"sidewalk": info})


def _recommendation(improvement: float, reduction: int, time_difference: float) -> str:
    if improvement >= _HIGHLY_RECOMMENDED_IMPROVEMENT and reduction >= _HIGHLY_RECOMMENDED_REDUCTION:
        return f"Highly recommended: much more accessible with {reduction} fewer obstacles"
    if improvement >= _RECOMMENDED_IMPROVEMENT and time_difference <= _RECOMMENDED_MAX_SECONDS:
        return f"Recommended: better accessibility with minimal extra time ({round(time_difference)}s)"
    if improvement > 0:
        return f"Consider the optimized route: {improvement:.0f} points more accessible"
    return "Standard route is fine: no significant accessibility improvement available"


class SidewalkOptimizer:
    """Plans street crossings that keep the traveler off blocked sidewalks."""

    def __init__(
        self,
        crossings: Sequence[CrossingPoint],
        engine: AccessibilityScoringEngine | None = None,
    ) -> None:
        """Initialize the optimizer.

        Args:
            crossings: Known crossing points in the area.
            engine: Scoring engine; a default one is created if not provided.
        """
        self._crossings = list(crossings)
        self._engine = engine or AccessibilityScoringEngine()

    def plan_crossings(
        self,
        obstacles: Sequence[Obstacle],
        profile: MobilityProfile,
    ) -> tuple[list[CrossingPoint], list[Obstacle]]:
        """Pick crossings for the avoidable obstacles.

        Returns:
            The crossings to use, in first-use order, and the obstacles they avoid.
        """
        clusters: dict[str, list[Obstacle]] = defaultdict(list)
        for obstacle in obstacles:
            if is_avoidable(obstacle, profile.device):
                sidewalk_id = obstacle.sidewalk.sidewalk_id if obstacle.sidewalk else _UNKNOWN_SIDEWALK
                clusters[sidewalk_id].append(obstacle)

        suitable = [crossing for crossing in self._crossings if crossing.is_suitable_for(profile.device)]
        chosen: list[CrossingPoint] = []
        avoided: list[Obstacle] = []
        for sidewalk_id, cluster in clusters.items():
            if not suitable:
                logger.info(
                    "No suitable crossing for sidewalk %s, keeping %d obstacles",
                    sidewalk_id,
                    len(cluster),
                )
                continue
            crossing = min(
                suitable,
                key=lambda item: min(haversine_distance(item.location, obstacle.location) for obstacle in cluster),
            )
            if crossing not in chosen:
                chosen.append(crossing)
            avoided.extend(cluster)
        return chosen, avoided

    def optimize(
        self,
        base_route: CandidateRoute,
        obstacles: Sequence[Obstacle],
        profile: MobilityProfile,
        *,
        now: datetime | None = None,
    ) -> SidewalkComparison:
        """Compare staying on the sidewalk with crossing to avoid obstacles.

        Args:
            base_route: Route being refined.
            obstacles: Obstacles associated with the route.
            profile: Traveler's mobility profile.
            now: Evaluation time for obstacle activity.

        Returns:
            Both routes with their scores and a recommendation.
        """
        now = now or datetime.now(UTC)
        crossings, avoided = self.plan_crossings(obstacles, profile)
        avoided_ids = {obstacle.id for obstacle in avoided}
        remaining = [obstacle for obstacle in obstacles if obstacle.id not in avoided_ids]

        standard = SidewalkRoute(
            id=f"{base_route.id}_standard",
            kind=SidewalkRouteKind.STANDARD,
            total_distance=base_route.distance,
            total_time=base_route.duration,
            obstacle_ids=tuple(obstacle.id for obstacle in obstacles),
            score=self._engine.score(obstacles, profile, now=now),
            reasons=(f"Encounters {len(obstacles)} obstacles on current sidewalk",),
        )

        if crossings:
            optimized_distance = base_route.distance * _DETOUR_DISTANCE_FACTOR
            optimized_time = base_route.duration + len(crossings) * _CROSSING_SECONDS
            optimized_score = self._engine.score(remaining, profile, strategic=True, now=now)
        else:
            optimized_distance = base_route.distance
            optimized_time = base_route.duration
            optimized_score = standard.score

        optimized = SidewalkRoute(
            id=f"{base_route.id}_optimized",
            kind=SidewalkRouteKind.OPTIMIZED,
            total_distance=round(optimized_distance, 1),
            total_time=round(optimized_time, 1),
            crossings=tuple(crossings),
            obstacle_ids=tuple(obstacle.id for obstacle in remaining),
            score=optimized_score,
            reasons=self._reasons(obstacles, avoided, crossings, profile),
        )

        time_difference = optimized.total_time - standard.total_time
        improvement = round(optimized.score.overall - standard.score.overall, 1)
        reduction = len(obstacles) - len(remaining)
        logger.debug(
            "Sidewalk optimization for route %s: %d crossings, %d obstacles avoided",
            base_route.id,
            len(crossings),
            reduction,
        )
        return SidewalkComparison(
            route_id=base_route.id,
            standard=standard,
            optimized=optimized,
            comparison=SidewalkRouteComparison(
                time_difference=time_difference,
                crossing_count=len(crossings),
                accessibility_improvement=improvement,
                obstacle_reduction=reduction,
                recommendation=_recommendation(improvement, reduction, time_difference),
            ),
            device=profile.device,
        )

    @staticmethod
    def _reasons(
        obstacles: Sequence[Obstacle],
        avoided: Sequence[Obstacle],
        crossings: Sequence[CrossingPoint],
        profile: MobilityProfile,
    ) -> tuple[str, ...]:
        reasons: list[str] = []
        if avoided:
            reasons.append(f"Avoided {len(avoided)} obstacles through sidewalk optimization")
        if crossings:
            reasons.append(f"Strategic crossing at {crossings[0].kind.value.replace('_', ' ')}")
        if profile.device == DeviceType.WHEELCHAIR:
            stairs = sum(1 for obstacle in avoided if obstacle.type == ObstacleType.STAIRS_NO_RAMP)
            if stairs:
                reasons.append(f"Avoided {stairs} stair obstacles (wheelchair accessible path)")
        if not reasons:
            reasons.append(f"No crossing improves the route ({len(obstacles)} obstacles kept)")
        return tuple(reasons)


def to_candidate_route(base_route: CandidateRoute, result: SidewalkComparison) -> CandidateRoute:
    """Export the optimized sidewalk route so the selector can rank it."""
    optimized = result.optimized
    return CandidateRoute(
        id=optimized.id,
        summary=f"Sidewalk-optimized route ({result.comparison.crossing_count} crossings)",
        polyline=base_route.polyline,
        distance=optimized.total_distance,
        duration=optimized.total_time,
        steps=base_route.steps,
        warnings=optimized.reasons,
        origin=RouteOrigin.SYNTHETIC,
        strategy=RouteStrategy.SIDEWALK_OPTIMIZED,
        avoided_obstacle_ids=frozenset(set(result.standard.obstacle_ids) - set(optimized.obstacle_ids)),
    )
