"""Synthetic route alternatives for when the provider returns too few routes.

Alternatives reuse the base polyline and scale time and distance to reflect
the detour. Their obstacle exposure is reduced deterministically:

- the accessible variant avoids every obstacle relevant to the traveler;
- the safer variant avoids every high and blocking obstacle.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from accessroute.obstacles.models import Severity
from accessroute.obstacles.relevance import is_relevant
from accessroute.profiles.models import DeviceType
from accessroute.routing.models import CandidateRoute, RouteOrigin, RouteStep, RouteStrategy

if TYPE_CHECKING:
    from collections.abc import Sequence

    from accessroute.obstacles.models import Obstacle
    from accessroute.profiles.models import MobilityProfile

ACCESSIBLE_ROUTE_ID = "strategic_accessible"
SAFER_ROUTE_ID = "strategic_safer"

_WHEELCHAIR_TIME_FACTOR: float = 1.25
_ACCESSIBLE_TIME_FACTOR: float = 1.15
_ACCESSIBLE_DISTANCE_FACTOR: float = 1.10
_SAFER_TIME_FACTOR: float = 1.20
_SAFER_DISTANCE_FACTOR: float = 1.15

_ESTIMATE_WARNING = "Estimated alternative; times and obstacles are approximate"
_SEVERE: frozenset[Severity] = frozenset({Severity.HIGH, Severity.BLOCKING})


def _scaled_steps(
    steps: Sequence[RouteStep],
    time_factor: float,
    distance_factor: float,
    lead_in: str,
) -> tuple[RouteStep, ...]:
    return tuple(
        step.model_copy(
            update={
                "distance": round(step.distance * distance_factor),
                "duration": round(step.duration * time_factor),
                "instructions": step.instructions.replace("Head", lead_in, 1),
            }
        )
        for step in steps
    )


def strategic_accessible(base: CandidateRoute, profile: MobilityProfile) -> CandidateRoute:
    """Accessibility-optimized variant of ``base`` for ``profile``."""
    time_factor = _WHEELCHAIR_TIME_FACTOR if profile.device == DeviceType.WHEELCHAIR else _ACCESSIBLE_TIME_FACTOR
    return CandidateRoute(
        id=ACCESSIBLE_ROUTE_ID,
        summary=f"Accessible Route ({profile.device.value} optimized)",
        polyline=base.polyline,
        distance=round(base.distance * _ACCESSIBLE_DISTANCE_FACTOR),
        duration=round(base.duration * time_factor),
        steps=_scaled_steps(base.steps, time_factor, _ACCESSIBLE_DISTANCE_FACTOR, "Take accessible route"),
        warnings=(
            f"This route prioritizes accessibility for {profile.device.value} users",
            _ESTIMATE_WARNING,
        ),
        origin=RouteOrigin.SYNTHETIC,
        strategy=RouteStrategy.ACCESSIBILITY_OPTIMIZED,
    )


def strategic_safer(base: CandidateRoute) -> CandidateRoute:
    """Variant of ``base`` that keeps to main roads."""
    return CandidateRoute(
        id=SAFER_ROUTE_ID,
        summary="Safer Route (via main roads)",
        polyline=base.polyline,
        distance=round(base.distance * _SAFER_DISTANCE_FACTOR),
        duration=round(base.duration * _SAFER_TIME_FACTOR),
        steps=_scaled_steps(base.steps, _SAFER_TIME_FACTOR, _SAFER_DISTANCE_FACTOR, "Take main road"),
        warnings=("This route uses main roads for improved safety", _ESTIMATE_WARNING),
        origin=RouteOrigin.SYNTHETIC,
        strategy=RouteStrategy.SAFER_MAIN_ROADS,
    )


def strategic_alternatives(base: CandidateRoute, profile: MobilityProfile) -> list[CandidateRoute]:
    """Both synthetic alternatives, accessible first."""
    return [strategic_accessible(base, profile), strategic_safer(base)]


def suppress_obstacles(
    route: CandidateRoute,
    obstacles: Sequence[Obstacle],
    profile: MobilityProfile,
) -> list[Obstacle]:
    """Obstacles a route still passes after its detours.

    Explicitly avoided ids are always dropped; synthetic routes additionally
    drop what their strategy steers around.
    """
    remaining = [obstacle for obstacle in obstacles if obstacle.id not in route.avoided_obstacle_ids]
    if route.origin != RouteOrigin.SYNTHETIC:
        return remaining
    match route.strategy:
        case RouteStrategy.ACCESSIBILITY_OPTIMIZED:
            return [obstacle for obstacle in remaining if not is_relevant(obstacle, profile)]
        case RouteStrategy.SAFER_MAIN_ROADS:
            return [obstacle for obstacle in remaining if obstacle.severity not in _SEVERE]
        case _:
            return remaining
