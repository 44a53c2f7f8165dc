"""Route and obstacle acquisition from external collaborators.

Collaborator failures are logged and recovered here; the only error that
reaches the caller is ``NoRouteAvailableError``.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING

from accessroute.config import Settings, get_settings
from accessroute.exceptions import ExternalServiceError, NoRouteAvailableError
from accessroute.geometry.distance import haversine_distance
from accessroute.geometry.polyline import sample_points
from accessroute.logging.context import trip_context
from accessroute.obstacles.association import merge_obstacles
from accessroute.routing.models import CandidateRoute, RouteOrigin, RouteStep
from accessroute.routing.selector import RouteSelector, deduplicate_routes

if TYPE_CHECKING:
    from collections.abc import Sequence

    from accessroute.geometry.models import Location
    from accessroute.obstacles.models import Obstacle
    from accessroute.profiles.models import MobilityProfile
    from accessroute.routing.models import RouteSelection
    from accessroute.types import ObstacleDatastore, RoutingProvider

logger = logging.getLogger(__name__)

FALLBACK_ROUTE_ID = "fallback_direct"


def straight_line_route(origin: Location, destination: Location, walking_speed_mps: float = 1.4) -> CandidateRoute:
    """Two-point direct route timed at ``walking_speed_mps``."""
    distance = round(haversine_distance(origin, destination))
    duration = round(distance / walking_speed_mps)
    return CandidateRoute(
        id=FALLBACK_ROUTE_ID,
        summary="Direct route (estimated)",
        polyline=(origin, destination),
        distance=distance,
        duration=duration,
        steps=(
            RouteStep(
                start=origin,
                end=destination,
                distance=distance,
                duration=duration,
                instructions="Head toward destination",
            ),
        ),
        warnings=("Routing service unavailable; straight-line estimate",),
        origin=RouteOrigin.FALLBACK,
    )


async def _request_routes(
    provider: RoutingProvider,
    origin: Location,
    destination: Location,
    *,
    alternatives: bool,
) -> list[CandidateRoute]:
    try:
        return list(await provider.get_routes(origin, destination, alternatives=alternatives))
    except Exception as exc:
        raise ExternalServiceError(
            "Routing provider request failed",
            service_name="routing_provider",
            context={"alternatives": alternatives, "error": str(exc)},
        ) from exc


async def fetch_candidate_routes(
    provider: RoutingProvider,
    origin: Location,
    destination: Location,
    *,
    settings: Settings | None = None,
) -> list[CandidateRoute]:
    """Fetch candidate routes, degrading to a straight line if the provider fails.

    Args:
        provider: Walking directions source.
        origin: Trip start.
        destination: Trip end.
        settings: Tunables; loaded from the environment if not provided.

    Returns:
        Distinct candidate routes, never empty.

    Raises:
        NoRouteAvailableError: If origin and destination coincide and the
            provider returned nothing.
    """
    settings = settings or get_settings()
    routes: list[CandidateRoute] = []

    for alternatives in (True, False):
        try:
            routes = await _request_routes(provider, origin, destination, alternatives=alternatives)
        except ExternalServiceError as exc:
            logger.warning("Route request failed (alternatives=%s)", alternatives, extra={"error": exc.to_log_dict()})
            continue
        if routes:
            break
        logger.warning("Provider returned no routes (alternatives=%s)", alternatives)

    if not routes:
        if origin.latitude == destination.latitude and origin.longitude == destination.longitude:
            raise NoRouteAvailableError(
                "Origin and destination are identical and no route exists",
                context={"latitude": origin.latitude, "longitude": origin.longitude},
            )
        logger.warning("Using straight-line fallback route")
        routes = [straight_line_route(origin, destination, settings.fallback_walking_speed_mps)]

    return deduplicate_routes(
        routes,
        distance_meters=settings.duplicate_distance_meters,
        duration_seconds=settings.duplicate_duration_seconds,
    )


async def fetch_obstacle_pool(
    datastore: ObstacleDatastore,
    routes: Sequence[CandidateRoute],
    *,
    sample_count: int = 3,
    radius_km: float = 0.3,
) -> list[Obstacle]:
    """Query the datastore at sample points along every route.

    A failing sample point is logged and contributes nothing.

    Returns:
        Obstacles around all routes, deduplicated by id.
    """
    groups: list[Sequence[Obstacle]] = []
    for route in routes:
        for point in sample_points(route.polyline, sample_count):
            try:
                groups.append(await datastore.get_obstacles_in_area(point, radius_km))
            except Exception as exc:
                error = ExternalServiceError(
                    "Obstacle query failed",
                    service_name="obstacle_datastore",
                    context={"route_id": route.id, "error": str(exc)},
                )
                logger.warning("Skipping sample point on route %s", route.id, extra={"error": error.to_log_dict()})

    pool = merge_obstacles(*groups)
    logger.debug("Fetched %d obstacles around %d routes", len(pool), len(routes))
    return pool


async def plan_trip(
    provider: RoutingProvider,
    datastore: ObstacleDatastore,
    origin: Location,
    destination: Location,
    profile: MobilityProfile,
    *,
    settings: Settings | None = None,
    now: datetime | None = None,
) -> RouteSelection:
    """Fetch routes and obstacles, then select the fastest and accessible pair."""
    settings = settings or get_settings()
    with trip_context(device=profile.device.value):
        routes = await fetch_candidate_routes(provider, origin, destination, settings=settings)
        pool = await fetch_obstacle_pool(
            datastore,
            routes,
            sample_count=settings.obstacle_sample_points,
            radius_km=settings.obstacle_search_radius_km,
        )
        return RouteSelector(settings).select(routes, pool, profile, now=now)
