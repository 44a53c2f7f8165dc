"""Associate obstacles with candidate routes."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from accessroute.geometry.distance import distance_to_polyline

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from accessroute.obstacles.models import Obstacle
    from accessroute.routing.models import CandidateRoute

logger = logging.getLogger(__name__)

DEFAULT_BUFFER_METERS: float = 50.0


def merge_obstacles(*groups: Iterable[Obstacle]) -> list[Obstacle]:
    """Concatenate obstacle groups, keeping the first occurrence of each id."""
    merged: list[Obstacle] = []
    seen: set[str] = set()
    for group in groups:
        for obstacle in group:
            if obstacle.id not in seen:
                seen.add(obstacle.id)
                merged.append(obstacle)
    return merged


def obstacles_near_route(
    route: CandidateRoute,
    obstacles: Sequence[Obstacle],
    buffer_meters: float = DEFAULT_BUFFER_METERS,
) -> list[Obstacle]:
    """Obstacles within ``buffer_meters`` of the route polyline.

    Args:
        route: Route whose polyline is tested.
        obstacles: Candidate obstacles, typically the pooled datastore results.
        buffer_meters: Maximum distance from the polyline.

    Returns:
        Matching obstacles in input order, deduplicated by id.
    """
    near = [
        obstacle
        for obstacle in merge_obstacles(obstacles)
        if distance_to_polyline(obstacle.location, route.polyline) <= buffer_meters
    ]
    logger.debug(
        "Associated %d of %d obstacles with route %s (buffer=%.0fm)",
        len(near),
        len(obstacles),
        route.id,
        buffer_meters,
    )
    return near
