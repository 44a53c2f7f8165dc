"""Great-circle distance helpers.

Distances are in meters. Segment projection is done in the lon/lat plane,
which is accurate enough for the sub-kilometer segments of a walking route.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from accessroute.geometry.models import Location

if TYPE_CHECKING:
    from collections.abc import Sequence

EARTH_RADIUS_METERS: float = 6_371_000.0


def haversine_distance(a: Location, b: Location) -> float:
    """Great-circle distance between two points in meters."""
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    delta_lat = lat2 - lat1
    delta_lon = math.radians(b.longitude - a.longitude)

    h = math.sin(delta_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(delta_lon / 2) ** 2
    return 2 * EARTH_RADIUS_METERS * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def point_to_segment_distance(point: Location, start: Location, end: Location) -> float:
    """Distance from ``point`` to the segment ``start``-``end`` in meters.

    The projection parameter is clamped to [0, 1]; a zero-length segment
    degrades to the point distance.
    """
    dx = end.longitude - start.longitude
    dy = end.latitude - start.latitude
    length_squared = dx * dx + dy * dy
    if length_squared == 0:
        return haversine_distance(point, start)

    t = ((point.longitude - start.longitude) * dx + (point.latitude - start.latitude) * dy) / length_squared
    t = max(0.0, min(1.0, t))
    projected = Location(
        latitude=start.latitude + t * dy,
        longitude=start.longitude + t * dx,
    )
    return haversine_distance(point, projected)


def distance_to_polyline(point: Location, polyline: Sequence[Location]) -> float:
    """Minimum distance from ``point`` to any segment of ``polyline``.

    Returns:
        Distance in meters; ``math.inf`` for an empty polyline.
    """
    if not polyline:
        return math.inf
    if len(polyline) == 1:
        return haversine_distance(point, polyline[0])
    return min(
        point_to_segment_distance(point, polyline[index], polyline[index + 1])
        for index in range(len(polyline) - 1)
    )


def polyline_length(polyline: Sequence[Location]) -> float:
    """Sum of segment lengths in meters."""
    return sum(haversine_distance(polyline[i], polyline[i + 1]) for i in range(len(polyline) - 1))


def bearing(start: Location, end: Location) -> float:
    """Initial compass bearing from ``start`` to ``end`` in degrees [0, 360)."""
    lat1 = math.radians(start.latitude)
    lat2 = math.radians(end.latitude)
    delta_lon = math.radians(end.longitude - start.longitude)

    x = math.sin(delta_lon) * math.cos(lat2)
    y = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(delta_lon)
    return (math.degrees(math.atan2(x, y)) + 360.0) % 360.0
