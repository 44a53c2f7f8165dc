"""Polyline decoding, sampling and bounds."""

from __future__ import annotations

from typing import TYPE_CHECKING

from accessroute.exceptions import ValidationError
from accessroute.geometry.distance import haversine_distance
from accessroute.geometry.models import Bounds, Location

if TYPE_CHECKING:
    from collections.abc import Sequence

_POLYLINE_PRECISION: float = 1e5
_CHUNK_OFFSET: int = 63
_CHUNK_MASK: int = 0x1F
_CONTINUATION_BIT: int = 0x20

_MIN_SEARCH_RADIUS_KM: float = 1.0
_SEARCH_RADIUS_MARGIN_KM: float = 0.5


def decode_polyline(encoded: str) -> list[Location]:
    """Decode a Google encoded polyline string.

    Args:
        encoded: Polyline in Google's encoded format at 1e5 precision.

    Returns:
        Decoded points in order. An empty string decodes to an empty list.

    Raises:
        ValidationError: If the string is truncated or contains invalid characters.
    """
    points: list[Location] = []
    index = 0
    latitude = 0
    longitude = 0

    def next_value() -> int:
        nonlocal index
        shift = 0
        result = 0
        while True:
            if index >= len(encoded):
                raise ValidationError("Truncated encoded polyline", field="polyline", value=encoded)
            chunk = ord(encoded[index]) - _CHUNK_OFFSET
            index += 1
            if chunk < 0 or chunk > 63:
                raise ValidationError(
                    "Invalid character in encoded polyline",
                    field="polyline",
                    context={"position": index - 1},
                )
            result |= (chunk & _CHUNK_MASK) << shift
            shift += 5
            if chunk < _CONTINUATION_BIT:
                break
        return ~(result >> 1) if result & 1 else result >> 1

    while index < len(encoded):
        latitude += next_value()
        longitude += next_value()
        try:
            points.append(
                Location(
                    latitude=latitude / _POLYLINE_PRECISION,
                    longitude=longitude / _POLYLINE_PRECISION,
                )
            )
        except ValueError as exc:
            raise ValidationError("Encoded polyline decodes outside WGS84 range", field="polyline") from exc

    return points


def polyline_bounds(points: Sequence[Location]) -> Bounds:
    """Bounding box, center and covering search radius of a point set.

    Raises:
        ValidationError: If ``points`` is empty.
    """
    if not points:
        raise ValidationError("Cannot compute bounds of an empty polyline", field="points")

    south = min(point.latitude for point in points)
    north = max(point.latitude for point in points)
    west = min(point.longitude for point in points)
    east = max(point.longitude for point in points)

    south_west = Location(latitude=south, longitude=west)
    north_east = Location(latitude=north, longitude=east)
    diagonal_km = haversine_distance(south_west, north_east) / 1000.0

    return Bounds(
        south_west=south_west,
        north_east=north_east,
        center=Location(latitude=(south + north) / 2, longitude=(west + east) / 2),
        radius_km=max(_MIN_SEARCH_RADIUS_KM, diagonal_km / 2 + _SEARCH_RADIUS_MARGIN_KM),
    )


def sample_points(polyline: Sequence[Location], count: int) -> list[Location]:
    """Pick ``count`` points along a polyline: start, evenly spaced interior vertices, end.

    Repeated vertices are returned once, so the result may be shorter than ``count``.
    """
    if not polyline or count <= 0:
        return []
    if count == 1 or len(polyline) == 1:
        return [polyline[0]]

    last = len(polyline) - 1
    indices = [round(step * last / (count - 1)) for step in range(count)]

    samples: list[Location] = []
    seen: set[int] = set()
    for index in indices:
        if index not in seen:
            seen.add(index)
            samples.append(polyline[index])
    return samples
