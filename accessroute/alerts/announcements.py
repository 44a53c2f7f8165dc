"""Spoken announcement text and priority."""

from accessroute.obstacles.models import Obstacle, ObstacleType, Severity

URGENT_PRIORITY: int = 1
LOWEST_PRIORITY: int = 4

# (upper distance bound in meters, priority), checked in order
_DISTANCE_TIERS: tuple[tuple[float, int], ...] = ((3.0, 1), (8.0, 2), (20.0, 3))

_READABLE_NAMES: dict[ObstacleType, str] = {
    ObstacleType.STAIRS_NO_RAMP: "Stairs without ramp",
    ObstacleType.NARROW_PASSAGE: "Narrow passage",
    ObstacleType.BROKEN_PAVEMENT: "Broken pavement",
    ObstacleType.FLOODING: "Flooding",
    ObstacleType.CONSTRUCTION: "Construction",
    ObstacleType.VENDOR_BLOCKING: "Vendors",
    ObstacleType.PARKED_VEHICLES: "Parked vehicles",
    ObstacleType.ELECTRICAL_POST: "Utility pole",
    ObstacleType.TREE_ROOTS: "Tree roots",
    ObstacleType.NO_SIDEWALK: "No sidewalk",
    ObstacleType.STEEP_SLOPE: "Steep slope",
    ObstacleType.OTHER: "Obstacle",
}


def readable_name(obstacle_type: ObstacleType) -> str:
    return _READABLE_NAMES.get(obstacle_type, "Obstacle")


def announcement_text(obstacle: Obstacle, distance: float) -> str:
    """Short utterance, e.g. ``Stairs without ramp in 12 meters ahead.``"""
    return f"{readable_name(obstacle.type)} in {round(distance)} meters ahead."


def announcement_priority(distance: float, severity: Severity) -> int:
    """Priority from 1 (most urgent) to 4.

    Distance sets the tier; blocking and high severity promote one tier and
    low severity demotes one.
    """
    priority = LOWEST_PRIORITY
    for bound, tier in _DISTANCE_TIERS:
        if distance < bound:
            priority = tier
            break

    if severity in (Severity.BLOCKING, Severity.HIGH):
        return max(URGENT_PRIORITY, priority - 1)
    if severity == Severity.LOW:
        return min(LOWEST_PRIORITY, priority + 1)
    return priority
