"""Plain-language recommendation comparing the fastest and accessible routes."""

from __future__ import annotations

from typing import TYPE_CHECKING

from accessroute.obstacles.models import ObstacleType
from accessroute.profiles.models import DeviceType

if TYPE_CHECKING:
    from accessroute.profiles.models import MobilityProfile
    from accessroute.routing.models import ScoredRoute

_SEVERE_GAP_GRADES: int = 2
_SEVERE_GAP_SHORT_SECONDS: float = 300
_IMPROVEMENT_THRESHOLD: float = 15
_SMALL_DETOUR_SECONDS: float = 120
_MODERATE_DETOUR_SECONDS: float = 600
_NEGLIGIBLE_DETOUR_SECONDS: float = 180
_MAX_BLOCKERS_NAMED: int = 2

_DEVICE_LABELS: dict[DeviceType, str] = {
    DeviceType.WHEELCHAIR: "wheelchair",
    DeviceType.WALKER: "walker",
    DeviceType.CRUTCHES: "crutches",
    DeviceType.CANE: "cane",
    DeviceType.NONE: "pedestrian",
}

# Obstacle types that stop a device outright, in reporting order
_DEVICE_BLOCKERS: dict[DeviceType, tuple[ObstacleType, ...]] = {
    DeviceType.WHEELCHAIR: (
        ObstacleType.STAIRS_NO_RAMP,
        ObstacleType.NARROW_PASSAGE,
        ObstacleType.PARKED_VEHICLES,
    ),
    DeviceType.WALKER: (
        ObstacleType.STAIRS_NO_RAMP,
        ObstacleType.STEEP_SLOPE,
        ObstacleType.NARROW_PASSAGE,
    ),
    DeviceType.CRUTCHES: (ObstacleType.STAIRS_NO_RAMP, ObstacleType.BROKEN_PAVEMENT),
    DeviceType.CANE: (ObstacleType.STAIRS_NO_RAMP,),
    DeviceType.NONE: (ObstacleType.NO_SIDEWALK, ObstacleType.CONSTRUCTION),
}

_BLOCKER_NAMES: dict[ObstacleType, str] = {
    ObstacleType.STAIRS_NO_RAMP: "stairs",
    ObstacleType.NARROW_PASSAGE: "narrow passages",
    ObstacleType.PARKED_VEHICLES: "parked vehicles",
    ObstacleType.STEEP_SLOPE: "steep slopes",
    ObstacleType.BROKEN_PAVEMENT: "uneven surfaces",
    ObstacleType.NO_SIDEWALK: "missing sidewalks",
    ObstacleType.CONSTRUCTION: "construction",
}


def device_label(device: DeviceType) -> str:
    return _DEVICE_LABELS[device]


def blockers_for(route: ScoredRoute, profile: MobilityProfile) -> list[str]:
    """Names of the device's blocker types present on ``route``."""
    present = {obstacle.type for obstacle in route.obstacles}
    return [_BLOCKER_NAMES[kind] for kind in _DEVICE_BLOCKERS[profile.device] if kind in present]


def recommend(
    fastest: ScoredRoute,
    accessible: ScoredRoute,
    time_difference: float,
    improvement: float,
    profile: MobilityProfile,
) -> str:
    """Recommendation text for choosing between the two routes.

    Args:
        fastest: Route with the shortest duration.
        accessible: Route with the best accessibility.
        time_difference: Seconds the accessible route adds.
        improvement: Overall score points the accessible route gains.
        profile: Traveler's mobility profile.

    Returns:
        A single sentence addressed to the traveler.
    """
    minutes = round(time_difference / 60)
    fastest_grade = fastest.score.grade
    accessible_grade = accessible.score.grade
    label = device_label(profile.device)

    blockers = blockers_for(fastest, profile)
    if blockers:
        named = " and ".join(blockers[:_MAX_BLOCKERS_NAMED])
        return (
            f"For {label} users: Take the {minutes}-minute accessible route - "
            f"the faster route has {named} that block passage (Grade {accessible_grade})"
        )

    if fastest_grade.rank - accessible_grade.rank >= _SEVERE_GAP_GRADES:
        if time_difference <= _SEVERE_GAP_SHORT_SECONDS:
            return (
                f"Strongly recommended for {label}: Take the accessible route ({minutes} min longer) - "
                f"significant safety improvement from Grade {fastest_grade} to {accessible_grade}"
            )
        return (
            f"Important for {label}: Consider the {minutes}-minute accessible route - "
            f"much safer (Grade {accessible_grade} vs {fastest_grade}) despite extra time"
        )

    if improvement >= _IMPROVEMENT_THRESHOLD:
        if time_difference <= _SMALL_DETOUR_SECONDS:
            return (
                f"For {label}: Accessible route recommended (just {minutes} min longer) "
                f"with better conditions (Grade {accessible_grade})"
            )
        if time_difference <= _MODERATE_DETOUR_SECONDS:
            return (
                f"For {label}: Consider the accessible route ({minutes} min longer) - "
                f"noticeably better accessibility (Grade {accessible_grade})"
            )
        return (
            f"For {label}: Fastest route acceptable - accessibility improvement "
            f"(Grade {accessible_grade}) requires {minutes} extra minutes"
        )

    if time_difference <= _NEGLIGIBLE_DETOUR_SECONDS:
        return (
            f"Either route works for {label} - accessible route is {minutes} min longer "
            f"with slightly better conditions (Grade {accessible_grade})"
        )
    return (
        f"For {label}: Fastest route recommended - minimal accessibility difference "
        f"(Grades {fastest_grade} vs {accessible_grade}) saves {abs(minutes)} minutes"
    )
