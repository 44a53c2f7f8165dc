"""Which obstacle types matter to which mobility profile."""

from accessroute.obstacles.models import Obstacle, ObstacleType
from accessroute.profiles.models import DeviceType, MobilityProfile


def relevant_types(device: DeviceType) -> frozenset[ObstacleType]:
    """Obstacle types that affect travelers using ``device``."""
    match device:
        case DeviceType.WHEELCHAIR:
            return frozenset(
                {
                    ObstacleType.STAIRS_NO_RAMP,
                    ObstacleType.NARROW_PASSAGE,
                    ObstacleType.BROKEN_PAVEMENT,
                    ObstacleType.FLOODING,
                    ObstacleType.PARKED_VEHICLES,
                }
            )
        case DeviceType.WALKER:
            return frozenset(
                {
                    ObstacleType.STAIRS_NO_RAMP,
                    ObstacleType.NARROW_PASSAGE,
                    ObstacleType.BROKEN_PAVEMENT,
                    ObstacleType.FLOODING,
                }
            )
        case DeviceType.CRUTCHES:
            return frozenset(
                {
                    ObstacleType.BROKEN_PAVEMENT,
                    ObstacleType.FLOODING,
                    ObstacleType.NARROW_PASSAGE,
                }
            )
        case DeviceType.CANE:
            return frozenset({ObstacleType.BROKEN_PAVEMENT, ObstacleType.FLOODING})
        case DeviceType.NONE:
            return frozenset({ObstacleType.FLOODING, ObstacleType.CONSTRUCTION})


def is_relevant(obstacle: Obstacle, profile: MobilityProfile, *, safety_first: bool = False) -> bool:
    """Whether ``obstacle`` matters for ``profile``.

    With ``safety_first`` every obstacle is relevant to every profile.
    """
    if safety_first:
        return True
    return obstacle.type in relevant_types(profile.device)


def filter_relevant(
    obstacles: list[Obstacle],
    profile: MobilityProfile,
    *,
    safety_first: bool = False,
) -> list[Obstacle]:
    """Keep relevant obstacles in input order."""
    return [obstacle for obstacle in obstacles if is_relevant(obstacle, profile, safety_first=safety_first)]
