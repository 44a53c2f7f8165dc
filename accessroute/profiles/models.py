"""Mobility profiles and their per-device defaults."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from accessroute.exceptions import ProfileError


class DeviceType(StrEnum):
    """Mobility aid used by the traveler."""

    WHEELCHAIR = "wheelchair"
    WALKER = "walker"
    CRUTCHES = "crutches"
    CANE = "cane"
    NONE = "none"


class MobilityProfile(BaseModel):
    """Traveler constraints that condition scoring and alerting.

    Attributes:
        device: Mobility aid in use.
        max_ramp_slope: Steepest ramp the traveler can manage, in degrees.
        min_path_width: Narrowest passable path, in centimeters.
        max_walking_distance: Comfortable walking distance, in meters.
        avoid_stairs: Stairs should be avoided entirely.
        avoid_crowds: Crowded stretches (vendors) weigh heavier.
        prefer_shade: Unshaded stretches reduce comfort.
    """

    model_config = ConfigDict(frozen=True)

    device: DeviceType
    max_ramp_slope: float = Field(ge=0, le=90)
    min_path_width: float = Field(gt=0)
    max_walking_distance: float = Field(gt=0)
    avoid_stairs: bool
    avoid_crowds: bool
    prefer_shade: bool

    @classmethod
    def for_device(cls, device: DeviceType | str) -> "MobilityProfile":
        """Return the default profile for a device type.

        Raises:
            ProfileError: If ``device`` is not a known mobility aid.
        """
        try:
            device = DeviceType(device)
        except ValueError as exc:
            raise ProfileError(
                f"Unknown mobility device '{device}'",
                device=str(device),
                context={"known_devices": [known.value for known in DeviceType]},
            ) from exc
        return cls(device=device, **_DEVICE_DEFAULTS[device])


_DEVICE_DEFAULTS: dict[DeviceType, dict[str, float | bool]] = {
    DeviceType.WHEELCHAIR: {
        "max_ramp_slope": 5,
        "min_path_width": 90,
        "max_walking_distance": 800,
        "avoid_stairs": True,
        "avoid_crowds": True,
        "prefer_shade": True,
    },
    DeviceType.WALKER: {
        "max_ramp_slope": 7,
        "min_path_width": 75,
        "max_walking_distance": 400,
        "avoid_stairs": True,
        "avoid_crowds": False,
        "prefer_shade": True,
    },
    DeviceType.CANE: {
        "max_ramp_slope": 12,
        "min_path_width": 60,
        "max_walking_distance": 600,
        "avoid_stairs": False,
        "avoid_crowds": False,
        "prefer_shade": True,
    },
    DeviceType.CRUTCHES: {
        "max_ramp_slope": 10,
        "min_path_width": 65,
        "max_walking_distance": 300,
        "avoid_stairs": False,
        "avoid_crowds": True,
        "prefer_shade": True,
    },
    DeviceType.NONE: {
        "max_ramp_slope": 15,
        "min_path_width": 50,
        "max_walking_distance": 1000,
        "avoid_stairs": False,
        "avoid_crowds": False,
        "prefer_shade": False,
    },
}
