"""Geographic value types."""

from pydantic import BaseModel, ConfigDict, Field


class Location(BaseModel):
    """WGS84 point, optionally with a GPS accuracy radius in meters."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    accuracy: float | None = Field(default=None, ge=0)


class Bounds(BaseModel):
    """Bounding box of a polyline with a search radius covering it."""

    model_config = ConfigDict(frozen=True)

    south_west: Location
    north_east: Location
    center: Location
    radius_km: float = Field(ge=1.0)
