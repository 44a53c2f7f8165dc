"""Proximity alert data models."""

from pydantic import BaseModel, ConfigDict, Field

from accessroute.geometry.models import Location
from accessroute.obstacles.models import Obstacle
from accessroute.profiles.models import MobilityProfile


class QueueItem(BaseModel):
    """An obstacle waiting to be announced."""

    model_config = ConfigDict(frozen=True)

    obstacle: Obstacle
    distance: float = Field(ge=0)
    profile: MobilityProfile
    priority: int = Field(ge=1, le=4)
    queued_at: float
    sequence: int = Field(ge=0)

    @property
    def is_urgent(self) -> bool:
        return self.priority == 1


class AnnouncementRecord(BaseModel):
    """Memory of one spoken announcement."""

    model_config = ConfigDict(frozen=True)

    obstacle_id: str
    announced_at: float
    announced_distance: float = Field(ge=0)
    location: Location


class ProximityAlert(BaseModel):
    """An obstacle ahead on the active route."""

    model_config = ConfigDict(frozen=True)

    obstacle: Obstacle
    distance: float = Field(ge=0)
    time_to_encounter: float = Field(ge=0)
    confidence: float = Field(ge=0, le=1)
    urgency: float = Field(ge=0, le=100)
