"""Detect obstacles ahead of the traveler on the active route."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from accessroute.alerts.models import ProximityAlert
from accessroute.config import Settings, get_settings
from accessroute.geometry.distance import distance_to_polyline, haversine_distance
from accessroute.obstacles.models import Severity
from accessroute.obstacles.relevance import is_relevant
from accessroute.profiles.models import DeviceType

if TYPE_CHECKING:
    from collections.abc import Sequence

    from accessroute.geometry.models import Location
    from accessroute.obstacles.models import Obstacle
    from accessroute.profiles.models import MobilityProfile
    from accessroute.types import ObstacleDatastore

logger = logging.getLogger(__name__)

# Meters per second
_WALKING_SPEEDS: dict[DeviceType, float] = {
    DeviceType.WHEELCHAIR: 1.2,
    DeviceType.WALKER: 1.0,
    DeviceType.CRUTCHES: 1.1,
    DeviceType.CANE: 1.3,
    DeviceType.NONE: 1.4,
}

_SEVERITY_URGENCY: dict[Severity, float] = {
    Severity.BLOCKING: 40,
    Severity.HIGH: 30,
    Severity.MEDIUM: 20,
    Severity.LOW: 10,
}
_MAX_PROXIMITY_URGENCY: float = 30
_DEVICE_URGENCY_FACTOR: dict[DeviceType, float] = {
    DeviceType.WHEELCHAIR: 1.3,
    DeviceType.WALKER: 1.2,
    DeviceType.CRUTCHES: 1.2,
}
_MAX_URGENCY: float = 100

_UNVALIDATED_CONFIDENCE: float = 0.5
_VERIFIED_CONFIDENCE_BONUS: float = 0.2


def report_confidence(obstacle: Obstacle) -> float:
    """Community confidence in a report, 0-1."""
    if obstacle.total_votes == 0:
        return _UNVALIDATED_CONFIDENCE
    ratio = obstacle.upvotes / obstacle.total_votes
    bonus = _VERIFIED_CONFIDENCE_BONUS if obstacle.verified else 0.0
    return min(1.0, ratio + bonus)


class ProximityDetector:
    """Finds the most urgent obstacles ahead within a lookahead radius.

    Detection is skipped until the traveler has moved a minimum distance
    since the previous pass; ``reset`` forces the next pass to run.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        settings = settings or get_settings()
        self._radius = settings.detection_radius_meters
        self._route_tolerance = settings.route_tolerance_meters
        self._min_movement = settings.min_detection_movement_meters
        self._max_alerts = settings.max_alerts
        self._safety_first = settings.safety_first_alerts
        self._last_location: Location | None = None

    def reset(self) -> None:
        """Forget the last detection location, e.g. after a route change."""
        self._last_location = None

    def should_update(self, location: Location) -> bool:
        if self._last_location is None:
            return True
        return haversine_distance(self._last_location, location) >= self._min_movement

    def urgency(self, obstacle: Obstacle, distance: float, profile: MobilityProfile) -> float:
        """Urgency score 0-100 from severity, proximity, device and confidence."""
        urgency = _SEVERITY_URGENCY[obstacle.severity]
        urgency += max(0.0, (self._radius - distance) / self._radius * _MAX_PROXIMITY_URGENCY)
        urgency *= _DEVICE_URGENCY_FACTOR.get(profile.device, 1.0)
        urgency *= report_confidence(obstacle)
        return min(_MAX_URGENCY, urgency)

    def detect(
        self,
        user_location: Location,
        route_polyline: Sequence[Location],
        obstacles: Sequence[Obstacle],
        profile: MobilityProfile,
    ) -> list[ProximityAlert]:
        """Alerts for obstacles near the traveler and on the route.

        Args:
            user_location: Current position.
            route_polyline: Active route.
            obstacles: Candidate obstacles, e.g. the trip's obstacle pool.
            profile: Traveler's mobility profile.

        Returns:
            Up to ``max_alerts`` alerts, most urgent first. Empty when the
            traveler has not moved enough since the last pass.
        """
        if not self.should_update(user_location):
            logger.debug("Skipping detection: insufficient movement")
            return []

        alerts: list[ProximityAlert] = []
        for obstacle in obstacles:
            distance = haversine_distance(user_location, obstacle.location)
            if distance > self._radius:
                continue
            if distance_to_polyline(obstacle.location, route_polyline) > self._route_tolerance:
                continue
            if not is_relevant(obstacle, profile, safety_first=self._safety_first):
                continue
            alerts.append(
                ProximityAlert(
                    obstacle=obstacle,
                    distance=round(distance),
                    time_to_encounter=round(distance / _WALKING_SPEEDS[profile.device]),
                    confidence=round(report_confidence(obstacle), 2),
                    urgency=round(self.urgency(obstacle, distance, profile)),
                )
            )

        alerts.sort(key=lambda alert: alert.urgency, reverse=True)
        self._last_location = user_location
        if alerts:
            logger.info("Detected %d obstacles ahead", len(alerts), extra={"returned": min(len(alerts), self._max_alerts)})
        return alerts[: self._max_alerts]

    async def detect_nearby(
        self,
        datastore: ObstacleDatastore,
        user_location: Location,
        route_polyline: Sequence[Location],
        profile: MobilityProfile,
    ) -> list[ProximityAlert]:
        """Query the datastore around the traveler, then ``detect``.

        A datastore failure is logged and yields no alerts.
        """
        if not self.should_update(user_location):
            return []
        try:
            obstacles = await datastore.get_obstacles_in_area(user_location, self._radius / 1000.0)
        except Exception:
            logger.exception("Obstacle lookup failed during proximity detection")
            return []
        return self.detect(user_location, route_polyline, obstacles, profile)
