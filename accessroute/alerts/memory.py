"""Short-term memory of recent announcements."""

from __future__ import annotations

import logging
from collections import OrderedDict
from typing import TYPE_CHECKING

from accessroute.alerts.models import AnnouncementRecord
from accessroute.config import Settings, get_settings
from accessroute.geometry.distance import haversine_distance

if TYPE_CHECKING:
    from accessroute.geometry.models import Location
    from accessroute.obstacles.models import Obstacle

logger = logging.getLogger(__name__)


class AnnouncementMemory:
    """Bounded record of which obstacles were announced, when, and at what distance.

    Entries expire after a fixed lifetime, are pruned when the traveler
    moves far from them, and the oldest entry is evicted when full.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        settings = settings or get_settings()
        self._cooldown = settings.alert_cooldown_seconds
        self._tolerance = settings.alert_distance_tolerance_meters
        self._expiry = settings.memory_expiry_seconds
        self._max_entries = settings.memory_max_entries
        self._prune_movement = settings.memory_prune_movement_meters
        self._prune_distance = settings.memory_prune_distance_meters
        self._records: OrderedDict[str, AnnouncementRecord] = OrderedDict()
        self._last_user_location: Location | None = None

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, obstacle_id: object) -> bool:
        return obstacle_id in self._records

    def get(self, obstacle_id: str) -> AnnouncementRecord | None:
        return self._records.get(obstacle_id)

    def record(self, obstacle: Obstacle, distance: float, now: float) -> AnnouncementRecord:
        """Remember that ``obstacle`` was announced at ``distance``."""
        self._records.pop(obstacle.id, None)
        record = AnnouncementRecord(
            obstacle_id=obstacle.id,
            announced_at=now,
            announced_distance=distance,
            location=obstacle.location,
        )
        self._records[obstacle.id] = record
        while len(self._records) > self._max_entries:
            evicted, _ = self._records.popitem(last=False)
            logger.debug("Announcement memory full, evicted %s", evicted)
        return record

    def is_duplicate(self, obstacle_id: str, distance: float, now: float) -> bool:
        """Whether announcing now would repeat a recent announcement.

        It repeats one when the same obstacle was announced within the
        cooldown and the distance has not changed by more than the tolerance.
        """
        record = self._records.get(obstacle_id)
        if record is None:
            return False
        if now - record.announced_at > self._cooldown:
            return False
        return abs(distance - record.announced_distance) <= self._tolerance

    def expire(self, now: float) -> int:
        """Drop entries older than the memory lifetime.

        Returns:
            Number of entries removed.
        """
        expired = [key for key, record in self._records.items() if now - record.announced_at > self._expiry]
        for key in expired:
            del self._records[key]
        return len(expired)

    def on_user_moved(self, location: Location) -> int:
        """Prune entries for far-away obstacles once the traveler has moved enough.

        Returns:
            Number of entries removed.
        """
        if self._last_user_location is None:
            self._last_user_location = location
            return 0
        if haversine_distance(self._last_user_location, location) <= self._prune_movement:
            return 0

        self._last_user_location = location
        far = [
            key
            for key, record in self._records.items()
            if haversine_distance(location, record.location) > self._prune_distance
        ]
        for key in far:
            del self._records[key]
        if far:
            logger.debug("Pruned %d announcements for obstacles left behind", len(far))
        return len(far)

    def clear(self) -> None:
        self._records.clear()
        self._last_user_location = None
