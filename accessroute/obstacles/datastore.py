"""In-process obstacle store satisfying the ``ObstacleDatastore`` protocol."""

from __future__ import annotations

from typing import TYPE_CHECKING

from accessroute.exceptions import ValidationError
from accessroute.geometry.distance import haversine_distance

if TYPE_CHECKING:
    from collections.abc import Iterable

    from accessroute.geometry.models import Location
    from accessroute.obstacles.models import Obstacle


class InMemoryObstacleRepository:
    """Obstacle reports held in a dict keyed by id.

    Useful for offline datasets and for driving the trip planner without a
    remote store.
    """

    def __init__(self, obstacles: Iterable[Obstacle] = ()) -> None:
        """Initialize the repository.

        Args:
            obstacles: Initial reports; later duplicates of an id replace earlier ones.
        """
        self._obstacles: dict[str, Obstacle] = {}
        for obstacle in obstacles:
            self.put(obstacle)

    def put(self, obstacle: Obstacle) -> Obstacle:
        """Insert or replace a report."""
        self._obstacles[obstacle.id] = obstacle
        return obstacle

    def get(self, obstacle_id: str) -> Obstacle | None:
        return self._obstacles.get(obstacle_id)

    def delete(self, obstacle_id: str) -> bool:
        """Remove a report.

        Returns:
            True if the report existed.
        """
        return self._obstacles.pop(obstacle_id, None) is not None

    def __len__(self) -> int:
        return len(self._obstacles)

    async def get_obstacles_in_area(self, center: Location, radius_km: float) -> list[Obstacle]:
        """Reports within ``radius_km`` of ``center``, in insertion order.

        Raises:
            ValidationError: If ``radius_km`` is not positive.
        """
        if radius_km <= 0:
            raise ValidationError("Search radius must be positive", field="radius_km", value=radius_km)
        radius_meters = radius_km * 1000.0
        return [
            obstacle
            for obstacle in self._obstacles.values()
            if haversine_distance(center, obstacle.location) <= radius_meters
        ]
