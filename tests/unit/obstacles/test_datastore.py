"""Tests for the in-memory obstacle repository."""

from datetime import UTC, datetime

import pytest

from accessroute.exceptions import ValidationError
from accessroute.geometry.models import Location
from accessroute.obstacles.datastore import InMemoryObstacleRepository
from accessroute.obstacles.models import Obstacle, ObstacleType, Severity
from accessroute.types import ObstacleDatastore


def _make_obstacle(obstacle_id: str, latitude: float = 0.0, longitude: float = 0.0) -> Obstacle:
    return Obstacle(
        id=obstacle_id,
        type=ObstacleType.FLOODING,
        severity=Severity.HIGH,
        location=Location(latitude=latitude, longitude=longitude),
        reported_at=datetime(2025, 6, 1, tzinfo=UTC),
    )


class TestInMemoryObstacleRepository:
    def test_satisfies_protocol(self):
        assert isinstance(InMemoryObstacleRepository(), ObstacleDatastore)

    def test_put_and_get(self):
        repository = InMemoryObstacleRepository()
        obstacle = repository.put(_make_obstacle("a"))
        assert repository.get("a") == obstacle
        assert len(repository) == 1

    def test_get_missing(self):
        assert InMemoryObstacleRepository().get("missing") is None

    def test_put_replaces(self):
        repository = InMemoryObstacleRepository([_make_obstacle("a")])
        replacement = _make_obstacle("a", latitude=1.0)
        repository.put(replacement)
        assert repository.get("a") == replacement
        assert len(repository) == 1

    def test_delete(self):
        repository = InMemoryObstacleRepository([_make_obstacle("a")])
        assert repository.delete("a") is True
        assert repository.delete("a") is False

    @pytest.mark.asyncio
    async def test_area_query_filters_by_radius(self):
        near = _make_obstacle("near", 0.001, 0)
        far = _make_obstacle("far", 0.01, 0)
        repository = InMemoryObstacleRepository([near, far])
        result = await repository.get_obstacles_in_area(Location(latitude=0, longitude=0), 0.3)
        assert result == [near]

    @pytest.mark.asyncio
    async def test_area_query_insertion_order(self):
        obstacles = [_make_obstacle("b"), _make_obstacle("a")]
        repository = InMemoryObstacleRepository(obstacles)
        result = await repository.get_obstacles_in_area(Location(latitude=0, longitude=0), 1)
        assert [obstacle.id for obstacle in result] == ["b", "a"]

    @pytest.mark.asyncio
    async def test_rejects_non_positive_radius(self):
        repository = InMemoryObstacleRepository()
        with pytest.raises(ValidationError):
            await repository.get_obstacles_in_area(Location(latitude=0, longitude=0), 0)
