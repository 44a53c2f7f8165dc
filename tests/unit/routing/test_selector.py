"""Tests for route scoring and selection."""

from datetime import UTC, datetime
from typing import Any

import pytest

from accessroute.config import Settings
from accessroute.exceptions import NoRouteAvailableError
from accessroute.geometry.models import Location
from accessroute.obstacles.models import Obstacle, ObstacleType, Severity
from accessroute.profiles.models import DeviceType, MobilityProfile
from accessroute.routing.alternatives import ACCESSIBLE_ROUTE_ID, SAFER_ROUTE_ID
from accessroute.routing.models import CandidateRoute, RouteOrigin, RouteStrategy
from accessroute.routing.selector import (
    RouteSelector,
    deduplicate_routes,
    is_duplicate,
    is_generated,
    route_warnings,
    select_routes,
)
from accessroute.scoring.models import Grade, ScoringMethod


def _make_route(
    route_id: str,
    distance: float,
    duration: float,
    latitude: float = 0.0,
    **overrides: Any,
) -> CandidateRoute:
    return CandidateRoute(
        id=route_id,
        polyline=(Location(latitude=latitude, longitude=0), Location(latitude=latitude, longitude=0.01)),
        distance=distance,
        duration=duration,
        **overrides,
    )


def _make_obstacle(
    obstacle_id: str,
    obstacle_type: ObstacleType = ObstacleType.STAIRS_NO_RAMP,
    severity: Severity = Severity.BLOCKING,
    latitude: float = 0.0,
) -> Obstacle:
    return Obstacle(
        id=obstacle_id,
        type=obstacle_type,
        severity=severity,
        location=Location(latitude=latitude, longitude=0.005),
        reported_at=datetime(2025, 6, 1, tzinfo=UTC),
    )


@pytest.fixture
def wheelchair():
    return MobilityProfile.for_device(DeviceType.WHEELCHAIR)


class TestIsDuplicate:
    def test_close_routes(self):
        assert is_duplicate(_make_route("a", 1000, 600), _make_route("b", 1050, 630)) is True

    def test_distance_differs(self):
        assert is_duplicate(_make_route("a", 1000, 600), _make_route("b", 1100, 630)) is False

    def test_duration_differs(self):
        assert is_duplicate(_make_route("a", 1000, 600), _make_route("b", 1050, 660)) is False


class TestDeduplicateRoutes:
    def test_keeps_first(self):
        routes = [_make_route("a", 1000, 600), _make_route("b", 1010, 610), _make_route("c", 2000, 1200)]
        assert [route.id for route in deduplicate_routes(routes)] == ["a", "c"]


class TestIsGenerated:
    def test_provider_route(self):
        assert is_generated(_make_route("a", 1000, 720)) is False

    def test_fallback_route(self):
        assert is_generated(_make_route("a", 1000, 720, origin=RouteOrigin.FALLBACK)) is False

    def test_synthetic_route(self):
        assert is_generated(_make_route("a", 1000, 720, origin=RouteOrigin.SYNTHETIC)) is True

    def test_strategy_tagged_route(self):
        route = _make_route("a", 1000, 720, strategy=RouteStrategy.SAFER_MAIN_ROADS)
        assert is_generated(route) is True


class TestRouteWarnings:
    def test_first_three_relevant(self, wheelchair):
        obstacles = [
            _make_obstacle("1", ObstacleType.VENDOR_BLOCKING),
            _make_obstacle("2", ObstacleType.STAIRS_NO_RAMP),
            _make_obstacle("3", ObstacleType.FLOODING, Severity.HIGH),
            _make_obstacle("4", ObstacleType.NARROW_PASSAGE, Severity.LOW),
            _make_obstacle("5", ObstacleType.BROKEN_PAVEMENT, Severity.MEDIUM),
        ]
        assert route_warnings(obstacles, wheelchair) == (
            "stairs no ramp: blocking",
            "flooding: high",
            "narrow passage: low",
        )


class TestScoreRoute:
    def test_associates_nearby_obstacles(self, wheelchair, now):
        route = _make_route("a", 1000, 600)
        pool = [_make_obstacle("near"), _make_obstacle("far", latitude=0.01)]
        scored = RouteSelector(Settings()).score_route(route, pool, wheelchair, now=now)
        assert [obstacle.id for obstacle in scored.obstacles] == ["near"]
        assert scored.obstacle_count == 1
        assert scored.score.method is ScoringMethod.AHP
        assert scored.warnings == ("stairs no ramp: blocking",)

    def test_buffer_override(self, wheelchair, now):
        route = _make_route("a", 1000, 600)
        pool = [_make_obstacle("far", latitude=0.001)]
        selector = RouteSelector(Settings())
        assert selector.score_route(route, pool, wheelchair, now=now).obstacle_count == 0
        assert selector.score_route(route, pool, wheelchair, now=now, buffer_meters=150).obstacle_count == 1

    def test_optimized_route_is_strategic(self, wheelchair, now):
        route = _make_route("a", 1000, 600, strategy=RouteStrategy.SIDEWALK_OPTIMIZED)
        scored = RouteSelector(Settings()).score_route(route, [], wheelchair, now=now)
        assert scored.score.overall == 99


class TestSelect:
    def test_empty_candidates(self, wheelchair):
        with pytest.raises(NoRouteAvailableError):
            RouteSelector(Settings()).select([], [], wheelchair)

    def test_single_route_gets_alternatives(self, wheelchair, now):
        selection = RouteSelector(Settings()).select([_make_route("a", 1000, 720)], [], wheelchair, now=now)
        assert [item.route.id for item in selection.routes] == ["a", ACCESSIBLE_ROUTE_ID, SAFER_ROUTE_ID]
        assert selection.fastest.route.id == "a"
        assert selection.accessible.route.id == ACCESSIBLE_ROUTE_ID

    def test_duplicates_collapse_before_alternatives(self, wheelchair, now):
        candidates = [_make_route("a", 1000, 720), _make_route("b", 1020, 730)]
        selection = RouteSelector(Settings()).select(candidates, [], wheelchair, now=now)
        assert len(selection.routes) == 3
        assert "b" not in [item.route.id for item in selection.routes]

    def test_generated_route_close_to_provider_route_kept(self, wheelchair, now):
        base = _make_route("provider-1", 1000, 720)
        optimized = _make_route(
            "provider-1_optimized",
            1050,
            750,
            origin=RouteOrigin.SYNTHETIC,
            strategy=RouteStrategy.SIDEWALK_OPTIMIZED,
            avoided_obstacle_ids=frozenset({"stairs"}),
        )
        selection = RouteSelector(Settings()).select([base, optimized], [_make_obstacle("stairs")], wheelchair, now=now)
        assert [item.route.id for item in selection.routes] == ["provider-1", "provider-1_optimized"]
        assert selection.accessible.route.id == "provider-1_optimized"

    def test_blocked_fastest_route(self, wheelchair, now):
        selection = RouteSelector(Settings()).select(
            [_make_route("a", 1000, 720)],
            [_make_obstacle("stairs")],
            wheelchair,
            now=now,
        )
        assert selection.fastest.score.grade is Grade.F
        assert selection.accessible.route.id == ACCESSIBLE_ROUTE_ID
        assert selection.accessible.obstacle_count == 0
        assert selection.comparison.time_difference == 180
        assert selection.comparison.accessibility_improvement == pytest.approx(
            selection.accessible.score.overall - selection.fastest.score.overall, abs=0.05
        )
        assert selection.comparison.recommendation == (
            "For wheelchair users: Take the 3-minute accessible route - "
            "the faster route has stairs that block passage (Grade A)"
        )

    def test_distinct_provider_routes(self, wheelchair, now):
        fast = _make_route("fast", 1000, 600)
        clean = _make_route("clean", 1400, 900, latitude=0.01)
        selection = RouteSelector(Settings()).select([fast, clean], [_make_obstacle("stairs")], wheelchair, now=now)
        assert len(selection.routes) == 2
        assert selection.fastest.route.id == "fast"
        assert selection.accessible.route.id == "clean"
        assert selection.comparison.distance_difference == 400

    def test_fastest_is_also_most_accessible(self, wheelchair, now):
        clean = _make_route("clean", 1000, 600)
        slow = _make_route("slow", 1400, 900, latitude=0.01)
        pool = [_make_obstacle("stairs", latitude=0.01)]
        selection = RouteSelector(Settings()).select([clean, slow], pool, wheelchair, now=now)
        assert selection.fastest.route.id == "clean"
        assert selection.accessible.route.id == "slow"

    def test_prefers_optimized_runner_up(self, wheelchair, now):
        clean = _make_route("clean", 1000, 600)
        plain = _make_route("plain", 1400, 900, latitude=0.01)
        optimized = _make_route(
            "optimized",
            2000,
            1300,
            latitude=0.02,
            strategy=RouteStrategy.ACCESSIBILITY_OPTIMIZED,
        )
        pool = [_make_obstacle("stairs", latitude=0.02)]
        selection = RouteSelector(Settings()).select([clean, plain, optimized], pool, wheelchair, now=now)
        assert selection.accessible.route.id == "optimized"

    def test_parallel_matches_sequential(self, wheelchair, now):
        candidates = [_make_route("fast", 1000, 600), _make_route("clean", 1400, 900, latitude=0.01)]
        pool = [_make_obstacle("stairs")]
        selector = RouteSelector(Settings(scoring_workers=2))
        sequential = selector.select(candidates, pool, wheelchair, now=now, parallel=False)
        parallel = selector.select(candidates, pool, wheelchair, now=now, parallel=True)
        assert parallel == sequential


class TestSelectRoutes:
    def test_uses_settings_from_environment(self, monkeypatch, wheelchair, now):
        monkeypatch.setenv("ACCESSROUTE_DUPLICATE_DISTANCE_METERS", "0")
        monkeypatch.setenv("ACCESSROUTE_DUPLICATE_DURATION_SECONDS", "0")
        candidates = [_make_route("a", 1000, 720), _make_route("b", 1020, 730)]
        selection = select_routes(candidates, [], wheelchair, now=now)
        assert [item.route.id for item in selection.routes] == ["a", "b"]
