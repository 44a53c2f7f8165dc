"""End-to-end trip: plan, refine at sidewalk level, then announce obstacles en route."""

from datetime import UTC, datetime

import pytest

from accessroute.alerts.detector import ProximityDetector
from accessroute.alerts.queue import ProximityAlertQueue
from accessroute.alerts.speech import PacedSpeechChannel
from accessroute.config import Settings
from accessroute.geometry.models import Location
from accessroute.logging.context import get_trip_id
from accessroute.obstacles.datastore import InMemoryObstacleRepository
from accessroute.obstacles.models import Obstacle, ObstacleType, Severity
from accessroute.profiles.models import DeviceType, MobilityProfile
from accessroute.routing.alternatives import ACCESSIBLE_ROUTE_ID
from accessroute.routing.models import CandidateRoute, RouteStrategy
from accessroute.routing.provider import plan_trip
from accessroute.routing.selector import RouteSelector
from accessroute.scoring.models import Grade
from accessroute.sidewalk.models import CrossingKind, CrossingPoint, CrossingRating, StreetSide
from accessroute.sidewalk.optimizer import SidewalkOptimizer, apply_sidewalk_mapping, to_candidate_route

ORIGIN = Location(latitude=14.6, longitude=120.980)
MIDPOINT = Location(latitude=14.6, longitude=120.985)
DESTINATION = Location(latitude=14.6, longitude=120.990)


class _SingleRouteProvider:
    async def get_routes(self, origin, destination, *, alternatives):
        return [
            CandidateRoute(
                id="provider-1",
                summary="Rizal Ave",
                polyline=(origin, MIDPOINT, destination),
                distance=1076,
                duration=900,
            )
        ]


def _stairs():
    return Obstacle(
        id="stairs-1",
        type=ObstacleType.STAIRS_NO_RAMP,
        severity=Severity.MEDIUM,
        location=Location(latitude=14.6, longitude=120.9825),
        reported_at=datetime(2025, 6, 1, tzinfo=UTC),
        upvotes=4,
    )


@pytest.fixture
def wheelchair():
    return MobilityProfile.for_device(DeviceType.WHEELCHAIR)


class TestTripPlanning:
    @pytest.mark.asyncio
    async def test_plan_trip_offers_accessible_alternative(self, wheelchair, now):
        repository = InMemoryObstacleRepository([_stairs()])
        selection = await plan_trip(
            _SingleRouteProvider(),
            repository,
            ORIGIN,
            DESTINATION,
            wheelchair,
            settings=Settings(),
            now=now,
        )

        assert selection.fastest.route.id == "provider-1"
        assert selection.fastest.obstacle_count == 1
        assert selection.fastest.score.grade is Grade.F
        assert selection.accessible.route.id == ACCESSIBLE_ROUTE_ID
        assert selection.accessible.obstacle_count == 0
        assert selection.comparison.recommendation.startswith("For wheelchair users: Take the")
        assert len(selection.routes) == 3
        assert get_trip_id() == ""

    @pytest.mark.asyncio
    async def test_sidewalk_refinement_competes_in_selection(self, wheelchair, now):
        stairs = apply_sidewalk_mapping(_stairs(), "Rizal Ave", StreetSide.NORTH)
        settings = Settings()
        selection = await plan_trip(
            _SingleRouteProvider(),
            InMemoryObstacleRepository([stairs]),
            ORIGIN,
            DESTINATION,
            wheelchair,
            settings=settings,
            now=now,
        )
        base = selection.fastest.route

        crossing = CrossingPoint(
            id="crossing-1",
            location=Location(latitude=14.6, longitude=120.983),
            kind=CrossingKind.TRAFFIC_LIGHT,
            ratings={DeviceType.WHEELCHAIR: CrossingRating.ACCESSIBLE},
        )
        result = SidewalkOptimizer([crossing]).optimize(base, selection.fastest.obstacles, wheelchair, now=now)
        assert result.comparison.crossing_count == 1
        assert result.comparison.obstacle_reduction == 1

        optimized = to_candidate_route(base, result)
        reselection = RouteSelector(settings).select([base, optimized], [stairs], wheelchair, now=now)
        assert reselection.fastest.route.id == "provider-1"
        assert reselection.accessible.route.id == optimized.id
        assert reselection.accessible.route.strategy is RouteStrategy.SIDEWALK_OPTIMIZED
        assert reselection.accessible.obstacle_count == 0

    @pytest.mark.asyncio
    async def test_obstacle_announced_when_approached(self, wheelchair):
        settings = Settings()
        pool = [_stairs()]
        polyline = (ORIGIN, MIDPOINT, DESTINATION)
        detector = ProximityDetector(settings)
        channel = PacedSpeechChannel(words_per_second=1000)
        queue = ProximityAlertQueue(channel, wheelchair, settings=settings)

        assert detector.detect(ORIGIN, polyline, pool, wheelchair) == []

        approaching = Location(latitude=14.6, longitude=120.982)
        alerts = detector.detect(approaching, polyline, pool, wheelchair)
        assert [alert.obstacle.id for alert in alerts] == ["stairs-1"]

        assert queue.observe_alerts(alerts) == 1
        await queue.wait_idle()
        assert len(channel.spoken) == 1
        assert channel.spoken[0].startswith("Stairs without ramp in")

        assert queue.observe_alerts(alerts) == 0
        await queue.close()
