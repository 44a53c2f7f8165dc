"""Score candidate routes and select the fastest and most accessible pair."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from accessroute.config import Settings, get_settings
from accessroute.exceptions import NoRouteAvailableError
from accessroute.obstacles.association import obstacles_near_route
from accessroute.obstacles.relevance import filter_relevant
from accessroute.routing.alternatives import strategic_alternatives, suppress_obstacles
from accessroute.routing.models import RouteComparison, RouteOrigin, RouteSelection, RouteStrategy, ScoredRoute
from accessroute.routing.recommendation import recommend
from accessroute.scoring.confidence import estimate_confidence
from accessroute.scoring.engine import AccessibilityScoringEngine
from accessroute.scoring.models import RecommendationCategory

if TYPE_CHECKING:
    from collections.abc import Sequence

    from accessroute.obstacles.models import Obstacle
    from accessroute.profiles.models import MobilityProfile
    from accessroute.routing.models import CandidateRoute

logger = logging.getLogger(__name__)

_MAX_WARNINGS: int = 3
_ACCESSIBILITY_OPTIMIZED_BONUS: float = 5.0


def is_duplicate(
    first: CandidateRoute,
    second: CandidateRoute,
    *,
    distance_meters: float = 100.0,
    duration_seconds: float = 60.0,
) -> bool:
    """Whether two routes are too similar in length and time to both be offered."""
    return (
        abs(first.distance - second.distance) < distance_meters
        and abs(first.duration - second.duration) < duration_seconds
    )


def is_generated(route: CandidateRoute) -> bool:
    """Whether the route was derived here rather than fetched from the provider."""
    return route.origin == RouteOrigin.SYNTHETIC or route.strategy != RouteStrategy.NONE


def deduplicate_routes(
    routes: Sequence[CandidateRoute],
    *,
    distance_meters: float = 100.0,
    duration_seconds: float = 60.0,
) -> list[CandidateRoute]:
    """Drop routes that duplicate an earlier one, keeping input order."""
    distinct: list[CandidateRoute] = []
    for route in routes:
        if not any(
            is_duplicate(route, kept, distance_meters=distance_meters, duration_seconds=duration_seconds)
            for kept in distinct
        ):
            distinct.append(route)
    return distinct


def route_warnings(obstacles: Sequence[Obstacle], profile: MobilityProfile) -> tuple[str, ...]:
    """Up to three warnings like ``stairs no ramp: blocking``."""
    return tuple(
        f"{obstacle.readable_type}: {obstacle.severity.value}"
        for obstacle in filter_relevant(list(obstacles), profile)[:_MAX_WARNINGS]
    )


class RouteSelector:
    """Scores candidates and picks a diverse fastest/accessible pair."""

    def __init__(
        self,
        settings: Settings | None = None,
        engine: AccessibilityScoringEngine | None = None,
    ) -> None:
        """Initialize the selector.

        Args:
            settings: Tunables; loaded from the environment if not provided.
            engine: Scoring engine; a default one is created if not provided.
        """
        self._settings = settings or get_settings()
        self._engine = engine or AccessibilityScoringEngine()

    def score_route(
        self,
        route: CandidateRoute,
        obstacle_pool: Sequence[Obstacle],
        profile: MobilityProfile,
        *,
        now: datetime,
        buffer_meters: float | None = None,
    ) -> ScoredRoute:
        """Associate, score and annotate one route."""
        buffer = buffer_meters if buffer_meters is not None else self._settings.association_buffer_meters
        nearby = suppress_obstacles(route, obstacles_near_route(route, obstacle_pool, buffer), profile)
        strategic = route.origin == RouteOrigin.SYNTHETIC or route.is_accessibility_optimized
        score = self._engine.score(nearby, profile, strategic=strategic, now=now)

        return ScoredRoute(
            route=route,
            score=score,
            confidence=estimate_confidence(nearby, now),
            obstacles=tuple(nearby),
            obstacle_count=len(nearby),
            warnings=route_warnings(nearby, profile),
            recommendation=RecommendationCategory.from_score(score.overall),
        )

    def select(
        self,
        candidates: Sequence[CandidateRoute],
        obstacle_pool: Sequence[Obstacle],
        profile: MobilityProfile,
        *,
        now: datetime | None = None,
        buffer_meters: float | None = None,
        parallel: bool | None = None,
    ) -> RouteSelection:
        """Score every candidate and select the fastest and accessible routes.

        Args:
            candidates: Routes from the provider, possibly including a fallback.
            obstacle_pool: Obstacles fetched around all candidates.
            profile: Traveler's mobility profile.
            now: Evaluation time. Defaults to the current UTC time.
            buffer_meters: Association buffer; defaults to the configured one.
            parallel: Score in a thread pool; defaults to the configured flag.

        Returns:
            The selected pair, their comparison, and every scored route.

        Raises:
            NoRouteAvailableError: If there are no candidates.
        """
        if not candidates:
            raise NoRouteAvailableError("No candidate routes to select from", context={"candidates": 0})

        now = now or datetime.now(UTC)
        routes = self._distinct_routes(candidates)
        if len(routes) < 2:
            logger.info("Only %d distinct route(s), adding strategic alternatives", len(routes))
            routes = routes + strategic_alternatives(routes[0], profile)

        scored = self._score_all(routes, obstacle_pool, profile, now, buffer_meters, parallel)

        fastest = min(scored, key=lambda item: item.route.duration)
        accessible = max(scored, key=self._accessibility_rank)
        if accessible is fastest and len(scored) > 1:
            accessible = self._next_best(scored, fastest)

        time_difference = accessible.route.duration - fastest.route.duration
        improvement = round(accessible.score.overall - fastest.score.overall, 1)
        comparison = RouteComparison(
            time_difference=time_difference,
            distance_difference=accessible.route.distance - fastest.route.distance,
            accessibility_improvement=improvement,
            recommendation=recommend(fastest, accessible, time_difference, improvement, profile),
        )
        logger.info(
            "Selected fastest=%s (grade %s) accessible=%s (grade %s)",
            fastest.route.id,
            fastest.score.grade,
            accessible.route.id,
            accessible.score.grade,
            extra={"routes": len(scored), "device": profile.device.value},
        )
        return RouteSelection(fastest=fastest, accessible=accessible, comparison=comparison, routes=tuple(scored))

    def _distinct_routes(self, candidates: Sequence[CandidateRoute]) -> list[CandidateRoute]:
        """Drop provider duplicates; generated alternatives are always kept."""
        distinct: list[CandidateRoute] = []
        fetched: list[CandidateRoute] = []
        for route in candidates:
            if is_generated(route):
                distinct.append(route)
                continue
            if any(
                is_duplicate(
                    route,
                    kept,
                    distance_meters=self._settings.duplicate_distance_meters,
                    duration_seconds=self._settings.duplicate_duration_seconds,
                )
                for kept in fetched
            ):
                logger.debug("Dropping route %s: duplicates an earlier provider route", route.id)
                continue
            fetched.append(route)
            distinct.append(route)
        return distinct

    def _score_all(
        self,
        routes: list[CandidateRoute],
        obstacle_pool: Sequence[Obstacle],
        profile: MobilityProfile,
        now: datetime,
        buffer_meters: float | None,
        parallel: bool | None,
    ) -> list[ScoredRoute]:
        use_pool = self._settings.parallel_scoring if parallel is None else parallel
        if not use_pool or len(routes) < 2:
            return [
                self.score_route(route, obstacle_pool, profile, now=now, buffer_meters=buffer_meters)
                for route in routes
            ]

        with ThreadPoolExecutor(max_workers=self._settings.scoring_workers) as executor:
            futures = [
                executor.submit(
                    self.score_route,
                    route,
                    obstacle_pool,
                    profile,
                    now=now,
                    buffer_meters=buffer_meters,
                )
                for route in routes
            ]
            return [future.result() for future in futures]

    @staticmethod
    def _accessibility_rank(item: ScoredRoute) -> float:
        bonus = _ACCESSIBILITY_OPTIMIZED_BONUS if item.route.is_accessibility_optimized else 0.0
        return item.score.overall + bonus

    def _next_best(self, scored: list[ScoredRoute], fastest: ScoredRoute) -> ScoredRoute:
        others = [item for item in scored if item is not fastest]
        optimized = [item for item in others if item.route.is_accessibility_optimized]
        return max(optimized or others, key=self._accessibility_rank)


def select_routes(
    candidates: Sequence[CandidateRoute],
    obstacle_pool: Sequence[Obstacle],
    profile: MobilityProfile,
    *,
    now: datetime | None = None,
    buffer_meters: float | None = None,
    parallel: bool | None = None,
) -> RouteSelection:
    """Select routes with a selector built from the current settings."""
    return RouteSelector().select(
        candidates,
        obstacle_pool,
        profile,
        now=now,
        buffer_meters=buffer_meters,
        parallel=parallel,
    )
