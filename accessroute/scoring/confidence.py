"""Confidence in a route score, derived from the quality of its reports."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from accessroute.scoring.models import (
    ConfidenceFactors,
    DataFreshness,
    RouteConfidence,
    VerificationStatus,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from accessroute.obstacles.models import Obstacle

_EMPTY_ROUTE_CONFIDENCE: float = 70.0
_BASE_CONFIDENCE: float = 50.0
_MAX_CONFIDENCE: float = 100.0

_SECONDS_PER_DAY: int = 86_400
_HIGH_FRESHNESS_MAX_DAYS: float = 7
_MEDIUM_FRESHNESS_MAX_DAYS: float = 30
_FRESHNESS_BONUS: dict[DataFreshness, float] = {
    DataFreshness.HIGH: 35,
    DataFreshness.MEDIUM: 20,
    DataFreshness.LOW: 5,
}

_VERIFIED_RATIO: float = 0.7
_ESTIMATED_RATIO: float = 0.3
_VERIFICATION_BONUS: dict[VerificationStatus, float] = {
    VerificationStatus.VERIFIED: 25,
    VerificationStatus.ESTIMATED: 15,
    VerificationStatus.UNVERIFIED: 5,
}

_POINTS_PER_VOTE: float = 2
_MAX_VOTE_BONUS: float = 25
_POPULARITY_PER_REPORT: float = 2
_MAX_POPULARITY: float = 100
_MAX_POPULARITY_BONUS: float = 15


def _age_in_days(obstacle: Obstacle, now: datetime) -> int:
    return max(0, int((now - obstacle.reported_at).total_seconds() // _SECONDS_PER_DAY))


def _freshness(average_age: float) -> DataFreshness:
    if average_age <= _HIGH_FRESHNESS_MAX_DAYS:
        return DataFreshness.HIGH
    if average_age <= _MEDIUM_FRESHNESS_MAX_DAYS:
        return DataFreshness.MEDIUM
    return DataFreshness.LOW


def _verification(ratio: float) -> VerificationStatus:
    if ratio >= _VERIFIED_RATIO:
        return VerificationStatus.VERIFIED
    if ratio >= _ESTIMATED_RATIO:
        return VerificationStatus.ESTIMATED
    return VerificationStatus.UNVERIFIED


def estimate_confidence(obstacles: Sequence[Obstacle], now: datetime | None = None) -> RouteConfidence:
    """Estimate how trustworthy a route score built from ``obstacles`` is.

    Args:
        obstacles: Obstacles associated with the route.
        now: Reference time for report ages. Defaults to the current UTC time.

    Returns:
        Confidence with an overall 0-100 value and the factors behind it.
    """
    if not obstacles:
        return RouteConfidence(
            overall=_EMPTY_ROUTE_CONFIDENCE,
            data_freshness=DataFreshness.MEDIUM,
            community_validation=0,
            verification_status=VerificationStatus.ESTIMATED,
            last_verified=None,
            factors=ConfidenceFactors(
                obstacle_age=0,
                validation_count=0,
                verified_obstacles=0,
                route_popularity=0,
            ),
        )

    now = now or datetime.now(UTC)
    average_age = sum(_age_in_days(obstacle, now) for obstacle in obstacles) / len(obstacles)
    freshness = _freshness(average_age)

    votes = sum(obstacle.total_votes for obstacle in obstacles)
    verified = [obstacle for obstacle in obstacles if obstacle.verified]
    status = _verification(len(verified) / len(obstacles))
    popularity = min(len(obstacles) * _POPULARITY_PER_REPORT, _MAX_POPULARITY)
    last_verified = max((obstacle.reported_at for obstacle in verified), default=None)

    overall = (
        _BASE_CONFIDENCE
        + _FRESHNESS_BONUS[freshness]
        + _VERIFICATION_BONUS[status]
        + min(votes * _POINTS_PER_VOTE, _MAX_VOTE_BONUS)
        + min(popularity / 10, _MAX_POPULARITY_BONUS)
    )

    return RouteConfidence(
        overall=round(min(_MAX_CONFIDENCE, overall)),
        data_freshness=freshness,
        community_validation=votes,
        verification_status=status,
        last_verified=last_verified,
        factors=ConfidenceFactors(
            obstacle_age=round(average_age, 1),
            validation_count=votes,
            verified_obstacles=len(verified),
            route_popularity=popularity,
        ),
    )
