"""Route-level accessibility scoring.

Layers, in order:

1. Obstacles are filtered to those relevant to the traveler's device.
2. No relevant obstacles yields a fixed baseline score.
3. Otherwise the AHP calculator scores the route.
4. If the AHP computation fails, a severity-count heuristic is used instead.

The engine never raises to its caller.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from accessroute.obstacles.models import Severity
from accessroute.obstacles.relevance import filter_relevant
from accessroute.scoring.ahp import AHPCalculator, AHPWeights, conditions_for
from accessroute.scoring.models import AccessibilityScore, Grade, ScoringMethod

if TYPE_CHECKING:
    from collections.abc import Sequence

    from accessroute.obstacles.models import Obstacle
    from accessroute.profiles.models import MobilityProfile

logger = logging.getLogger(__name__)

# Baseline for a route with no relevant obstacles
_BASELINE_TRAVERSABILITY: float = 95.0
_BASELINE_SAFETY: float = 95.0
_BASELINE_COMFORT: float = 90.0
_BASELINE_OVERALL: float = 94.0
_BASELINE_STRATEGIC_BONUS: float = 5.0

_AHP_STRATEGIC_BONUS: float = 10.0

# Obstacle density penalties
_HIGH_DENSITY_COUNT: int = 30
_HIGH_DENSITY_PENALTY: float = 15.0
_MEDIUM_DENSITY_COUNT: int = 20
_MEDIUM_DENSITY_PENALTY: float = 8.0

# Heuristic fallback
_HEURISTIC_BASE: float = 75.0
_HEURISTIC_BLOCKING_PENALTY: float = 15.0
_HEURISTIC_HIGH_PENALTY: float = 8.0
_HEURISTIC_MEDIUM_PENALTY: float = 3.0
_HEURISTIC_MEDIUM_CAP: float = 30.0
_HEURISTIC_LOW_PENALTY: float = 1.0
_HEURISTIC_LOW_CAP: float = 15.0
_HEURISTIC_STRATEGIC_BONUS: float = 15.0
_HEURISTIC_MAX_OVERALL: float = 90.0
_FLOOR_MANY_BLOCKING: float = 25.0
_FLOOR_MANY_HIGH: float = 35.0
_FLOOR_DEFAULT: float = 50.0
_MANY_BLOCKING_COUNT: int = 5
_MANY_HIGH_COUNT: int = 10


def density_penalty(obstacle_count: int) -> float:
    """Overall-score penalty for obstacle-dense routes."""
    if obstacle_count > _HIGH_DENSITY_COUNT:
        return _HIGH_DENSITY_PENALTY
    if obstacle_count > _MEDIUM_DENSITY_COUNT:
        return _MEDIUM_DENSITY_PENALTY
    return 0.0


def _finalize(
    traversability: float,
    safety: float,
    comfort: float,
    overall: float,
    adjustment: float,
    method: ScoringMethod,
) -> AccessibilityScore:
    def clean(value: float) -> float:
        return round(max(0.0, min(100.0, value)), 1)

    overall = clean(overall)
    return AccessibilityScore(
        traversability=clean(traversability),
        safety=clean(safety),
        comfort=clean(comfort),
        overall=overall,
        grade=Grade.from_score(overall),
        user_specific_adjustment=round(adjustment, 1),
        method=method,
    )


class AccessibilityScoringEngine:
    """Profile-conditioned route scorer with a heuristic fallback."""

    def __init__(self, calculator: AHPCalculator | None = None) -> None:
        self._calculator = calculator or AHPCalculator()

    @property
    def weights(self) -> AHPWeights:
        return self._calculator.weights

    def update_weights(self, weights: AHPWeights) -> None:
        self._calculator.update_weights(weights)

    def score(
        self,
        obstacles: Sequence[Obstacle],
        profile: MobilityProfile,
        *,
        strategic: bool = False,
        now: datetime | None = None,
    ) -> AccessibilityScore:
        """Score a route's obstacles for ``profile``.

        Args:
            obstacles: Obstacles associated with the route.
            profile: Traveler's mobility profile.
            strategic: Whether the route is an accessibility-optimized alternative.
            now: Evaluation time for time-of-day obstacle activity.

        Returns:
            Score with every part clamped to 0-100 and rounded to one decimal.
        """
        relevant = filter_relevant(list(obstacles), profile)
        if not relevant:
            return self._baseline(strategic=strategic)

        try:
            return self._ahp(relevant, profile, strategic=strategic, now=now or datetime.now(UTC))
        except Exception:
            logger.exception(
                "AHP scoring failed for %d obstacles, using heuristic",
                len(relevant),
                extra={"device": profile.device.value},
            )
            return self.heuristic(relevant, strategic=strategic)

    def _baseline(self, *, strategic: bool) -> AccessibilityScore:
        bonus = _BASELINE_STRATEGIC_BONUS if strategic else 0.0
        return _finalize(
            _BASELINE_TRAVERSABILITY + bonus,
            _BASELINE_SAFETY + bonus,
            _BASELINE_COMFORT + bonus,
            _BASELINE_OVERALL + bonus,
            bonus,
            ScoringMethod.BASELINE,
        )

    def _ahp(
        self,
        obstacles: list[Obstacle],
        profile: MobilityProfile,
        *,
        strategic: bool,
        now: datetime,
    ) -> AccessibilityScore:
        result = self._calculator.calculate(conditions_for(obstacles), profile, now=now)
        bonus = _AHP_STRATEGIC_BONUS if strategic else 0.0
        overall = result.overall - density_penalty(len(obstacles))
        return _finalize(
            result.traversability + bonus,
            result.safety + bonus,
            result.comfort + bonus,
            overall + bonus,
            result.adjustment + bonus,
            ScoringMethod.AHP,
        )

    def heuristic(self, obstacles: Sequence[Obstacle], *, strategic: bool = False) -> AccessibilityScore:
        """Severity-count score used when the AHP computation fails."""
        counts = {severity: 0 for severity in Severity}
        for obstacle in obstacles:
            counts[obstacle.severity] += 1

        penalty = (
            counts[Severity.BLOCKING] * _HEURISTIC_BLOCKING_PENALTY
            + counts[Severity.HIGH] * _HEURISTIC_HIGH_PENALTY
            + min(counts[Severity.MEDIUM] * _HEURISTIC_MEDIUM_PENALTY, _HEURISTIC_MEDIUM_CAP)
            + min(counts[Severity.LOW] * _HEURISTIC_LOW_PENALTY, _HEURISTIC_LOW_CAP)
        )

        if counts[Severity.BLOCKING] > _MANY_BLOCKING_COUNT:
            floor = _FLOOR_MANY_BLOCKING
        elif counts[Severity.HIGH] > _MANY_HIGH_COUNT:
            floor = _FLOOR_MANY_HIGH
        else:
            floor = _FLOOR_DEFAULT

        penalized = max(floor, _HEURISTIC_BASE - penalty - density_penalty(len(obstacles)))
        bonus = _HEURISTIC_STRATEGIC_BONUS if strategic else 0.0
        overall = min(_HEURISTIC_MAX_OVERALL, penalized + bonus)

        return _finalize(
            max(floor, overall - 3),
            max(floor, overall - 2),
            max(floor - 5, overall - 8),
            overall,
            bonus,
            ScoringMethod.HEURISTIC,
        )


_default_engine = AccessibilityScoringEngine()


def score_obstacles(
    obstacles: Sequence[Obstacle],
    profile: MobilityProfile,
    *,
    strategic: bool = False,
    now: datetime | None = None,
) -> AccessibilityScore:
    """Score with the module-level default engine."""
    return _default_engine.score(obstacles, profile, strategic=strategic, now=now)
