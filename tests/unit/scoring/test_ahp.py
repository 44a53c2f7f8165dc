"""Tests for the AHP accessibility calculator."""

import logging
from datetime import UTC, datetime

import pytest

from accessroute.exceptions import ScoringError
from accessroute.geometry.models import Location
from accessroute.obstacles.models import Obstacle, ObstacleType, Severity, TimePattern
from accessroute.profiles.models import DeviceType, MobilityProfile
from accessroute.scoring import ahp
from accessroute.scoring.ahp import (
    AHPCalculator,
    AHPWeights,
    Shade,
    SidewalkConditions,
    Surface,
    conditions_for,
)


def _make_obstacle(
    obstacle_type: ObstacleType,
    severity: Severity = Severity.MEDIUM,
    time_pattern: TimePattern = TimePattern.PERMANENT,
) -> Obstacle:
    return Obstacle(
        id=f"{obstacle_type}-{severity}",
        type=obstacle_type,
        severity=severity,
        location=Location(latitude=0, longitude=0),
        reported_at=datetime(2025, 6, 1, tzinfo=UTC),
        time_pattern=time_pattern,
    )


class TestObstaclePenalty:
    def test_device_and_active_multipliers(self, now):
        calculator = AHPCalculator()
        obstacle = _make_obstacle(ObstacleType.BROKEN_PAVEMENT)
        profile = MobilityProfile.for_device(DeviceType.WHEELCHAIR)
        # 20 * 1.0 * 1.6 * 1.2
        assert calculator.obstacle_penalty(obstacle, profile, now) == 38

    def test_inactive_obstacle(self, now):
        calculator = AHPCalculator()
        obstacle = _make_obstacle(ObstacleType.BROKEN_PAVEMENT, time_pattern=TimePattern.AFTERNOON)
        profile = MobilityProfile.for_device(DeviceType.WHEELCHAIR)
        assert calculator.obstacle_penalty(obstacle, profile, now) == 32

    def test_crowd_aversion(self, now):
        calculator = AHPCalculator()
        obstacle = _make_obstacle(ObstacleType.VENDOR_BLOCKING)
        wheelchair = MobilityProfile.for_device(DeviceType.WHEELCHAIR)
        walker = MobilityProfile.for_device(DeviceType.WALKER)
        # 15 * 1.3 * 1.5 * 1.2 and 15 * 1.2 * 1.2
        assert calculator.obstacle_penalty(obstacle, wheelchair, now) == 35
        assert calculator.obstacle_penalty(obstacle, walker, now) == 22

    def test_missing_device_multiplier_is_neutral(self, now):
        calculator = AHPCalculator()
        obstacle = _make_obstacle(ObstacleType.TREE_ROOTS, time_pattern=TimePattern.AFTERNOON)
        profile = MobilityProfile.for_device(DeviceType.WHEELCHAIR)
        assert calculator.obstacle_penalty(obstacle, profile, now) == 18

    def test_unscorable_obstacle(self, now, monkeypatch):
        monkeypatch.delitem(ahp._BASE_PENALTIES, ObstacleType.OTHER)
        with pytest.raises(ScoringError) as exc_info:
            AHPCalculator().obstacle_penalty(
                _make_obstacle(ObstacleType.OTHER), MobilityProfile.for_device("none"), now
            )
        assert exc_info.value.context["obstacle_id"] == "other-medium"


class TestCalculate:
    def test_no_obstacles(self, now):
        result = AHPCalculator().calculate(SidewalkConditions(), MobilityProfile.for_device("none"), now=now)
        assert result.traversability == 100
        assert result.safety == 85
        assert result.comfort == 100
        assert result.overall == pytest.approx(97)

    def test_single_obstacle(self, now):
        obstacle = _make_obstacle(ObstacleType.BROKEN_PAVEMENT, time_pattern=TimePattern.AFTERNOON)
        result = AHPCalculator().calculate(
            conditions_for([obstacle]),
            MobilityProfile.for_device(DeviceType.WHEELCHAIR),
            now=now,
        )
        assert result.traversability == 68
        assert result.safety == 65
        assert result.comfort == 80
        assert result.adjustment == 0
        assert result.overall == pytest.approx(68.6)

    def test_scores_clamped(self, now):
        obstacles = tuple(_make_obstacle(ObstacleType.STAIRS_NO_RAMP, Severity.BLOCKING) for _ in range(3))
        result = AHPCalculator().calculate(
            SidewalkConditions(obstacles=obstacles, surface=Surface.BROKEN),
            MobilityProfile.for_device(DeviceType.WHEELCHAIR),
            now=now,
        )
        assert result.traversability == 0
        assert 0 <= result.overall <= 100

    def test_narrow_sidewalk(self, now):
        result = AHPCalculator().calculate(
            SidewalkConditions(width=0.5),
            MobilityProfile.for_device(DeviceType.WHEELCHAIR),
            now=now,
        )
        assert result.traversability == pytest.approx(92)

    def test_wheelchair_ramp_adjustment(self, now):
        result = AHPCalculator().calculate(
            SidewalkConditions(has_ramp=True, has_handrails=True, shade=Shade.COVERED),
            MobilityProfile.for_device(DeviceType.WHEELCHAIR),
            now=now,
        )
        assert result.adjustment == 11

    def test_short_walk_adjustment(self, now):
        obstacles = tuple(
            _make_obstacle(ObstacleType.OTHER, Severity.LOW, TimePattern.AFTERNOON) for _ in range(3)
        )
        result = AHPCalculator().calculate(
            SidewalkConditions(obstacles=obstacles),
            MobilityProfile.for_device(DeviceType.WALKER),
            now=now,
        )
        assert result.adjustment == -5


class TestWeights:
    def test_defaults(self):
        weights = AHPCalculator().weights
        assert (weights.traversability, weights.safety, weights.comfort) == (0.7, 0.2, 0.1)

    def test_update(self):
        calculator = AHPCalculator()
        calculator.update_weights(AHPWeights(0.5, 0.3, 0.2))
        assert calculator.weights.safety == 0.3

    def test_warns_when_not_normalized(self, caplog):
        calculator = AHPCalculator()
        with caplog.at_level(logging.WARNING, logger="accessroute.scoring.ahp"):
            calculator.update_weights(AHPWeights(0.5, 0.5, 0.5))
        assert "sum to 1.500" in caplog.text
        assert calculator.weights.total == 1.5
