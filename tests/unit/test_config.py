"""Tests for application configuration."""

import pytest
from pydantic import ValidationError

from accessroute.config import Settings, get_settings


class TestSettingsDefaults:
    def test_default_service_name(self):
        settings = Settings()
        assert settings.service_name == "accessroute"

    def test_default_log_level(self):
        settings = Settings()
        assert settings.log_level == "INFO"

    def test_default_association_buffer(self):
        settings = Settings()
        assert settings.association_buffer_meters == 50.0

    def test_default_obstacle_sampling(self):
        settings = Settings()
        assert settings.obstacle_sample_points == 3
        assert settings.obstacle_search_radius_km == 0.3

    def test_default_alert_timings(self):
        settings = Settings()
        assert settings.alert_cooldown_seconds == 12.0
        assert settings.alert_stale_seconds == 30.0
        assert settings.alert_pause_seconds == 0.5
        assert settings.alert_interrupt_pause_seconds == 0.2

    def test_default_memory_bounds(self):
        settings = Settings()
        assert settings.memory_expiry_seconds == 120.0
        assert settings.memory_max_entries == 50

    def test_default_detector(self):
        settings = Settings()
        assert settings.detection_radius_meters == 100.0
        assert settings.route_tolerance_meters == 15.0
        assert settings.max_alerts == 2

    def test_safety_first_by_default(self):
        settings = Settings()
        assert settings.safety_first_alerts is True


class TestSettingsFromEnvironment:
    def test_prefixed_variable(self, monkeypatch):
        monkeypatch.setenv("ACCESSROUTE_ASSOCIATION_BUFFER_METERS", "75")
        settings = Settings()
        assert settings.association_buffer_meters == 75.0

    def test_unprefixed_variable_ignored(self, monkeypatch):
        monkeypatch.setenv("ASSOCIATION_BUFFER_METERS", "75")
        settings = Settings()
        assert settings.association_buffer_meters == 50.0

    def test_boolean_flag(self, monkeypatch):
        monkeypatch.setenv("ACCESSROUTE_SAFETY_FIRST_ALERTS", "false")
        settings = Settings()
        assert settings.safety_first_alerts is False

    def test_log_level_normalized(self, monkeypatch):
        monkeypatch.setenv("ACCESSROUTE_LOG_LEVEL", "debug")
        settings = Settings()
        assert settings.log_level == "DEBUG"


class TestSettingsValidation:
    def test_invalid_log_level(self):
        with pytest.raises(ValidationError, match="log_level"):
            Settings(log_level="VERBOSE")

    def test_max_alerts_upper_bound(self):
        with pytest.raises(ValidationError):
            Settings(max_alerts=50)

    def test_buffer_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(association_buffer_meters=0)


class TestGetSettings:
    def test_returns_settings(self):
        assert isinstance(get_settings(), Settings)

    def test_is_cached(self):
        assert get_settings() is get_settings()
