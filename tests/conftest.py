"""Shared test fixtures."""

from datetime import UTC, datetime

import pytest

from accessroute.config import get_settings
from accessroute.logging.config import get_logging_config
from accessroute.logging.context import clear_context

# Wednesday, mid-morning
FIXED_NOW = datetime(2025, 6, 11, 9, 30, tzinfo=UTC)


@pytest.fixture(autouse=True)
def _clear_environment(monkeypatch):
    """Clear environment variables that affect settings."""
    env_vars_to_clear = [
        "SERVICE_NAME",
        "LOG_LEVEL",
        "LOG_FORMAT",
        "INCLUDE_TIMESTAMP",
        "INCLUDE_LOCATION",
        "LOG_COMPONENT_LEVELS",
        "COMPONENT_LEVELS",
        "ACCESSROUTE_SERVICE_NAME",
        "ACCESSROUTE_LOG_LEVEL",
        "ACCESSROUTE_ASSOCIATION_BUFFER_METERS",
        "ACCESSROUTE_OBSTACLE_SAMPLE_POINTS",
        "ACCESSROUTE_OBSTACLE_SEARCH_RADIUS_KM",
        "ACCESSROUTE_PARALLEL_SCORING",
        "ACCESSROUTE_ALERT_COOLDOWN_SECONDS",
        "ACCESSROUTE_SAFETY_FIRST_ALERTS",
        "ACCESSROUTE_MEMORY_MAX_ENTRIES",
        "ACCESSROUTE_MAX_ALERTS",
    ]
    for var in env_vars_to_clear:
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    get_logging_config.cache_clear()
    yield
    get_settings.cache_clear()
    get_logging_config.cache_clear()
    clear_context()


@pytest.fixture
def now() -> datetime:
    return FIXED_NOW
