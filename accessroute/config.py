"""Application configuration using Pydantic BaseSettings.

All tunables are loaded from environment variables prefixed with
``ACCESSROUTE_``. Components take a ``Settings`` in their constructor and
fall back to ``get_settings()`` when none is given.

Usage:
    from accessroute.config import get_settings

    settings = get_settings()
    print(settings.association_buffer_meters)
    print(settings.alert_cooldown_seconds)
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Accessible routing settings loaded from environment variables.

    Attributes:
        service_name: Name of this service for logging.
        log_level: Logging level.
        association_buffer_meters: Max distance from a route for an obstacle to count.
        obstacle_sample_points: Points sampled per route when querying the datastore.
        obstacle_search_radius_km: Datastore search radius around each sample point.
        fallback_walking_speed_mps: Speed used to time the straight-line fallback route.
        duplicate_distance_meters: Routes closer than this in length are duplicates.
        duplicate_duration_seconds: Routes closer than this in duration are duplicates.
        parallel_scoring: Score candidate routes in a thread pool.
        scoring_workers: Thread pool size for parallel scoring.
        alert_cooldown_seconds: Window in which an unchanged obstacle is not re-announced.
        alert_distance_tolerance_meters: Distance change that allows re-announcement.
        alert_stale_seconds: Queued items older than this are discarded.
        alert_pause_seconds: Pause between announcements.
        alert_interrupt_pause_seconds: Pause after interrupting an utterance.
        memory_expiry_seconds: Announcement memory lifetime.
        memory_max_entries: Announcement memory capacity.
        memory_prune_movement_meters: User movement that triggers distance pruning.
        memory_prune_distance_meters: Obstacles farther than this are pruned.
        detection_radius_meters: Proximity detector search radius.
        route_tolerance_meters: Max distance of an obstacle from the active route.
        min_detection_movement_meters: Movement needed before detecting again.
        max_alerts: Max alerts returned per detection pass.
        safety_first_alerts: Announce every obstacle type regardless of profile.
    """

    model_config = SettingsConfigDict(
        env_prefix="ACCESSROUTE_",
        env_file=None,
        case_sensitive=False,
        extra="ignore",
        str_strip_whitespace=True,
    )

    # Service identification
    service_name: str = Field(default="accessroute", min_length=1)

    # Logging
    log_level: str = Field(default="INFO")

    # Obstacle association
    association_buffer_meters: float = Field(default=50.0, gt=0, le=1000)
    obstacle_sample_points: int = Field(default=3, ge=2, le=20)
    obstacle_search_radius_km: float = Field(default=0.3, gt=0, le=10)

    # Route acquisition and selection
    fallback_walking_speed_mps: float = Field(default=1.4, gt=0, le=5)
    duplicate_distance_meters: float = Field(default=100.0, ge=0)
    duplicate_duration_seconds: float = Field(default=60.0, ge=0)
    parallel_scoring: bool = Field(default=False)
    scoring_workers: int = Field(default=4, ge=1, le=32)

    # Alert queue
    alert_cooldown_seconds: float = Field(default=12.0, ge=0)
    alert_distance_tolerance_meters: float = Field(default=10.0, ge=0)
    alert_stale_seconds: float = Field(default=30.0, gt=0)
    alert_pause_seconds: float = Field(default=0.5, ge=0)
    alert_interrupt_pause_seconds: float = Field(default=0.2, ge=0)
    safety_first_alerts: bool = Field(default=True)

    # Announcement memory
    memory_expiry_seconds: float = Field(default=120.0, gt=0)
    memory_max_entries: int = Field(default=50, ge=1)
    memory_prune_movement_meters: float = Field(default=15.0, ge=0)
    memory_prune_distance_meters: float = Field(default=100.0, gt=0)

    # Proximity detector
    detection_radius_meters: float = Field(default=100.0, gt=0)
    route_tolerance_meters: float = Field(default=15.0, gt=0)
    min_detection_movement_meters: float = Field(default=10.0, ge=0)
    max_alerts: int = Field(default=2, ge=1, le=10)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate log level is one of the allowed values."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in allowed:
            error_message = f"log_level must be one of {allowed}, got '{value}'"
            raise ValueError(error_message)
        return upper_value


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Cached Settings instance.
    """
    return Settings()
