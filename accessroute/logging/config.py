"""Logging configuration using Pydantic settings."""

from enum import StrEnum
from functools import lru_cache
from typing import TYPE_CHECKING

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

if TYPE_CHECKING:
    from accessroute.config import Settings


class LogLevel(StrEnum):
    """Valid log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(StrEnum):
    """Valid log formats."""

    JSON = "json"
    HUMAN = "human"


class LoggingConfig(BaseSettings):
    """Logging configuration loaded from environment variables.

    Attributes:
        log_level: Level of the root logger.
        log_format: json for collected logs, human for a terminal.
        service_name: Value of the ``service`` field in JSON records.
        component_levels: Per-subpackage overrides keyed by the name under
            ``accessroute``, e.g. ``{"alerts": "WARNING"}`` to silence the
            per-announcement records during a long walk. Set from the
            environment as JSON in ``LOG_COMPONENT_LEVELS``.
        include_timestamp: Whether JSON records carry a timestamp.
        include_location: Whether JSON records carry module/function/line.
    """

    model_config = SettingsConfigDict(
        env_prefix="",
        case_sensitive=False,
        populate_by_name=True,
    )

    log_level: LogLevel = Field(default=LogLevel.INFO)
    log_format: LogFormat = Field(default=LogFormat.JSON)
    service_name: str = Field(default="accessroute")
    component_levels: dict[str, LogLevel] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("LOG_COMPONENT_LEVELS", "component_levels"),
    )
    include_timestamp: bool = Field(default=True)
    include_location: bool = Field(default=True)

    @classmethod
    def from_settings(cls, settings: "Settings") -> "LoggingConfig":
        """Build a config whose level and service name follow the application ``Settings``.

        Format and component overrides still come from the environment.
        """
        return cls(log_level=LogLevel(settings.log_level), service_name=settings.service_name)


@lru_cache
def get_logging_config() -> LoggingConfig:
    """Get cached logging configuration instance."""
    return LoggingConfig()
