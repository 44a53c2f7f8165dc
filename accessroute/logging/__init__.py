"""Structured logging for the accessible routing core.

Usage:
    from accessroute.logging import setup_logging, get_logger, trip_context

    setup_logging()
    logger = get_logger(__name__)
    with trip_context(device="wheelchair"):
        logger.info("Scoring routes", extra={"candidates": 3})
"""

from accessroute.logging.config import LoggingConfig
from accessroute.logging.context import (
    clear_context,
    generate_trip_id,
    get_extra_context,
    get_trip_id,
    set_extra_context,
    set_trip_id,
    trip_context,
    trip_id,
)
from accessroute.logging.formatters import HumanFormatter, JSONFormatter
from accessroute.logging.logger import get_logger, reset_logging, setup_logging

__all__ = [
    "HumanFormatter",
    "JSONFormatter",
    "LoggingConfig",
    "clear_context",
    "generate_trip_id",
    "get_extra_context",
    "get_logger",
    "get_trip_id",
    "reset_logging",
    "set_extra_context",
    "set_trip_id",
    "setup_logging",
    "trip_context",
    "trip_id",
]
