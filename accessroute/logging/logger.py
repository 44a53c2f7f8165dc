"""Root logger setup for applications embedding the routing core."""

import logging
import sys
from typing import TextIO

from accessroute.logging.config import LogFormat, LoggingConfig, get_logging_config
from accessroute.logging.formatters import HumanFormatter, JSONFormatter

# Name given to the handler we install, so reset leaves foreign handlers alone.
HANDLER_NAME = "accessroute"

_PACKAGE_LOGGER = "accessroute"

# Libraries that are chatty at INFO while the alert queue and scoring pool run.
_QUIET_LOGGERS: tuple[str, ...] = ("asyncio", "concurrent.futures")


def _our_handlers(logger: logging.Logger) -> list[logging.Handler]:
    return [handler for handler in logger.handlers if handler.get_name() == HANDLER_NAME]


def _build_formatter(config: LoggingConfig, *, interactive: bool) -> logging.Formatter:
    if config.log_format == LogFormat.HUMAN:
        return HumanFormatter(use_colors=interactive)
    return JSONFormatter(
        service_name=config.service_name,
        include_timestamp=config.include_timestamp,
        include_location=config.include_location,
    )


def setup_logging(
    config: LoggingConfig | None = None,
    stream: TextIO | None = None,
    *,
    force: bool = False,
) -> None:
    """Install one handler on the root logger and apply per-component levels.

    Args:
        config: Logging configuration. Loads from environment if not provided;
            use ``LoggingConfig.from_settings`` to follow application settings.
        stream: Output stream for logs. Defaults to sys.stdout, with colors
            in human format.
        force: Replace an earlier setup instead of keeping it.
    """
    root_logger = logging.getLogger()
    existing = _our_handlers(root_logger)
    if existing and not force:
        return
    for handler in existing:
        root_logger.removeHandler(handler)

    config = config or get_logging_config()
    root_logger.setLevel(config.log_level.value)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(_build_formatter(config, interactive=stream is None))
    root_logger.addHandler(handler)

    for component, level in config.component_levels.items():
        logging.getLogger(f"{_PACKAGE_LOGGER}.{component}").setLevel(level.value)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the given name.

    Args:
        name: Logger name, typically __name__ of the calling module.

    Returns:
        A configured logger instance.
    """
    return logging.getLogger(name)


def reset_logging() -> None:
    """Remove the installed handler and component levels. Primarily for testing."""
    root_logger = logging.getLogger()
    for handler in _our_handlers(root_logger):
        root_logger.removeHandler(handler)

    manager = logging.Logger.manager
    for name in list(manager.loggerDict):
        if name.startswith(f"{_PACKAGE_LOGGER}."):
            logging.getLogger(name).setLevel(logging.NOTSET)

    get_logging_config.cache_clear()
