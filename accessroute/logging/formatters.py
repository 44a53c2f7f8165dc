"""Log formatters for JSON and console output."""

import json
import logging
import traceback
from datetime import UTC, datetime
from typing import Any, ClassVar

from accessroute.exceptions.base import AccessRouteError
from accessroute.logging.context import get_extra_context, get_trip_id

# Attributes every LogRecord carries; anything else came in through ``extra``.
_STANDARD_LOG_ATTRS: frozenset[str] = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "exc_info",
        "exc_text",
        "thread",
        "threadName",
        "taskName",
        "message",
        "asctime",
    }
)

_LOGGER_COLUMN_WIDTH = 24
_PACKAGE_PREFIX = "accessroute."


def _record_fields(record: logging.LogRecord) -> dict[str, Any]:
    """Collect trip context and ``extra`` fields attached to a record."""
    fields: dict[str, Any] = {}
    current_trip = get_trip_id()
    if current_trip:
        fields["trip_id"] = current_trip
    fields.update(get_extra_context())
    fields.update(
        {
            key: value
            for key, value in record.__dict__.items()
            if key not in _STANDARD_LOG_ATTRS and not key.startswith("_")
        }
    )
    return fields


def _exception_payload(record: logging.LogRecord) -> dict[str, Any]:
    """Describe the record's exception, using the structured form for our own errors."""
    exc_type, exc_value, exc_traceback = record.exc_info or (None, None, None)
    if isinstance(exc_value, AccessRouteError):
        payload = exc_value.to_log_dict()
    else:
        payload = {
            "exception_type": exc_type.__name__ if exc_type else "Unknown",
            "message": str(exc_value) if exc_value else "",
        }
    payload["traceback"] = traceback.format_exception(exc_type, exc_value, exc_traceback)
    return payload


class JSONFormatter(logging.Formatter):
    """One JSON object per line for log collection.

    Trip context and ``extra`` fields sit at the top level next to the
    message; the emitting code location is grouped under ``source``.
    """

    def __init__(
        self,
        *,
        service_name: str = "accessroute",
        include_timestamp: bool = True,
        include_location: bool = True,
    ) -> None:
        super().__init__()
        self._service_name = service_name
        self._include_timestamp = include_timestamp
        self._include_location = include_location

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": self._service_name,
        }
        if self._include_timestamp:
            entry["timestamp"] = datetime.fromtimestamp(record.created, UTC).isoformat(timespec="milliseconds")
        if self._include_location:
            entry["source"] = {"module": record.module, "function": record.funcName, "line": record.lineno}
        entry.update(_record_fields(record))
        if record.exc_info:
            entry["exception"] = _exception_payload(record)
        return json.dumps(entry, default=str)


class HumanFormatter(logging.Formatter):
    """Single-line records for a terminal during local runs.

    Loggers under the package drop the ``accessroute.`` prefix, so the
    column shows e.g. ``alerts.queue``.
    """

    COLORS: ClassVar[dict[str, str]] = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET: ClassVar[str] = "\033[0m"

    def __init__(self, *, use_colors: bool = True) -> None:
        super().__init__()
        self._use_colors = use_colors

    def _level(self, levelname: str) -> str:
        padded = f"{levelname:<8}"
        if not self._use_colors:
            return padded
        return f"{self.COLORS.get(levelname, '')}{padded}{self.RESET}"

    @staticmethod
    def _logger_column(name: str) -> str:
        name = name.removeprefix(_PACKAGE_PREFIX)
        if len(name) > _LOGGER_COLUMN_WIDTH:
            name = "..." + name[3 - _LOGGER_COLUMN_WIDTH:]
        return f"{name:<{_LOGGER_COLUMN_WIDTH}}"

    def format(self, record: logging.LogRecord) -> str:
        clock = datetime.fromtimestamp(record.created).strftime("%H:%M:%S.%f")[:-3]
        line = f"{clock} | {self._level(record.levelname)} | {self._logger_column(record.name)} | {record.getMessage()}"

        fields = _record_fields(record)
        if fields:
            line += " | " + " ".join(f"{key}={value}" for key, value in fields.items())
        if record.exc_info:
            line += "\n" + "".join(traceback.format_exception(*record.exc_info))
        return line
