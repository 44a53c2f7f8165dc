"""Tests for log formatters."""

import json
import logging
import sys

from accessroute.exceptions import NoRouteAvailableError
from accessroute.logging.context import set_extra_context, set_trip_id
from accessroute.logging.formatters import HumanFormatter, JSONFormatter


def _make_record(message: str = "test message", level: int = logging.INFO) -> logging.LogRecord:
    """Create a test log record."""
    return logging.LogRecord(
        name="test.logger",
        level=level,
        pathname="test.py",
        lineno=42,
        msg=message,
        args=(),
        exc_info=None,
    )


def _format_json(record, **kwargs):
    return json.loads(JSONFormatter(**kwargs).format(record))


class TestJSONFormatter:
    def test_includes_message(self):
        parsed = _format_json(_make_record("hello world"))
        assert parsed["message"] == "hello world"

    def test_includes_level(self):
        parsed = _format_json(_make_record(level=logging.ERROR))
        assert parsed["level"] == "ERROR"

    def test_includes_timestamp(self):
        parsed = _format_json(_make_record())
        assert parsed["timestamp"].endswith("+00:00")

    def test_excludes_timestamp_when_disabled(self):
        parsed = _format_json(_make_record(), include_timestamp=False)
        assert "timestamp" not in parsed

    def test_default_service_name(self):
        parsed = _format_json(_make_record())
        assert parsed["service"] == "accessroute"

    def test_includes_location(self):
        parsed = _format_json(_make_record())
        assert parsed["source"]["line"] == 42
        assert parsed["source"]["module"] == "test"

    def test_excludes_location_when_disabled(self):
        parsed = _format_json(_make_record(), include_location=False)
        assert "source" not in parsed

    def test_includes_trip_id(self):
        set_trip_id("trip-123")
        parsed = _format_json(_make_record())
        assert parsed["trip_id"] == "trip-123"

    def test_omits_empty_trip_id(self):
        parsed = _format_json(_make_record())
        assert "trip_id" not in parsed

    def test_includes_extra_context(self):
        set_extra_context(device="wheelchair")
        parsed = _format_json(_make_record())
        assert parsed["device"] == "wheelchair"

    def test_includes_record_extras(self):
        record = _make_record()
        record.route_id = "r-7"
        parsed = _format_json(record)
        assert parsed["route_id"] == "r-7"

    def test_includes_exception_info(self):
        record = _make_record()
        try:
            raise ValueError("test error")  # noqa: TRY301
        except ValueError:
            record.exc_info = sys.exc_info()
        parsed = _format_json(record)
        assert parsed["exception"]["exception_type"] == "ValueError"
        assert parsed["exception"]["message"] == "test error"
        assert parsed["exception"]["traceback"]

    def test_structured_payload_for_own_errors(self):
        record = _make_record()
        try:
            raise NoRouteAvailableError("no route", context={"origin": "a"})  # noqa: TRY301
        except NoRouteAvailableError:
            record.exc_info = sys.exc_info()
        parsed = _format_json(record)
        assert parsed["exception"]["error_code"] == "NO_ROUTE_AVAILABLE"
        assert parsed["exception"]["exception_type"] == "NoRouteAvailableError"
        assert parsed["exception"]["recoverable"] is False
        assert parsed["exception"]["context"] == {"origin": "a"}


class TestHumanFormatter:
    def test_outputs_pipe_separated(self):
        output = HumanFormatter(use_colors=False).format(_make_record())
        assert "|" in output

    def test_includes_message_and_level(self):
        output = HumanFormatter(use_colors=False).format(_make_record("hello", logging.WARNING))
        assert "hello" in output
        assert "WARNING" in output

    def test_colors_enabled(self):
        output = HumanFormatter(use_colors=True).format(_make_record())
        assert "\033[" in output

    def test_no_colors_when_disabled(self):
        output = HumanFormatter(use_colors=False).format(_make_record())
        assert "\033[" not in output

    def test_truncates_long_logger_name(self):
        record = _make_record()
        record.name = "very.long.module.name.that.exceeds.the.maximum.length"
        output = HumanFormatter(use_colors=False).format(record)
        assert "..." in output

    def test_strips_package_prefix(self):
        record = _make_record()
        record.name = "accessroute.alerts.queue"
        output = HumanFormatter(use_colors=False).format(record)
        assert "| alerts.queue " in output
        assert "accessroute." not in output

    def test_includes_trip_id(self):
        set_trip_id("trip-abc")
        output = HumanFormatter(use_colors=False).format(_make_record())
        assert "trip_id=trip-abc" in output
