"""
Unit tests for planepoint.logging_config module.

Tests:
- JSON and console formatters
- setup_logging handlers
- log_timing events
- LogContext fields on child logger records
"""

import json
import logging
import sys

import pytest

from planepoint.logging_config import (
    PACKAGE_LOGGER,
    ConsoleFormatter,
    JSONFormatter,
    LogContext,
    configure_default_logging,
    get_logger,
    log_timing,
    setup_logging,
)


def _record(name="planepoint.geometry.triangle", level=logging.INFO, msg="Test message",
            args=(), exc_info=None, lineno=10):
    return logging.LogRecord(
        name=name, level=level, pathname="triangle.py", lineno=lineno,
        msg=msg, args=args, exc_info=exc_info,
    )


class TestJSONFormatter:
    """Tests for JSONFormatter class."""

    def test_basic_format(self):
        data = json.loads(JSONFormatter().format(_record()))
        assert data["level"] == "INFO"
        assert data["logger"] == "planepoint.geometry.triangle"
        assert data["message"] == "Test message"
        assert "timestamp" in data
        assert "location" not in data

    def test_args_interpolated(self):
        data = json.loads(JSONFormatter().format(_record(msg="%d points", args=(3,))))
        assert data["message"] == "3 points"

    def test_extra_fields(self):
        record = _record()
        record.points = 12
        record.triangle_file = "tin.geojson"
        data = json.loads(JSONFormatter().format(record))
        assert data["points"] == 12
        assert data["triangle_file"] == "tin.geojson"

    def test_extra_fields_disabled(self):
        record = _record()
        record.points = 12
        data = json.loads(JSONFormatter(include_extra=False).format(record))
        assert "points" not in data

    def test_unserializable_extra(self):
        record = _record()
        record.obj = object()
        data = json.loads(JSONFormatter().format(record))
        assert data["obj"].startswith("<object")

    def test_location_for_warning(self):
        data = json.loads(JSONFormatter().format(_record(level=logging.WARNING, lineno=42)))
        assert data["location"]["line"] == 42
        assert data["location"]["file"] == "triangle.py"

    def test_exception(self):
        try:
            raise ZeroDivisionError("boom")
        except ZeroDivisionError:
            record = _record(level=logging.ERROR, exc_info=sys.exc_info())
        data = json.loads(JSONFormatter().format(record))
        assert "ZeroDivisionError" in data["exception"]

    def test_unicode(self):
        data = json.loads(JSONFormatter().format(_record(msg="Ошибка: ±∞")))
        assert data["message"] == "Ошибка: ±∞"


class TestConsoleFormatter:
    """Tests for ConsoleFormatter class."""

    def test_basic_format(self):
        result = ConsoleFormatter(use_colors=False).format(_record())
        assert "INFO" in result
        assert "geometry.triangle: Test message" in result
        assert "planepoint." not in result
        assert result.endswith("Test message")

    def test_foreign_logger_name_kept(self):
        result = ConsoleFormatter(use_colors=False).format(_record(name="other.module"))
        assert "other.module: Test message" in result

    def test_colors(self):
        result = ConsoleFormatter(use_colors=True).format(_record(level=logging.ERROR))
        assert "\033[31m" in result
        assert ConsoleFormatter.RESET in result

    def test_no_colors(self):
        result = ConsoleFormatter(use_colors=False).format(_record(level=logging.ERROR))
        assert "\033[" not in result

    def test_extra_fields(self):
        record = _record()
        record.elapsed_seconds = 0.123456789
        record.overrides = ["a", "b", "c", "d"]
        result = ConsoleFormatter(use_colors=False).format(record)
        assert "elapsed_seconds=0.123457" in result
        assert "overrides=[...4 items]" in result

    def test_extra_hidden(self):
        record = _record()
        record.points = 3
        result = ConsoleFormatter(use_colors=False, show_extra=False).format(record)
        assert "points" not in result


class TestSetupLogging:
    """Tests for setup_logging and helpers."""

    def test_console_handler(self):
        logger = setup_logging(level=logging.DEBUG)
        assert logger.name == PACKAGE_LOGGER
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, ConsoleFormatter)
        assert logger.propagate is False

    def test_replaces_handlers(self):
        setup_logging()
        logger = setup_logging()
        assert len(logger.handlers) == 1

    def test_no_console(self):
        logger = setup_logging(console=False)
        assert logger.handlers == []

    def test_json_file(self, tmp_path):
        log_path = tmp_path / "planepoint.log.json"
        logger = setup_logging(level=logging.INFO, json_file=log_path, console=False)
        get_logger("planepoint.io.geojson").info("Loaded", extra={"points": 2})
        for handler in logger.handlers:
            handler.flush()

        lines = log_path.read_text(encoding="utf-8").strip().splitlines()
        assert len(lines) == 1
        data = json.loads(lines[0])
        assert data["message"] == "Loaded"
        assert data["logger"] == "planepoint.io.geojson"
        assert data["points"] == 2

    def test_console_output(self, capsys):
        setup_logging(level=logging.INFO, use_colors=False)
        get_logger("planepoint.cli").warning("Careful")
        err = capsys.readouterr().err
        assert "WARNING" in err
        assert "cli: Careful" in err

    def test_configure_default_logging(self):
        assert configure_default_logging(verbose=True).level == logging.DEBUG
        assert configure_default_logging(verbose=False).level == logging.INFO

    def test_get_logger(self):
        assert get_logger("planepoint.x").name == "planepoint.x"


class TestLogTiming:
    """Tests for log_timing context manager."""

    def test_start_and_complete(self, captured_records):
        logger = get_logger("planepoint.test")
        with log_timing(logger, "Interpolating", points=5) as info:
            info["non_finite"] = 0

        events = [r.event for r in captured_records]
        assert events == ["start", "complete"]
        complete = captured_records[-1]
        assert complete.operation == "Interpolating"
        assert complete.points == 5
        assert complete.non_finite == 0
        assert complete.elapsed_seconds >= 0
        assert info["elapsed_seconds"] == complete.elapsed_seconds

    def test_error_reraised(self, captured_records):
        logger = get_logger("planepoint.test")
        with pytest.raises(ArithmeticError):
            with log_timing(logger, "Interpolating"):
                raise ArithmeticError("degenerate")

        error = captured_records[-1]
        assert error.event == "error"
        assert error.levelno == logging.ERROR
        assert error.error == "degenerate"


class TestLogContext:
    """Tests for LogContext class."""

    def test_fields_added_to_child_records(self, captured_records):
        with LogContext(triangle_file="tin.geojson"):
            get_logger("planepoint.geometry.triangle").debug("inside")
        get_logger("planepoint.geometry.triangle").debug("outside")

        inside, outside = captured_records
        assert inside.triangle_file == "tin.geojson"
        assert not hasattr(outside, "triangle_file")

    def test_nested_fields(self, captured_records):
        with LogContext(a=1):
            with LogContext(b=2):
                get_logger("planepoint").info("both")
        record = captured_records[0]
        assert record.a == 1
        assert record.b == 2
