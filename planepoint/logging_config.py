"""
Structured logging for the planepoint package.

Provides:
- JSON formatter, one object per line, for log files
- Console formatter with optional ANSI colors
- setup_logging() for the "planepoint" logger
- log_timing() context manager and LogContext for shared fields

Usage:
    from planepoint.logging_config import setup_logging, get_logger

    setup_logging(level=logging.DEBUG, json_file="planepoint.log.json")

    logger = get_logger(__name__)
    logger.info("Interpolating", extra={"points": 12})
"""

import json
import logging
import sys
import time
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Union

PACKAGE_LOGGER = "planepoint"

# Attributes every LogRecord has; anything else came in through `extra`
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime"}


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    return {k: v for k, v in record.__dict__.items() if k not in _RESERVED_ATTRS}


class JSONFormatter(logging.Formatter):
    """Format each record as a single JSON line.

    Output format:
        {"timestamp": "...", "level": "INFO", "logger": "...", "message": "...", ...}
    """

    def __init__(self, include_extra: bool = True):
        super().__init__()
        self.include_extra = include_extra

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.levelno >= logging.WARNING:
            entry["location"] = {
                "file": record.filename,
                "line": record.lineno,
                "function": record.funcName,
            }

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        if self.include_extra:
            for key, value in _extra_fields(record).items():
                try:
                    json.dumps(value)
                except (TypeError, ValueError):
                    value = str(value)
                entry[key] = value

        return json.dumps(entry, ensure_ascii=False)


class ConsoleFormatter(logging.Formatter):
    """Human-readable formatter.

    Format: [HH:MM:SS] LEVEL name: message [key=value, ...]
    """

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    def __init__(self, use_colors: bool = True, show_extra: bool = True):
        super().__init__()
        self.use_colors = use_colors
        self.show_extra = show_extra

    def format(self, record: logging.LogRecord) -> str:
        time_str = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")

        level = f"{record.levelname:8}"
        if self.use_colors and record.levelname in self.COLORS:
            level = f"{self.COLORS[record.levelname]}{level}{self.RESET}"

        name = record.name
        if name.startswith(PACKAGE_LOGGER + "."):
            name = name[len(PACKAGE_LOGGER) + 1:]

        extra_str = ""
        if self.show_extra:
            parts = []
            for key, value in _extra_fields(record).items():
                if isinstance(value, float):
                    parts.append(f"{key}={value:.6g}")
                elif isinstance(value, (list, tuple)) and len(value) > 3:
                    parts.append(f"{key}=[...{len(value)} items]")
                else:
                    parts.append(f"{key}={value}")
            if parts:
                extra_str = " [" + ", ".join(parts) + "]"

        result = f"[{time_str}] {level} {name}: {record.getMessage()}{extra_str}"
        if record.exc_info:
            result += "\n" + self.formatException(record.exc_info)
        return result


def setup_logging(
    level: int = logging.INFO,
    json_file: Optional[Union[str, Path]] = None,
    console: bool = True,
    use_colors: bool = True,
) -> logging.Logger:
    """Configure the planepoint logger.

    Replaces existing handlers. Console output goes to stderr so that stdout
    stays free for results.

    Args:
        level: Minimum log level
        json_file: Optional path for JSON-lines log output
        console: Enable console output
        use_colors: Use ANSI colors in console output

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(ConsoleFormatter(use_colors=use_colors))
        logger.addHandler(console_handler)

    if json_file:
        json_handler = logging.FileHandler(Path(json_file), encoding='utf-8')
        json_handler.setLevel(level)
        json_handler.setFormatter(JSONFormatter())
        logger.addHandler(json_handler)

    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger for a module, typically get_logger(__name__)."""
    return logging.getLogger(name)


def configure_default_logging(verbose: bool = False) -> logging.Logger:
    """Console logging at DEBUG when verbose, INFO otherwise."""
    return setup_logging(level=logging.DEBUG if verbose else logging.INFO)


@contextmanager
def log_timing(
    logger: logging.Logger,
    operation: str,
    level: int = logging.DEBUG,
    **extra_fields: Any
) -> Iterator[Dict[str, Any]]:
    """Log start, completion and failure of an operation with elapsed time.

    The yielded dict can be filled with fields for the completion record.

    Example:
        with log_timing(logger, "Interpolating points", points=len(points)) as info:
            values = interpolate_many(points, triangle)
            info["non_finite"] = int((~np.isfinite(values)).sum())
    """
    timing_info: Dict[str, Any] = {}
    start = time.perf_counter()

    logger.log(level, "Starting: %s", operation, extra={
        "event": "start",
        "operation": operation,
        **extra_fields,
    })

    try:
        yield timing_info
    except Exception as exc:
        elapsed = time.perf_counter() - start
        logger.error("Failed: %s (%.3fs) - %s", operation, elapsed, exc, extra={
            "event": "error",
            "operation": operation,
            "elapsed_seconds": elapsed,
            "error": str(exc),
            **extra_fields,
        })
        raise

    elapsed = time.perf_counter() - start
    timing_info['elapsed_seconds'] = elapsed
    logger.log(level, "Completed: %s (%.3fs)", operation, elapsed, extra={
        "event": "complete",
        "operation": operation,
        **extra_fields,
        **timing_info,
    })


class _ContextFilter(logging.Filter):
    def __init__(self, fields: Dict[str, Any]):
        super().__init__()
        self.fields = fields

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in self.fields.items():
            setattr(record, key, value)
        return True


class LogContext:
    """Attach fields to every record handled by the package logger within a scope.

    The filter is installed on the package logger's handlers, so records from
    child loggers (planepoint.geometry.triangle, ...) carry the fields too.

    Example:
        with LogContext(triangle_file="tin.geojson"):
            logger.info("Interpolating")  # includes triangle_file
    """

    def __init__(self, **fields: Any):
        self.fields = fields
        self._filter = _ContextFilter(fields)
        self._handlers: List[logging.Handler] = []

    def __enter__(self) -> 'LogContext':
        self._handlers = list(logging.getLogger(PACKAGE_LOGGER).handlers)
        for handler in self._handlers:
            handler.addFilter(self._filter)
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        for handler in self._handlers:
            handler.removeFilter(self._filter)
        self._handlers = []
