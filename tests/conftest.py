"""
Pytest configuration and fixtures for planepoint.

Provides:
- Triangle fixtures (override values, embedded z, degenerate)
- GeoJSON feature fixtures and files written to tmp_path
- Isolation of the package logger and config search paths
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict

import pytest

from planepoint.geometry.triangle import Triangle
from planepoint.logging_config import PACKAGE_LOGGER


# ============================================================================
# Isolation
# ============================================================================

@pytest.fixture(autouse=True)
def reset_package_logger():
    """Restore the package logger after tests that reconfigure it."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    saved = (list(logger.handlers), logger.level, logger.propagate)
    yield logger
    for handler in list(logger.handlers):
        if handler not in saved[0]:
            logger.removeHandler(handler)
            handler.close()
    logger.handlers[:] = saved[0]
    logger.setLevel(saved[1])
    logger.propagate = saved[2]


@pytest.fixture
def isolated_config_dirs(tmp_path: Path, monkeypatch) -> Path:
    """Run with cwd and HOME inside tmp_path so no real config file is found."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)
    return tmp_path


class ListHandler(logging.Handler):
    """Handler keeping records in memory."""

    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


@pytest.fixture
def captured_records(reset_package_logger):
    """Records reaching the package logger, captured in a list."""
    handler = ListHandler()
    reset_package_logger.addHandler(handler)
    reset_package_logger.setLevel(logging.DEBUG)
    return handler.records


# ============================================================================
# Triangle Fixtures
# ============================================================================

@pytest.fixture
def unit_triangle() -> Triangle:
    """Right triangle (0,0), (1,0), (0,1) with overrides a=0, b=2, c=4."""
    return Triangle.from_positions(
        [(0.0, 0.0), (1.0, 0.0), (0.0, 1.0)],
        {"a": 0, "b": 2, "c": 4},
    )


@pytest.fixture
def embedded_triangle() -> Triangle:
    """Same triangle with z carried in the positions: 10, 20, 30."""
    return Triangle.from_positions([(0, 0, 10), (1, 0, 20), (0, 1, 30)])


@pytest.fixture
def collinear_triangle() -> Triangle:
    """Degenerate triangle: all vertices on the x axis."""
    return Triangle.from_positions([(0, 0, 1), (1, 0, 2), (2, 0, 3)])


@pytest.fixture
def diagonal_triangle() -> Triangle:
    """Degenerate triangle on the line y = x; off-grid points round its denominator away from zero."""
    return Triangle.from_positions([(0, 0, 1), (1, 1, 2), (2, 2, 3)])


# ============================================================================
# GeoJSON Fixtures
# ============================================================================

def make_triangle(ring, properties=None) -> Dict[str, Any]:
    return {
        "type": "Feature",
        "properties": properties if properties is not None else {},
        "geometry": {"type": "Polygon", "coordinates": [ring]},
    }


@pytest.fixture
def triangle_feature() -> Dict[str, Any]:
    """Closed-ring triangle feature with a, b, c properties."""
    return make_triangle(
        [[0, 0], [1, 0], [0, 1], [0, 0]],
        {"a": 0, "b": 2, "c": 4},
    )


@pytest.fixture
def write_json(tmp_path: Path):
    """Write an object as JSON under tmp_path and return the path."""
    def _write(name: str, data: Any) -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path
    return _write


@pytest.fixture
def triangle_file(write_json, triangle_feature) -> Path:
    return write_json("triangle.geojson", triangle_feature)
