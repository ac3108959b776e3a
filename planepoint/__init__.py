"""
planepoint: интерполяция Z-значения в точке по плоскости треугольника.

Основная функция: planepoint.interpolate(point, triangle).
Командная строка: planepoint.cli (команда `planepoint`).
"""

from planepoint.errors import (
    DegenerateTriangleError,
    InvalidInputError,
    InvalidTriangleError,
    MissingValueError,
    PlanePointError,
)
from planepoint.geometry.triangle import (
    Triangle,
    Vertex,
    interpolate,
    interpolate_many,
    plane_coefficients,
    resolve_vertex_value,
    signed_area,
)
from planepoint.io.geojson import planepoint
from planepoint.logging_config import (
    LogContext,
    configure_default_logging,
    get_logger,
    log_timing,
    setup_logging,
)

__version__ = "0.1.0"

__all__ = [
    "DegenerateTriangleError",
    "InvalidInputError",
    "InvalidTriangleError",
    "MissingValueError",
    "PlanePointError",
    "Triangle",
    "Vertex",
    "interpolate",
    "interpolate_many",
    "plane_coefficients",
    "resolve_vertex_value",
    "signed_area",
    "planepoint",
    "LogContext",
    "configure_default_logging",
    "get_logger",
    "log_timing",
    "setup_logging",
]
