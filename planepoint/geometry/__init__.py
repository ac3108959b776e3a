"""Геометрия: треугольник, значения вершин, интерполяция по плоскости."""

from planepoint.geometry.triangle import (
    DEGENERATE_POLICIES,
    VERTEX_SLOTS,
    Triangle,
    Vertex,
    interpolate,
    interpolate_many,
    plane_coefficients,
    resolve_vertex_value,
    signed_area,
)

__all__ = [
    "DEGENERATE_POLICIES",
    "VERTEX_SLOTS",
    "Triangle",
    "Vertex",
    "interpolate",
    "interpolate_many",
    "plane_coefficients",
    "resolve_vertex_value",
    "signed_area",
]
