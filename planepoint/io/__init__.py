"""Чтение GeoJSON и преобразование объектов в треугольники и точки."""

from planepoint.io.geojson import (
    load_geojson,
    planepoint,
    point_from_feature,
    triangle_from_feature,
)

__all__ = [
    "load_geojson",
    "planepoint",
    "point_from_feature",
    "triangle_from_feature",
]
