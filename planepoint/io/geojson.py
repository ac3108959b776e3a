"""
GeoJSON adapter for plane interpolation.

Translates GeoJSON objects into the plain types used by
planepoint.geometry.triangle:
- Point feature (or bare Point geometry) -> (x, y)
- Polygon feature (or bare Polygon geometry) -> Triangle, with per-vertex
  overrides read from the feature properties ("a", "b", "c" by default)

Usage:
    from planepoint.io.geojson import planepoint

    point = {"type": "Feature", "properties": {},
             "geometry": {"type": "Point", "coordinates": [-75.3221, 39.529]}}
    triangle = {"type": "Feature", "properties": {"a": 11, "b": 122, "c": 44},
                "geometry": {"type": "Polygon", "coordinates": [[
                    [-75.1221, 39.57], [-75.58, 39.18],
                    [-75.97, 39.86], [-75.1221, 39.57]]]}}
    z = planepoint(point, triangle)
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Sequence, Tuple, Union

from planepoint.errors import InvalidInputError, InvalidTriangleError
from planepoint.geometry.triangle import (
    PROPAGATE,
    VERTEX_SLOTS,
    Triangle,
    as_real,
    interpolate,
)

logger = logging.getLogger(__name__)

DEFAULT_PROPERTY_NAMES: Tuple[str, str, str] = ("a", "b", "c")


def _split_feature(obj: Any, expected_type: str) -> Tuple[Mapping[str, Any], Dict[str, Any]]:
    """Return (geometry, properties) for a Feature or a bare geometry."""
    if not isinstance(obj, Mapping):
        raise InvalidInputError(f"Expected a GeoJSON object, got {type(obj).__name__}")

    if obj.get("type") == "Feature":
        geometry = obj.get("geometry")
        properties = obj.get("properties") or {}
        if not isinstance(geometry, Mapping):
            raise InvalidInputError("Feature has no geometry")
        if not isinstance(properties, Mapping):
            raise InvalidInputError("Feature properties must be an object")
    else:
        geometry = obj
        properties = {}

    if geometry.get("type") != expected_type:
        raise InvalidInputError(
            f"Expected {expected_type} geometry, got {geometry.get('type')!r}"
        )
    if "coordinates" not in geometry:
        raise InvalidInputError(f"{expected_type} geometry has no coordinates")
    return geometry, dict(properties)


def point_from_feature(obj: Any) -> Tuple[float, float]:
    """Extract (x, y) from a Point feature or geometry.

    Args:
        obj: GeoJSON Feature<Point> or Point geometry

    Returns:
        Query point coordinates (a third coordinate, if any, is dropped)

    Raises:
        InvalidInputError: If the object is not a Point or coordinates are malformed
    """
    geometry, _ = _split_feature(obj, "Point")
    coords = geometry["coordinates"]
    if not isinstance(coords, Sequence) or isinstance(coords, str) or len(coords) < 2:
        raise InvalidInputError(f"Point coordinates must be [x, y], got {coords!r}")
    return as_real(coords[0], "Point x"), as_real(coords[1], "Point y")


def triangle_from_feature(
    obj: Any,
    property_names: Sequence[str] = DEFAULT_PROPERTY_NAMES,
) -> Triangle:
    """Build a Triangle from a Polygon feature or geometry.

    The outer ring must hold three positions, or four when the ring is closed
    (last position equals the first). Holes are ignored. Overrides are read
    from the feature properties under property_names, in vertex order.

    Args:
        obj: GeoJSON Feature<Polygon> or Polygon geometry
        property_names: Property names holding the values of vertices A, B, C

    Returns:
        Triangle ready for interpolation

    Raises:
        InvalidTriangleError: If the ring is not a triangle
        InvalidInputError: If the object is not a Polygon
    """
    if len(property_names) != 3:
        raise InvalidInputError(f"Expected 3 property names, got {list(property_names)}")

    geometry, properties = _split_feature(obj, "Polygon")
    rings = geometry["coordinates"]
    if not isinstance(rings, Sequence) or isinstance(rings, str) or not rings:
        raise InvalidTriangleError("Polygon has no outer ring")

    ring = list(rings[0])
    if len(ring) == 4 and ring[0] == ring[3]:
        ring = ring[:3]
    if len(ring) != 3:
        raise InvalidTriangleError(
            f"Polygon outer ring must describe a triangle, got {len(ring)} positions"
        )

    overrides = {
        slot: properties.get(name)
        for slot, name in zip(VERTEX_SLOTS, property_names)
        if properties.get(name) is not None
    }
    logger.debug("Triangle from GeoJSON", extra={"overrides": sorted(overrides)})
    return Triangle.from_positions(ring, overrides)


def planepoint(
    point: Any,
    triangle: Any,
    on_degenerate: str = PROPAGATE,
    property_names: Sequence[str] = DEFAULT_PROPERTY_NAMES,
) -> float:
    """Z-value at a GeoJSON point inside a GeoJSON triangle.

    Args:
        point: Feature<Point> or Point geometry
        triangle: Feature<Polygon> or Polygon geometry with three vertices
        on_degenerate: "propagate" or "raise", see interpolate()
        property_names: Property names holding the vertex values

    Returns:
        Interpolated z-value
    """
    return interpolate(
        point_from_feature(point),
        triangle_from_feature(triangle, property_names),
        on_degenerate=on_degenerate,
    )


def load_geojson(path: Union[str, Path]) -> Dict[str, Any]:
    """Load a GeoJSON document from file.

    Args:
        path: Input file path

    Returns:
        Parsed GeoJSON object

    Raises:
        InvalidInputError: If the file is missing, unreadable or not valid JSON
    """
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError:
        raise InvalidInputError(f"GeoJSON file not found: {path}") from None
    except (OSError, json.JSONDecodeError) as exc:
        raise InvalidInputError(f"Cannot read GeoJSON file {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise InvalidInputError(f"GeoJSON file {path} must contain an object")
    logger.debug("Loaded GeoJSON %s", path, extra={"geojson_type": data.get("type")})
    return data
