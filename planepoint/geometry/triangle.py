"""
Интерполяция Z-значения по плоскости, проходящей через вершины треугольника.

Содержит:
- разрешение значения вершины (явное значение или третья координата)
- интерполяцию Z в точке и векторизованную интерполяцию по массиву точек
- коэффициенты плоскости z = a*x + b*y + c и ориентированную площадь

В точной арифметике знаменатель формулы не зависит от точки запроса и равен
удвоенной ориентированной площади треугольника. В числах с плавающей точкой
он для коллинеарных вершин может оказаться малым ненулевым числом, поэтому
вырожденность определяется по signed_area(triangle) == 0.0, а результат
для вырожденного треугольника получается делением на точный ноль (inf/nan).
"""

import logging
import numbers
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from planepoint.errors import (
    DegenerateTriangleError,
    InvalidInputError,
    InvalidTriangleError,
    MissingValueError,
)

logger = logging.getLogger(__name__)

# Имена вершин A, B, C в порядке их следования
VERTEX_SLOTS = ("a", "b", "c")

# Политики для вырожденного треугольника
PROPAGATE = "propagate"
RAISE = "raise"
DEGENERATE_POLICIES = (PROPAGATE, RAISE)


def as_real(value: Any, what: str, error_cls: type = InvalidInputError) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise error_cls(f"{what} must be a real number, got {value!r}")
    return float(value)


def _check_policy(on_degenerate: str) -> None:
    if on_degenerate not in DEGENERATE_POLICIES:
        raise InvalidInputError(
            f"Unknown degenerate policy {on_degenerate!r}, "
            f"expected one of {DEGENERATE_POLICIES}"
        )


def resolve_vertex_value(
    override: Optional[float],
    embedded: Optional[float],
    slot: Optional[str] = None,
) -> float:
    """Получить значение вершины: явное значение приоритетнее третьей координаты.

    Args:
        override: явное значение для вершины (None, если отсутствует).
        embedded: третья координата позиции вершины (None, если отсутствует).
        slot: имя вершины для сообщения об ошибке.

    Returns:
        Значение вершины как float.

    Raises:
        MissingValueError: если отсутствуют оба источника.
    """
    if override is not None:
        return as_real(override, f"Override for vertex {slot!r}")
    if embedded is not None:
        return as_real(embedded, f"Z-coordinate of vertex {slot!r}")
    raise MissingValueError(slot)


@dataclass(frozen=True)
class Vertex:
    """Вершина треугольника: позиция XY и необязательная третья координата."""
    x: float
    y: float
    z: Optional[float] = None

    @classmethod
    def from_position(cls, position: Sequence[float]) -> 'Vertex':
        """Создать вершину из позиции [x, y] или [x, y, z].

        Raises:
            InvalidTriangleError: если позиция не из 2 или 3 чисел.
        """
        if isinstance(position, (str, bytes)):
            raise InvalidTriangleError(f"Vertex position must be a coordinate sequence, got {position!r}")
        try:
            coords = list(position)
        except TypeError:
            raise InvalidTriangleError(
                f"Vertex position must be a coordinate sequence, got {position!r}"
            ) from None

        if len(coords) not in (2, 3):
            raise InvalidTriangleError(
                f"Vertex position must have 2 or 3 coordinates, got {len(coords)}"
            )

        x = as_real(coords[0], "Vertex x", InvalidTriangleError)
        y = as_real(coords[1], "Vertex y", InvalidTriangleError)
        z = None
        if len(coords) == 3 and coords[2] is not None:
            z = as_real(coords[2], "Vertex z", InvalidTriangleError)
        return cls(x, y, z)


@dataclass(frozen=True)
class Triangle:
    """Треугольник из трёх вершин с необязательными явными значениями.

    Attributes:
        vertices: вершины (A, B, C) в порядке, заданном вызывающим кодом.
        overrides: явные значения по именам вершин "a", "b", "c" (только чтение,
            в хэш не входят).
    """
    vertices: Tuple[Vertex, Vertex, Vertex]
    overrides: Mapping[str, Optional[float]] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        vertices = tuple(self.vertices)
        if len(vertices) != 3:
            raise InvalidTriangleError(f"Triangle needs exactly 3 vertices, got {len(vertices)}")
        for vertex in vertices:
            if not isinstance(vertex, Vertex):
                raise InvalidTriangleError(f"Expected Vertex, got {type(vertex).__name__}")

        overrides = dict(self.overrides or {})
        unknown = sorted(set(overrides) - set(VERTEX_SLOTS))
        if unknown:
            raise InvalidInputError(f"Unknown vertex slots in overrides: {unknown}")

        object.__setattr__(self, 'vertices', vertices)
        object.__setattr__(self, 'overrides', MappingProxyType(overrides))

    @classmethod
    def from_positions(
        cls,
        positions: Sequence[Sequence[float]],
        overrides: Optional[Mapping[str, Optional[float]]] = None,
    ) -> 'Triangle':
        """Создать треугольник из трёх позиций [x, y] или [x, y, z]."""
        positions = list(positions)
        if len(positions) != 3:
            raise InvalidTriangleError(f"Triangle needs exactly 3 vertices, got {len(positions)}")
        return cls(tuple(Vertex.from_position(p) for p in positions), overrides or {})

    def resolved_values(self) -> Tuple[float, float, float]:
        """Значения (z1, z2, z3) в вершинах A, B, C."""
        z1, z2, z3 = (
            resolve_vertex_value(self.overrides.get(slot), vertex.z, slot)
            for slot, vertex in zip(VERTEX_SLOTS, self.vertices)
        )
        return z1, z2, z3

    def as_arrays(self) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
        """Вершины формы (3, 2) и значения в них формы (3,)."""
        xy = np.array([[v.x, v.y] for v in self.vertices], dtype=np.float64)
        z = np.array(self.resolved_values(), dtype=np.float64)
        return xy, z


def _point_xy(point: Sequence[float]) -> Tuple[float, float]:
    if isinstance(point, (str, bytes)):
        raise InvalidInputError(f"Point must be a coordinate sequence, got {point!r}")
    try:
        coords = list(point)
    except TypeError:
        raise InvalidInputError(f"Point must be a coordinate sequence, got {point!r}") from None
    if len(coords) < 2:
        raise InvalidInputError(f"Point needs at least 2 coordinates, got {len(coords)}")
    return as_real(coords[0], "Point x"), as_real(coords[1], "Point y")


def signed_area(triangle: Triangle) -> float:
    """Ориентированная площадь треугольника (положительна при обходе против часовой)."""
    a, b, c = triangle.vertices
    return 0.5 * ((b.x - a.x) * (c.y - a.y) - (c.x - a.x) * (b.y - a.y))


def interpolate(
    point: Sequence[float],
    triangle: Triangle,
    on_degenerate: str = PROPAGATE,
) -> float:
    """Интерполировать Z-значение в точке по плоскости через вершины треугольника.

    Args:
        point: точка [x, y] (лишние координаты игнорируются).
        triangle: треугольник с разрешимыми значениями в вершинах.
        on_degenerate: "propagate": вернуть inf/nan для вырожденного
            треугольника, "raise": выбросить DegenerateTriangleError.

    Returns:
        Интерполированное значение без округления.

    Raises:
        MissingValueError: у вершины нет значения.
        DegenerateTriangleError: треугольник вырожден и on_degenerate="raise".
    """
    _check_policy(on_degenerate)
    x, y = _point_xy(point)
    (x1, y1), (x2, y2), (x3, y3) = ((v.x, v.y) for v in triangle.vertices)
    z1, z2, z3 = triangle.resolved_values()

    numerator = (
        z3 * (x - x1) * (y - y2) + z1 * (x - x2) * (y - y3) + z2 * (x - x3) * (y - y1)
        - z2 * (x - x1) * (y - y3) - z3 * (x - x2) * (y - y1) - z1 * (x - x3) * (y - y2)
    )
    denominator = (
        (x - x1) * (y - y2) + (x - x2) * (y - y3) + (x - x3) * (y - y1)
        - (x - x1) * (y - y3) - (x - x2) * (y - y1) - (x - x3) * (y - y2)
    )

    if _is_degenerate(triangle, on_degenerate, 1):
        denominator = 0.0
    with np.errstate(divide='ignore', invalid='ignore'):
        return float(np.divide(numerator, denominator))


def interpolate_many(
    points: Any,
    triangle: Triangle,
    on_degenerate: str = PROPAGATE,
) -> NDArray[np.float64]:
    """Векторизованная интерполяция по массиву точек формы (N, 2).

    Вычисляет ту же формулу, что и interpolate(), в том же порядке операций,
    поэтому результаты совпадают поэлементно.

    Args:
        points: точки формы (N, 2) или (N, 3); третья колонка игнорируется.
        triangle: треугольник с разрешимыми значениями в вершинах.
        on_degenerate: политика для вырожденного треугольника.

    Returns:
        Массив значений формы (N,).
    """
    _check_policy(on_degenerate)
    try:
        pts = np.asarray(points, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"Points must form a numeric (N, 2) array: {exc}") from exc
    if pts.ndim != 2 or pts.shape[1] < 2:
        raise InvalidInputError(f"Points must have shape (N, 2), got {pts.shape}")

    xy, z = triangle.as_arrays()
    # dx[:, i] = x - x_i, dy[:, i] = y - y_i
    dx = pts[:, 0:1] - xy[:, 0]
    dy = pts[:, 1:2] - xy[:, 1]

    numerator = (
        z[2] * dx[:, 0] * dy[:, 1] + z[0] * dx[:, 1] * dy[:, 2] + z[1] * dx[:, 2] * dy[:, 0]
        - z[1] * dx[:, 0] * dy[:, 2] - z[2] * dx[:, 1] * dy[:, 0] - z[0] * dx[:, 2] * dy[:, 1]
    )
    denominator = (
        dx[:, 0] * dy[:, 1] + dx[:, 1] * dy[:, 2] + dx[:, 2] * dy[:, 0]
        - dx[:, 0] * dy[:, 2] - dx[:, 1] * dy[:, 0] - dx[:, 2] * dy[:, 1]
    )

    if _is_degenerate(triangle, on_degenerate, len(pts)):
        denominator = np.zeros_like(numerator)

    with np.errstate(divide='ignore', invalid='ignore'):
        return numerator / denominator


def _is_degenerate(triangle: Triangle, on_degenerate: str, n_points: int) -> bool:
    """Проверить вырожденность по площади треугольника, а не по знаменателю в точке.

    После округления знаменатель коллинеарного треугольника бывает
    ненулевым, поэтому решение принимается один раз для треугольника.
    """
    area = signed_area(triangle)
    if area != 0.0:
        return False
    if on_degenerate == RAISE:
        raise DegenerateTriangleError(area)
    logger.debug("Degenerate triangle (area %r), returning non-finite values for %d point(s)",
                 area, n_points)
    return True


def plane_coefficients(triangle: Triangle) -> Tuple[float, float, float]:
    """Коэффициенты (a, b, c) плоскости z = a*x + b*y + c через три вершины.

    Raises:
        DegenerateTriangleError: вершины коллинеарны, система вырождена.
    """
    xy, z = triangle.as_arrays()
    matrix = np.column_stack([xy, np.ones(3)])
    try:
        a, b, c = np.linalg.solve(matrix, z)
    except np.linalg.LinAlgError as exc:
        raise DegenerateTriangleError(signed_area(triangle)) from exc
    return float(a), float(b), float(c)
