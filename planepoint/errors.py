"""
Исключения пакета planepoint.

Все ошибки наследуются от PlanePointError, поэтому вызывающий код может
перехватить их одним except. Ошибки входных данных дополнительно являются
ValueError.
"""

from typing import Optional


class PlanePointError(Exception):
    """Базовая ошибка пакета planepoint."""


class InvalidInputError(PlanePointError, ValueError):
    """Некорректные входные данные: точка, координаты или GeoJSON."""


class InvalidTriangleError(InvalidInputError):
    """Треугольник задан не тремя вершинами или с неверной размерностью координат."""


class MissingValueError(PlanePointError, ValueError):
    """У вершины нет ни явного значения, ни третьей координаты.

    Attributes:
        slot: имя вершины ("a", "b" или "c"), значение которой не найдено.
    """

    def __init__(self, slot: Optional[str] = None):
        self.slot = slot
        if slot is None:
            message = "Vertex value is missing: no override and no embedded z-coordinate"
        else:
            message = (
                f"Vertex {slot!r} value is missing: "
                f"no override and no embedded z-coordinate"
            )
        super().__init__(message)


class DegenerateTriangleError(PlanePointError, ArithmeticError):
    """Вершины треугольника коллинеарны, плоскость не определена."""

    def __init__(self, area: float):
        self.area = area
        super().__init__(f"Triangle is degenerate (signed area {area!r})")
