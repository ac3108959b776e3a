"""
Командная строка: Z-значение в точках внутри треугольника из GeoJSON.

Использование:
    planepoint <triangle.geojson> --point X Y [--point X Y ...]
    planepoint <triangle.geojson> --point-file point.geojson [--json]

Пример:
    planepoint tin.geojson --point -75.3221 39.529
    planepoint tin.geojson --point 0.5 0.5 --on-degenerate raise --json
"""

import argparse
import json
import logging
import math
import sys
from typing import List, Optional, Sequence, Tuple

import numpy as np

from planepoint.errors import PlanePointError
from planepoint.geometry.triangle import DEGENERATE_POLICIES, interpolate_many
from planepoint.io.geojson import load_geojson, point_from_feature, triangle_from_feature
from planepoint.logging_config import LogContext, log_timing, setup_logging
from planepoint.project_config import ProjectConfig, load_config

logger = logging.getLogger(__name__)


def _format_value(value: float, precision: Optional[int]) -> str:
    if precision is None or not math.isfinite(value):
        return repr(value)
    return f"{value:.{precision}f}"


def _json_value(value: float) -> object:
    # JSON has no inf/nan
    return value if math.isfinite(value) else str(value)


def run(
    triangle_path: str,
    points: Sequence[Tuple[float, float]],
    config: ProjectConfig,
) -> List[float]:
    """Загрузить треугольник и интерполировать значения во всех точках.

    Args:
        triangle_path: путь к GeoJSON с Polygon-треугольником.
        points: точки запроса [(x, y), ...].
        config: конфигурация (политика вырождения, имена свойств).

    Returns:
        Значения в точках в том же порядке.
    """
    triangle = triangle_from_feature(
        load_geojson(triangle_path),
        config.interpolation.property_names,
    )
    with log_timing(logger, "Interpolating", points=len(points)) as info:
        values = interpolate_many(
            np.asarray(points, dtype=np.float64).reshape(-1, 2),
            triangle,
            on_degenerate=config.interpolation.on_degenerate,
        )
        info["non_finite"] = int(np.count_nonzero(~np.isfinite(values)))
    if info["non_finite"]:
        logger.warning("%d of %d values are not finite (degenerate triangle)",
                       info["non_finite"], len(points))
    return [float(v) for v in values]


def render(
    points: Sequence[Tuple[float, float]],
    values: Sequence[float],
    config: ProjectConfig,
) -> str:
    """Отформатировать результаты как текст (по строке на точку) или JSON."""
    precision = config.output.precision
    if config.output.format == "json":
        return json.dumps([
            {"x": x, "y": y, "z": _json_value(z)}
            for (x, y), z in zip(points, values)
        ])
    return "\n".join(_format_value(z, precision) for z in values)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="planepoint",
        description="Интерполяция Z-значения в точке по плоскости треугольника (GeoJSON).",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "triangle",
        help="GeoJSON-файл с Polygon-треугольником (Feature или геометрия).",
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--point", "-p",
        nargs=2,
        type=float,
        action="append",
        metavar=("X", "Y"),
        help="Точка запроса; можно указать несколько раз.",
    )
    source.add_argument(
        "--point-file",
        dest="point_file",
        help="GeoJSON-файл с Point (Feature или геометрия).",
    )
    parser.add_argument(
        "--on-degenerate",
        choices=DEGENERATE_POLICIES,
        default=None,
        dest="on_degenerate",
        help="Поведение для вырожденного треугольника (по умолчанию из конфига: propagate).",
    )
    parser.add_argument(
        "--config", "-c",
        default=None,
        help="Путь к конфигурационному файлу .planepoint.json.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Вывод в формате JSON.",
    )
    parser.add_argument(
        "--precision",
        type=int,
        default=None,
        help="Число знаков после запятой в текстовом выводе.",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Подробное логирование (DEBUG).",
    )
    parser.add_argument(
        "--log-json",
        default=None,
        dest="log_json",
        help="Файл для логов в формате JSON lines.",
    )
    return parser.parse_args(argv)


def _apply_args(config: ProjectConfig, args: argparse.Namespace) -> ProjectConfig:
    if args.on_degenerate:
        config.interpolation.on_degenerate = args.on_degenerate
    if args.json:
        config.output.format = "json"
    if args.precision is not None:
        config.output.precision = args.precision
    if args.verbose:
        config.logging.level = "DEBUG"
    if args.log_json:
        config.logging.json_file = args.log_json
    return config.validate()


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)

    # Логирование до загрузки конфига, чтобы видеть ошибки конфига
    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        config = _apply_args(load_config(args.triangle, args.config), args)
        setup_logging(
            level=config.log_level,
            json_file=config.logging.json_file,
            use_colors=config.logging.use_colors and sys.stderr.isatty(),
        )

        with LogContext(triangle_file=args.triangle):
            if args.point_file:
                points = [point_from_feature(load_geojson(args.point_file))]
            else:
                points = [(x, y) for x, y in args.point]
            values = run(args.triangle, points, config)
    except PlanePointError as exc:
        logger.critical("Ошибка входных данных: %s", exc)
        return 1
    except ValueError as exc:
        logger.critical("Ошибка конфигурации: %s", exc)
        return 1
    except Exception as exc:
        logger.critical("Неожиданная ошибка: %s", exc, exc_info=True)
        return 2

    print(render(points, values, config))
    return 0


if __name__ == "__main__":
    sys.exit(main())
