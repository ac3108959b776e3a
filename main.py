"""
Точка входа: Z-значение в точке внутри треугольника из GeoJSON.

Использование:
    python main.py <triangle.geojson> --point X Y [--json]

Тот же интерфейс доступен как консольная команда `planepoint`.
"""

import sys

from planepoint.cli import main

if __name__ == "__main__":
    sys.exit(main())
