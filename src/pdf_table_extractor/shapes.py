# src/pdf_table_extractor/shapes.py
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Callable, List, Sequence, Tuple, Union

import numpy as np

from .structures import Line, Point, Rectangle

log = logging.getLogger(__name__)

Matrix = Tuple[float, float, float, float, float, float]
IDENTITY: Matrix = (1.0, 0.0, 0.0, 1.0, 0.0, 0.0)


@dataclass(frozen=True)
class RectangleShape:
    rect: Rectangle


@dataclass(frozen=True)
class LineShape:
    line: Line


@dataclass(frozen=True)
class Unrecognized:
    n_points: int


Shape = Union[RectangleShape, LineShape, Unrecognized]


def apply_matrix(point: Point, ctm: Matrix) -> Point:
    """Transformación afín en el orden de PDF: [x y 1] · M."""
    a, b, c, d, e, f = ctm
    m = np.array([[a, b, 0.0], [c, d, 0.0], [e, f, 1.0]], dtype=float)
    x, y, _ = np.array([point.x, point.y, 1.0], dtype=float) @ m
    return Point(float(x), float(y))


def classify_path(points: Sequence[Point],
                  transform: Callable[[Point], Point]) -> Shape:
    """
    Reconstruye la figura acumulada desde el último pintado.

    - 4 puntos, o 5 con el último igual al primero: caja envolvente de los
      tres primeros puntos transformados.
    - 4 puntos distintos tras transformar: rectángulo (posiblemente rotado)
      a partir de los puntos ordenados por X asc y luego Y desc.
    - 2 puntos: línea.
    Cualquier otra cantidad no se reconoce.
    """
    n = len(points)
    if n == 0:
        return Unrecognized(0)

    if n == 4 or (n == 5 and points[0].is_equal(points[4])):
        tri = [transform(p) for p in points[:3]]
        xs = [p.x for p in tri]
        ys = [p.y for p in tri]
        return RectangleShape(Rectangle(x=min(xs), y=max(ys),
                                        width=max(xs) - min(xs),
                                        height=max(ys) - min(ys)))

    distinct: List[Point] = []
    seen = set()
    for p in (transform(p) for p in points):
        if (p.x, p.y) not in seen:
            seen.add((p.x, p.y))
            distinct.append(p)

    if len(distinct) == 4:
        s = sorted(distinct, key=lambda p: (p.x, -p.y))
        return RectangleShape(Rectangle(x=s[1].x, y=s[1].y,
                                        width=s[2].x - s[0].x,
                                        height=abs(s[1].y - s[0].y)))

    if n == 2:
        return LineShape(Line(transform(points[0]), transform(points[1])))

    log.debug("Trazo de %d puntos ignorado", n)
    return Unrecognized(n)
