# src/pdf_table_extractor/columns.py
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Set

from .structures import DIVIDER_TOLERANCE, POINT_TOLERANCE, Rectangle

log = logging.getLogger(__name__)


@dataclass
class Dividers:
    vertical: List[float] = field(default_factory=list)
    # bordes superior/inferior; reservados para detección basada en líneas
    horizontal: List[float] = field(default_factory=list)


def normalize_dividers(values: Iterable[float]) -> List[float]:
    """Ordena y colapsa divisores a menos de 2 unidades promediándolos.

    El resultado no depende del orden de entrada.
    """
    buckets: List[float] = []
    for value in sorted(set(values)):
        for k, bucket in enumerate(buckets):
            if abs(bucket - value) < DIVIDER_TOLERANCE:
                buckets[k] = (bucket + value) / 2
                break
        else:
            buckets.append(value)
    return sorted(buckets)


def collect_dividers(rect_rows: Dict[float, List[Rectangle]]) -> Dividers:
    """
    Deriva los divisores de columna a partir de los bordes de los rectángulos.

    Un borde izquierdo usado por un solo rectángulo no es un divisor real: se
    descarta y, si su fila tiene más de una celda, el rectángulo sale de la
    fila (modifica `rect_rows`). Un borde compartido aporta también su borde
    derecho.
    """
    vertical: Set[float] = set()
    horizontal: Set[float] = set()
    owner: Dict[int, float] = {}
    by_x: Dict[float, List[Rectangle]] = {}

    for key in sorted(rect_rows):
        for rect in rect_rows[key]:
            vertical.add(rect.x)
            horizontal.add(rect.y)
            horizontal.add(rect.bottom)
            owner[id(rect)] = key
            by_x.setdefault(rect.x, []).append(rect)

    for x, group in by_x.items():
        first = group[0]
        if len(group) == 1:
            vertical.discard(x)
            row = rect_rows.get(owner[id(first)], [])
            if len(row) > 1:
                for i, cell in enumerate(row):
                    if abs(cell.x - first.x) < POINT_TOLERANCE and abs(cell.width - first.width) < POINT_TOLERANCE:
                        del row[i]
                        log.debug("Rectángulo aislado en x=%.2f descartado de la fila %.2f", x, owner[id(first)])
                        break
        else:
            vertical.add(first.right)

    result = Dividers(vertical=normalize_dividers(vertical), horizontal=sorted(horizontal))
    log.debug("Divisores verticales: %s", result.vertical)
    return result
