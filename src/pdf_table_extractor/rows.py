# src/pdf_table_extractor/rows.py
from __future__ import annotations
import logging
from typing import Callable, Dict, List, Sequence, TypeVar

import numpy as np

from .structures import POINT_TOLERANCE, Rectangle, TextChunk

log = logging.getLogger(__name__)

TALL_RECT_FACTOR = 3.0

T = TypeVar("T", TextChunk, Rectangle)


def modal_value(values: Sequence[float], default: float = 0.0) -> float:
    """Valor más frecuente (empates → el que aparece primero)."""
    if len(values) == 0:
        return default
    arr = np.asarray(values, dtype=float)
    vals, first, cnts = np.unique(arr, return_index=True, return_counts=True)
    order = np.where(cnts == cnts.max(), first, len(arr))
    return float(vals[int(np.argmin(order))])


def _baseline_of(members: List[T]) -> float:
    """Y del grupo de altura dominante: más ocurrencias, desempate por mayor altura."""
    by_height: Dict[float, List[T]] = {}
    for m in members:
        by_height.setdefault(m.height, []).append(m)

    count, y, h = 0, 0.0, 0.0
    for group in by_height.values():
        if len(group) > count or (len(group) == count and group[0].height > h):
            count, y, h = len(group), group[0].y, group[0].height
    return y


def bucket_by_y(items: Sequence[T], tolerance: Callable[[T], float]) -> Dict[float, List[T]]:
    """
    Agrupa elementos por Y en dos etapas.

    1) Recorre por Y ascendente; si la Y exacta no es clave, reutiliza la
       primera clave a menos de `tolerance(item)` (esa clave queda "desplazada").
    2) Cada clave desplazada se re-etiqueta con la Y de la línea base
       dominante de sus miembros.
    """
    buckets: Dict[float, List[T]] = {}
    displaced: Dict[float, None] = {}

    for item in sorted(items, key=lambda i: i.y):
        ycoord = item.y
        if item.y not in buckets:
            found = False
            for y in buckets:
                if abs(item.y - y) < tolerance(item):
                    if abs(ycoord - y) > POINT_TOLERANCE:
                        displaced[y] = None
                    ycoord = y
                    found = True
                    break
            if not found:
                buckets[item.y] = []
        buckets[ycoord].append(item)

    for key in displaced:
        if key not in buckets:
            continue
        y = _baseline_of(buckets[key])
        if abs(y - key) > POINT_TOLERANCE:
            members = buckets.pop(key)
            buckets.setdefault(y, []).extend(members)

    return {k: sorted(buckets[k], key=lambda i: i.x) for k in sorted(buckets)}


def cluster_text_rows(chunks: Sequence[TextChunk], overflow_delta: float) -> Dict[float, List[TextChunk]]:
    """Agrupa chunks de texto en filas; cada fila ordenada por X."""
    rows = bucket_by_y(chunks, lambda c: c.height + overflow_delta)
    log.debug("%d chunks agrupados en %d filas", len(chunks), len(rows))
    return rows


def _distinct_cells(cells: List[Rectangle]) -> List[Rectangle]:
    seen = set()
    out = []
    for c in cells:
        if (c.x, c.width) not in seen:
            seen.add((c.x, c.width))
            out.append(c)
    return sorted(out, key=lambda c: c.x)


def build_rectangle_rows(rectangles: Sequence[Rectangle],
                         modal_height: float,
                         min_height: float,
                         min_width: float,
                         ) -> Dict[float, List[Rectangle]]:
    """
    Filtra los rectángulos de una franja y los ordena en filas de celdas.

    Descarta rectángulos con Y negativa, más estrechos o bajos que el texto
    más pequeño, y los muy altos (> 3× la altura modal) que se cruzan con
    otro (artefactos de trazos superpuestos). Si en una fila sobrevive una
    sola celda útil, reconstruye las celdas a partir de los huecos entre
    posiciones X distintas.
    """
    kept: List[Rectangle] = []
    for rect in rectangles:
        if rect.y < 0 or rect.width < min_width or rect.height < min_height:
            continue
        if rect.height > modal_height * TALL_RECT_FACTOR and any(r.intersects(rect) for r in rectangles):
            continue
        kept.append(rect)

    if not kept:
        return {}

    # filas de rectángulos: solo la Y exacta agrupa
    raw_rows = bucket_by_y(kept, lambda r: 0.0)
    keys = list(raw_rows)
    rows: Dict[float, List[Rectangle]] = {}

    for k, key in enumerate(keys):
        cells = _distinct_cells(raw_rows[key])
        useful = [c for c in cells if c.width > 1 and c.height >= min_height]
        if len(useful) > 1:
            rows[key] = useful
            continue

        built: List[Rectangle] = []
        current = cells[0]
        for cell in cells[1:]:
            width = cell.x - current.x
            height = current.height
            if k > 0:
                height = keys[k] - keys[k - 1]
            if width > 1 and height >= min_height:
                built.append(Rectangle(x=current.x, y=key, width=width, height=height))
            current = cell

        if len(built) > 1:
            last = cells[-1]
            if last.width > 1 and last.height > 1:
                built.append(Rectangle(x=last.x, y=key, width=last.width, height=built[-1].height))
            rows[key] = built
        elif len(cells) == 1 and cells[0].width > 1:
            rows[key] = [cells[0]]

    log.debug("%d rectángulos → %d filas de celdas", len(rectangles), len(rows))
    return rows
