# src/pdf_table_extractor/grid_builder.py
from __future__ import annotations
import logging
from typing import Dict, List

import numpy as np

from .structures import DIVIDER_TOLERANCE, CellTemplate, Rectangle

log = logging.getLogger(__name__)

TemplateRows = Dict[float, List[CellTemplate]]


def create_template(rect: Rectangle, dividers: List[float], row_min_height: float) -> CellTemplate:
    """
    Crea la plantilla de celda de un rectángulo.

    Recorre los divisores hasta encontrar el que coincide con el borde derecho
    (±2); el número de pasos hacia atrás hasta el borde izquierdo es el span
    horizontal. Si no hay coincidencia, la celda ocupa una sola columna.
    """
    vertical_span = max(1, int(rect.height // row_min_height)) if row_min_height > 0 else 1
    cell = Rectangle(x=rect.x, y=rect.y, width=rect.width, height=rect.height)

    for index in range(1, len(dividers)):
        divider = dividers[index]
        if abs(divider - rect.right) < DIVIDER_TOLERANCE:
            span = 0
            j = index - 1
            while j >= 0:
                span += 1
                if abs(dividers[j] - rect.x) < DIVIDER_TOLERANCE:
                    break
                j -= 1
            return CellTemplate(rect=cell, horizontal_span=span, vertical_span=vertical_span)
        if divider > rect.right + 1:
            break

    return CellTemplate(rect=cell, horizontal_span=1, vertical_span=vertical_span)


def build_templates(rect_rows: Dict[float, List[Rectangle]], dividers: List[float]) -> List[CellTemplate]:
    templates: List[CellTemplate] = []
    for key in sorted(rect_rows):
        row = rect_rows[key]
        if not row:
            continue
        row_min = min(r.height for r in row)
        templates.extend(create_template(r, dividers, row_min) for r in row)
    log.debug("%d plantillas creadas", len(templates))
    return templates


def pad_rows(templates: List[CellTemplate], dividers: List[float]) -> TemplateRows:
    """
    Agrupa plantillas por fila y completa las filas incompletas.

    Si una fila no tiene tantas plantillas como huecos entre divisores, se
    generan plantillas vacías para cada hueco no cubierto (teniendo en cuenta
    el span de las existentes).
    """
    grouped: TemplateRows = {}
    for t in templates:
        grouped.setdefault(t.y, []).append(t)

    n_gaps = len(dividers) - 1
    rows: TemplateRows = {}
    for key in sorted(grouped):
        row = sorted(grouped[key], key=lambda t: t.x)
        if n_gaps > 0 and len(row) != n_gaps:
            avg_height = float(np.mean([t.height for t in row]))
            synthetic = [
                CellTemplate(rect=Rectangle(x=dividers[j], y=key,
                                            width=dividers[j + 1] - dividers[j],
                                            height=avg_height))
                for j in range(n_gaps)
            ]
            claimed = [False] * n_gaps
            for i, slot in enumerate(synthetic):
                for t in row:
                    if abs(t.x - slot.x) < DIVIDER_TOLERANCE:
                        for p in range(t.horizontal_span):
                            if i + p < n_gaps:
                                claimed[i + p] = True
            row.extend(s for s, taken in zip(synthetic, claimed) if not taken)
        rows[key] = sorted(row, key=lambda t: t.x)
    return rows
