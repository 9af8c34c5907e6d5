# src/pdf_table_extractor/layout_table.py
from __future__ import annotations
import logging
from typing import List

from .assign import assign_by_containment, place_chunks
from .columns import collect_dividers
from .exporters import rows_to_text, templates_to_text
from .grid_builder import build_templates, pad_rows
from .rows import build_rectangle_rows, cluster_text_rows, modal_value
from .segmenter import split_bands
from .structures import OVERFLOW_FACTOR, Rectangle, TextChunk

log = logging.getLogger(__name__)


def extract_band_text(chunks: List[TextChunk],
                      rectangles: List[Rectangle],
                      delimiter: str = ",",
                      char_tolerance: float = 0.0) -> str:
    """
    Reconstruye la tabla de una franja y la devuelve como texto delimitado.

    Sin rectángulos útiles el texto se vuelca fila por fila.
    """
    if not chunks:
        return ""
    for c in chunks:
        c.assigned = False

    # --- PASO 1: estadísticas de la franja ---
    modal_rect_height = modal_value([r.height for r in rectangles], default=1.0)
    min_height = min(c.height for c in chunks)
    min_width = min(c.width for c in chunks)
    overflow_delta = modal_value([c.height for c in chunks]) * OVERFLOW_FACTOR

    # --- PASO 2: filas de texto y de rectángulos ---
    text_rows = cluster_text_rows(chunks, overflow_delta)
    rect_rows = build_rectangle_rows(rectangles, modal_rect_height, min_height, min_width) if rectangles else {}
    if not rect_rows:
        log.debug("Franja sin rectángulos útiles; volcado por filas")
        return rows_to_text(text_rows, delimiter)

    # --- PASO 3: rejilla ---
    dividers = collect_dividers(rect_rows)
    templates = build_templates(rect_rows, dividers.vertical)

    # --- PASO 4: asignación ---
    n = assign_by_containment(templates, text_rows, char_tolerance)
    log.debug("%d/%d chunks asignados por contención", n, len(chunks))
    template_rows = pad_rows(templates, dividers.vertical)
    for key in sorted(text_rows):
        pending = [c for c in text_rows[key] if not c.assigned]
        if pending:
            place_chunks(template_rows, pending, key, overflow_delta, dividers.vertical)

    # --- PASO 5: serialización ---
    return templates_to_text(template_rows, delimiter)


def extract_page_text(chunks: List[TextChunk],
                      rectangles: List[Rectangle],
                      delimiter: str = ",",
                      char_tolerance: float = 0.0) -> str:
    """Procesa cada franja de la página de arriba abajo y concatena el resultado."""
    if not chunks:
        return ""
    parts = []
    for band in split_bands(chunks, rectangles):
        parts.append(extract_band_text(band.chunks, band.rectangles, delimiter, char_tolerance))
    log.debug("Página: %d chunks, %d rectángulos, %d franjas", len(chunks), len(rectangles), len(parts))
    return "".join(parts)
