# src/pdf_table_extractor/assign.py
from __future__ import annotations
import logging
from typing import Dict, List, Optional, Sequence

from .structures import TEMPLATE_BAND_SLACK, CellTemplate, Rectangle, TextChunk

log = logging.getLogger(__name__)

TemplateRows = Dict[float, List[CellTemplate]]


def assign_by_containment(templates: Sequence[CellTemplate],
                          text_rows: Dict[float, List[TextChunk]],
                          char_tolerance: float) -> int:
    """Asigna cada chunk a la primera plantilla que lo contiene.

    Tolera media anchura de espacio en horizontal y 0.2 × altura en vertical.
    Devuelve cuántos chunks se asignaron.
    """
    assigned = 0
    for key in sorted(text_rows):
        for chunk in text_rows[key]:
            if chunk.assigned:
                continue
            for template in templates:
                if template.y < chunk.rect.bottom or template.y - TEMPLATE_BAND_SLACK > chunk.y:
                    continue
                if template.contains(chunk, char_tolerance):
                    template.text.append(chunk)
                    chunk.assigned = True
                    assigned += 1
                    break
    return assigned


def _find_cell(row: List[CellTemplate], chunk: TextChunk) -> Optional[CellTemplate]:
    for template in row:
        if template.x <= chunk.x < template.right:
            return template
    return None


def _splice_template(template_rows: TemplateRows, origin_key: float, chunk: TextChunk,
                     overflow_delta: float, dividers: Sequence[float]) -> None:
    """Inserta una columna nueva para `chunk` en todas las filas, a la misma X."""
    ordered = sorted(template_rows[origin_key], key=lambda t: t.x)
    i = 0
    while i < len(ordered) and chunk.x > ordered[i].x:
        i += 1

    if i > 0:
        left = ordered[i - 1].right
    else:
        left = max((d for d in dividers if d <= chunk.x), default=0.0)
    right = ordered[i].x if i < len(ordered) else chunk.rect.right
    width = max(0.0, right - left)

    log.debug("Celda sintética x=%.2f ancho=%.2f para %r", left, width, chunk.text)
    for key, row in template_rows.items():
        template = CellTemplate(rect=Rectangle(x=left, y=key, width=width,
                                               height=chunk.height + overflow_delta))
        if key == origin_key:
            template.text.append(chunk)
        row.append(template)


def place_chunks(template_rows: TemplateRows,
                 chunks: Sequence[TextChunk],
                 row_key: float,
                 overflow_delta: float,
                 dividers: Sequence[float] = ()) -> None:
    """
    Coloca los chunks aún sin asignar de una fila de texto.

    Busca la primera fila de plantillas que contiene verticalmente al chunk
    (holgura hasta la plantilla más alta de la fila) y dentro de ella la
    celda cuyo [x, x+ancho) contiene su X. Si ninguna lo contiene, crea una
    celda sintética en todas las filas. Lo que queda suelto se vuelca en una
    plantilla propia en la fila `row_key`.
    """
    for chunk in chunks:
        if chunk.assigned:
            continue
        for key in list(template_rows):
            row = template_rows[key]
            if not row:
                continue
            max_height = max(t.height for t in row)
            if key < chunk.y or key - max_height > chunk.rect.bottom:
                continue
            cell = _find_cell(row, chunk)
            if cell is None:
                _splice_template(template_rows, key, chunk, overflow_delta, dividers)
            else:
                cell.text.append(chunk)
            chunk.assigned = True
            break

    leftovers = sorted((c for c in chunks if not c.assigned), key=lambda c: c.x)
    if not leftovers:
        return

    left = leftovers[0].x
    rect = Rectangle(x=left, y=row_key,
                     width=max(c.rect.right for c in leftovers) - left,
                     height=max(c.height for c in leftovers))
    for c in leftovers:
        c.assigned = True
    template_rows.setdefault(row_key, []).append(CellTemplate(rect=rect, text=list(leftovers)))
    log.debug("%d chunks sin celda volcados en la fila %.2f", len(leftovers), row_key)
