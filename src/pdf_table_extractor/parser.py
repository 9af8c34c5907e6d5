# src/pdf_table_extractor/parser.py
from __future__ import annotations
import logging
from typing import Any, Dict

import fitz

from .collector import PageCollector, TextPlacement
from .shapes import Matrix
from .structures import Point

log = logging.getLogger(__name__)


def _to_pdf(x: float, y: float, to_pdf: fitz.Matrix) -> Point:
    p = fitz.Point(x, y) * to_pdf
    return Point(p.x, p.y)


def _replay_path(path: Dict[str, Any], collector: PageCollector, ctm: Matrix) -> None:
    """Traduce un trazo de `get_drawings()` a eventos de construcción + pintado."""
    last = None
    pending = False
    for item in path.get("items", []):
        op = item[0]
        if op == "re":
            r = item[1]
            collector.rect(r.x0, r.y1, r.width, r.height)
            collector.paint(ctm)
            last, pending = None, False
        elif op == "qu":
            q = item[1]
            corners = (q.ul, q.ur, q.lr, q.ll, q.ul)
            collector.move_to(corners[0].x, corners[0].y)
            for p in corners[1:]:
                collector.line_to(p.x, p.y)
            collector.paint(ctm)
            last, pending = None, False
        elif op == "l":
            p1, p2 = item[1], item[2]
            if last is None or (p1.x, p1.y) != (last.x, last.y):
                collector.move_to(p1.x, p1.y)
            collector.line_to(p2.x, p2.y)
            last, pending = p2, True
        elif op == "c":
            collector.curve(*[v for p in item[1:] for v in (p.x, p.y)])
            last, pending = item[-1], True
    if pending:
        collector.paint(ctm)


def _space_width(span: Dict[str, Any]) -> float:
    """
    Ancho de un espacio en la fuente del span.

    Si el span trae un carácter espacio se usa su caja; si no, la métrica de
    Helvetica al mismo tamaño (aproximada para otras fuentes).
    """
    for ch in span.get("chars", []):
        if ch.get("c") == " ":
            x0, _, x1, _ = ch["bbox"]
            if x1 > x0:
                return x1 - x0
    return fitz.get_text_length(" ", fontsize=span.get("size", 0.0))


def _replay_text(page: fitz.Page, collector: PageCollector, to_pdf: fitz.Matrix) -> int:
    n = 0
    raw = page.get_text("rawdict") or {}
    for block in raw.get("blocks", []):
        if block.get("type", 0) != 0:
            continue
        for line in block.get("lines", []):
            dx, dy = line.get("dir", (1.0, 0.0))
            for span in line.get("spans", []):
                space = _space_width(span)
                for ch in span.get("chars", []):
                    text = ch.get("c", "")
                    if not text:
                        continue
                    ox, oy = ch["origin"]
                    x0, y0, x1, y1 = ch["bbox"]
                    advance = (x1 - x0) * abs(dx) + (y1 - y0) * abs(dy)
                    collector.render_text(TextPlacement(
                        text=text,
                        baseline_start=_to_pdf(ox, oy, to_pdf),
                        baseline_end=_to_pdf(ox + dx * advance, oy + dy * advance, to_pdf),
                        descent_start=_to_pdf(x0, y1, to_pdf),
                        ascent_end=_to_pdf(x1, y0, to_pdf),
                        single_space_width=space,
                    ))
                    n += 1
    return n


def replay_page(page: fitz.Page, collector: PageCollector) -> None:
    """
    Recorre los dibujos vectoriales y los caracteres de la página y los
    entrega al colector como eventos en espacio de usuario PDF.
    """
    to_pdf = ~page.transformation_matrix
    ctm: Matrix = (to_pdf.a, to_pdf.b, to_pdf.c, to_pdf.d, to_pdf.e, to_pdf.f)

    drawings = page.get_drawings()
    for path in drawings:
        _replay_path(path, collector, ctm)
    n_chars = _replay_text(page, collector, to_pdf)
    log.debug("Página %d: %d trazos, %d glifos", page.number + 1, len(drawings), n_chars)


def page_to_text(page: fitz.Page, delimiter: str = ",") -> str:
    box = page.cropbox
    collector = PageCollector(page.rotation, box.width, box.height, delimiter)
    replay_page(page, collector)
    return collector.get_resultant_text()
