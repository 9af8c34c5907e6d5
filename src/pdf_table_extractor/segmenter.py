# src/pdf_table_extractor/segmenter.py
from __future__ import annotations
import logging
import math
from dataclasses import dataclass, field
from typing import Iterator, List

from .structures import Rectangle, TextChunk

log = logging.getLogger(__name__)


@dataclass
class Band:
    """Franja vertical de la página que se procesa como una unidad."""
    begin: float
    end: float
    chunks: List[TextChunk] = field(default_factory=list)
    rectangles: List[Rectangle] = field(default_factory=list)


def _collect(chunks: List[TextChunk], rectangles: List[Rectangle],
             begin: float, end: float, inclusive: bool) -> Band:
    if inclusive:
        inside = lambda y: begin <= y <= end
    else:
        inside = lambda y: begin <= y < end
    return Band(begin=begin, end=end,
                chunks=[c for c in chunks if inside(c.y)],
                rectangles=[r for r in rectangles if inside(r.y)])


def split_bands(chunks: List[TextChunk], rectangles: List[Rectangle]) -> Iterator[Band]:
    """
    Parte la página en franjas separadas por huecos verticales grandes.

    El umbral es 2 × ceil(altura máxima de chunk). Solo se emiten franjas
    que contienen texto.
    """
    if not chunks:
        return

    max_gap = math.ceil(max(c.height for c in chunks)) * 2
    ys = sorted({c.y for c in chunks} | {r.y for r in rectangles})

    begin = 0.0
    for prev, nxt in zip(ys, ys[1:]):
        if nxt - prev > max_gap:
            band = _collect(chunks, rectangles, begin, nxt, inclusive=False)
            begin = nxt
            if band.chunks:
                log.debug("Franja [%.2f, %.2f): %d chunks, %d rectángulos",
                          band.begin, band.end, len(band.chunks), len(band.rectangles))
                yield band

    band = _collect(chunks, rectangles, begin, ys[-1], inclusive=True)
    if band.chunks:
        log.debug("Franja final [%.2f, %.2f]: %d chunks, %d rectángulos",
                  band.begin, band.end, len(band.chunks), len(band.rectangles))
        yield band
