# src/pdf_table_extractor/collector.py
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from .layout_table import extract_page_text
from .shapes import IDENTITY, LineShape, Matrix, RectangleShape, apply_matrix, classify_path
from .structures import (
    POINT_TOLERANCE,
    Line,
    Point,
    Rectangle,
    TextChunk,
    UnsupportedRotationError,
)

log = logging.getLogger(__name__)

SUPPORTED_ROTATIONS = (0, 90)


@dataclass(frozen=True)
class TextPlacement:
    """Un glifo (o corrida) tal como lo entrega el decodificador de contenido.

    Las coordenadas están en el espacio de usuario de la página, con el eje
    Y hacia arriba.
    """
    text: str
    baseline_start: Point
    baseline_end: Point
    descent_start: Point
    ascent_end: Point
    single_space_width: float


def _baseline_unit(start: Point, end: Point) -> np.ndarray:
    v = np.array([end.x - start.x, end.y - start.y], dtype=float)
    norm = float(np.linalg.norm(v))
    if norm == 0:
        return np.array([1.0, 0.0])
    return v / norm


class PageCollector:
    """
    Recibe los eventos de render de una página y acumula rectángulos, líneas
    y chunks de texto. Cada página usa su propia instancia.
    """

    def __init__(self, rotation: int, width: float, height: float, delimiter: str = ","):
        if rotation not in SUPPORTED_ROTATIONS:
            raise UnsupportedRotationError(f"Rotación de página no soportada: {rotation}")
        self.rotation = rotation
        self.page_width = width
        self.page_height = height
        self.delimiter = delimiter

        self.rectangles: List[Rectangle] = []
        self.lines: List[Line] = []
        self.chunks: List[TextChunk] = []
        self.char_tolerance = 0.0

        self._points: List[Point] = []
        self._pending_rect: Optional[Rectangle] = None
        self._last_chunk: Optional[TextChunk] = None

    # --- coordenadas ---

    def transform(self, point: Point, ctm: Matrix = IDENTITY) -> Point:
        dst = apply_matrix(point, ctm)
        if self.rotation == 0:
            return Point(dst.x, self.page_height - dst.y)
        if self.rotation == 90:
            return dst
        raise UnsupportedRotationError(f"Rotación de página no soportada: {self.rotation}")

    # --- construcción de trazos ---

    def move_to(self, x: float, y: float) -> None:
        self._points.append(Point(x, y))

    def line_to(self, x: float, y: float) -> None:
        self._points.append(Point(x, y))

    def rect(self, x: float, y: float, width: float, height: float) -> None:
        self._pending_rect = Rectangle(x=x, y=y, width=width, height=height)

    def curve(self, *operands: float) -> None:
        # las curvas no aportan estructura
        pass

    def close(self) -> None:
        pass

    def paint(self, ctm: Matrix = IDENTITY, no_op: bool = False) -> None:
        """Cierra el trazo actual; si se pinta, intenta reconstruir la figura."""
        if not no_op:
            if self._pending_rect is not None:
                self._add_explicit_rect(self._pending_rect, ctm)
            else:
                shape = classify_path(self._points, lambda p: self.transform(p, ctm))
                if isinstance(shape, RectangleShape):
                    self.rectangles.append(shape.rect)
                elif isinstance(shape, LineShape):
                    self.lines.append(shape.line)
        self._pending_rect = None
        self._points.clear()

    def _add_explicit_rect(self, rect: Rectangle, ctm: Matrix) -> None:
        corner = self.transform(Point(rect.x, rect.y), ctm)
        max_dimension = max(self.page_width, self.page_height)
        width = rect.width
        if corner.x + width > max_dimension:
            width = max_dimension - corner.x
        self.rectangles.append(Rectangle(x=corner.x, y=corner.y, width=width, height=rect.height))

    # --- texto ---

    def render_text(self, placement: TextPlacement) -> None:
        """Crea el chunk del glifo o lo fusiona con el anterior si están pegados."""
        log.debug("render_text %r", placement.text)
        half_space = placement.single_space_width / 2.0
        self.char_tolerance = half_space

        bl = placement.descent_start
        tr = placement.ascent_end
        rect = Rectangle(x=bl.x, y=bl.y, width=tr.x - bl.x, height=abs(bl.y - tr.y))
        if self.rotation == 0:
            rect.y = self.page_height - rect.y
        elif self.rotation == 90:
            rect = Rectangle(x=bl.y, y=bl.x,
                             width=abs(tr.y - bl.y),
                             height=abs(bl.x - tr.x))

        unit = _baseline_unit(placement.baseline_start, placement.baseline_end)
        downward = unit[1] == -1
        if int(np.arctan2(unit[1], unit[0]) * 1000) != 0 and downward:
            rect.y += rect.height

        last = self._last_chunk
        if last is not None and abs(last.y - rect.y) < POINT_TOLERANCE:
            if abs(rect.x - last.rect.right) < half_space:
                last.rect.width += rect.width
                last.text += placement.text
                return
        elif last is not None and downward and abs(last.x - rect.x) < POINT_TOLERANCE:
            if abs(rect.y - (last.y + rect.height)) < half_space:
                last.rect.height += rect.height
                last.text += placement.text
                return

        chunk = TextChunk(rect=rect, text=placement.text)
        self._last_chunk = chunk
        self.chunks.append(chunk)

    # --- salida ---

    def get_resultant_text(self) -> str:
        """Texto delimitado de la página completa ("" si no hubo texto)."""
        return extract_page_text(self.chunks, self.rectangles, self.delimiter, self.char_tolerance)
