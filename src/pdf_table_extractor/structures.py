# src/pdf_table_extractor/structures.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List

# Tolerancias fijas del motor (no configurables: cambian la salida)
POINT_TOLERANCE = 1e-6
DIVIDER_TOLERANCE = 2.0
OVERFLOW_FACTOR = 0.2
TEMPLATE_BAND_SLACK = 20.0
GAP_JOIN = 1.0


class UnsupportedRotationError(ValueError):
    """Rotación de página distinta de 0 o 90 grados."""


@dataclass
class Point:
    x: float
    y: float

    def is_equal(self, other: Point) -> bool:
        if other is None:
            return False
        return abs(other.x - self.x) < POINT_TOLERANCE and abs(other.y - self.y) < POINT_TOLERANCE


@dataclass
class Rectangle:
    """Rectángulo fijado por una esquina (x, y) más ancho y alto.

    `y` es el borde que reporta la fuente tras invertir el eje; el borde
    opuesto está en `y - height`.
    """
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y - self.height

    def intersects(self, other: Rectangle) -> bool:
        """True si alguno de los bordes verticales de self cae dentro de `other`.

        No es simétrico: `other` debe cubrir la franja de `self.y` y uno de
        los bordes horizontales de self debe quedar estrictamente dentro
        de su ancho.
        """
        if not (other.y > self.y and other.y - other.height < self.y):
            return False
        if other.x < self.x < other.right:
            return True
        return other.x < self.right < other.right


@dataclass
class Line:
    begin: Point
    end: Point


@dataclass(eq=False)
class TextChunk:
    """Una corrida de glifos fusionados con su caja."""
    rect: Rectangle
    text: str
    assigned: bool = False

    @property
    def x(self) -> float:
        return self.rect.x

    @property
    def y(self) -> float:
        return self.rect.y

    @property
    def width(self) -> float:
        return self.rect.width

    @property
    def height(self) -> float:
        return self.rect.height


@dataclass(eq=False)
class CellTemplate:
    """Celda reconstruida de la rejilla; acumula los chunks asignados."""
    rect: Rectangle
    text: List[TextChunk] = field(default_factory=list)
    horizontal_span: int = 1
    vertical_span: int = 1

    @property
    def x(self) -> float:
        return self.rect.x

    @property
    def y(self) -> float:
        return self.rect.y

    @property
    def width(self) -> float:
        return self.rect.width

    @property
    def height(self) -> float:
        return self.rect.height

    @property
    def right(self) -> float:
        return self.rect.right

    def contains(self, chunk: TextChunk, error: float) -> bool:
        tol = chunk.height * OVERFLOW_FACTOR
        return (chunk.y <= self.rect.y + tol
                and chunk.rect.bottom >= self.rect.bottom - tol
                and chunk.x >= self.rect.x - error
                and chunk.rect.right <= self.rect.right + error)
