# src/pdf_table_extractor/exporters.py
from __future__ import annotations
from pathlib import Path
from typing import Dict, List

from .structures import GAP_JOIN, CellTemplate, TextChunk


def _cell_text(template: CellTemplate) -> str:
    groups: Dict[float, List[TextChunk]] = {}
    for chunk in template.text:
        groups.setdefault(chunk.y, []).append(chunk)

    parts: List[str] = []
    for y in sorted(groups):
        line = sorted(groups[y], key=lambda c: c.x)
        parts.append(line[0].text)
        for prev, cur in zip(line, line[1:]):
            # glifos pegados se concatenan sin espacio
            if abs(cur.x - prev.rect.right) < GAP_JOIN:
                parts.append(cur.text)
            else:
                parts.append(" " + cur.text)
        parts.append(" ")
    return "".join(parts)


def templates_to_text(template_rows: Dict[float, List[CellTemplate]], delimiter: str = ",") -> str:
    """Una línea por fila; las celdas con span repiten el delimitador."""
    out: List[str] = []
    for key in sorted(template_rows):
        row = sorted(template_rows[key], key=lambda t: t.x)
        for index, template in enumerate(row):
            out.append(_cell_text(template))
            if template.horizontal_span > 1:
                out.append(delimiter * (template.horizontal_span - 1))
            if index < len(row) - 1:
                out.append(delimiter)
        out.append("\n")
    return "".join(out)


def rows_to_text(text_rows: Dict[float, List[TextChunk]], delimiter: str = ",") -> str:
    """Volcado sin rejilla: los chunks de cada fila separados por delimitador + espacio."""
    lines = []
    for key in sorted(text_rows):
        chunks = sorted(text_rows[key], key=lambda c: c.x)
        lines.append((delimiter + " ").join(c.text for c in chunks) + "\n")
    return "".join(lines)


def write_text(text: str, output_path: str) -> None:
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.exists():
        path.unlink()
    with open(path, "w", encoding="utf-8", newline="") as fh:
        fh.write(text)
