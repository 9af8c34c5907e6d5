from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import fitz

from .exporters import write_text
from .parser import page_to_text
from .structures import UnsupportedRotationError

log = logging.getLogger(__name__)

PAGE_BREAK = "[---PageBreak---]\n"


def pdf_to_text(pdf_path: str, *, delimiter: str = ",") -> str:
    """
    Extrae el texto tabular de todas las páginas de un PDF.

    Cada página se procesa con su propio colector; las salidas se unen con
    el marcador de salto de página.
    """
    path = Path(pdf_path)
    if path.suffix.lower() != ".pdf":
        raise ValueError(f"Solo se admiten archivos PDF: {pdf_path!r}")
    if not path.exists():
        raise FileNotFoundError(pdf_path)

    pages = []
    with fitz.open(str(path)) as doc:
        log.info("Procesando %s (%d páginas)", path.name, doc.page_count)
        for page in doc:
            try:
                text = page_to_text(page, delimiter=delimiter)
            except UnsupportedRotationError:
                log.error("Página %d: rotación %s no soportada", page.number + 1, page.rotation)
                raise
            log.debug("Página %d: %d líneas", page.number + 1, text.count("\n"))
            pages.append(text)
    return PAGE_BREAK.join(pages)


def pdf_to_file(pdf_path: str, output_path: Optional[str] = None, *, delimiter: str = ",") -> str:
    """Como `pdf_to_text`; si hay `output_path` además escribe el resultado (reemplazando)."""
    text = pdf_to_text(pdf_path, delimiter=delimiter)
    if output_path:
        write_text(text, output_path)
        log.info("Texto delimitado escrito en: %s", output_path)
    return text
