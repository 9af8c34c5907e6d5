import sys
import tempfile
import unittest
from pathlib import Path

import fitz


# Allow `import pdf_table_extractor.*` when running from repo root.
SRC_ROOT = Path(__file__).resolve().parents[1] / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))


from pdf_table_extractor.collector import PageCollector  # noqa: E402
from pdf_table_extractor.main import PAGE_BREAK, pdf_to_file, pdf_to_text  # noqa: E402
from pdf_table_extractor.parser import _space_width, page_to_text, replay_page  # noqa: E402
from pdf_table_extractor.structures import UnsupportedRotationError  # noqa: E402


def _table_page(doc: fitz.Document) -> fitz.Page:
    page = doc.new_page(width=600, height=800)
    for top in (100, 130):
        page.draw_rect(fitz.Rect(50, top, 250, top + 30))
        page.draw_rect(fitz.Rect(250, top, 450, top + 30))
    page.insert_text((60, 120), "Name", fontsize=11)
    page.insert_text((260, 120), "42", fontsize=11)
    page.insert_text((60, 150), "Ann", fontsize=11)
    page.insert_text((260, 150), "7", fontsize=11)
    return page


def _cells(text: str):
    return [[cell.strip() for cell in line.split(",")] for line in text.strip().splitlines()]


class TestPageReplay(unittest.TestCase):
    def test_drawings_and_glyphs_reach_collector(self) -> None:
        with fitz.open() as doc:
            page = _table_page(doc)
            collector = PageCollector(page.rotation, page.cropbox.width, page.cropbox.height)
            replay_page(page, collector)
        self.assertEqual(len(collector.rectangles), 4)
        self.assertEqual(sorted(c.text for c in collector.chunks), ["42", "7", "Ann", "Name"])
        self.assertGreater(collector.char_tolerance, 0)

    def test_rectangles_in_top_down_space(self) -> None:
        with fitz.open() as doc:
            page = _table_page(doc)
            collector = PageCollector(page.rotation, page.cropbox.width, page.cropbox.height)
            replay_page(page, collector)
        ys = sorted({round(r.y) for r in collector.rectangles})
        self.assertEqual(ys, [130, 160])

    def test_table_page(self) -> None:
        with fitz.open() as doc:
            text = page_to_text(_table_page(doc))
        self.assertEqual(_cells(text), [["Name", "42"], ["Ann", "7"]])

    def test_custom_delimiter(self) -> None:
        with fitz.open() as doc:
            text = page_to_text(_table_page(doc), delimiter="|")
        self.assertEqual(text.splitlines()[0].replace(" ", ""), "Name|42")

    def test_unsupported_rotation(self) -> None:
        with fitz.open() as doc:
            page = _table_page(doc)
            page.set_rotation(180)
            with self.assertRaises(UnsupportedRotationError):
                page_to_text(page)


class TestSpaceWidth(unittest.TestCase):
    def test_measured_from_space_in_span(self) -> None:
        span = {"size": 10.0, "chars": [
            {"c": "a", "bbox": (0.0, 0.0, 5.0, 10.0)},
            {"c": " ", "bbox": (5.0, 0.0, 7.5, 10.0)},
        ]}
        self.assertAlmostEqual(_space_width(span), 2.5)

    def test_font_metric_without_space(self) -> None:
        span = {"size": 10.0, "chars": [{"c": "a", "bbox": (0.0, 0.0, 5.0, 10.0)}]}
        self.assertAlmostEqual(_space_width(span), fitz.get_text_length(" ", fontsize=10.0))


class TestDocument(unittest.TestCase):
    def _write_pdf(self, folder: str) -> Path:
        path = Path(folder) / "tabla.pdf"
        with fitz.open() as doc:
            _table_page(doc)
            doc.new_page(width=600, height=800).insert_text((60, 100), "fin", fontsize=11)
            doc.save(str(path))
        return path

    def test_pages_joined_with_marker(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            text = pdf_to_text(str(self._write_pdf(tmp)))
        first, second = text.split(PAGE_BREAK)
        self.assertEqual(_cells(first), [["Name", "42"], ["Ann", "7"]])
        self.assertEqual(second, "fin\n")

    def test_output_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            out = Path(tmp) / "out" / "tabla.csv"
            text = pdf_to_file(str(self._write_pdf(tmp)), str(out))
            self.assertEqual(out.read_text(encoding="utf-8"), text)

    def test_rejects_non_pdf(self) -> None:
        with self.assertRaises(ValueError):
            pdf_to_text("tabla.docx")

    def test_missing_file(self) -> None:
        with self.assertRaises(FileNotFoundError):
            pdf_to_text(str(Path(tempfile.gettempdir()) / "no_existe_123.pdf"))


if __name__ == "__main__":
    unittest.main()
