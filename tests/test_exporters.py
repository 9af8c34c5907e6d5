import sys
import tempfile
import unittest
from pathlib import Path


# Allow `import pdf_table_extractor.*` when running from repo root.
SRC_ROOT = Path(__file__).resolve().parents[1] / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))


from pdf_table_extractor.exporters import rows_to_text, templates_to_text, write_text  # noqa: E402
from pdf_table_extractor.structures import CellTemplate, Rectangle, TextChunk  # noqa: E402


def _chunk(text, x, y, w=5.0, h=10.0):
    return TextChunk(rect=Rectangle(x, y, w, h), text=text)


def _cell(x, y, *chunks, span=1):
    return CellTemplate(rect=Rectangle(x, y, 50, 20), text=list(chunks), horizontal_span=span)


class TestTemplatesToText(unittest.TestCase):
    def test_grid(self) -> None:
        rows = {
            120: [_cell(50, 120, _chunk("cellD", 55, 115)), _cell(0, 120, _chunk("cellC", 5, 115))],
            100: [_cell(0, 100, _chunk("cellA", 5, 95)), _cell(50, 100, _chunk("cellB", 55, 95))],
        }
        self.assertEqual(templates_to_text(rows), "cellA ,cellB \ncellC ,cellD \n")

    def test_adjacent_chunks_join(self) -> None:
        rows = {100: [_cell(0, 100, _chunk("CD", 10.4, 95), _chunk("AB", 0, 95, w=10))]}
        self.assertEqual(templates_to_text(rows), "ABCD \n")

    def test_separated_chunks_get_space(self) -> None:
        rows = {100: [_cell(0, 100, _chunk("AB", 0, 95, w=10), _chunk("CD", 12, 95))]}
        self.assertEqual(templates_to_text(rows), "AB CD \n")

    def test_span_repeats_delimiter(self) -> None:
        rows = {100: [_cell(0, 100, _chunk("x", 5, 95), span=2), _cell(100, 100, _chunk("y", 105, 95))]}
        self.assertEqual(templates_to_text(rows, ";"), "x ;;y \n")

    def test_empty_cells(self) -> None:
        rows = {100: [_cell(0, 100), _cell(50, 100, _chunk("b", 55, 95)), _cell(100, 100)]}
        self.assertEqual(templates_to_text(rows), ",b ,\n")

    def test_multiline_cell(self) -> None:
        rows = {100: [_cell(0, 100, _chunk("second", 2, 95), _chunk("first", 2, 85))]}
        self.assertEqual(templates_to_text(rows), "first second \n")

    def test_empty(self) -> None:
        self.assertEqual(templates_to_text({}), "")


class TestRowsToText(unittest.TestCase):
    def test_rows_in_order(self) -> None:
        rows = {
            120: [_chunk("c", 10, 120)],
            100: [_chunk("b", 50, 100), _chunk("a", 10, 100)],
        }
        self.assertEqual(rows_to_text(rows, ";"), "a; b\nc\n")


class TestWriteText(unittest.TestCase):
    def test_replaces_existing_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            out = Path(tmp) / "nested" / "out.csv"
            write_text("old content that is longer\n", str(out))
            write_text("a,b\n", str(out))
            self.assertEqual(out.read_text(encoding="utf-8"), "a,b\n")


if __name__ == "__main__":
    unittest.main()
