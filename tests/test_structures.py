import sys
import unittest
from pathlib import Path


# Allow `import pdf_table_extractor.*` when running from repo root.
SRC_ROOT = Path(__file__).resolve().parents[1] / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))


from pdf_table_extractor.structures import CellTemplate, Point, Rectangle, TextChunk  # noqa: E402


class TestPoint(unittest.TestCase):
    def test_is_equal_uses_fixed_tolerance(self) -> None:
        p = Point(10.0, 20.0)
        self.assertTrue(p.is_equal(Point(10.0 + 1e-7, 20.0 - 1e-7)))
        self.assertFalse(p.is_equal(Point(10.0 + 1e-5, 20.0)))
        self.assertFalse(p.is_equal(None))


class TestRectangleIntersects(unittest.TestCase):
    def test_not_reflexive(self) -> None:
        r = Rectangle(0, 100, 50, 20)
        self.assertFalse(r.intersects(r))

    def test_checked_in_both_directions(self) -> None:
        cell = Rectangle(0, 100, 50, 20)
        tall = Rectangle(-10, 150, 100, 80)
        self.assertTrue(cell.intersects(tall))
        self.assertFalse(tall.intersects(cell))

    def test_right_edge_inside(self) -> None:
        cell = Rectangle(0, 100, 50, 20)
        other = Rectangle(40, 120, 30, 40)
        self.assertTrue(cell.intersects(other))

    def test_disjoint_band(self) -> None:
        cell = Rectangle(0, 100, 50, 20)
        below = Rectangle(-10, 300, 100, 50)
        self.assertFalse(cell.intersects(below))

    def test_edges(self) -> None:
        r = Rectangle(10, 100, 40, 20)
        self.assertEqual(r.right, 50)
        self.assertEqual(r.bottom, 80)


class TestCellTemplateContains(unittest.TestCase):
    def test_contains_with_character_tolerance(self) -> None:
        template = CellTemplate(rect=Rectangle(0, 100, 50, 20))
        inside = TextChunk(rect=Rectangle(5, 100, 20, 10), text="a")
        overflow = TextChunk(rect=Rectangle(45, 100, 10, 10), text="b")

        self.assertTrue(template.contains(inside, 1.0))
        self.assertFalse(template.contains(overflow, 1.0))
        self.assertTrue(template.contains(overflow, 5.0))

    def test_vertical_tolerance_is_fifth_of_chunk_height(self) -> None:
        template = CellTemplate(rect=Rectangle(0, 100, 50, 20))
        slightly_low = TextChunk(rect=Rectangle(5, 101.5, 20, 10), text="a")
        too_low = TextChunk(rect=Rectangle(5, 103, 20, 10), text="a")
        self.assertTrue(template.contains(slightly_low, 0.0))
        self.assertFalse(template.contains(too_low, 0.0))

    def test_defaults(self) -> None:
        template = CellTemplate(rect=Rectangle(0, 100, 50, 20))
        self.assertEqual(template.text, [])
        self.assertEqual(template.horizontal_span, 1)
        self.assertEqual(template.vertical_span, 1)

    def test_right_edge(self) -> None:
        template = CellTemplate(rect=Rectangle(50, 100, 30, 20))
        self.assertEqual(template.right, 80)


if __name__ == "__main__":
    unittest.main()
