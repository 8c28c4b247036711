from __future__ import annotations

import gc
import math
import tempfile
import unittest
from pathlib import Path
import xml.etree.ElementTree as ET

from graphics2.core.color import BLACK, Color
from graphics2.errors import BackendError, SurfaceFinishedError
from graphics2.geometry.path import Arc, Line, Path as GPath, Rectangle
from graphics2.geometry.position import Position
from graphics2.style.pen import Pen
from graphics2.surface import SvgSurface
from graphics2.text.box_font import box_font_face
from graphics2.text.font import Font, ToyFontFace


NS = {"svg": "http://www.w3.org/2000/svg"}


def _read(path: Path) -> ET.Element:
    return ET.fromstring(path.read_bytes())


class SvgSurfaceTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.out = Path(self._tmp.name) / "image.svg"

    def test_document_structure(self) -> None:
        with SvgSurface(self.out, 600, 400) as surface:
            surface.fill(Color(0.86, 0.85, 0.47))
            surface.stroke(Pen(20), Rectangle.from_coords(0, 0, 600, 400))
            surface.show_page()
        root = _read(self.out)
        self.assertEqual(root.tag, "{http://www.w3.org/2000/svg}svg")
        self.assertEqual(root.get("width"), "600pt")
        self.assertEqual(root.get("height"), "400pt")
        self.assertEqual(root.get("viewBox"), "0 0 600 400")
        pages = root.findall("svg:g", NS)
        self.assertEqual(len(pages), 1)
        self.assertEqual(pages[0].get("id"), "page-1")
        rect = pages[0].find("svg:rect", NS)
        self.assertIsNotNone(rect)
        self.assertEqual(rect.get("fill"), "#dbd978")
        path = pages[0].find("svg:path", NS)
        self.assertIsNotNone(path)
        self.assertEqual(path.get("d"), "M 0 0 L 600 0 L 600 400 L 0 400 Z")

    def test_show_page_without_drawing_yields_blank_page(self) -> None:
        surface = SvgSurface(self.out, 100, 50)
        surface.show_page()
        self.assertEqual(surface.page_count, 1)
        pages = _read(self.out).findall("svg:g", NS)
        self.assertEqual(len(pages), 1)
        self.assertEqual(pages[0].get("id"), "page-1")
        self.assertEqual(len(list(pages[0])), 0)
        surface.finish()
        self.assertEqual(len(_read(self.out).findall("svg:g", NS)), 1)

    def test_dropped_surface_writes_pending_page(self) -> None:
        surface = SvgSurface(self.out, 100, 100)
        surface.fill(Color(1.0, 0.0, 0.0))
        del surface
        gc.collect()
        pages = _read(self.out).findall("svg:g", NS)
        self.assertEqual(len(pages), 1)
        self.assertEqual(pages[0].find("svg:rect", NS).get("fill"), "#ff0000")

    def test_finish_without_drawing_writes_blank_page(self) -> None:
        surface = SvgSurface(self.out, 100, 50)
        surface.finish()
        self.assertEqual(surface.page_count, 1)
        pages = _read(self.out).findall("svg:g", NS)
        self.assertEqual(len(pages), 1)
        self.assertEqual(len(list(pages[0])), 0)

    def test_finish_emits_pending_page(self) -> None:
        with SvgSurface(self.out, 100, 50) as surface:
            surface.fill(BLACK, Rectangle.from_coords(0, 0, 10, 10))
        self.assertEqual(surface.page_count, 1)
        self.assertEqual(len(_read(self.out).findall("svg:g", NS)), 1)

    def test_show_page_then_finish_keeps_one_page(self) -> None:
        with SvgSurface(self.out, 100, 50) as surface:
            surface.fill(BLACK, Rectangle.from_coords(0, 0, 10, 10))
            surface.show_page()
        self.assertEqual(surface.page_count, 1)
        self.assertEqual(surface.pages_shown, 1)

    def test_later_pages_are_hidden(self) -> None:
        with SvgSurface(self.out, 100, 50) as surface:
            surface.fill(BLACK)
            surface.show_page()
            surface.fill(Color(1.0, 1.0, 1.0))
            surface.show_page()
        pages = _read(self.out).findall("svg:g", NS)
        self.assertEqual([p.get("id") for p in pages], ["page-1", "page-2"])
        self.assertIsNone(pages[0].get("display"))
        self.assertEqual(pages[1].get("display"), "none")

    def test_show_page_flushes_file(self) -> None:
        surface = SvgSurface(self.out, 100, 50)
        surface.fill(BLACK)
        surface.show_page()
        self.assertEqual(len(_read(self.out).findall("svg:g", NS)), 1)
        surface.finish()

    def test_unwritable_path_fails_at_construction(self) -> None:
        with self.assertRaises(BackendError):
            SvgSurface(Path(self._tmp.name) / "missing" / "image.svg", 100, 100)

    def test_stroke_attributes(self) -> None:
        with SvgSurface(self.out, 600, 400) as surface:
            surface.stroke(Pen(20, Color(0.0, 0.0, 0.0, 0.7)), Line.from_coords(150, 100, 450, 300))
        path = _read(self.out).find("svg:g/svg:path", NS)
        self.assertEqual(path.get("d"), "M 150 100 L 450 300")
        self.assertEqual(path.get("fill"), "none")
        self.assertEqual(path.get("stroke"), "#000000")
        self.assertEqual(path.get("stroke-width"), "20")
        self.assertEqual(path.get("stroke-opacity"), "0.7")

    def test_full_circle_is_split_into_two_arcs(self) -> None:
        with SvgSurface(self.out, 600, 400) as surface:
            surface.stroke(Pen(2), Arc(Position(300, 200), 100, 0.0, 2.0 * math.pi))
        d = _read(self.out).find("svg:g/svg:path", NS).get("d")
        self.assertTrue(d.startswith("M 400 200 "))
        self.assertEqual(d.count("A 100 100 0 0 1"), 2)

    def test_composite_path_keeps_order(self) -> None:
        path = GPath(Rectangle.from_coords(0, 0, 20, 20), Arc.circle(Position(50, 50), 10))
        with SvgSurface(self.out, 100, 100) as surface:
            surface.fill(BLACK, path, fill_rule="evenodd")
        element = _read(self.out).find("svg:g/svg:path", NS)
        d = element.get("d")
        self.assertLess(d.index("Z"), d.index("A"))
        self.assertEqual(element.get("fill-rule"), "evenodd")

    def test_translucent_fill_sets_opacity(self) -> None:
        with SvgSurface(self.out, 100, 100) as surface:
            surface.fill(Color(1.0, 0.0, 0.0, 0.25), Rectangle.from_coords(0, 0, 20, 20))
        element = _read(self.out).find("svg:g/svg:path", NS)
        self.assertEqual(element.get("fill"), "#ff0000")
        self.assertEqual(element.get("fill-opacity"), "0.25")

    def test_system_font_writes_text_element(self) -> None:
        with SvgSurface(self.out, 300, 100) as surface:
            advance = surface.print(Font(ToyFontFace("Serif", weight="bold"), BLACK, 18), Position(10, 50), "Hi")
        self.assertGreater(advance, 0.0)
        text = _read(self.out).find("svg:g/svg:text", NS)
        self.assertEqual(text.text, "Hi")
        self.assertEqual(text.get("font-family"), "Serif")
        self.assertEqual(text.get("font-weight"), "bold")
        self.assertEqual(text.get("x"), "10")
        self.assertEqual(text.get("y"), "50")

    def test_user_font_writes_glyph_paths(self) -> None:
        with SvgSurface(self.out, 300, 100) as surface:
            advance = surface.print(Font(box_font_face(), BLACK, 10), Position(0, 50), "HI")
        self.assertAlmostEqual(advance, 16.0)
        page = _read(self.out).find("svg:g", NS)
        self.assertEqual(len(page.findall("svg:path", NS)), 2)
        self.assertIsNone(page.find("svg:text", NS))

    def test_finished_surface_rejects_drawing(self) -> None:
        surface = SvgSurface(self.out, 100, 100)
        surface.finish()
        self.assertTrue(surface.finished)
        with self.assertRaises(SurfaceFinishedError):
            surface.fill(BLACK)
        with self.assertRaises(SurfaceFinishedError):
            surface.stroke(Pen(), Line.from_coords(0, 0, 1, 1))


if __name__ == "__main__":
    unittest.main()
