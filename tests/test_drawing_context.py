from __future__ import annotations

import math
import unittest

from graphics2.core.color import Color
from graphics2.errors import BackendError
from graphics2.render.context import ArcSegment, DrawingContext, LineSegment, flatten_arc
from graphics2.text.font import TextExtents, ToyFontFace


class _RecordingContext(DrawingContext):
    def __init__(self) -> None:
        super().__init__()
        self.fills: list[tuple] = []
        self.strokes: list[tuple] = []
        self.paints: list[tuple] = []
        self.texts: list[tuple] = []

    def _fill_subpaths(self, subpaths, rgba, fill_rule) -> None:
        self.fills.append((list(subpaths), rgba, fill_rule))

    def _stroke_subpaths(self, subpaths, rgba, width) -> None:
        self.strokes.append((list(subpaths), rgba, width))

    def _paint(self, rgba) -> None:
        self.paints.append(rgba)

    def _show_text(self, face, size, x, y, text, rgba) -> float:
        self.texts.append((face, size, x, y, text))
        return 10.0 * len(text)

    def _text_extents(self, face, size, text) -> TextExtents:
        return TextExtents(x_advance=10.0 * len(text))


class PathConstructionTests(unittest.TestCase):
    def test_rectangle_is_closed_and_returns_to_origin(self) -> None:
        ctx = _RecordingContext()
        ctx.rectangle(1, 2, 3, 4)
        (subpath,) = ctx.subpaths
        self.assertEqual(subpath.start, (1.0, 2.0))
        self.assertEqual(subpath.segments, [LineSegment(4.0, 2.0), LineSegment(4.0, 6.0), LineSegment(1.0, 6.0)])
        self.assertTrue(subpath.closed)
        self.assertEqual(ctx.get_current_point(), (1.0, 2.0))

    def test_arc_without_current_point_starts_new_subpath(self) -> None:
        ctx = _RecordingContext()
        ctx.arc(10, 10, 5, 0.0, math.pi)
        (subpath,) = ctx.subpaths
        self.assertEqual(subpath.start, (15.0, 10.0))
        self.assertEqual(subpath.segments, [ArcSegment(10.0, 10.0, 5.0, 0.0, math.pi)])

    def test_arc_connects_to_current_point(self) -> None:
        ctx = _RecordingContext()
        ctx.move_to(0, 0)
        ctx.arc(10, 10, 5, 0.0, math.pi)
        (subpath,) = ctx.subpaths
        self.assertEqual(subpath.start, (0.0, 0.0))
        self.assertEqual(subpath.segments[0], LineSegment(15.0, 10.0))
        self.assertIsInstance(subpath.segments[1], ArcSegment)

    def test_line_after_close_starts_new_subpath(self) -> None:
        ctx = _RecordingContext()
        ctx.rectangle(0, 0, 1, 1)
        ctx.line_to(5, 5)
        self.assertEqual(len(ctx.subpaths), 2)
        self.assertEqual(ctx.subpaths[1].start, (0.0, 0.0))

    def test_line_to_without_current_point_moves(self) -> None:
        ctx = _RecordingContext()
        ctx.line_to(3, 4)
        self.assertEqual(ctx.subpaths[0].start, (3.0, 4.0))
        self.assertTrue(ctx.subpaths[0].is_degenerate())

    def test_transform_applies_to_points_and_radius(self) -> None:
        ctx = _RecordingContext()
        ctx.translate(10, 20)
        ctx.scale(2.0)
        ctx.arc(1, 1, 1, 0.0, math.pi)
        subpath = ctx.subpaths[0]
        self.assertEqual(subpath.start, (14.0, 22.0))
        self.assertEqual(subpath.segments[0], ArcSegment(12.0, 22.0, 2.0, 0.0, math.pi))
        with self.assertRaises(ValueError):
            ctx.scale(0.0)


class DrawingTests(unittest.TestCase):
    def test_fill_consumes_path_and_skips_degenerate_subpaths(self) -> None:
        ctx = _RecordingContext()
        ctx.set_source_color(Color(1.0, 0.0, 0.0, 0.5))
        ctx.set_fill_rule("evenodd")
        ctx.move_to(0, 0)
        ctx.rectangle(0, 0, 5, 5)
        ctx.fill()
        (subpaths, rgba, rule) = ctx.fills[0]
        self.assertEqual(len(subpaths), 1)
        self.assertEqual(rgba, (1.0, 0.0, 0.0, 0.5))
        self.assertEqual(rule, "evenodd")
        self.assertEqual(ctx.subpaths, ())
        self.assertFalse(ctx.has_current_point())

    def test_empty_fill_is_a_no_op(self) -> None:
        ctx = _RecordingContext()
        ctx.fill()
        self.assertEqual(ctx.fills, [])

    def test_stroke_width_follows_scale(self) -> None:
        ctx = _RecordingContext()
        ctx.set_line_width(3.0)
        ctx.scale(2.0)
        ctx.move_to(0, 0)
        ctx.line_to(1, 0)
        ctx.stroke()
        self.assertEqual(ctx.strokes[0][2], 6.0)

    def test_save_restore(self) -> None:
        ctx = _RecordingContext()
        ctx.set_source_rgba(0.1, 0.2, 0.3)
        ctx.save()
        ctx.set_source_rgba(0.9, 0.9, 0.9)
        ctx.translate(5, 5)
        ctx.restore()
        self.assertEqual(ctx.source, (0.1, 0.2, 0.3, 1.0))
        self.assertEqual(ctx.user_to_device(0, 0), (0.0, 0.0))
        with self.assertRaises(BackendError):
            ctx.restore()

    def test_invalid_state_values_rejected(self) -> None:
        ctx = _RecordingContext()
        with self.assertRaises(ValueError):
            ctx.set_fill_rule("winding")  # type: ignore[arg-type]
        with self.assertRaises(ValueError):
            ctx.set_line_width(-1.0)

    def test_paint_uses_source(self) -> None:
        ctx = _RecordingContext()
        ctx.set_source_rgba(0.0, 1.0, 0.0, 0.25)
        ctx.paint()
        self.assertEqual(ctx.paints, [(0.0, 1.0, 0.0, 0.25)])

    def test_show_text_advances_current_point(self) -> None:
        ctx = _RecordingContext()
        ctx.move_to(5, 50)
        ctx.show_text(ToyFontFace("Sans"), 12.0, "abc")
        self.assertEqual(ctx.texts[0][2:], (5.0, 50.0, "abc"))
        self.assertEqual(ctx.get_current_point(), (35.0, 50.0))


class FlattenArcTests(unittest.TestCase):
    def test_endpoints_are_exact(self) -> None:
        points = flatten_arc(ArcSegment(0.0, 0.0, 10.0, 0.0, math.pi), 0.25)
        self.assertGreater(len(points), 3)
        self.assertAlmostEqual(points[0][0], 10.0)
        self.assertAlmostEqual(points[-1][0], -10.0)
        for x, y in points:
            self.assertAlmostEqual(math.hypot(x, y), 10.0)


if __name__ == "__main__":
    unittest.main()
