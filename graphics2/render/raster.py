from __future__ import annotations

import io
import logging
import math
from pathlib import Path
from typing import Literal

import numpy as np
from PIL import Image, ImageDraw

from graphics2.config import RenderSettings
from graphics2.errors import BackendError, UnsupportedFormatError
from graphics2.text.font import TextExtents, ToyFontFace

from .context import RGBA, DrawingContext, FillRule, Point, Subpath
from .fonts import load_system_font, system_text_extents


LOGGER = logging.getLogger(__name__)

Format = Literal["ARGB32", "RGB24"]
FORMAT_ARGB32: Format = "ARGB32"
FORMAT_RGB24: Format = "RGB24"
SUPPORTED_FORMATS = (FORMAT_ARGB32, FORMAT_RGB24)


class RasterTarget:
    """In-memory RGBA8 pixel buffer (rows x columns x 4)."""

    def __init__(self, fmt: str, width: int, height: int) -> None:
        if fmt not in SUPPORTED_FORMATS:
            raise UnsupportedFormatError(f"unsupported pixel format: {fmt!r}")
        if int(width) <= 0 or int(height) <= 0:
            raise ValueError("width and height must be > 0")
        self.format: Format = fmt  # type: ignore[assignment]
        self.width = int(width)
        self.height = int(height)
        self.pixels = np.zeros((self.height, self.width, 4), dtype=np.uint8)
        if self.format == FORMAT_RGB24:
            self.pixels[:, :, 3] = 255

    @property
    def has_alpha(self) -> bool:
        return self.format == FORMAT_ARGB32

    def composite(self, coverage: np.ndarray, rgba: RGBA) -> None:
        """Source-over blend `rgba` through a coverage mask in [0, 1]."""
        ys, xs = np.nonzero(coverage)
        if ys.size == 0:
            return
        y0, y1 = int(ys.min()), int(ys.max()) + 1
        x0, x1 = int(xs.min()), int(xs.max()) + 1
        cov = coverage[y0:y1, x0:x1].astype(np.float32)
        patch = self.pixels[y0:y1, x0:x1]

        src_alpha = np.float32(max(0.0, min(1.0, rgba[3]))) * cov
        src_rgb = np.asarray([max(0.0, min(1.0, c)) * 255.0 for c in rgba[:3]], dtype=np.float32).reshape(1, 1, 3)
        dst_rgb = patch[:, :, :3].astype(np.float32)
        if self.has_alpha:
            dst_alpha = patch[:, :, 3].astype(np.float32) / 255.0
        else:
            dst_alpha = np.ones(cov.shape, dtype=np.float32)

        out_alpha = src_alpha + dst_alpha * (1.0 - src_alpha)
        out_rgb_num = src_rgb * src_alpha[:, :, None] + dst_rgb * dst_alpha[:, :, None] * (1.0 - src_alpha[:, :, None])
        safe_alpha = np.where(out_alpha > 1e-6, out_alpha, 1.0)
        out_rgb = out_rgb_num / safe_alpha[:, :, None]

        patch[:, :, :3] = np.clip(np.rint(out_rgb), 0, 255).astype(np.uint8)
        if self.has_alpha:
            patch[:, :, 3] = np.clip(np.rint(out_alpha * 255.0), 0, 255).astype(np.uint8)

    def to_image(self) -> Image.Image:
        if self.has_alpha:
            return Image.fromarray(self.pixels, "RGBA")
        return Image.fromarray(np.ascontiguousarray(self.pixels[:, :, :3]), "RGB")

    def png_bytes(self) -> bytes:
        buf = io.BytesIO()
        self.to_image().save(buf, format="PNG")
        return buf.getvalue()

    def write_png(self, path: str | Path) -> Path:
        out = Path(path)
        try:
            self.to_image().save(out, format="PNG")
        except OSError as exc:
            raise BackendError(f"cannot write PNG file {str(out)!r}: {exc}") from exc
        LOGGER.debug("wrote %dx%d PNG to %s", self.width, self.height, out)
        return out


class RasterContext(DrawingContext):
    def __init__(self, target: RasterTarget, settings: RenderSettings) -> None:
        super().__init__()
        self._target = target
        self._settings = settings

    def _fill_subpaths(self, subpaths: list[Subpath], rgba: RGBA, fill_rule: FillRule) -> None:
        rings = [s.flatten(self._settings.arc_tolerance) for s in subpaths]
        coverage = fill_coverage(rings, self._target.width, self._target.height, fill_rule)
        self._target.composite(coverage, rgba)

    def _stroke_subpaths(self, subpaths: list[Subpath], rgba: RGBA, width: float) -> None:
        rings: list[list[Point]] = []
        for subpath in subpaths:
            points = subpath.flatten(self._settings.arc_tolerance)
            rings.extend(stroke_outline(points, width / 2.0, subpath.closed))
        coverage = fill_coverage(rings, self._target.width, self._target.height, "nonzero")
        self._target.composite(coverage, rgba)

    def _paint(self, rgba: RGBA) -> None:
        coverage = np.ones((self._target.height, self._target.width), dtype=bool)
        self._target.composite(coverage, rgba)

    def _show_text(self, face: ToyFontFace, size: float, x: float, y: float, text: str, rgba: RGBA) -> float:
        font = load_system_font(face, size, self._settings.font_dirs, self._settings.default_font_family)
        mask = Image.new("L", (self._target.width, self._target.height), 0)
        draw = ImageDraw.Draw(mask)
        draw.text((x, y), text, fill=255, font=font, anchor="ls")
        coverage = np.asarray(mask, dtype=np.float32) / 255.0
        self._target.composite(coverage, rgba)
        return float(font.getlength(text))

    def _text_extents(self, face: ToyFontFace, size: float, text: str) -> TextExtents:
        return system_text_extents(face, size, text, self._settings.font_dirs, self._settings.default_font_family)


def fill_coverage(rings: list[list[Point]], width: int, height: int, fill_rule: FillRule) -> np.ndarray:
    """Inside test at pixel centres by accumulating signed edge crossings per row."""
    winding = np.zeros((height, width + 1), dtype=np.int32)
    for ring in rings:
        if len(ring) < 2:
            continue
        pts = list(ring)
        if pts[0] != pts[-1]:
            pts.append(pts[0])
        for (x0, y0), (x1, y1) in zip(pts, pts[1:]):
            if y0 == y1:
                continue
            direction = 1 if y1 > y0 else -1
            ylo, yhi = min(y0, y1), max(y0, y1)
            r0 = max(0, math.ceil(ylo - 0.5))
            r1 = min(height, math.ceil(yhi - 0.5))
            if r0 >= r1:
                continue
            rows = np.arange(r0, r1)
            yc = rows + 0.5
            xs = x0 + (yc - y0) * (x1 - x0) / (y1 - y0)
            cols = np.clip(np.ceil(xs - 0.5), 0, width).astype(np.int64)
            np.add.at(winding, (rows, cols), direction)
    total = np.cumsum(winding, axis=1)[:, :width]
    if fill_rule == "evenodd":
        return (total % 2) != 0
    return total != 0


MITER_LIMIT = 10.0


def stroke_outline(points: list[Point], half_width: float, closed: bool) -> list[list[Point]]:
    """Polygons covering a polyline stroke with butt caps and miter joins.

    All polygons share one orientation, so a nonzero fill of them covers
    their union. Coordinates use the same pixel-centre convention as fills.
    """
    pts: list[Point] = []
    for point in points:
        if not pts or point != pts[-1]:
            pts.append(point)
    if closed and len(pts) > 1 and pts[0] == pts[-1]:
        pts.pop()
    if len(pts) < 2 or half_width <= 0:
        return []

    count = len(pts)
    edges = list(zip(pts, pts[1:] + pts[:1])) if closed else list(zip(pts, pts[1:]))
    rings: list[list[Point]] = []
    for (x0, y0), (x1, y1) in edges:
        nx, ny = _unit_normal(x0, y0, x1, y1)
        ox, oy = nx * half_width, ny * half_width
        rings.append(_oriented([(x0 + ox, y0 + oy), (x1 + ox, y1 + oy), (x1 - ox, y1 - oy), (x0 - ox, y0 - oy)]))

    corners = range(count) if closed else range(1, count - 1)
    for i in corners:
        join = _miter_join(pts[i - 1], pts[i], pts[(i + 1) % count], half_width)
        if join is not None:
            rings.append(join)
    return rings


def _unit_normal(x0: float, y0: float, x1: float, y1: float) -> Point:
    length = math.hypot(x1 - x0, y1 - y0)
    return (-(y1 - y0) / length, (x1 - x0) / length)


def _miter_join(prev: Point, corner: Point, nxt: Point, half_width: float) -> list[Point] | None:
    d1x, d1y = corner[0] - prev[0], corner[1] - prev[1]
    d2x, d2y = nxt[0] - corner[0], nxt[1] - corner[1]
    cross = d1x * d2y - d1y * d2x
    if abs(cross) <= 1e-12 * math.hypot(d1x, d1y) * math.hypot(d2x, d2y):
        return None
    # the join fills the gap on the outer side of the turn
    side = -1.0 if cross > 0 else 1.0
    n1x, n1y = _unit_normal(prev[0], prev[1], corner[0], corner[1])
    n2x, n2y = _unit_normal(corner[0], corner[1], nxt[0], nxt[1])
    n1x, n1y, n2x, n2y = n1x * side, n1y * side, n2x * side, n2y * side
    cx, cy = corner
    a = (cx + n1x * half_width, cy + n1y * half_width)
    b = (cx + n2x * half_width, cy + n2y * half_width)
    denom = 1.0 + n1x * n2x + n1y * n2y
    if denom > 1e-12:
        scale = half_width / denom
        mx, my = (n1x + n2x) * scale, (n1y + n2y) * scale
        if math.hypot(mx, my) <= MITER_LIMIT * half_width:
            return _oriented([corner, a, (cx + mx, cy + my), b])
    return _oriented([corner, a, b])


def _oriented(ring: list[Point]) -> list[Point]:
    area = 0.0
    for (x0, y0), (x1, y1) in zip(ring, ring[1:] + ring[:1]):
        area += x0 * y1 - x1 * y0
    return ring if area >= 0 else ring[::-1]
