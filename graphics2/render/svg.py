from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import BinaryIO
import xml.etree.ElementTree as ET

from graphics2.config import RenderSettings
from graphics2.errors import BackendError
from graphics2.text.font import TextExtents, ToyFontFace

from .context import RGBA, ArcSegment, DrawingContext, FillRule, LineSegment, Subpath
from .fonts import system_text_extents


LOGGER = logging.getLogger(__name__)

SVG_NAMESPACE = "http://www.w3.org/2000/svg"


class SvgDocument:
    """SVG output bound to a file; each page is a `<g id="page-N">` group.

    The file is opened at construction and rewritten every time a page is
    finalized. Only the first page is displayed; later pages carry
    `display="none"`.
    """

    def __init__(self, path: str | Path, width: float, height: float, precision: int = 3) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("width and height must be > 0")
        self.path = Path(path)
        self.width = float(width)
        self.height = float(height)
        self.precision = precision
        try:
            self._stream: BinaryIO | None = open(self.path, "wb")
        except OSError as exc:
            raise BackendError(f"cannot open SVG file {str(self.path)!r}: {exc}") from exc
        self._pages: list[ET.Element] = []
        self._current = self._new_page()
        self._dirty = False

    @property
    def page_count(self) -> int:
        return len(self._pages)

    @property
    def closed(self) -> bool:
        return self._stream is None

    def append(self, element: ET.Element) -> None:
        self._current.append(element)
        self._dirty = True

    def show_page(self) -> None:
        self._pages.append(self._current)
        self._current = self._new_page()
        self._dirty = False
        self._flush()
        LOGGER.debug("finalized SVG page %d of %s", len(self._pages), self.path)

    def finish(self) -> None:
        if self._stream is None:
            return
        if self._dirty or not self._pages:
            self.show_page()
        self._stream.close()
        self._stream = None
        LOGGER.debug("closed SVG file %s with %d page(s)", self.path, len(self._pages))

    def fmt(self, value: float) -> str:
        return format_number(value, self.precision)

    def to_bytes(self) -> bytes:
        root = ET.Element(
            "svg",
            {
                "xmlns": SVG_NAMESPACE,
                "version": "1.1",
                "width": f"{self.fmt(self.width)}pt",
                "height": f"{self.fmt(self.height)}pt",
                "viewBox": f"0 0 {self.fmt(self.width)} {self.fmt(self.height)}",
            },
        )
        for index, page in enumerate(self._pages):
            if index > 0:
                page.set("display", "none")
            root.append(page)
        return ET.tostring(root, encoding="utf-8", xml_declaration=True)

    def _new_page(self) -> ET.Element:
        return ET.Element("g", {"id": f"page-{len(self._pages) + 1}"})

    def _flush(self) -> None:
        assert self._stream is not None
        data = self.to_bytes()
        try:
            self._stream.seek(0)
            self._stream.truncate()
            self._stream.write(data)
            self._stream.flush()
        except OSError as exc:
            raise BackendError(f"cannot write SVG file {str(self.path)!r}: {exc}") from exc


class SvgContext(DrawingContext):
    def __init__(self, document: SvgDocument, settings: RenderSettings) -> None:
        super().__init__()
        self._document = document
        self._settings = settings

    def _fill_subpaths(self, subpaths: list[Subpath], rgba: RGBA, fill_rule: FillRule) -> None:
        attrs = {
            "d": path_data(subpaths, self._document.fmt),
            "fill": color_hex(rgba),
            "fill-rule": fill_rule,
            "stroke": "none",
        }
        if rgba[3] < 1.0:
            attrs["fill-opacity"] = self._document.fmt(max(0.0, rgba[3]))
        self._document.append(ET.Element("path", attrs))

    def _stroke_subpaths(self, subpaths: list[Subpath], rgba: RGBA, width: float) -> None:
        attrs = {
            "d": path_data(subpaths, self._document.fmt),
            "fill": "none",
            "stroke": color_hex(rgba),
            "stroke-width": self._document.fmt(width),
            "stroke-linecap": "butt",
            "stroke-linejoin": "miter",
        }
        if rgba[3] < 1.0:
            attrs["stroke-opacity"] = self._document.fmt(max(0.0, rgba[3]))
        self._document.append(ET.Element("path", attrs))

    def _paint(self, rgba: RGBA) -> None:
        attrs = {
            "x": "0",
            "y": "0",
            "width": self._document.fmt(self._document.width),
            "height": self._document.fmt(self._document.height),
            "fill": color_hex(rgba),
        }
        if rgba[3] < 1.0:
            attrs["fill-opacity"] = self._document.fmt(max(0.0, rgba[3]))
        self._document.append(ET.Element("rect", attrs))

    def _show_text(self, face: ToyFontFace, size: float, x: float, y: float, text: str, rgba: RGBA) -> float:
        attrs = {
            "x": self._document.fmt(x),
            "y": self._document.fmt(y),
            "font-family": face.family,
            "font-size": self._document.fmt(size),
            "font-style": face.slant,
            "font-weight": face.weight,
            "fill": color_hex(rgba),
        }
        if rgba[3] < 1.0:
            attrs["fill-opacity"] = self._document.fmt(max(0.0, rgba[3]))
        element = ET.Element("text", attrs)
        element.text = text
        self._document.append(element)
        return self._text_extents(face, size, text).x_advance

    def _text_extents(self, face: ToyFontFace, size: float, text: str) -> TextExtents:
        return system_text_extents(face, size, text, self._settings.font_dirs, self._settings.default_font_family)


def path_data(subpaths: list[Subpath], fmt) -> str:
    parts: list[str] = []
    for subpath in subpaths:
        parts.append(f"M {fmt(subpath.start[0])} {fmt(subpath.start[1])}")
        for segment in subpath.segments:
            if isinstance(segment, LineSegment):
                parts.append(f"L {fmt(segment.x)} {fmt(segment.y)}")
            else:
                parts.extend(_arc_commands(segment, fmt))
        if subpath.closed:
            parts.append("Z")
    return " ".join(parts)


def _arc_commands(segment: ArcSegment, fmt) -> list[str]:
    # SVG arcs cannot describe a full turn, so split into pieces of at most pi
    sweep = segment.angle_stop - segment.angle_start
    pieces = max(1, int(math.ceil(sweep / math.pi - 1e-9)))
    r = fmt(segment.radius)
    commands = []
    for i in range(1, pieces + 1):
        angle = segment.angle_start + sweep * i / pieces
        x = segment.xc + segment.radius * math.cos(angle)
        y = segment.yc + segment.radius * math.sin(angle)
        commands.append(f"A {r} {r} 0 0 1 {fmt(x)} {fmt(y)}")
    return commands


def color_hex(rgba: RGBA) -> str:
    r, g, b = (int(round(max(0.0, min(1.0, c)) * 255.0)) for c in rgba[:3])
    return f"#{r:02x}{g:02x}{b:02x}"


def format_number(value: float, precision: int) -> str:
    text = f"{value:.{precision}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in ("-0", ""):
        text = "0"
    return text
