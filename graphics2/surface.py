from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import contextmanager
import logging
from pathlib import Path
from typing import Iterator
import weakref

from graphics2.config import RenderSettings
from graphics2.core.color import ColorT
from graphics2.errors import SurfaceFinishedError
from graphics2.geometry.path import PathPrimitive
from graphics2.geometry.position import Position
from graphics2.render.context import DrawingContext, FillRule
from graphics2.render.raster import FORMAT_ARGB32, RasterContext, RasterTarget
from graphics2.render.svg import SvgContext, SvgDocument
from graphics2.style.pen import Pen
from graphics2.text.font import Font, TextExtents, ToyFontFace, UserFontFace, show_user_text


LOGGER = logging.getLogger(__name__)


class Surface(ABC):
    """Drawing target that applies every call immediately to its backend.

    Each operation builds a fresh drawing context, issues one drawing command
    and discards the context, so no style state carries over between calls.
    Use as a context manager to finish the surface when the block ends.
    """

    def __init__(self, width: float, height: float, settings: RenderSettings | None = None) -> None:
        self._width = width
        self._height = height
        self._settings = settings if settings is not None else RenderSettings.from_env()
        self._finished = False
        self._pages_shown = 0

    @property
    def width(self) -> float:
        return self._width

    @property
    def height(self) -> float:
        return self._height

    @property
    def settings(self) -> RenderSettings:
        return self._settings

    @property
    def finished(self) -> bool:
        return self._finished

    @property
    def pages_shown(self) -> int:
        return self._pages_shown

    def fill(self, color: ColorT, path: PathPrimitive | None = None, *, fill_rule: FillRule = "nonzero") -> None:
        with self._context() as ctx:
            ctx.set_source_color(color)
            if path is None:
                ctx.paint()
                return
            ctx.set_fill_rule(fill_rule)
            path.apply_to_context(ctx)
            ctx.fill()

    def stroke(self, pen: Pen, path: PathPrimitive) -> None:
        with self._context() as ctx:
            ctx.set_source_color(pen.color)
            ctx.set_line_width(pen.width)
            path.apply_to_context(ctx)
            ctx.stroke()

    def print(self, font: Font, position: Position, text: str) -> float:
        """Draw `text` with its baseline origin at `position`; returns the advance."""
        if not text:
            return 0.0
        with self._context() as ctx:
            ctx.set_source_color(font.color)
            face = font.face
            if isinstance(face, UserFontFace):
                return show_user_text(ctx, face.scaled(font.size), position, text)
            if not isinstance(face, ToyFontFace):
                raise TypeError(f"unsupported font face: {type(face).__name__}")
            ctx.move_to(position.x, position.y)
            ctx.show_text(face, font.size, text)
            return ctx.get_current_point()[0] - position.x

    def text_extents(self, font: Font, text: str) -> TextExtents:
        if not isinstance(font.face, ToyFontFace):
            raise TypeError("text_extents is only available for system fonts")
        with self._context() as ctx:
            return ctx.text_extents(font.face, font.size, text)

    def show_page(self) -> None:
        self._check_open()
        self._show_page()
        self._pages_shown += 1

    def finish(self) -> None:
        if self._finished:
            return
        self._finish()
        self._finished = True
        LOGGER.debug("%s finished after %d page(s)", type(self).__name__, self._pages_shown)

    def __enter__(self) -> "Surface":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.finish()

    @contextmanager
    def _context(self) -> Iterator[DrawingContext]:
        self._check_open()
        ctx = self._create_context()
        try:
            yield ctx
        finally:
            ctx.new_path()

    def _check_open(self) -> None:
        if self._finished:
            raise SurfaceFinishedError(f"{type(self).__name__} is already finished")

    @abstractmethod
    def _create_context(self) -> DrawingContext:
        raise NotImplementedError

    def _show_page(self) -> None:
        return

    def _finish(self) -> None:
        return


class ImageSurface(Surface):
    """In-memory raster surface; pixels start fully transparent."""

    def __init__(
        self,
        fmt: str = FORMAT_ARGB32,
        width: int = 600,
        height: int = 400,
        settings: RenderSettings | None = None,
    ) -> None:
        self._target = RasterTarget(fmt, width, height)
        super().__init__(self._target.width, self._target.height, settings)
        LOGGER.debug("created %s image surface %dx%d", fmt, self._target.width, self._target.height)

    @property
    def format(self) -> str:
        return self._target.format

    def pixel(self, x: int, y: int) -> tuple[int, int, int, int]:
        r, g, b, a = self._target.pixels[y, x]
        return (int(r), int(g), int(b), int(a))

    def to_array(self):
        return self._target.pixels.copy()

    def to_png_bytes(self) -> bytes:
        return self._target.png_bytes()

    def write_to_png(self, filename: str | Path) -> Path:
        return self._target.write_png(filename)

    def _create_context(self) -> DrawingContext:
        return RasterContext(self._target, self._settings)


class SvgSurface(Surface):
    """Vector surface streaming pages to an SVG file.

    The file is opened immediately. `finish()`, or dropping the last reference
    to the surface, emits any pending page and closes the file.
    """

    def __init__(
        self,
        filename: str | Path,
        width: float,
        height: float,
        settings: RenderSettings | None = None,
    ) -> None:
        settings = settings if settings is not None else RenderSettings.from_env()
        self._document = SvgDocument(filename, width, height, precision=settings.svg_precision)
        # a surface dropped without finish() still writes its pending page
        self._finalizer = weakref.finalize(self, self._document.finish)
        super().__init__(self._document.width, self._document.height, settings)
        LOGGER.debug("created SVG surface %s (%gx%g pt)", self._document.path, width, height)

    @property
    def filename(self) -> Path:
        return self._document.path

    @property
    def page_count(self) -> int:
        return self._document.page_count

    def _create_context(self) -> DrawingContext:
        return SvgContext(self._document, self._settings)

    def _show_page(self) -> None:
        self._document.show_page()

    def _finish(self) -> None:
        self._finalizer()
