from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
import math
from typing import Literal, Union

from graphics2.core.color import ColorT, as_unit_rgba
from graphics2.errors import BackendError
from graphics2.geometry.path import normalize_arc_angles
from graphics2.text.font import TextExtents, ToyFontFace


FillRule = Literal["nonzero", "evenodd"]
RGBA = tuple[float, float, float, float]
Point = tuple[float, float]

_FILL_RULES = ("nonzero", "evenodd")


@dataclass(frozen=True)
class LineSegment:
    x: float
    y: float


@dataclass(frozen=True)
class ArcSegment:
    """Arc in device space; angles in radians with angle_stop >= angle_start."""

    xc: float
    yc: float
    radius: float
    angle_start: float
    angle_stop: float

    @property
    def end(self) -> Point:
        return (
            self.xc + self.radius * math.cos(self.angle_stop),
            self.yc + self.radius * math.sin(self.angle_stop),
        )


Segment = Union[LineSegment, ArcSegment]


@dataclass
class Subpath:
    start: Point
    segments: list[Segment] = field(default_factory=list)
    closed: bool = False

    def is_degenerate(self) -> bool:
        return not self.segments

    def flatten(self, tolerance: float) -> list[Point]:
        points: list[Point] = [self.start]
        for segment in self.segments:
            if isinstance(segment, LineSegment):
                points.append((segment.x, segment.y))
            else:
                points.extend(flatten_arc(segment, tolerance)[1:])
        if self.closed and points[-1] != points[0]:
            points.append(points[0])
        return points


@dataclass(frozen=True)
class _GraphicsState:
    source: RGBA = (0.0, 0.0, 0.0, 1.0)
    line_width: float = 2.0
    fill_rule: FillRule = "nonzero"
    scale: float = 1.0
    tx: float = 0.0
    ty: float = 0.0


def flatten_arc(segment: ArcSegment, tolerance: float) -> list[Point]:
    sweep = segment.angle_stop - segment.angle_start
    r = segment.radius
    if r <= tolerance:
        steps = 1 if sweep <= math.pi else 2
    else:
        max_step = 2.0 * math.acos(1.0 - tolerance / r)
        steps = max(1, int(math.ceil(sweep / max_step)))
    return [
        (
            segment.xc + r * math.cos(segment.angle_start + sweep * i / steps),
            segment.yc + r * math.sin(segment.angle_start + sweep * i / steps),
        )
        for i in range(steps + 1)
    ]


class DrawingContext(ABC):
    """Per-operation drawing context over one backend target.

    Path construction follows the usual 2D vector model: points are transformed
    to device space as they are added, `rectangle` adds a closed subpath, `arc`
    connects to the current point with a straight line when one exists, and
    `fill`/`stroke` consume the current path.
    """

    def __init__(self) -> None:
        self._state = _GraphicsState()
        self._saved: list[_GraphicsState] = []
        self._subpaths: list[Subpath] = []
        self._current: Point | None = None

    # -- state ---------------------------------------------------------

    def set_source_rgba(self, red: float, green: float, blue: float, alpha: float = 1.0) -> None:
        self._state = replace(self._state, source=(float(red), float(green), float(blue), float(alpha)))

    def set_source_color(self, color: ColorT) -> None:
        self.set_source_rgba(*as_unit_rgba(color))

    @property
    def source(self) -> RGBA:
        return self._state.source

    def set_line_width(self, width: float) -> None:
        if width < 0:
            raise ValueError("line width must be >= 0")
        self._state = replace(self._state, line_width=float(width))

    @property
    def line_width(self) -> float:
        return self._state.line_width

    def set_fill_rule(self, fill_rule: FillRule) -> None:
        if fill_rule not in _FILL_RULES:
            raise ValueError(f"fill rule must be one of {_FILL_RULES}, got {fill_rule!r}")
        self._state = replace(self._state, fill_rule=fill_rule)

    @property
    def fill_rule(self) -> FillRule:
        return self._state.fill_rule

    def translate(self, dx: float, dy: float) -> None:
        s = self._state
        self._state = replace(s, tx=s.tx + dx * s.scale, ty=s.ty + dy * s.scale)

    def scale(self, factor: float) -> None:
        if factor <= 0:
            raise ValueError("scale factor must be > 0")
        self._state = replace(self._state, scale=self._state.scale * factor)

    def save(self) -> None:
        self._saved.append(self._state)

    def restore(self) -> None:
        if not self._saved:
            raise BackendError("restore() without matching save()")
        self._state = self._saved.pop()

    def user_to_device(self, x: float, y: float) -> Point:
        s = self._state
        return (s.tx + x * s.scale, s.ty + y * s.scale)

    def device_to_user(self, x: float, y: float) -> Point:
        s = self._state
        return ((x - s.tx) / s.scale, (y - s.ty) / s.scale)

    # -- path construction ---------------------------------------------

    @property
    def subpaths(self) -> tuple[Subpath, ...]:
        return tuple(self._subpaths)

    def has_current_point(self) -> bool:
        return self._current is not None

    def get_current_point(self) -> Point:
        if self._current is None:
            return (0.0, 0.0)
        return self.device_to_user(*self._current)

    def new_path(self) -> None:
        self._subpaths = []
        self._current = None

    def move_to(self, x: float, y: float) -> None:
        self._move_to_device(self.user_to_device(x, y))

    def line_to(self, x: float, y: float) -> None:
        self._line_to_device(self.user_to_device(x, y))

    def rectangle(self, x: float, y: float, width: float, height: float) -> None:
        self.move_to(x, y)
        self.line_to(x + width, y)
        self.line_to(x + width, y + height)
        self.line_to(x, y + height)
        self.close_path()

    def arc(self, xc: float, yc: float, radius: float, angle_start: float, angle_stop: float) -> None:
        if radius < 0:
            raise ValueError("arc radius must be >= 0")
        angle_start, angle_stop = normalize_arc_angles(angle_start, angle_stop)
        start = self.user_to_device(
            xc + radius * math.cos(angle_start),
            yc + radius * math.sin(angle_start),
        )
        if self._current is None:
            self._move_to_device(start)
        else:
            self._line_to_device(start)
        cx, cy = self.user_to_device(xc, yc)
        segment = ArcSegment(cx, cy, radius * self._state.scale, angle_start, angle_stop)
        if segment.radius == 0.0 or angle_stop == angle_start:
            return
        self._open_subpath().segments.append(segment)
        self._current = segment.end

    def close_path(self) -> None:
        if not self._subpaths or self._subpaths[-1].closed:
            return
        subpath = self._subpaths[-1]
        subpath.closed = True
        self._current = subpath.start

    def _move_to_device(self, point: Point) -> None:
        self._subpaths.append(Subpath(start=point))
        self._current = point

    def _line_to_device(self, point: Point) -> None:
        if self._current is None:
            self._move_to_device(point)
            return
        self._open_subpath().segments.append(LineSegment(*point))
        self._current = point

    def _open_subpath(self) -> Subpath:
        assert self._current is not None
        if not self._subpaths or self._subpaths[-1].closed:
            self._subpaths.append(Subpath(start=self._current))
        return self._subpaths[-1]

    # -- drawing -------------------------------------------------------

    def fill(self) -> None:
        subpaths = [s for s in self._subpaths if not s.is_degenerate()]
        if subpaths:
            self._fill_subpaths(subpaths, self._state.source, self._state.fill_rule)
        self.new_path()

    def stroke(self) -> None:
        subpaths = [s for s in self._subpaths if not s.is_degenerate()]
        width = self._state.line_width * self._state.scale
        if subpaths and width > 0:
            self._stroke_subpaths(subpaths, self._state.source, width)
        self.new_path()

    def paint(self) -> None:
        self._paint(self._state.source)

    def show_text(self, face: ToyFontFace, size: float, text: str) -> None:
        """Draw `text` with its baseline origin at the current point."""
        if not text:
            return
        x, y = self._current if self._current is not None else self.user_to_device(0.0, 0.0)
        advance = self._show_text(face, size * self._state.scale, x, y, text, self._state.source)
        self._move_to_device((x + advance, y))

    def text_extents(self, face: ToyFontFace, size: float, text: str) -> TextExtents:
        return self._text_extents(face, size, text)

    @abstractmethod
    def _fill_subpaths(self, subpaths: list[Subpath], rgba: RGBA, fill_rule: FillRule) -> None:
        raise NotImplementedError

    @abstractmethod
    def _stroke_subpaths(self, subpaths: list[Subpath], rgba: RGBA, width: float) -> None:
        raise NotImplementedError

    @abstractmethod
    def _paint(self, rgba: RGBA) -> None:
        raise NotImplementedError

    @abstractmethod
    def _show_text(self, face: ToyFontFace, size: float, x: float, y: float, text: str, rgba: RGBA) -> float:
        """Draw text at device position and return the device x advance."""
        raise NotImplementedError

    @abstractmethod
    def _text_extents(self, face: ToyFontFace, size: float, text: str) -> TextExtents:
        raise NotImplementedError
