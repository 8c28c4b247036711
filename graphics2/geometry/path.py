from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
import math
from typing import Iterator, Protocol

from .position import Position


Bounds = tuple[float, float, float, float]


class PathBuilder(Protocol):
    """Path-construction half of a backend drawing context."""

    def move_to(self, x: float, y: float) -> None:
        ...

    def line_to(self, x: float, y: float) -> None:
        ...

    def rectangle(self, x: float, y: float, width: float, height: float) -> None:
        ...

    def arc(self, xc: float, yc: float, radius: float, angle_start: float, angle_stop: float) -> None:
        ...


class PathPrimitive(ABC):
    @abstractmethod
    def apply_to_context(self, ctx: PathBuilder) -> None:
        """Issue the equivalent backend path commands on `ctx`."""
        raise NotImplementedError

    @abstractmethod
    def bounds(self) -> Bounds | None:
        raise NotImplementedError


@dataclass(frozen=True)
class Line(PathPrimitive):
    start: Position
    end: Position

    @classmethod
    def from_coords(cls, x0: float, y0: float, x1: float, y1: float) -> "Line":
        return cls(Position(x0, y0), Position(x1, y1))

    def apply_to_context(self, ctx: PathBuilder) -> None:
        ctx.move_to(self.start.x, self.start.y)
        ctx.line_to(self.end.x, self.end.y)

    def bounds(self) -> Bounds:
        return _bounds_of([self.start.as_tuple(), self.end.as_tuple()])


@dataclass(frozen=True)
class Rectangle(PathPrimitive):
    corner1: Position
    corner2: Position

    @classmethod
    def from_coords(cls, x0: float, y0: float, x1: float, y1: float) -> "Rectangle":
        return cls(Position(x0, y0), Position(x1, y1))

    @property
    def width(self) -> float:
        return self.corner2.x - self.corner1.x

    @property
    def height(self) -> float:
        return self.corner2.y - self.corner1.y

    def apply_to_context(self, ctx: PathBuilder) -> None:
        ctx.rectangle(self.corner1.x, self.corner1.y, self.width, self.height)

    def bounds(self) -> Bounds:
        return _bounds_of([self.corner1.as_tuple(), self.corner2.as_tuple()])


@dataclass(frozen=True)
class Arc(PathPrimitive):
    """Circular arc swept in the direction of increasing angle (radians)."""

    center: Position
    radius: float
    angle_start: float
    angle_stop: float

    def __post_init__(self) -> None:
        if self.radius < 0:
            raise ValueError("Arc radius must be >= 0")

    @classmethod
    def circle(cls, center: Position, radius: float) -> "Arc":
        return cls(center, radius, 0.0, 2.0 * math.pi)

    def apply_to_context(self, ctx: PathBuilder) -> None:
        ctx.arc(self.center.x, self.center.y, self.radius, self.angle_start, self.angle_stop)

    def sweep(self) -> tuple[float, float]:
        return normalize_arc_angles(self.angle_start, self.angle_stop)

    def bounds(self) -> Bounds:
        start, stop = self.sweep()
        angles = [start, stop]
        quarter = math.pi / 2.0
        k = math.ceil(start / quarter)
        while k * quarter < stop:
            angles.append(k * quarter)
            k += 1
        cx, cy, r = self.center.x, self.center.y, self.radius
        return _bounds_of([(cx + r * math.cos(a), cy + r * math.sin(a)) for a in angles])


class Path(PathPrimitive):
    """Ordered composite of primitives; members are emitted in insertion order.

    Appending is the only mutation. Appended paths are copied so every member is
    owned by exactly one path.
    """

    def __init__(self, *parts: PathPrimitive) -> None:
        self._parts: list[PathPrimitive] = []
        for part in parts:
            self.append(part)

    @property
    def parts(self) -> tuple[PathPrimitive, ...]:
        return tuple(self._parts)

    def append(self, part: PathPrimitive) -> "Path":
        if not isinstance(part, PathPrimitive):
            raise TypeError(f"cannot append {type(part).__name__} to a Path")
        if isinstance(part, Path):
            part = Path(*part.parts)
        self._parts.append(part)
        return self

    def __iadd__(self, part: PathPrimitive) -> "Path":
        return self.append(part)

    def is_empty(self) -> bool:
        return not self._parts

    def __len__(self) -> int:
        return len(self._parts)

    def __iter__(self) -> Iterator[PathPrimitive]:
        return iter(tuple(self._parts))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Path):
            return NotImplemented
        return self._parts == other._parts

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Path({', '.join(repr(p) for p in self._parts)})"

    def apply_to_context(self, ctx: PathBuilder) -> None:
        for part in self._parts:
            part.apply_to_context(ctx)

    def bounds(self) -> Bounds | None:
        boxes = [b for b in (part.bounds() for part in self._parts) if b is not None]
        if not boxes:
            return None
        return (
            min(b[0] for b in boxes),
            min(b[1] for b in boxes),
            max(b[2] for b in boxes),
            max(b[3] for b in boxes),
        )


def normalize_arc_angles(angle_start: float, angle_stop: float) -> tuple[float, float]:
    """Wrap the stop angle forward until the sweep is non-negative."""
    two_pi = 2.0 * math.pi
    if angle_stop < angle_start:
        angle_stop += math.ceil((angle_start - angle_stop) / two_pi) * two_pi
    return (angle_start, angle_stop)


def _bounds_of(points: list[tuple[float, float]]) -> Bounds:
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    return (min(xs), min(ys), max(xs), max(ys))
