from __future__ import annotations

from abc import ABC
from collections import OrderedDict
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Literal, Protocol

from graphics2.core.color import BLACK, ColorT
from graphics2.geometry.position import Position

if TYPE_CHECKING:
    from graphics2.render.context import DrawingContext


FontSlant = Literal["normal", "italic", "oblique"]
FontWeight = Literal["normal", "bold"]

NOTFOUND_GLYPH = 0
MAX_SCALED_FONTS = 32

_SLANTS = ("normal", "italic", "oblique")
_WEIGHTS = ("normal", "bold")


@dataclass(frozen=True)
class FontExtents:
    """Aggregate font metrics in font units (1.0 == one em)."""

    ascent: float
    descent: float
    height: float
    max_x_advance: float
    max_y_advance: float = 0.0


@dataclass(frozen=True)
class TextExtents:
    x_bearing: float = 0.0
    y_bearing: float = 0.0
    width: float = 0.0
    height: float = 0.0
    x_advance: float = 0.0
    y_advance: float = 0.0


EMPTY_TEXT_EXTENTS = TextExtents()


class FontFace(ABC):
    """Opaque handle the backend resolves into glyph shapes."""


@dataclass(frozen=True)
class ToyFontFace(FontFace):
    """Named system font; shaping and rendering are left to the backend."""

    family: str
    slant: FontSlant = "normal"
    weight: FontWeight = "normal"

    def __post_init__(self) -> None:
        if not self.family.strip():
            raise ValueError("ToyFontFace requires a non-empty `family`")
        if self.slant not in _SLANTS:
            raise ValueError(f"ToyFontFace `slant` must be one of {_SLANTS}")
        if self.weight not in _WEIGHTS:
            raise ValueError(f"ToyFontFace `weight` must be one of {_WEIGHTS}")


class GlyphRenderer(Protocol):
    """Callbacks a user font supplies to the text layout loop.

    Coordinates passed to `render_glyph` are in font units: the context is
    translated to the glyph origin on the baseline and scaled by the font size.
    """

    def init(self, scaled_font: "ScaledFont", ctx: "DrawingContext") -> FontExtents:
        ...

    def unicode_to_glyph(self, scaled_font: "ScaledFont", code_point: int) -> int:
        ...

    def render_glyph(self, scaled_font: "ScaledFont", glyph_id: int, ctx: "DrawingContext") -> TextExtents:
        ...


class UserFontFace(FontFace):
    def __init__(self, renderer: GlyphRenderer) -> None:
        self._renderer = renderer
        self._scaled: OrderedDict[float, ScaledFont] = OrderedDict()

    @property
    def renderer(self) -> GlyphRenderer:
        return self._renderer

    def scaled(self, size: float) -> "ScaledFont":
        """Scaled instance for `size`; the last `MAX_SCALED_FONTS` sizes are cached per face."""
        key = float(size)
        scaled = self._scaled.get(key)
        if scaled is None:
            scaled = ScaledFont(self, key)
            self._scaled[key] = scaled
            if len(self._scaled) > MAX_SCALED_FONTS:
                self._scaled.popitem(last=False)
        else:
            self._scaled.move_to_end(key)
        return scaled

    def __repr__(self) -> str:
        return f"UserFontFace({type(self._renderer).__name__})"


class ScaledFont:
    def __init__(self, face: UserFontFace, size: float) -> None:
        self._face = face
        self._size = size
        self._extents: FontExtents | None = None

    @property
    def face(self) -> UserFontFace:
        return self._face

    @property
    def size(self) -> float:
        return self._size

    def font_extents(self, ctx: "DrawingContext") -> FontExtents:
        if self._extents is None:
            self._extents = self._face.renderer.init(self, ctx)
        return self._extents


@dataclass(frozen=True)
class Font:
    face: FontFace
    color: ColorT = field(default=BLACK)
    size: float = 12.0

    def __post_init__(self) -> None:
        if not isinstance(self.face, FontFace):
            raise TypeError(f"Font face must be a FontFace, got {type(self.face).__name__}")
        if self.size <= 0:
            raise ValueError("Font size must be > 0")
        object.__setattr__(self, "size", float(self.size))

    def with_color(self, color: ColorT) -> "Font":
        return replace(self, color=color)

    def with_size(self, size: float) -> "Font":
        return replace(self, size=size)


def show_user_text(ctx: "DrawingContext", scaled_font: ScaledFont, origin: Position, text: str) -> float:
    """Lay out `text` left to right with the user font callbacks.

    Returns the total advance in device units.
    """
    renderer = scaled_font.face.renderer
    scaled_font.font_extents(ctx)
    x = origin.x
    for char in text:
        glyph_id = renderer.unicode_to_glyph(scaled_font, ord(char))
        ctx.save()
        try:
            ctx.new_path()
            ctx.translate(x, origin.y)
            ctx.scale(scaled_font.size)
            extents = renderer.render_glyph(scaled_font, glyph_id, ctx)
        finally:
            ctx.new_path()
            ctx.restore()
        x += extents.x_advance * scaled_font.size
    return x - origin.x
