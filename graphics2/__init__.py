"""Typed value objects and PNG/SVG surfaces over a small 2D drawing backend."""

from .config import RenderSettings
from .core import (
    BLACK,
    TRANSPARENT,
    WHITE,
    Color,
    Color8,
    ColorT,
    NumericRange,
    UnitChannel,
    ValueInRange,
    channel_bits,
    color_bits,
    color_type,
    uint_at_least,
    value_in_range,
)
from .errors import BackendError, DegenerateRangeError, Graphics2Error, SurfaceFinishedError, UnsupportedFormatError
from .geometry import Arc, Line, Path, PathPrimitive, Position, Rectangle
from .render import FORMAT_ARGB32, FORMAT_RGB24
from .style import DEFAULT_PEN_WIDTH, Pen
from .surface import ImageSurface, Surface, SvgSurface
from .text import (
    NOTFOUND_GLYPH,
    BoxFont,
    Font,
    FontExtents,
    GlyphRenderer,
    ScaledFont,
    TextExtents,
    ToyFontFace,
    UserFontFace,
    box_font_face,
)

__all__ = [
    "Arc",
    "BLACK",
    "BackendError",
    "BoxFont",
    "Color",
    "Color8",
    "ColorT",
    "DEFAULT_PEN_WIDTH",
    "DegenerateRangeError",
    "FORMAT_ARGB32",
    "FORMAT_RGB24",
    "Font",
    "FontExtents",
    "GlyphRenderer",
    "Graphics2Error",
    "ImageSurface",
    "Line",
    "NOTFOUND_GLYPH",
    "NumericRange",
    "Path",
    "PathPrimitive",
    "Pen",
    "Position",
    "Rectangle",
    "RenderSettings",
    "ScaledFont",
    "Surface",
    "SurfaceFinishedError",
    "SvgSurface",
    "TRANSPARENT",
    "TextExtents",
    "ToyFontFace",
    "UnitChannel",
    "UnsupportedFormatError",
    "UserFontFace",
    "ValueInRange",
    "WHITE",
    "box_font_face",
    "channel_bits",
    "color_bits",
    "color_type",
    "uint_at_least",
    "value_in_range",
]
