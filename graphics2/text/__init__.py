"""Fonts, glyph renderer callbacks and the reference box font."""

from .box_font import BoxFont, box_font_face
from .font import (
    NOTFOUND_GLYPH,
    Font,
    FontExtents,
    FontFace,
    FontSlant,
    FontWeight,
    GlyphRenderer,
    ScaledFont,
    TextExtents,
    ToyFontFace,
    UserFontFace,
    show_user_text,
)

__all__ = [
    "BoxFont",
    "Font",
    "FontExtents",
    "FontFace",
    "FontSlant",
    "FontWeight",
    "GlyphRenderer",
    "NOTFOUND_GLYPH",
    "ScaledFont",
    "TextExtents",
    "ToyFontFace",
    "UserFontFace",
    "box_font_face",
    "show_user_text",
]
