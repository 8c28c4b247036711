from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING, Mapping

from .font import EMPTY_TEXT_EXTENTS, NOTFOUND_GLYPH, FontExtents, ScaledFont, TextExtents, UserFontFace

if TYPE_CHECKING:
    from graphics2.render.context import DrawingContext


ROWS = 5
CELL = 1.0 / ROWS
GLYPH_SPACING = CELL
ASCENT = 1.0
LINE_HEIGHT = 1.4

_GLYPH_ROWS: dict[str, tuple[str, ...]] = {
    " ": ("...", "...", "...", "...", "..."),
    "0": ("###", "#.#", "#.#", "#.#", "###"),
    "1": (".#.", "##.", ".#.", ".#.", "###"),
    "2": ("###", "..#", "###", "#..", "###"),
    "3": ("###", "..#", "###", "..#", "###"),
    "4": ("#.#", "#.#", "###", "..#", "..#"),
    "5": ("###", "#..", "###", "..#", "###"),
    "6": ("###", "#..", "###", "#.#", "###"),
    "7": ("###", "..#", "..#", "..#", "..#"),
    "8": ("###", "#.#", "###", "#.#", "###"),
    "9": ("###", "#.#", "###", "..#", "###"),
    "A": (".#.", "#.#", "###", "#.#", "#.#"),
    "B": ("##.", "#.#", "##.", "#.#", "##."),
    "C": ("###", "#..", "#..", "#..", "###"),
    "D": ("##.", "#.#", "#.#", "#.#", "##."),
    "E": ("###", "#..", "##.", "#..", "###"),
    "F": ("###", "#..", "##.", "#..", "#.."),
    "G": ("###", "#..", "#.#", "#.#", "###"),
    "H": ("#.#", "#.#", "###", "#.#", "#.#"),
    "I": ("###", ".#.", ".#.", ".#.", "###"),
    "J": ("..#", "..#", "..#", "#.#", "###"),
    "K": ("#.#", "#.#", "##.", "#.#", "#.#"),
    "L": ("#..", "#..", "#..", "#..", "###"),
    "M": ("#...#", "##.##", "#.#.#", "#...#", "#...#"),
    "N": ("#..#", "##.#", "#.##", "#..#", "#..#"),
    "O": (".#.", "#.#", "#.#", "#.#", ".#."),
    "P": ("###", "#.#", "###", "#..", "#.."),
    "Q": ("###", "#.#", "#.#", "###", "..#"),
    "R": ("##.", "#.#", "##.", "#.#", "#.#"),
    "S": (".##", "#..", ".#.", "..#", "##."),
    "T": ("###", ".#.", ".#.", ".#.", ".#."),
    "U": ("#.#", "#.#", "#.#", "#.#", "###"),
    "V": ("#.#", "#.#", "#.#", "#.#", ".#."),
    "W": ("#...#", "#...#", "#.#.#", "##.##", "#...#"),
    "X": ("#.#", "#.#", ".#.", "#.#", "#.#"),
    "Y": ("#.#", "#.#", ".#.", ".#.", ".#."),
    "Z": ("###", "..#", ".#.", "#..", "###"),
    ".": (".", ".", ".", ".", "#"),
    ",": (".", ".", ".", "#", "#"),
    "!": ("#", "#", "#", ".", "#"),
    "'": ("#", "#", ".", ".", "."),
    ":": (".", "#", ".", "#", "."),
    "?": ("###", "..#", ".##", "...", ".#."),
    "-": ("...", "...", "###", "...", "..."),
    "+": ("...", ".#.", "###", ".#.", "..."),
    "=": ("...", "###", "...", "###", "..."),
    "/": ("..#", "..#", ".#.", "#..", "#.."),
    "(": (".#", "#.", "#.", "#.", ".#"),
    ")": ("#.", ".#", ".#", ".#", "#."),
}


class _Glyph:
    __slots__ = ("char", "width", "cells")

    def __init__(self, char: str, rows: tuple[str, ...]) -> None:
        if len(rows) != ROWS or len({len(r) for r in rows}) != 1:
            raise ValueError(f"glyph {char!r} must be {ROWS} rows of equal width")
        self.char = char
        self.width = len(rows[0])
        self.cells = tuple(
            (col, row)
            for row, line in enumerate(rows)
            for col, mark in enumerate(line)
            if mark == "#"
        )

    @property
    def advance(self) -> float:
        return self.width * CELL + GLYPH_SPACING


def _build_table() -> tuple[tuple[_Glyph, ...], Mapping[str, int]]:
    glyphs = tuple(_Glyph(char, rows) for char, rows in sorted(_GLYPH_ROWS.items()))
    # glyph ids start at 1; 0 is reserved for "not found"
    ids = {glyph.char: index + 1 for index, glyph in enumerate(glyphs)}
    return glyphs, MappingProxyType(ids)


GLYPHS, GLYPH_IDS = _build_table()


class BoxFont:
    """Block glyph renderer: every glyph is a grid of filled square cells.

    Lowercase letters fold to their uppercase glyphs.
    """

    def init(self, scaled_font: ScaledFont, ctx: "DrawingContext") -> FontExtents:
        return FontExtents(
            ascent=ASCENT,
            descent=0.0,
            height=LINE_HEIGHT,
            max_x_advance=max(glyph.advance for glyph in GLYPHS),
            max_y_advance=0.0,
        )

    def unicode_to_glyph(self, scaled_font: ScaledFont, code_point: int) -> int:
        try:
            char = chr(code_point)
        except (ValueError, OverflowError):
            return NOTFOUND_GLYPH
        glyph_id = GLYPH_IDS.get(char)
        if glyph_id is None:
            glyph_id = GLYPH_IDS.get(char.upper(), NOTFOUND_GLYPH)
        return glyph_id

    def render_glyph(self, scaled_font: ScaledFont, glyph_id: int, ctx: "DrawingContext") -> TextExtents:
        if glyph_id < 1 or glyph_id > len(GLYPHS):
            return EMPTY_TEXT_EXTENTS
        glyph = GLYPHS[glyph_id - 1]
        if glyph.cells:
            ctx.set_fill_rule("nonzero")
            for col, row in glyph.cells:
                ctx.rectangle(col * CELL, row * CELL - ASCENT, CELL, CELL)
            ctx.fill()
        return TextExtents(
            x_bearing=0.0,
            y_bearing=-ASCENT,
            width=glyph.width * CELL,
            height=ASCENT,
            x_advance=glyph.advance,
            y_advance=0.0,
        )


def box_font_face() -> UserFontFace:
    return UserFontFace(BoxFont())
