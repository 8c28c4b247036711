from __future__ import annotations

import argparse
import logging
import math
from pathlib import Path
from typing import Sequence

from .config import RenderSettings
from .core.color import Color
from .geometry.path import Arc, Line, Rectangle
from .geometry.position import Position
from .render.raster import FORMAT_ARGB32
from .style.pen import Pen
from .surface import ImageSurface, Surface, SvgSurface
from .text.box_font import box_font_face
from .text.font import Font


BACKGROUND = Color(0.86, 0.85, 0.47)
TRANSLUCENT_BLACK = Color(0.0, 0.0, 0.0, 0.7)
REFERENCE_PEN_WIDTH = 20.0


def draw_reference_scene(surface: Surface) -> None:
    """Framed background with a translucent circle and diagonal."""
    width, height = float(surface.width), float(surface.height)
    surface.fill(BACKGROUND)
    surface.stroke(Pen(REFERENCE_PEN_WIDTH), Rectangle.from_coords(0.0, 0.0, width, height))

    pen = Pen(REFERENCE_PEN_WIDTH, TRANSLUCENT_BLACK)
    surface.stroke(pen, Arc(Position(width / 2.0, height / 2.0), height / 4.0, 0.0, 2.0 * math.pi))
    surface.stroke(pen, Line.from_coords(width / 4.0, height / 4.0, width * 3.0 / 4.0, height * 3.0 / 4.0))


def draw_text_scene(surface: Surface, text: str, size: float) -> None:
    surface.fill(BACKGROUND)
    font = Font(box_font_face(), Color(0.1, 0.1, 0.3), size)
    surface.print(font, Position(size * 0.5, float(surface.height) / 2.0 + size / 2.0), text)


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="graphics2")
    parser.add_argument("--log-level", default="WARNING", help="Python logging level name.")
    sub = parser.add_subparsers(dest="command", required=True)

    image = sub.add_parser("image", help="Render the reference scene to a PNG file.")
    image.add_argument("--out", type=Path, default=Path("image.png"))
    image.add_argument("--width", type=int, default=600)
    image.add_argument("--height", type=int, default=400)

    svg = sub.add_parser("svg", help="Render the reference scene to an SVG file.")
    svg.add_argument("--out", type=Path, default=Path("image.svg"))
    svg.add_argument("--width", type=float, default=600.0)
    svg.add_argument("--height", type=float, default=400.0)

    text = sub.add_parser("text", help="Render a line of box-font text to a PNG file.")
    text.add_argument("message", nargs="?", default="HELLO, WORLD!")
    text.add_argument("--out", type=Path, default=Path("text.png"))
    text.add_argument("--width", type=int, default=600)
    text.add_argument("--height", type=int, default=120)
    text.add_argument("--size", type=float, default=40.0)
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, str(args.log_level).upper(), logging.WARNING))
    settings = RenderSettings.from_env()

    if args.command == "image":
        with ImageSurface(FORMAT_ARGB32, args.width, args.height, settings=settings) as surface:
            draw_reference_scene(surface)
            surface.show_page()
            surface.write_to_png(args.out)
        print(f'Wrote png file "{args.out}"')
        return 0

    if args.command == "svg":
        with SvgSurface(args.out, args.width, args.height, settings=settings) as surface:
            draw_reference_scene(surface)
            surface.show_page()
        print(f'Wrote SVG file "{args.out}"')
        return 0

    if args.command == "text":
        with ImageSurface(FORMAT_ARGB32, args.width, args.height, settings=settings) as surface:
            draw_text_scene(surface, args.message, args.size)
            surface.write_to_png(args.out)
        print(f'Wrote png file "{args.out}"')
        return 0

    raise RuntimeError(f"unsupported command: {args.command}")
