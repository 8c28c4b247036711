from __future__ import annotations

from functools import lru_cache
import logging
from pathlib import Path

from PIL import ImageFont

from graphics2.text.font import TextExtents, ToyFontFace


LOGGER = logging.getLogger(__name__)

SystemFont = ImageFont.FreeTypeFont | ImageFont.ImageFont

_SLANT_TOKENS = {
    "normal": (),
    "italic": ("italic", "oblique"),
    "oblique": ("oblique", "italic"),
}
_WEIGHT_TOKENS = {
    "normal": (),
    "bold": ("bold",),
}
_STYLE_TOKENS = ("bold", "italic", "oblique", "light", "thin", "medium", "black", "condensed")


def load_system_font(
    face: ToyFontFace,
    size: float,
    font_dirs: tuple[Path, ...],
    fallback_family: str | None = None,
) -> SystemFont:
    """Load the closest installed match for `face`, then `fallback_family`, then Pillow's default."""
    return _load_font(face.family, face.slant, face.weight, max(1.0, float(size)), font_dirs, fallback_family)


def system_text_extents(
    face: ToyFontFace,
    size: float,
    text: str,
    font_dirs: tuple[Path, ...],
    fallback_family: str | None = None,
) -> TextExtents:
    font = load_system_font(face, size, font_dirs, fallback_family)
    if not text:
        return TextExtents()
    left, top, right, bottom = font.getbbox(text, anchor="ls")
    return TextExtents(
        x_bearing=float(left),
        y_bearing=float(top),
        width=float(right - left),
        height=float(bottom - top),
        x_advance=float(font.getlength(text)),
        y_advance=0.0,
    )


@lru_cache(maxsize=64)
def _load_font(
    family: str,
    slant: str,
    weight: str,
    size: float,
    font_dirs: tuple[Path, ...],
    fallback_family: str | None,
) -> SystemFont:
    font_path = resolve_font_path(family, slant, weight, font_dirs)
    if font_path is None and fallback_family and fallback_family != family:
        font_path = resolve_font_path(fallback_family, slant, weight, font_dirs)
        if font_path is not None:
            LOGGER.info("No font file found for family %r; using %s", family, font_path)
    if font_path is not None:
        try:
            return ImageFont.truetype(str(font_path), size=size)
        except OSError as exc:
            LOGGER.warning("Failed to load font file %s: %s", font_path, exc)
    LOGGER.warning("No font file found for family %r (%s, %s); using default font", family, slant, weight)
    return ImageFont.load_default(size=size)


def resolve_font_path(family: str, slant: str, weight: str, font_dirs: tuple[Path, ...]) -> Path | None:
    wanted = family.strip().lower().replace(" ", "").replace("-", "")
    if not wanted:
        return None

    candidates: list[Path] = []
    for base in font_dirs:
        if not base.exists():
            continue
        for ext in ("*.ttf", "*.otf", "*.ttc"):
            candidates.extend(sorted(base.rglob(ext)))

    desired = set(_SLANT_TOKENS.get(slant, ())) | set(_WEIGHT_TOKENS.get(weight, ()))
    best: tuple[int, Path] | None = None
    for path in candidates:
        stem = path.stem.lower().replace(" ", "").replace("-", "").replace("_", "")
        if wanted not in stem:
            continue
        style = stem.replace(wanted, "", 1)
        present = {token for token in _STYLE_TOKENS if token in style}
        score = len(present & desired) * 2 - len(present - desired)
        if slant == "oblique" and "oblique" in present:
            score += 1
        if best is None or score > best[0]:
            best = (score, path)
    return best[1] if best is not None else None
