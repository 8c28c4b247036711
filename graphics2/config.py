from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path


DEFAULT_FONT_FAMILY = "DejaVu Sans"
DEFAULT_ARC_TOLERANCE = 0.25
DEFAULT_SVG_PRECISION = 3
DEFAULT_FONT_DIRS = (
    Path.home() / "Library" / "Fonts",
    Path("/Library/Fonts"),
    Path("/System/Library/Fonts"),
    Path("/System/Library/Fonts/Supplemental"),
    Path("/usr/share/fonts"),
    Path("/usr/local/share/fonts"),
)


@dataclass(frozen=True)
class RenderSettings:
    """Backend knobs shared by all surfaces.

    `arc_tolerance` is the maximum distance in device pixels between a flattened
    arc and the true curve. `svg_precision` is the number of decimals written for
    SVG coordinates.
    """

    default_font_family: str = DEFAULT_FONT_FAMILY
    arc_tolerance: float = DEFAULT_ARC_TOLERANCE
    svg_precision: int = DEFAULT_SVG_PRECISION
    font_dirs: tuple[Path, ...] = DEFAULT_FONT_DIRS

    def __post_init__(self) -> None:
        if not self.default_font_family.strip():
            raise ValueError("RenderSettings `default_font_family` must be non-empty")
        if self.arc_tolerance <= 0:
            raise ValueError("RenderSettings `arc_tolerance` must be > 0")
        if self.svg_precision < 0:
            raise ValueError("RenderSettings `svg_precision` must be >= 0")

    @classmethod
    def from_env(
        cls,
        *,
        font_family_env_var: str = "GRAPHICS2_FONT_FAMILY",
        arc_tolerance_env_var: str = "GRAPHICS2_ARC_TOLERANCE",
        svg_precision_env_var: str = "GRAPHICS2_SVG_PRECISION",
        font_dirs_env_var: str = "GRAPHICS2_FONT_DIRS",
    ) -> "RenderSettings":
        family = os.getenv(font_family_env_var, "").strip() or DEFAULT_FONT_FAMILY
        tolerance = _parse_positive_float(arc_tolerance_env_var, DEFAULT_ARC_TOLERANCE)
        precision = _parse_non_negative_int(svg_precision_env_var, DEFAULT_SVG_PRECISION)
        raw_dirs = os.getenv(font_dirs_env_var, "").strip()
        if raw_dirs:
            font_dirs = tuple(Path(p) for p in raw_dirs.split(os.pathsep) if p.strip())
        else:
            font_dirs = DEFAULT_FONT_DIRS
        return cls(
            default_font_family=family,
            arc_tolerance=tolerance,
            svg_precision=precision,
            font_dirs=font_dirs,
        )


def _parse_positive_float(env_var: str, default: float) -> float:
    raw = os.getenv(env_var, "").strip()
    if raw == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    if value <= 0:
        return default
    return value


def _parse_non_negative_int(env_var: str, default: int) -> int:
    raw = os.getenv(env_var, "").strip()
    if raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    if value < 0:
        return default
    return value
