from .context import ArcSegment, DrawingContext, FillRule, LineSegment, Subpath, flatten_arc
from .raster import FORMAT_ARGB32, FORMAT_RGB24, SUPPORTED_FORMATS, Format, RasterContext, RasterTarget, fill_coverage
from .svg import SvgContext, SvgDocument

__all__ = [
    "ArcSegment",
    "DrawingContext",
    "FORMAT_ARGB32",
    "FORMAT_RGB24",
    "FillRule",
    "Format",
    "LineSegment",
    "RasterContext",
    "RasterTarget",
    "SUPPORTED_FORMATS",
    "Subpath",
    "SvgContext",
    "SvgDocument",
    "fill_coverage",
    "flatten_arc",
]
