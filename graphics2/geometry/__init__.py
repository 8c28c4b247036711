from .path import Arc, Bounds, Line, Path, PathBuilder, PathPrimitive, Rectangle, normalize_arc_angles
from .position import Position

__all__ = [
    "Arc",
    "Bounds",
    "Line",
    "Path",
    "PathBuilder",
    "PathPrimitive",
    "Position",
    "Rectangle",
    "normalize_arc_angles",
]
