from __future__ import annotations


class Graphics2Error(Exception):
    pass


class DegenerateRangeError(Graphics2Error, ValueError):
    """Raised when a numeric range has no width (minimum >= maximum)."""


class BackendError(Graphics2Error, RuntimeError):
    """Raised when the rendering backend cannot apply an operation."""


class UnsupportedFormatError(BackendError, ValueError):
    pass


class SurfaceFinishedError(BackendError):
    pass
