from .pen import DEFAULT_PEN_WIDTH, Pen

__all__ = ["DEFAULT_PEN_WIDTH", "Pen"]
