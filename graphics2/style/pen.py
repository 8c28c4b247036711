from __future__ import annotations

from dataclasses import dataclass, field

from graphics2.core.color import BLACK, ColorT


DEFAULT_PEN_WIDTH = 2.0


@dataclass(frozen=True)
class Pen:
    width: float = DEFAULT_PEN_WIDTH
    color: ColorT = field(default=BLACK)

    def __post_init__(self) -> None:
        if self.width < 0:
            raise ValueError("Pen width must be >= 0")
        if not isinstance(self.color, ColorT):
            raise TypeError(f"Pen color must be a color, got {type(self.color).__name__}")
        object.__setattr__(self, "width", float(self.width))
