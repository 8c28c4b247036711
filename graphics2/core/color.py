from __future__ import annotations

from functools import lru_cache
import re
from typing import ClassVar, TypeVar

from .channel import Number, UnitChannel, ValueInRange, channel_bits


_HEX_COLOR = re.compile(r"^#?([0-9a-fA-F]{6})([0-9a-fA-F]{2})?$")

ColorSelf = TypeVar("ColorSelf", bound="ColorT")


class ColorT:
    """Four independently typed channels in R, G, B, A order.

    Subclasses pick the channel classes through `RED`, `GREEN`, `BLUE` and
    `ALPHA`. Channels may be given as raw values or as instances of the exact
    channel class; a missing alpha means fully opaque.
    """

    RED: ClassVar[type[ValueInRange]]
    GREEN: ClassVar[type[ValueInRange]]
    BLUE: ClassVar[type[ValueInRange]]
    ALPHA: ClassVar[type[ValueInRange]]

    __slots__ = ("_red", "_green", "_blue", "_alpha")

    def __init__(
        self,
        red: Number | ValueInRange,
        green: Number | ValueInRange,
        blue: Number | ValueInRange,
        alpha: Number | ValueInRange | None = None,
    ) -> None:
        cls = type(self)
        if alpha is None:
            rng = cls.ALPHA.RANGE
            assert rng is not None
            alpha = rng.maximum
        self._red = _as_channel(cls.RED, red, "red")
        self._green = _as_channel(cls.GREEN, green, "green")
        self._blue = _as_channel(cls.BLUE, blue, "blue")
        self._alpha = _as_channel(cls.ALPHA, alpha, "alpha")

    @classmethod
    def from_color(cls: type[ColorSelf], other: "ColorT") -> ColorSelf:
        """Convert channel by channel, keeping each channel's relative position."""
        if type(other) is cls:
            return other  # type: ignore[return-value]
        return cls(
            cls.RED.from_value(other.red),
            cls.GREEN.from_value(other.green),
            cls.BLUE.from_value(other.blue),
            cls.ALPHA.from_value(other.alpha),
        )

    @classmethod
    def from_hex(cls: type[ColorSelf], value: str) -> ColorSelf:
        match = _HEX_COLOR.match(value.strip())
        if match is None:
            raise ValueError(f"expected a hex color (#RRGGBB or #RRGGBBAA), got {value!r}")
        rgb, alpha = match.groups()
        color8 = Color8(
            int(rgb[0:2], 16),
            int(rgb[2:4], 16),
            int(rgb[4:6], 16),
            int(alpha, 16) if alpha else 255,
        )
        return cls.from_color(color8)

    @property
    def red(self) -> ValueInRange:
        return self._red

    @property
    def green(self) -> ValueInRange:
        return self._green

    @property
    def blue(self) -> ValueInRange:
        return self._blue

    @property
    def alpha(self) -> ValueInRange:
        return self._alpha

    def rgba(self) -> tuple[Number, Number, Number, Number]:
        return (self._red.value, self._green.value, self._blue.value, self._alpha.value)

    def is_valid(self) -> bool:
        return (
            self._red.is_valid()
            and self._green.is_valid()
            and self._blue.is_valid()
            and self._alpha.is_valid()
        )

    def replace(
        self: ColorSelf,
        *,
        red: Number | ValueInRange | None = None,
        green: Number | ValueInRange | None = None,
        blue: Number | ValueInRange | None = None,
        alpha: Number | ValueInRange | None = None,
    ) -> ColorSelf:
        return type(self)(
            self._red if red is None else red,
            self._green if green is None else green,
            self._blue if blue is None else blue,
            self._alpha if alpha is None else alpha,
        )

    def to_rgba8(self) -> tuple[int, int, int, int]:
        r, g, b, a = Color8.from_color(self).rgba()
        return (int(r), int(g), int(b), int(a))

    def to_hex(self) -> str:
        r, g, b, a = (max(0, min(255, c)) for c in self.to_rgba8())
        if a == 255:
            return f"#{r:02x}{g:02x}{b:02x}"
        return f"#{r:02x}{g:02x}{b:02x}{a:02x}"

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        assert isinstance(other, ColorT)
        return self.rgba() == other.rgba()

    def __hash__(self) -> int:
        return hash((type(self), self.rgba()))

    def __repr__(self) -> str:
        r, g, b, a = self.rgba()
        return f"{type(self).__name__}({r!r}, {g!r}, {b!r}, {a!r})"

    def __str__(self) -> str:
        return f"({self._red},{self._green},{self._blue},{self._alpha})"


def _as_channel(channel_cls: type[ValueInRange], value: Number | ValueInRange, name: str) -> ValueInRange:
    if isinstance(value, ValueInRange):
        if type(value) is not channel_cls:
            raise TypeError(
                f"{name} channel must be {channel_cls.__name__}, got {type(value).__name__}; "
                "use from_color() to convert between representations"
            )
        return value
    return channel_cls(value)


class Color(ColorT):
    """Normalized colour; every channel lives in [0, 1]."""

    RED = UnitChannel
    GREEN = UnitChannel
    BLUE = UnitChannel
    ALPHA = UnitChannel

    __slots__ = ()


@lru_cache(maxsize=None)
def color_type(
    red: type[ValueInRange],
    green: type[ValueInRange],
    blue: type[ValueInRange],
    alpha: type[ValueInRange],
) -> type[ColorT]:
    if (red, green, blue, alpha) == (UnitChannel, UnitChannel, UnitChannel, UnitChannel):
        return Color
    name = f"Color_{red.__name__}_{green.__name__}_{blue.__name__}_{alpha.__name__}"
    attrs = {"RED": red, "GREEN": green, "BLUE": blue, "ALPHA": alpha, "__slots__": ()}
    return type(name, (ColorT,), attrs)


def color_bits(red_bits: int, green_bits: int, blue_bits: int, alpha_bits: int) -> type[ColorT]:
    return color_type(
        channel_bits(red_bits),
        channel_bits(green_bits),
        channel_bits(blue_bits),
        channel_bits(alpha_bits),
    )


Color8 = color_bits(8, 8, 8, 8)

BLACK = Color(0.0, 0.0, 0.0)
WHITE = Color(1.0, 1.0, 1.0)
TRANSPARENT = Color(0.0, 0.0, 0.0, 0.0)


def as_unit_rgba(color: ColorT) -> tuple[float, float, float, float]:
    r, g, b, a = Color.from_color(color).rgba()
    return (float(r), float(g), float(b), float(a))
