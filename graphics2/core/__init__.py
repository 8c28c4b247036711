from .channel import NumericRange, UnitChannel, ValueInRange, channel_bits, uint_at_least, value_in_range
from .color import BLACK, TRANSPARENT, WHITE, Color, Color8, ColorT, as_unit_rgba, color_bits, color_type

__all__ = [
    "BLACK",
    "Color",
    "Color8",
    "ColorT",
    "NumericRange",
    "TRANSPARENT",
    "UnitChannel",
    "ValueInRange",
    "WHITE",
    "as_unit_rgba",
    "channel_bits",
    "color_bits",
    "color_type",
    "uint_at_least",
    "value_in_range",
]
