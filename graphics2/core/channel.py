from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Any, ClassVar, Union

import numpy as np

from graphics2.errors import DegenerateRangeError


Number = Union[int, float]

_UINT_DTYPES = (
    (8, np.uint8),
    (16, np.uint16),
    (32, np.uint32),
    (64, np.uint64),
)


def uint_at_least(bits: int) -> type[np.unsignedinteger[Any]] | None:
    """Smallest unsigned numpy dtype holding `bits` bits; `None` for zero bits."""
    if bits < 0 or bits > 64:
        raise ValueError(f"no unsigned integer type holds {bits} bits")
    if bits == 0:
        return None
    for width, dtype in _UINT_DTYPES:
        if bits <= width:
            return dtype
    raise AssertionError("unreachable")


@dataclass(frozen=True)
class NumericRange:
    """Closed interval [minimum, maximum] for values of one numeric kind."""

    minimum: Number
    maximum: Number
    kind: type = float

    def __post_init__(self) -> None:
        if self.kind not in (int, float):
            raise ValueError(f"NumericRange kind must be int or float, got {self.kind!r}")
        if not self.minimum < self.maximum:
            raise DegenerateRangeError(
                f"numeric range [{self.minimum}, {self.maximum}] has no width"
            )

    @property
    def span(self) -> Number:
        return self.maximum - self.minimum

    def is_valid(self, value: Number) -> bool:
        return self.minimum <= value <= self.maximum

    def coerce(self, value: Number) -> Number:
        return self.kind(value)

    def scaled(self, value: Number) -> float:
        return (1.0 * value - self.minimum) / self.span

    def unscaled(self, fraction: float) -> Number:
        # int kinds truncate toward zero
        return self.kind(fraction * self.span + self.minimum)


class ValueInRange:
    """A scalar paired with the range it is meant to live in.

    The range is either static (class attribute `RANGE`, see `value_in_range`)
    or given per instance. Out-of-range values are accepted and only reported by
    `is_valid()`.
    """

    RANGE: ClassVar[NumericRange | None] = None

    __slots__ = ("_value", "_range")

    def __init__(self, value: Number, value_range: NumericRange | None = None) -> None:
        rng = value_range if value_range is not None else type(self).RANGE
        if rng is None:
            raise TypeError(f"{type(self).__name__} requires a value_range")
        self._range = rng
        self._value = rng.coerce(value)

    @classmethod
    def from_value(cls, other: "ValueInRange", value_range: NumericRange | None = None) -> "ValueInRange":
        """Rescale `other` into this representation by its relative position."""
        rng = value_range if value_range is not None else cls.RANGE
        if rng is None:
            raise TypeError(f"{cls.__name__} requires a value_range")
        return cls(rng.unscaled(other.scaled()), rng)

    @staticmethod
    def convert(target: "type[ValueInRange] | NumericRange", other: "ValueInRange") -> "ValueInRange":
        """Convert `other` into a channel class or into a plain range."""
        if isinstance(target, NumericRange):
            return ValueInRange.from_value(other, target)
        if isinstance(target, type) and issubclass(target, ValueInRange):
            return target.from_value(other)
        raise TypeError(f"cannot convert into {target!r}")

    @property
    def value(self) -> Number:
        return self._value

    @property
    def range(self) -> NumericRange:
        return self._range

    def with_value(self, value: Number) -> "ValueInRange":
        return type(self)(value, self._range)

    def is_valid(self) -> bool:
        return self._range.is_valid(self._value)

    def scaled(self) -> float:
        return self._range.scaled(self._value)

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        assert isinstance(other, ValueInRange)
        return self._value == other._value and self._range == other._range

    def __hash__(self) -> int:
        return hash((type(self), self._value, self._range))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._value!r})"

    def __str__(self) -> str:
        return str(self._value)


@lru_cache(maxsize=None)
def value_in_range(minimum: Number, maximum: Number, kind: type = float) -> type[ValueInRange]:
    rng = NumericRange(minimum, maximum, kind)
    name = f"ValueInRange_{kind.__name__}_{minimum}_{maximum}"
    return type(name, (ValueInRange,), {"RANGE": rng, "__slots__": ()})


class UnitChannel(ValueInRange):
    """Normalized colour channel in [0, 1]."""

    RANGE = NumericRange(0.0, 1.0, float)

    __slots__ = ()


@lru_cache(maxsize=None)
def channel_bits(bits: int) -> type[ValueInRange]:
    """Integer colour channel covering [0, 2**bits - 1]."""
    if bits < 1 or bits > 64:
        raise ValueError(f"channel bit depth must be in [1, 64], got {bits}")
    attrs = {
        "RANGE": NumericRange(0, (1 << bits) - 1, int),
        "BITS": bits,
        "STORAGE_DTYPE": uint_at_least(bits),
        "__slots__": (),
    }
    return type(f"Channel{bits}Bit", (ValueInRange,), attrs)
