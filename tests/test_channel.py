from __future__ import annotations

import unittest

import numpy as np

from graphics2.core.channel import NumericRange, UnitChannel, ValueInRange, channel_bits, uint_at_least, value_in_range
from graphics2.errors import DegenerateRangeError


class NumericRangeTests(unittest.TestCase):
    def test_membership_is_inclusive(self) -> None:
        rng = NumericRange(0, 10, int)
        self.assertTrue(rng.is_valid(0))
        self.assertTrue(rng.is_valid(10))
        self.assertFalse(rng.is_valid(-1))
        self.assertFalse(rng.is_valid(11))

    def test_degenerate_ranges_are_rejected(self) -> None:
        with self.assertRaises(DegenerateRangeError):
            NumericRange(1.0, 1.0)
        with self.assertRaises(ValueError):
            NumericRange(5, 2, int)

    def test_unknown_kind_rejected(self) -> None:
        with self.assertRaises(ValueError):
            NumericRange(0, 1, complex)

    def test_unscaled_truncates_for_int_kind(self) -> None:
        rng = NumericRange(0, 3, int)
        self.assertEqual(rng.unscaled(0.5), 1)
        self.assertEqual(rng.unscaled(1.0), 3)


class UintAtLeastTests(unittest.TestCase):
    def test_smallest_dtype_is_selected(self) -> None:
        self.assertIsNone(uint_at_least(0))
        self.assertIs(uint_at_least(1), np.uint8)
        self.assertIs(uint_at_least(8), np.uint8)
        self.assertIs(uint_at_least(9), np.uint16)
        self.assertIs(uint_at_least(16), np.uint16)
        self.assertIs(uint_at_least(17), np.uint32)
        self.assertIs(uint_at_least(32), np.uint32)
        self.assertIs(uint_at_least(33), np.uint64)
        self.assertIs(uint_at_least(64), np.uint64)

    def test_too_many_bits_rejected(self) -> None:
        with self.assertRaises(ValueError):
            uint_at_least(65)


class ValueInRangeTests(unittest.TestCase):
    def test_validity_follows_range_membership(self) -> None:
        self.assertTrue(UnitChannel(0.0).is_valid())
        self.assertTrue(UnitChannel(0.5).is_valid())
        self.assertTrue(UnitChannel(1.0).is_valid())
        self.assertFalse(UnitChannel(1.5).is_valid())
        self.assertFalse(UnitChannel(-0.1).is_valid())

    def test_out_of_range_values_are_constructible(self) -> None:
        channel = channel_bits(5)(100)
        self.assertEqual(channel.value, 100)
        self.assertFalse(channel.is_valid())

    def test_dynamic_range(self) -> None:
        value = ValueInRange(5, NumericRange(0, 10, int))
        self.assertEqual(value.scaled(), 0.5)
        self.assertTrue(value.is_valid())
        with self.assertRaises(TypeError):
            ValueInRange(5)

    def test_static_range_factory_is_cached(self) -> None:
        cls = value_in_range(0, 10, int)
        self.assertIs(cls, value_in_range(0, 10, int))
        self.assertTrue(cls(5).is_valid())
        self.assertFalse(cls(11).is_valid())

    def test_channel_bits(self) -> None:
        eight = channel_bits(8)
        self.assertIs(eight, channel_bits(8))
        self.assertEqual(eight.RANGE, NumericRange(0, 255, int))
        self.assertIs(eight.STORAGE_DTYPE, np.uint8)
        with self.assertRaises(ValueError):
            channel_bits(0)

    def test_conversion_rescales_relative_position(self) -> None:
        eight = channel_bits(8)
        self.assertEqual(eight.from_value(UnitChannel(0.5)).value, 127)
        self.assertEqual(eight.from_value(UnitChannel(1.0)).value, 255)
        self.assertEqual(UnitChannel.from_value(eight(255)).value, 1.0)
        self.assertEqual(UnitChannel.from_value(eight(0)).value, 0.0)

    def test_convert_accepts_channel_class_or_range(self) -> None:
        converted = ValueInRange.convert(channel_bits(4), UnitChannel(1.0))
        self.assertIsInstance(converted, channel_bits(4))
        self.assertEqual(converted.value, 15)
        percent = ValueInRange.convert(NumericRange(0, 100, int), UnitChannel(0.25))
        self.assertEqual(percent.value, 25)
        self.assertEqual(percent.range, NumericRange(0, 100, int))
        with self.assertRaises(TypeError):
            ValueInRange.convert(int, UnitChannel(0.5))  # type: ignore[arg-type]

    def test_with_value_returns_new_instance(self) -> None:
        original = UnitChannel(0.25)
        changed = original.with_value(0.75)
        self.assertEqual(original.value, 0.25)
        self.assertEqual(changed.value, 0.75)
        self.assertIsInstance(changed, UnitChannel)

    def test_value_semantics_and_str(self) -> None:
        self.assertEqual(UnitChannel(0.5), UnitChannel(0.5))
        self.assertNotEqual(UnitChannel(0.5), UnitChannel(0.25))
        self.assertEqual(len({UnitChannel(0.5), UnitChannel(0.5)}), 1)
        self.assertEqual(str(UnitChannel(0.5)), "0.5")


if __name__ == "__main__":
    unittest.main()
