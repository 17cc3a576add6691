from __future__ import annotations

import math
import unittest

from svgplot.errors import InvalidRangeError
from svgplot.formatting import format_value
from svgplot.numeric import nice_number


class NiceNumberTests(unittest.TestCase):
    def test_round_mode_uses_nearest_thresholds(self) -> None:
        self.assertEqual(nice_number(1.4, round_result=True), 1.0)
        self.assertEqual(nice_number(2.9, round_result=True), 2.0)
        self.assertEqual(nice_number(4.0, round_result=True), 5.0)
        self.assertEqual(nice_number(6.0, round_result=True), 5.0)
        self.assertEqual(nice_number(7.0, round_result=True), 10.0)

    def test_ceiling_mode_never_rounds_down(self) -> None:
        self.assertEqual(nice_number(1.0, round_result=False), 1.0)
        self.assertEqual(nice_number(2.0, round_result=False), 2.0)
        self.assertEqual(nice_number(6.0, round_result=False), 10.0)
        self.assertEqual(nice_number(15.3, round_result=False), 20.0)
        self.assertEqual(nice_number(100.0, round_result=False), 100.0)

    def test_small_magnitudes_keep_exponent(self) -> None:
        self.assertAlmostEqual(nice_number(0.034, round_result=True), 0.05, places=12)
        self.assertAlmostEqual(nice_number(0.25, round_result=True), 0.2, places=12)

    def test_non_positive_or_non_finite_input_rejected(self) -> None:
        for bad in (0.0, -1.0, math.nan, math.inf):
            with self.assertRaises(InvalidRangeError):
                nice_number(bad, round_result=True)


class FormatValueTests(unittest.TestCase):
    def test_general_format_without_precision_is_shortest_repr(self) -> None:
        self.assertEqual(format_value(5.0, "G"), "5")
        self.assertEqual(format_value(-15.0, "G"), "-15")
        self.assertEqual(format_value(0.1, "G"), "0.1")
        self.assertEqual(format_value(1e16, "G"), "1e+16")

    def test_general_format_with_precision(self) -> None:
        self.assertEqual(format_value(100.0, "G3"), "100")
        self.assertEqual(format_value(1234.5, "G3"), "1.23e+03")
        self.assertEqual(format_value(0.30000000000000004, "G3"), "0.3")

    def test_negative_zero_renders_as_zero(self) -> None:
        self.assertEqual(format_value(-0.0, "G3"), "0")
        self.assertEqual(format_value(-0.001, ".1f"), "0.0")

    def test_python_format_spec_passthrough(self) -> None:
        self.assertEqual(format_value(2.5, ".2f"), "2.50")
        self.assertEqual(format_value(12345.0, ",.0f"), "12,345")

    def test_non_finite_values(self) -> None:
        self.assertEqual(format_value(math.nan), "nan")
        self.assertEqual(format_value(math.inf), "inf")


if __name__ == "__main__":
    unittest.main()
