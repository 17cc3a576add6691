from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
import math
import unittest

from svgplot.errors import InvalidAxisLengthError, InvalidParameterError, InvalidRangeError
from svgplot.numeric import FLOAT_MAX
from svgplot.labeling import (
    LabelingAlgorithm,
    LabelingOptions,
    generate_ticks,
    get_labeling_algorithm,
    gnuplot_ticks,
    heckbert_ticks,
    matplotlib_ticks,
    scale_range,
)


_RANGES = [
    (0.0, 1.0),
    (8.1, 14.1),
    (-18.5, -3.2),
    (-1.0, 1.0),
    (1e-6, 3e-6),
    (0.0, 1e-9),
    (1e9, 5e9),
    (123456.7, 123456.9),
    (100000.0, 100000.6),
    (5.0, 5.0),
    (-1e308, 1e308),
    (0.0, 1.7e308),
    (-FLOAT_MAX, FLOAT_MAX),
]


class HeckbertTests(unittest.TestCase):
    def test_basic_range(self) -> None:
        result = heckbert_ticks(8.1, 14.1, 500, LabelingOptions(tick_count=4, format_string="G"))
        assert result is not None
        self.assertEqual(result.positions, (5.0, 10.0, 15.0))
        self.assertEqual(result.labels, ("5", "10", "15"))
        self.assertEqual(result.actual_min, 5.0)
        self.assertEqual(result.actual_max, 15.0)

    def test_zero_range_returns_single_tick(self) -> None:
        result = heckbert_ticks(5.0, 5.0, 100, LabelingOptions(tick_count=5, format_string="G"))
        assert result is not None
        self.assertEqual(result.positions, (5.0,))
        self.assertEqual(result.labels, ("5",))
        self.assertEqual((result.actual_min, result.actual_max), (5.0, 5.0))

    def test_negative_range(self) -> None:
        result = heckbert_ticks(-18.5, -3.2, 600, LabelingOptions(tick_count=6, format_string="G"))
        assert result is not None
        self.assertEqual(result.positions, (-20.0, -15.0, -10.0, -5.0, 0.0))
        self.assertEqual(result.labels, ("-20", "-15", "-10", "-5", "0"))
        self.assertEqual((result.actual_min, result.actual_max), (-20.0, 0.0))

    def test_default_options_use_three_significant_digits(self) -> None:
        result = heckbert_ticks(8.1, 14.1, 500, LabelingOptions(tick_count=4))
        assert result is not None
        self.assertEqual(result.labels, ("5", "10", "15"))

    def test_tick_count_is_floored_to_two(self) -> None:
        one = heckbert_ticks(0.0, 10.0, 100, LabelingOptions(tick_count=1))
        two = heckbert_ticks(0.0, 10.0, 100, LabelingOptions(tick_count=2))
        self.assertEqual(one, two)
        assert one is not None
        self.assertEqual(one.positions, (0.0, 10.0))

    def test_custom_formatter_overrides_format_string(self) -> None:
        options = LabelingOptions(tick_count=4, formatter=lambda v: f"<{v:g}>")
        result = heckbert_ticks(8.1, 14.1, 500, options)
        assert result is not None
        self.assertEqual(result.labels, ("<5>", "<10>", "<15>"))


class GnuplotTests(unittest.TestCase):
    def test_coarse_multiplier_for_dense_hint(self) -> None:
        result = gnuplot_ticks(0.0, 100.0, 500, LabelingOptions(tick_count=11))
        assert result is not None
        self.assertEqual(result.positions, (0.0, 50.0, 100.0))

    def test_unit_multiplier(self) -> None:
        result = gnuplot_ticks(0.0, 10.0, 500, LabelingOptions(tick_count=5))
        assert result is not None
        self.assertEqual(result.positions, (0.0, 10.0))

    def test_fine_multiplier(self) -> None:
        result = gnuplot_ticks(0.0, 1.0, 500, LabelingOptions(tick_count=21))
        assert result is not None
        self.assertEqual(len(result.positions), 6)
        for got, want in zip(result.positions, (0.0, 0.2, 0.4, 0.6, 0.8, 1.0)):
            self.assertAlmostEqual(got, want, places=12)
        self.assertEqual(result.labels, ("0", "0.2", "0.4", "0.6", "0.8", "1"))

    def test_ceiling_fallback_for_sparse_hint(self) -> None:
        result = gnuplot_ticks(0.5, 9.5, 500, LabelingOptions(tick_count=5))
        assert result is not None
        self.assertEqual(result.positions, (0.0, 9.0, 18.0))

    def test_differs_from_heckbert_for_same_hint(self) -> None:
        options = LabelingOptions(tick_count=11)
        gnu = gnuplot_ticks(0.0, 100.0, 500, options)
        heck = heckbert_ticks(0.0, 100.0, 500, options)
        assert gnu is not None and heck is not None
        self.assertEqual(len(heck.positions), 11)
        self.assertNotEqual(gnu.positions, heck.positions)


class MatplotlibTests(unittest.TestCase):
    def test_basic_range(self) -> None:
        result = matplotlib_ticks(8.1, 14.1, 500, LabelingOptions(tick_count=4))
        assert result is not None
        self.assertEqual(result.positions, (8.0, 10.0, 12.0, 14.0, 16.0))
        self.assertEqual(result.labels, ("8", "10", "12", "14", "16"))

    def test_trims_whole_overhanging_bins(self) -> None:
        result = matplotlib_ticks(0.0, 11.0, 500, LabelingOptions(tick_count=5))
        assert result is not None
        self.assertEqual(result.positions, (0.0, 5.0, 10.0, 15.0))

    def test_offset_applied_for_large_mean(self) -> None:
        result = matplotlib_ticks(100000.0, 100000.6, 500, LabelingOptions(tick_count=4))
        assert result is not None
        self.assertEqual(result.positions[0], 100000.0)
        self.assertEqual(len(result.positions), 5)
        self.assertAlmostEqual(result.positions[-1], 100000.8, places=6)
        for a, b in zip(result.positions, result.positions[1:]):
            self.assertAlmostEqual(b - a, 0.2, places=6)

    def test_scale_range_offset_and_scale(self) -> None:
        scale, offset = scale_range(100000.0, 100000.6, 4)
        self.assertAlmostEqual(scale, 0.1, places=15)
        self.assertEqual(offset, 100000.0)
        _, negative_offset = scale_range(-100000.6, -100000.0, 4)
        self.assertEqual(negative_offset, -100000.0)

    def test_scale_range_without_offset(self) -> None:
        self.assertEqual(scale_range(8.1, 14.1, 4), (1.0, 0.0))
        self.assertEqual(scale_range(0.0, 0.0, 5), (1.0, 0.0))


class LabelingContractTests(unittest.TestCase):
    def test_invariants_hold_for_all_algorithms(self) -> None:
        for algorithm in LabelingAlgorithm:
            for data_min, data_max in _RANGES:
                with self.subTest(algorithm=algorithm.value, data_min=data_min, data_max=data_max):
                    result = generate_ticks(algorithm, data_min, data_max, 400.0, LabelingOptions())
                    assert result is not None
                    self.assertGreaterEqual(len(result.positions), 1)
                    self.assertEqual(len(result.positions), len(result.labels))
                    for a, b in zip(result.positions, result.positions[1:]):
                        self.assertLess(a, b)
                    self.assertEqual(result.actual_min, result.positions[0])
                    self.assertEqual(result.actual_max, result.positions[-1])
                    self.assertTrue(all(math.isfinite(p) for p in result.positions))

    def test_ranges_near_float_limit_are_clamped(self) -> None:
        for algorithm in LabelingAlgorithm:
            with self.subTest(algorithm=algorithm.value):
                with self.assertLogs("svgplot.labeling", level="WARNING") as logs:
                    result = generate_ticks(algorithm, 0.0, 1.7e308, 500.0)
                assert result is not None
                self.assertIn("near the float limit", logs.output[0])
                self.assertEqual(result.positions[0], 0.0)
                self.assertEqual(result.actual_max, FLOAT_MAX)
                self.assertTrue(all(math.isfinite(p) for p in result.positions))

    def test_repeated_calls_are_identical(self) -> None:
        for algorithm in LabelingAlgorithm:
            first = generate_ticks(algorithm, -3.7, 42.1, 300.0)
            second = generate_ticks(algorithm, -3.7, 42.1, 300.0)
            self.assertEqual(first, second)

    def test_concurrent_calls_match_serial_result(self) -> None:
        expected = heckbert_ticks(-18.5, -3.2, 600)
        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(lambda _: heckbert_ticks(-18.5, -3.2, 600), range(16)))
        self.assertTrue(all(r == expected for r in results))

    def test_inverted_range_rejected(self) -> None:
        for algorithm in LabelingAlgorithm:
            with self.assertRaises(InvalidRangeError):
                generate_ticks(algorithm, 10.0, 0.0, 100.0)

    def test_inverted_range_within_epsilon_is_degenerate(self) -> None:
        for algorithm in LabelingAlgorithm:
            result = generate_ticks(algorithm, 2.0 + 1e-12, 2.0, 100.0)
            assert result is not None
            self.assertEqual(len(result.positions), 1)

    def test_non_finite_bounds_rejected(self) -> None:
        with self.assertRaises(InvalidRangeError):
            heckbert_ticks(math.nan, 1.0, 100.0)
        with self.assertRaises(InvalidRangeError):
            gnuplot_ticks(0.0, math.inf, 100.0)

    def test_non_positive_axis_length_rejected(self) -> None:
        for algorithm in LabelingAlgorithm:
            with self.assertRaises(InvalidAxisLengthError):
                generate_ticks(algorithm, 0.0, 1.0, 0.0)
            with self.assertRaises(InvalidAxisLengthError):
                generate_ticks(algorithm, 0.0, 1.0, -5.0)

    def test_algorithm_lookup_by_name(self) -> None:
        self.assertIs(get_labeling_algorithm("Heckbert"), heckbert_ticks)
        self.assertIs(get_labeling_algorithm(" gnuplot "), gnuplot_ticks)
        self.assertIs(get_labeling_algorithm(LabelingAlgorithm.MATPLOTLIB), matplotlib_ticks)
        with self.assertRaises(InvalidParameterError):
            get_labeling_algorithm("wilkinson")
        with self.assertRaises(InvalidParameterError):
            get_labeling_algorithm(3)  # type: ignore[arg-type]


if __name__ == "__main__":
    unittest.main()
