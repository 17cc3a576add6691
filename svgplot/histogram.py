from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
import math
from typing import Any

import numpy as np

from svgplot.errors import InvalidParameterError
from svgplot.numeric import EPSILON


LOGGER = logging.getLogger(__name__)

SCOTT_FACTOR = 3.49
FREEDMAN_DIACONIS_FACTOR = 2.0
FALLBACK_BIN_COUNT = 10
ZERO_RANGE_BIN_WIDTH = 1.0


class BinningMode(str, Enum):
    AUTOMATIC = "automatic"
    MANUAL_COUNT = "manual_count"
    MANUAL_WIDTH = "manual_width"


class AutomaticBinningRule(str, Enum):
    SQUARE_ROOT = "square_root"
    STURGES = "sturges"
    SCOTT = "scott"
    FREEDMAN_DIACONIS = "freedman_diaconis"


@dataclass(frozen=True)
class HistogramBin:
    lower_bound: float
    upper_bound: float
    count: int

    @property
    def width(self) -> float:
        return self.upper_bound - self.lower_bound

    def __str__(self) -> str:
        return f"[{self.lower_bound:.3g} - {self.upper_bound:.3g}): {self.count}"


def generate_bins(
    samples: Any,
    mode: BinningMode | str = BinningMode.AUTOMATIC,
    manual_bin_count: int | None = None,
    manual_bin_width: float | None = None,
    auto_rule: AutomaticBinningRule | str = AutomaticBinningRule.FREEDMAN_DIACONIS,
) -> list[HistogramBin]:
    """Bin ``samples`` into contiguous ``[lower, upper)`` intervals.

    Non-finite samples are dropped first. The last bin also holds samples equal
    to its upper edge, so the counts always sum to the number of finite samples.
    """
    mode = resolve_binning_mode(mode)
    auto_rule = resolve_binning_rule(auto_rule)
    _validate_manual_parameters(mode, manual_bin_count, manual_bin_width)

    values = np.asarray(samples, dtype=np.float64).ravel()
    values = values[np.isfinite(values)]
    n = int(values.size)
    if n == 0:
        return []

    data_min = float(np.min(values))
    data_max = float(np.max(values))
    data_range = data_max - data_min
    if data_range < EPSILON:
        half = ZERO_RANGE_BIN_WIDTH / 2.0
        return [HistogramBin(data_min - half, data_min + half, n)]

    if math.isinf(data_range):
        bin_count = max(2, math.ceil(math.sqrt(n)))
        LOGGER.warning(
            "histogram range [%r, %r] overflows float; using %d square-root bins", data_min, data_max, bin_count
        )
        edges = _half_scale_edges(data_min, data_max, bin_count)
        return _bins_from_edges(values, edges)

    if mode is BinningMode.MANUAL_COUNT:
        assert manual_bin_count is not None
        bin_count = int(manual_bin_count)
        bin_width = data_range / bin_count
    elif mode is BinningMode.MANUAL_WIDTH:
        assert manual_bin_width is not None
        bin_width = float(manual_bin_width)
        bin_count = max(1, math.ceil(data_range / bin_width))
    else:
        bin_width, bin_count = automatic_bin_layout(values, auto_rule)

    if not math.isfinite(bin_width) or bin_width <= EPSILON:
        LOGGER.warning(
            "histogram bin width %r was unusable; falling back to %d bins", bin_width, FALLBACK_BIN_COUNT
        )
        bin_count = FALLBACK_BIN_COUNT
        bin_width = max(data_range / bin_count, EPSILON)

    edges = data_min + np.arange(bin_count + 1, dtype=np.float64) * bin_width
    if not math.isfinite(edges[-1]) or edges[-1] < data_max:
        edges[-1] = data_max
    return _bins_from_edges(values, edges)


def _half_scale_edges(data_min: float, data_max: float, bin_count: int) -> np.ndarray:
    """Evenly spaced edges for a range whose width overflows float."""
    half_width = (data_max / 2.0 - data_min / 2.0) / bin_count
    edges = 2.0 * (data_min / 2.0 + np.arange(bin_count + 1, dtype=np.float64) * half_width)
    edges[0] = data_min
    edges[-1] = data_max
    return edges


def _bins_from_edges(values: np.ndarray, edges: np.ndarray) -> list[HistogramBin]:
    counts = _classify(values, edges)
    return [
        HistogramBin(float(edges[i]), float(edges[i + 1]), int(counts[i]))
        for i in range(edges.size - 1)
    ]


def automatic_bin_layout(values: np.ndarray, rule: AutomaticBinningRule) -> tuple[float, int]:
    """Return ``(bin_width, bin_count)`` for finite ``values`` with a non-zero range.

    A rule whose statistics overflow (huge magnitudes) falls back to the
    square-root rule with a warning.
    """
    n = int(values.size)
    data_range = float(np.max(values) - np.min(values))
    with np.errstate(over="ignore", invalid="ignore"):
        iqr = interquartile_range(values) if rule is AutomaticBinningRule.FREEDMAN_DIACONIS else 0.0

        if rule is AutomaticBinningRule.STURGES:
            bin_count = math.ceil(math.log2(n) + 1)
            bin_width = data_range / bin_count
        elif rule is AutomaticBinningRule.SCOTT:
            bin_width = SCOTT_FACTOR * sample_std(values) / n ** (1.0 / 3.0)
            bin_count = math.ceil(data_range / bin_width) if bin_width > EPSILON else 0
        elif rule is AutomaticBinningRule.FREEDMAN_DIACONIS and iqr >= EPSILON:
            bin_width = FREEDMAN_DIACONIS_FACTOR * iqr / n ** (1.0 / 3.0)
            bin_count = math.ceil(data_range / bin_width)
        else:
            # Square root, also the Freedman-Diaconis fallback for a zero IQR.
            bin_count = math.ceil(math.sqrt(n))
            bin_width = data_range / bin_count

    if not math.isfinite(bin_width):
        LOGGER.warning("%s bin width %r is not finite; using the square-root rule", rule.value, bin_width)
        bin_count = math.ceil(math.sqrt(n))
        bin_width = data_range / bin_count

    if bin_count <= 0:
        bin_count = 1
    if bin_width <= EPSILON:
        bin_width = data_range / bin_count if data_range > EPSILON else EPSILON
    return bin_width, bin_count


def sample_std(values: np.ndarray) -> float:
    if values.size < 2:
        return 0.0
    return float(np.std(values, ddof=1))


def percentile(sorted_values: np.ndarray, pct: float) -> float:
    """Linear-interpolation percentile over an ascending array (``pct`` in 0..100)."""
    n = int(sorted_values.size)
    if n == 0:
        return math.nan
    if n == 1 or pct <= 0:
        return float(sorted_values[0])
    if pct >= 100:
        return float(sorted_values[-1])
    index = pct / 100.0 * (n - 1)
    lower = math.floor(index)
    if lower >= n - 1:
        return float(sorted_values[-1])
    fraction = index - lower
    return float(sorted_values[lower] + fraction * (sorted_values[lower + 1] - sorted_values[lower]))


def interquartile_range(values: np.ndarray) -> float:
    if values.size < 2:
        return 0.0
    ordered = np.sort(values)
    return percentile(ordered, 75.0) - percentile(ordered, 25.0)


def resolve_binning_mode(mode: BinningMode | str) -> BinningMode:
    return _resolve_enum(BinningMode, mode, "binning mode")


def resolve_binning_rule(rule: AutomaticBinningRule | str) -> AutomaticBinningRule:
    return _resolve_enum(AutomaticBinningRule, rule, "automatic binning rule")


def _resolve_enum(enum_cls: type[Enum], value: Any, label: str) -> Any:
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        try:
            return enum_cls(value.strip().lower().replace("-", "_"))
        except ValueError:
            pass
    choices = ", ".join(m.value for m in enum_cls)
    raise InvalidParameterError(f"unknown {label}: {value!r} (expected one of {choices})")


def _validate_manual_parameters(
    mode: BinningMode,
    manual_bin_count: int | None,
    manual_bin_width: float | None,
) -> None:
    if mode is BinningMode.MANUAL_COUNT:
        if manual_bin_count is None or int(manual_bin_count) <= 0:
            raise InvalidParameterError(
                f"manual_bin_count must be > 0 in {mode.value} mode, got {manual_bin_count!r}"
            )
    elif mode is BinningMode.MANUAL_WIDTH:
        if manual_bin_width is None or not math.isfinite(manual_bin_width) or manual_bin_width <= EPSILON:
            raise InvalidParameterError(
                f"manual_bin_width must be > {EPSILON!r} in {mode.value} mode, got {manual_bin_width!r}"
            )


def _classify(values: np.ndarray, edges: np.ndarray) -> np.ndarray:
    bin_count = edges.size - 1
    counts = np.zeros(bin_count, dtype=np.int64)
    unassigned = np.ones(values.size, dtype=bool)
    for i in range(bin_count):
        hit = unassigned & (values >= edges[i] - EPSILON) & (values < edges[i + 1] - EPSILON)
        counts[i] = int(np.count_nonzero(hit))
        unassigned &= ~hit

    with np.errstate(over="ignore"):
        on_last_edge = unassigned & (np.abs(values - edges[-1]) < EPSILON)
    counts[-1] += int(np.count_nonzero(on_last_edge))
    unassigned &= ~on_last_edge

    if np.any(unassigned):
        stray = values[unassigned]
        LOGGER.warning(
            "%d histogram sample(s) fell outside bin edges [%r, %r] (e.g. %r); assigning to nearest bin",
            stray.size,
            float(edges[0]),
            float(edges[-1]),
            float(stray[0]),
        )
        below = stray < edges[0]
        counts[0] += int(np.count_nonzero(below))
        counts[-1] += int(np.count_nonzero(~below))
    return counts
