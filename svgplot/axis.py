from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
import logging
import math

from svgplot.charts import HistogramSeries
from svgplot.errors import InvalidParameterError, InvalidRangeError
from svgplot.labeling import LabelingAlgorithm, LabelingOptions, generate_ticks, resolve_algorithm
from svgplot.numeric import EPSILON, FLOAT_MAX
from svgplot.series import AxisKind, Series
from svgplot.ticks import TickResult


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class AxisRangePolicy:
    padding_ratio: float = 0.05
    zero_range_ratio: float = 0.1
    zero_value_padding: float = 0.5
    default_range: tuple[float, float] = (0.0, 1.0)
    histogram_floor: float = 0.0

    def __post_init__(self) -> None:
        for name in ("padding_ratio", "zero_range_ratio", "zero_value_padding"):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise InvalidParameterError(f"{name} must be a finite value >= 0, got {value!r}")
        lo, hi = self.default_range
        if not (math.isfinite(lo) and math.isfinite(hi)) or hi <= lo:
            raise InvalidParameterError(f"default_range must be finite with max > min, got {self.default_range!r}")


@dataclass(frozen=True)
class AxisSnapshot:
    kind: AxisKind
    label: str
    min: float
    max: float
    ticks: TickResult

    @property
    def tick_positions(self) -> tuple[float, ...]:
        return self.ticks.positions

    @property
    def tick_labels(self) -> tuple[str, ...]:
        return self.ticks.labels


def calculate_axis_range(
    series: Sequence[Series],
    kind: AxisKind,
    policy: AxisRangePolicy | None = None,
) -> tuple[float, float]:
    """Combine per-series bounds into a padded ``(min, max)`` for one axis.

    Series without usable bounds are skipped; when none remain the policy's
    default range is returned and a warning is logged.
    """
    policy = policy or AxisRangePolicy()
    lo = math.inf
    hi = -math.inf
    for s in series:
        s_min, s_max = s.axis_bounds(kind)
        if math.isnan(s_min) or math.isnan(s_max):
            continue
        lo = min(lo, s_min)
        hi = max(hi, s_max)

    if not series or not (math.isfinite(lo) and math.isfinite(hi)):
        LOGGER.warning(
            "autoscale on %s-axis found no valid series bounds; defaulting range to %r",
            kind.value,
            policy.default_range,
        )
        return policy.default_range

    floored = kind is AxisKind.Y and any(isinstance(s, HistogramSeries) for s in series)
    if floored:
        lo = min(lo, policy.histogram_floor)

    span = hi - lo
    if math.isinf(span):
        # Halve before subtracting so the padding stays finite.
        padding = (hi / 2.0 - lo / 2.0) * (2.0 * policy.padding_ratio)
    elif span > EPSILON:
        padding = span * policy.padding_ratio
    elif abs(lo) > EPSILON:
        padding = abs(lo) * policy.zero_range_ratio
    else:
        padding = policy.zero_value_padding

    final_min = max(lo - padding, -FLOAT_MAX)
    final_max = min(hi + padding, FLOAT_MAX)
    if floored and final_min < policy.histogram_floor <= lo:
        final_min = policy.histogram_floor
    return (final_min, final_max)


@dataclass
class Axis:
    kind: AxisKind
    label: str = ""
    algorithm: LabelingAlgorithm | str = LabelingAlgorithm.HECKBERT
    options: LabelingOptions = field(default_factory=LabelingOptions)
    auto_scale: bool = True
    range_policy: AxisRangePolicy = field(default_factory=AxisRangePolicy)
    ticks: TickResult | None = field(default=None, init=False)

    def __post_init__(self) -> None:
        self.algorithm = resolve_algorithm(self.algorithm)
        self._min, self._max = self.range_policy.default_range

    @property
    def min(self) -> float:
        return self._min

    @property
    def max(self) -> float:
        return self._max

    def set_range(self, min_value: float, max_value: float) -> None:
        """Store bounds, widening an empty range by :data:`EPSILON` so ``max > min`` holds."""
        if not (math.isfinite(min_value) and math.isfinite(max_value)):
            raise InvalidRangeError(f"axis bounds must be finite, got [{min_value!r}, {max_value!r}]")
        if max_value < min_value:
            raise InvalidRangeError(f"axis max must be >= min, got [{min_value!r}, {max_value!r}]")
        if max_value - min_value < EPSILON:
            if max_value == min_value:
                min_value -= EPSILON / 2.0
                max_value += EPSILON / 2.0
            else:
                max_value += EPSILON
        self._min = float(min_value)
        self._max = float(max_value)

    def calculate_range(self, series: Sequence[Series]) -> tuple[float, float]:
        if not self.auto_scale:
            return (self._min, self._max)
        self.set_range(*calculate_axis_range(series, self.kind, self.range_policy))
        self.ticks = None
        return (self._min, self._max)

    def calculate_ticks(self, axis_length: float) -> TickResult:
        """Label the current range; the axis adopts the algorithm's bounds."""
        formatter = self.options.label_formatter()
        if abs(self._max - self._min) < EPSILON:
            result = TickResult.single(self._min, formatter)
        else:
            result = generate_ticks(self.algorithm, self._min, self._max, axis_length, self.options)
            if result is None:
                LOGGER.warning(
                    "labeling algorithm %r produced no ticks for range [%r, %r]",
                    self.algorithm.value,
                    self._min,
                    self._max,
                )
                positions = [self._min, self._max]
                result = TickResult.from_sequence(positions, [formatter(v) for v in positions])
            else:
                self.set_range(result.actual_min, result.actual_max)
        self.ticks = result
        return result

    def snapshot(self) -> AxisSnapshot:
        if self.ticks is None:
            raise RuntimeError(f"{self.kind.value}-axis ticks have not been calculated")
        return AxisSnapshot(kind=self.kind, label=self.label, min=self._min, max=self._max, ticks=self.ticks)
