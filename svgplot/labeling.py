from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import partial
import logging
import math
from typing import Callable, Protocol

from svgplot.errors import InvalidAxisLengthError, InvalidParameterError, InvalidRangeError
from svgplot.formatting import DEFAULT_FORMAT_STRING, format_value
from svgplot.numeric import EPSILON, FLOAT_MAX, nice_number
from svgplot.ticks import TickFormatter, TickResult, build_tick_sequence


LOGGER = logging.getLogger(__name__)

DEFAULT_TICK_COUNT = 5

MATPLOTLIB_STEPS = (1.0, 2.0, 5.0, 10.0)
MATPLOTLIB_OFFSET_THRESHOLD = 100.0
MATPLOTLIB_TRIM = True

# Bounds larger than FLOAT_MAX / OVERFLOW_SCALE are labeled on a scaled-down copy.
OVERFLOW_SCALE = 100.0
_OVERFLOW_LIMIT = FLOAT_MAX / OVERFLOW_SCALE

# (tick_min, tick_max, step) handed to build_tick_sequence.
TickSpan = tuple[float, float, float]


class LabelingAlgorithm(str, Enum):
    HECKBERT = "heckbert"
    GNUPLOT = "gnuplot"
    MATPLOTLIB = "matplotlib"


@dataclass(frozen=True)
class LabelingOptions:
    tick_count: int = DEFAULT_TICK_COUNT
    format_string: str = DEFAULT_FORMAT_STRING
    # Reserved for a density-aware strategy; the implemented strategies ignore them.
    density: float | None = None
    font_size: float | None = None
    formatter: Callable[[float], str] | None = None

    @property
    def effective_tick_count(self) -> int:
        return max(2, int(self.tick_count))

    def label_formatter(self) -> TickFormatter:
        if self.formatter is not None:
            return self.formatter
        return partial(format_value, format_string=self.format_string)


class TickGenerator(Protocol):
    def __call__(
        self,
        data_min: float,
        data_max: float,
        axis_length: float,
        options: LabelingOptions | None = None,
    ) -> TickResult | None: ...


def heckbert_ticks(
    data_min: float,
    data_max: float,
    axis_length: float,
    options: LabelingOptions | None = None,
) -> TickResult | None:
    """Heckbert's "nice numbers for graph labels" (Graphics Gems, 1990)."""
    return _label(_heckbert_span, data_min, data_max, axis_length, options)


def gnuplot_ticks(
    data_min: float,
    data_max: float,
    axis_length: float,
    options: LabelingOptions | None = None,
) -> TickResult | None:
    return _label(_gnuplot_span, data_min, data_max, axis_length, options)


def matplotlib_ticks(
    data_min: float,
    data_max: float,
    axis_length: float,
    options: LabelingOptions | None = None,
) -> TickResult | None:
    """Port of matplotlib's ``MaxNLocator`` step search with offset handling."""
    return _label(_matplotlib_span, data_min, data_max, axis_length, options)


def _heckbert_span(data_min: float, data_max: float, opts: LabelingOptions) -> TickSpan:
    intervals = opts.effective_tick_count - 1
    span = data_max - data_min
    nice_span = nice_number(max(span, EPSILON), round_result=False)
    step = nice_number(nice_span / intervals, round_result=True)
    if not math.isfinite(step) or step <= 0:
        step = span if span > EPSILON else EPSILON
        LOGGER.warning("heckbert step was degenerate; using fallback step %r", step)

    return (math.floor(data_min / step) * step, math.ceil(data_max / step) * step, step)


def _gnuplot_span(data_min: float, data_max: float, opts: LabelingOptions) -> TickSpan:
    ntick = opts.effective_tick_count
    span = data_max - data_min
    power = 10.0 ** math.floor(math.log10(span))
    norm_range = span / power
    if abs(norm_range) < EPSILON:
        LOGGER.warning("gnuplot normalized range was zero (range=%r, power=%r)", span, power)
        norm_range = EPSILON

    p = (ntick - 1) / norm_range
    if p > 40:
        t = 0.05
    elif p > 20:
        t = 0.1
    elif p > 10:
        t = 0.2
    elif p > 4:
        t = 0.5
    elif p > 2:
        t = 1.0
    elif p > 0.5:
        t = 2.0
    else:
        t = float(math.ceil(norm_range))

    step = t * power
    if not math.isfinite(step) or step <= 0:
        fallback = max(span / (ntick - 1), EPSILON)
        LOGGER.warning("gnuplot step %r was invalid; using fallback %r", step, fallback)
        step = fallback

    return (math.floor(data_min / step) * step, math.ceil(data_max / step) * step, step)


def _matplotlib_span(data_min: float, data_max: float, opts: LabelingOptions) -> TickSpan:
    nbins = opts.effective_tick_count
    scale, offset = scale_range(data_min, data_max, nbins)
    vmin = data_min - offset
    vmax = data_max - offset
    adjusted_range = vmax - vmin
    if abs(adjusted_range) < EPSILON:
        return (vmin + offset, vmin + offset, scale)

    raw_step = adjusted_range / nbins
    scaled_raw_step = raw_step / scale

    best_min = vmin
    best_max = vmax
    step = scale
    covered = False
    for factor in MATPLOTLIB_STEPS:
        if factor < scaled_raw_step:
            continue
        step = factor * scale
        if abs(step) < EPSILON:
            LOGGER.warning("matplotlib step became zero (factor=%r, scale=%r); using epsilon", factor, scale)
            step = EPSILON
        best_min = step * math.floor(vmin / step)
        best_max = best_min + step * nbins
        if best_max >= vmax - step * EPSILON:
            covered = True
            break
    if not covered:
        LOGGER.warning("matplotlib found no step covering [%r, %r]; using step %r", data_min, data_max, step)

    if MATPLOTLIB_TRIM and step > EPSILON:
        overhang = best_max - vmax
        if overhang > EPSILON:
            extra_bins = math.floor(overhang / step)
            if extra_bins > 0:
                nbins = max(1, nbins - extra_bins)

    return (best_min + offset, best_min + step * nbins + offset, step)


def scale_range(dmin: float, dmax: float, nbins: int) -> tuple[float, float]:
    """Return ``(scale, offset)`` for a data range, after matplotlib's ``scale_range``.

    The offset is a signed power of ten, non-zero only when the mean of the range
    is at least ``MATPLOTLIB_OFFSET_THRESHOLD`` times its width.
    """
    dv = abs(dmax - dmin)
    maxabs = max(abs(dmin), abs(dmax))
    if maxabs < EPSILON or dv / maxabs < EPSILON:
        return 1.0, 0.0

    meanv = 0.5 * (dmin + dmax)
    offset = 0.0
    if abs(meanv) / dv >= MATPLOTLIB_OFFSET_THRESHOLD:
        offset = math.copysign(10.0 ** math.floor(math.log10(abs(meanv))), meanv)

    per_bin = dv / max(1, nbins)
    if per_bin > EPSILON:
        scale = 10.0 ** math.floor(math.log10(per_bin))
    else:
        LOGGER.warning("matplotlib scale input %r too small; using scale=1.0", per_bin)
        scale = 1.0
    return scale, offset


_ALGORITHMS: dict[LabelingAlgorithm, TickGenerator] = {
    LabelingAlgorithm.HECKBERT: heckbert_ticks,
    LabelingAlgorithm.GNUPLOT: gnuplot_ticks,
    LabelingAlgorithm.MATPLOTLIB: matplotlib_ticks,
}


def resolve_algorithm(key: LabelingAlgorithm | str) -> LabelingAlgorithm:
    if isinstance(key, LabelingAlgorithm):
        return key
    if isinstance(key, str):
        try:
            return LabelingAlgorithm(key.strip().lower())
        except ValueError:
            pass
    choices = ", ".join(a.value for a in LabelingAlgorithm)
    raise InvalidParameterError(f"unknown labeling algorithm: {key!r} (expected one of {choices})")


def get_labeling_algorithm(key: LabelingAlgorithm | str) -> TickGenerator:
    return _ALGORITHMS[resolve_algorithm(key)]


def generate_ticks(
    algorithm: LabelingAlgorithm | str,
    data_min: float,
    data_max: float,
    axis_length: float,
    options: LabelingOptions | None = None,
) -> TickResult | None:
    return get_labeling_algorithm(algorithm)(data_min, data_max, axis_length, options)


def _validate_inputs(data_min: float, data_max: float, axis_length: float) -> bool:
    """Raise on misuse; return True when the range is degenerate (single tick)."""
    if not (math.isfinite(data_min) and math.isfinite(data_max)):
        raise InvalidRangeError(f"data bounds must be finite, got [{data_min!r}, {data_max!r}]")
    if not math.isfinite(axis_length) or axis_length <= 0:
        raise InvalidAxisLengthError(f"axis length must be > 0, got {axis_length!r}")
    if data_min > data_max and data_min - data_max >= EPSILON:
        raise InvalidRangeError(f"data_min must be <= data_max, got [{data_min!r}, {data_max!r}]")
    return abs(data_max - data_min) < EPSILON


def _label(
    span_fn: Callable[[float, float, LabelingOptions], TickSpan],
    data_min: float,
    data_max: float,
    axis_length: float,
    options: LabelingOptions | None,
) -> TickResult | None:
    opts = options or LabelingOptions()
    formatter = opts.label_formatter()
    if _validate_inputs(data_min, data_max, axis_length):
        return TickResult.single(data_min, formatter)

    if max(abs(data_min), abs(data_max)) <= _OVERFLOW_LIMIT:
        positions, labels = build_tick_sequence(*span_fn(data_min, data_max, opts), formatter)
        return TickResult.from_sequence(positions, labels)

    # Near the float limit: label a scaled-down range, then scale back and clamp.
    LOGGER.warning(
        "range [%r, %r] is near the float limit; labeling at 1/%g scale", data_min, data_max, OVERFLOW_SCALE
    )
    tick_min, tick_max, step = span_fn(data_min / OVERFLOW_SCALE, data_max / OVERFLOW_SCALE, opts)
    scaled, _ = build_tick_sequence(tick_min, tick_max, step, str)
    positions: list[float] = []
    for value in scaled:
        value = min(max(value * OVERFLOW_SCALE, -FLOAT_MAX), FLOAT_MAX)
        if not positions or value > positions[-1]:
            positions.append(value)
    return TickResult.from_sequence(positions, [formatter(v) for v in positions])
