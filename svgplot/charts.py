from __future__ import annotations

from dataclasses import dataclass, field
import math
from typing import Any

import numpy as np

from svgplot.adapters.normalize import normalize_samples, normalize_xy
from svgplot.errors import InvalidParameterError
from svgplot.histogram import (
    AutomaticBinningRule,
    BinningMode,
    HistogramBin,
    generate_bins,
    resolve_binning_mode,
    resolve_binning_rule,
)
from svgplot.series import AxisKind, SeriesData


@dataclass
class LineSeries:
    title: str
    data: SeriesData

    @classmethod
    def from_values(cls, title: str, y: Any = None, *, x: Any = None) -> LineSeries:
        return cls(title=title, data=normalize_xy(y, x=x, source_name=title))

    def prepare_data(self) -> None:
        return None

    def axis_bounds(self, kind: AxisKind) -> tuple[float, float]:
        return finite_bounds(self.data, kind)


@dataclass
class ScatterSeries:
    title: str
    data: SeriesData

    @classmethod
    def from_values(cls, title: str, y: Any = None, *, x: Any = None) -> ScatterSeries:
        return cls(title=title, data=normalize_xy(y, x=x, source_name=title))

    def prepare_data(self) -> None:
        return None

    def axis_bounds(self, kind: AxisKind) -> tuple[float, float]:
        return finite_bounds(self.data, kind)


@dataclass
class HistogramSeries:
    title: str
    samples: Any
    mode: BinningMode | str = BinningMode.AUTOMATIC
    auto_rule: AutomaticBinningRule | str = AutomaticBinningRule.FREEDMAN_DIACONIS
    manual_bin_count: int | None = None
    manual_bin_width: float | None = None
    bins: list[HistogramBin] = field(default_factory=list, init=False)

    def __post_init__(self) -> None:
        self.samples = normalize_samples(self.samples)
        self.mode = resolve_binning_mode(self.mode)
        self.auto_rule = resolve_binning_rule(self.auto_rule)
        if self.mode is BinningMode.MANUAL_COUNT and self.manual_bin_count is None:
            raise InvalidParameterError("manual_bin_count must be provided for manual_count mode")
        if self.mode is BinningMode.MANUAL_WIDTH and self.manual_bin_width is None:
            raise InvalidParameterError("manual_bin_width must be provided for manual_width mode")

    def prepare_data(self) -> None:
        self.bins = generate_bins(
            self.samples,
            self.mode,
            manual_bin_count=self.manual_bin_count,
            manual_bin_width=self.manual_bin_width,
            auto_rule=self.auto_rule,
        )

    def axis_bounds(self, kind: AxisKind) -> tuple[float, float]:
        if not self.bins:
            return (math.nan, math.nan)
        if kind is AxisKind.X:
            return (self.bins[0].lower_bound, self.bins[-1].upper_bound)
        # Counts start at zero.
        return (0.0, float(max(b.count for b in self.bins)))


def finite_bounds(data: SeriesData, kind: AxisKind) -> tuple[float, float]:
    values = data.x if kind is AxisKind.X else data.y
    finite = values[data.mask]
    if finite.size == 0:
        return (math.nan, math.nan)
    return (float(np.min(finite)), float(np.max(finite)))
