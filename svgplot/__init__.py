from svgplot.axis import Axis, AxisRangePolicy, AxisSnapshot, calculate_axis_range
from svgplot.charts import HistogramSeries, LineSeries, ScatterSeries
from svgplot.config import PlotConfig, load_config
from svgplot.errors import (
    InvalidAxisLengthError,
    InvalidGeometryError,
    InvalidParameterError,
    InvalidRangeError,
    PlotDataError,
    PlotError,
)
from svgplot.formatting import format_value
from svgplot.histogram import AutomaticBinningRule, BinningMode, HistogramBin, generate_bins
from svgplot.labeling import (
    LabelingAlgorithm,
    LabelingOptions,
    generate_ticks,
    get_labeling_algorithm,
    gnuplot_ticks,
    heckbert_ticks,
    matplotlib_ticks,
)
from svgplot.numeric import EPSILON, nice_number
from svgplot.plot import Plot, PlotLayout
from svgplot.scales import PlotArea, PlotMargins, ScaleTransform
from svgplot.series import AxisKind, DataPoint
from svgplot.ticks import TickResult, build_tick_sequence

__all__ = [
    "AutomaticBinningRule",
    "Axis",
    "AxisKind",
    "AxisRangePolicy",
    "AxisSnapshot",
    "BinningMode",
    "DataPoint",
    "EPSILON",
    "HistogramBin",
    "HistogramSeries",
    "InvalidAxisLengthError",
    "InvalidGeometryError",
    "InvalidParameterError",
    "InvalidRangeError",
    "LabelingAlgorithm",
    "LabelingOptions",
    "LineSeries",
    "Plot",
    "PlotArea",
    "PlotConfig",
    "PlotDataError",
    "PlotError",
    "PlotLayout",
    "PlotMargins",
    "ScaleTransform",
    "ScatterSeries",
    "TickResult",
    "build_tick_sequence",
    "calculate_axis_range",
    "format_value",
    "generate_bins",
    "generate_ticks",
    "get_labeling_algorithm",
    "gnuplot_ticks",
    "heckbert_ticks",
    "load_config",
    "matplotlib_ticks",
    "nice_number",
]
