from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
import tomllib
from typing import Any

from svgplot.axis import AxisRangePolicy
from svgplot.errors import InvalidParameterError
from svgplot.formatting import DEFAULT_FORMAT_STRING
from svgplot.labeling import DEFAULT_TICK_COUNT, LabelingAlgorithm, LabelingOptions, resolve_algorithm
from svgplot.scales import PlotMargins


@dataclass(frozen=True)
class PlotConfig:
    width: float = 800.0
    height: float = 600.0
    margins: PlotMargins = field(default_factory=PlotMargins)
    algorithm: LabelingAlgorithm = LabelingAlgorithm.HECKBERT
    tick_count: int = DEFAULT_TICK_COUNT
    format_string: str = DEFAULT_FORMAT_STRING
    font_size: float | None = 12.0
    range_policy: AxisRangePolicy = field(default_factory=AxisRangePolicy)

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise InvalidParameterError(f"plot width/height must be > 0, got {self.width!r}x{self.height!r}")

    def labeling_options(self) -> LabelingOptions:
        return LabelingOptions(
            tick_count=self.tick_count,
            format_string=self.format_string,
            font_size=self.font_size,
        )


def load_config(path: str | Path) -> PlotConfig:
    """Read a TOML config (``[plot]``, ``[plot.margins]``, ``[axis]``, ``[axis.range]``)."""
    config_path = Path(path)
    if not config_path.is_file():
        raise FileNotFoundError(f"config file not found: {config_path}")
    with config_path.open("rb") as f:
        try:
            raw = tomllib.load(f)
        except tomllib.TOMLDecodeError as exc:
            raise InvalidParameterError(f"invalid TOML in {config_path}: {exc}") from exc
    return config_from_mapping(raw)


def config_from_mapping(raw: dict[str, Any]) -> PlotConfig:
    plot = _expect_table(raw.get("plot", {}), "plot")
    axis = _expect_table(raw.get("axis", {}), "axis")
    margins_raw = _expect_table(plot.get("margins", {}), "plot.margins")
    range_raw = _expect_table(axis.get("range", {}), "axis.range")

    defaults = PlotConfig()
    default_margins = defaults.margins
    margins = PlotMargins(
        left=_number(margins_raw, "left", "plot.margins", default_margins.left),
        right=_number(margins_raw, "right", "plot.margins", default_margins.right),
        top=_number(margins_raw, "top", "plot.margins", default_margins.top),
        bottom=_number(margins_raw, "bottom", "plot.margins", default_margins.bottom),
    )

    default_policy = defaults.range_policy
    default_range = range_raw.get("default", list(default_policy.default_range))
    if (
        not isinstance(default_range, list)
        or len(default_range) != 2
        or not all(_is_number(v) for v in default_range)
    ):
        raise InvalidParameterError("axis.range.default must be a [min, max] pair of numbers")
    policy = AxisRangePolicy(
        padding_ratio=_number(range_raw, "padding_ratio", "axis.range", default_policy.padding_ratio),
        zero_range_ratio=_number(range_raw, "zero_range_ratio", "axis.range", default_policy.zero_range_ratio),
        zero_value_padding=_number(
            range_raw, "zero_value_padding", "axis.range", default_policy.zero_value_padding
        ),
        default_range=(float(default_range[0]), float(default_range[1])),
        histogram_floor=_number(range_raw, "histogram_floor", "axis.range", default_policy.histogram_floor),
    )

    algorithm = axis.get("algorithm", defaults.algorithm.value)
    if not isinstance(algorithm, str):
        raise InvalidParameterError("axis.algorithm must be a string")
    tick_count = axis.get("tick_count", defaults.tick_count)
    if not isinstance(tick_count, int) or isinstance(tick_count, bool):
        raise InvalidParameterError("axis.tick_count must be an integer")
    format_string = axis.get("format", defaults.format_string)
    if not isinstance(format_string, str) or not format_string:
        raise InvalidParameterError("axis.format must be a non-empty string")
    font_size = axis.get("font_size", defaults.font_size)
    if font_size is not None and not _is_number(font_size):
        raise InvalidParameterError("axis.font_size must be a number")

    return PlotConfig(
        width=_number(plot, "width", "plot", defaults.width),
        height=_number(plot, "height", "plot", defaults.height),
        margins=margins,
        algorithm=resolve_algorithm(algorithm),
        tick_count=tick_count,
        format_string=format_string,
        font_size=None if font_size is None else float(font_size),
        range_policy=policy,
    )


def _expect_table(value: Any, field_name: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise InvalidParameterError(f"{field_name} must be a table")
    return value


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _number(table: dict[str, Any], key: str, prefix: str, default: float) -> float:
    value = table.get(key, default)
    if not _is_number(value):
        raise InvalidParameterError(f"{prefix}.{key} must be a number")
    return float(value)
