from __future__ import annotations

from dataclasses import dataclass
import math
from typing import TYPE_CHECKING, Any

import numpy as np

from svgplot.errors import InvalidGeometryError, InvalidRangeError
from svgplot.numeric import EPSILON
from svgplot.series import DataPoint

if TYPE_CHECKING:
    from svgplot.axis import Axis


@dataclass(frozen=True)
class PlotMargins:
    left: float = 50.0
    right: float = 50.0
    top: float = 50.0
    bottom: float = 50.0

    def __str__(self) -> str:
        return f"Left: {self.left}, Right: {self.right}, Top: {self.top}, Bottom: {self.bottom}"


@dataclass(frozen=True)
class PlotArea:
    x: float
    y: float
    width: float
    height: float

    @classmethod
    def from_figure(cls, width: float, height: float, margins: PlotMargins | None = None) -> PlotArea:
        m = margins or PlotMargins()
        return cls(
            x=m.left,
            y=m.top,
            width=width - m.left - m.right,
            height=height - m.top - m.bottom,
        )

    @property
    def area(self) -> float:
        return self.width * self.height


@dataclass(frozen=True)
class ScaleTransform:
    """Affine data-to-pixel mapping; ``scale_y`` is negative because pixel y grows downward."""

    scale_x: float
    scale_y: float
    offset_x: float
    offset_y: float

    @classmethod
    def from_bounds(
        cls,
        x_min: float,
        x_max: float,
        y_min: float,
        y_max: float,
        area: PlotArea,
    ) -> ScaleTransform:
        for name, lo, hi in (("x", x_min, x_max), ("y", y_min, y_max)):
            if not (math.isfinite(lo) and math.isfinite(hi)):
                raise InvalidRangeError(f"{name}-axis bounds must be finite: [{lo!r}, {hi!r}]")
            if abs(hi - lo) < EPSILON:
                raise InvalidRangeError(f"{name}-axis range cannot be zero: [{lo!r}, {hi!r}]")
        if abs(area.width) < EPSILON or abs(area.height) < EPSILON or area.width < 0 or area.height < 0:
            raise InvalidGeometryError(f"plot area must have positive size, got {area.width!r}x{area.height!r}")

        scale_x = _pixels_per_unit(area.width, x_min, x_max)
        scale_y = -_pixels_per_unit(area.height, y_min, y_max)
        return cls(
            scale_x=scale_x,
            scale_y=scale_y,
            offset_x=area.x - x_min * scale_x,
            offset_y=area.y - y_max * scale_y,
        )

    @classmethod
    def from_axes(cls, x_axis: Axis, y_axis: Axis, area: PlotArea) -> ScaleTransform:
        return cls.from_bounds(x_axis.min, x_axis.max, y_axis.min, y_axis.max, area)

    def transform(self, x: Any, y: Any) -> tuple[Any, Any]:
        """Map data coordinates to pixels; accepts floats or numpy arrays."""
        return (x * self.scale_x + self.offset_x, y * self.scale_y + self.offset_y)

    def inverse_transform(self, px: Any, py: Any) -> tuple[Any, Any]:
        inv_x = 0.0 if abs(self.scale_x) < EPSILON else 1.0 / self.scale_x
        inv_y = 0.0 if abs(self.scale_y) < EPSILON else 1.0 / self.scale_y
        return ((px - self.offset_x) * inv_x, (py - self.offset_y) * inv_y)

    def transform_point(self, point: DataPoint) -> DataPoint:
        x, y = self.transform(point.x, point.y)
        return DataPoint(float(x), float(y))

    def inverse_transform_point(self, point: DataPoint) -> DataPoint:
        x, y = self.inverse_transform(point.x, point.y)
        return DataPoint(float(x), float(y))

    def map_to_pixels(self, x: np.ndarray, y: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        px, py = self.transform(np.asarray(x, dtype=np.float64), np.asarray(y, dtype=np.float64))
        return px, py


def _pixels_per_unit(extent: float, lo: float, hi: float) -> float:
    span = hi - lo
    if math.isinf(span):
        # Bounds near the float limit: halve both sides so the span stays finite.
        return (extent / 2.0) / (hi / 2.0 - lo / 2.0)
    return extent / span
