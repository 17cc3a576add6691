from __future__ import annotations

from dataclasses import dataclass
import logging

from svgplot.axis import Axis, AxisSnapshot
from svgplot.config import PlotConfig
from svgplot.errors import InvalidParameterError
from svgplot.scales import PlotArea, ScaleTransform
from svgplot.series import AxisKind, Series


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlotLayout:
    """Everything a renderer needs: finalized axes and the data-to-pixel transform."""

    area: PlotArea
    x_axis: AxisSnapshot
    y_axis: AxisSnapshot
    transform: ScaleTransform


class Plot:
    def __init__(self, config: PlotConfig | None = None) -> None:
        self.config = config or PlotConfig()
        self._series: list[Series] = []
        self.x_axis: Axis | None = None
        self.y_axis: Axis | None = None

    @property
    def series(self) -> tuple[Series, ...]:
        return tuple(self._series)

    def set_x_axis(self, label: str = "", *, auto_scale: bool = True) -> Axis:
        self.x_axis = self._new_axis(AxisKind.X, label, auto_scale)
        return self.x_axis

    def set_y_axis(self, label: str = "", *, auto_scale: bool = True) -> Axis:
        self.y_axis = self._new_axis(AxisKind.Y, label, auto_scale)
        return self.y_axis

    def add_series(self, series: Series) -> None:
        if self.x_axis is None or self.y_axis is None:
            raise InvalidParameterError("both x and y axes must be set before adding a series")
        self._series.append(series)

    def area(self) -> PlotArea:
        return PlotArea.from_figure(self.config.width, self.config.height, self.config.margins)

    def prepare(self) -> PlotLayout:
        """Bin/prepare series, autoscale both axes, label them and build the transform."""
        if self.x_axis is None or self.y_axis is None:
            raise InvalidParameterError("both x and y axes must be set before preparing the plot")
        if not self._series:
            LOGGER.warning("preparing plot with no data series")

        area = self.area()
        for s in self._series:
            s.prepare_data()

        self.x_axis.calculate_range(self._series)
        self.y_axis.calculate_range(self._series)
        self.x_axis.calculate_ticks(area.width)
        self.y_axis.calculate_ticks(area.height)

        return PlotLayout(
            area=area,
            x_axis=self.x_axis.snapshot(),
            y_axis=self.y_axis.snapshot(),
            transform=ScaleTransform.from_axes(self.x_axis, self.y_axis, area),
        )

    def _new_axis(self, kind: AxisKind, label: str, auto_scale: bool) -> Axis:
        return Axis(
            kind=kind,
            label=label,
            algorithm=self.config.algorithm,
            options=self.config.labeling_options(),
            auto_scale=auto_scale,
            range_policy=self.config.range_policy,
        )
