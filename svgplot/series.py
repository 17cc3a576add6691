from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

import numpy as np

from svgplot.errors import PlotDataError


class AxisKind(str, Enum):
    X = "x"
    Y = "y"


@dataclass(frozen=True)
class DataPoint:
    x: float
    y: float

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"


def points_from_lists(x_values: Sequence[float], y_values: Sequence[float]) -> list[DataPoint]:
    if len(x_values) != len(y_values):
        raise PlotDataError(f"x and y length mismatch: {len(x_values)} != {len(y_values)}")
    return [DataPoint(float(x), float(y)) for x, y in zip(x_values, y_values)]


@dataclass(frozen=True)
class SeriesData:
    x: np.ndarray
    y: np.ndarray
    mask: np.ndarray
    source_name: str | None = None

    @property
    def finite_count(self) -> int:
        return int(np.count_nonzero(self.mask))

    def points(self) -> Iterable[DataPoint]:
        for x, y in zip(self.x[self.mask].tolist(), self.y[self.mask].tolist()):
            yield DataPoint(x, y)


class Series(Protocol):
    title: str

    def prepare_data(self) -> None: ...

    def axis_bounds(self, kind: AxisKind) -> tuple[float, float]: ...
