from __future__ import annotations


class PlotError(ValueError):
    pass


class InvalidRangeError(PlotError):
    pass


class InvalidAxisLengthError(PlotError):
    pass


class InvalidGeometryError(PlotError):
    pass


class InvalidParameterError(PlotError):
    pass


class PlotDataError(PlotError):
    pass
