from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

import numpy as np

from svgplot.errors import PlotDataError
from svgplot.series import DataPoint, SeriesData


try:
    import pandas as pd
except Exception:  # pragma: no cover - optional dependency
    pd = None  # type: ignore[assignment]

try:
    import torch
except Exception:  # pragma: no cover - optional dependency
    torch = None  # type: ignore[assignment]


def normalize_xy(y: Any = None, *, x: Any = None, source_name: str | None = None) -> SeriesData:
    """Coerce x/y inputs into float64 arrays plus a finite-point mask.

    ``y`` may also be a sequence of :class:`DataPoint`, in which case ``x`` must
    be omitted. When ``x`` is omitted otherwise, the sample index is used.
    An empty input is allowed; it contributes no axis bounds.
    """
    if isinstance(y, Sequence) and y and all(isinstance(p, DataPoint) for p in y):
        if x is not None:
            raise PlotDataError("x must be omitted when y is a sequence of DataPoint")
        x_arr = np.fromiter((p.x for p in y), dtype=np.float64, count=len(y))
        y_arr = np.fromiter((p.y for p in y), dtype=np.float64, count=len(y))
    else:
        if y is None:
            raise PlotDataError("y input is required")
        y_arr = to_float_array(y, label="y")
        x_arr = np.arange(y_arr.size, dtype=np.float64) if x is None else to_float_array(x, label="x")
        if x_arr.size != y_arr.size:
            raise PlotDataError(f"x and y length mismatch: {x_arr.size} != {y_arr.size}")

    return SeriesData(x=x_arr, y=y_arr, mask=np.isfinite(x_arr) & np.isfinite(y_arr), source_name=source_name)


def normalize_samples(values: Any) -> np.ndarray:
    """Coerce raw histogram samples to a 1-D float64 array (non-finite values kept)."""
    if values is None:
        raise PlotDataError("samples input is required")
    return to_float_array(values, label="samples")


def to_float_array(value: Any, *, label: str) -> np.ndarray:
    if pd is not None and isinstance(value, pd.DataFrame):
        value = _only_numeric_column(value, label)

    if torch is not None and isinstance(value, torch.Tensor):
        arr = value.detach().to("cpu", torch.float64).numpy()
    elif pd is not None and isinstance(value, pd.Series):
        arr = value.to_numpy()
    elif isinstance(value, np.ndarray):
        arr = value
    elif isinstance(value, (str, bytes, bytearray)) or not isinstance(value, Iterable):
        raise PlotDataError(f"unsupported {label} input type: {type(value).__name__}")
    else:
        arr = np.asarray(value if isinstance(value, Sequence) else list(value), dtype=object)

    if arr.ndim != 1:
        raise PlotDataError(f"{label} must be 1-D, got shape {arr.shape}")
    if arr.dtype.kind in "iufb":
        return arr.astype(np.float64, copy=False)
    items = (_to_float(raw, label, i) for i, raw in enumerate(arr.tolist()))
    return np.fromiter(items, dtype=np.float64, count=arr.size)


def _only_numeric_column(frame: Any, label: str) -> Any:
    numeric = frame.select_dtypes(include="number").columns
    if len(numeric) != 1:
        raise PlotDataError(f"{label} DataFrame must have exactly one numeric column, found {len(numeric)}")
    return frame[numeric[0]]


def _to_float(raw: Any, label: str, index: int) -> float:
    # None (and pandas' NA) mark missing points.
    if raw is None or (pd is not None and raw is pd.NA):
        return float("nan")
    try:
        return float(raw)
    except (TypeError, ValueError) as exc:
        raise PlotDataError(f"{label} contains non-numeric value at index {index}: {raw!r}") from exc
