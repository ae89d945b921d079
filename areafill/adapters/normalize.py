from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal
from typing import Any

import numpy as np

from areafill.errors import PlotDataError
from areafill.series import SeriesData


try:
    import pandas as pd
except Exception:  # pragma: no cover - optional dependency
    pd = None  # type: ignore[assignment]

try:
    import torch
except Exception:  # pragma: no cover - optional dependency
    torch = None  # type: ignore[assignment]


def normalize_xy(
    y: Any = None,
    *,
    x: Any = None,
    data: Any = None,
    source_name: str | None = None,
) -> SeriesData:
    """Coerce user input into float64 x/y arrays.

    Non-finite entries are kept in place so sample indices stay aligned
    with the caller's data; a series needs at least one finite point.
    """
    y_arr = _as_float64(_lookup(y, data, required=True), label="y")
    if y_arr.size == 0:
        raise PlotDataError("empty series")
    x_arr = _index_or(x, data, size=y_arr.size)
    return _checked(x_arr, y_arr, source_name=source_name, what="series")


def normalize_band(
    y1: Any,
    y2: Any,
    *,
    x: Any = None,
    data: Any = None,
) -> tuple[SeriesData, SeriesData]:
    """Coerce the two edges of a filled band onto one shared x array.

    The edges must have the same length; sample ``i`` of one pairs with
    sample ``i`` of the other.
    """
    upper = _as_float64(_lookup(y1, data, required=True), label="y1")
    lower = _as_float64(_lookup(y2, data, required=True), label="y2")
    if upper.size == 0:
        raise PlotDataError("empty series")
    if upper.shape != lower.shape:
        raise PlotDataError(f"y1 and y2 length mismatch: {upper.size} != {lower.size}")
    x_arr = _index_or(x, data, size=upper.size)
    name = y1 if isinstance(y1, str) else None
    boundary_name = y2 if isinstance(y2, str) else None
    return (
        _checked(x_arr, upper, source_name=name, what="y1"),
        _checked(x_arr.copy(), lower, source_name=boundary_name, what="y2"),
    )


def _index_or(x: Any, data: Any, *, size: int) -> np.ndarray:
    if x is None:
        return np.arange(size, dtype=np.float64)
    x_arr = _as_float64(_lookup(x, data, required=False), label="x")
    if x_arr.size != size:
        raise PlotDataError(f"x and y length mismatch: {x_arr.size} != {size}")
    return x_arr


def _checked(x_arr: np.ndarray, y_arr: np.ndarray, *, source_name: str | None, what: str) -> SeriesData:
    if not (np.isfinite(x_arr) & np.isfinite(y_arr)).any():
        raise PlotDataError(f"{what} contains no finite points")
    return SeriesData(x=x_arr, y=y_arr, source_name=source_name)


def _lookup(value: Any, data: Any, *, required: bool) -> Any:
    if data is None:
        if pd is not None and isinstance(value, pd.DataFrame):
            return _single_numeric_column(value, "1-D DataFrame input must contain exactly one numeric column")
        if value is None and required:
            raise PlotDataError("y input is required")
        return value

    if pd is None:
        raise PlotDataError("pandas is required when using `data=`")
    if not isinstance(data, pd.DataFrame):
        raise PlotDataError("`data` must be a pandas DataFrame")
    if isinstance(value, str):
        if value not in data.columns:
            raise PlotDataError(f"column not found: {value}")
        return data[value]
    if value is None and required:
        return _single_numeric_column(data, "when y is omitted, data must have exactly one numeric column")
    return value


def _single_numeric_column(frame: Any, message: str) -> Any:
    numeric = [name for name in frame.columns if pd.api.types.is_numeric_dtype(frame[name])]
    if len(numeric) != 1:
        raise PlotDataError(message)
    return frame[numeric[0]]


def _as_float64(value: Any, *, label: str) -> np.ndarray:
    if torch is not None and isinstance(value, torch.Tensor):
        tensor = value.detach().cpu()
        if tensor.ndim != 1:
            raise PlotDataError(f"{label} must be 1-D")
        return tensor.to(torch.float64).numpy()

    if pd is not None and isinstance(value, pd.Series):
        value = value.to_numpy()
    elif isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        value = np.asarray(value, dtype=object)
    elif not isinstance(value, np.ndarray):
        raise PlotDataError(f"unsupported {label} input type: {type(value)!r}")

    if value.ndim != 1:
        raise PlotDataError(f"{label} must be 1-D")
    if value.dtype.kind in "iufb":
        return value.astype(np.float64)
    return np.fromiter((_scalar(raw, label, i) for i, raw in enumerate(value.tolist())), dtype=np.float64, count=value.size)


def _scalar(raw: Any, label: str, index: int) -> float:
    if raw is None:
        return np.nan
    if isinstance(raw, Decimal):
        return float(raw)
    try:
        return float(raw)
    except (TypeError, ValueError) as exc:
        raise PlotDataError(f"{label} contains non-numeric value at index {index}: {raw!r}") from exc
