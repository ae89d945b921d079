from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class DataLimits:
    xmin: float
    xmax: float
    ymin: float
    ymax: float


@dataclass(frozen=True)
class PlotTransform:
    """Affine map ``(x, y) -> (x * sx + tx, y * sy + ty)``."""

    sx: float
    tx: float
    sy: float
    ty: float

    def apply(self, x: float, y: float) -> tuple[float, float]:
        return (x * self.sx + self.tx, y * self.sy + self.ty)

    def apply_many(self, x: np.ndarray, y: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        return (x * self.sx + self.tx, y * self.sy + self.ty)

    def to_screen(self, height: int) -> "PlotTransform":
        # Pixel rows grow downward.
        return PlotTransform(sx=self.sx, tx=self.tx, sy=-self.sy, ty=(height - 1) - self.ty)

    def translated(self, dx: float, dy: float) -> "PlotTransform":
        return PlotTransform(sx=self.sx, tx=self.tx + dx, sy=self.sy, ty=self.ty + dy)


def compute_limits(x: np.ndarray, y: np.ndarray, y_buffer_ratio: float = 0.05) -> DataLimits:
    """Bounds of finite ``x``/``y`` values with vertical headroom.

    The arrays need not pair up; only their extremes are used.
    """
    xmin, xmax = float(np.min(x)), float(np.max(x))
    ymin, ymax = float(np.min(y)), float(np.max(y))
    if ymin == ymax:
        pad = max(1.0, abs(ymin) * y_buffer_ratio)
    else:
        pad = (ymax - ymin) * y_buffer_ratio
    if xmin == xmax:
        xmin, xmax = xmin - 1.0, xmax + 1.0
    return DataLimits(xmin=xmin, xmax=xmax, ymin=ymin - pad, ymax=ymax + pad)


def build_transform(limits: DataLimits, width: int, height: int) -> PlotTransform:
    """Data space to a ``width`` x ``height`` viewport with y growing upward."""
    if width <= 1 or height <= 1:
        raise ValueError("plot viewport width/height must be > 1")
    sx = (width - 1) / (limits.xmax - limits.xmin)
    sy = (height - 1) / (limits.ymax - limits.ymin)
    return PlotTransform(sx=sx, tx=-limits.xmin * sx, sy=sy, ty=-limits.ymin * sy)


def downsample_by_pixel_column(
    px: np.ndarray,
    py: np.ndarray,
    *,
    width: int,
    mode: str,
) -> tuple[np.ndarray, np.ndarray]:
    """Reduce pixel points to at most two per column.

    ``"markers"`` keeps the middle point of each column in input order; other
    modes keep the column's vertical extent.
    """
    if px.size <= width:
        return px, py

    order = np.argsort(px, kind="stable")
    cols = px[order]
    rows = py[order]
    columns, starts, counts = np.unique(cols, return_index=True, return_counts=True)
    if mode == "markers":
        picked = rows[starts + counts // 2]
        return columns.astype(np.int32), picked.astype(np.int32)

    lo = np.minimum.reduceat(rows, starts)
    hi = np.maximum.reduceat(rows, starts)
    spread = hi != lo
    out_x = np.repeat(columns, np.where(spread, 2, 1))
    out_y = np.empty(out_x.size, dtype=np.int32)
    slot = np.cumsum(np.where(spread, 2, 1)) - np.where(spread, 2, 1)
    out_y[slot] = lo
    out_y[slot[spread] + 1] = hi[spread]
    return out_x.astype(np.int32), out_y
