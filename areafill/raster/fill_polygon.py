from __future__ import annotations

import math

import numpy as np

from areafill.raster.canvas import RGBA, draw_hline
from areafill.series import FillGradient


def fill_polygon(
    dst: np.ndarray,
    points: np.ndarray,
    color: RGBA,
    *,
    gradient: FillGradient | None = None,
    alpha: float = 1.0,
) -> None:
    """Paint a closed polygon with the even-odd rule, sampling pixel centres.

    ``points`` is an ``(N, 2)`` array of screen coordinates; the last point
    joins the first. Edge crossings are half-open, so horizontal edges and
    zero-height polygons paint nothing.
    """
    if points.shape[0] < 3:
        return
    xs = points[:, 0].astype(np.float64, copy=False)
    ys = points[:, 1].astype(np.float64, copy=False)
    nx = np.roll(xs, -1)
    ny = np.roll(ys, -1)

    top = float(np.min(ys))
    bottom = float(np.max(ys))
    row_first = max(0, int(math.ceil(top)))
    row_last = min(dst.shape[0] - 1, int(math.floor(bottom)))
    width = dst.shape[1]
    fill_alpha = max(0.0, min(1.0, float(alpha)))

    for row in range(row_first, row_last + 1):
        yc = float(row)
        crossing = ((ys <= yc) & (ny > yc)) | ((ny <= yc) & (ys > yc))
        if not np.any(crossing):
            continue
        x0 = xs[crossing]
        y0 = ys[crossing]
        x1 = nx[crossing]
        y1 = ny[crossing]
        hits = np.sort(x0 + (yc - y0) * (x1 - x0) / (y1 - y0))
        row_color = _row_color(color, gradient, yc, top, bottom, fill_alpha)
        for k in range(0, hits.size - 1, 2):
            left = int(math.ceil(hits[k]))
            right = int(math.floor(hits[k + 1]))
            if right < 0 or left >= width or right < left:
                continue
            draw_hline(dst, left, right, row, row_color)


def _row_color(
    color: RGBA,
    gradient: FillGradient | None,
    y: float,
    top: float,
    bottom: float,
    alpha: float,
) -> RGBA:
    if gradient is None:
        base = color
    else:
        t = 0.0 if bottom <= top else (y - top) / (bottom - top)
        base = tuple(int(round(a + (b - a) * t)) for a, b in zip(gradient.top, gradient.bottom, strict=True))  # type: ignore[assignment]
    r, g, b, a = base
    return (r, g, b, int(round(a * alpha)))
