from __future__ import annotations

import numpy as np

from areafill.raster.canvas import RGBA, draw_filled_rect


def draw_polyline(dst: np.ndarray, xs: np.ndarray, ys: np.ndarray, color: RGBA, width: int = 1) -> None:
    pts = list(zip(xs.astype(np.int64).tolist(), ys.astype(np.int64).tolist()))
    radius = max(0, width // 2)
    for (xa, ya), (xb, yb) in zip(pts, pts[1:]):
        for x, y in _segment_pixels(xa, ya, xb, yb):
            draw_filled_rect(dst, x0=x - radius, y0=y - radius, x1=x + radius, y1=y + radius, color=color)


def step_vertices(xs: np.ndarray, ys: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Insert a corner before each vertex so segments run horizontal then vertical."""
    if xs.size < 2:
        return xs, ys
    out_x = np.empty(xs.size * 2 - 1, dtype=xs.dtype)
    out_y = np.empty(ys.size * 2 - 1, dtype=ys.dtype)
    out_x[0::2] = xs
    out_y[0::2] = ys
    out_x[1::2] = xs[1:]
    out_y[1::2] = ys[:-1]
    return out_x, out_y


def _segment_pixels(x0: int, y0: int, x1: int, y1: int):
    # Bresenham, endpoints included.
    dx, dy = abs(x1 - x0), -abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx + dy
    while True:
        yield x0, y0
        if x0 == x1 and y0 == y1:
            return
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x0 += sx
        if e2 <= dx:
            err += dx
            y0 += sy
