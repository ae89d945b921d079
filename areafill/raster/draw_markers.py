from __future__ import annotations

import numpy as np

from areafill.raster.canvas import RGBA, draw_filled_rect


def draw_markers(dst: np.ndarray, xs: np.ndarray, ys: np.ndarray, color: RGBA, size: int = 1) -> None:
    radius = max(0, size // 2)
    for x, y in zip(xs.tolist(), ys.tolist(), strict=False):
        cx = int(x)
        cy = int(y)
        draw_filled_rect(dst, x0=cx - radius, y0=cy - radius, x1=cx + radius, y1=cy + radius, color=color)
