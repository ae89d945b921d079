from __future__ import annotations

import numpy as np


RGBA = tuple[int, int, int, int]


def new_canvas(width: int, height: int, color: RGBA = (0, 0, 0, 255)) -> np.ndarray:
    canvas = np.empty((height, width, 4), dtype=np.uint8)
    canvas[...] = np.asarray(color, dtype=np.uint8)
    return canvas


def draw_hline(dst: np.ndarray, x0: int, x1: int, y: int, color: RGBA) -> None:
    draw_filled_rect(dst, x0=x0, y0=y, x1=x1, y1=y, color=color)


def draw_vline(dst: np.ndarray, x: int, y0: int, y1: int, color: RGBA) -> None:
    draw_filled_rect(dst, x0=x, y0=y0, x1=x, y1=y1, color=color)


def draw_filled_rect(dst: np.ndarray, *, x0: int, y0: int, x1: int, y1: int, color: RGBA) -> None:
    """Blend ``color`` over the inclusive box spanned by the two corners, clipped to ``dst``."""
    height, width = dst.shape[:2]
    left = max(0, min(int(x0), int(x1)))
    right = min(width - 1, max(int(x0), int(x1)))
    top = max(0, min(int(y0), int(y1)))
    bottom = min(height - 1, max(int(y0), int(y1)))
    if right < left or bottom < top:
        return
    _blend(dst[top : bottom + 1, left : right + 1], color)


def _blend(region: np.ndarray, color: RGBA) -> None:
    # Frames stay opaque: only the color channels mix.
    a = color[3] / 255.0
    src = np.asarray(color[:3], dtype=np.float32) * a
    region[..., :3] = (src + region[..., :3].astype(np.float32) * (1.0 - a)).astype(np.uint8)
    region[..., 3] = 255
