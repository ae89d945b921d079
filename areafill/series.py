from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

import numpy as np


SeriesMode = Literal["markers", "lines", "lines+markers", "bars", "bubbles", "candles"]
LineMode = Literal["linear", "stepped"]
RGBA = tuple[int, int, int, int]

DEFAULT_FILL_COLOR: RGBA = (140, 234, 255, 255)
DEFAULT_FILL_ALPHA = 0.33


@dataclass(frozen=True)
class Sample:
    x: float
    y: float


@dataclass(frozen=True)
class SeriesData:
    x: np.ndarray
    y: np.ndarray
    source_name: str | None = None


@dataclass(frozen=True)
class FillGradient:
    """Vertical gradient painted from the top of a fill region to its bottom."""

    top: RGBA
    bottom: RGBA


@dataclass(frozen=True)
class FillStyle:
    """Area fill attached to a line series.

    ``boundary`` names the series the fill extends to. Without one the fill
    extends to a flat baseline: ``fill_min`` when set, otherwise whatever
    the renderer's fill-minimum provider yields.
    """

    color: RGBA = DEFAULT_FILL_COLOR
    alpha: float = DEFAULT_FILL_ALPHA
    gradient: FillGradient | None = None
    boundary: "Series | None" = None
    fill_min: float | None = None


@dataclass(frozen=True)
class SeriesStyle:
    mode: SeriesMode
    color: RGBA = (62, 149, 255, 255)
    marker_size: int = 1
    line_width: int = 1
    bar_width: float = 0.8
    line_mode: LineMode = "linear"
    fill: FillStyle | None = None


@dataclass(frozen=True, eq=False)
class Series:
    data: SeriesData
    style: SeriesStyle
    label: str | None = None

    def __len__(self) -> int:
        return int(self.data.x.size)

    @property
    def line_mode(self) -> LineMode:
        return self.style.line_mode

    @property
    def is_stepped(self) -> bool:
        return self.style.line_mode == "stepped"

    def sample_at(self, index: int) -> Sample | None:
        # Values are read live so rolling buffers updated in place stay in sync.
        if index < 0 or index >= self.data.x.size:
            return None
        x = float(self.data.x[index])
        y = float(self.data.y[index])
        if not (np.isfinite(x) and np.isfinite(y)):
            return None
        return Sample(x=x, y=y)

    def live_mask(self) -> np.ndarray:
        return np.isfinite(self.data.x) & np.isfinite(self.data.y)

    def y_range(self) -> tuple[float, float] | None:
        mask = self.live_mask()
        if not np.any(mask):
            return None
        yvals = self.data.y[mask]
        return float(np.min(yvals)), float(np.max(yvals))
