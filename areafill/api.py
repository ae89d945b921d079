from __future__ import annotations

from pathlib import Path

from areafill.config import ChartConfig, load_chart_config
from areafill.figure import Figure


def figure(
    width: int = 1280,
    height: int | None = None,
    *,
    aspect_ratio: float = 16.0 / 9.0,
    config: ChartConfig | str | Path | None = None,
) -> Figure:
    if width <= 0:
        raise ValueError("width must be > 0")
    if aspect_ratio <= 0:
        raise ValueError("aspect_ratio must be > 0")
    if height is None:
        height = max(1, int(round(width / aspect_ratio)))
    if config is None:
        resolved = ChartConfig()
    elif isinstance(config, ChartConfig):
        resolved = config
    else:
        resolved = load_chart_config(config)
    return Figure(width=width, height=height, config=resolved)
