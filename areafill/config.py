from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
import tomllib

from areafill.combined import DEFAULT_DRAW_ORDER, validate_draw_order
from areafill.renderers import Animator, RendererKind
from areafill.series import DEFAULT_FILL_ALPHA, DEFAULT_FILL_COLOR, RGBA


LOGGER = logging.getLogger(__name__)

_KNOWN_KEYS = {"draw_order", "background", "plot_background", "axis_color", "fill", "animation"}


@dataclass(frozen=True)
class ChartConfig:
    draw_order: tuple[RendererKind, ...] = DEFAULT_DRAW_ORDER
    background: RGBA = (12, 16, 23, 255)
    plot_background: RGBA = (20, 26, 36, 255)
    axis_color: RGBA = (124, 138, 156, 255)
    fill_color: RGBA = DEFAULT_FILL_COLOR
    fill_alpha: float = DEFAULT_FILL_ALPHA
    animation: Animator = Animator()


def load_chart_config(path: str | Path) -> ChartConfig:
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"chart config not found: {config_path}")
    with config_path.open("rb") as f:
        raw = tomllib.load(f)
    for key in sorted(set(raw) - _KNOWN_KEYS):
        LOGGER.warning("ignoring unknown chart config key: %s", key)

    defaults = ChartConfig()
    draw_order = defaults.draw_order
    if "draw_order" in raw:
        draw_order = validate_draw_order(_coerce_string_list(raw["draw_order"], "draw_order"))
        if not draw_order:
            raise ValueError("draw_order must not be empty")

    fill = _coerce_table(raw.get("fill", {}), "fill")
    animation = _coerce_table(raw.get("animation", {}), "animation")
    fill_alpha = _coerce_float(fill.get("alpha", defaults.fill_alpha), "fill.alpha")
    if not 0.0 <= fill_alpha <= 1.0:
        raise ValueError("fill.alpha must be in [0, 1]")
    return ChartConfig(
        draw_order=draw_order,
        background=_coerce_rgba(raw.get("background", defaults.background), "background"),
        plot_background=_coerce_rgba(raw.get("plot_background", defaults.plot_background), "plot_background"),
        axis_color=_coerce_rgba(raw.get("axis_color", defaults.axis_color), "axis_color"),
        fill_color=_coerce_rgba(fill.get("color", defaults.fill_color), "fill.color"),
        fill_alpha=fill_alpha,
        animation=Animator(
            phase_x=_coerce_float(animation.get("phase_x", 1.0), "animation.phase_x"),
            phase_y=_coerce_float(animation.get("phase_y", 1.0), "animation.phase_y"),
        ),
    )


def _coerce_table(value: object, field_name: str) -> dict[str, object]:
    if not isinstance(value, dict):
        raise ValueError(f"{field_name} must be a table")
    return value


def _coerce_string_list(value: object, field_name: str) -> list[str]:
    if not isinstance(value, list):
        raise ValueError(f"{field_name} must be a list")
    out: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ValueError(f"{field_name} entries must be strings")
        out.append(item)
    return out


def _coerce_float(value: object, field_name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{field_name} must be a number")
    return float(value)


def _coerce_rgba(value: object, field_name: str) -> RGBA:
    if isinstance(value, tuple):
        value = list(value)
    if not isinstance(value, list) or len(value) not in (3, 4):
        raise ValueError(f"{field_name} must be a list of 3 or 4 integers")
    channels: list[int] = []
    for item in value:
        if isinstance(item, bool) or not isinstance(item, int) or not 0 <= item <= 255:
            raise ValueError(f"{field_name} channels must be integers in [0, 255]")
        channels.append(item)
    if len(channels) == 3:
        channels.append(255)
    return (channels[0], channels[1], channels[2], channels[3])
