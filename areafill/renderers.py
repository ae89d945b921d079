from __future__ import annotations

from dataclasses import dataclass, field
import math
from typing import Literal, Protocol, Sequence

import numpy as np

from areafill.boundary import FillMinProvider, default_fill_min, resolve_boundary
from areafill.fill_path import FillPath, VisibleRange, build_fill_path, compute_visible_range
from areafill.raster import draw_filled_rect, draw_markers, draw_polyline, fill_polygon, step_vertices
from areafill.scales import DataLimits, PlotTransform, downsample_by_pixel_column
from areafill.series import Series


RendererKind = Literal["bar", "bubble", "line", "candle", "scatter"]
RENDERER_KINDS: tuple[RendererKind, ...] = ("bar", "bubble", "line", "candle", "scatter")


@dataclass(frozen=True)
class Animator:
    phase_x: float = 1.0
    phase_y: float = 1.0

    def __post_init__(self) -> None:
        if not 0.0 <= self.phase_x <= 1.0:
            raise ValueError("phase_x must be in [0, 1]")
        if not 0.0 <= self.phase_y <= 1.0:
            raise ValueError("phase_y must be in [0, 1]")


@dataclass
class RenderContext:
    canvas: np.ndarray
    transform: PlotTransform
    limits: DataLimits
    plot_rect: tuple[int, int, int, int]
    animator: Animator = field(default_factory=Animator)

    def to_pixels(self, x: np.ndarray, y: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        x0, y0, w, h = self.plot_rect
        px, py = self.transform.apply_many(x, y)
        px = np.clip(np.rint(px), x0, x0 + w - 1).astype(np.int32)
        py = np.clip(np.rint(py), y0, y0 + h - 1).astype(np.int32)
        return px, py


class DataRenderer(Protocol):
    kind: RendererKind

    def draw_data(self, ctx: RenderContext) -> None:
        ...


def series_kind(series: Series) -> RendererKind:
    if series.style.mode == "bars":
        return "bar"
    if series.style.mode == "markers":
        return "scatter"
    if series.style.mode == "bubbles":
        return "bubble"
    if series.style.mode == "candles":
        return "candle"
    return "line"


def _contiguous_true_runs(mask: np.ndarray) -> list[tuple[int, int]]:
    idx = np.flatnonzero(mask)
    if idx.size == 0:
        return []
    breaks = np.flatnonzero(np.diff(idx) > 1)
    starts = np.concatenate(([idx[0]], idx[breaks + 1]))
    ends = np.concatenate((idx[breaks] + 1, [idx[-1] + 1]))
    return [(int(s), int(e)) for s, e in zip(starts.tolist(), ends.tolist(), strict=True)]


class BarChartRenderer:
    kind: RendererKind = "bar"

    def __init__(self, series: Sequence[Series]) -> None:
        self.series = list(series)

    def draw_data(self, ctx: RenderContext) -> None:
        phase_y = ctx.animator.phase_y
        for spec in self.series:
            live_mask = spec.live_mask()
            if not np.any(live_mask):
                continue
            half_width = max(1e-9, float(spec.style.bar_width) * 0.5)
            view_mask = live_mask & (spec.data.x + half_width >= ctx.limits.xmin) & (spec.data.x - half_width <= ctx.limits.xmax)
            view_mask = _leading_fraction(view_mask, ctx.animator.phase_x)
            if not np.any(view_mask):
                continue
            xvals = spec.data.x[view_mask]
            yvals = spec.data.y[view_mask] * phase_y
            zeros = np.zeros_like(yvals, dtype=np.float64)
            px_left, py_zero = ctx.to_pixels(xvals - half_width, zeros)
            px_right, py_vals = ctx.to_pixels(xvals + half_width, yvals)
            for i in range(xvals.size):
                x0_bar = int(min(px_left[i], px_right[i]))
                x1_bar = int(max(px_left[i], px_right[i]))
                draw_filled_rect(
                    ctx.canvas,
                    x0=x0_bar,
                    y0=int(py_zero[i]),
                    x1=max(x1_bar, x0_bar + 1),
                    y1=int(py_vals[i]),
                    color=spec.style.color,
                )


class LineChartRenderer:
    kind: RendererKind = "line"

    def __init__(self, series: Sequence[Series], fill_min_provider: FillMinProvider = default_fill_min) -> None:
        self.series = list(series)
        self.fill_min_provider = fill_min_provider
        self.last_fill_paths: dict[str, FillPath] = {}

    def draw_data(self, ctx: RenderContext) -> None:
        self.last_fill_paths = {}
        windows: list[VisibleRange] = []
        for i, spec in enumerate(self.series):
            visible = compute_visible_range(spec, ctx.limits.xmin, ctx.limits.xmax, phase_x=ctx.animator.phase_x)
            windows.append(visible)
            if spec.style.fill is not None:
                key = _unique_key(self.last_fill_paths, spec.label or f"series {i + 1}")
                self.last_fill_paths[key] = self.draw_linear_fill(ctx, spec, visible)
        # Lines go over every fill.
        for spec, visible in zip(self.series, windows, strict=True):
            self._draw_line(ctx, spec, visible)

    def draw_linear_fill(self, ctx: RenderContext, spec: Series, visible: VisibleRange | None = None) -> FillPath:
        fill = spec.style.fill
        assert fill is not None
        if visible is None:
            visible = compute_visible_range(spec, ctx.limits.xmin, ctx.limits.xmax, phase_x=ctx.animator.phase_x)
        boundary = resolve_boundary(spec, ctx.limits, self.fill_min_provider)
        path = build_fill_path(spec, boundary, visible, ctx.animator.phase_y, spec.line_mode, ctx.transform)
        if path.is_empty:
            return path
        clip = _clip_view(ctx.canvas, ctx.plot_rect)
        x0, y0, _, _ = ctx.plot_rect
        local = path.points - np.asarray([x0, y0], dtype=np.float64)
        fill_polygon(clip, local, fill.color, gradient=fill.gradient, alpha=fill.alpha)
        return path

    def _draw_line(self, ctx: RenderContext, spec: Series, visible: VisibleRange) -> None:
        index = np.arange(len(spec))
        live_mask = (
            spec.live_mask()
            & (spec.data.x >= ctx.limits.xmin)
            & (spec.data.x <= ctx.limits.xmax)
            & (index >= visible.start)
            & (index <= visible.end)
        )
        _, _, plot_w, _ = ctx.plot_rect
        for seg_start, seg_end in _contiguous_true_runs(live_mask):
            xvals = spec.data.x[seg_start:seg_end]
            yvals = spec.data.y[seg_start:seg_end] * ctx.animator.phase_y
            if spec.is_stepped:
                xvals, yvals = step_vertices(xvals, yvals)
            px, py = ctx.to_pixels(xvals, yvals)
            if px.size >= 2:
                if px.size > plot_w and not spec.is_stepped:
                    px, py = _downsample_in_rect(px, py, ctx.plot_rect, mode="lines")
                draw_polyline(ctx.canvas, px, py, color=spec.style.color, width=spec.style.line_width)
            if spec.style.mode == "lines+markers":
                draw_markers(ctx.canvas, px, py, color=spec.style.color, size=max(2, spec.style.marker_size))


class ScatterChartRenderer:
    kind: RendererKind = "scatter"

    def __init__(self, series: Sequence[Series]) -> None:
        self.series = list(series)

    def draw_data(self, ctx: RenderContext) -> None:
        for spec in self.series:
            visible_mask = spec.live_mask() & (spec.data.x >= ctx.limits.xmin) & (spec.data.x <= ctx.limits.xmax)
            visible_mask = _leading_fraction(visible_mask, ctx.animator.phase_x)
            xvals = spec.data.x[visible_mask]
            yvals = spec.data.y[visible_mask] * ctx.animator.phase_y
            if xvals.size == 0:
                continue
            px, py = ctx.to_pixels(xvals, yvals)
            if px.size > ctx.plot_rect[2]:
                px, py = _downsample_in_rect(px, py, ctx.plot_rect, mode="markers")
            draw_markers(ctx.canvas, px, py, color=spec.style.color, size=max(2, spec.style.marker_size))


def _clip_view(canvas: np.ndarray, rect: tuple[int, int, int, int]) -> np.ndarray:
    x0, y0, w, h = rect
    return canvas[y0 : y0 + h, x0 : x0 + w]


def _downsample_in_rect(
    px: np.ndarray,
    py: np.ndarray,
    rect: tuple[int, int, int, int],
    *,
    mode: str,
) -> tuple[np.ndarray, np.ndarray]:
    x0, y0, w, _ = rect
    lx, ly = downsample_by_pixel_column(px - x0, py - y0, width=w, mode=mode)
    return lx + x0, ly + y0


def _leading_fraction(mask: np.ndarray, phase_x: float) -> np.ndarray:
    """Keep the first ``ceil(n * phase_x)`` set entries of ``mask``, in index order."""
    idx = np.flatnonzero(mask)
    keep = int(math.ceil(idx.size * max(0.0, min(1.0, phase_x))))
    out = np.zeros_like(mask, dtype=bool)
    out[idx[:keep]] = True
    return out


def _unique_key(existing: dict[str, FillPath], key: str) -> str:
    candidate = key
    n = 2
    while candidate in existing:
        candidate = f"{key} #{n}"
        n += 1
    return candidate
