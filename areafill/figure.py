from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

import numpy as np

from areafill.adapters import normalize_band, normalize_xy
from areafill.boundary import FillMinProvider, default_fill_min
from areafill.combined import CombinedRenderer, RendererFactory, default_registry, validate_draw_order
from areafill.config import ChartConfig
from areafill.errors import PlotDataError
from areafill.fill_path import FillPath
from areafill.raster import draw_filled_rect, draw_hline, draw_vline, new_canvas
from areafill.renderers import Animator, LineChartRenderer, RenderContext, RendererKind
from areafill.scales import DataLimits, build_transform, compute_limits
from areafill.series import FillGradient, FillStyle, LineMode, Series, SeriesStyle


Color = tuple[int, int, int] | tuple[int, int, int, int]


def _coerce_color(color: Color, alpha: float) -> tuple[int, int, int, int]:
    if len(color) == 3:
        r, g, b = color
        a = int(max(0.0, min(1.0, alpha)) * 255)
        return (r, g, b, a)
    r, g, b, a = color
    out_a = int(max(0.0, min(1.0, alpha)) * a)
    return (r, g, b, out_a)


def _line_mode(stepped: bool) -> LineMode:
    return "stepped" if stepped else "linear"


@dataclass
class Axes:
    figure: "Figure"

    _series: list[Series] = field(default_factory=list)
    _viewport_x: tuple[float, float] | None = None
    _animator: Animator | None = None
    _draw_order: tuple[RendererKind, ...] | None = None
    _extra_renderers: dict[RendererKind, RendererFactory] = field(default_factory=dict)
    fill_min_provider: FillMinProvider = default_fill_min

    # plot region gutters
    _gutter_left: int = 16
    _gutter_right: int = 16
    _gutter_top: int = 16
    _gutter_bottom: int = 16

    _last_limits: DataLimits | None = None
    _last_plot_rect_px: tuple[int, int, int, int] | None = None
    _last_fill_paths: dict[str, FillPath] = field(default_factory=dict)

    @property
    def series(self) -> tuple[Series, ...]:
        return tuple(self._series)

    @property
    def animator(self) -> Animator:
        return self._animator if self._animator is not None else self.figure.config.animation

    def _add(self, series: Series) -> Series:
        self._series.append(series)
        return series

    def scatter(
        self,
        y: Any = None,
        *,
        x: Any = None,
        data: Any = None,
        label: str | None = None,
        color: Color = (62, 149, 255),
        size: int = 2,
        alpha: float = 1.0,
    ) -> "Axes":
        style = SeriesStyle(mode="markers", color=_coerce_color(color, alpha), marker_size=max(1, size))
        self._add(Series(data=normalize_xy(y=y, x=x, data=data), style=style, label=label))
        return self

    def plot(
        self,
        y: Any = None,
        *,
        x: Any = None,
        data: Any = None,
        label: str | None = None,
        mode: str = "line",
        stepped: bool = False,
        color: Color = (255, 165, 0),
        width: int = 1,
        alpha: float = 1.0,
        fill: FillStyle | bool | None = None,
    ) -> "Axes":
        if mode not in {"line", "lines", "lines+markers"}:
            raise PlotDataError(f"unsupported plot mode: {mode}")
        if fill is True:
            fill = FillStyle(color=self.figure.config.fill_color, alpha=self.figure.config.fill_alpha)
        elif fill is False:
            fill = None
        style = SeriesStyle(
            mode="lines+markers" if mode == "lines+markers" else "lines",
            color=_coerce_color(color, alpha),
            line_width=max(1, width),
            line_mode=_line_mode(stepped),
            fill=fill,
        )
        self._add(Series(data=normalize_xy(y=y, x=x, data=data), style=style, label=label))
        return self

    def fill_between(
        self,
        y1: Any = None,
        y2: Any = 0.0,
        *,
        x: Any = None,
        data: Any = None,
        label: str | None = None,
        color: Color = (255, 165, 0),
        width: int = 1,
        fill_color: Color | None = None,
        fill_alpha: float | None = None,
        gradient: FillGradient | None = None,
        stepped: bool = False,
        draw_boundary: bool = True,
        boundary_color: Color | None = None,
    ) -> "Axes":
        """Plot ``y1`` and fill the region between it and ``y2``.

        A scalar ``y2`` is a flat baseline and ``None`` defers to
        ``fill_min_provider``. Anything else is a second series
        sampled at the same indices, plotted as its own line unless
        ``draw_boundary`` is false.
        """
        config = self.figure.config
        fill_rgba = config.fill_color if fill_color is None else _coerce_color(fill_color, 1.0)
        alpha = config.fill_alpha if fill_alpha is None else float(fill_alpha)
        if not 0.0 <= alpha <= 1.0:
            raise ValueError("fill_alpha must be in [0, 1]")
        line_mode = _line_mode(stepped)
        line_rgba = _coerce_color(color, 1.0)

        if y2 is None:
            primary_data = normalize_xy(y=y1, x=x, data=data)
            fill = FillStyle(color=fill_rgba, alpha=alpha, gradient=gradient)
        elif isinstance(y2, (int, float)) and not isinstance(y2, bool):
            primary_data = normalize_xy(y=y1, x=x, data=data)
            fill = FillStyle(color=fill_rgba, alpha=alpha, gradient=gradient, fill_min=float(y2))
        else:
            primary_data, boundary_data = normalize_band(y1, y2, x=x, data=data)
            boundary = Series(
                data=boundary_data,
                style=SeriesStyle(
                    mode="lines",
                    color=line_rgba if boundary_color is None else _coerce_color(boundary_color, 1.0),
                    line_width=max(1, width),
                    line_mode=line_mode,
                ),
                label=None if label is None else f"{label} (boundary)",
            )
            if draw_boundary:
                self._add(boundary)
            fill = FillStyle(color=fill_rgba, alpha=alpha, gradient=gradient, boundary=boundary)

        style = SeriesStyle(mode="lines", color=line_rgba, line_width=max(1, width), line_mode=line_mode, fill=fill)
        self._add(Series(data=primary_data, style=style, label=label))
        return self

    def bar(
        self,
        y: Any = None,
        *,
        x: Any = None,
        data: Any = None,
        label: str | None = None,
        color: Color = (110, 169, 255),
        width: float = 0.8,
        alpha: float = 1.0,
    ) -> "Axes":
        if width <= 0:
            raise ValueError("bar width must be > 0")
        style = SeriesStyle(mode="bars", color=_coerce_color(color, alpha), bar_width=float(width))
        self._add(Series(data=normalize_xy(y=y, x=x, data=data), style=style, label=label))
        return self

    def set_animation_phase(self, *, phase_x: float = 1.0, phase_y: float = 1.0) -> "Axes":
        self._animator = Animator(phase_x=float(phase_x), phase_y=float(phase_y))
        return self

    def set_draw_order(self, order: Sequence[str]) -> "Axes":
        validated = validate_draw_order(order)
        if validated:
            self._draw_order = validated
        return self

    def register_renderer(self, kind: RendererKind, factory: RendererFactory) -> "Axes":
        validate_draw_order([kind])
        self._extra_renderers[kind] = factory
        return self

    def add_series(self, series: Series) -> "Axes":
        """Add a prebuilt series, e.g. one drawn by a renderer from ``register_renderer``."""
        self._add(series)
        return self

    def set_viewport(self, *, xmin: float, xmax: float) -> "Axes":
        left = float(min(xmin, xmax))
        right = float(max(xmin, xmax))
        if right - left <= 1e-12:
            raise ValueError("viewport span must be > 0")
        self._viewport_x = (left, right)
        return self

    def clear_viewport(self) -> "Axes":
        self._viewport_x = None
        return self

    def pan_viewport(self, delta_x: float) -> "Axes":
        if self._viewport_x is None:
            raise PlotDataError("x viewport is not set")
        left, right = self._viewport_x
        delta = float(delta_x)
        self._viewport_x = (left + delta, right + delta)
        return self

    def last_limits(self) -> DataLimits | None:
        return self._last_limits

    def last_plot_rect(self) -> tuple[int, int, int, int] | None:
        return self._last_plot_rect_px

    def last_fill_paths(self) -> dict[str, FillPath]:
        return dict(self._last_fill_paths)

    def _plot_viewport(self) -> tuple[int, int, int, int]:
        left = min(self._gutter_left, max(2, self.figure.width // 8))
        right = min(self._gutter_right, max(2, self.figure.width // 8))
        top = min(self._gutter_top, max(2, self.figure.height // 8))
        bottom = min(self._gutter_bottom, max(2, self.figure.height // 8))
        width = self.figure.width - left - right
        height = self.figure.height - top - bottom
        if width <= 1 or height <= 1:
            raise PlotDataError("figure too small for plotting viewport")
        return left, top, width, height

    def _combined_limits(self) -> DataLimits:
        chunks_x: list[np.ndarray] = []
        chunks_y: list[np.ndarray] = []
        for spec in self._series:
            members = [spec]
            fill = spec.style.fill
            if fill is not None and fill.boundary is not None:
                members.append(fill.boundary)
            for member in members:
                live_mask = member.live_mask()
                if not np.any(live_mask):
                    continue
                chunks_x.append(member.data.x[live_mask])
                chunks_y.append(member.data.y[live_mask])
            if fill is not None and fill.fill_min is not None:
                chunks_y.append(np.asarray([fill.fill_min], dtype=np.float64))
            if spec.style.mode == "bars":
                half_width = max(1e-9, float(spec.style.bar_width) * 0.5)
                xvals = spec.data.x[spec.live_mask()]
                if xvals.size:
                    chunks_x.append(np.asarray([np.min(xvals) - half_width * 1.35, np.max(xvals) + half_width * 1.35]))
                chunks_y.append(np.zeros(1, dtype=np.float64))
        if not chunks_x:
            raise PlotDataError("series contains no finite points")
        return compute_limits(np.concatenate(chunks_x), np.concatenate(chunks_y))

    def _resolve_x_viewport(self, xmin: float, xmax: float) -> tuple[float, float]:
        if self._viewport_x is None:
            return (xmin, xmax)
        data_span = max(1e-12, xmax - xmin)
        requested_left, requested_right = self._viewport_x
        span = min(max(1e-12, requested_right - requested_left), data_span)
        start = max(xmin, min(xmax - span, requested_left))
        return (start, start + span)

    def render(self) -> np.ndarray:
        if not self._series:
            raise PlotDataError("cannot render empty axes")
        config = self.figure.config
        frame = new_canvas(self.figure.width, self.figure.height, color=config.background)
        plot_x0, plot_y0, plot_w, plot_h = self._plot_viewport()
        draw_filled_rect(
            frame,
            x0=plot_x0,
            y0=plot_y0,
            x1=plot_x0 + plot_w - 1,
            y1=plot_y0 + plot_h - 1,
            color=config.plot_background,
        )

        limits = self._combined_limits()
        xmin, xmax = self._resolve_x_viewport(limits.xmin, limits.xmax)
        limits = DataLimits(xmin=xmin, xmax=xmax, ymin=limits.ymin, ymax=limits.ymax)
        self._last_limits = limits
        self._last_plot_rect_px = (plot_x0, plot_y0, plot_w, plot_h)

        transform = build_transform(limits, width=plot_w, height=plot_h).to_screen(plot_h).translated(plot_x0, plot_y0)
        ctx = RenderContext(
            canvas=frame,
            transform=transform,
            limits=limits,
            plot_rect=(plot_x0, plot_y0, plot_w, plot_h),
            animator=self.animator,
        )
        registry = None
        if self._extra_renderers:
            registry = {**default_registry(), **self._extra_renderers}
        combined = CombinedRenderer(
            self._series,
            draw_order=self._draw_order or config.draw_order,
            registry=registry,
        )
        line_renderer = combined.renderer_for("line")
        if isinstance(line_renderer, LineChartRenderer):
            line_renderer.fill_min_provider = self.fill_min_provider
        combined.draw_data(ctx)
        self._last_fill_paths = dict(line_renderer.last_fill_paths) if isinstance(line_renderer, LineChartRenderer) else {}

        draw_hline(frame, plot_x0, plot_x0 + plot_w - 1, plot_y0 + plot_h - 1, config.axis_color)
        draw_vline(frame, plot_x0, plot_y0, plot_y0 + plot_h - 1, config.axis_color)
        return frame


@dataclass
class Figure:
    width: int = 1280
    height: int = 720
    config: ChartConfig = field(default_factory=ChartConfig)
    _axes: Axes | None = None

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("width and height must be > 0")

    def axes(self) -> Axes:
        if self._axes is not None:
            raise PlotDataError("figure supports a single axes")
        self._axes = Axes(figure=self)
        return self._axes

    def to_rgba(self) -> np.ndarray:
        if self._axes is None:
            raise PlotDataError("figure has no axes")
        return self._axes.render()
