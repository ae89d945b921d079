from __future__ import annotations

import unittest

import numpy as np

from areafill import PlotDataError, figure
from areafill.adapters import normalize_xy
from areafill.figure import Axes
from areafill.renderers import RenderContext
from areafill.scales import build_transform
from areafill.series import FillGradient, Series, SeriesStyle


RED = np.asarray([255, 0, 0], dtype=np.uint8)
X = [0.0, 1.0, 2.0, 3.0, 4.0]
UPPER = [4.0, 5.0, 6.0, 5.0, 4.0]
LOWER = [2.0, 2.0, 2.0, 2.0, 2.0]


def _pixel(ax: Axes, frame: np.ndarray, x: float, y: float) -> np.ndarray:
    limits = ax.last_limits()
    rect = ax.last_plot_rect()
    assert limits is not None and rect is not None
    x0, y0, w, h = rect
    transform = build_transform(limits, w, h).to_screen(h).translated(x0, y0)
    px, py = transform.apply(x, y)
    return frame[int(round(py)), int(round(px)), :3]


def _band(**kwargs) -> tuple[Axes, np.ndarray]:
    fig = figure(width=400, height=300)
    ax = fig.axes()
    ax.fill_between(
        x=X,
        y1=UPPER,
        y2=LOWER,
        label="band",
        color=(0, 255, 0),
        fill_color=(255, 0, 0),
        fill_alpha=1.0,
        **kwargs,
    )
    return ax, fig.to_rgba()


class FigureFillTests(unittest.TestCase):
    def test_fill_between_paints_only_between_series(self) -> None:
        ax, frame = _band()
        self.assertEqual(frame.shape, (300, 400, 4))
        self.assertEqual(frame.dtype, np.uint8)
        self.assertTrue(np.array_equal(_pixel(ax, frame, 2.0, 4.0), RED))
        self.assertTrue(np.array_equal(_pixel(ax, frame, 0.5, 3.0), RED))
        self.assertFalse(np.array_equal(_pixel(ax, frame, 0.5, 5.9), RED))
        self.assertFalse(np.array_equal(_pixel(ax, frame, 2.0, 1.9), RED))

    def test_fill_between_records_boundary_path(self) -> None:
        ax, _ = _band()
        paths = ax.last_fill_paths()
        self.assertEqual(list(paths), ["band"])
        self.assertEqual(len(paths["band"]), 2 * (4 + 1))
        self.assertEqual(len(ax.series), 2)

    def test_stepped_band_adds_corner_points(self) -> None:
        ax, _ = _band(stepped=True)
        # start anchors + 2 per forward step + end anchor + 2 per interior backward step
        self.assertEqual(len(ax.last_fill_paths()["band"]), 2 + 2 * 4 + 1 + 2 * 3)

    def test_render_is_deterministic(self) -> None:
        fig = figure(width=200, height=120)
        ax = fig.axes()
        ax.fill_between(x=X, y1=UPPER, y2=LOWER, gradient=FillGradient(top=(255, 0, 0, 255), bottom=(0, 0, 255, 255)))
        ax.bar(x=X, y=[1.0, -1.0, 2.0, -2.0, 1.0])
        ax.scatter(x=X, y=UPPER)
        self.assertTrue(np.array_equal(fig.to_rgba(), fig.to_rgba()))

    def test_zero_phase_collapses_fill(self) -> None:
        fig = figure(width=400, height=300)
        ax = fig.axes()
        ax.fill_between(x=X, y1=UPPER, y2=LOWER, color=(0, 255, 0), fill_color=(255, 0, 0), fill_alpha=1.0)
        ax.set_animation_phase(phase_y=0.0)
        frame = fig.to_rgba()
        red = np.all(frame[:, :, :3] == RED.reshape(1, 1, 3), axis=2)
        self.assertFalse(np.any(red))

    def test_half_phase_shrinks_fill(self) -> None:
        _, full = _band()
        fig = figure(width=400, height=300)
        ax = fig.axes()
        ax.fill_between(x=X, y1=UPPER, y2=LOWER, color=(0, 255, 0), fill_color=(255, 0, 0), fill_alpha=1.0)
        ax.set_animation_phase(phase_y=0.5)
        half = fig.to_rgba()
        count_full = int(np.all(full[:, :, :3] == RED.reshape(1, 1, 3), axis=2).sum())
        count_half = int(np.all(half[:, :, :3] == RED.reshape(1, 1, 3), axis=2).sum())
        self.assertGreater(count_half, 0)
        self.assertLess(count_half, count_full)

    def test_plot_fill_uses_flat_baseline(self) -> None:
        fig = figure(width=300, height=200)
        ax = fig.axes()
        ax.plot(x=X, y=UPPER, fill=True, label="area")
        fig.to_rgba()
        path = ax.last_fill_paths()["area"]
        self.assertEqual(len(path), 4 + 3)
        limits = ax.last_limits()
        rect = ax.last_plot_rect()
        assert limits is not None and rect is not None
        x0, y0, w, h = rect
        baseline = build_transform(limits, w, h).to_screen(h).translated(x0, y0).apply(0.0, max(limits.ymin, 0.0))
        self.assertAlmostEqual(float(path.points[0, 1]), baseline[1])

    def test_scalar_boundary_extends_limits(self) -> None:
        fig = figure(width=300, height=200)
        ax = fig.axes()
        ax.fill_between(x=X, y1=UPPER, y2=-3.0)
        fig.to_rgba()
        limits = ax.last_limits()
        assert limits is not None
        self.assertLess(limits.ymin, -3.0)

    def test_viewport_limits_fill_window(self) -> None:
        fig = figure(width=300, height=200)
        ax = fig.axes()
        ax.fill_between(x=X, y1=UPPER, y2=LOWER, label="band")
        ax.set_viewport(xmin=1.0, xmax=3.0)
        fig.to_rgba()
        self.assertEqual(len(ax.last_fill_paths()["band"]), 2 * (2 + 1))
        ax.pan_viewport(1.0)
        fig.to_rgba()
        limits = ax.last_limits()
        assert limits is not None
        self.assertAlmostEqual(limits.xmin, 2.0)

    def test_boundary_length_mismatch_raises(self) -> None:
        ax = figure(width=200, height=120).axes()
        with self.assertRaises(PlotDataError):
            ax.fill_between(y1=[1.0, 2.0, 3.0], y2=[0.0, 0.0])

    def test_invalid_arguments_raise(self) -> None:
        fig = figure(width=200, height=120)
        ax = fig.axes()
        with self.assertRaises(ValueError):
            ax.set_animation_phase(phase_y=1.5)
        with self.assertRaises(ValueError):
            ax.fill_between(y1=[1.0, 2.0], fill_alpha=2.0)
        with self.assertRaises(PlotDataError):
            ax.plot(y=[1.0, 2.0], mode="area")
        with self.assertRaises(PlotDataError):
            ax.pan_viewport(1.0)
        with self.assertRaises(PlotDataError):
            fig.to_rgba()
        with self.assertRaises(PlotDataError):
            fig.axes()

    def test_draw_order_controls_layering(self) -> None:
        fig = figure(width=300, height=200)
        ax = fig.axes()
        ax.bar(x=X, y=[5.0] * 5, color=(0, 0, 255), width=1.0)
        ax.fill_between(x=X, y1=UPPER, y2=LOWER, color=(0, 255, 0), fill_color=(255, 0, 0), fill_alpha=1.0)
        behind = fig.to_rgba()
        self.assertTrue(np.array_equal(_pixel(ax, behind, 2.0, 3.0), RED))
        ax.set_draw_order(["line", "bar"])
        front = fig.to_rgba()
        self.assertTrue(np.array_equal(_pixel(ax, front, 2.0, 3.0), np.asarray([0, 0, 255], dtype=np.uint8)))

    def test_horizontal_phase_trims_line_with_fill(self) -> None:
        fig = figure(width=400, height=300)
        ax = fig.axes()
        ax.fill_between(y1=[1.0, 3.0, 2.0, 4.0, 3.0], y2=0.0, color=(255, 0, 0), fill_color=(0, 0, 255), fill_alpha=1.0)
        full = fig.to_rgba()
        full_cols = np.nonzero(np.all(full[:, :, :3] == RED.reshape(1, 1, 3), axis=2))[1]
        ax.set_animation_phase(phase_x=0.5)
        half = fig.to_rgba()
        path = ax.last_fill_paths()["series 1"]
        self.assertEqual(len(path), 2 + 3)
        half_cols = np.nonzero(np.all(half[:, :, :3] == RED.reshape(1, 1, 3), axis=2))[1]
        self.assertGreater(half_cols.size, 0)
        self.assertLessEqual(int(half_cols.max()), float(path.points[:, 0].max()) + 0.5)
        self.assertLess(int(half_cols.max()), int(full_cols.max()))

    def test_horizontal_phase_trims_bars_and_scatter(self) -> None:
        fig = figure(width=400, height=300)
        ax = fig.axes()
        ax.bar(x=[0.0, 1.0, 2.0, 3.0], y=[5.0] * 4, color=(0, 0, 255), width=0.5)
        ax.scatter(x=[0.0, 1.0, 2.0, 3.0], y=[6.0] * 4, color=(0, 255, 0), size=3)
        ax.set_animation_phase(phase_x=0.5)
        frame = fig.to_rgba()
        blue = np.asarray([0, 0, 255], dtype=np.uint8)
        green = np.asarray([0, 255, 0], dtype=np.uint8)
        self.assertTrue(np.array_equal(_pixel(ax, frame, 1.0, 2.5), blue))
        self.assertFalse(np.array_equal(_pixel(ax, frame, 2.0, 2.5), blue))
        self.assertFalse(np.array_equal(_pixel(ax, frame, 3.0, 2.5), blue))
        self.assertTrue(np.array_equal(_pixel(ax, frame, 1.0, 6.0), green))
        self.assertFalse(np.array_equal(_pixel(ax, frame, 3.0, 6.0), green))

    def test_clear_viewport_restores_data_limits(self) -> None:
        fig = figure(width=300, height=200)
        ax = fig.axes()
        ax.fill_between(x=X, y1=UPPER, y2=LOWER, label="band")
        ax.set_viewport(xmin=1.0, xmax=3.0)
        fig.to_rgba()
        limits = ax.last_limits()
        assert limits is not None
        self.assertEqual((limits.xmin, limits.xmax), (1.0, 3.0))
        ax.clear_viewport()
        fig.to_rgba()
        limits = ax.last_limits()
        assert limits is not None
        self.assertEqual((limits.xmin, limits.xmax), (0.0, 4.0))
        self.assertEqual(len(ax.last_fill_paths()["band"]), 2 * (4 + 1))
        with self.assertRaises(PlotDataError):
            ax.pan_viewport(1.0)

    def test_registered_bubble_renderer_is_invoked(self) -> None:
        created: list[list[Series]] = []
        contexts: list[RenderContext] = []

        class BubbleRenderer:
            kind = "bubble"

            def __init__(self, series) -> None:
                created.append(list(series))

            def draw_data(self, ctx: RenderContext) -> None:
                contexts.append(ctx)

        fig = figure(width=300, height=200)
        ax = fig.axes()
        bubbles = Series(data=normalize_xy(y=[1.0, 2.0, 3.0]), style=SeriesStyle(mode="bubbles"), label="b")
        ax.plot(y=[1.0, 2.0, 3.0])
        ax.register_renderer("bubble", BubbleRenderer).add_series(bubbles)
        fig.to_rgba()
        self.assertEqual(len(created), 1)
        self.assertEqual(len(created[0]), 1)
        self.assertIs(created[0][0], bubbles)
        self.assertEqual(len(contexts), 1)
        self.assertEqual(contexts[0].plot_rect, ax.last_plot_rect())
        with self.assertRaises(ValueError):
            ax.register_renderer("pie", BubbleRenderer)  # type: ignore[arg-type]


if __name__ == "__main__":
    unittest.main()
