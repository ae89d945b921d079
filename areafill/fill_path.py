from __future__ import annotations

from dataclasses import dataclass, field
import logging

import numpy as np

from areafill.boundary import BoundarySeries, BoundarySpec
from areafill.scales import PlotTransform
from areafill.series import LineMode, Series


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class VisibleRange:
    start: int
    count: int

    @property
    def end(self) -> int:
        return self.start + max(0, self.count)


@dataclass(frozen=True)
class FillPath:
    """Closed screen-space polygon; the last point implicitly joins the first."""

    points: np.ndarray = field(default_factory=lambda: np.empty((0, 2), dtype=np.float64))
    closed: bool = True

    def __len__(self) -> int:
        return int(self.points.shape[0])

    @property
    def is_empty(self) -> bool:
        return self.points.shape[0] == 0

    def as_tuples(self) -> list[tuple[float, float]]:
        return [(float(px), float(py)) for px, py in self.points.tolist()]


EMPTY_PATH = FillPath()


def compute_visible_range(series: Series, xmin: float, xmax: float, phase_x: float = 1.0) -> VisibleRange:
    """Index window covering ``[xmin, xmax]`` on a series with ascending x.

    The window starts at the last sample at or left of ``xmin`` and ends at
    the first sample at or right of ``xmax`` so fills reach the plot edges.
    """
    mask = series.live_mask()
    indices = np.flatnonzero(mask)
    if indices.size == 0:
        return VisibleRange(start=0, count=0)
    xs = series.data.x[indices]
    lo = int(np.searchsorted(xs, xmin, side="right")) - 1
    hi = int(np.searchsorted(xs, xmax, side="left"))
    start = int(indices[max(0, lo)])
    end = int(indices[min(indices.size - 1, hi)])
    count = int((end - start) * max(0.0, min(1.0, phase_x)))
    return VisibleRange(start=start, count=max(0, count))


def build_fill_path(
    primary: Series,
    boundary: BoundarySpec,
    visible: VisibleRange,
    phase_y: float,
    line_mode: LineMode | None,
    transform: PlotTransform,
) -> FillPath:
    """Build the closed polygon between ``primary`` and its fill boundary.

    The primary series is walked forward across the visible window; a
    boundary series is then walked backward so the region closes without
    self-intersection. A flat baseline contributes only the two anchors at
    the window edges. Samples that do not resolve are skipped, never
    interpolated. Returns an empty path when the window's first sample is
    missing.
    """
    stepped = (line_mode if line_mode is not None else primary.line_mode) == "stepped"
    start = visible.start
    end = visible.end
    fill_series = boundary.series if isinstance(boundary, BoundarySeries) else None
    baseline = boundary.fallback if isinstance(boundary, BoundarySeries) else boundary.value

    first = primary.sample_at(start)
    if first is None:
        LOGGER.debug("no sample at index %d for %r; fill skipped", start, primary.label)
        return EMPTY_PATH

    points: list[tuple[float, float]] = []

    def emit(x: float, y: float) -> None:
        points.append(transform.apply(x, y))

    def anchor(index: int, x: float) -> None:
        edge = fill_series.sample_at(index) if fill_series is not None else None
        if edge is not None:
            emit(x, edge.y * phase_y)
        else:
            emit(x, baseline)

    anchor(start, first.x)
    emit(first.x, first.y * phase_y)

    for index in range(start + 1, end + 1):
        current = primary.sample_at(index)
        if current is None:
            continue
        if stepped:
            prev = primary.sample_at(index - 1)
            if prev is None:
                continue
            emit(current.x, prev.y * phase_y)
        emit(current.x, current.y * phase_y)

    last = primary.sample_at(end)
    if last is not None:
        anchor(end, last.x)

    if fill_series is not None:
        for index in range(end - 1, start, -1):
            current = fill_series.sample_at(index)
            if current is None:
                continue
            if stepped:
                prev = fill_series.sample_at(index + 1)
                if prev is None:
                    continue
                emit(current.x, prev.y * phase_y)
            emit(current.x, current.y * phase_y)

    return FillPath(points=np.asarray(points, dtype=np.float64).reshape(-1, 2))
