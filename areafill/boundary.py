from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, TypeAlias

from areafill.scales import DataLimits
from areafill.series import Series


@dataclass(frozen=True)
class FlatBaseline:
    value: float = 0.0


@dataclass(frozen=True)
class BoundarySeries:
    series: Series
    # Used for an anchor whose boundary sample does not resolve.
    fallback: float = 0.0


BoundarySpec: TypeAlias = FlatBaseline | BoundarySeries
FillMinProvider: TypeAlias = Callable[[Series, DataLimits], "float | None"]


def default_fill_min(series: Series, limits: DataLimits) -> float | None:
    """Fill to the zero line, or to the axis edge nearest zero when zero is off-screen."""
    y_range = series.y_range()
    if y_range is None:
        return None
    ymin, ymax = y_range
    if ymax > 0.0 and ymin < 0.0:
        return 0.0
    if ymin >= 0.0:
        return max(limits.ymin, 0.0)
    return min(limits.ymax, 0.0)


def resolve_boundary(
    primary: Series,
    viewport: DataLimits,
    fill_min_provider: FillMinProvider = default_fill_min,
) -> BoundarySpec:
    fill = primary.style.fill
    if fill is not None and fill.boundary is not None:
        return BoundarySeries(series=fill.boundary)
    if fill is not None and fill.fill_min is not None:
        return FlatBaseline(value=float(fill.fill_min))
    value = fill_min_provider(primary, viewport)
    return FlatBaseline(value=0.0 if value is None else float(value))
