from __future__ import annotations


class PlotDataError(ValueError):
    """Raised when user-supplied chart data cannot be plotted."""
