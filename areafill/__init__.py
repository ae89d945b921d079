from areafill.api import figure
from areafill.boundary import BoundarySeries, BoundarySpec, FlatBaseline, default_fill_min, resolve_boundary
from areafill.combined import CombinedRenderer
from areafill.config import ChartConfig, load_chart_config
from areafill.errors import PlotDataError
from areafill.figure import Axes, Figure
from areafill.fill_path import FillPath, VisibleRange, build_fill_path, compute_visible_range
from areafill.renderers import Animator
from areafill.scales import PlotTransform
from areafill.series import FillGradient, FillStyle, Sample, Series, SeriesStyle

__all__ = [
    "Animator",
    "Axes",
    "BoundarySeries",
    "BoundarySpec",
    "ChartConfig",
    "CombinedRenderer",
    "Figure",
    "FillGradient",
    "FillPath",
    "FillStyle",
    "FlatBaseline",
    "PlotDataError",
    "PlotTransform",
    "Sample",
    "Series",
    "SeriesStyle",
    "VisibleRange",
    "build_fill_path",
    "compute_visible_range",
    "default_fill_min",
    "figure",
    "load_chart_config",
    "resolve_boundary",
]
