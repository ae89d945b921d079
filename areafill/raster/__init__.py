from .canvas import draw_filled_rect, draw_hline, draw_vline, new_canvas
from .draw_lines import draw_polyline, step_vertices
from .draw_markers import draw_markers
from .fill_polygon import fill_polygon

__all__ = [
    "draw_filled_rect",
    "draw_hline",
    "draw_markers",
    "draw_polyline",
    "draw_vline",
    "fill_polygon",
    "new_canvas",
    "step_vertices",
]
