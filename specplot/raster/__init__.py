from .canvas import draw_hline, draw_vline, fill_rect, new_canvas
from .draw_lines import draw_polyline
from .draw_markers import draw_markers
from .draw_text import draw_text, text_size

__all__ = [
    "draw_hline",
    "draw_markers",
    "draw_polyline",
    "draw_text",
    "draw_vline",
    "fill_rect",
    "new_canvas",
    "text_size",
]
