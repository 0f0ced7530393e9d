from .canvas import ClipRect, draw_hline, draw_pixel, draw_vline, fill_rect, new_canvas
from .draw_lines import draw_line
from .draw_markers import draw_disc
from .draw_text import draw_text, text_size

__all__ = [
    "ClipRect",
    "draw_disc",
    "draw_hline",
    "draw_line",
    "draw_pixel",
    "draw_text",
    "draw_vline",
    "fill_rect",
    "new_canvas",
    "text_size",
]
