"""Graphics module for the Farmer Harvest field."""

from harvest.graphics.renderer import FieldRenderer, state_labels
from harvest.graphics.primitives import (
    new_buffer,
    fill,
    draw_rect,
    draw_circle,
    draw_ellipse,
    draw_polygon,
    draw_line,
    draw_polyline,
    draw_text,
)

__all__ = [
    "FieldRenderer",
    "state_labels",
    "new_buffer",
    "fill",
    "draw_rect",
    "draw_circle",
    "draw_ellipse",
    "draw_polygon",
    "draw_line",
    "draw_polyline",
    "draw_text",
]
