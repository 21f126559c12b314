"""
Page surfaces for printed reports.
"""
from .common import (
    CAPTURE_EXCLUDE_GID,
    DPI,
    Orientation,
    FigureConfig,
    new_page_figure,
    add_text,
    add_screen_only_button,
    draw_table,
)

__all__ = [
    "CAPTURE_EXCLUDE_GID",
    "DPI",
    "Orientation",
    "FigureConfig",
    "new_page_figure",
    "add_text",
    "add_screen_only_button",
    "draw_table",
]
