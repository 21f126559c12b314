"""
Common utilities and configuration for report page surfaces.

Every printed page is drawn as one matplotlib Figure sized to its A4
orientation. Shared by all page builders - single source of truth for
fonts, colors and table styling. Pure matplotlib, no Streamlit.
"""
import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

import matplotlib
from matplotlib import font_manager
from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure
from reportlab.lib.pagesizes import A4, landscape, portrait
from reportlab.lib.units import mm

from labreport.config import Config

logger = logging.getLogger(__name__)


# ============================================================================
# CONFIGURATION
# ============================================================================

MM_PER_INCH = 25.4

# Default surface resolution; the compositor captures at DPI * scale
DPI = 100

# Artists carrying this gid are on-screen only and never captured
CAPTURE_EXCLUDE_GID = "capture-exclude"

FONT_SIZE = 8
HEADING_SIZE = 10

COLORS = {
    "text": "#000000",
    "muted": "#4B5563",
    "border": "#000000",
    "header_bg": "#F3F4F6",
    "button": "#3B82F6",
}


class Orientation(str, Enum):
    PORTRAIT = "p"
    LANDSCAPE = "l"

    @property
    def page_size(self) -> Tuple[float, float]:
        """(width, height) of the A4 page in points."""
        return portrait(A4) if self is Orientation.PORTRAIT else landscape(A4)

    @property
    def size_mm(self) -> Tuple[float, float]:
        """(width, height) of the A4 page in millimetres."""
        width, height = self.page_size
        return round(width / mm, 1), round(height / mm, 1)


def _register_bangla_font() -> Optional[str]:
    """Register the configured Bengali TTF with matplotlib, return its family."""
    path = Config.BANGLA_FONT_PATH
    if not path:
        return None
    if not os.path.exists(path):
        logger.warning("[Fonts] BANGLA_FONT_PATH does not exist: %s", path)
        return None
    font_manager.fontManager.addfont(path)
    family = font_manager.FontProperties(fname=path).get_name()
    logger.info("[Fonts] Registered Bengali font %s", family)
    return family


BANGLA_FONT = _register_bangla_font()
FONT_FAMILY = [BANGLA_FONT, "DejaVu Sans"] if BANGLA_FONT else ["DejaVu Sans"]
matplotlib.rcParams["font.family"] = FONT_FAMILY


@dataclass
class FigureConfig:
    """Configuration for page surfaces."""
    dpi: int = DPI
    font_size: int = FONT_SIZE
    heading_size: int = HEADING_SIZE


def new_page_figure(orientation: Orientation, config: Optional[FigureConfig] = None) -> Figure:
    """Blank white Figure the size of an A4 page in ``orientation``.

    The Agg canvas is attached so the figure can be drawn and captured
    without pyplot's global figure registry.
    """
    config = config or FigureConfig()
    width_mm, height_mm = orientation.size_mm
    fig = Figure(figsize=(width_mm / MM_PER_INCH, height_mm / MM_PER_INCH), dpi=config.dpi)
    fig.patch.set_facecolor("white")
    FigureCanvasAgg(fig)
    return fig


def add_text(fig: Figure, x: float, y: float, text: str, size: Optional[int] = None,
             ha: str = "left", va: str = "top", weight: str = "normal", **kwargs):
    """Place text in figure-fraction coordinates (origin bottom-left)."""
    kwargs.setdefault("color", COLORS["text"])
    return fig.text(x, y, text, ha=ha, va=va, fontsize=size or FONT_SIZE,
                    weight=weight, **kwargs)


def add_screen_only_button(fig: Figure, label: str = "Download PDF"):
    """Overlay an on-screen control that is stripped from captured pages."""
    return fig.text(
        0.98, 0.99, label, ha="right", va="top", fontsize=FONT_SIZE,
        color="white", gid=CAPTURE_EXCLUDE_GID,
        bbox={"boxstyle": "round,pad=0.4", "facecolor": COLORS["button"], "edgecolor": "none"},
    )


def draw_table(
    fig: Figure,
    rect: Sequence[float],
    header: List[str],
    rows: List[List[str]],
    col_widths: Optional[List[float]] = None,
    font_size: Optional[int] = None,
    row_height: float = 1.6,
):
    """Draw a bordered table inside ``rect`` (left, bottom, width, height).

    Args:
        fig: Target page figure
        rect: Axes rectangle in figure fractions
        header: Column labels (may contain newlines)
        rows: Body cell text
        col_widths: Relative column widths (normalised to 1.0)
        font_size: Cell font size
        row_height: Vertical scale applied to every row

    Returns:
        The matplotlib Table.
    """
    ax = fig.add_axes(rect)
    ax.axis("off")

    if col_widths:
        total = float(sum(col_widths))
        col_widths = [w / total for w in col_widths]

    # Samples may order fewer parameters than the header lists
    width = len(header)
    rows = [list(row[:width]) + [""] * (width - len(row)) for row in rows]

    table = ax.table(
        cellText=rows or [[""] * width],
        colLabels=header,
        colWidths=col_widths,
        loc="upper center",
        cellLoc="center",
    )
    table.auto_set_font_size(False)
    table.set_fontsize(font_size or FONT_SIZE)
    table.scale(1, row_height)

    cells = table.get_celld()
    # Rows grow with their tallest multi-line cell
    line_counts: Dict[int, int] = {}
    for (row, _col), cell in cells.items():
        lines = cell.get_text().get_text().count("\n") + 1
        line_counts[row] = max(line_counts.get(row, 1), lines)

    for (row, _col), cell in cells.items():
        cell.set_edgecolor(COLORS["border"])
        cell.set_linewidth(0.5)
        cell.set_height(cell.get_height() * line_counts[row])
        if row == 0:
            cell.set_facecolor(COLORS["header_bg"])
            cell.set_text_props(weight="bold")
    return table
