"""
PDF Styles Module.

Page geometry shared by the compositor. Page content is drawn on
matplotlib surfaces, so the PDF itself only needs sizes and metadata.
"""
from typing import Dict, Tuple

from reportlab.lib.pagesizes import A4, portrait

from labreport.reporting.figures.common import Orientation


# ============================================================================
# PAGE CONFIGURATION
# ============================================================================

# Canvas default before the first page is placed
DEFAULT_PAGE_SIZE = portrait(A4)

PAGE_SIZES: Dict[Orientation, Tuple[float, float]] = {
    orientation: orientation.page_size for orientation in Orientation
}

PDF_TITLE_PREFIX = "Report"


def page_size_mm(orientation: Orientation) -> Tuple[float, float]:
    """(width, height) of an A4 page in millimetres."""
    return orientation.size_mm
