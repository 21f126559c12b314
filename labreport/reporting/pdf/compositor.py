"""
PDF Compositor Module.

Captures rendered page surfaces as raster images and appends them, in
order, to a single multi-page PDF. Each page keeps its own orientation;
images are scaled to fit the page with their aspect ratio preserved and
centered with equal margins.

Capture is sequential. All surfaces are checked before anything is
written so a missing page aborts the run without a partial document.
"""
import logging
import time
from dataclasses import dataclass
from io import BytesIO
from typing import List, Optional, Sequence

from matplotlib.figure import Figure
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas as rl_canvas

from labreport.errors import ReportGenerationError
from labreport.reporting.figures.common import CAPTURE_EXCLUDE_GID, Orientation
from .styles import DEFAULT_PAGE_SIZE, PAGE_SIZES, page_size_mm

logger = logging.getLogger("labreport.Compositor")


@dataclass
class RasterImage:
    """PNG capture of one page surface; size in pixels."""
    data: bytes
    width: int
    height: int


@dataclass
class PageSurface:
    """One physical page waiting to be captured."""
    section: str                    # "cover", "invoice" or a sample type
    orientation: Orientation
    figure: Optional[Figure]


@dataclass(frozen=True)
class Placement:
    """Image position and size on the page, in millimetres."""
    x: float
    y: float
    width: float
    height: float


# ============================================================================
# CAPTURE
# ============================================================================

def _excluded_artists(surface: Figure) -> list:
    return [
        artist for artist in surface.findobj(lambda a: a.get_gid() == CAPTURE_EXCLUDE_GID)
        if artist.get_visible()
    ]


def rasterize(surface: Figure, scale: float = 2.0, dpi: Optional[float] = None) -> RasterImage:
    """Render ``surface`` to a PNG at ``dpi * scale``.

    On-screen controls tagged with the capture-exclusion gid are hidden
    for the capture and restored afterwards, even if rendering fails.

    Args:
        surface: Page figure with an attached canvas
        scale: Resolution multiplier over the surface dpi
        dpi: Base resolution; defaults to the figure's own dpi

    Returns:
        RasterImage with PNG bytes and pixel size.
    """
    if surface is None:
        raise ReportGenerationError("Page surface is not available")

    dpi = dpi or surface.dpi
    hidden = _excluded_artists(surface)
    for artist in hidden:
        artist.set_visible(False)
    try:
        # Full synchronous draw so text and table layout are final before capture
        surface.canvas.draw()
        buffer = BytesIO()
        surface.savefig(buffer, format="png", dpi=dpi * scale, facecolor="white", edgecolor="none")
    finally:
        for artist in hidden:
            artist.set_visible(True)

    data = buffer.getvalue()
    width, height = ImageReader(BytesIO(data)).getSize()
    return RasterImage(data=data, width=int(width), height=int(height))


# ============================================================================
# PLACEMENT
# ============================================================================

def fit_image(image_width: float, image_height: float, orientation: Orientation) -> Placement:
    """Scale an image to fit the page, preserving aspect ratio, centered.

    Args:
        image_width: Image width (any unit, only the ratio matters)
        image_height: Image height
        orientation: Target page orientation

    Returns:
        Placement in mm; offsets are never negative.
    """
    page_width, page_height = page_size_mm(orientation)
    if image_width <= 0 or image_height <= 0:
        raise ReportGenerationError(f"Invalid image size: {image_width}x{image_height}")

    ratio = min(page_width / image_width, page_height / image_height)
    width = image_width * ratio
    height = image_height * ratio
    return Placement(
        x=max((page_width - width) / 2, 0.0),
        y=max((page_height - height) / 2, 0.0),
        width=width,
        height=height,
    )


# ============================================================================
# DOCUMENT
# ============================================================================

class PdfDocument:
    """Multi-page PDF assembled one raster page at a time.

    The canvas starts with a default portrait page. The first ``add_page``
    resizes that page in place, so the output never opens with a blank
    page; later calls start a new page in the requested orientation.
    """

    def __init__(self, title: str = "", author: str = ""):
        self._buffer = BytesIO()
        self._canvas = rl_canvas.Canvas(self._buffer, pagesize=DEFAULT_PAGE_SIZE)
        if title:
            self._canvas.setTitle(title)
        if author:
            self._canvas.setAuthor(author)
        self.orientations: List[Orientation] = []
        self._closed = False

    @property
    def page_count(self) -> int:
        return len(self.orientations)

    def add_page(self, image: RasterImage, orientation: Orientation) -> Placement:
        """Append ``image`` as the next page."""
        if self._closed:
            raise ReportGenerationError("Cannot add pages to a finished document")

        if self.orientations:
            self._canvas.showPage()
        self._canvas.setPageSize(PAGE_SIZES[orientation])

        placement = fit_image(image.width, image.height, orientation)
        self._canvas.drawImage(
            ImageReader(BytesIO(image.data)),
            placement.x * mm,
            placement.y * mm,
            width=placement.width * mm,
            height=placement.height * mm,
        )
        self.orientations.append(orientation)
        return placement

    def to_bytes(self) -> bytes:
        """Finish the document and return the PDF bytes."""
        if not self._closed:
            if not self.orientations:
                raise ReportGenerationError("Cannot save a PDF without pages")
            self._canvas.save()
            self._closed = True
        return self._buffer.getvalue()


def compose_pdf(
    pages: Sequence[PageSurface],
    scale: float = 2.0,
    dpi: Optional[float] = None,
    timeout_s: Optional[float] = None,
    title: str = "",
    author: str = "",
) -> PdfDocument:
    """Capture ``pages`` in order into a new PdfDocument.

    Args:
        pages: Ordered page surfaces
        scale: Capture resolution multiplier
        dpi: Base capture resolution
        timeout_s: Optional time budget for the whole run
        title: PDF title metadata
        author: PDF author metadata

    Returns:
        The document, not yet finalised.

    Raises:
        ReportGenerationError: If a surface is missing or the budget runs out.
    """
    missing = [f"{i + 1} ({page.section})" for i, page in enumerate(pages) if page.figure is None]
    if missing:
        raise ReportGenerationError(f"Page surfaces not available: {', '.join(missing)}")
    if not pages:
        raise ReportGenerationError("No pages to compose")

    started = time.monotonic()
    document = PdfDocument(title=title, author=author)
    section_pages = {}

    for index, page in enumerate(pages):
        if timeout_s and time.monotonic() - started > timeout_s:
            raise ReportGenerationError(
                f"PDF generation exceeded {timeout_s:g}s after {document.page_count} pages"
            )

        image = rasterize(page.figure, scale=scale, dpi=dpi)
        document.add_page(image, page.orientation)

        if page.section == "cover":
            logger.info("[PDF] Cover added")
        elif page.section == "invoice":
            logger.info("[PDF] Invoice added")
        else:
            section_pages[page.section] = section_pages.get(page.section, 0) + 1
            logger.debug("[PDF] %s page %d added", page.section, section_pages[page.section])

        # Last page of a section run
        next_section = pages[index + 1].section if index + 1 < len(pages) else None
        if page.section in section_pages and next_section != page.section:
            logger.info("[PDF] %s section processed (%d pages)", page.section, section_pages[page.section])

    logger.info("[PDF] %d pages composed in %.2fs", document.page_count, time.monotonic() - started)
    return document
