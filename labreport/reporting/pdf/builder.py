"""
PDF Builder Module.

Orchestrates the construction of complete laboratory report PDFs.

Pages, in order:
1. Cover letter
2. Result sections, one per sample type in order of first appearance
   (government soil reports print three tables: per sample, per
   location, per map unit)
3. Invoice, unless the report is a government soil report

No grouping or pagination logic here - only document assembly.
"""
import logging
from pathlib import Path
from typing import List, Optional, Union

from labreport.config import InstituteConfig, ReportConfig
from labreport.errors import ReportGenerationError
from labreport.models import Report
from labreport.reporting.figures.common import Orientation
from labreport.reporting.pagination import ReportPlan, plan_report
from .compositor import PageSurface, compose_pdf
from .layout import build_cover_page, build_section_page, build_invoice_page
from .styles import PDF_TITLE_PREFIX


# Setup logger
logger = logging.getLogger("labreport.PDFBuilder")


def report_filename(report: Report) -> str:
    return f"report-{report.id}.pdf"


def build_report_pages(
    report: Report,
    institute: InstituteConfig,
    report_plan: Optional[ReportPlan] = None,
) -> List[PageSurface]:
    """Build every page surface of ``report`` in print order.

    Args:
        report: Fully populated report
        institute: Institute identity for headers and signatures
        report_plan: Precomputed plan; planned here when omitted

    Returns:
        Ordered page surfaces: cover, section pages, optional invoice.
    """
    report_plan = report_plan or plan_report(report)

    # === COVER ===
    pages = [PageSurface("cover", Orientation.PORTRAIT, build_cover_page(report, institute, report_plan))]

    # === SECTIONS ===
    for section in report_plan.sections:
        for page in section.pages():
            figure = build_section_page(report, institute, section, page)
            pages.append(PageSurface(section.sample_type.value, Orientation.LANDSCAPE, figure))

    # === INVOICE ===
    if report_plan.include_invoice:
        pages.append(PageSurface("invoice", Orientation.PORTRAIT, build_invoice_page(report, institute)))

    if len(pages) != report_plan.total_pages:
        raise ReportGenerationError(
            f"Built {len(pages)} pages but planned {report_plan.total_pages} for report {report.id}"
        )
    return pages


def generate_report_pdf(
    report: Report,
    institute: Optional[InstituteConfig] = None,
    output_dir: Optional[Union[str, Path]] = None,
    config: Optional[ReportConfig] = None,
) -> bytes:
    """Build the complete PDF for ``report``.

    Args:
        report: Fully populated report
        institute: Institute identity; read from the environment when omitted
        output_dir: When set, ``report-<id>.pdf`` is written there as the last step
        config: Rasterisation and time-budget options

    Returns:
        PDF bytes

    Raises:
        ReportGenerationError: On any failure; nothing is written to disk.
    """
    config = config or ReportConfig()
    institute = institute or InstituteConfig.from_env()

    try:
        report_plan = plan_report(report)
        pages = build_report_pages(report, institute, report_plan)
        document = compose_pdf(
            pages,
            scale=config.raster_scale,
            dpi=config.raster_dpi,
            timeout_s=config.timeout_s,
            title=f"{PDF_TITLE_PREFIX} {report.report_number or report.id}",
            author=config.author,
        )
        logger.info("[PDF] Saving %s (%d pages)", report_filename(report), document.page_count)
        pdf_bytes = document.to_bytes()
    except Exception as e:
        logger.error("[PDF] Error generating PDF for report %s: %s", report.id, e, exc_info=True)
        if isinstance(e, ReportGenerationError):
            raise
        raise ReportGenerationError(f"Failed to generate PDF: {e}") from e

    if output_dir:
        output_path = Path(output_dir) / report_filename(report)
        # Written beside the target and moved into place whole
        partial_path = output_path.with_name(output_path.name + ".part")
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            partial_path.write_bytes(pdf_bytes)
            partial_path.replace(output_path)
        except OSError as e:
            partial_path.unlink(missing_ok=True)
            logger.error("[PDF] Could not write %s: %s", output_path, e)
            raise ReportGenerationError(f"Failed to generate PDF: {e}") from e
        logger.info("[PDF] PDF saved to: %s", output_path)

    return pdf_bytes
