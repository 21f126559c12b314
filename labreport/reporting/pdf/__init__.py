"""
PDF Generator Module for laboratory reports.

Renders each page as a matplotlib surface, captures it as an image and
assembles the images into one PDF with ReportLab. No Streamlit dependency.

Module Structure:
- styles.py: Page geometry
- layout.py: Page surfaces (cover, result tables, invoice)
- compositor.py: Capture and PDF assembly
- builder.py: Document orchestration

Usage:
    from labreport.reporting.pdf import generate_report_pdf

    pdf_bytes = generate_report_pdf(report, institute, output_dir)
"""
from .builder import build_report_pages, generate_report_pdf, report_filename
from .compositor import PageSurface, PdfDocument, RasterImage, compose_pdf, fit_image, rasterize
from .styles import page_size_mm


__all__ = [
    # Main API
    "generate_report_pdf",
    "build_report_pages",
    "report_filename",
    # Compositor
    "PageSurface",
    "PdfDocument",
    "RasterImage",
    "compose_pdf",
    "fit_image",
    "rasterize",
    "page_size_mm",
]
