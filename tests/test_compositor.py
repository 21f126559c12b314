"""Tests for labreport/reporting/pdf/compositor.py - capture and PDF assembly."""

import re
from types import SimpleNamespace

import pytest

from labreport.errors import ReportGenerationError
from labreport.reporting.figures.common import (
    CAPTURE_EXCLUDE_GID,
    Orientation,
    add_screen_only_button,
    add_text,
    new_page_figure,
)
from labreport.reporting.pdf.compositor import (
    PageSurface,
    PdfDocument,
    RasterImage,
    compose_pdf,
    fit_image,
    rasterize,
)
from labreport.reporting.pdf.styles import page_size_mm


def _page(section, orientation):
    fig = new_page_figure(orientation)
    add_text(fig, 0.1, 0.9, section)
    add_screen_only_button(fig)
    return PageSurface(section, orientation, fig)


def _pdf_page_count(pdf_bytes):
    return len(re.findall(rb"/Type /Page\b", pdf_bytes))


def _media_boxes(pdf_bytes):
    """Rounded (width, height) in points of every page, in document order."""
    boxes = re.findall(rb"/MediaBox \[ 0 0 ([\d.]+) ([\d.]+) \]", pdf_bytes)
    return [(round(float(w)), round(float(h))) for w, h in boxes]


# =========================================================================
# fit_image
# =========================================================================

class TestFitImage:
    def test_page_sizes(self):
        assert page_size_mm(Orientation.PORTRAIT) == (210.0, 297.0)
        assert page_size_mm(Orientation.LANDSCAPE) == (297.0, 210.0)

    @pytest.mark.parametrize("orientation", list(Orientation))
    def test_surface_matches_pdf_page(self, orientation):
        width_in, height_in = new_page_figure(orientation).get_size_inches()
        assert (width_in * 25.4, height_in * 25.4) == pytest.approx(page_size_mm(orientation))

    def test_exact_aspect_fills_page(self):
        placement = fit_image(2100, 2970, Orientation.PORTRAIT)
        assert placement.width == pytest.approx(210.0)
        assert placement.height == pytest.approx(297.0)
        assert placement.x == pytest.approx(0.0)
        assert placement.y == pytest.approx(0.0)

    def test_wide_image_centered_vertically(self):
        placement = fit_image(2000, 1000, Orientation.PORTRAIT)
        assert placement.width == pytest.approx(210.0)
        assert placement.height == pytest.approx(105.0)
        assert placement.x == pytest.approx(0.0)
        assert placement.y == pytest.approx((297.0 - 105.0) / 2)

    def test_tall_image_centered_horizontally(self):
        placement = fit_image(1000, 1000, Orientation.LANDSCAPE)
        assert placement.height == pytest.approx(210.0)
        assert placement.width == pytest.approx(210.0)
        assert placement.x == pytest.approx((297.0 - 210.0) / 2)

    def test_aspect_ratio_preserved(self):
        placement = fit_image(1234, 567, Orientation.LANDSCAPE)
        assert placement.width / placement.height == pytest.approx(1234 / 567)
        assert placement.width <= 297.0 + 1e-9
        assert placement.height <= 210.0 + 1e-9

    def test_invalid_size(self):
        with pytest.raises(ReportGenerationError):
            fit_image(0, 100, Orientation.PORTRAIT)


# =========================================================================
# rasterize
# =========================================================================

class TestRasterize:
    def test_png_at_scaled_resolution(self):
        fig = new_page_figure(Orientation.PORTRAIT)
        image = rasterize(fig, scale=0.5, dpi=40)
        assert image.data.startswith(b"\x89PNG")
        # 210mm x 297mm at 20 dpi
        assert image.width == pytest.approx(210 / 25.4 * 20, abs=1)
        assert image.height == pytest.approx(297 / 25.4 * 20, abs=1)

    def test_screen_only_artists_restored(self):
        fig = new_page_figure(Orientation.LANDSCAPE)
        button = add_screen_only_button(fig)
        assert button.get_gid() == CAPTURE_EXCLUDE_GID
        rasterize(fig, scale=0.5, dpi=40)
        assert button.get_visible()

    def test_screen_only_artists_hidden_during_capture(self, monkeypatch):
        fig = new_page_figure(Orientation.LANDSCAPE)
        button = add_screen_only_button(fig)
        seen = []
        real_savefig = fig.savefig

        def spy(*args, **kwargs):
            seen.append(button.get_visible())
            return real_savefig(*args, **kwargs)

        monkeypatch.setattr(fig, "savefig", spy)
        rasterize(fig, scale=0.5, dpi=40)
        assert seen == [False]
        assert button.get_visible()

    def test_missing_surface(self):
        with pytest.raises(ReportGenerationError):
            rasterize(None)


# =========================================================================
# PdfDocument / compose_pdf
# =========================================================================

class TestPdfDocument:
    def test_first_page_takes_requested_orientation(self):
        document = PdfDocument()
        image = rasterize(new_page_figure(Orientation.LANDSCAPE), scale=0.5, dpi=40)
        document.add_page(image, Orientation.LANDSCAPE)
        pdf = document.to_bytes()
        assert document.orientations == [Orientation.LANDSCAPE]
        assert _pdf_page_count(pdf) == 1
        assert _media_boxes(pdf) == [(842, 595)]

    def test_orientations_in_call_order(self):
        document = PdfDocument()
        order = [Orientation.PORTRAIT, Orientation.LANDSCAPE, Orientation.LANDSCAPE, Orientation.PORTRAIT]
        for orientation in order:
            document.add_page(RasterImage(*_tiny_png()), orientation)
        pdf = document.to_bytes()
        assert document.orientations == order
        assert document.page_count == 4
        assert _pdf_page_count(pdf) == 4
        assert _media_boxes(pdf) == [(595, 842), (842, 595), (842, 595), (595, 842)]

    def test_empty_document_cannot_be_saved(self):
        with pytest.raises(ReportGenerationError):
            PdfDocument().to_bytes()

    def test_no_pages_after_save(self):
        document = PdfDocument()
        document.add_page(RasterImage(*_tiny_png()), Orientation.PORTRAIT)
        document.to_bytes()
        with pytest.raises(ReportGenerationError):
            document.add_page(RasterImage(*_tiny_png()), Orientation.PORTRAIT)


class TestComposePdf:
    def test_pages_appended_in_order(self):
        pages = [
            _page("cover", Orientation.PORTRAIT),
            _page("SOIL", Orientation.LANDSCAPE),
            _page("WATER", Orientation.LANDSCAPE),
            _page("FERTILIZER", Orientation.LANDSCAPE),
            _page("invoice", Orientation.PORTRAIT),
        ]
        document = compose_pdf(pages, scale=0.5, dpi=40)
        assert document.page_count == 5
        assert document.orientations == [p.orientation for p in pages]
        assert _pdf_page_count(document.to_bytes()) == 5

    def test_missing_surface_aborts_before_capture(self, monkeypatch):
        calls = []
        monkeypatch.setattr(
            "labreport.reporting.pdf.compositor.rasterize",
            lambda *a, **k: calls.append(a) or RasterImage(*_tiny_png()),
        )
        pages = [_page("cover", Orientation.PORTRAIT), PageSurface("WATER", Orientation.LANDSCAPE, None)]
        with pytest.raises(ReportGenerationError, match="WATER"):
            compose_pdf(pages)
        assert calls == []

    def test_no_pages(self):
        with pytest.raises(ReportGenerationError):
            compose_pdf([])

    def test_time_budget(self, monkeypatch):
        ticks = iter([0.0, 0.0])
        fake_time = SimpleNamespace(monotonic=lambda: next(ticks, 10.0))
        monkeypatch.setattr("labreport.reporting.pdf.compositor.time", fake_time)
        pages = [_page("cover", Orientation.PORTRAIT), _page("SOIL", Orientation.LANDSCAPE)]
        with pytest.raises(ReportGenerationError, match="exceeded"):
            compose_pdf(pages, scale=0.5, dpi=40, timeout_s=5)


def _tiny_png():
    """(png bytes, width, height) of a small white image."""
    image = rasterize(new_page_figure(Orientation.PORTRAIT), scale=0.1, dpi=20)
    return image.data, image.width, image.height
