"""End-to-end tests for labreport/reporting/pdf - page building and PDF output."""

import re
from pathlib import Path

import pytest

from labreport.domain import SampleType, ClientType, SectionKind
from labreport.errors import ReportGenerationError
from labreport.reporting.figures.common import CAPTURE_EXCLUDE_GID, Orientation
from labreport.reporting.pagination import RowKind, plan_report, plan_sections
from labreport.reporting.pdf import build_report_pages, generate_report_pdf, report_filename
from labreport.reporting.pdf.layout import (
    build_section_page,
    cover_attachments,
    fertilizer_remark,
)


def _pdf_page_count(pdf_bytes):
    return len(re.findall(rb"/Type /Page\b", pdf_bytes))


def _texts(figure):
    """Free text and table cell text on a page surface."""
    texts = [t.get_text() for t in figure.texts]
    for ax in figure.axes:
        for table in ax.tables:
            texts.extend(cell.get_text().get_text() for cell in table.get_celld().values())
    return texts


# =========================================================================
# Page order and counts
# =========================================================================

class TestBuildReportPages:
    def test_mixed_report_order(self, mixed_report, institute):
        pages = build_report_pages(mixed_report, institute)
        assert [p.section for p in pages] == ["cover", "WATER", "SOIL", "FERTILIZER", "FERTILIZER", "invoice"]
        assert [p.orientation for p in pages] == [
            Orientation.PORTRAIT,
            Orientation.LANDSCAPE,
            Orientation.LANDSCAPE,
            Orientation.LANDSCAPE,
            Orientation.LANDSCAPE,
            Orientation.PORTRAIT,
        ]

    def test_page_count_matches_plan(self, mixed_report, govt_soil_samples, make_report, institute):
        govt = make_report(govt_soil_samples, client_type=ClientType.GOVT_ORG)
        for report in (mixed_report, govt):
            assert len(build_report_pages(report, institute)) == plan_report(report).total_pages

    def test_government_soil_has_no_invoice(self, govt_soil_samples, make_report, institute):
        report = make_report(govt_soil_samples, client_type=ClientType.GOVT_ORG)
        pages = build_report_pages(report, institute)
        assert len(pages) == 9
        assert pages[-1].section == "SOIL"

    def test_every_page_has_screen_only_control(self, mixed_report, institute):
        for page in build_report_pages(mixed_report, institute):
            tagged = page.figure.findobj(lambda a: a.get_gid() == CAPTURE_EXCLUDE_GID)
            assert len(tagged) == 1


# =========================================================================
# Layout content
# =========================================================================

class TestLayout:
    def test_page_marker_in_bangla(self, make_sample, make_report, institute):
        samples = [make_sample(i, SampleType.FERTILIZER) for i in range(7)]
        report = make_report(samples)
        section = plan_sections(SampleType.FERTILIZER, samples, ClientType.FARMER)[0]
        page = section.pages()[1]
        texts = _texts(build_section_page(report, institute, section, page))
        assert "পৃষ্ঠা: ২/২" in texts

    def test_government_cover_attachments(self, govt_soil_samples, make_report):
        report = make_report(govt_soil_samples, client_type=ClientType.GOVT_ORG)
        lines = cover_attachments(report, plan_report(report))
        assert len(lines) == 3
        assert "-০৩ (তিন) পাতা" in lines[0]
        assert "-০৩ (তিন) পাতা" in lines[1]
        assert "-০২ (দুই) পাতা" in lines[2]

    def test_soil_cover_attachments(self, make_sample, make_report):
        report = make_report([make_sample(i) for i in range(3)])
        lines = cover_attachments(report, plan_report(report))
        assert lines[0] == "১। ফলাফল প্রতিবেদন - ২ (দুই) কপি।"
        assert lines[2] == "৩। সার সুপারিশ কার্ড-০৩(তিন) টি।"

    def test_water_cover_has_no_recommendation_card(self, make_sample, make_report):
        report = make_report([make_sample(0, SampleType.WATER)])
        assert len(cover_attachments(report, plan_report(report))) == 2

    def test_fertilizer_remark(self, make_sample):
        clean = make_sample(0, SampleType.FERTILIZER, interpretation="ভেজালমুক্ত")
        adulterated = make_sample(1, SampleType.FERTILIZER, interpretation="ভেজাল")
        assert fertilizer_remark(clean) == "-"
        assert "ভেজাল সার" in fertilizer_remark(adulterated)

    def test_unknown_section_kind(self, mixed_report, institute):
        section = plan_report(mixed_report).sections[0]
        section.kind = "MICROBIAL"
        with pytest.raises(ValueError, match="Invalid report type"):
            build_section_page(mixed_report, institute, section, section.pages()[0])

    def test_soil_row_opening_page_repeats_sample_id(self, make_sample, make_report, institute):
        samples = [make_sample(i) for i in range(3)]
        report = make_report(samples)
        section = plan_sections(SampleType.SOIL, samples, ClientType.FARMER)[0]
        page = section.pages()[1]
        assert page.items[0].kind is RowKind.WETLAND
        texts = _texts(build_section_page(report, institute, section, page))
        assert "S-002" in texts

    def test_water_row_opening_page_repeats_sample_id(self, make_sample, make_report, institute):
        samples = [make_sample(0, SampleType.WATER)]
        samples += [make_sample(i, SampleType.WATER, interpretation="Safe") for i in range(1, 5)]
        report = make_report(samples)
        section = plan_sections(SampleType.WATER, samples, ClientType.FARMER)[0]
        page = section.pages()[1]
        assert page.items[0].kind is RowKind.INTERPRETATION
        texts = _texts(build_section_page(report, institute, section, page))
        assert "S-004" in texts

    def test_location_page_shows_no_data_marker(self, make_parameters, make_sample, make_report, institute):
        params = make_parameters(2)
        samples = [make_sample(i, parameters=params, values=[1.5, None], manchitro_unit=1) for i in range(2)]
        report = make_report(samples, client_type=ClientType.GOVT_ORG)
        section = next(s for s in plan_report(report).sections if s.kind is SectionKind.SOIL_GOVT_LOCATIONS)
        figure = build_section_page(report, institute, section, section.pages()[0])
        texts = _texts(figure)
        assert "১.৫০" in texts
        assert "গড় মান (২ নমুনা)" in texts


# =========================================================================
# generate_report_pdf
# =========================================================================

class TestGenerateReportPdf:
    def test_pdf_page_count(self, mixed_report, institute, fast_config):
        pdf = generate_report_pdf(mixed_report, institute, config=fast_config)
        assert pdf.startswith(b"%PDF")
        assert _pdf_page_count(pdf) == plan_report(mixed_report).total_pages

    def test_government_soil_pdf(self, govt_soil_samples, make_report, institute, fast_config):
        report = make_report(govt_soil_samples, client_type=ClientType.GOVT_ORG)
        pdf = generate_report_pdf(report, institute, config=fast_config)
        assert _pdf_page_count(pdf) == 9

    def test_file_written(self, mixed_report, institute, fast_config, tmp_path):
        pdf = generate_report_pdf(mixed_report, institute, output_dir=tmp_path, config=fast_config)
        output = tmp_path / "report-r1.pdf"
        assert report_filename(mixed_report) == "report-r1.pdf"
        assert output.read_bytes() == pdf

    def test_failure_is_wrapped_and_nothing_written(self, mixed_report, institute, fast_config,
                                                     tmp_path, monkeypatch):
        def broken(*args, **kwargs):
            raise RuntimeError("canvas exploded")

        monkeypatch.setattr("labreport.reporting.pdf.builder.build_invoice_page", broken)
        with pytest.raises(ReportGenerationError, match="Failed to generate PDF: canvas exploded"):
            generate_report_pdf(mixed_report, institute, output_dir=tmp_path, config=fast_config)
        assert list(tmp_path.iterdir()) == []

    def test_interrupted_write_leaves_no_file(self, mixed_report, institute, fast_config,
                                              tmp_path, monkeypatch):
        real_write_bytes = Path.write_bytes

        def disk_full(path, data):
            real_write_bytes(path, data[:16])
            raise OSError("No space left on device")

        monkeypatch.setattr(Path, "write_bytes", disk_full)
        with pytest.raises(ReportGenerationError, match="No space left on device"):
            generate_report_pdf(mixed_report, institute, output_dir=tmp_path, config=fast_config)
        assert list(tmp_path.iterdir()) == []
