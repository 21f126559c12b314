"""
PDF Layout Module.

Builds one printable page surface (a matplotlib Figure) per physical
page of a laboratory report:

- Cover letter (A4 portrait)
- Fertilizer, water and soil result tables (A4 landscape)
- Government soil tables: per sample, per location, per map unit
- Invoice (A4 portrait)

Only presentation lives here; grouping and pagination are decided
before a page is built. Institute identity is passed in explicitly.
"""
import logging
import textwrap
from typing import Dict, List, Sequence

from matplotlib.figure import Figure

from labreport.config import InstituteConfig
from labreport.domain import SampleType, SectionKind
from labreport.models import Report, Sample, ReportGroup, PageSlice, TestParameter
from labreport.translations import (
    to_bangla_number,
    number_to_bangla_words,
    format_value,
    format_number,
    format_bangla_date,
    translate_test_element,
    translate_unit,
    translate_analysis_type,
)
from labreport.reporting.figures.common import (
    Orientation,
    FONT_SIZE,
    HEADING_SIZE,
    new_page_figure,
    add_text,
    add_screen_only_button,
    draw_table,
)
from labreport.reporting.grouping import NO_VALUE
from labreport.reporting.pagination import SectionPlan, ReportPlan, RowKind, TableRow

logger = logging.getLogger("labreport.Layout")


# ============================================================================
# FIXED TEXT
# ============================================================================

GOVERNMENT_HEADER = [
    "গণপ্রজাতন্ত্রী বাংলাদেশ সরকার",
    "কৃষি মন্ত্রণালয়",
    "মৃত্তিকা সম্পদ উন্নয়ন ইনস্টিটিউট",
]

DISTRIBUTION_LIST = [
    "১। মহ পরিচালক, মৃত্তিকা সম্পদ উন্নয়ন ইনস্টিটিউট, কৃষি খামার সড়ক, ঢাকা-১২১৫।",
    "২। পরিচালক, এনালাইটিক্যাল সার্ভিসেস উইং, মৃত্তিকা সম্পদ উন্নয়ন ইনস্টিটিউট, কৃষি খামার সড়ক, ঢাকা-১২১৫।",
    "৩। মূখ্য বৈজ্ঞানিক কর্মকর্তা, মৃত্তিকা সম্পদ উন্নয়ন ইনস্টিটিউট, বিভাগীয় গবেষণাগার, দৌলতপুর, খুলনা।",
    "৪। অফিস কপি।",
]

OLSEN_BRAY_NOTE = [
    "* ওলসেন পদ্ধতিঃ পিএইচ => ৬.৬",
    "** ব্রে পদ্ধতিঃ পিএইচ <= ৬.৫",
]

CLEAN_FERTILIZER = "ভেজালমুক্ত"

INVOICE_STATUS = {
    "PAID": "পরিশোধিত",
    "DUE": "বাকি",
    "CANCELLED": "বাতিল",
}

UPLAND_LABEL = "আপল্যান্ড"
WETLAND_LABEL = "ওয়েটল্যান্ড"

# Table area below the page header (left, bottom, width, height)
LANDSCAPE_TABLE_RECT = (0.04, 0.16, 0.92, 0.52)
GOVT_TABLE_RECT = (0.04, 0.16, 0.92, 0.70)


# ============================================================================
# SHARED PAGE PARTS
# ============================================================================

def _page_marker(fig: Figure, page: PageSlice) -> None:
    add_text(fig, 0.96, 0.965,
             f"পৃষ্ঠা: {to_bangla_number(page.page_number)}/{to_bangla_number(page.total_pages)}",
             ha="right", weight="bold")


def _institute_header(fig: Figure, institute: InstituteConfig, top: float, step: float) -> float:
    """Centered government and institute heading; returns the next free y."""
    lines = list(GOVERNMENT_HEADER)
    if institute.name or institute.address:
        lines.append(f"{institute.name},{institute.address}।")
    y = top
    for i, line in enumerate(lines):
        add_text(fig, 0.5, y, line, size=HEADING_SIZE if i < 3 else FONT_SIZE + 1,
                 ha="center", weight="bold" if i == 2 else "normal")
        y -= step
    if institute.website:
        add_text(fig, 0.5, y, institute.website, ha="center", color="blue")
        y -= step
    return y


def _signature(fig: Figure, institute: InstituteConfig, x: float, y: float, step: float) -> None:
    lines = [f"({institute.issued_by})" if institute.issued_by else "( )", "প্রধান বৈজ্ঞানিক কর্মকর্তা"]
    phone = institute.phone.strip().lstrip("0")
    if phone:
        lines.append(f"সেলফোন: ০{to_bangla_number(phone)}")
    for line in lines:
        add_text(fig, x, y, line, ha="center")
        y -= step


def _client_line(report: Report, sample_type: SampleType) -> str:
    client = report.client
    return f"{client.name} {client.address or ''} কর্তৃক প্রেরিত {sample_type.bangla} নমুনার রাসায়নিক বিশ্লেষণী ফি এর বিল"


def _memo_line(number: str, date_text: str, end: str = "খ্রি: !") -> str:
    return f"সূত্রঃ স্মারক নং- {number}; তারিখঃ {date_text} {end}"


def _table_page(report: Report, institute: InstituteConfig, sample_type: SampleType, page: PageSlice) -> Figure:
    """Landscape page with marker, institute header and bill heading."""
    fig = new_page_figure(Orientation.LANDSCAPE)
    _page_marker(fig, page)
    y = _institute_header(fig, institute, top=0.95, step=0.032)
    add_text(fig, 0.5, y - 0.01, _client_line(report, sample_type), ha="center", weight="bold")
    add_text(fig, 0.5, y - 0.045,
             _memo_line(report.report_number, format_bangla_date(report.issue_date)), ha="center")
    add_screen_only_button(fig)
    return fig


def _parameter_header(param: TestParameter, with_unit: bool = True) -> str:
    if with_unit and param.unit:
        return f"{param.name}\n({param.unit})"
    return param.name


def _section_samples(report: Report, sample_type: SampleType) -> List[Sample]:
    return [s for s in report.samples if s.sample_type is sample_type]


def _is_last_page(section: SectionPlan, page: PageSlice) -> bool:
    return page.page_number == section.page_offset + section.pages_needed


def _page_start(section: SectionPlan, page: PageSlice) -> int:
    """Index of the first item on ``page`` within its section."""
    return (page.page_number - section.page_offset - 1) * section.page_plan.items_per_page


# ============================================================================
# COVER
# ============================================================================

def _subject_type(sample_types: Sequence[SampleType], fertilizer_label: str = "সার") -> str:
    if SampleType.FERTILIZER in sample_types:
        return fertilizer_label
    if SampleType.SOIL in sample_types:
        return SampleType.SOIL.bangla
    if SampleType.WATER in sample_types:
        return SampleType.WATER.bangla
    return ", ".join(t.value for t in sample_types)


def _page_count_text(count: int) -> str:
    """Zero-padded Bangla digits followed by the count in words."""
    return f"{to_bangla_number(count).rjust(2, '০')} ({number_to_bangla_words(count)})"


def cover_attachments(report: Report, report_plan: ReportPlan) -> List[str]:
    """Attachment lines printed on the cover letter."""
    detailed = report_plan.detailed_pages
    is_soil = SampleType.SOIL in report_plan.sample_types

    if is_soil and report.is_government and detailed:
        return [
            f"১। মৃত্তিকা দলের উপরিস্তরের স্থানভিত্তিক নমুনার রাসায়নিক গুণাবলী -{_page_count_text(detailed['sample_pages'])} পাতা।",
            f"২। মৃত্তিকা দলের উপরিস্তরের ভূমি শ্রেণীভিত্তিক গড় রাসায়নিক গুণাবলী -{_page_count_text(detailed['location_pages'])} পাতা।",
            f"৩। মানচিত্র একক হিসাবে গড় রাসায়নিক গুণাবলী -{_page_count_text(detailed['manchitro_pages'])} পাতা।",
        ]

    pages = report_plan.section_pages
    lines = [
        f"১। ফলাফল প্রতিবেদন - {to_bangla_number(pages)} ({number_to_bangla_words(pages)}) কপি।",
        "২। বিল-০১ (এক) কপি।",
    ]
    if is_soil:
        lines.append("৩। সার সুপারিশ কার্ড-০৩(তিন) টি।")
    return lines


def build_cover_page(report: Report, institute: InstituteConfig, report_plan: ReportPlan) -> Figure:
    """Cover letter addressed to the client, listing the attachments."""
    fig = new_page_figure(Orientation.PORTRAIT)
    sample_types = report_plan.sample_types
    issue_date = format_bangla_date(report.issue_date)

    y = _institute_header(fig, institute, top=0.96, step=0.02)
    y -= 0.015
    add_text(fig, 0.08, y, f"নং: {institute.memo_number}")
    add_text(fig, 0.92, y, f"তারিখঃ {issue_date} খ্রি: !", ha="right")

    y -= 0.035
    add_text(fig, 0.08, y, "প্রাপকঃ")
    add_text(fig, 0.17, y, f"{report.client.name},")
    add_text(fig, 0.17, y - 0.018, report.client.address or "")

    y -= 0.055
    add_text(fig, 0.08, y,
             f"বিষয়ঃ {_subject_type(sample_types)} পরীক্ষার ফলাফল ও বিল প্রেরণ প্রসংগে।", weight="bold")
    y -= 0.022
    add_text(fig, 0.08, y, _memo_line(report.sarok_number, issue_date))

    body = (
        f"উপুর্যুক্ত বিষয় ও সূত্রের আলোকে জানানো যাচ্ছে যে, আপনার প্রেরিত "
        f"{to_bangla_number(len(report.samples))}টি {_subject_type(sample_types, 'বিভিন্ন প্রকার সার')} "
        f"নমুনার রাসায়নিক বিশ্লেষণী ফলাফল ও বিশ্লেষিনী ফি এর বিল এতদসংঘে সংযুক্ত করে আপনার "
        f"বরাবর প্রয়োজনীয় ব্যবস্থা গ্রহণের জন্য প্রেরণ করা হলো। উল্লেখ্য, সার নমুনা পরীক্ষার "
        f"বিশ্লেষণী ফি বিষয়ক তথ্য {institute.name} এর ওয়েব পোর্টাল ({institute.website})-এ পাওয়া যাবে।"
    )
    y -= 0.04
    wrapped = textwrap.fill(body, width=95)
    add_text(fig, 0.08, y, wrapped, linespacing=1.6)
    y -= 0.02 * (wrapped.count("\n") + 1) + 0.03

    add_text(fig, 0.08, y, "সংযুক্তিঃ")
    for line in cover_attachments(report, report_plan):
        add_text(fig, 0.18, y, line)
        y -= 0.02

    y -= 0.03
    _signature(fig, institute, x=0.78, y=y, step=0.018)

    y -= 0.09
    add_text(fig, 0.08, y, "সকল অনুলিপি প্রেরণ করা হলো:")
    for line in DISTRIBUTION_LIST:
        y -= 0.02
        add_text(fig, 0.08, y, textwrap.fill(line, width=100))

    _signature(fig, institute, x=0.78, y=y - 0.05, step=0.018)
    add_screen_only_button(fig)
    return fig


# ============================================================================
# FERTILIZER
# ============================================================================

def _rule_line(param: TestParameter, rule) -> str:
    prefix = f"মোট {param.name}, ওজন ভিত্তিক"
    unit = translate_unit(param.unit or "")
    rule_type = (rule.type or "").strip()
    if rule_type == "BETWEEN":
        return f"{prefix}: {format_number(rule.min)} - {format_number(rule.max)} {unit} মধ্যে"
    if rule_type == "GREATER_THAN":
        return f"{prefix}(সর্বোচ্চ): > {format_number(rule.min)} {unit}"
    if rule_type == "LESS_THAN":
        return f"{prefix}(সর্বনিম্ন): < {format_number(rule.max)} {unit}"
    return f"{prefix}(সর্বনিম্ন): {format_number(rule.min)} {unit}"


def fertilizer_remark(sample: Sample) -> str:
    """'-' for an unadulterated sample, otherwise the legal remark."""
    results = [sample.result_for(p.id) for p in sample.parameters]
    if all(r is not None and r.interpretation == CLEAN_FERTILIZER for r in results):
        return NO_VALUE
    name = translate_test_element(sample.order_item.agro_test.name) if (
        sample.order_item and sample.order_item.agro_test) else ""
    return f"সার (ব্যবস্থাপনা) আইন ২০০৬\nধারা-১৭(২)(ঘ) মোতাবেক নমুনা\nএকটি {name} ভেজাল সার।"


def _fertilizer_row(serial: int, sample: Sample) -> List[str]:
    results, rules = [], []
    for param in sample.parameters:
        result = sample.result_for(param.id)
        value = format_number(result.value if result else None, missing=to_bangla_number(0))
        results.append(f"মোট {param.name}, ওজন ভিত্তিক: {value}{param.unit or ''}")
        rules.extend(_rule_line(param, rule) for rule in param.comparison_rules)

    agro_test = sample.order_item.agro_test if sample.order_item else None
    return [
        to_bangla_number(serial),
        sample.sample_id_number,
        translate_test_element(agro_test.name) if agro_test else NO_VALUE,
        "\n".join(results) or NO_VALUE,
        "\n".join(rules) or NO_VALUE,
        fertilizer_remark(sample),
    ]


def _analysis_method_lines(samples: Sequence[Sample]) -> List[str]:
    """'names: Method' per analysis type, for parameters that declare one."""
    groups: Dict[str, List[str]] = {}
    for sample in samples:
        for param in sample.parameters:
            if param.analysis_type and param.name:
                names = groups.setdefault(param.analysis_type, [])
                if param.name not in names:
                    names.append(param.name)
    return [
        f"{', '.join(names)}: {analysis_type.replace('_', ' ').capitalize()}"
        for analysis_type, names in groups.items()
    ]


def build_fertilizer_page(report: Report, institute: InstituteConfig,
                          section: SectionPlan, page: PageSlice) -> Figure:
    fig = _table_page(report, institute, SampleType.FERTILIZER, page)
    start = _page_start(section, page)
    rows = [_fertilizer_row(start + i + 1, sample) for i, sample in enumerate(page.items)]
    draw_table(
        fig, LANDSCAPE_TABLE_RECT,
        ["ক্রমিক\nনং", "নমুনার\nআইডি নং", "সারের নাম", "পরীক্ষায় প্রাপ্ত ফলাফল", "সরকারি বিনির্দেশ", "মন্তব্য"],
        rows, col_widths=[0.6, 1, 1.2, 2.6, 2.8, 2],
    )

    if _is_last_page(section, page):
        lines = _analysis_method_lines(_section_samples(report, SampleType.FERTILIZER))
        add_text(fig, 0.04, 0.13, "বিশ্লেষণ পদ্ধতি:", weight="bold")
        for i, line in enumerate(lines):
            add_text(fig, 0.04, 0.105 - i * 0.02, line)
    _signature(fig, institute, x=0.85, y=0.12, step=0.025)
    return fig


# ============================================================================
# WATER
# ============================================================================

def _analysis_type_lines(samples: Sequence[Sample]) -> List[str]:
    """Translated parameter names grouped by analysis type (default routine)."""
    groups: Dict[str, List[str]] = {}
    for sample in samples:
        for param in sample.parameters:
            names = groups.setdefault(param.analysis_type or "ROUTINE", [])
            if param.name not in names:
                names.append(param.name)
    return [
        f"{', '.join(translate_test_element(n) for n in names)}: {translate_analysis_type(analysis_type)}"
        for analysis_type, names in groups.items()
    ]


def _water_row(report: Report, row: TableRow, first: bool = False) -> List[str]:
    """Table cells for one row; a row opening the page repeats the sample ID."""
    sample = row.sample
    cells = []
    for param in sample.parameters:
        result = sample.result_for(param.id)
        if row.kind is RowKind.INTERPRETATION:
            cells.append((result.interpretation if result else None) or NO_VALUE)
        else:
            cells.append(format_value(result.value if result else None))
    if row.kind is RowKind.INTERPRETATION and not first:
        return ["", ""] + cells
    return [sample.sample_id_number, report.client.name] + cells


def build_water_page(report: Report, institute: InstituteConfig,
                     section: SectionPlan, page: PageSlice) -> Figure:
    fig = _table_page(report, institute, SampleType.WATER, page)
    samples = _section_samples(report, SampleType.WATER)
    params = samples[0].parameters if samples else []
    draw_table(
        fig, LANDSCAPE_TABLE_RECT,
        ["আইডি নম্বর", "প্রেরণকারী প্রদত্ত\nসনাক্তকরণ\nনম্বর/নাম"] + [_parameter_header(p) for p in params],
        [_water_row(report, row, first=(i == 0)) for i, row in enumerate(page.items)],
        col_widths=[1.2, 1.6] + [1] * len(params),
    )

    if _is_last_page(section, page):
        add_text(fig, 0.04, 0.13, "বিশ্লেষণ প্রকার:", weight="bold")
        for i, line in enumerate(_analysis_type_lines(samples)):
            add_text(fig, 0.04, 0.105 - i * 0.02, line)
    _signature(fig, institute, x=0.85, y=0.12, step=0.025)
    return fig


# ============================================================================
# SOIL (non-government)
# ============================================================================

_SOIL_ROW_LABELS = {
    RowKind.VALUES: "মান",
    RowKind.UPLAND: UPLAND_LABEL,
    RowKind.WETLAND: WETLAND_LABEL,
}


def _soil_row(row: TableRow, first: bool = False) -> List[str]:
    sample = row.sample
    cells = []
    for param in sample.parameters:
        result = sample.result_for(param.id)
        if row.kind is RowKind.VALUES:
            cells.append(format_value(result.value if result else None))
        elif row.kind is RowKind.UPLAND:
            cells.append((result.upland_interpretation if result else None) or NO_VALUE)
        else:
            cells.append((result.wetland_interpretation if result else None) or NO_VALUE)

    label = _SOIL_ROW_LABELS[row.kind]
    if row.kind is RowKind.VALUES or first:
        return [sample.sample_id_number, sample.collection_location or NO_VALUE,
                sample.crop_type or NO_VALUE, label] + cells
    return ["", "", "", label] + cells


def build_soil_page(report: Report, institute: InstituteConfig,
                    section: SectionPlan, page: PageSlice) -> Figure:
    fig = _table_page(report, institute, SampleType.SOIL, page)
    samples = _section_samples(report, SampleType.SOIL)
    params = samples[0].parameters if samples else []
    draw_table(
        fig, LANDSCAPE_TABLE_RECT,
        ["আইডি নম্বর", "সংগ্রহের স্থান", "ফসল", ""] + [_parameter_header(p) for p in params],
        [_soil_row(row, first=(i == 0)) for i, row in enumerate(page.items)],
        col_widths=[1.1, 1.4, 1, 1] + [1] * len(params),
    )
    _signature(fig, institute, x=0.85, y=0.12, step=0.025)
    return fig


# ============================================================================
# SOIL (government)
# ============================================================================

def _govt_page(title: str, page: PageSlice) -> Figure:
    fig = new_page_figure(Orientation.LANDSCAPE)
    _page_marker(fig, page)
    add_text(fig, 0.5, 0.93, title, size=HEADING_SIZE, ha="center", weight="bold")
    add_screen_only_button(fig)
    return fig


def _olsen_bray_note(fig: Figure) -> None:
    for i, line in enumerate(OLSEN_BRAY_NOTE):
        add_text(fig, 0.04, 0.13 - i * 0.022, line)


def _group_parameters(groups: Sequence[ReportGroup]) -> List[TestParameter]:
    return groups[0].parameters if groups else []


def build_govt_samples_page(report: Report, institute: InstituteConfig,
                            section: SectionPlan, page: PageSlice) -> Figure:
    fig = _govt_page("নমুনাওয়ারী বিশ্লেষণের ফলাফল", page)
    params = page.items[0].parameters if page.items else []
    start = _page_start(section, page)

    rows = []
    for i, sample in enumerate(page.items):
        values = [format_value(r.value if r else None) for r in (sample.result_for(p.id) for p in params)]
        rows.append([
            to_bangla_number(sample.manchitro_unit) if sample.manchitro_unit is not None else NO_VALUE,
            to_bangla_number(start + i + 1),
            f"{sample.collection_location or NO_VALUE}\n{sample.vumi_srini or ''}".rstrip(),
            sample.bunot or NO_VALUE,
        ] + values)

    draw_table(
        fig, GOVT_TABLE_RECT,
        ["মানচিত্র একক", "ক্রমিক নং", "মৃত্তিকা দল\nও\nভূমি শ্ৰেণী", "বুনট"] + [_parameter_header(p) for p in params],
        rows, col_widths=[1, 0.8, 1.6, 0.8] + [1] * len(params),
    )
    if _is_last_page(section, page):
        _olsen_bray_note(fig)
    _signature(fig, institute, x=0.85, y=0.12, step=0.025)
    return fig


def _summary_cells(group: ReportGroup, params: Sequence[TestParameter], field: str) -> List[str]:
    cells = []
    for param in params:
        summary = group.summaries.get(param.id)
        if summary is None:
            cells.append(NO_VALUE)
        elif field == "average":
            cells.append(format_value(summary.average))
        else:
            cells.append(getattr(summary, field) or NO_VALUE)
    return cells


def build_govt_locations_page(report: Report, institute: InstituteConfig,
                              section: SectionPlan, page: PageSlice) -> Figure:
    fig = _govt_page("মৃত্তিকা দলের উপরিস্তরের ভূমি শ্রেণীভিত্তিক গড় রাসায়নিক গুণাবলী", page)
    params = _group_parameters(page.items)

    rows = []
    for group in page.items:
        rows.append([group.key, group.vumi_srini,
                     f"গড় মান ({to_bangla_number(group.sample_count)} নমুনা)"]
                    + _summary_cells(group, params, "average"))
        rows.append(["", "", UPLAND_LABEL] + _summary_cells(group, params, "upland"))
        rows.append(["", "", WETLAND_LABEL] + _summary_cells(group, params, "wetland"))

    draw_table(
        fig, GOVT_TABLE_RECT,
        ["মৃত্তিকা দল", "ভুমিশ্রেণী", "চাষাবাদ\nপদ্ধতি"] + [_parameter_header(p) for p in params],
        rows, col_widths=[1.4, 1, 1.3] + [1] * len(params),
    )
    if _is_last_page(section, page):
        _olsen_bray_note(fig)
    _signature(fig, institute, x=0.85, y=0.12, step=0.025)
    return fig


def build_govt_map_units_page(report: Report, institute: InstituteConfig,
                              section: SectionPlan, page: PageSlice) -> Figure:
    fig = _govt_page("মানচিত্র একক অনুযায়ী মৃত্তিকার উপরিস্তরের গড় রাসায়নিক গুণাবলী", page)
    params = _group_parameters(page.items)

    rows = []
    for group in page.items:
        rows.append([to_bangla_number(group.key), textwrap.fill(group.locations, width=30),
                     group.vumi_srini, UPLAND_LABEL] + _summary_cells(group, params, "upland"))
        rows.append(["", "", "", WETLAND_LABEL] + _summary_cells(group, params, "wetland"))

    draw_table(
        fig, GOVT_TABLE_RECT,
        ["মানচিত্র একক", "মৃত্তিকা দল", "ভুমিশ্রেণী", "চাষাবাদ\nপদ্ধতি"] + [_parameter_header(p) for p in params],
        rows, col_widths=[1, 2, 1, 1.2] + [1] * len(params),
    )
    if _is_last_page(section, page):
        _olsen_bray_note(fig)
    _signature(fig, institute, x=0.85, y=0.12, step=0.025)
    return fig


# ============================================================================
# DISPATCH
# ============================================================================

def build_section_page(report: Report, institute: InstituteConfig,
                       section: SectionPlan, page: PageSlice) -> Figure:
    """Build one page of ``section``.

    Raises:
        ValueError: If the section kind has no page builder.
    """
    kind = section.kind
    if kind is SectionKind.FERTILIZER:
        return build_fertilizer_page(report, institute, section, page)
    if kind is SectionKind.WATER:
        return build_water_page(report, institute, section, page)
    if kind is SectionKind.SOIL:
        return build_soil_page(report, institute, section, page)
    if kind is SectionKind.SOIL_GOVT_SAMPLES:
        return build_govt_samples_page(report, institute, section, page)
    if kind is SectionKind.SOIL_GOVT_LOCATIONS:
        return build_govt_locations_page(report, institute, section, page)
    if kind is SectionKind.SOIL_GOVT_MAP_UNITS:
        return build_govt_map_units_page(report, institute, section, page)
    raise ValueError(f"Invalid report type: {kind}")


# ============================================================================
# INVOICE
# ============================================================================

def build_invoice_page(report: Report, institute: InstituteConfig) -> Figure:
    """Bill for the analysis fees of the report's order."""
    fig = new_page_figure(Orientation.PORTRAIT)
    invoice = report.invoice
    sample_type = report.samples[0].sample_type if report.samples else None

    y = _institute_header(fig, institute, top=0.96, step=0.02)
    add_text(fig, 0.5, y - 0.01, "বিল", size=HEADING_SIZE + 2, ha="center", weight="bold")
    y -= 0.045
    if sample_type is not None:
        add_text(fig, 0.5, y, _client_line(report, sample_type), ha="center", weight="bold")
        y -= 0.02
    if report.samples:
        add_text(fig, 0.5, y,
                 f"( নমুনা আইডি নং- {report.samples[0].sample_id_number} - "
                 f"{report.samples[-1].sample_id_number})", ha="center")
        y -= 0.025
    add_text(fig, 0.08, y,
             _memo_line(report.sarok_number, format_bangla_date(report.created_at), end="খ্রি.।"))

    if invoice is None:
        logger.warning("[Layout] Report %s has no invoice data; printing an empty bill", report.id)
        items, total, status, sample_count = [], 0.0, "DUE", len(report.samples)
    else:
        items, total, status = invoice.items, invoice.total_amount, invoice.status
        sample_count = invoice.sample_count or len(report.samples)

    rows = [
        [to_bangla_number(i + 1), translate_test_element(item.test_name), to_bangla_number(item.quantity),
         f"{format_number(item.unit_price)} /-",
         f"{to_bangla_number(item.quantity)} x {format_number(item.unit_price)} = {format_number(item.subtotal)} /-"]
        for i, item in enumerate(items)
    ]
    rows.append(["", "মোট", to_bangla_number(sum(item.quantity for item in items)), "",
                 f"টাকা = {format_value(total)} /-"])
    draw_table(
        fig, (0.08, 0.3, 0.84, y - 0.33),
        ["ক্রমিক\nনং", "বিশ্লেষিত উপাদানের নাম", "নমুনার\nসংখ্যা", "বিশ্লেষণী\nফি এর হার\n(টাকা)",
         "মোট বিশ্লেষণী ফি\n(টাকা)"],
        rows, col_widths=[0.6, 2.2, 0.8, 1.1, 2],
    )

    add_text(fig, 0.08, 0.27,
             f"মোট নমুনা: {number_to_bangla_words(sample_count)} টি । "
             f"মোট বিশ্লেষণ ফি (কথায়): {number_to_bangla_words(total)} টাকা মাত্র।")
    add_text(fig, 0.08, 0.245, f"অবস্থা: {INVOICE_STATUS.get(status, status)}")
    _signature(fig, institute, x=0.78, y=0.2, step=0.018)
    add_screen_only_button(fig)
    return fig
