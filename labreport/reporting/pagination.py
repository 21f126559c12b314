"""
Pagination Planner.

Computes how many physical pages each report section needs and slices
section items into pages. Sections are paginated either by item
(fertilizer samples, government soil samples and groups) or by table row
(water and non-government soil, where one sample spans several rows).

The cover page and the optional invoice page are not section pages;
``ReportPlan.total_pages`` adds them on top of the section total.
"""
import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from labreport.domain import SampleType, ClientType, SectionKind, is_government_soil, section_kinds_for
from labreport.models import Report, Sample, PageSlice
from .grouping import group_by_type, group_by_location, group_by_manchitro_unit

logger = logging.getLogger(__name__)


# ============================================================================
# LAYOUT TABLE
# ============================================================================

@dataclass(frozen=True)
class LayoutRule:
    """Page capacity of one section kind.

    For row-paginated kinds ``per_page`` counts table rows and
    ``rows_per_item`` is the number of rows a sample occupies. Kinds with
    ``variable_rows`` size each sample from its results, so callers must
    pass the row count.
    """
    per_page: int
    rows_per_item: Optional[int] = None
    variable_rows: bool = False

    @property
    def by_rows(self) -> bool:
        return self.rows_per_item is not None


LAYOUT: Dict[SectionKind, LayoutRule] = {
    SectionKind.FERTILIZER: LayoutRule(per_page=5),
    SectionKind.WATER: LayoutRule(per_page=8, rows_per_item=1, variable_rows=True),
    SectionKind.SOIL: LayoutRule(per_page=8, rows_per_item=3),
    SectionKind.SOIL_GOVT_SAMPLES: LayoutRule(per_page=10),
    SectionKind.SOIL_GOVT_LOCATIONS: LayoutRule(per_page=2),      # 3 rows per group
    SectionKind.SOIL_GOVT_MAP_UNITS: LayoutRule(per_page=3),      # 2 rows per group
}


@dataclass(frozen=True)
class PagePlan:
    pages_needed: int
    items_per_page: int


def plan(kind: SectionKind, item_count: int, row_count: Optional[int] = None) -> PagePlan:
    """Pages needed for a section.

    Args:
        kind: Section layout
        item_count: Number of samples (or groups) in the section
        row_count: Table rows for row-paginated kinds; defaults to
            ``item_count * rows_per_item`` and is required for WATER

    Returns:
        PagePlan; zero items yield zero pages.

    Raises:
        ValueError: If a variable-row kind is planned without ``row_count``
    """
    rule = LAYOUT[kind]
    units = item_count
    if rule.by_rows:
        if row_count is None and rule.variable_rows:
            raise ValueError(f"row_count is required to plan {kind.name} pages")
        units = row_count if row_count is not None else item_count * rule.rows_per_item
    pages = math.ceil(units / rule.per_page) if units > 0 else 0
    return PagePlan(pages_needed=pages, items_per_page=rule.per_page)


def slice_page(items: Sequence[Any], page_index: int, items_per_page: int) -> List[Any]:
    """Items on the 0-based ``page_index``; empty when out of range."""
    if page_index < 0 or items_per_page <= 0:
        return []
    start = page_index * items_per_page
    return list(items[start:start + items_per_page])


def paginate(
    items: Sequence[Any],
    items_per_page: int,
    offset: int = 0,
    total: Optional[int] = None,
) -> List[PageSlice]:
    """Split ``items`` into page slices.

    ``offset`` and ``total`` let several sections share one page numbering
    (government soil prints n/N across its three tables).
    """
    count = math.ceil(len(items) / items_per_page) if items else 0
    total = count if total is None else total
    return [
        PageSlice(items=slice_page(items, i, items_per_page), page_number=offset + i + 1, total_pages=total)
        for i in range(count)
    ]


# ============================================================================
# TABLE ROWS
# ============================================================================

class RowKind(Enum):
    VALUES = "values"
    INTERPRETATION = "interpretation"
    UPLAND = "upland"
    WETLAND = "wetland"


@dataclass(frozen=True)
class TableRow:
    """One printed table row belonging to a sample."""
    sample: Sample
    kind: RowKind


def water_rows(samples: Sequence[Sample]) -> List[TableRow]:
    """Value row per sample plus an interpretation row when one exists."""
    rows = []
    for sample in samples:
        rows.append(TableRow(sample, RowKind.VALUES))
        if sample.has_interpretations():
            rows.append(TableRow(sample, RowKind.INTERPRETATION))
    return rows


def soil_rows(samples: Sequence[Sample]) -> List[TableRow]:
    rows = []
    for sample in samples:
        rows.extend(TableRow(sample, kind) for kind in (RowKind.VALUES, RowKind.UPLAND, RowKind.WETLAND))
    return rows


# ============================================================================
# REPORT PLAN
# ============================================================================

@dataclass
class SectionPlan:
    """Items and page plan of one report section."""
    sample_type: SampleType
    kind: SectionKind
    items: List[Any]
    page_plan: PagePlan
    page_offset: int = 0
    numbering_total: int = 0

    @property
    def pages_needed(self) -> int:
        return self.page_plan.pages_needed

    def pages(self) -> List[PageSlice]:
        return paginate(
            self.items,
            self.page_plan.items_per_page,
            offset=self.page_offset,
            total=self.numbering_total or self.pages_needed,
        )


@dataclass
class ReportPlan:
    sections: List[SectionPlan] = field(default_factory=list)
    include_invoice: bool = True

    @property
    def section_pages(self) -> int:
        return sum(s.pages_needed for s in self.sections)

    @property
    def total_pages(self) -> int:
        """Physical pages: sections + cover + optional invoice."""
        return self.section_pages + 1 + (1 if self.include_invoice else 0)

    @property
    def sample_types(self) -> List[SampleType]:
        return list(dict.fromkeys(s.sample_type for s in self.sections))

    @property
    def detailed_pages(self) -> Optional[Dict[str, int]]:
        """Government soil page breakdown printed on the cover."""
        by_kind = {s.kind: s.pages_needed for s in self.sections}
        if SectionKind.SOIL_GOVT_SAMPLES not in by_kind:
            return None
        return {
            "sample_pages": by_kind.get(SectionKind.SOIL_GOVT_SAMPLES, 0),
            "location_pages": by_kind.get(SectionKind.SOIL_GOVT_LOCATIONS, 0),
            "manchitro_pages": by_kind.get(SectionKind.SOIL_GOVT_MAP_UNITS, 0),
        }


def section_items(kind: SectionKind, samples: Sequence[Sample]) -> List[Any]:
    """Paginated units of a section: samples, table rows or groups."""
    if kind is SectionKind.FERTILIZER or kind is SectionKind.SOIL_GOVT_SAMPLES:
        return list(samples)
    if kind is SectionKind.WATER:
        return water_rows(samples)
    if kind is SectionKind.SOIL:
        return soil_rows(samples)
    if kind is SectionKind.SOIL_GOVT_LOCATIONS:
        return group_by_location(samples)
    if kind is SectionKind.SOIL_GOVT_MAP_UNITS:
        return group_by_manchitro_unit(samples)
    raise ValueError(f"Unhandled section kind: {kind}")


def plan_sections(
    sample_type: SampleType,
    samples: Sequence[Sample],
    client_type: ClientType,
) -> List[SectionPlan]:
    """Plan the sections of one sample-type bucket; empty sections are dropped."""
    sections = []
    for kind in section_kinds_for(sample_type, client_type):
        items = section_items(kind, samples)
        if LAYOUT[kind].by_rows:
            page_plan = plan(kind, len(samples), row_count=len(items))
        else:
            page_plan = plan(kind, len(items))
        if page_plan.pages_needed == 0:
            continue
        sections.append(SectionPlan(sample_type, kind, items, page_plan))

    # One page numbering per bucket
    bucket_total = sum(s.pages_needed for s in sections)
    offset = 0
    for section in sections:
        section.page_offset = offset
        section.numbering_total = bucket_total
        offset += section.pages_needed
    return sections


def should_include_invoice(report: Report) -> bool:
    """The invoice is left out of government soil reports."""
    client_type = report.client.client_type
    return not any(is_government_soil(s.sample_type, client_type) for s in report.samples)


def plan_report(report: Report) -> ReportPlan:
    """Plan every section of ``report`` in first-occurrence order of sample type."""
    sections: List[SectionPlan] = []
    for sample_type, samples in group_by_type(report.samples).items():
        sections.extend(plan_sections(sample_type, samples, report.client.client_type))

    report_plan = ReportPlan(sections=sections, include_invoice=should_include_invoice(report))
    logger.info(
        "[Planner] Report %s: %d sections, %d section pages, %d total pages (invoice: %s)",
        report.id, len(sections), report_plan.section_pages,
        report_plan.total_pages, report_plan.include_invoice,
    )
    return report_plan
