"""
Reporting Module.

Sample grouping, page planning and PDF generation for laboratory reports.
"""
from .grouping import (
    group_by_type,
    group_by_location,
    group_by_manchitro_unit,
    most_frequent,
    summarize_parameters,
)
from .pagination import plan, slice_page, paginate, plan_report, ReportPlan, SectionPlan
from .report_io import load_report, report_from_dict

__all__ = [
    # Grouping
    "group_by_type",
    "group_by_location",
    "group_by_manchitro_unit",
    "most_frequent",
    "summarize_parameters",
    # Pagination
    "plan",
    "slice_page",
    "paginate",
    "plan_report",
    "ReportPlan",
    "SectionPlan",
    # I/O
    "load_report",
    "report_from_dict",
]
