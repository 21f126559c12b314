from .report import (
    ComparisonRule,
    TestParameter,
    AgroTest,
    OrderItem,
    TestResult,
    Sample,
    Client,
    InvoiceItem,
    Invoice,
    Report,
    ParameterSummary,
    ReportGroup,
    PageSlice,
)

__all__ = [
    "ComparisonRule",
    "TestParameter",
    "AgroTest",
    "OrderItem",
    "TestResult",
    "Sample",
    "Client",
    "InvoiceItem",
    "Invoice",
    "Report",
    "ParameterSummary",
    "ReportGroup",
    "PageSlice",
]
