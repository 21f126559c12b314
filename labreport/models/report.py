"""
Laboratory Report Objects.

Read-only views of the report payload fetched by the surrounding
application (client, order, samples with joined test data, invoice),
plus the derived objects produced while grouping and paginating.

Report generation never mutates these objects.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Generic, List, Optional, TypeVar

from labreport.domain import SampleType, ClientType


T = TypeVar("T")


# ============================================================
# CATALOG
# ============================================================

@dataclass
class ComparisonRule:
    """Threshold/range rule mapping a value to an interpretation (display only)."""
    type: str = "BETWEEN"                  # BETWEEN | GREATER_THAN | LESS_THAN | ...
    min: Optional[float] = None
    max: Optional[float] = None
    soil_category: Optional[str] = None    # UPLAND | WETLAND for soil rules
    interpretation: Optional[str] = None


@dataclass
class TestParameter:
    """One measurable quantity within an AgroTest (e.g. pH)."""
    __test__ = False  # not a pytest test class

    id: str
    name: str
    unit: Optional[str] = None
    analysis_type: Optional[str] = None
    comparison_rules: List[ComparisonRule] = field(default_factory=list)


@dataclass
class AgroTest:
    """Named catalog test with one sample type."""
    id: str
    name: str
    sample_type: Optional[SampleType] = None


@dataclass
class OrderItem:
    """Ordered test; its parameters define the table column order."""
    id: str
    agro_test: Optional[AgroTest] = None
    parameters: List[TestParameter] = field(default_factory=list)


# ============================================================
# SAMPLES AND RESULTS
# ============================================================

@dataclass
class TestResult:
    """One measured value for one TestParameter on one Sample."""
    __test__ = False

    parameter: TestParameter
    value: Optional[float] = None
    interpretation: Optional[str] = None
    upland_interpretation: Optional[str] = None
    wetland_interpretation: Optional[str] = None


@dataclass
class Sample:
    """One physical specimen submitted for testing."""
    id: str
    sample_id_number: str
    sample_type: SampleType
    collection_location: Optional[str] = None
    collection_date: Optional[datetime] = None
    crop_type: Optional[str] = None

    # Government soil only
    bunot: Optional[str] = None              # soil texture code
    manchitro_unit: Optional[int] = None     # map-unit code
    vumi_srini: Optional[str] = None         # land-class code

    order_item: Optional[OrderItem] = None
    test_results: List[TestResult] = field(default_factory=list)

    @property
    def parameters(self) -> List[TestParameter]:
        return self.order_item.parameters if self.order_item else []

    def result_for(self, parameter_id: str) -> Optional[TestResult]:
        for result in self.test_results:
            if result.parameter.id == parameter_id:
                return result
        return None

    def has_interpretations(self) -> bool:
        """True when any ordered parameter's result carries an interpretation."""
        for param in self.parameters:
            result = self.result_for(param.id)
            if result is not None and result.interpretation:
                return True
        return False


# ============================================================
# CLIENT, INVOICE, REPORT
# ============================================================

@dataclass
class Client:
    id: str
    name: str
    phone: str = ""
    address: Optional[str] = None
    client_type: ClientType = ClientType.OTHER


@dataclass
class InvoiceItem:
    test_name: str
    quantity: int = 0
    unit_price: float = 0.0
    subtotal: float = 0.0


@dataclass
class Invoice:
    id: str
    total_amount: float = 0.0
    status: str = "DUE"
    items: List[InvoiceItem] = field(default_factory=list)
    sample_count: int = 0


@dataclass
class Report:
    """Fully populated report object supplied after the upstream fetch."""
    id: str
    client: Client
    samples: List[Sample] = field(default_factory=list)
    report_number: str = ""
    issue_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    sarok_number: str = ""
    invoice_id: Optional[str] = None
    invoice: Optional[Invoice] = None

    @property
    def is_government(self) -> bool:
        return self.client.client_type is ClientType.GOVT_ORG


# ============================================================
# DERIVED (never persisted)
# ============================================================

@dataclass
class ParameterSummary:
    """Per-parameter aggregate of one report group.

    ``average`` is None when no member sample has a value ("no data").
    """
    average: Optional[float] = None
    count: int = 0
    upland: str = "-"
    wetland: str = "-"


@dataclass
class ReportGroup:
    """Samples sharing a location or map-unit key, with their aggregates."""
    key: str
    samples: List[Sample] = field(default_factory=list)
    summaries: Dict[str, ParameterSummary] = field(default_factory=dict)
    vumi_srini: str = "-"
    locations: str = ""

    @property
    def sample_count(self) -> int:
        return len(self.samples)

    @property
    def parameters(self) -> List[TestParameter]:
        return self.samples[0].parameters if self.samples else []


@dataclass
class PageSlice(Generic[T]):
    """Items that fit on one physical page of a section."""
    items: List[T]
    page_number: int       # 1-based
    total_pages: int
