# Tests configuration for labreport
import sys
from datetime import datetime
from pathlib import Path

import matplotlib
import pytest

matplotlib.use("Agg")

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from labreport.config import InstituteConfig, ReportConfig
from labreport.domain import SampleType, ClientType
from labreport.models import (
    AgroTest,
    Client,
    ComparisonRule,
    Invoice,
    InvoiceItem,
    OrderItem,
    Report,
    Sample,
    TestParameter,
    TestResult,
)


def _make_parameters(count=3, prefix="p", unit="%", analysis_type=None):
    names = ["pH", "Nitrogen", "Phosphorus", "Potassium", "Sulfur", "Zinc"]
    return [
        TestParameter(
            id=f"{prefix}{i}",
            name=names[i % len(names)],
            unit=unit,
            analysis_type=analysis_type,
            comparison_rules=[ComparisonRule(type="BETWEEN", min=1.0, max=2.5, interpretation="ভেজালমুক্ত")],
        )
        for i in range(count)
    ]


def _make_sample(
    index,
    sample_type=SampleType.SOIL,
    parameters=None,
    values=None,
    interpretation=None,
    upland=None,
    wetland=None,
    location="Jessore",
    manchitro_unit=None,
    vumi_srini=None,
):
    """Sample with one result per parameter; ``values`` may hold None."""
    parameters = parameters if parameters is not None else _make_parameters()
    values = values if values is not None else [float(index + i) for i in range(len(parameters))]
    results = [
        TestResult(
            parameter=param,
            value=value,
            interpretation=interpretation,
            upland_interpretation=upland,
            wetland_interpretation=wetland,
        )
        for param, value in zip(parameters, values)
    ]
    return Sample(
        id=f"s{index}",
        sample_id_number=f"S-{index:03d}",
        sample_type=sample_type,
        collection_location=location,
        crop_type="Rice",
        bunot="L",
        manchitro_unit=manchitro_unit,
        vumi_srini=vumi_srini,
        order_item=OrderItem(
            id=f"oi-{sample_type.value}",
            agro_test=AgroTest(id=f"at-{sample_type.value}", name=f"{sample_type.value.title()} Test",
                               sample_type=sample_type),
            parameters=parameters,
        ),
        test_results=results,
    )


def _make_report(samples, client_type=ClientType.FARMER, invoice=True):
    return Report(
        id="r1",
        client=Client(id="c1", name="Karim", phone="01711000000", address="Jessore", client_type=client_type),
        samples=list(samples),
        report_number="42",
        issue_date=datetime(2024, 3, 5),
        created_at=datetime(2024, 3, 1),
        sarok_number="SRDI/42",
        invoice_id="inv1" if invoice else None,
        invoice=Invoice(
            id="inv1",
            total_amount=1250.0,
            items=[InvoiceItem(test_name="pH", quantity=5, unit_price=250.0, subtotal=1250.0)],
            sample_count=len(samples),
        ) if invoice else None,
    )


@pytest.fixture
def make_parameters():
    """Factory for ordered test parameters."""
    return _make_parameters


@pytest.fixture
def make_sample():
    """Factory for samples with results for every parameter."""
    return _make_sample


@pytest.fixture
def make_report():
    """Factory for reports around a list of samples."""
    return _make_report


@pytest.fixture
def govt_soil_samples():
    """23 soil samples across 5 locations and 4 map units."""
    params = _make_parameters()
    locations = ["Jessore", "Khulna", "Magura", "Narail", "Jhenaidah"]
    return [
        _make_sample(i, SampleType.SOIL, params, location=locations[i % 5],
                     manchitro_unit=(i % 4) + 1, vumi_srini="MHL", upland="মধ্যম", wetland="নিম্ন")
        for i in range(23)
    ]


@pytest.fixture
def mixed_report():
    """Farmer report listing WATER before SOIL before FERTILIZER samples."""
    samples = (
        [_make_sample(i, SampleType.WATER, _make_parameters(prefix="w")) for i in range(3)]
        + [_make_sample(10 + i, SampleType.SOIL) for i in range(2)]
        + [_make_sample(20 + i, SampleType.FERTILIZER, _make_parameters(2, prefix="f"),
                        interpretation="ভেজালমুক্ত") for i in range(6)]
    )
    return _make_report(samples)


@pytest.fixture
def institute():
    return InstituteConfig(
        name="আঞ্চলিক গবেষণাগার",
        address="যশোর",
        issued_by="Dr. Rahman",
        phone="01711000000",
        memo_number="১২,০৩",
    )


@pytest.fixture
def fast_config():
    """Low-resolution capture keeps rendering tests quick."""
    return ReportConfig(raster_scale=0.5, raster_dpi=40, timeout_s=None)
