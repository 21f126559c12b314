"""
Report I/O - reading report payloads into the report model.

The payload is the JSON returned by the reports API: camelCase keys,
samples with their order item, ordered test parameters and test
results. Test results reference their parameter under the upstream
``testParamater`` key. Missing optional fields degrade to None.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import pandas as pd

from labreport.domain import SampleType, ClientType
from labreport.errors import ReportDataError
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

logger = logging.getLogger(__name__)


def _parse_datetime(value: Any) -> Optional[datetime]:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    stamp = pd.to_datetime(value, errors="coerce")
    if pd.isna(stamp):
        logger.warning("[ReportIO] Unparseable date: %r", value)
        return None
    return stamp.to_pydatetime()


def _parse_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.warning("[ReportIO] Non-numeric value ignored: %r", value)
        return None


def _parse_int(value: Any) -> Optional[int]:
    number = _parse_float(value)
    if number is None:
        return None
    if not number.is_integer():
        logger.warning("[ReportIO] Non-integer value ignored: %r", value)
        return None
    return int(number)


def _parse_rule(data: Dict[str, Any]) -> ComparisonRule:
    return ComparisonRule(
        type=data.get("type") or "BETWEEN",
        min=_parse_float(data.get("min")),
        max=_parse_float(data.get("max")),
        soil_category=data.get("soilCategory"),
        interpretation=data.get("interpretation"),
    )


def _parse_parameter(data: Dict[str, Any], catalog: Dict[str, TestParameter]) -> TestParameter:
    """One TestParameter per id, shared between order items and results."""
    param_id = str(data.get("id", ""))
    if param_id in catalog:
        return catalog[param_id]
    param = TestParameter(
        id=param_id,
        name=data.get("name") or "",
        unit=data.get("unit"),
        analysis_type=data.get("analysisType"),
        comparison_rules=[_parse_rule(r) for r in data.get("comparisonRules") or []],
    )
    catalog[param_id] = param
    return param


def _parse_order_item(data: Optional[Dict[str, Any]], catalog: Dict[str, TestParameter]) -> Optional[OrderItem]:
    if not data:
        return None
    agro = data.get("agroTest")
    agro_test = AgroTest(
        id=str(agro.get("id", "")),
        name=agro.get("name") or "",
        sample_type=SampleType.parse(agro.get("sampleType")),
    ) if agro else None
    parameters = [
        _parse_parameter(p["testParameter"], catalog)
        for p in data.get("orderTestParameters") or []
        if p.get("testParameter")
    ]
    return OrderItem(id=str(data.get("id", "")), agro_test=agro_test, parameters=parameters)


def _parse_result(data: Dict[str, Any], catalog: Dict[str, TestParameter]) -> Optional[TestResult]:
    param_data = data.get("testParamater") or data.get("testParameter")
    if not param_data:
        logger.warning("[ReportIO] Test result %s has no parameter; skipped", data.get("id"))
        return None
    return TestResult(
        parameter=_parse_parameter(param_data, catalog),
        value=_parse_float(data.get("value")),
        interpretation=data.get("interpretation"),
        upland_interpretation=data.get("uplandInterpretation"),
        wetland_interpretation=data.get("wetlandInterpretation"),
    )


def _parse_sample(data: Dict[str, Any], catalog: Dict[str, TestParameter]) -> Optional[Sample]:
    sample_type = SampleType.parse(data.get("sampleType"))
    if sample_type is None:
        logger.warning("[ReportIO] Sample %s has unknown sample type %r; skipped",
                       data.get("id"), data.get("sampleType"))
        return None

    results = [_parse_result(r, catalog) for r in data.get("testResults") or []]
    return Sample(
        id=str(data.get("id", "")),
        sample_id_number=str(data.get("sampleIdNumber") or ""),
        sample_type=sample_type,
        collection_location=data.get("collectionLocation"),
        collection_date=_parse_datetime(data.get("collectionDate")),
        crop_type=data.get("cropType"),
        bunot=data.get("bunot"),
        manchitro_unit=_parse_int(data.get("manchitroUnit")),
        vumi_srini=data.get("vumiSrini"),
        order_item=_parse_order_item(data.get("orderItem"), catalog),
        test_results=[r for r in results if r is not None],
    )


def _parse_invoice(data: Optional[Dict[str, Any]]) -> Optional[Invoice]:
    if not data:
        return None
    items = []
    for item in data.get("items") or []:
        quantity = _parse_int(item.get("quantity")) or 0
        unit_price = _parse_float(item.get("unitPrice")) or 0.0
        subtotal = _parse_float(item.get("subtotal"))
        items.append(InvoiceItem(
            test_name=item.get("testName") or (item.get("agroTest") or {}).get("name", ""),
            quantity=quantity,
            unit_price=unit_price,
            subtotal=subtotal if subtotal is not None else quantity * unit_price,
        ))
    return Invoice(
        id=str(data.get("id", "")),
        total_amount=_parse_float(data.get("totalAmount")) or 0.0,
        status=data.get("status") or "DUE",
        items=items,
        sample_count=_parse_int(data.get("sampleCount")) or 0,
    )


def report_from_dict(data: Dict[str, Any]) -> Report:
    """Build a Report from the reports API payload.

    Args:
        data: Decoded JSON object

    Returns:
        Report with samples in payload order

    Raises:
        ReportDataError: If the payload is not a report object.
    """
    if not isinstance(data, dict):
        raise ReportDataError(f"Report payload must be an object, got {type(data).__name__}")
    if "id" not in data:
        raise ReportDataError("Report payload has no 'id'")

    client_data = data.get("client") or {}
    client = Client(
        id=str(client_data.get("id", "")),
        name=client_data.get("name") or "",
        phone=str(client_data.get("phone") or ""),
        address=client_data.get("address"),
        client_type=ClientType.parse(client_data.get("clientType")),
    )

    catalog: Dict[str, TestParameter] = {}
    samples: List[Sample] = [
        s for s in (_parse_sample(d, catalog) for d in data.get("samples") or []) if s is not None
    ]
    order = data.get("order") or {}

    report = Report(
        id=str(data["id"]),
        client=client,
        samples=samples,
        report_number=str(data.get("reportNumber") or ""),
        issue_date=_parse_datetime(data.get("issueDate")),
        created_at=_parse_datetime(data.get("createdAt")),
        sarok_number=str(data.get("sarokNumber") or order.get("sarokNumber") or ""),
        invoice_id=data.get("invoiceId"),
        invoice=_parse_invoice(data.get("invoice")),
    )
    logger.info("[ReportIO] Loaded report %s: %d samples, client type %s",
                report.id, len(samples), client.client_type.value)
    return report


def load_report(file_path: Union[str, Path]) -> Report:
    """
    Load a report from a JSON file.

    Args:
        file_path: Path to JSON file

    Returns:
        Report

    Raises:
        ReportDataError: If the file cannot be read or decoded.
    """
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ReportDataError(f"Cannot read report {file_path}: {e}") from e
    return report_from_dict(data)
