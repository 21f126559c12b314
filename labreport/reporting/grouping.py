"""
Sample Grouper.

Partitions a report's samples into sections by sample type and, for
government soil reports, into location and map-unit groups with
per-parameter averages and most-frequent interpretations.

Missing optional fields degrade to sentinels; nothing here raises on
partial data.
"""
import logging
from typing import Callable, Dict, Iterable, List, Optional

import pandas as pd

from labreport.domain import SampleType
from labreport.models import Sample, ParameterSummary, ReportGroup

logger = logging.getLogger(__name__)

UNKNOWN_LOCATION = "Unknown Location"
UNKNOWN_MAP_UNIT = "অজানা"
NO_VALUE = "-"

_RESULT_COLUMNS = ["param_id", "value", "upland", "wetland"]


def most_frequent(values: Iterable[Optional[str]], default: str = NO_VALUE) -> str:
    """Most common non-empty value.

    Ties go to the value seen first: distinct values are counted in
    insertion order and only a strictly higher count replaces the leader.
    """
    counts: Dict[str, int] = {}
    for value in values:
        if not value:
            continue
        counts[value] = counts.get(value, 0) + 1

    best, best_count = default, 0
    for value, count in counts.items():
        if count > best_count:
            best, best_count = value, count
    return best


def group_by_type(samples: Iterable[Sample]) -> Dict[SampleType, List[Sample]]:
    """Bucket samples by sample type.

    Buckets appear in order of first occurrence and keep input order, so
    the result drives the order of report sections.
    """
    buckets: Dict[SampleType, List[Sample]] = {}
    for sample in samples:
        buckets.setdefault(sample.sample_type, []).append(sample)
    return buckets


def location_key(sample: Sample) -> str:
    return sample.collection_location or UNKNOWN_LOCATION


def map_unit_key(sample: Sample) -> str:
    if sample.manchitro_unit is None:
        return UNKNOWN_MAP_UNIT
    return str(sample.manchitro_unit)


def _bucket(samples: Iterable[Sample], key: Callable[[Sample], str]) -> Dict[str, List[Sample]]:
    buckets: Dict[str, List[Sample]] = {}
    for sample in samples:
        buckets.setdefault(key(sample), []).append(sample)
    return buckets


def summarize_parameters(samples: List[Sample]) -> Dict[str, ParameterSummary]:
    """Aggregate test results of ``samples`` per parameter.

    The average uses only non-null values; a parameter with no values
    gets ``average=None`` rather than a zero or NaN.

    Args:
        samples: Members of one group

    Returns:
        Dict mapping parameter id to its summary, in order of first appearance.
    """
    records = [
        (result.parameter.id, result.value,
         result.upland_interpretation, result.wetland_interpretation)
        for sample in samples
        for result in sample.test_results
    ]
    if not records:
        return {}

    df = pd.DataFrame.from_records(records, columns=_RESULT_COLUMNS)
    df["value"] = pd.to_numeric(df["value"], errors="coerce")

    summaries: Dict[str, ParameterSummary] = {}
    for param_id, rows in df.groupby("param_id", sort=False):
        values = rows["value"].dropna()
        summaries[param_id] = ParameterSummary(
            average=float(values.mean()) if len(values) else None,
            count=int(len(values)),
            upland=most_frequent(rows["upland"].dropna().tolist()),
            wetland=most_frequent(rows["wetland"].dropna().tolist()),
        )
    return summaries


def _build_group(key: str, members: List[Sample]) -> ReportGroup:
    return ReportGroup(
        key=key,
        samples=members,
        summaries=summarize_parameters(members),
        vumi_srini=most_frequent(s.vumi_srini for s in members),
    )


def group_by_location(samples: Iterable[Sample]) -> List[ReportGroup]:
    """Group government soil samples by collection location."""
    groups = [_build_group(key, members) for key, members in _bucket(samples, location_key).items()]
    logger.debug("[Grouper] %d location groups: %s", len(groups), [g.key for g in groups])
    return groups


def group_by_manchitro_unit(samples: Iterable[Sample]) -> List[ReportGroup]:
    """Group government soil samples by map unit, listing their locations."""
    groups = []
    for key, members in _bucket(samples, map_unit_key).items():
        group = _build_group(key, members)
        group.locations = ", ".join(dict.fromkeys(location_key(s) for s in members))
        groups.append(group)
    logger.debug("[Grouper] %d map-unit groups: %s", len(groups), [g.key for g in groups])
    return groups
