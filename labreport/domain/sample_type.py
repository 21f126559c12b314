"""
Sample Type Domain Module.

Defines the SampleType and ClientType enums and the section-selection
rules derived from them. Every report section is chosen through
``section_kinds_for`` so that adding a sample type is a single, checked
change.
"""
from enum import Enum
from typing import List, Optional


class SampleType(str, Enum):
    """Physical specimen category submitted for testing."""
    SOIL = "SOIL"
    WATER = "WATER"
    FERTILIZER = "FERTILIZER"

    @property
    def bangla(self) -> str:
        """Bangla name used in report headings."""
        return {
            SampleType.SOIL: "মৃত্তিকা",
            SampleType.WATER: "পানি",
            SampleType.FERTILIZER: "সার",
        }[self]

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["SampleType"]:
        """Return the enum member for ``value`` or None when unknown."""
        if not value:
            return None
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            return None


class ClientType(str, Enum):
    """Client category; GOVT_ORG switches the soil layout and invoice rule."""
    FARMER = "FARMER"
    GOVT_ORG = "GOVT_ORG"
    NON_GOVT_ORG = "NON_GOVT_ORG"
    OTHER = "OTHER"

    @classmethod
    def parse(cls, value: Optional[str]) -> "ClientType":
        if not value:
            return cls.OTHER
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            return cls.OTHER


class SectionKind(Enum):
    """Report section layouts, one per table design."""
    FERTILIZER = "fertilizer"
    WATER = "water"
    SOIL = "soil"
    SOIL_GOVT_SAMPLES = "soil_govt_samples"
    SOIL_GOVT_LOCATIONS = "soil_govt_locations"
    SOIL_GOVT_MAP_UNITS = "soil_govt_map_units"


def is_government_soil(sample_type: SampleType, client_type: ClientType) -> bool:
    """Government soil reports use the aggregated three-part layout."""
    return sample_type is SampleType.SOIL and client_type is ClientType.GOVT_ORG


def section_kinds_for(sample_type: SampleType, client_type: ClientType) -> List[SectionKind]:
    """Map a sample-type bucket to the ordered section layouts it renders.

    Args:
        sample_type: Sample type of the bucket
        client_type: Type of the report's client

    Returns:
        Section kinds in rendering order.

    Raises:
        ValueError: If the sample type has no layout.
    """
    if is_government_soil(sample_type, client_type):
        return [
            SectionKind.SOIL_GOVT_SAMPLES,
            SectionKind.SOIL_GOVT_LOCATIONS,
            SectionKind.SOIL_GOVT_MAP_UNITS,
        ]
    if sample_type is SampleType.SOIL:
        return [SectionKind.SOIL]
    if sample_type is SampleType.WATER:
        return [SectionKind.WATER]
    if sample_type is SampleType.FERTILIZER:
        return [SectionKind.FERTILIZER]
    raise ValueError(f"Invalid report type: {sample_type}")
