"""
Domain Module.

Contains domain enums and classification rules.
"""
from .sample_type import (
    SampleType,
    ClientType,
    SectionKind,
    is_government_soil,
    section_kinds_for,
)

__all__ = [
    "SampleType",
    "ClientType",
    "SectionKind",
    "is_government_soil",
    "section_kinds_for",
]
