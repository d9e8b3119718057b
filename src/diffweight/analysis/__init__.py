"""Rust source analysis — units, syntax adapter, extractor, mapper, engine."""

from diffweight.analysis.extractor import extract, extract_from_source
from diffweight.analysis.units import LineSpan, SemanticUnit, UnitKind, Visibility

__all__ = [
    "LineSpan",
    "SemanticUnit",
    "UnitKind",
    "Visibility",
    "extract",
    "extract_from_source",
]
