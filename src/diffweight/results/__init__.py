"""Analysis result models and aggregation."""

from diffweight.results.aggregator import exceeded_limits, exceeded_per_kind_limits, summarize
from diffweight.results.models import (
    AnalysisResult,
    AnalysisScope,
    Change,
    CodeCategory,
    ExclusionReason,
    SkippedFile,
    Summary,
)

__all__ = [
    "AnalysisResult",
    "AnalysisScope",
    "Change",
    "CodeCategory",
    "ExclusionReason",
    "SkippedFile",
    "Summary",
    "exceeded_limits",
    "exceeded_per_kind_limits",
    "summarize",
]
