"""Result data models — classified changes, summary, analysis scope."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional

from diffweight.analysis.units import SemanticUnit


class CodeCategory(str, Enum):
    PRODUCTION = "production"
    TEST = "test"
    TEST_UTILITY = "test_utility"
    BENCHMARK = "benchmark"
    EXAMPLE = "example"
    BUILD_SCRIPT = "build_script"

    def is_production(self) -> bool:
        return self is CodeCategory.PRODUCTION

    def is_test_related(self) -> bool:
        return self is not CodeCategory.PRODUCTION


@dataclass(frozen=True)
class Change:
    """One semantic unit touched by the diff."""

    file_path: str
    unit: SemanticUnit
    classification: CodeCategory
    lines_added: int
    lines_removed: int

    def total_lines(self) -> int:
        return self.lines_added + self.lines_removed


@dataclass
class Summary:
    """Aggregate counts for a run; derived once from the change list."""

    prod_functions: int = 0
    prod_structs: int = 0  # structs and enums
    prod_other: int = 0
    test_units: int = 0
    prod_lines_added: int = 0
    prod_lines_removed: int = 0
    test_lines_added: int = 0
    test_lines_removed: int = 0
    weighted_score: int = 0
    exceeds_limit: bool = False

    def total_prod_units(self) -> int:
        return self.prod_functions + self.prod_structs + self.prod_other


class ExclusionReason(str, Enum):
    NON_RUST = "non_rust"
    IGNORE_PATTERN = "ignore_pattern"


@dataclass(frozen=True)
class SkippedFile:
    path: str
    reason: ExclusionReason
    pattern: Optional[str] = None  # set for IGNORE_PATTERN


@dataclass
class AnalysisScope:
    """Which files were analysed and which were skipped, and why."""

    analyzed_files: List[str] = field(default_factory=list)
    skipped_files: List[SkippedFile] = field(default_factory=list)
    exclusion_patterns: List[str] = field(default_factory=list)

    def add_analyzed(self, path: str) -> None:
        self.analyzed_files.append(path)

    def add_skipped(self, path: str, reason: ExclusionReason, pattern: Optional[str] = None) -> None:
        self.skipped_files.append(SkippedFile(path, reason, pattern))

    def non_rust_count(self) -> int:
        return sum(1 for f in self.skipped_files if f.reason == ExclusionReason.NON_RUST)

    def ignored_count(self) -> int:
        return sum(1 for f in self.skipped_files if f.reason == ExclusionReason.IGNORE_PATTERN)


@dataclass
class AnalysisResult:
    """Complete result of an analysis run."""

    changes: List[Change] = field(default_factory=list)
    summary: Summary = field(default_factory=Summary)
    scope: AnalysisScope = field(default_factory=AnalysisScope)
    duration_ms: float = 0.0

    def production_changes(self) -> Iterator[Change]:
        return (c for c in self.changes if c.classification.is_production())

    def test_changes(self) -> Iterator[Change]:
        return (c for c in self.changes if c.classification.is_test_related())
