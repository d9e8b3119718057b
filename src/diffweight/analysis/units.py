"""Semantic unit data model — spans, kinds, visibility, units."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

# Synthesized attribute markers added by the extractor.
CFG_TEST_MARKER = "cfg_test"  # declared inside a test-only module
TEST_MARKER = "test"  # carries #[test], #[bench] or cfg(test)
BENCH_ATTRIBUTE = "bench"


class UnitKind(str, Enum):
    FUNCTION = "function"
    STRUCT = "struct"
    ENUM = "enum"
    TRAIT = "trait"
    IMPL = "impl"
    CONST = "const"
    STATIC = "static"
    TYPE_ALIAS = "type_alias"
    MACRO = "macro"
    MODULE = "module"


class Visibility(str, Enum):
    PUBLIC = "public"
    CRATE = "crate"  # pub(crate)
    RESTRICTED = "restricted"  # pub(super), pub(in path), ...
    PRIVATE = "private"

    def is_public(self) -> bool:
        return self is Visibility.PUBLIC


@dataclass(frozen=True, slots=True)
class LineSpan:
    """Inclusive, 1-indexed line range in a source file."""

    start: int
    end: int

    def contains(self, line: int) -> bool:
        return self.start <= line <= self.end

    def __len__(self) -> int:
        return self.end - self.start + 1 if self.end >= self.start else 0

    @property
    def length(self) -> int:
        return len(self)

    def is_empty(self) -> bool:
        return len(self) == 0


@dataclass(frozen=True)
class SemanticUnit:
    """A named, located declaration extracted from Rust source.

    ``impl_name`` is set for members of ``impl`` and ``trait`` blocks, e.g.
    ``"Parser"`` or ``"Display for Parser"``.
    """

    kind: UnitKind
    name: str
    visibility: Visibility
    span: LineSpan
    attributes: Tuple[str, ...] = ()
    impl_name: Optional[str] = None

    def qualified_name(self) -> str:
        if self.impl_name:
            return f"{self.impl_name}::{self.name}"
        return self.name

    def has_attribute(self, attr: str) -> bool:
        return attr in self.attributes
