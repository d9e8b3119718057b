"""Data models for diff parsing."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import PurePosixPath
from typing import List, Optional


class LineType(str, Enum):
    ADDED = "added"
    REMOVED = "removed"
    CONTEXT = "context"


@dataclass(frozen=True, slots=True)
class HunkLine:
    """A single classified line inside a hunk.

    Added lines only carry a new-file number, removed lines only an
    old-file number, context lines carry both.
    """

    line_type: LineType
    old_line: Optional[int]
    new_line: Optional[int]
    content: str

    @classmethod
    def added(cls, new_line: int, content: str) -> "HunkLine":
        return cls(LineType.ADDED, None, new_line, content)

    @classmethod
    def removed(cls, old_line: int, content: str) -> "HunkLine":
        return cls(LineType.REMOVED, old_line, None, content)

    @classmethod
    def context(cls, old_line: int, new_line: int, content: str) -> "HunkLine":
        return cls(LineType.CONTEXT, old_line, new_line, content)

    @property
    def is_added(self) -> bool:
        return self.line_type == LineType.ADDED

    @property
    def is_removed(self) -> bool:
        return self.line_type == LineType.REMOVED


@dataclass
class Hunk:
    """One ``@@`` block of a file diff."""

    old_start: int
    old_count: int
    new_start: int
    new_count: int
    lines: List[HunkLine] = field(default_factory=list)

    def added_count(self) -> int:
        return sum(1 for line in self.lines if line.is_added)

    def removed_count(self) -> int:
        return sum(1 for line in self.lines if line.is_removed)

    def added_lines(self) -> List[int]:
        """New-file line numbers of every added line."""
        return [line.new_line for line in self.lines if line.is_added and line.new_line is not None]

    def removed_lines(self) -> List[int]:
        """Old-file line numbers of every removed line."""
        return [line.old_line for line in self.lines if line.is_removed and line.old_line is not None]


@dataclass
class FileDiff:
    """All hunks for one file appearing in a diff."""

    path: str
    old_path: Optional[str] = None  # set when the a/ side names another file
    hunks: List[Hunk] = field(default_factory=list)

    def total_added(self) -> int:
        return sum(h.added_count() for h in self.hunks)

    def total_removed(self) -> int:
        return sum(h.removed_count() for h in self.hunks)

    def all_added_lines(self) -> List[int]:
        return [n for h in self.hunks for n in h.added_lines()]

    def all_removed_lines(self) -> List[int]:
        return [n for h in self.hunks for n in h.removed_lines()]

    def is_rust_file(self) -> bool:
        return PurePosixPath(self.path).suffix == ".rs"
