"""Unified diff parsing — models and parser."""

from diffweight.git.diff_parser import parse_diff
from diffweight.git.models import FileDiff, Hunk, HunkLine, LineType

__all__ = [
    "FileDiff",
    "Hunk",
    "HunkLine",
    "LineType",
    "parse_diff",
]
