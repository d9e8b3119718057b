"""Unified diff parser.

Rebuilds per-file hunks from ``git diff`` output and numbers every line in
old-file and new-file coordinates. The scan is a small state machine:
outside a file, inside a file before its first hunk, inside a hunk.
Metadata lines (index, mode changes, renames, binary markers, ``---`` and
``+++`` headers) only ever appear before the first hunk and are inert.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Tuple

from diffweight.errors import DiffParseError
from diffweight.git.models import FileDiff, Hunk, HunkLine

logger = logging.getLogger(__name__)

_DIFF_HEADER = "diff --git"
_HUNK_HEADER = "@@"
_RANGE_RE = re.compile(r"^(\d+)(?:,(\d+))?$")


def _strip_side_prefix(path: str, prefix: str) -> str:
    return path[len(prefix):] if path.startswith(prefix) else path


def _parse_file_header(line: str) -> Tuple[str, Optional[str]]:
    """Return ``(new_path, old_path)`` from a ``diff --git a/x b/y`` line."""
    parts = line.split()
    if len(parts) < 4:
        raise DiffParseError(f"invalid diff header: {line}")
    old_path = _strip_side_prefix(parts[2], "a/")
    new_path = _strip_side_prefix(parts[3], "b/")
    return new_path, (old_path if old_path != new_path else None)


def _parse_range(text: str) -> Tuple[int, int]:
    m = _RANGE_RE.match(text)
    if m is None:
        raise DiffParseError(f"invalid line range: {text}")
    start = int(m.group(1))
    count = int(m.group(2)) if m.group(2) is not None else 1
    return start, count


def _parse_hunk_header(line: str) -> Tuple[int, int, int, int]:
    """Parse ``@@ -old_start,old_count +new_start,new_count @@ ...``."""
    body = line[len(_HUNK_HEADER):].split(_HUNK_HEADER, 1)[0].split()
    if len(body) < 2:
        raise DiffParseError(f"invalid hunk header: {line}")
    old_range, new_range = body[0], body[1]
    if not old_range.startswith("-"):
        raise DiffParseError(f"invalid old range: {old_range}")
    if not new_range.startswith("+"):
        raise DiffParseError(f"invalid new range: {new_range}")
    old_start, old_count = _parse_range(old_range[1:])
    new_start, new_count = _parse_range(new_range[1:])
    return old_start, old_count, new_start, new_count


def parse_diff(diff_text: str) -> List[FileDiff]:
    """Parse unified diff text into one :class:`FileDiff` per file.

    Raises :class:`DiffParseError` on a malformed file or hunk header; no
    partial result is returned in that case.
    """
    files: List[FileDiff] = []
    current_file: Optional[FileDiff] = None
    current_hunk: Optional[Hunk] = None
    old_line = 0
    new_line = 0

    for raw_line in diff_text.splitlines():
        line = raw_line.rstrip("\r")

        # --- diff --git header -> new file context ---
        if line.startswith(_DIFF_HEADER):
            if current_file is not None:
                if current_hunk is not None:
                    current_file.hunks.append(current_hunk)
                files.append(current_file)
            path, old_path = _parse_file_header(line)
            current_file = FileDiff(path=path, old_path=old_path)
            current_hunk = None
            continue

        # --- Hunk header ---
        if line.startswith(_HUNK_HEADER):
            if current_file is None:
                continue
            if current_hunk is not None:
                current_file.hunks.append(current_hunk)
            old_start, old_count, new_start, new_count = _parse_hunk_header(line)
            current_hunk = Hunk(old_start, old_count, new_start, new_count)
            old_line = old_start
            new_line = new_start
            continue

        if current_hunk is None or not line:
            continue

        # --- Content lines ---
        marker, content = line[0], line[1:]
        if marker == "+":
            current_hunk.lines.append(HunkLine.added(new_line, content))
            new_line += 1
        elif marker == "-":
            current_hunk.lines.append(HunkLine.removed(old_line, content))
            old_line += 1
        elif marker == " ":
            current_hunk.lines.append(HunkLine.context(old_line, new_line, content))
            old_line += 1
            new_line += 1
        # "\ No newline at end of file" and anything unknown: skip

    if current_file is not None:
        if current_hunk is not None:
            current_file.hunks.append(current_hunk)
        files.append(current_file)

    logger.debug("parsed %d file diff(s)", len(files))
    return files
