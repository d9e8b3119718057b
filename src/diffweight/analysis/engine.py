"""Analysis engine — diff text in, AnalysisResult out."""

from __future__ import annotations

import logging
import time
from pathlib import Path

from diffweight.analysis.mapper import FileReader, map_changes
from diffweight.config.schema import DiffWeightConfig
from diffweight.git.diff_parser import parse_diff
from diffweight.results.aggregator import summarize
from diffweight.results.models import AnalysisResult

logger = logging.getLogger(__name__)


def read_from_base_dir(base_dir: Path) -> FileReader:
    """File reader resolving diff paths against *base_dir*."""
    root = Path(base_dir)

    def _read(path: str) -> str:
        return (root / path).read_text(encoding="utf-8")

    return _read


def analyze(
    diff_text: str,
    config: DiffWeightConfig,
    file_reader: FileReader,
) -> AnalysisResult:
    """Run the full pipeline on *diff_text*.

    Only :class:`~diffweight.errors.DiffWeightError` subclasses escape:
    a malformed diff, an unreadable file or a Rust file that fails to parse.
    """
    start = time.perf_counter()

    diffs = parse_diff(diff_text)
    mapped = map_changes(diffs, config, file_reader)
    summary = summarize(mapped.changes, config)

    duration_ms = (time.perf_counter() - start) * 1000
    logger.debug(
        "analysed %d file(s), %d change(s), score %d in %.1fms",
        len(mapped.scope.analyzed_files),
        len(mapped.changes),
        summary.weighted_score,
        duration_ms,
    )
    return AnalysisResult(
        changes=mapped.changes,
        summary=summary,
        scope=mapped.scope,
        duration_ms=duration_ms,
    )
