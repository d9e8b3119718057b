"""Change mapper — attributes changed lines to the units that contain them."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Set

from diffweight.analysis.extractor import extract_from_source
from diffweight.analysis.units import SemanticUnit
from diffweight.classifier.rules import classify
from diffweight.config.schema import DiffWeightConfig
from diffweight.errors import FileReadError
from diffweight.git.models import FileDiff
from diffweight.results.models import AnalysisScope, Change, ExclusionReason

logger = logging.getLogger(__name__)

FileReader = Callable[[str], str]


@dataclass
class MapResult:
    changes: List[Change] = field(default_factory=list)
    scope: AnalysisScope = field(default_factory=AnalysisScope)


def find_containing_unit(units: Sequence[SemanticUnit], line: int) -> Optional[SemanticUnit]:
    """Innermost unit whose span contains *line*.

    The smallest span wins; among equal lengths the earliest unit in
    extraction order is kept.
    """
    best: Optional[SemanticUnit] = None
    for unit in units:
        if not unit.span.contains(line):
            continue
        if best is None or unit.span.length < best.span.length:
            best = unit
    return best


def _tally(units: Sequence[SemanticUnit], lines: List[int], hit_ids: Set[int]) -> Counter:
    """Count hits per qualified name; record which units were hit in *hit_ids*."""
    hits: Counter = Counter()
    for line in lines:
        unit = find_containing_unit(units, line)
        if unit is not None:
            hits[unit.qualified_name()] += 1
            hit_ids.add(id(unit))
    return hits


def _map_file(
    diff: FileDiff,
    config: DiffWeightConfig,
    file_reader: FileReader,
) -> List[Change]:
    try:
        content = file_reader(diff.path)
    except OSError as exc:
        raise FileReadError(diff.path, exc) from exc

    units = extract_from_source(content, diff.path)
    hit_ids: Set[int] = set()
    added = _tally(units, diff.all_added_lines(), hit_ids)
    removed = _tally(units, diff.all_removed_lines(), hit_ids)

    changes: List[Change] = []
    emitted: Set[str] = set()
    # Units sharing a qualified name share one tally, reported on the
    # first of them that actually contains a changed line
    for unit in units:
        key = unit.qualified_name()
        if key in emitted or id(unit) not in hit_ids:
            continue
        emitted.add(key)
        changes.append(
            Change(
                file_path=diff.path,
                unit=unit,
                classification=classify(unit, diff.path, config),
                lines_added=added[key],
                lines_removed=removed[key],
            )
        )
    logger.debug("%s: %d changed unit(s)", diff.path, len(changes))
    return changes


def map_changes(
    diffs: Sequence[FileDiff],
    config: DiffWeightConfig,
    file_reader: FileReader,
) -> MapResult:
    """Map every analysable file diff to its changed units.

    Non-Rust and ignored files are recorded in the scope and skipped.
    A reader failure raises :class:`FileReadError` and aborts the run.
    """
    result = MapResult()
    result.scope.exclusion_patterns = list(config.classification.ignore_paths)

    for diff in diffs:
        if not diff.is_rust_file():
            logger.debug("skipping non-Rust file %s", diff.path)
            result.scope.add_skipped(diff.path, ExclusionReason.NON_RUST)
            continue

        pattern = config.matching_ignore_pattern(diff.path)
        if pattern is not None:
            logger.debug("skipping %s (matches %r)", diff.path, pattern)
            result.scope.add_skipped(diff.path, ExclusionReason.IGNORE_PATTERN, pattern)
            continue

        result.scope.add_analyzed(diff.path)
        result.changes.extend(_map_file(diff, config, file_reader))

    return result
