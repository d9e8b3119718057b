"""Fold classified changes into a Summary and evaluate configured limits."""

from __future__ import annotations

from collections import Counter
from typing import Dict, List

from diffweight.analysis.units import UnitKind
from diffweight.classifier.weights import calculate_weight
from diffweight.config.schema import DiffWeightConfig
from diffweight.results.models import Change, Summary

# per_type config key for each unit kind
PER_TYPE_KEYS: Dict[UnitKind, str] = {
    UnitKind.FUNCTION: "functions",
    UnitKind.STRUCT: "structs",
    UnitKind.ENUM: "enums",
    UnitKind.TRAIT: "traits",
    UnitKind.IMPL: "impl_blocks",
    UnitKind.CONST: "consts",
    UnitKind.STATIC: "statics",
    UnitKind.TYPE_ALIAS: "type_aliases",
    UnitKind.MACRO: "macros",
    UnitKind.MODULE: "modules",
}


def production_kind_counts(changes: List[Change]) -> Counter:
    return Counter(
        PER_TYPE_KEYS[c.unit.kind] for c in changes if c.classification.is_production()
    )


def exceeded_per_kind_limits(changes: List[Change], config: DiffWeightConfig) -> Dict[str, tuple[int, int]]:
    """Return ``{key: (actual, cap)}`` for every per-kind cap exceeded.

    Only production changes count towards the caps.
    """
    per_type = config.limits.per_type
    if per_type is None:
        return {}
    counts = production_kind_counts(changes)
    return {
        key: (counts[key], cap)
        for key, cap in per_type.configured().items()
        if counts[key] > cap
    }


def exceeded_limits(summary: Summary, changes: List[Change], config: DiffWeightConfig) -> Dict[str, tuple[int, int]]:
    """Every limit the run is over, as ``{name: (actual, maximum)}``."""
    limits = config.limits
    over: Dict[str, tuple[int, int]] = {}
    if summary.total_prod_units() > limits.max_prod_units:
        over["prod_units"] = (summary.total_prod_units(), limits.max_prod_units)
    if summary.weighted_score > limits.max_weighted_score:
        over["weighted_score"] = (summary.weighted_score, limits.max_weighted_score)
    if limits.max_prod_lines is not None and summary.prod_lines_added > limits.max_prod_lines:
        over["prod_lines"] = (summary.prod_lines_added, limits.max_prod_lines)
    for key, pair in exceeded_per_kind_limits(changes, config).items():
        over[f"per_type.{key}"] = pair
    return over


def summarize(changes: List[Change], config: DiffWeightConfig) -> Summary:
    """Build the run Summary from the full change list."""
    summary = Summary()

    for change in changes:
        if change.classification.is_production():
            kind = change.unit.kind
            if kind == UnitKind.FUNCTION:
                summary.prod_functions += 1
            elif kind in (UnitKind.STRUCT, UnitKind.ENUM):
                summary.prod_structs += 1
            else:
                summary.prod_other += 1
            summary.prod_lines_added += change.lines_added
            summary.prod_lines_removed += change.lines_removed
            summary.weighted_score += calculate_weight(change.unit, config)
        else:
            summary.test_units += 1
            summary.test_lines_added += change.lines_added
            summary.test_lines_removed += change.lines_removed

    summary.exceeds_limit = bool(exceeded_limits(summary, changes, config))
    return summary
