"""Markdown PR comment.

The first line is a fixed HTML marker so a CI job can find and update its
previous comment instead of posting a new one.
"""

from __future__ import annotations

from typing import Iterable, List

from diffweight.config.schema import DiffWeightConfig
from diffweight.results.aggregator import exceeded_limits, production_kind_counts
from diffweight.results.models import AnalysisResult, Change, ExclusionReason

COMMENT_MARKER = "<!-- diffweight-comment -->"

# Skipped files are listed individually only up to this many
MAX_LISTED_SKIPPED = 10

_KIND_LABELS = {"type_alias": "type"}

_LIMIT_LABELS = {
    "prod_units": "units",
    "weighted_score": "weighted score",
    "prod_lines": "lines added",
}
_PER_TYPE_PREFIX = "per_type."


def _status(over: bool) -> str:
    return "❌" if over else "✅"


def _limit_label(name: str) -> str:
    if name.startswith(_PER_TYPE_PREFIX):
        name = name[len(_PER_TYPE_PREFIX):]
    return _LIMIT_LABELS.get(name, name.replace("_", " "))


def _verdict(result: AnalysisResult, config: DiffWeightConfig) -> List[str]:
    s = result.summary
    if not s.exceeds_limit:
        return [
            "> [!TIP]",
            "> **PR size is within limits.** Good job keeping changes focused!",
        ]

    lines = [
        "> [!CAUTION]",
        "> **PR exceeds configured limits.** Consider splitting into smaller PRs.",
    ]
    exceeded = [
        f"**{actual}** {_limit_label(name)} (limit: {maximum})"
        for name, (actual, maximum) in exceeded_limits(s, result.changes, config).items()
    ]
    if exceeded:
        lines.append(">")
        lines.extend(f"> - {item}" for item in exceeded)
    return lines


def _limits_section(result: AnalysisResult, config: DiffWeightConfig) -> List[str]:
    s = result.summary
    limits = config.limits
    lines = [
        "<details>",
        "<summary><strong>Limits</strong> — configured thresholds for this repository</summary>",
        "",
        "> *Each metric is compared against its configured maximum. "
        "If any limit is exceeded, the PR check fails.*",
        "",
        "| Metric | Value | Limit | Status |",
        "|--------|------:|------:|:------:|",
        f"| Production Units | {s.total_prod_units()} | {limits.max_prod_units} "
        f"| {_status(s.total_prod_units() > limits.max_prod_units)} |",
        f"| Weighted Score | {s.weighted_score} | {limits.max_weighted_score} "
        f"| {_status(s.weighted_score > limits.max_weighted_score)} |",
    ]
    if limits.max_prod_lines is not None:
        lines.append(
            f"| Lines Added | {s.prod_lines_added} | {limits.max_prod_lines} "
            f"| {_status(s.prod_lines_added > limits.max_prod_lines)} |"
        )
    if limits.per_type is not None:
        counts = production_kind_counts(result.changes)
        for key, cap in limits.per_type.configured().items():
            label = key.replace("_", " ").capitalize()
            lines.append(f"| {label} | {counts[key]} | {cap} | {_status(counts[key] > cap)} |")
    lines += [
        "",
        "**Understanding the metrics:**",
        "- **Production Units**: Functions, structs, enums, traits, and other "
        "semantic code units in production code",
        "- **Weighted Score**: Complexity score based on unit types "
        "(public APIs weigh more than private)",
        "- **Lines Added**: Raw count of new lines in production code",
        "",
        "</details>",
    ]
    return lines


def _summary_section(result: AnalysisResult) -> List[str]:
    s = result.summary
    return [
        "<details>",
        "<summary><strong>Summary</strong> — breakdown of changes by category</summary>",
        "",
        "> *Production code counts toward limits. "
        "Test code is tracked but doesn't affect limits.*",
        "",
        "| Metric | Production | Test |",
        "|--------|----------:|-----:|",
        f"| Functions | {s.prod_functions} | - |",
        f"| Structs/Enums | {s.prod_structs} | - |",
        f"| Other | {s.prod_other} | - |",
        f"| Lines added | +{s.prod_lines_added} | +{s.test_lines_added} |",
        f"| Lines removed | -{s.prod_lines_removed} | -{s.test_lines_removed} |",
        f"| **Total units** | **{s.total_prod_units()}** | {s.test_units} |",
        "",
        "</details>",
    ]


def _change_row(change: Change) -> str:
    unit = change.unit
    kind = _KIND_LABELS.get(unit.kind.value, unit.kind.value)
    location = f"`{change.file_path}:{unit.span.start}-{unit.span.end}`"
    return (
        f"| {location} | `{unit.qualified_name()}` | {kind} "
        f"| +{change.lines_added} -{change.lines_removed} |"
    )


def _changes_section(title: str, note: str, changes: Iterable[Change]) -> List[str]:
    changes = list(changes)
    if not changes:
        return []
    return [
        "<details>",
        f"<summary><strong>{title}</strong> — {len(changes)} units modified</summary>",
        "",
        f"> *{note}*",
        "",
        "| File | Unit | Type | Changes |",
        "|------|------|:----:|--------:|",
        *(_change_row(c) for c in changes),
        "",
        "</details>",
    ]


def _scope_section(result: AnalysisResult) -> List[str]:
    scope = result.scope
    if not (scope.analyzed_files or scope.skipped_files or scope.exclusion_patterns):
        return []

    lines = ["<details>", "<summary>Analysis Scope</summary>", ""]
    if scope.analyzed_files:
        lines += [f"**Analyzed:** {len(scope.analyzed_files)} Rust files", ""]
    if scope.exclusion_patterns:
        lines.append("**Excluded patterns:**")
        lines.extend(f"- `{p}`" for p in scope.exclusion_patterns)
        lines.append("")

    non_rust, ignored = scope.non_rust_count(), scope.ignored_count()
    if non_rust or ignored:
        lines.append("**Skipped files:**")
        if non_rust:
            lines.append(f"- {non_rust} non-Rust files")
        if ignored:
            lines.append(f"- {ignored} files matched ignore patterns")
        lines.append("")

    if scope.skipped_files and len(scope.skipped_files) <= MAX_LISTED_SKIPPED:
        lines.append("**Skipped file list:**")
        for skipped in scope.skipped_files:
            if skipped.reason == ExclusionReason.NON_RUST:
                reason = "non-Rust"
            else:
                reason = f"pattern: {skipped.pattern}"
            lines.append(f"- `{skipped.path}` ({reason})")
        lines.append("")

    lines.append("</details>")
    return lines


def render(result: AnalysisResult, config: DiffWeightConfig) -> str:
    """Return the full Markdown comment body."""
    sections: List[List[str]] = [
        [COMMENT_MARKER, "## Rust Diff Analysis"],
        _verdict(result, config),
        _limits_section(result, config),
        _summary_section(result),
    ]
    if config.output.include_details:
        sections.append(
            _changes_section(
                "Production Changes",
                "Semantic units (functions, structs, etc.) that were added or "
                "modified in production code.",
                result.production_changes(),
            )
        )
        sections.append(
            _changes_section(
                "Test Changes",
                "Test code changes don't count toward PR size limits.",
                result.test_changes(),
            )
        )
    sections.append(_scope_section(result))

    body = "\n\n".join("\n".join(section) for section in sections if section)
    return body + "\n"
