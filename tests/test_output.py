"""Tests for output reporters."""

import json

import pytest

from diffweight.analysis.units import LineSpan, SemanticUnit, UnitKind, Visibility
from diffweight.config.schema import DiffWeightConfig, PerTypeLimits
from diffweight.output import comment, github, json_report, render, terminal
from diffweight.results.aggregator import exceeded_limits, summarize
from diffweight.results.models import (
    AnalysisResult,
    AnalysisScope,
    Change,
    CodeCategory,
    ExclusionReason,
)


def _make_result(config=None) -> AnalysisResult:
    """Build an AnalysisResult with one production and one test change."""
    config = config or DiffWeightConfig()
    changes = [
        Change(
            "src/parser.rs",
            SemanticUnit(UnitKind.FUNCTION, "parse", Visibility.PUBLIC, LineSpan(10, 24), impl_name="Parser"),
            CodeCategory.PRODUCTION,
            6,
            2,
        ),
        Change(
            "tests/parser.rs",
            SemanticUnit(UnitKind.FUNCTION, "parses_empty", Visibility.PRIVATE, LineSpan(3, 8), ("test",)),
            CodeCategory.TEST,
            5,
            0,
        ),
    ]
    scope = AnalysisScope(exclusion_patterns=["generated/"])
    scope.add_analyzed("src/parser.rs")
    scope.add_analyzed("tests/parser.rs")
    scope.add_skipped("README.md", ExclusionReason.NON_RUST)
    scope.add_skipped("src/generated/ast.rs", ExclusionReason.IGNORE_PATTERN, "generated/")
    return AnalysisResult(
        changes=changes,
        summary=summarize(changes, config),
        scope=scope,
        duration_ms=12.5,
    )


class TestGithub:
    def test_key_value_lines(self):
        output = github.render(_make_result())
        assert output.splitlines() == [
            "prod_functions_changed=1",
            "prod_structs_changed=0",
            "prod_other_changed=0",
            "test_units_changed=1",
            "prod_lines_added=6",
            "prod_lines_removed=2",
            "test_lines_added=5",
            "test_lines_removed=0",
            "weighted_score=3",
            "exceeds_limit=false",
        ]

    def test_exceeds_limit_lowercase(self):
        config = DiffWeightConfig()
        config.limits.max_weighted_score = 1
        assert "exceeds_limit=true\n" in github.render(_make_result(config))


class TestJsonReport:
    def test_valid_json(self):
        data = json.loads(json_report.render(_make_result(), DiffWeightConfig()))
        assert data["summary"]["prod_functions"] == 1
        assert data["summary"]["weighted_score"] == 3
        assert data["summary"]["total_prod_units"] == 1
        assert data["summary"]["exceeds_limit"] is False
        assert len(data["changes"]) == 2

    def test_change_fields(self):
        data = json_report.to_dict(_make_result(), DiffWeightConfig())
        change = data["changes"][0]
        assert change == {
            "file": "src/parser.rs",
            "unit": "parse",
            "qualified_name": "Parser::parse",
            "kind": "function",
            "visibility": "public",
            "classification": "production",
            "lines": {"start": 10, "end": 24},
            "lines_added": 6,
            "lines_removed": 2,
        }

    def test_details_can_be_disabled(self):
        config = DiffWeightConfig()
        config.output.include_details = False
        data = json_report.to_dict(_make_result(), config)
        assert data["changes"] == []
        assert data["summary"]["test_units"] == 1

    def test_scope(self):
        scope = json_report.to_dict(_make_result(), DiffWeightConfig())["scope"]
        assert scope["analyzed_files"] == ["src/parser.rs", "tests/parser.rs"]
        assert scope["skipped_files"] == [
            {"path": "README.md", "reason": "non_rust"},
            {"path": "src/generated/ast.rs", "reason": "ignore_pattern", "pattern": "generated/"},
        ]
        assert scope["exclusion_patterns"] == ["generated/"]


class TestComment:
    def test_marker_first(self):
        output = comment.render(_make_result(), DiffWeightConfig())
        assert output.splitlines()[0] == comment.COMMENT_MARKER
        assert comment.COMMENT_MARKER == "<!-- diffweight-comment -->"

    def test_within_limits(self):
        output = comment.render(_make_result(), DiffWeightConfig())
        assert "> [!TIP]" in output
        assert "[!CAUTION]" not in output
        assert "| Production Units | 1 | 30 | ✅ |" in output
        assert "| Weighted Score | 3 | 100 | ✅ |" in output

    def test_exceeded_lists_reasons(self):
        config = DiffWeightConfig()
        config.limits.max_weighted_score = 2
        config.limits.max_prod_lines = 5
        output = comment.render(_make_result(config), config)
        assert "> [!CAUTION]" in output
        assert "> - **3** weighted score (limit: 2)" in output
        assert "> - **6** lines added (limit: 5)" in output
        assert "| Lines Added | 6 | 5 | ❌ |" in output

    def test_change_tables(self):
        output = comment.render(_make_result(), DiffWeightConfig())
        assert "<strong>Production Changes</strong> — 1 units modified" in output
        assert "| `src/parser.rs:10-24` | `Parser::parse` | function | +6 -2 |" in output
        assert "<strong>Test Changes</strong> — 1 units modified" in output
        assert "| `tests/parser.rs:3-8` | `parses_empty` | function | +5 -0 |" in output

    def test_details_can_be_disabled(self):
        config = DiffWeightConfig()
        config.output.include_details = False
        output = comment.render(_make_result(), config)
        assert "Production Changes" not in output
        assert "<summary><strong>Summary</strong>" in output

    def test_scope_section(self):
        output = comment.render(_make_result(), DiffWeightConfig())
        assert "**Analyzed:** 2 Rust files" in output
        assert "- `generated/`" in output
        assert "- 1 non-Rust files" in output
        assert "- 1 files matched ignore patterns" in output
        assert "- `README.md` (non-Rust)" in output
        assert "- `src/generated/ast.rs` (pattern: generated/)" in output

    def test_long_skip_list_not_itemised(self):
        result = _make_result()
        for i in range(comment.MAX_LISTED_SKIPPED):
            result.scope.add_skipped(f"docs/{i}.md", ExclusionReason.NON_RUST)
        output = comment.render(result, DiffWeightConfig())
        assert "**Skipped file list:**" not in output
        assert "- 11 non-Rust files" in output

    def test_per_type_rows(self):
        config = DiffWeightConfig()
        config.limits.per_type = PerTypeLimits(functions=0)
        output = comment.render(_make_result(config), config)
        assert "| Functions | 1 | 0 | ❌ |" in output
        assert "> - **1** functions (limit: 0)" in output


    def test_verdict_lists_every_exceeded_limit(self):
        config = DiffWeightConfig()
        config.limits.max_prod_units = 1
        config.limits.max_weighted_score = 2
        config.limits.max_prod_lines = 5
        config.limits.per_type = PerTypeLimits(functions=0)
        result = _make_result(config)
        result.changes.append(result.changes[0])
        result.summary = summarize(result.changes, config)

        output = comment.render(result, config)
        reasons = [line for line in output.splitlines() if line.startswith("> - ")]
        assert len(reasons) == len(exceeded_limits(result.summary, result.changes, config))
        assert reasons == [
            "> - **2** units (limit: 1)",
            "> - **6** weighted score (limit: 2)",
            "> - **12** lines added (limit: 5)",
            "> - **2** functions (limit: 0)",
        ]


class TestTerminal:
    def test_render_text(self):
        output = terminal.render_text(_make_result(), DiffWeightConfig())
        assert "Production Changes" in output
        assert "Parser::parse" in output
        assert "parses_empty" in output
        assert "within limits" in output

    def test_exceeded_verdict(self):
        config = DiffWeightConfig()
        config.limits.max_prod_units = 1
        config.limits.max_weighted_score = 2
        output = terminal.render_text(_make_result(config), config)
        assert "exceeds configured limits" in output
        assert "weighted_score: 3 > 2" in output


class TestRenderDispatch:
    @pytest.mark.parametrize(
        "fmt, needle",
        [
            ("github", "weighted_score=3"),
            ("json", '"weighted_score": 3'),
            ("human", "Weighted score"),
            ("comment", "<!-- diffweight-comment -->"),
        ],
    )
    def test_dispatch(self, fmt, needle):
        config = DiffWeightConfig()
        config.output.format = fmt
        assert needle in render(_make_result(config), config)
