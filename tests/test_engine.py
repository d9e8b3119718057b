"""End-to-end tests for the analysis pipeline."""

import pytest

from diffweight.analysis.engine import analyze, read_from_base_dir
from diffweight.config.schema import DiffWeightConfig
from diffweight.errors import DiffParseError, FileReadError
from diffweight.results.models import CodeCategory


class TestAnalyze:
    def test_single_public_function(self, config, rust_crate, sample_diff_new_function):
        result = analyze(sample_diff_new_function, config, read_from_base_dir(rust_crate))

        assert len(result.changes) == 1
        change = result.changes[0]
        assert change.unit.name == "double"
        assert change.lines_added == 4
        assert change.classification == CodeCategory.PRODUCTION
        assert result.summary.prod_functions == 1
        assert result.summary.weighted_score == 3
        assert not result.summary.exceeds_limit
        assert result.duration_ms >= 0

    def test_two_files(self, config, rust_crate, sample_diff_new_function, sample_diff_lib_edit):
        diff = sample_diff_lib_edit + sample_diff_new_function
        result = analyze(diff, config, read_from_base_dir(rust_crate))

        assert [c.unit.name for c in result.changes] == ["add", "helper", "double"]
        assert result.summary.total_prod_units() == 3
        assert result.summary.weighted_score == 3 + 1 + 3
        assert result.scope.analyzed_files == ["src/lib.rs", "src/math.rs"]

    def test_production_and_test_split(self, config, rust_crate, sample_diff_test_edit):
        result = analyze(sample_diff_test_edit, config, read_from_base_dir(rust_crate))

        assert list(result.production_changes()) == []
        assert [c.unit.name for c in result.test_changes()] == ["it_adds"]
        assert result.summary.test_units == 1
        assert result.summary.test_lines_added == 1
        assert result.summary.test_lines_removed == 1

    def test_skipped_files_only_in_scope(self, rust_crate, sample_diff_mixed_files):
        config = DiffWeightConfig()
        config.classification.ignore_paths = ["generated/"]
        result = analyze(sample_diff_mixed_files, config, read_from_base_dir(rust_crate))

        assert [c.file_path for c in result.changes] == ["src/math.rs"]
        assert result.scope.non_rust_count() == 1
        assert result.scope.ignored_count() == 1

    def test_empty_diff(self, config, rust_crate):
        result = analyze("", config, read_from_base_dir(rust_crate))
        assert result.changes == []
        assert result.summary.total_prod_units() == 0

    def test_limit_exceeded(self, rust_crate, sample_diff_new_function):
        config = DiffWeightConfig()
        config.limits.max_weighted_score = 2
        result = analyze(sample_diff_new_function, config, read_from_base_dir(rust_crate))
        assert result.summary.exceeds_limit


class TestErrors:
    def test_missing_file(self, config, tmp_path, sample_diff_new_function):
        with pytest.raises(FileReadError, match="src/math.rs"):
            analyze(sample_diff_new_function, config, read_from_base_dir(tmp_path))

    def test_malformed_diff(self, config, rust_crate):
        with pytest.raises(DiffParseError):
            analyze("diff --git a/x\n", config, read_from_base_dir(rust_crate))
