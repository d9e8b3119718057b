"""Code-category rule chain.

Classification is a flat, ordered sequence of ``(predicate, category)``
pairs evaluated top to bottom; the first predicate that holds decides.
Path-based rules come before attribute-based ones, and the specific
``#[test]`` check comes before the broader test-module check.
"""

from __future__ import annotations

from typing import Callable, Tuple

from diffweight.analysis.units import BENCH_ATTRIBUTE, CFG_TEST_MARKER, TEST_MARKER, SemanticUnit
from diffweight.config.schema import DiffWeightConfig
from diffweight.results.models import CodeCategory

Predicate = Callable[[SemanticUnit, str, DiffWeightConfig], bool]

EXAMPLES_SEGMENT = "examples/"
BENCHES_SEGMENT = "benches/"


# ---- path predicates ----


def is_build_script(_unit: SemanticUnit, path: str, config: DiffWeightConfig) -> bool:
    return config.is_build_script(path)


def is_example_path(_unit: SemanticUnit, path: str, _config: DiffWeightConfig) -> bool:
    return EXAMPLES_SEGMENT in path


def is_bench_path(_unit: SemanticUnit, path: str, _config: DiffWeightConfig) -> bool:
    return BENCHES_SEGMENT in path


def is_test_path(_unit: SemanticUnit, path: str, config: DiffWeightConfig) -> bool:
    return config.is_test_path(path)


# ---- attribute predicates ----


def is_bench_unit(unit: SemanticUnit, _path: str, _config: DiffWeightConfig) -> bool:
    return unit.has_attribute(BENCH_ATTRIBUTE)


def is_test_unit(unit: SemanticUnit, _path: str, _config: DiffWeightConfig) -> bool:
    return unit.has_attribute(TEST_MARKER)


def is_in_test_module(unit: SemanticUnit, _path: str, _config: DiffWeightConfig) -> bool:
    return unit.has_attribute(CFG_TEST_MARKER)


def has_test_feature(unit: SemanticUnit, _path: str, config: DiffWeightConfig) -> bool:
    """``cfg(...)`` attribute naming one of the configured test features."""
    features = config.classification.test_features
    return any(
        attr.startswith("cfg") and any(feature in attr for feature in features)
        for attr in unit.attributes
    )


RULES: Tuple[Tuple[Predicate, CodeCategory], ...] = (
    (is_build_script, CodeCategory.BUILD_SCRIPT),
    (is_example_path, CodeCategory.EXAMPLE),
    (is_bench_path, CodeCategory.BENCHMARK),
    (is_test_path, CodeCategory.TEST),
    (is_bench_unit, CodeCategory.BENCHMARK),
    (is_test_unit, CodeCategory.TEST),
    (is_in_test_module, CodeCategory.TEST_UTILITY),
    (has_test_feature, CodeCategory.TEST_UTILITY),
)


def classify(unit: SemanticUnit, path: str, config: DiffWeightConfig) -> CodeCategory:
    """Return the category of *unit* located in *path*. Never fails."""
    for predicate, category in RULES:
        if predicate(unit, path, config):
            return category
    return CodeCategory.PRODUCTION
