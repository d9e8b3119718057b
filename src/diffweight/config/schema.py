"""Configuration schema — dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import PurePosixPath
from typing import List, Literal, Optional

OutputFormat = Literal["github", "json", "human", "comment"]

OUTPUT_FORMATS: tuple[str, ...] = ("github", "json", "human", "comment")

BUILD_SCRIPT_NAME = "build.rs"


@dataclass
class ClassificationConfig:
    test_features: List[str] = field(default_factory=lambda: ["test-utils", "testing", "mock"])
    test_paths: List[str] = field(default_factory=lambda: ["tests/", "benches/", "examples/"])
    ignore_paths: List[str] = field(default_factory=list)


@dataclass
class WeightsConfig:
    public_function: int = 3
    private_function: int = 1
    public_struct: int = 3  # also enums
    private_struct: int = 1
    impl_block: int = 2
    trait_definition: int = 4
    const_static: int = 1  # const, static, type alias, module


@dataclass
class PerTypeLimits:
    functions: Optional[int] = None
    structs: Optional[int] = None
    enums: Optional[int] = None
    traits: Optional[int] = None
    impl_blocks: Optional[int] = None
    consts: Optional[int] = None
    statics: Optional[int] = None
    type_aliases: Optional[int] = None
    macros: Optional[int] = None
    modules: Optional[int] = None

    def configured(self) -> dict[str, int]:
        """Only the caps that were actually set."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }


@dataclass
class LimitsConfig:
    max_prod_units: int = 30
    max_weighted_score: int = 100
    max_prod_lines: Optional[int] = None
    per_type: Optional[PerTypeLimits] = None
    fail_on_exceed: bool = True


@dataclass
class OutputConfig:
    format: OutputFormat = "github"
    include_details: bool = True


@dataclass
class DiffWeightConfig:
    classification: ClassificationConfig = field(default_factory=ClassificationConfig)
    weights: WeightsConfig = field(default_factory=WeightsConfig)
    limits: LimitsConfig = field(default_factory=LimitsConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    # ---- path predicates used by the mapper and classifier ----

    def matching_ignore_pattern(self, path: str) -> Optional[str]:
        """First ignore pattern contained in *path*, if any."""
        return next((p for p in self.classification.ignore_paths if p in path), None)

    def should_ignore(self, path: str) -> bool:
        return self.matching_ignore_pattern(path) is not None

    def is_test_path(self, path: str) -> bool:
        return any(p in path for p in self.classification.test_paths)

    @staticmethod
    def is_build_script(path: str) -> bool:
        return PurePosixPath(path).name == BUILD_SCRIPT_NAME
