"""Load, merge and validate configuration from .diffweight.toml and env vars."""

from __future__ import annotations

import dataclasses
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from diffweight.config.schema import (
    OUTPUT_FORMATS,
    ClassificationConfig,
    DiffWeightConfig,
    LimitsConfig,
    OutputConfig,
    PerTypeLimits,
    WeightsConfig,
)
from diffweight.errors import ConfigError, ConfigValidationError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".diffweight.toml"


def find_config_file(root: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    candidate = root / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    raw = data.get(section, {})
    if not isinstance(raw, dict):
        raise ConfigError(f"[{section}] must be a table")
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in raw.items() if k in valid_fields}
    return cls(**filtered)


def _build_limits(data: Dict[str, Any]) -> LimitsConfig:
    limits_raw = data.get("limits", {})
    per_type = None
    if isinstance(limits_raw, dict) and "per_type" in limits_raw:
        per_type = _build_section(limits_raw, PerTypeLimits, "per_type")
    limits = _build_section(data, LimitsConfig, "limits")
    limits.per_type = per_type
    return limits


def _merge_env_overrides(cfg: DiffWeightConfig) -> None:
    """Apply DIFFWEIGHT_* environment variable overrides."""
    if val := os.environ.get("DIFFWEIGHT_FORMAT"):
        if val in OUTPUT_FORMATS:
            cfg.output.format = val  # type: ignore[assignment]
    if val := os.environ.get("DIFFWEIGHT_IGNORE_PATHS"):
        cfg.classification.ignore_paths.extend(p.strip() for p in val.split(",") if p.strip())
    for env_name, attr in (
        ("DIFFWEIGHT_MAX_UNITS", "max_prod_units"),
        ("DIFFWEIGHT_MAX_SCORE", "max_weighted_score"),
        ("DIFFWEIGHT_MAX_LINES", "max_prod_lines"),
    ):
        if val := os.environ.get(env_name):
            try:
                setattr(cfg.limits, attr, int(val))
            except ValueError:
                logger.debug("ignoring non-integer %s=%r", env_name, val)


def _check_int(field_name: str, value: Any, *, positive: bool = False) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigValidationError(field_name, "must be an integer")
    if positive and value <= 0:
        raise ConfigValidationError(field_name, "must be greater than 0")
    if value < 0:
        raise ConfigValidationError(field_name, "must not be negative")


def validate(cfg: DiffWeightConfig) -> None:
    """Raise ConfigValidationError for values outside their allowed range."""
    _check_int("limits.max_prod_units", cfg.limits.max_prod_units, positive=True)
    _check_int("limits.max_weighted_score", cfg.limits.max_weighted_score, positive=True)
    if cfg.limits.max_prod_lines is not None:
        _check_int("limits.max_prod_lines", cfg.limits.max_prod_lines)
    if cfg.limits.per_type is not None:
        for name, cap in cfg.limits.per_type.configured().items():
            _check_int(f"limits.per_type.{name}", cap)
    for f in dataclasses.fields(WeightsConfig):
        _check_int(f"weights.{f.name}", getattr(cfg.weights, f.name))
    if not isinstance(cfg.limits.fail_on_exceed, bool):
        raise ConfigValidationError("limits.fail_on_exceed", "must be a boolean")
    if cfg.output.format not in OUTPUT_FORMATS:
        raise ConfigValidationError(
            "output.format", f"must be one of {', '.join(OUTPUT_FORMATS)}"
        )
    for list_field in ("test_features", "test_paths", "ignore_paths"):
        value = getattr(cfg.classification, list_field)
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise ConfigValidationError(f"classification.{list_field}", "must be a list of strings")


def load_config(
    root: Path,
    config_override: Optional[str] = None,
) -> DiffWeightConfig:
    """Load, validate, and return a DiffWeightConfig."""
    config_path = find_config_file(root, config_override)

    if config_path is None:
        cfg = DiffWeightConfig()
    else:
        raw = _parse_toml(config_path)
        try:
            cfg = DiffWeightConfig(
                classification=_build_section(raw, ClassificationConfig, "classification"),
                weights=_build_section(raw, WeightsConfig, "weights"),
                limits=_build_limits(raw),
                output=_build_section(raw, OutputConfig, "output"),
            )
        except TypeError as exc:
            raise ConfigError(f"Invalid config in {config_path}: {exc}") from exc
        logger.debug("loaded config from %s", config_path)

    _merge_env_overrides(cfg)
    validate(cfg)
    return cfg
