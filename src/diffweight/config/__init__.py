"""Configuration loading, schema, and defaults."""

from diffweight.config.loader import load_config, validate
from diffweight.config.schema import (
    ClassificationConfig,
    DiffWeightConfig,
    LimitsConfig,
    OutputConfig,
    PerTypeLimits,
    WeightsConfig,
)
from diffweight.errors import ConfigError, ConfigValidationError

__all__ = [
    "ClassificationConfig",
    "ConfigError",
    "ConfigValidationError",
    "DiffWeightConfig",
    "LimitsConfig",
    "OutputConfig",
    "PerTypeLimits",
    "WeightsConfig",
    "load_config",
    "validate",
]
