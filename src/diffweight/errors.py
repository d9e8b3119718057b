"""Exception hierarchy shared by the analysis pipeline and the CLI."""

from __future__ import annotations

from typing import Optional


class DiffWeightError(Exception):
    """Base class for every error that aborts an analysis run."""


class FileReadError(DiffWeightError):
    """A changed file could not be read from the base directory."""

    def __init__(self, path: str, cause: Optional[BaseException] = None) -> None:
        self.path = path
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"failed to read file '{path}'{detail}")


class SourceParseError(DiffWeightError):
    """Rust source text could not be parsed into a syntax tree."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"failed to parse '{path}': {message}")


class DiffParseError(DiffWeightError):
    """The unified diff is malformed."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"failed to parse diff: {message}")


class ConfigError(DiffWeightError):
    """Raised when config is malformed or unreadable."""


class ConfigValidationError(ConfigError):
    """A config value is outside its allowed range."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(f"invalid config field '{field}': {message}")
