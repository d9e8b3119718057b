"""Reporters for analysis results."""

from __future__ import annotations

from diffweight.config.schema import DiffWeightConfig
from diffweight.output import comment, github, json_report, terminal
from diffweight.results.models import AnalysisResult


def render(result: AnalysisResult, config: DiffWeightConfig) -> str:
    """Render *result* in the format selected by ``config.output.format``."""
    fmt = config.output.format
    if fmt == "json":
        return json_report.render(result, config)
    if fmt == "human":
        return terminal.render_text(result, config)
    if fmt == "comment":
        return comment.render(result, config)
    return github.render(result)


__all__ = ["comment", "github", "json_report", "render", "terminal"]
