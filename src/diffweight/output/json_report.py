"""JSON reporter for CI pipelines and scripts."""

from __future__ import annotations

import dataclasses
import json
from typing import Any, Dict, List

from diffweight import __version__
from diffweight.config.schema import DiffWeightConfig
from diffweight.results.models import AnalysisResult, Change


def _change_dict(change: Change) -> Dict[str, Any]:
    unit = change.unit
    return {
        "file": change.file_path,
        "unit": unit.name,
        "qualified_name": unit.qualified_name(),
        "kind": unit.kind.value,
        "visibility": unit.visibility.value,
        "classification": change.classification.value,
        "lines": {"start": unit.span.start, "end": unit.span.end},
        "lines_added": change.lines_added,
        "lines_removed": change.lines_removed,
    }


def to_dict(result: AnalysisResult, config: DiffWeightConfig) -> Dict[str, Any]:
    """Convert AnalysisResult to a JSON-serialisable dict."""
    changes: List[Dict[str, Any]] = []
    if config.output.include_details:
        changes = [_change_dict(c) for c in result.changes]

    scope = result.scope
    return {
        "version": __version__,
        "summary": {
            **dataclasses.asdict(result.summary),
            "total_prod_units": result.summary.total_prod_units(),
        },
        "changes": changes,
        "scope": {
            "analyzed_files": scope.analyzed_files,
            "skipped_files": [
                {
                    "path": f.path,
                    "reason": f.reason.value,
                    **({"pattern": f.pattern} if f.pattern else {}),
                }
                for f in scope.skipped_files
            ],
            "exclusion_patterns": scope.exclusion_patterns,
        },
        "duration_ms": round(result.duration_ms, 2),
    }


def render(result: AnalysisResult, config: DiffWeightConfig) -> str:
    """Return formatted JSON string."""
    return json.dumps(to_dict(result, config), indent=2)
