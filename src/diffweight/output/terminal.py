"""Rich terminal reporter — summary table, change tables, verdict."""

from __future__ import annotations

import io
from typing import Iterable, Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from diffweight.config.schema import DiffWeightConfig
from diffweight.results.aggregator import exceeded_limits
from diffweight.results.models import AnalysisResult, Change, CodeCategory

_CATEGORY_STYLE = {
    CodeCategory.PRODUCTION: "bold white on dark_orange",
    CodeCategory.TEST: "bold black on bright_cyan",
    CodeCategory.TEST_UTILITY: "bold black on cyan",
    CodeCategory.BENCHMARK: "bold black on yellow",
    CodeCategory.EXAMPLE: "bold black on green",
    CodeCategory.BUILD_SCRIPT: "bold white on blue",
}


def _category_pill(category: CodeCategory) -> Text:
    return Text(f" {category.value.upper()} ", style=_CATEGORY_STYLE.get(category, ""))


def _changes_table(title: str, changes: Iterable[Change]) -> Table:
    table = Table(title=title, show_lines=False, title_style="bold", border_style="dim")
    table.add_column("Category", justify="center")
    table.add_column("Unit", style="cyan", min_width=20)
    table.add_column("Kind")
    table.add_column("File", style="magenta")
    table.add_column("Lines", justify="right")
    table.add_column("+/-", justify="right", style="green")

    for change in changes:
        unit = change.unit
        table.add_row(
            _category_pill(change.classification),
            unit.qualified_name(),
            unit.kind.value,
            change.file_path,
            f"{unit.span.start}-{unit.span.end}",
            f"+{change.lines_added} -{change.lines_removed}",
        )
    return table


def _summary_table(result: AnalysisResult, config: DiffWeightConfig) -> Table:
    s = result.summary
    limits = config.limits
    table = Table(title="Summary", title_style="bold", border_style="dim")
    table.add_column("Metric")
    table.add_column("Production", justify="right")
    table.add_column("Test", justify="right")
    table.add_column("Limit", justify="right", style="dim")

    table.add_row("Functions", str(s.prod_functions), "-", "")
    table.add_row("Structs/Enums", str(s.prod_structs), "-", "")
    table.add_row("Other", str(s.prod_other), "-", "")
    table.add_row("Total units", str(s.total_prod_units()), str(s.test_units), str(limits.max_prod_units))
    table.add_row(
        "Lines added",
        f"+{s.prod_lines_added}",
        f"+{s.test_lines_added}",
        str(limits.max_prod_lines) if limits.max_prod_lines is not None else "",
    )
    table.add_row("Lines removed", f"-{s.prod_lines_removed}", f"-{s.test_lines_removed}", "")
    table.add_row("Weighted score", str(s.weighted_score), "-", str(limits.max_weighted_score))
    return table


def render(result: AnalysisResult, config: DiffWeightConfig, *, console: Optional[Console] = None) -> None:
    """Print the analysis to *console* (stdout by default)."""
    console = console or Console()

    if config.output.include_details:
        prod = list(result.production_changes())
        tests = list(result.test_changes())
        if prod:
            console.print(_changes_table("Production Changes", prod))
        if tests:
            console.print(_changes_table("Test Changes", tests))
        if not prod and not tests:
            console.print("[dim]No Rust semantic units changed.[/dim]")

    console.print(_summary_table(result, config))

    scope = result.scope
    console.print(
        f"[dim]Analyzed:[/dim] {len(scope.analyzed_files)} file(s)   "
        f"[dim]Skipped:[/dim] {scope.non_rust_count()} non-Rust, "
        f"{scope.ignored_count()} ignored   "
        f"[dim]Duration:[/dim] {result.duration_ms:.0f}ms"
    )

    console.print()
    if result.summary.exceeds_limit:
        console.print("[bold red]❌ PR exceeds configured limits.[/bold red]")
        for name, (actual, maximum) in exceeded_limits(result.summary, result.changes, config).items():
            console.print(f"   [red]{name}[/red]: {actual} > {maximum}")
    else:
        console.print("[bold green]✅ PR size is within limits.[/bold green]")


def render_text(result: AnalysisResult, config: DiffWeightConfig, *, width: int = 120) -> str:
    """Plain-text rendering, for ``--output`` files and tests."""
    buffer = io.StringIO()
    render(result, config, console=Console(file=buffer, width=width, no_color=True, force_terminal=False))
    return buffer.getvalue()
