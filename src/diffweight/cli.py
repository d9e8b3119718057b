"""diffweight CLI — Typer application with analyze and init commands."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from diffweight import __version__

app = typer.Typer(
    name="diffweight",
    help="Measure how much production Rust code a diff really changes.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)


def _read_diff(diff_file: Optional[str]) -> str:
    if diff_file is None or diff_file == "-":
        return sys.stdin.read()
    try:
        return Path(diff_file).read_text(encoding="utf-8")
    except OSError as exc:
        console.print(f"[bold red]Error:[/bold red] cannot read diff {diff_file}: {exc}")
        raise typer.Exit(code=2) from exc


# ── analyze ───────────────────────────────────────────────────────────────────


@app.command()
def analyze(
    diff_file: Optional[str] = typer.Option(None, "--diff-file", "-d", help="Diff to analyse (default: stdin)"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .diffweight.toml"),
    format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: github | json | human | comment"),
    max_units: Optional[int] = typer.Option(None, "--max-units", help="Override limits.max_prod_units"),
    max_score: Optional[int] = typer.Option(None, "--max-score", help="Override limits.max_weighted_score"),
    max_lines: Optional[int] = typer.Option(None, "--max-lines", help="Override limits.max_prod_lines"),
    base_dir: Path = typer.Option(Path("."), "--base-dir", "-b", help="Directory the diff paths are relative to"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Write report to file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    debug: bool = typer.Option(False, "--debug", help="Debug logging with timing"),
) -> None:
    """Analyse a unified diff and report production-code impact."""
    from diffweight.analysis.engine import analyze as run_analysis, read_from_base_dir
    from diffweight.config.loader import load_config, validate
    from diffweight.errors import DiffWeightError
    from diffweight.output import render, terminal

    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            stream=sys.stderr,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )

    # --- Load config and apply CLI overrides ---
    try:
        cfg = load_config(Path.cwd(), config)
        if format is not None:
            cfg.output.format = format  # type: ignore[assignment]
        if max_units is not None:
            cfg.limits.max_prod_units = max_units
        if max_score is not None:
            cfg.limits.max_weighted_score = max_score
        if max_lines is not None:
            cfg.limits.max_prod_lines = max_lines
        validate(cfg)
    except DiffWeightError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    diff_text = _read_diff(diff_file)

    if verbose or debug:
        console.print(f"[dim]Base dir: {base_dir.resolve()}[/dim]")
        console.print(f"[dim]Format: {cfg.output.format}[/dim]")

    # --- Run analysis ---
    try:
        result = run_analysis(diff_text, cfg, read_from_base_dir(base_dir))
    except DiffWeightError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    if verbose or debug:
        scope = result.scope
        console.print(
            f"[dim]Analyzed {len(scope.analyzed_files)} file(s), "
            f"skipped {len(scope.skipped_files)}[/dim]"
        )
    if debug:
        console.print(f"[dim]Analysis duration: {result.duration_ms:.0f}ms[/dim]")

    # --- Output ---
    report_text = render(result, cfg)
    if output:
        Path(output).write_text(report_text, encoding="utf-8")
        if verbose:
            console.print(f"[dim]Report written to {output}[/dim]")
    elif cfg.output.format == "human":
        terminal.render(result, cfg)
    else:
        sys.stdout.write(report_text)

    # --- Exit code ---
    if result.summary.exceeds_limit and cfg.limits.fail_on_exceed:
        raise typer.Exit(code=1)


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init(
    full: bool = typer.Option(False, "--full", help="Include all config options with comments"),
) -> None:
    """Generate a starter .diffweight.toml in the current directory."""
    from diffweight.config.defaults import DEFAULT_TOML, FULL_TOML
    from diffweight.config.loader import CONFIG_FILENAME

    config_path = Path.cwd() / CONFIG_FILENAME

    if config_path.exists():
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILENAME} already exists at {config_path}")
        raise typer.Exit(code=1)

    template = FULL_TOML if full else DEFAULT_TOML
    config_path.write_text(template, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"diffweight {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """diffweight — semantic size analysis for Rust pull requests."""
