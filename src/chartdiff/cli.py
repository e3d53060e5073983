"""chartdiff CLI — Typer application with compare, analyze, versions, and init commands."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from chartdiff import __version__

app = typer.Typer(
    name="chartdiff",
    help="Compare two versions of a Helm chart and see what changed, where, and how much it matters.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)


def _configure_logging(verbose: bool, debug: bool) -> None:
    """Route the ``chartdiff`` logger to stderr through Rich."""
    level = logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING
    log = logging.getLogger("chartdiff")
    log.setLevel(level)
    for handler in list(log.handlers):
        log.removeHandler(handler)
    handler = RichHandler(console=console, show_path=debug, show_time=debug)
    handler.setLevel(level)
    log.addHandler(handler)


def _load(
    config: Optional[str],
    format: Optional[str],
    ignore_labels: Optional[bool],
    secrets: Optional[str],
    context: Optional[int],
    suppress_kind: Optional[List[str]],
    suppress_regex: Optional[str],
    no_stats: bool,
    fail_on: Optional[str],
):
    """Load config and apply CLI overrides; exit 2 on invalid settings."""
    from chartdiff.config.loader import ConfigError, load_config, validate

    try:
        cfg = load_config(Path.cwd(), config)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    if format:
        cfg.output.format = format  # type: ignore[assignment]
    if fail_on:
        cfg.output.fail_on = fail_on
    if no_stats:
        cfg.output.show_stats = False
    if ignore_labels is not None:
        cfg.filters.ignore_labels = ignore_labels
    if secrets:
        cfg.filters.secret_handling = secrets  # type: ignore[assignment]
    if context is not None:
        cfg.filters.context_lines = context
    if suppress_kind:
        cfg.filters.suppress_kinds.extend(suppress_kind)
    if suppress_regex:
        cfg.filters.suppress_regex = suppress_regex

    try:
        validate(cfg)
    except ConfigError as exc:
        console.print(f"[bold red]Invalid option:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc
    return cfg


def _emit(result, cfg, output: Optional[str]) -> None:
    """Render *result* in the configured format, then apply the impact gate."""
    from chartdiff.config.schema import impact_at_or_above
    from chartdiff.output import json_report, markdown, terminal, text_report

    fmt = cfg.output.format
    show_stats = cfg.output.show_stats
    report_text: Optional[str] = None

    if fmt == "terminal":
        terminal.render(result, show_stats=show_stats, console=Console())
    elif fmt == "text":
        report_text = text_report.render(result, include_stats=show_stats)
    elif fmt == "markdown":
        report_text = markdown.render(result, include_stats=show_stats)
    elif fmt == "json":
        report_text = json_report.render(result)

    if report_text is not None:
        typer.echo(report_text, nl=False)

    if output:
        if report_text is None:
            renderer = markdown if output.endswith(".md") else text_report
            report_text = renderer.render(result, include_stats=show_stats)
        Path(output).write_text(report_text, encoding="utf-8")
        console.print(f"[dim]Report written to {output}[/dim]")

    if result.has_diff and impact_at_or_above(result.statistics.impact.level, cfg.output.fail_on):
        raise typer.Exit(code=1)


# ── compare ───────────────────────────────────────────────────────────────────


@app.command()
def compare(
    repository: str = typer.Argument(..., help="Git URL of the chart repository"),
    chart_path: str = typer.Argument(..., help="Chart directory inside the repository, e.g. charts/app"),
    version1: str = typer.Argument(..., help="Base tag, branch, or commit"),
    version2: str = typer.Argument(..., help="Target tag, branch, or commit"),
    values: Optional[str] = typer.Option(None, "--values", help="Values file path inside the repository"),
    values_local: Optional[Path] = typer.Option(
        None, "--values-local", help="Local values file to render both versions with"
    ),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .chartdiff.toml"),
    format: Optional[str] = typer.Option(None, "--format", "-f", help="terminal | text | markdown | json"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Write report to file"),
    ignore_labels: Optional[bool] = typer.Option(
        None, "--ignore-labels/--keep-labels", help="Drop metadata.* change blocks"
    ),
    secrets: Optional[str] = typer.Option(None, "--secrets", help="suppress | show | decode"),
    context: Optional[int] = typer.Option(None, "--context", help="Context lines around each change"),
    suppress_kind: Optional[List[str]] = typer.Option(None, "--suppress-kind", help="Hide a resource kind"),
    suppress_regex: Optional[str] = typer.Option(None, "--suppress-regex", help="Hide lines matching a regex"),
    no_stats: bool = typer.Option(False, "--no-stats", help="Omit the statistics section"),
    fail_on: Optional[str] = typer.Option(None, "--fail-on", help="Exit 1 at or above impact: low | medium | high"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    debug: bool = typer.Option(False, "--debug", help="Debug output"),
) -> None:
    """Render two chart versions and show a categorized diff."""
    from chartdiff.analysis.engine import analyze
    from chartdiff.helm.adapter import CompareRequest, HelmError, compare_versions

    _configure_logging(verbose, debug)
    cfg = _load(config, format, ignore_labels, secrets, context, suppress_kind, suppress_regex, no_stats, fail_on)

    inline_values: Optional[str] = None
    if values_local is not None:
        try:
            inline_values = values_local.read_text(encoding="utf-8")
        except OSError as exc:
            console.print(f"[bold red]Cannot read values file:[/bold red] {exc}")
            raise typer.Exit(code=2) from exc

    request = CompareRequest(
        repository=repository,
        chart_path=chart_path,
        version1=version1,
        version2=version2,
        values_file=values,
        values_content=inline_values,
    )
    try:
        with console.status(f"Comparing {version1} → {version2}…"):
            comparison = compare_versions(request, cfg.helm)
    except HelmError as exc:
        console.print(f"[bold red]Comparison failed:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    result = analyze(comparison.diff, cfg.filters, version1=version1, version2=version2)
    _emit(result, cfg, output)


# ── analyze ───────────────────────────────────────────────────────────────────


@app.command("analyze")
def analyze_command(
    diff_file: str = typer.Argument(..., help="Raw diff file (dyff or unified), or - for stdin"),
    version1: str = typer.Option("version1", "--v1", help="Label for the base version"),
    version2: str = typer.Option("version2", "--v2", help="Label for the target version"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .chartdiff.toml"),
    format: Optional[str] = typer.Option(None, "--format", "-f", help="terminal | text | markdown | json"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Write report to file"),
    ignore_labels: Optional[bool] = typer.Option(
        None, "--ignore-labels/--keep-labels", help="Drop metadata.* change blocks"
    ),
    secrets: Optional[str] = typer.Option(None, "--secrets", help="suppress | show | decode"),
    context: Optional[int] = typer.Option(None, "--context", help="Context lines around each change"),
    suppress_kind: Optional[List[str]] = typer.Option(None, "--suppress-kind", help="Hide a resource kind"),
    suppress_regex: Optional[str] = typer.Option(None, "--suppress-regex", help="Hide lines matching a regex"),
    no_stats: bool = typer.Option(False, "--no-stats", help="Omit the statistics section"),
    fail_on: Optional[str] = typer.Option(None, "--fail-on", help="Exit 1 at or above impact: low | medium | high"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    debug: bool = typer.Option(False, "--debug", help="Debug output"),
) -> None:
    """Categorize an existing raw diff without rendering charts."""
    from chartdiff.analysis.engine import analyze

    _configure_logging(verbose, debug)
    cfg = _load(config, format, ignore_labels, secrets, context, suppress_kind, suppress_regex, no_stats, fail_on)

    try:
        raw = sys.stdin.read() if diff_file == "-" else Path(diff_file).read_text(encoding="utf-8")
    except OSError as exc:
        console.print(f"[bold red]Cannot read diff:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    result = analyze(raw, cfg.filters, version1=version1, version2=version2)
    _emit(result, cfg, output)


# ── versions ──────────────────────────────────────────────────────────────────


@app.command()
def versions(
    repository: str = typer.Argument(..., help="Git URL of the chart repository"),
    format: str = typer.Option("terminal", "--format", "-f", help="terminal | json"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    debug: bool = typer.Option(False, "--debug", help="Debug output"),
) -> None:
    """List recent tags and branches to pick versions from."""
    from chartdiff.helm.adapter import HelmError, list_versions
    from chartdiff.output import json_report, terminal

    _configure_logging(verbose, debug)
    if format not in ("terminal", "json"):
        console.print(f"[bold red]Invalid option:[/bold red] versions supports terminal or json, got {format!r}")
        raise typer.Exit(code=2)

    try:
        with console.status(f"Fetching versions from {repository}…"):
            listing = list_versions(repository)
    except HelmError as exc:
        console.print(f"[bold red]Failed to fetch versions:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    if format == "json":
        typer.echo(json_report.render_versions(listing))
    else:
        terminal.render_versions(listing, console=Console())


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init() -> None:
    """Generate a starter .chartdiff.toml in the current directory."""
    from chartdiff.config.defaults import CONFIG_FILENAME, DEFAULT_TOML

    config_path = Path.cwd() / CONFIG_FILENAME
    if config_path.exists():
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILENAME} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"chartdiff {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """chartdiff — categorized diffs between Helm chart versions."""
