"""Rich terminal view — statistics, category sections, coloured diff lines."""

from __future__ import annotations

from itertools import zip_longest
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.rule import Rule
from rich.table import Table
from rich.text import Text

from chartdiff.analysis.engine import AnalysisResult
from chartdiff.diff.lines import classify_line
from chartdiff.diff.models import LineKind, ResourceChange
from chartdiff.helm.adapter import VersionListing
from chartdiff.stats.models import Statistics

_IMPACT_STYLE = {
    "high": "bold white on red",
    "medium": "bold black on yellow",
    "low": "bold black on green",
}

_LINE_STYLE = {
    LineKind.ADDITION: "green",
    LineKind.REMOVAL: "red",
    LineKind.HEADER: "bold",
    LineKind.CONTEXT: "",
}

_KIND_STYLE = {
    "Deployment": "bold blue",
    "Service": "bold magenta",
    "ConfigMap": "bold dark_orange",
    "Secret": "bold red",
    "Ingress": "bold green",
    "StatefulSet": "bold cyan",
    "DaemonSet": "bold yellow",
    "Job": "bold purple",
    "CronJob": "bold deep_pink3",
    "PersistentVolumeClaim": "bold dark_cyan",
    "ServiceAccount": "bold chartreuse3",
    "Role": "bold slate_blue1",
    "RoleBinding": "bold slate_blue1",
    "ClusterRole": "bold medium_purple",
    "ClusterRoleBinding": "bold medium_purple",
}


def _impact_pill(level: str) -> Text:
    return Text(f" {level.upper()} ", style=_IMPACT_STYLE.get(level, ""))


def render(
    result: AnalysisResult,
    *,
    show_stats: bool = True,
    console: Optional[Console] = None,
) -> None:
    """Print an analysis result to the terminal using Rich."""
    console = console or Console()

    console.print()
    console.print("[bold]Comparison Results[/bold]")
    header = f"[dim]Version 1:[/dim] {escape(result.version1)}   [dim]Version 2:[/dim] {escape(result.version2)}"
    if result.kinds:
        count = len(result.kinds)
        header += f"   [dim]Resource types:[/dim] {count} kind{'s' if count != 1 else ''}"
    console.print(header)

    if not result.has_diff:
        console.print()
        console.print("[bold green]✅ No differences found between versions.[/bold green]")
        return

    if show_stats:
        _print_stats(console, result.statistics)

    for category, changes in result.grouped():
        console.print()
        label = f"{category} ({len(changes)} resource{'s' if len(changes) != 1 else ''})"
        console.print(Rule(label, align="left"))
        for change in changes:
            _print_change(console, change)


def _print_change(console: Console, change: ResourceChange) -> None:
    title = Text()
    title.append(change.kind, style=_KIND_STYLE.get(change.kind, "bold"))
    title.append(f"  {change.name}")
    if change.namespace:
        title.append(f"  ns={change.namespace}", style="dim")
    console.print(title)
    for line in change.lines:
        console.print(Text(line, style=_LINE_STYLE[classify_line(line)]), soft_wrap=True)


def _print_stats(console: Console, stats: Statistics) -> None:
    s = stats.summary
    console.print()
    table = Table(title="Summary", title_style="bold", border_style="dim")
    table.add_column("Resources", justify="right")
    table.add_column("Added", justify="right", style="green")
    table.add_column("Removed", justify="right", style="red")
    table.add_column("Modified", justify="right", style="yellow")
    table.add_column("Unchanged", justify="right", style="dim")
    table.add_column("Impact", justify="center")
    table.add_row(
        str(s.total_resources),
        str(s.resources_added),
        str(s.resources_removed),
        str(s.resources_modified),
        str(s.resources_unchanged),
        _impact_pill(stats.impact.level),
    )
    console.print(table)
    console.print(
        f"[dim]Lines:[/dim] [green]+{stats.lines.added}[/green] "
        f"[red]-{stats.lines.removed}[/red] "
        f"{stats.lines.unchanged} unchanged, {stats.lines.total} total"
    )
    for change in stats.impact.critical_changes:
        console.print(f"[yellow]⚠ critical[/yellow] {escape(change.resource)}: {change.field}")
    for change in stats.impact.breaking_changes:
        console.print(f"[red]✖ breaking[/red] {escape(change.resource)}: {escape(change.field)}")


def render_versions(listing: VersionListing, *, console: Optional[Console] = None) -> None:
    """Print recent tags and branches side by side."""
    console = console or Console()
    if not listing.tags and not listing.branches:
        console.print("[yellow]No tags or branches found.[/yellow]")
        return
    table = Table(title="Available versions", title_style="bold", border_style="dim")
    table.add_column(f"Tags ({len(listing.tags)})", style="cyan")
    table.add_column(f"Branches ({len(listing.branches)})", style="magenta")
    for tag, branch in zip_longest(listing.tags, listing.branches, fillvalue=""):
        table.add_row(tag, branch)
    console.print(table)
