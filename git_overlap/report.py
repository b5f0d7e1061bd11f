"""Overlap report formatting -- JSON output and Rich terminal rendering."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape

from git_overlap.models import OverlapReport

NO_OVERLAP_MESSAGE = "None of the specified files are modified in open PRs."


def overlap_report_to_json(report: OverlapReport) -> str:
    """Serialize overlap report to JSON."""
    return report.model_dump_json(indent=2)


def format_overlap_lines(report: OverlapReport) -> list[str]:
    """Plain-text result lines, one block per overlapping file."""
    lines: list[str] = []
    for path, matches in report.overlaps.items():
        lines.append(f"File: **{path}** is modified in PRs:")
        lines.extend(f"PR #{m.number}: {m.branch}" for m in matches)
    return lines


def render_overlap_report(report: OverlapReport, console: Console | None = None) -> None:
    """Render the overlap report to the console."""
    if console is None:
        console = Console()

    if not report.has_overlaps:
        console.print(f"[green]{NO_OVERLAP_MESSAGE}[/green]")
        return

    console.print(
        f"[bold]--- Results ---[/bold] "
        f"[dim]{escape(report.repo_slug)}, {report.prs_analyzed} open PR(s) via {report.method.value}[/dim]"
    )
    for line in format_overlap_lines(report):
        style = "bold" if line.startswith("File:") else "cyan"
        console.print(f"[{style}]{escape(line)}[/{style}]", highlight=False)
