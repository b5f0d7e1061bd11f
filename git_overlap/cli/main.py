"""Typer CLI for git-overlap."""

import asyncio
import logging
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from git_overlap.config import settings
from git_overlap.errors import GitOverlapError
from git_overlap.pipeline import run_detection
from git_overlap.report import overlap_report_to_json, render_overlap_report

app = typer.Typer(
    name="git-overlap",
    help="Find open, unmerged pull requests that modify the files you are about to change.",
)
console = Console()
err_console = Console(stderr=True)


def _configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False, show_time=False)],
        force=True,
    )


@app.command()
def main(
    file: List[str] = typer.Option(
        ..., "--file", "-f",
        help="File path to check; repeat the option or pass a comma-separated list",
    ),
    url: str = typer.Option(
        "", "--url", "--remote-url",
        help="Remote repository URL (default: first remote of the current repository)",
    ),
    method: Optional[str] = typer.Option(
        None, "--method",
        help="Access method: 'cli' (gh CLI, alias 'gh') or 'api' (REST API). Auto-detected when omitted",
    ),
    limit: int = typer.Option(settings.default_limit, "--limit", help="Maximum number of open PRs to analyze"),
    json_output: bool = typer.Option(False, "--json", help="Output raw JSON report"),
    debug: bool = typer.Option(False, "--debug", help="Print diagnostic output to stderr"),
):
    """Report which open pull requests touch the given files."""
    _configure_logging(debug or settings.debug)

    def on_progress(index: int, total: int, pr) -> None:
        status.update(f"Processing PR {index} of {total}: #{pr.number} ({escape(pr.branch)})...")

    try:
        with err_console.status("Fetching open pull requests...") as status:
            report = asyncio.run(
                run_detection(file, url=url, method=method, limit=limit, on_progress=on_progress)
            )
    except GitOverlapError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}", highlight=False)
        raise typer.Exit(code=1)

    if json_output:
        console.print_json(overlap_report_to_json(report))
    else:
        render_overlap_report(report, console)


if __name__ == "__main__":
    app()
