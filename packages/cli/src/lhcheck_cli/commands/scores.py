"""scores command: read existing lhci artifacts without running anything."""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from lhcheck_core.comment import score_tier
from lhcheck_core.results import read_report_url, read_scores

console = Console()

_TIER_STYLE = {"good": "green", "warning": "yellow", "bad": "red"}


@click.command("scores")
@click.option("--url", required=True, help="URL that was audited (used to look up the report link).")
@click.option(
    "--artifacts-dir",
    default=".lighthouseci",
    show_default=True,
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory containing links.json and lhr-*.json.",
)
def scores_cmd(url: str, artifacts_dir: Path):
    """Show the scores and report link lhcheck would publish for URL."""
    links = read_report_url(artifacts_dir, url)
    scores_result = read_scores(artifacts_dir)
    scores = scores_result.value

    table = Table(title=f"Lighthouse: {escape(url)}", show_header=True, header_style="bold cyan")
    table.add_column("Category")
    table.add_column("Score", justify="right")

    for label, value in (
        ("Performance", scores.performance),
        ("Accessibility", scores.accessibility),
        ("Best Practices", scores.best_practices),
        ("SEO", scores.seo),
    ):
        style = _TIER_STYLE[score_tier(value)]
        table.add_row(label, f"[{style}]{value}[/{style}]")

    console.print(table)
    console.print(f"Source: {scores.source}")
    console.print(f"Report: {escape(links.value) or 'none'}")
    for stage in (links, scores_result):
        for warning in stage.warnings:
            console.print(f"[yellow]{stage.name}: {escape(warning)}[/yellow]")
