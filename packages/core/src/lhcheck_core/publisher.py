"""Publish results: step outputs, job summary and the pull request comment."""

from __future__ import annotations

import logging
import uuid

from rich.console import Console
from rich.markup import escape

from lhcheck_core.comment import build_comment_body
from lhcheck_core.config import Settings
from lhcheck_core.gh.pull_request import get_issue, get_pr_number, get_repo, upsert_comment
from lhcheck_core.models import FAILED, OK, SKIPPED, ScoreSet, StageResult

console = Console()
logger = logging.getLogger(__name__)


def build_outputs(report_url: str, scores: ScoreSet) -> dict[str, str]:
    return {"report-url": report_url, **scores.as_outputs()}


def format_output(name: str, value: str) -> str:
    """One $GITHUB_OUTPUT entry; multi-line values use the ``name<<DELIM`` form."""
    if "\n" not in value and "\r" not in value:
        return f"{name}={value}\n"
    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    while delimiter in value:
        delimiter = f"ghadelimiter_{uuid.uuid4()}"
    return f"{name}<<{delimiter}\n{value}\n{delimiter}\n"


def write_outputs(settings: Settings, report_url: str, scores: ScoreSet) -> StageResult:
    """Append ``name=value`` lines to $GITHUB_OUTPUT, or print them when running locally."""
    outputs = build_outputs(report_url, scores)

    if settings.output_path is None:
        for name, value in outputs.items():
            console.print(f"[dim]output[/dim] {name}={escape(value)}")
        return StageResult("outputs", SKIPPED, outputs, ["GITHUB_OUTPUT not set; outputs printed only"])

    with open(settings.output_path, "a", encoding="utf-8") as f:
        for name, value in outputs.items():
            f.write(format_output(name, value))
    return StageResult("outputs", OK, outputs)


def print_summary(report_url: str, scores: ScoreSet) -> None:
    console.print("\n[bold]Lighthouse Results[/bold]")
    console.print(f"Performance: {scores.performance}/100")
    console.print(f"Accessibility: {scores.accessibility}/100")
    console.print(f"Best Practices: {scores.best_practices}/100")
    console.print(f"SEO: {scores.seo}/100")
    if scores.approximated:
        console.print("[yellow]Scores approximated from individual audits (category scores were missing).[/yellow]")
    if report_url:
        console.print(f"Detailed Report: {escape(report_url)}")


def write_step_summary(settings: Settings, report_url: str, scores: ScoreSet) -> None:
    if settings.step_summary_path is None:
        return
    body = build_comment_body(settings.url, report_url, scores, settings.comment_marker)
    try:
        with open(settings.step_summary_path, "a", encoding="utf-8") as f:
            f.write(body + "\n")
    except OSError as e:
        logger.warning("Could not write job summary: %s", e)


def publish_comment(settings: Settings, report_url: str, scores: ScoreSet, repo_obj=None) -> StageResult:
    """Create or update the single marker comment on the pull request.

    Best-effort: API failures are logged and reported as FAILED, never raised.
    """
    if not settings.is_pull_request:
        return StageResult("comment", SKIPPED, None, [f"event {settings.event_name or 'unknown'} is not a PR"])

    pr_number = get_pr_number(settings.event_path)
    if not settings.repository or pr_number is None:
        msg = "repository or pull request number unavailable; not commenting"
        logger.warning(msg)
        return StageResult("comment", SKIPPED, None, [msg])
    if repo_obj is None and not settings.github_token:
        msg = "no GitHub token; not commenting"
        logger.warning(msg)
        return StageResult("comment", SKIPPED, None, [msg])

    body = build_comment_body(settings.url, report_url, scores, settings.comment_marker)
    try:
        repo = repo_obj if repo_obj is not None else get_repo(
            settings.repository, settings.github_token, settings.comments_per_page
        )
        issue = get_issue(repo, pr_number)
        action = upsert_comment(issue, body, settings.comment_marker)
    except Exception as e:
        # GithubException, requests errors, bad credentials: none should fail the step.
        logger.error("Failed to post PR comment (%s): %s", type(e).__name__, e)
        return StageResult("comment", FAILED, None, [f"{type(e).__name__}: {e}"])

    console.print(f"[green]PR comment {action} on #{pr_number}.[/green]")
    return StageResult("comment", OK, action)
