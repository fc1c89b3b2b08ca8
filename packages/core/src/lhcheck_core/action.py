"""Top-level Lighthouse check pipeline.

provision -> audit -> read links/scores -> outputs -> PR comment (PR events only).
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.markup import escape

from lhcheck_core.audit import run_audit
from lhcheck_core.config import Settings
from lhcheck_core.errors import LhcheckError
from lhcheck_core.models import ActionReport
from lhcheck_core.provisioner import ensure_lhci
from lhcheck_core.publisher import print_summary, publish_comment, write_outputs, write_step_summary
from lhcheck_core.results import read_report_url, read_scores

console = Console()
logger = logging.getLogger(__name__)


def run_action(settings: Settings, repo_obj=None) -> ActionReport:
    """Run the whole check and return what happened.

    Never raises: a failed lhci install or any unexpected error is logged and
    recorded in ``ActionReport.fatal`` so the calling workflow is not blocked.
    The CLI decides whether a fatal report changes the exit code.
    """
    report = ActionReport(url=settings.url)

    try:
        console.print(f"[bold cyan]Running Lighthouse audit on {escape(settings.url)}...[/bold cyan]")
        report.stages.append(ensure_lhci(settings))
        report.stages.append(run_audit(settings))

        console.print(f"[dim]Reading results from {escape(str(settings.artifacts_dir))}[/dim]")
        links = read_report_url(settings.artifacts_dir, settings.url)
        scores = read_scores(settings.artifacts_dir)
        report.stages.extend([links, scores])
        report.report_url = links.value
        report.scores = scores.value

        report.stages.append(write_outputs(settings, report.report_url, report.scores))
        print_summary(report.report_url, report.scores)
        write_step_summary(settings, report.report_url, report.scores)

        if settings.is_pull_request:
            report.stages.append(publish_comment(settings, report.report_url, report.scores, repo_obj=repo_obj))
    except LhcheckError as e:
        logger.error("Lighthouse audit failed: %s", e)
        report.fatal = str(e)
    except Exception as e:
        logger.exception("Lighthouse audit failed unexpectedly")
        report.fatal = f"{type(e).__name__}: {e}"

    for stage in report.stages:
        for warning in stage.warnings:
            logger.info("[%s] %s", stage.name, warning)
    return report
