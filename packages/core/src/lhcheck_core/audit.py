"""Run `lhci autorun` against the target URL."""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from lhcheck_core.config import Settings
from lhcheck_core.models import DEGRADED, OK, StageResult

console = Console()
logger = logging.getLogger(__name__)


def discover_config(settings: Settings) -> Path | None:
    """Return the lighthouserc path when it exists in the workspace root."""
    path = settings.lhci_config_path
    if path.is_file():
        console.print(f"[green]Found {escape(path.name)} in repository root.[/green]")
        return path
    console.print(f"[yellow]No {escape(path.name)} found in repository root, using default lhci config.[/yellow]")
    return None


def build_command(
    url: str,
    config_path: Path | None = None,
    binary: str = "lhci",
    number_of_runs: int = 1,
) -> list[str]:
    if not url:
        raise ValueError("A URL to audit is required.")
    command = [binary, "autorun"]
    if config_path is not None:
        command.append(f"--config={config_path}")
    command.append(f"--collect.url={url}")
    command.append(f"--collect.numberOfRuns={number_of_runs}")
    return command


def run_audit(settings: Settings) -> StageResult:
    """Run the audit with the parent's stdout/stderr so progress shows in the CI log.

    lhci exits non-zero when assertions fail but still writes its artifacts,
    so a failing exit is reported as degraded and the pipeline carries on.
    """
    config_path = discover_config(settings)
    command = build_command(settings.url, config_path, settings.lhci_binary, settings.number_of_runs)

    env = dict(os.environ)
    if settings.github_token:
        # Picked up by lhci's GitHub status check integration.
        env["LHCI_GITHUB_TOKEN"] = settings.github_token

    console.print(f"[bold]Running:[/bold] {escape(' '.join(command))}")
    try:
        result = subprocess.run(command, env=env)
    except FileNotFoundError as e:
        logger.warning("Could not start %s: %s", settings.lhci_binary, e)
        return StageResult("audit", DEGRADED, {"command": command, "returncode": None}, [f"lhci not runnable: {e}"])

    if result.returncode != 0:
        msg = f"lhci exited with code {result.returncode}; continuing to read results"
        logger.warning(msg)
        return StageResult("audit", DEGRADED, {"command": command, "returncode": result.returncode}, [msg])

    console.print("[green]Lighthouse completed successfully.[/green]")
    return StageResult("audit", OK, {"command": command, "returncode": 0})
