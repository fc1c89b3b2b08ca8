"""Make sure the Lighthouse CI executable is available before auditing."""

from __future__ import annotations

import logging
import subprocess

from rich.console import Console
from rich.markup import escape

from lhcheck_core.config import Settings
from lhcheck_core.errors import ToolInstallError
from lhcheck_core.models import OK, StageResult

console = Console()
logger = logging.getLogger(__name__)


def lhci_version(binary: str = "lhci") -> str | None:
    """Return the installed lhci version string, or None if lhci is unusable."""
    try:
        result = subprocess.run([binary, "--version"], capture_output=True, text=True, check=True)
    except (FileNotFoundError, subprocess.CalledProcessError):
        return None
    return result.stdout.strip() or "unknown"


def install_lhci(package: str = "@lhci/cli") -> None:
    """Install the lhci package globally with npm. Raises ToolInstallError on failure."""
    command = ["npm", "install", "-g", package]
    try:
        result = subprocess.run(command, capture_output=True, text=True)
    except FileNotFoundError as e:
        raise ToolInstallError(command, None, stderr=str(e)) from e
    if result.returncode != 0:
        raise ToolInstallError(command, result.returncode, result.stdout or "", result.stderr or "")


def ensure_lhci(settings: Settings) -> StageResult:
    """Check for lhci on PATH and install it once if it is missing.

    Install failure is the only error that aborts a run, so it is re-raised
    after the captured output has been logged.
    """
    version = lhci_version(settings.lhci_binary)
    if version is not None:
        console.print(f"[green]Lighthouse CI {escape(version)} already installed, skipping installation.[/green]")
        return StageResult("provision", OK, {"installed": False, "version": version})

    console.print(f"Lighthouse CI not found, installing {escape(settings.lhci_package)}...")
    try:
        install_lhci(settings.lhci_package)
    except ToolInstallError as e:
        logger.error("Failed to install %s: %s", settings.lhci_package, e)
        if e.stdout:
            logger.error("npm stdout:\n%s", e.stdout)
        if e.stderr:
            logger.error("npm stderr:\n%s", e.stderr)
        raise

    version = lhci_version(settings.lhci_binary) or "unknown"
    console.print(f"[green]Lighthouse CI {escape(version)} installed.[/green]")
    return StageResult("provision", OK, {"installed": True, "version": version})
