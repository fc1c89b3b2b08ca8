from __future__ import annotations


class LhcheckError(Exception):
    """Base class for errors that abort a run."""


class ToolInstallError(LhcheckError):
    """Installing the Lighthouse CI package failed.

    Carries the captured streams of the install command so they can be
    logged for diagnosis.
    """

    def __init__(self, command: list[str], returncode: int | None, stdout: str = "", stderr: str = ""):
        self.command = command
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(f"`{' '.join(command)}` failed (exit code {returncode})")
