"""GitHub token resolution for the action and for local runs.

Resolution order (stops at first success):
  1. INPUT_GITHUB-TOKEN (the `github-token` action input)
  2. GITHUB_TOKEN environment variable
  3. `gh auth token` (GitHub CLI session, for local runs)
"""

from __future__ import annotations

import logging
import os
import subprocess

logger = logging.getLogger(__name__)


def resolve_github_token() -> str | None:
    """Return a GitHub token or None if no source is available. Never raises."""
    for var in ("INPUT_GITHUB-TOKEN", "GITHUB_TOKEN"):
        token = os.environ.get(var)
        if token:
            return token

    try:
        result = subprocess.run(
            ["gh", "auth", "token"],
            capture_output=True,
            text=True,
            timeout=5,
        )
        if result.returncode == 0:
            gh_token = result.stdout.strip()
            if gh_token:
                logger.debug("Resolved GitHub token via gh CLI session.")
                return gh_token
    except (FileNotFoundError, subprocess.TimeoutExpired):
        pass

    return None
