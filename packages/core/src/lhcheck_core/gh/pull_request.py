from __future__ import annotations

import json
import logging
from pathlib import Path

from github import Auth, Github

logger = logging.getLogger(__name__)


def get_repo(repo_name: str, token: str, per_page: int = 100):
    return Github(auth=Auth.Token(token), per_page=per_page).get_repo(repo_name)


def get_issue(repo, pr_number: int):
    # PR conversation comments live on the issue, not on the pull's review threads.
    return repo.get_issue(pr_number)


def get_pr_number(event_path: Path | None) -> int | None:
    """Read the pull request number from the Actions event payload, or None."""
    if event_path is None:
        return None
    try:
        event = json.loads(event_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("Could not read event payload %s: %s", event_path, e)
        return None
    if not isinstance(event, dict):
        logger.warning("Event payload %s is not a JSON object", event_path)
        return None
    pull_request = event.get("pull_request")
    if not isinstance(pull_request, dict):
        pull_request = {}
    number = pull_request.get("number", event.get("number"))
    return number if isinstance(number, int) and not isinstance(number, bool) else None


def find_marker_comment(issue, marker: str):
    """Return the first comment on the first page whose body contains ``marker``."""
    for comment in issue.get_comments().get_page(0):
        if marker in (comment.body or ""):
            return comment
    return None


def upsert_comment(issue, body: str, marker: str) -> str:
    """Edit the marker comment in place, or create it. Returns "updated" or "created"."""
    existing = find_marker_comment(issue, marker)
    if existing is not None:
        existing.edit(body)
        return "updated"
    issue.create_comment(body)
    return "created"
