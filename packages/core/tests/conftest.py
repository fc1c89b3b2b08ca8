from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from lhcheck_core.config import Settings


@pytest.fixture
def make_settings(tmp_path):
    """Build Settings rooted at tmp_path; keyword args override fields."""

    def _make(**overrides):
        fields = {
            "url": "https://x.test",
            "github_token": "tok",
            "workspace": tmp_path,
            "artifacts_dir": tmp_path / ".lighthouseci",
            "lhci_config_path": tmp_path / "lighthouserc.json",
        }
        fields.update(overrides)
        return Settings(**fields)

    return _make


class FakeComment:
    def __init__(self, comment_id, body):
        self.id = comment_id
        self.body = body

    def edit(self, body):
        self.body = body


class FakeIssue:
    """In-memory stand-in for a PyGithub Issue's comment API."""

    def __init__(self, comments=None):
        self.comments = list(comments or [])
        self._next_id = 100

    def get_comments(self):
        page = MagicMock()
        page.get_page.side_effect = lambda n: list(self.comments) if n == 0 else []
        return page

    def create_comment(self, body):
        self._next_id += 1
        comment = FakeComment(self._next_id, body)
        self.comments.append(comment)
        return comment


@pytest.fixture
def fake_gh():
    return SimpleNamespace(Issue=FakeIssue, Comment=FakeComment)


@pytest.fixture
def fake_repo():
    """A repo mock whose get_issue() always returns the same FakeIssue."""
    issue = FakeIssue()
    repo = MagicMock()
    repo.get_issue.return_value = issue
    repo.issue = issue
    return repo
