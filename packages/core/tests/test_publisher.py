"""Tests for step outputs, job summary and PR comment publishing."""

import json

from github import GithubException

from lhcheck_core.comment import MARKER
from lhcheck_core.models import FAILED, OK, SKIPPED, ScoreSet
from lhcheck_core.publisher import (
    build_outputs,
    format_output,
    publish_comment,
    write_outputs,
    write_step_summary,
)

SCORES = ScoreSet(performance=88, accessibility=100, best_practices=92, seo=45, source="categories")


def _pr_settings(make_settings, tmp_path, number=42, **overrides):
    event_path = tmp_path / "event.json"
    event_path.write_text(json.dumps({"pull_request": {"number": number}}))
    fields = {"event_name": "pull_request", "event_path": event_path, "repository": "owner/repo"}
    fields.update(overrides)
    return make_settings(**fields)


class TestOutputs:
    def test_build_outputs(self):
        assert build_outputs("https://report.x", SCORES) == {
            "report-url": "https://report.x",
            "performance": "88",
            "accessibility": "100",
            "best-practices": "92",
            "seo": "45",
        }

    def test_writes_github_output_file(self, make_settings, tmp_path):
        out = tmp_path / "github_output"
        out.write_text("existing=1\n")

        result = write_outputs(make_settings(output_path=out), "", SCORES)

        assert result.status == OK
        assert out.read_text().splitlines() == [
            "existing=1",
            "report-url=",
            "performance=88",
            "accessibility=100",
            "best-practices=92",
            "seo=45",
        ]

    def test_defaults_written_when_nothing_was_read(self, make_settings, tmp_path):
        out = tmp_path / "github_output"
        write_outputs(make_settings(output_path=out), "", ScoreSet())
        assert "performance=0" in out.read_text().splitlines()

    def test_printed_when_no_output_file(self, make_settings):
        result = write_outputs(make_settings(), "", SCORES)
        assert result.status == SKIPPED
        assert result.value["seo"] == "45"

    def test_multiline_value_cannot_add_outputs(self, make_settings, tmp_path):
        out = tmp_path / "github_output"

        write_outputs(make_settings(output_path=out), "https://report.x\nperformance=100", SCORES)

        lines = out.read_text().splitlines()
        assert lines[0].startswith("report-url<<ghadelimiter_")
        delimiter = lines[0].split("<<", 1)[1]
        assert lines[1:4] == ["https://report.x", "performance=100", delimiter]
        assert lines[4:] == ["performance=88", "accessibility=100", "best-practices=92", "seo=45"]


class TestFormatOutput:
    def test_single_line(self):
        assert format_output("seo", "45") == "seo=45\n"

    def test_carriage_return_uses_delimiter_form(self):
        text = format_output("report-url", "a\rb")
        name, delimiter = text.splitlines()[0].split("<<", 1)
        assert name == "report-url"
        assert text.endswith(f"\n{delimiter}\n")


def test_step_summary_appended(make_settings, tmp_path):
    summary = tmp_path / "summary.md"
    write_step_summary(make_settings(step_summary_path=summary), "https://report.x", SCORES)
    text = summary.read_text()
    assert "Lighthouse Performance Report" in text
    assert "https://report.x" in text


class TestPublishComment:
    def test_skipped_for_non_pr_event(self, make_settings, fake_repo):
        result = publish_comment(make_settings(event_name="push"), "", SCORES, repo_obj=fake_repo)
        assert result.status == SKIPPED
        fake_repo.get_issue.assert_not_called()

    def test_skipped_without_pr_number(self, make_settings, fake_repo):
        settings = make_settings(event_name="pull_request", repository="owner/repo")
        result = publish_comment(settings, "", SCORES, repo_obj=fake_repo)
        assert result.status == SKIPPED

    def test_skipped_on_non_object_event_payload(self, make_settings, tmp_path, fake_repo):
        event_path = tmp_path / "event.json"
        event_path.write_text("[]")
        settings = make_settings(event_name="pull_request", event_path=event_path, repository="owner/repo")

        result = publish_comment(settings, "", SCORES, repo_obj=fake_repo)

        assert result.status == SKIPPED
        fake_repo.get_issue.assert_not_called()

    def test_skipped_without_token(self, make_settings, tmp_path, mocker):
        mock_get_repo = mocker.patch("lhcheck_core.publisher.get_repo")
        settings = _pr_settings(make_settings, tmp_path, github_token=None)
        result = publish_comment(settings, "", SCORES)
        assert result.status == SKIPPED
        mock_get_repo.assert_not_called()

    def test_creates_comment(self, make_settings, tmp_path, fake_repo):
        result = publish_comment(_pr_settings(make_settings, tmp_path), "https://report.x", SCORES, repo_obj=fake_repo)

        assert result.status == OK
        assert result.value == "created"
        fake_repo.get_issue.assert_called_once_with(42)
        [comment] = fake_repo.issue.comments
        assert comment.body.startswith(MARKER)
        assert "https://report.x" in comment.body

    def test_second_run_updates_same_comment(self, make_settings, tmp_path, fake_repo):
        settings = _pr_settings(make_settings, tmp_path)
        publish_comment(settings, "", ScoreSet(10, 10, 10, 10, source="categories"), repo_obj=fake_repo)
        result = publish_comment(settings, "", ScoreSet(95, 95, 95, 95, source="categories"), repo_obj=fake_repo)

        assert result.value == "updated"
        marker_comments = [c for c in fake_repo.issue.comments if MARKER in c.body]
        assert len(marker_comments) == 1
        assert "Performance-95%2F100" in marker_comments[0].body

    def test_builds_client_from_settings(self, make_settings, tmp_path, fake_repo, mocker):
        mock_get_repo = mocker.patch("lhcheck_core.publisher.get_repo", return_value=fake_repo)
        publish_comment(_pr_settings(make_settings, tmp_path), "", SCORES)
        mock_get_repo.assert_called_once_with("owner/repo", "tok", 100)

    def test_api_error_is_caught(self, make_settings, tmp_path, fake_repo):
        fake_repo.get_issue.side_effect = GithubException(403, {"message": "rate limited"}, None)

        result = publish_comment(_pr_settings(make_settings, tmp_path), "", SCORES, repo_obj=fake_repo)

        assert result.status == FAILED
        assert "GithubException" in result.warnings[0]

    def test_network_error_is_caught(self, make_settings, tmp_path, mocker):
        mocker.patch("lhcheck_core.publisher.get_repo", side_effect=ConnectionError("boom"))
        result = publish_comment(_pr_settings(make_settings, tmp_path), "", SCORES)
        assert result.status == FAILED
