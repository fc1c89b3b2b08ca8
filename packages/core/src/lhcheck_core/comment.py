"""Markdown body for the pull request comment and job summary."""

from __future__ import annotations

from lhcheck_core.models import ScoreSet

MARKER = "<!-- lighthouse-report -->"

GOOD = "good"
WARNING = "warning"
BAD = "bad"

_TIER_COLOR = {GOOD: "brightgreen", WARNING: "orange", BAD: "red"}

# Badge labels are already URL-encoded for shields.io.
_BADGES = (
    ("Performance", "performance"),
    ("Accessibility", "accessibility"),
    ("Best%20Practices", "best_practices"),
    ("SEO", "seo"),
)


def score_tier(score: int) -> str:
    if score >= 90:
        return GOOD
    if score >= 50:
        return WARNING
    return BAD


def render_badge(label: str, score: int) -> str:
    color = _TIER_COLOR[score_tier(score)]
    return f"![{label}](https://img.shields.io/badge/{label}-{score}%2F100-{color}?style=flat-square)"


def build_comment_body(url: str, report_url: str, scores: ScoreSet, marker: str = MARKER) -> str:
    badges = " ".join(render_badge(label, getattr(scores, attr)) for label, attr in _BADGES)

    lines = [marker, "", "## Lighthouse Performance Report", "", badges, "", f"**URL tested:** {url}"]
    if report_url:
        lines.append(f"**[View Full Report]({report_url})**")
    if scores.approximated:
        lines.append("")
        lines.append(
            "_Category scores were missing from the report; these values are a rough "
            "approximation from individual audits._"
        )
    return "\n".join(lines)
