"""Read the JSON artifacts lhci leaves in its output directory.

Two independent reads, each optional:

- ``links.json`` maps each audited URL to its uploaded report.
- ``lhr-*.json`` are full Lighthouse reports; the last one by filename is used.

A missing or unreadable file never fails the run; the caller gets empty or
zero values and a degraded/skipped StageResult.
"""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from lhcheck_core.models import DEGRADED, OK, SKIPPED, ScoreSet, StageResult

console = Console()
logger = logging.getLogger(__name__)

LINKS_FILENAME = "links.json"
LHR_PREFIX = "lhr-"
LHR_SUFFIX = ".json"

CATEGORY_KEYS = ("performance", "accessibility", "best-practices", "seo")

# Used only when every category score is 0. This is a plain mean, not
# Lighthouse's weighted formula, so the result is an approximation.
PERFORMANCE_AUDITS = (
    "first-contentful-paint",
    "largest-contentful-paint",
    "total-blocking-time",
    "cumulative-layout-shift",
    "speed-index",
)
PROXY_AUDITS = {
    "accessibility": "color-contrast",
    "best-practices": "errors-in-console",
    "seo": "viewport",
}


def round_half_up(value: float) -> int:
    """Round to the nearest int with .5 going up (12.5 -> 13), unlike round()."""
    return int(math.floor(value + 0.5))


def to_percent(score: float) -> int:
    return round_half_up(score * 100)


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


# ---------------------------------------------------------------------------
# links.json
# ---------------------------------------------------------------------------


def resolve_report_url(links: dict, url: str) -> str:
    """Look up ``url`` in the link map, tolerating a trailing slash either way."""
    report_url = links.get(url) or ""
    if not report_url and not url.endswith("/"):
        report_url = links.get(url + "/") or ""
    if not report_url and url.endswith("/"):
        report_url = links.get(url[:-1]) or ""
    return report_url


def read_report_url(artifacts_dir: Path, url: str) -> StageResult:
    links_path = artifacts_dir / LINKS_FILENAME
    if not links_path.is_file():
        logger.info("No %s at %s", LINKS_FILENAME, links_path)
        return StageResult("links", SKIPPED, "", [f"{LINKS_FILENAME} not found"])

    try:
        links = json.loads(links_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:  # ValueError covers JSONDecodeError and UnicodeDecodeError
        logger.warning("Failed to read %s: %s", links_path, e)
        return StageResult("links", DEGRADED, "", [f"could not parse {LINKS_FILENAME}: {e}"])

    if not isinstance(links, dict):
        logger.warning("%s is not a JSON object", links_path)
        return StageResult("links", DEGRADED, "", [f"{LINKS_FILENAME} is not a JSON object"])

    logger.debug("Available link keys: %s", ", ".join(links))
    report_url = resolve_report_url(links, url)
    if not report_url:
        msg = f"no report link for {url}"
        logger.warning("%s (available: %s)", msg, ", ".join(links) or "none")
        return StageResult("links", DEGRADED, "", [msg])

    console.print(f"Report URL: {escape(report_url)}")
    return StageResult("links", OK, report_url)


# ---------------------------------------------------------------------------
# lhr-*.json
# ---------------------------------------------------------------------------


def find_latest_report(artifacts_dir: Path) -> Path | None:
    """Return the lhr file with the greatest filename.

    lhci names reports ``lhr-<epoch ms>.json`` so filename order tracks write
    order in practice. File mtimes are deliberately not consulted.
    """
    if not artifacts_dir.is_dir():
        return None
    names = sorted(
        p.name for p in artifacts_dir.iterdir() if p.name.startswith(LHR_PREFIX) and p.name.endswith(LHR_SUFFIX)
    )
    logger.debug("LHR files found in %s: %s", artifacts_dir, ", ".join(names) or "none")
    if not names:
        return None
    return artifacts_dir / names[-1]


def _mapping(value) -> dict:
    return value if isinstance(value, dict) else {}


def _category_scores(report: dict) -> dict[str, int]:
    categories = _mapping(report.get("categories"))
    scores = {key: 0 for key in CATEGORY_KEYS}
    for key in CATEGORY_KEYS:
        category = categories.get(key)
        if isinstance(category, dict) and _is_number(category.get("score")):
            scores[key] = to_percent(category["score"])
    return scores


def _audit_score(audits: dict, audit_id: str):
    audit = audits.get(audit_id)
    if not isinstance(audit, dict):
        return None
    score = audit.get("score")
    return score if _is_number(score) else None


def _approximate_scores(report: dict) -> dict[str, int]:
    """Rough per-category scores derived from individual audits.

    Performance is the unweighted mean of the core metric audits that are
    present (missing or null ones are left out, not counted as zero). The
    other categories each mirror a single representative audit.
    """
    audits = _mapping(report.get("audits"))
    scores = {key: 0 for key in CATEGORY_KEYS}

    perf = [s for s in (_audit_score(audits, a) for a in PERFORMANCE_AUDITS) if s is not None]
    if perf:
        scores["performance"] = to_percent(sum(perf) / len(perf))

    for key, audit_id in PROXY_AUDITS.items():
        score = _audit_score(audits, audit_id)
        scores[key] = to_percent(score) if score is not None else 0
    return scores


def extract_scores(report: dict) -> ScoreSet:
    """Scale category scores to 0-100, falling back to audits when all are 0."""
    scores = _category_scores(report)
    source = "categories"

    if all(v == 0 for v in scores.values()):
        logger.warning("All category scores are 0; approximating from individual audits.")
        scores = _approximate_scores(report)
        source = "audits"

    return ScoreSet(
        performance=scores["performance"],
        accessibility=scores["accessibility"],
        best_practices=scores["best-practices"],
        seo=scores["seo"],
        source=source,
    )


def read_scores(artifacts_dir: Path) -> StageResult:
    latest = find_latest_report(artifacts_dir)
    if latest is None:
        logger.warning("No %s*%s files in %s", LHR_PREFIX, LHR_SUFFIX, artifacts_dir)
        return StageResult("scores", SKIPPED, ScoreSet(), ["no Lighthouse report files found"])

    try:
        report = json.loads(latest.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:  # ValueError covers JSONDecodeError and UnicodeDecodeError
        logger.warning("Failed to read %s: %s", latest, e)
        return StageResult("scores", DEGRADED, ScoreSet(), [f"could not parse {latest.name}: {e}"])

    if not isinstance(report, dict):
        logger.warning("%s is not a JSON object", latest)
        return StageResult("scores", DEGRADED, ScoreSet(), [f"{latest.name} is not a JSON object"])

    scores = extract_scores(report)
    console.print(f"Read scores from {escape(latest.name)}")
    if scores.approximated:
        return StageResult("scores", DEGRADED, scores, ["scores approximated from individual audits"])
    return StageResult("scores", OK, scores)
