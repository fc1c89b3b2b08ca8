"""Result types passed between pipeline stages.

Each stage returns a StageResult instead of only logging, so callers (and
tests) can tell a degraded read from a clean one without parsing log output.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

OK = "ok"
DEGRADED = "degraded"  # stage ran but fell back to defaults
SKIPPED = "skipped"  # nothing to do (missing optional input, not a PR, ...)
FAILED = "failed"  # best-effort stage raised and was caught


@dataclass(frozen=True)
class ScoreSet:
    """The four Lighthouse category scores on a 0-100 scale.

    ``source`` records where the numbers came from: "categories" for real
    category scores, "audits" for the rough per-audit approximation, and
    "default" when nothing could be read.
    """

    performance: int = 0
    accessibility: int = 0
    best_practices: int = 0
    seo: int = 0
    source: str = "default"

    @property
    def approximated(self) -> bool:
        return self.source == "audits"

    def is_zero(self) -> bool:
        return self.performance == 0 and self.accessibility == 0 and self.best_practices == 0 and self.seo == 0

    def as_outputs(self) -> dict[str, str]:
        return {
            "performance": str(self.performance),
            "accessibility": str(self.accessibility),
            "best-practices": str(self.best_practices),
            "seo": str(self.seo),
        }


@dataclass
class StageResult:
    name: str
    status: str
    value: Any = None
    warnings: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status == OK


@dataclass
class ActionReport:
    """Everything one run produced: outputs plus the per-stage trail."""

    url: str
    report_url: str = ""
    scores: ScoreSet = field(default_factory=ScoreSet)
    stages: list[StageResult] = field(default_factory=list)
    fatal: str | None = None

    def stage(self, name: str) -> StageResult | None:
        for s in self.stages:
            if s.name == name:
                return s
        return None

    @property
    def degraded(self) -> bool:
        return any(s.status in (DEGRADED, FAILED) for s in self.stages)
