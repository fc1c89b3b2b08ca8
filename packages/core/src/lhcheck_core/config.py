from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

from lhcheck_core.comment import MARKER

DEFAULT_CONFIG: dict = {
    "artifacts_dir": ".lighthouseci",
    "lhci_config": "lighthouserc.json",  # looked up relative to the workspace root
    "lhci_binary": "lhci",
    "lhci_package": "@lhci/cli",
    "number_of_runs": 1,
    "comment_marker": MARKER,
    "comments_per_page": 100,
}


@dataclass(frozen=True)
class Settings:
    """Everything a run needs, resolved once and passed to each stage.

    Stages never read os.environ themselves; tests build a Settings directly.
    """

    url: str
    github_token: str | None
    workspace: Path
    artifacts_dir: Path
    lhci_config_path: Path
    lhci_binary: str = "lhci"
    lhci_package: str = "@lhci/cli"
    number_of_runs: int = 1
    comment_marker: str = MARKER
    comments_per_page: int = 100
    event_name: str = ""
    event_path: Path | None = None
    repository: str | None = None
    output_path: Path | None = None
    step_summary_path: Path | None = None

    @property
    def is_pull_request(self) -> bool:
        return self.event_name in ("pull_request", "pull_request_target")


def load_config(config_path: str = ".lhcheck.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .lhcheck.yml (path relative to the current directory unless absolute)
      3. CLI argument overrides
    """
    config = dict(DEFAULT_CONFIG)

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    return config


def _optional_path(value: str | None) -> Path | None:
    return Path(value) if value else None


def load_settings(
    url: str,
    github_token: str | None = None,
    config_path: str | None = None,
    cli_overrides: Optional[dict] = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Build Settings from config, overrides and the GitHub Actions environment.

    ``environ`` defaults to ``os.environ``. The config file defaults to
    ``.lhcheck.yml`` in the workspace root.
    """
    env = os.environ if environ is None else environ
    workspace = Path(env.get("GITHUB_WORKSPACE") or ".")

    config = load_config(config_path or str(workspace / ".lhcheck.yml"), cli_overrides)

    return Settings(
        url=url,
        github_token=github_token,
        workspace=workspace,
        artifacts_dir=workspace / config["artifacts_dir"],
        lhci_config_path=workspace / config["lhci_config"],
        lhci_binary=config["lhci_binary"],
        lhci_package=config["lhci_package"],
        number_of_runs=int(config["number_of_runs"]),
        comment_marker=config["comment_marker"],
        comments_per_page=int(config["comments_per_page"]),
        event_name=env.get("GITHUB_EVENT_NAME", ""),
        event_path=_optional_path(env.get("GITHUB_EVENT_PATH")),
        repository=env.get("GITHUB_REPOSITORY") or None,
        output_path=_optional_path(env.get("GITHUB_OUTPUT")),
        step_summary_path=_optional_path(env.get("GITHUB_STEP_SUMMARY")),
    )
