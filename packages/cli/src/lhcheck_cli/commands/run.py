"""run command: the full Lighthouse check, as executed by the GitHub Action."""

from __future__ import annotations

import click
from rich.console import Console
from rich.markup import escape

from lhcheck_cli.logs import setup_logging
from lhcheck_core.action import run_action

console = Console()


@click.command("run")
@click.option("--url", envvar="INPUT_URL", required=True, help="Deployed URL to audit. [env: INPUT_URL]")
@click.option(
    "--github-token",
    "github_token",
    default=None,
    help="Token for lhci status checks and the PR comment. Defaults to INPUT_GITHUB-TOKEN, "
    "GITHUB_TOKEN, then `gh auth token`.",
)
@click.option(
    "--config",
    "config_path",
    default=None,
    help="Path to an .lhcheck.yml file. Defaults to .lhcheck.yml in the workspace root.",
    envvar="LHCHECK_CONFIG",
)
@click.option("--artifacts-dir", default=None, help="Directory lhci writes results to. Overrides config file.")
@click.option(
    "--fail-on-error",
    is_flag=True,
    help="Exit non-zero if the run aborts (e.g. lhci could not be installed). Off by default.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def run_cmd(
    url: str,
    github_token: str | None,
    config_path: str | None,
    artifacts_dir: str | None,
    fail_on_error: bool,
    verbose: bool,
):
    """Audit URL with Lighthouse CI and publish the scores.

    Writes the report-url, performance, accessibility, best-practices and seo
    step outputs and, on pull_request events, creates or updates a single
    summary comment on the PR.

    \b
    Exits 0 even when stages fail so reporting problems never block a
    pipeline; pass --fail-on-error to change that for fatal errors.
    """
    from lhcheck_cli.auth import resolve_github_token
    from lhcheck_core.config import load_settings

    if verbose:
        setup_logging(verbose)

    if not url.strip():
        raise click.UsageError("--url must not be empty.")

    token = github_token or resolve_github_token()
    if not token:
        console.print("[yellow]No GitHub token found; the PR comment will be skipped.[/yellow]")

    settings = load_settings(
        url=url.strip(),
        github_token=token,
        config_path=config_path,
        cli_overrides={"artifacts_dir": artifacts_dir},
    )
    report = run_action(settings)

    if report.fatal:
        console.print(f"[red]Lighthouse audit failed: {escape(report.fatal)}[/red]")
        if fail_on_error:
            raise SystemExit(1)
    elif report.degraded:
        console.print("[yellow]Completed with warnings; see the log above.[/yellow]")
