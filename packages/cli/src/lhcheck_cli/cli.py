"""CLI entry point for lhcheck.

Commands:
  run     install lhci if needed, audit a URL, publish outputs and the PR comment
  scores  read an existing .lighthouseci directory and print what `run` would report
"""

from __future__ import annotations

import importlib.metadata

import click

from lhcheck_cli.commands.run import run_cmd
from lhcheck_cli.commands.scores import scores_cmd
from lhcheck_cli.logs import setup_logging


def _version() -> str:
    try:
        return importlib.metadata.version("lhcheck")
    except importlib.metadata.PackageNotFoundError:
        return "0.0.0"


@click.group()
@click.version_option(version=_version(), prog_name="lhcheck")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, verbose: bool):
    """Lighthouse CI audits with pull request score comments."""
    ctx.ensure_object(dict)
    setup_logging(verbose)


main.add_command(run_cmd)
main.add_command(scores_cmd)
