import logging
import os

import click

from sitrep.cli.commands.beads import beads_cmd
from sitrep.cli.commands.github import github_cmd
from sitrep.cli.commands.graphite import graphite_cmd
from sitrep.cli.commands.report import report_cmd

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags


def _configure_logging() -> None:
    # Enable debug logging if SITREP_DEBUG environment variable is set
    if os.getenv("SITREP_DEBUG"):
        logging.basicConfig(
            level=logging.DEBUG,
            format="[DEBUG %(name)s:%(lineno)d] %(message)s",
        )


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="sitrep")
def cli() -> None:
    """Gather developer workflow status (beads, Graphite, GitHub) as JSON."""
    _configure_logging()


cli.add_command(beads_cmd)
cli.add_command(github_cmd)
cli.add_command(graphite_cmd)
cli.add_command(report_cmd)


def main() -> None:
    """CLI entry point used by the `sitrep` console script."""
    cli()
