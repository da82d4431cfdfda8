"""`sitrep report` command: every selected source in one document."""

from pathlib import Path

import click

from sitrep.cli.error_boundary import cli_error_boundary
from sitrep.cli.options import effective_time, gatherer_options, resolve_context
from sitrep.cli.output import emit_json
from sitrep.core.config import SOURCE_NAMES
from sitrep.gatherers.report import gather_report


@click.command("report")
@gatherer_options
@click.option(
    "-s",
    "--source",
    "sources",
    multiple=True,
    type=click.Choice(SOURCE_NAMES),
    help="Source to include; repeat for several (default: configured sources).",
)
@click.pass_context
@cli_error_boundary
def report_cmd(
    ctx: click.Context,
    time_constraint: str | None,
    workspace: Path | None,
    sources: tuple[str, ...],
) -> None:
    """Gather a situation report across sources concurrently."""
    sitrep_ctx = resolve_context(ctx, workspace)
    result = gather_report(
        sitrep_ctx,
        time_constraint=effective_time(sitrep_ctx, time_constraint),
        sources=list(sources) if sources else None,
    )
    emit_json(result.to_dict())
