"""`sitrep graphite` command."""

from pathlib import Path

import click

from sitrep.cli.error_boundary import cli_error_boundary
from sitrep.cli.options import effective_time, gatherer_options, resolve_context
from sitrep.cli.output import emit_json
from sitrep.gatherers.graphite import gather_graphite


@click.command("graphite")
@gatherer_options
@click.pass_context
@cli_error_boundary
def graphite_cmd(ctx: click.Context, time_constraint: str | None, workspace: Path | None) -> None:
    """Show Graphite stacks, branch PR status and recent commits."""
    sitrep_ctx = resolve_context(ctx, workspace)
    time_window = effective_time(sitrep_ctx, time_constraint)
    result = gather_graphite(sitrep_ctx, time_constraint=time_window)
    emit_json(result.to_dict())
