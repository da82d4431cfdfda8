"""Options and context resolution shared by every gatherer command."""

import dataclasses
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

import click

from sitrep.core.context import SitrepContext, create_context

F = TypeVar("F", bound=Callable[..., Any])

time_option = click.option(
    "-t",
    "--time",
    "time_constraint",
    default=None,
    help="Time window for recent activity, like 24h, 7d or 2w (default from config, else 24h).",
)

workspace_option = click.option(
    "-w",
    "--workspace",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Workspace root to inspect (default: current directory).",
)


def gatherer_options(func: F) -> F:
    """Apply --time and --workspace to a command."""
    return time_option(workspace_option(func))


def resolve_context(click_ctx: click.Context, workspace: Path | None) -> SitrepContext:
    """Return the context for this invocation.

    Tests inject a SitrepContext through ``obj``; a --workspace given on the
    command line still overrides its workspace. Without an injected context
    the production one is created here, which loads [tool.sitrep] config.

    Raises:
        ValueError: If the workspace configuration is malformed
    """
    injected = click_ctx.find_object(SitrepContext)
    if injected is not None:
        if workspace is None:
            return injected
        return dataclasses.replace(injected, workspace=workspace.resolve())
    return create_context(workspace=workspace.resolve() if workspace is not None else None)


def effective_time(ctx: SitrepContext, time_constraint: str | None) -> str:
    return time_constraint if time_constraint is not None else ctx.config.default_time
