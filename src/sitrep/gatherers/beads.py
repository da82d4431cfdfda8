"""Beads gatherer.

Collects local issue data via the `bd` CLI:
- Stats overview
- In-progress work
- Ready items (unblocked)
- Blocked items
- Recently closed (filtered by time, client-side)

bd's own list filters have no time window, so closed issues are fetched
with a fixed limit and filtered here.
"""

import logging
from pathlib import Path

from sitrep.core.context import SitrepContext
from sitrep.core.envelope import GathererResult
from sitrep.core.time_constraint import InvalidConstraint, filter_by_time, parse_time_constraint
from sitrep.gatherers.boundary import gatherer_boundary
from sitrep.gatherers.calls import (
    CallPolicy,
    GathererCall,
    first_required_failure,
    run_calls,
)
from sitrep.integrations.beads.types import (
    BeadsData,
    BeadsIssue,
    parse_bd_issue_list,
    parse_bd_stats,
)

logger = logging.getLogger(__name__)

SOURCE = "beads"

IN_PROGRESS_LIMIT = 10
READY_LIMIT = 10
CLOSED_LIMIT = 20


def beads_initialized(workspace_root: Path) -> bool:
    """Check for the beads database under <workspace_root>/.beads/."""
    return (workspace_root / ".beads" / "issues.db").is_file()


def _bd_args(ctx: SitrepContext, *args: str) -> tuple[str, ...]:
    workspace_args = ("--workspace-root", str(ctx.workspace)) if ctx.workspace is not None else ()
    return (*workspace_args, *args, "--json")


def _issue_list_call(ctx: SitrepContext, name: str, *args: str) -> GathererCall:
    return GathererCall(
        name=name,
        cmd="bd",
        args=_bd_args(ctx, *args),
        policy=CallPolicy.BEST_EFFORT,
        parse=parse_bd_issue_list,
        fallback=list,
    )


def _closed_timestamp(issue: BeadsIssue) -> str | None:
    return issue.closed_at or issue.updated_at


@gatherer_boundary(SOURCE)
def gather_beads(ctx: SitrepContext, *, time_constraint: str) -> GathererResult[BeadsData]:
    """Gather beads issue data.

    Args:
        ctx: Context providing the command runner, clock and workspace
        time_constraint: Window for recently closed issues (24h, 7d, 2w)

    Returns:
        unavailable if beads is not initialized in the workspace, error if
        the time constraint is invalid or `bd stats` fails, success otherwise
    """
    captured_at = ctx.time.now()

    if not beads_initialized(ctx.workspace_root):
        return GathererResult.unavailable(
            SOURCE,
            "Beads not initialized (.beads/ directory not found)",
            captured_at=captured_at,
        )

    try:
        duration_ms = parse_time_constraint(time_constraint)
    except InvalidConstraint as e:
        return GathererResult.failure(SOURCE, str(e), captured_at=captured_at)

    calls = [
        GathererCall(
            name="stats",
            cmd="bd",
            args=_bd_args(ctx, "stats"),
            policy=CallPolicy.REQUIRED,
            parse=parse_bd_stats,
        ),
        _issue_list_call(
            ctx, "in_progress", "list", "--status=in_progress", f"--limit={IN_PROGRESS_LIMIT}"
        ),
        _issue_list_call(ctx, "ready", "ready", f"--limit={READY_LIMIT}"),
        _issue_list_call(ctx, "blocked", "blocked"),
        _issue_list_call(ctx, "closed", "list", "--status=closed", f"--limit={CLOSED_LIMIT}"),
    ]
    outcomes = run_calls(ctx.runner, calls, cwd=ctx.cwd)

    # Stats should always work if beads is available
    fatal = first_required_failure(outcomes)
    if fatal is not None:
        return GathererResult.failure(
            SOURCE,
            fatal.error or "Failed to get beads stats",
            captured_at=captured_at,
        )

    recently_closed = filter_by_time(
        outcomes["closed"].value,
        duration_ms,
        now=captured_at,
        timestamp_of=_closed_timestamp,
    )
    logger.debug(
        "Closed issues within %s: %d of %d",
        time_constraint,
        len(recently_closed),
        len(outcomes["closed"].value),
    )

    return GathererResult.success(
        SOURCE,
        BeadsData(
            stats=outcomes["stats"].value,
            in_progress=outcomes["in_progress"].value,
            ready=outcomes["ready"].value,
            blocked=outcomes["blocked"].value,
            recently_closed=recently_closed,
        ),
        captured_at=captured_at,
    )
