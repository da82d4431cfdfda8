"""Graphite gatherer.

Reconstructs the stacked-branch forest from `gt log --json`, falling back
to the plain-text `gt state` output on older gt versions. Also counts
commits made within the time window on the current checkout.
"""

import json
import logging

from sitrep.core.context import SitrepContext
from sitrep.core.envelope import GathererResult
from sitrep.core.time_constraint import InvalidConstraint, parse_time_constraint, to_git_since
from sitrep.gatherers.boundary import gatherer_boundary
from sitrep.gatherers.calls import CallPolicy, GathererCall, execute_call
from sitrep.integrations.graphite.parsing import parse_gt_log_json, parse_gt_state_text
from sitrep.integrations.graphite.types import GraphiteData, GraphiteState

logger = logging.getLogger(__name__)

SOURCE = "graphite"

_REMOTE_HEAD_PREFIX = "refs/remotes/origin/"


def resolve_trunk(ctx: SitrepContext) -> str:
    """Get the trunk branch name for the workspace repository.

    Uses the configured trunk_branch when set. Otherwise detects trunk by
    checking git's remote HEAD reference, then falls back to the first of
    'main' or 'master' that exists locally, then to 'main'.
    """
    if ctx.config.trunk_branch is not None:
        return ctx.config.trunk_branch

    cwd = ctx.workspace_root

    # Parse "refs/remotes/origin/master" -> "master"
    result = ctx.runner.run("git", ("symbolic-ref", _REMOTE_HEAD_PREFIX + "HEAD"), cwd=cwd)
    if result.success:
        ref = result.stdout.strip()
        if ref.startswith(_REMOTE_HEAD_PREFIX) and len(ref) > len(_REMOTE_HEAD_PREFIX):
            return ref[len(_REMOTE_HEAD_PREFIX) :]

    for candidate in ("main", "master"):
        result = ctx.runner.run("git", ("show-ref", "--verify", f"refs/heads/{candidate}"), cwd=cwd)
        if result.success:
            return candidate

    return "main"


def load_gt_state(ctx: SitrepContext, *, trunk: str) -> GraphiteState | None:
    """Run gt and reconstruct branches and stacks.

    This is a fallback chain rather than a set of independent calls, so it
    sits outside the CallPolicy framework:
    - `gt log --json` succeeds: its JSON drives structured mode. Undecodable
      JSON is fatal; `gt state` is not tried.
    - `gt log --json` fails (older gt without --json): `gt state` text drives
      text mode.
    - both fail: fatal.

    Returns:
        GraphiteState, or None when the chain ends in a fatal failure
    """
    cwd = ctx.workspace_root

    log_result = ctx.runner.run("gt", ("log", "--json"), cwd=cwd)
    if log_result.success:
        try:
            data = json.loads(log_result.stdout)
        except json.JSONDecodeError as e:
            logger.debug("gt log --json returned invalid JSON: %s", e)
            return None
        return parse_gt_log_json(data, trunk=trunk)

    # Older gt versions have no --json; fall back to the text view
    logger.debug("gt log --json failed (%s), trying gt state", log_result.stderr.strip())
    state_result = ctx.runner.run("gt", ("state",), cwd=cwd)
    if not state_result.success:
        logger.debug("gt state failed: %s", state_result.stderr.strip())
        return None
    return parse_gt_state_text(state_result.stdout, trunk=trunk)


def _count_lines(stdout: str) -> int:
    return sum(1 for line in stdout.splitlines() if line.strip())


@gatherer_boundary(SOURCE)
def gather_graphite(ctx: SitrepContext, *, time_constraint: str) -> GathererResult[GraphiteData]:
    """Gather Graphite stack data for the workspace repository."""
    captured_at = ctx.time.now()

    if not ctx.runner.is_available("gt"):
        return GathererResult.unavailable(SOURCE, "gt CLI not installed", captured_at=captured_at)

    git_dir = ctx.runner.run("git", ("rev-parse", "--git-dir"), cwd=ctx.workspace_root)
    if not git_dir.success:
        return GathererResult.unavailable(
            SOURCE, "Not in a git repository", captured_at=captured_at
        )

    try:
        duration_ms = parse_time_constraint(time_constraint)
    except InvalidConstraint as e:
        return GathererResult.failure(SOURCE, str(e), captured_at=captured_at)

    trunk = resolve_trunk(ctx)
    state = load_gt_state(ctx, trunk=trunk)
    if state is None:
        return GathererResult.failure(SOURCE, "Failed to parse gt output", captured_at=captured_at)

    commits = execute_call(
        ctx.runner,
        GathererCall(
            name="recent_commits",
            cmd="git",
            args=("log", f"--since={to_git_since(duration_ms)}", "--oneline"),
            policy=CallPolicy.BEST_EFFORT,
            parse=_count_lines,
            fallback=lambda: 0,
        ),
        cwd=ctx.workspace_root,
    )

    return GathererResult.success(
        SOURCE,
        GraphiteData(
            current_branch=state.current_branch,
            trunk=state.trunk,
            branches=state.branches,
            stacks=state.stacks,
            recent_commits=commits.value,
        ),
        captured_at=captured_at,
    )
