"""GitHub gatherer.

Collects the repository name, open pull requests with a summarized check
status, and recent workflow runs via the `gh` CLI.
"""

import logging

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
from sitrep.integrations.github.types import (
    PR_LIST_FIELDS,
    RUN_LIST_FIELDS,
    GitHubData,
    GitHubWorkflowRun,
    parse_pr_list,
    parse_repo_name,
    parse_run_list,
)

logger = logging.getLogger(__name__)

SOURCE = "github"

PR_LIMIT = 50
RUN_LIMIT = 20


def _run_created_at(run: GitHubWorkflowRun) -> str:
    return run.created_at


@gatherer_boundary(SOURCE)
def gather_github(ctx: SitrepContext, *, time_constraint: str) -> GathererResult[GitHubData]:
    """Gather GitHub repository activity.

    Repo name and open PRs are required; workflow runs are best-effort since
    repositories without Actions report an error from `gh run list`.
    """
    captured_at = ctx.time.now()

    if not ctx.runner.is_available("gh"):
        return GathererResult.unavailable(SOURCE, "gh CLI not installed", captured_at=captured_at)

    git_dir = ctx.runner.run("git", ("rev-parse", "--git-dir"), cwd=ctx.workspace_root)
    if not git_dir.success:
        return GathererResult.unavailable(
            SOURCE, "Not in a git repository", captured_at=captured_at
        )

    try:
        duration_ms = parse_time_constraint(time_constraint)
    except InvalidConstraint as e:
        return GathererResult.failure(SOURCE, str(e), captured_at=captured_at)

    calls = [
        GathererCall(
            name="repo",
            cmd="gh",
            args=("repo", "view", "--json", "nameWithOwner"),
            policy=CallPolicy.REQUIRED,
            parse=parse_repo_name,
        ),
        GathererCall(
            name="prs",
            cmd="gh",
            args=(
                "pr", "list", "--state", "open",
                "--json", PR_LIST_FIELDS,
                "--limit", str(PR_LIMIT),
            ),
            policy=CallPolicy.REQUIRED,
            parse=parse_pr_list,
        ),
        GathererCall(
            name="runs",
            cmd="gh",
            args=("run", "list", "--limit", str(RUN_LIMIT), "--json", RUN_LIST_FIELDS),
            policy=CallPolicy.BEST_EFFORT,
            parse=parse_run_list,
            fallback=list,
        ),
    ]
    outcomes = run_calls(ctx.runner, calls, cwd=ctx.workspace_root)

    fatal = first_required_failure(outcomes)
    if fatal is not None:
        return GathererResult.failure(
            SOURCE,
            fatal.error or f"Failed to run gh {fatal.call.args[0]}",
            captured_at=captured_at,
        )

    recent_runs = filter_by_time(
        outcomes["runs"].value,
        duration_ms,
        now=captured_at,
        timestamp_of=_run_created_at,
    )

    return GathererResult.success(
        SOURCE,
        GitHubData(
            repo=outcomes["repo"].value,
            open_prs=outcomes["prs"].value,
            recent_runs=recent_runs,
        ),
        captured_at=captured_at,
    )
