"""Tests for the github gatherer using FakeCommandRunner."""

import json

from sitrep.core.context import SitrepContext
from sitrep.gatherers.github import gather_github
from sitrep.integrations.command.fake import FakeCommandRunner, fail, ok
from sitrep.integrations.command.types import CommandResult
from sitrep.integrations.github.types import PR_LIST_FIELDS, RUN_LIST_FIELDS

GIT_DIR = ("git", "rev-parse", "--git-dir")
REPO_VIEW = ("gh", "repo", "view", "--json", "nameWithOwner")
PR_LIST = ("gh", "pr", "list", "--state", "open", "--json", PR_LIST_FIELDS, "--limit", "50")
RUN_LIST = ("gh", "run", "list", "--limit", "20", "--json", RUN_LIST_FIELDS)

PRS = [
    {
        "number": 1,
        "title": "Passing",
        "state": "OPEN",
        "isDraft": False,
        "author": {"login": "alice"},
        "updatedAt": "2024-01-15T10:00:00Z",
        "url": "https://github.com/octo/widgets/pull/1",
        "headRefName": "passing",
        "statusCheckRollup": [{"status": "COMPLETED", "conclusion": "SUCCESS"}],
        "reviewDecision": "APPROVED",
    },
    {
        "number": 2,
        "title": "No checks",
        "state": "OPEN",
        "isDraft": True,
        "author": {"login": "bob"},
        "updatedAt": "2024-01-14T10:00:00Z",
        "url": "https://github.com/octo/widgets/pull/2",
        "headRefName": "no-checks",
        "statusCheckRollup": [],
        "reviewDecision": None,
    },
]

RUNS = [
    {
        "name": "CI",
        "status": "completed",
        "conclusion": "success",
        "createdAt": "2024-01-15T11:00:00Z",
        "url": "r1",
    },
    {
        "name": "CI",
        "status": "completed",
        "conclusion": "failure",
        "createdAt": "2024-01-10T11:00:00Z",
        "url": "r2",
    },
]


def _responses(**overrides: CommandResult) -> dict[tuple[str, ...], CommandResult]:
    keys = {"git_dir": GIT_DIR, "repo": REPO_VIEW, "prs": PR_LIST, "runs": RUN_LIST}
    responses = {
        GIT_DIR: ok(".git\n"),
        REPO_VIEW: ok('{"nameWithOwner": "octo/widgets"}'),
        PR_LIST: ok(json.dumps(PRS)),
        RUN_LIST: ok(json.dumps(RUNS)),
    }
    for name, result in overrides.items():
        responses[keys[name]] = result
    return responses


def test_unavailable_without_gh() -> None:
    runner = FakeCommandRunner(responses=_responses())

    result = gather_github(SitrepContext.for_test(runner=runner), time_constraint="24h")

    assert result.status == "unavailable"
    assert result.reason == "gh CLI not installed"


def test_unavailable_outside_git_repository() -> None:
    runner = FakeCommandRunner(responses=_responses(git_dir=fail("fatal")), available_tools={"gh"})

    result = gather_github(SitrepContext.for_test(runner=runner), time_constraint="24h")

    assert result.status == "unavailable"
    assert result.reason == "Not in a git repository"


def test_invalid_time_constraint_is_error() -> None:
    runner = FakeCommandRunner(responses=_responses(), available_tools={"gh"})

    result = gather_github(SitrepContext.for_test(runner=runner), time_constraint="0d")

    assert result.status == "error"


def test_success_payload() -> None:
    runner = FakeCommandRunner(responses=_responses(), available_tools={"gh"})

    result = gather_github(SitrepContext.for_test(runner=runner), time_constraint="24h")

    assert result.status == "success"
    data = result.to_dict()["data"]
    assert data["repo"] == "octo/widgets"
    assert [pr["number"] for pr in data["openPRs"]] == [1, 2]
    assert data["openPRs"][0]["checks"] == "SUCCESS"
    assert data["openPRs"][0]["reviewDecision"] == "APPROVED"
    assert "checks" not in data["openPRs"][1]
    assert "reviewDecision" not in data["openPRs"][1]
    assert [run["url"] for run in data["recentRuns"]] == ["r1"]


def test_repo_view_failure_is_error() -> None:
    runner = FakeCommandRunner(
        responses=_responses(repo=fail("no git remotes found\n")),
        available_tools={"gh"},
    )

    result = gather_github(SitrepContext.for_test(runner=runner), time_constraint="24h")

    assert result.status == "error"
    assert result.error == "no git remotes found"


def test_pr_list_failure_is_error_even_when_runs_succeed() -> None:
    runner = FakeCommandRunner(
        responses=_responses(prs=fail("HTTP 401: Bad credentials")),
        available_tools={"gh"},
    )

    result = gather_github(SitrepContext.for_test(runner=runner), time_constraint="24h")

    assert result.status == "error"
    assert result.error == "HTTP 401: Bad credentials"
    assert RUN_LIST in runner.calls


def test_run_list_failure_falls_back_to_empty() -> None:
    runner = FakeCommandRunner(
        responses=_responses(runs=fail("no workflows")),
        available_tools={"gh"},
    )

    result = gather_github(SitrepContext.for_test(runner=runner), time_constraint="24h")

    assert result.status == "success"
    assert result.data is not None
    assert result.data.recent_runs == []
    assert len(result.data.open_prs) == 2
