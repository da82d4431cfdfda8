"""Type definitions for GitHub (gh) data."""

import json
from dataclasses import dataclass
from typing import Any, Literal

ChecksState = Literal["SUCCESS", "FAILURE", "PENDING"]

# GitHub check conclusions that should be treated as passing
PASSING_CONCLUSIONS = frozenset({"SUCCESS", "SKIPPED", "NEUTRAL"})

PR_LIST_FIELDS = (
    "number,title,state,isDraft,author,updatedAt,url,headRefName,statusCheckRollup,reviewDecision"
)
RUN_LIST_FIELDS = "name,status,conclusion,createdAt,url"


def summarize_checks(check_rollup: object) -> ChecksState | None:
    """Summarize a statusCheckRollup list into one state.

    Returns:
        None if no checks configured
        "FAILURE" if any completed check did not pass
        "PENDING" if no check failed but some are not completed
        "SUCCESS" if all checks passed (SUCCESS, SKIPPED, or NEUTRAL)
    """
    if not isinstance(check_rollup, list) or not check_rollup:
        return None

    pending = False
    for check in check_rollup:
        if not isinstance(check, dict):
            continue
        # CheckRun entries carry status/conclusion; StatusContext entries carry state
        state = check.get("state")
        if state is not None:
            if state in {"PENDING", "EXPECTED"}:
                pending = True
            elif state != "SUCCESS":
                return "FAILURE"
            continue

        if check.get("status") != "COMPLETED":
            pending = True
            continue
        if check.get("conclusion") not in PASSING_CONCLUSIONS:
            return "FAILURE"

    return "PENDING" if pending else "SUCCESS"


@dataclass(frozen=True)
class GitHubPR:
    """Open pull request from `gh pr list --json`."""

    number: int
    title: str
    state: str
    is_draft: bool
    author: str | None
    updated_at: str
    url: str
    head_ref_name: str
    checks: ChecksState | None
    review_decision: str | None

    @staticmethod
    def from_dict(raw: object) -> "GitHubPR":
        if not isinstance(raw, dict):
            raise ValueError(f"Expected PR object, got {type(raw).__name__}")
        number = raw.get("number")
        if not isinstance(number, int) or isinstance(number, bool):
            raise ValueError(f"PR without number: {raw!r}")

        author = raw.get("author")
        login = author.get("login") if isinstance(author, dict) else None

        return GitHubPR(
            number=number,
            title=str(raw.get("title") or ""),
            state=str(raw.get("state") or "OPEN"),
            is_draft=bool(raw.get("isDraft")),
            author=login if isinstance(login, str) else None,
            updated_at=str(raw.get("updatedAt") or ""),
            url=str(raw.get("url") or ""),
            head_ref_name=str(raw.get("headRefName") or ""),
            checks=summarize_checks(raw.get("statusCheckRollup")),
            review_decision=raw.get("reviewDecision") or None,
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "number": self.number,
            "title": self.title,
            "state": self.state,
            "isDraft": self.is_draft,
        }
        if self.author is not None:
            result["author"] = {"login": self.author}
        result["updatedAt"] = self.updated_at
        result["url"] = self.url
        result["headRefName"] = self.head_ref_name
        if self.checks is not None:
            result["checks"] = self.checks
        if self.review_decision is not None:
            result["reviewDecision"] = self.review_decision
        return result


@dataclass(frozen=True)
class GitHubWorkflowRun:
    """Workflow run from `gh run list --json`."""

    name: str
    status: str
    conclusion: str | None
    created_at: str
    url: str

    @staticmethod
    def from_dict(raw: object) -> "GitHubWorkflowRun":
        if not isinstance(raw, dict):
            raise ValueError(f"Expected run object, got {type(raw).__name__}")
        return GitHubWorkflowRun(
            name=str(raw.get("name") or ""),
            status=str(raw.get("status") or ""),
            conclusion=raw.get("conclusion") or None,
            created_at=str(raw.get("createdAt") or ""),
            url=str(raw.get("url") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "status": self.status,
            "conclusion": self.conclusion,
            "createdAt": self.created_at,
            "url": self.url,
        }


@dataclass(frozen=True)
class GitHubData:
    """Payload of a successful github gatherer envelope."""

    repo: str
    open_prs: list[GitHubPR]
    recent_runs: list[GitHubWorkflowRun]

    def to_dict(self) -> dict[str, Any]:
        return {
            "repo": self.repo,
            "openPRs": [pr.to_dict() for pr in self.open_prs],
            "recentRuns": [run.to_dict() for run in self.recent_runs],
        }


def parse_repo_name(stdout: str) -> str:
    """Parse `gh repo view --json nameWithOwner` output.

    Raises:
        ValueError: If nameWithOwner is missing
    """
    data = json.loads(stdout)
    name = data.get("nameWithOwner") if isinstance(data, dict) else None
    if not isinstance(name, str) or not name:
        raise ValueError("gh repo view returned no nameWithOwner")
    return name


def _parse_list(stdout: str) -> list[object]:
    if not stdout.strip():
        return []
    data = json.loads(stdout)
    if not isinstance(data, list):
        raise ValueError(f"Expected JSON array, got {type(data).__name__}")
    return data


def parse_pr_list(stdout: str) -> list[GitHubPR]:
    """Parse `gh pr list --json` output."""
    return [GitHubPR.from_dict(item) for item in _parse_list(stdout)]


def parse_run_list(stdout: str) -> list[GitHubWorkflowRun]:
    """Parse `gh run list --json` output."""
    return [GitHubWorkflowRun.from_dict(item) for item in _parse_list(stdout)]
