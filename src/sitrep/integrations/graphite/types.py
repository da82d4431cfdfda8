"""Type definitions for Graphite stack data."""

from dataclasses import dataclass, field
from typing import Any, Literal

PrStatus = Literal["draft", "open", "ready", "merged", "closed"]


@dataclass(frozen=True)
class GraphiteBranch:
    """A gt-tracked branch.

    parent and children hold branch names, not objects; the branch set is
    kept in a flat mapping keyed by name.
    """

    name: str
    parent: str | None = None
    children: list[str] = field(default_factory=list)
    is_current: bool = False
    needs_restack: bool = False
    needs_submit: bool = False
    pr_number: int | None = None
    pr_status: PrStatus | None = None
    pr_url: str | None = None
    commit_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"name": self.name}
        if self.pr_number is not None:
            result["prNumber"] = self.pr_number
        if self.pr_status is not None:
            result["prStatus"] = self.pr_status
        if self.pr_url is not None:
            result["prUrl"] = self.pr_url
        if self.parent is not None:
            result["parent"] = self.parent
        result["children"] = list(self.children)
        result["isCurrent"] = self.is_current
        result["needsRestack"] = self.needs_restack
        result["needsSubmit"] = self.needs_submit
        result["commitCount"] = self.commit_count
        return result


@dataclass(frozen=True)
class GraphiteState:
    """Reconstructed branch forest from one gt invocation."""

    current_branch: str
    trunk: str
    branches: list[GraphiteBranch]
    stacks: list[list[str]]


@dataclass(frozen=True)
class GraphiteData:
    """Payload of a successful graphite gatherer envelope."""

    current_branch: str
    trunk: str
    branches: list[GraphiteBranch]
    stacks: list[list[str]]
    recent_commits: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "currentBranch": self.current_branch,
            "trunk": self.trunk,
            "branches": [branch.to_dict() for branch in self.branches],
            "stacks": [list(stack) for stack in self.stacks],
            "recentCommits": self.recent_commits,
        }
