"""Type definitions for beads (bd) issue tracker data.

Keys follow `bd --json` output (snake_case) so that payloads round-trip to
consumers unchanged.
"""

import json
from dataclasses import dataclass, field
from typing import Any


def _non_negative_int(value: object, default: int = 0) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return max(value, 0)
    if isinstance(value, float):
        return max(int(value), 0)
    return default


@dataclass(frozen=True)
class BeadsIssue:
    """Issue record from `bd list|ready|blocked --json`."""

    id: str
    title: str
    status: str
    priority: int
    issue_type: str
    created_at: str
    updated_at: str
    labels: list[str] = field(default_factory=list)
    description: str | None = None
    assignee: str | None = None
    closed_at: str | None = None
    dependency_count: int = 0
    dependent_count: int = 0

    @staticmethod
    def from_dict(raw: object) -> "BeadsIssue":
        """Build an issue from one decoded JSON object.

        Raises:
            ValueError: If raw is not an object or has no string id
        """
        if not isinstance(raw, dict):
            raise ValueError(f"Expected issue object, got {type(raw).__name__}")
        issue_id = raw.get("id")
        if not isinstance(issue_id, str) or not issue_id:
            raise ValueError(f"Issue without id: {raw!r}")

        labels_raw = raw.get("labels")
        labels = (
            [label for label in labels_raw if isinstance(label, str)]
            if isinstance(labels_raw, list)
            else []
        )

        priority = _non_negative_int(raw.get("priority"), default=2)

        return BeadsIssue(
            id=issue_id,
            title=str(raw.get("title") or ""),
            status=str(raw.get("status") or "open"),
            priority=min(priority, 4),
            issue_type=str(raw.get("issue_type") or "task"),
            created_at=str(raw.get("created_at") or ""),
            updated_at=str(raw.get("updated_at") or ""),
            labels=labels,
            description=raw.get("description") or None,
            assignee=raw.get("assignee") or None,
            closed_at=raw.get("closed_at") or None,
            dependency_count=_non_negative_int(raw.get("dependency_count")),
            dependent_count=_non_negative_int(raw.get("dependent_count")),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
        }
        if self.description is not None:
            result["description"] = self.description
        result["status"] = self.status
        result["issue_type"] = self.issue_type
        result["priority"] = self.priority
        if self.assignee is not None:
            result["assignee"] = self.assignee
        result["labels"] = list(self.labels)
        result["created_at"] = self.created_at
        result["updated_at"] = self.updated_at
        if self.closed_at is not None:
            result["closed_at"] = self.closed_at
        result["dependency_count"] = self.dependency_count
        result["dependent_count"] = self.dependent_count
        return result


@dataclass(frozen=True)
class BeadsStats:
    """Aggregate counts from `bd stats --json`."""

    total: int
    open: int
    in_progress: int
    blocked: int
    closed: int
    ready: int
    average_lead_time: float | None = None

    @staticmethod
    def from_dict(raw: object) -> "BeadsStats":
        """Build stats from decoded JSON.

        Accepts both the short keys (``open``) and bd's ``*_issues`` spelling
        (``open_issues``).

        Raises:
            ValueError: If raw is not an object
        """
        if not isinstance(raw, dict):
            raise ValueError(f"Expected stats object, got {type(raw).__name__}")

        def count(key: str) -> int:
            value = raw.get(key)
            if value is None:
                value = raw.get(f"{key}_issues")
            return _non_negative_int(value)

        lead_time = raw.get("average_lead_time")
        if lead_time is None:
            lead_time = raw.get("average_lead_time_hours")

        return BeadsStats(
            total=count("total"),
            open=count("open"),
            in_progress=count("in_progress"),
            blocked=count("blocked"),
            closed=count("closed"),
            ready=count("ready"),
            average_lead_time=(
                float(lead_time)
                if isinstance(lead_time, int | float) and not isinstance(lead_time, bool)
                else None
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "total": self.total,
            "open": self.open,
            "in_progress": self.in_progress,
            "blocked": self.blocked,
            "closed": self.closed,
            "ready": self.ready,
        }
        if self.average_lead_time is not None:
            result["average_lead_time"] = self.average_lead_time
        return result


@dataclass(frozen=True)
class BeadsData:
    """Payload of a successful beads gatherer envelope."""

    stats: BeadsStats
    in_progress: list[BeadsIssue]
    ready: list[BeadsIssue]
    blocked: list[BeadsIssue]
    recently_closed: list[BeadsIssue]

    def to_dict(self) -> dict[str, Any]:
        return {
            "stats": self.stats.to_dict(),
            "inProgress": [issue.to_dict() for issue in self.in_progress],
            "ready": [issue.to_dict() for issue in self.ready],
            "blocked": [issue.to_dict() for issue in self.blocked],
            "recentlyClosed": [issue.to_dict() for issue in self.recently_closed],
        }


def parse_bd_stats(stdout: str) -> BeadsStats:
    """Parse `bd stats --json` output.

    Raises:
        ValueError: If the output is not a JSON object
    """
    return BeadsStats.from_dict(json.loads(stdout))


def parse_bd_issue_list(stdout: str) -> list[BeadsIssue]:
    """Parse `bd list|ready|blocked --json` output.

    bd prints ``null`` or nothing for an empty result.

    Raises:
        ValueError: If the output is not a JSON array of issue objects
    """
    if not stdout.strip():
        return []
    data = json.loads(stdout)
    if data is None:
        return []
    if not isinstance(data, list):
        raise ValueError(f"Expected issue list, got {type(data).__name__}")
    return [BeadsIssue.from_dict(item) for item in data]
