"""Uniform result envelope returned by every gatherer.

Output shape (JSON):

    Success:
    {"source": "graphite", "status": "success", "data": {...}, "timestamp": "..."}

    Unavailable:
    {"source": "beads", "status": "unavailable", "reason": "...", "timestamp": "..."}

    Error:
    {"source": "github", "status": "error", "error": "...", "timestamp": "..."}

The envelope is the sole contract consumers may depend on. "unavailable" and
"error" are data, not process failures.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Generic, Literal, Protocol, TypeVar

GathererStatus = Literal["success", "unavailable", "error"]


class JsonPayload(Protocol):
    """Payload types serialize themselves to JSON-compatible dicts."""

    def to_dict(self) -> dict[str, Any]: ...


T = TypeVar("T", bound=JsonPayload)


def format_timestamp(instant: datetime) -> str:
    """Render an instant as ISO-8601 UTC with millisecond precision and a Z suffix."""
    utc = instant.astimezone(UTC)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class GathererResult(Generic[T]):
    """Tagged three-state gatherer outcome.

    Exactly one of data/reason/error is populated, matching status. Use the
    success()/unavailable()/failure() constructors rather than building
    instances directly.
    """

    source: str
    status: GathererStatus
    timestamp: str
    data: T | None = None
    reason: str | None = None
    error: str | None = None

    def __post_init__(self) -> None:
        populated = {
            name
            for name, value in (("data", self.data), ("reason", self.reason), ("error", self.error))
            if value is not None
        }
        expected = {"success": {"data"}, "unavailable": {"reason"}, "error": {"error"}}
        if self.status not in expected:
            raise ValueError(f"Unknown gatherer status: {self.status!r}")
        if populated != expected[self.status]:
            raise ValueError(
                f"{self.status} envelope must carry exactly {sorted(expected[self.status])}, "
                f"got {sorted(populated)}"
            )

    @staticmethod
    def success(source: str, data: T, *, captured_at: datetime) -> "GathererResult[T]":
        return GathererResult(
            source=source,
            status="success",
            timestamp=format_timestamp(captured_at),
            data=data,
        )

    @staticmethod
    def unavailable(source: str, reason: str, *, captured_at: datetime) -> "GathererResult[T]":
        return GathererResult(
            source=source,
            status="unavailable",
            timestamp=format_timestamp(captured_at),
            reason=reason,
        )

    @staticmethod
    def failure(source: str, error: str, *, captured_at: datetime) -> "GathererResult[T]":
        return GathererResult(
            source=source,
            status="error",
            timestamp=format_timestamp(captured_at),
            error=error,
        )

    @property
    def is_success(self) -> bool:
        return self.status == "success"

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the JSON envelope, omitting absent fields."""
        result: dict[str, Any] = {"source": self.source, "status": self.status}
        if self.data is not None:
            result["data"] = self.data.to_dict()
        if self.error is not None:
            result["error"] = self.error
        if self.reason is not None:
            result["reason"] = self.reason
        result["timestamp"] = self.timestamp
        return result
