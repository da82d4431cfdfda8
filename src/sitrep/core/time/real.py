"""Production clock."""

from datetime import UTC, datetime

from sitrep.core.time.abc import Time


class RealTime(Time):
    """Production implementation using datetime.now(UTC)."""

    def now(self) -> datetime:
        return datetime.now(UTC)
