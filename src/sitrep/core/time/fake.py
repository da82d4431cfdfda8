"""Fake Time implementation for testing."""

from datetime import UTC, datetime

from sitrep.core.time.abc import Time


class FakeTime(Time):
    """Fake clock frozen at a fixed instant.

    This class has NO public setup methods. The instant is provided via
    constructor and never advances.
    """

    def __init__(self, now: datetime | None = None) -> None:
        """Create FakeTime.

        Args:
            now: Instant returned by now(). Naive values are taken as UTC.
                Defaults to 2024-01-15T12:00:00Z.
        """
        if now is None:
            now = datetime(2024, 1, 15, 12, 0, 0, tzinfo=UTC)
        elif now.tzinfo is None:
            now = now.replace(tzinfo=UTC)
        self._now = now

    def now(self) -> datetime:
        return self._now
