"""Time operations abstraction for testing.

This module provides an ABC for clock access so that time-window filtering
and envelope timestamps are deterministic in tests.
"""

from abc import ABC, abstractmethod
from datetime import datetime


class Time(ABC):
    """Abstract time operations for dependency injection."""

    @abstractmethod
    def now(self) -> datetime:
        """Get the current instant.

        Returns:
            Timezone-aware datetime in UTC
        """
        ...
