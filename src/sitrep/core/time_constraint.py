"""Time constraints ("24h", "7d", "2w") and client-side time-window filtering.

External tools accept relative dates in different forms (or not at all), so
a constraint is parsed once into milliseconds and then either converted into
a tool-specific "since" string or applied after the fact with
filter_by_time().
"""

import logging
import re
from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

MS_PER_SECOND = 1000
MS_PER_MINUTE = 60 * MS_PER_SECOND
MS_PER_HOUR = 60 * MS_PER_MINUTE
MS_PER_DAY = 24 * MS_PER_HOUR
MS_PER_WEEK = 7 * MS_PER_DAY

_UNIT_MS = {
    "h": MS_PER_HOUR,
    "d": MS_PER_DAY,
    "w": MS_PER_WEEK,
}

_CONSTRAINT_PATTERN = re.compile(r"([0-9]+)([hdw])")

# Largest unit first so "2w" renders as "2 weeks ago" rather than "14 days ago"
_GIT_SINCE_UNITS = [
    ("weeks", MS_PER_WEEK),
    ("days", MS_PER_DAY),
    ("hours", MS_PER_HOUR),
    ("minutes", MS_PER_MINUTE),
    ("seconds", MS_PER_SECOND),
]

# Python's fromisoformat() accepts at most 6 fractional digits; bd and gh
# can emit nanoseconds.
_FRACTION_PATTERN = re.compile(r"(\.\d{6})\d+")


class InvalidConstraint(ValueError):
    """Time constraint does not match <positive integer><h|d|w>."""

    def __init__(self, constraint: str) -> None:
        self.constraint = constraint
        super().__init__(
            f'Invalid time constraint: "{constraint}". Expected format like 24h, 7d, or 2w'
        )


def parse_time_constraint(constraint: str) -> int:
    """Parse a time constraint into a duration in milliseconds.

    Args:
        constraint: Magnitude followed by a unit letter: h (hours), d (days)
            or w (weeks). The unit is case-sensitive.

    Returns:
        Duration in milliseconds

    Raises:
        InvalidConstraint: If the string does not match the grammar or the
            magnitude is zero
    """
    match = _CONSTRAINT_PATTERN.fullmatch(constraint)
    if match is None:
        raise InvalidConstraint(constraint)

    magnitude = int(match.group(1))
    if magnitude <= 0:
        raise InvalidConstraint(constraint)

    return magnitude * _UNIT_MS[match.group(2)]


def to_git_since(duration_ms: int) -> str:
    """Convert a duration into a git relative date for --since.

    Uses the largest unit that divides the duration evenly.

    Example:
        >>> to_git_since(86_400_000)
        '1 day ago'
        >>> to_git_since(1_209_600_000)
        '2 weeks ago'
    """
    for unit_name, unit_ms in _GIT_SINCE_UNITS:
        if duration_ms % unit_ms == 0:
            count = duration_ms // unit_ms
            label = unit_name[:-1] if count == 1 else unit_name
            return f"{count} {label} ago"
    return f"{duration_ms // MS_PER_SECOND} seconds ago"


def parse_timestamp(value: object) -> datetime | None:
    """Parse an ISO-8601 timestamp into an aware UTC datetime.

    Returns None for anything that is not a parseable string.
    """
    if not isinstance(value, str) or not value.strip():
        return None

    text = _FRACTION_PATTERN.sub(r"\1", value.strip())
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def filter_by_time(
    records: Iterable[T],
    duration_ms: int,
    *,
    now: datetime,
    timestamp_of: Callable[[T], str | None],
) -> list[T]:
    """Keep records whose timestamp lies within duration_ms of now.

    Args:
        records: Records to filter; order is preserved
        duration_ms: Maximum record age in milliseconds (inclusive)
        now: Reference instant
        timestamp_of: Extracts the ISO-8601 timestamp from a record

    Returns:
        Records with age <= duration_ms. Records without a parseable
        timestamp are dropped.
    """
    kept: list[T] = []
    for record in records:
        timestamp = parse_timestamp(timestamp_of(record))
        if timestamp is None:
            logger.debug("Dropping record without parseable timestamp: %r", record)
            continue
        age_ms = (now - timestamp).total_seconds() * MS_PER_SECOND
        if age_ms <= duration_ms:
            kept.append(record)
    return kept
