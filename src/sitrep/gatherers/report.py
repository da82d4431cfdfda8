"""Multi-source situation report.

Runs several gatherers concurrently and bundles their envelopes into one
document. Each gatherer keeps its own status; one source being unavailable
or failing never affects the others.
"""

import logging
from collections.abc import Callable, Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sitrep.core.config import SOURCE_NAMES
from sitrep.core.context import SitrepContext
from sitrep.core.envelope import GathererResult, format_timestamp
from sitrep.gatherers.beads import gather_beads
from sitrep.gatherers.github import gather_github
from sitrep.gatherers.graphite import gather_graphite

logger = logging.getLogger(__name__)

Gatherer = Callable[..., GathererResult[Any]]

GATHERERS: Mapping[str, Gatherer] = {
    "beads": gather_beads,
    "github": gather_github,
    "graphite": gather_graphite,
}


@dataclass(frozen=True)
class SitrepResult:
    """Combined report across sources."""

    time_constraint: str
    timestamp: datetime
    sources: list[str]
    results: dict[str, GathererResult[Any]]

    def to_dict(self) -> dict[str, Any]:
        return {
            "timeConstraint": self.time_constraint,
            "timestamp": format_timestamp(self.timestamp),
            "sources": list(self.sources),
            "results": {name: result.to_dict() for name, result in self.results.items()},
        }


def gather_report(
    ctx: SitrepContext,
    *,
    time_constraint: str,
    sources: Sequence[str] | None = None,
) -> SitrepResult:
    """Run the selected gatherers concurrently.

    Args:
        ctx: Shared context for every gatherer
        time_constraint: Passed unchanged to each gatherer
        sources: Source names to gather; None means the configured sources

    Raises:
        ValueError: If a source name is unknown
    """
    selected = list(dict.fromkeys(sources if sources is not None else ctx.config.sources))
    unknown = [name for name in selected if name not in GATHERERS]
    if unknown:
        raise ValueError(
            f"Unknown source(s): {', '.join(unknown)}. Valid sources: {', '.join(SOURCE_NAMES)}"
        )

    captured_at = ctx.time.now()
    results: dict[str, GathererResult[Any]] = {}
    if selected:
        with ThreadPoolExecutor(max_workers=len(selected)) as executor:
            futures = {
                name: executor.submit(GATHERERS[name], ctx, time_constraint=time_constraint)
                for name in selected
            }
            results = {name: future.result() for name, future in futures.items()}

    logger.debug(
        "Report statuses: %s",
        ", ".join(f"{name}={result.status}" for name, result in results.items()),
    )
    return SitrepResult(
        time_constraint=time_constraint,
        timestamp=captured_at,
        sources=selected,
        results=results,
    )
