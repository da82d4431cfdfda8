"""Error boundary for gatherer entry points.

Gatherers report every failure through their envelope. This decorator is
the last line: anything a collaborator raises unexpectedly becomes an error
envelope instead of propagating to the caller.
"""

import functools
import logging
from collections.abc import Callable
from typing import Any, ParamSpec

from sitrep.core.context import SitrepContext
from sitrep.core.envelope import GathererResult

P = ParamSpec("P")

logger = logging.getLogger(__name__)


def gatherer_boundary(
    source: str,
) -> Callable[
    [Callable[P, GathererResult[Any]]],
    Callable[P, GathererResult[Any]],
]:
    """Convert unexpected exceptions from a gatherer into an error envelope.

    The decorated function must take the SitrepContext as its first
    positional argument.

    Example:
        @gatherer_boundary("beads")
        def gather_beads(ctx: SitrepContext, *, time_constraint: str) -> GathererResult[...]:
            ...
    """

    def decorator(
        func: Callable[P, GathererResult[Any]],
    ) -> Callable[P, GathererResult[Any]]:
        @functools.wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> GathererResult[Any]:
            ctx = args[0]
            assert isinstance(ctx, SitrepContext)
            try:
                return func(*args, **kwargs)
            except Exception as e:
                logger.debug("Gatherer %s raised unexpectedly", source, exc_info=True)
                return GathererResult.failure(
                    source,
                    f"Unexpected error: {type(e).__name__}: {e}",
                    captured_at=ctx.time.now(),
                )

        return wrapper

    return decorator
