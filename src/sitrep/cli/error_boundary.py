"""Clean error reporting for sitrep commands.

Gatherer problems are reported inside the JSON envelope. The only errors
that reach a command are ones raised before gathering starts, such as a
malformed [tool.sitrep] table or an unknown report source; those are
printed without a traceback.
"""

import functools
from collections.abc import Callable
from typing import Any, TypeVar

T = TypeVar("T", bound=Callable[..., Any])

import click


def cli_error_boundary(func: T) -> T:
    """Print `Error: <message>` to stderr and exit 1 on configuration errors.

    ValueError comes from config loading or source selection; PermissionError
    from reading an unreadable pyproject.toml. Anything else propagates with
    its traceback.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except (ValueError, PermissionError) as e:
            click.echo(f"Error: {e}", err=True)
            raise SystemExit(1) from None

    return wrapper  # type: ignore[return-value]
