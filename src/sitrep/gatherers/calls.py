"""Data-fetching calls with explicit fatal/tolerated classification.

Each gatherer declares its calls up front. A REQUIRED call's failure turns
the whole gatherer into an error envelope; a BEST_EFFORT call's failure is
replaced by the call's declared fallback (an empty list, zero, ...).

Independent calls run concurrently and are always joined in full: one
failure never cancels its siblings. Sequential fallback chains, where a
second call only runs because the first failed, are not modelled here;
the graphite gatherer handles its gt log -> gt state chain directly.
"""

import logging
from collections.abc import Callable, Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from sitrep.integrations.command.abc import CommandRunner

logger = logging.getLogger(__name__)

MAX_WORKERS = 8

# Keep error messages readable when a tool dumps a large unparseable payload
_MAX_OUTPUT_IN_ERROR = 200


class CallPolicy(Enum):
    """Whether a call's failure is fatal to its gatherer."""

    REQUIRED = "required"
    BEST_EFFORT = "best_effort"


@dataclass(frozen=True)
class GathererCall:
    """One subprocess call and how to interpret its output.

    Attributes:
        name: Key of the outcome in run_calls() results
        cmd: Executable to run
        args: Arguments to the executable
        policy: REQUIRED or BEST_EFFORT
        parse: Converts stdout into a value; any exception it raises marks the
            call as failed
        fallback: Produces the substitute value when a BEST_EFFORT call fails
    """

    name: str
    cmd: str
    args: tuple[str, ...]
    policy: CallPolicy
    parse: Callable[[str], Any]
    fallback: Callable[[], Any] | None = None

    def __post_init__(self) -> None:
        if self.policy is CallPolicy.BEST_EFFORT and self.fallback is None:
            raise ValueError(f"Best-effort call '{self.name}' needs a fallback")


@dataclass(frozen=True)
class CallOutcome:
    """Result of executing a GathererCall.

    For a failed BEST_EFFORT call, value holds the fallback and error the
    reason it was needed. For a failed REQUIRED call, value is None.
    """

    call: GathererCall
    success: bool
    value: Any
    error: str | None


def _truncate(text: str) -> str:
    if len(text) <= _MAX_OUTPUT_IN_ERROR:
        return text
    return text[:_MAX_OUTPUT_IN_ERROR] + "..."


def _failed(call: GathererCall, error: str) -> CallOutcome:
    value = call.fallback() if call.fallback is not None else None
    if call.policy is CallPolicy.BEST_EFFORT:
        logger.debug("Best-effort call %s failed, using fallback: %s", call.name, error)
    return CallOutcome(call=call, success=False, value=value, error=error)


def execute_call(runner: CommandRunner, call: GathererCall, *, cwd: Path | None) -> CallOutcome:
    """Run one call and parse its output. Never raises for tool failures."""
    result = runner.run(call.cmd, call.args, cwd=cwd)
    if not result.success:
        error = result.stderr.strip() or f"{call.cmd} exited with code {result.returncode}"
        return _failed(call, error)

    try:
        value = call.parse(result.stdout)
    except Exception as e:
        logger.debug("Unparseable output from %s: %s: %s", call.name, type(e).__name__, e)
        output = _truncate(result.stdout.strip())
        return _failed(call, f"Failed to parse {call.cmd} output: {output}")

    return CallOutcome(call=call, success=True, value=value, error=None)


def run_calls(
    runner: CommandRunner,
    calls: Sequence[GathererCall],
    *,
    cwd: Path | None,
) -> dict[str, CallOutcome]:
    """Execute independent calls concurrently and join all of them.

    Returns:
        Mapping of call name to outcome, in declaration order
    """
    names = [call.name for call in calls]
    if len(set(names)) != len(names):
        raise ValueError(f"Duplicate call names: {names}")
    if not calls:
        return {}

    max_workers = min(MAX_WORKERS, len(calls))
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [executor.submit(execute_call, runner, call, cwd=cwd) for call in calls]
        outcomes = [future.result() for future in futures]

    return {outcome.call.name: outcome for outcome in outcomes}


def first_required_failure(outcomes: Mapping[str, CallOutcome]) -> CallOutcome | None:
    """Return the first failed REQUIRED call in declaration order, if any.

    Gatherers check this before trusting any best-effort value so that a
    fatal failure is never masked by a successful secondary call.
    """
    for outcome in outcomes.values():
        if outcome.call.policy is CallPolicy.REQUIRED and not outcome.success:
            return outcome
    return None
