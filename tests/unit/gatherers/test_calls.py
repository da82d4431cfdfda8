"""Tests for call policies and concurrent call execution."""

from pathlib import Path

import pytest

from sitrep.gatherers.calls import (
    CallPolicy,
    GathererCall,
    execute_call,
    first_required_failure,
    run_calls,
)
from sitrep.integrations.command.fake import FakeCommandRunner, fail, ok


def _parse_int(stdout: str) -> int:
    return int(stdout.strip())


def _call(name: str, policy: CallPolicy = CallPolicy.REQUIRED) -> GathererCall:
    return GathererCall(
        name=name,
        cmd="tool",
        args=(name,),
        policy=policy,
        parse=_parse_int,
        fallback=(lambda: -1) if policy is CallPolicy.BEST_EFFORT else None,
    )


def test_best_effort_call_requires_fallback() -> None:
    with pytest.raises(ValueError, match="needs a fallback"):
        GathererCall(name="x", cmd="tool", args=(), policy=CallPolicy.BEST_EFFORT, parse=str)


def test_execute_call_parses_stdout() -> None:
    runner = FakeCommandRunner(responses={("tool", "a"): ok("42\n")})

    outcome = execute_call(runner, _call("a"), cwd=Path("/repo"))

    assert outcome.success is True
    assert outcome.value == 42
    assert outcome.error is None
    assert runner.cwds == [Path("/repo")]


def test_execute_call_parse_failure_uses_fallback() -> None:
    runner = FakeCommandRunner(responses={("tool", "a"): ok("forty-two")})

    outcome = execute_call(runner, _call("a", CallPolicy.BEST_EFFORT), cwd=None)

    assert outcome.success is False
    assert outcome.value == -1
    assert outcome.error == "Failed to parse tool output: forty-two"


def test_execute_call_truncates_long_output_in_error() -> None:
    runner = FakeCommandRunner(responses={("tool", "a"): ok("x" * 500)})

    outcome = execute_call(runner, _call("a"), cwd=None)

    assert outcome.error is not None
    assert outcome.error.endswith("...")
    assert len(outcome.error) < 300


def test_required_failure_has_no_value() -> None:
    runner = FakeCommandRunner(responses={("tool", "a"): fail("denied")})

    outcome = execute_call(runner, _call("a"), cwd=None)

    assert outcome.success is False
    assert outcome.value is None
    assert outcome.error == "denied"


def test_run_calls_joins_every_call() -> None:
    runner = FakeCommandRunner(
        responses={("tool", "a"): fail("boom"), ("tool", "b"): ok("2"), ("tool", "c"): ok("3")}
    )
    calls = [_call("a"), _call("b", CallPolicy.BEST_EFFORT), _call("c", CallPolicy.BEST_EFFORT)]

    outcomes = run_calls(runner, calls, cwd=None)

    assert list(outcomes) == ["a", "b", "c"]
    assert sorted(runner.calls) == [("tool", "a"), ("tool", "b"), ("tool", "c")]
    assert outcomes["b"].value == 2
    assert outcomes["c"].value == 3


def test_run_calls_rejects_duplicate_names() -> None:
    with pytest.raises(ValueError, match="Duplicate call names"):
        run_calls(FakeCommandRunner(), [_call("a"), _call("a")], cwd=None)


def test_run_calls_empty() -> None:
    assert run_calls(FakeCommandRunner(), [], cwd=None) == {}


def test_first_required_failure_ignores_best_effort_failures() -> None:
    runner = FakeCommandRunner(responses={("tool", "a"): ok("1"), ("tool", "c"): fail("bad")})
    calls = [_call("a"), _call("b", CallPolicy.BEST_EFFORT), _call("c")]

    outcomes = run_calls(runner, calls, cwd=None)
    fatal = first_required_failure(outcomes)

    assert fatal is not None
    assert fatal.call.name == "c"


def test_first_required_failure_none_when_required_succeed() -> None:
    runner = FakeCommandRunner(responses={("tool", "a"): ok("1")})

    outcomes = run_calls(runner, [_call("a"), _call("b", CallPolicy.BEST_EFFORT)], cwd=None)

    assert first_required_failure(outcomes) is None
    assert outcomes["b"].value == -1


def test_any_parse_exception_is_a_failed_call() -> None:
    def parse_items(stdout: str) -> list[str]:
        return [item for item in int(stdout)]  # type: ignore[attr-defined]

    runner = FakeCommandRunner(responses={("tool", "items"): ok("5")})
    call = GathererCall(
        name="items",
        cmd="tool",
        args=("items",),
        policy=CallPolicy.BEST_EFFORT,
        parse=parse_items,
        fallback=list,
    )

    outcome = execute_call(runner, call, cwd=None)

    assert outcome.success is False
    assert outcome.value == []
    assert outcome.error == "Failed to parse tool output: 5"
