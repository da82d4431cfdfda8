"""In-memory fake implementation of CommandRunner for testing.

Design:
- All responses are provided via constructor (no subprocess is ever spawned)
- Responses are keyed by the full command line: (cmd, *args)
- Unscripted commands fail like a missing binary (returncode 127)
- Every call is recorded for assertions; recording is thread-safe because
  gatherers fan out calls on a thread pool
"""

import threading
from collections.abc import Mapping, Sequence
from pathlib import Path

from sitrep.integrations.command.abc import CommandRunner
from sitrep.integrations.command.types import CommandResult


def ok(stdout: str = "", stderr: str = "") -> CommandResult:
    """Build a successful CommandResult."""
    return CommandResult(success=True, stdout=stdout, stderr=stderr, returncode=0)


def fail(stderr: str = "", *, returncode: int = 1, stdout: str = "") -> CommandResult:
    """Build a failed CommandResult."""
    return CommandResult(success=False, stdout=stdout, stderr=stderr, returncode=returncode)


class FakeCommandRunner(CommandRunner):
    """Fake command runner with scripted responses.

    Examples:
        >>> runner = FakeCommandRunner(
        ...     responses={("gt", "state"): ok("◉ feature-x\\n")},
        ...     available_tools={"gt", "git"},
        ... )
        >>> runner.run("gt", ["state"]).stdout
        '◉ feature-x\\n'
        >>> runner.calls
        [('gt', 'state')]
    """

    def __init__(
        self,
        *,
        responses: Mapping[tuple[str, ...], CommandResult] | None = None,
        available_tools: set[str] | None = None,
    ) -> None:
        """Initialize fake with predetermined responses.

        Args:
            responses: Mapping of full command line to the result it returns
            available_tools: Tool names is_available() reports as installed
        """
        self._responses = dict(responses) if responses is not None else {}
        self._available_tools = set(available_tools) if available_tools is not None else set()
        self._calls: list[tuple[str, ...]] = []
        self._cwds: list[Path | None] = []
        self._lock = threading.Lock()

    @property
    def calls(self) -> list[tuple[str, ...]]:
        """Command lines passed to run(), in call order."""
        with self._lock:
            return list(self._calls)

    @property
    def cwds(self) -> list[Path | None]:
        """Working directories passed to run(), parallel to calls."""
        with self._lock:
            return list(self._cwds)

    def run(self, cmd: str, args: Sequence[str], *, cwd: Path | None = None) -> CommandResult:
        key = (cmd, *args)
        with self._lock:
            self._calls.append(key)
            self._cwds.append(cwd)
        if key in self._responses:
            return self._responses[key]
        return fail(f"Command not found: {cmd}", returncode=127)

    def is_available(self, tool: str) -> bool:
        return tool in self._available_tools
