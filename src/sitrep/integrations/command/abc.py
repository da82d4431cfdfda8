"""Abstract interface for running external command-line tools.

Gatherers talk to `gt`, `gh`, `bd` and `git` exclusively through this
interface so that tests can substitute an in-memory fake.

Design:
- Failure is a value: implementations never raise for a nonzero exit or a
  missing binary, they return CommandResult(success=False, ...)
- No timeout is enforced here; callers that need a deadline wrap the runner
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from pathlib import Path

from sitrep.integrations.command.types import CommandResult


class CommandRunner(ABC):
    """Subprocess execution interface."""

    @abstractmethod
    def run(self, cmd: str, args: Sequence[str], *, cwd: Path | None = None) -> CommandResult:
        """Run a command to completion and capture its output.

        Args:
            cmd: Executable name (looked up on PATH)
            args: Arguments passed to the executable
            cwd: Working directory, or None for the process cwd

        Returns:
            CommandResult with exit status and captured output
        """

    @abstractmethod
    def is_available(self, tool: str) -> bool:
        """Check whether an executable is present on PATH.

        Args:
            tool: Executable name

        Returns:
            True if the tool can be found, False otherwise
        """
