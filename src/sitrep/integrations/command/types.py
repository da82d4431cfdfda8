"""Type definitions for subprocess command execution."""

from typing import NamedTuple


class CommandResult(NamedTuple):
    """Result from running a subprocess command.

    Attributes:
        success: True if command exited with code 0, False otherwise
        stdout: Standard output from the command
        stderr: Standard error from the command
        returncode: Process exit code (127 when the binary could not be spawned)
    """

    success: bool
    stdout: str
    stderr: str
    returncode: int
