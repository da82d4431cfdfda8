"""Real subprocess-based implementation of CommandRunner."""

import logging
import shutil
import subprocess
from collections.abc import Sequence
from pathlib import Path

from sitrep.integrations.command.abc import CommandRunner
from sitrep.integrations.command.types import CommandResult

logger = logging.getLogger(__name__)

# Shell convention for "command not found"
SPAWN_FAILURE_RETURNCODE = 127


class RealCommandRunner(CommandRunner):
    """Runs commands with subprocess.run(check=False)."""

    def run(self, cmd: str, args: Sequence[str], *, cwd: Path | None = None) -> CommandResult:
        """Run the command, converting spawn failures into a failed CommandResult.

        Output bytes that are not valid UTF-8 are replaced with U+FFFD.
        """
        argv = [cmd, *args]
        logger.debug("Running: %s (cwd=%s)", " ".join(argv), cwd)
        try:
            result = subprocess.run(
                argv,
                cwd=cwd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,
            )
        except FileNotFoundError:
            return CommandResult(
                success=False,
                stdout="",
                stderr=f"Command not found: {cmd}",
                returncode=SPAWN_FAILURE_RETURNCODE,
            )
        except OSError as e:
            return CommandResult(
                success=False,
                stdout="",
                stderr=f"Failed to execute {cmd}: {e}",
                returncode=SPAWN_FAILURE_RETURNCODE,
            )

        logger.debug("Exit code %d: %s", result.returncode, " ".join(argv))
        return CommandResult(
            success=result.returncode == 0,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
            returncode=result.returncode,
        )

    def is_available(self, tool: str) -> bool:
        """Check PATH using shutil.which."""
        return shutil.which(tool) is not None
