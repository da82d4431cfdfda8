"""Application context with dependency injection."""

from dataclasses import dataclass
from pathlib import Path

from sitrep.core.config import SitrepConfig, load_config
from sitrep.core.time.abc import Time
from sitrep.core.time.fake import FakeTime
from sitrep.core.time.real import RealTime
from sitrep.integrations.command.abc import CommandRunner
from sitrep.integrations.command.fake import FakeCommandRunner
from sitrep.integrations.command.real import RealCommandRunner


@dataclass(frozen=True)
class SitrepContext:
    """Immutable context holding all dependencies for gatherers.

    Created at CLI entry point and threaded through the gatherers.
    Frozen to prevent accidental modification at runtime.
    """

    runner: CommandRunner
    time: Time
    config: SitrepConfig
    cwd: Path  # Current working directory at CLI invocation
    workspace: Path | None  # Explicit --workspace override, if any

    @property
    def workspace_root(self) -> Path:
        """Directory used to locate tool state (.beads/, the git checkout)."""
        return self.workspace if self.workspace is not None else self.cwd

    @staticmethod
    def for_test(
        runner: CommandRunner | None = None,
        time: Time | None = None,
        config: SitrepConfig | None = None,
        cwd: Path | None = None,
        workspace: Path | None = None,
    ) -> "SitrepContext":
        """Create a context with in-memory fakes for anything not supplied."""
        return SitrepContext(
            runner=runner if runner is not None else FakeCommandRunner(),
            time=time if time is not None else FakeTime(),
            config=config if config is not None else SitrepConfig(),
            cwd=cwd if cwd is not None else Path("/fake/workspace"),
            workspace=workspace,
        )


def create_context(*, workspace: Path | None) -> SitrepContext:
    """Create production context with real implementations.

    Args:
        workspace: Explicit workspace root, or None to use the process cwd

    Raises:
        ValueError: If [tool.sitrep] configuration is malformed
    """
    cwd = Path.cwd()
    workspace_root = workspace if workspace is not None else cwd
    return SitrepContext(
        runner=RealCommandRunner(),
        time=RealTime(),
        config=load_config(workspace_root),
        cwd=cwd,
        workspace=workspace,
    )
