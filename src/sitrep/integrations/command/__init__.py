"""Subprocess execution adapter for external command-line tools."""

from sitrep.integrations.command.abc import CommandRunner
from sitrep.integrations.command.fake import FakeCommandRunner
from sitrep.integrations.command.real import RealCommandRunner
from sitrep.integrations.command.types import CommandResult

__all__ = [
    # ABC interface
    "CommandRunner",
    "CommandResult",
    # Real implementation
    "RealCommandRunner",
    # Fake implementation
    "FakeCommandRunner",
]
