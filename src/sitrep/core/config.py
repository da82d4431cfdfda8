"""Workspace configuration loaded from pyproject.toml.

Reads the [tool.sitrep] table of <workspace>/pyproject.toml:

    [tool.sitrep]
    trunk_branch = "main"
    default_time = "24h"
    sources = ["graphite", "github", "beads"]

Every key is optional; a missing file or table yields defaults.
"""

import tomllib
from dataclasses import dataclass, field
from pathlib import Path

SOURCE_NAMES = ("beads", "github", "graphite")
DEFAULT_TIME_CONSTRAINT = "24h"


@dataclass(frozen=True)
class SitrepConfig:
    """Immutable workspace configuration.

    Loaded once at CLI entry point and stored in SitrepContext.
    """

    trunk_branch: str | None = None
    default_time: str = DEFAULT_TIME_CONSTRAINT
    sources: tuple[str, ...] = field(default=SOURCE_NAMES)


def _expect_str(value: object, key: str, path: Path) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Invalid '{key}' in [tool.sitrep] of {path}: expected a non-empty string")
    return value.strip()


def _expect_sources(value: object, path: Path) -> tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValueError(f"Invalid 'sources' in [tool.sitrep] of {path}: expected a list of names")
    unknown = [item for item in value if item not in SOURCE_NAMES]
    if unknown:
        raise ValueError(
            f"Unknown source(s) {', '.join(unknown)} in [tool.sitrep] of {path}. "
            f"Valid sources: {', '.join(SOURCE_NAMES)}"
        )
    # Keep first occurrence order, drop repeats
    return tuple(dict.fromkeys(value))


def load_config(workspace_root: Path) -> SitrepConfig:
    """Load [tool.sitrep] from <workspace_root>/pyproject.toml.

    Args:
        workspace_root: Directory holding the pyproject.toml

    Returns:
        SitrepConfig with file values over defaults

    Raises:
        ValueError: If the file is not valid TOML or a value has the wrong type
    """
    pyproject_path = workspace_root / "pyproject.toml"
    if not pyproject_path.is_file():
        return SitrepConfig()

    try:
        data = tomllib.loads(pyproject_path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid TOML in {pyproject_path}: {e}") from e

    tool = data.get("tool")
    section = tool.get("sitrep") if isinstance(tool, dict) else None
    if section is None:
        return SitrepConfig()
    if not isinstance(section, dict):
        raise ValueError(f"Invalid [tool.sitrep] section in {pyproject_path}")

    trunk_branch = None
    if "trunk_branch" in section:
        trunk_branch = _expect_str(section["trunk_branch"], "trunk_branch", pyproject_path)

    default_time = DEFAULT_TIME_CONSTRAINT
    if "default_time" in section:
        default_time = _expect_str(section["default_time"], "default_time", pyproject_path)

    sources = SOURCE_NAMES
    if "sources" in section:
        sources = _expect_sources(section["sources"], pyproject_path)

    return SitrepConfig(trunk_branch=trunk_branch, default_time=default_time, sources=sources)
