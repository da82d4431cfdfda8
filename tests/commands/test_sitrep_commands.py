"""CLI tests for the sitrep command group."""

import json
from pathlib import Path

from click.testing import CliRunner

from sitrep.cli.cli import cli
from sitrep.core.config import SitrepConfig
from sitrep.core.context import SitrepContext
from sitrep.integrations.command.fake import FakeCommandRunner, ok


def _init_beads(root: Path) -> None:
    (root / ".beads").mkdir()
    (root / ".beads" / "issues.db").write_bytes(b"")


def test_beads_unavailable_prints_envelope_and_exits_zero(tmp_path: Path) -> None:
    runner = CliRunner()
    test_ctx = SitrepContext.for_test(cwd=tmp_path)

    result = runner.invoke(cli, ["beads"], obj=test_ctx)

    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == {
        "source": "beads",
        "status": "unavailable",
        "reason": "Beads not initialized (.beads/ directory not found)",
        "timestamp": "2024-01-15T12:00:00.000Z",
    }


def test_output_is_indented_json(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["graphite"], obj=SitrepContext.for_test(cwd=tmp_path))

    assert result.output.startswith('{\n  "source": "graphite"')


def test_invalid_time_is_error_envelope_with_exit_zero(tmp_path: Path) -> None:
    _init_beads(tmp_path)
    runner = CliRunner()

    test_ctx = SitrepContext.for_test(cwd=tmp_path)

    result = runner.invoke(cli, ["beads", "--time", "forever"], obj=test_ctx)

    assert result.exit_code == 0
    envelope = json.loads(result.output)
    assert envelope["status"] == "error"
    assert envelope["error"] == (
        'Invalid time constraint: "forever". Expected format like 24h, 7d, or 2w'
    )


def test_default_time_comes_from_config(tmp_path: Path) -> None:
    _init_beads(tmp_path)
    runner = CliRunner()
    test_ctx = SitrepContext.for_test(cwd=tmp_path, config=SitrepConfig(default_time="sometime"))

    result = runner.invoke(cli, ["beads"], obj=test_ctx)

    assert '"sometime"' in json.loads(result.output)["error"]


def test_workspace_option_overrides_injected_workspace(tmp_path: Path) -> None:
    _init_beads(tmp_path)
    workspace = tmp_path.resolve()
    prefix = ("--workspace-root", str(workspace))
    fake = FakeCommandRunner(
        responses={
            ("bd", *prefix, "stats", "--json"): ok('{"total": 1}'),
        }
    )
    runner = CliRunner()
    test_ctx = SitrepContext.for_test(runner=fake, cwd=Path("/elsewhere"))

    result = runner.invoke(cli, ["beads", "-w", str(tmp_path)], obj=test_ctx)

    envelope = json.loads(result.output)
    assert envelope["status"] == "success"
    assert envelope["data"]["stats"]["total"] == 1
    assert all(call[1:3] == prefix for call in fake.calls)


def test_nonexistent_workspace_is_usage_error(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(
        cli,
        ["github", "--workspace", str(tmp_path / "missing")],
        obj=SitrepContext.for_test(cwd=tmp_path),
    )

    assert result.exit_code == 2


def test_report_with_selected_sources(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(
        cli,
        ["report", "-s", "github", "-s", "beads", "-t", "7d"],
        obj=SitrepContext.for_test(cwd=tmp_path),
    )

    assert result.exit_code == 0
    document = json.loads(result.output)
    assert document["timeConstraint"] == "7d"
    assert document["sources"] == ["github", "beads"]
    assert document["results"]["github"]["reason"] == "gh CLI not installed"


def test_report_defaults_to_configured_sources(tmp_path: Path) -> None:
    runner = CliRunner()
    test_ctx = SitrepContext.for_test(cwd=tmp_path, config=SitrepConfig(sources=("graphite",)))

    result = runner.invoke(cli, ["report"], obj=test_ctx)

    assert json.loads(result.output)["sources"] == ["graphite"]


def test_report_rejects_unknown_source(tmp_path: Path) -> None:
    runner = CliRunner()

    test_ctx = SitrepContext.for_test(cwd=tmp_path)

    result = runner.invoke(cli, ["report", "--source", "linear"], obj=test_ctx)

    assert result.exit_code == 2


def test_malformed_config_reports_error_and_exits_one(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text("[tool.sitrep]\nsources = 3\n", encoding="utf-8")
    runner = CliRunner()

    result = runner.invoke(cli, ["beads", "--workspace", str(tmp_path)])

    assert result.exit_code == 1
    assert "Error: Invalid 'sources'" in result.output


def test_short_help_flag() -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["report", "-h"])

    assert result.exit_code == 0
    assert "--source" in result.output
    assert "--time" in result.output
    assert "--workspace" in result.output


def test_group_lists_commands() -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    for name in ("beads", "github", "graphite", "report"):
        assert name in result.output
