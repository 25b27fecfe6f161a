"""CLI smoke tests for Changelogger."""

from typer.testing import CliRunner

from changelogger.cli import app


def test_cli_help() -> None:
    """Ensure the CLI help screen renders without error."""
    runner = CliRunner()
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "Usage" in result.output
    for command in ("init", "add", "release", "check", "show"):
        assert command in result.output


def test_cli_version() -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.output
