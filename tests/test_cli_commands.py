"""End-to-end runs of the changelogger commands."""

from __future__ import annotations

from pathlib import Path

from typer.testing import CliRunner

from changelogger.cli import app

runner = CliRunner()


def _invoke(root: Path, *args: str):
    return runner.invoke(app, [*args, "--root", str(root)])


def test_full_workflow(empty_project_dir: Path) -> None:
    result = _invoke(empty_project_dir, "init")
    assert result.exit_code == 0, result.output
    assert (empty_project_dir / "CHANGELOG.md").exists()

    result = _invoke(empty_project_dir, "add", "added", "support dark mode", "--ref", "3")
    assert result.exit_code == 0, result.output

    result = _invoke(empty_project_dir, "release", "1.0.0", "--date", "2024-01-01")
    assert result.exit_code == 0, result.output

    result = _invoke(empty_project_dir, "show", "1.0.0")
    assert result.exit_code == 0, result.output
    assert result.output == (
        "## [1.0.0] - 2024-01-01\n"
        "[1.0.0]: https://github.com/acme/widgets/releases/tag/1.0.0\n"
        "\n"
        "### Added\n"
        "- Support dark mode. [#3]\n"
        "\n"
    )

    result = _invoke(empty_project_dir, "check")
    assert result.exit_code == 0, result.output
    assert "Changelog is valid." in result.output
    assert "latest=1.0.0" in result.output

    text = (empty_project_dir / "CHANGELOG.md").read_text(encoding="utf-8")
    assert text.endswith("[#3]: https://github.com/acme/widgets/issues/3\n")


def test_init_refuses_to_overwrite(project_dir: Path) -> None:
    result = _invoke(project_dir, "init")
    assert result.exit_code == 1
    assert "already exists" in result.output


def test_show_defaults_to_unreleased(project_dir: Path) -> None:
    result = _invoke(project_dir, "show")
    assert result.exit_code == 0
    assert result.output.startswith("## [Unreleased]\n")
    assert "- Export to CSV. [#21]" in result.output


def test_show_unknown_version(project_dir: Path) -> None:
    result = _invoke(project_dir, "show", "9.9.9")
    assert result.exit_code == 1
    assert "No version '9.9.9'" in result.output


def test_check_reports_parse_errors(project_dir: Path, changelog_text: str) -> None:
    broken = changelog_text.replace("compare/0.1.0...0.2.0", "compare/0.1.0..0.2.0")
    (project_dir / "CHANGELOG.md").write_text(broken, encoding="utf-8")

    result = _invoke(project_dir, "check")

    assert result.exit_code == 1
    assert "Error in compare link syntax" in result.output
    assert " -> 16: [0.2.0]: https://github.com/acme/widgets/compare/0.1.0..0.2.0" in result.output


def test_release_conflict(project_dir: Path) -> None:
    result = _invoke(project_dir, "release", "0.2.0")
    assert result.exit_code == 1
    assert "already exists" in result.output


def test_add_rejects_unknown_category(project_dir: Path) -> None:
    result = _invoke(project_dir, "add", "improved", "something")
    assert result.exit_code != 0


def test_url_option_overrides_config(project_dir: Path) -> None:
    result = _invoke(project_dir, "check", "--url", "https://example.org/other")
    assert result.exit_code == 1
    assert "Invalid changelog" in result.output


def test_add_rejects_multiline_message(project_dir: Path) -> None:
    result = _invoke(project_dir, "add", "added", "first\nsecond")
    assert result.exit_code == 1
    assert "single line" in result.output
    assert _invoke(project_dir, "check").exit_code == 0


def test_release_with_impossible_date(project_dir: Path) -> None:
    result = _invoke(project_dir, "release", "0.3.0", "--date", "2024-02-31")
    assert result.exit_code == 1
    assert "## [Unreleased]" in (project_dir / "CHANGELOG.md").read_text(encoding="utf-8")
