"""CLI entrypoint for Changelogger."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, List, Optional

import typer
from rich.console import Console
from rich.markup import escape

from changelogger import __version__
from changelogger import api
from changelogger.core import UNRELEASED, Category, Service
from changelogger.parse import ParseError

console = Console()
app = typer.Typer(help="Maintain Keep a Changelog style CHANGELOG.md files.")

LOG = logging.getLogger("changelogger")
LOG_JSON = False


def _configure_logging(verbosity: int, json_logs: bool) -> None:
    global LOG_JSON
    LOG_JSON = json_logs
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(message)s")


def _log(event: str, **payload: object) -> None:
    if LOG_JSON:
        record = {"event": event, **payload}
        console.print_json(data=record)
    else:
        details = " ".join(f"{key}={value}" for key, value in payload.items())
        console.log(f"{event} {details}" if details else event, markup=False)


@contextmanager
def _reported_errors() -> Iterator[None]:
    """Turn library failures into a red message and exit code 1."""
    try:
        yield
    except ParseError as exc:
        console.print(f"[bold red]Invalid changelog:[/bold red] {escape(exc.message)}")
        if exc.context:
            console.print(exc.excerpt, markup=False, highlight=False, soft_wrap=True)
        raise typer.Exit(code=1) from exc
    except (FileNotFoundError, FileExistsError, LookupError, ValueError) as exc:
        console.print(f"[bold red]{escape(str(exc))}[/bold red]", soft_wrap=True)
        raise typer.Exit(code=1) from exc


def _root_option() -> Any:
    return typer.Option(Path("."), "--root", help="Project root holding the changelog and .changelogger.yml.")


def _file_option() -> Any:
    return typer.Option(None, "--file", "-f", help="Changelog path (default: CHANGELOG.md).")


def _url_option() -> Any:
    return typer.Option(None, "--url", help="Repository URL (default: git remote 'origin').")


def _service_option() -> Any:
    return typer.Option(None, "--service", case_sensitive=False, help="Hosting service link convention.")


def _verbose_option() -> Any:
    return typer.Option(0, "--verbose", "-V", count=True, help="Increase log verbosity (repeatable).")


def _log_json_option() -> Any:
    return typer.Option(False, "--log-json", help="Emit JSON structured logs.")


def _version_callback(value: bool) -> None:
    """Print the package version and exit when requested."""
    if value:
        console.print(f"Changelogger [bold cyan]{__version__}[/bold cyan]")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the Changelogger version and exit.",
    ),
) -> None:
    """Initialize the CLI before command dispatch."""
    return None


@app.command()
def init(
    root: Path = _root_option(),
    file: Optional[Path] = _file_option(),
    url: Optional[str] = _url_option(),
    service: Optional[Service] = _service_option(),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing changelog."),
    verbose: int = _verbose_option(),
    log_json: bool = _log_json_option(),
) -> None:
    """Create a changelog with an empty Unreleased section."""
    _configure_logging(verbose, log_json)
    with _reported_errors():
        project = api.resolve_project(root, path=file, base_url=url, service=service)
        api.init(project, force=force)
    _log("changelog.created", path=project.path, url=project.base_url or "-", service=project.service.value)


@app.command()
def add(
    category: Category = typer.Argument(..., case_sensitive=False, help="Change category, e.g. Added or Fixed."),
    message: str = typer.Argument(..., help="Description of the change."),
    references: Optional[List[int]] = typer.Option(
        None, "--ref", "-r", help="Issue id cited by the entry (repeatable)."
    ),
    root: Path = _root_option(),
    file: Optional[Path] = _file_option(),
    url: Optional[str] = _url_option(),
    service: Optional[Service] = _service_option(),
    verbose: int = _verbose_option(),
    log_json: bool = _log_json_option(),
) -> None:
    """Add an entry to the Unreleased section."""
    _configure_logging(verbose, log_json)
    with _reported_errors():
        project = api.resolve_project(root, path=file, base_url=url, service=service)
        item = api.add_entry(project, category, message, references or [])
    _log("entry.added", category=category.value, entry=item.render())


@app.command()
def release(
    version: str = typer.Argument(..., help="Semantic version to release, e.g. 1.4.0."),
    date: Optional[str] = typer.Option(None, "--date", help="Release date as YYYY-MM-DD (default: today)."),
    root: Path = _root_option(),
    file: Optional[Path] = _file_option(),
    url: Optional[str] = _url_option(),
    service: Optional[Service] = _service_option(),
    verbose: int = _verbose_option(),
    log_json: bool = _log_json_option(),
) -> None:
    """Turn the Unreleased section into a dated release."""
    _configure_logging(verbose, log_json)
    with _reported_errors():
        project = api.resolve_project(root, path=file, base_url=url, service=service)
        released = api.release(project, version, date=date)
    _log("version.released", version=released.label, date=released.date)


@app.command()
def check(
    root: Path = _root_option(),
    file: Optional[Path] = _file_option(),
    url: Optional[str] = _url_option(),
    service: Optional[Service] = _service_option(),
    verbose: int = _verbose_option(),
) -> None:
    """Verify that the changelog follows the expected format."""
    _configure_logging(verbose, False)
    with _reported_errors():
        project = api.resolve_project(root, path=file, base_url=url, service=service)
        changelog = api.load(project)

    latest = changelog.find_latest()
    console.print(
        f"[bold cyan]Summary:[/bold cyan] versions={len(changelog.versions)}, "
        f"references={len(changelog.references)}, latest={escape(latest.label) if latest else '-'}"
    )
    console.print("[bold green]Changelog is valid.[/bold green]")


@app.command()
def show(
    version: Optional[str] = typer.Argument(None, help="Version to print (default: Unreleased, else latest)."),
    root: Path = _root_option(),
    file: Optional[Path] = _file_option(),
    url: Optional[str] = _url_option(),
    service: Optional[Service] = _service_option(),
) -> None:
    """Print a single version section."""
    with _reported_errors():
        project = api.resolve_project(root, path=file, base_url=url, service=service)
        changelog = api.load(project)

    if version is not None:
        selected = changelog.find_version(version)
    else:
        selected = changelog.find_version(UNRELEASED) or changelog.find_latest()
    if selected is None:
        label = escape(version or UNRELEASED)
        console.print(f"[bold red]No version '{label}' in {escape(str(project.path))}.[/bold red]", soft_wrap=True)
        raise typer.Exit(code=1)
    typer.echo(selected.render(), nl=False)
