"""bumpnotes command line interface."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from bumpnotes import __version__

app = typer.Typer(
    name="bumpnotes",
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    help="Changelog release notes and conventional-commit version bumps.",
)

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False, rich_tracebacks=True)],
        force=True,
    )


@app.callback(invoke_without_command=True)
def _main(
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)
    _configure_logging(verbose)


@app.command("extract")
def extract_cmd(
    version: str = typer.Argument(..., help="Version whose section to print, e.g. 1.2.3"),
    changelog: Path = typer.Option(
        Path("CHANGELOG.md"), "--changelog", "-c", help="Changelog file to read."
    ),
) -> None:
    """Print the changelog section for VERSION."""
    from bumpnotes.cli.commands.extract import run_extract

    run_extract(version, changelog, console, err_console)


@app.command("next")
def next_cmd(
    current: str | None = typer.Option(
        None, "--current", help="Current version (defaults to pyproject.toml)."
    ),
    commits_file: Path | None = typer.Option(
        None,
        "--commits-file",
        help="Read commit messages from FILE, one per line ('-' for stdin) instead of git.",
    ),
    path: Path | None = typer.Option(None, "--path", help="Project directory."),
    as_json: bool = typer.Option(False, "--json", help="Emit the decision as JSON."),
) -> None:
    """Compute the next version from commits since the last release."""
    from bumpnotes.cli.commands.next_cmd import run_next

    run_next(path, current, commits_file, as_json, console, err_console)


@app.command("update")
def update_cmd(
    path: Path | None = typer.Option(None, "--path", help="Project directory."),
    execute: bool = typer.Option(False, "--execute", help="Apply changes (default is dry run)."),
) -> None:
    """Write the next version to pyproject.toml and prepend a changelog section."""
    from bumpnotes.cli.commands.update import run_update

    run_update(path, execute, console, err_console)


@app.command("check-commit")
def check_commit_cmd(
    messages: list[str] = typer.Argument(..., help="Commit messages to validate."),
    require_scope: bool = typer.Option(False, "--require-scope", help="Require a (scope)."),
    max_length: int | None = typer.Option(None, "--max-length", help="Maximum header length."),
) -> None:
    """Validate commit messages against the conventional commit format."""
    from bumpnotes.cli.commands.check import run_check_commit

    run_check_commit(messages, require_scope, max_length, console, err_console)


def main() -> None:
    app()
