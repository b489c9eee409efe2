"""Implementation of the 'extract' command.

Prints the raw section body so CI jobs can pipe it into a release body.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.markup import escape

from bumpnotes.core.changelog import extract_section
from bumpnotes.exceptions import NotFoundError

if TYPE_CHECKING:
    from pathlib import Path

    from rich.console import Console


def run_extract(version: str, changelog: Path, console: Console, err_console: Console) -> None:
    """Run the extract command.

    Args:
        version: Version text to look up (matched literally)
        changelog: Changelog file
        console: Console for standard output
        err_console: Console for error output
    """
    try:
        document = changelog.read_text(encoding="utf-8")
    except OSError as e:
        err_console.print(f"[red]Error reading {changelog}:[/] {escape(str(e))}")
        raise SystemExit(1) from e

    try:
        body = extract_section(document, version)
    except NotFoundError as e:
        err_console.print(f"[red]Error:[/] {escape(str(e))}")
        if e.available:
            err_console.print(f"[dim]Sections found: {', '.join(e.available)}[/]")
        raise SystemExit(1) from e

    if body:
        # Output must match the section text exactly.
        console.file.write(body + "\n")
