"""Implementation of the 'check-commit' command."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from rich.markup import escape

from bumpnotes.config import CommitsConfig, load_config
from bumpnotes.core.commits import validate_commit_messages_batch
from bumpnotes.exceptions import ConfigNotFoundError

if TYPE_CHECKING:
    from rich.console import Console


def run_check_commit(
    messages: list[str],
    require_scope: bool,
    max_length: int | None,
    console: Console,
    err_console: Console,
) -> None:
    """Validate each message; exit with 1 if any is invalid."""
    try:
        commits_config = load_config(Path.cwd()).commits
    except ConfigNotFoundError:
        commits_config = CommitsConfig()

    results = validate_commit_messages_batch(
        messages,
        allowed_types=commits_config.allowed_types,
        require_scope=require_scope,
        max_length=max_length,
    )

    failed = 0
    for message, result in zip(messages, results, strict=True):
        header = escape(message.strip().split("\n", 1)[0])
        if result.is_valid:
            console.print(f"[green]✓[/] {header}")
        else:
            failed += 1
            err_console.print(f"[red]✗[/] {header}\n    {escape(result.error or '')}")

    if failed:
        err_console.print(f"\n[red]{failed} of {len(messages)} commit message(s) invalid[/]")
        raise SystemExit(1)
