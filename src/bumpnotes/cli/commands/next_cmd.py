"""Implementation of the 'next' command.

Prints the next version on stdout so it can be captured in CI, e.g.
``VERSION=$(bumpnotes next)``. When no bump is required stdout stays
empty and the exit code is still 0.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from rich.markup import escape

from bumpnotes.config import load_config
from bumpnotes.config.loader import get_project_version
from bumpnotes.config.models import BumpnotesConfig
from bumpnotes.core.commits import filter_skip_release_commits, next_version
from bumpnotes.exceptions import BumpnotesError, ConfigNotFoundError
from bumpnotes.vcs import GitRepository

if TYPE_CHECKING:
    from rich.console import Console

    from bumpnotes.vcs.git import Commit


def read_commit_messages(source: Path) -> list[str]:
    """One commit message per non-blank line; ``-`` reads stdin."""
    text = sys.stdin.read() if str(source) == "-" else source.read_text(encoding="utf-8")
    return [line.strip() for line in text.splitlines() if line.strip()]


def collect_commits(project_path: Path, config: BumpnotesConfig) -> list[Commit]:
    """Commits since the latest release tag, minus skip-release ones."""
    repo = GitRepository(project_path)
    latest_tag = repo.get_latest_tag(config.tag_pattern)
    commits = repo.get_commits_since_tag(latest_tag)
    return filter_skip_release_commits(commits, config.commits.skip_release_patterns)


def run_next(
    path: Path | None,
    current: str | None,
    commits_file: Path | None,
    as_json: bool,
    console: Console,
    err_console: Console,
) -> None:
    """Run the next command.

    Args:
        path: Optional project directory
        current: Current version, read from pyproject.toml when omitted
        commits_file: File with commit messages; git is used when omitted
        as_json: Emit a JSON object instead of a bare version
        console: Console for standard output
        err_console: Console for error output
    """
    project_path = path or Path.cwd()

    try:
        try:
            config = load_config(project_path)
        except ConfigNotFoundError:
            # An explicit version and commit file need no project.
            if current is None or commits_file is None:
                raise
            config = BumpnotesConfig()
        current_version = current or get_project_version(project_path)
        if commits_file is not None:
            commits: list[Commit] | list[str] = read_commit_messages(commits_file)
        else:
            commits = collect_commits(project_path, config)
        decision = next_version(current_version, commits, config.commits)
    except (BumpnotesError, OSError) as e:
        err_console.print(f"[red]Error:[/] {escape(str(e))}")
        raise SystemExit(1) from e

    if as_json:
        payload = {
            "bump": str(decision.bump),
            "current": str(decision.current),
            "next": str(decision.next_version) if decision.next_version else None,
        }
        console.print(json.dumps(payload), markup=False, soft_wrap=True)
        return

    if decision.next_version is None:
        err_console.print("[yellow]No releasable changes found; no bump required.[/]")
        return

    console.print(str(decision.next_version), markup=False)
