"""Implementation of the 'update' command.

The update command bumps the version and prepends a changelog section
locally. Committing, tagging and publishing are left to the release
pipeline.
"""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING

from rich.markup import escape
from rich.panel import Panel

from bumpnotes.config import load_config
from bumpnotes.core.changelog import generate_changelog_section, insert_section, render_section
from bumpnotes.core.commits import filter_skip_release_commits, next_version, parse_commits
from bumpnotes.exceptions import BumpnotesError
from bumpnotes.project.pyproject import (
    get_pyproject_version,
    update_pyproject_version,
    update_version_file,
)
from bumpnotes.vcs import GitRepository

if TYPE_CHECKING:
    from rich.console import Console

    from bumpnotes.config.models import BumpnotesConfig
    from bumpnotes.core.commits import ParsedCommit
    from bumpnotes.core.version import Version

CHANGELOG_TITLE = "# Changelog\n\nAll notable changes to this project are documented in this file.\n"


def run_update(
    path: Path | None,
    execute: bool,
    console: Console,
    err_console: Console,
) -> None:
    """Run the update command.

    Args:
        path: Optional path to project directory
        execute: Whether to actually apply changes
        console: Console for standard output
        err_console: Console for error output
    """
    project_path = path or Path.cwd()

    try:
        config = load_config(project_path)
        repo = GitRepository(project_path)
    except BumpnotesError as e:
        err_console.print(f"[red]Error:[/] {escape(str(e))}")
        raise SystemExit(1) from e

    try:
        dirty = not config.allow_dirty and repo.is_dirty()
    except BumpnotesError as e:
        err_console.print(f"[red]Error:[/] {escape(str(e))}")
        raise SystemExit(1) from e

    if dirty:
        err_console.print(
            "[red]Error:[/] Repository has uncommitted changes.\n"
            "Commit or stash them, or set [cyan]allow_dirty = true[/] in \\[tool.bumpnotes]."
        )
        raise SystemExit(1)

    try:
        current = get_pyproject_version(project_path)
        latest_tag = repo.get_latest_tag(config.tag_pattern)
        commits = repo.get_commits_since_tag(latest_tag)
    except BumpnotesError as e:
        err_console.print(f"[red]Error:[/] {escape(str(e))}")
        raise SystemExit(1) from e

    commits = filter_skip_release_commits(commits, config.commits.skip_release_patterns)
    if not commits:
        console.print("[yellow]No commits found since last release. Nothing to do.[/]")
        return

    try:
        decision = next_version(current, commits, config.commits)
    except BumpnotesError as e:
        err_console.print(f"[red]Error getting version:[/] {escape(str(e))}")
        raise SystemExit(1) from e

    if decision.next_version is None:
        console.print(
            "[yellow]No releasable changes found (only non-release commit types).[/]"
        )
        return

    new_version = decision.next_version
    mode_str = "[green]EXECUTING[/]" if execute else "[yellow]DRY-RUN[/]"
    console.print(
        f"\n{mode_str} - {decision.bump} bump from [cyan]{decision.current}[/] "
        f"to [green]{new_version}[/]\n"
    )

    if not execute:
        changes = ["  - Update version in [cyan]pyproject.toml[/]"]
        changes.extend(f"  - Update version in [cyan]{f}[/]" for f in config.version.version_files)
        if config.changelog.enabled:
            changes.append(f"  - Add a section to [cyan]{config.changelog.path}[/]")
        console.print(
            Panel(
                "[bold]Would make the following changes:[/]\n\n" + "\n".join(changes),
                title="[yellow]Dry Run Preview[/]",
                border_style="yellow",
            )
        )
        console.print("\n[dim]Run with [cyan]--execute[/] to apply these changes.[/]")
        return

    try:
        update_pyproject_version(project_path, str(new_version))
        console.print("  [green]✓[/] Updated version in pyproject.toml")

        for version_file in config.version.version_files:
            update_version_file(project_path / version_file, str(new_version))
            console.print(f"  [green]✓[/] Updated version in {version_file}")

        if config.changelog.enabled:
            parsed = parse_commits(commits, config.commits)
            changelog_path = _write_changelog(project_path, config, new_version, parsed)
            console.print(f"  [green]✓[/] Updated {changelog_path.name}")
    except (BumpnotesError, OSError) as e:
        err_console.print(f"[red]Error:[/] {escape(str(e))}")
        raise SystemExit(1) from e

    tag = f"{config.version.tag_prefix}{new_version}"
    console.print(
        Panel(
            f"[green]Successfully updated to version {new_version}![/]\n\n"
            "Next steps:\n"
            "  1. Review the changes\n"
            f"  2. Commit: [cyan]git commit -am 'chore(release): {new_version}'[/]\n"
            f"  3. Tag and push: [cyan]git tag {tag} && git push --follow-tags[/]",
            title="[green]Update Complete[/]",
            border_style="green",
        )
    )


def _write_changelog(
    project_path: Path,
    config: BumpnotesConfig,
    version: Version,
    parsed: list[ParsedCommit],
) -> Path:
    changelog_path = project_path / config.changelog.path
    section = generate_changelog_section(version, parsed)
    if not section:
        # types_major entries have no heading of their own
        section = render_section(version, "", datetime.now(UTC).strftime("%Y-%m-%d"))

    if changelog_path.exists():
        existing = changelog_path.read_text(encoding="utf-8")
    else:
        existing = CHANGELOG_TITLE

    changelog_path.write_text(insert_section(existing, section), encoding="utf-8")
    return changelog_path
