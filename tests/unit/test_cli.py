"""Tests for the command line interface."""

from __future__ import annotations

import json
from datetime import datetime
from typing import TYPE_CHECKING

import pytest
from typer.testing import CliRunner

from bumpnotes import __version__
from bumpnotes.cli import app
from bumpnotes.core.changelog import extract_section
from bumpnotes.exceptions import GitError
from bumpnotes.project.pyproject import get_pyproject_version
from bumpnotes.vcs.git import Commit

if TYPE_CHECKING:
    from pathlib import Path

runner = CliRunner()


class FakeRepository:
    """Stands in for GitRepository with a fixed history."""

    messages: list[str] = []
    dirty = False

    def __init__(self, path: Path) -> None:
        self.path = path

    def is_dirty(self) -> bool:
        return self.dirty

    def get_latest_tag(self, pattern: str | None = None) -> str | None:
        return "v1.0.0"

    def get_commits_since_tag(self, tag: str | None) -> list[Commit]:
        return [
            Commit(f"{i:040x}", message, "T", "t@t.com", datetime(2026, 1, 4))
            for i, message in enumerate(self.messages)
        ]


@pytest.fixture
def fake_git(monkeypatch: pytest.MonkeyPatch) -> type[FakeRepository]:
    import bumpnotes.cli.commands.next_cmd as next_cmd
    import bumpnotes.cli.commands.update as update_cmd

    class Repo(FakeRepository):
        messages = ["feat(api): add search", "fix: handle empty query", "docs: typo"]

    monkeypatch.setattr(next_cmd, "GitRepository", Repo)
    monkeypatch.setattr(update_cmd, "GitRepository", Repo)
    return Repo


class TestMain:
    """Tests for global options."""

    def test_version(self):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert result.output.strip() == __version__


class TestExtractCommand:
    """Tests for 'bumpnotes extract'."""

    def test_extract(self, tmp_path: Path, sample_changelog: str):
        changelog = tmp_path / "CHANGELOG.md"
        changelog.write_text(sample_changelog, encoding="utf-8")

        result = runner.invoke(app, ["extract", "1.2.3", "--changelog", str(changelog)])

        assert result.exit_code == 0
        assert result.output == "Added:\n- X\n"

    def test_extract_keeps_brackets(self, tmp_path: Path):
        """Markdown text is printed verbatim, not as console markup."""
        changelog = tmp_path / "CHANGELOG.md"
        changelog.write_text("## [1.0.0]\n\n- [red]literal[/] :tada:\n", encoding="utf-8")

        result = runner.invoke(app, ["extract", "1.0.0", "-c", str(changelog)])

        assert result.exit_code == 0
        assert result.output == "- [red]literal[/] :tada:\n"

    def test_extract_keeps_tabs_and_emoji_codes(self, tmp_path: Path):
        """Tabs, markup-like tags and emoji codes come out byte for byte."""
        changelog = tmp_path / "CHANGELOG.md"
        changelog.write_text(
            "## [1.0.0]\n\n- col1\tcol2\n- [bold]x[/bold] :smile:\n", encoding="utf-8"
        )

        result = runner.invoke(app, ["extract", "1.0.0", "-c", str(changelog)])

        assert result.exit_code == 0
        assert result.output == "- col1\tcol2\n- [bold]x[/bold] :smile:\n"

    def test_extract_missing_version(self, tmp_path: Path, sample_changelog: str):
        changelog = tmp_path / "CHANGELOG.md"
        changelog.write_text(sample_changelog, encoding="utf-8")

        result = runner.invoke(app, ["extract", "9.9.9", "--changelog", str(changelog)])

        assert result.exit_code == 1
        assert "No changelog section for version 9.9.9" in result.output

    def test_extract_missing_file(self, tmp_path: Path):
        result = runner.invoke(app, ["extract", "1.0.0", "--changelog", str(tmp_path / "nope.md")])

        assert result.exit_code == 1
        assert "Error reading" in result.output


class TestNextCommand:
    """Tests for 'bumpnotes next'."""

    def test_next_from_commits_file(self, project_dir: Path):
        commits = project_dir / "commits.txt"
        commits.write_text("fix: a\ndocs: b\n", encoding="utf-8")

        result = runner.invoke(
            app,
            ["next", "--path", str(project_dir), "--current", "0.2.5", "--commits-file", str(commits)],
        )

        assert result.exit_code == 0
        assert result.output.strip() == "0.2.6"

    def test_next_reads_project_version(self, project_dir: Path):
        commits = project_dir / "commits.txt"
        commits.write_text("feat: a\n", encoding="utf-8")

        result = runner.invoke(app, ["next", "--path", str(project_dir), "--commits-file", str(commits)])

        assert result.exit_code == 0
        assert result.output.strip() == "1.1.0"

    def test_next_uses_project_config(self, project_dir: Path):
        """The project maps perf to a patch bump."""
        commits = project_dir / "commits.txt"
        commits.write_text("perf: faster\n", encoding="utf-8")

        result = runner.invoke(app, ["next", "--path", str(project_dir), "--commits-file", str(commits)])

        assert result.output.strip() == "1.0.1"

    def test_next_from_stdin(self, project_dir: Path):
        result = runner.invoke(
            app,
            ["next", "--path", str(project_dir), "--current", "0.2.5", "--commits-file", "-"],
            input="feat!: redesign\n",
        )

        assert result.exit_code == 0
        assert result.output.strip() == "1.0.0"

    def test_next_json(self, project_dir: Path):
        commits = project_dir / "commits.txt"
        commits.write_text("feat: a\nfix: b\n", encoding="utf-8")

        result = runner.invoke(
            app,
            ["next", "--path", str(project_dir), "--current", "0.2.5", "--commits-file", str(commits), "--json"],
        )

        assert result.exit_code == 0
        assert json.loads(result.output) == {"bump": "minor", "current": "0.2.5", "next": "0.3.0"}

    def test_next_no_bump(self, project_dir: Path):
        commits = project_dir / "commits.txt"
        commits.write_text("chore: cleanup\n", encoding="utf-8")

        result = runner.invoke(
            app,
            ["next", "--path", str(project_dir), "--current", "0.2.5", "--commits-file", str(commits)],
        )

        assert result.exit_code == 0
        assert "no bump required" in result.output

    def test_next_invalid_current(self, project_dir: Path):
        commits = project_dir / "commits.txt"
        commits.write_text("feat: a\n", encoding="utf-8")

        result = runner.invoke(
            app,
            ["next", "--path", str(project_dir), "--current", "1.0", "--commits-file", str(commits)],
        )

        assert result.exit_code == 1
        assert "Invalid version" in result.output

    def test_next_from_git(self, project_dir: Path, fake_git: type[FakeRepository]):
        result = runner.invoke(app, ["next", "--path", str(project_dir)])

        assert result.exit_code == 0
        assert result.output.strip() == "1.1.0"

    def test_next_skips_marked_commits(self, project_dir: Path, fake_git: type[FakeRepository]):
        fake_git.messages = ["feat: big [skip release]", "fix: small"]

        result = runner.invoke(app, ["next", "--path", str(project_dir)])

        assert result.output.strip() == "1.0.1"


class TestUpdateCommand:
    """Tests for 'bumpnotes update'."""

    def test_dry_run_changes_nothing(self, project_dir: Path, fake_git: type[FakeRepository]):
        result = runner.invoke(app, ["update", "--path", str(project_dir)])

        assert result.exit_code == 0
        assert "DRY-RUN" in result.output
        assert get_pyproject_version(project_dir) == "1.0.0"
        assert not (project_dir / "CHANGELOG.md").exists()

    def test_execute(self, project_dir: Path, fake_git: type[FakeRepository]):
        result = runner.invoke(app, ["update", "--path", str(project_dir), "--execute"])

        assert result.exit_code == 0, result.output
        assert get_pyproject_version(project_dir) == "1.1.0"

        changelog = (project_dir / "CHANGELOG.md").read_text(encoding="utf-8")
        assert changelog.startswith("# Changelog")
        body = extract_section(changelog, "1.1.0")
        assert "### Added\n\n- **api:** add search" in body
        assert "### Fixed\n\n- handle empty query" in body
        assert "typo" not in body

    def test_execute_prepends_to_existing_changelog(
        self, project_dir: Path, fake_git: type[FakeRepository], sample_changelog: str
    ):
        (project_dir / "CHANGELOG.md").write_text(sample_changelog, encoding="utf-8")

        result = runner.invoke(app, ["update", "--path", str(project_dir), "--execute"])

        assert result.exit_code == 0, result.output
        changelog = (project_dir / "CHANGELOG.md").read_text(encoding="utf-8")
        assert extract_section(changelog, "1.2.3") == "Added:\n- X"
        assert changelog.index("## [Unreleased]") < changelog.index("## [1.1.0]")
        assert changelog.index("## [1.1.0]") < changelog.index("## [1.2.3]")

    def test_no_releasable_changes(self, project_dir: Path, fake_git: type[FakeRepository]):
        fake_git.messages = ["docs: typo", "chore: deps"]

        result = runner.invoke(app, ["update", "--path", str(project_dir), "--execute"])

        assert result.exit_code == 0
        assert "No releasable changes" in result.output
        assert get_pyproject_version(project_dir) == "1.0.0"

    def test_dirty_repository_refused(self, tmp_path: Path, fake_git: type[FakeRepository]):
        (tmp_path / "pyproject.toml").write_text(
            '[project]\nname = "x"\nversion = "1.0.0"\n', encoding="utf-8"
        )
        fake_git.dirty = True

        result = runner.invoke(app, ["update", "--path", str(tmp_path), "--execute"])

        assert result.exit_code == 1
        assert "uncommitted changes" in result.output

    def test_git_status_failure_reported(self, tmp_path: Path, fake_git: type[FakeRepository]):
        """A failing `git status` is an error message, not a traceback."""
        (tmp_path / "pyproject.toml").write_text(
            '[project]\nname = "x"\nversion = "1.0.0"\n', encoding="utf-8"
        )

        def broken_status(self: FakeRepository) -> bool:
            raise GitError("git status failed", stderr="fatal: boom")

        fake_git.is_dirty = broken_status  # type: ignore[method-assign]

        result = runner.invoke(app, ["update", "--path", str(tmp_path), "--execute"])

        assert result.exit_code == 1
        assert "Error:" in result.output
        assert "fatal: boom" in result.output
        assert not isinstance(result.exception, GitError)


class TestCheckCommitCommand:
    """Tests for 'bumpnotes check-commit'."""

    def test_valid_messages(self, project_dir: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.chdir(project_dir)

        result = runner.invoke(app, ["check-commit", "feat(api): add search", "fix: typo"])

        assert result.exit_code == 0

    def test_invalid_message(self, project_dir: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.chdir(project_dir)

        result = runner.invoke(app, ["check-commit", "feat: ok", "Updated stuff"])

        assert result.exit_code == 1
        assert "1 of 2 commit message(s) invalid" in result.output

    def test_require_scope(self, project_dir: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.chdir(project_dir)

        result = runner.invoke(app, ["check-commit", "--require-scope", "feat: no scope"])

        assert result.exit_code == 1
        assert "must include a scope" in result.output
