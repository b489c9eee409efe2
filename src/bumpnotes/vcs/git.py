"""Read release tags and commit messages from a git repository.

git is invoked as a subprocess; nothing here parses commit messages.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from bumpnotes.exceptions import GitError, NotARepositoryError

logger = logging.getLogger(__name__)

# Unit and record separators keep multi-line messages intact.
_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x1e"
_LOG_FORMAT = _FIELD_SEP.join(["%H", "%an", "%ae", "%aI", "%B"]) + _RECORD_SEP


@dataclass(frozen=True)
class Commit:
    """A single commit as reported by ``git log``."""

    sha: str
    message: str
    author_name: str
    author_email: str
    date: datetime

    @property
    def subject(self) -> str:
        """First line of the message."""
        return self.message.split("\n", 1)[0]


class GitRepository:
    """Thin wrapper around the git command line."""

    def __init__(self, path: Path | str = ".") -> None:
        self.path = Path(path).resolve()
        try:
            self._run("rev-parse", "--is-inside-work-tree")
        except GitError as e:
            if e.stderr is None:
                raise
            raise NotARepositoryError(f"Not a git repository: {self.path}", stderr=e.stderr) from e

    def _run(self, *args: str) -> str:
        logger.debug("git %s", " ".join(args))
        try:
            result = subprocess.run(
                ["git", *args],
                cwd=self.path,
                capture_output=True,
                text=True,
                check=True,
            )
        except FileNotFoundError as e:
            raise GitError("git executable not found") from e
        except subprocess.CalledProcessError as e:
            raise GitError(f"git {args[0]} failed with exit code {e.returncode}", stderr=e.stderr) from e
        return result.stdout

    def is_dirty(self) -> bool:
        """True if the work tree has uncommitted changes."""
        return bool(self._run("status", "--porcelain").strip())

    def get_latest_tag(self, pattern: str | None = None) -> str | None:
        """Most recent tag reachable from HEAD, optionally filtered by glob.

        Returns:
            Tag name, or None if the repository has no matching tags
        """
        args = ["describe", "--tags", "--abbrev=0"]
        if pattern:
            args.extend(["--match", pattern])
        try:
            return self._run(*args).strip() or None
        except GitError:
            logger.debug("No tag matching %s", pattern or "*")
            return None

    def get_commits_since_tag(self, tag: str | None) -> list[Commit]:
        """Commits after ``tag`` up to HEAD, newest first (all commits if tag is None)."""
        rev_range = f"{tag}..HEAD" if tag else "HEAD"
        try:
            output = self._run("log", f"--format={_LOG_FORMAT}", rev_range)
        except GitError as e:
            # A repository without any commit has no HEAD yet.
            if e.stderr and "does not have any commits" in e.stderr:
                return []
            raise
        return [_parse_record(record) for record in output.split(_RECORD_SEP) if record.strip()]


def _parse_record(record: str) -> Commit:
    sha, author_name, author_email, date, message = record.lstrip("\n").split(_FIELD_SEP, 4)
    return Commit(
        sha=sha,
        message=message.strip(),
        author_name=author_name,
        author_email=author_email,
        date=datetime.fromisoformat(date),
    )
