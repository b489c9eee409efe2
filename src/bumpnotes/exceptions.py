"""Exception hierarchy for bumpnotes.

Every error raised by the library derives from :class:`BumpnotesError` so
callers can catch a single type. Empty changelog sections and "no bump
required" decisions are ordinary results, not errors.
"""

from __future__ import annotations


class BumpnotesError(Exception):
    """Base class for all bumpnotes errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


# Configuration


class ConfigError(BumpnotesError):
    """Configuration could not be loaded."""


class ConfigNotFoundError(ConfigError):
    """No pyproject.toml was found."""


class ConfigValidationError(ConfigError):
    """Configuration values are invalid."""


# Versions


class VersionError(BumpnotesError):
    """Version handling failed."""


class InvalidVersionError(VersionError):
    """A version string is not MAJOR.MINOR.PATCH."""

    def __init__(self, message: str, *, value: str | None = None) -> None:
        super().__init__(message)
        self.value = value


# Changelog


class ChangelogError(BumpnotesError):
    """Changelog processing failed."""


class NotFoundError(ChangelogError):
    """The changelog has no section for the requested version."""

    def __init__(
        self,
        message: str,
        *,
        version: str | None = None,
        available: list[str] | None = None,
    ) -> None:
        super().__init__(message)
        self.version = version
        self.available = available or []


# Project files


class ProjectError(BumpnotesError):
    """A project file could not be read or updated."""


class VersionNotFoundError(ProjectError):
    """No version field was found in a project file."""


# Git


class GitError(BumpnotesError):
    """A git command failed."""

    def __init__(self, message: str, *, stderr: str | None = None) -> None:
        super().__init__(message)
        self.stderr = stderr

    def __str__(self) -> str:
        if self.stderr:
            return f"{self.message}: {self.stderr.strip()}"
        return self.message


class NotARepositoryError(GitError):
    """The path is not inside a git work tree."""
