"""Configuration models.

All settings live under ``[tool.bumpnotes]`` in pyproject.toml and are
validated with pydantic. Every field has a default, so an empty section
(or none at all) is a valid configuration.
"""

from __future__ import annotations

import re
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_ALLOWED_TYPES: frozenset[str] = frozenset(
    {
        "feat",
        "fix",
        "docs",
        "style",
        "refactor",
        "perf",
        "test",
        "chore",
        "build",
        "ci",
        "revert",
    }
)


class _Model(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class CommitsConfig(_Model):
    """How commit messages map onto version bumps."""

    types_major: list[str] = Field(default_factory=list)
    types_minor: list[str] = Field(default_factory=lambda: ["feat"])
    types_patch: list[str] = Field(default_factory=lambda: ["fix"])
    breaking_pattern: str = r"BREAKING[ -]CHANGE:"
    skip_release_patterns: list[str] = Field(
        default_factory=lambda: ["[skip release]", "[release skip]", "[no release]"]
    )
    allowed_types: list[str] = Field(default_factory=lambda: sorted(DEFAULT_ALLOWED_TYPES))

    @field_validator("types_major", "types_minor", "types_patch", "allowed_types")
    @classmethod
    def _lowercase_types(cls, value: list[str]) -> list[str]:
        return [t.strip().lower() for t in value]

    @field_validator("breaking_pattern")
    @classmethod
    def _valid_regex(cls, value: str) -> str:
        try:
            re.compile(value)
        except re.error as e:
            raise ValueError(f"invalid regular expression: {e}") from e
        return value


class ChangelogConfig(_Model):
    """Changelog file settings."""

    enabled: bool = True
    path: Path = Path("CHANGELOG.md")


class VersionConfig(_Model):
    """Version and tag settings."""

    tag_prefix: str = "v"
    version_files: list[str] = Field(default_factory=list)


class BumpnotesConfig(_Model):
    """Root configuration object."""

    allow_dirty: bool = False
    commits: CommitsConfig = Field(default_factory=CommitsConfig)
    changelog: ChangelogConfig = Field(default_factory=ChangelogConfig)
    version: VersionConfig = Field(default_factory=VersionConfig)

    @property
    def tag_pattern(self) -> str:
        """Glob matching release tags, e.g. ``v*``."""
        return f"{self.version.tag_prefix}*"
