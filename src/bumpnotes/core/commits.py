"""Conventional commit parsing and version bump calculation.

Commit headers follow ``type(optional-scope)!?: description``. Only the
header is parsed; the body and footers are consulted solely for the
breaking-change marker.

Classification per commit, strongest first:

1. breaking change (``!`` before the colon, or a ``BREAKING CHANGE:``
   footer, with or without a recognized type) -> MAJOR
2. type listed in ``types_major`` -> MAJOR
3. type listed in ``types_minor`` (``feat``) -> MINOR
4. type listed in ``types_patch`` (``fix``) -> PATCH
5. anything else -> NONE

A batch of commits bumps by its most severe member.
"""

from __future__ import annotations

import logging
import re
from collections import defaultdict
from dataclasses import dataclass
from typing import TYPE_CHECKING

from bumpnotes.config.models import DEFAULT_ALLOWED_TYPES, CommitsConfig
from bumpnotes.core.version import BumpType, Version, max_bump, parse_version

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from bumpnotes.vcs.git import Commit

logger = logging.getLogger(__name__)

HEADER_PATTERN = re.compile(
    r"^(?P<type>[A-Za-z][A-Za-z0-9_-]*)"
    r"(?:\((?P<scope>[^()]*)\))?"
    r"(?P<breaking>!)?"
    r":[ \t]*(?P<description>.*?)\s*$"
)


@dataclass(frozen=True)
class ParsedCommit:
    """A commit message split into its conventional parts."""

    raw: str
    commit_type: str | None
    scope: str | None
    description: str
    is_breaking: bool
    sha: str | None = None

    @property
    def is_conventional(self) -> bool:
        return self.commit_type is not None

    @classmethod
    def from_message(
        cls,
        message: str,
        breaking_pattern: str = r"BREAKING[ -]CHANGE:",
        *,
        sha: str | None = None,
    ) -> ParsedCommit:
        """Parse a raw commit message."""
        header = message.strip().split("\n", 1)[0].strip()
        has_footer = re.search(breaking_pattern, message) is not None

        match = HEADER_PATTERN.match(header)
        if match is None:
            return cls(
                raw=message,
                commit_type=None,
                scope=None,
                description=header,
                is_breaking=has_footer,
                sha=sha,
            )

        return cls(
            raw=message,
            commit_type=match.group("type").lower(),
            scope=match.group("scope") or None,
            description=match.group("description"),
            is_breaking=has_footer or match.group("breaking") is not None,
            sha=sha,
        )

    @classmethod
    def from_commit(
        cls,
        commit: Commit,
        breaking_pattern: str = r"BREAKING[ -]CHANGE:",
    ) -> ParsedCommit:
        """Parse a commit read from git."""
        return cls.from_message(commit.message, breaking_pattern, sha=commit.sha)


@dataclass(frozen=True)
class BumpDecision:
    """Outcome of a bump calculation.

    ``next_version`` is None when no release is required.
    """

    bump: BumpType
    current: Version
    next_version: Version | None

    @property
    def requires_release(self) -> bool:
        return self.next_version is not None


def parse_commits(
    commits: Iterable[Commit | str],
    config: CommitsConfig | None = None,
) -> list[ParsedCommit]:
    """Parse commit messages or git commits, preserving order."""
    config = config or CommitsConfig()
    parsed = []
    for commit in commits:
        if isinstance(commit, str):
            parsed.append(ParsedCommit.from_message(commit, config.breaking_pattern))
        else:
            parsed.append(ParsedCommit.from_commit(commit, config.breaking_pattern))
    return parsed


def classify_commit(parsed: ParsedCommit, config: CommitsConfig | None = None) -> BumpType:
    """Bump type contributed by a single commit."""
    config = config or CommitsConfig()

    if parsed.is_breaking:
        return BumpType.MAJOR
    if parsed.commit_type in config.types_major:
        return BumpType.MAJOR
    if parsed.commit_type in config.types_minor:
        return BumpType.MINOR
    if parsed.commit_type in config.types_patch:
        return BumpType.PATCH
    return BumpType.NONE


def calculate_bump(
    parsed_commits: Iterable[ParsedCommit],
    config: CommitsConfig | None = None,
) -> BumpType:
    """Strongest bump across all commits. An empty batch yields NONE."""
    config = config or CommitsConfig()
    bump = BumpType.NONE
    for pc in parsed_commits:
        commit_bump = classify_commit(pc, config)
        logger.debug("%s -> %s", pc.raw.split("\n", 1)[0], commit_bump)
        bump = max_bump(bump, commit_bump)
        if bump == BumpType.MAJOR:
            break
    return bump


def next_version(
    current: Version | str,
    commits: Iterable[Commit | str],
    config: CommitsConfig | None = None,
) -> BumpDecision:
    """Compute the next release version from commits since ``current``.

    Args:
        current: Currently released version
        commits: Commit messages (or git commits) made since that release
        config: Commit type mapping, defaults to feat/fix

    Returns:
        BumpDecision; its ``next_version`` is None when no bump is required

    Raises:
        InvalidVersionError: If ``current`` is not a valid version
    """
    current_version = parse_version(current)
    bump = calculate_bump(parse_commits(commits, config), config)
    if bump == BumpType.NONE:
        return BumpDecision(bump=bump, current=current_version, next_version=None)
    return BumpDecision(bump=bump, current=current_version, next_version=current_version.bump(bump))


def filter_skip_release_commits(
    commits: Sequence[Commit],
    patterns: Sequence[str],
) -> list[Commit]:
    """Drop commits whose message contains a skip marker (case-insensitive)."""
    if not patterns:
        return list(commits)
    lowered = [p.lower() for p in patterns]
    kept = []
    for commit in commits:
        message = commit.message.lower()
        if any(p in message for p in lowered):
            logger.debug("Skipping %s (skip release marker)", commit.sha[:7])
            continue
        kept.append(commit)
    return kept


def group_commits_by_type(parsed_commits: Iterable[ParsedCommit]) -> dict[str, list[ParsedCommit]]:
    """Group commits by type; non-conventional commits go under ``"other"``."""
    grouped: dict[str, list[ParsedCommit]] = defaultdict(list)
    for pc in parsed_commits:
        grouped[pc.commit_type or "other"].append(pc)
    return dict(grouped)


def get_breaking_changes(parsed_commits: Iterable[ParsedCommit]) -> list[ParsedCommit]:
    """Commits flagged as breaking, in their original order."""
    return [pc for pc in parsed_commits if pc.is_breaking]


def format_commit_for_changelog(
    pc: ParsedCommit,
    *,
    include_scope: bool = True,
    include_sha: bool = False,
) -> str:
    """Render a commit as a markdown list item."""
    parts = ["-"]
    if include_scope and pc.scope:
        parts.append(f"**{pc.scope}:**")
    if pc.description:
        parts.append(pc.description)
    if pc.is_breaking:
        parts.append("[BREAKING]")
    if include_sha and pc.sha:
        parts.append(f"({pc.sha[:7]})")
    return " ".join(parts)


@dataclass(frozen=True)
class ValidationResult:
    """Result of checking a commit message against the convention."""

    is_valid: bool
    error: str | None = None
    commit_type: str | None = None
    scope: str | None = None
    description: str | None = None
    is_breaking: bool = False


def validate_commit_message(
    message: str,
    *,
    allowed_types: Iterable[str] | None = None,
    require_scope: bool = False,
    max_length: int | None = None,
) -> ValidationResult:
    """Check that a commit header follows the conventional format.

    Args:
        message: Commit message (only the first line is checked)
        allowed_types: Accepted types, defaults to the conventional set
        require_scope: Reject headers without ``(scope)``
        max_length: Maximum header length

    Returns:
        ValidationResult describing the first problem found, if any
    """
    header = message.strip().split("\n", 1)[0].strip()
    if not header:
        return ValidationResult(is_valid=False, error="Commit message cannot be empty")

    if max_length is not None and len(header) > max_length:
        return ValidationResult(
            is_valid=False,
            error=f"Commit header exceeds {max_length} characters ({len(header)})",
        )

    match = HEADER_PATTERN.match(header)
    if match is None or not match.group("description"):
        return ValidationResult(
            is_valid=False,
            error="Commit message does not follow conventional commit format: "
            "'type(scope): description'",
        )

    commit_type = match.group("type").lower()
    scope = match.group("scope") or None
    allowed = frozenset(allowed_types) if allowed_types is not None else DEFAULT_ALLOWED_TYPES
    if commit_type not in allowed:
        return ValidationResult(
            is_valid=False,
            error=f"Invalid commit type '{commit_type}'. Allowed: {', '.join(sorted(allowed))}",
            commit_type=commit_type,
        )

    if require_scope and scope is None:
        return ValidationResult(
            is_valid=False,
            error="Commit message must include a scope, e.g. 'feat(api): ...'",
            commit_type=commit_type,
        )

    return ValidationResult(
        is_valid=True,
        commit_type=commit_type,
        scope=scope,
        description=match.group("description"),
        is_breaking=match.group("breaking") is not None,
    )


def validate_commit_messages_batch(
    messages: Iterable[str],
    *,
    allowed_types: Iterable[str] | None = None,
    require_scope: bool = False,
    max_length: int | None = None,
) -> list[ValidationResult]:
    """Validate several messages with the same options, one result each."""
    allowed = frozenset(allowed_types) if allowed_types is not None else None
    return [
        validate_commit_message(
            m,
            allowed_types=allowed,
            require_scope=require_scope,
            max_length=max_length,
        )
        for m in messages
    ]
