"""Core release logic for bumpnotes.

- Version parsing and bumping (MAJOR.MINOR.PATCH)
- Conventional commit parsing and bump calculation
- Changelog section extraction and generation

Nothing in this package performs I/O.
"""

from __future__ import annotations

from bumpnotes.core.changelog import (
    ChangelogSection,
    extract,
    extract_section,
    generate_changelog_section,
    insert_section,
    iter_sections,
    list_versions,
    render_section,
)
from bumpnotes.core.commits import (
    BumpDecision,
    ParsedCommit,
    calculate_bump,
    classify_commit,
    next_version,
    parse_commits,
)
from bumpnotes.core.version import BumpType, Version, max_bump, parse_version

__all__ = [
    # Version
    "BumpType",
    "Version",
    "max_bump",
    "parse_version",
    # Commits
    "BumpDecision",
    "ParsedCommit",
    "calculate_bump",
    "classify_commit",
    "next_version",
    "parse_commits",
    # Changelog
    "ChangelogSection",
    "extract",
    "extract_section",
    "generate_changelog_section",
    "insert_section",
    "iter_sections",
    "list_versions",
    "render_section",
]
