"""Read and write Keep a Changelog style documents.

Version sections are level-2 headings of the form::

    ## [1.2.3] - 2026-01-04

The date is optional, so ``## [Unreleased]`` is a section like any other.
A section's body runs until the next level-2 heading or the end of the
document; ``###`` subheadings belong to the body.

Everything here works on strings. Reading and writing CHANGELOG.md is
left to the caller.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from bumpnotes.core.commits import format_commit_for_changelog, group_commits_by_type
from bumpnotes.exceptions import NotFoundError

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from bumpnotes.core.commits import ParsedCommit
    from bumpnotes.core.version import Version

logger = logging.getLogger(__name__)

SECTION_HEADER = re.compile(r"^##[ \t]+\[(?P<version>[^\]]+)\](?P<rest>.*)$")
LEVEL2_HEADING = re.compile(r"^##(?:[ \t]|$)")
_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")

# Headings used when generating a section from commits, in output order.
TYPE_LABELS = {
    "feat": "### Added",
    "fix": "### Fixed",
    "perf": "### Performance",
    "revert": "### Reverted",
}


@dataclass(frozen=True)
class ChangelogSection:
    """One ``## [version]`` block of a changelog."""

    version: str
    date: str | None
    body: str
    line: int  # zero-based index of the header line


def _trim_blank_lines(lines: list[str]) -> list[str]:
    start, end = 0, len(lines)
    while start < end and not lines[start].strip():
        start += 1
    while end > start and not lines[end - 1].strip():
        end -= 1
    return lines[start:end]


def _section_at(lines: list[str], index: int, match: re.Match[str]) -> ChangelogSection:
    end = index + 1
    while end < len(lines) and not LEVEL2_HEADING.match(lines[end]):
        end += 1
    date = _DATE.search(match.group("rest"))
    return ChangelogSection(
        version=match.group("version").strip(),
        date=date.group(0) if date else None,
        body="\n".join(_trim_blank_lines(lines[index + 1 : end])),
        line=index,
    )


def iter_sections(document: str) -> Iterator[ChangelogSection]:
    """Yield every bracketed level-2 section in document order."""
    lines = document.splitlines()
    for index, line in enumerate(lines):
        match = SECTION_HEADER.match(line)
        if match:
            yield _section_at(lines, index, match)


def list_versions(document: str) -> list[str]:
    """Bracketed header texts in document order, e.g. ``["Unreleased", "1.2.3"]``."""
    return [m.group("version").strip() for m in map(SECTION_HEADER.match, document.splitlines()) if m]


def extract_section(document: str, version: Version | str) -> str:
    """Return the body of the changelog section for ``version``.

    The bracketed header text must equal ``str(version)`` exactly; ``1.0``
    does not match ``1.0.0``. If a version appears more than once, the first
    occurrence wins.

    Args:
        document: Full changelog text
        version: Version to look up

    Returns:
        Section body with surrounding blank lines removed, possibly empty

    Raises:
        NotFoundError: If no section header matches ``version``
    """
    wanted = str(version).strip()
    lines = document.splitlines()
    for index, line in enumerate(lines):
        match = SECTION_HEADER.match(line)
        if match and match.group("version").strip() == wanted:
            logger.debug("Found section %s at line %d", wanted, index + 1)
            return _section_at(lines, index, match).body

    available = list_versions(document)
    raise NotFoundError(
        f"No changelog section for version {wanted}",
        version=wanted,
        available=available,
    )


extract = extract_section


def render_section(version: Version | str, body: str, date: str | None = None) -> str:
    """Render a section header and body, terminated by a blank line."""
    header = f"## [{version}]"
    if date:
        header += f" - {date}"
    body = body.strip("\n")
    if body:
        return f"{header}\n\n{body}\n"
    return f"{header}\n"


def insert_section(document: str, section: str) -> str:
    """Insert a rendered section above the newest released version.

    The title, preamble and any ``[Unreleased]`` section stay on top. With
    no version sections the new one is appended.
    """
    lines = document.splitlines()
    section_lines = section.rstrip("\n").splitlines()

    for index, line in enumerate(lines):
        match = SECTION_HEADER.match(line)
        if match and match.group("version").strip().lower() != "unreleased":
            new_lines = [*lines[:index], *section_lines, "", *lines[index:]]
            return "\n".join(new_lines) + "\n"

    head = _trim_blank_lines(lines)
    if not head:
        return "\n".join(section_lines) + "\n"
    return "\n".join([*head, "", *section_lines]) + "\n"


def generate_changelog_section(
    version: Version | str,
    parsed_commits: Sequence[ParsedCommit],
    *,
    date: str | None = None,
) -> str:
    """Build a changelog section from parsed commits.

    Breaking changes are listed first, then commits grouped by type.
    Types without a heading (chore, test, ...) are left out.

    Returns:
        Rendered section, or an empty string if nothing is worth listing
    """
    lines: list[str] = []

    breaking = [pc for pc in parsed_commits if pc.is_breaking]
    if breaking:
        lines.extend(["### Breaking Changes", ""])
        lines.extend(format_commit_for_changelog(pc) for pc in breaking)
        lines.append("")

    grouped = group_commits_by_type(pc for pc in parsed_commits if not pc.is_breaking)
    for commit_type, label in TYPE_LABELS.items():
        commits_of_type = grouped.get(commit_type, [])
        if commits_of_type:
            lines.extend([label, ""])
            lines.extend(format_commit_for_changelog(pc) for pc in commits_of_type)
            lines.append("")

    if not lines:
        return ""

    if date is None:
        date = datetime.now(UTC).strftime("%Y-%m-%d")
    return render_section(version, "\n".join(lines), date)
