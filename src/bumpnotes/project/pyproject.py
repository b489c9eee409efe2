"""Write the computed version back into project files.

pyproject.toml is edited with a targeted regex rather than a TOML
round-trip so that comments and formatting survive.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from bumpnotes.config.loader import find_pyproject_toml
from bumpnotes.exceptions import ProjectError, VersionNotFoundError

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

# Tables that may carry the version, in lookup order.
VERSION_TABLES = (r"project", r"tool\.poetry")

_VERSION_LINE = re.compile(r'^(version\s*=\s*)["\']([^"\']+)["\']', re.MULTILINE)
_DUNDER_VERSION = r'^(__version__\s*=\s*)["\'][^"\']+["\']'


def _table_pattern(table: str) -> re.Pattern[str]:
    # The table body runs up to the next table header or end of file.
    return re.compile(rf"^\[{table}\][^\n]*\n.*?(?=^\[|\Z)", re.MULTILINE | re.DOTALL)


def _resolve(path: Path | None) -> Path:
    if path is None:
        return find_pyproject_toml()
    if path.is_dir():
        return find_pyproject_toml(path)
    return path


def get_pyproject_version(path: Path | None = None) -> str:
    """Read the version from ``[project]`` or ``[tool.poetry]``.

    Raises:
        VersionNotFoundError: If neither table declares a version
    """
    pyproject_path = _resolve(path)
    content = pyproject_path.read_text(encoding="utf-8")

    for table in VERSION_TABLES:
        section = _table_pattern(table).search(content)
        if section:
            match = _VERSION_LINE.search(section.group(0))
            if match:
                return match.group(2)

    raise VersionNotFoundError(
        f"Could not find version in {pyproject_path}. "
        "Expected [project].version or [tool.poetry].version."
    )


def update_pyproject_version(path: Path | None, new_version: str) -> Path:
    """Set the version in pyproject.toml.

    Args:
        path: pyproject.toml or a directory to search from
        new_version: Version string to write

    Returns:
        Path of the updated file

    Raises:
        VersionNotFoundError: If no version field exists
        ProjectError: If the file already has ``new_version``
    """
    pyproject_path = _resolve(path)
    content = pyproject_path.read_text(encoding="utf-8")

    for table in VERSION_TABLES:
        section = _table_pattern(table).search(content)
        if not section:
            continue
        body, count = _VERSION_LINE.subn(rf'\g<1>"{new_version}"', section.group(0), count=1)
        if count == 0:
            continue
        if body == section.group(0):
            raise ProjectError(f"Version in {pyproject_path} is already {new_version}")
        content = content[: section.start()] + body + content[section.end() :]
        pyproject_path.write_text(content, encoding="utf-8")
        logger.debug("Set version %s in %s", new_version, pyproject_path)
        return pyproject_path

    raise VersionNotFoundError(
        f"Could not find version to update in {pyproject_path}. "
        "Expected [project].version or [tool.poetry].version."
    )


def get_version_from_file(file_path: Path, pattern: str | None = None) -> str:
    """Read ``__version__`` (or a custom pattern's first group) from a file.

    Raises:
        ProjectError: If the file does not exist
        VersionNotFoundError: If the pattern does not match
    """
    if not file_path.is_file():
        raise ProjectError(f"Version file not found: {file_path}")

    content = file_path.read_text(encoding="utf-8")
    patterns = [pattern] if pattern else [
        r'^__version__\s*=\s*["\']([^"\']+)["\']',
        r'^VERSION\s*=\s*["\']([^"\']+)["\']',
    ]
    for pat in patterns:
        match = re.search(pat, content, re.MULTILINE)
        if match:
            return match.group(1)

    raise VersionNotFoundError(f"Could not find version pattern in {file_path}")


def update_version_file(file_path: Path, new_version: str, pattern: str | None = None) -> None:
    """Rewrite ``__version__ = "..."`` (or a custom pattern) in a file.

    A custom pattern must capture everything before the quoted version in
    group 1.
    """
    if not file_path.is_file():
        raise ProjectError(f"Version file not found: {file_path}")

    content = file_path.read_text(encoding="utf-8")
    new_content, count = re.subn(
        pattern or _DUNDER_VERSION,
        rf'\g<1>"{new_version}"',
        content,
        count=1,
        flags=re.MULTILINE,
    )
    if count == 0:
        raise VersionNotFoundError(f"Could not find version pattern in {file_path}")

    file_path.write_text(new_content, encoding="utf-8")
