"""bumpnotes - changelog extraction and conventional-commit version bumps."""

from __future__ import annotations

from bumpnotes.core.changelog import extract, extract_section
from bumpnotes.core.commits import BumpDecision, next_version
from bumpnotes.core.version import BumpType, Version, parse_version
from bumpnotes.exceptions import BumpnotesError, InvalidVersionError, NotFoundError

__version__ = "0.1.0"

__all__ = [
    "BumpDecision",
    "BumpType",
    "BumpnotesError",
    "InvalidVersionError",
    "NotFoundError",
    "Version",
    "__version__",
    "extract",
    "extract_section",
    "next_version",
    "parse_version",
]
