"""Semantic version parsing and bumping.

Versions are plain ``MAJOR.MINOR.PATCH`` triples. Pre-release and build
metadata are not supported; anything that is not three non-negative
integers without leading zeros is rejected.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum

from bumpnotes.exceptions import InvalidVersionError

VERSION_PATTERN = re.compile(r"^(0|[1-9][0-9]*)\.(0|[1-9][0-9]*)\.(0|[1-9][0-9]*)$")


class BumpType(StrEnum):
    """Kind of version increment, from most to least severe."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"
    NONE = "none"

    @property
    def severity(self) -> int:
        """Numeric rank used to pick the strongest bump (NONE is 0)."""
        return _SEVERITY[self]


_SEVERITY = {
    BumpType.NONE: 0,
    BumpType.PATCH: 1,
    BumpType.MINOR: 2,
    BumpType.MAJOR: 3,
}


def max_bump(a: BumpType, b: BumpType) -> BumpType:
    """Return the more severe of two bump types."""
    return a if a.severity >= b.severity else b


@dataclass(frozen=True, order=True)
class Version:
    """A ``MAJOR.MINOR.PATCH`` version, ordered component-wise."""

    major: int
    minor: int
    patch: int

    def __post_init__(self) -> None:
        for name in ("major", "minor", "patch"):
            value = getattr(self, name)
            # bool is an int subclass but never a valid component
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise InvalidVersionError(
                    f"Version component {name} must be a non-negative integer, got {value!r}"
                )

    @classmethod
    def parse(cls, text: str) -> Version:
        """Parse a canonical version string.

        Args:
            text: Version string such as ``"1.2.3"``

        Returns:
            Parsed Version

        Raises:
            InvalidVersionError: If the string is not MAJOR.MINOR.PATCH
        """
        if not isinstance(text, str):
            raise InvalidVersionError(f"Expected a version string, got {type(text).__name__}")

        match = VERSION_PATTERN.match(text.strip())
        if match is None:
            raise InvalidVersionError(
                f"Invalid version {text!r}: expected MAJOR.MINOR.PATCH",
                value=text,
            )
        major, minor, patch = (int(part) for part in match.groups())
        return cls(major, minor, patch)

    def bump(self, bump_type: BumpType) -> Version:
        """Return the version that follows this one for ``bump_type``.

        A major bump always increments the major component, including
        from ``0.y.z``.
        """
        if bump_type == BumpType.MAJOR:
            return Version(self.major + 1, 0, 0)
        if bump_type == BumpType.MINOR:
            return Version(self.major, self.minor + 1, 0)
        if bump_type == BumpType.PATCH:
            return Version(self.major, self.minor, self.patch + 1)
        return self

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


def parse_version(text: str | Version) -> Version:
    """Coerce a string or Version into a Version."""
    if isinstance(text, Version):
        return text
    return Version.parse(text)
