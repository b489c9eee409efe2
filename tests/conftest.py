"""Shared fixtures for bumpnotes tests."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

import pytest

from bumpnotes.vcs.git import Commit

if TYPE_CHECKING:
    from pathlib import Path


def make_commit(sha: str, message: str) -> Commit:
    return Commit(
        sha=sha,
        message=message,
        author_name="Test",
        author_email="test@test.com",
        date=datetime(2026, 1, 4, 12, 0, 0),
    )


@pytest.fixture
def feat_commit() -> Commit:
    return make_commit("feat1234567890", "feat: add user authentication")


@pytest.fixture
def fix_commit() -> Commit:
    return make_commit("fix1234567890", "fix(core): handle empty config")


@pytest.fixture
def breaking_commit() -> Commit:
    return make_commit("break123456789", "feat(api)!: drop v1 endpoints")


@pytest.fixture
def sample_commits(feat_commit: Commit, fix_commit: Commit, breaking_commit: Commit) -> list[Commit]:
    return [
        feat_commit,
        fix_commit,
        make_commit("docs1234567890", "docs: update readme"),
        make_commit("chore123456789", "chore: bump dev dependencies"),
        breaking_commit,
    ]


@pytest.fixture
def sample_changelog() -> str:
    return """\
# Changelog

All notable changes to this project are documented in this file.

## [Unreleased]

- Work in progress

## [1.2.3] - 2026-01-04

Added:
- X

## [1.2.2] - 2025-12-01

### Fixed

- Crash on empty input

## [1.0.0] - 2025-06-01

Initial release.
"""


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """A project directory with a pyproject.toml and bumpnotes config."""
    (tmp_path / "pyproject.toml").write_text(
        """\
[project]
name = "test-project"
version = "1.0.0"  # managed by bumpnotes
description = "A test project"

[project.urls]
Homepage = "https://example.com"

[tool.bumpnotes]
allow_dirty = true

[tool.bumpnotes.commits]
types_patch = ["fix", "perf"]
""",
        encoding="utf-8",
    )
    return tmp_path
