"""Configuration management for bumpnotes."""

from __future__ import annotations

from bumpnotes.config.loader import load_config
from bumpnotes.config.models import (
    BumpnotesConfig,
    ChangelogConfig,
    CommitsConfig,
    VersionConfig,
)

__all__ = [
    "BumpnotesConfig",
    "ChangelogConfig",
    "CommitsConfig",
    "VersionConfig",
    "load_config",
]
