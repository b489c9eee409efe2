"""Command line interface for bumpnotes."""

from __future__ import annotations

from bumpnotes.cli.app import app, main

__all__ = ["app", "main"]
