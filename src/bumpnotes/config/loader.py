"""Load configuration from pyproject.toml."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from bumpnotes.config.models import BumpnotesConfig
from bumpnotes.exceptions import ConfigNotFoundError, ConfigValidationError

logger = logging.getLogger(__name__)

TOOL_SECTION = "bumpnotes"


def find_pyproject_toml(start: Path | None = None) -> Path:
    """Find the nearest pyproject.toml, walking up from ``start``.

    Args:
        start: Directory to start from (defaults to the current directory)

    Returns:
        Path to pyproject.toml

    Raises:
        ConfigNotFoundError: If no pyproject.toml exists in any parent
    """
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            logger.debug("Using %s", candidate)
            return candidate
    raise ConfigNotFoundError(f"No pyproject.toml found in {current} or its parents")


def load_pyproject_toml(path: Path) -> dict[str, Any]:
    """Parse a pyproject.toml file.

    Raises:
        ConfigNotFoundError: If the file does not exist
        ConfigValidationError: If the file is not valid TOML
    """
    if not path.is_file():
        raise ConfigNotFoundError(f"File not found: {path}")
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigValidationError(f"Invalid TOML in {path}: {e}") from e


def extract_bumpnotes_config(pyproject: dict[str, Any]) -> dict[str, Any]:
    """Return the ``[tool.bumpnotes]`` table, or an empty dict."""
    return pyproject.get("tool", {}).get(TOOL_SECTION, {})


def load_config(path: Path | None = None) -> BumpnotesConfig:
    """Load and validate configuration for the project at ``path``.

    Args:
        path: Project directory or pyproject.toml path

    Returns:
        Validated configuration (defaults when no section is present)

    Raises:
        ConfigNotFoundError: If no pyproject.toml is found
        ConfigValidationError: If the configuration is invalid
    """
    pyproject_path = _resolve(path)
    data = extract_bumpnotes_config(load_pyproject_toml(pyproject_path))
    try:
        return BumpnotesConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid [tool.{TOOL_SECTION}] configuration:\n{e}") from e


def get_project_name(path: Path | None = None) -> str:
    """Get ``[project].name`` from pyproject.toml."""
    return _get_project_field(path, "name")


def get_project_version(path: Path | None = None) -> str:
    """Get ``[project].version`` (or ``[tool.poetry].version``) from pyproject.toml."""
    return _get_project_field(path, "version")


def _get_project_field(path: Path | None, field: str) -> str:
    pyproject_path = _resolve(path)
    data = load_pyproject_toml(pyproject_path)

    value = data.get("project", {}).get(field)
    if value is None:
        value = data.get("tool", {}).get("poetry", {}).get(field)
    if not isinstance(value, str):
        raise ConfigValidationError(f"No project {field} found in {pyproject_path}")
    return value


def _resolve(path: Path | None) -> Path:
    if path is None:
        return find_pyproject_toml()
    if path.is_dir():
        return find_pyproject_toml(path)
    return path
