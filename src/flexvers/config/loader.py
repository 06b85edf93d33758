"""Configuration loading.

The configuration lives in a JSON file (``.semver.json`` by default) at
the root of the repository being released.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from flexvers.config.models import DEFAULT_CONFIG_FILE, FlexversConfig
from flexvers.exceptions import ConfigNotFoundError, ConfigValidationError

logger = logging.getLogger(__name__)


def resolve_config_path(path: Path | None = None, repository: Path | None = None) -> Path:
    """Resolve the configuration file location.

    Relative paths are taken relative to the repository directory.

    Args:
        path: Configuration file path; defaults to ``.semver.json``
        repository: Repository directory; defaults to the current directory

    Returns:
        Absolute path to the configuration file
    """
    base = repository if repository is not None else Path.cwd()
    config_path = path if path is not None else Path(DEFAULT_CONFIG_FILE)
    if not config_path.is_absolute():
        config_path = base / config_path
    return config_path


def load_json(path: Path) -> dict[str, Any]:
    """Read a JSON object from disk.

    Raises:
        ConfigNotFoundError: If the file doesn't exist
        ConfigValidationError: If the file isn't a JSON object
    """
    if not path.is_file():
        raise ConfigNotFoundError(f"Configuration file not found: {path}")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigValidationError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigValidationError(f"Expected a JSON object in {path}")
    return data


def load_config(path: Path | None = None, repository: Path | None = None) -> FlexversConfig:
    """Load and validate the configuration file.

    Args:
        path: Configuration file path; defaults to ``.semver.json``
        repository: Directory relative paths are resolved against

    Returns:
        Validated configuration

    Raises:
        ConfigNotFoundError: If the file doesn't exist
        ConfigValidationError: If the content is invalid
    """
    config_path = resolve_config_path(path, repository)
    data = load_json(config_path)

    try:
        config = FlexversConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid configuration in {config_path}:\n{e}") from e

    logger.info("Loaded configuration from %s", config_path)
    return config
