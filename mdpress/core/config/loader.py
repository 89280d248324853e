"""
Configuration loader — reads mdpress.yml into a ``PressConfig``.

The file is optional.  Without one every setting takes its default;
with one, the YAML is validated against the Pydantic models and any
problem is reported as a ``ConfigError``.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from mdpress.core.models.settings import PressConfig

logger = logging.getLogger(__name__)

CONFIG_FILE = "mdpress.yml"


class ConfigError(Exception):
    """Raised when the configuration file is unreadable or invalid."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for mdpress.yml from ``start_dir`` (default: cwd) upwards."""
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def load_config(path: Path | None = None, *, search: bool = True) -> PressConfig:
    """Load and validate the configuration.

    Args:
        path: Explicit config path.  Must exist when given.
        search: When no path is given, look for mdpress.yml upwards
            from the working directory.

    Returns:
        The validated config, or defaults when no file is found.

    Raises:
        ConfigError: Missing explicit file, unreadable file, invalid
            YAML, or a schema violation.
    """
    if path is None:
        path = find_config_file() if search else None
        if path is None:
            logger.debug("No %s found, using defaults", CONFIG_FILE)
            return PressConfig()
    elif not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        config = PressConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e

    logger.info("Loaded config from %s", path)
    return config
