"""
Shared helpers for CLI commands.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import NoReturn

import click
from pydantic import ValidationError

from mdpress.core.models.settings import PressConfig


def load_config_or_exit(ctx: click.Context) -> PressConfig:
    """Load mdpress.yml (or defaults) for the current invocation."""
    from mdpress.core.config.loader import ConfigError, load_config

    config_path: Path | None = ctx.obj.get("config_path")
    try:
        return load_config(config_path)
    except ConfigError as e:
        fail(str(e))


def apply_overrides(config: PressConfig, section: str, **values: object) -> PressConfig:
    """Apply CLI option overrides to one config section, or exit on bad values."""
    try:
        return config.with_overrides(section, **values)
    except ValidationError as e:
        fail(f"Invalid option: {e}")


def fail(message: str) -> NoReturn:
    """Print an error and exit with status 1."""
    click.secho(f"❌ {message}", fg="red")
    sys.exit(1)
