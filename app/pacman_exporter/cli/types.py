"""Shared helpers for CLI commands.

Resolves the effective configuration from the config file and
command-line overrides.
"""

from pathlib import Path
from typing import Any

from pydantic import ValidationError

from pacman_exporter.config import ConfigError, ConfigNotFoundError, ExporterConfig, load_config
from pacman_exporter.scanners.pacman import PacmanReader


def resolve_config(config_path: Path | None = None, **overrides: Any) -> ExporterConfig:
    """Build the effective configuration.

    An explicitly given config file must exist. The default config file
    is optional and falls back to built-in defaults when missing.
    Overrides that are None are ignored.

    Args:
        config_path: Explicit config file path, or None for the default.
        **overrides: Values from command-line options or environment.

    Returns:
        Validated ExporterConfig.

    Raises:
        ConfigError: If the config file or an override is invalid.
    """
    try:
        config = load_config(config_path)
    except ConfigNotFoundError:
        if config_path is not None:
            raise
        config = ExporterConfig()

    updates = {key: value for key, value in overrides.items() if value is not None}
    if not updates:
        return config
    try:
        return ExporterConfig.model_validate({**config.model_dump(), **updates})
    except ValidationError as e:
        raise ConfigError(f"Invalid option value: {e}") from e


def build_reader(config: ExporterConfig) -> PacmanReader:
    """Create a snapshot reader from the configuration."""
    return PacmanReader(binary=config.pacman_path, timeout=config.command_timeout)
