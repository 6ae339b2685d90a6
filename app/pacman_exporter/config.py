"""Exporter configuration and settings.

Configuration is stored in ~/.config/pacman-exporter/config.toml. Every
setting can also be given on the command line or through environment
variables, which take precedence over the file.
"""

import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated, Literal

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from pacman_exporter.core.paths import get_config_path
from pacman_exporter.scanners.pacman import DEFAULT_PACMAN_PATH, DEFAULT_TIMEOUT
from pacman_exporter.server import (
    DEFAULT_LISTEN_ADDRESS,
    DEFAULT_METRICS_PATH,
    DEFAULT_REQUEST_TIMEOUT,
    ListenAddressError,
    parse_listen_address,
)

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


class ExporterConfig(BaseModel):
    """Configuration for the pacman exporter.

    Attributes:
        listen_address: host:port the HTTP listener binds to.
        metrics_path: Path of the metrics endpoint.
        pacman_path: Path to the pacman binary.
        command_timeout: Timeout for each pacman invocation, in seconds.
        request_timeout: Idle timeout for HTTP connections, in seconds.
        upgrades_only: Expose only the upgrade metric.
        log_level: Log level for the exporter process.
    """

    model_config = ConfigDict(extra="forbid")

    listen_address: Annotated[
        str,
        Field(min_length=1, description="Address to listen on for HTTP requests"),
    ] = DEFAULT_LISTEN_ADDRESS
    metrics_path: Annotated[
        str,
        Field(pattern=r"^/", description="Path under which to expose metrics"),
    ] = DEFAULT_METRICS_PATH
    pacman_path: Annotated[
        str,
        Field(min_length=1, description="Path to the pacman binary"),
    ] = DEFAULT_PACMAN_PATH
    command_timeout: Annotated[
        float,
        Field(ge=1, le=600, description="Timeout per pacman invocation (seconds)"),
    ] = DEFAULT_TIMEOUT
    request_timeout: Annotated[
        float,
        Field(ge=1, le=300, description="Seconds an idle HTTP connection is kept open"),
    ] = DEFAULT_REQUEST_TIMEOUT
    upgrades_only: Annotated[
        bool,
        Field(description="Expose only archlinux_pacman_upgrade"),
    ] = False
    log_level: Annotated[
        LogLevel,
        Field(description="Log level"),
    ] = "INFO"

    @field_validator("listen_address")
    @classmethod
    def validate_listen_address(cls, v: str) -> str:
        """Reject addresses that are not host:port."""
        try:
            parse_listen_address(v)
        except ListenAddressError as e:
            raise ValueError(str(e)) from e
        return v


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when the config file is not found."""


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""


def load_config(path: Path | None = None) -> ExporterConfig:
    """Load exporter configuration from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated ExporterConfig object.

    Raises:
        ConfigNotFoundError: If the config file doesn't exist.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the content doesn't match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        raise ConfigNotFoundError(f"Config not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    try:
        return ExporterConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config content: {e}") from e


def save_config(config: ExporterConfig, path: Path | None = None) -> Path:
    """Save exporter configuration to a TOML file.

    The file is written to a temporary file first and then moved into
    place with os.replace().

    Args:
        config: The ExporterConfig object to save.
        path: Path to save the config. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()

    tmp_path: Path | None = None
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        # Write atomically using a temporary file in the same directory
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(config.model_dump(), f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path


def get_default_config() -> ExporterConfig:
    """Create a default ExporterConfig."""
    return ExporterConfig()
