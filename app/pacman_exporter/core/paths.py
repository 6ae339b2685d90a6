"""XDG-compliant path management for pacman-exporter.

XDG default:
- Config: ~/.config/pacman-exporter/
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "pacman-exporter"


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/pacman-exporter/ (or XDG_CONFIG_HOME/pacman-exporter/).
    """
    base = os.environ.get("XDG_CONFIG_HOME")
    if base:
        return Path(base) / APP_NAME
    return Path.home() / ".config" / APP_NAME


def get_config_path() -> Path:
    """Get the default config file path.

    Returns:
        Path to ~/.config/pacman-exporter/config.toml.
    """
    return get_config_dir() / "config.toml"
