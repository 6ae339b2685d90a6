"""CLI commands for pacman-exporter.

This package contains all subcommand implementations.
"""

from pacman_exporter.cli.commands import config, query, serve

__all__ = ["config", "query", "serve"]
