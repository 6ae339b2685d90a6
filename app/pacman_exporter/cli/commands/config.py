"""Config command implementation.

Shows and initializes the exporter configuration file.
"""

from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from pacman_exporter.cli.types import resolve_config
from pacman_exporter.config import ConfigError, get_default_config, save_config
from pacman_exporter.core.paths import get_config_path
from pacman_exporter.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Show or create the exporter configuration.",
    no_args_is_help=True,
)


@app.command()
def show(
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to a TOML config file.",
        ),
    ] = None,
) -> None:
    """Show the effective configuration."""
    try:
        config = resolve_config(config_path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    path = config_path or get_config_path()
    table = Table(title="Configuration", header_style="header")
    table.add_column("Setting", no_wrap=True)
    table.add_column("Value", style="info")
    for key, value in config.model_dump().items():
        table.add_row(key, escape(str(value)))

    console.print(table)
    if path.exists():
        print_info(f"Loaded from {path}")
    else:
        print_info(f"No config file at {path}; using defaults")


@app.command()
def init(
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Where to write the config file.",
        ),
    ] = None,
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite an existing config file."),
    ] = False,
) -> None:
    """Write a config file with default settings."""
    path = config_path or get_config_path()
    if path.exists() and not force:
        print_error(f"Config already exists: {path} (use --force to overwrite)")
        raise typer.Exit(code=1)

    try:
        saved = save_config(get_default_config(), path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Wrote default config to {saved}")
