"""Main CLI application entry point.

Defines the Typer application and global options.
"""

from typing import Annotated

import typer

from pacman_exporter import __version__
from pacman_exporter.cli.commands import config, query, serve

# Create main Typer app
app = typer.Typer(
    name="pacman-exporter",
    help="Prometheus exporter for Arch Linux package state.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"pacman-exporter version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable debug logging.",
        ),
    ] = False,
) -> None:
    """pacman-exporter - Expose installed packages and pending upgrades to Prometheus."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


# Register commands
app.add_typer(serve.app, name="serve")
app.add_typer(query.app, name="query")
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
