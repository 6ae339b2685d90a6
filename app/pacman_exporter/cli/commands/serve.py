"""Serve command implementation.

Runs the HTTP listener exposing pacman metrics.
"""

from pathlib import Path
from typing import Annotated

import typer
from prometheus_client import CollectorRegistry, GCCollector, PlatformCollector, ProcessCollector

from pacman_exporter.cli.types import build_reader, resolve_config
from pacman_exporter.collector import PacmanCollector
from pacman_exporter.config import ConfigError
from pacman_exporter.core.log import setup_logging
from pacman_exporter.server import ListenAddressError, serve
from pacman_exporter.utils.formatting import print_error, print_warning

app = typer.Typer(
    help="Serve package metrics over HTTP.",
    invoke_without_command=True,
)


def build_registry(collector: PacmanCollector) -> CollectorRegistry:
    """Create a registry with the pacman collector and process metrics.

    Args:
        collector: The pacman collector to register.

    Returns:
        Registry ready to be exposed.
    """
    registry = CollectorRegistry()
    ProcessCollector(registry=registry)
    PlatformCollector(registry=registry)
    GCCollector(registry=registry)
    registry.register(collector)
    return registry


@app.callback(invoke_without_command=True)
def serve_metrics(
    ctx: typer.Context,
    listen_address: Annotated[
        str | None,
        typer.Option(
            "--listen-address",
            "-l",
            envvar="PACMAN_EXPORTER_LISTEN_ADDRESS",
            help="The address to listen on for HTTP requests (host:port).",
        ),
    ] = None,
    metrics_path: Annotated[
        str | None,
        typer.Option(
            "--metrics-path",
            envvar="PACMAN_EXPORTER_METRICS_PATH",
            help="Path under which to expose metrics.",
        ),
    ] = None,
    pacman_path: Annotated[
        str | None,
        typer.Option(
            "--pacman",
            envvar="PACMAN_EXPORTER_PACMAN_PATH",
            help="Path to the pacman binary.",
        ),
    ] = None,
    timeout: Annotated[
        float | None,
        typer.Option(
            "--timeout",
            "-t",
            envvar="PACMAN_EXPORTER_TIMEOUT",
            help="Timeout in seconds for each pacman invocation.",
        ),
    ] = None,
    request_timeout: Annotated[
        float | None,
        typer.Option(
            "--request-timeout",
            envvar="PACMAN_EXPORTER_REQUEST_TIMEOUT",
            help="Seconds an idle HTTP connection is kept open.",
        ),
    ] = None,
    upgrades_only: Annotated[
        bool | None,
        typer.Option(
            "--upgrades-only/--all-metrics",
            envvar="PACMAN_EXPORTER_UPGRADES_ONLY",
            help="Expose only the upgrade metric.",
        ),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option(
            "--log-level",
            envvar="PACMAN_EXPORTER_LOG_LEVEL",
            help="Log level: debug, info, warning or error.",
        ),
    ] = None,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to a TOML config file.",
        ),
    ] = None,
) -> None:
    """Serve pacman package metrics for Prometheus.

    Every scrape runs pacman -Q and pacman -Qu and exposes one sample
    per package. Settings from the command line override the config file.

    Examples:
        pacman-exporter serve                           # Listen on :9101
        pacman-exporter serve -l 127.0.0.1:9101         # Listen on localhost only
        pacman-exporter serve --upgrades-only           # Upgrade metric only
    """
    if ctx.invoked_subcommand is not None:
        return

    try:
        config = resolve_config(
            config_path,
            listen_address=listen_address,
            metrics_path=metrics_path,
            pacman_path=pacman_path,
            command_timeout=timeout,
            request_timeout=request_timeout,
            upgrades_only=upgrades_only,
            log_level=log_level.upper() if log_level else None,
        )
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    verbose = bool(ctx.obj and ctx.obj.get("verbose"))
    setup_logging("DEBUG" if verbose else config.log_level)

    reader = build_reader(config)
    if not reader.is_available():
        print_warning(f"pacman not found at {config.pacman_path}; metrics will be empty.")

    registry = build_registry(PacmanCollector(reader, upgrades_only=config.upgrades_only))

    try:
        serve(registry, config.listen_address, config.metrics_path, config.request_timeout)
    except (ListenAddressError, OSError) as e:
        print_error(f"Cannot listen on {config.listen_address}: {e}")
        raise typer.Exit(code=1) from e
