"""Query command implementation.

Runs one snapshot-and-parse cycle and prints the decoded records.
"""

import json
from dataclasses import asdict
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer

from pacman_exporter.cli.types import build_reader, resolve_config
from pacman_exporter.config import ConfigError
from pacman_exporter.core.log import setup_logging
from pacman_exporter.models.package import InstalledPackage, UpgradeSet
from pacman_exporter.models.snapshot import Snapshot
from pacman_exporter.parsers.pacman import parse_installed, parse_upgrades
from pacman_exporter.utils.formatting import (
    console,
    create_installed_table,
    create_upgrade_table,
    print_error,
    print_warning,
)

app = typer.Typer(
    help="Show what the exporter would report.",
    invoke_without_command=True,
)


class OutputFormat(str, Enum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


@app.callback(invoke_without_command=True)
def query_packages(
    ctx: typer.Context,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format: table or json.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
    upgrades_only: Annotated[
        bool | None,
        typer.Option(
            "--upgrades-only/--all-metrics",
            help="Only query available upgrades.",
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
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to a TOML config file.",
        ),
    ] = None,
) -> None:
    """Query pacman once and display the decoded records.

    Examples:
        pacman-exporter query                   # Tables of installed and upgrades
        pacman-exporter query --format json     # Output as JSON
    """
    if ctx.invoked_subcommand is not None:
        return

    try:
        config = resolve_config(config_path, pacman_path=pacman_path, upgrades_only=upgrades_only)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    verbose = bool(ctx.obj and ctx.obj.get("verbose"))
    setup_logging("DEBUG" if verbose else config.log_level)

    reader = build_reader(config)
    snapshots: list[Snapshot] = []

    installed: list[InstalledPackage] = []
    if not config.upgrades_only:
        snapshot = reader.read_installed_snapshot()
        snapshots.append(snapshot)
        installed = parse_installed(snapshot.output)

    snapshot = reader.read_upgrade_snapshot()
    snapshots.append(snapshot)
    upgrade_set = parse_upgrades(snapshot.output)

    failed = [s for s in snapshots if not s.success]

    if output_format == OutputFormat.JSON:
        result = _to_dict(installed, upgrade_set, failed, config.upgrades_only)
        console.print_json(json.dumps(result))
    else:
        for s in failed:
            print_warning(f"{s.kind.value} query failed: {s.error}")
        if not config.upgrades_only:
            console.print(create_installed_table(installed))
        console.print(create_upgrade_table(upgrade_set))
        console.print(
            f"\n[muted]{len(installed)} installed, {len(upgrade_set.upgrades)} upgradable, "
            f"{len(upgrade_set.ignored)} ignored[/]"
        )

    if len(failed) == len(snapshots):
        raise typer.Exit(code=1)


def _to_dict(
    installed: list[InstalledPackage],
    upgrade_set: UpgradeSet,
    failed: list[Snapshot],
    upgrades_only: bool,
) -> dict[str, object]:
    """Convert query results to a JSON-serializable dictionary."""
    result: dict[str, object] = {
        "upgrades": [asdict(pkg) for pkg in upgrade_set.upgrades],
        "errors": {s.kind.value: s.error for s in failed},
    }
    if not upgrades_only:
        result["installed"] = [asdict(pkg) for pkg in installed]
        result["ignored"] = [asdict(pkg) for pkg in upgrade_set.ignored]
    return result
