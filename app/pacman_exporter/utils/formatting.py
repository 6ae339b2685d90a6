"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.theme import Theme

if TYPE_CHECKING:
    from pacman_exporter.models.package import InstalledPackage, UpgradeSet

THEME = Theme(
    {
        "info": "#0ec1c8",
        "success": "#03b971",
        "warning": "#f5b332",
        "error": "bold #f53263",
        "muted": "#b2bec3",
        "header": "bold #69B9A1",
        "ignored": "#d44ebc",
    }
)

# Shared console instances
console = Console(theme=THEME)
err_console = Console(theme=THEME, stderr=True)


def create_installed_table(installed: list[InstalledPackage]) -> Table:
    """Create a table listing installed packages.

    Args:
        installed: Records to display.

    Returns:
        Rich Table with one row per package.
    """
    table = Table(title="Installed Packages", header_style="header")
    table.add_column("Package", no_wrap=True)
    table.add_column("Version", style="muted")
    for pkg in installed:
        table.add_row(escape(pkg.name), escape(pkg.installed_version))
    return table


def create_upgrade_table(upgrade_set: UpgradeSet) -> Table:
    """Create a table listing available upgrades.

    Ignored upgrades are marked in their own column.

    Args:
        upgrade_set: Decoded upgrade records.

    Returns:
        Rich Table with one row per upgrade candidate.
    """
    ignored = {(p.name, p.installed_version, p.upgrade_version) for p in upgrade_set.ignored}

    table = Table(title="Available Upgrades", header_style="header")
    table.add_column("Package", no_wrap=True)
    table.add_column("Installed", style="muted")
    table.add_column("Available", style="info")
    table.add_column("", justify="center")
    for pkg in upgrade_set.upgrades:
        key = (pkg.name, pkg.installed_version, pkg.upgrade_version)
        marker = "[ignored]ignored[/]" if key in ignored else ""
        table.add_row(
            escape(pkg.name), escape(pkg.installed_version), escape(pkg.upgrade_version), marker
        )
    return table


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/]")
