"""Parsers turning raw package manager output into records."""

from pacman_exporter.parsers.pacman import iter_complete_lines, parse_installed, parse_upgrades

__all__ = ["iter_complete_lines", "parse_installed", "parse_upgrades"]
