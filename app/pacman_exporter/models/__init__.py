"""Data models for pacman-exporter.

This module exports the record and snapshot types used throughout the application.
"""

from pacman_exporter.models.package import (
    IgnoredUpgrade,
    InstalledPackage,
    UpgradeCandidate,
    UpgradeSet,
)
from pacman_exporter.models.snapshot import QueryKind, Snapshot

__all__ = [
    "IgnoredUpgrade",
    "InstalledPackage",
    "QueryKind",
    "Snapshot",
    "UpgradeCandidate",
    "UpgradeSet",
]
