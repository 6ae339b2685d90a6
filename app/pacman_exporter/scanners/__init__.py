"""Package manager readers.

This module exports the reader used to capture pacman snapshots.
"""

from pacman_exporter.scanners.pacman import DEFAULT_PACMAN_PATH, DEFAULT_TIMEOUT, PacmanReader

__all__ = ["DEFAULT_PACMAN_PATH", "DEFAULT_TIMEOUT", "PacmanReader"]
