"""pacman-exporter - Prometheus metrics for Arch Linux package state."""

__version__ = "0.1.0"
