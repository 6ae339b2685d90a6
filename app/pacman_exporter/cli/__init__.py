"""Command-line interface for pacman-exporter."""
