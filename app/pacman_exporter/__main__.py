"""Allow running as ``python -m pacman_exporter``."""

from pacman_exporter.cli.main import app

app()
