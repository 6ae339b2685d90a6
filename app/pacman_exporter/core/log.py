"""Logging setup for the exporter process."""

import logging

from rich.logging import RichHandler

from pacman_exporter.utils.formatting import err_console

LOG_FORMAT = "%(name)s: %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Route all log records to stderr through Rich.

    Args:
        level: Root log level name (e.g., "INFO", "DEBUG").
    """
    handler = RichHandler(console=err_console, show_path=False, rich_tracebacks=True)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger()
    for existing in list(root.handlers):
        if isinstance(existing, RichHandler):
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level.upper())
