"""Pacman snapshot reader.

Runs the two pacman queries the exporter needs and captures their raw
output. This is the only module that talks to the package manager.
"""

import logging
import subprocess

from pacman_exporter.models.snapshot import QueryKind, Snapshot
from pacman_exporter.utils.shell import CommandResult, command_exists, run_command

logger = logging.getLogger(__name__)

DEFAULT_PACMAN_PATH = "/usr/bin/pacman"
DEFAULT_TIMEOUT = 30.0

_QUERY_ARGS: dict[QueryKind, list[str]] = {
    QueryKind.INSTALLED: ["-Q"],
    QueryKind.UPGRADES: ["-Qu"],
}


class PacmanReader:
    """Reader for pacman's installed and upgradable package lists.

    Failures never raise: they produce a Snapshot carrying the cause and
    whatever output was captured, so one bad query degrades the metrics
    instead of failing the scrape.

    Example:
        >>> reader = PacmanReader()
        >>> snapshot = reader.read_installed_snapshot()
        >>> if not snapshot.success:
        ...     print(snapshot.error)
    """

    def __init__(
        self,
        binary: str = DEFAULT_PACMAN_PATH,
        timeout: float | None = DEFAULT_TIMEOUT,
    ) -> None:
        self.binary = binary
        self.timeout = timeout

    def is_available(self) -> bool:
        """Check if the configured pacman binary can be found."""
        return command_exists(self.binary)

    def read_installed_snapshot(self) -> Snapshot:
        """Capture ``pacman -Q`` output."""
        return self._read(QueryKind.INSTALLED)

    def read_upgrade_snapshot(self) -> Snapshot:
        """Capture ``pacman -Qu`` output."""
        return self._read(QueryKind.UPGRADES)

    def _read(self, kind: QueryKind) -> Snapshot:
        """Run one query and wrap the outcome in a Snapshot.

        Args:
            kind: Which query to run.

        Returns:
            Snapshot with the captured output and failure cause, if any.
        """
        args = [self.binary, *_QUERY_ARGS[kind]]

        try:
            result = run_command(args, timeout=self.timeout)
        except subprocess.TimeoutExpired:
            error = f"{' '.join(args)} timed out after {self.timeout}s"
            logger.warning("Cannot query %s packages: %s", kind.value, error)
            return Snapshot(kind=kind, error=error)
        except OSError as e:
            error = f"{' '.join(args)} could not be started: {e}"
            logger.warning("Cannot query %s packages: %s", kind.value, error)
            return Snapshot(kind=kind, error=error)

        if result.success or _is_empty_upgrade_list(kind, result):
            return Snapshot(kind=kind, output=result.stdout)

        error = f"{' '.join(args)} exited with status {result.returncode}"
        if result.stderr.strip():
            error = f"{error}: {result.stderr.strip()}"
        logger.warning("Query for %s packages failed: %s", kind.value, error)
        # Keep the partial output; the parser decides what is usable.
        return Snapshot(kind=kind, output=result.stdout, error=error)


def _is_empty_upgrade_list(kind: QueryKind, result: CommandResult) -> bool:
    """Check for ``pacman -Qu`` reporting that nothing is upgradable.

    pacman exits with status 1 and prints nothing when no package matches.
    """
    return (
        kind is QueryKind.UPGRADES
        and result.returncode == 1
        and not result.stdout
        and not result.stderr.strip()
    )
