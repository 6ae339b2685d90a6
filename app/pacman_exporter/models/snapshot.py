"""Snapshot result type for package manager queries."""

from dataclasses import dataclass, field
from enum import Enum


class QueryKind(Enum):
    """The pacman queries the exporter runs."""

    INSTALLED = "installed"
    UPGRADES = "upgrades"


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Raw output captured from one package manager invocation.

    A failed invocation still carries whatever standard output was
    captured (possibly empty), so callers can degrade to fewer records
    instead of failing outright.

    Attributes:
        kind: Which query produced this snapshot.
        output: Raw standard output bytes.
        error: Failure cause, or None if the query succeeded.
    """

    kind: QueryKind
    output: bytes = field(default=b"")
    error: str | None = field(default=None)

    @property
    def success(self) -> bool:
        """Check if the query completed without error."""
        return self.error is None
