"""Parsers for pacman query output.

``pacman -Q`` prints one ``<name> <version>`` line per installed package.
``pacman -Qu`` prints ``<name> <old> -> <new>``, followed by ``[ignored]``
when the package is held back by IgnorePkg or IgnoreGroup.

Malformed lines are logged and skipped; parsing never aborts.
"""

import logging
from collections.abc import Iterator

from pacman_exporter.models.package import (
    IgnoredUpgrade,
    InstalledPackage,
    UpgradeCandidate,
    UpgradeSet,
)

logger = logging.getLogger(__name__)

FIELD_SEPARATOR = " "
UPGRADE_ARROW = "->"
IGNORED_MARKER = "[ignored]"

# name, installed version, arrow, upgrade version
_MIN_UPGRADE_FIELDS = 4


def iter_complete_lines(data: bytes) -> Iterator[str]:
    """Yield newline-terminated lines without their terminator.

    Anything after the final newline is an incomplete line and is dropped.

    Args:
        data: Raw command output.

    Yields:
        Each complete line, decoded as UTF-8.
    """
    text = data.decode("utf-8", errors="replace")
    # The last chunk is either empty or lacks a terminating newline.
    yield from text.split("\n")[:-1]


def parse_installed(data: bytes) -> list[InstalledPackage]:
    """Decode ``pacman -Q`` output into installed package records.

    Args:
        data: Raw standard output of ``pacman -Q``.

    Returns:
        InstalledPackage records in input order.
    """
    installed: list[InstalledPackage] = []

    for line in iter_complete_lines(data):
        fields = line.split(FIELD_SEPARATOR)
        if len(fields) != 2:
            logger.warning("Wrong number of items in %s", line)
            continue

        try:
            installed.append(InstalledPackage(name=fields[0], installed_version=fields[1]))
        except ValueError as e:
            logger.warning("Skipping invalid installed package line %r: %s", line, e)

    return installed


def parse_upgrades(data: bytes) -> UpgradeSet:
    """Decode ``pacman -Qu`` output into upgrade and ignored-upgrade records.

    Args:
        data: Raw standard output of ``pacman -Qu``.

    Returns:
        UpgradeSet with candidates and the ignored subset, each in input order.
    """
    upgrades: list[UpgradeCandidate] = []
    ignored: list[IgnoredUpgrade] = []

    for line in iter_complete_lines(data):
        candidate, is_ignored = _parse_upgrade_line(line)
        if candidate is None:
            continue

        upgrades.append(candidate)
        if is_ignored:
            ignored.append(candidate.to_ignored())

    return UpgradeSet(upgrades=tuple(upgrades), ignored=tuple(ignored))


def _parse_upgrade_line(line: str) -> tuple[UpgradeCandidate | None, bool]:
    """Parse a single line of ``pacman -Qu`` output.

    Args:
        line: One line without its newline.

    Returns:
        Tuple of (candidate or None if the line is malformed, ignored flag).
    """
    fields = line.split(FIELD_SEPARATOR)
    if len(fields) < _MIN_UPGRADE_FIELDS:
        logger.warning("Too few items (%d) in upgrade line: %s", len(fields), line)
        return None, False

    if fields[2] != UPGRADE_ARROW:
        logger.warning('Expected "%s" but got "%s" in: %s', UPGRADE_ARROW, fields[2], line)
        return None, False

    try:
        candidate = UpgradeCandidate(
            name=fields[0],
            installed_version=fields[1],
            upgrade_version=fields[3],
        )
    except ValueError as e:
        logger.warning("Skipping invalid upgrade line %r: %s", line, e)
        return None, False

    extra = fields[_MIN_UPGRADE_FIELDS:]
    if not extra:
        return candidate, False

    if extra == [IGNORED_MARKER]:
        return candidate, True

    logger.warning("Unknown format: %s", line)
    return candidate, False
