"""Prometheus collector exposing pacman package state.

Every scrape runs a fresh snapshot-and-parse cycle; nothing is cached
between scrapes. Each record becomes one gauge sample with value 1.
"""

import logging
import time
from collections.abc import Iterable, Iterator

from prometheus_client.core import GaugeMetricFamily
from prometheus_client.registry import Collector

from pacman_exporter.models.package import InstalledPackage, UpgradeSet
from pacman_exporter.models.snapshot import Snapshot
from pacman_exporter.parsers.pacman import parse_installed, parse_upgrades
from pacman_exporter.scanners.pacman import PacmanReader

logger = logging.getLogger(__name__)

NAMESPACE = "archlinux"
SUBSYSTEM = "pacman"

INSTALLED_METRIC = f"{NAMESPACE}_{SUBSYSTEM}_installed"
UPGRADE_METRIC = f"{NAMESPACE}_{SUBSYSTEM}_upgrade"
IGNORED_METRIC = f"{NAMESPACE}_{SUBSYSTEM}_ignored"
QUERY_SUCCESS_METRIC = f"{NAMESPACE}_{SUBSYSTEM}_query_success"

INSTALLED_LABELS = ["package_name", "installed_version"]
UPGRADE_LABELS = ["package_name", "installed_version", "upgrade_version"]


class PacmanCollector(Collector):
    """Custom collector emitting one sample per pacman record.

    Args:
        reader: Snapshot reader used on every scrape.
        upgrades_only: Emit only the upgrade family and skip the
            installed query.
    """

    def __init__(self, reader: PacmanReader | None = None, *, upgrades_only: bool = False) -> None:
        self.reader = reader or PacmanReader()
        self.upgrades_only = upgrades_only

    def describe(self) -> Iterable[GaugeMetricFamily]:
        """Declare every metric family this collector may emit."""
        return list(self._families().values())

    def collect(self) -> Iterator[GaugeMetricFamily]:
        """Query pacman and yield the populated metric families."""
        start = time.monotonic()
        families = self._families()
        success = families[QUERY_SUCCESS_METRIC]

        installed: list[InstalledPackage] = []
        if not self.upgrades_only:
            snapshot = self.reader.read_installed_snapshot()
            _add_success(success, snapshot)
            installed = parse_installed(snapshot.output)
            _add_installed(families[INSTALLED_METRIC], installed)

        snapshot = self.reader.read_upgrade_snapshot()
        _add_success(success, snapshot)
        upgrade_set = parse_upgrades(snapshot.output)
        _add_upgrades(families[UPGRADE_METRIC], upgrade_set)
        if not self.upgrades_only:
            _add_ignored(families[IGNORED_METRIC], upgrade_set)

        logger.debug(
            "Collected %d installed, %d upgrades (%d ignored) in %.2fs",
            len(installed),
            len(upgrade_set.upgrades),
            len(upgrade_set.ignored),
            time.monotonic() - start,
        )
        yield from families.values()

    def _families(self) -> dict[str, GaugeMetricFamily]:
        """Build empty metric families for the enabled metrics."""
        families: dict[str, GaugeMetricFamily] = {}
        if not self.upgrades_only:
            families[INSTALLED_METRIC] = GaugeMetricFamily(
                INSTALLED_METRIC, "Installed packages", labels=INSTALLED_LABELS
            )
        families[UPGRADE_METRIC] = GaugeMetricFamily(
            UPGRADE_METRIC, "Packages with available upgrade", labels=UPGRADE_LABELS
        )
        if not self.upgrades_only:
            families[IGNORED_METRIC] = GaugeMetricFamily(
                IGNORED_METRIC, "Packages with ignored upgrade", labels=UPGRADE_LABELS
            )
        families[QUERY_SUCCESS_METRIC] = GaugeMetricFamily(
            QUERY_SUCCESS_METRIC,
            "Whether the last pacman query succeeded (1) or failed (0)",
            labels=["query"],
        )
        return families


def _add_success(family: GaugeMetricFamily, snapshot: Snapshot) -> None:
    family.add_metric([snapshot.kind.value], 1.0 if snapshot.success else 0.0)


def _add_installed(family: GaugeMetricFamily, installed: list[InstalledPackage]) -> None:
    for pkg in installed:
        family.add_metric([pkg.name, pkg.installed_version], 1.0)


def _add_upgrades(family: GaugeMetricFamily, upgrade_set: UpgradeSet) -> None:
    for pkg in upgrade_set.upgrades:
        family.add_metric([pkg.name, pkg.installed_version, pkg.upgrade_version], 1.0)


def _add_ignored(family: GaugeMetricFamily, upgrade_set: UpgradeSet) -> None:
    for pkg in upgrade_set.ignored:
        family.add_metric([pkg.name, pkg.installed_version, pkg.upgrade_version], 1.0)
