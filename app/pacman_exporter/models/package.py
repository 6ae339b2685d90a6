"""Package record models decoded from pacman output.

Records are immutable and compared by value. They are built fresh on
every scrape and never retained between scrapes.
"""

from dataclasses import dataclass, field


def _require(value: str, what: str) -> None:
    if not value:
        msg = f"{what} cannot be empty"
        raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class InstalledPackage:
    """A package reported by ``pacman -Q``.

    Attributes:
        name: Package name (e.g., 'bash')
        installed_version: Installed version string (e.g., '5.1.0-1')
    """

    name: str
    installed_version: str

    def __post_init__(self) -> None:
        """Validate record fields after initialization."""
        _require(self.name, "Package name")
        _require(self.installed_version, "Installed version")


@dataclass(frozen=True, slots=True)
class UpgradeCandidate:
    """A package with a newer version available, reported by ``pacman -Qu``.

    Attributes:
        name: Package name
        installed_version: Currently installed version
        upgrade_version: Version the package would be upgraded to
    """

    name: str
    installed_version: str
    upgrade_version: str

    def __post_init__(self) -> None:
        """Validate record fields after initialization."""
        _require(self.name, "Package name")
        _require(self.installed_version, "Installed version")
        _require(self.upgrade_version, "Upgrade version")

    def to_ignored(self) -> "IgnoredUpgrade":
        """Return the ignored-upgrade record for this candidate."""
        return IgnoredUpgrade(
            name=self.name,
            installed_version=self.installed_version,
            upgrade_version=self.upgrade_version,
        )


@dataclass(frozen=True, slots=True)
class IgnoredUpgrade:
    """An upgrade candidate marked ``[ignored]`` (IgnorePkg/IgnoreGroup).

    Every ignored upgrade is also reported as an UpgradeCandidate.
    """

    name: str
    installed_version: str
    upgrade_version: str

    def __post_init__(self) -> None:
        """Validate record fields after initialization."""
        _require(self.name, "Package name")
        _require(self.installed_version, "Installed version")
        _require(self.upgrade_version, "Upgrade version")


@dataclass(frozen=True, slots=True)
class UpgradeSet:
    """Result of decoding one ``pacman -Qu`` snapshot.

    Attributes:
        upgrades: All upgrade candidates in input order.
        ignored: The subset of candidates marked as ignored, in input order.
    """

    upgrades: tuple[UpgradeCandidate, ...] = field(default=())
    ignored: tuple[IgnoredUpgrade, ...] = field(default=())
