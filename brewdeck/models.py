"""Core dataclasses for packages, taps, options and configuration.

Package records are frozen: once a brew command has been parsed into a
record it is shared between the store, the session controller and the
renderer without copying. ``AppConfig`` is the one mutable model and is
round-tripped through JSON with dacite.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum

import dacite


# =============================================================================
# Package Models
# =============================================================================


class PackageType(Enum):
    """The two kinds of package Homebrew manages."""

    FORMULA = "formula"
    CASK = "cask"


@dataclass(frozen=True)
class PackageRef:
    """Snapshot of a package's identity at the moment it was selected."""

    name: str
    type: PackageType = PackageType.FORMULA

    @property
    def is_cask(self) -> bool:
        return self.type is PackageType.CASK


@dataclass(frozen=True)
class Package:
    """A package as listed by ``brew list`` or ``brew search``."""

    name: str
    full_name: str = ""
    version: str = ""
    description: str = ""
    homepage: str = ""
    type: PackageType = PackageType.FORMULA
    installed: bool = False
    outdated: bool = False
    pinned: bool = False

    @property
    def is_cask(self) -> bool:
        return self.type is PackageType.CASK

    def ref(self) -> PackageRef:
        """Return the identity snapshot used for detail loading."""
        return PackageRef(name=self.name, type=self.type)


@dataclass(frozen=True)
class PackageInfo:
    """Detailed information from ``brew info``.

    Parsing is best-effort, so every field other than ``name`` and ``type``
    may be left empty.
    """

    name: str
    type: PackageType = PackageType.FORMULA
    full_name: str = ""
    version: str = ""
    installed_version: str = ""
    description: str = ""
    homepage: str = ""
    dependencies: tuple[str, ...] = ()
    build_dependencies: tuple[str, ...] = ()
    caveats: str = ""
    installed: bool = False
    pinned: bool = False
    outdated: bool = False


@dataclass(frozen=True)
class OutdatedPackage:
    """An installed package with a newer version available."""

    name: str
    current_version: str = ""
    latest_version: str = ""
    pinned: bool = False
    type: PackageType = PackageType.FORMULA


@dataclass(frozen=True)
class Tap:
    """A Homebrew tap (third-party repository)."""

    name: str
    official: bool = False
    remote: str = ""


@dataclass(frozen=True)
class InstallOptions:
    """Flags passed to ``brew install``."""

    cask: bool = False
    force: bool = False


@dataclass(frozen=True)
class UninstallOptions:
    """Flags passed to ``brew uninstall``."""

    cask: bool = False
    force: bool = False


@dataclass(frozen=True)
class PackageFilters:
    """Which installed packages the dashboard shows."""

    show_formulae: bool = True
    show_casks: bool = True
    only_outdated: bool = False
    only_pinned: bool = False

    def allows(self, package: Package) -> bool:
        """Check whether a package passes every active filter."""
        if package.is_cask and not self.show_casks:
            return False
        if not package.is_cask and not self.show_formulae:
            return False
        if self.only_outdated and not package.outdated:
            return False
        if self.only_pinned and not package.pinned:
            return False
        return True


# =============================================================================
# Configuration Models
# =============================================================================


@dataclass
class AppConfig:
    """Settings persisted in ~/.config/brewdeck/config.json."""

    show_formulae_by_default: bool = True
    show_casks_by_default: bool = True
    debounce_delay_ms: int = 200  # Detail-load settle time
    log_capacity: int = 1000  # Operator log entries kept
    brew_path: str = "brew"

    def default_filters(self) -> PackageFilters:
        return PackageFilters(
            show_formulae=self.show_formulae_by_default,
            show_casks=self.show_casks_by_default,
        )


# =============================================================================
# Serialization Helpers
# =============================================================================


def _convert_enums(obj: object) -> object:
    """Recursively convert Enum values to their string values."""
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, dict):
        return {k: _convert_enums(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_convert_enums(item) for item in obj]
    return obj


def model_to_dict(obj: object) -> dict:
    """Convert a dataclass model to a dictionary for JSON serialization."""
    data = asdict(obj)  # type: ignore[arg-type]
    return _convert_enums(data)  # type: ignore[return-value]


def model_from_dict(data_class: type, data: dict) -> object:
    """Load a dataclass model from a dictionary."""
    return dacite.from_dict(
        data_class=data_class,
        data=data,
        config=dacite.Config(cast=[Enum]),
    )
