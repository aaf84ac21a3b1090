"""Session events.

The closed set of inputs the session controller reacts to: operator
input, timer firings and asynchronous completions. Events are immutable
and carry exactly the data their handler needs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from brewdeck.models import Package, PackageFilters, PackageInfo, PackageRef
from brewdeck.session.actions import PendingAction

# =============================================================================
# Operator input
# =============================================================================


@dataclass(frozen=True)
class SessionStarted:
    """The dashboard is mounted; triggers the initial load."""


@dataclass(frozen=True)
class Resized:
    width: int
    height: int


@dataclass(frozen=True)
class KeyPressed:
    """A key press. ``character`` is the printable character, if any."""

    key: str
    character: str | None = None


@dataclass(frozen=True)
class DialogResolved:
    """The confirmation dialog closed, either confirmed or cancelled."""

    confirmed: bool


# =============================================================================
# Timers
# =============================================================================


@dataclass(frozen=True)
class DebounceFired:
    token: int
    ref: PackageRef


# =============================================================================
# Completions
# =============================================================================


@dataclass(frozen=True)
class DetailLoaded:
    token: int
    info: PackageInfo


@dataclass(frozen=True)
class DetailFailed:
    token: int
    ref: PackageRef
    error: str


@dataclass(frozen=True)
class SearchCompleted:
    query: str
    results: tuple[Package, ...]


@dataclass(frozen=True)
class SearchFailed:
    query: str
    error: str


@dataclass(frozen=True)
class InstalledLoaded:
    """Installed list refreshed; ``packages`` is already filtered."""

    packages: tuple[Package, ...]
    total: int


@dataclass(frozen=True)
class InstalledFailed:
    error: str


@dataclass(frozen=True)
class OutdatedLoaded:
    """Outdated list refreshed; ``packages`` is the re-filtered installed list."""

    packages: tuple[Package, ...]
    outdated_count: int


@dataclass(frozen=True)
class PackagesFiltered:
    packages: tuple[Package, ...]
    filters: PackageFilters


@dataclass(frozen=True)
class FavoritesChanged:
    favorites: frozenset[str]
    error: str = ""


@dataclass(frozen=True)
class ActionSucceeded:
    action: PendingAction


@dataclass(frozen=True)
class ActionFailed:
    action: PendingAction
    error: str


@dataclass(frozen=True)
class DoctorCompleted:
    action: PendingAction
    report: str


SessionEvent = Union[
    SessionStarted,
    Resized,
    KeyPressed,
    DialogResolved,
    DebounceFired,
    DetailLoaded,
    DetailFailed,
    SearchCompleted,
    SearchFailed,
    InstalledLoaded,
    InstalledFailed,
    OutdatedLoaded,
    PackagesFiltered,
    FavoritesChanged,
    ActionSucceeded,
    ActionFailed,
    DoctorCompleted,
]
