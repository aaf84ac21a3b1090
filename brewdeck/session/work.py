"""Work requests emitted by the session controller.

The controller never performs I/O. Each transition returns a list of these
values and the runtime carries them out, reporting back with events.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from brewdeck.models import PackageFilters, PackageRef
from brewdeck.session.actions import PendingAction


@dataclass(frozen=True)
class ScheduleDebounce:
    """Fire ``DebounceFired(token, ref)`` after ``delay`` seconds."""

    token: int
    ref: PackageRef
    delay: float


@dataclass(frozen=True)
class LoadDetail:
    token: int
    ref: PackageRef


@dataclass(frozen=True)
class RunSearch:
    query: str


@dataclass(frozen=True)
class LoadInstalled:
    pass


@dataclass(frozen=True)
class LoadOutdated:
    pass


@dataclass(frozen=True)
class RunAction:
    """Execute a confirmed action."""

    action: PendingAction


@dataclass(frozen=True)
class ApplyFilters:
    filters: PackageFilters


@dataclass(frozen=True)
class ToggleFavorite:
    name: str


@dataclass(frozen=True)
class ShowHelp:
    pass


@dataclass(frozen=True)
class Quit:
    pass


Work = Union[
    ScheduleDebounce,
    LoadDetail,
    RunSearch,
    LoadInstalled,
    LoadOutdated,
    RunAction,
    ApplyFilters,
    ToggleFavorite,
    ShowHelp,
    Quit,
]
