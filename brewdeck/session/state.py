"""Session state: pure data, no Textual imports.

``SessionState`` is a frozen snapshot. The controller replaces it on every
event and the renderer reads it; nothing else touches it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from brewdeck.models import Package, PackageFilters, PackageInfo, PackageRef
from brewdeck.session.actions import PendingAction
from brewdeck.session.debounce import DEFAULT_DEBOUNCE_DELAY, Debounce
from brewdeck.session.dialog import HIDDEN, DialogState
from brewdeck.session.geometry import Geometry, compute_geometry
from brewdeck.session.log_buffer import LogBuffer
from brewdeck.session.selection import Selection

SEARCH_QUERY_LIMIT = 100
REFRESH_OPERATION = "refresh"
SEARCH_OPERATION = "search"


class PanelFocus(Enum):
    INSTALLED = "installed"
    SEARCH = "search"
    DEPENDENCIES = "dependencies"


FOCUS_CYCLE: dict[PanelFocus, PanelFocus] = {
    PanelFocus.INSTALLED: PanelFocus.SEARCH,
    PanelFocus.SEARCH: PanelFocus.DEPENDENCIES,
    PanelFocus.DEPENDENCIES: PanelFocus.INSTALLED,
}
FOCUS_CYCLE_REVERSE: dict[PanelFocus, PanelFocus] = {v: k for k, v in FOCUS_CYCLE.items()}


@dataclass(frozen=True)
class Operation:
    """An in-flight asynchronous operation.

    ``key`` is the duplicate-suppression class: an ``ActionKind`` value,
    ``"refresh"`` or ``"search"``.
    """

    key: str
    message: str


@dataclass(frozen=True)
class OperationStatus:
    """Idle when ``message`` is empty, otherwise in progress."""

    message: str = ""

    @property
    def in_progress(self) -> bool:
        return bool(self.message)


IDLE = OperationStatus()


@dataclass(frozen=True)
class SessionState:
    # Viewport
    width: int = 0
    height: int = 0

    # Focus and search entry
    focus: PanelFocus = PanelFocus.INSTALLED
    search_editing: bool = False
    query: str = ""

    # Lists
    installed: tuple[Package, ...] = ()
    installed_total: int = 0
    outdated_count: int = 0
    loaded: bool = False
    search_results: tuple[Package, ...] = ()
    last_query: str = ""
    installed_selection: Selection = field(default_factory=Selection)
    search_selection: Selection = field(default_factory=Selection)
    filters: PackageFilters = field(default_factory=PackageFilters)
    favorites: frozenset[str] = frozenset()

    # Detail and dependencies
    debounce: Debounce = field(default_factory=Debounce)
    debounce_delay: float = DEFAULT_DEBOUNCE_DELAY
    detail: PackageInfo | None = None
    detail_loading: bool = False
    detail_error: str = ""
    dependencies_scroll: int = 0

    # Confirmation
    pending: PendingAction | None = None
    dialog: DialogState = HIDDEN

    # Operations
    in_flight: tuple[Operation, ...] = ()
    refresh_queued: bool = False
    status_message: str = ""

    # Log
    logs: LogBuffer = field(default_factory=LogBuffer)
    log_scroll: int | None = None  # None follows the tail

    @property
    def geometry(self) -> Geometry:
        return compute_geometry(self.width, self.height)

    @property
    def status(self) -> OperationStatus:
        if not self.in_flight:
            return IDLE
        return OperationStatus(self.in_flight[-1].message)

    def is_running(self, key: str) -> bool:
        return any(op.key == key for op in self.in_flight)

    @property
    def searching(self) -> bool:
        return self.is_running(SEARCH_OPERATION)

    @property
    def refreshing(self) -> bool:
        return self.is_running(REFRESH_OPERATION)

    def selected_installed(self) -> Package | None:
        if not self.installed:
            return None
        return self.installed[self.installed_selection.index]

    def selected_search_result(self) -> Package | None:
        if not self.search_results:
            return None
        return self.search_results[self.search_selection.index]

    def selected_package(self) -> Package | None:
        """The selected row of the focused list panel, if any."""
        if self.focus is PanelFocus.INSTALLED:
            return self.selected_installed()
        if self.focus is PanelFocus.SEARCH:
            return self.selected_search_result()
        return None

    @property
    def detail_ref(self) -> PackageRef | None:
        return self.debounce.ref

    def dependency_rows(self) -> list[str]:
        """Runtime dependencies followed by build-only ones."""
        if self.detail is None:
            return []
        rows = list(self.detail.dependencies)
        rows.extend(f"{dep} (build)" for dep in self.detail.build_dependencies)
        return rows
