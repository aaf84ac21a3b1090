"""Session controller: the dashboard's state machine.

``transition(state, event)`` is a pure function returning the next state
and the work the runtime should start. It performs no I/O and never
blocks, so every rule here can be exercised without a terminal:

- operator keys are routed to the dialog when it is visible, to the search
  query while it is being edited, and to panel bindings otherwise
- mutating operations are two-phase; a request only opens the dialog and
  the operation runs once the dialog resolves confirmed
- detail loads are fenced by the debounce token, so superseded triggers
  and completions are dropped
- every completion removes its operation from the in-flight set and
  successful mutations queue a refresh of the installed/outdated lists
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import replace
from typing import Any

from brewdeck.models import Package, PackageFilters
from brewdeck.session import actions
from brewdeck.session import dialog as dialog_fsm
from brewdeck.session.actions import ActionKind, PendingAction
from brewdeck.session.debounce import DEFAULT_DEBOUNCE_DELAY
from brewdeck.session.dialog import HIDDEN, DialogState
from brewdeck.session.events import (
    ActionFailed,
    ActionSucceeded,
    DebounceFired,
    DetailFailed,
    DetailLoaded,
    DialogResolved,
    DoctorCompleted,
    FavoritesChanged,
    InstalledFailed,
    InstalledLoaded,
    KeyPressed,
    OutdatedLoaded,
    PackagesFiltered,
    Resized,
    SearchCompleted,
    SearchFailed,
    SessionEvent,
    SessionStarted,
)
from brewdeck.session.log_buffer import DEFAULT_LOG_CAPACITY, LogBuffer
from brewdeck.session.selection import Selection, clamp_scroll
from brewdeck.session.state import (
    FOCUS_CYCLE,
    FOCUS_CYCLE_REVERSE,
    REFRESH_OPERATION,
    SEARCH_OPERATION,
    SEARCH_QUERY_LIMIT,
    Operation,
    PanelFocus,
    SessionState,
)
from brewdeck.session.work import (
    ApplyFilters,
    LoadDetail,
    LoadInstalled,
    LoadOutdated,
    Quit,
    RunAction,
    RunSearch,
    ScheduleDebounce,
    ShowHelp,
    ToggleFavorite,
    Work,
)

logger = logging.getLogger(__name__)

Transition = tuple[SessionState, list[Work]]

FILTER_KEYS: dict[str, str] = {
    "1": "show_formulae",
    "2": "show_casks",
    "3": "only_outdated",
    "4": "only_pinned",
}


def initial_state(
    *,
    debounce_delay: float = DEFAULT_DEBOUNCE_DELAY,
    log_capacity: int = DEFAULT_LOG_CAPACITY,
    filters: PackageFilters | None = None,
    favorites: Iterable[str] = (),
    width: int = 0,
    height: int = 0,
) -> SessionState:
    return SessionState(
        width=width,
        height=height,
        debounce_delay=debounce_delay,
        logs=LogBuffer(capacity=log_capacity),
        filters=filters or PackageFilters(),
        favorites=frozenset(favorites),
    )


def binding_key(event: KeyPressed) -> str:
    """Name used to look up bindings: the printable character if there is one.

    This makes ``U`` and ``?`` independent of how the terminal reports
    shifted keys.
    """
    character = event.character
    if character and len(character) == 1 and character.isprintable():
        return character
    return event.key


def filters_summary(filters: PackageFilters) -> str:
    kinds = [
        label
        for label, shown in (("Formulae", filters.show_formulae), ("Casks", filters.show_casks))
        if shown
    ]
    parts = [" + ".join(kinds) if kinds else "Nothing"]
    if filters.only_outdated:
        parts.append("outdated only")
    if filters.only_pinned:
        parts.append("pinned only")
    return ", ".join(parts)


# =============================================================================
# State helpers
# =============================================================================


def _log(state: SessionState, *lines: str) -> SessionState:
    return replace(state, logs=state.logs.append(*lines))


def _note(state: SessionState, text: str) -> SessionState:
    """Transient status-bar message, cleared by the next key press."""
    return replace(state, status_message=text)


def _warn(state: SessionState, text: str) -> SessionState:
    return _note(_log(state, f"⚠ {text}"), text)


def _fail(state: SessionState, error: str) -> SessionState:
    text = f"Error: {error}"
    return _note(_log(state, text), text)


def _start(state: SessionState, key: str, message: str) -> SessionState:
    state = _log(state, f"→ {message}")
    return replace(state, in_flight=state.in_flight + (Operation(key, message),))


def _finish(state: SessionState, key: str) -> SessionState:
    ops = list(state.in_flight)
    for index, op in enumerate(ops):
        if op.key == key:
            del ops[index]
            break
    return replace(state, in_flight=tuple(ops))


def _relabel(state: SessionState, key: str, message: str) -> SessionState:
    ops = tuple(
        Operation(op.key, message) if op.key == key else op for op in state.in_flight
    )
    return replace(state, in_flight=ops)


def _same_package(a: Package | None, b: Package | None) -> bool:
    if a is None or b is None:
        return a is b
    return a.name == b.name and a.type is b.type


# =============================================================================
# Selection and detail loading
# =============================================================================


def _schedule_detail(state: SessionState, package: Package | None) -> Transition:
    if package is None:
        return state, []
    ref = package.ref()
    debounce = state.debounce.bump(ref)
    state = replace(state, debounce=debounce)
    return state, [ScheduleDebounce(debounce.token, ref, state.debounce_delay)]


def _move(state: SessionState, delta: int) -> Transition:
    geometry = state.geometry
    if state.focus is PanelFocus.INSTALLED:
        selection = state.installed_selection.move(delta, len(state.installed), geometry.installed_lines)
        moved = selection.index != state.installed_selection.index
        state = replace(state, installed_selection=selection)
        return _schedule_detail(state, state.selected_installed()) if moved else (state, [])
    if state.focus is PanelFocus.SEARCH:
        selection = state.search_selection.move(delta, len(state.search_results), geometry.search_lines)
        moved = selection.index != state.search_selection.index
        state = replace(state, search_selection=selection)
        return _schedule_detail(state, state.selected_search_result()) if moved else (state, [])
    scroll = clamp_scroll(
        state.dependencies_scroll + delta,
        len(state.dependency_rows()),
        geometry.dependencies_lines,
    )
    return replace(state, dependencies_scroll=scroll), []


def _replace_installed(state: SessionState, packages: tuple[Package, ...]) -> Transition:
    """Swap in a new installed list, keeping the selection on the same package."""
    previous = state.selected_installed()
    index = state.installed_selection.index
    if previous is not None:
        for position, package in enumerate(packages):
            if _same_package(package, previous):
                index = position
                break
    selection = Selection(index, state.installed_selection.scroll).clamp(
        len(packages), state.geometry.installed_lines
    )
    state = replace(state, installed=packages, installed_selection=selection)
    current = state.selected_installed()
    if state.focus is PanelFocus.SEARCH or _same_package(current, previous):
        return state, []
    return _schedule_detail(state, current)


def _focus(state: SessionState, focus: PanelFocus, editing: bool = False) -> Transition:
    state = replace(state, focus=focus, search_editing=editing)
    package = state.selected_package()
    if package is not None and package.ref() != state.debounce.ref:
        return _schedule_detail(state, package)
    return state, []


def _reclamp(state: SessionState) -> SessionState:
    geometry = state.geometry
    log_scroll = state.log_scroll
    if log_scroll is not None:
        log_scroll = clamp_scroll(log_scroll, len(state.logs), geometry.log_lines)
    return replace(
        state,
        installed_selection=state.installed_selection.clamp(len(state.installed), geometry.installed_lines),
        search_selection=state.search_selection.clamp(len(state.search_results), geometry.search_lines),
        dependencies_scroll=clamp_scroll(
            state.dependencies_scroll, len(state.dependency_rows()), geometry.dependencies_lines
        ),
        log_scroll=log_scroll,
    )


def _scroll_log(state: SessionState, pages: int) -> Transition:
    visible = state.geometry.log_lines
    last = max(0, len(state.logs) - visible)
    start = last if state.log_scroll is None else state.log_scroll
    target = start + pages * visible
    # Nothing to page through when the log fits the panel.
    if last == 0 or target >= last:
        return replace(state, log_scroll=None), []
    return replace(state, log_scroll=max(0, target)), []


# =============================================================================
# Confirmation-gated requests
# =============================================================================


def _request(state: SessionState, action: PendingAction) -> Transition:
    if state.is_running(action.kind.value):
        logger.warning("Ignoring %s request: already in progress", action.kind.value)
        return _warn(state, f"{action.title} already in progress"), []
    return replace(state, pending=action, dialog=DialogState.for_action(action)), []


def _request_install(state: SessionState) -> Transition:
    if state.focus is not PanelFocus.SEARCH:
        return state, []
    package = state.selected_search_result()
    if package is None:
        # Nothing to install yet: go back to typing a query.
        return replace(state, search_editing=True), []
    if package.installed:
        return _note(state, f"{package.name} is already installed"), []
    return _request(state, actions.install(package.ref()))


def _request_uninstall(state: SessionState) -> Transition:
    package = state.selected_installed() if state.focus is PanelFocus.INSTALLED else None
    if package is None:
        return state, []
    return _request(state, actions.uninstall(package.ref()))


def _request_upgrade(state: SessionState) -> Transition:
    package = state.selected_installed() if state.focus is PanelFocus.INSTALLED else None
    if package is None or not package.outdated:
        return state, []
    return _request(state, actions.upgrade(package.ref()))


def _request_upgrade_all(state: SessionState) -> Transition:
    if state.focus is not PanelFocus.INSTALLED or state.outdated_count <= 0:
        return state, []
    return _request(state, actions.upgrade_all(state.outdated_count))


def _request_pin_toggle(state: SessionState) -> Transition:
    package = state.selected_installed() if state.focus is PanelFocus.INSTALLED else None
    if package is None:
        return state, []
    if package.is_cask:
        return _note(state, "Casks cannot be pinned"), []
    action = actions.unpin(package.ref()) if package.pinned else actions.pin(package.ref())
    return _request(state, action)


def _on_dialog_resolved(state: SessionState, event: DialogResolved) -> Transition:
    action = state.pending
    state = replace(state, pending=None, dialog=HIDDEN)
    if action is None:
        return state, []
    if not event.confirmed:
        logger.debug("Cancelled %s", action.kind.value)
        return state, []
    if state.is_running(action.kind.value):
        return _warn(state, f"{action.title} already in progress"), []
    logger.info("Confirmed %s %s", action.kind.value, action.name)
    return _start(state, action.kind.value, action.progress_message()), [RunAction(action)]


# =============================================================================
# Refresh
# =============================================================================


def _request_refresh(state: SessionState, *, queue_if_busy: bool = False) -> Transition:
    if state.refreshing:
        if queue_if_busy:
            return replace(state, refresh_queued=True), []
        return _warn(state, "Refresh already in progress"), []
    state = _start(replace(state, refresh_queued=False), REFRESH_OPERATION, "Loading installed packages...")
    return state, [LoadInstalled()]


def _after_refresh(state: SessionState) -> Transition:
    if state.refresh_queued and not state.refreshing:
        return _request_refresh(state)
    return state, []


# =============================================================================
# Key handling
# =============================================================================


def _on_search_key(state: SessionState, key: str, character: str | None) -> Transition:
    if key == "escape":
        return replace(state, search_editing=False), []
    if key == "enter":
        query = state.query.strip()
        if not query:
            return state, []
        return _start(state, SEARCH_OPERATION, f"Searching for {query}..."), [RunSearch(query)]
    if key == "tab":
        return _focus(state, PanelFocus.DEPENDENCIES)
    if key == "shift+tab":
        return _focus(state, PanelFocus.INSTALLED)
    if key == "backspace":
        return replace(state, query=state.query[:-1]), []
    if key == "ctrl+u":
        return replace(state, query=""), []
    if character and len(character) == 1 and character.isprintable():
        if len(state.query) >= SEARCH_QUERY_LIMIT:
            return state, []
        return replace(state, query=state.query + character), []
    return state, []


def _toggle_filter(state: SessionState, attribute: str) -> Transition:
    filters = replace(state.filters, **{attribute: not getattr(state.filters, attribute)})
    state = replace(state, filters=filters)
    return _note(state, f"Showing: {filters_summary(filters)}"), [ApplyFilters(filters)]


def _toggle_favorite(state: SessionState) -> Transition:
    package = state.selected_installed() if state.focus is PanelFocus.INSTALLED else None
    if package is None:
        return state, []
    return state, [ToggleFavorite(package.name)]


def _log_head(state: SessionState) -> Transition:
    if len(state.logs) <= state.geometry.log_lines:
        return state, []
    return replace(state, log_scroll=0), []


NORMAL_KEYS: dict[str, Callable[[SessionState], Transition]] = {
    "q": lambda s: (s, [Quit()]),
    "tab": lambda s: _focus(s, FOCUS_CYCLE[s.focus], FOCUS_CYCLE[s.focus] is PanelFocus.SEARCH),
    "shift+tab": lambda s: _focus(
        s, FOCUS_CYCLE_REVERSE[s.focus], FOCUS_CYCLE_REVERSE[s.focus] is PanelFocus.SEARCH
    ),
    "/": lambda s: _focus(s, PanelFocus.SEARCH, editing=True),
    "up": lambda s: _move(s, -1),
    "k": lambda s: _move(s, -1),
    "down": lambda s: _move(s, 1),
    "j": lambda s: _move(s, 1),
    "pageup": lambda s: _scroll_log(s, -1),
    "pagedown": lambda s: _scroll_log(s, 1),
    "home": _log_head,
    "end": lambda s: (replace(s, log_scroll=None), []),
    "enter": _request_install,
    "x": _request_uninstall,
    "u": _request_upgrade,
    "U": _request_upgrade_all,
    "p": _request_pin_toggle,
    "d": lambda s: _request(s, actions.doctor()),
    "c": lambda s: _request(s, actions.cleanup()),
    "a": lambda s: _request(s, actions.autoremove()),
    "r": lambda s: _request_refresh(s),
    "f": _toggle_favorite,
    "?": lambda s: (s, [ShowHelp()]),
}
NORMAL_KEYS.update(
    {
        key: (lambda s, attribute=attribute: _toggle_filter(s, attribute))
        for key, attribute in FILTER_KEYS.items()
    }
)


def _on_key(state: SessionState, event: KeyPressed) -> Transition:
    key = binding_key(event)
    if state.status_message:
        state = replace(state, status_message="")

    if state.dialog.visible:
        dialog, resolution = dialog_fsm.handle_key(state.dialog, key)
        state = replace(state, dialog=dialog)
        if resolution is None:
            return state, []
        return _on_dialog_resolved(state, DialogResolved(confirmed=resolution))

    if key == "ctrl+c":
        return state, [Quit()]
    if state.focus is PanelFocus.SEARCH and state.search_editing:
        return _on_search_key(state, key, event.character)

    handler = NORMAL_KEYS.get(key)
    if handler is None:
        return state, []
    return handler(state)


# =============================================================================
# Event handlers
# =============================================================================


def _on_started(state: SessionState, event: SessionStarted) -> Transition:
    return _request_refresh(state)


def _on_resized(state: SessionState, event: Resized) -> Transition:
    return _reclamp(replace(state, width=event.width, height=event.height)), []


def _on_debounce_fired(state: SessionState, event: DebounceFired) -> Transition:
    if not state.debounce.is_current(event.token):
        logger.debug("Dropping superseded detail trigger %d for %s", event.token, event.ref.name)
        return state, []
    return replace(state, detail_loading=True, detail_error=""), [LoadDetail(event.token, event.ref)]


def _on_detail_loaded(state: SessionState, event: DetailLoaded) -> Transition:
    if not state.debounce.is_current(event.token):
        logger.debug("Dropping stale detail for %s", event.info.name)
        return state, []
    return (
        replace(
            state,
            detail=event.info,
            detail_loading=False,
            detail_error="",
            dependencies_scroll=0,
        ),
        [],
    )


def _on_detail_failed(state: SessionState, event: DetailFailed) -> Transition:
    if not state.debounce.is_current(event.token):
        return state, []
    state = replace(state, detail_loading=False, detail_error=event.error)
    return _fail(state, event.error), []


def _on_search_completed(state: SessionState, event: SearchCompleted) -> Transition:
    state = replace(
        _finish(state, SEARCH_OPERATION),
        search_results=event.results,
        search_selection=Selection(),
        search_editing=False,
        last_query=event.query,
    )
    if event.results:
        state = _log(state, f"✓ Found {len(event.results)} results for '{event.query}'")
    else:
        state = _log(state, f"No results for '{event.query}'")
    if state.focus is not PanelFocus.SEARCH:
        return state, []
    return _schedule_detail(state, state.selected_search_result())


def _on_search_failed(state: SessionState, event: SearchFailed) -> Transition:
    return _fail(_finish(state, SEARCH_OPERATION), event.error), []


def _on_installed_loaded(state: SessionState, event: InstalledLoaded) -> Transition:
    state = replace(state, installed_total=event.total, loaded=True)
    state, work = _replace_installed(state, event.packages)
    state = _log(state, f"✓ Loaded {event.total} packages")
    state = _relabel(state, REFRESH_OPERATION, "Checking for outdated packages...")
    return state, work + [LoadOutdated()]


def _on_installed_failed(state: SessionState, event: InstalledFailed) -> Transition:
    return _after_refresh(_fail(_finish(state, REFRESH_OPERATION), event.error))


def _on_outdated_loaded(state: SessionState, event: OutdatedLoaded) -> Transition:
    state = replace(state, outdated_count=event.outdated_count)
    state, work = _replace_installed(state, event.packages)
    if event.outdated_count:
        state = _log(state, f"⚠ Found {event.outdated_count} outdated packages")
    else:
        state = _log(state, "✓ All packages are up to date")
    state, more = _after_refresh(_finish(state, REFRESH_OPERATION))
    return state, work + more


def _on_packages_filtered(state: SessionState, event: PackagesFiltered) -> Transition:
    return _replace_installed(replace(state, filters=event.filters), event.packages)


def _on_favorites_changed(state: SessionState, event: FavoritesChanged) -> Transition:
    state = replace(state, favorites=event.favorites)
    if event.error:
        return _fail(state, event.error), []
    return state, []


def _on_action_succeeded(state: SessionState, event: ActionSucceeded) -> Transition:
    action = event.action
    state = _log(_finish(state, action.kind.value), f"✓ {action.success_message()}")
    if action.refreshes:
        return _request_refresh(state, queue_if_busy=True)
    return state, []


def _on_action_failed(state: SessionState, event: ActionFailed) -> Transition:
    return _fail(_finish(state, event.action.kind.value), event.error), []


def _on_doctor_completed(state: SessionState, event: DoctorCompleted) -> Transition:
    lines = [line for line in event.report.splitlines() if line.strip()]
    state = _finish(state, ActionKind.DOCTOR.value)
    return _log(state, *lines, "✓ Doctor completed"), []


_HANDLERS: dict[type, Callable[[SessionState, Any], Transition]] = {
    SessionStarted: _on_started,
    Resized: _on_resized,
    KeyPressed: _on_key,
    DialogResolved: _on_dialog_resolved,
    DebounceFired: _on_debounce_fired,
    DetailLoaded: _on_detail_loaded,
    DetailFailed: _on_detail_failed,
    SearchCompleted: _on_search_completed,
    SearchFailed: _on_search_failed,
    InstalledLoaded: _on_installed_loaded,
    InstalledFailed: _on_installed_failed,
    OutdatedLoaded: _on_outdated_loaded,
    PackagesFiltered: _on_packages_filtered,
    FavoritesChanged: _on_favorites_changed,
    ActionSucceeded: _on_action_succeeded,
    ActionFailed: _on_action_failed,
    DoctorCompleted: _on_doctor_completed,
}


def transition(state: SessionState, event: SessionEvent) -> Transition:
    """Apply one event to ``state``.

    Returns:
        The next state and the work to start, in order.
    """
    handler = _HANDLERS.get(type(event))
    if handler is None:
        logger.warning("Unhandled session event: %r", event)
        return state, []
    return handler(state, event)


class SessionController:
    """Holds the current ``SessionState`` of one dashboard session.

    Example:
        controller = SessionController(debounce_delay=0.2)
        work = controller.handle(SessionStarted())
    """

    def __init__(self, state: SessionState | None = None, **options: Any) -> None:
        self.state = state if state is not None else initial_state(**options)

    def handle(self, event: SessionEvent) -> list[Work]:
        self.state, work = transition(self.state, event)
        return work
