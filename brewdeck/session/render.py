"""Pure rendering of session state into a layout description.

``render_dashboard`` turns a ``SessionState`` into panels made of styled
text segments. It knows nothing about Textual; the widgets turn segments
into Rich ``Text`` and the tests read them as plain strings.
"""

from __future__ import annotations

from dataclasses import dataclass

from brewdeck import status_display as sd
from brewdeck.session.controller import filters_summary
from brewdeck.session.geometry import Geometry
from brewdeck.session.state import PanelFocus, SessionState


@dataclass(frozen=True)
class Segment:
    text: str
    style: str = ""


Line = tuple[Segment, ...]


@dataclass(frozen=True)
class PanelView:
    title: str
    lines: tuple[Line, ...]
    focused: bool = False


@dataclass(frozen=True)
class StatusBarView:
    text: str
    style: str = ""
    in_progress: bool = False


@dataclass(frozen=True)
class DialogView:
    title: str
    message: str
    options: tuple[str, ...]
    selected: int


@dataclass(frozen=True)
class DashboardLayout:
    geometry: Geometry
    installed: PanelView
    search: PanelView
    dependencies: PanelView
    logs: PanelView
    status_bar: StatusBarView
    dialog: DialogView | None = None


def line_text(line: Line) -> str:
    """Plain text of a rendered line."""
    return "".join(segment.text for segment in line)


def panel_text(panel: PanelView) -> list[str]:
    return [line_text(line) for line in panel.lines]


def _fit(text: str, width: int) -> str:
    """Truncate with an ellipsis and pad to exactly ``width`` characters."""
    if width <= 0:
        return ""
    if len(text) > width:
        return text[: width - 1] + "…"
    return text.ljust(width)


def _dim(text: str) -> Line:
    return (Segment(text, "dim"),)


# =============================================================================
# Panels
# =============================================================================


def render_installed(state: SessionState) -> PanelView:
    geometry = state.geometry
    focused = state.focus is PanelFocus.INSTALLED
    shown, total = len(state.installed), state.installed_total
    title = f"Installed ({shown})" if shown == total else f"Installed ({shown} of {total})"

    if not state.loaded:
        return PanelView(title, (_dim("Loading installed packages..."),), focused)
    if not state.installed:
        message = "No packages match the current filters" if total else "No packages installed"
        return PanelView(title, (_dim(message),), focused)

    # borders and padding (4), marker (2), status and favorite (4)
    content_width = max(12, geometry.left_width - 10)
    name_width = int(content_width * 0.5)
    version_width = int(content_width * 0.3)
    type_width = content_width - name_width - version_width

    lines: list[Line] = [
        _dim(f"  {'NAME'.ljust(name_width)} {'VERSION'.ljust(version_width)} {'TYPE'.ljust(type_width)}"),
        _dim("─" * (content_width + 4)),
    ]
    selection = state.installed_selection
    window = state.installed[selection.scroll : selection.scroll + geometry.installed_lines]
    for offset, package in enumerate(window):
        selected = selection.scroll + offset == selection.index
        marker_style = "bold reverse" if selected and focused else ("bold" if selected else "")
        icon, icon_color = sd.get_status_icon(package)
        favorite = package.name in state.favorites
        lines.append(
            (
                Segment(f"{sd.SELECTED_MARKER if selected else ' '} ", "bold" if selected else ""),
                Segment(_fit(package.name, name_width), marker_style),
                Segment(" "),
                Segment(_fit(package.version or "-", version_width)),
                Segment(" "),
                Segment(_fit(sd.get_type_label(package.type), type_width), sd.get_type_color(package.type)),
                Segment(" "),
                Segment(icon, icon_color),
                Segment(f" {sd.FAVORITE_ICON}" if favorite else "", sd.FAVORITE_COLOR),
            )
        )
    remaining = shown - (selection.scroll + len(window))
    if remaining > 0:
        lines.append(_dim(f"  ↓ {remaining} more"))
    return PanelView(title, tuple(lines), focused)


def render_search(state: SessionState) -> PanelView:
    geometry = state.geometry
    focused = state.focus is PanelFocus.SEARCH
    lines: list[Line] = []

    if state.search_editing and focused:
        lines.append((Segment("> ", "bold"), Segment(state.query, "bold"), Segment("█", "blink")))
    elif state.query:
        lines.append((Segment("> ", "dim"), Segment(state.query)))
    else:
        lines.append(_dim("> Press / to search"))

    if state.searching:
        lines.append(_dim("Searching..."))
    elif state.search_results:
        lines.append(_dim(f"({len(state.search_results)} results)"))
    elif state.last_query:
        lines.append(_dim(f"No results for '{state.last_query}'"))

    selection = state.search_selection
    window = state.search_results[selection.scroll : selection.scroll + geometry.search_lines]
    for offset, package in enumerate(window):
        selected = selection.scroll + offset == selection.index
        prefix = f"{sd.SELECTED_MARKER} " if selected and focused else "  "
        style = sd.UP_TO_DATE_COLOR if package.installed else ""
        if selected and focused:
            style = f"bold {style}".strip()
        line = [Segment(prefix + package.name, style)]
        if package.installed:
            line.append(Segment(f" {sd.UP_TO_DATE_ICON}", sd.UP_TO_DATE_COLOR))
        if package.is_cask:
            line.append(Segment(" (cask)", "dim"))
        lines.append(tuple(line))

    remaining = len(state.search_results) - (selection.scroll + len(window))
    if remaining > 0:
        lines.append(_dim(f"  ↓ {remaining} more"))
    return PanelView("Search", tuple(lines), focused)


def render_dependencies(state: SessionState) -> PanelView:
    geometry = state.geometry
    focused = state.focus is PanelFocus.DEPENDENCIES
    detail = state.detail
    title = "Dependencies (loading...)" if state.detail_loading else "Dependencies"
    width = max(10, geometry.right_width - 4)

    if state.detail_error:
        ref = state.detail_ref
        name = ref.name if ref else "package"
        return PanelView(title, ((Segment(_fit(f"Could not load {name}", width).rstrip(), "red"),),), focused)
    if detail is None:
        message = "Loading..." if state.detail_loading else "Select a package to view dependencies"
        return PanelView(title, (_dim(message),), focused)

    header = [Segment(detail.name, "bold cyan")]
    if detail.version:
        header.append(Segment(f" {detail.version}", "cyan"))
    if detail.pinned:
        header.append(Segment(f" {sd.PINNED_ICON} pinned", sd.PINNED_COLOR))
    lines: list[Line] = [tuple(header)]
    if detail.description:
        lines.append(_dim(_fit(detail.description, width).rstrip()))

    rows = state.dependency_rows()
    if not rows:
        lines.append(_dim("No dependencies"))
        return PanelView(title, tuple(lines), focused)

    start = state.dependencies_scroll
    end = min(len(rows), start + geometry.dependencies_lines)
    if start > 0:
        lines.append(_dim(f"    ↑ {start} above"))
    for index in range(start, end):
        prefix = sd.TREE_LAST if index == len(rows) - 1 else sd.TREE_BRANCH
        lines.append((Segment(prefix + rows[index]),))
    if end < len(rows):
        lines.append(_dim(f"    ↓ {len(rows) - end} more (scroll with j/k)"))
    return PanelView(title, tuple(lines), focused)


def render_logs(state: SessionState) -> PanelView:
    visible = state.geometry.log_lines
    if not len(state.logs):
        return PanelView("Logs", (_dim("No logs yet"),))
    first, entries = state.logs.window(state.log_scroll, visible)
    title = "Logs"
    if state.log_scroll is not None:
        title = f"Logs ({first + 1}-{first + len(entries)} of {len(state.logs)})"
    lines = tuple((Segment(entry.text, sd.get_log_color(entry.level)),) for entry in entries)
    return PanelView(title, lines)


# =============================================================================
# Status bar and dialog
# =============================================================================

COMMON_HINTS = (
    "Tab: Switch",
    "d: Doctor",
    "c: Cleanup",
    "a: Autoremove",
    "r: Refresh",
    "?: Help",
    "q: Quit",
)


def status_hints(state: SessionState) -> list[str]:
    if state.focus is PanelFocus.SEARCH and state.search_editing:
        return ["Enter: Search", "Esc: Stop typing", "Tab: Switch"]
    hints: list[str] = []
    if state.focus is PanelFocus.INSTALLED:
        hints += ["u: Upgrade", "x: Uninstall", "U: Upgrade all", "p: Pin", "f: Favorite"]
    elif state.focus is PanelFocus.SEARCH:
        hints += ["Enter: Search/Install", "/: Edit query"]
    else:
        hints += ["j/k: Scroll"]
    return hints + list(COMMON_HINTS)


def render_status_bar(state: SessionState) -> StatusBarView:
    status = state.status
    if status.in_progress:
        text = f"⟳ {status.message}"
        others = len(state.in_flight) - 1
        if others:
            text += f" (+{others} more)"
        return StatusBarView(text, "bold yellow", in_progress=True)
    if state.status_message:
        style = "bold red" if state.status_message.startswith("Error") else "yellow"
        return StatusBarView(state.status_message, style)
    return StatusBarView(" • ".join(status_hints(state)), "dim")


def render_dialog(state: SessionState) -> DialogView | None:
    dialog = state.dialog
    if not dialog.visible:
        return None
    return DialogView(
        title=dialog.title,
        message=dialog.message,
        options=dialog.options,
        selected=dialog.selected,
    )


def render_dashboard(state: SessionState) -> DashboardLayout:
    """Describe the whole dashboard for the current state."""
    installed = render_installed(state)
    if state.filters != _DEFAULT_FILTERS:
        installed = PanelView(
            f"{installed.title} [{filters_summary(state.filters)}]",
            installed.lines,
            installed.focused,
        )
    return DashboardLayout(
        geometry=state.geometry,
        installed=installed,
        search=render_search(state),
        dependencies=render_dependencies(state),
        logs=render_logs(state),
        status_bar=render_status_bar(state),
        dialog=render_dialog(state),
    )


_DEFAULT_FILTERS = SessionState().filters
