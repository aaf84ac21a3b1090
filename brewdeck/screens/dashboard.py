"""Homebrew dashboard screen.

The one screen of the application. It owns the session controller and the
work executor, feeds them operator keys, resizes and completion events,
and redraws every panel from the resulting state.

Layout:
┌──────────────────────────┬──────────────────────────┐
│ Installed (42)           │ Search                   │
│   NAME     VERSION  TYPE │ > wget█                  │
│ ▶ git      2.39.0   ...  ├──────────────────────────┤
│   wget     1.21.4   ...  │ Dependencies             │
│   ...                    │ wget 1.21.4              │
│                          │ ├── libidn2              │
│                          ├──────────────────────────┤
│                          │ Logs                     │
│                          │ ✓ Loaded 42 packages     │
└──────────────────────────┴──────────────────────────┘
 u: Upgrade • x: Uninstall • ... • q: Quit
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from textual import events
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import Screen

from brewdeck.config import save_favorites
from brewdeck.ports import PackageManagerClient
from brewdeck.screens.modals import ConfirmModal, HelpModal
from brewdeck.session.controller import SessionController
from brewdeck.session.events import KeyPressed, Resized, SessionEvent, SessionStarted
from brewdeck.session.render import DashboardLayout, DialogView, render_dashboard
from brewdeck.session.runtime import WorkExecutor
from brewdeck.state import PackageStore, SessionEventPosted
from brewdeck.widgets import PanelWidget, StatusBar

if TYPE_CHECKING:
    from brewdeck.app import BrewDeckApp

logger = logging.getLogger(__name__)


class DashboardScreen(Screen):
    """Four-panel Homebrew dashboard with a status bar."""

    CSS = """
    DashboardScreen {
        layout: vertical;
    }

    DashboardScreen #main {
        height: 1fr;
    }

    DashboardScreen #installed {
        width: 1fr;
    }

    DashboardScreen #right {
        width: 1fr;
    }

    DashboardScreen #search {
        height: 35fr;
    }

    DashboardScreen #dependencies {
        height: 35fr;
    }

    DashboardScreen #logs {
        height: 30fr;
    }
    """

    def __init__(
        self,
        client: PackageManagerClient,
        store: PackageStore,
        *,
        controller: SessionController | None = None,
        persist_favorites: Callable[[set[str]], None] = save_favorites,
    ) -> None:
        """Initialize the dashboard.

        Args:
            client: Homebrew operations.
            store: Shared package lists, filters and favorites.
            controller: Session controller; a default one is created if omitted.
            persist_favorites: Writes favorites after each toggle.
        """
        super().__init__()
        self.client = client
        self.store = store
        self.controller = controller or SessionController(
            filters=store.get_filters(),
            favorites=store.favorites(),
        )
        self.executor = WorkExecutor(
            client,
            store,
            self._post_event,
            on_quit=self._request_quit,
            on_help=self._show_help,
            persist_favorites=persist_favorites,
        )
        self.layout_view: DashboardLayout | None = None
        self._confirm: ConfirmModal | None = None

    def compose(self) -> ComposeResult:
        """Compose the dashboard layout."""
        with Horizontal(id="main"):
            yield PanelWidget(id="installed")
            with Vertical(id="right"):
                yield PanelWidget(id="search")
                yield PanelWidget(id="dependencies")
                yield PanelWidget(id="logs")
        yield StatusBar(id="status-bar")

    def on_mount(self) -> None:
        """Size the layout and start the initial load."""
        size = self.app.size
        self.handle(Resized(size.width, size.height))
        self.handle(SessionStarted())

    async def on_unmount(self) -> None:
        await self.executor.stop()

    # -------------------------------------------------------------------------
    # Event intake
    # -------------------------------------------------------------------------

    def on_resize(self, event: events.Resize) -> None:
        self.handle(Resized(event.size.width, event.size.height))

    def on_key(self, event: events.Key) -> None:
        """Route every key through the session controller."""
        event.stop()
        event.prevent_default()
        self.handle(KeyPressed(event.key, event.character))

    def on_session_event_posted(self, message: SessionEventPosted) -> None:
        self.handle(message.event)

    def _post_event(self, event: SessionEvent) -> None:
        self.post_message(SessionEventPosted(event))

    def handle(self, event: SessionEvent) -> None:
        """Apply one event, start its work and redraw."""
        work = self.controller.handle(event)
        if work:
            logger.debug("%s -> %s", type(event).__name__, [type(w).__name__ for w in work])
        self.executor.execute(work)
        self._refresh_view()

    # -------------------------------------------------------------------------
    # Drawing
    # -------------------------------------------------------------------------

    def _refresh_view(self) -> None:
        if not self.is_mounted:
            return
        layout = render_dashboard(self.controller.state)
        self.layout_view = layout
        self.query_one("#installed", PanelWidget).show(layout.installed)
        self.query_one("#search", PanelWidget).show(layout.search)
        self.query_one("#dependencies", PanelWidget).show(layout.dependencies)
        self.query_one("#logs", PanelWidget).show(layout.logs)
        self.query_one("#status-bar", StatusBar).show(layout.status_bar)
        self._sync_dialog(layout.dialog)

    def _sync_dialog(self, view: DialogView | None) -> None:
        if view is None:
            if self._confirm is not None:
                confirm, self._confirm = self._confirm, None
                confirm.dismiss(None)
            return
        if self._confirm is None:
            self._confirm = ConfirmModal(view, self.handle)
            self.app.push_screen(self._confirm)
        else:
            self._confirm.show(view)

    # -------------------------------------------------------------------------
    # Work callbacks
    # -------------------------------------------------------------------------

    def _show_help(self) -> None:
        self.app.push_screen(HelpModal())

    def _request_quit(self) -> None:
        self.call_later(self._shutdown)

    async def _shutdown(self) -> None:
        await self.executor.stop()
        app: BrewDeckApp = self.app  # type: ignore[assignment]
        await app.action_request_quit()
