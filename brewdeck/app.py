"""Main Textual app class.

This module provides the Homebrew dashboard TUI application.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from textual.app import App
from textual.binding import Binding

from brewdeck.brew import BrewClient
from brewdeck.config import load_config_or_default, load_favorites, save_config, save_favorites
from brewdeck.exceptions import ConfigError
from brewdeck.models import AppConfig
from brewdeck.ports import PackageManagerClient
from brewdeck.screens.dashboard import DashboardScreen
from brewdeck.screens.modals import ConfirmModal
from brewdeck.session.controller import SessionController
from brewdeck.state import PackageStore

logger = logging.getLogger(__name__)


class BrewDeckApp(App):
    """Interactive Homebrew dashboard."""

    CSS_PATH = "styles.tcss"
    TITLE = "brewdeck"

    BINDINGS = [
        Binding("ctrl+c", "request_quit", "Quit", show=False, priority=True),
    ]

    def __init__(
        self,
        client: PackageManagerClient | None = None,
        config: AppConfig | None = None,
        *,
        favorites: set[str] | None = None,
        persist: bool = True,
    ) -> None:
        """Initialize the application.

        Args:
            client: Homebrew operations; a ``BrewClient`` for ``config.brew_path``
                if omitted.
            config: Settings; loaded from disk if omitted.
            favorites: Favorite names; loaded from disk if omitted.
            persist: Whether to write config and favorites back to disk.
        """
        super().__init__()
        self.config = config if config is not None else load_config_or_default()
        self.client = client or BrewClient(self.config.brew_path)
        self.persist = persist
        if favorites is None:
            favorites = self._load_favorites() if persist else set()
        self.store = PackageStore(filters=self.config.default_filters(), favorites=favorites)

    def _load_favorites(self) -> set[str]:
        try:
            return load_favorites()
        except ConfigError as e:
            logger.warning("Ignoring unreadable favorites: %s", e)
            return set()

    def _persist_favorites(self) -> Callable[[set[str]], None]:
        if self.persist:
            return save_favorites
        return lambda favorites: None

    def create_dashboard(self) -> DashboardScreen:
        controller = SessionController(
            debounce_delay=self.config.debounce_delay_ms / 1000,
            log_capacity=self.config.log_capacity,
            filters=self.store.get_filters(),
            favorites=self.store.favorites(),
        )
        return DashboardScreen(
            self.client,
            self.store,
            controller=controller,
            persist_favorites=self._persist_favorites(),
        )

    async def on_mount(self) -> None:
        """Push the dashboard."""
        self.push_screen(self.create_dashboard())

    async def action_request_quit(self) -> None:
        """Save settings and exit.

        A pending confirmation keeps the keyboard: ctrl+c is ignored until
        the dialog is resolved.
        """
        if isinstance(self.screen, ConfirmModal):
            logger.debug("Ignoring quit while a confirmation is open")
            return
        await self._cleanup_and_exit()

    async def _cleanup_and_exit(self) -> None:
        if self.persist:
            try:
                save_favorites(self.store.favorites())
                save_config(self.config)
            except ConfigError as e:
                logger.warning("Could not save settings on exit: %s", e)
        self.exit()
