"""Carries out the work requested by the session controller.

``WorkExecutor`` is the only place where the session touches brew, the
package store or the filesystem. Each piece of work runs as an asyncio
task and reports back by posting a session event; nothing here mutates
``SessionState`` directly.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Coroutine, Iterable
from dataclasses import replace
from typing import Any

from brewdeck.config import save_favorites
from brewdeck.exceptions import BrewDeckError, FavoritesError, record_error
from brewdeck.logging_config import log_exception
from brewdeck.models import InstallOptions, UninstallOptions
from brewdeck.ports import PackageManagerClient
from brewdeck.session.actions import ActionKind, PendingAction
from brewdeck.session.events import (
    ActionFailed,
    ActionSucceeded,
    DebounceFired,
    DetailFailed,
    DetailLoaded,
    DoctorCompleted,
    FavoritesChanged,
    InstalledFailed,
    InstalledLoaded,
    OutdatedLoaded,
    PackagesFiltered,
    SearchCompleted,
    SearchFailed,
    SessionEvent,
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
from brewdeck.state.store import PackageStore

logger = logging.getLogger(__name__)

PostEvent = Callable[[SessionEvent], None]


def _describe(error: Exception) -> str:
    return str(error) or type(error).__name__


class WorkExecutor:
    """Runs ``Work`` items against a package manager client.

    Args:
        client: Homebrew operations (the real ``BrewClient`` or a fake).
        store: Shared package lists, filters and favorites.
        post: Called with every completion event. The dashboard screen
            wraps it in a Textual message so events are handled in order.
        on_quit: Called for ``Quit``.
        on_help: Called for ``ShowHelp``.
        persist_favorites: Writes the favorites set; ``save_favorites`` by
            default.
    """

    def __init__(
        self,
        client: PackageManagerClient,
        store: PackageStore,
        post: PostEvent,
        *,
        on_quit: Callable[[], None] | None = None,
        on_help: Callable[[], None] | None = None,
        persist_favorites: Callable[[set[str]], None] = save_favorites,
    ) -> None:
        self.client = client
        self.store = store
        self.post = post
        self.on_quit = on_quit
        self.on_help = on_help
        self.persist_favorites = persist_favorites
        self._tasks: set[asyncio.Task] = set()
        self._timer: asyncio.TimerHandle | None = None

    @property
    def pending_tasks(self) -> int:
        return len(self._tasks)

    def execute(self, work: Iterable[Work]) -> None:
        for item in work:
            self._dispatch(item)

    def _dispatch(self, item: Work) -> None:
        if isinstance(item, ScheduleDebounce):
            self._schedule_debounce(item)
        elif isinstance(item, LoadDetail):
            self._spawn(self._load_detail(item))
        elif isinstance(item, RunSearch):
            self._spawn(self._run_search(item.query))
        elif isinstance(item, LoadInstalled):
            self._spawn(self._load_installed())
        elif isinstance(item, LoadOutdated):
            self._spawn(self._load_outdated())
        elif isinstance(item, RunAction):
            self._spawn(self._run_action(item.action))
        elif isinstance(item, ApplyFilters):
            self.store.set_filters(item.filters)
            packages = tuple(self.store.get_filtered_packages())
            self.post(PackagesFiltered(packages, item.filters))
        elif isinstance(item, ToggleFavorite):
            self._toggle_favorite(item.name)
        elif isinstance(item, ShowHelp):
            if self.on_help is not None:
                self.on_help()
        elif isinstance(item, Quit):
            if self.on_quit is not None:
                self.on_quit()
        else:
            logger.warning("Unknown work item: %r", item)

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def wait_idle(self) -> None:
        """Wait until every running task (including ones they start) is done."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def stop(self) -> None:
        """Cancel the pending debounce timer and every running task."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()

    # -------------------------------------------------------------------------
    # Detail
    # -------------------------------------------------------------------------

    def _schedule_debounce(self, item: ScheduleDebounce) -> None:
        # Only the newest token can take effect, so an older timer is dead weight.
        if self._timer is not None:
            self._timer.cancel()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(
            item.delay, self.post, DebounceFired(item.token, item.ref)
        )

    async def _load_detail(self, item: LoadDetail) -> None:
        try:
            info = await self.client.info(item.ref.name, item.ref.is_cask)
        except Exception as e:
            logger.warning("Failed to load details for %s: %s", item.ref.name, e)
            self.post(DetailFailed(item.token, item.ref, _describe(e)))
            return
        self.post(DetailLoaded(item.token, info))

    # -------------------------------------------------------------------------
    # Lists
    # -------------------------------------------------------------------------

    async def _run_search(self, query: str) -> None:
        try:
            found = await self.client.search(query)
        except Exception as e:
            logger.error("Search for %r failed: %s", query, e)
            record_error(e)
            self.post(SearchFailed(query, _describe(e)))
            return
        installed = self.store.installed_names()
        results = [replace(p, installed=p.name in installed) for p in found]
        self.store.set_search_results(results)
        self.post(SearchCompleted(query, tuple(results)))

    async def _load_installed(self) -> None:
        try:
            packages = await self.client.list_installed()
        except Exception as e:
            logger.error("Failed to list installed packages: %s", e)
            record_error(e)
            self.post(InstalledFailed(_describe(e)))
            return
        self.store.set_installed(packages)
        filtered = tuple(self.store.get_filtered_packages())
        self.post(InstalledLoaded(filtered, self.store.installed_count()))

    async def _load_outdated(self) -> None:
        # BrewClient.outdated already degrades to []; other clients may not.
        try:
            outdated = await self.client.outdated()
        except Exception as e:
            logger.warning("Outdated check failed, treating as none outdated: %s", e)
            outdated = []
        self.store.set_outdated(outdated)
        filtered = tuple(self.store.get_filtered_packages())
        self.post(OutdatedLoaded(filtered, self.store.outdated_count()))

    # -------------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------------

    async def _run_action(self, action: PendingAction) -> None:
        try:
            if action.kind is ActionKind.DOCTOR:
                report = await self.client.doctor()
                self.post(DoctorCompleted(action, report))
                return
            await self._perform(action)
        except Exception as e:
            if not isinstance(e, BrewDeckError):
                log_exception(logger, e, f"Unexpected failure running {action.kind.value}")
            else:
                logger.error("%s failed: %s", action.title, e)
            record_error(e)
            self.post(ActionFailed(action, _describe(e)))
            return
        self.post(ActionSucceeded(action))

    async def _perform(self, action: PendingAction) -> None:
        ref = action.package
        kind = action.kind
        if kind is ActionKind.UPGRADE_ALL:
            await self.client.upgrade([])
        elif kind is ActionKind.CLEANUP:
            await self.client.cleanup()
        elif kind is ActionKind.AUTOREMOVE:
            await self.client.autoremove()
        elif ref is None:
            raise ValueError(f"{kind.value} needs a package")
        elif kind is ActionKind.INSTALL:
            await self.client.install(ref.name, InstallOptions(cask=ref.is_cask))
        elif kind is ActionKind.UNINSTALL:
            await self.client.uninstall(ref.name, UninstallOptions(cask=ref.is_cask))
        elif kind is ActionKind.UPGRADE:
            await self.client.upgrade([ref.name])
        elif kind is ActionKind.PIN:
            await self.client.pin(ref.name)
        elif kind is ActionKind.UNPIN:
            await self.client.unpin(ref.name)

    # -------------------------------------------------------------------------
    # Favorites
    # -------------------------------------------------------------------------

    def _toggle_favorite(self, name: str) -> None:
        now_favorite = self.store.toggle_favorite(name)
        favorites = self.store.favorites()
        logger.debug("%s %s favorites", name, "added to" if now_favorite else "removed from")
        try:
            self.persist_favorites(favorites)
        except FavoritesError as e:
            self.post(FavoritesChanged(frozenset(favorites), error=f"Could not save favorites: {e.message}"))
            return
        self.post(FavoritesChanged(frozenset(favorites)))
