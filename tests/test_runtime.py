"""Tests for the work executor."""

import asyncio

import pytest

from brewdeck.exceptions import FavoritesError
from brewdeck.models import PackageFilters, PackageRef, PackageType
from brewdeck.session import actions
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
)
from brewdeck.session.runtime import WorkExecutor
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
)
from brewdeck.state.store import PackageStore
from brewdeck.testing import MockBrewClient


@pytest.fixture
def client():
    client = MockBrewClient()
    client.add_installed("git", "2.43.0", dependencies=("gettext",))
    client.add_installed("wget", "1.21.3")
    client.add_installed("firefox", "110.0", PackageType.CASK)
    client.set_outdated("wget", "1.21.4")
    client.add_available("jq")
    return client


@pytest.fixture
def posted():
    return []


@pytest.fixture
def saved():
    return []


@pytest.fixture
def executor(client, posted, saved):
    return WorkExecutor(client, PackageStore(), posted.append, persist_favorites=saved.append)


@pytest.mark.asyncio
class TestLists:
    """Test installed, outdated and search work."""

    async def test_load_installed(self, executor, posted):
        """Installed packages are stored and reported."""
        executor.execute([LoadInstalled()])
        await executor.wait_idle()

        event = posted[-1]
        assert isinstance(event, InstalledLoaded)
        assert event.total == 3
        assert {p.name for p in event.packages} == {"git", "wget", "firefox"}
        assert executor.store.installed_count() == 3

    async def test_load_installed_failure(self, client, executor, posted):
        """A failed listing posts InstalledFailed."""
        client.set_failure("list_installed", "brew list failed: boom")
        executor.execute([LoadInstalled()])
        await executor.wait_idle()

        assert posted == [InstalledFailed("brew list failed: boom")]

    async def test_load_outdated_merges(self, executor, posted):
        """The outdated check marks installed packages outdated."""
        executor.execute([LoadInstalled()])
        await executor.wait_idle()
        executor.execute([LoadOutdated()])
        await executor.wait_idle()

        event = posted[-1]
        assert isinstance(event, OutdatedLoaded)
        assert event.outdated_count == 1
        assert [p.name for p in event.packages if p.outdated] == ["wget"]

    async def test_outdated_failure_means_none(self, client, executor, posted):
        """A failing outdated check counts as nothing outdated."""
        client.set_failure("outdated", "network down")
        executor.execute([LoadOutdated()])
        await executor.wait_idle()

        assert posted == [OutdatedLoaded((), 0)]

    async def test_search_marks_installed(self, executor, posted):
        """Search results are flagged when already installed."""
        executor.execute([LoadInstalled()])
        await executor.wait_idle()
        executor.execute([RunSearch("g")])
        await executor.wait_idle()

        event = posted[-1]
        assert isinstance(event, SearchCompleted)
        assert event.query == "g"
        assert {p.name: p.installed for p in event.results} == {"git": True, "wget": True}
        assert executor.store.get_search_results() == list(event.results)

    async def test_search_failure(self, client, executor, posted):
        """A failing search posts SearchFailed."""
        client.set_failure("search", "brew search failed")
        executor.execute([RunSearch("jq")])
        await executor.wait_idle()

        assert posted == [SearchFailed("jq", "brew search failed")]


@pytest.mark.asyncio
class TestDetail:
    """Test debounce timers and detail loads."""

    async def test_load_detail(self, executor, posted):
        """Detail loads carry their token."""
        executor.execute([LoadDetail(7, PackageRef("git"))])
        await executor.wait_idle()

        event = posted[-1]
        assert isinstance(event, DetailLoaded)
        assert event.token == 7
        assert event.info.dependencies == ("gettext",)

    async def test_load_detail_failure(self, executor, posted):
        """Unknown packages post DetailFailed."""
        ref = PackageRef("ghost")
        executor.execute([LoadDetail(3, ref)])
        await executor.wait_idle()

        event = posted[-1]
        assert isinstance(event, DetailFailed)
        assert event.token == 3
        assert event.ref == ref
        assert "ghost" in event.error

    async def test_debounce_fires_after_delay(self, executor, posted):
        """A scheduled debounce posts DebounceFired."""
        ref = PackageRef("git")
        executor.execute([ScheduleDebounce(1, ref, 0.01)])
        assert posted == []

        await asyncio.sleep(0.05)
        assert posted == [DebounceFired(1, ref)]

    async def test_newer_debounce_cancels_older(self, executor, posted):
        """Only the latest scheduled trigger fires."""
        executor.execute(
            [
                ScheduleDebounce(1, PackageRef("git"), 0.01),
                ScheduleDebounce(2, PackageRef("wget"), 0.01),
            ]
        )
        await asyncio.sleep(0.05)

        assert posted == [DebounceFired(2, PackageRef("wget"))]


@pytest.mark.asyncio
class TestActions:
    """Test confirmed actions."""

    async def test_upgrade(self, client, executor, posted):
        """A successful upgrade posts ActionSucceeded."""
        action = actions.upgrade(PackageRef("wget"))
        executor.execute([RunAction(action)])
        await executor.wait_idle()

        assert posted == [ActionSucceeded(action)]
        assert client.called("upgrade") == [("wget",)]
        assert client.installed["wget"].version == "1.21.4"

    async def test_upgrade_all(self, client, executor, posted):
        """Upgrade all passes no names."""
        executor.execute([RunAction(actions.upgrade_all(1))])
        await executor.wait_idle()

        assert client.called("upgrade") == [()]
        assert isinstance(posted[-1], ActionSucceeded)

    async def test_install_cask(self, client, executor):
        """Cask refs install as casks."""
        client.add_available("iterm2", PackageType.CASK)
        executor.execute([RunAction(actions.install(PackageRef("iterm2", PackageType.CASK)))])
        await executor.wait_idle()

        assert client.installed["iterm2"].is_cask

    @pytest.mark.parametrize(
        "action, method",
        [
            (actions.uninstall(PackageRef("git")), "uninstall"),
            (actions.pin(PackageRef("git")), "pin"),
            (actions.unpin(PackageRef("git")), "unpin"),
            (actions.cleanup(), "cleanup"),
            (actions.autoremove(), "autoremove"),
        ],
    )
    async def test_action_calls_client(self, client, executor, posted, action, method):
        """Each action kind calls its client method."""
        executor.execute([RunAction(action)])
        await executor.wait_idle()

        assert len(client.called(method)) == 1
        assert posted == [ActionSucceeded(action)]

    async def test_failure(self, client, executor, posted):
        """A failing action posts ActionFailed with the brew message."""
        client.set_failure("uninstall", "brew uninstall failed: Error: Refusing to uninstall")
        action = actions.uninstall(PackageRef("git"))
        executor.execute([RunAction(action)])
        await executor.wait_idle()

        assert posted == [ActionFailed(action, "brew uninstall failed: Error: Refusing to uninstall")]

    async def test_doctor(self, client, executor, posted):
        """Doctor posts its report."""
        client.doctor_report = "Warning: stale\n"
        action = actions.doctor()
        executor.execute([RunAction(action)])
        await executor.wait_idle()

        assert posted == [DoctorCompleted(action, "Warning: stale\n")]

    async def test_stop_cancels_running_work(self, client, executor, posted):
        """stop() cancels tasks so nothing is posted afterwards."""
        client.hold("list_installed")
        executor.execute([LoadInstalled()])
        await asyncio.sleep(0)
        assert executor.pending_tasks == 1

        await executor.stop()

        assert executor.pending_tasks == 0
        assert posted == []


@pytest.mark.asyncio
class TestSynchronousWork:
    """Test work that completes immediately."""

    async def test_apply_filters(self, executor, posted):
        """Filters are stored and the re-filtered list is posted at once."""
        executor.execute([LoadInstalled()])
        await executor.wait_idle()
        filters = PackageFilters(show_casks=False)

        executor.execute([ApplyFilters(filters)])

        event = posted[-1]
        assert isinstance(event, PackagesFiltered)
        assert event.filters == filters
        assert {p.name for p in event.packages} == {"git", "wget"}

    async def test_toggle_favorite_saves(self, executor, posted, saved):
        """Toggling persists the new set."""
        executor.execute([ToggleFavorite("git")])

        assert posted == [FavoritesChanged(frozenset({"git"}))]
        assert saved == [{"git"}]

    async def test_toggle_favorite_save_error(self, client, posted):
        """A save failure keeps the toggle and reports the error."""

        def fail(names):
            raise FavoritesError("Failed to write favorites file")

        executor = WorkExecutor(client, PackageStore(), posted.append, persist_favorites=fail)
        executor.execute([ToggleFavorite("git")])

        assert posted == [
            FavoritesChanged(frozenset({"git"}), error="Could not save favorites: Failed to write favorites file")
        ]
        assert executor.store.is_favorite("git")

    async def test_help_and_quit_callbacks(self, client, posted):
        """ShowHelp and Quit call their hooks."""
        calls = []
        executor = WorkExecutor(
            client,
            PackageStore(),
            posted.append,
            on_help=lambda: calls.append("help"),
            on_quit=lambda: calls.append("quit"),
        )
        executor.execute([ShowHelp(), Quit()])

        assert calls == ["help", "quit"]
