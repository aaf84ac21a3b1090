"""Tests for the package manager port and its mock implementation."""

import asyncio

import pytest

from brewdeck.brew import BrewClient
from brewdeck.exceptions import BrewCommandError
from brewdeck.models import InstallOptions, PackageType
from brewdeck.ports import PackageManagerClient
from brewdeck.testing import MockBrewClient, demo_client


class TestProtocolConformance:
    """Both adapters satisfy the port."""

    def test_brew_client_is_package_manager(self):
        """BrewClient implements PackageManagerClient."""
        assert isinstance(BrewClient(), PackageManagerClient)

    def test_mock_is_package_manager(self):
        """MockBrewClient implements PackageManagerClient."""
        assert isinstance(MockBrewClient(), PackageManagerClient)


@pytest.mark.asyncio
class TestMockBrewClient:
    """Test the in-memory client."""

    async def test_list_installed_by_type(self):
        """Formulae and casks can be listed separately."""
        client = demo_client()
        casks = await client.list_installed(formulae=False)
        assert {p.name for p in casks} == {"iterm2", "firefox"}
        assert all(p.is_cask for p in casks)

    async def test_calls_recorded(self):
        """Each call is recorded with its arguments."""
        client = MockBrewClient()
        await client.search("jq")
        await client.cleanup()
        assert client.calls == [("search", ("jq",)), ("cleanup", ())]

    async def test_install_then_info(self):
        """An installed package reports as installed."""
        client = MockBrewClient()
        client.add_available("jq", version="1.7.1", dependencies=("oniguruma",))

        await client.install("jq", InstallOptions())
        info = await client.info("jq")

        assert info.installed
        assert info.version == "1.7.1"
        assert client.installed["jq"].version == "1.7.1"

    async def test_outdated_and_upgrade_all(self):
        """Upgrade all skips pinned packages."""
        client = demo_client()
        await client.upgrade([])

        remaining = [p.name for p in await client.outdated()]
        assert remaining == ["node"]
        assert client.installed["wget"].version == "1.21.4"

    async def test_pin_and_list_pinned(self):
        """Pins are reflected in list_pinned."""
        client = MockBrewClient()
        client.add_installed("git")
        await client.pin("git")
        assert await client.list_pinned() == ["git"]
        await client.unpin("git")
        assert await client.list_pinned() == []

    async def test_taps(self):
        """Taps can be added and removed."""
        client = MockBrewClient()
        await client.tap_add("user/tools")
        assert [t.name for t in await client.list_taps()] == ["homebrew/core", "user/tools"]
        await client.tap_remove("user/tools")
        assert [t.name for t in await client.list_taps()] == ["homebrew/core"]

    async def test_set_failure(self):
        """A configured failure raises BrewCommandError until cleared."""
        client = MockBrewClient()
        client.set_failure("doctor", "brew doctor failed")

        with pytest.raises(BrewCommandError, match="brew doctor failed"):
            await client.doctor()

        client.set_failure("doctor", None)
        assert await client.doctor() == "Your system is ready to brew."

    async def test_hold_and_release(self):
        """A held method waits until released."""
        client = MockBrewClient()
        client.hold("cleanup")
        task = asyncio.create_task(client.cleanup())
        await asyncio.sleep(0)
        assert not task.done()

        client.release("cleanup")
        await asyncio.wait_for(task, timeout=1)
        assert client.called("cleanup") == [()]

    async def test_unknown_info_raises(self):
        """Unknown names raise like brew does."""
        with pytest.raises(BrewCommandError):
            await MockBrewClient().info("ghost")

    async def test_stream_update(self):
        """stream_update yields the configured lines."""
        client = MockBrewClient()
        client.update_output = ["Updated 1 tap (homebrew/core).", "==> Outdated Formulae"]
        assert [line async for line in client.stream_update()] == client.update_output

    async def test_search_casks(self):
        """Search keeps cask types."""
        client = demo_client()
        results = await client.search("visual")
        assert results[0].type is PackageType.CASK
