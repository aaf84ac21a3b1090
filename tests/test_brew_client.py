"""Tests for BrewClient command construction and result handling."""

import json
from unittest.mock import AsyncMock, MagicMock, call

import pytest

from brewdeck.brew.client import BrewClient
from brewdeck.exceptions import BrewCommandError
from brewdeck.models import InstallOptions, PackageType, UninstallOptions


def make_client(outputs=None, raw=None):
    """Build a client over a mocked executor.

    Args:
        outputs: Maps the joined argument string to stdout or an exception.
        raw: Return value for run_raw.
    """
    outputs = outputs or {}
    executor = MagicMock()

    async def run(*args):
        result = outputs.get(" ".join(args), "")
        if isinstance(result, Exception):
            raise result
        return result

    executor.run = AsyncMock(side_effect=run)
    executor.run_raw = AsyncMock(return_value=raw or (0, "", ""))
    return BrewClient(executor=executor), executor


@pytest.mark.asyncio
class TestQueries:
    """Test read-only brew operations."""

    async def test_list_installed_marks_pinned(self):
        """Pinned formulae are flagged from brew list --pinned."""
        client, _ = make_client(
            {
                "list --formula --versions": "git 2.43.0\nnode 20.1.0\n",
                "list --cask --versions": "firefox 110.0\n",
                "list --pinned": "node\n",
            }
        )
        packages = await client.list_installed()

        by_name = {p.name: p for p in packages}
        assert by_name["node"].pinned
        assert not by_name["git"].pinned
        assert by_name["firefox"].type is PackageType.CASK

    async def test_list_installed_casks_only_skips_pinned_lookup(self):
        """Casks cannot be pinned so the lookup is skipped."""
        client, executor = make_client({"list --cask --versions": "firefox 110.0\n"})
        await client.list_installed(formulae=False)

        assert executor.run.call_args_list == [call("list", "--cask", "--versions")]

    async def test_pinned_failure_leaves_unpinned(self):
        """A failing pinned lookup is not fatal."""
        client, _ = make_client(
            {
                "list --formula --versions": "git 2.43.0\n",
                "list --pinned": BrewCommandError("brew list failed"),
            }
        )
        packages = await client.list_installed(casks=False)
        assert not packages[0].pinned

    async def test_info_json(self):
        """info parses JSON output."""
        payload = json.dumps({"formulae": [{"name": "wget", "versions": {"stable": "1.21.4"}}], "casks": []})
        client, executor = make_client({"info --json=v2 wget": payload})

        info = await client.info("wget")

        assert info.version == "1.21.4"
        executor.run.assert_called_once_with("info", "--json=v2", "wget")

    async def test_info_falls_back_to_text(self):
        """Non-JSON output triggers the text parser."""
        client, executor = make_client(
            {
                "info --json=v2 jq --cask": "not json",
                "info jq --cask": "jq: 1.7.1\nLightweight JSON processor\n",
            }
        )
        info = await client.info("jq", is_cask=True)

        assert info.type is PackageType.CASK
        assert info.description == "Lightweight JSON processor"
        assert executor.run.call_count == 2

    async def test_info_command_failure_propagates(self):
        """brew errors from info are raised."""
        client, _ = make_client({"info --json=v2 ghost": BrewCommandError("brew info failed")})
        with pytest.raises(BrewCommandError):
            await client.info("ghost")

    async def test_outdated_failure_returns_empty(self):
        """outdated degrades to an empty list."""
        client, _ = make_client({"outdated --json=v2": BrewCommandError("brew outdated failed")})
        assert await client.outdated() == []

    async def test_outdated_text_fallback(self):
        """Non-JSON outdated output is parsed as text."""
        client, _ = make_client({"outdated --json=v2": "wget (1.21.3) < 1.21.4\n"})
        packages = await client.outdated()
        assert packages[0].latest_version == "1.21.4"

    async def test_doctor_warnings_are_success(self):
        """A non-zero doctor exit with a report is returned, not raised."""
        client, _ = make_client(raw=(1, "", "Warning: Some installed formulae are deprecated.\n"))
        report = await client.doctor()
        assert report.startswith("Warning:")

    async def test_doctor_failure_without_report(self):
        """A non-zero doctor exit with no output raises."""
        client, _ = make_client(raw=(1, "", ""))
        with pytest.raises(BrewCommandError):
            await client.doctor()

    async def test_list_taps(self):
        """Taps are parsed from brew tap."""
        client, _ = make_client({"tap": "homebrew/core\nuser/tools\n"})
        taps = await client.list_taps()
        assert [t.name for t in taps] == ["homebrew/core", "user/tools"]


@pytest.mark.asyncio
class TestMutations:
    """Test argument construction for mutating commands."""

    async def test_install_cask_force(self):
        """Install options map to flags."""
        client, executor = make_client()
        await client.install("iterm2", InstallOptions(cask=True, force=True))
        executor.run.assert_called_once_with("install", "iterm2", "--cask", "--force")

    async def test_uninstall_formula(self):
        """A plain uninstall passes just the name."""
        client, executor = make_client()
        await client.uninstall("wget", UninstallOptions())
        executor.run.assert_called_once_with("uninstall", "wget")

    async def test_upgrade_all(self):
        """An empty list upgrades everything."""
        client, executor = make_client()
        await client.upgrade([])
        executor.run.assert_called_once_with("upgrade")

    async def test_upgrade_named(self):
        """Named packages are passed through."""
        client, executor = make_client()
        await client.upgrade(["wget", "git"])
        executor.run.assert_called_once_with("upgrade", "wget", "git")

    @pytest.mark.parametrize(
        "method, args, expected",
        [
            ("pin", ("node",), ("pin", "node")),
            ("unpin", ("node",), ("unpin", "node")),
            ("tap_add", ("user/tools",), ("tap", "user/tools")),
            ("tap_remove", ("user/tools",), ("untap", "user/tools")),
            ("cleanup", (), ("cleanup",)),
            ("autoremove", (), ("autoremove",)),
            ("update", (), ("update",)),
        ],
    )
    async def test_simple_commands(self, method, args, expected):
        """Simple commands map one-to-one onto brew subcommands."""
        client, executor = make_client()
        await getattr(client, method)(*args)
        executor.run.assert_called_once_with(*expected)

    async def test_mutation_failure_propagates(self):
        """Errors from mutating commands are raised."""
        client, _ = make_client({"install jq": BrewCommandError("brew install failed: Error: boom")})
        with pytest.raises(BrewCommandError, match="boom"):
            await client.install("jq")

    async def test_stream_update(self):
        """stream_update relays executor lines."""
        client, executor = make_client()

        async def stream(*args):
            for line in ("Updated 1 tap", "Already up-to-date."):
                yield line

        executor.stream = stream
        lines = [line async for line in client.stream_update()]
        assert lines == ["Updated 1 tap", "Already up-to-date."]
