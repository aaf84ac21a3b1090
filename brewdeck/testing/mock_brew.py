"""Mock Homebrew client for testing and demos.

``MockBrewClient`` implements ``PackageManagerClient`` against an in-memory
package set, so the dashboard can be exercised without brew installed.

Example usage in tests:
    from brewdeck.testing import MockBrewClient

    async def test_upgrade():
        client = MockBrewClient()
        client.add_installed("wget", "1.21.3")
        client.set_outdated("wget", "1.21.4")

        await client.upgrade(["wget"])
        assert client.calls[-1] == ("upgrade", ("wget",))
        assert await client.outdated() == []
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from dataclasses import replace

from brewdeck.exceptions import BrewCommandError
from brewdeck.models import (
    InstallOptions,
    OutdatedPackage,
    Package,
    PackageInfo,
    PackageType,
    Tap,
    UninstallOptions,
)


class MockBrewClient:
    """In-memory stand-in for ``BrewClient``.

    Every call is recorded in ``calls`` as ``(method, args)``. A method can be
    made to fail with ``set_failure`` or to block until released with
    ``hold``.
    """

    def __init__(self) -> None:
        self.installed: dict[str, Package] = {}
        self.catalog: dict[str, Package] = {}
        self.details: dict[str, PackageInfo] = {}
        self.latest: dict[str, str] = {}
        self.taps: list[Tap] = [Tap(name="homebrew/core", official=True)]
        self.doctor_report = "Your system is ready to brew."
        self.update_output = ["Already up-to-date."]
        self.calls: list[tuple[str, tuple]] = []
        self._failures: dict[str, str] = {}
        self._gates: dict[str, asyncio.Event] = {}

    # -------------------------------------------------------------------------
    # Test helpers
    # -------------------------------------------------------------------------

    def add_installed(
        self,
        name: str,
        version: str = "1.0.0",
        package_type: PackageType = PackageType.FORMULA,
        *,
        pinned: bool = False,
        dependencies: tuple[str, ...] = (),
        description: str = "",
    ) -> Package:
        package = Package(
            name=name,
            full_name=name,
            version=version,
            description=description,
            type=package_type,
            installed=True,
            pinned=pinned,
        )
        self.installed[name] = package
        self.catalog.setdefault(name, replace(package, installed=False))
        self.details.setdefault(
            name,
            PackageInfo(
                name=name,
                type=package_type,
                full_name=name,
                version=version,
                installed_version=version,
                description=description,
                dependencies=dependencies,
                installed=True,
                pinned=pinned,
            ),
        )
        return package

    def add_available(
        self,
        name: str,
        package_type: PackageType = PackageType.FORMULA,
        *,
        version: str = "1.0.0",
        dependencies: tuple[str, ...] = (),
        description: str = "",
    ) -> None:
        self.catalog[name] = Package(name=name, full_name=name, type=package_type)
        self.details.setdefault(
            name,
            PackageInfo(
                name=name,
                type=package_type,
                full_name=name,
                version=version,
                description=description,
                dependencies=dependencies,
            ),
        )

    def set_outdated(self, name: str, latest_version: str) -> None:
        self.latest[name] = latest_version

    def set_failure(self, method: str, message: str | None) -> None:
        """Make ``method`` raise ``BrewCommandError(message)``; None clears it."""
        if message is None:
            self._failures.pop(method, None)
        else:
            self._failures[method] = message

    def hold(self, method: str) -> asyncio.Event:
        """Block ``method`` until the returned event is set."""
        gate = asyncio.Event()
        self._gates[method] = gate
        return gate

    def release(self, method: str) -> None:
        gate = self._gates.pop(method, None)
        if gate is not None:
            gate.set()

    def called(self, method: str) -> list[tuple]:
        return [args for name, args in self.calls if name == method]

    async def _enter(self, method: str, *args: object) -> None:
        self.calls.append((method, args))
        gate = self._gates.get(method)
        if gate is not None:
            await gate.wait()
        message = self._failures.get(method)
        if message is not None:
            raise BrewCommandError(
                message,
                command=" ".join(["brew", method, *map(str, args)]),
                returncode=1,
                stderr=message,
            )

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    async def list_installed(self, formulae: bool = True, casks: bool = True) -> list[Package]:
        await self._enter("list_installed")
        return [
            p
            for p in self.installed.values()
            if (formulae and not p.is_cask) or (casks and p.is_cask)
        ]

    async def search(self, query: str) -> list[Package]:
        await self._enter("search", query)
        needle = query.lower()
        return [
            replace(p, installed=False)
            for name, p in sorted(self.catalog.items())
            if needle in name.lower()
        ]

    async def info(self, name: str, is_cask: bool = False) -> PackageInfo:
        await self._enter("info", name)
        info = self.details.get(name)
        if info is None:
            raise BrewCommandError(
                f"No available formula with the name \"{name}\"",
                command=f"brew info {name}",
                returncode=1,
            )
        installed = self.installed.get(name)
        return replace(
            info,
            installed=installed is not None,
            pinned=bool(installed and installed.pinned),
            outdated=name in self.latest,
        )

    async def outdated(self) -> list[OutdatedPackage]:
        await self._enter("outdated")
        return [
            OutdatedPackage(
                name=name,
                current_version=self.installed[name].version,
                latest_version=latest,
                pinned=self.installed[name].pinned,
                type=self.installed[name].type,
            )
            for name, latest in sorted(self.latest.items())
            if name in self.installed
        ]

    async def list_pinned(self) -> list[str]:
        await self._enter("list_pinned")
        return sorted(name for name, p in self.installed.items() if p.pinned)

    async def doctor(self) -> str:
        await self._enter("doctor")
        return self.doctor_report

    async def list_taps(self) -> list[Tap]:
        await self._enter("list_taps")
        return list(self.taps)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    async def install(self, name: str, opts: InstallOptions | None = None) -> None:
        opts = opts or InstallOptions()
        await self._enter("install", name)
        available = self.catalog.get(name)
        package_type = PackageType.CASK if opts.cask else PackageType.FORMULA
        version = self.details[name].version if name in self.details else "1.0.0"
        self.installed[name] = Package(
            name=name,
            full_name=name,
            version=version,
            description=available.description if available else "",
            type=package_type,
            installed=True,
        )

    async def uninstall(self, name: str, opts: UninstallOptions | None = None) -> None:
        await self._enter("uninstall", name)
        self.installed.pop(name, None)
        self.latest.pop(name, None)

    async def upgrade(self, names: list[str]) -> None:
        await self._enter("upgrade", *names)
        targets = names or [n for n in self.latest if not self.installed.get(n, Package(n)).pinned]
        for name in targets:
            latest = self.latest.pop(name, None)
            if latest and name in self.installed:
                self.installed[name] = replace(self.installed[name], version=latest)

    async def update(self) -> None:
        await self._enter("update")

    async def stream_update(self) -> AsyncIterator[str]:
        await self._enter("update")
        for line in self.update_output:
            yield line

    async def pin(self, name: str) -> None:
        await self._enter("pin", name)
        if name in self.installed:
            self.installed[name] = replace(self.installed[name], pinned=True)

    async def unpin(self, name: str) -> None:
        await self._enter("unpin", name)
        if name in self.installed:
            self.installed[name] = replace(self.installed[name], pinned=False)

    async def tap_add(self, name: str) -> None:
        await self._enter("tap_add", name)
        self.taps.append(Tap(name=name, official=name.startswith("homebrew/")))

    async def tap_remove(self, name: str) -> None:
        await self._enter("tap_remove", name)
        self.taps = [t for t in self.taps if t.name != name]

    async def cleanup(self) -> None:
        await self._enter("cleanup")

    async def autoremove(self) -> None:
        await self._enter("autoremove")


def demo_client() -> MockBrewClient:
    """A mock client with a small, realistic package set for ``--demo``."""
    client = MockBrewClient()
    client.add_installed(
        "git",
        "2.39.0",
        dependencies=("gettext", "pcre2"),
        description="Distributed revision control system",
    )
    client.add_installed(
        "wget",
        "1.21.3",
        dependencies=("libidn2", "openssl@3"),
        description="Internet file retriever",
    )
    client.add_installed("openssl@3", "3.1.0", dependencies=("ca-certificates",), description="Cryptography and SSL/TLS Toolkit")
    client.add_installed("ca-certificates", "2023-01-10", description="Mozilla CA certificate store")
    client.add_installed("libidn2", "2.3.4", dependencies=("gettext", "libunistring"), description="International domain name library")
    client.add_installed("gettext", "0.21.1", description="GNU internationalization (i18n) and localization (l10n) library")
    client.add_installed("node", "19.4.0", pinned=True, dependencies=("brotli", "c-ares", "icu4c", "libnghttp2", "libuv", "openssl@3"), description="Platform built on V8 to build network applications")
    client.add_installed("iterm2", "3.4.19", PackageType.CASK, description="Terminal emulator as alternative to Apple's Terminal app")
    client.add_installed("firefox", "109.0", PackageType.CASK, description="Web browser")
    client.set_outdated("wget", "1.21.4")
    client.set_outdated("node", "19.5.0")
    client.set_outdated("firefox", "109.0.1")
    client.add_available("htop", description="Improved top (interactive process viewer)", dependencies=("ncurses",))
    client.add_available("httpie", description="User-friendly cURL replacement", dependencies=("python@3.11",))
    client.add_available("jq", description="Lightweight and flexible command-line JSON processor", dependencies=("oniguruma",))
    client.add_available("visual-studio-code", PackageType.CASK, description="Open-source code editor")
    return client
