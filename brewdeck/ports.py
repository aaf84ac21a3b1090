"""Package manager abstraction layer.

The session runtime talks to Homebrew only through ``PackageManagerClient``.
``brewdeck.brew.client.BrewClient`` is the real adapter and
``brewdeck.testing.MockBrewClient`` the in-memory one used by tests and
demo mode. This is the "ports and adapters" split: the port is defined
here, adapters live elsewhere.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from brewdeck.models import (
        InstallOptions,
        OutdatedPackage,
        Package,
        PackageInfo,
        Tap,
        UninstallOptions,
    )


@runtime_checkable
class PackageManagerClient(Protocol):
    """Protocol for package manager operations.

    Every method is a coroutine that completes exactly once, either with a
    result or by raising a ``BrewError``. ``outdated`` is the exception: it
    never raises and returns an empty list on failure.
    """

    @abstractmethod
    async def list_installed(
        self, formulae: bool = True, casks: bool = True
    ) -> list[Package]:
        """List installed packages."""
        ...

    @abstractmethod
    async def search(self, query: str) -> list[Package]:
        """Search formulae and casks by name."""
        ...

    @abstractmethod
    async def info(self, name: str, is_cask: bool = False) -> PackageInfo:
        """Fetch detailed information for one package.

        Args:
            name: Package name.
            is_cask: Whether to look the name up as a cask.

        Returns:
            A possibly partial detail record.
        """
        ...

    @abstractmethod
    async def install(self, name: str, opts: InstallOptions | None = None) -> None:
        """Install a package."""
        ...

    @abstractmethod
    async def uninstall(self, name: str, opts: UninstallOptions | None = None) -> None:
        """Uninstall a package."""
        ...

    @abstractmethod
    async def upgrade(self, names: list[str]) -> None:
        """Upgrade the named packages, or everything when ``names`` is empty."""
        ...

    @abstractmethod
    async def outdated(self) -> list[OutdatedPackage]:
        """List outdated packages. Never raises."""
        ...

    @abstractmethod
    async def doctor(self) -> str:
        """Run diagnostics and return the report text."""
        ...

    @abstractmethod
    async def cleanup(self) -> None:
        ...

    @abstractmethod
    async def autoremove(self) -> None:
        ...

    @abstractmethod
    async def update(self) -> None:
        """Fetch the newest Homebrew and formula definitions."""
        ...

    @abstractmethod
    async def list_taps(self) -> list[Tap]:
        ...

    @abstractmethod
    async def tap_add(self, name: str) -> None:
        ...

    @abstractmethod
    async def tap_remove(self, name: str) -> None:
        ...

    @abstractmethod
    async def pin(self, name: str) -> None:
        ...

    @abstractmethod
    async def unpin(self, name: str) -> None:
        ...

    @abstractmethod
    async def list_pinned(self) -> list[str]:
        """Names of pinned formulae."""
        ...

    @abstractmethod
    def stream_update(self) -> AsyncIterator[str]:
        """Run an update, yielding output lines as they arrive."""
        ...
