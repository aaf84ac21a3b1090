"""Homebrew client.

Wraps ``BrewExecutor`` with one coroutine per brew operation and turns the
output into model records. Failures propagate as ``BrewError`` except for
``outdated``, which degrades to an empty list.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from dataclasses import replace

from brewdeck.brew import parser
from brewdeck.brew.executor import DEFAULT_BREW_PATH, BrewExecutor, command_error
from brewdeck.exceptions import BrewError, BrewParseError
from brewdeck.models import (
    InstallOptions,
    OutdatedPackage,
    Package,
    PackageInfo,
    PackageType,
    Tap,
    UninstallOptions,
)

logger = logging.getLogger(__name__)


class BrewClient:
    """Async Homebrew operations backed by the brew CLI.

    Example:
        client = BrewClient()
        packages = await client.list_installed()
        info = await client.info("wget")
    """

    def __init__(
        self,
        brew_path: str = DEFAULT_BREW_PATH,
        executor: BrewExecutor | None = None,
    ) -> None:
        self.executor = executor or BrewExecutor(brew_path)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    async def list_installed(self, formulae: bool = True, casks: bool = True) -> list[Package]:
        """List installed formulae and/or casks with their versions.

        Pinned formulae are flagged from ``brew list --pinned``; a failure of
        that secondary lookup leaves every package unpinned.
        """
        packages: list[Package] = []
        if formulae:
            output = await self.executor.run("list", "--formula", "--versions")
            packages.extend(parser.parse_list_versions(output, PackageType.FORMULA))
        if casks:
            output = await self.executor.run("list", "--cask", "--versions")
            packages.extend(parser.parse_list_versions(output, PackageType.CASK))

        if formulae:
            pinned = set(await self.list_pinned())
            if pinned:
                packages = [
                    replace(p, pinned=True) if p.name in pinned and not p.is_cask else p
                    for p in packages
                ]

        logger.debug("Listed %d installed packages", len(packages))
        return packages

    async def list_pinned(self) -> list[str]:
        """Names of pinned formulae, or an empty list if brew refuses."""
        try:
            output = await self.executor.run("list", "--pinned")
        except BrewError as e:
            logger.warning("Could not list pinned formulae: %s", e)
            return []
        return parser.parse_names(output)

    async def search(self, query: str) -> list[Package]:
        output = await self.executor.run("search", query)
        return parser.parse_search(output)

    async def info(self, name: str, is_cask: bool = False) -> PackageInfo:
        """Get package details, preferring JSON output over text scraping."""
        package_type = PackageType.CASK if is_cask else PackageType.FORMULA
        args = ["info", "--json=v2", name]
        if is_cask:
            args.append("--cask")
        output = await self.executor.run(*args)
        try:
            return parser.parse_info_json(output, name, package_type)
        except BrewParseError as e:
            logger.debug("Falling back to text info for %s: %s", name, e)

        text_args = ["info", name]
        if is_cask:
            text_args.append("--cask")
        output = await self.executor.run(*text_args)
        return parser.parse_info_text(output, name, package_type)

    async def outdated(self) -> list[OutdatedPackage]:
        """List outdated packages. Never raises; failures yield ``[]``."""
        try:
            output = await self.executor.run("outdated", "--json=v2")
        except BrewError as e:
            logger.warning("brew outdated failed, treating as none outdated: %s", e)
            return []
        try:
            return parser.parse_outdated_json(output)
        except BrewParseError:
            return parser.parse_outdated_text(output)

    async def doctor(self) -> str:
        """Run ``brew doctor`` and return its report.

        brew doctor exits 1 whenever it has warnings to report. That is still
        a successful diagnostic run, so only an exit with no report at all is
        treated as a failure.
        """
        returncode, stdout, stderr = await self.executor.run_raw("doctor")
        report = "\n".join(part for part in (stdout.strip(), stderr.strip()) if part)
        if returncode != 0 and not report:
            raise command_error(("doctor",), returncode, stderr)
        return report

    async def list_taps(self) -> list[Tap]:
        output = await self.executor.run("tap")
        return parser.parse_taps(output)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    async def install(self, name: str, opts: InstallOptions | None = None) -> None:
        opts = opts or InstallOptions()
        args = ["install", name]
        if opts.cask:
            args.append("--cask")
        if opts.force:
            args.append("--force")
        await self.executor.run(*args)
        logger.info("Installed %s", name)

    async def uninstall(self, name: str, opts: UninstallOptions | None = None) -> None:
        opts = opts or UninstallOptions()
        args = ["uninstall", name]
        if opts.cask:
            args.append("--cask")
        if opts.force:
            args.append("--force")
        await self.executor.run(*args)
        logger.info("Uninstalled %s", name)

    async def upgrade(self, names: list[str]) -> None:
        """Upgrade the given packages; an empty list upgrades everything."""
        await self.executor.run("upgrade", *names)
        logger.info("Upgraded %s", ", ".join(names) if names else "all packages")

    async def update(self) -> None:
        await self.executor.run("update")

    async def stream_update(self) -> AsyncIterator[str]:
        """Run ``brew update`` yielding its output as it arrives."""
        async for line in self.executor.stream("update"):
            yield line

    async def pin(self, name: str) -> None:
        await self.executor.run("pin", name)

    async def unpin(self, name: str) -> None:
        await self.executor.run("unpin", name)

    async def tap_add(self, name: str) -> None:
        await self.executor.run("tap", name)

    async def tap_remove(self, name: str) -> None:
        await self.executor.run("untap", name)

    async def cleanup(self) -> None:
        await self.executor.run("cleanup")

    async def autoremove(self) -> None:
        await self.executor.run("autoremove")
