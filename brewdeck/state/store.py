"""Shared package state.

``PackageStore`` holds the last-known installed, outdated, search and tap
lists together with the user's filters and favorites. It is written by the
refresh workers and read by the dashboard, so every access goes through a
reader/writer lock and callers only ever see copies.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import replace

from brewdeck.models import OutdatedPackage, Package, PackageFilters, Tap

logger = logging.getLogger(__name__)


class ReadWriteLock:
    """Many readers or one writer.

    Waiting writers block new readers so a steady stream of reads cannot
    starve a refresh.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            while self._writer or self._readers:
                self._cond.wait()
            self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class PackageStore:
    """Thread-safe holder of package lists, filters and favorites."""

    def __init__(
        self,
        filters: PackageFilters | None = None,
        favorites: Iterable[str] = (),
    ) -> None:
        self._lock = ReadWriteLock()
        self._installed: list[Package] = []
        self._outdated: list[OutdatedPackage] = []
        self._search_results: list[Package] = []
        self._taps: list[Tap] = []
        self._filters = filters or PackageFilters()
        self._favorites: set[str] = set(favorites)

    # -------------------------------------------------------------------------
    # Replace
    # -------------------------------------------------------------------------

    def set_installed(self, packages: Iterable[Package]) -> None:
        packages = list(packages)
        with self._lock.write():
            self._installed = packages
        logger.debug("Stored %d installed packages", len(packages))

    def set_outdated(self, packages: Iterable[OutdatedPackage]) -> None:
        packages = list(packages)
        with self._lock.write():
            self._outdated = packages

    def set_search_results(self, packages: Iterable[Package]) -> None:
        packages = list(packages)
        with self._lock.write():
            self._search_results = packages

    def set_taps(self, taps: Iterable[Tap]) -> None:
        taps = list(taps)
        with self._lock.write():
            self._taps = taps

    def set_filters(self, filters: PackageFilters) -> None:
        with self._lock.write():
            self._filters = filters

    def set_favorites(self, names: Iterable[str]) -> None:
        names = set(names)
        with self._lock.write():
            self._favorites = names

    def toggle_favorite(self, name: str) -> bool:
        """Flip a package's favorite flag.

        Returns:
            True if the package is a favorite afterwards.
        """
        with self._lock.write():
            if name in self._favorites:
                self._favorites.discard(name)
                return False
            self._favorites.add(name)
            return True

    # -------------------------------------------------------------------------
    # Read
    # -------------------------------------------------------------------------

    def get_installed(self) -> list[Package]:
        with self._lock.read():
            return list(self._installed)

    def get_outdated(self) -> list[OutdatedPackage]:
        with self._lock.read():
            return list(self._outdated)

    def get_search_results(self) -> list[Package]:
        with self._lock.read():
            return list(self._search_results)

    def get_taps(self) -> list[Tap]:
        with self._lock.read():
            return list(self._taps)

    def get_filters(self) -> PackageFilters:
        with self._lock.read():
            return self._filters

    def get_filtered_packages(self) -> list[Package]:
        """Installed packages passing the current filters.

        Outdated and pinned flags from the outdated list are merged in, so a
        package is reported outdated even when it was listed before the
        outdated check finished.
        """
        with self._lock.read():
            installed = list(self._installed)
            outdated = {p.name: p for p in self._outdated}
            filters = self._filters

        merged = []
        for package in installed:
            entry = outdated.get(package.name)
            if entry is not None:
                package = replace(
                    package,
                    outdated=True,
                    pinned=package.pinned or entry.pinned,
                )
            if filters.allows(package):
                merged.append(package)
        return merged

    def installed_names(self) -> set[str]:
        with self._lock.read():
            return {p.name for p in self._installed}

    def installed_count(self) -> int:
        with self._lock.read():
            return len(self._installed)

    def outdated_count(self) -> int:
        with self._lock.read():
            return len(self._outdated)

    def is_favorite(self, name: str) -> bool:
        with self._lock.read():
            return name in self._favorites

    def favorites(self) -> set[str]:
        with self._lock.read():
            return set(self._favorites)
