"""Debounce token for detail loading.

The token is a fencing counter, not a timer. Each selection change bumps
it and the deferred trigger carries the value it was issued with. A
trigger or a detail completion only takes effect while its token is still
the current one; anything older has been superseded by a later selection.
"""

from __future__ import annotations

from dataclasses import dataclass

from brewdeck.models import PackageRef

DEFAULT_DEBOUNCE_DELAY = 0.2  # seconds


@dataclass(frozen=True)
class Debounce:
    """Current token and the package it was issued for."""

    token: int = 0
    ref: PackageRef | None = None

    def bump(self, ref: PackageRef) -> Debounce:
        """Issue a new token for ``ref``. Tokens only ever increase."""
        return Debounce(token=self.token + 1, ref=ref)

    def is_current(self, token: int) -> bool:
        return token == self.token
