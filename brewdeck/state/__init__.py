"""State management package.

``PackageStore`` is the lock-protected store shared by the dashboard and
the refresh workers; ``events`` holds the Textual messages that carry
session events back to the screen.
"""

from brewdeck.state.events import SessionEventPosted, StateMessage
from brewdeck.state.store import PackageStore, ReadWriteLock

__all__ = [
    "PackageStore",
    "ReadWriteLock",
    "SessionEventPosted",
    "StateMessage",
]
