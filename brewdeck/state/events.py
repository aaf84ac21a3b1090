"""Textual message classes carrying session events.

Workers finish on the asyncio loop but outside the screen's message pump.
They post a ``SessionEventPosted`` so each completion is handled by the
screen one at a time, in arrival order.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from textual.message import Message

if TYPE_CHECKING:
    from brewdeck.session.events import SessionEvent


class StateMessage(Message):
    """Base class for state change messages."""

    pass


class SessionEventPosted(StateMessage):
    """Posted when an asynchronous completion is ready for the controller."""

    def __init__(self, event: SessionEvent) -> None:
        super().__init__()
        self.event = event
