"""Confirmation modal for mutating operations.

The modal is only a view. Its keys are forwarded to the dashboard's
session controller, which decides how the dialog moves and resolves; the
dashboard then updates or dismisses the modal.
"""

from __future__ import annotations

from collections.abc import Callable

from textual import events
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Static

from brewdeck.session.events import KeyPressed
from brewdeck.session.render import DialogView
from brewdeck.widgets import dialog_to_text


class ConfirmModal(ModalScreen[None]):
    """Centered Confirm/Cancel dialog mirroring the session's dialog state."""

    DEFAULT_CSS = """
    ConfirmModal {
        align: center middle;
    }

    ConfirmModal #dialog {
        width: 56;
        height: auto;
        border: thick $warning;
        background: $surface;
        padding: 1 2;
    }

    ConfirmModal #title {
        text-style: bold;
        color: $warning;
        padding-bottom: 1;
    }
    """

    def __init__(self, view: DialogView, forward: Callable[[KeyPressed], None]) -> None:
        """Initialize the modal.

        Args:
            view: The dialog as rendered from session state.
            forward: Receives every key pressed while the modal is open.
        """
        super().__init__()
        self.view = view
        self._forward = forward

    def compose(self) -> ComposeResult:
        yield Vertical(
            Static(self.view.title, id="title"),
            Static(dialog_to_text(self.view), id="body"),
            id="dialog",
        )

    def show(self, view: DialogView) -> None:
        self.view = view
        if not self.is_mounted:
            return
        self.query_one("#title", Static).update(view.title)
        self.query_one("#body", Static).update(dialog_to_text(view))

    def on_key(self, event: events.Key) -> None:
        event.stop()
        event.prevent_default()
        self._forward(KeyPressed(event.key, event.character))
