"""Confirmation dialog state machine.

While the dialog is visible it consumes every key. Resolution hides the
dialog and reports whether the focused option was the confirming one.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from brewdeck.session.actions import CONFIRM, DIALOG_OPTIONS, PendingAction

LEFT_KEYS = frozenset({"left", "h"})
RIGHT_KEYS = frozenset({"right", "l"})
CYCLE_KEYS = frozenset({"tab"})
ACCEPT_KEYS = frozenset({"enter"})
CANCEL_KEYS = frozenset({"escape", "n", "N"})
CONFIRM_KEYS = frozenset({"y", "Y"})


@dataclass(frozen=True)
class DialogState:
    """Hidden when ``visible`` is False; the other fields are then ignored."""

    visible: bool = False
    title: str = ""
    message: str = ""
    options: tuple[str, ...] = DIALOG_OPTIONS
    selected: int = 0

    @classmethod
    def for_action(cls, action: PendingAction) -> DialogState:
        return cls(
            visible=True,
            title=action.title,
            message=action.prompt,
            options=DIALOG_OPTIONS,
            selected=DIALOG_OPTIONS.index(action.default_option),
        )

    @property
    def selected_option(self) -> str:
        return self.options[self.selected]


HIDDEN = DialogState()


def handle_key(dialog: DialogState, key: str) -> tuple[DialogState, bool | None]:
    """Feed one key to a visible dialog.

    Returns:
        The new dialog state and the resolution: True for confirmed, False
        for cancelled, None while the dialog is still open. Unbound keys
        leave the dialog unchanged and unresolved.
    """
    if not dialog.visible:
        return dialog, None

    last = len(dialog.options) - 1
    if key in LEFT_KEYS:
        return replace(dialog, selected=max(0, dialog.selected - 1)), None
    if key in RIGHT_KEYS:
        return replace(dialog, selected=min(last, dialog.selected + 1)), None
    if key in CYCLE_KEYS:
        return replace(dialog, selected=(dialog.selected + 1) % len(dialog.options)), None
    if key in ACCEPT_KEYS:
        return HIDDEN, dialog.selected_option == CONFIRM
    if key in CONFIRM_KEYS:
        return HIDDEN, True
    if key in CANCEL_KEYS:
        return HIDDEN, False
    return dialog, None
