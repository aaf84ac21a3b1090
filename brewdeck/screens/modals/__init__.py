"""Modal dialogs."""

from .confirm_modal import ConfirmModal
from .help_modal import HelpModal

__all__ = [
    "ConfirmModal",
    "HelpModal",
]
