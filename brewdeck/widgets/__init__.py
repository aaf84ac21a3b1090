"""Widgets for the Homebrew dashboard."""

from brewdeck.widgets.panels import PanelWidget, StatusBar, dialog_to_text, lines_to_text

__all__ = [
    "PanelWidget",
    "StatusBar",
    "dialog_to_text",
    "lines_to_text",
]
