"""Screen components for the TUI.

- DashboardScreen: the four-panel Homebrew dashboard
- modals: confirmation and help dialogs
"""

from brewdeck.screens.dashboard import DashboardScreen

__all__ = [
    "DashboardScreen",
]
