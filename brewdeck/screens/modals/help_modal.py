"""Help modal showing keyboard shortcuts.

Displays all available keyboard shortcuts organized by panel.
"""

from __future__ import annotations

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Static


class HelpModal(ModalScreen[None]):
    """Modal showing all keyboard shortcuts."""

    BINDINGS = [
        Binding("escape", "dismiss", "Close"),
        Binding("q", "dismiss", "Close", show=False),
        Binding("question_mark", "dismiss", "Close", show=False),
    ]

    CSS = """
    HelpModal {
        align: center middle;
    }

    HelpModal > Container {
        width: 64;
        height: auto;
        max-height: 80%;
        background: $surface;
        border: thick $primary;
        padding: 1 2;
    }

    HelpModal #title {
        text-align: center;
        text-style: bold;
        padding-bottom: 1;
        border-bottom: solid $primary;
    }

    HelpModal .section-title {
        text-style: bold;
        color: $primary;
        margin-top: 1;
    }

    HelpModal .shortcut-row {
        padding-left: 2;
    }

    HelpModal #footer {
        text-align: center;
        color: $text-muted;
        margin-top: 1;
        padding-top: 1;
        border-top: solid $primary;
    }
    """

    SHORTCUTS = {
        "Global": [
            ("?", "Show this help"),
            ("q / ctrl+c", "Quit"),
            ("tab / shift+tab", "Switch panel"),
            ("/", "Edit the search query"),
            ("r", "Refresh installed and outdated packages"),
            ("d", "Run brew doctor"),
            ("c", "Run brew cleanup"),
            ("a", "Run brew autoremove"),
            ("pageup / pagedown", "Scroll the log"),
            ("home / end", "Oldest / newest log entries"),
        ],
        "Installed": [
            ("j/k or ↑/↓", "Move selection"),
            ("u", "Upgrade selected outdated package"),
            ("U", "Upgrade all outdated packages"),
            ("x", "Uninstall selected package"),
            ("p", "Pin or unpin selected formula"),
            ("f", "Toggle favorite"),
            ("1 / 2", "Show formulae / casks"),
            ("3 / 4", "Only outdated / only pinned"),
        ],
        "Search": [
            ("enter", "Run search while typing, install otherwise"),
            ("escape", "Stop typing"),
            ("backspace / ctrl+u", "Delete a character / clear query"),
            ("j/k or ↑/↓", "Move selection"),
        ],
        "Dependencies": [
            ("j/k or ↑/↓", "Scroll dependencies"),
        ],
        "Confirmation": [
            ("←/→ or h/l", "Choose option"),
            ("tab", "Cycle options"),
            ("enter", "Select focused option"),
            ("y / n", "Confirm / cancel"),
            ("escape", "Cancel"),
        ],
    }

    def compose(self) -> ComposeResult:
        """Compose the modal layout."""
        yield Container(
            Static("Keyboard Shortcuts", id="title"),
            VerticalScroll(
                *self._build_sections(),
                id="content",
            ),
            Static("Press [bold]Escape[/bold], [bold]q[/bold], or [bold]?[/bold] to close", id="footer"),
            id="dialog",
        )

    def _build_sections(self) -> list[Static]:
        """Build shortcut section widgets.

        Returns:
            List of Static widgets for each section.
        """
        widgets = []
        for section_name, shortcuts in self.SHORTCUTS.items():
            widgets.append(Static(section_name, classes="section-title"))
            for key, description in shortcuts:
                widgets.append(
                    Static(f"  \\[{key}]  {description}", classes="shortcut-row")
                )
        return widgets

    def action_dismiss(self) -> None:
        """Dismiss the modal."""
        self.dismiss(None)
