"""Dashboard panel widgets.

The widgets hold no state of their own. The dashboard screen renders the
session state into views and hands each widget its view; the widget only
turns styled segments into Rich ``Text``.
"""

from __future__ import annotations

from typing import Any

from rich.text import Text
from textual.widgets import Static

from brewdeck.session.render import DialogView, Line, PanelView, StatusBarView


def lines_to_text(lines: tuple[Line, ...]) -> Text:
    """Join rendered lines into a single Rich Text."""
    text = Text(no_wrap=True, overflow="ellipsis")
    for number, line in enumerate(lines):
        if number:
            text.append("\n")
        for segment in line:
            text.append(segment.text, style=segment.style or None)
    return text


class PanelWidget(Static):
    """A bordered dashboard panel: installed, search, dependencies or logs."""

    DEFAULT_CSS = """
    PanelWidget {
        border: round $primary-darken-2;
        padding: 0 1;
        height: 1fr;
    }

    PanelWidget.focused {
        border: round $accent;
    }
    """

    def __init__(self, **kwargs: Any) -> None:
        super().__init__("", **kwargs)
        self.view: PanelView | None = None

    def show(self, view: PanelView) -> None:
        """Display a rendered panel.

        Args:
            view: Title, lines and focus flag from the renderer.
        """
        self.view = view
        self.border_title = view.title
        self.set_class(view.focused, "focused")
        self.update(lines_to_text(view.lines))

    @property
    def plain_lines(self) -> list[str]:
        if self.view is None:
            return []
        return ["".join(segment.text for segment in line) for line in self.view.lines]


class StatusBar(Static):
    """One-line status bar along the bottom of the dashboard."""

    DEFAULT_CSS = """
    StatusBar {
        height: 1;
        padding: 0 1;
        background: $panel;
    }
    """

    def __init__(self, **kwargs: Any) -> None:
        super().__init__("", **kwargs)
        self.view: StatusBarView | None = None

    def show(self, view: StatusBarView) -> None:
        self.view = view
        self.update(Text(view.text, style=view.style, no_wrap=True, overflow="ellipsis"))


def dialog_to_text(view: DialogView) -> Text:
    """Confirmation message, option row and key hints."""
    text = Text()
    text.append(view.message, style="bold")
    text.append("\n\n")
    for index, option in enumerate(view.options):
        if index:
            text.append("   ")
        style = "bold reverse" if index == view.selected else "dim"
        text.append(f" {option} ", style=style)
    text.append("\n\n")
    text.append("←/→ choose • Enter select • y/n • Esc cancel", style="dim")
    return text
