"""Panel geometry derived from the terminal size.

The installed list takes the left half; the right half is split 35% search,
35% dependencies and 30% logs; a one-line status bar runs along the
bottom. The ``*_lines`` values are how many list rows fit in each panel
after borders and panel chrome.
"""

from __future__ import annotations

from dataclasses import dataclass

STATUS_BAR_HEIGHT = 1
SEARCH_SHARE = 0.35
DEPENDENCIES_SHARE = 0.35

# Rows taken by borders and fixed lines inside each panel
INSTALLED_CHROME = 5  # borders, column header, rule, spare
SEARCH_CHROME = 6  # borders, query line, result count, "more" line, spare
DEPENDENCIES_CHROME = 7  # borders, name, description, two scroll hints
LOGS_CHROME = 3  # borders, spare

DEFAULT_WIDTH = 80
DEFAULT_HEIGHT = 24


@dataclass(frozen=True)
class Geometry:
    width: int
    height: int
    left_width: int
    right_width: int
    content_height: int
    search_height: int
    dependencies_height: int
    logs_height: int
    installed_lines: int
    search_lines: int
    dependencies_lines: int
    log_lines: int


def compute_geometry(width: int, height: int) -> Geometry:
    """Lay out the dashboard for a ``width`` x ``height`` terminal.

    Every line count is at least 1 (2 for search results) so selection
    clamping always has a usable viewport, even on tiny terminals.
    """
    width = width if width > 0 else DEFAULT_WIDTH
    height = height if height > 0 else DEFAULT_HEIGHT
    content = max(0, height - STATUS_BAR_HEIGHT)
    search_height = int(content * SEARCH_SHARE)
    dependencies_height = int(content * DEPENDENCIES_SHARE)
    logs_height = content - search_height - dependencies_height
    left_width = width // 2
    return Geometry(
        width=width,
        height=height,
        left_width=left_width,
        right_width=width - left_width,
        content_height=content,
        search_height=search_height,
        dependencies_height=dependencies_height,
        logs_height=logs_height,
        installed_lines=max(1, content - INSTALLED_CHROME),
        search_lines=max(2, search_height - SEARCH_CHROME),
        dependencies_lines=max(1, dependencies_height - DEPENDENCIES_CHROME),
        log_lines=max(1, logs_height - LOGS_CHROME),
    )
