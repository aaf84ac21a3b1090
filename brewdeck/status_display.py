"""Shared status display constants for consistent UI across widgets.

This module centralizes the icons and colors used to display:
- Package type (formula, cask)
- Package status (up to date, outdated, pinned, favorite)
- Operator log levels (info, success, warning, error)

Colors are Rich style strings.
"""

from __future__ import annotations

from brewdeck.models import Package, PackageType
from brewdeck.session.log_buffer import LogLevel

PACKAGE_TYPE_LABELS: dict[PackageType, str] = {
    PackageType.FORMULA: "Formula",
    PackageType.CASK: "Cask",
}

PACKAGE_TYPE_COLORS: dict[PackageType, str] = {
    PackageType.FORMULA: "green",
    PackageType.CASK: "blue",
}

LOG_LEVEL_COLORS: dict[LogLevel, str] = {
    LogLevel.INFO: "dim",
    LogLevel.SUCCESS: "green",
    LogLevel.WARNING: "yellow",
    LogLevel.ERROR: "bold red",
}

# Package status icons
UP_TO_DATE_ICON = "✓"
OUTDATED_ICON = "⚠"
PINNED_ICON = "⊙"
FAVORITE_ICON = "★"
SELECTED_MARKER = "▶"

UP_TO_DATE_COLOR = "green"
OUTDATED_COLOR = "yellow"
PINNED_COLOR = "cyan"
FAVORITE_COLOR = "magenta"

# Tree drawing for the dependencies panel
TREE_BRANCH = "├── "
TREE_LAST = "└── "

DEFAULT_COLOR = "white"


def get_type_label(package_type: PackageType) -> str:
    return PACKAGE_TYPE_LABELS.get(package_type, "?")


def get_type_color(package_type: PackageType) -> str:
    return PACKAGE_TYPE_COLORS.get(package_type, DEFAULT_COLOR)


def get_log_color(level: LogLevel) -> str:
    """Get the Rich style for a log level.

    Args:
        level: The classified log level.

    Returns:
        The style string for Rich.
    """
    return LOG_LEVEL_COLORS.get(level, DEFAULT_COLOR)


def get_status_icon(package: Package) -> tuple[str, str]:
    """Get the status icon and color for an installed package.

    Outdated wins over pinned, which wins over up to date.
    """
    if package.outdated:
        return OUTDATED_ICON, OUTDATED_COLOR
    if package.pinned:
        return PINNED_ICON, PINNED_COLOR
    return UP_TO_DATE_ICON, UP_TO_DATE_COLOR
