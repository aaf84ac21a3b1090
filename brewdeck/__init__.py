"""brewdeck: an interactive terminal dashboard for Homebrew.

Browse installed formulae and casks, search for new ones, inspect
dependencies and run installs, upgrades and maintenance commands from one
keyboard-driven screen. Every mutating command asks for confirmation first.

Public API Usage:
    # Homebrew operations without the TUI
    from brewdeck import BrewClient

    async def main():
        client = BrewClient()
        for package in await client.outdated():
            print(package.name, package.latest_version)

    # Driving the dashboard state machine directly
    from brewdeck import SessionController
    from brewdeck.session.events import SessionStarted

    controller = SessionController()
    work = controller.handle(SessionStarted())
"""

__version__ = "0.1.0"

# =============================================================================
# Homebrew Access
# =============================================================================

from brewdeck.brew import BrewClient, BrewExecutor
from brewdeck.ports import PackageManagerClient

# =============================================================================
# Data Models
# =============================================================================

from brewdeck.models import (
    AppConfig,
    InstallOptions,
    OutdatedPackage,
    Package,
    PackageFilters,
    PackageInfo,
    PackageRef,
    PackageType,
    Tap,
    UninstallOptions,
)

# =============================================================================
# Configuration
# =============================================================================

from brewdeck.config import load_config, load_favorites, save_config, save_favorites

# =============================================================================
# Exceptions
# =============================================================================

from brewdeck.exceptions import (
    BrewCommandError,
    BrewDeckError,
    BrewError,
    BrewNotFoundError,
    BrewParseError,
    ConfigError,
    FavoritesError,
)

# =============================================================================
# State and Session
# =============================================================================

from brewdeck.session import SessionController, SessionState, render_dashboard
from brewdeck.state import PackageStore

__all__ = [
    "__version__",
    # Homebrew access
    "BrewClient",
    "BrewExecutor",
    "PackageManagerClient",
    # Models
    "AppConfig",
    "InstallOptions",
    "OutdatedPackage",
    "Package",
    "PackageFilters",
    "PackageInfo",
    "PackageRef",
    "PackageType",
    "Tap",
    "UninstallOptions",
    # Configuration
    "load_config",
    "load_favorites",
    "save_config",
    "save_favorites",
    # Exceptions
    "BrewCommandError",
    "BrewDeckError",
    "BrewError",
    "BrewNotFoundError",
    "BrewParseError",
    "ConfigError",
    "FavoritesError",
    # State and session
    "PackageStore",
    "SessionController",
    "SessionState",
    "render_dashboard",
]
