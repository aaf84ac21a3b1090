"""Testing utilities for brewdeck.

This package provides a mock Homebrew client for unit testing and for
running the dashboard without brew installed (``--demo``).
"""

from brewdeck.testing.mock_brew import MockBrewClient, demo_client

__all__ = [
    "MockBrewClient",
    "demo_client",
]
