"""Homebrew adapter: subprocess execution, output parsing and the client."""

from brewdeck.brew.client import BrewClient
from brewdeck.brew.executor import BrewExecutor

__all__ = ["BrewClient", "BrewExecutor"]
