"""Custom exception hierarchy for brewdeck.

This module provides a structured exception hierarchy that enables:
- Consistent error handling across the application
- Rich error context for debugging
- Operator-facing messages for the log panel
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


class BrewDeckError(Exception):
    """Base exception for all brewdeck errors.

    Attributes:
        message: Human-readable error description.
        context: Additional context for debugging.
        timestamp: When the error occurred.
    """

    def __init__(
        self,
        message: str,
        *,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.message = message
        self.context = context or {}
        self.timestamp = datetime.now()
        self.cause = cause
        super().__init__(message)

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({ctx_str})"
        return self.message


# =============================================================================
# Homebrew Errors
# =============================================================================


class BrewError(BrewDeckError):
    """Base class for errors raised while talking to Homebrew."""

    pass


class BrewCommandError(BrewError):
    """Raised when a brew subcommand exits non-zero.

    The message is already formatted for the operator, so ``str()`` leaves
    the context out.
    """

    def __init__(
        self,
        message: str,
        *,
        command: str | None = None,
        returncode: int | None = None,
        stderr: str | None = None,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        ctx = context or {}
        if command:
            ctx["command"] = command
        if returncode is not None:
            ctx["returncode"] = returncode
        super().__init__(message, context=ctx, cause=cause)
        self.command = command
        self.returncode = returncode
        self.stderr = stderr or ""

    def __str__(self) -> str:
        return self.message


class BrewNotFoundError(BrewError):
    """Raised when the brew executable cannot be located."""

    def __init__(
        self,
        brew_path: str = "brew",
        *,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            f"{brew_path} not found in PATH",
            context={"brew_path": brew_path},
            cause=cause,
        )


class BrewParseError(BrewError):
    """Raised when critical brew output cannot be parsed at all."""

    def __init__(
        self,
        message: str = "Failed to parse brew output",
        *,
        command: str | None = None,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        ctx = context or {}
        if command:
            ctx["command"] = command
        super().__init__(message, context=ctx, cause=cause)


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigError(BrewDeckError):
    """Base class for configuration-related errors."""

    pass


class ConfigLoadError(ConfigError):
    """Raised when configuration file fails to load."""

    def __init__(
        self,
        message: str = "Failed to load configuration",
        *,
        file_path: str | None = None,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        ctx = context or {}
        if file_path:
            ctx["file_path"] = file_path
        super().__init__(message, context=ctx, cause=cause)


class ConfigValidationError(ConfigError):
    """Raised when configuration validation fails."""

    def __init__(
        self,
        message: str = "Configuration validation failed",
        *,
        field: str | None = None,
        value: Any = None,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        ctx = context or {}
        if field:
            ctx["field"] = field
        if value is not None:
            ctx["value"] = str(value)[:100]
        super().__init__(message, context=ctx, cause=cause)


class ConfigSaveError(ConfigError):
    """Raised when configuration fails to save."""

    def __init__(
        self,
        message: str = "Failed to save configuration",
        *,
        file_path: str | None = None,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        ctx = context or {}
        if file_path:
            ctx["file_path"] = file_path
        super().__init__(message, context=ctx, cause=cause)


class FavoritesError(ConfigError):
    """Raised when the favorites file cannot be read or written."""

    def __init__(
        self,
        message: str = "Failed to access favorites",
        *,
        file_path: str | None = None,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        ctx = context or {}
        if file_path:
            ctx["file_path"] = file_path
        super().__init__(message, context=ctx, cause=cause)


# =============================================================================
# Error Statistics
# =============================================================================


@dataclass
class ErrorStats:
    """Track error statistics for monitoring."""

    total_count: int = 0
    by_type: dict[str, int] = field(default_factory=dict)
    recent_errors: list[tuple[datetime, str, str]] = field(default_factory=list)
    max_recent: int = 100

    def record(self, error: Exception) -> None:
        """Record an error occurrence."""
        self.total_count += 1
        type_name = type(error).__name__
        self.by_type[type_name] = self.by_type.get(type_name, 0) + 1

        self.recent_errors.append((datetime.now(), type_name, str(error)[:200]))
        if len(self.recent_errors) > self.max_recent:
            self.recent_errors.pop(0)

    def reset(self) -> None:
        """Forget everything recorded so far."""
        self.total_count = 0
        self.by_type.clear()
        self.recent_errors.clear()


# Global error stats tracker
error_stats = ErrorStats()


def record_error(error: Exception) -> None:
    """Record an error to global stats."""
    error_stats.record(error)
