"""Centralized logging configuration for brewdeck.

The dashboard owns the terminal, so diagnostics go to a rotating log file
by default. Console output is only enabled for headless commands and
debug mode.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TextIO

# Default configuration
DEFAULT_LOG_LEVEL = logging.INFO
DEFAULT_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_MAX_BYTES = 5 * 1024 * 1024  # 5 MB
DEFAULT_BACKUP_COUNT = 3

PACKAGE_LOGGER = "brewdeck"

# Log directory
LOG_DIR = Path.home() / ".config" / "brewdeck" / "logs"


def get_log_file_path() -> Path:
    """Get the path to the log file, creating directory if needed."""
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    return LOG_DIR / "brewdeck.log"


def _qualify(name: str) -> str:
    if name == PACKAGE_LOGGER or name.startswith(f"{PACKAGE_LOGGER}."):
        return name
    return f"{PACKAGE_LOGGER}.{name}"


def setup_logging(
    *,
    level: int | str = DEFAULT_LOG_LEVEL,
    log_to_file: bool = True,
    log_to_console: bool = False,
    console_stream: TextIO = sys.stderr,
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = DEFAULT_BACKUP_COUNT,
    debug_modules: list[str] | None = None,
) -> None:
    """Configure logging for the entire application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_to_file: Whether to log to the rotating file.
        log_to_console: Whether to log to console (stderr).
        console_stream: Stream for console output.
        max_bytes: Maximum log file size before rotation.
        backup_count: Number of backup log files to keep.
        debug_modules: Module names (relative to ``brewdeck``) to force to DEBUG.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), DEFAULT_LOG_LEVEL)

    root_logger = logging.getLogger(PACKAGE_LOGGER)
    root_logger.setLevel(level)

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(DEFAULT_LOG_FORMAT, DEFAULT_DATE_FORMAT)

    if log_to_file:
        file_handler = RotatingFileHandler(
            get_log_file_path(),
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    if log_to_console:
        console_handler = logging.StreamHandler(console_stream)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    # Nothing configured: keep records from bubbling up to the root logger,
    # which would print over the dashboard.
    if not root_logger.handlers:
        root_logger.addHandler(logging.NullHandler())

    for module_name in debug_modules or []:
        logging.getLogger(_qualify(module_name)).setLevel(logging.DEBUG)


def enable_debug_mode() -> None:
    """Enable debug logging for all modules."""
    setup_logging(level=logging.DEBUG, log_to_console=True)


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the brewdeck namespace.

    Args:
        name: Logger name (will be prefixed with ``brewdeck.``).

    Returns:
        Configured logger instance.
    """
    return logging.getLogger(_qualify(name))


class LogContext:
    """Context manager that tags log lines with extra key=value context.

    Example:
        with LogContext(logger, operation="upgrade", package="wget"):
            logger.info("Starting upgrade")
    """

    def __init__(self, logger: logging.Logger, **context: str | int | bool) -> None:
        self.logger = logger
        self.context = context
        self._old_format: str | None = None

    def __enter__(self) -> LogContext:
        if self.logger.handlers:
            handler = self.logger.handlers[0]
            if handler.formatter is not None:
                self._old_format = handler.formatter._fmt
                context_str = " ".join(f"{k}={v}" for k, v in self.context.items())
                new_format = f"%(asctime)s [%(levelname)s] %(name)s [{context_str}]: %(message)s"
                handler.setFormatter(logging.Formatter(new_format, DEFAULT_DATE_FORMAT))
        return self

    def __exit__(self, *args: object) -> None:
        if self._old_format and self.logger.handlers:
            self.logger.handlers[0].setFormatter(
                logging.Formatter(self._old_format, DEFAULT_DATE_FORMAT)
            )


def log_exception(
    logger: logging.Logger,
    exc: Exception,
    message: str = "An error occurred",
    *,
    level: int = logging.ERROR,
    include_traceback: bool = True,
) -> None:
    """Log an exception with consistent formatting.

    Args:
        logger: Logger to use.
        exc: Exception to log.
        message: Human-readable message prefix.
        level: Log level (default ERROR).
        include_traceback: Whether to include full traceback.
    """
    if include_traceback:
        logger.log(level, "%s: %s", message, exc, exc_info=exc)
    else:
        logger.log(level, "%s: %s (%s)", message, exc, type(exc).__name__)


def get_recent_logs(lines: int = 100) -> list[str]:
    """Get the last ``lines`` lines of the log file."""
    log_file = get_log_file_path()
    if not log_file.exists():
        return []

    with open(log_file, encoding="utf-8") as f:
        return f.readlines()[-lines:]
