"""Config and favorites loading/saving.

Both files live under ~/.config/brewdeck/. The config file is written with
defaults the first time brewdeck runs; a missing favorites file simply
means no favorites yet.
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from pathlib import Path

import dacite

from .exceptions import (
    ConfigLoadError,
    ConfigSaveError,
    ConfigValidationError,
    FavoritesError,
    record_error,
)
from .models import AppConfig, model_to_dict

logger = logging.getLogger(__name__)

# Configuration file locations
CONFIG_DIR = Path.home() / ".config" / "brewdeck"
CONFIG_PATH = CONFIG_DIR / "config.json"
FAVORITES_PATH = CONFIG_DIR / "favorites.json"


def _ensure_config_dir(error_cls: type[ConfigLoadError] | type[ConfigSaveError]) -> None:
    try:
        CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.error("Failed to create config directory: %s", e)
        record_error(e)
        raise error_cls(
            f"Failed to create config directory: {CONFIG_DIR}",
            file_path=str(CONFIG_DIR),
            cause=e,
        ) from e


def load_config() -> AppConfig:
    """
    Load application configuration.

    Reads ~/.config/brewdeck/config.json. When the file does not exist yet
    a default config is written there and returned.

    Returns:
        AppConfig instance

    Raises:
        ConfigLoadError: If the file exists but cannot be read or parsed.
        ConfigValidationError: If the JSON does not match the AppConfig schema.
    """
    _ensure_config_dir(ConfigLoadError)

    if not CONFIG_PATH.exists():
        logger.info("No config found, writing defaults to %s", CONFIG_PATH)
        config = AppConfig()
        try:
            save_config(config)
        except ConfigSaveError as e:
            # A read-only home directory should not stop the dashboard.
            logger.warning("Could not write default config: %s", e)
        return config

    try:
        with open(CONFIG_PATH, encoding="utf-8") as f:
            data = json.load(f)
        logger.debug("Loaded config from %s", CONFIG_PATH)
    except json.JSONDecodeError as e:
        logger.error("Invalid JSON in config file: %s", e)
        record_error(e)
        raise ConfigLoadError(
            f"Invalid JSON in config file at line {e.lineno}",
            file_path=str(CONFIG_PATH),
            context={"line": e.lineno, "column": e.colno},
            cause=e,
        ) from e
    except OSError as e:
        logger.error("Failed to read config file: %s", e)
        record_error(e)
        raise ConfigLoadError(
            "Failed to read config file",
            file_path=str(CONFIG_PATH),
            cause=e,
        ) from e

    if not isinstance(data, dict):
        raise ConfigValidationError(
            "Config file must contain a JSON object",
            value=data,
            context={"file_path": str(CONFIG_PATH)},
        )

    try:
        config = dacite.from_dict(
            data_class=AppConfig,
            data=data,
            config=dacite.Config(cast=[Enum]),
        )
    except dacite.DaciteError as e:
        logger.error("Config schema validation failed: %s", e)
        record_error(e)
        raise ConfigValidationError(
            f"Config schema validation failed: {e}",
            context={"file_path": str(CONFIG_PATH)},
            cause=e,
        ) from e

    if config.debounce_delay_ms < 0:
        raise ConfigValidationError(
            "debounce_delay_ms must not be negative",
            field="debounce_delay_ms",
            value=config.debounce_delay_ms,
        )
    if config.log_capacity < 1:
        raise ConfigValidationError(
            "log_capacity must be at least 1",
            field="log_capacity",
            value=config.log_capacity,
        )
    return config


def load_config_or_default() -> AppConfig:
    """Load the config, falling back to defaults when it is unusable."""
    try:
        return load_config()
    except (ConfigLoadError, ConfigValidationError) as e:
        logger.warning("Using default config: %s", e)
        return AppConfig()


def save_config(config: AppConfig) -> None:
    """
    Save application configuration to ~/.config/brewdeck/config.json.

    Args:
        config: AppConfig instance to save

    Raises:
        ConfigSaveError: If the config cannot be saved.
    """
    _ensure_config_dir(ConfigSaveError)

    try:
        data = model_to_dict(config)
        with open(CONFIG_PATH, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        logger.debug("Saved config to %s", CONFIG_PATH)
    except OSError as e:
        logger.error("Failed to write config file: %s", e)
        record_error(e)
        raise ConfigSaveError(
            "Failed to write config file",
            file_path=str(CONFIG_PATH),
            cause=e,
        ) from e
    except (TypeError, ValueError) as e:
        logger.error("Failed to serialize config to JSON: %s", e)
        record_error(e)
        raise ConfigSaveError(
            "Failed to serialize config to JSON",
            file_path=str(CONFIG_PATH),
            cause=e,
        ) from e


# =============================================================================
# Favorites
# =============================================================================


def load_favorites() -> set[str]:
    """
    Load favorite package names.

    Returns:
        Set of package names, empty when no favorites file exists.

    Raises:
        FavoritesError: If the file exists but is unreadable or malformed.
    """
    if not FAVORITES_PATH.exists():
        return set()

    try:
        with open(FAVORITES_PATH, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error("Failed to read favorites: %s", e)
        record_error(e)
        raise FavoritesError(
            "Failed to read favorites file",
            file_path=str(FAVORITES_PATH),
            cause=e,
        ) from e

    if not isinstance(data, list) or not all(isinstance(name, str) for name in data):
        raise FavoritesError(
            "Favorites file must contain a JSON list of names",
            file_path=str(FAVORITES_PATH),
        )
    return set(data)


def save_favorites(favorites: set[str] | list[str]) -> None:
    """
    Save favorite package names as a sorted JSON list.

    Raises:
        FavoritesError: If the file cannot be written.
    """
    try:
        CONFIG_DIR.mkdir(parents=True, exist_ok=True)
        with open(FAVORITES_PATH, "w", encoding="utf-8") as f:
            json.dump(sorted(favorites), f, indent=2)
        logger.debug("Saved %d favorites to %s", len(favorites), FAVORITES_PATH)
    except OSError as e:
        logger.error("Failed to write favorites: %s", e)
        record_error(e)
        raise FavoritesError(
            "Failed to write favorites file",
            file_path=str(FAVORITES_PATH),
            cause=e,
        ) from e
