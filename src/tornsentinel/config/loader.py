"""Settings loader and singleton manager.

This module handles:
- Environment variable loading from .env files
- Configuration file loading from TOML
- Thread-safe singleton pattern for Settings instance
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path

import toml
from dotenv import load_dotenv
from pydantic import ValidationError

from tornsentinel.config.models.settings import Settings
from tornsentinel.shared.errors import create_config_error

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATHS: tuple[Path, ...] = (
    Path("config/config.toml"),
    Path("config.toml"),
)


class SettingsLoader:
    """Thread-safe singleton manager for Settings.

    Uses double-checked locking pattern to ensure thread-safety
    while minimizing lock overhead.
    """

    _instance: Settings | None = None
    _lock: threading.RLock = threading.RLock()

    def get_config(self) -> Settings:
        """Get the global settings instance, loading it if necessary."""
        if self._instance is None:
            with self._lock:
                if self._instance is None:
                    self._instance = load_settings()

        return self._instance

    def reload_config(self) -> Settings:
        """Reload the global settings instance from configuration files."""
        with self._lock:
            self._instance = load_settings()

        return self._instance


def _load_env_file(env_file: Path = Path(".env")) -> None:
    """Load environment variables from a .env file if one exists.

    Variables already present in the process environment win. A missing
    file is not an error: the API key may come from anywhere, or be absent.
    """
    if env_file.exists():
        load_dotenv(env_file, override=False)
        logger.debug("Loaded environment file %s", env_file)


def load_settings(config_path: str | Path | None = None) -> Settings:
    """Load settings from TOML configuration file or environment.

    Args:
        config_path: Optional path to TOML configuration file. If None, tries
            the default locations and falls back to environment variables.

    Returns:
        Settings instance loaded from the specified source

    Raises:
        FileNotFoundError: If an explicit config_path does not exist
        ApplicationError: If the file cannot be parsed or fails validation
    """
    _load_env_file()

    if config_path is None:
        config_path = next((path for path in DEFAULT_CONFIG_PATHS if path.exists()), None)

    try:
        if config_path is not None:
            return Settings.from_toml_file(config_path)
        return Settings()
    except toml.TomlDecodeError as e:
        raise create_config_error(
            f"Invalid TOML in configuration file: {e}",
            config_key=str(config_path),
            operation="load_settings",
            original_error=e,
        ) from e
    except ValidationError as e:
        raise create_config_error(
            f"Configuration validation failed: {e.error_count()} error(s)",
            config_key=str(config_path) if config_path else None,
            operation="load_settings",
            original_error=e,
        ) from e


# Global loader instance
_loader = SettingsLoader()


def get_config() -> Settings:
    """Get the global settings instance (thread-safe)."""
    return _loader.get_config()


def reload_config() -> Settings:
    """Reload the global settings instance from configuration files."""
    return _loader.reload_config()
