"""Torn Sentinel Settings Configuration Model.

Main Settings class that consolidates all configuration domains.
"""

from __future__ import annotations

import logging
from pathlib import Path

import toml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from tornsentinel.config.models.api_settings import TornAPISettings
from tornsentinel.config.models.app_settings import LoggingSettings
from tornsentinel.config.models.cache_settings import CacheSettings
from tornsentinel.shared.constants import Application

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Settings facade providing unified configuration access.

    Environment variables override defaults, e.g.
    ``TORNSENTINEL_API__API_KEY`` or ``TORNSENTINEL_LOGGING__LEVEL``.
    """

    model_config = SettingsConfigDict(
        env_prefix=Application.ENV_PREFIX,
        env_nested_delimiter="__",
        env_ignore_empty=True,
        extra="ignore",
    )

    api: TornAPISettings = Field(default_factory=TornAPISettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def from_toml_file(cls, file_path: str | Path) -> Settings:
        """Load settings from TOML file with environment variable overrides."""

        file_path = Path(file_path)
        if not file_path.exists():
            msg = f"Configuration file not found: {file_path}"
            raise FileNotFoundError(msg)

        raw_config = toml.load(file_path)
        logger.debug("Loaded configuration file %s", file_path)
        return cls(**raw_config)


__all__ = ["Settings"]
