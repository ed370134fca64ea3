"""Configuration domain models."""

from __future__ import annotations

from .api_settings import TornAPISettings
from .app_settings import LoggingSettings
from .cache_settings import CacheSettings
from .settings import Settings

__all__ = [
    "CacheSettings",
    "LoggingSettings",
    "Settings",
    "TornAPISettings",
]
