"""Credential providers.

The credential is read on every fetch, so a key rotated in the environment
or settings is picked up without rebuilding the orchestrator.
"""

from __future__ import annotations

import os

from tornsentinel.config import Settings, get_config
from tornsentinel.shared.constants import Application, Logging


class StaticCredentialProvider:
    """Provider holding a fixed key (None or empty = no credential)."""

    def __init__(self, credential: str | None) -> None:
        self._credential = credential or None

    def get_credential(self) -> str | None:
        return self._credential

    def __repr__(self) -> str:
        masked = Logging.REDACTED if self._credential else "[empty]"
        return f"StaticCredentialProvider(credential={masked})"


class EnvCredentialProvider:
    """Provider reading ``TORNSENTINEL_API_KEY`` or, failing that, settings.

    Args:
        env_var: Environment variable to read first
        settings: Settings to fall back to (default: global config)
    """

    def __init__(
        self,
        env_var: str = f"{Application.ENV_PREFIX}API_KEY",
        settings: Settings | None = None,
    ) -> None:
        self.env_var = env_var
        self._settings = settings

    def get_credential(self) -> str | None:
        value = os.environ.get(self.env_var, "").strip()
        if value:
            return value
        settings = self._settings or get_config()
        return settings.api.api_key.strip() or None


__all__ = ["EnvCredentialProvider", "StaticCredentialProvider"]
