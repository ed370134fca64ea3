"""API configuration models (Torn API).

This module contains configuration models for the Torn API: the active
credential, the two endpoint families and outbound concurrency.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from tornsentinel.shared.constants import Logging, TornAPIConfig


class TornAPISettings(BaseModel):
    """Torn API configuration.

    Security: api_key is masked in __repr__ so it never reaches logs.
    An empty api_key is not a configuration error; orchestrators treat a
    missing credential as "every resource is absent".
    """

    # API authentication (sensitive - hidden from repr)
    api_key: str = Field(
        default="",
        repr=False,
        description="Torn API key of the active player",
    )

    v1_base_url: str = Field(
        default=TornAPIConfig.V1_BASE_URL,
        description="Base URL of the v1 endpoint family",
    )
    v2_base_url: str = Field(
        default=TornAPIConfig.V2_BASE_URL,
        description="Base URL of the v2 endpoint family",
    )

    # Concurrency settings (None = unbounded)
    max_concurrent_requests: int | None = Field(
        default=TornAPIConfig.DEFAULT_CONCURRENT_REQUESTS,
        gt=0,
        description="Maximum number of simultaneous outbound requests",
    )

    def __repr__(self) -> str:
        """Custom repr that masks sensitive api_key."""
        masked_key = Logging.REDACTED if self.api_key else "[empty]"
        return (
            f"TornAPISettings("
            f"api_key={masked_key}, "
            f"v1_base_url={self.v1_base_url}, "
            f"v2_base_url={self.v2_base_url}, "
            f"max_concurrent_requests={self.max_concurrent_requests})"
        )


__all__ = ["TornAPISettings"]
