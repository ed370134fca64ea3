"""Cache configuration model.

This module contains the cache configuration model: per-resource TTL
overrides on top of the defaults in ``ResourceTTL``.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from tornsentinel.shared.constants import ResourceTTL


class CacheSettings(BaseModel):
    """Cache configuration.

    ``ttl_overrides`` maps a resource key name (e.g. ``"BANK_RATES"``) to a
    TTL in seconds. Keys are case-insensitive.
    """

    ttl_overrides: dict[str, float] = Field(
        default_factory=dict,
        description="Per-resource TTL overrides in seconds",
    )

    @field_validator("ttl_overrides")
    @classmethod
    def validate_ttl_overrides(cls, value: dict[str, float]) -> dict[str, float]:
        """Normalize key names and reject unknown resources or non-positive TTLs."""
        normalized: dict[str, float] = {}
        for name, ttl in value.items():
            key = name.upper()
            if not hasattr(ResourceTTL, key):
                msg = f"Unknown resource in ttl_overrides: {name}"
                raise ValueError(msg)
            if ttl <= 0:
                msg = f"TTL for {key} must be positive, got {ttl}"
                raise ValueError(msg)
            normalized[key] = ttl
        return normalized


__all__ = ["CacheSettings"]
