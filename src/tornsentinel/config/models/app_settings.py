"""Logging configuration model."""

from __future__ import annotations

from pydantic import BaseModel, Field

from tornsentinel.shared.constants import Logging


class LoggingSettings(BaseModel):
    """Logging configuration.

    This class manages logging behavior including level, optional JSON
    file output and the rich console handler.
    """

    level: str = Field(default=Logging.DEFAULT_LEVEL, description="Logging level")
    file: str | None = Field(default=None, description="Optional JSON log file path")
    console_output: bool = Field(default=True, description="Use the rich console handler")


__all__ = ["LoggingSettings"]
