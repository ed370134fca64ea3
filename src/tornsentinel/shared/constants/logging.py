"""Logging configuration constants."""


class Logging:
    """Logging defaults."""

    DEFAULT_LEVEL = "INFO"
    DEFAULT_LOGGER_NAME = "tornsentinel"
    TIME_FORMAT = "[%H:%M:%S]"

    # Placeholder written wherever a credential would appear
    REDACTED = "****"


__all__ = ["Logging"]
