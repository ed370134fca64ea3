"""Base system constants."""

# Base time units
BASE_SECOND = 1
BASE_MINUTE = 60 * BASE_SECOND
BASE_HOUR = 60 * BASE_MINUTE
BASE_DAY = 24 * BASE_HOUR


class Application:
    """Application identity constants."""

    NAME = "tornsentinel"
    DISPLAY_NAME = "Torn Sentinel"
    VERSION = "0.1.0"
    ENV_PREFIX = "TORNSENTINEL_"


__all__ = ["BASE_DAY", "BASE_HOUR", "BASE_MINUTE", "BASE_SECOND", "Application"]
