"""
API Configuration Constants

This module contains all constants related to the Torn API, its two
versioned endpoint families, and request timeouts.
"""

from typing import ClassVar

from .system import BASE_MINUTE, BASE_SECOND


class TornAPIConfig:
    """Torn API specific configuration."""

    # Endpoint families
    V1_BASE_URL = "https://api.torn.com"
    V2_BASE_URL = "https://api.torn.com/v2"

    # Query parameter names
    KEY_PARAM = "key"
    SELECTIONS_PARAM = "selections"
    SELECTIONS_SEPARATOR = ","

    # Payload field carrying application-level errors on HTTP 200
    ERROR_FIELD = "error"

    # Request timeouts (per request, never per orchestrator)
    FAST_TIMEOUT = 5 * BASE_SECOND
    DEFAULT_TIMEOUT = 10 * BASE_SECOND
    SLOW_TIMEOUT = 15 * BASE_SECOND

    # Concurrency limit for simultaneous outbound sockets
    DEFAULT_CONCURRENT_REQUESTS = 10

    # Request headers
    HEADERS: ClassVar[dict[str, str]] = {
        "Accept": "application/json",
        "User-Agent": "TornSentinel/0.1.0",
    }


class RateWindowConfig:
    """Rolling request window constants."""

    WINDOW_SECONDS = 1 * BASE_MINUTE


class UpstreamErrorCodes:
    """Torn API application error codes that point at a caller-side problem."""

    UNKNOWN = 0
    KEY_EMPTY = 1
    INCORRECT_KEY = 2
    WRONG_TYPE = 3
    WRONG_FIELDS = 4
    TOO_MANY_REQUESTS = 5
    INCORRECT_ID = 6
    INCORRECT_ID_ENTITY_RELATION = 7
    IP_BLOCK = 8
    API_DISABLED = 9
    KEY_OWNER_IN_FEDERAL_JAIL = 10
    KEY_CHANGE_ERROR = 11
    KEY_READ_ERROR = 12
    KEY_DISABLED_INACTIVITY = 13
    DAILY_READ_LIMIT = 14
    TEMPORARY_ERROR = 15
    ACCESS_LEVEL_TOO_LOW = 16
    BACKEND_ERROR = 17
    API_KEY_PAUSED = 18

    CREDENTIAL_PROBLEMS: ClassVar[frozenset[int]] = frozenset(
        {
            KEY_EMPTY,
            INCORRECT_KEY,
            KEY_READ_ERROR,
            KEY_DISABLED_INACTIVITY,
            ACCESS_LEVEL_TOO_LOW,
            API_KEY_PAUSED,
        }
    )


__all__ = ["RateWindowConfig", "TornAPIConfig", "UpstreamErrorCodes"]
