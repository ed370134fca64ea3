"""Cache-related constants."""

from .system import BASE_DAY, BASE_HOUR, BASE_MINUTE, BASE_SECOND


class ResourceTTL:
    """Default time-to-live per logical resource (in seconds)."""

    # Fast-changing player state
    USER_SNAPSHOT = 10 * BASE_SECOND
    CITY_BANK_DETAILS = 10 * BASE_SECOND
    NETWORTH_SNAPSHOT = 30 * BASE_SECOND
    FACTION_SNAPSHOT = 30 * BASE_SECOND
    RANKED_WAR_SNAPSHOT = 30 * BASE_SECOND

    # Slow-moving player state
    BATTLE_STATS = 1 * BASE_MINUTE
    ACTIVE_GYM = 5 * BASE_MINUTE
    GYM_MODIFIER = 5 * BASE_MINUTE

    # Near-static reference data
    BANK_RATES = 1 * BASE_HOUR
    EDUCATION_COURSES = 1 * BASE_DAY


__all__ = ["ResourceTTL"]
