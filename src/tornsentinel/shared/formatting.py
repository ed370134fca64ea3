"""Display helpers for countdowns, amounts and bank tenors."""

from __future__ import annotations

import math

from tornsentinel.shared.constants import BASE_DAY, BASE_HOUR, BASE_MINUTE

READY = "Ready"
NO_TENOR = "-"

# (max days to maturity, tenor), checked in order
_TENOR_LIMITS: tuple[tuple[int, str], ...] = (
    (7, "1w"),
    (14, "2w"),
    (30, "1m"),
    (60, "2m"),
)

TENOR_LABELS = {
    "1w": "1 Week",
    "2w": "2 Weeks",
    "1m": "1 Month",
    "2m": "2 Months",
    "3m": "3 Months",
}


def format_time_remaining(seconds: float) -> str:
    """Format a countdown as ``HH:MM:SS``, or ``MM:SS`` under an hour.

    Non-positive values read ``Ready``.
    """
    if seconds <= 0:
        return READY

    total = int(seconds)
    hours, remainder = divmod(total, BASE_HOUR)
    minutes, secs = divmod(remainder, BASE_MINUTE)
    if hours > 0:
        return f"{hours:02d}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"


def format_number(value: float) -> str:
    """Format with thousands separators (``1234567`` -> ``1,234,567``)."""
    if isinstance(value, float) and not value.is_integer():
        return f"{value:,.2f}".rstrip("0").rstrip(".")
    return f"{int(value):,}"


def format_currency(value: float) -> str:
    """Format as dollars (``-1500`` -> ``-$1,500``)."""
    if value < 0:
        return "-$" + format_number(-value)
    return "$" + format_number(value)


def tenor_from_time_left(time_left: int | None) -> str:
    """Return the bank tenor (``1w`` .. ``3m``) an investment was made for.

    Derived from the days left until maturity; ``-`` when there is no
    running investment.
    """
    if not time_left or time_left <= 0:
        return NO_TENOR
    days = math.ceil(time_left / BASE_DAY)
    for limit, tenor in _TENOR_LIMITS:
        if days <= limit:
            return tenor
    return "3m"


__all__ = [
    "NO_TENOR",
    "READY",
    "TENOR_LABELS",
    "format_currency",
    "format_number",
    "format_time_remaining",
    "tenor_from_time_left",
]
