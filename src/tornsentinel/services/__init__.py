"""Services: cache, rate tracking, credentials and the Torn API client."""

from .clock import Clock, MonotonicClock
from .credentials import EnvCredentialProvider, StaticCredentialProvider
from .rate_tracker import RateTracker
from .ttl_cache import TTLCache

__all__ = [
    "Clock",
    "EnvCredentialProvider",
    "MonotonicClock",
    "RateTracker",
    "StaticCredentialProvider",
    "TTLCache",
]
