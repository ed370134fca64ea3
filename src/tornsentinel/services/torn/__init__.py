"""Torn API client: resource catalogue, normalizer and orchestrator."""

from .http_client import TornHTTPClient
from .models import ResourceSnapshot
from .normalizer import merge_canonical, normalize
from .orchestrator import ResourceOrchestrator
from .resources import ResourceKey

__all__ = [
    "ResourceKey",
    "ResourceOrchestrator",
    "ResourceSnapshot",
    "TornHTTPClient",
    "merge_canonical",
    "normalize",
]
