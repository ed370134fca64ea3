"""
Torn Sentinel - Torn City companion data layer

An API aggregation and caching client for the Torn City game API with
schema normalization, request rate tracking, and a gym gain simulator.
"""

__version__ = "0.1.0"
__author__ = "Torn Sentinel Team"

from .gym.calculator import gain_per_action, simulate_session
from .services.torn.orchestrator import ResourceOrchestrator
from .services.torn.resources import ResourceKey

__all__ = [
    "ResourceKey",
    "ResourceOrchestrator",
    "gain_per_action",
    "simulate_session",
]
