"""
Torn Sentinel Constants Module

This module provides centralized constants for the Torn Sentinel package.
All magic values and configuration constants are defined here to ensure
consistency across the codebase.
"""

from .api import RateWindowConfig, TornAPIConfig, UpstreamErrorCodes
from .cache import ResourceTTL
from .cli import CLIDefaults, CLIHelp
from .gym import GymFormula, HappinessLoss
from .logging import Logging
from .system import BASE_DAY, BASE_HOUR, BASE_MINUTE, BASE_SECOND, Application

__all__ = [
    "BASE_DAY",
    "BASE_HOUR",
    "BASE_MINUTE",
    "BASE_SECOND",
    "Application",
    "CLIDefaults",
    "CLIHelp",
    "GymFormula",
    "HappinessLoss",
    "Logging",
    "RateWindowConfig",
    "ResourceTTL",
    "TornAPIConfig",
    "UpstreamErrorCodes",
]
