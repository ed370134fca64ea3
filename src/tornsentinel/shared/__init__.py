"""Torn Sentinel Shared Module.

This package contains shared constants, error handling, logging and
protocols used across Torn Sentinel.
"""

__all__ = ["constants", "errors", "formatting", "logging", "protocols"]
