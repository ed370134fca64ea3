"""Command line interface for Torn Sentinel."""

from .typer_app import app

__all__ = ["app"]
