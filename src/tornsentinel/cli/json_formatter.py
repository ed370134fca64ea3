"""
JSON Output Formatter for the Torn Sentinel CLI

Produces machine-readable output for ``--json``. Snapshots are dataclasses
and serialize directly; read-only mappings and errors go through
``_default``.
"""

from __future__ import annotations

from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any

import orjson

from tornsentinel.shared.errors import TornSentinelError


def _default(value: Any) -> Any:
    if isinstance(value, MappingProxyType):
        return dict(value)
    if isinstance(value, TornSentinelError):
        return value.to_dict()
    raise TypeError(f"Type is not JSON serializable: {type(value).__name__}")


def dumps(data: Any) -> bytes:
    """Serialize with orjson (sorted keys, indented, non-string keys allowed)."""
    return orjson.dumps(
        data,
        default=_default,
        option=orjson.OPT_SORT_KEYS | orjson.OPT_INDENT_2 | orjson.OPT_NON_STR_KEYS,
    )


def format_json_output(
    success: bool,
    command: str,
    data: Any | None = None,
    errors: list[str] | None = None,
    warnings: list[str] | None = None,
) -> bytes:
    """
    Format command output as JSON.

    Args:
        success: Whether the command executed successfully
        command: The command name (e.g., "snapshot", "gym")
        data: The command's output data
        errors: List of error messages
        warnings: List of warning messages

    Returns:
        JSON-encoded bytes ready for output
    """
    errors = errors or []
    return dumps(
        {
            "success": success and not errors,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "command": command,
            "data": data,
            "errors": errors,
            "warnings": warnings or [],
        }
    )


__all__ = ["dumps", "format_json_output"]
