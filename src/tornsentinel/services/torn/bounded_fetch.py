"""Concurrent fetch helper returning one outcome per request.

Every request runs concurrently through ``asyncio.gather``; a failing
request never cancels or fails its siblings. Each outcome carries either a
value or the typed error that request ended with.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from tornsentinel.shared.errors import (
    ErrorCode,
    ErrorContext,
    InfrastructureError,
    TornSentinelError,
)

logger = logging.getLogger(__name__)

R = TypeVar("R")
T = TypeVar("T")


@dataclass(frozen=True)
class FetchOutcome(Generic[R, T]):
    """Result of one request: exactly one of ``value``/``error`` is meaningful."""

    request: R
    value: T | None = None
    error: TornSentinelError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def _run_one(request: R, fetch_one: Callable[[R], Awaitable[T]]) -> FetchOutcome[R, T]:
    try:
        return FetchOutcome(request=request, value=await fetch_one(request))
    except TornSentinelError as e:
        return FetchOutcome(request=request, error=e)
    except Exception as e:
        # Unexpected failures stay scoped to their own request.
        logger.exception("Unexpected error while fetching %r", request)
        error = InfrastructureError(
            ErrorCode.APPLICATION_ERROR,
            f"Unexpected {type(e).__name__} while fetching",
            ErrorContext(operation="bounded_fetch"),
            original_error=e,
        )
        return FetchOutcome(request=request, error=error)


async def bounded_fetch(
    requests: Sequence[R],
    fetch_one: Callable[[R], Awaitable[T]],
) -> list[FetchOutcome[R, T]]:
    """Run ``fetch_one`` over every request concurrently.

    Returns:
        One outcome per request, in request order
    """
    if not requests:
        return []
    return list(await asyncio.gather(*(_run_one(request, fetch_one) for request in requests)))


__all__ = ["FetchOutcome", "bounded_fetch"]
