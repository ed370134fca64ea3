"""Async Torn API HTTP client.

This module provides the single place that talks to the network. One call
to :meth:`TornHTTPClient.fetch` is one outbound request: it is recorded in
the rate tracker, bounded by its own timeout, and its outcome is either a
decoded JSON object or a typed error. No retries are made; callers
re-invoke on their next poll.
"""

from __future__ import annotations

import asyncio
import logging
import time
from types import TracebackType
from typing import Any

import aiohttp
import orjson

from tornsentinel.config.models.api_settings import TornAPISettings
from tornsentinel.services.rate_tracker import RateTracker
from tornsentinel.services.torn.resources import EndpointFamily, RequestDescriptor
from tornsentinel.shared.constants import TornAPIConfig, UpstreamErrorCodes
from tornsentinel.shared.errors import (
    ErrorCode,
    ErrorContext,
    TransportError,
    UpstreamApplicationError,
)
from tornsentinel.shared.logging import log_api_call

logger = logging.getLogger(__name__)


class TornHTTPClient:
    """Asynchronous Torn API client using aiohttp.

    Args:
        settings: API settings (base URLs, concurrency limit)
        rate_tracker: Tracker every outbound request is recorded in
        session: Optional externally managed aiohttp session; the client
            only closes sessions it created itself
    """

    def __init__(
        self,
        settings: TornAPISettings | None = None,
        rate_tracker: RateTracker | None = None,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self.settings = settings or TornAPISettings()
        self.rate_tracker = rate_tracker or RateTracker()
        self._session = session
        self._owns_session = session is None
        self._session_lock = asyncio.Lock()

        limit = self.settings.max_concurrent_requests
        self._concurrency_limiter = asyncio.Semaphore(limit) if limit else None

    async def __aenter__(self) -> TornHTTPClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def _get_session(self) -> aiohttp.ClientSession:
        async with self._session_lock:
            if self._session is None or self._session.closed:
                self._session = aiohttp.ClientSession(headers=TornAPIConfig.HEADERS)
                self._owns_session = True
                logger.debug("aiohttp.ClientSession created")
            return self._session

    async def close(self) -> None:
        """Close the HTTP session if this client created it."""
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
            logger.debug("aiohttp.ClientSession closed")
        self._session = None

    def build_url(self, descriptor: RequestDescriptor) -> str:
        """Return the request URL (the credential travels as a query parameter)."""
        base = (
            self.settings.v2_base_url
            if descriptor.family is EndpointFamily.V2
            else self.settings.v1_base_url
        )
        return f"{base.rstrip('/')}/{descriptor.path.strip('/')}"

    @staticmethod
    def build_params(descriptor: RequestDescriptor, credential: str) -> dict[str, str]:
        params = dict(descriptor.params)
        if descriptor.selections:
            params[TornAPIConfig.SELECTIONS_PARAM] = TornAPIConfig.SELECTIONS_SEPARATOR.join(
                descriptor.selections
            )
        params[TornAPIConfig.KEY_PARAM] = credential
        return params

    async def fetch(self, descriptor: RequestDescriptor, credential: str) -> dict[str, Any]:
        """Perform one request and return its JSON object.

        Raises:
            TransportError: On timeout, connection failure, non-2xx status or
                a body that is not a JSON object
            UpstreamApplicationError: If the body carries an ``error`` object
        """
        url = self.build_url(descriptor)
        params = self.build_params(descriptor, credential)
        context = ErrorContext(
            operation="torn_api_request",
            additional_data={"endpoint": descriptor.describe(), "timeout": descriptor.timeout},
        )

        self.rate_tracker.record_request()
        try:
            payload = await asyncio.wait_for(
                self._get_json(url, params),
                timeout=descriptor.timeout,
            )
        except asyncio.TimeoutError as e:
            raise TransportError(
                ErrorCode.API_TIMEOUT,
                f"Request to {descriptor.describe()} timed out after {descriptor.timeout}s",
                context,
                original_error=e,
            ) from e

        if not isinstance(payload, dict):
            raise TransportError(
                ErrorCode.API_INVALID_JSON,
                f"Expected a JSON object from {descriptor.describe()}, got {type(payload).__name__}",
                context,
            )

        error = payload.get(TornAPIConfig.ERROR_FIELD)
        if error is not None:
            raise _upstream_error(error, descriptor, context)

        return payload

    async def _get_json(self, url: str, params: dict[str, str]) -> Any:
        """GET ``url`` and decode the body with orjson.

        Raises:
            TransportError: On connection failure, non-2xx status or invalid JSON
        """
        session = await self._get_session()
        context = ErrorContext(operation="torn_api_request", additional_data={"endpoint": url})
        started = time.perf_counter()

        try:
            if self._concurrency_limiter is None:
                status, body = await self._send(session, url, params)
            else:
                async with self._concurrency_limiter:
                    status, body = await self._send(session, url, params)
        except aiohttp.ClientError as e:
            raise TransportError(
                ErrorCode.NETWORK_ERROR,
                f"Request to {url} failed: {type(e).__name__}",
                context,
                original_error=e,
            ) from e

        log_api_call(
            logger,
            url,
            status_code=status,
            duration_ms=(time.perf_counter() - started) * 1000,
        )

        if not 200 <= status < 300:
            raise TransportError(
                ErrorCode.API_HTTP_STATUS,
                f"Request to {url} returned HTTP {status}",
                ErrorContext(
                    operation="torn_api_request",
                    additional_data={"endpoint": url, "status_code": status},
                ),
            )

        try:
            return orjson.loads(body)
        except orjson.JSONDecodeError as e:
            raise TransportError(
                ErrorCode.API_INVALID_JSON,
                f"Response from {url} is not valid JSON",
                context,
                original_error=e,
            ) from e

    @staticmethod
    async def _send(
        session: aiohttp.ClientSession,
        url: str,
        params: dict[str, str],
    ) -> tuple[int, bytes]:
        async with session.get(url, params=params) as response:
            return response.status, await response.read()


def _upstream_error(
    error: Any,
    descriptor: RequestDescriptor,
    context: ErrorContext,
) -> UpstreamApplicationError:
    if isinstance(error, dict):
        upstream_code = error.get("code", UpstreamErrorCodes.UNKNOWN)
        message = str(error.get("error", "Unknown error"))
    else:
        upstream_code = UpstreamErrorCodes.UNKNOWN
        message = str(error)
    if not isinstance(upstream_code, int) or isinstance(upstream_code, bool):
        upstream_code = UpstreamErrorCodes.UNKNOWN

    if upstream_code in UpstreamErrorCodes.CREDENTIAL_PROBLEMS:
        code = ErrorCode.UPSTREAM_CREDENTIAL_REJECTED
    elif upstream_code == UpstreamErrorCodes.TOO_MANY_REQUESTS:
        code = ErrorCode.UPSTREAM_RATE_LIMITED
    else:
        code = ErrorCode.UPSTREAM_APPLICATION_ERROR

    return UpstreamApplicationError(
        code,
        f"Torn API error {upstream_code} on {descriptor.describe()}: {message}",
        upstream_code=upstream_code,
        context=ErrorContext(
            operation=context.operation,
            additional_data={**(context.additional_data or {}), "upstream_code": upstream_code},
        ),
    )


__all__ = ["TornHTTPClient"]
