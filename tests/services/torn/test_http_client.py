"""Tests for TornHTTPClient.

The aiohttp session is replaced by a small fake so that status codes,
bodies and connection failures can be scripted without a network.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any
from unittest.mock import AsyncMock

import aiohttp
import pytest

from tornsentinel.config.models import TornAPISettings
from tornsentinel.services.rate_tracker import RateTracker
from tornsentinel.services.torn.http_client import TornHTTPClient
from tornsentinel.services.torn.resources import (
    EndpointFamily,
    RequestDescriptor,
    ResourceKey,
    plan_requests,
)
from tornsentinel.shared.errors import (
    ErrorCode,
    TransportError,
    UpstreamApplicationError,
)

API_KEY = "secret_key_123"  # pragma: allowlist secret


class FakeResponse:
    def __init__(self, status: int, body: bytes) -> None:
        self.status = status
        self._body = body

    async def read(self) -> bytes:
        return self._body

    async def __aenter__(self) -> FakeResponse:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        return None


class FakeSession:
    """Minimal aiohttp.ClientSession replacement recording GET calls."""

    def __init__(self, status: int = 200, body: bytes = b"{}", error: Exception | None = None) -> None:
        self.status = status
        self.body = body
        self.error = error
        self.closed = False
        self.requests: list[tuple[str, dict[str, str]]] = []

    def get(self, url: str, params: dict[str, str]) -> FakeResponse:
        self.requests.append((url, params))
        if self.error is not None:
            raise self.error
        return FakeResponse(self.status, self.body)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def descriptor() -> RequestDescriptor:
    return plan_requests([ResourceKey.BATTLE_STATS, ResourceKey.ACTIVE_GYM])[0]


def make_client(session: FakeSession, tracker: RateTracker | None = None) -> TornHTTPClient:
    return TornHTTPClient(TornAPISettings(), tracker or RateTracker(), session=session)


class TestRequestBuilding:
    def test_v1_url_and_params(self, descriptor: RequestDescriptor) -> None:
        client = TornHTTPClient(TornAPISettings())

        assert client.build_url(descriptor) == "https://api.torn.com/user"
        assert client.build_params(descriptor, API_KEY) == {
            "selections": "battlestats,gym",
            "key": API_KEY,
        }

    def test_v2_url_with_fixed_params(self) -> None:
        (networth,) = plan_requests([ResourceKey.NETWORTH_SNAPSHOT])
        client = TornHTTPClient(TornAPISettings())

        assert client.build_url(networth) == "https://api.torn.com/v2/user/personalstats"
        assert client.build_params(networth, API_KEY) == {"cat": "networth", "key": API_KEY}

    def test_custom_base_url(self) -> None:
        client = TornHTTPClient(TornAPISettings(v1_base_url="http://localhost:8080/"))
        request = RequestDescriptor(family=EndpointFamily.V1, path="/torn/", selections=("bank",))

        assert client.build_url(request) == "http://localhost:8080/torn"

    def test_unbounded_concurrency(self) -> None:
        client = TornHTTPClient(TornAPISettings(max_concurrent_requests=None))

        assert client._concurrency_limiter is None


class TestFetch:
    @pytest.mark.asyncio
    async def test_success_returns_payload(self, descriptor: RequestDescriptor) -> None:
        session = FakeSession(body=b'{"strength": 1.5, "active_gym": 3}')
        tracker = RateTracker()
        client = make_client(session, tracker)

        payload = await client.fetch(descriptor, API_KEY)

        assert payload == {"strength": 1.5, "active_gym": 3}
        assert tracker.current_count() == 1
        assert session.requests == [
            ("https://api.torn.com/user", {"selections": "battlestats,gym", "key": API_KEY})
        ]

    @pytest.mark.asyncio
    async def test_every_attempt_is_tracked(self, descriptor: RequestDescriptor) -> None:
        tracker = RateTracker()
        client = make_client(FakeSession(status=502, body=b"Bad Gateway"), tracker)

        for _ in range(3):
            with pytest.raises(TransportError):
                await client.fetch(descriptor, API_KEY)

        assert tracker.current_count() == 3

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "upstream_code, expected",
        [
            (2, ErrorCode.UPSTREAM_CREDENTIAL_REJECTED),
            (18, ErrorCode.UPSTREAM_CREDENTIAL_REJECTED),
            (5, ErrorCode.UPSTREAM_RATE_LIMITED),
            (4, ErrorCode.UPSTREAM_APPLICATION_ERROR),
            (17, ErrorCode.UPSTREAM_APPLICATION_ERROR),
        ],
    )
    async def test_error_field_raises_upstream_error(
        self,
        descriptor: RequestDescriptor,
        upstream_code: int,
        expected: ErrorCode,
    ) -> None:
        body = b'{"error": {"code": %d, "error": "Something"}}' % upstream_code
        client = make_client(FakeSession(body=body))

        with pytest.raises(UpstreamApplicationError) as exc_info:
            await client.fetch(descriptor, API_KEY)

        error = exc_info.value
        assert error.code == expected
        assert error.upstream_code == upstream_code
        assert error.to_dict()["upstream_code"] == upstream_code

    @pytest.mark.asyncio
    async def test_error_field_without_code(self, descriptor: RequestDescriptor) -> None:
        client = make_client(FakeSession(body=b'{"error": "maintenance"}'))

        with pytest.raises(UpstreamApplicationError) as exc_info:
            await client.fetch(descriptor, API_KEY)

        assert exc_info.value.upstream_code == 0
        assert "maintenance" in exc_info.value.message

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status, body, expected",
        [
            (500, b"oops", ErrorCode.API_HTTP_STATUS),
            (404, b"{}", ErrorCode.API_HTTP_STATUS),
            (200, b"<html>", ErrorCode.API_INVALID_JSON),
            (200, b"[1, 2]", ErrorCode.API_INVALID_JSON),
        ],
    )
    async def test_transport_errors(
        self,
        descriptor: RequestDescriptor,
        status: int,
        body: bytes,
        expected: ErrorCode,
    ) -> None:
        client = make_client(FakeSession(status=status, body=body))

        with pytest.raises(TransportError) as exc_info:
            await client.fetch(descriptor, API_KEY)

        assert exc_info.value.code == expected

    @pytest.mark.asyncio
    async def test_connection_failure(self, descriptor: RequestDescriptor) -> None:
        session = FakeSession(error=aiohttp.ClientConnectionError("refused"))
        client = make_client(session)

        with pytest.raises(TransportError) as exc_info:
            await client.fetch(descriptor, API_KEY)

        assert exc_info.value.code == ErrorCode.NETWORK_ERROR
        assert isinstance(exc_info.value.original_error, aiohttp.ClientConnectionError)

    @pytest.mark.asyncio
    async def test_timeout(self, mocker) -> None:
        request = RequestDescriptor(
            family=EndpointFamily.V1,
            path="torn",
            selections=("bank",),
            timeout=0.05,
        )
        client = make_client(FakeSession())

        async def slow(*args: Any) -> dict[str, Any]:
            await asyncio.sleep(1)
            return {}

        mocker.patch.object(client, "_get_json", side_effect=slow)

        with pytest.raises(TransportError) as exc_info:
            await client.fetch(request, API_KEY)

        assert exc_info.value.code == ErrorCode.API_TIMEOUT

    @pytest.mark.asyncio
    async def test_credential_never_logged(
        self,
        descriptor: RequestDescriptor,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        client = make_client(FakeSession(status=500, body=b""))

        with caplog.at_level(logging.DEBUG, logger="tornsentinel"), pytest.raises(TransportError) as exc_info:
            await client.fetch(descriptor, API_KEY)

        assert API_KEY not in caplog.text
        assert API_KEY not in str(exc_info.value)


class TestSessionLifecycle:
    @pytest.mark.asyncio
    async def test_external_session_is_not_closed(self) -> None:
        session = FakeSession()
        client = make_client(session)

        await client.close()

        assert session.closed is False

    @pytest.mark.asyncio
    async def test_owned_session_is_closed(self, mocker) -> None:
        session = FakeSession()
        mocker.patch("aiohttp.ClientSession", return_value=session)

        async with TornHTTPClient(TornAPISettings()) as client:
            assert await client._get_session() is session

        assert session.closed is True

    @pytest.mark.asyncio
    async def test_get_json_mocked(self, descriptor: RequestDescriptor, mocker) -> None:
        client = make_client(FakeSession())
        get_json = mocker.patch.object(client, "_get_json", new=AsyncMock(return_value={"active_gym": 1}))

        assert await client.fetch(descriptor, API_KEY) == {"active_gym": 1}
        get_json.assert_awaited_once()
