"""
Pytest configuration and shared fixtures for Torn Sentinel tests.

This module provides a controllable clock, a scripted Torn API client and
representative upstream payloads for every endpoint the resource catalogue
uses.
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Generator
from typing import Any

import pytest

# Keep the developer's real key out of the test run (for CI without .env)
os.environ.pop("TORNSENTINEL_API_KEY", None)

from tornsentinel.config import loader  # noqa: E402
from tornsentinel.config.models import Settings, TornAPISettings  # noqa: E402
from tornsentinel.services.credentials import StaticCredentialProvider  # noqa: E402
from tornsentinel.services.rate_tracker import RateTracker  # noqa: E402
from tornsentinel.services.torn.orchestrator import ResourceOrchestrator  # noqa: E402
from tornsentinel.services.torn.resources import RequestDescriptor  # noqa: E402
from tornsentinel.services.ttl_cache import TTLCache  # noqa: E402

TEST_API_KEY = "test_api_key_for_ci_testing_only"  # pragma: allowlist secret


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self._now = start

    def now(self) -> float:
        return self._now

    def advance(self, seconds: float) -> None:
        self._now += seconds


class FakeTornClient:
    """Stand-in for TornHTTPClient that answers from a payload table.

    Payloads are keyed by ``(family, path)``. A payload that is an exception
    instance is raised instead of returned. ``delay`` keeps each request in
    flight for a while so concurrent callers can overlap.
    """

    def __init__(self, payloads: dict[tuple[str, str], Any], rate_tracker: RateTracker) -> None:
        self.payloads = payloads
        self.rate_tracker = rate_tracker
        self.calls: list[tuple[RequestDescriptor, str]] = []
        self.delay = 0.0
        self.closed = False

    async def fetch(self, descriptor: RequestDescriptor, credential: str) -> dict[str, Any]:
        self.calls.append((descriptor, credential))
        self.rate_tracker.record_request()
        if self.delay:
            await asyncio.sleep(self.delay)
        payload = self.payloads[(descriptor.family.value, descriptor.path)]
        if isinstance(payload, Exception):
            raise payload
        return payload

    async def close(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def reset_settings_singleton() -> Generator[None, None, None]:
    """Drop the cached global settings between tests."""
    loader._loader._instance = None
    yield
    loader._loader._instance = None


@pytest.fixture(autouse=True)
def reset_package_logger() -> Generator[None, None, None]:
    """Undo setup_structured_logger so caplog sees package records."""
    yield
    package_logger = logging.getLogger("tornsentinel")
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> TTLCache:
    return TTLCache(clock=clock)


@pytest.fixture
def tracker(clock: FakeClock) -> RateTracker:
    return RateTracker(clock=clock)


@pytest.fixture
def settings() -> Settings:
    return Settings(api=TornAPISettings(api_key=TEST_API_KEY))


@pytest.fixture
def user_v2_payload() -> dict[str, Any]:
    return {
        "profile": {
            "id": 2_000_001,
            "name": "Sentinel",
            "level": 42,
            "status": {"state": "Okay", "description": "Okay", "color": "green", "until": 0},
        },
        "bars": {
            "energy": {"current": 150, "maximum": 150, "full_time": 0},
            "nerve": {"current": 60, "maximum": 85, "full_time": 1500},
            "happy": {"current": 5025, "maximum": 5025, "full_time": 0},
            "life": {"current": 4000, "maximum": 4000, "full_time": 0},
        },
        "cooldowns": {"drug": 0, "medical": 120, "booster": 0},
        "travel": {
            "destination": "Torn",
            "method": "Standard",
            "departed_at": 0,
            "arrival_at": 0,
            "time_left": 0,
        },
        "money": {
            "wallet": 1_500,
            "vault": 60_000,
            "city_bank": {"amount": 2_000_000, "until": 1_700_000_000},
            "cayman_bank": 0,
            "points": 120,
            "company": 0,
            "daily_networth": 9_000_000,
        },
    }


@pytest.fixture
def networth_v2_payload() -> dict[str, Any]:
    return {
        "personalstats": {
            "networth": {
                "total": 10_000_000,
                "wallet": 1_000,
                "vaults": 50_000,
                "bank": 2_000_000,
                "overseas_bank": 0,
                "points": 100,
                "stock_market": 3_000_000,
                "loans": -100,
            }
        }
    }


@pytest.fixture
def user_v1_payload() -> dict[str, Any]:
    """Combined v1 ``user`` payload answering every v1 user selection."""
    return {
        "money_onhand": 1_500,
        "city_bank": {"amount": 2_000_000, "time_left": 864_000},
        "strength": 10_000.5,
        "defense": 12_000.0,
        "speed": 9_000.0,
        "dexterity": 8_000.0,
        "active_gym": 20,
        "faction_perks": ["+ 10% gym gains", "+ 1% bank interest"],
        "job_perks": ["+ 5% strength gym gains"],
        "property_perks": ["+ 2% gym gains"],
        "merit_perks": [],
    }


@pytest.fixture
def torn_v1_payload() -> dict[str, Any]:
    return {"bank": {"1w": 0.8, "2w": 1.0, "1m": 1.2, "2m": 1.4, "3m": 1.6}}


@pytest.fixture
def faction_v1_payload() -> dict[str, Any]:
    """Combined v1 ``faction`` payload answering basic and rankedwars."""
    return {
        "ID": 9_001,
        "name": "Sentinels",
        "tag": "SNT",
        "leader": 2_000_001,
        "co-leader": 2_000_002,
        "capacity": 100,
        "respect": 1_250_000,
        "members": {
            "2000001": {
                "name": "Sentinel",
                "level": 42,
                "days_in_faction": 300,
                "position": "Leader",
                "status": {"state": "Okay", "description": "Okay", "color": "green", "until": 0},
                "last_action": {"status": "Online", "timestamp": 1_700_000_000},
            },
            "2000002": {
                "name": "Warden",
                "level": 38,
                "days_in_faction": 120,
                "position": "Co-leader",
                "status": {"state": "Hospital", "description": "In hospital", "until": 1_700_000_600},
                "last_action": {"status": "Idle", "timestamp": 1_699_999_000},
            },
        },
        "rankedwars": {
            "100": {
                "war": {"start": 1_690_000_000, "end": 1_690_100_000, "target": 3_000, "winner": 9_001},
                "factions": {
                    "9001": {"name": "Sentinels", "score": 3_100, "chain": 50},
                    "7007": {"name": "Raiders", "score": 1_200, "chain": 10},
                },
            },
            "200": {
                "war": {"start": 1_700_000_000, "end": 0, "target": 4_000, "winner": 0},
                "factions": {
                    "9001": {"name": "Sentinels", "score": 900, "chain": 20},
                    "8008": {"name": "Marauders", "score": 1_400, "chain": 35},
                },
            },
        },
    }


@pytest.fixture
def education_v2_payload() -> dict[str, Any]:
    return {
        "education": [
            {
                "name": "Biology",
                "courses": [
                    {"id": 11, "code": "BIO1100", "name": "Introduction to Biology"},
                    {"id": 12, "code": "BIO2350", "title": "Intravenous Therapy"},
                ],
            },
            {
                "name": "Computer Science",
                "courses": [{"id": 21, "code": "CS1000", "name": "Basic Programming"}],
            },
        ]
    }


@pytest.fixture
def payloads(
    user_v2_payload: dict[str, Any],
    networth_v2_payload: dict[str, Any],
    user_v1_payload: dict[str, Any],
    torn_v1_payload: dict[str, Any],
    faction_v1_payload: dict[str, Any],
    education_v2_payload: dict[str, Any],
) -> dict[tuple[str, str], Any]:
    return {
        ("v2", "user"): user_v2_payload,
        ("v2", "user/personalstats"): networth_v2_payload,
        ("v1", "user"): user_v1_payload,
        ("v1", "torn"): torn_v1_payload,
        ("v1", "faction"): faction_v1_payload,
        ("v2", "torn"): education_v2_payload,
    }


@pytest.fixture
def fake_client(payloads: dict[tuple[str, str], Any], tracker: RateTracker) -> FakeTornClient:
    return FakeTornClient(payloads, tracker)


@pytest.fixture
def orchestrator(
    fake_client: FakeTornClient,
    cache: TTLCache,
    settings: Settings,
) -> ResourceOrchestrator:
    return ResourceOrchestrator(
        client=fake_client,
        credentials=StaticCredentialProvider(TEST_API_KEY),
        cache=cache,
        settings=settings,
    )
