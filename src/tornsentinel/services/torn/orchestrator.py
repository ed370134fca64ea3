"""Fetch orchestration with resource-level coalescing.

A :class:`ResourceOrchestrator` serves sets of logical resources. Cached
resources are returned as-is; the rest are grouped by upstream endpoint so
each endpoint is hit once per call with the union of the selections its
resources need. Requests run concurrently, each with its own timeout, and
one failing request only blanks the resources it was serving.

Identical requests issued concurrently by different callers share one HTTP
call. Requests run as shielded tasks, so a cancelled caller still lets its
request finish and populate the cache.
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from collections.abc import Iterable
from dataclasses import dataclass
from types import TracebackType
from typing import Any

from tornsentinel.config import Settings, get_config
from tornsentinel.gym.gyms import Gym, gym_by_id
from tornsentinel.services.credentials import EnvCredentialProvider
from tornsentinel.services.rate_tracker import RateTracker
from tornsentinel.services.torn.bounded_fetch import bounded_fetch
from tornsentinel.services.torn.http_client import TornHTTPClient
from tornsentinel.services.torn.models import (
    ActiveGym,
    BankRates,
    BattleStats,
    CityBankDetails,
    EducationCourses,
    FactionSnapshot,
    GymModifier,
    NetworthSnapshot,
    RankedWar,
    RankedWarFaction,
    RankedWarsSnapshot,
    ResourceSnapshot,
    UserSnapshot,
)
from tornsentinel.services.torn.normalizer import (
    hybrid_networth_total,
    merge_canonical,
    normalize,
    patch_bank_time_left,
)
from tornsentinel.services.torn.resources import (
    RESOURCE_CATALOG,
    RequestDescriptor,
    ResourceKey,
    get_definition,
    plan_requests,
    resolve_ttl,
)
from tornsentinel.services.ttl_cache import TTLCache
from tornsentinel.shared.errors import (
    CredentialMissingError,
    ErrorCode,
    ErrorContext,
    InfrastructureError,
    MalformedResponseError,
    TornSentinelError,
    TransportError,
)
from tornsentinel.shared.formatting import NO_TENOR, tenor_from_time_left
from tornsentinel.shared.logging import (
    log_operation_error,
    log_operation_start,
    log_operation_success,
)
from tornsentinel.shared.protocols.services import CredentialProvider, SnapshotSink

logger = logging.getLogger(__name__)

# Resources pushed to the snapshot sink whenever they are freshly fetched
SYNCED_RESOURCES: frozenset[ResourceKey] = frozenset({ResourceKey.FACTION_SNAPSHOT})

_RequestResults = dict[ResourceKey, tuple[Any, TornSentinelError | None]]


class ResourceOrchestrator:
    """Serve logical resources from cache or upstream.

    Args:
        client: HTTP client (default: built from settings)
        credentials: Credential source (default: environment, then settings)
        cache: Cache store; share one between orchestrators to share results
        settings: Settings (default: global config)
        sink: Optional receiver of freshly fetched faction snapshots
    """

    def __init__(
        self,
        client: TornHTTPClient | None = None,
        credentials: CredentialProvider | None = None,
        cache: TTLCache | None = None,
        settings: Settings | None = None,
        sink: SnapshotSink | None = None,
    ) -> None:
        self.settings = settings or get_config()
        self.client = client or TornHTTPClient(self.settings.api, RateTracker())
        self.credentials = credentials or EnvCredentialProvider(settings=self.settings)
        self.cache = cache if cache is not None else TTLCache()
        self.sink = sink

        self._ttl_overrides = dict(self.settings.cache.ttl_overrides)
        self._last_known: dict[ResourceKey, Any] = {}
        self._active_credential: str | None = None
        self._generation = 0
        self._state_lock = threading.Lock()
        self._in_flight: dict[tuple[Any, ...], asyncio.Task[_RequestResults]] = {}

    async def __aenter__(self) -> ResourceOrchestrator:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def close(self) -> None:
        await self.client.close()

    def current_request_rate_count(self) -> int:
        """Outbound requests in the current one-minute window."""
        return self.client.rate_tracker.current_count()

    async def fetch(self, resources: Iterable[ResourceKey | str]) -> ResourceSnapshot:
        """Fetch a set of resources.

        Never raises for upstream problems: a resource that could not be
        served maps to None and its error is recorded in ``failures``.

        Raises:
            ApplicationError: If a key is not a defined resource
        """
        keys = tuple(dict.fromkeys(get_definition(key).key for key in resources))
        if not keys:
            return ResourceSnapshot(values={})

        credential = self.credentials.get_credential()
        if not credential:
            error = CredentialMissingError(
                ErrorCode.CREDENTIAL_MISSING,
                "No Torn API key configured",
                ErrorContext(operation="fetch_resources"),
            )
            log_operation_error(logger, error, level=logging.WARNING)
            return ResourceSnapshot.absent(keys, error)

        self._track_credential(credential)

        values: dict[ResourceKey, Any] = {}
        misses = []
        for key in keys:
            value, found = self.cache.get(key)
            if found:
                values[key] = value
            else:
                misses.append(key)

        failures: dict[ResourceKey, TornSentinelError] = {}
        if misses:
            started = time.perf_counter()
            requests = plan_requests(misses)
            log_operation_start(
                logger,
                "fetch_resources",
                {"misses": len(misses), "requests": len(requests)},
            )

            outcomes = await bounded_fetch(
                requests,
                lambda descriptor: self._request(descriptor, credential),
            )
            for outcome in outcomes:
                if outcome.error is not None:
                    _log_fetch_error(outcome.error)
                    for key in outcome.request.resources:
                        failures[key] = outcome.error
                    continue
                for key, (value, error) in outcome.value.items():
                    if error is not None:
                        _log_fetch_error(error)
                        failures[key] = error
                    else:
                        values[key] = value

            log_operation_success(
                logger,
                "fetch_resources",
                (time.perf_counter() - started) * 1000,
                {"fetched": len(misses) - len(failures), "failed": len(failures)},
            )

        networth = values.get(ResourceKey.NETWORTH_SNAPSHOT)
        city_bank = values.get(ResourceKey.CITY_BANK_DETAILS)
        if networth is not None and city_bank is not None:
            values[ResourceKey.NETWORTH_SNAPSHOT] = patch_bank_time_left(networth, city_bank)

        return ResourceSnapshot(
            values={key: values.get(key) for key in keys},
            failures=failures,
        )

    def _track_credential(self, credential: str) -> None:
        """Drop everything cached for a previous player when the key changes."""
        with self._state_lock:
            if self._active_credential is not None and credential != self._active_credential:
                self.cache.clear()
                self._last_known.clear()
                self._generation += 1
                logger.info("API key changed, cleared cached snapshots")
            self._active_credential = credential

    async def _request(self, descriptor: RequestDescriptor, credential: str) -> _RequestResults:
        """Run a request, sharing it with identical in-flight requests."""
        key = (*descriptor.identity, credential)
        task = self._in_flight.get(key)
        if task is None:
            task = asyncio.create_task(self._fetch_and_store(descriptor, credential, self._generation))
            self._in_flight[key] = task
            task.add_done_callback(lambda done: self._request_done(key, done))
        else:
            logger.debug("Joining in-flight request %s", descriptor.describe())
        return await asyncio.shield(task)

    def _request_done(self, key: tuple[Any, ...], task: asyncio.Task[_RequestResults]) -> None:
        if self._in_flight.get(key) is task:
            del self._in_flight[key]
        # Retrieve the exception so an abandoned request is not reported as unhandled.
        if not task.cancelled():
            task.exception()

    async def _fetch_and_store(
        self,
        descriptor: RequestDescriptor,
        credential: str,
        generation: int,
    ) -> _RequestResults:
        payload = await self.client.fetch(descriptor, credential)

        results: _RequestResults = {}
        for key in descriptor.resources:
            schema_version = RESOURCE_CATALOG[key].endpoint.schema_version
            try:
                value = normalize(key, schema_version, payload)
            except MalformedResponseError as e:
                results[key] = (None, e)
                continue
            value = self._store(key, value, generation)
            results[key] = (value, None)
            if self.sink is not None and key in SYNCED_RESOURCES:
                await self._publish(key, value)
        return results

    def _store(self, key: ResourceKey, value: Any, generation: int) -> Any:
        with self._state_lock:
            if generation != self._generation:
                # Fetched for a previous credential; never cache it
                return value
            merged = merge_canonical(self._last_known.get(key), value)
            if key is ResourceKey.NETWORTH_SNAPSHOT and (merged.bank is None or merged.bank.time_left is None):
                city_bank = self._last_known.get(ResourceKey.CITY_BANK_DETAILS)
                if city_bank is not None:
                    merged = patch_bank_time_left(merged, city_bank)
            self._last_known[key] = merged
            self.cache.set(key, merged, resolve_ttl(key, self._ttl_overrides))

            if key is ResourceKey.CITY_BANK_DETAILS:
                networth = self._last_known.get(ResourceKey.NETWORTH_SNAPSHOT)
                if networth is not None:
                    patched = patch_bank_time_left(networth, merged)
                    self._last_known[ResourceKey.NETWORTH_SNAPSHOT] = patched
                    self.cache.patch(ResourceKey.NETWORTH_SNAPSHOT, patched)
        return merged

    async def _publish(self, key: ResourceKey, value: Any) -> None:
        try:
            await self.sink.publish(key, value)
        except Exception as e:
            error = InfrastructureError(
                ErrorCode.SNAPSHOT_SYNC_FAILED,
                f"Snapshot sink failed for {key.value}: {type(e).__name__}",
                ErrorContext(operation="publish_snapshot", resource=key.value),
                original_error=e,
            )
            log_operation_error(logger, error, level=logging.WARNING)

    # ------------------------------------------------------------------
    # Use cases
    # ------------------------------------------------------------------

    async def fetch_user_data(self) -> UserSnapshot | None:
        snapshot = await self.fetch([ResourceKey.USER_SNAPSHOT])
        return snapshot.get(ResourceKey.USER_SNAPSHOT)

    async def fetch_user_with_networth(self) -> UserNetworthView:
        snapshot = await self.fetch([ResourceKey.USER_SNAPSHOT, ResourceKey.NETWORTH_SNAPSHOT])
        return UserNetworthView(
            user=snapshot.get(ResourceKey.USER_SNAPSHOT),
            networth=snapshot.get(ResourceKey.NETWORTH_SNAPSHOT),
        )

    async def fetch_bank_overview(self) -> BankOverview:
        snapshot = await self.fetch(
            [
                ResourceKey.USER_SNAPSHOT,
                ResourceKey.NETWORTH_SNAPSHOT,
                ResourceKey.BANK_RATES,
                ResourceKey.CITY_BANK_DETAILS,
            ]
        )
        return BankOverview(
            user=snapshot.get(ResourceKey.USER_SNAPSHOT),
            networth=snapshot.get(ResourceKey.NETWORTH_SNAPSHOT),
            rates=snapshot.get(ResourceKey.BANK_RATES),
            city_bank=snapshot.get(ResourceKey.CITY_BANK_DETAILS),
        )

    async def fetch_faction_combined(self) -> FactionOverview:
        snapshot = await self.fetch(
            [ResourceKey.FACTION_SNAPSHOT, ResourceKey.RANKED_WAR_SNAPSHOT]
        )
        return FactionOverview(
            faction=snapshot.get(ResourceKey.FACTION_SNAPSHOT),
            ranked_wars=snapshot.get(ResourceKey.RANKED_WAR_SNAPSHOT),
        )

    async def fetch_gym_inputs(self) -> GymInputs:
        snapshot = await self.fetch(
            [
                ResourceKey.BATTLE_STATS,
                ResourceKey.USER_SNAPSHOT,
                ResourceKey.ACTIVE_GYM,
                ResourceKey.GYM_MODIFIER,
            ]
        )
        return GymInputs(
            battle_stats=snapshot.get(ResourceKey.BATTLE_STATS),
            user=snapshot.get(ResourceKey.USER_SNAPSHOT),
            active_gym=snapshot.get(ResourceKey.ACTIVE_GYM),
            modifier=snapshot.get(ResourceKey.GYM_MODIFIER),
        )

    async def fetch_education_courses(self) -> EducationCourses | None:
        snapshot = await self.fetch([ResourceKey.EDUCATION_COURSES])
        return snapshot.get(ResourceKey.EDUCATION_COURSES)


def _log_fetch_error(error: TornSentinelError) -> None:
    level = logging.WARNING if isinstance(error, TransportError) else logging.ERROR
    log_operation_error(logger, error, level=level)


@dataclass(frozen=True)
class UserNetworthView:
    user: UserSnapshot | None
    networth: NetworthSnapshot | None

    @property
    def total(self) -> int | None:
        """Net worth with real-time liquid balances, None if unknown."""
        if self.networth is None:
            return None
        return hybrid_networth_total(self.networth, self.user)


@dataclass(frozen=True)
class BankOverview:
    user: UserSnapshot | None
    networth: NetworthSnapshot | None
    rates: BankRates | None
    city_bank: CityBankDetails | None

    @property
    def tenor(self) -> str:
        return tenor_from_time_left(self.city_bank.time_left if self.city_bank else None)

    @property
    def current_rate(self) -> float:
        """Interest rate of the running investment's tenor (0 if none)."""
        if self.rates is None or self.tenor == NO_TENOR:
            return 0.0
        return self.rates.rate_for(self.tenor)

    @property
    def bank_total(self) -> int:
        """Wallet, stock market, city bank and offshore bank combined.

        Real-time money balances win over the periodically computed networth.
        """
        money = self.user.money if self.user else None
        networth = self.networth

        def pick(live: int | None, component: str) -> int:
            if live:
                return live
            return networth.component(component) if networth else 0

        return (
            pick(money.wallet if money else None, "wallet")
            + (networth.component("stock_market") if networth else 0)
            + pick(money.city_bank if money else None, "bank")
            + pick(money.cayman_bank if money else None, "overseas_bank")
        )


@dataclass(frozen=True)
class FactionOverview:
    faction: FactionSnapshot | None
    ranked_wars: RankedWarsSnapshot | None

    @property
    def current_war(self) -> RankedWar | None:
        return self.ranked_wars.latest if self.ranked_wars else None

    @property
    def opponent(self) -> RankedWarFaction | None:
        war = self.current_war
        if war is None or self.faction is None:
            return None
        return war.opponent_of(self.faction.faction_id)


@dataclass(frozen=True)
class GymInputs:
    battle_stats: BattleStats | None
    user: UserSnapshot | None
    active_gym: ActiveGym | None
    modifier: GymModifier | None

    @property
    def gym(self) -> Gym | None:
        return gym_by_id(self.active_gym.gym_id) if self.active_gym else None


__all__ = [
    "SYNCED_RESOURCES",
    "BankOverview",
    "FactionOverview",
    "GymInputs",
    "ResourceOrchestrator",
    "UserNetworthView",
]
