"""Tests for the resource catalogue and request planning."""

from __future__ import annotations

import pytest

from tornsentinel.services.torn.resources import (
    RESOURCE_CATALOG,
    EndpointFamily,
    ResourceKey,
    get_definition,
    plan_requests,
    resolve_ttl,
)
from tornsentinel.shared.constants import TornAPIConfig
from tornsentinel.shared.errors import ApplicationError, ErrorCode


class TestCatalog:
    def test_every_key_is_defined(self) -> None:
        assert set(RESOURCE_CATALOG) == set(ResourceKey)

    def test_get_definition_accepts_names(self) -> None:
        assert get_definition("BANK_RATES").key is ResourceKey.BANK_RATES
        assert get_definition(ResourceKey.BANK_RATES).key is ResourceKey.BANK_RATES

    def test_unknown_key_raises(self) -> None:
        with pytest.raises(ApplicationError) as exc_info:
            get_definition("NOT_A_RESOURCE")

        assert exc_info.value.code == ErrorCode.UNKNOWN_RESOURCE

    def test_resolve_ttl_uses_override(self) -> None:
        assert resolve_ttl(ResourceKey.BANK_RATES) == 3600
        assert resolve_ttl(ResourceKey.BANK_RATES, {"BANK_RATES": 120.0}) == 120.0
        assert resolve_ttl(ResourceKey.USER_SNAPSHOT, {"BANK_RATES": 120.0}) == 10


class TestPlanRequests:
    def test_shared_endpoint_is_one_request(self) -> None:
        """Given resources on the same endpoint, then one request carries all selections."""
        requests = plan_requests(
            [ResourceKey.BATTLE_STATS, ResourceKey.ACTIVE_GYM, ResourceKey.GYM_MODIFIER]
        )

        assert len(requests) == 1
        request = requests[0]
        assert request.family is EndpointFamily.V1
        assert request.path == "user"
        assert request.selections == ("battlestats", "gym", "perks")
        assert request.resources == (
            ResourceKey.BATTLE_STATS,
            ResourceKey.ACTIVE_GYM,
            ResourceKey.GYM_MODIFIER,
        )

    def test_group_timeout_is_largest_member(self) -> None:
        (request,) = plan_requests([ResourceKey.ACTIVE_GYM, ResourceKey.BATTLE_STATS])

        assert request.timeout == TornAPIConfig.DEFAULT_TIMEOUT

        (faction,) = plan_requests([ResourceKey.FACTION_SNAPSHOT, ResourceKey.RANKED_WAR_SNAPSHOT])
        assert faction.timeout == TornAPIConfig.SLOW_TIMEOUT
        assert faction.selections == ("basic", "rankedwars")

    def test_families_are_not_merged(self) -> None:
        requests = plan_requests(
            [ResourceKey.USER_SNAPSHOT, ResourceKey.CITY_BANK_DETAILS, ResourceKey.NETWORTH_SNAPSHOT]
        )

        assert [(r.family, r.path) for r in requests] == [
            (EndpointFamily.V2, "user"),
            (EndpointFamily.V1, "user"),
            (EndpointFamily.V2, "user/personalstats"),
        ]

    def test_fixed_params_travel_with_request(self) -> None:
        (request,) = plan_requests([ResourceKey.NETWORTH_SNAPSHOT])

        assert request.params == (("cat", "networth"),)
        assert request.selections == ()

    def test_equal_plans_share_identity(self) -> None:
        first = plan_requests([ResourceKey.GYM_MODIFIER, ResourceKey.BATTLE_STATS])[0]
        second = plan_requests([ResourceKey.BATTLE_STATS, ResourceKey.GYM_MODIFIER])[0]

        assert first.identity == second.identity
        assert first == second

    def test_describe_omits_credential(self) -> None:
        (request,) = plan_requests([ResourceKey.BANK_RATES])

        assert request.describe() == "v1/torn?selections=bank"
