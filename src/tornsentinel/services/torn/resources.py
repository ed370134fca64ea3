"""Logical resources served by the Torn API client.

Each resource is bound to exactly one upstream endpoint (family, path and
fixed query parameters), the selections it needs on that endpoint, the
schema version its payload follows, a request timeout and a default TTL.
Resources sharing an endpoint are fetched together in one request whose
selections are the union of theirs.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum

from tornsentinel.shared.constants import ResourceTTL, TornAPIConfig
from tornsentinel.shared.errors import ApplicationError, ErrorCode, ErrorContext


class ResourceKey(str, Enum):
    """Logical resources callers can ask for."""

    USER_SNAPSHOT = "USER_SNAPSHOT"
    NETWORTH_SNAPSHOT = "NETWORTH_SNAPSHOT"
    FACTION_SNAPSHOT = "FACTION_SNAPSHOT"
    RANKED_WAR_SNAPSHOT = "RANKED_WAR_SNAPSHOT"
    BANK_RATES = "BANK_RATES"
    CITY_BANK_DETAILS = "CITY_BANK_DETAILS"
    BATTLE_STATS = "BATTLE_STATS"
    ACTIVE_GYM = "ACTIVE_GYM"
    GYM_MODIFIER = "GYM_MODIFIER"
    EDUCATION_COURSES = "EDUCATION_COURSES"


class EndpointFamily(str, Enum):
    """Versioned endpoint families of the upstream API."""

    V1 = "v1"
    V2 = "v2"


@dataclass(frozen=True)
class EndpointSpec:
    """Where and how a resource is fetched.

    Attributes:
        family: Endpoint family (v1 query-string style or v2 path style)
        path: Entity path below the family base URL, e.g. ``"user"``
        selections: Selections this resource needs on the endpoint
        params: Fixed extra query parameters, part of the endpoint identity
        timeout: Per-request timeout in seconds
        schema_version: Payload schema version the normalizer expects
    """

    family: EndpointFamily
    path: str
    selections: tuple[str, ...] = ()
    params: tuple[tuple[str, str], ...] = ()
    timeout: float = TornAPIConfig.DEFAULT_TIMEOUT
    schema_version: str = "v1"

    @property
    def group_key(self) -> tuple[EndpointFamily, str, tuple[tuple[str, str], ...]]:
        """Identity of the physical endpoint, used to coalesce resources."""
        return (self.family, self.path, self.params)


@dataclass(frozen=True)
class RequestDescriptor:
    """One physical outbound request.

    Built from one or more resources that share an endpoint. ``selections``
    is sorted and de-duplicated so equal requests compare equal, which is
    what the in-flight request map relies on.
    """

    family: EndpointFamily
    path: str
    selections: tuple[str, ...] = ()
    params: tuple[tuple[str, str], ...] = ()
    timeout: float = TornAPIConfig.DEFAULT_TIMEOUT
    resources: tuple[ResourceKey, ...] = field(default=(), compare=False)

    @property
    def identity(self) -> tuple[object, ...]:
        return (self.family, self.path, self.selections, self.params)

    def describe(self) -> str:
        """Human-readable endpoint description without the credential."""
        selections = TornAPIConfig.SELECTIONS_SEPARATOR.join(self.selections)
        return f"{self.family.value}/{self.path}?selections={selections}"


@dataclass(frozen=True)
class ResourceDefinition:
    """Catalogue entry for one resource."""

    key: ResourceKey
    endpoint: EndpointSpec
    ttl: float


_V1_USER = "user"
_V1_TORN = "torn"
_V1_FACTION = "faction"

RESOURCE_CATALOG: Mapping[ResourceKey, ResourceDefinition] = {
    definition.key: definition
    for definition in (
        ResourceDefinition(
            ResourceKey.USER_SNAPSHOT,
            EndpointSpec(
                EndpointFamily.V2,
                "user",
                selections=("profile", "bars", "cooldowns", "travel", "money"),
                timeout=TornAPIConfig.DEFAULT_TIMEOUT,
                schema_version="v2",
            ),
            ResourceTTL.USER_SNAPSHOT,
        ),
        ResourceDefinition(
            ResourceKey.NETWORTH_SNAPSHOT,
            EndpointSpec(
                EndpointFamily.V2,
                "user/personalstats",
                params=(("cat", "networth"),),
                timeout=TornAPIConfig.DEFAULT_TIMEOUT,
                schema_version="v2",
            ),
            ResourceTTL.NETWORTH_SNAPSHOT,
        ),
        ResourceDefinition(
            ResourceKey.CITY_BANK_DETAILS,
            EndpointSpec(
                EndpointFamily.V1,
                _V1_USER,
                selections=("money",),
                timeout=TornAPIConfig.FAST_TIMEOUT,
            ),
            ResourceTTL.CITY_BANK_DETAILS,
        ),
        ResourceDefinition(
            ResourceKey.BATTLE_STATS,
            EndpointSpec(EndpointFamily.V1, _V1_USER, selections=("battlestats",)),
            ResourceTTL.BATTLE_STATS,
        ),
        ResourceDefinition(
            ResourceKey.ACTIVE_GYM,
            EndpointSpec(
                EndpointFamily.V1,
                _V1_USER,
                selections=("gym",),
                timeout=TornAPIConfig.FAST_TIMEOUT,
            ),
            ResourceTTL.ACTIVE_GYM,
        ),
        ResourceDefinition(
            ResourceKey.GYM_MODIFIER,
            EndpointSpec(EndpointFamily.V1, _V1_USER, selections=("perks",)),
            ResourceTTL.GYM_MODIFIER,
        ),
        ResourceDefinition(
            ResourceKey.BANK_RATES,
            EndpointSpec(EndpointFamily.V1, _V1_TORN, selections=("bank",)),
            ResourceTTL.BANK_RATES,
        ),
        ResourceDefinition(
            ResourceKey.FACTION_SNAPSHOT,
            EndpointSpec(EndpointFamily.V1, _V1_FACTION, selections=("basic",)),
            ResourceTTL.FACTION_SNAPSHOT,
        ),
        ResourceDefinition(
            ResourceKey.RANKED_WAR_SNAPSHOT,
            EndpointSpec(
                EndpointFamily.V1,
                _V1_FACTION,
                selections=("rankedwars",),
                timeout=TornAPIConfig.SLOW_TIMEOUT,
            ),
            ResourceTTL.RANKED_WAR_SNAPSHOT,
        ),
        ResourceDefinition(
            ResourceKey.EDUCATION_COURSES,
            EndpointSpec(
                EndpointFamily.V2,
                "torn",
                selections=("education",),
                timeout=TornAPIConfig.SLOW_TIMEOUT,
                schema_version="v2",
            ),
            ResourceTTL.EDUCATION_COURSES,
        ),
    )
}


def get_definition(key: object) -> ResourceDefinition:
    """Look up the catalogue entry for a resource key.

    Raises:
        ApplicationError: If ``key`` is not a defined resource. This is a
            programming error and is never turned into an absent value.
    """
    try:
        return RESOURCE_CATALOG[ResourceKey(key)]
    except (ValueError, KeyError) as e:
        raise ApplicationError(
            ErrorCode.UNKNOWN_RESOURCE,
            f"Unknown resource key: {key!r}",
            ErrorContext(
                operation="resolve_resource",
                additional_data={"resource": str(key)},
            ),
            original_error=e,
        ) from e


def resolve_ttl(key: ResourceKey, overrides: Mapping[str, float] | None = None) -> float:
    """Return the configured TTL for a resource, falling back to its default."""
    if overrides and key.value in overrides:
        return overrides[key.value]
    return RESOURCE_CATALOG[key].ttl


def plan_requests(keys: Iterable[ResourceKey]) -> list[RequestDescriptor]:
    """Group resources by endpoint into the minimum set of requests.

    Each group becomes one request whose selections are the union of its
    members' selections and whose timeout is the largest among them. Order
    follows the first appearance of each endpoint in ``keys``.
    """
    groups: dict[tuple[object, ...], list[ResourceDefinition]] = {}
    for key in keys:
        definition = RESOURCE_CATALOG[key]
        groups.setdefault(definition.endpoint.group_key, []).append(definition)

    requests = []
    for members in groups.values():
        endpoint = members[0].endpoint
        selections = sorted({s for member in members for s in member.endpoint.selections})
        requests.append(
            RequestDescriptor(
                family=endpoint.family,
                path=endpoint.path,
                selections=tuple(selections),
                params=endpoint.params,
                timeout=max(member.endpoint.timeout for member in members),
                resources=tuple(member.key for member in members),
            )
        )
    return requests


__all__ = [
    "RESOURCE_CATALOG",
    "EndpointFamily",
    "EndpointSpec",
    "RequestDescriptor",
    "ResourceDefinition",
    "ResourceKey",
    "get_definition",
    "plan_requests",
    "resolve_ttl",
]
