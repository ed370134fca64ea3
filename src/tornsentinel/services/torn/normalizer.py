"""Schema normalizer.

One strict function per (resource, schema version) turns a raw upstream
payload into a canonical snapshot, or raises ``MalformedResponseError`` when
a required field is missing or has the wrong shape. Optional fields the
schema does not carry come back as None.

``merge_canonical`` is the single additive-patch operation used to combine
a freshly normalized value with the last known one.
"""

from __future__ import annotations

import dataclasses
import logging
import re
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from tornsentinel.services.torn.models import (
    LIQUID_COMPONENTS,
    ActiveGym,
    BankBalance,
    BankRates,
    Bar,
    BattleStats,
    CityBankDetails,
    Cooldowns,
    EducationCourses,
    FactionMember,
    FactionSnapshot,
    GymGainBonus,
    GymModifier,
    LastAction,
    Money,
    NetworthSnapshot,
    PlayerStatus,
    RankedWar,
    RankedWarFaction,
    RankedWarsSnapshot,
    TravelStatus,
    UserSnapshot,
)
from tornsentinel.services.torn.resources import ResourceKey
from tornsentinel.shared.errors import (
    ErrorCode,
    ErrorContext,
    MalformedResponseError,
    create_malformed_response_error,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

_MISSING = object()


class _PayloadReader:
    """Typed field access that raises MalformedResponseError on bad shapes."""

    def __init__(self, resource: ResourceKey, schema: str) -> None:
        self.resource = resource
        self.schema = schema

    def fail(self, path: str, error: Exception | None = None) -> MalformedResponseError:
        return create_malformed_response_error(
            self.resource.value,
            path,
            self.schema,
            original_error=error,
        )

    def mapping(self, data: Any, key: str, path: str | None = None) -> Mapping[str, Any]:
        value = data.get(key) if isinstance(data, Mapping) else None
        if not isinstance(value, Mapping):
            raise self.fail(path or key)
        return value

    def optional_mapping(self, data: Any, key: str) -> Mapping[str, Any] | None:
        value = data.get(key) if isinstance(data, Mapping) else None
        return value if isinstance(value, Mapping) else None

    def integer(self, data: Mapping[str, Any], key: str, path: str | None = None) -> int:
        value = _to_int(data.get(key, _MISSING))
        if value is None:
            raise self.fail(path or key)
        return value

    def number(self, data: Mapping[str, Any], key: str, path: str | None = None) -> float:
        value = _to_float(data.get(key, _MISSING))
        if value is None:
            raise self.fail(path or key)
        return value

    def string(self, data: Mapping[str, Any], key: str, path: str | None = None) -> str:
        value = data.get(key)
        if not isinstance(value, str):
            raise self.fail(path or key)
        return value


def _to_int(value: Any) -> int | None:
    """Coerce a JSON number (or numeric string) to int; None if impossible."""
    if value is _MISSING or value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else round(value)
    if isinstance(value, str):
        try:
            return int(float(value.replace(",", "")))
        except ValueError:
            return None
    return None


def _to_float(value: Any) -> float | None:
    if value is _MISSING or value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.replace(",", ""))
        except ValueError:
            return None
    return None


def _opt_int(data: Mapping[str, Any] | None, key: str) -> int | None:
    if data is None:
        return None
    return _to_int(data.get(key, _MISSING))


def _opt_str(data: Mapping[str, Any] | None, key: str) -> str | None:
    if data is None:
        return None
    value = data.get(key)
    return value if isinstance(value, str) else None


def _bar(data: Mapping[str, Any] | None) -> Bar | None:
    if data is None:
        return None
    current = _opt_int(data, "current")
    maximum = _opt_int(data, "maximum")
    if current is None or maximum is None:
        return None
    return Bar(current=current, maximum=maximum, full_time=_opt_int(data, "full_time"))


def _status(data: Mapping[str, Any] | None) -> PlayerStatus | None:
    if data is None or not isinstance(data.get("state"), str):
        return None
    until = _opt_int(data, "until")
    return PlayerStatus(
        state=data["state"],
        description=_opt_str(data, "description") or "",
        color=_opt_str(data, "color"),
        until=until or None,
    )


# ---------------------------------------------------------------------------
# User
# ---------------------------------------------------------------------------


def normalize_user_v2(payload: Mapping[str, Any]) -> UserSnapshot:
    """Normalize a v2 ``user`` payload (profile, bars, cooldowns, travel, money)."""
    reader = _PayloadReader(ResourceKey.USER_SNAPSHOT, "v2")
    profile = reader.mapping(payload, "profile")
    bars = reader.optional_mapping(payload, "bars") or {}
    cooldowns = reader.optional_mapping(payload, "cooldowns")
    travel = reader.optional_mapping(payload, "travel")
    money = reader.optional_mapping(payload, "money")

    travel_status = None
    if travel is not None and isinstance(travel.get("destination"), str):
        travel_status = TravelStatus(
            destination=travel["destination"],
            method=_opt_str(travel, "method"),
            departed_at=_opt_int(travel, "departed_at"),
            arrival_at=_opt_int(travel, "arrival_at"),
            time_left=_opt_int(travel, "time_left"),
        )

    return UserSnapshot(
        player_id=reader.integer(profile, "id", "profile.id"),
        name=reader.string(profile, "name", "profile.name"),
        level=_opt_int(profile, "level"),
        status=_status(reader.optional_mapping(profile, "status")),
        energy=_bar(reader.optional_mapping(bars, "energy")),
        nerve=_bar(reader.optional_mapping(bars, "nerve")),
        happy=_bar(reader.optional_mapping(bars, "happy")),
        life=_bar(reader.optional_mapping(bars, "life")),
        cooldowns=(
            Cooldowns(
                drug=_opt_int(cooldowns, "drug"),
                medical=_opt_int(cooldowns, "medical"),
                booster=_opt_int(cooldowns, "booster"),
            )
            if cooldowns is not None
            else None
        ),
        travel=travel_status,
        money=_money_v2(money) if money is not None else None,
    )


def _money_v2(money: Mapping[str, Any]) -> Money:
    city_bank = money.get("city_bank")
    if isinstance(city_bank, Mapping):
        city_bank_amount = _opt_int(city_bank, "amount")
    else:
        city_bank_amount = _to_int(city_bank)
    return Money(
        wallet=_opt_int(money, "wallet"),
        vault=_opt_int(money, "vault"),
        city_bank=city_bank_amount,
        cayman_bank=_opt_int(money, "cayman_bank"),
        points=_opt_int(money, "points"),
        company=_opt_int(money, "company"),
        daily_networth=_opt_int(money, "daily_networth"),
    )


# ---------------------------------------------------------------------------
# Networth
# ---------------------------------------------------------------------------

# v1 ``networth`` selection field names -> canonical component names
_NETWORTH_V1_FIELDS: Mapping[str, str] = {
    "wallet": "wallet",
    "vault": "vaults",
    "cayman": "overseas_bank",
    "points": "points",
    "items": "inventory",
    "displaycase": "display_case",
    "bazaar": "bazaar",
    "itemmarket": "item_market",
    "trade": "trade",
    "properties": "property",
    "stockmarket": "stock_market",
    "auctionhouse": "auction_house",
    "bookie": "bookie",
    "company": "company",
    "enlistedcars": "enlisted_cars",
    "piggybank": "piggy_bank",
    "pending": "pending",
    "loan": "loans",
    "unpaidfees": "unpaid_fees",
}

_NETWORTH_V2_FIELDS: tuple[str, ...] = (
    "wallet",
    "vaults",
    "overseas_bank",
    "points",
    "inventory",
    "display_case",
    "bazaar",
    "item_market",
    "trade",
    "property",
    "stock_market",
    "auction_house",
    "bookie",
    "company",
    "enlisted_cars",
    "piggy_bank",
    "pending",
    "loans",
    "unpaid_fees",
)


def normalize_networth_v1(payload: Mapping[str, Any]) -> NetworthSnapshot:
    """Normalize a v1 ``user?selections=networth`` payload.

    v1 reports the city bank as a bare amount, so ``time_left`` is unknown.
    """
    reader = _PayloadReader(ResourceKey.NETWORTH_SNAPSHOT, "v1")
    networth = reader.mapping(payload, "networth")
    components = {
        canonical: value
        for source, canonical in _NETWORTH_V1_FIELDS.items()
        if (value := _opt_int(networth, source)) is not None
    }
    bank = _opt_int(networth, "bank")
    return NetworthSnapshot(
        total=reader.integer(networth, "total", "networth.total"),
        bank=BankBalance(amount=bank) if bank is not None else None,
        components=components,
    )


def normalize_networth_v2(payload: Mapping[str, Any]) -> NetworthSnapshot:
    """Normalize a v2 ``user/personalstats?cat=networth`` payload."""
    reader = _PayloadReader(ResourceKey.NETWORTH_SNAPSHOT, "v2")
    stats = reader.mapping(payload, "personalstats")
    networth = reader.mapping(stats, "networth", "personalstats.networth")
    components = {
        name: value
        for name in _NETWORTH_V2_FIELDS
        if (value := _opt_int(networth, name)) is not None
    }

    bank_value = networth.get("bank")
    bank: BankBalance | None
    if isinstance(bank_value, Mapping):
        bank = BankBalance(
            amount=reader.integer(bank_value, "amount", "personalstats.networth.bank.amount"),
            time_left=_opt_int(bank_value, "time_left"),
        )
    else:
        amount = _to_int(bank_value)
        bank = BankBalance(amount=amount) if amount is not None else None

    return NetworthSnapshot(
        total=reader.integer(networth, "total", "personalstats.networth.total"),
        bank=bank,
        components=components,
    )


def hybrid_networth_total(networth: NetworthSnapshot, user: UserSnapshot | None) -> int:
    """Recompute total net worth with real-time liquid balances.

    The upstream total is only refreshed periodically. Liquid components
    (wallet, vaults, city and offshore bank, points) are swapped for the
    live values from the user's money block where those are known.
    """
    money = user.money if user is not None else None
    if money is None:
        return networth.total

    pairs = [*LIQUID_COMPONENTS, ("bank", "city_bank")]
    cached_liquid = sum(networth.component(component) for component, _ in pairs)
    live_liquid = 0
    for component, money_field in pairs:
        live = getattr(money, money_field)
        live_liquid += live if live is not None else networth.component(component)
    return networth.total - cached_liquid + live_liquid


# ---------------------------------------------------------------------------
# Bank
# ---------------------------------------------------------------------------


def normalize_city_bank_v1(payload: Mapping[str, Any]) -> CityBankDetails:
    """Normalize the ``city_bank`` block of a v1 ``user?selections=money`` payload."""
    reader = _PayloadReader(ResourceKey.CITY_BANK_DETAILS, "v1")
    city_bank = reader.mapping(payload, "city_bank")
    return CityBankDetails(
        amount=reader.integer(city_bank, "amount", "city_bank.amount"),
        time_left=reader.integer(city_bank, "time_left", "city_bank.time_left"),
    )


BANK_TENORS: tuple[str, ...] = ("1w", "2w", "1m", "2m", "3m")


def normalize_bank_rates_v1(payload: Mapping[str, Any]) -> BankRates:
    """Normalize a v1 ``torn?selections=bank`` payload."""
    reader = _PayloadReader(ResourceKey.BANK_RATES, "v1")
    bank = reader.mapping(payload, "bank")
    return BankRates(
        rates={tenor: reader.number(bank, tenor, f"bank.{tenor}") for tenor in BANK_TENORS}
    )


# ---------------------------------------------------------------------------
# Gym inputs
# ---------------------------------------------------------------------------


def normalize_battle_stats_v1(payload: Mapping[str, Any]) -> BattleStats:
    """Normalize a v1 ``user?selections=battlestats`` payload."""
    reader = _PayloadReader(ResourceKey.BATTLE_STATS, "v1")
    if not isinstance(payload, Mapping):
        raise reader.fail("<root>")
    return BattleStats(
        strength=reader.number(payload, "strength"),
        defense=reader.number(payload, "defense"),
        speed=reader.number(payload, "speed"),
        dexterity=reader.number(payload, "dexterity"),
    )


def normalize_active_gym_v1(payload: Mapping[str, Any]) -> ActiveGym:
    """Normalize a v1 ``user?selections=gym`` payload."""
    reader = _PayloadReader(ResourceKey.ACTIVE_GYM, "v1")
    if not isinstance(payload, Mapping):
        raise reader.fail("<root>")
    return ActiveGym(gym_id=reader.integer(payload, "active_gym"))


_GYM_GAIN_PATTERN = re.compile(
    r"\+\s*(\d+(?:\.\d+)?)\s*%\s*(?:(strength|speed|defense|dexterity)\s+)?gym\s+gains?",
    re.IGNORECASE,
)


def parse_gym_gain_bonuses(perks: Mapping[str, Any]) -> tuple[GymGainBonus, ...]:
    """Extract ``+N% [stat] gym gains`` bonuses from every ``*_perks`` list."""
    bonuses = []
    for source, entries in perks.items():
        if not source.endswith("_perks") or not isinstance(entries, list):
            continue
        for entry in entries:
            if not isinstance(entry, str):
                continue
            match = _GYM_GAIN_PATTERN.search(entry)
            if match:
                stat = match.group(2).lower() if match.group(2) else None
                bonuses.append(GymGainBonus(percent=float(match.group(1)), stat=stat, source=source))
    return tuple(bonuses)


def normalize_gym_modifier_v1(payload: Mapping[str, Any]) -> GymModifier:
    """Normalize a v1 ``user?selections=perks`` payload into gym gain bonuses."""
    reader = _PayloadReader(ResourceKey.GYM_MODIFIER, "v1")
    if not isinstance(payload, Mapping) or not any(
        isinstance(key, str) and key.endswith("_perks") for key in payload
    ):
        raise reader.fail("*_perks")
    return GymModifier(bonuses=parse_gym_gain_bonuses(payload))


# ---------------------------------------------------------------------------
# Faction
# ---------------------------------------------------------------------------


def normalize_faction_v1(payload: Mapping[str, Any]) -> FactionSnapshot:
    """Normalize a v1 ``faction?selections=basic`` payload."""
    reader = _PayloadReader(ResourceKey.FACTION_SNAPSHOT, "v1")
    if not isinstance(payload, Mapping):
        raise reader.fail("<root>")
    raw_members = reader.mapping(payload, "members")

    members: dict[int, FactionMember] = {}
    for raw_id, raw_member in raw_members.items():
        member_id = _to_int(raw_id)
        if member_id is None or not isinstance(raw_member, Mapping):
            raise reader.fail(f"members.{raw_id}")
        last_action = reader.optional_mapping(raw_member, "last_action")
        members[member_id] = FactionMember(
            member_id=member_id,
            name=reader.string(raw_member, "name", f"members.{raw_id}.name"),
            level=_opt_int(raw_member, "level"),
            days_in_faction=_opt_int(raw_member, "days_in_faction"),
            position=_opt_str(raw_member, "position"),
            status=_status(reader.optional_mapping(raw_member, "status")),
            last_action=(
                LastAction(
                    status=_opt_str(last_action, "status") or "",
                    timestamp=_opt_int(last_action, "timestamp"),
                )
                if last_action is not None
                else None
            ),
        )

    return FactionSnapshot(
        faction_id=reader.integer(payload, "ID"),
        name=reader.string(payload, "name"),
        tag=_opt_str(payload, "tag"),
        leader_id=_opt_int(payload, "leader") or None,
        co_leader_id=_opt_int(payload, "co-leader") or None,
        capacity=_opt_int(payload, "capacity"),
        respect=_opt_int(payload, "respect"),
        members=members,
    )


def normalize_ranked_wars_v1(payload: Mapping[str, Any]) -> RankedWarsSnapshot:
    """Normalize a v1 ``faction?selections=rankedwars`` payload.

    v1 keys wars and factions by ID; wars are ordered most recent first.
    """
    reader = _PayloadReader(ResourceKey.RANKED_WAR_SNAPSHOT, "v1")
    raw_wars = reader.mapping(payload, "rankedwars")

    wars = []
    for raw_id, raw_war in raw_wars.items():
        path = f"rankedwars.{raw_id}"
        war_id = _to_int(raw_id)
        if war_id is None or not isinstance(raw_war, Mapping):
            raise reader.fail(path)
        war = reader.mapping(raw_war, "war", f"{path}.war")
        raw_factions = reader.mapping(raw_war, "factions", f"{path}.factions")
        factions = []
        for raw_faction_id, raw_faction in raw_factions.items():
            faction_id = _to_int(raw_faction_id)
            if faction_id is None or not isinstance(raw_faction, Mapping):
                raise reader.fail(f"{path}.factions.{raw_faction_id}")
            factions.append(
                RankedWarFaction(
                    faction_id=faction_id,
                    name=reader.string(raw_faction, "name", f"{path}.factions.{raw_faction_id}.name"),
                    score=reader.integer(raw_faction, "score", f"{path}.factions.{raw_faction_id}.score"),
                    chain=_opt_int(raw_faction, "chain") or 0,
                )
            )
        wars.append(
            RankedWar(
                war_id=war_id,
                start=reader.integer(war, "start", f"{path}.war.start"),
                end=_opt_int(war, "end") or None,
                target=_opt_int(war, "target") or 0,
                winner=_opt_int(war, "winner") or None,
                factions=tuple(factions),
            )
        )

    wars.sort(key=lambda w: w.start, reverse=True)
    return RankedWarsSnapshot(wars=tuple(wars))


def normalize_ranked_wars_v2(payload: Mapping[str, Any]) -> RankedWarsSnapshot:
    """Normalize a v2 ``faction/rankedwars`` payload (ordered lists, most recent first)."""
    reader = _PayloadReader(ResourceKey.RANKED_WAR_SNAPSHOT, "v2")
    raw_wars = payload.get("rankedwars") if isinstance(payload, Mapping) else None
    if not isinstance(raw_wars, list):
        raise reader.fail("rankedwars")

    wars = []
    for index, raw_war in enumerate(raw_wars):
        path = f"rankedwars[{index}]"
        if not isinstance(raw_war, Mapping) or not isinstance(raw_war.get("factions"), list):
            raise reader.fail(f"{path}.factions")
        factions = []
        for f_index, raw_faction in enumerate(raw_war["factions"]):
            f_path = f"{path}.factions[{f_index}]"
            if not isinstance(raw_faction, Mapping):
                raise reader.fail(f_path)
            factions.append(
                RankedWarFaction(
                    faction_id=reader.integer(raw_faction, "id", f"{f_path}.id"),
                    name=reader.string(raw_faction, "name", f"{f_path}.name"),
                    score=reader.integer(raw_faction, "score", f"{f_path}.score"),
                    chain=_opt_int(raw_faction, "chain") or 0,
                )
            )
        wars.append(
            RankedWar(
                war_id=reader.integer(raw_war, "id", f"{path}.id"),
                start=reader.integer(raw_war, "start", f"{path}.start"),
                end=_opt_int(raw_war, "end") or None,
                target=_opt_int(raw_war, "target") or 0,
                winner=_opt_int(raw_war, "winner") or None,
                factions=tuple(factions),
            )
        )
    return RankedWarsSnapshot(wars=tuple(wars))


# ---------------------------------------------------------------------------
# Education
# ---------------------------------------------------------------------------


def _extract_courses(node: Any, courses: dict[str, str]) -> None:
    if isinstance(node, Mapping):
        node_id = node.get("id")
        label = node.get("title") or node.get("name")
        if node_id and isinstance(label, str):
            courses[str(node_id)] = label
        children = node.values()
    elif isinstance(node, list):
        children = node
    else:
        return
    for child in children:
        if isinstance(child, (Mapping, list)):
            _extract_courses(child, courses)


def normalize_education_v2(payload: Mapping[str, Any]) -> EducationCourses:
    """Normalize a v2 ``torn?selections=education`` payload.

    Courses may be nested under categories at any depth; every object with
    an ``id`` and a ``title`` or ``name`` is recorded.
    """
    reader = _PayloadReader(ResourceKey.EDUCATION_COURSES, "v2")
    education = payload.get("education") if isinstance(payload, Mapping) else None
    if not isinstance(education, (Mapping, list)):
        raise reader.fail("education")
    courses: dict[str, str] = {}
    _extract_courses(education, courses)
    return EducationCourses(courses=courses)


# ---------------------------------------------------------------------------
# Registry and merge
# ---------------------------------------------------------------------------

NORMALIZERS: Mapping[tuple[ResourceKey, str], Callable[[Mapping[str, Any]], Any]] = {
    (ResourceKey.USER_SNAPSHOT, "v2"): normalize_user_v2,
    (ResourceKey.NETWORTH_SNAPSHOT, "v1"): normalize_networth_v1,
    (ResourceKey.NETWORTH_SNAPSHOT, "v2"): normalize_networth_v2,
    (ResourceKey.CITY_BANK_DETAILS, "v1"): normalize_city_bank_v1,
    (ResourceKey.BANK_RATES, "v1"): normalize_bank_rates_v1,
    (ResourceKey.BATTLE_STATS, "v1"): normalize_battle_stats_v1,
    (ResourceKey.ACTIVE_GYM, "v1"): normalize_active_gym_v1,
    (ResourceKey.GYM_MODIFIER, "v1"): normalize_gym_modifier_v1,
    (ResourceKey.FACTION_SNAPSHOT, "v1"): normalize_faction_v1,
    (ResourceKey.RANKED_WAR_SNAPSHOT, "v1"): normalize_ranked_wars_v1,
    (ResourceKey.RANKED_WAR_SNAPSHOT, "v2"): normalize_ranked_wars_v2,
    (ResourceKey.EDUCATION_COURSES, "v2"): normalize_education_v2,
}


def normalize(resource: ResourceKey, schema_version: str, payload: Mapping[str, Any]) -> Any:
    """Dispatch to the normalizer registered for a resource and schema version.

    Raises:
        MalformedResponseError: If no normalizer is registered or the payload
            does not match the schema
    """
    normalizer = NORMALIZERS.get((resource, schema_version))
    if normalizer is None:
        raise MalformedResponseError(
            ErrorCode.UNSUPPORTED_SCHEMA,
            f"No normalizer for {resource.value} schema {schema_version}",
            ErrorContext(
                operation="normalize",
                resource=resource.value,
                additional_data={"schema": schema_version},
            ),
        )
    return normalizer(payload)


# Fields a serving schema may leave out without meaning "cleared". Only these
# are patched from the previous value; every other field of the newer value
# wins even when it is None (a finished hospital stay, a removed co-leader).
ADDITIVE_FIELDS: Mapping[type, frozenset[str]] = {
    # v2 user blocks follow the requested selections
    UserSnapshot: frozenset(
        {"level", "status", "energy", "nerve", "happy", "life", "cooldowns", "travel", "money"}
    ),
    NetworthSnapshot: frozenset({"bank"}),
    # scalar-only bank balances do not carry the maturity countdown
    BankBalance: frozenset({"time_left"}),
}


def merge_canonical(old: T | None, new: T) -> T:
    """Additively patch ``old`` with ``new``.

    Fields ``new`` provides win. A field ``new`` leaves as None is filled
    from ``old`` only when ``ADDITIVE_FIELDS`` lists it for the value's type;
    listed nested snapshot values (e.g. ``BankBalance``) are merged the same
    way, so a scalar-only bank balance keeps the previously known
    ``time_left``. Mappings and tuples are replaced wholesale.

    Raises:
        TypeError: If both values are given but have different types
    """
    if old is None:
        return new
    if type(old) is not type(new):
        msg = f"Cannot merge {type(old).__name__} into {type(new).__name__}"
        raise TypeError(msg)
    if not dataclasses.is_dataclass(new):
        return new

    changes = {}
    for name in ADDITIVE_FIELDS.get(type(new), frozenset()):
        new_value = getattr(new, name)
        old_value = getattr(old, name)
        if new_value is None:
            if old_value is not None:
                changes[name] = old_value
        elif (
            old_value is not None
            and dataclasses.is_dataclass(new_value)
            and type(new_value) is type(old_value)
        ):
            merged = merge_canonical(old_value, new_value)
            if merged is not new_value:
                changes[name] = merged
    return dataclasses.replace(new, **changes) if changes else new


def patch_bank_time_left(networth: NetworthSnapshot, details: CityBankDetails) -> NetworthSnapshot:
    """Copy the maturity countdown of a city bank fetch onto a networth snapshot.

    Only ``time_left`` is patched; the networth's own bank amount is kept.
    """
    if networth.bank is None:
        bank = BankBalance(amount=details.amount, time_left=details.time_left)
    else:
        bank = dataclasses.replace(networth.bank, time_left=details.time_left)
    return dataclasses.replace(networth, bank=bank)


__all__ = [
    "ADDITIVE_FIELDS",
    "BANK_TENORS",
    "NORMALIZERS",
    "hybrid_networth_total",
    "merge_canonical",
    "normalize",
    "normalize_active_gym_v1",
    "normalize_bank_rates_v1",
    "normalize_battle_stats_v1",
    "normalize_city_bank_v1",
    "normalize_education_v2",
    "normalize_faction_v1",
    "normalize_gym_modifier_v1",
    "normalize_networth_v1",
    "normalize_networth_v2",
    "normalize_ranked_wars_v1",
    "normalize_ranked_wars_v2",
    "normalize_user_v2",
    "parse_gym_gain_bonuses",
    "patch_bank_time_left",
]
