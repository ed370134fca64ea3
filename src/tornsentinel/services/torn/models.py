"""Canonical snapshot models.

These are the only shapes the rest of the package sees. They are produced
by the normalizer from whichever upstream schema version served the data,
and are immutable: mappings are read-only proxies, sequences are tuples.
Currency amounts are whole dollars (``int``).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from tornsentinel.services.torn.resources import ResourceKey
from tornsentinel.shared.errors import TornSentinelError


def _freeze(instance: object, name: str) -> None:
    value = getattr(instance, name)
    if value is not None and not isinstance(value, MappingProxyType):
        object.__setattr__(instance, name, MappingProxyType(dict(value)))


@dataclass(frozen=True)
class Bar:
    """A player bar such as energy or happiness."""

    current: int
    maximum: int
    full_time: int | None = None


@dataclass(frozen=True)
class PlayerStatus:
    """Hospital/jail/travel state of a player."""

    state: str
    description: str = ""
    color: str | None = None
    until: int | None = None


@dataclass(frozen=True)
class Cooldowns:
    drug: int | None = None
    medical: int | None = None
    booster: int | None = None


@dataclass(frozen=True)
class TravelStatus:
    destination: str
    method: str | None = None
    departed_at: int | None = None
    arrival_at: int | None = None
    time_left: int | None = None


@dataclass(frozen=True)
class Money:
    """Real-time liquid balances."""

    wallet: int | None = None
    vault: int | None = None
    city_bank: int | None = None
    cayman_bank: int | None = None
    points: int | None = None
    company: int | None = None
    daily_networth: int | None = None


@dataclass(frozen=True)
class UserSnapshot:
    """Profile, bars, cooldowns, travel and money of the key owner."""

    player_id: int
    name: str
    level: int | None = None
    status: PlayerStatus | None = None
    energy: Bar | None = None
    nerve: Bar | None = None
    happy: Bar | None = None
    life: Bar | None = None
    cooldowns: Cooldowns | None = None
    travel: TravelStatus | None = None
    money: Money | None = None


@dataclass(frozen=True)
class BankBalance:
    """City bank investment: amount and seconds until maturity.

    ``time_left`` is None when the serving schema does not expose it.
    """

    amount: int
    time_left: int | None = None


# Networth components whose balances are also reported in real time by the
# money block of the user snapshot, as (networth component, money field).
LIQUID_COMPONENTS: tuple[tuple[str, str], ...] = (
    ("wallet", "wallet"),
    ("vaults", "vault"),
    ("overseas_bank", "cayman_bank"),
    ("points", "points"),
)


@dataclass(frozen=True)
class NetworthSnapshot:
    """Net worth breakdown.

    Attributes:
        total: Total net worth as last computed upstream
        bank: City bank balance
        components: Every other named component (``wallet``, ``vaults``,
            ``overseas_bank``, ``stock_market``, ``loans``...)
    """

    total: int
    bank: BankBalance | None = None
    components: Mapping[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        _freeze(self, "components")

    def component(self, name: str) -> int:
        """Return a component balance, 0 when unknown."""
        if name == "bank":
            return self.bank.amount if self.bank else 0
        return self.components.get(name, 0)


@dataclass(frozen=True)
class CityBankDetails:
    amount: int
    time_left: int


@dataclass(frozen=True)
class BankRates:
    """City bank interest rates (percent) keyed by tenor (``1w`` .. ``3m``)."""

    rates: Mapping[str, float]

    def __post_init__(self) -> None:
        _freeze(self, "rates")

    def rate_for(self, tenor: str) -> float:
        return self.rates.get(tenor, 0.0)


@dataclass(frozen=True)
class BattleStats:
    strength: float
    defense: float
    speed: float
    dexterity: float

    @property
    def total(self) -> float:
        return self.strength + self.defense + self.speed + self.dexterity

    def highest(self) -> tuple[str, float]:
        """Return the name and value of the highest stat (first wins on ties)."""
        stats = (
            ("strength", self.strength),
            ("defense", self.defense),
            ("speed", self.speed),
            ("dexterity", self.dexterity),
        )
        return max(stats, key=lambda item: item[1])


@dataclass(frozen=True)
class ActiveGym:
    gym_id: int


@dataclass(frozen=True)
class GymGainBonus:
    """A ``+N% gym gains`` perk, optionally limited to one stat."""

    percent: float
    stat: str | None = None
    source: str = ""


@dataclass(frozen=True)
class GymModifier:
    """Gym gain bonuses derived from the player's perks."""

    bonuses: tuple[GymGainBonus, ...] = ()

    def multiplier(self, stat: str | None = None) -> float:
        """Return the product of ``1 + p`` over the bonuses that apply to ``stat``."""
        result = 1.0
        for bonus in self.bonuses:
            if bonus.stat is None or bonus.stat == stat:
                result *= 1 + bonus.percent / 100
        return result


@dataclass(frozen=True)
class LastAction:
    status: str
    timestamp: int | None = None


@dataclass(frozen=True)
class FactionMember:
    member_id: int
    name: str
    level: int | None = None
    days_in_faction: int | None = None
    position: str | None = None
    status: PlayerStatus | None = None
    last_action: LastAction | None = None


@dataclass(frozen=True)
class FactionSnapshot:
    """Faction overview with its members keyed by player ID."""

    faction_id: int
    name: str
    tag: str | None = None
    leader_id: int | None = None
    co_leader_id: int | None = None
    capacity: int | None = None
    respect: int | None = None
    members: Mapping[int, FactionMember] = field(default_factory=dict)

    def __post_init__(self) -> None:
        _freeze(self, "members")

    def member_name(self, member_id: int | None) -> str | None:
        member = self.members.get(member_id) if member_id is not None else None
        return member.name if member else None


@dataclass(frozen=True)
class RankedWarFaction:
    faction_id: int
    name: str
    score: int
    chain: int = 0


@dataclass(frozen=True)
class RankedWar:
    war_id: int
    start: int
    end: int | None
    target: int
    winner: int | None
    factions: tuple[RankedWarFaction, ...]

    def opponent_of(self, faction_id: int) -> RankedWarFaction | None:
        return next((f for f in self.factions if f.faction_id != faction_id), None)

    def side_of(self, faction_id: int) -> RankedWarFaction | None:
        return next((f for f in self.factions if f.faction_id == faction_id), None)

    @property
    def lead(self) -> int:
        """Absolute score difference between the first two factions."""
        scores = [f.score for f in self.factions[:2]]
        return abs(scores[0] - scores[1]) if len(scores) == 2 else 0


@dataclass(frozen=True)
class RankedWarsSnapshot:
    """Ranked wars, most recent first."""

    wars: tuple[RankedWar, ...] = ()

    @property
    def latest(self) -> RankedWar | None:
        return self.wars[0] if self.wars else None


@dataclass(frozen=True)
class EducationCourses:
    """Course ID (as string) to course name."""

    courses: Mapping[str, str]

    def __post_init__(self) -> None:
        _freeze(self, "courses")

    def name_of(self, course_id: int | str) -> str | None:
        return self.courses.get(str(course_id))


@dataclass(frozen=True)
class ResourceSnapshot:
    """Result of one orchestrator fetch.

    ``values`` holds every requested resource; a resource that could not be
    served from cache or upstream maps to None and its error is recorded in
    ``failures``.
    """

    values: Mapping[ResourceKey, Any]
    failures: Mapping[ResourceKey, TornSentinelError] = field(default_factory=dict)

    def __post_init__(self) -> None:
        _freeze(self, "values")
        _freeze(self, "failures")

    def get(self, key: ResourceKey) -> Any:
        return self.values.get(key)

    def __getitem__(self, key: ResourceKey) -> Any:
        return self.values[key]

    def __contains__(self, key: object) -> bool:
        return self.values.get(key) is not None

    @property
    def complete(self) -> bool:
        """True when every requested resource has a value."""
        return all(value is not None for value in self.values.values())

    @classmethod
    def absent(
        cls,
        keys: tuple[ResourceKey, ...],
        error: TornSentinelError | None = None,
    ) -> ResourceSnapshot:
        """Build a snapshot where every resource is missing."""
        failures = {key: error for key in keys} if error else {}
        return cls(values=dict.fromkeys(keys), failures=failures)


__all__ = [
    "LIQUID_COMPONENTS",
    "ActiveGym",
    "BankBalance",
    "BankRates",
    "Bar",
    "BattleStats",
    "CityBankDetails",
    "Cooldowns",
    "EducationCourses",
    "FactionMember",
    "FactionSnapshot",
    "GymGainBonus",
    "GymModifier",
    "LastAction",
    "Money",
    "NetworthSnapshot",
    "PlayerStatus",
    "RankedWar",
    "RankedWarFaction",
    "RankedWarsSnapshot",
    "ResourceSnapshot",
    "TravelStatus",
    "UserSnapshot",
]
