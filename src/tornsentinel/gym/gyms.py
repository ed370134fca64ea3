"""Gym catalogue.

Energy per train and gym dots per stat for every gym, plus the mapping from
the gym IDs the API reports to gym names.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from tornsentinel.shared.errors import create_validation_error

STATS: tuple[str, ...] = ("strength", "speed", "defense", "dexterity")


@dataclass(frozen=True)
class Gym:
    """A gym: energy per train and dots per stat (0 = stat not trainable)."""

    name: str
    energy: int
    strength: float
    speed: float
    defense: float
    dexterity: float
    note: str | None = None

    def factor_for(self, stat: str) -> float:
        """Return the gym dots for a stat.

        Raises:
            ApplicationError: If ``stat`` is not a battle stat
        """
        if stat not in STATS:
            raise create_validation_error(
                f"Unknown stat: {stat!r}",
                operation="gym_factor",
                field="stat",
            )
        return getattr(self, stat)

    @property
    def best_factor(self) -> tuple[str, float]:
        """The stat this gym trains best and its dots (first wins on ties)."""
        return max(((stat, getattr(self, stat)) for stat in STATS), key=lambda item: item[1])


def _gym(name: str, energy: int, strength: float, speed: float, defense: float, dexterity: float, note: str | None = None) -> Gym:
    return Gym(name, energy, strength, speed, defense, dexterity, note)


GYM_DATA: Mapping[str, Gym] = MappingProxyType(
    {
        gym.name: gym
        for gym in (
            # Light-weight
            _gym("Premier Fitness", 5, 2.0, 2.0, 2.0, 2.0),
            _gym("Average Joes", 5, 2.4, 2.4, 2.7, 2.4),
            _gym("Woody's Workout", 5, 2.7, 3.2, 3.0, 2.7),
            _gym("Beach Bods", 5, 3.2, 3.2, 3.2, 0),
            _gym("Silver Gym", 5, 3.4, 3.6, 3.4, 3.2),
            _gym("Pour Femme", 5, 3.4, 3.6, 3.6, 3.8),
            _gym("Davies Den", 5, 3.7, 0, 3.7, 3.7),
            _gym("Global Gym", 5, 4.0, 4.0, 4.0, 4.0),
            # Middle-weight
            _gym("Knuckle Heads", 10, 4.8, 4.4, 4.0, 4.2),
            _gym("Pioneer Fitness", 10, 4.4, 4.6, 4.8, 4.4),
            _gym("Anabolic Anomalies", 10, 5.0, 4.6, 5.2, 4.6),
            _gym("Core", 10, 5.0, 5.2, 5.0, 5.0),
            _gym("Racing Fitness", 10, 5.0, 5.4, 4.8, 5.2),
            _gym("Complete Cardio", 10, 5.5, 5.7, 5.5, 5.2),
            _gym("Legs, Bums and Tums", 10, 0, 5.5, 5.5, 5.7),
            _gym("Deep Burn", 10, 6.0, 6.0, 6.0, 6.0),
            # Heavy-weight
            _gym("Apollo Gym", 10, 6.0, 6.2, 6.4, 6.2),
            _gym("Gun Shop", 10, 6.5, 6.4, 6.2, 6.2),
            _gym("Force Training", 10, 6.4, 6.5, 6.4, 6.8),
            _gym("Cha Cha's", 10, 6.4, 6.4, 6.8, 7.0),
            _gym("Atlas", 10, 7.0, 6.4, 6.4, 6.5),
            _gym("Last Round", 10, 6.8, 6.5, 7.0, 6.5),
            _gym("The Edge", 10, 6.8, 7.0, 7.0, 6.8),
            _gym("George's", 10, 7.3, 7.3, 7.3, 7.3, "Stops gym exp gain"),
            # Specialist
            _gym("Balboas Gym", 25, 0, 0, 7.5, 7.5, "Req: Def+Dex 25% > Str+Spd"),
            _gym("Frontline Fitness", 25, 7.5, 7.5, 0, 0, "Req: Str+Spd 25% > Dex+Def"),
            _gym("Gym 3000", 50, 8.0, 0, 0, 0, "Req: Str 25% higher than 2nd stat"),
            _gym("Mr. Isoyamas", 50, 0, 0, 8.0, 0, "Req: Def 25% higher than 2nd stat"),
            _gym("Total Rebound", 50, 0, 8.0, 0, 0, "Req: Spd 25% higher than 2nd stat"),
            _gym("Elites", 50, 0, 0, 0, 8.0, "Req: Dex 25% higher than 2nd stat"),
            _gym("The Sports Science Lab", 25, 9.0, 9.0, 9.0, 9.0, "Req: Max 150 Xanax/Ecstasy taken"),
            _gym("Fight Club", 10, 10.0, 10.0, 10.0, 10.0, "Invite Only"),
            # Jail
            _gym("Jail Gym", 5, 3.4, 3.4, 4.6, 0, "Only accessible in Jail"),
        )
    }
)

# Gym IDs as reported by the ``gym`` selection, in in-game order
GYM_ID_TO_NAME: Mapping[int, str] = MappingProxyType(
    {index: name for index, name in enumerate(list(GYM_DATA)[:32], start=1)}
)


def gym_by_id(gym_id: int) -> Gym | None:
    """Return the gym with an API gym ID, or None if unknown."""
    name = GYM_ID_TO_NAME.get(gym_id)
    return GYM_DATA[name] if name else None


def gym_by_name(name: str) -> Gym | None:
    """Case-insensitive lookup by gym name."""
    lowered = name.casefold()
    return next((gym for gym in GYM_DATA.values() if gym.name.casefold() == lowered), None)


__all__ = ["GYM_DATA", "GYM_ID_TO_NAME", "STATS", "Gym", "gym_by_id", "gym_by_name"]
