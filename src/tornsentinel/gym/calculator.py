"""Gym gain calculation.

Closed-form per-train gain and a session simulator that applies it once
per train, updating the stat and happiness in between.
"""

from __future__ import annotations

import logging
import math
import random
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from tornsentinel.shared.constants import GymFormula, HappinessLoss
from tornsentinel.shared.errors import create_validation_error

logger = logging.getLogger(__name__)


class HappinessLossMode(str, Enum):
    """How much happiness a train costs."""

    AVERAGE = "average"
    RANDOM = "random"


@dataclass(frozen=True)
class GymSessionInput:
    """Inputs of one training session."""

    initial_stat: float
    initial_happiness: float
    total_energy_budget: float
    energy_per_action: float
    gym_factor: float
    modifier: float = 1.0
    happiness_loss_mode: HappinessLossMode = HappinessLossMode.AVERAGE


@dataclass(frozen=True)
class GymSessionResult:
    """Outcome of a simulated training session."""

    actions_performed: int
    final_stat: float
    final_happiness: float
    total_gain: float
    avg_gain_per_energy: float


def calc_modifier(bonus_percents: Iterable[float]) -> float:
    """Combine fractional bonuses multiplicatively.

    Example:
        >>> round(calc_modifier([0.10, 0.02, 0.05]), 6)
        1.1781
    """
    modifier = 1.0
    for percent in bonus_percents:
        modifier *= 1 + percent
    return modifier


def gain_per_action(
    current_stat: float,
    happiness: float,
    energy_cost: float,
    gym_factor: float,
    modifier: float = 1.0,
) -> float:
    """Stat gained by one train.

    gain = M * G * E * ((a * ln(H + b) + c) * S + d * (H + b) + e)

    Args:
        current_stat: Current value of the trained stat (S)
        happiness: Current happiness (H)
        energy_cost: Energy spent by the train (E)
        gym_factor: Gym dots for the trained stat (G)
        modifier: Product of gym gain bonuses (M)
    """
    h_b = happiness + GymFormula.B
    base = (GymFormula.A * math.log(h_b) + GymFormula.C) * current_stat + GymFormula.D * h_b + GymFormula.E
    return modifier * gym_factor * energy_cost * base


def simulate_session(
    initial_stat: float,
    initial_happiness: float,
    total_energy_budget: float,
    energy_per_action: float,
    gym_factor: float,
    modifier: float = 1.0,
    happiness_loss_mode: HappinessLossMode | str = HappinessLossMode.AVERAGE,
    rng: random.Random | None = None,
) -> GymSessionResult:
    """Simulate ``floor(total_energy_budget / energy_per_action)`` trains.

    After each train the stat grows by that train's gain and happiness drops
    by ``0.5 * E`` (AVERAGE) or ``E * U(0.4, 0.6)`` (RANDOM), never below 0.

    Args:
        rng: Random source for RANDOM mode; pass a seeded ``random.Random``
            for reproducible runs

    Raises:
        ApplicationError: If energy_per_action is not positive or the budget
            is negative
    """
    if energy_per_action <= 0:
        raise create_validation_error(
            f"energy_per_action must be positive, got {energy_per_action}",
            operation="simulate_session",
            field="energy_per_action",
        )
    if total_energy_budget < 0:
        raise create_validation_error(
            f"total_energy_budget must not be negative, got {total_energy_budget}",
            operation="simulate_session",
            field="total_energy_budget",
        )

    mode = HappinessLossMode(happiness_loss_mode)
    rng = rng or random.Random()
    actions = math.floor(total_energy_budget / energy_per_action)

    stat = initial_stat
    happiness = initial_happiness
    for _ in range(actions):
        stat += gain_per_action(stat, happiness, energy_per_action, gym_factor, modifier)
        if mode is HappinessLossMode.AVERAGE:
            loss = HappinessLoss.AVERAGE_RATIO * energy_per_action
        else:
            loss = energy_per_action * (
                HappinessLoss.RANDOM_MIN_RATIO + rng.random() * HappinessLoss.RANDOM_SPAN_RATIO
            )
        happiness = max(0.0, happiness - loss)

    total_gain = stat - initial_stat
    used_energy = actions * energy_per_action
    logger.debug("Simulated %d trains, total gain %.4f", actions, total_gain)
    return GymSessionResult(
        actions_performed=actions,
        final_stat=stat,
        final_happiness=happiness,
        total_gain=total_gain,
        avg_gain_per_energy=total_gain / used_energy if used_energy > 0 else 0.0,
    )


def simulate(session: GymSessionInput, rng: random.Random | None = None) -> GymSessionResult:
    """Run :func:`simulate_session` on a ``GymSessionInput``."""
    return simulate_session(
        session.initial_stat,
        session.initial_happiness,
        session.total_energy_budget,
        session.energy_per_action,
        session.gym_factor,
        session.modifier,
        session.happiness_loss_mode,
        rng=rng,
    )


__all__ = [
    "GymSessionInput",
    "GymSessionResult",
    "HappinessLossMode",
    "calc_modifier",
    "gain_per_action",
    "simulate",
    "simulate_session",
]
