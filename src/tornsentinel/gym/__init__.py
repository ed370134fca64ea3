"""Gym gain simulator and gym catalogue."""

from .calculator import (
    GymSessionInput,
    GymSessionResult,
    HappinessLossMode,
    calc_modifier,
    gain_per_action,
    simulate,
    simulate_session,
)
from .gyms import GYM_DATA, GYM_ID_TO_NAME, Gym, gym_by_id, gym_by_name

__all__ = [
    "GYM_DATA",
    "GYM_ID_TO_NAME",
    "Gym",
    "GymSessionInput",
    "GymSessionResult",
    "HappinessLossMode",
    "calc_modifier",
    "gain_per_action",
    "gym_by_id",
    "gym_by_name",
    "simulate",
    "simulate_session",
]
