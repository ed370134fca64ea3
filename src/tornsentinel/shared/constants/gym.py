"""Gym gain formula constants."""


class GymFormula:
    """Closed-form gym gain constants.

    gain = M * G * energy * ((A * ln(H + B) + C) * S + D * (H + B) + E)
    """

    A = 3.480061091e-7
    B = 250
    C = 3.091619094e-6
    D = 6.82775184551527e-5
    E = -0.0301431777


class HappinessLoss:
    """Happiness lost per energy point spent."""

    AVERAGE_RATIO = 0.5
    RANDOM_MIN_RATIO = 0.4
    RANDOM_SPAN_RATIO = 0.2


__all__ = ["GymFormula", "HappinessLoss"]
