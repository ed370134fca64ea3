"""Tests for the gym gain calculator and gym catalogue."""

from __future__ import annotations

import random

import pytest

from tornsentinel.gym.calculator import (
    GymSessionInput,
    HappinessLossMode,
    calc_modifier,
    gain_per_action,
    simulate,
    simulate_session,
)
from tornsentinel.gym.gyms import GYM_DATA, GYM_ID_TO_NAME, gym_by_id, gym_by_name
from tornsentinel.shared.errors import ApplicationError, ErrorCode


class TestGainPerAction:
    def test_reference_value(self) -> None:
        assert gain_per_action(1000, 2000, 10, 5.0, 1.0) == pytest.approx(6.46295, abs=1e-4)

    def test_linear_in_modifier_and_gym_factor(self) -> None:
        base = gain_per_action(5000, 4000, 10, 5.0)

        assert gain_per_action(5000, 4000, 10, 5.0, 1.1) == pytest.approx(base * 1.1)
        assert gain_per_action(5000, 4000, 10, 10.0) == pytest.approx(base * 2)

    def test_more_happiness_more_gain(self) -> None:
        assert gain_per_action(1000, 5000, 10, 5.0) > gain_per_action(1000, 100, 10, 5.0)

    def test_calc_modifier(self) -> None:
        assert calc_modifier([]) == 1.0
        assert calc_modifier([0.10, 0.02, 0.05]) == pytest.approx(1.1781)


class TestSimulateSession:
    def test_actions_are_floored(self) -> None:
        result = simulate_session(1000, 2000, 105, 10, 5.0)

        assert result.actions_performed == 10

    def test_average_happiness_loss(self) -> None:
        result = simulate_session(1000, 2000, 100, 10, 5.0, 1.0, HappinessLossMode.AVERAGE)

        assert result.final_happiness == pytest.approx(1950)

    def test_happiness_never_negative(self) -> None:
        result = simulate_session(1000, 20, 100, 10, 5.0)

        assert result.final_happiness == 0

    def test_gain_accumulates(self) -> None:
        result = simulate_session(1000, 2000, 100, 10, 5.0)

        assert result.final_stat == pytest.approx(1000 + result.total_gain)
        # Falling happiness outweighs the growing stat, so later trains gain less
        assert 0 < result.total_gain < 10 * gain_per_action(1000, 2000, 10, 5.0)
        assert result.avg_gain_per_energy == pytest.approx(result.total_gain / 100)

    def test_zero_budget(self) -> None:
        result = simulate_session(1000, 2000, 0, 10, 5.0)

        assert result.actions_performed == 0
        assert result.total_gain == 0
        assert result.avg_gain_per_energy == 0.0
        assert result.final_happiness == 2000

    def test_random_mode_is_reproducible(self) -> None:
        first = simulate_session(1000, 5000, 150, 10, 5.0, 1.0, "random", rng=random.Random(42))
        second = simulate_session(1000, 5000, 150, 10, 5.0, 1.0, "random", rng=random.Random(42))

        assert first == second
        # Loss per train lies within [0.4E, 0.6E]
        assert 5000 - 15 * 6 <= first.final_happiness <= 5000 - 15 * 4

    @pytest.mark.parametrize(
        "budget, energy, field",
        [
            (100, 0, "energy_per_action"),
            (100, -5, "energy_per_action"),
            (-1, 10, "total_energy_budget"),
        ],
    )
    def test_invalid_inputs(self, budget: float, energy: float, field: str) -> None:
        with pytest.raises(ApplicationError) as exc_info:
            simulate_session(1000, 2000, budget, energy, 5.0)

        assert exc_info.value.code == ErrorCode.VALIDATION_ERROR
        assert exc_info.value.context.additional_data == {"field": field}

    def test_unknown_mode(self) -> None:
        with pytest.raises(ValueError):
            simulate_session(1000, 2000, 100, 10, 5.0, 1.0, "pessimistic")

    def test_simulate_from_input(self) -> None:
        session = GymSessionInput(
            initial_stat=1000,
            initial_happiness=2000,
            total_energy_budget=100,
            energy_per_action=10,
            gym_factor=5.0,
        )

        assert simulate(session) == simulate_session(1000, 2000, 100, 10, 5.0)


class TestGymCatalogue:
    def test_ids_map_to_names(self) -> None:
        assert GYM_ID_TO_NAME[1] == "Premier Fitness"
        assert gym_by_id(20).name == "Cha Cha's"
        assert gym_by_id(32) is not None
        assert gym_by_id(33) is None

    def test_lookup_by_name_is_case_insensitive(self) -> None:
        assert gym_by_name("george's") is GYM_DATA["George's"]
        assert gym_by_name("Nowhere") is None

    def test_factor_for(self) -> None:
        gym = GYM_DATA["Beach Bods"]

        assert gym.factor_for("defense") == 3.2
        assert gym.factor_for("dexterity") == 0
        with pytest.raises(ApplicationError):
            gym.factor_for("luck")

    def test_best_factor(self) -> None:
        assert GYM_DATA["Gym 3000"].best_factor == ("strength", 8.0)
        assert GYM_DATA["Global Gym"].best_factor == ("strength", 4.0)
