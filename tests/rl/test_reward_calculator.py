"""Tests for the survival Reward Calculator."""

import pytest

from layersim.core.game_state import GameState
from layersim.rl.env.reward_calculator import RewardCalculator, RewardConfig


class TestRewardCalculator:
    """Test RewardCalculator."""

    @pytest.fixture
    def state(self):
        return GameState()

    @pytest.fixture
    def calculator(self, state):
        calc = RewardCalculator()
        calc.reset(state)
        return calc

    def test_idle_step(self, calculator, state):
        """Test reward for a quiet step."""
        assert calculator.calculate(state) == pytest.approx(0.01)

    def test_score_reward(self, calculator, state):
        """Test score delta reward."""
        state.score += 100
        calculator.calculate(state)
        assert calculator.get_reward_breakdown()["score"] == pytest.approx(1.0)

    def test_damage_penalty(self, calculator, state):
        """Test health loss penalty."""
        state.player.health -= 10
        calculator.calculate(state)
        assert calculator.get_reward_breakdown()["damage"] == pytest.approx(-0.2)

    def test_layer_reward(self, calculator, state):
        """Test layer advance reward."""
        state.layer = 2
        calculator.calculate(state)
        assert calculator.get_reward_breakdown()["layer"] == 5.0

    def test_death(self, calculator, state):
        """Test death penalty replaces survival reward."""
        state.game_over = True
        calculator.calculate(state)
        breakdown = calculator.get_reward_breakdown()
        assert breakdown["death"] == -10.0
        assert breakdown["survival"] == 0.0

    def test_deltas_not_repeated(self, calculator, state):
        """Test that a change is rewarded only once."""
        state.score += 50
        calculator.calculate(state)
        assert calculator.calculate(state) == pytest.approx(0.01)

    def test_custom_config(self, state):
        """Test custom weights."""
        calc = RewardCalculator(RewardConfig(survival_reward=0.0, layer_reward=1.0))
        calc.reset(state)
        state.layer = 3
        assert calc.calculate(state) == pytest.approx(2.0)
