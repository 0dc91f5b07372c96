"""
Reward Calculator for the survival environment.

Dense rewards from score, damage taken and layer progress.
"""

from dataclasses import dataclass
from typing import Dict, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from layersim.core.game_state import GameState


@dataclass
class RewardConfig:
    """Reward configuration."""

    score_scale: float = 0.01        # Per score point
    damage_penalty: float = -0.02    # Per health point lost
    layer_reward: float = 5.0        # Per layer advanced
    survival_reward: float = 0.01    # Per step alive
    death_penalty: float = -10.0


class RewardCalculator:
    """Tracks the previous snapshot and rewards the difference."""

    def __init__(self, config: Optional[RewardConfig] = None):
        self.config = config or RewardConfig()
        self.reset()

    def reset(self, state: Optional["GameState"] = None):
        self._prev_score = state.score if state else 0
        self._prev_health = state.player.health if state else 0.0
        self._prev_layer = state.layer if state else 1
        self._last_breakdown: Dict[str, float] = {}

    def calculate(self, state: "GameState") -> float:
        c = self.config
        health_lost = max(0.0, self._prev_health - state.player.health)

        breakdown = {
            "score": (state.score - self._prev_score) * c.score_scale,
            "damage": health_lost * c.damage_penalty,
            "layer": (state.layer - self._prev_layer) * c.layer_reward,
            "survival": 0.0 if state.game_over else c.survival_reward,
            "death": c.death_penalty if state.game_over else 0.0,
        }

        self._prev_score = state.score
        self._prev_health = state.player.health
        self._prev_layer = state.layer
        self._last_breakdown = breakdown
        return sum(breakdown.values())

    def get_reward_breakdown(self) -> Dict[str, float]:
        """Components of the last calculated reward."""
        return dict(self._last_breakdown)
