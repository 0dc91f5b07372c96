"""
State Encoder for the survival environment.

Converts GameState into a fixed-size numpy observation.
"""

import numpy as np
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

from layersim.combat.geometry import distance
from layersim.combat.spawner import get_population_cap
from layersim.core.constants import LAYER_DURATION

if TYPE_CHECKING:
    from layersim.core.game_state import GameState


@dataclass
class EncoderConfig:
    """State encoder configuration."""

    # Nearest enemies encoded individually
    max_enemies: int = 8

    # Normalization
    max_layer: int = 50
    max_level: int = 50
    max_projectiles: int = 100


class StateEncoder:
    """
    Encodes a run into a flat float32 vector.

    Layout:
        player (6): x, y, health ratio, energy ratio, level, combo multiplier
        run (4): layer, time remaining, enemy count, projectile count
        enemies (5 per slot): dx, dy, health ratio, is_elite, is_boss
    """

    PLAYER_DIM = 6
    RUN_DIM = 4
    ENEMY_DIM = 5

    def __init__(self, config: Optional[EncoderConfig] = None):
        self.config = config or EncoderConfig()
        self.state_dim = self.PLAYER_DIM + self.RUN_DIM + self.ENEMY_DIM * self.config.max_enemies

    def encode(self, state: "GameState", width: float, height: float) -> np.ndarray:
        """Encode the state; positions are normalized by the viewport."""
        c = self.config
        player = state.player
        obs = np.zeros(self.state_dim, dtype=np.float32)

        obs[0] = player.x / width
        obs[1] = player.y / height
        obs[2] = player.health_ratio
        obs[3] = player.energy / player.max_energy if player.max_energy > 0 else 0.0
        obs[4] = min(player.level / c.max_level, 1.0)
        obs[5] = player.combo_multiplier

        offset = self.PLAYER_DIM
        obs[offset] = min(state.layer / c.max_layer, 1.0)
        obs[offset + 1] = state.time_remaining / LAYER_DURATION
        obs[offset + 2] = min(len(state.enemies) / get_population_cap(state.layer), 1.0)
        obs[offset + 3] = min(len(state.projectiles) / c.max_projectiles, 1.0)

        offset += self.RUN_DIM
        nearest = sorted(
            (e for e in state.enemies if e.is_alive),
            key=lambda e: distance(player.x, player.y, e.x, e.y),
        )[: c.max_enemies]
        for i, enemy in enumerate(nearest):
            base = offset + i * self.ENEMY_DIM
            obs[base] = (enemy.x - player.x) / width
            obs[base + 1] = (enemy.y - player.y) / height
            obs[base + 2] = enemy.health_ratio
            obs[base + 3] = float(enemy.is_elite)
            obs[base + 4] = float(enemy.is_boss)

        return obs
