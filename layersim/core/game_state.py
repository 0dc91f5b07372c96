"""Game State for a survival run.

The single aggregate mutated by the combat engine and the layer controller.
"""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Optional

from layersim.combat.entities import Enemy, Player, Projectile
from layersim.core.constants import LAYER_DURATION
from layersim.core.passives import PassiveAttribute
from layersim.core.rewards import GeneratedReward
from layersim.core.shop import Shop

# Recently offered ids remembered to avoid repeats
RECENT_OFFER_MEMORY = 12


class GamePhase(StrEnum):
    """What the run is waiting on."""
    COMBAT = "combat"
    PASSIVE_SELECTION = "passive_selection"
    BOSS_REWARD_SELECTION = "boss_reward_selection"
    GAME_OVER = "game_over"


@dataclass
class GameState:
    """
    Complete state of one run.

    Attributes:
        layer: Current layer (1-based).
        time_remaining: Seconds left in the current layer.
        seed: Season seed shared by all seeded randomness in the run.
        elapsed_ms: Simulated play time.
        boss_defeated_layer: Layer on which a boss was last killed.
        layer_cleared: Set once the current layer's timer has run out.
    """
    seed: str = "default"
    layer: int = 1
    time_remaining: float = LAYER_DURATION
    player: Player = field(default_factory=Player)
    enemies: list[Enemy] = field(default_factory=list)
    projectiles: list[Projectile] = field(default_factory=list)
    paused: bool = False
    game_over: bool = False
    score: int = 0
    kills: int = 0
    elapsed_ms: float = 0.0
    boss_defeated_layer: Optional[int] = None
    layer_cleared: bool = False
    phase: GamePhase = GamePhase.COMBAT

    # Offers
    shop: Shop = field(default_factory=Shop)
    available_passives: list[PassiveAttribute] = field(default_factory=list)
    available_boss_rewards: list[GeneratedReward] = field(default_factory=list)
    selected_passive_id: Optional[str] = None
    selected_boss_reward_id: Optional[str] = None
    recent_offered_ids: list[str] = field(default_factory=list)

    @property
    def elapsed_seconds(self) -> float:
        return self.elapsed_ms / 1000

    @property
    def build(self) -> list[str]:
        """Ordered ids of every reward and passive acquired."""
        return list(self.player.acquired_rewards)

    def remember_offers(self, ids: list[str]) -> None:
        self.recent_offered_ids.extend(ids)
        del self.recent_offered_ids[:-RECENT_OFFER_MEMORY]

    def snapshot(self) -> dict[str, Any]:
        """Plain-data view for rendering and serialization."""
        return {
            "seed": self.seed,
            "layer": self.layer,
            "time_remaining": self.time_remaining,
            "phase": self.phase.value,
            "paused": self.paused,
            "game_over": self.game_over,
            "score": self.score,
            "kills": self.kills,
            "elapsed_ms": self.elapsed_ms,
            "boss_defeated_layer": self.boss_defeated_layer,
            "player": self.player.to_dict(),
            "enemies": [e.to_dict() for e in self.enemies],
            "projectiles": [p.to_dict() for p in self.projectiles],
            "available_passives": [p.to_dict() for p in self.available_passives],
            "available_boss_rewards": [r.to_dict() for r in self.available_boss_rewards],
            "available_shop_items": self.shop.to_list(),
            "selected_passive_id": self.selected_passive_id,
            "selected_boss_reward_id": self.selected_boss_reward_id,
            "build": self.build,
        }
