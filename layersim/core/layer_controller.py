"""Layer Controller.

Owns layer advancement and the reward economy between layers:
- Passive attribute offers after every layer
- Boss reward offers when a boss died on the cleared layer (resolved first)
- Shop restock on every 3rd cleared layer
- Applying the player's choices

All mutation of a run goes through this class or the engine it drives.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from layersim.combat.combat_engine import (
    CombatEngine,
    CombatEventType,
    EngineConfig,
    TickResult,
)
from layersim.core.constants import BOSS_REWARD_OFFER_COUNT, is_shop_layer
from layersim.core.effects import apply_effect, apply_reward
from layersim.core.game_state import GamePhase, GameState
from layersim.core.passives import PASSIVES_BY_ID, offer_passives
from layersim.core.rewards import (
    PlayerStats,
    RewardContext,
    RewardGenerator,
    RewardPools,
)
from layersim.core.seeded_random import SeededRandom
from layersim.core.session import SessionRecord, SessionSink, submit_session

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LayerClearedEvent:
    layer: int
    is_shop_layer: bool
    is_boss_layer: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "layer": self.layer,
            "is_shop_layer": self.is_shop_layer,
            "is_boss_layer": self.is_boss_layer,
        }


class LayerController:
    """
    Drives a run: ticks the engine and handles everything between layers.

    Usage:
        controller = LayerController()
        controller.start_new_game("season1")
        controller.select_passive(controller.state.available_passives[0].id)
        controller.confirm_passive_selection()
        controller.tick(16.7, {"up"})
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        sink: Optional[SessionSink] = None,
        pools: Optional[RewardPools] = None,
        boss_selection_overrides: Optional[dict[int, int]] = None,
    ):
        """
        Initialize the controller.

        Args:
            config: Engine parameters (viewport, speeds, ...).
            sink: Where finished runs are submitted. When None, the record
                is kept for the caller to collect with take_finished_record().
            pools: Reward pools override (defaults to the packaged catalog).
            boss_selection_overrides: Per-layer boss candidate counts.
        """
        self.config = config or EngineConfig()
        self.sink = sink
        self.pools = pools
        self.boss_selection_overrides = boss_selection_overrides
        self.state = GameState()
        self.rng = SeededRandom(self.state.seed)
        self.engine = CombatEngine(self.state, self.rng, self.config)
        self.generator = RewardGenerator(self.rng, pools)
        self.last_layer_event: Optional[LayerClearedEvent] = None
        self._handled_layers: set[int] = set()
        self._finished_record: Optional[SessionRecord] = None

    # ------------------------------------------------------------------
    # Run lifecycle
    # ------------------------------------------------------------------

    def start_new_game(self, seed: str) -> GameState:
        """Reset everything and offer the first passive choice."""
        self.state = GameState(seed=seed)
        self.rng = SeededRandom(seed)
        self.engine = CombatEngine(self.state, self.rng, self.config)
        self.generator = RewardGenerator(self.rng, self.pools)
        self.last_layer_event = None
        self._handled_layers = set()
        self._finished_record = None
        self._offer_passives()
        logger.info("New game started with seed %r", seed)
        return self.state

    def tick(self, delta_ms: float, held: Optional[Iterable[Any]] = None) -> TickResult:
        """Advance the engine and react to its events."""
        result = self.engine.tick(delta_ms, held)
        for event in result.events:
            if event.type == CombatEventType.LAYER_CLEARED:
                self.handle_layer_cleared(event.data["layer"])
            elif event.type == CombatEventType.GAME_OVER:
                self._on_game_over()
        return result

    def set_paused(self, paused: bool) -> bool:
        """Pause or resume combat. Ignored outside the combat phase."""
        if self.state.phase != GamePhase.COMBAT:
            return False
        self.state.paused = paused
        return True

    def resize(self, width: float, height: float) -> None:
        self.engine.resize(width, height)

    def advance_layer(self) -> int:
        """Move to the next layer with full health. The only place the layer number changes."""
        next_layer = self.state.layer + 1
        player = self.state.player
        player.health = player.max_health
        self.engine.begin_layer(next_layer)
        return next_layer

    # ------------------------------------------------------------------
    # Layer transitions
    # ------------------------------------------------------------------

    def _context(self) -> RewardContext:
        return RewardContext(
            layer=self.state.layer,
            player_stats=PlayerStats.from_player(self.state.player),
            recent_offered_ids=list(self.state.recent_offered_ids),
        )

    def handle_layer_cleared(self, layer: int) -> Optional[LayerClearedEvent]:
        """
        React to a cleared layer, exactly once per layer.

        A shop layer restocks the shop right away. If a boss died on this
        layer its reward is offered first and the layer advances once it is
        confirmed; otherwise the layer advances and passives are offered.

        Returns:
            The layer-cleared event, or None if the call was ignored.
        """
        state = self.state
        if state.game_over:
            return None
        if layer in self._handled_layers or layer != state.layer:
            logger.warning("Ignoring layer-cleared for layer %d (current %d)", layer, state.layer)
            return None
        self._handled_layers.add(layer)

        event = LayerClearedEvent(
            layer=layer,
            is_shop_layer=is_shop_layer(layer),
            is_boss_layer=state.boss_defeated_layer == layer,
        )
        self.last_layer_event = event
        state.paused = True

        if event.is_shop_layer:
            result = state.shop.advance(self._context(), self.generator)
            state.remember_offers(result.ids)

        if event.is_boss_layer and self._offer_boss_rewards():
            return event

        self.advance_layer()
        self._offer_passives()
        return event

    def _offer_passives(self) -> None:
        state = self.state
        state.available_passives = offer_passives(state.seed, state.layer, state.elapsed_ms)
        state.selected_passive_id = None
        state.phase = GamePhase.PASSIVE_SELECTION
        state.paused = True

    def _offer_boss_rewards(self) -> bool:
        state = self.state
        result = self.generator.generate_boss_rewards(self._context(), self.boss_selection_overrides)
        offers = self.rng.shuffle(result.rewards)[:BOSS_REWARD_OFFER_COUNT]
        if not offers:
            logger.warning("No boss rewards available for layer %d", state.layer)
            return False
        state.available_boss_rewards = offers
        state.selected_boss_reward_id = None
        state.remember_offers([r.id for r in offers])
        state.phase = GamePhase.BOSS_REWARD_SELECTION
        state.paused = True
        return True

    def _resume_combat(self) -> None:
        self.state.phase = GamePhase.COMBAT
        self.state.paused = False

    # ------------------------------------------------------------------
    # Player choices
    # ------------------------------------------------------------------

    def select_passive(self, passive_id: str) -> bool:
        state = self.state
        if state.phase != GamePhase.PASSIVE_SELECTION:
            logger.warning("select_passive(%r) outside passive selection", passive_id)
            return False
        if passive_id not in {p.id for p in state.available_passives}:
            logger.warning("Passive %r is not on offer", passive_id)
            return False
        state.selected_passive_id = passive_id
        return True

    def confirm_passive_selection(self) -> bool:
        """Apply the selected passive. A repeated call is a no-op."""
        state = self.state
        if state.phase != GamePhase.PASSIVE_SELECTION or state.selected_passive_id is None:
            logger.warning("No passive selection to confirm")
            return False

        passive = PASSIVES_BY_ID[state.selected_passive_id]
        apply_effect(state.player, passive.effect_key, passive.value)
        state.player.acquired_rewards.append(passive.id)
        logger.info("Passive %s applied on layer %d", passive.id, state.layer)

        state.available_passives = []
        state.selected_passive_id = None
        self._resume_combat()
        return True

    def select_boss_reward(self, reward_id: str) -> bool:
        state = self.state
        if state.phase != GamePhase.BOSS_REWARD_SELECTION:
            logger.warning("select_boss_reward(%r) outside boss selection", reward_id)
            return False
        if reward_id not in {r.id for r in state.available_boss_rewards}:
            logger.warning("Boss reward %r is not on offer", reward_id)
            return False
        state.selected_boss_reward_id = reward_id
        return True

    def confirm_boss_reward_selection(self) -> bool:
        """Apply the selected boss reward, then advance and offer passives."""
        state = self.state
        if state.phase != GamePhase.BOSS_REWARD_SELECTION or state.selected_boss_reward_id is None:
            logger.warning("No boss reward selection to confirm")
            return False

        reward = next(r for r in state.available_boss_rewards if r.id == state.selected_boss_reward_id)
        apply_reward(state.player, reward.option, reward.scaled_value)
        logger.info("Boss reward %s applied on layer %d", reward.id, state.layer)

        state.available_boss_rewards = []
        state.selected_boss_reward_id = None
        self.advance_layer()
        self._offer_passives()
        return True

    def buy_shop_item(self, slot_index: int) -> bool:
        state = self.state
        if state.game_over:
            return False
        slot = state.shop.purchase(slot_index)
        if slot is None:
            logger.warning("Nothing to buy in shop slot %r", slot_index)
            return False
        apply_reward(state.player, slot.reward.option, slot.reward.scaled_value)
        logger.info("Bought %s from shop slot %d", slot.id, slot_index)
        return True

    def toggle_shop_item_lock(self, slot_index: int) -> bool:
        if self.state.game_over:
            return False
        locked = self.state.shop.toggle_lock(slot_index)
        if locked is None:
            logger.warning("Cannot toggle lock on shop slot %r", slot_index)
            return False
        return True

    def refresh_all_shop_items(self) -> bool:
        state = self.state
        if state.game_over:
            return False
        result = state.shop.refresh_all(self._context(), self.generator)
        state.remember_offers(result.ids)
        return True

    # ------------------------------------------------------------------
    # Game over
    # ------------------------------------------------------------------

    def _on_game_over(self) -> None:
        state = self.state
        state.phase = GamePhase.GAME_OVER
        record = SessionRecord(
            layer=state.layer,
            score=state.score,
            play_time=state.elapsed_seconds,
            build=tuple(state.build),
            seed=state.seed,
        )
        if self.sink is not None:
            submit_session(self.sink, record)
        else:
            self._finished_record = record

    def take_finished_record(self) -> Optional[SessionRecord]:
        """Collect the record of a finished run (once)."""
        record, self._finished_record = self._finished_record, None
        return record
