"""
Game session service.
"""

import logging
import uuid
from typing import Dict, List, Optional

from layersim.combat.combat_engine import EngineConfig
from layersim.core.layer_controller import LayerController
from layersim.core.session import InMemorySessionSink, SessionRecord, submit_session

from ..config import Settings
from ..schemas.game import (
    CombatEventSchema,
    GameStateSchema,
    SessionRecordSchema,
    SessionRecordsResponse,
    TickRequest,
    TickResponse,
)
from ..schemas.rewards import GeneratedRewardSchema, OffersResponse, PassiveSchema
from ..schemas.shop import ShopSlotSchema, ShopStateSchema

logger = logging.getLogger(__name__)


class GameService:
    """Owns live game sessions, one LayerController per game."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or Settings()
        self._games: Dict[str, LayerController] = {}
        self.sink = InMemorySessionSink(max_records=self.settings.MAX_RECORDS)

    # === Sessions ===

    def get_controller(self, game_id: str) -> LayerController:
        """Get a game's controller. Raises KeyError for unknown ids."""
        controller = self._games.get(game_id)
        if controller is None:
            raise KeyError(game_id)
        return controller

    def create_game(
        self,
        seed: Optional[str] = None,
        width: Optional[float] = None,
        height: Optional[float] = None,
    ) -> GameStateSchema:
        """Create a new game."""
        while len(self._games) >= self.settings.MAX_SESSIONS:
            evicted = next(iter(self._games))
            del self._games[evicted]
            logger.info("Evicted game %s (session limit %d)", evicted, self.settings.MAX_SESSIONS)

        config = EngineConfig(
            width=width or self.settings.VIEWPORT_WIDTH,
            height=height or self.settings.VIEWPORT_HEIGHT,
        )
        controller = LayerController(config=config)
        controller.start_new_game(seed or self.settings.DEFAULT_SEED)

        game_id = str(uuid.uuid4())
        self._games[game_id] = controller
        return self.get_state(game_id)

    def get_state(self, game_id: str) -> GameStateSchema:
        """Get game state."""
        snapshot = self.get_controller(game_id).state.snapshot()
        return GameStateSchema(game_id=game_id, **snapshot)

    def delete_game(self, game_id: str) -> None:
        self._games.pop(game_id, None)

    def restart(self, game_id: str, seed: Optional[str] = None) -> GameStateSchema:
        """Start a fresh run in an existing game slot."""
        controller = self.get_controller(game_id)
        controller.start_new_game(seed or controller.state.seed)
        return self.get_state(game_id)

    # === Simulation ===

    def tick(self, game_id: str, request: TickRequest) -> TickResponse:
        """Advance a game by up to MAX_TICK_STEPS frames, stopping at game over."""
        controller = self.get_controller(game_id)
        steps = min(request.steps, self.settings.MAX_TICK_STEPS)

        events: List[CombatEventSchema] = []
        taken = 0
        for _ in range(steps):
            result = controller.tick(request.delta_ms, request.held)
            taken += 1
            events.extend(CombatEventSchema(type=e.type.value, data=e.data) for e in result.events)
            if controller.state.game_over:
                break

        return TickResponse(steps=taken, events=events, state=self.get_state(game_id))

    def set_paused(self, game_id: str, paused: bool) -> bool:
        return self.get_controller(game_id).set_paused(paused)

    def resize(self, game_id: str, width: float, height: float) -> GameStateSchema:
        self.get_controller(game_id).resize(width, height)
        return self.get_state(game_id)

    # === Rewards ===

    def get_offers(self, game_id: str) -> OffersResponse:
        """Get pending passive and boss reward offers."""
        state = self.get_controller(game_id).state
        return OffersResponse(
            game_id=game_id,
            phase=state.phase.value,
            passives=[PassiveSchema(**p.to_dict()) for p in state.available_passives],
            boss_rewards=[GeneratedRewardSchema(**r.to_dict()) for r in state.available_boss_rewards],
            selected_passive_id=state.selected_passive_id,
            selected_boss_reward_id=state.selected_boss_reward_id,
        )

    def select_passive(self, game_id: str, passive_id: str) -> bool:
        return self.get_controller(game_id).select_passive(passive_id)

    def confirm_passive(self, game_id: str) -> bool:
        return self.get_controller(game_id).confirm_passive_selection()

    def select_boss_reward(self, game_id: str, reward_id: str) -> bool:
        return self.get_controller(game_id).select_boss_reward(reward_id)

    def confirm_boss_reward(self, game_id: str) -> bool:
        return self.get_controller(game_id).confirm_boss_reward_selection()

    # === Shop ===

    def get_shop(self, game_id: str) -> ShopStateSchema:
        """Get shop state."""
        shop = self.get_controller(game_id).state.shop
        slots = []
        for index, slot in enumerate(shop.slots):
            if slot is None:
                slots.append(ShopSlotSchema(index=index))
            else:
                slots.append(
                    ShopSlotSchema(
                        index=index,
                        reward=GeneratedRewardSchema(**slot.reward.to_dict()),
                        locked=slot.locked,
                    )
                )
        return ShopStateSchema(game_id=game_id, slots=slots)

    def buy_shop_item(self, game_id: str, slot_index: int) -> bool:
        return self.get_controller(game_id).buy_shop_item(slot_index)

    def toggle_shop_lock(self, game_id: str, slot_index: int) -> bool:
        return self.get_controller(game_id).toggle_shop_item_lock(slot_index)

    def refresh_shop(self, game_id: str) -> bool:
        return self.get_controller(game_id).refresh_all_shop_items()

    # === Session records ===

    def take_finished_record(self, game_id: str) -> Optional[SessionRecord]:
        """Collect a finished run's record, if the game just ended."""
        controller = self._games.get(game_id)
        return controller.take_finished_record() if controller else None

    def submit_record(self, record: SessionRecord) -> bool:
        return submit_session(self.sink, record)

    def get_records(self, limit: int = 10) -> SessionRecordsResponse:
        """Best submitted records."""
        records = self.sink.top(limit)
        return SessionRecordsResponse(
            records=[SessionRecordSchema(**r.to_dict()) for r in records],
            total=len(self.sink.records),
        )
