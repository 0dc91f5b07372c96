"""Tests for layer advancement and the reward economy."""

import pytest

from layersim.combat.entities import Enemy
from layersim.core.game_state import GamePhase
from layersim.core.layer_controller import LayerController
from layersim.core.passives import PASSIVES_BY_ID
from layersim.core.session import InMemorySessionSink
from layersim.data.models import RewardCategory


@pytest.fixture
def controller():
    ctrl = LayerController()
    ctrl.start_new_game("controller-test")
    return ctrl


def pick_first_passive(ctrl: LayerController) -> str:
    passive_id = ctrl.state.available_passives[0].id
    assert ctrl.select_passive(passive_id)
    assert ctrl.confirm_passive_selection()
    return passive_id


def jump_to_layer(ctrl: LayerController, layer: int) -> None:
    ctrl.engine.begin_layer(layer)


def kill_player(ctrl: LayerController) -> None:
    state = ctrl.state
    state.player.health = 1
    state.enemies.append(Enemy(
        id="killer", x=state.player.x, y=state.player.y,
        damage=1000, health=1000, max_health=1000,
    ))
    ctrl.tick(100)


class TestNewGame:
    """Tests for run start."""

    def test_offers_passives(self, controller):
        state = controller.state
        assert state.phase == GamePhase.PASSIVE_SELECTION
        assert state.paused
        assert len(state.available_passives) == 3
        assert len({p.id for p in state.available_passives}) == 3

    def test_passive_offer_deterministic(self):
        a, b = LayerController(), LayerController()
        a.start_new_game("same")
        b.start_new_game("same")
        assert [p.id for p in a.state.available_passives] == [p.id for p in b.state.available_passives]

    def test_restart_resets(self, controller):
        pick_first_passive(controller)
        controller.state.score = 500
        controller.start_new_game("again")
        assert controller.state.score == 0
        assert controller.state.seed == "again"
        assert controller.state.build == []

    def test_paused_until_choice(self, controller):
        result = controller.tick(16.7)
        assert result.skipped


class TestPassiveSelection:
    """Tests for picking passives."""

    def test_unknown_passive_rejected(self, controller):
        offered = {p.id for p in controller.state.available_passives}
        missing = next(pid for pid in PASSIVES_BY_ID if pid not in offered)
        assert not controller.select_passive(missing)

    def test_confirm_without_selection(self, controller):
        assert not controller.confirm_passive_selection()

    def test_confirm_applies_once(self, controller):
        passive_id = pick_first_passive(controller)
        state = controller.state
        assert state.phase == GamePhase.COMBAT
        assert not state.paused
        assert state.build == [passive_id]
        assert not controller.confirm_passive_selection()
        assert state.build == [passive_id]

    def test_max_health_passive(self):
        ctrl = LayerController()
        for n in range(50):
            ctrl.start_new_game(f"vital-{n}")
            if "max_health" in {p.id for p in ctrl.state.available_passives}:
                break
        else:
            pytest.fail("max_health passive never offered")
        ctrl.select_passive("max_health")
        ctrl.confirm_passive_selection()
        assert ctrl.state.player.max_health == 150


class TestLayerCleared:
    """Tests for layer transitions."""

    def test_advances_and_offers_passives(self, controller):
        pick_first_passive(controller)
        event = controller.handle_layer_cleared(1)
        assert event.layer == 1
        assert controller.state.layer == 2
        assert controller.state.phase == GamePhase.PASSIVE_SELECTION

    def test_handled_once(self, controller):
        pick_first_passive(controller)
        controller.handle_layer_cleared(1)
        assert controller.handle_layer_cleared(1) is None
        assert controller.state.layer == 2

    def test_stale_layer_ignored(self, controller):
        pick_first_passive(controller)
        assert controller.handle_layer_cleared(4) is None
        assert controller.state.layer == 1

    def test_timer_drives_transition(self, controller):
        pick_first_passive(controller)
        controller.state.time_remaining = 0.01
        controller.tick(16)
        assert controller.state.layer == 2
        assert controller.last_layer_event.layer == 1
        assert controller.state.time_remaining == 30.0

    def test_health_refilled_on_advance(self, controller):
        pick_first_passive(controller)
        player = controller.state.player
        player.health = 10
        controller.handle_layer_cleared(1)
        assert controller.state.layer == 2
        assert player.health == player.max_health

    def test_health_refilled_after_boss_reward(self, controller):
        pick_first_passive(controller)
        jump_to_layer(controller, 5)
        controller.state.boss_defeated_layer = 5
        player = controller.state.player
        player.health = 10

        controller.handle_layer_cleared(5)
        assert player.health == 10

        controller.select_boss_reward(controller.state.available_boss_rewards[0].id)
        controller.confirm_boss_reward_selection()
        assert controller.state.layer == 6
        assert player.health == player.max_health

    def test_shop_layer_restocks(self, controller):
        pick_first_passive(controller)
        jump_to_layer(controller, 3)
        event = controller.handle_layer_cleared(3)
        assert event.is_shop_layer
        offered = controller.state.shop.offered_ids
        assert len(offered) == 4
        assert set(offered) <= set(controller.state.recent_offered_ids)

    def test_boss_rewards_before_passives(self, controller):
        pick_first_passive(controller)
        jump_to_layer(controller, 5)
        controller.state.boss_defeated_layer = 5

        event = controller.handle_layer_cleared(5)

        state = controller.state
        assert event.is_boss_layer
        assert state.phase == GamePhase.BOSS_REWARD_SELECTION
        assert state.layer == 5
        assert len(state.available_boss_rewards) == 3
        assert all(r.option.category == RewardCategory.LEGENDARY for r in state.available_boss_rewards)

        reward_id = state.available_boss_rewards[0].id
        assert not controller.select_passive("damage")
        assert controller.select_boss_reward(reward_id)
        assert controller.confirm_boss_reward_selection()

        assert state.layer == 6
        assert state.phase == GamePhase.PASSIVE_SELECTION
        assert reward_id in state.build
        assert not controller.confirm_boss_reward_selection()

    def test_unknown_boss_reward_rejected(self, controller):
        pick_first_passive(controller)
        jump_to_layer(controller, 5)
        controller.state.boss_defeated_layer = 5
        controller.handle_layer_cleared(5)
        assert not controller.select_boss_reward("attr_damage")

    def test_pause_only_in_combat(self, controller):
        assert not controller.set_paused(False)
        pick_first_passive(controller)
        assert controller.set_paused(True)
        assert controller.state.paused


class TestShopActions:
    """Tests for shop purchases, locks and refreshes."""

    @pytest.fixture
    def shop_controller(self, controller):
        pick_first_passive(controller)
        jump_to_layer(controller, 3)
        controller.handle_layer_cleared(3)
        return controller

    def test_buy(self, shop_controller):
        wanted = shop_controller.state.shop.slots[0].id
        assert shop_controller.buy_shop_item(0)
        assert wanted in shop_controller.state.build
        assert shop_controller.state.shop.slots[0] is None
        assert not shop_controller.buy_shop_item(0)

    def test_invalid_slot(self, shop_controller):
        assert not shop_controller.buy_shop_item(9)
        assert not shop_controller.toggle_shop_item_lock(-1)

    def test_refresh_keeps_locked(self, shop_controller):
        assert shop_controller.toggle_shop_item_lock(1)
        kept = shop_controller.state.shop.slots[1]
        assert shop_controller.refresh_all_shop_items()
        assert shop_controller.state.shop.slots[1] == kept

    def test_lock_survives_next_shop_layer(self, shop_controller):
        assert shop_controller.toggle_shop_item_lock(2)
        kept = shop_controller.state.shop.slots[2]
        pick_first_passive(shop_controller)
        jump_to_layer(shop_controller, 6)

        event = shop_controller.handle_layer_cleared(6)

        shop = shop_controller.state.shop
        assert event.is_shop_layer
        assert shop.slots[2] == kept
        assert shop.offered_ids.count(kept.id) == 1

    def test_no_actions_after_game_over(self, shop_controller):
        shop_controller.state.game_over = True
        assert not shop_controller.buy_shop_item(0)
        assert not shop_controller.toggle_shop_item_lock(0)
        assert not shop_controller.refresh_all_shop_items()


class TestGameOver:
    """Tests for run end and session records."""

    def test_record_kept_without_sink(self, controller):
        passive_id = pick_first_passive(controller)
        kill_player(controller)

        assert controller.state.phase == GamePhase.GAME_OVER
        record = controller.take_finished_record()
        assert record.layer == 1
        assert record.seed == "controller-test"
        assert record.build == (passive_id,)
        assert record.play_time == pytest.approx(0.1)
        assert controller.take_finished_record() is None

    def test_record_submitted_to_sink(self):
        sink = InMemorySessionSink()
        ctrl = LayerController(sink=sink)
        ctrl.start_new_game("sunk")
        pick_first_passive(ctrl)
        kill_player(ctrl)

        assert len(sink.records) == 1
        assert sink.records[0].seed == "sunk"
        assert ctrl.take_finished_record() is None

    def test_ticks_skipped_after_game_over(self, controller):
        pick_first_passive(controller)
        kill_player(controller)
        assert controller.tick(16.7).skipped
