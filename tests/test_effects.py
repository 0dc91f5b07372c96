"""Tests for the effect interpreter."""

import pytest

from layersim.combat.entities import Player
from layersim.core.effects import (
    STAT_HANDLERS,
    Counter,
    EffectBag,
    Flag,
    Multiplier,
    apply_effect,
    apply_reward,
)
from layersim.data.loaders import get_reward_by_id
from layersim.data.models import EffectKey, EffectKind, EFFECT_KINDS, RewardOption


@pytest.fixture
def player():
    return Player()


class TestEffectBag:
    """Tests for the typed effect bag."""

    def test_flag(self):
        """Flags are set and cleared."""
        bag = EffectBag()
        bag.set_flag(EffectKey.ON_HIT_POISON, True)
        assert bag.has(EffectKey.ON_HIT_POISON)
        assert isinstance(bag.get(EffectKey.ON_HIT_POISON), Flag)

        bag.set_flag(EffectKey.ON_HIT_POISON, False)
        assert EffectKey.ON_HIT_POISON not in bag

    def test_counter_drops_at_zero(self):
        """Counters vanish once they reach zero."""
        bag = EffectBag()
        assert bag.add_count(EffectKey.SECOND_WIND, 2) == 2
        assert bag.get(EffectKey.SECOND_WIND) == Counter(2)
        bag.add_count(EffectKey.SECOND_WIND, -5)
        assert bag.count(EffectKey.SECOND_WIND) == 0
        assert len(bag) == 0

    def test_multiplier_accumulates(self):
        """Multipliers add up."""
        bag = EffectBag()
        bag.add_value(EffectKey.ALL_DAMAGE_PCT, 0.2)
        bag.add_value(EffectKey.ALL_DAMAGE_PCT, 0.3)
        assert bag.value(EffectKey.ALL_DAMAGE_PCT) == pytest.approx(0.5)
        assert isinstance(bag.get(EffectKey.ALL_DAMAGE_PCT), Multiplier)

    def test_missing_keys_read_as_zero(self):
        """Unset keys read as absent, zero count and zero value."""
        bag = EffectBag()
        assert not bag.has(EffectKey.CC_IMMUNITY)
        assert bag.count(EffectKey.SECOND_WIND) == 0
        assert bag.value(EffectKey.EXECUTE_BONUS) == 0.0

    def test_to_dict(self):
        """Plain-data view uses key strings."""
        bag = EffectBag()
        bag.set_flag(EffectKey.CC_IMMUNITY, True)
        bag.add_count(EffectKey.SECOND_WIND, 1)
        bag.add_value(EffectKey.EXECUTE_BONUS, 0.5)
        assert bag.to_dict() == {
            "cc_immunity": True,
            "second_wind": 1,
            "execute_bonus": 0.5,
        }


class TestStatHandlers:
    """Tests for stat effect application."""

    def test_every_stat_key_has_handler(self):
        """The handler table covers exactly the stat keys."""
        stat_keys = {k for k, kind in EFFECT_KINDS.items() if kind == EffectKind.STAT}
        assert set(STAT_HANDLERS) == stat_keys

    def test_damage_pct(self, player):
        """Percentage keys multiply."""
        apply_effect(player, EffectKey.DAMAGE_PCT, 0.5)
        assert player.damage == pytest.approx(15.0)

    def test_damage_pct_reversed(self, player):
        """A reversed percentage shrinks the stat."""
        apply_effect(player, EffectKey.DAMAGE_PCT, 0.5, sign=-1)
        assert player.damage == pytest.approx(5.0)

    def test_percentage_floor(self, player):
        """A reversed percentage above 100% never zeroes the stat."""
        apply_effect(player, EffectKey.ATTACK_SPEED_PCT, 2.0, sign=-1)
        assert player.attack_speed == pytest.approx(0.05)

    def test_projectiles_add_rounds(self, player):
        """Count keys round to whole numbers."""
        apply_effect(player, EffectKey.PROJECTILES_ADD, 1.6)
        assert player.projectile_count == 3

    def test_projectiles_floor(self, player):
        """Projectile count never drops below one."""
        apply_effect(player, EffectKey.PROJECTILES_ADD, 3, sign=-1)
        assert player.projectile_count == 1

    def test_pierce_floor(self, player):
        """Pierce never drops below zero."""
        apply_effect(player, EffectKey.PIERCE_ADD, 2, sign=-1)
        assert player.pierce == 0

    def test_max_health_pct_scales_current(self, player):
        """Max health percentage scales current health too."""
        player.health = 50
        apply_effect(player, EffectKey.MAX_HEALTH_PCT, 0.5)
        assert player.max_health == pytest.approx(150)
        assert player.health == pytest.approx(75)

    def test_max_health_add_heals(self, player):
        """Flat max health also adds current health."""
        player.health = 60
        apply_effect(player, EffectKey.MAX_HEALTH_ADD, 50)
        assert player.max_health == 150
        assert player.health == 110

    def test_max_health_reduction_clamps_health(self, player):
        """Losing max health clamps current health."""
        apply_effect(player, EffectKey.MAX_HEALTH_ADD, 40, sign=-1)
        assert player.max_health == 60
        assert player.health == 60

    def test_crit_chance_clamped(self, player):
        """Chance stats stay in [0, 1]."""
        apply_effect(player, EffectKey.CRIT_CHANCE_ADD, 2.0)
        assert player.crit_chance == 1.0

    def test_pierce_plus_damage(self, player):
        """Composite key adds a pierce and scales damage."""
        apply_effect(player, EffectKey.PIERCE_PLUS_DAMAGE, 0.2)
        assert player.pierce == 1
        assert player.damage == pytest.approx(12.0)

    def test_all_stats_pct(self, player):
        """All-stats key scales damage, attack speed, move speed and health."""
        apply_effect(player, EffectKey.ALL_STATS_PCT, 0.1)
        assert player.damage == pytest.approx(11.0)
        assert player.attack_speed == pytest.approx(1.1)
        assert player.move_speed == pytest.approx(1.1)
        assert player.max_health == pytest.approx(110)

    def test_stat_without_value_ignored(self, player):
        """A stat effect without a value leaves the player untouched."""
        apply_effect(player, EffectKey.DAMAGE_PCT, None)
        assert player.damage == 10.0


class TestBagEffects:
    """Tests for flag, counter and multiplier application."""

    def test_flag_applied(self, player):
        apply_effect(player, EffectKey.ON_HIT_BURN, None)
        assert player.effects.has(EffectKey.ON_HIT_BURN)

    def test_counter_defaults_to_one(self, player):
        """Counter keys without a value add one."""
        apply_effect(player, EffectKey.SECOND_WIND, None)
        apply_effect(player, EffectKey.SECOND_WIND, None)
        assert player.effects.count(EffectKey.SECOND_WIND) == 2

    def test_multiplier_applied(self, player):
        apply_effect(player, EffectKey.ELITE_DAMAGE_PCT, 0.25)
        assert player.effects.value(EffectKey.ELITE_DAMAGE_PCT) == pytest.approx(0.25)

    def test_string_key_accepted(self, player):
        """Keys may be passed as their string value."""
        apply_effect(player, "damage_pct", 0.1)
        assert player.damage == pytest.approx(11.0)

    def test_unknown_key_rejected(self, player):
        """Unknown keys are rejected."""
        with pytest.raises(ValueError):
            apply_effect(player, "not_a_key", 1.0)


class TestApplyReward:
    """Tests for applying catalog rewards."""

    def test_records_build(self, player):
        """Applied rewards are appended to the build in order."""
        first = get_reward_by_id("attr_damage")
        second = get_reward_by_id("sp_poison")
        apply_reward(player, first, 0.15)
        apply_reward(player, second, None)
        assert player.acquired_rewards == ["attr_damage", "sp_poison"]
        assert player.effects.has(EffectKey.ON_HIT_POISON)

    def test_debuff_applied_with_reversed_sign(self, player):
        """A bundled debuff reduces its stat."""
        option = RewardOption.model_validate({
            "id": "test_glass",
            "name": "Glass",
            "category": "legendary",
            "color": "gold",
            "effect_key": "damage_pct",
            "base_value": 1.0,
            "debuff": {"effect_key": "max_health_pct", "value": 0.5},
        })
        apply_reward(player, option, 1.0)
        assert player.damage == pytest.approx(20.0)
        assert player.max_health == pytest.approx(50.0)
        assert player.health == pytest.approx(50.0)
