"""Tests for enemy steering behaviours."""

import pytest

from layersim.combat.ai import (
    Aggressive,
    Boss,
    Defensive,
    Elite,
    Ranged,
    SteeringContext,
    Support,
    Swarm,
    steer,
)
from layersim.combat.entities import AnimationState, Enemy


@pytest.fixture
def ctx():
    return SteeringContext(player_x=0.0, player_y=0.0, center_x=400.0, center_y=300.0)


def enemy_at(x, y, enemy_id="e1", **fields):
    return Enemy(id=enemy_id, x=x, y=y, **fields)


class TestAggressive:
    """Tests for chase with aggro hysteresis."""

    def test_chases_inside_aggro(self, ctx):
        enemy = enemy_at(100, 0)
        steering = steer(enemy, Aggressive(150, 200), ctx)
        assert enemy.engaged
        assert (steering.dx, steering.dy) == pytest.approx((-1.0, 0.0))
        assert steering.state == AnimationState.MOVING

    def test_stays_engaged_until_deaggro(self, ctx):
        enemy = enemy_at(180, 0, engaged=True)
        steer(enemy, Aggressive(150, 200), ctx)
        assert enemy.engaged

    def test_disengages_beyond_deaggro(self, ctx):
        enemy = enemy_at(400, 0, engaged=True)
        steering = steer(enemy, Aggressive(150, 200), ctx)
        assert not enemy.engaged
        assert steering.speed_multiplier == 0.5

    def test_unengaged_drifts_to_centre(self, ctx):
        enemy = enemy_at(400, 0)
        steering = steer(enemy, Aggressive(150, 200), ctx)
        assert (steering.dx, steering.dy) == pytest.approx((0.0, 1.0))


class TestOtherBehaviours:
    """Tests for the remaining behaviour variants."""

    def test_elite_faster(self, ctx):
        steering = steer(enemy_at(100, 0), Elite(), ctx)
        assert steering.speed_multiplier == 1.2

    def test_defensive_retreats(self, ctx):
        steering = steer(enemy_at(30, 0), Defensive(aggro_range=150), ctx)
        assert steering.dx == pytest.approx(1.0)

    def test_defensive_approaches(self, ctx):
        steering = steer(enemy_at(300, 0), Defensive(aggro_range=150), ctx)
        assert steering.dx == pytest.approx(-1.0)

    def test_ranged_holds_in_range(self, ctx):
        enemy = enemy_at(100, 0)
        steering = steer(enemy, Ranged(attack_range=120), ctx)
        assert (steering.dx, steering.dy) == (0.0, 0.0)
        assert steering.state == AnimationState.ATTACKING

    def test_boss_enrages(self, ctx):
        calm = steer(enemy_at(100, 0, health=80, max_health=100), Boss(), ctx)
        angry = steer(enemy_at(100, 0, health=40, max_health=100), Boss(), ctx)
        assert calm.speed_multiplier == 1.0
        assert angry.speed_multiplier == 1.5

    def test_support_follows_injured_ally(self):
        ally = enemy_at(0, 200, "ally", health=5, max_health=20)
        healer = enemy_at(0, 100, "healer")
        ctx = SteeringContext(0.0, 0.0, 400.0, 300.0, enemies=[ally, healer])
        steering = steer(healer, Support(), ctx)
        assert steering.dy == pytest.approx(1.0)

    def test_support_without_injured_chases_player(self, ctx):
        steering = steer(enemy_at(0, 100), Support(), ctx)
        assert steering.dy == pytest.approx(-1.0)

    def test_swarm_groups_up(self):
        mate = enemy_at(50, 0, "mate")
        me = enemy_at(0, 0, "me")
        ctx = SteeringContext(0.0, 500.0, 400.0, 300.0, enemies=[mate, me])
        steering = steer(me, Swarm(), ctx)
        assert steering.dx == pytest.approx(1.0)

    def test_swarm_alone_chases(self):
        me = enemy_at(0, 0, "me")
        ctx = SteeringContext(0.0, 500.0, 400.0, 300.0, enemies=[me])
        steering = steer(me, Swarm(), ctx)
        assert steering.dy == pytest.approx(1.0)

    def test_unknown_behaviour(self, ctx):
        with pytest.raises(TypeError):
            steer(enemy_at(0, 0), object(), ctx)
