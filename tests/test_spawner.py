"""Tests for the enemy spawner."""

import pytest

from layersim.combat.ai import Aggressive, Boss, Support
from layersim.combat.entities import EnemyArchetype
from layersim.combat.spawner import (
    SPAWN_EDGE_OFFSET,
    EnemySpawner,
    create_enemy,
    get_elite_chance,
    get_population_cap,
    get_spawn_base_interval,
    get_unlocked_specialists,
)
from layersim.core.seeded_random import SeededRandom


def make_spawner(seed: str = "spawn-test", layer: int = 1) -> EnemySpawner:
    counter = iter(range(1, 10_000))
    spawner = EnemySpawner(SeededRandom(seed), lambda: f"e{next(counter)}")
    spawner.reset_for_layer(layer)
    return spawner


class TestSchedule:
    """Tests for the layer-scaled spawn schedule."""

    @pytest.mark.parametrize("layer, expected", [(1, 1000), (5, 800), (11, 500), (40, 500)])
    def test_base_interval(self, layer, expected):
        assert get_spawn_base_interval(layer) == expected

    def test_population_cap(self):
        assert get_population_cap(1) == 50
        assert get_population_cap(3) == 60
        assert get_population_cap(50) == 100

    def test_elite_chance_capped(self):
        assert get_elite_chance(1) == pytest.approx(0.05)
        assert get_elite_chance(100) == 0.3

    def test_specialists_unlock(self):
        assert get_unlocked_specialists(1) == []
        assert get_unlocked_specialists(3) == [EnemyArchetype.SWARM, EnemyArchetype.RANGED]
        assert len(get_unlocked_specialists(8)) == 5

    def test_interval_range(self):
        spawner = make_spawner()
        for _ in range(50):
            spawner.reset_for_layer(1)
            assert 1000 <= spawner.interval < 2000


class TestUpdate:
    """Tests for timer-driven spawning."""

    def test_no_spawn_before_interval(self):
        spawner = make_spawner()
        assert spawner.update(999, [], 800, 600) is None

    def test_spawn_after_interval(self):
        spawner = make_spawner()
        enemy = spawner.update(2000, [], 800, 600)
        assert enemy is not None
        assert enemy.id == "e1"
        assert spawner.timer == 0.0
        assert spawner.spawned_this_layer == 1

    def test_population_cap_blocks_spawn(self):
        spawner = make_spawner()
        crowd = [create_enemy(f"x{i}", EnemyArchetype.NORMAL, 1, 0, 0) for i in range(50)]
        assert spawner.update(2000, crowd, 800, 600) is None

    def test_spawns_outside_viewport(self):
        spawner = make_spawner()
        for _ in range(40):
            x, y = spawner.pick_position(800, 600)
            outside = x <= -SPAWN_EDGE_OFFSET or x >= 800 + SPAWN_EDGE_OFFSET \
                or y <= -SPAWN_EDGE_OFFSET or y >= 600 + SPAWN_EDGE_OFFSET
            assert outside

    def test_boss_first_on_boss_layer(self):
        spawner = make_spawner(layer=5)
        first = spawner.update(2000, [], 800, 600)
        assert first.archetype == EnemyArchetype.BOSS
        assert spawner.boss_spawned
        second = spawner.spawn(800, 600)
        assert second.archetype != EnemyArchetype.BOSS

    def test_deterministic(self):
        a = make_spawner("same", layer=9)
        b = make_spawner("same", layer=9)
        for _ in range(20):
            ea, eb = a.spawn(800, 600), b.spawn(800, 600)
            assert (ea.archetype, ea.x, ea.y) == (eb.archetype, eb.x, eb.y)


class TestCreateEnemy:
    """Tests for the enemy factory."""

    def test_stats_scale_with_layer(self):
        low = create_enemy("a", EnemyArchetype.NORMAL, 1, 0, 0)
        high = create_enemy("b", EnemyArchetype.NORMAL, 10, 0, 0)
        assert low.health == 25
        assert low.max_health == low.health
        assert high.health > low.health
        assert high.damage > low.damage

    def test_behaviours(self):
        assert isinstance(create_enemy("a", EnemyArchetype.NORMAL, 1, 0, 0).behavior, Aggressive)
        assert isinstance(create_enemy("b", EnemyArchetype.BOSS, 5, 0, 0).behavior, Boss)
        assert isinstance(create_enemy("c", EnemyArchetype.SUPPORT, 8, 0, 0).behavior, Support)

    def test_boss_kit(self):
        boss = create_enemy("boss", EnemyArchetype.BOSS, 5, 0, 0)
        assert {a.id for a in boss.abilities} == {"slam", "roar"}
        assert {d.kind.value for d in boss.drops} == {"experience", "health", "energy"}

    def test_normal_has_no_abilities(self):
        assert create_enemy("a", EnemyArchetype.NORMAL, 1, 0, 0).abilities == []
