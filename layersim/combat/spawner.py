"""Enemy Spawner.

Creates enemies just outside the viewport on a randomized, layer-scaled
schedule. All randomness comes from the injected SeededRandom.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from layersim.combat.ai import (
    Aggressive,
    Behavior,
    Boss,
    Defensive,
    Elite,
    Ranged,
    Support,
    Swarm,
)
from layersim.combat.entities import (
    AbilityKind,
    DropEntry,
    DropKind,
    Enemy,
    EnemyAbility,
    EnemyArchetype,
)
from layersim.core.constants import is_boss_layer
from layersim.core.seeded_random import SeededRandom

logger = logging.getLogger(__name__)

# Spawn schedule
BASE_SPAWN_INTERVAL = 1000.0
MIN_SPAWN_INTERVAL = 500.0
SPAWN_INTERVAL_STEP = 50.0
BASE_POPULATION_CAP = 50
MAX_POPULATION_CAP = 100
POPULATION_CAP_STEP = 5

# Spawn offset beyond the viewport edge
SPAWN_EDGE_OFFSET = 20.0

# Archetype odds
ELITE_BASE_CHANCE = 0.05
ELITE_CHANCE_STEP = 0.02
MAX_ELITE_CHANCE = 0.3
SPECIALIST_CHANCE_STEP = 0.04
MAX_SPECIALIST_CHANCE = 0.4

# Layer at which each specialist archetype joins the spawn pool
SPECIALIST_UNLOCKS: list[tuple[int, EnemyArchetype]] = [
    (2, EnemyArchetype.SWARM),
    (3, EnemyArchetype.RANGED),
    (4, EnemyArchetype.TANK),
    (6, EnemyArchetype.ASSASSIN),
    (8, EnemyArchetype.SUPPORT),
]


def get_spawn_base_interval(layer: int) -> float:
    """Base spawn interval in ms; the actual interval is base to 2 * base."""
    return max(MIN_SPAWN_INTERVAL, BASE_SPAWN_INTERVAL - (layer - 1) * SPAWN_INTERVAL_STEP)


def get_population_cap(layer: int) -> int:
    return min(MAX_POPULATION_CAP, BASE_POPULATION_CAP + (layer - 1) * POPULATION_CAP_STEP)


def get_elite_chance(layer: int) -> float:
    return min(MAX_ELITE_CHANCE, ELITE_BASE_CHANCE + (layer - 1) * ELITE_CHANCE_STEP)


def get_specialist_chance(layer: int) -> float:
    return min(MAX_SPECIALIST_CHANCE, (layer - 1) * SPECIALIST_CHANCE_STEP)


def get_unlocked_specialists(layer: int) -> list[EnemyArchetype]:
    return [archetype for unlock, archetype in SPECIALIST_UNLOCKS if layer >= unlock]


# =============================================================================
# ENEMY FACTORY
# =============================================================================


@dataclass(frozen=True)
class ArchetypeStats:
    """Per-archetype stat formulas: value = base + per_layer * layer."""
    health: tuple[float, float]
    damage: tuple[float, float]
    move_speed: tuple[float, float]
    size: tuple[float, float]
    armor: tuple[float, float]
    experience: tuple[float, float]
    dodge_chance: float
    attack_range: float


ARCHETYPE_STATS: dict[EnemyArchetype, ArchetypeStats] = {
    EnemyArchetype.NORMAL: ArchetypeStats(
        health=(20, 5), damage=(10, 2), move_speed=(50, 10), size=(15, 1),
        armor=(0, 0), experience=(10, 2), dodge_chance=0.05, attack_range=30,
    ),
    EnemyArchetype.ELITE: ArchetypeStats(
        health=(50, 10), damage=(20, 5), move_speed=(80, 15), size=(20, 2),
        armor=(5, 1), experience=(25, 5), dodge_chance=0.1, attack_range=40,
    ),
    EnemyArchetype.BOSS: ArchetypeStats(
        health=(200, 50), damage=(50, 10), move_speed=(30, 5), size=(40, 3),
        armor=(15, 2), experience=(100, 20), dodge_chance=0.15, attack_range=60,
    ),
    EnemyArchetype.SWARM: ArchetypeStats(
        health=(10, 2), damage=(5, 1), move_speed=(80, 20), size=(8, 1),
        armor=(0, 0), experience=(5, 1), dodge_chance=0.2, attack_range=20,
    ),
    EnemyArchetype.RANGED: ArchetypeStats(
        health=(30, 8), damage=(15, 3), move_speed=(40, 8), size=(12, 1),
        armor=(2, 1), experience=(15, 3), dodge_chance=0.1, attack_range=120,
    ),
    EnemyArchetype.TANK: ArchetypeStats(
        health=(100, 20), damage=(25, 5), move_speed=(20, 3), size=(25, 2),
        armor=(20, 3), experience=(40, 8), dodge_chance=0.02, attack_range=50,
    ),
    EnemyArchetype.ASSASSIN: ArchetypeStats(
        health=(25, 5), damage=(30, 6), move_speed=(100, 25), size=(10, 1),
        armor=(1, 1), experience=(20, 4), dodge_chance=0.3, attack_range=25,
    ),
    EnemyArchetype.SUPPORT: ArchetypeStats(
        health=(40, 8), damage=(8, 2), move_speed=(60, 12), size=(15, 1),
        armor=(3, 1), experience=(30, 6), dodge_chance=0.15, attack_range=80,
    ),
}


def _scaled(formula: tuple[float, float], layer: int) -> float:
    base, per_layer = formula
    return base + per_layer * layer


def _behavior_for(archetype: EnemyArchetype, stats: ArchetypeStats) -> Behavior:
    match archetype:
        case EnemyArchetype.NORMAL:
            return Aggressive(aggro_range=150, deaggro_range=200)
        case EnemyArchetype.ELITE:
            return Elite(aggro_range=200, deaggro_range=250)
        case EnemyArchetype.BOSS:
            return Boss()
        case EnemyArchetype.SWARM:
            return Swarm()
        case EnemyArchetype.RANGED:
            return Ranged(attack_range=stats.attack_range)
        case EnemyArchetype.TANK:
            return Defensive(aggro_range=150)
        case EnemyArchetype.ASSASSIN:
            return Aggressive(aggro_range=120, deaggro_range=180)
        case EnemyArchetype.SUPPORT:
            return Support()
        case _:
            raise ValueError(f"unknown archetype: {archetype}")


def _abilities_for(archetype: EnemyArchetype, layer: int) -> list[EnemyAbility]:
    match archetype:
        case EnemyArchetype.ELITE:
            return [EnemyAbility("charge", AbilityKind.STRIKE, 3000, 100, 15 + 3 * layer)]
        case EnemyArchetype.BOSS:
            return [
                EnemyAbility("slam", AbilityKind.STRIKE, 5000, 80, 30 + 8 * layer),
                EnemyAbility("roar", AbilityKind.ROAR, 8000, 200, 0),
            ]
        case EnemyArchetype.RANGED:
            return [EnemyAbility("shoot", AbilityKind.STRIKE, 2000, 120, 15 + 3 * layer)]
        case EnemyArchetype.TANK:
            return [EnemyAbility("shield", AbilityKind.FORTIFY, 10000, 0, 0)]
        case EnemyArchetype.ASSASSIN:
            return [EnemyAbility("backstab", AbilityKind.STRIKE, 5000, 30, 40 + 8 * layer)]
        case EnemyArchetype.SUPPORT:
            return [EnemyAbility("heal", AbilityKind.HEAL_ALLIES, 6000, 100, 20)]
        case _:
            return []


def _drops_for(archetype: EnemyArchetype, experience: float) -> list[DropEntry]:
    exp_chance = 0.8 if archetype == EnemyArchetype.SWARM else 1.0
    drops = [DropEntry("exp", DropKind.EXPERIENCE, experience, exp_chance)]
    match archetype:
        case EnemyArchetype.ELITE:
            drops.append(DropEntry("health", DropKind.HEALTH, 20, 0.3))
        case EnemyArchetype.BOSS:
            drops.append(DropEntry("health", DropKind.HEALTH, 50, 0.8))
            drops.append(DropEntry("energy", DropKind.ENERGY, 30, 0.6))
        case EnemyArchetype.TANK:
            drops.append(DropEntry("health", DropKind.HEALTH, 30, 0.5))
        case EnemyArchetype.SUPPORT:
            drops.append(DropEntry("energy", DropKind.ENERGY, 20, 0.4))
    return drops


def create_enemy(
    enemy_id: str, archetype: EnemyArchetype, layer: int, x: float, y: float
) -> Enemy:
    """
    Build an enemy with layer-scaled stats.

    Args:
        enemy_id: Unique id within the run.
        archetype: Enemy archetype.
        layer: Current layer (stats scale with it).
        x, y: Spawn position.
    """
    stats = ARCHETYPE_STATS[archetype]
    health = _scaled(stats.health, layer)
    experience = _scaled(stats.experience, layer)
    return Enemy(
        id=enemy_id,
        archetype=archetype,
        x=x,
        y=y,
        health=health,
        max_health=health,
        damage=_scaled(stats.damage, layer),
        move_speed=_scaled(stats.move_speed, layer),
        size=_scaled(stats.size, layer),
        attack_range=stats.attack_range,
        armor=_scaled(stats.armor, layer),
        dodge_chance=stats.dodge_chance,
        experience_value=experience,
        behavior=_behavior_for(archetype, stats),
        abilities=_abilities_for(archetype, layer),
        drops=_drops_for(archetype, experience),
    )


# =============================================================================
# SPAWNER
# =============================================================================


class EnemySpawner:
    """
    Layer-scaled spawn schedule.

    Attributes:
        timer: Time accumulated since the last spawn (ms).
        interval: Current randomized interval (ms).
        spawned_this_layer: Spawns since the last layer reset.
    """

    def __init__(self, rng: SeededRandom, id_factory: Callable[[], str]):
        self.rng = rng
        self._next_id = id_factory
        self.layer = 1
        self.timer = 0.0
        self.spawned_this_layer = 0
        self.boss_spawned = False
        self.interval = self._roll_interval()

    def _roll_interval(self) -> float:
        base = get_spawn_base_interval(self.layer)
        return base + self.rng.random() * base

    def reset_for_layer(self, layer: int) -> None:
        self.layer = layer
        self.timer = 0.0
        self.spawned_this_layer = 0
        self.boss_spawned = False
        self.interval = self._roll_interval()

    def pick_archetype(self) -> EnemyArchetype:
        """Roll the archetype for the next spawn."""
        if is_boss_layer(self.layer) and not self.boss_spawned:
            return EnemyArchetype.BOSS
        if self.rng.chance(get_elite_chance(self.layer)):
            return EnemyArchetype.ELITE
        specialists = get_unlocked_specialists(self.layer)
        if specialists and self.rng.chance(get_specialist_chance(self.layer)):
            return self.rng.choice(specialists)
        return EnemyArchetype.NORMAL

    def pick_position(self, width: float, height: float) -> tuple[float, float]:
        """Random point just outside one of the four viewport edges."""
        edge = self.rng.random_int(4)
        if edge == 0:  # top
            return self.rng.random_float(0, width), -SPAWN_EDGE_OFFSET
        if edge == 1:  # right
            return width + SPAWN_EDGE_OFFSET, self.rng.random_float(0, height)
        if edge == 2:  # bottom
            return self.rng.random_float(0, width), height + SPAWN_EDGE_OFFSET
        return -SPAWN_EDGE_OFFSET, self.rng.random_float(0, height)

    def spawn(self, width: float, height: float) -> Enemy:
        archetype = self.pick_archetype()
        x, y = self.pick_position(width, height)
        enemy = create_enemy(self._next_id(), archetype, self.layer, x, y)
        if archetype == EnemyArchetype.BOSS:
            self.boss_spawned = True
            logger.info("Boss %s spawned on layer %d", enemy.id, self.layer)
        self.spawned_this_layer += 1
        return enemy

    def update(
        self, delta_ms: float, live_enemies: Sequence[Enemy], width: float, height: float
    ) -> Optional[Enemy]:
        """
        Advance the spawn timer.

        Returns:
            The newly spawned enemy, or None when the timer has not elapsed
            or the population cap is reached.
        """
        self.timer += delta_ms
        if self.timer < self.interval:
            return None
        if len(live_enemies) >= get_population_cap(self.layer):
            return None
        self.timer = 0.0
        self.interval = self._roll_interval()
        return self.spawn(width, height)
