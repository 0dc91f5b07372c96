"""Real-time combat for the survival simulator.

This module provides:
- Player, enemy and projectile entities
- Tagged enemy behaviors and steering
- Layer-scaled enemy spawning
- Status effects (poison, burn, slow, stun)
- The fixed-order combat tick
"""

# Geometry
from .geometry import clamp, distance, direction, rotate

# Status Effects
from .status_effects import (
    StatusEffect,
    StatusEffectType,
    apply_status_effect,
    tick_status_effects,
    create_poison,
    create_burn,
    create_slow,
    create_stun,
)

# Entities
from .entities import (
    Player,
    Enemy,
    Projectile,
    EnemyArchetype,
    EnemyAbility,
    AbilityKind,
    AnimationState,
    DropEntry,
    DropKind,
)

# Behaviors
from .ai import (
    Aggressive,
    Elite,
    Defensive,
    Support,
    Swarm,
    Ranged,
    Boss,
    Behavior,
    Steering,
    SteeringContext,
    steer,
)

# Spawning
from .spawner import EnemySpawner, create_enemy

# Combat Engine
from .combat_engine import (
    CombatEngine,
    CombatEvent,
    CombatEventType,
    Direction,
    EngineConfig,
    TickResult,
)

__all__ = [
    # Geometry
    "clamp",
    "distance",
    "direction",
    "rotate",
    # Status Effects
    "StatusEffect",
    "StatusEffectType",
    "apply_status_effect",
    "tick_status_effects",
    "create_poison",
    "create_burn",
    "create_slow",
    "create_stun",
    # Entities
    "Player",
    "Enemy",
    "Projectile",
    "EnemyArchetype",
    "EnemyAbility",
    "AbilityKind",
    "AnimationState",
    "DropEntry",
    "DropKind",
    # Behaviors
    "Aggressive",
    "Elite",
    "Defensive",
    "Support",
    "Swarm",
    "Ranged",
    "Boss",
    "Behavior",
    "Steering",
    "SteeringContext",
    "steer",
    # Spawning
    "EnemySpawner",
    "create_enemy",
    # Combat Engine
    "CombatEngine",
    "CombatEvent",
    "CombatEventType",
    "Direction",
    "EngineConfig",
    "TickResult",
]
