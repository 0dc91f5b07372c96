"""Effect vocabulary for rewards and passives."""

from enum import Enum, StrEnum


class EffectKind(Enum):
    """How an effect key is stored once applied."""
    STAT = "stat"              # Mutates a player stat field directly
    FLAG = "flag"              # Presence-only switch in the effect bag
    COUNTER = "counter"        # Integer stack count in the effect bag
    MULTIPLIER = "multiplier"  # Accumulated numeric value in the effect bag


class EffectKey(StrEnum):
    """Closed set of effect selectors used across the reward catalog."""

    # Stat keys
    DAMAGE_PCT = "damage_pct"
    ATTACK_SPEED_PCT = "attack_speed_pct"
    MOVE_SPEED_PCT = "move_speed_pct"
    MAX_HEALTH_PCT = "max_health_pct"
    CRIT_CHANCE_ADD = "crit_chance_add"
    CRIT_DAMAGE_ADD = "crit_damage_add"
    PROJECTILES_ADD = "projectiles_add"
    PIERCE_ADD = "pierce_add"
    LIFESTEAL_ADD = "lifesteal_add"
    REGENERATION_ADD = "regeneration_add"
    MAX_HEALTH_ADD = "max_health_add"
    ARMOR_ADD = "armor_add"
    DODGE_CHANCE_ADD = "dodge_chance_add"
    BLOCK_CHANCE_ADD = "block_chance_add"
    PIERCE_PLUS_DAMAGE = "pierce_plus_damage"
    ALL_STATS_PCT = "all_stats_pct"

    # Flags
    ON_HIT_POISON = "on_hit_poison"
    ON_HIT_BURN = "on_hit_burn"
    ON_KILL_HEAL_ORB = "on_kill_heal_orb"
    MOVE_HEAL_TRAIL = "move_heal_trail"
    CC_IMMUNITY = "cc_immunity"
    FORTRESS_MASTER = "fortress_master"
    HEAL_ON_SUMMONED_KILL = "heal_on_summoned_kill"
    RANDOM_SPECIAL_PROC = "random_special_proc"
    DUAL_SPECIAL_PROC = "dual_special_proc"

    # Counters
    ON_ATTACK_EXTRA_PROJECTILE = "on_attack_extra_projectile"
    ELITE_KILL_PERMA_STACK = "elite_kill_perma_stack"
    SECOND_WIND = "second_wind"

    # Multipliers
    ALL_DAMAGE_PCT = "all_damage_pct"
    ELITE_DAMAGE_PCT = "elite_damage_pct"
    BOSS_DAMAGE_PCT = "boss_damage_pct"
    AOE_RADIUS_PCT = "aoe_radius_pct"
    EXECUTE_BONUS = "execute_bonus"
    VS_TANK_BONUS = "vs_tank_bonus"
    VS_FAST_BONUS = "vs_fast_bonus"
    VS_SWARM_BONUS = "vs_swarm_bonus"
    ON_KILL_RAMP_UP = "on_kill_ramp_up"
    ON_HIT_FREEZE = "on_hit_freeze"
    ON_HIT_CHAIN_LIGHTNING = "on_hit_chain_lightning"
    ON_CRIT_EXPLODE = "on_crit_explode"
    LOW_HP_DAMAGE_REDUCTION = "low_hp_damage_reduction"
    ON_ELITE_KILL_BONUS = "on_elite_kill_bonus"
    BOSS_REVEAL_BURST = "boss_reveal_burst"
    CRIT_ELITE_DAMAGE = "crit_elite_damage"
    XP_BONUS_PCT = "xp_bonus_pct"


_STAT_KEYS = {
    EffectKey.DAMAGE_PCT,
    EffectKey.ATTACK_SPEED_PCT,
    EffectKey.MOVE_SPEED_PCT,
    EffectKey.MAX_HEALTH_PCT,
    EffectKey.CRIT_CHANCE_ADD,
    EffectKey.CRIT_DAMAGE_ADD,
    EffectKey.PROJECTILES_ADD,
    EffectKey.PIERCE_ADD,
    EffectKey.LIFESTEAL_ADD,
    EffectKey.REGENERATION_ADD,
    EffectKey.MAX_HEALTH_ADD,
    EffectKey.ARMOR_ADD,
    EffectKey.DODGE_CHANCE_ADD,
    EffectKey.BLOCK_CHANCE_ADD,
    EffectKey.PIERCE_PLUS_DAMAGE,
    EffectKey.ALL_STATS_PCT,
}

_FLAG_KEYS = {
    EffectKey.ON_HIT_POISON,
    EffectKey.ON_HIT_BURN,
    EffectKey.ON_KILL_HEAL_ORB,
    EffectKey.MOVE_HEAL_TRAIL,
    EffectKey.CC_IMMUNITY,
    EffectKey.FORTRESS_MASTER,
    EffectKey.HEAL_ON_SUMMONED_KILL,
    EffectKey.RANDOM_SPECIAL_PROC,
    EffectKey.DUAL_SPECIAL_PROC,
}

_COUNTER_KEYS = {
    EffectKey.ON_ATTACK_EXTRA_PROJECTILE,
    EffectKey.ELITE_KILL_PERMA_STACK,
    EffectKey.SECOND_WIND,
}

EFFECT_KINDS: dict[EffectKey, EffectKind] = {
    key: (
        EffectKind.STAT if key in _STAT_KEYS
        else EffectKind.FLAG if key in _FLAG_KEYS
        else EffectKind.COUNTER if key in _COUNTER_KEYS
        else EffectKind.MULTIPLIER
    )
    for key in EffectKey
}


def kind_of(key: EffectKey) -> EffectKind:
    """Get the storage kind of an effect key."""
    return EFFECT_KINDS[EffectKey(key)]
