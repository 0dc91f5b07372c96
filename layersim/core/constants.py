"""Layer Survival Game Constants."""

from typing import Final

# =============================================================================
# LAYERS
# =============================================================================
# Seconds of combat per layer
LAYER_DURATION: Final[float] = 30.0

# A shop visit follows every 3rd cleared layer (3, 6, 9, ...)
SHOP_LAYER_INTERVAL: Final[int] = 3

# Every 5th layer spawns a boss (5, 10, 15, 20, ...)
BOSS_LAYER_INTERVAL: Final[int] = 5


def is_shop_layer(layer: int) -> bool:
    """Check whether clearing this layer opens the shop."""
    return layer > 0 and layer % SHOP_LAYER_INTERVAL == 0


def is_boss_layer(layer: int) -> bool:
    """Check whether this layer spawns a boss."""
    return layer > 0 and layer % BOSS_LAYER_INTERVAL == 0


# =============================================================================
# SHOP
# =============================================================================
SHOP_SIZE: Final[int] = 4

# Attempts per slot before the forced green fallback kicks in
SHOP_MAX_ATTEMPTS: Final[int] = 50

# Rarity roll table. Each row applies from its starting layer upward.
# Format: (min_layer, [green%, blue%, purple%, gold%])
SHOP_RARITY_ODDS: Final[list[tuple[int, list[int]]]] = [
    (1,  [75, 20, 4,  1]),
    (6,  [65, 25, 8,  2]),
    (11, [55, 28, 13, 4]),
    (21, [45, 30, 18, 7]),
    (31, [35, 32, 23, 10]),
    (41, [25, 33, 28, 14]),
    (51, [15, 33, 32, 20]),  # 51+
]


def get_shop_odds(layer: int) -> list[int]:
    """Get the rarity odds row that applies to a layer."""
    odds = SHOP_RARITY_ODDS[0][1]
    for min_layer, row in SHOP_RARITY_ODDS:
        if layer >= min_layer:
            odds = row
    return odds


# =============================================================================
# REWARD SCALING
# =============================================================================
# Layer thresholds for tier selection and value multipliers
TIER_MULTIPLIERS: Final[list[tuple[int, float]]] = [
    (20, 2.0),
    (15, 1.6),
    (10, 1.3),
]


def get_tier_multiplier(layer: int) -> float:
    """Layer-dependent scalar applied to every reward value."""
    for min_layer, multiplier in TIER_MULTIPLIERS:
        if layer >= min_layer:
            return multiplier
    return 1.0


# Boss reward candidate counts. The highest entry <= layer applies.
BOSS_REWARD_SELECTION: Final[dict[int, int]] = {
    5: 3,
    10: 4,
    15: 5,
    20: 6,
}

# Options actually shown to the player after a boss kill
BOSS_REWARD_OFFER_COUNT: Final[int] = 3

# Passive attribute offers per layer
PASSIVE_OFFER_COUNT: Final[int] = 3


def get_boss_candidate_count(
    layer: int, overrides: dict[int, int] | None = None
) -> int:
    """Number of boss reward candidates generated for a layer."""
    schedule = dict(BOSS_REWARD_SELECTION)
    if overrides:
        schedule.update(overrides)

    count = schedule[min(schedule)]
    for min_layer in sorted(schedule):
        if layer >= min_layer:
            count = schedule[min_layer]
    return count


# Synergy weighting thresholds
SYNERGY_ATTACK_SPEED_THRESHOLD: Final[float] = 1.4
SYNERGY_CRIT_THRESHOLD: Final[float] = 0.25
SYNERGY_WEIGHT_BONUS: Final[int] = 2

# =============================================================================
# SCORING / PROGRESSION
# =============================================================================
KILL_SCORE_BASE: Final[int] = 10
KILL_SCORE_PER_LAYER: Final[int] = 5


def get_kill_score(layer: int) -> int:
    """Score awarded for one kill on a layer."""
    return KILL_SCORE_BASE + layer * KILL_SCORE_PER_LAYER


def get_required_experience(level: int) -> int:
    """Experience needed to advance past a player level."""
    return level * 100 + 50


MAX_COMBO_MULTIPLIER: Final[float] = 2.0
COMBO_STEP: Final[float] = 0.1

# =============================================================================
# PLAYER DEFAULTS
# =============================================================================
PLAYER_DEFAULTS: Final[dict[str, float]] = {
    "health": 100.0,
    "max_health": 100.0,
    "damage": 10.0,
    "attack_speed": 1.0,
    "crit_chance": 0.05,
    "crit_damage": 1.5,
    "projectile_count": 1,
    "pierce": 0,
    "move_speed": 1.0,
    "lifesteal": 0.0,
    "regeneration": 0.0,
    "armor": 0.0,
    "magic_resistance": 0.0,
    "dodge_chance": 0.0,
    "block_chance": 0.0,
    "energy": 100.0,
    "max_energy": 100.0,
    "energy_regen": 1.0,
}
