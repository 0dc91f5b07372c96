# Core simulation modules
from .constants import (
    LAYER_DURATION,
    SHOP_SIZE,
    SHOP_MAX_ATTEMPTS,
    BOSS_REWARD_OFFER_COUNT,
    PASSIVE_OFFER_COUNT,
    PLAYER_DEFAULTS,
    get_shop_odds,
    get_tier_multiplier,
    get_boss_candidate_count,
    get_kill_score,
    get_required_experience,
    is_shop_layer,
    is_boss_layer,
)

from .seeded_random import SeededRandom, EmptyInputError, hash_seed
from .effects import EffectBag, Flag, Counter, Multiplier, apply_effect, apply_reward
from .passives import PassiveAttribute, PASSIVE_ATTRIBUTES, offer_passives
from .rewards import (
    RewardContext,
    PlayerStats,
    GeneratedReward,
    GenerationOutcome,
    GenerationResult,
    RewardGenerator,
    generate_boss_rewards,
    generate_shop_rewards,
)
from .shop import Shop, ShopSlot
from .session import SessionRecord, SessionSink, InMemorySessionSink, submit_session

# GameState and LayerController depend on the combat package and are
# imported from their modules directly.

__all__ = [
    # Constants
    "LAYER_DURATION",
    "SHOP_SIZE",
    "SHOP_MAX_ATTEMPTS",
    "BOSS_REWARD_OFFER_COUNT",
    "PASSIVE_OFFER_COUNT",
    "PLAYER_DEFAULTS",
    "get_shop_odds",
    "get_tier_multiplier",
    "get_boss_candidate_count",
    "get_kill_score",
    "get_required_experience",
    "is_shop_layer",
    "is_boss_layer",
    # Randomness
    "SeededRandom",
    "EmptyInputError",
    "hash_seed",
    # Effects
    "EffectBag",
    "Flag",
    "Counter",
    "Multiplier",
    "apply_effect",
    "apply_reward",
    # Passives
    "PassiveAttribute",
    "PASSIVE_ATTRIBUTES",
    "offer_passives",
    # Rewards
    "RewardContext",
    "PlayerStats",
    "GeneratedReward",
    "GenerationOutcome",
    "GenerationResult",
    "RewardGenerator",
    "generate_boss_rewards",
    "generate_shop_rewards",
    # Shop
    "Shop",
    "ShopSlot",
    # Sessions
    "SessionRecord",
    "SessionSink",
    "InMemorySessionSink",
    "submit_session",
]
