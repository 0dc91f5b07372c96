# Data Models
from .effect import EffectKey, EffectKind, EFFECT_KINDS, kind_of
from .reward import (
    CATEGORY_COLORS,
    Debuff,
    RarityColor,
    RewardCategory,
    RewardOption,
)

__all__ = [
    # Effects
    "EffectKey",
    "EffectKind",
    "EFFECT_KINDS",
    "kind_of",
    # Rewards
    "CATEGORY_COLORS",
    "Debuff",
    "RarityColor",
    "RewardCategory",
    "RewardOption",
]
