"""
Reward-related API schemas.
"""

from pydantic import BaseModel
from typing import Optional, List, Dict, Any

from layersim.data.models import RewardOption


class PassiveSchema(BaseModel):
    """Passive attribute on offer."""

    id: str
    name: str
    description: str
    effect_key: str
    value: float


class GeneratedRewardSchema(BaseModel):
    """Generated reward with its layer-scaled value."""

    id: str
    name: str
    description: str
    category: str
    color: str
    effect_key: str
    scaled_value: Optional[float] = None
    debuff: Optional[Dict[str, Any]] = None


class OffersResponse(BaseModel):
    """Pending choices for a game."""

    game_id: str
    phase: str
    passives: List[PassiveSchema]
    boss_rewards: List[GeneratedRewardSchema]
    selected_passive_id: Optional[str] = None
    selected_boss_reward_id: Optional[str] = None


class CatalogResponse(BaseModel):
    """Reward catalog for one rarity pool."""

    category: str
    rewards: List[RewardOption]
    total: int
