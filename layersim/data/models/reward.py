"""Reward option data model."""

from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .effect import EffectKey, EffectKind, kind_of


class RewardCategory(StrEnum):
    """Rarity pool a reward belongs to."""
    ATTRIBUTE = "attribute"
    SPECIAL = "special"
    EPIC = "epic"
    LEGENDARY = "legendary"


class RarityColor(StrEnum):
    """Display rarity of a reward."""
    GREEN = "green"
    BLUE = "blue"
    PURPLE = "purple"
    GOLD = "gold"


CATEGORY_COLORS: dict[RewardCategory, RarityColor] = {
    RewardCategory.ATTRIBUTE: RarityColor.GREEN,
    RewardCategory.SPECIAL: RarityColor.BLUE,
    RewardCategory.EPIC: RarityColor.PURPLE,
    RewardCategory.LEGENDARY: RarityColor.GOLD,
}


class Debuff(BaseModel):
    """Negative stat delta bundled with a high-power reward."""
    effect_key: EffectKey
    value: float = Field(..., gt=0, description="Magnitude, applied with reversed sign")
    description: str = ""

    model_config = {"frozen": True}

    @field_validator("effect_key")
    @classmethod
    def must_be_stat(cls, v: EffectKey) -> EffectKey:
        if kind_of(v) != EffectKind.STAT:
            raise ValueError(f"debuff effect '{v}' must be a stat key")
        return v


class RewardOption(BaseModel):
    """Catalog reward entry (immutable, loaded once)."""
    id: str = Field(..., description="Unique identifier")
    name: str = Field(..., description="Display name")
    description: str = ""
    category: RewardCategory
    color: RarityColor
    effect_key: EffectKey
    base_value: Optional[float] = Field(default=None, description="Flat value")
    tiers: Optional[list[float]] = Field(default=None, description="Values ordered weaker to stronger")
    weight: float = Field(default=1.0, ge=0, description="Sampling weight")
    debuff: Optional[Debuff] = None

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def check_values(self) -> "RewardOption":
        if self.base_value is not None and self.tiers:
            raise ValueError(f"{self.id}: use either base_value or tiers, not both")
        kind = kind_of(self.effect_key)
        if kind in (EffectKind.STAT, EffectKind.MULTIPLIER) and not self.has_value:
            raise ValueError(f"{self.id}: {kind.value} effect '{self.effect_key}' needs a value")
        if self.color != CATEGORY_COLORS[self.category]:
            raise ValueError(f"{self.id}: color {self.color} does not match {self.category}")
        return self

    @property
    def has_value(self) -> bool:
        return self.base_value is not None or bool(self.tiers)

    @property
    def is_legendary(self) -> bool:
        return self.category == RewardCategory.LEGENDARY
