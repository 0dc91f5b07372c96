"""
Shop API schemas.
"""

from pydantic import BaseModel
from typing import Optional, List

from .rewards import GeneratedRewardSchema


class ShopSlotSchema(BaseModel):
    """Shop slot schema."""

    index: int
    reward: Optional[GeneratedRewardSchema] = None
    locked: bool = False


class ShopStateSchema(BaseModel):
    """Shop state schema."""

    game_id: str
    slots: List[ShopSlotSchema]
