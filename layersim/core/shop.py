"""Shop System.

Four fixed slots of generated rewards. Slots can be locked to survive a
refresh or layer advance; purchased slots stay empty until the next
reconciliation.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from layersim.core.constants import SHOP_SIZE
from layersim.core.rewards import (
    GeneratedReward,
    GenerationResult,
    RewardContext,
    RewardGenerator,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShopSlot:
    """A reward on offer in the shop."""
    reward: GeneratedReward
    locked: bool = False

    @property
    def id(self) -> str:
        return self.reward.id

    def to_dict(self) -> dict[str, Any]:
        return {**self.reward.to_dict(), "locked": self.locked}


class Shop:
    """
    Lock-preserving reward shop.

    Usage:
        shop = Shop()
        shop.refresh_all(RewardContext(layer=3), generator)
        shop.toggle_lock(0)
        bought = shop.purchase(1)
    """

    def __init__(self, size: int = SHOP_SIZE):
        self.size = size
        self.slots: list[Optional[ShopSlot]] = [None] * size

    def _valid_index(self, index: int) -> bool:
        return 0 <= index < self.size

    @property
    def locked_ids(self) -> list[str]:
        return [s.id for s in self.slots if s is not None and s.locked]

    @property
    def offered_ids(self) -> list[str]:
        return [s.id for s in self.slots if s is not None]

    def clear(self) -> None:
        self.slots = [None] * self.size

    def reconcile(self, ctx: RewardContext, generator: RewardGenerator) -> GenerationResult:
        """
        Rebuild the shop, keeping locked slots.

        Locked slots keep their position when it is still in range,
        otherwise they take the first open slot. Open slots are refilled
        with fresh rewards that never repeat a locked id or each other.

        Returns:
            The generation result for the refilled slots.
        """
        locked = [(i, s) for i, s in enumerate(self.slots) if s is not None and s.locked]
        new_slots: list[Optional[ShopSlot]] = [None] * self.size

        displaced = []
        for index, slot in locked:
            if self._valid_index(index) and new_slots[index] is None:
                new_slots[index] = slot
            else:
                displaced.append(slot)
        for slot in displaced:
            open_index = next((i for i, s in enumerate(new_slots) if s is None), None)
            if open_index is None:
                logger.warning("No room for locked shop item %s, dropping it", slot.id)
                continue
            new_slots[open_index] = slot

        open_indices = [i for i, s in enumerate(new_slots) if s is None]
        locked_ids = [s.id for s in new_slots if s is not None]
        result = generator.generate_shop_rewards(ctx, len(open_indices), exclude_ids=locked_ids)
        for index, reward in zip(open_indices, result.rewards):
            new_slots[index] = ShopSlot(reward)

        self.slots = new_slots
        logger.debug(
            "Shop reconciled on layer %d: %d locked, outcome %s",
            ctx.layer, len(locked_ids), result.outcome.value,
        )
        return result

    def refresh_all(self, ctx: RewardContext, generator: RewardGenerator) -> GenerationResult:
        """Re-roll every unlocked slot."""
        return self.reconcile(ctx, generator)

    def advance(self, ctx: RewardContext, generator: RewardGenerator) -> GenerationResult:
        """Restock after a shop layer is cleared."""
        return self.reconcile(ctx, generator)

    def purchase(self, index: int) -> Optional[ShopSlot]:
        """
        Take the reward out of a slot.

        Returns:
            The purchased slot, or None if the index is invalid or empty.
        """
        if not self._valid_index(index):
            return None
        slot = self.slots[index]
        if slot is None:
            return None
        self.slots[index] = None
        return slot

    def toggle_lock(self, index: int) -> Optional[bool]:
        """
        Flip a slot's lock.

        Returns:
            The new lock state, or None if the index is invalid or empty.
        """
        if not self._valid_index(index):
            return None
        slot = self.slots[index]
        if slot is None:
            return None
        self.slots[index] = ShopSlot(slot.reward, not slot.locked)
        return not slot.locked

    def to_list(self) -> list[Optional[dict[str, Any]]]:
        return [s.to_dict() if s is not None else None for s in self.slots]
