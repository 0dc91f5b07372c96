"""Reward catalog loader."""

import json
from functools import lru_cache
from pathlib import Path
from typing import Optional

from ..models.reward import RewardCategory, RewardOption


# Catalog JSON ships inside the package
CATALOG_DIR = Path(__file__).parent.parent / "catalog"
CATALOG_FILES: dict[RewardCategory, Path] = {
    RewardCategory.ATTRIBUTE: CATALOG_DIR / "attribute.json",
    RewardCategory.SPECIAL: CATALOG_DIR / "special.json",
    RewardCategory.EPIC: CATALOG_DIR / "epic.json",
    RewardCategory.LEGENDARY: CATALOG_DIR / "legendary.json",
}


def _parse_reward(reward_data: dict, category: RewardCategory) -> RewardOption:
    """Parse a reward option from JSON data.

    Args:
        reward_data: Dictionary containing reward data.
        category: Pool the file belongs to.

    Returns:
        RewardOption object.

    Raises:
        pydantic.ValidationError: If the entry is malformed.
    """
    return RewardOption.model_validate({**reward_data, "category": category})


@lru_cache(maxsize=None)
def load_pool(category: RewardCategory) -> tuple[RewardOption, ...]:
    """Load one rarity pool from its JSON file.

    Returns:
        Tuple of RewardOption objects, in file order.
    """
    category = RewardCategory(category)
    with open(CATALOG_FILES[category], "r", encoding="utf-8") as f:
        data = json.load(f)

    return tuple(_parse_reward(r, category) for r in data["rewards"])


def load_attribute_rewards() -> tuple[RewardOption, ...]:
    return load_pool(RewardCategory.ATTRIBUTE)


def load_special_rewards() -> tuple[RewardOption, ...]:
    return load_pool(RewardCategory.SPECIAL)


def load_epic_rewards() -> tuple[RewardOption, ...]:
    return load_pool(RewardCategory.EPIC)


def load_legendary_rewards() -> tuple[RewardOption, ...]:
    return load_pool(RewardCategory.LEGENDARY)


@lru_cache(maxsize=1)
def load_all_rewards() -> tuple[RewardOption, ...]:
    """Load every pool, green to gold.

    Raises:
        ValueError: If an id appears in more than one pool.
    """
    rewards = tuple(r for category in RewardCategory for r in load_pool(category))
    seen: set[str] = set()
    for reward in rewards:
        if reward.id in seen:
            raise ValueError(f"duplicate reward id '{reward.id}' in catalog")
        seen.add(reward.id)
    return rewards


def get_reward_by_id(reward_id: str) -> Optional[RewardOption]:
    """Get a reward option by id.

    Args:
        reward_id: Reward ID to look up.

    Returns:
        RewardOption if found, None otherwise.
    """
    for reward in load_all_rewards():
        if reward.id == reward_id:
            return reward
    return None
