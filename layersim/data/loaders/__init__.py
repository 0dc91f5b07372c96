# Data Loaders
from .reward_loader import (
    load_pool,
    load_attribute_rewards,
    load_special_rewards,
    load_epic_rewards,
    load_legendary_rewards,
    load_all_rewards,
    get_reward_by_id,
)

__all__ = [
    "load_pool",
    "load_attribute_rewards",
    "load_special_rewards",
    "load_epic_rewards",
    "load_legendary_rewards",
    "load_all_rewards",
    "get_reward_by_id",
]
