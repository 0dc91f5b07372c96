"""Survival Reinforcement Learning Environment."""

from .env.survival_env import SurvivalEnv, ACTIONS
from .env.state_encoder import StateEncoder, EncoderConfig
from .env.reward_calculator import RewardCalculator, RewardConfig

__all__ = [
    "SurvivalEnv",
    "ACTIONS",
    "StateEncoder",
    "EncoderConfig",
    "RewardCalculator",
    "RewardConfig",
]
