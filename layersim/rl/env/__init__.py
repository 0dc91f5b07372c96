"""Survival RL Environment components."""

from .survival_env import SurvivalEnv, ACTIONS
from .state_encoder import StateEncoder, EncoderConfig
from .reward_calculator import RewardCalculator, RewardConfig

__all__ = [
    "SurvivalEnv",
    "ACTIONS",
    "StateEncoder",
    "EncoderConfig",
    "RewardCalculator",
    "RewardConfig",
]
