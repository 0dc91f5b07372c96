"""
Survival Gymnasium Environment.

Drives a LayerController headless so agents (or scripted soak runs) can play
the layer-based survival loop.
"""

import numpy as np
from typing import Optional, Tuple, Dict, Any

import gymnasium as gym
from gymnasium import spaces

from layersim.combat.combat_engine import Direction, EngineConfig
from layersim.core.game_state import GamePhase
from layersim.core.layer_controller import LayerController

from .state_encoder import StateEncoder, EncoderConfig
from .reward_calculator import RewardCalculator, RewardConfig

# Discrete action -> held directions
ACTIONS: Tuple[frozenset, ...] = (
    frozenset(),
    frozenset({Direction.UP}),
    frozenset({Direction.DOWN}),
    frozenset({Direction.LEFT}),
    frozenset({Direction.RIGHT}),
    frozenset({Direction.UP, Direction.LEFT}),
    frozenset({Direction.UP, Direction.RIGHT}),
    frozenset({Direction.DOWN, Direction.LEFT}),
    frozenset({Direction.DOWN, Direction.RIGHT}),
)


class SurvivalEnv(gym.Env):
    """
    Survival Gymnasium Environment.

    Each step holds one movement direction for a few frames. Pending passive
    and boss reward choices are resolved automatically with the first offer
    so the agent only controls movement.

    Usage:
        env = SurvivalEnv()
        obs, info = env.reset(seed=0)

        while not done:
            action = agent.act(obs)
            obs, reward, terminated, truncated, info = env.step(action)
    """

    metadata = {"render_modes": ["human", "ansi"], "render_fps": 10}

    def __init__(
        self,
        frames_per_step: int = 6,
        frame_ms: float = 1000.0 / 60.0,
        max_steps: int = 5000,
        render_mode: Optional[str] = None,
        engine_config: Optional[EngineConfig] = None,
        encoder_config: Optional[EncoderConfig] = None,
        reward_config: Optional[RewardConfig] = None,
    ):
        super().__init__()

        self.frames_per_step = frames_per_step
        self.frame_ms = frame_ms
        self.max_steps = max_steps
        self.render_mode = render_mode

        # Components
        self.controller = LayerController(config=engine_config)
        self.state_encoder = StateEncoder(encoder_config)
        self.reward_calculator = RewardCalculator(reward_config)

        # Gym spaces
        self.observation_space = spaces.Box(
            low=-np.inf,
            high=np.inf,
            shape=(self.state_encoder.state_dim,),
            dtype=np.float32,
        )
        self.action_space = spaces.Discrete(len(ACTIONS))

        # Episode tracking
        self.current_step = 0
        self.done = False

    @property
    def state(self):
        return self.controller.state

    def reset(
        self, *, seed: Optional[int] = None, options: Optional[Dict[str, Any]] = None
    ) -> Tuple[np.ndarray, Dict[str, Any]]:
        """
        Reset environment.

        The run seed is options["seed"] when given, otherwise derived from
        the integer seed.
        """
        super().reset(seed=seed)

        options = options or {}
        if "seed" in options:
            run_seed = str(options["seed"])
        elif seed is not None:
            run_seed = f"env-{seed}"
        else:
            run_seed = f"env-{int(self.np_random.integers(0, 2**31))}"

        self.controller.start_new_game(run_seed)
        self._resolve_choices()
        self.reward_calculator.reset(self.state)

        self.current_step = 0
        self.done = False

        return self._get_observation(), self._get_info()

    def step(
        self, action: int
    ) -> Tuple[np.ndarray, float, bool, bool, Dict[str, Any]]:
        """
        Execute action.

        Args:
            action: Index into ACTIONS.

        Returns:
            observation, reward, terminated, truncated, info
        """
        if self.done:
            return self._get_observation(), 0.0, True, False, self._get_info()

        held = ACTIONS[int(action)]
        events = []
        for _ in range(self.frames_per_step):
            result = self.controller.tick(self.frame_ms, held)
            events.extend(e.type.value for e in result.events)
            self._resolve_choices()
            if self.state.game_over:
                break

        self.current_step += 1
        terminated = self.state.game_over
        truncated = self.current_step >= self.max_steps
        self.done = terminated or truncated

        reward = self.reward_calculator.calculate(self.state)

        info = self._get_info()
        info["events"] = events
        info["reward_breakdown"] = self.reward_calculator.get_reward_breakdown()

        if self.render_mode == "human":
            self.render()

        return self._get_observation(), reward, terminated, truncated, info

    def _resolve_choices(self):
        """Take the first offer for every pending choice."""
        state = self.state
        if state.phase == GamePhase.BOSS_REWARD_SELECTION:
            self.controller.select_boss_reward(state.available_boss_rewards[0].id)
            self.controller.confirm_boss_reward_selection()
        if state.phase == GamePhase.PASSIVE_SELECTION:
            self.controller.select_passive(state.available_passives[0].id)
            self.controller.confirm_passive_selection()

    def _get_observation(self) -> np.ndarray:
        """Get current observation."""
        cfg = self.controller.config
        return self.state_encoder.encode(self.state, cfg.width, cfg.height)

    def _get_info(self) -> Dict[str, Any]:
        """Get additional info."""
        state = self.state
        return {
            "step": self.current_step,
            "layer": state.layer,
            "score": state.score,
            "kills": state.kills,
            "health": state.player.health,
            "enemies": len(state.enemies),
            "build": state.build,
        }

    def render(self) -> Optional[str]:
        """Render environment."""
        if self.render_mode == "ansi":
            return self._render_ansi()
        elif self.render_mode == "human":
            print(self._render_ansi())
        return None

    def _render_ansi(self) -> str:
        """Text rendering."""
        state = self.state
        player = state.player
        lines = [
            f"=== Layer {state.layer} ({state.time_remaining:.1f}s left) ===",
            f"HP: {player.health:.0f}/{player.max_health:.0f} | Score: {state.score} | Kills: {state.kills}",
            f"Position: ({player.x:.0f}, {player.y:.0f}) | Enemies: {len(state.enemies)}",
            f"Build: {', '.join(state.build) or '-'}",
        ]
        return "\n".join(lines)
