#!/usr/bin/env python
"""
Soak Run Script.

Plays headless episodes with random movement and reports how far they got.
Run with: python scripts/soak_run.py --episodes 5
"""

import argparse
import time

import numpy as np

from layersim.rl.env.survival_env import SurvivalEnv


def run_episode(env: SurvivalEnv, seed: int, rng: np.random.Generator) -> dict:
    """Play one episode with uniformly random actions."""
    obs, info = env.reset(seed=seed)
    total_reward = 0.0
    done = False
    while not done:
        action = int(rng.integers(env.action_space.n))
        obs, reward, term, trunc, info = env.step(action)
        total_reward += reward
        done = term or trunc

    record = env.controller.take_finished_record()
    return {
        "seed": seed,
        "layer": info["layer"],
        "score": info["score"],
        "kills": info["kills"],
        "steps": info["step"],
        "reward": total_reward,
        "play_time": record.play_time if record else env.state.elapsed_seconds,
        "build": info["build"],
    }


def main():
    parser = argparse.ArgumentParser(description="Survival soak run")
    parser.add_argument("--episodes", type=int, default=5, help="Episodes to play")
    parser.add_argument("--max-steps", type=int, default=5000, help="Step limit per episode")
    parser.add_argument("--seed", type=int, default=0, help="First episode seed")
    args = parser.parse_args()

    env = SurvivalEnv(max_steps=args.max_steps)
    rng = np.random.default_rng(args.seed)

    print("\n" + "=" * 60)
    print("Soak Run")
    print("=" * 60)

    start = time.perf_counter()
    results = [run_episode(env, args.seed + i, rng) for i in range(args.episodes)]
    elapsed = time.perf_counter() - start

    for r in results:
        print(
            f"seed={r['seed']:<4} layer={r['layer']:<3} score={r['score']:<6} "
            f"kills={r['kills']:<4} steps={r['steps']:<5} sim={r['play_time']:.1f}s "
            f"reward={r['reward']:.1f}"
        )

    layers = np.array([r["layer"] for r in results])
    print("-" * 60)
    print(f"Mean layer: {layers.mean():.2f} | Best layer: {layers.max()}")
    print(f"Wall time: {elapsed:.1f}s")


if __name__ == "__main__":
    main()
