"""
GunGameEnv - gymnasium wrapper around the simulation engine
-----------------------------------------------------------
- One env step = one engine tick (30ms)
- Discrete MultiDiscrete action space: [fire(2), aim(n_aim)]
- Vector observation: run state + top-K nearest circles + top-M nearest power-ups
- Reward: score gained this step, minus a penalty for losing a life

Quick test:
    python -m gungame.env
"""

from __future__ import annotations

import math
from typing import Any, Dict, Optional

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from .configs.game_config import ENGINE_CONFIG, ENV_CONFIG, POWERUP_DURATIONS
from .engine import GunGameEngine
from .entities import PowerUpType
from .utils import clamp


class GunGameEnv(gym.Env):
    """Headless GunGame for agents"""

    metadata = {"render_modes": ["human"], "render_fps": 33}

    def __init__(
        self,
        render_mode: Optional[str] = None,
        max_steps: int = 6000,
        k_circles: int = 8,
        m_powerups: int = 2,
        n_aim: int = 16,
        life_penalty: float = 50.0,
        engine_config: Optional[Dict[str, Any]] = None,
    ):
        super().__init__()

        assert render_mode is None or render_mode in self.metadata["render_modes"]
        self.render_mode = render_mode
        self.max_steps = max_steps
        self.k_circles = k_circles
        self.m_powerups = m_powerups
        self.n_aim = n_aim
        self.life_penalty = life_penalty
        self.engine_config = dict(ENGINE_CONFIG if engine_config is None else engine_config)

        # fire: 0/1, aim: 0..n_aim-1
        self.action_space = spaces.MultiDiscrete([2, n_aim])

        # Run: lives(1) shots(1) shotgun(1) bounce(1) invincible(1) immune(1)
        # Each circle: rel pos(2) vel(2) size(1)
        # Each power-up: rel pos(2)
        obs_dim = 6 + (self.k_circles * 5) + (self.m_powerups * 2)
        self.observation_space = spaces.Box(
            low=-1.0, high=1.0, shape=(obs_dim,), dtype=np.float32
        )

        self.engine: GunGameEngine = None  # type: ignore
        self._window = None
        self._step_count = 0
        self._aim_angles = [(math.pi * 2) * (i / n_aim) for i in range(n_aim)]

    # ----------------------------
    # Gym API
    # ----------------------------

    def reset(self, seed: Optional[int] = None, options: Optional[dict] = None):
        super().reset(seed=seed)
        if self.engine is not None:
            self.engine.close()

        engine_seed = int(self.np_random.integers(0, 2**31 - 1))
        self.engine = GunGameEngine(seed=engine_seed, **self.engine_config)
        self._step_count = 0

        return self._get_obs(), self._get_info()

    def step(self, action):
        fire, aim = int(action[0]), int(action[1])
        run = self.engine.run
        lives_before = run.lives
        score_before = run.score

        if fire:
            self.engine.fire(self._aim_angles[aim % self.n_aim])
        self.engine.tick()

        reward = float(run.score - score_before)
        if run.lives < lives_before:
            reward -= self.life_penalty

        terminated = run.game_over
        self._step_count += 1
        truncated = self._step_count >= self.max_steps

        if self.render_mode == "human":
            self.render()

        return self._get_obs(), reward, terminated, truncated, self._get_info()

    # ----------------------------
    # Observation / info
    # ----------------------------

    def _get_obs(self) -> np.ndarray:
        engine = self.engine
        run = engine.run
        now = engine.now_ms
        bounds = engine.bounds
        px, py = engine.player_pos
        w = max(1e-6, bounds.width if bounds else 1.0)
        h = max(1e-6, bounds.height if bounds else 1.0)

        def effect_fraction(kind: PowerUpType) -> float:
            effect = engine.active.get(kind)
            if effect is None:
                return -1.0
            left = effect.duration_ms - (now - effect.start_ms)
            return clamp(left / POWERUP_DURATIONS[kind.value], 0, 1) * 2 - 1

        obs_parts = [
            clamp(run.lives / max(1, engine.start_lives), 0, 1) * 2 - 1,
            run.shots_available / max(1, engine.max_shots) * 2 - 1,
            effect_fraction(PowerUpType.SHOTGUN),
            effect_fraction(PowerUpType.BOUNCE),
            effect_fraction(PowerUpType.INVINCIBILITY),
            1.0 if run.immune else -1.0,
        ]

        circles_sorted = sorted(
            engine.circles,
            key=lambda c: (c.x - px) ** 2 + (c.y - py) ** 2
        )
        for i in range(self.k_circles):
            if i < len(circles_sorted):
                c = circles_sorted[i]
                obs_parts += [
                    clamp((c.x - px) / w * 2, -1, 1),
                    clamp((c.y - py) / h * 2, -1, 1),
                    clamp(c.dx / 3.0, -1, 1),
                    clamp(c.dy / 3.0, -1, 1),
                    c.size / 30.0,
                ]
            else:
                obs_parts += [0.0, 0.0, 0.0, 0.0, 0.0]

        powerups_sorted = sorted(
            engine.power_ups,
            key=lambda p: (p.x - px) ** 2 + (p.y - py) ** 2
        )
        for i in range(self.m_powerups):
            if i < len(powerups_sorted):
                p = powerups_sorted[i]
                obs_parts += [clamp((p.x - px) / w * 2, -1, 1), clamp((p.y - py) / h * 2, -1, 1)]
            else:
                obs_parts += [0.0, 0.0]

        return np.array(obs_parts, dtype=np.float32)

    def _get_info(self) -> Dict[str, Any]:
        run = self.engine.run
        return {
            "lives": run.lives,
            "score": run.score,
            "level": run.level,
            "accuracy": run.accuracy,
            "shots_available": run.shots_available,
            "num_circles": len(self.engine.circles),
            "num_projectiles": len(self.engine.projectiles),
            "num_powerups": len(self.engine.power_ups),
            "state": self.engine.state.value,
            "step": self._step_count,
        }

    # ----------------------------
    # Rendering
    # ----------------------------

    def render(self):
        if self.render_mode is None:
            return None

        if self._window is None:
            # arcade needs a display, only pull it in when asked to draw
            from .window import GunGameWindow
            self._window = GunGameWindow(self.engine, interactive=False)

        self._window.engine = self.engine
        self._window.dispatch_events()
        self._window.on_draw()
        self._window.flip()
        return None

    def close(self):
        if self.engine is not None:
            self.engine.close()
        if self._window is not None:
            self._window.close()
            self._window = None


# ----------------------------
# Quick sanity test
# ----------------------------

def run_random_episode(render: bool = False, seed: int = 42, max_steps: Optional[int] = None) -> Dict[str, Any]:
    """Play one episode with random actions and return the final info"""
    kwargs = dict(ENV_CONFIG, render_mode="human" if render else None)
    if max_steps is not None:
        kwargs["max_steps"] = max_steps
    env = GunGameEnv(**kwargs)
    obs, info = env.reset(seed=seed)

    terminated = False
    truncated = False
    total = 0.0

    while not (terminated or truncated):
        action = env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total += reward

    print(f"Random episode return: {total}  "
          f"(score {info['score']}, level {info['level']}, accuracy {info['accuracy']}%)")

    env.close()
    return info


if __name__ == "__main__":
    run_random_episode(render=False)
