import numpy as np

from gungame.configs.game_config import ENV_CONFIG
from gungame.env import GunGameEnv, run_random_episode


def test_reset_and_step_shapes():
    env = GunGameEnv()
    obs, info = env.reset(seed=0)
    assert obs.shape == env.observation_space.shape
    assert env.observation_space.contains(obs)
    assert info["lives"] == 3 and info["level"] == 1

    obs, reward, terminated, truncated, info = env.step(np.array([1, 4]))
    assert env.observation_space.contains(obs)
    assert isinstance(reward, float)
    assert not terminated and not truncated
    assert info["shots_available"] == 4
    env.close()


def test_score_never_decreases():
    env = GunGameEnv(max_steps=1500)
    env.reset(seed=3)
    env.action_space.seed(3)
    last = 0
    done = False
    while not done:
        obs, reward, terminated, truncated, info = env.step(env.action_space.sample())
        assert info["score"] >= last
        assert env.observation_space.contains(obs)
        last = info["score"]
        done = terminated or truncated
    env.close()


def test_same_seed_same_run():
    def play(seed):
        env = GunGameEnv(max_steps=300)
        env.reset(seed=seed)
        infos = [env.step(np.array([i % 2, i % 16]))[4]["score"] for i in range(300)]
        env.close()
        return infos

    assert play(11) == play(11)


def test_random_episode_runs():
    info = run_random_episode(render=False, seed=1, max_steps=200)
    assert info["step"] == 200 or info["state"] == "game_over"


def test_env_config_sets_the_spaces():
    env = GunGameEnv(**ENV_CONFIG)
    obs, _ = env.reset(seed=0)
    assert env.max_steps == ENV_CONFIG["max_steps"]
    assert obs.shape == (6 + ENV_CONFIG["k_circles"] * 5 + ENV_CONFIG["m_powerups"] * 2,)
    assert list(env.action_space.nvec) == [2, ENV_CONFIG["n_aim"]]
    env.close()
