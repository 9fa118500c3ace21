"""GunGame - arcade shooter simulation engine"""

from .engine import GunGameEngine, TickResult, WorldSnapshot
from .env import GunGameEnv, run_random_episode
from .leaderboard import LeaderboardStore

__all__ = ['GunGameEngine', 'TickResult', 'WorldSnapshot', 'GunGameEnv', 'run_random_episode', 'LeaderboardStore']
