"""
Play GunGame in an arcade window, or run a headless random-agent episode

    python -m gungame.play
    python -m gungame.play --leaderboard scores.json --seed 7
    python -m gungame.play --headless-episode
"""

import argparse
import logging

from .configs.game_config import ENGINE_CONFIG
from .engine import GunGameEngine
from .leaderboard import LeaderboardStore


def main(argv=None):
    parser = argparse.ArgumentParser(description="GunGame arcade shooter")
    parser.add_argument("--width", type=int, default=ENGINE_CONFIG["width"], help="Playfield width")
    parser.add_argument("--height", type=int, default=ENGINE_CONFIG["height"], help="Playfield height")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--leaderboard", type=str, default="gungame_leaderboard.json",
                        help="Leaderboard JSON file")
    parser.add_argument("--headless-episode", action="store_true",
                        help="Run one random-agent episode without a window")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    if args.headless_episode:
        from .env import run_random_episode
        run_random_episode(render=False, seed=args.seed if args.seed is not None else 42)
        return

    import arcade
    from .window import GunGameWindow

    config = dict(ENGINE_CONFIG, width=args.width, height=args.height)
    store = LeaderboardStore(args.leaderboard)
    print(f"Leaderboard: {args.leaderboard} ({len(store.entries)} entries)")

    with GunGameEngine(seed=args.seed, leaderboard=store, **config) as engine:
        GunGameWindow(engine)
        arcade.run()


if __name__ == "__main__":
    main()
