"""
Utility functions for game mechanics
"""

from __future__ import annotations
import math
import random
from typing import Callable, Dict, Optional, Tuple, TypeVar

K = TypeVar("K")


def clamp(x: float, lo: float, hi: float) -> float:
    """Clamp value between low and high bounds"""
    return lo if x < lo else hi if x > hi else x


def distance(x1: float, y1: float, x2: float, y2: float) -> float:
    """Euclidean distance between two points"""
    return math.hypot(x1 - x2, y1 - y2)


def circles_overlap(x1, y1, r1, x2, y2, r2) -> bool:
    """Strict overlap test: centres closer than the sum of the radii"""
    return distance(x1, y1, x2, y2) < r1 + r2


def sample_position(
    width: float,
    height: float,
    margin: float,
    accept: Callable[[float, float], bool],
    attempts: int = 50,
    rng: Optional[random.Random] = None,
) -> Optional[Tuple[float, float]]:
    """
    Rejection-sample a point in [margin, width-margin] x [margin, height-margin].

    Returns None when no candidate passes `accept` within `attempts` draws.
    """
    rng = rng or random
    for _ in range(attempts):
        x = rng.random() * (width - margin * 2) + margin
        y = rng.random() * (height - margin * 2) + margin
        if accept(x, y):
            return x, y
    return None


def weighted_choice(weights: Dict[K, float], default: K, rng: Optional[random.Random] = None) -> K:
    """
    Cumulative-threshold selection over a single uniform draw in [0, total).

    Falls back to `default` if float error pushes the draw past the last threshold.
    """
    rng = rng or random
    total = sum(weights.values())
    roll = rng.random() * total
    cumulative = 0.0
    for key, weight in weights.items():
        cumulative += weight
        if roll < cumulative:
            return key
    return default


def format_time(seconds: int) -> str:
    """Format seconds as m:ss"""
    mins, secs = divmod(int(seconds), 60)
    return f"{mins}:{secs:02d}"
