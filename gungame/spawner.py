"""
Circle spawning: level waves and split offspring
"""

from __future__ import annotations

import math
import random
from typing import List, Optional, Tuple

from .configs.game_config import (
    CIRCLE_TYPES,
    SPAWN_ATTEMPTS,
    SPAWN_CLEARANCE,
    SPECIAL_CHANCE,
    SPECIAL_DURATION_MS,
    SPLIT_JITTER,
    SPLIT_OFFSET,
    SPLIT_SPEED,
    SPLITS_INTO,
)
from .entities import Bounds, Circle, CircleCategory
from .utils import clamp, distance, sample_position


def make_circle(
    category: CircleCategory,
    x: float,
    y: float,
    dx: float,
    dy: float,
    now_ms: int,
    rng: Optional[random.Random] = None,
) -> Circle:
    """Build a circle of `category`, rolling the special chance for small ones"""
    rng = rng or random
    category = CircleCategory(category)
    traits = CIRCLE_TYPES[category.value]
    is_special = category is CircleCategory.SMALL and rng.random() < SPECIAL_CHANCE
    return Circle(
        x=x, y=y, dx=dx, dy=dy,
        size=traits["size"],
        category=category,
        points=traits["points"],
        color=traits["color"],
        is_special=is_special,
        special_start_ms=now_ms if is_special else None,
        special_duration_ms=SPECIAL_DURATION_MS,
    )


def spawn_wave(
    count: int,
    category: CircleCategory,
    bounds: Optional[Bounds],
    player_pos: Tuple[float, float],
    player_radius: float,
    now_ms: int = 0,
    rng: Optional[random.Random] = None,
) -> List[Circle]:
    """
    Place up to `count` circles away from the player.

    Each circle gets SPAWN_ATTEMPTS tries to land further than
    player_radius + size + SPAWN_CLEARANCE from the player; circles that never
    find room are left out.
    """
    rng = rng or random
    if bounds is None or not bounds.valid:
        return []

    size = CIRCLE_TYPES[CircleCategory(category).value]["size"]
    px, py = player_pos
    min_gap = player_radius + size + SPAWN_CLEARANCE

    circles: List[Circle] = []
    for _ in range(count):
        pos = sample_position(
            bounds.width, bounds.height, size,
            accept=lambda x, y: distance(x, y, px, py) > min_gap,
            attempts=SPAWN_ATTEMPTS,
            rng=rng,
        )
        if pos is None:
            continue
        dx = (rng.random() - 0.5) * 2
        dy = (rng.random() - 0.5) * 2
        circles.append(make_circle(category, pos[0], pos[1], dx, dy, now_ms, rng))
    return circles


def split_circle(
    circle: Circle,
    bounds: Optional[Bounds],
    now_ms: int = 0,
    rng: Optional[random.Random] = None,
) -> List[Circle]:
    """Two offspring of the next category down, or nothing for small circles"""
    rng = rng or random
    child_name = SPLITS_INTO.get(CircleCategory(circle.category).value)
    if child_name is None or bounds is None or not bounds.valid:
        return []

    child = CircleCategory(child_name)
    size = CIRCLE_TYPES[child_name]["size"]
    lo, hi = SPLIT_SPEED

    offspring = []
    for i in range(2):
        angle = i * math.pi + rng.random() * SPLIT_JITTER
        speed = lo + rng.random() * (hi - lo)
        x = clamp(circle.x + math.cos(angle) * SPLIT_OFFSET, size, bounds.width - size)
        y = clamp(circle.y + math.sin(angle) * SPLIT_OFFSET, size, bounds.height - size)
        offspring.append(make_circle(
            child, x, y,
            math.cos(angle) * speed, math.sin(angle) * speed,
            now_ms, rng,
        ))
    return offspring
