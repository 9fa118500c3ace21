import pytest

from gungame.configs.game_config import CIRCLE_TYPES
from gungame.engine import GunGameEngine
from gungame.entities import Circle, CircleCategory, Projectile


class FixedRng:
    """Stands in for random.Random, replaying a fixed draw sequence (last value repeats)"""

    def __init__(self, *values):
        self.values = list(values) or [0.0]
        self.calls = 0

    def random(self):
        value = self.values[min(self.calls, len(self.values) - 1)]
        self.calls += 1
        return value


def build_circle(category, x, y, dx=0.0, dy=0.0, special=False, now=0):
    traits = CIRCLE_TYPES[category]
    return Circle(
        x=x, y=y, dx=dx, dy=dy,
        size=traits["size"],
        category=CircleCategory(category),
        points=traits["points"],
        color=traits["color"],
        is_special=special,
        special_start_ms=now if special else None,
    )


@pytest.fixture
def fixed_rng():
    return FixedRng


@pytest.fixture
def circle():
    return build_circle


@pytest.fixture
def shot():
    def _shot(pid, x, y, dx=0.0, dy=0.0):
        return Projectile(id=pid, x=x, y=y, dx=dx, dy=dy, size=6)
    return _shot


@pytest.fixture
def run_ms():
    def _run(engine, ms):
        results = []
        for _ in range(ms // engine.tick_ms + 1):
            results.append(engine.tick())
        return results
    return _run


@pytest.fixture
def engine():
    """800x600 engine with its first wave replaced by one static corner circle"""
    eng = GunGameEngine(width=800, height=600, seed=1)
    eng.set_wave([build_circle("large", 60, 60)])
    yield eng
    eng.close()
