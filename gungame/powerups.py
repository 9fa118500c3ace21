"""
Power-up selection, effects and expiry
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional

from .configs.game_config import (
    NUKE_BONUS,
    POINTS100_BONUS,
    POWERUP_DURATIONS,
    POWERUP_LIFETIME_MS,
    POWERUP_MESSAGES,
    POWERUP_WEIGHTS,
)
from .entities import ActivePowerUp, PlayerRunState, PowerUp, PowerUpType
from .utils import weighted_choice

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PowerUpEffect:
    """What applying a power-up did, for the engine to follow up on"""
    kind: PowerUpType
    message: str
    nuke: bool = False


def pick_type(rng: Optional[random.Random] = None) -> PowerUpType:
    """Weighted draw over POWERUP_WEIGHTS, falling back to shotgun"""
    weights = {PowerUpType(name): w for name, w in POWERUP_WEIGHTS.items()}
    return weighted_choice(weights, default=PowerUpType.SHOTGUN, rng=rng)


def drop(
    x: float,
    y: float,
    now_ms: int,
    next_id: Callable[[], int],
    rng: Optional[random.Random] = None,
) -> PowerUp:
    """Field power-up left behind by a special circle"""
    kind = pick_type(rng)
    logger.debug("Power-up %s dropped at (%.0f, %.0f)", kind.value, x, y)
    return PowerUp(
        id=next_id(),
        x=x, y=y,
        kind=kind,
        spawn_ms=now_ms,
        duration_ms=POWERUP_LIFETIME_MS,
        just_dropped=True,
    )


def expire_field(power_ups: Iterable[PowerUp], now_ms: int) -> List[PowerUp]:
    """Field power-ups still within their lifetime"""
    return [p for p in power_ups if now_ms - p.spawn_ms < p.duration_ms]


class ActivePowerUps:
    """Timed effects in force, at most one per type"""

    def __init__(self):
        self._effects: Dict[PowerUpType, ActivePowerUp] = {}

    def __contains__(self, kind) -> bool:
        return PowerUpType(kind) in self._effects

    def __len__(self) -> int:
        return len(self._effects)

    def get(self, kind) -> Optional[ActivePowerUp]:
        return self._effects.get(PowerUpType(kind))

    def arm(self, kind: PowerUpType, now_ms: int) -> ActivePowerUp:
        """Start (or restart) the timer for `kind`"""
        effect = ActivePowerUp(kind=kind, start_ms=now_ms, duration_ms=POWERUP_DURATIONS[kind.value])
        self._effects[kind] = effect
        return effect

    def is_active(self, kind, now_ms: int) -> bool:
        effect = self.get(kind)
        return effect is not None and now_ms - effect.start_ms < effect.duration_ms

    def expire(self, now_ms: int) -> List[PowerUpType]:
        """Drop effects whose elapsed time exceeds their duration"""
        gone = [k for k, e in self._effects.items() if now_ms - e.start_ms > e.duration_ms]
        for kind in gone:
            del self._effects[kind]
        return gone

    def remaining(self, now_ms: int) -> Dict[str, int]:
        """Seconds left per effect, leaving out ones already run down"""
        left = {k.value: e.remaining_s(now_ms) for k, e in self._effects.items()}
        return {k: s for k, s in left.items() if s > 0}


def apply_power_up(
    kind: PowerUpType,
    run: PlayerRunState,
    active: ActivePowerUps,
    now_ms: int,
) -> PowerUpEffect:
    """Apply one collected power-up to the run"""
    kind = PowerUpType(kind)
    message = POWERUP_MESSAGES[kind.value]

    if kind is PowerUpType.SHOTGUN:
        active.arm(kind, now_ms)
    elif kind is PowerUpType.BOUNCE:
        active.arm(kind, now_ms)
    elif kind is PowerUpType.INVINCIBILITY:
        active.arm(kind, now_ms)
    elif kind is PowerUpType.EXTRA_LIFE:
        run.lives += 1
    elif kind is PowerUpType.POINTS100:
        run.score += POINTS100_BONUS
    elif kind is PowerUpType.NUKE:
        run.score += NUKE_BONUS
        run.suppress_clear_bonus = True
        return PowerUpEffect(kind, message, nuke=True)
    else:
        raise ValueError(f"Unhandled power-up type: {kind!r}")

    return PowerUpEffect(kind, message)
