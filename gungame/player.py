"""
Player life cycle: respawn, immunity, blinking and game over

    ACTIVE --hit--> RESPAWNING (hidden, immune, 2s)
    RESPAWNING --lives left--> IMMUNE (visible, blinking, 5s) --> ACTIVE
    RESPAWNING --no lives--> GAME_OVER
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional

from .configs.game_config import (
    BLINK_DECAY,
    BLINK_FLOOR_MS,
    BLINK_START_MS,
    RESPAWN_DELAY_MS,
    RESPAWN_IMMUNITY_MS,
)
from .entities import PlayerRunState
from .timers import TimerHandle, TimerRegistry

logger = logging.getLogger(__name__)


class PlayerState(str, Enum):
    ACTIVE = "active"
    RESPAWNING = "respawning"
    IMMUNE = "immune"
    GAME_OVER = "game_over"


class BlinkSequence:
    """
    Toggle player visibility at a shrinking interval for a fixed duration.

    The interval starts at BLINK_START_MS, is multiplied by BLINK_DECAY after
    every toggle and never drops below BLINK_FLOOR_MS. When the duration has
    elapsed the player is forced visible.
    """

    def __init__(self, timers: TimerRegistry, set_visible: Callable[[bool], None]):
        self.timers = timers
        self.set_visible = set_visible
        self.duration_ms = 0
        self._started_ms = 0
        self._interval = float(BLINK_START_MS)
        self._visible = True
        self._handle: Optional[TimerHandle] = None

    @property
    def running(self) -> bool:
        return self._handle is not None and not self._handle.cancelled

    def start(self, duration_ms: int):
        self.stop()
        self.duration_ms = duration_ms
        self._started_ms = self.timers.now_ms
        self._interval = float(BLINK_START_MS)
        self._visible = False
        self._step()

    def stop(self):
        self.timers.cancel(self._handle)
        self._handle = None

    def _step(self):
        self._handle = None
        elapsed = self.timers.now_ms - self._started_ms
        if elapsed >= self.duration_ms:
            self._visible = True
            self.set_visible(True)
            return

        self._visible = not self._visible
        self.set_visible(self._visible)

        delay = min(self._interval, self.duration_ms - elapsed)
        self._interval = max(BLINK_FLOOR_MS, self._interval * BLINK_DECAY)
        self._handle = self.timers.schedule(int(round(delay)), self._step, "blink")


class PlayerStateMachine:
    """Owns the respawn sequence for one PlayerRunState"""

    def __init__(
        self,
        run: PlayerRunState,
        timers: TimerRegistry,
        on_game_over: Optional[Callable[[], None]] = None,
    ):
        self.run = run
        self.timers = timers
        self.on_game_over = on_game_over
        self.blink = BlinkSequence(timers, self._set_visible)

    def _set_visible(self, visible: bool):
        self.run.visible = visible

    @property
    def state(self) -> PlayerState:
        if self.run.game_over:
            return PlayerState.GAME_OVER
        if self.run.respawning:
            return PlayerState.RESPAWNING
        if self.run.immune:
            return PlayerState.IMMUNE
        return PlayerState.ACTIVE

    def hit(self, invincible: bool = False) -> bool:
        """
        Register a circle striking the player.

        Returns True only when this hit started a respawn sequence.
        """
        if self.run.game_over or self.run.immune or invincible:
            return False

        self.run.immune = True
        self.run.respawning = True
        self.run.visible = False
        self.blink.stop()
        self.timers.schedule(RESPAWN_DELAY_MS, self._respawn, "respawn")
        logger.debug("Player hit, %d lives before respawn", self.run.lives)
        return True

    def _respawn(self):
        self.run.lives -= 1
        self.run.respawning = False

        if self.run.lives <= 0:
            self.run.game_over = True
            logger.info("Game over at level %d with score %d", self.run.level, self.run.score)
            if self.on_game_over is not None:
                self.on_game_over()
            return

        self.run.visible = True
        self.blink.start(RESPAWN_IMMUNITY_MS)
        self.timers.schedule(RESPAWN_IMMUNITY_MS, self._end_immunity, "immunity")

    def _end_immunity(self):
        self.run.immune = False

    def start_invincibility_blink(self, duration_ms: int):
        """Blink for the invincibility effect without touching immunity"""
        self.blink.start(duration_ms)
