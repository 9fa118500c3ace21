"""
GunGameEngine - the simulation core
-----------------------------------
- Fixed-period tick (30ms of virtual time) drives physics and collisions
- Circles drift and bounce, split when shot, special ones drop power-ups
- Projectiles fly straight (or bounce while the bounce effect is active)
- Player sits at the playfield centre and loses a life when a circle reaches it
- Every delayed effect runs through one TimerRegistry owned by the engine

The engine never draws anything. Renderers call `snapshot()` and get a frozen
copy of the world; input layers call `fire()` / `fire_at()`.
"""

from __future__ import annotations

import datetime
import logging
import math
import random
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Tuple

from .configs.game_config import (
    MESSAGE_DURATION_MS,
    POWERUP_DURATIONS,
    POWERUP_RADIUS,
    SHOTGUN_SPREAD,
    WEAPONS,
)
from .entities import (
    Bounds,
    Circle,
    CircleCategory,
    IdSequence,
    LeaderboardEntry,
    LevelCleared,
    PlayerRunState,
    PowerUp,
    PowerUpType,
    Projectile,
)
from .leaderboard import LeaderboardStore, qualifies
from .player import PlayerState, PlayerStateMachine
from .powerups import ActivePowerUps, PowerUpEffect, apply_power_up, drop, expire_field
from .spawner import spawn_wave, split_circle
from .timers import TimerHandle, TimerRegistry
from .utils import circles_overlap, clamp, distance

logger = logging.getLogger(__name__)


@dataclass
class TickResult:
    """What happened during one tick"""
    points: int = 0
    hits: int = 0
    player_hit: bool = False
    power_ups_collected: List[PowerUpType] = field(default_factory=list)
    level_cleared: Optional[LevelCleared] = None


@dataclass(frozen=True)
class WorldSnapshot:
    """Immutable copy of the world handed to renderers"""
    time_ms: int
    width: float
    height: float
    player_x: float
    player_y: float
    player_radius: float
    player_visible: bool
    circles: Tuple[Circle, ...]
    projectiles: Tuple[Projectile, ...]
    power_ups: Tuple[PowerUp, ...]
    lives: int
    score: int
    level: int
    weapon: str
    accuracy: float
    shots_fired: int
    shots_hit: int
    elapsed_s: int
    shots_available: int
    active_effects: Dict[str, int]  # type -> remaining seconds
    message: Optional[str]
    respawning: bool
    game_over: bool
    name_prompt_open: bool
    leaderboard: Tuple[LeaderboardEntry, ...]


class GunGameEngine:
    """Single-player arcade shooter simulation"""

    def __init__(
        self,
        width: float = 800,
        height: float = 600,
        tick_ms: int = 30,
        player_radius: float = 10,
        start_lives: int = 3,
        max_shots: int = 5,
        projectile_speed: float = 8.0,
        projectile_size: float = 6,
        wave_size_per_level: int = 5,
        spawn_delay_ms: int = 1000,
        level_clear_bonus: int = 25,
        seed: Optional[int] = None,
        leaderboard: Optional[LeaderboardStore] = None,
    ):
        assert tick_ms > 0, "tick_ms must be positive"
        assert start_lives > 0, "start_lives must be positive"
        assert max_shots > 0, "max_shots must be positive"

        self.bounds: Optional[Bounds] = None
        self.set_bounds(width, height)

        # Config
        self.tick_ms = int(tick_ms)
        self.player_radius = player_radius
        self.start_lives = start_lives
        self.max_shots = max_shots
        self.projectile_speed = projectile_speed
        self.projectile_size = projectile_size
        self.wave_size_per_level = wave_size_per_level
        self.spawn_delay_ms = spawn_delay_ms
        self.level_clear_bonus = level_clear_bonus

        self.rng = random.Random(seed)
        self.timers = TimerRegistry()
        self.store = leaderboard if leaderboard is not None else LeaderboardStore()
        self.leaderboard: Tuple[LeaderboardEntry, ...] = tuple(self.store.entries)
        self.closed = False

        self.restart()

    # ----------------------------
    # Lifecycle
    # ----------------------------

    def restart(self):
        """Start a fresh run; every pending timer from the old run is dropped"""
        self.timers.cancel_all()

        self.run = PlayerRunState(lives=self.start_lives, shots_available=self.max_shots)
        self.player = PlayerStateMachine(self.run, self.timers, on_game_over=self._on_game_over)
        self.active = ActivePowerUps()

        self.circles: List[Circle] = []
        self.projectiles: List[Projectile] = []
        self.power_ups: List[PowerUp] = []
        self.projectile_ids = IdSequence()
        self.power_up_ids = IdSequence()

        self.spawning = True
        self.message: Optional[str] = None
        self._message_timer: Optional[TimerHandle] = None
        self._spawn_timer: Optional[TimerHandle] = None
        self._elapsed_timer: Optional[TimerHandle] = None

        self._schedule_wave()
        logger.debug("Run started at t=%dms", self.now_ms)

    def close(self):
        self.timers.cancel_all()
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def set_bounds(self, width: Optional[float], height: Optional[float]):
        """Playfield size; None or non-positive sizes pause the simulation"""
        if width is None or height is None:
            self.bounds = None
        else:
            self.bounds = Bounds(float(width), float(height))

    # ----------------------------
    # Derived state
    # ----------------------------

    @property
    def now_ms(self) -> int:
        return self.timers.now_ms

    @property
    def playable(self) -> bool:
        return self.bounds is not None and self.bounds.valid

    @property
    def player_pos(self) -> Tuple[float, float]:
        return self.bounds.center if self.bounds is not None else (0.0, 0.0)

    @property
    def state(self) -> PlayerState:
        return self.player.state

    @property
    def weapon(self) -> str:
        return "Shotgun" if self.active.is_active(PowerUpType.SHOTGUN, self.now_ms) else "Pistol"

    # ----------------------------
    # Waves
    # ----------------------------

    def _schedule_wave(self):
        self.timers.cancel(self._spawn_timer)
        self._spawn_timer = self.timers.schedule(self.spawn_delay_ms, self._spawn_wave, "wave")

    def _spawn_wave(self):
        self._spawn_timer = None
        if not self.playable:
            # Nothing measurable yet, try again later
            self._schedule_wave()
            return
        circles = spawn_wave(
            self.run.level * self.wave_size_per_level,
            CircleCategory.LARGE,
            self.bounds,
            self.player_pos,
            self.player_radius,
            self.now_ms,
            self.rng,
        )
        logger.debug("Level %d wave: %d circles", self.run.level, len(circles))
        self.set_wave(circles)

    def set_wave(self, circles: List[Circle]):
        """Replace the circle population and leave the spawning state"""
        self.timers.cancel(self._spawn_timer)
        self._spawn_timer = None
        self.circles = list(circles)
        self.spawning = False

    # ----------------------------
    # Input
    # ----------------------------

    def fire(self, angle: float) -> List[Projectile]:
        """Fire towards `angle` (radians, y axis pointing down). Returns new projectiles."""
        run = self.run
        if run.shots_available <= 0 or run.game_over or run.respawning or not self.playable:
            return []

        if run.start_ms is None:
            run.start_ms = self.now_ms
            self._elapsed_timer = self.timers.schedule_interval(1000, self._update_elapsed, "elapsed")

        weapon = self.weapon
        if weapon == "Shotgun":
            angles = [angle + spread for spread in SHOTGUN_SPREAD]
        else:
            angles = [angle]

        px, py = self.player_pos
        shots = [
            Projectile(
                id=self.projectile_ids(),
                x=px, y=py,
                dx=math.cos(a) * self.projectile_speed,
                dy=math.sin(a) * self.projectile_speed,
                size=self.projectile_size,
            )
            for a in angles
        ]
        self.projectiles.extend(shots)
        run.shots_available -= 1
        run.shots_fired += len(shots)

        self.timers.schedule(WEAPONS[weapon]["fire_rate_ms"], self._reload, "reload")
        return shots

    def fire_at(self, x: float, y: float) -> List[Projectile]:
        """Fire at a playfield point"""
        px, py = self.player_pos
        return self.fire(math.atan2(y - py, x - px))

    def _reload(self):
        self.run.shots_available = min(self.run.shots_available + 1, self.max_shots)

    def _update_elapsed(self):
        run = self.run
        if run.start_ms is None or run.respawning or run.game_over:
            return
        run.elapsed_s = (self.now_ms - run.start_ms) // 1000

    # ----------------------------
    # Power-ups
    # ----------------------------

    def show_message(self, text: str):
        """Show a pickup message, replacing any message still on screen"""
        self.timers.cancel(self._message_timer)
        self.message = text
        self._message_timer = self.timers.schedule(MESSAGE_DURATION_MS, self._clear_message, "message")

    def _clear_message(self):
        self.message = None
        self._message_timer = None

    def collect(self, kind: PowerUpType) -> PowerUpEffect:
        """Apply a power-up to the current run"""
        effect = apply_power_up(kind, self.run, self.active, self.now_ms)
        if effect.kind is PowerUpType.INVINCIBILITY:
            self.player.start_invincibility_blink(POWERUP_DURATIONS[PowerUpType.INVINCIBILITY.value])
        self.show_message(effect.message)
        logger.debug("Collected %s", effect.kind.value)
        return effect

    # ----------------------------
    # Tick
    # ----------------------------

    def tick(self) -> TickResult:
        """Advance the world by one tick"""
        self.timers.advance(self.now_ms + self.tick_ms)
        result = TickResult()

        run = self.run
        if not self.playable or run.game_over or run.respawning:
            return result

        now = self.now_ms
        bounds = self.bounds
        width, height = bounds.width, bounds.height

        # 1. Projectiles
        bounce = self.active.is_active(PowerUpType.BOUNCE, now)
        moved: List[Projectile] = []
        for p in self.projectiles:
            p.x += p.dx
            p.y += p.dy
            if bounce:
                if p.x < 0 or p.x > width:
                    p.x = clamp(p.x, 0, width)
                    p.dx = -p.dx
                if p.y < 0 or p.y > height:
                    p.y = clamp(p.y, 0, height)
                    p.dy = -p.dy
                moved.append(p)
            elif 0 <= p.x <= width and 0 <= p.y <= height:
                moved.append(p)

        # 2. Circles (always bounce)
        for c in self.circles:
            nx = c.x + c.dx
            ny = c.y + c.dy
            if nx - c.size < 0 or nx + c.size > width:
                c.dx = -c.dx
            if ny - c.size < 0 or ny + c.size > height:
                c.dy = -c.dy
            c.x = clamp(nx, c.size, width - c.size)
            c.y = clamp(ny, c.size, height - c.size)
            if c.is_special and c.special_start_ms is not None:
                if now - c.special_start_ms > c.special_duration_ms:
                    c.is_special = False
                    c.special_start_ms = None

        # 3. Expiry
        field_power_ups = expire_field(self.power_ups, now)
        for kind in self.active.expire(now):
            logger.debug("%s expired", kind.value)

        # 4. Projectiles vs circles
        used = set()
        survivors: List[Circle] = []
        offspring: List[Circle] = []
        for c in self.circles:
            shot = self._first_hit(moved, used, c.x, c.y, c.size)
            if shot is None:
                survivors.append(c)
                continue
            used.add(shot.id)
            result.hits += 1
            result.points += c.points
            if c.is_special and c.special_start_ms is not None:
                field_power_ups.append(drop(c.x, c.y, now, self.power_up_ids, self.rng))
            offspring.extend(split_circle(c, bounds, now, self.rng))

        # 5. Projectiles vs power-ups
        nuke = False
        remaining: List[PowerUp] = []
        for pu in field_power_ups:
            shot = None
            if not pu.just_dropped:
                shot = self._first_hit(moved, used, pu.x, pu.y, POWERUP_RADIUS)
            if shot is None:
                remaining.append(pu)
                continue
            used.add(shot.id)
            result.hits += 1
            effect = self.collect(pu.kind)
            result.power_ups_collected.append(pu.kind)
            nuke = nuke or effect.nuke
        for pu in remaining:
            pu.just_dropped = False

        # 6. Circles vs player
        px, py = self.player_pos
        if any(distance(c.x, c.y, px, py) < c.size + self.player_radius for c in survivors):
            invincible = self.active.is_active(PowerUpType.INVINCIBILITY, now)
            result.player_hit = self.player.hit(invincible=invincible)

        # 7. Commit
        self.projectiles = [p for p in moved if p.id not in used]
        self.circles = survivors + offspring
        self.power_ups = remaining
        run.score += result.points
        run.shots_hit += result.hits

        # 8. Nuke clears the field and skips the clear bonus
        if nuke:
            self.circles = []
            self.power_ups = []
            run.level += 1
            self.spawning = True
            self._schedule_wave()
            result.level_cleared = LevelCleared(level=run.level, bonus_awarded=False, nuked=True)
            logger.info("Nuke: level %d", run.level)
            return result

        # 9. Level clear
        if not self.circles and not self.spawning:
            result.level_cleared = self._clear_level()

        return result

    def _first_hit(self, projectiles: List[Projectile], used, x: float, y: float, radius: float) -> Optional[Projectile]:
        for p in projectiles:
            if p.id in used:
                continue
            if circles_overlap(p.x, p.y, p.size, x, y, radius):
                return p
        return None

    def _clear_level(self) -> LevelCleared:
        run = self.run
        self.spawning = True
        run.level += 1
        bonus = not run.suppress_clear_bonus
        run.suppress_clear_bonus = False
        if bonus:
            run.score += self.level_clear_bonus
        self._schedule_wave()
        logger.info("Level cleared, now level %d (bonus=%s)", run.level, bonus)
        return LevelCleared(level=run.level, bonus_awarded=bonus)

    # ----------------------------
    # Game over / leaderboard
    # ----------------------------

    def _on_game_over(self):
        self.timers.cancel(self._elapsed_timer)
        self._elapsed_timer = None
        self.run.name_prompt_open = qualifies(self.leaderboard, self.run.score)

    def candidate_entry(self, name: str) -> LeaderboardEntry:
        run = self.run
        return LeaderboardEntry(
            name=name.strip()[:20],
            score=run.score,
            accuracy=run.accuracy,
            time=run.elapsed_s,
            level=run.level,
            date=datetime.date.today().isoformat(),
        )

    def submit_high_score(self, name: str) -> Optional[LeaderboardEntry]:
        """Offer the finished run to the leaderboard; blank names are refused"""
        if not self.run.name_prompt_open or not (name or "").strip():
            return None
        entry = self.candidate_entry(name)
        self.leaderboard = tuple(self.store.submit(entry))
        self.run.name_prompt_open = False
        return entry

    # ----------------------------
    # Rendering boundary
    # ----------------------------

    def snapshot(self) -> WorldSnapshot:
        run = self.run
        px, py = self.player_pos
        width, height = (self.bounds.width, self.bounds.height) if self.bounds else (0.0, 0.0)
        return WorldSnapshot(
            time_ms=self.now_ms,
            width=width,
            height=height,
            player_x=px,
            player_y=py,
            player_radius=self.player_radius,
            player_visible=run.visible,
            circles=tuple(replace(c) for c in self.circles),
            projectiles=tuple(replace(p) for p in self.projectiles),
            power_ups=tuple(replace(p) for p in self.power_ups),
            lives=run.lives,
            score=run.score,
            level=run.level,
            weapon=self.weapon,
            accuracy=run.accuracy,
            shots_fired=run.shots_fired,
            shots_hit=run.shots_hit,
            elapsed_s=run.elapsed_s,
            shots_available=run.shots_available,
            active_effects=self.active.remaining(self.now_ms),
            message=self.message,
            respawning=run.respawning,
            game_over=run.game_over,
            name_prompt_open=run.name_prompt_open,
            leaderboard=self.leaderboard,
        )
