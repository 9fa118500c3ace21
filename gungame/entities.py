"""
Game entity dataclasses
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class CircleCategory(str, Enum):
    LARGE = "large"
    MEDIUM = "medium"
    SMALL = "small"


class PowerUpType(str, Enum):
    SHOTGUN = "shotgun"
    POINTS100 = "points100"
    BOUNCE = "bounce"
    INVINCIBILITY = "invincibility"
    NUKE = "nuke"
    EXTRA_LIFE = "extraLife"


@dataclass(frozen=True)
class Bounds:
    """Playfield rectangle, origin top-left"""
    width: float
    height: float

    @property
    def valid(self) -> bool:
        return self.width > 0 and self.height > 0

    @property
    def center(self):
        return self.width / 2, self.height / 2


@dataclass
class Circle:
    """Drifting target that splits when destroyed"""
    x: float
    y: float
    dx: float
    dy: float
    size: float
    category: CircleCategory
    points: int
    color: str
    is_special: bool = False
    special_start_ms: Optional[int] = None
    special_duration_ms: int = 5000


@dataclass
class Projectile:
    """Player shot"""
    id: int
    x: float
    y: float
    dx: float
    dy: float
    size: float = 6.0


@dataclass
class PowerUp:
    """Collectible lying in the playfield"""
    id: int
    x: float
    y: float
    kind: PowerUpType
    spawn_ms: int
    duration_ms: int = 10_000
    just_dropped: bool = True


@dataclass
class ActivePowerUp:
    """Timed effect in force on the player"""
    kind: PowerUpType
    start_ms: int
    duration_ms: int

    def remaining_s(self, now_ms: int) -> int:
        left = self.duration_ms - (now_ms - self.start_ms)
        return max(0, -(-left // 1000))


@dataclass
class PlayerRunState:
    """Everything about the current run that is not an entity"""
    lives: int = 3
    immune: bool = False
    visible: bool = True
    respawning: bool = False
    game_over: bool = False
    level: int = 1
    score: int = 0
    shots_fired: int = 0
    shots_hit: int = 0
    shots_available: int = 5
    start_ms: Optional[int] = None
    elapsed_s: int = 0
    suppress_clear_bonus: bool = False
    name_prompt_open: bool = False

    @property
    def accuracy(self) -> float:
        """Hit percentage, one decimal"""
        if self.shots_fired <= 0:
            return 0.0
        return round(self.shots_hit / self.shots_fired * 100, 1)


@dataclass(frozen=True)
class LevelCleared:
    """Result of a level transition"""
    level: int
    bonus_awarded: bool
    nuked: bool = False


@dataclass
class LeaderboardEntry:
    name: str
    score: int
    accuracy: float
    time: int  # seconds
    level: int
    date: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "score": self.score,
            "accuracy": self.accuracy,
            "time": self.time,
            "level": self.level,
            "date": self.date,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LeaderboardEntry":
        return cls(
            name=str(data["name"]),
            score=int(data["score"]),
            accuracy=float(data.get("accuracy", 0.0)),
            time=int(data.get("time", 0)),
            level=int(data.get("level", 1)),
            date=str(data.get("date", "")),
        )


@dataclass
class IdSequence:
    """Monotonic id source, reset per run"""
    next_id: int = 0

    def __call__(self) -> int:
        value = self.next_id
        self.next_id += 1
        return value
