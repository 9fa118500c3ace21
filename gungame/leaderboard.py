"""
Top-10 leaderboard persistence (JSON file or in-memory)
"""

from __future__ import annotations

import json
import logging
import os
from typing import Iterable, List, Optional, Sequence, Tuple

from .configs.game_config import LEADERBOARD_SIZE
from .entities import LeaderboardEntry

logger = logging.getLogger(__name__)


def qualifies(board: Sequence[LeaderboardEntry], score: int, size: int = LEADERBOARD_SIZE) -> bool:
    """A score makes the board if there is room or it beats the lowest entry"""
    if len(board) < size:
        return True
    return score > board[-1].score


def merge(board: Iterable[LeaderboardEntry], entry: LeaderboardEntry,
          size: int = LEADERBOARD_SIZE) -> Tuple[LeaderboardEntry, ...]:
    """Insert, sort descending by score (stable for ties), keep the top `size`"""
    merged = sorted([*board, entry], key=lambda e: e.score, reverse=True)
    return tuple(merged[:size])


class LeaderboardStore:
    """
    Keeps the ordered top entries and writes them to `path` after every change.

    With path=None the board only lives in memory.
    """

    def __init__(self, path: Optional[str] = None, size: int = LEADERBOARD_SIZE):
        self.path = path
        self.size = size
        self._entries: Tuple[LeaderboardEntry, ...] = ()
        self.load()

    @property
    def entries(self) -> Tuple[LeaderboardEntry, ...]:
        return self._entries

    def load(self) -> Tuple[LeaderboardEntry, ...]:
        """Read the persisted board; anything unreadable loads as empty"""
        if self.path is None or not os.path.exists(self.path):
            return self._entries
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
            entries: List[LeaderboardEntry] = [LeaderboardEntry.from_dict(d) for d in raw]
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning("Ignoring unreadable leaderboard %s: %s", self.path, e)
            self._entries = ()
            return self._entries

        entries.sort(key=lambda e: e.score, reverse=True)
        self._entries = tuple(entries[:self.size])
        return self._entries

    def submit(self, entry: LeaderboardEntry) -> Tuple[LeaderboardEntry, ...]:
        self._entries = merge(self._entries, entry, self.size)
        self._save()
        logger.info("Leaderboard entry %s (%d) saved", entry.name, entry.score)
        return self._entries

    def _save(self):
        if self.path is None:
            return
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump([e.to_dict() for e in self._entries], f, indent=2)
