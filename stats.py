"""
Win/loss/draw counters, kept in a key-value store.

The store is anything with get(key) and set(key, value) working on
strings: a dict-backed MemoryStore here, the Flask session in the web app.
"""

import json
import logging
import math
from dataclasses import dataclass, replace
from typing import Dict, Optional, Protocol, runtime_checkable

from board import GameStatus

log = logging.getLogger(__name__)

STATS_KEY = "tic-tac-toe-stats"


@runtime_checkable
class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


class StorageUnavailable(Exception):
    """Raised by a store that cannot be written to right now."""


@dataclass(frozen=True)
class Stats:
    player_wins: int = 0
    computer_wins: int = 0
    draws: int = 0
    games_played: int = 0

    @property
    def win_rate(self) -> int:
        """Percentage of games the player won, rounded half up."""
        if self.games_played <= 0:
            return 0
        return math.floor(self.player_wins / self.games_played * 100 + 0.5)

    def recorded(self, outcome: GameStatus) -> "Stats":
        if outcome is GameStatus.PLAYER_WINS:
            counted = replace(self, player_wins=self.player_wins + 1)
        elif outcome is GameStatus.OPPONENT_WINS:
            counted = replace(self, computer_wins=self.computer_wins + 1)
        elif outcome is GameStatus.DRAW:
            counted = replace(self, draws=self.draws + 1)
        else:
            raise ValueError(f"Cannot record an unfinished game ({outcome.value})")
        return replace(counted, games_played=self.games_played + 1)

    def to_dict(self) -> Dict[str, int]:
        return {
            "playerWins": self.player_wins,
            "computerWins": self.computer_wins,
            "draws": self.draws,
            "gamesPlayed": self.games_played,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Stats":
        return cls(
            player_wins=int(data.get("playerWins", 0)),
            computer_wins=int(data.get("computerWins", 0)),
            draws=int(data.get("draws", 0)),
            games_played=int(data.get("gamesPlayed", 0)),
        )


class MemoryStore:
    def __init__(self, data: Optional[dict] = None):
        self.data = dict(data or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class StatsStore:
    """Reads and updates the Stats record under a fixed key."""

    def __init__(self, storage: KeyValueStore, key: str = STATS_KEY):
        self.storage = storage
        self.key = key

    def load(self) -> Stats:
        raw = self.storage.get(self.key)
        if not raw:
            return Stats()
        try:
            data = json.loads(raw)
            return Stats.from_dict(data)
        except (ValueError, TypeError, AttributeError) as e:
            log.warning("Ignoring unreadable stats under %r: %s", self.key, e)
            return Stats()

    def save(self, stats: Stats):
        self.storage.set(self.key, json.dumps(stats.to_dict()))

    def record(self, outcome: GameStatus) -> Stats:
        """Count one finished game and persist the result."""
        stats = self.load().recorded(outcome)
        try:
            self.save(stats)
        except StorageUnavailable as e:
            log.error("Could not save stats: %s", e)
        return stats
