from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional, Tuple

from stock_game.ports.data_provider import Bar


class Mode(str, Enum):
    IDLE = "IDLE"
    RUNNING = "RUNNING"
    PAUSED = "PAUSED"  # manual pause
    PAUSED_FOR_GUESS = "PAUSED_FOR_GUESS"
    PAUSED_AT_END = "PAUSED_AT_END"


class Direction(str, Enum):
    UP = "up"
    DOWN = "down"


def percent(part: int, whole: int) -> int:
    """Whole-number percentage, halves rounded up; 0 when whole is 0."""
    if whole <= 0:
        return 0
    return int(math.floor(part * 100.0 / whole + 0.5))


@dataclass(frozen=True)
class Score:
    correct: int = 0
    total: int = 0
    points: int = 0

    @property
    def accuracy_pct(self) -> int:
        return percent(self.correct, self.total)


@dataclass(frozen=True)
class GuessOutcome:
    index: int  # cursor at the time of the guess
    guess: Direction
    actual: Direction
    is_correct: bool
    next_close: float
    next_date: date
    points_awarded: int


@dataclass(frozen=True)
class GameSnapshot:
    mode: Mode
    current_index: int
    visible_window: Tuple[Bar, ...]
    series_length: int
    score: Score
    last_outcome: Optional[GuessOutcome]
    pause_price: float
    target_price: float

    @property
    def current_bar(self) -> Optional[Bar]:
        return self.visible_window[-1] if self.visible_window else None
