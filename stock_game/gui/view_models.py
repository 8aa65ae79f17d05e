from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from stock_game.domain.models import Direction, GameSnapshot, GuessOutcome, Mode, percent


@dataclass(frozen=True)
class ControlsState:
    can_start: bool
    can_pause: bool
    can_reset: bool = True


@dataclass(frozen=True)
class StatsView:
    score_text: str
    score_pct: str
    day_text: str
    day_pct: str


def stats_view(snap: GameSnapshot) -> StatsView:
    day = snap.current_index + 1 if snap.series_length else 0
    return StatsView(
        score_text=f"{snap.score.correct} / {snap.score.total}",
        score_pct=f"{snap.score.accuracy_pct}%",
        day_text=f"{day} / {snap.series_length}",
        day_pct=f"{percent(day, snap.series_length)}%",
    )


def controls_state(mode: Mode) -> ControlsState:
    return ControlsState(
        can_start=mode in (Mode.IDLE, Mode.PAUSED, Mode.PAUSED_AT_END),
        can_pause=mode is Mode.RUNNING,
    )


def status_text(mode: Mode) -> str:
    return {
        Mode.IDLE: "Press Start to replay the series.",
        Mode.RUNNING: "Replaying...",
        Mode.PAUSED: "Paused.",
        Mode.PAUSED_FOR_GUESS: "Waiting for your prediction.",
        Mode.PAUSED_AT_END: "End of series.",
    }[mode]


def side_label(direction: Direction, target_price: float, currency: str = "") -> str:
    side = "Above" if direction is Direction.UP else "Below"
    return f"{side} {currency}{target_price:g}"


def outcome_lines(outcome: GuessOutcome, target_price: float, currency: str = "") -> Tuple[str, ...]:
    return (
        f"You guessed: {side_label(outcome.guess, target_price, currency)}",
        f"Actual next day close: {outcome.next_close:.2f} ({outcome.next_date.isoformat()})",
        f"Result: {side_label(outcome.actual, target_price, currency)}",
        f"Points earned: {outcome.points_awarded}",
    )


def y_domain(closes: Iterable[float], *refs: float) -> Optional[Tuple[int, int]]:
    """Chart y-range: 5% padding under the lowest and over the highest value, whole numbers."""
    values = [float(v) for v in closes] + [float(r) for r in refs]
    if not values:
        return None
    lo = int(math.floor(min(values) * 0.95))
    hi = int(math.ceil(max(values) * 1.05))
    if hi <= lo:
        hi = lo + 1
    return lo, hi
