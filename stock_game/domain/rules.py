from __future__ import annotations

from typing import Tuple

from stock_game.domain.models import Direction, GuessOutcome, Score
from stock_game.ports.data_provider import Bar


def crosses_pause(bar: Bar, pause_price: float) -> bool:
    return bar.close > pause_price


def actual_direction(next_close: float, target_price: float) -> Direction:
    return Direction.UP if next_close > target_price else Direction.DOWN


def evaluate_guess(
        guess: Direction,
        next_bar: Bar,
        *,
        target_price: float,
        score: Score,
        index: int,
) -> Tuple[GuessOutcome, Score]:
    """
    Judge a guess against the bar that follows the paused one.

    Point value depends only on whether the next close clears the target,
    and is credited only for a correct guess. A correct "down" call
    therefore counts towards accuracy but earns no points.
    """
    actual = actual_direction(next_bar.close, target_price)
    is_correct = guess == actual

    point_value = 1 if next_bar.close > target_price else 0
    awarded = point_value if is_correct else 0

    new_score = Score(
        correct=score.correct + (1 if is_correct else 0),
        total=score.total + 1,
        points=score.points + awarded,
    )
    outcome = GuessOutcome(
        index=index,
        guess=guess,
        actual=actual,
        is_correct=is_correct,
        next_close=next_bar.close,
        next_date=next_bar.d,
        points_awarded=awarded,
    )
    return outcome, new_score
