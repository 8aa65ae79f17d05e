from __future__ import annotations

from datetime import date

import pytest

from stock_game.domain.models import Direction, Score, percent
from stock_game.domain.rules import actual_direction, crosses_pause, evaluate_guess
from stock_game.ports.data_provider import Bar


def _bar(close: float) -> Bar:
    return Bar(d=date(2024, 9, 2), open=close, high=close + 2, low=close - 2, close=close, volume=10.0)


def test_crosses_pause_is_strict() -> None:
    assert crosses_pause(_bar(390.01), 390.0)
    assert not crosses_pause(_bar(390.0), 390.0)
    assert not crosses_pause(_bar(250.0), 390.0)


def test_actual_direction_at_target_is_down() -> None:
    assert actual_direction(400.0, 400.0) is Direction.DOWN
    assert actual_direction(400.5, 400.0) is Direction.UP


@pytest.mark.parametrize(
    "guess, next_close, correct, points",
    [
        (Direction.UP, 405.0, True, 1),
        (Direction.DOWN, 405.0, False, 0),
        (Direction.DOWN, 400.0, True, 0),
        (Direction.UP, 399.0, False, 0),
    ],
)
def test_evaluate_guess(guess, next_close, correct, points) -> None:
    start = Score(correct=2, total=3, points=1)
    outcome, score = evaluate_guess(guess, _bar(next_close), target_price=400.0, score=start, index=7)

    assert outcome.is_correct is correct
    assert outcome.points_awarded == points
    assert outcome.next_close == next_close
    assert outcome.next_date == date(2024, 9, 2)
    assert outcome.index == 7
    assert score.total == 4
    assert score.correct == 2 + (1 if correct else 0)
    assert score.points == 1 + points


def test_evaluate_guess_does_not_mutate_input_score() -> None:
    start = Score()
    evaluate_guess(Direction.UP, _bar(450.0), target_price=400.0, score=start, index=0)
    assert start == Score(0, 0, 0)


def test_percent_rounds_half_up() -> None:
    assert percent(0, 0) == 0
    assert percent(1, 8) == 13  # 12.5
    assert percent(1, 3) == 33
    assert percent(2, 3) == 67
    assert Score(correct=1, total=2).accuracy_pct == 50
