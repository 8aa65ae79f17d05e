from __future__ import annotations

from datetime import date

from stock_game.domain.models import Direction, GameSnapshot, GuessOutcome, Mode, Score
from stock_game.gui.view_models import controls_state, outcome_lines, side_label, stats_view, status_text, y_domain


def _snap(index: int, length: int, score: Score = Score()) -> GameSnapshot:
    return GameSnapshot(
        mode=Mode.RUNNING,
        current_index=index,
        visible_window=(),
        series_length=length,
        score=score,
        last_outcome=None,
        pause_price=390.0,
        target_price=400.0,
    )


def test_stats_view() -> None:
    view = stats_view(_snap(4, 8, Score(correct=1, total=3, points=1)))
    assert view.score_text == "1 / 3"
    assert view.score_pct == "33%"
    assert view.day_text == "5 / 8"
    assert view.day_pct == "63%"


def test_stats_view_empty_series() -> None:
    view = stats_view(_snap(0, 0))
    assert view.day_text == "0 / 0"
    assert view.day_pct == "0%"
    assert view.score_pct == "0%"


def test_controls_per_mode() -> None:
    assert controls_state(Mode.IDLE).can_start
    assert not controls_state(Mode.IDLE).can_pause
    assert controls_state(Mode.RUNNING).can_pause
    assert not controls_state(Mode.RUNNING).can_start
    assert not controls_state(Mode.PAUSED_FOR_GUESS).can_start
    assert not controls_state(Mode.PAUSED_FOR_GUESS).can_pause
    assert controls_state(Mode.PAUSED_AT_END).can_start
    assert all(controls_state(m).can_reset for m in Mode)


def test_every_mode_has_status_text() -> None:
    assert len({status_text(m) for m in Mode}) == len(Mode)
    assert status_text(Mode.PAUSED_AT_END) == "End of series."


def test_outcome_lines() -> None:
    outcome = GuessOutcome(
        index=2,
        guess=Direction.UP,
        actual=Direction.DOWN,
        is_correct=False,
        next_close=398.5,
        next_date=date(2024, 8, 12),
        points_awarded=0,
    )
    assert side_label(Direction.UP, 400.0, "₹") == "Above ₹400"
    assert outcome_lines(outcome, 400.0) == (
        "You guessed: Above 400",
        "Actual next day close: 398.50 (2024-08-12)",
        "Result: Below 400",
        "Points earned: 0",
    )


def test_y_domain_pads_and_includes_reference_lines() -> None:
    assert y_domain([]) is None

    lo, hi = y_domain([380.0, 395.0], 390.0, 400.0)
    assert 360 <= lo <= 361
    assert 420 <= hi <= 421

    lo, hi = y_domain([0.0])
    assert (lo, hi) == (0, 1)
