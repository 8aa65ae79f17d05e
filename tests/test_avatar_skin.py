from __future__ import annotations

from datetime import date
from typing import List

import pytest

from stock_game.adapters.manual_scheduler import ManualScheduler
from stock_game.app.avatar_skin import AvatarNarrator, PlayerState
from stock_game.config.settings import AVATAR_SKIN
from stock_game.domain.models import Direction, GuessOutcome, Mode, Score
from stock_game.domain.playback import PlaybackDriver
from stock_game.ports.data_provider import Bar
from stock_game.ports.sound import SoundCue, SoundSink


class RecordingSink(SoundSink):
    def __init__(self) -> None:
        self.played: List[SoundCue] = []
        self.stopped: List[str] = []

    def play(self, cue: SoundCue) -> None:
        self.played.append(cue)

    def stop(self, name: str) -> None:
        self.stopped.append(name)

    def stop_all(self) -> None:
        self.stopped.append("*")


def _outcome(guess: Direction, next_close: float, index: int = 3) -> GuessOutcome:
    actual = Direction.UP if next_close > AVATAR_SKIN.target_price else Direction.DOWN
    correct = guess is actual
    return GuessOutcome(
        index=index,
        guess=guess,
        actual=actual,
        is_correct=correct,
        next_close=next_close,
        next_date=date(2024, 8, 12),
        points_awarded=1 if correct and next_close > AVATAR_SKIN.target_price else 0,
    )


def _bar(close: float) -> Bar:
    return Bar(d=date(2024, 8, 12), open=close, high=close + 1, low=close - 1, close=close, volume=1.0)


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def narrator(sink) -> AvatarNarrator:
    return AvatarNarrator(AVATAR_SKIN, sounds=sink, clock=lambda: 1_000.0)


def test_successful_mount(narrator, sink) -> None:
    narrator.on_guess_evaluated(_outcome(Direction.UP, 405.0))

    st = narrator.state
    assert st.player_state is PlayerState.RIDING
    assert st.ride_start_index == 3
    assert st.ride_end_index is None
    assert "mounted Toruk Makto" in st.narrative
    assert "₹400" in st.narrative
    assert st.intensity == pytest.approx(0.3)
    assert [e.kind for e in st.events] == ["mount"]
    assert st.events[0].timestamp == 1_000.0
    assert [(c.name, c.loop) for c in sink.played] == [("success", False), ("riding", True)]


def test_wrong_up_guess_falls(narrator, sink) -> None:
    narrator.on_guess_evaluated(_outcome(Direction.UP, 395.0))

    assert narrator.state.player_state is PlayerState.FALLEN
    assert narrator.state.events[-1].kind == "fall"
    assert [c.name for c in sink.played] == ["fallen"]


def test_correct_down_guess_walks_away(narrator) -> None:
    narrator.on_guess_evaluated(_outcome(Direction.DOWN, 390.0))

    st = narrator.state
    assert st.player_state is PlayerState.WAITING
    assert st.events[-1].kind == "success"
    assert st.intensity == 0.5  # close equal to the pause line


def test_wrong_down_guess_misses(narrator, sink) -> None:
    narrator.on_guess_evaluated(_outcome(Direction.DOWN, 420.0))

    assert narrator.state.player_state is PlayerState.MISSED
    assert narrator.state.events[-1].kind == "miss"
    assert sink.played == []


def test_rider_falls_when_price_drops_below_target(narrator, sink) -> None:
    narrator.on_guess_evaluated(_outcome(Direction.UP, 405.0, index=3))
    narrator.on_bar_revealed(4, _bar(405.0))
    narrator.on_bar_revealed(5, _bar(398.0))

    st = narrator.state
    assert st.player_state is PlayerState.FALLEN
    assert st.ride_start_index == 3
    assert st.ride_end_index == 5
    assert "riding" in sink.stopped


def test_waiting_rider_misses_upward_cross(narrator) -> None:
    narrator.on_bar_revealed(0, _bar(395.0))
    narrator.on_bar_revealed(1, _bar(401.0))

    assert narrator.state.player_state is PlayerState.MISSED
    assert narrator.state.events[-1].kind == "miss"


def test_intensity_follows_price_moves(narrator) -> None:
    narrator.on_bar_revealed(0, _bar(300.0))
    narrator.on_bar_revealed(1, _bar(305.0))
    assert narrator.state.intensity == pytest.approx(0.5)

    narrator.on_bar_revealed(2, _bar(305.5))
    assert narrator.state.intensity == pytest.approx(0.3)

    narrator.on_bar_revealed(3, _bar(340.0))
    assert narrator.state.intensity == 1.0


def test_game_over_and_reset(narrator, sink) -> None:
    narrator.on_guess_evaluated(_outcome(Direction.UP, 405.0))
    narrator.on_game_over(Score(correct=1, total=1, points=1))
    assert sink.played[-1].name == "gameOver"

    narrator.on_reset()
    assert narrator.state.player_state is PlayerState.WAITING
    assert narrator.state.events == ()
    assert "riding" in sink.stopped


def test_on_change_callback() -> None:
    seen = []
    narrator = AvatarNarrator(AVATAR_SKIN, on_change=seen.append)
    narrator.on_guess_evaluated(_outcome(Direction.UP, 405.0))
    assert seen and seen[-1].player_state is PlayerState.RIDING


def test_narrator_does_not_change_game_results(series_factory) -> None:
    closes = [380.0, 395.0, 405.0, 410.0, 399.0]

    def play(with_narrator: bool):
        sched = ManualScheduler()
        driver = PlaybackDriver(
            series_factory(closes),
            sched,
            pause_price=AVATAR_SKIN.pause_price,
            target_price=AVATAR_SKIN.target_price,
        )
        if with_narrator:
            driver.add_observer(AvatarNarrator(AVATAR_SKIN, sounds=RecordingSink()))
        driver.start()
        while driver.mode is not Mode.PAUSED_AT_END:
            sched.run_until_idle()
            if driver.awaiting_guess:
                driver.guess(Direction.UP)
                driver.continue_playback()
        return driver.score, driver.current_index

    assert play(True) == play(False)
