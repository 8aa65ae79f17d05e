from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Optional, Tuple

from stock_game.config.settings import SkinConfig
from stock_game.domain.models import Direction, GuessOutcome, Score
from stock_game.ports.data_provider import Bar
from stock_game.ports.game_observer import GameObserver
from stock_game.ports.sound import SoundCue, SoundSink

logger = logging.getLogger(__name__)

DEFAULT_INTENSITY = 0.5
MIN_TRACKING_INTENSITY = 0.3

ALL_CUES = ("waiting", "riding", "fallen", "missed", "success", "failure", "gameOver")


class PlayerState(str, Enum):
    WAITING = "waiting"
    RIDING = "riding"
    FALLEN = "fallen"
    MISSED = "missed"


@dataclass(frozen=True)
class SkinEvent:
    kind: str  # "mount" | "fall" | "miss" | "success"
    timestamp: float
    x: int  # bar index
    y: float  # price


@dataclass(frozen=True)
class AvatarState:
    player_state: PlayerState = PlayerState.WAITING
    ride_start_index: Optional[int] = None
    ride_end_index: Optional[int] = None
    events: Tuple[SkinEvent, ...] = field(default_factory=tuple)
    narrative: str = ""
    intensity: float = DEFAULT_INTENSITY  # 0..1, drives the dragon animation


class AvatarNarrator(GameObserver):
    """
    Rider-and-dragon decoration for the replay.

    Watches guesses and revealed bars, keeps the rider's state and the
    narrative line, and emits sound cues. It never touches the driver.
    """

    def __init__(
            self,
            skin: SkinConfig,
            *,
            sounds: Optional[SoundSink] = None,
            on_change: Optional[Callable[[AvatarState], None]] = None,
            clock: Callable[[], float] = time.time,
    ) -> None:
        self._skin = skin
        self._sounds = sounds
        self._on_change = on_change
        self._clock = clock

        self._state = AvatarState()
        self._prev_close: Optional[float] = None

    @property
    def state(self) -> AvatarState:
        return self._state

    # -------------------------
    # GameObserver hooks
    # -------------------------

    def on_guess_evaluated(self, outcome: GuessOutcome) -> None:
        target = self._fmt(self._skin.target_price)
        above = outcome.next_close > self._skin.target_price

        if outcome.guess is Direction.UP:
            if above:
                new_state = PlayerState.RIDING
                narrative = f"You successfully mounted Toruk Makto! The dragon soars above {target}!"
                self._cue("success", 0.6)
                self._cue("riding", 0.4, loop=True)
            else:
                new_state = PlayerState.FALLEN
                narrative = f"The dragon shakes you off mid-flight! You fall as the price stays below {target}."
                self._cue("fallen", 0.6)
        else:
            if not above:
                new_state = PlayerState.WAITING
                narrative = f"You smugly walk away as the dragon dips below {target}. Wise choice!"
                self._cue("success", 0.6)
            else:
                new_state = PlayerState.MISSED
                narrative = f"The dragon soars past {target} while you watch from below. You missed your chance!"

        if outcome.is_correct:
            kind = "mount" if outcome.guess is Direction.UP else "success"
        else:
            kind = "fall" if outcome.guess is Direction.UP else "miss"

        prev = self._state
        ride_start, ride_end = prev.ride_start_index, prev.ride_end_index
        if new_state is PlayerState.RIDING and prev.player_state is not PlayerState.RIDING:
            ride_start, ride_end = outcome.index, None
        elif new_state is not PlayerState.RIDING and prev.player_state is PlayerState.RIDING:
            ride_end = outcome.index
            self._stop("riding")

        intensity = min(1.0, abs(outcome.next_close - self._skin.pause_price) / 50.0) or DEFAULT_INTENSITY

        self._update(
            replace(
                prev,
                player_state=new_state,
                ride_start_index=ride_start,
                ride_end_index=ride_end,
                events=prev.events + (self._event(kind, outcome.index, outcome.next_close),),
                narrative=narrative,
                intensity=intensity,
            )
        )

    def on_bar_revealed(self, index: int, bar: Bar) -> None:
        prev_close = self._prev_close
        self._prev_close = bar.close
        state = self._state
        target = self._skin.target_price

        if state.player_state is PlayerState.RIDING and bar.close < target:
            self._stop("riding")
            self._update(
                replace(
                    state,
                    player_state=PlayerState.FALLEN,
                    ride_end_index=index,
                    narrative=f"The dragon dives below {self._fmt(target)}! You lose your grip and fall!",
                    events=state.events + (self._event("fall", index, bar.close),),
                )
            )
            return

        if (
                state.player_state is PlayerState.WAITING
                and prev_close is not None
                and prev_close < target < bar.close
        ):
            self._update(
                replace(
                    state,
                    player_state=PlayerState.MISSED,
                    narrative=f"The dragon soars above {self._fmt(target)} without you!",
                    events=state.events + (self._event("miss", index, bar.close),),
                )
            )
            return

        if prev_close is not None:
            intensity = max(MIN_TRACKING_INTENSITY, min(1.0, abs(bar.close - prev_close) / 10.0))
            if intensity != state.intensity:
                self._update(replace(state, intensity=intensity))

    def on_game_over(self, score: Score) -> None:
        self._stop("riding")
        self._cue("gameOver", 0.6)

    def on_reset(self) -> None:
        if self._sounds is not None:
            for name in ALL_CUES:
                self._sounds.stop(name)
        self._prev_close = None
        self._update(AvatarState())

    # -------------------------
    # Internal helpers
    # -------------------------

    def _fmt(self, price: float) -> str:
        return f"{self._skin.currency}{price:g}"

    def _event(self, kind: str, x: int, y: float) -> SkinEvent:
        return SkinEvent(kind=kind, timestamp=self._clock(), x=x, y=y)

    def _cue(self, name: str, volume: float, loop: bool = False) -> None:
        if self._sounds is not None:
            self._sounds.play(SoundCue(name=name, volume=volume, loop=loop))

    def _stop(self, name: str) -> None:
        if self._sounds is not None:
            self._sounds.stop(name)

    def _update(self, new_state: AvatarState) -> None:
        self._state = new_state
        logger.debug("avatar: %s (%.2f) %s", new_state.player_state.value, new_state.intensity, new_state.narrative)
        if self._on_change is not None:
            self._on_change(new_state)
