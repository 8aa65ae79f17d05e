from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from stock_game.domain.errors import InvariantViolation
from stock_game.domain.models import Direction, GameSnapshot, GuessOutcome, Mode, Score
from stock_game.domain.rules import crosses_pause, evaluate_guess
from stock_game.ports.data_provider import Bar
from stock_game.ports.game_observer import GameObserver
from stock_game.ports.scheduler import ScheduledCall, Scheduler

logger = logging.getLogger(__name__)


class PlaybackDriver:
    """
    Replays a series one bar per tick and stops for a prediction whenever a
    revealed close is above the pause price.

    Modes:
      IDLE -> RUNNING            start()
      RUNNING -> PAUSED          pause()
      PAUSED -> RUNNING          start()
      RUNNING -> PAUSED_FOR_GUESS   tick: close > pause_price
      PAUSED_FOR_GUESS -> RUNNING   guess() then continue_playback()
      RUNNING -> PAUSED_AT_END   tick: last bar revealed
      any -> IDLE                reset()

    The driver owns at most one scheduled tick. Every transition out of
    RUNNING cancels it, and a tick carrying an old generation is dropped.
    """

    def __init__(
            self,
            series: Sequence[Bar],
            scheduler: Scheduler,
            *,
            pause_price: float,
            target_price: float,
            interval_ms: int = 300,
    ) -> None:
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")

        self._series: Tuple[Bar, ...] = tuple(series)
        self._scheduler = scheduler
        self._pause_price = float(pause_price)
        self._target_price = float(target_price)
        self._interval_ms = int(interval_ms)

        self._observers: List[GameObserver] = []

        self._pending: Optional[ScheduledCall] = None
        self._generation = 0

        self._mode = Mode.IDLE
        self._current_index = 0
        self._visible: List[Bar] = []
        self._score = Score()
        self._last_outcome: Optional[GuessOutcome] = None

    # -------------------------
    # Read model
    # -------------------------

    @property
    def series(self) -> Tuple[Bar, ...]:
        return self._series

    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def visible_window(self) -> Tuple[Bar, ...]:
        return tuple(self._visible)

    @property
    def score(self) -> Score:
        return self._score

    @property
    def last_outcome(self) -> Optional[GuessOutcome]:
        return self._last_outcome

    @property
    def pause_price(self) -> float:
        return self._pause_price

    @property
    def target_price(self) -> float:
        return self._target_price

    @property
    def awaiting_guess(self) -> bool:
        return self._mode is Mode.PAUSED_FOR_GUESS and not self._guess_taken()

    @property
    def has_pending_tick(self) -> bool:
        return self._pending is not None and self._pending.active

    def snapshot(self) -> GameSnapshot:
        return GameSnapshot(
            mode=self._mode,
            current_index=self._current_index,
            visible_window=tuple(self._visible),
            series_length=len(self._series),
            score=self._score,
            last_outcome=self._last_outcome,
            pause_price=self._pause_price,
            target_price=self._target_price,
        )

    def add_observer(self, observer: GameObserver) -> None:
        if observer not in self._observers:
            self._observers.append(observer)

    def remove_observer(self, observer: GameObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    # -------------------------
    # Commands
    # -------------------------

    def start(self) -> bool:
        """Begin or resume playback. Returns True when a tick is scheduled."""
        if self._mode is Mode.RUNNING:
            return False
        if self._mode is Mode.PAUSED_FOR_GUESS:
            raise InvariantViolation("cannot start while a guess is pending")
        if self._mode is Mode.PAUSED_AT_END:
            self.reset()

        if not self._series:
            logger.warning("start() on an empty series; nothing to replay")
            self._set_mode(Mode.PAUSED_AT_END)
            self._emit_game_over()
            return False

        self._set_mode(Mode.RUNNING)
        self._schedule_tick()
        return True

    def pause(self) -> bool:
        if self._mode is not Mode.RUNNING:
            return False
        self._cancel_tick()
        self._set_mode(Mode.PAUSED)
        return True

    def reset(self) -> None:
        self._cancel_tick()
        old = self._mode

        self._mode = Mode.IDLE
        self._current_index = 0
        self._visible = []
        self._score = Score()
        self._last_outcome = None

        logger.debug("reset from %s", old.value)
        for obs in list(self._observers):
            obs.on_reset()
        if old is not Mode.IDLE:
            for obs in list(self._observers):
                obs.on_mode_changed(old, Mode.IDLE)

    def guess(self, direction: Direction) -> GuessOutcome:
        if self._mode is not Mode.PAUSED_FOR_GUESS:
            raise InvariantViolation(f"guess() requires PAUSED_FOR_GUESS, mode is {self._mode.value}")
        if self._guess_taken():
            raise InvariantViolation(f"a guess was already made at index {self._current_index}")
        if self._current_index >= len(self._series) - 1:
            raise InvariantViolation(f"no bar after index {self._current_index}")
        try:
            direction = Direction(direction)
        except ValueError:
            raise InvariantViolation(f"unknown direction {direction!r}") from None

        next_bar = self._series[self._current_index + 1]
        outcome, self._score = evaluate_guess(
            direction,
            next_bar,
            target_price=self._target_price,
            score=self._score,
            index=self._current_index,
        )
        self._last_outcome = outcome

        logger.info(
            "guess %s at %s: next close %.2f -> %s (score %d/%d, %d pts)",
            outcome.guess.value,
            self._series[self._current_index].d.isoformat(),
            outcome.next_close,
            "correct" if outcome.is_correct else "wrong",
            self._score.correct,
            self._score.total,
            self._score.points,
        )
        for obs in list(self._observers):
            obs.on_guess_evaluated(outcome)
        return outcome

    def continue_playback(self) -> None:
        """Step past the bar that was just judged and resume ticking."""
        if self._mode is not Mode.PAUSED_FOR_GUESS:
            raise InvariantViolation(f"continue_playback() requires PAUSED_FOR_GUESS, mode is {self._mode.value}")
        if not self._guess_taken():
            raise InvariantViolation("continue_playback() before a guess was made")

        # The bar at the new index is revealed, and gated, by the next tick.
        self._current_index += 1
        self._set_mode(Mode.RUNNING)
        self._schedule_tick()

    # -------------------------
    # Tick
    # -------------------------

    def _on_tick(self, generation: int) -> None:
        if generation != self._generation or self._mode is not Mode.RUNNING:
            logger.debug("dropping stale tick (gen %d, current %d)", generation, self._generation)
            return
        self._pending = None

        n = len(self._series)
        idx = self._current_index
        if idx >= n:
            return

        bar = self._series[idx]
        self._visible.append(bar)
        for obs in list(self._observers):
            obs.on_bar_revealed(idx, bar)

        if idx == n - 1:
            self._set_mode(Mode.PAUSED_AT_END)
            self._emit_game_over()
            return

        if crosses_pause(bar, self._pause_price):
            self._set_mode(Mode.PAUSED_FOR_GUESS)
            for obs in list(self._observers):
                obs.on_guess_requested(idx, bar)
            return

        self._current_index += 1
        self._schedule_tick()

    # -------------------------
    # Internal helpers
    # -------------------------

    def _guess_taken(self) -> bool:
        return self._last_outcome is not None and self._last_outcome.index == self._current_index

    def _schedule_tick(self) -> None:
        self._cancel_tick()
        gen = self._generation
        self._pending = self._scheduler.call_later(self._interval_ms, lambda: self._on_tick(gen))

    def _cancel_tick(self) -> None:
        self._generation += 1
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _set_mode(self, new: Mode) -> None:
        old = self._mode
        if old is new:
            return
        if new is not Mode.RUNNING:
            self._cancel_tick()
        self._mode = new
        logger.debug("mode %s -> %s at index %d", old.value, new.value, self._current_index)
        for obs in list(self._observers):
            obs.on_mode_changed(old, new)

    def _emit_game_over(self) -> None:
        logger.info(
            "game over: %d/%d correct, %d points",
            self._score.correct,
            self._score.total,
            self._score.points,
        )
        for obs in list(self._observers):
            obs.on_game_over(self._score)
