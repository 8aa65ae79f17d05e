from __future__ import annotations

from stock_game.domain.models import GuessOutcome, Mode, Score
from stock_game.ports.data_provider import Bar


class GameObserver:
    """Receives playback transitions. Every hook defaults to a no-op."""

    def on_mode_changed(self, old: Mode, new: Mode) -> None:
        return

    def on_bar_revealed(self, index: int, bar: Bar) -> None:
        return

    def on_guess_requested(self, index: int, bar: Bar) -> None:
        return

    def on_guess_evaluated(self, outcome: GuessOutcome) -> None:
        return

    def on_game_over(self, score: Score) -> None:
        return

    def on_reset(self) -> None:
        return
