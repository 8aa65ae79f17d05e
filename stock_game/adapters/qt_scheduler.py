from __future__ import annotations

from typing import Callable, Optional

from PySide6.QtCore import QObject, QTimer

from stock_game.ports.scheduler import ScheduledCall, Scheduler


class _QtCall(ScheduledCall):
    def __init__(self, timer: QTimer) -> None:
        self._timer: Optional[QTimer] = timer

    def cancel(self) -> None:
        if self._timer is None:
            return
        self._timer.stop()
        self._timer.deleteLater()
        self._timer = None

    @property
    def active(self) -> bool:
        return self._timer is not None and self._timer.isActive()

    def _fired(self) -> None:
        if self._timer is not None:
            self._timer.deleteLater()
            self._timer = None


class QtScheduler(Scheduler):
    """Single-shot QTimer per call, parented to the owning widget so it dies with it."""

    def __init__(self, parent: QObject | None = None) -> None:
        self._parent = parent

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> ScheduledCall:
        timer = QTimer(self._parent)
        timer.setSingleShot(True)
        timer.setInterval(max(0, int(delay_ms)))
        call = _QtCall(timer)

        def _run() -> None:
            call._fired()
            callback()

        timer.timeout.connect(_run)
        timer.start()
        return call
