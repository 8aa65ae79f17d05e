from __future__ import annotations

import logging

from PySide6.QtCore import QObject, QThread, QTimer, Signal
from PySide6.QtWidgets import (
    QCheckBox,
    QGraphicsBlurEffect,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from stock_game.adapters.qt_scheduler import QtScheduler
from stock_game.app.avatar_skin import AvatarNarrator, AvatarState
from stock_game.app.dto import LoadSeriesRequest, LoadSeriesResponse
from stock_game.app.services import AppServices
from stock_game.domain.models import GuessOutcome, Mode, Score
from stock_game.domain.playback import PlaybackDriver
from stock_game.gui.avatar_overlay import AvatarOverlay
from stock_game.gui.game_dialogs import GameOverDialog, GuessDialog, ResultDialog
from stock_game.gui.price_chart_widget import PriceChartWidget
from stock_game.gui.sound import QtSoundSink
from stock_game.gui.view_models import controls_state, stats_view, status_text
from stock_game.ports.data_provider import Bar
from stock_game.ports.game_observer import GameObserver

logger = logging.getLogger(__name__)


class _LoadWorker(QObject):
    finished = Signal(object)  # LoadSeriesResponse
    failed = Signal(str)

    def __init__(self, services: AppServices, req: LoadSeriesRequest) -> None:
        super().__init__()
        self._services = services
        self._req = req

    def run(self) -> None:
        try:
            resp = self._services.load_series.execute(self._req)
            self.finished.emit(resp)
        except Exception as e:
            logger.exception("Series load failed")
            self.failed.emit(str(e))


class _WindowObserver(GameObserver):
    """Forwards driver notifications to the window."""

    def __init__(self, window: "GameWindow") -> None:
        self._window = window

    def on_mode_changed(self, old: Mode, new: Mode) -> None:
        self._window.refresh()

    def on_bar_revealed(self, index: int, bar: Bar) -> None:
        self._window.refresh_chart()

    def on_guess_requested(self, index: int, bar: Bar) -> None:
        # Let the tick return before opening a nested event loop.
        QTimer.singleShot(0, self._window.ask_for_guess)

    def on_guess_evaluated(self, outcome: GuessOutcome) -> None:
        self._window.refresh()

    def on_game_over(self, score: Score) -> None:
        QTimer.singleShot(0, self._window.show_game_over)

    def on_reset(self) -> None:
        self._window.refresh_chart()
        self._window.refresh()


class GameWindow(QMainWindow):
    def __init__(self, services: AppServices) -> None:
        super().__init__()
        self._services = services
        self._settings = services.settings
        self._skin = services.settings.skin

        self._thread: QThread | None = None
        self._worker: _LoadWorker | None = None

        self._driver: PlaybackDriver | None = None
        self._narrator: AvatarNarrator | None = None
        self._series_note = ""

        self._modal_overlay: QWidget | None = None
        self._blur_effect: QGraphicsBlurEffect | None = None

        self._sounds = QtSoundSink(self._settings.sound_dir, services.preferences, parent=self)

        self.setWindowTitle(self._skin.title)

        root = QWidget()
        self.setCentralWidget(root)

        title = QLabel(self._skin.title)
        title.setStyleSheet("font-size: 20px; font-weight: 600;")

        self._sound_toggle = QCheckBox("Sound")
        self._sound_toggle.setChecked(self._sounds.enabled)
        self._sound_toggle.toggled.connect(self._sounds.set_enabled)

        header = QHBoxLayout()
        header.addWidget(title)
        header.addStretch(1)
        header.addWidget(self._sound_toggle)

        # Stats
        self._score_value = QLabel("0 / 0")
        self._score_pct = QLabel("0%")
        self._day_value = QLabel("0 / 0")
        self._day_pct = QLabel("0%")

        stats = QHBoxLayout()
        stats.addWidget(self._stat_box("Score", self._score_value, self._score_pct))
        stats.addWidget(self._stat_box("Day", self._day_value, self._day_pct))
        stats.addStretch(1)

        self._overlay: AvatarOverlay | None = AvatarOverlay() if self._skin.narrated else None
        self._chart = PriceChartWidget(self._skin.pause_price, self._skin.target_price)

        # Controls
        self._start_btn = QPushButton("▶ Start")
        self._start_btn.clicked.connect(self._on_start)
        self._pause_btn = QPushButton("⏸ Pause")
        self._pause_btn.clicked.connect(self._on_pause)
        self._reset_btn = QPushButton("⟳ Reset")
        self._reset_btn.clicked.connect(self._on_reset)

        controls = QHBoxLayout()
        controls.addStretch(1)
        controls.addWidget(self._start_btn)
        controls.addWidget(self._pause_btn)
        controls.addWidget(self._reset_btn)
        controls.addStretch(1)

        self._status = QLabel("Loading series...")

        layout = QVBoxLayout(root)
        layout.addLayout(header)
        layout.addLayout(stats)
        if self._overlay is not None:
            layout.addWidget(self._overlay)
        layout.addWidget(self._chart, 1)
        layout.addLayout(controls)
        layout.addWidget(self._status)

        self._set_controls_enabled(False)
        self._load_series()

    @staticmethod
    def _stat_box(label: str, value: QLabel, pct: QLabel) -> QWidget:
        box = QWidget()
        box.setStyleSheet("background: #1f1f1f; border-radius: 6px;")
        v = QVBoxLayout(box)
        caption = QLabel(label)
        caption.setStyleSheet("color: #aaa;")
        value.setStyleSheet("font-size: 18px; font-weight: 600;")
        pct.setStyleSheet("color: #8884d8;")
        v.addWidget(caption)
        v.addWidget(value)
        v.addWidget(pct)
        return box

    # -------------------------
    # Series loading
    # -------------------------

    def _load_series(self) -> None:
        req = LoadSeriesRequest(symbol=self._settings.symbol, start=self._settings.start_date)

        self._thread = QThread(self)
        self._worker = _LoadWorker(self._services, req)
        self._worker.moveToThread(self._thread)

        self._thread.started.connect(self._worker.run)
        self._worker.finished.connect(self._on_load_done)
        self._worker.failed.connect(self._on_load_failed)

        self._worker.finished.connect(self._worker.deleteLater)
        self._worker.failed.connect(self._worker.deleteLater)
        self._thread.finished.connect(self._thread.deleteLater)

        self._thread.start()

    def _on_load_done(self, resp: LoadSeriesResponse) -> None:
        self._cleanup_load_thread()

        driver = PlaybackDriver(
            resp.bars,
            QtScheduler(self),
            pause_price=self._skin.pause_price,
            target_price=self._skin.target_price,
            interval_ms=self._settings.playback_interval_ms,
        )
        driver.add_observer(_WindowObserver(self))
        if self._skin.narrated:
            self._narrator = AvatarNarrator(self._skin, sounds=self._sounds, on_change=self._on_avatar_changed)
            driver.add_observer(self._narrator)
        self._driver = driver

        if resp.used_fallback:
            self._series_note = f" [bundled data: {resp.fallback_reason}]"
        else:
            self._series_note = ""
        self.refresh()

    def _on_load_failed(self, msg: str) -> None:
        self._cleanup_load_thread()
        self._status.setText(f"Could not load a series: {msg}")
        QMessageBox.critical(self, "No data", f"Could not load a series for {self._settings.symbol}.\n\n{msg}")

    def _cleanup_load_thread(self) -> None:
        if self._thread is None:
            return
        self._thread.quit()
        self._thread.wait()
        self._thread = None
        self._worker = None

    # -------------------------
    # Rendering
    # -------------------------

    def refresh(self) -> None:
        if self._driver is None:
            return
        snap = self._driver.snapshot()

        view = stats_view(snap)
        self._score_value.setText(view.score_text)
        self._score_pct.setText(view.score_pct)
        self._day_value.setText(view.day_text)
        self._day_pct.setText(view.day_pct)

        ctl = controls_state(snap.mode)
        self._start_btn.setEnabled(ctl.can_start)
        self._pause_btn.setEnabled(ctl.can_pause)
        self._reset_btn.setEnabled(ctl.can_reset)

        self._status.setText(status_text(snap.mode) + self._series_note)

    def refresh_chart(self) -> None:
        if self._driver is None:
            return
        self._chart.set_bars(self._driver.visible_window)
        self.refresh()

    def _set_controls_enabled(self, enabled: bool) -> None:
        for btn in (self._start_btn, self._pause_btn, self._reset_btn):
            btn.setEnabled(enabled)

    def _on_avatar_changed(self, state: AvatarState) -> None:
        if self._overlay is not None:
            self._overlay.set_state(state)

    # -------------------------
    # Controls
    # -------------------------

    def _on_start(self) -> None:
        if self._driver is not None and self._driver.mode is not Mode.PAUSED_FOR_GUESS:
            self._driver.start()

    def _on_pause(self) -> None:
        if self._driver is not None:
            self._driver.pause()

    def _on_reset(self) -> None:
        if self._driver is not None:
            self._driver.reset()

    # -------------------------
    # Dialog flow
    # -------------------------

    def ask_for_guess(self) -> None:
        driver = self._driver
        if driver is None or not driver.awaiting_guess:
            return

        bar = driver.series[driver.current_index]
        dialog = GuessDialog(bar, self._skin, parent=self)
        self._show_modal_overlay()
        try:
            dialog.exec()
        finally:
            self._hide_modal_overlay()

        if dialog.choice is None:
            return
        outcome = driver.guess(dialog.choice)

        narrative = self._narrator.state.narrative if self._narrator is not None else ""
        result = ResultDialog(outcome, self._skin, narrative, parent=self)
        self._show_modal_overlay()
        try:
            result.exec()
        finally:
            self._hide_modal_overlay()

        if driver.mode is Mode.PAUSED_FOR_GUESS:
            driver.continue_playback()

    def show_game_over(self) -> None:
        driver = self._driver
        if driver is None or driver.mode is not Mode.PAUSED_AT_END:
            return

        dialog = GameOverDialog(driver.score, self._skin, parent=self)
        self._show_modal_overlay()
        try:
            play_again = dialog.exec() == GameOverDialog.Accepted
        finally:
            self._hide_modal_overlay()

        if play_again:
            driver.reset()

    def _show_modal_overlay(self) -> None:
        if self._modal_overlay is None:
            self._modal_overlay = QWidget(self)
            self._modal_overlay.setStyleSheet("background-color: rgba(0, 0, 0, 160);")
        self._modal_overlay.setGeometry(self.centralWidget().geometry())
        self._modal_overlay.show()
        self._modal_overlay.raise_()

        if self._blur_effect is None:
            self._blur_effect = QGraphicsBlurEffect()
            self._blur_effect.setBlurRadius(6)
        self.centralWidget().setGraphicsEffect(self._blur_effect)

    def _hide_modal_overlay(self) -> None:
        if self._modal_overlay is not None:
            self._modal_overlay.hide()
        self.centralWidget().setGraphicsEffect(None)
        self._blur_effect = None

    def resizeEvent(self, event) -> None:
        super().resizeEvent(event)
        if self._modal_overlay is not None and self._modal_overlay.isVisible():
            self._modal_overlay.setGeometry(self.centralWidget().geometry())

    def closeEvent(self, event) -> None:
        if self._driver is not None:
            self._driver.pause()
        self._sounds.stop_all()
        self._cleanup_load_thread()
        super().closeEvent(event)
