from __future__ import annotations

from PySide6.QtCore import QRectF, QSize, Qt
from PySide6.QtGui import QColor, QLinearGradient, QPainter
from PySide6.QtWidgets import QWidget

from stock_game.app.avatar_skin import AvatarState, PlayerState


class AvatarOverlay(QWidget):
    """Banner above the chart: rider state, dragon intensity meter and the narrative line."""

    HEIGHT = 76
    METER_WIDTH = 160

    STATE_STYLE = {
        PlayerState.WAITING: ("🧍", "Waiting", QColor(0, 30, 60)),
        PlayerState.RIDING: ("🐉", "Riding", QColor(0, 60, 30)),
        PlayerState.FALLEN: ("💥", "Fallen", QColor(70, 20, 20)),
        PlayerState.MISSED: ("👀", "Missed", QColor(50, 40, 10)),
    }

    def __init__(self, parent=None):
        super().__init__(parent)
        self._state = AvatarState()
        self.setFixedHeight(self.HEIGHT)

    def set_state(self, state: AvatarState) -> None:
        self._state = state
        self.update()

    def sizeHint(self) -> QSize:
        return QSize(1000, self.HEIGHT)

    def paintEvent(self, event) -> None:
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing, True)

        icon, label, base = self.STATE_STYLE[self._state.player_state]

        grad = QLinearGradient(0, 0, self.width(), self.height())
        grad.setColorAt(0.0, base)
        grad.setColorAt(1.0, QColor(20, 40, 100))
        painter.fillRect(self.rect(), grad)

        painter.setPen(QColor(235, 235, 235))
        font = painter.font()
        font.setPointSize(22)
        painter.setFont(font)
        painter.drawText(QRectF(10, 0, 48, self.height()), Qt.AlignCenter, icon)

        font.setPointSize(10)
        font.setBold(True)
        painter.setFont(font)
        painter.drawText(QRectF(64, 10, 120, 18), Qt.AlignLeft | Qt.AlignVCenter, label)

        # intensity meter
        meter = QRectF(64, 34, self.METER_WIDTH, 10)
        painter.setPen(QColor(120, 120, 140))
        painter.drawRect(meter)
        fill = QRectF(meter.left(), meter.top(), meter.width() * max(0.0, min(1.0, self._state.intensity)), meter.height())
        painter.fillRect(fill, QColor(255, 140, 40))

        font.setBold(False)
        font.setItalic(True)
        painter.setFont(font)
        text_rect = QRectF(64 + self.METER_WIDTH + 20, 0, self.width() - (64 + self.METER_WIDTH + 30), self.height())
        painter.drawText(text_rect, Qt.AlignLeft | Qt.AlignVCenter | Qt.TextWordWrap, self._state.narrative or "…")
