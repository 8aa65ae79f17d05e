from __future__ import annotations

import math
from typing import List, Optional, Sequence

from PySide6.QtCore import QPointF, QRectF, QSize, Qt
from PySide6.QtGui import QColor, QPainter, QPainterPath, QPen
from PySide6.QtWidgets import QWidget

from stock_game.gui.view_models import y_domain
from stock_game.ports.data_provider import Bar


class PriceChartWidget(QWidget):
    MARGIN = 20
    LEFT_AXIS_WIDTH = 56

    AXIS_HEIGHT = 46
    AXIS_TICK = 6
    MIN_HEIGHT = 320
    Y_TICKS = 6

    LINE_COLOR = QColor(136, 132, 216)
    PAUSE_COLOR = QColor(230, 70, 70)
    TARGET_COLOR = QColor(60, 190, 90)

    def __init__(self, pause_price: float, target_price: float, parent=None):
        super().__init__(parent)
        self._pause_price = float(pause_price)
        self._target_price = float(target_price)
        self._bars: List[Bar] = []
        self.setMinimumHeight(self.MIN_HEIGHT)

    def set_bars(self, bars: Sequence[Bar]) -> None:
        self._bars = list(bars)
        self.update()

    def sizeHint(self) -> QSize:
        return QSize(1000, 600)

    # --------- paint ---------

    def paintEvent(self, event) -> None:
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing, True)
        painter.fillRect(self.rect(), QColor(20, 20, 20))

        plot_left = self.MARGIN + self.LEFT_AXIS_WIDTH
        plot_top = self.MARGIN
        plot_right = self.width() - self.MARGIN
        plot_bottom = self.height() - self.MARGIN - self.AXIS_HEIGHT

        domain = y_domain((b.close for b in self._bars), self._pause_price, self._target_price)
        if domain is None:
            return
        v_min, v_max = domain

        def y_of(price: float) -> float:
            return plot_bottom - (price - v_min) / float(v_max - v_min) * (plot_bottom - plot_top)

        n = len(self._bars)
        # one slot per revealed bar, right padding keeps the newest point off the edge
        slots = max(2, n + 1)
        step = (plot_right - plot_left) / float(slots - 1)

        def x_of(i: int) -> float:
            return plot_left + i * step

        self._draw_grid(painter, plot_left, plot_top, plot_right, plot_bottom, v_min, v_max, y_of)
        self._draw_reference(painter, self._pause_price, self.PAUSE_COLOR, plot_left, plot_right, y_of, None)
        self._draw_reference(
            painter,
            self._target_price,
            self.TARGET_COLOR,
            plot_left,
            plot_right,
            y_of,
            f"Target: {self._target_price:g}",
        )

        if n == 0:
            painter.setPen(QColor(220, 220, 220))
            painter.drawText(self.rect(), Qt.AlignCenter, "Press Start")
            return

        pen = QPen(self.LINE_COLOR)
        pen.setWidth(2)
        painter.setPen(pen)
        if n == 1:
            painter.drawEllipse(QPointF(x_of(0), y_of(self._bars[0].close)), 2.5, 2.5)
        else:
            path = QPainterPath(QPointF(x_of(0), y_of(self._bars[0].close)))
            for i in range(1, n):
                path.lineTo(QPointF(x_of(i), y_of(self._bars[i].close)))
            painter.drawPath(path)

        self._draw_x_axis(painter, plot_left, plot_bottom, x_of)

    # --------- helpers ---------

    def _draw_grid(self, painter, left, top, right, bottom, v_min, v_max, y_of) -> None:
        grid_pen = QPen(QColor(60, 60, 60))
        grid_pen.setStyle(Qt.DashLine)
        painter.setPen(grid_pen)

        span = v_max - v_min
        raw = span / float(self.Y_TICKS)
        mag = 10 ** math.floor(math.log10(raw)) if raw > 0 else 1
        tick = max(1, int(math.ceil(raw / mag) * mag))

        first = int(math.ceil(v_min / float(tick)) * tick)
        for v in range(first, v_max + 1, tick):
            y = y_of(v)
            painter.setPen(grid_pen)
            painter.drawLine(int(left), int(y), int(right), int(y))
            painter.setPen(QColor(180, 180, 180))
            rect = QRectF(self.MARGIN, y - 10, self.LEFT_AXIS_WIDTH - 6, 20)
            painter.drawText(rect, Qt.AlignRight | Qt.AlignVCenter, str(v))

        painter.setPen(QColor(140, 140, 140))
        painter.drawLine(int(left), int(top), int(left), int(bottom))

    def _draw_reference(self, painter, price, color, left, right, y_of, label: Optional[str]) -> None:
        pen = QPen(color)
        pen.setStyle(Qt.DashLine)
        pen.setWidth(1)
        painter.setPen(pen)
        y = y_of(price)
        painter.drawLine(int(left), int(y), int(right), int(y))
        if label:
            rect = QRectF(right - 140, y - 20, 136, 18)
            painter.drawText(rect, Qt.AlignRight | Qt.AlignBottom, label)

    def _draw_x_axis(self, painter: QPainter, left: float, plot_bottom: float, x_of) -> None:
        axis_y = plot_bottom + self.MARGIN / 2
        n = len(self._bars)
        right = x_of(n - 1)

        painter.setPen(QColor(140, 140, 140))
        painter.drawLine(int(left), int(axis_y), int(right), int(axis_y))

        # estimate labels by pixel capacity (prevents overlap)
        available_px = max(1.0, float(self.width() - left - self.MARGIN))
        est_label_px = 80.0  # safe width for 'Feb 03'
        max_labels = max(2, min(12, int(available_px // est_label_px)))

        # month boundaries + end
        idxs: List[int] = [0]
        for i in range(1, n):
            if (self._bars[i].d.year, self._bars[i].d.month) != (self._bars[i - 1].d.year, self._bars[i - 1].d.month):
                idxs.append(i)
        if idxs[-1] != n - 1:
            idxs.append(n - 1)

        # thin to fit
        if len(idxs) > max_labels:
            stride = int(math.ceil(len(idxs) / float(max_labels)))
            idxs = idxs[::stride]
            if idxs[-1] != n - 1:
                idxs.append(n - 1)

        painter.setPen(QColor(180, 180, 180))
        for idx in idxs:
            x = x_of(idx)
            painter.drawLine(int(x), int(axis_y), int(x), int(axis_y + self.AXIS_TICK))
            d = self._bars[idx].d
            label = f"{d.strftime('%b')} {d.day:02d}"
            rect = QRectF(x - 45, axis_y + self.AXIS_TICK + 4, 90, 20)
            painter.drawText(rect, Qt.AlignHCenter | Qt.AlignTop, label)
