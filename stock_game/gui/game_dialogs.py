from __future__ import annotations

from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QDialog,
    QFormLayout,
    QFrame,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from stock_game.config.settings import SkinConfig
from stock_game.domain.models import Direction, GuessOutcome, Score
from stock_game.gui.view_models import outcome_lines, side_label
from stock_game.ports.data_provider import Bar


class _GameDialog(QDialog):
    def __init__(self, title: str, skin: SkinConfig, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setModal(True)
        self.setWindowTitle(title)
        self.setMinimumWidth(420)
        self._skin = skin

        heading = QLabel(title)
        heading.setStyleSheet("font-size: 16px; font-weight: 600;")

        self._body = QVBoxLayout(self)
        self._body.addWidget(heading)

    @staticmethod
    def _build_divider() -> QFrame:
        divider = QFrame()
        divider.setFrameShape(QFrame.HLine)
        divider.setFrameShadow(QFrame.Sunken)
        divider.setStyleSheet("color: #333;")
        return divider


class GuessDialog(_GameDialog):
    """Asks for an up/down call on the bar that tripped the pause price. Cannot be dismissed."""

    def __init__(self, bar: Bar, skin: SkinConfig, parent: QWidget | None = None) -> None:
        title = "The dragon approaches" if skin.narrated else "Make Your Prediction"
        super().__init__(title, skin, parent)
        self.choice: Optional[Direction] = None
        self.setWindowFlag(Qt.WindowCloseButtonHint, False)

        target = f"{skin.currency}{skin.target_price:g}"
        question = QLabel(
            f"The stock closed at {bar.close:.2f}, above {skin.currency}{skin.pause_price:g}. "
            f"Do you think it will go above {target} and sustain there?"
        )
        question.setWordWrap(True)
        question.setStyleSheet("font-weight: 600;")

        details = QFormLayout()
        details.setLabelAlignment(Qt.AlignLeft | Qt.AlignTop)
        details.setHorizontalSpacing(12)
        details.addRow("Date", QLabel(bar.d.isoformat()))
        details.addRow("Open", QLabel(f"{bar.open:.2f}"))
        details.addRow("High", QLabel(f"{bar.high:.2f}"))
        details.addRow("Low", QLabel(f"{bar.low:.2f}"))
        details.addRow("Close", QLabel(f"{bar.close:.2f}"))

        up_btn = QPushButton(f"↑ Yes, {side_label(Direction.UP, skin.target_price, skin.currency)}")
        up_btn.setStyleSheet("background-color: #2563eb; color: white; padding: 6px;")
        up_btn.clicked.connect(lambda: self._choose(Direction.UP))

        down_btn = QPushButton(f"↓ No, {side_label(Direction.DOWN, skin.target_price, skin.currency)}")
        down_btn.setStyleSheet("background-color: #dc2626; color: white; padding: 6px;")
        down_btn.clicked.connect(lambda: self._choose(Direction.DOWN))

        buttons = QHBoxLayout()
        buttons.addWidget(up_btn)
        buttons.addWidget(down_btn)

        self._body.addWidget(question)
        self._body.addLayout(details)
        self._body.addWidget(self._build_divider())
        self._body.addLayout(buttons)

    def _choose(self, direction: Direction) -> None:
        self.choice = direction
        self.accept()

    def reject(self) -> None:
        if self.choice is not None:
            super().reject()


class ResultDialog(_GameDialog):
    def __init__(
            self,
            outcome: GuessOutcome,
            skin: SkinConfig,
            narrative: str = "",
            parent: QWidget | None = None,
    ) -> None:
        super().__init__("Correct!" if outcome.is_correct else "Incorrect!", skin, parent)

        if narrative:
            story = QLabel(narrative)
            story.setWordWrap(True)
            story.setStyleSheet("font-style: italic;")
            self._body.addWidget(story)

        for line in outcome_lines(outcome, skin.target_price, skin.currency):
            self._body.addWidget(QLabel(line))

        continue_btn = QPushButton("Continue")
        continue_btn.clicked.connect(self.accept)
        self._body.addWidget(self._build_divider())
        self._body.addWidget(continue_btn)


class GameOverDialog(_GameDialog):
    def __init__(self, score: Score, skin: SkinConfig, parent: QWidget | None = None) -> None:
        super().__init__("Game Over!", skin, parent)

        final = QLabel(f"Final Score: {score.correct} / {score.total} ({score.accuracy_pct}%)")
        final.setStyleSheet("font-size: 14px; font-weight: 600;")
        points = QLabel(f"Total Points: {score.points}")

        target = f"{skin.currency}{skin.target_price:g}"
        taunt = QLabel(
            "How many more times do you want to lose money? "
            f"Just wait for it to close decisively above {target} and then it will FLY!"
        )
        taunt.setWordWrap(True)

        again_btn = QPushButton("Play Again")
        again_btn.clicked.connect(self.accept)
        close_btn = QPushButton("Close")
        close_btn.clicked.connect(self.reject)

        buttons = QHBoxLayout()
        buttons.addStretch(1)
        buttons.addWidget(close_btn)
        buttons.addWidget(again_btn)

        self._body.addWidget(final)
        self._body.addWidget(points)
        self._body.addWidget(taunt)
        self._body.addWidget(self._build_divider())
        self._body.addLayout(buttons)
