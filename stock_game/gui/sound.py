from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict

from PySide6.QtCore import QObject, QUrl
from PySide6.QtMultimedia import QSoundEffect

from stock_game.ports.preferences import PreferenceRepository
from stock_game.ports.sound import SoundCue, SoundSink

logger = logging.getLogger(__name__)

SOUND_FILES: Dict[str, str] = {
    "waiting": "waiting.wav",
    "riding": "riding.wav",
    "fallen": "fallen.wav",
    "missed": "missed.wav",
    "success": "success.wav",
    "failure": "failure.wav",
    "gameOver": "game-over.wav",
}


class QtSoundSink(SoundSink):
    """Plays cues through QSoundEffect. Missing files are skipped quietly."""

    def __init__(self, sound_dir: Path, preferences: PreferenceRepository, parent: QObject | None = None) -> None:
        self._dir = Path(sound_dir)
        self._prefs = preferences
        self._parent = parent
        self._effects: Dict[str, QSoundEffect] = {}
        self._enabled = preferences.is_sound_enabled()

    @property
    def enabled(self) -> bool:
        return self._enabled

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = bool(enabled)
        self._prefs.set_sound_enabled(self._enabled)
        if not self._enabled:
            self.stop_all()

    def play(self, cue: SoundCue) -> None:
        if not self._enabled:
            return
        effect = self._effect(cue.name)
        if effect is None:
            return
        effect.stop()
        effect.setVolume(max(0.0, min(1.0, cue.volume)))
        effect.setLoopCount(QSoundEffect.Loop.Infinite.value if cue.loop else 1)
        effect.play()

    def stop(self, name: str) -> None:
        effect = self._effects.get(name)
        if effect is not None:
            effect.stop()

    def stop_all(self) -> None:
        for effect in self._effects.values():
            effect.stop()

    def _effect(self, name: str) -> QSoundEffect | None:
        if name in self._effects:
            return self._effects[name]

        filename = SOUND_FILES.get(name)
        if filename is None:
            logger.warning("Unknown sound cue %r", name)
            return None
        path = self._dir / filename
        if not path.exists():
            logger.debug("Sound file missing: %s", path)
            return None

        effect = QSoundEffect(self._parent)
        effect.setSource(QUrl.fromLocalFile(str(path.resolve())))
        self._effects[name] = effect
        return effect
