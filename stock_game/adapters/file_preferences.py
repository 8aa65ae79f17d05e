from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from stock_game.ports.preferences import PreferenceRepository

logger = logging.getLogger(__name__)

_TRUE = {"true", "1", "yes", "on"}
_FALSE = {"false", "0", "no", "off"}


@dataclass
class FilePreferenceRepository(PreferenceRepository):
    """
    Sound-enabled flag persistence.

    Disk format: single line, "true" or "false".
    Missing file or unrecognised content reads as enabled.
    """

    path: Path

    def is_sound_enabled(self) -> bool:
        if not self.path.exists():
            return True

        try:
            txt = self.path.read_text(encoding="utf-8").strip().lower()
        except OSError as exc:
            logger.warning("Could not read preferences %s: %s", self.path, exc)
            return True

        if txt in _FALSE:
            return False
        if txt and txt not in _TRUE:
            logger.warning("Unrecognised sound preference %r in %s; treating as enabled", txt, self.path)
        return True

    def set_sound_enabled(self, enabled: bool) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(("true" if enabled else "false") + "\n", encoding="utf-8")
