from __future__ import annotations

from abc import ABC, abstractmethod


class PreferenceRepository(ABC):
    @abstractmethod
    def is_sound_enabled(self) -> bool:
        raise NotImplementedError

    @abstractmethod
    def set_sound_enabled(self, enabled: bool) -> None:
        raise NotImplementedError
