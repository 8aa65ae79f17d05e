from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class SoundCue:
    name: str  # e.g. "success", "riding", "gameOver"
    volume: float = 0.5
    loop: bool = False


class SoundSink(ABC):
    @abstractmethod
    def play(self, cue: SoundCue) -> None:
        raise NotImplementedError

    @abstractmethod
    def stop(self, name: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def stop_all(self) -> None:
        raise NotImplementedError
