from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable


class ScheduledCall(ABC):
    """Handle to a single pending callback."""

    @abstractmethod
    def cancel(self) -> None:
        raise NotImplementedError

    @property
    @abstractmethod
    def active(self) -> bool:
        raise NotImplementedError


class Scheduler(ABC):
    @abstractmethod
    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> ScheduledCall:
        """Run callback once after delay_ms on the caller's thread of control."""
        raise NotImplementedError
