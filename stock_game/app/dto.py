from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from stock_game.ports.data_provider import Bar


@dataclass(frozen=True)
class LoadSeriesRequest:
    symbol: str
    start: date
    end: Optional[date] = None


@dataclass(frozen=True)
class LoadSeriesResponse:
    bars: List[Bar]
    source: str  # "remote" | "bundled"
    # Why the remote source was not used (None when it was).
    fallback_reason: Optional[str] = None

    @property
    def used_fallback(self) -> bool:
        return self.source != "remote"
