from __future__ import annotations

from datetime import date, timedelta
from typing import Callable, List, Sequence

import pytest

from stock_game.adapters.manual_scheduler import ManualScheduler
from stock_game.ports.data_provider import Bar


def make_series(closes: Sequence[float], start: date = date(2024, 8, 7)) -> List[Bar]:
    return [
        Bar(
            d=start + timedelta(days=i),
            open=float(c),
            high=float(c) + 1.0,
            low=float(c) - 1.0,
            close=float(c),
            volume=1_000.0,
        )
        for i, c in enumerate(closes)
    ]


@pytest.fixture
def series_factory() -> Callable[..., List[Bar]]:
    return make_series


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()
