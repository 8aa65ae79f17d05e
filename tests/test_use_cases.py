from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Optional, Sequence

import pytest

from stock_game.app.dto import LoadSeriesRequest
from stock_game.app.use_cases import LoadSeriesUseCase
from stock_game.domain.errors import LoadFailure
from stock_game.ports.data_provider import Bar, MarketDataProvider

REQ = LoadSeriesRequest(symbol="BIOCON.NS", start=date(2024, 8, 7))


class FakeProvider(MarketDataProvider):
    def __init__(self, bars: Sequence[Bar] = (), error: Optional[Exception] = None) -> None:
        self.bars = list(bars)
        self.error = error
        self.calls = 0

    def get_daily_bars(self, symbol: str, start: date, end: Optional[date] = None) -> Sequence[Bar]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.bars


def test_remote_success(series_factory) -> None:
    remote = FakeProvider(series_factory([380.0, 395.0]))
    bundled = FakeProvider(series_factory([1.0]))

    resp = LoadSeriesUseCase(remote, bundled).execute(REQ)

    assert resp.source == "remote"
    assert not resp.used_fallback
    assert resp.fallback_reason is None
    assert [b.close for b in resp.bars] == [380.0, 395.0]
    assert bundled.calls == 0


def test_remote_error_falls_back(series_factory, caplog) -> None:
    remote = FakeProvider(error=RuntimeError("HTTP 429"))
    bundled = FakeProvider(series_factory([370.0, 380.0, 391.0]))

    resp = LoadSeriesUseCase(remote, bundled).execute(REQ)

    assert resp.source == "bundled"
    assert resp.used_fallback
    assert resp.fallback_reason == "HTTP 429"
    assert len(resp.bars) == 3
    assert "using bundled series" in caplog.text


def test_empty_remote_series_falls_back(series_factory) -> None:
    resp = LoadSeriesUseCase(FakeProvider([]), FakeProvider(series_factory([380.0]))).execute(REQ)
    assert resp.source == "bundled"
    assert "invalid series" in resp.fallback_reason


def test_malformed_remote_series_falls_back(series_factory) -> None:
    bad = series_factory([380.0, 381.0])
    bad[1] = replace(bad[1], d=bad[0].d)
    resp = LoadSeriesUseCase(FakeProvider(bad), FakeProvider(series_factory([380.0]))).execute(REQ)
    assert resp.source == "bundled"


def test_remote_disabled(series_factory) -> None:
    resp = LoadSeriesUseCase(None, FakeProvider(series_factory([380.0]))).execute(REQ)
    assert resp.source == "bundled"
    assert resp.fallback_reason == "remote data disabled"


def test_both_sources_failing() -> None:
    use_case = LoadSeriesUseCase(FakeProvider(error=ValueError("bad")), FakeProvider(error=RuntimeError("gone")))
    with pytest.raises(LoadFailure, match="No usable series for BIOCON.NS"):
        use_case.execute(REQ)
