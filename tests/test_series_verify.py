from __future__ import annotations

from dataclasses import replace
from datetime import date

from stock_game.domain.series_verify import summarize_series, verify_series


def test_valid_series(series_factory) -> None:
    ok, problems = verify_series(series_factory([380.0, 395.0, 405.0]))
    assert ok
    assert problems == []


def test_empty_series_is_invalid() -> None:
    ok, problems = verify_series([])
    assert not ok
    assert problems == ["series has no bars"]


def test_dates_must_strictly_increase(series_factory) -> None:
    bars = series_factory([380.0, 381.0, 382.0])
    bars[2] = replace(bars[2], d=bars[1].d)
    ok, problems = verify_series(bars)
    assert not ok
    assert any("strictly increasing at index 1->2" in p for p in problems)


def test_close_outside_range(series_factory) -> None:
    bars = series_factory([380.0, 381.0])
    bars[1] = replace(bars[1], high=370.0)
    ok, problems = verify_series(bars)
    assert not ok
    assert any("bar 1" in p for p in problems)


def test_non_positive_price(series_factory) -> None:
    bars = series_factory([380.0, 381.0])
    bars[0] = replace(bars[0], low=0.0)
    ok, problems = verify_series(bars)
    assert not ok
    assert "non-positive" in problems[0]


def test_summary(series_factory) -> None:
    text = summarize_series(series_factory([380.0, 395.0], start=date(2024, 8, 7)))
    assert text == "2 bars 2024-08-07->2024-08-08 close 380.00..395.00 last=395.00"
    assert summarize_series([]) == "empty"
