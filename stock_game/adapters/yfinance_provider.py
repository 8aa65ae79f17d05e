from __future__ import annotations

import logging
import time
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import List, Optional, Sequence

import pandas as pd
import yfinance as yf

from stock_game.adapters.frames import bars_to_frame, frame_to_bars
from stock_game.ports.data_provider import Bar, MarketDataProvider

logger = logging.getLogger(__name__)

_YF_COLUMNS = {"Open": "open", "High": "high", "Low": "low", "Close": "close", "Volume": "volume"}


class YFinanceMarketDataProvider(MarketDataProvider):
    """
    Yahoo Finance adapter (via yfinance).

    - Daily bars from a fixed start date, end date inclusive
    - Retry with exponential backoff when Yahoo throttles
    - Optional on-disk JSON cache so restarts do not refetch
    """

    def __init__(
            self,
            *,
            auto_adjust: bool = True,
            cache_dir: Optional[str] = None,
            cache_ttl_seconds: int = 6 * 60 * 60,
            max_retries: int = 3,
            base_backoff_seconds: float = 0.75,
    ) -> None:
        self._auto_adjust = auto_adjust
        self._max_retries = max(1, int(max_retries))
        self._base_backoff_seconds = base_backoff_seconds
        self._cache = _BarCache(Path(cache_dir), cache_ttl_seconds) if cache_dir else None

    def get_daily_bars(self, symbol: str, start: date, end: Optional[date] = None) -> Sequence[Bar]:
        last_day = end or datetime.now(timezone.utc).date()
        if last_day < start:
            return []
        # yfinance stops before its end argument
        stop = last_day + timedelta(days=1)

        key = f"{_safe(symbol)}__{start.isoformat()}__{stop.isoformat()}__adj{int(self._auto_adjust)}"
        if self._cache is not None:
            cached = self._cache.load(key)
            if cached is not None:
                logger.info("%s: %d bars from cache", symbol, len(cached))
                return cached

        bars = frame_to_bars(self._download(symbol, start, stop))
        if self._cache is not None:
            self._cache.save(key, bars)
        if bars:
            logger.info("%s: %d bars %s -> %s", symbol, len(bars), bars[0].d, bars[-1].d)
        return bars

    def _download(self, symbol: str, start: date, stop: date) -> pd.DataFrame:
        last_err: Optional[Exception] = None

        for attempt in range(1, self._max_retries + 1):
            try:
                raw = yf.download(
                    tickers=symbol,
                    start=start.isoformat(),
                    end=stop.isoformat(),
                    interval="1d",
                    auto_adjust=self._auto_adjust,
                    progress=False,
                    threads=False,
                )
                return normalize_frame(raw, symbol)
            except Exception as e:
                last_err = e
                if attempt == self._max_retries:
                    break
                delay = self._base_backoff_seconds * (2 ** (attempt - 1))
                logger.warning(
                    "%s: download attempt %d/%d failed (%s); retrying in %.2fs",
                    symbol,
                    attempt,
                    self._max_retries,
                    e,
                    delay,
                )
                time.sleep(delay)

        raise RuntimeError(f"Failed to download {symbol} after {self._max_retries} attempts: {last_err}")


def normalize_frame(df: Optional[pd.DataFrame], symbol: str) -> pd.DataFrame:
    """Reduce yfinance output to a date/open/high/low/close/volume frame for one symbol."""
    if df is None or df.empty:
        raise RuntimeError(f"yfinance returned empty data for {symbol}")

    if isinstance(df.columns, pd.MultiIndex):
        # (field, ticker) in current yfinance, (ticker, field) in some older releases
        for level in (-1, 0):
            if symbol in df.columns.get_level_values(level):
                df = df.xs(symbol, axis=1, level=level)
                break
        else:
            raise RuntimeError(f"MultiIndex columns but symbol {symbol} not present: {df.columns}")

    df = df.rename(columns=lambda c: str(c).strip())
    missing = set(_YF_COLUMNS) - set(df.columns)
    if missing:
        raise RuntimeError(f"Unexpected columns for {symbol}: {list(df.columns)} (missing {sorted(missing)})")

    out = df[list(_YF_COLUMNS)].rename(columns=_YF_COLUMNS)
    out = out.dropna(subset=["open", "high", "low", "close"])
    if out.empty:
        raise RuntimeError(f"No usable OHLC rows after cleaning for {symbol}")

    out.insert(0, "date", pd.to_datetime(out.index, errors="coerce"))
    return out.reset_index(drop=True)


def _safe(symbol: str) -> str:
    return symbol.replace("/", "_").replace(":", "_").replace("^", "")


class _BarCache:
    """JSON files of bars keyed by request, ignored once older than the TTL."""

    def __init__(self, root: Path, ttl_seconds: int) -> None:
        self._root = root
        self._ttl_seconds = ttl_seconds
        self._root.mkdir(parents=True, exist_ok=True)

    def load(self, key: str) -> Optional[List[Bar]]:
        path = self._root / f"{key}.json"
        if not path.exists():
            return None
        if time.time() - path.stat().st_mtime > self._ttl_seconds:
            return None
        try:
            return frame_to_bars(pd.read_json(path, orient="records"))
        except (ValueError, RuntimeError) as exc:
            logger.warning("Ignoring corrupt cache %s: %s", path, exc)
            return None

    def save(self, key: str, bars: List[Bar]) -> None:
        if not bars:
            return
        path = self._root / f"{key}.json"
        tmp = path.with_suffix(".json.tmp")
        try:
            bars_to_frame(bars).to_json(tmp, orient="records")
            tmp.replace(path)
        except (OSError, ValueError) as exc:
            logger.warning("Could not write cache %s: %s", path, exc)
