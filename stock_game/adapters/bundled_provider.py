from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from stock_game.adapters.frames import frame_to_bars
from stock_game.ports.data_provider import Bar, MarketDataProvider

logger = logging.getLogger(__name__)


class BundledSeriesProvider(MarketDataProvider):
    """
    Reads a series shipped with the application.

    Accepted file shapes:
      - [{"date": "2024-08-07", "open": .., "high": .., "low": .., "close": .., "volume": ..}, ...]
      - a raw Yahoo chart response: {"chart": {"result": [{"timestamp": [...], "indicators": {...}}]}}
    """

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)
        self._bars: Optional[List[Bar]] = None

    def get_daily_bars(self, symbol: str, start: date, end: Optional[date] = None) -> Sequence[Bar]:
        bars = self._load()
        out = [b for b in bars if b.d >= start and (end is None or b.d <= end)]
        logger.info("Bundled series for %s: %d bars from %s", symbol, len(out), self._path.name)
        return out

    def _load(self) -> List[Bar]:
        if self._bars is not None:
            return self._bars

        if not self._path.exists():
            raise RuntimeError(f"Bundled series not found: {self._path}")

        with open(self._path, "r", encoding="utf-8") as f:
            payload = json.load(f)

        if isinstance(payload, dict) and "chart" in payload:
            df = chart_payload_to_frame(payload)
        elif isinstance(payload, list):
            df = pd.DataFrame.from_records(payload)
        else:
            raise RuntimeError(f"Unrecognised series format in {self._path}")

        self._bars = frame_to_bars(df)
        return self._bars


def chart_payload_to_frame(payload: Dict[str, Any]) -> pd.DataFrame:
    """Flatten a Yahoo v8 chart response into date/open/high/low/close/volume columns."""
    try:
        result = payload["chart"]["result"][0]
        timestamps = result["timestamp"]
        quote = result["indicators"]["quote"][0]
    except (KeyError, IndexError, TypeError) as exc:
        raise RuntimeError(f"Invalid chart payload: {exc!r}") from exc

    adj = None
    adj_block = result["indicators"].get("adjclose")
    if adj_block:
        adj = adj_block[0].get("adjclose")

    n = len(timestamps)

    def _col(values: Optional[List[Any]]) -> List[Any]:
        values = list(values or [])
        return (values + [None] * n)[:n]

    df = pd.DataFrame(
        {
            "date": pd.to_datetime(timestamps, unit="s", utc=True).strftime("%Y-%m-%d"),
            "open": _col(quote.get("open")),
            "high": _col(quote.get("high")),
            "low": _col(quote.get("low")),
            "close": _col(quote.get("close")),
            "volume": _col(quote.get("volume")),
        }
    )
    if adj is not None:
        df = _apply_adjclose(df, _col(adj))
    return df


def _apply_adjclose(df: pd.DataFrame, adj: List[Any]) -> pd.DataFrame:
    """
    Put the whole bar on the adjusted scale, as yfinance auto_adjust does.

    Rows with an adjusted close get open/high/low multiplied by adj/close;
    rows without one keep their raw prices.
    """
    df = df.copy()
    for c in ("open", "high", "low", "close"):
        df[c] = pd.to_numeric(df[c], errors="coerce")
    adj_close = pd.to_numeric(pd.Series(adj, index=df.index), errors="coerce")

    ratio = (adj_close / df["close"]).where(df["close"] > 0)
    scaled = ratio.notna()
    for c in ("open", "high", "low"):
        df.loc[scaled, c] = df.loc[scaled, c] * ratio[scaled]
    df["close"] = adj_close.fillna(df["close"])

    # Keep rounding from pushing the close outside its own range
    df["low"] = df[["low", "close"]].min(axis=1)
    df["high"] = df[["high", "close"]].max(axis=1)
    df["open"] = df["open"].clip(lower=df["low"], upper=df["high"])
    return df
