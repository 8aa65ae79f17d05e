from __future__ import annotations

from typing import List, Optional, Sequence

import pandas as pd

from stock_game.ports.data_provider import Bar

PRICE_COLS = ["open", "high", "low", "close"]
FRAME_COLS = ["date", *PRICE_COLS, "volume"]


def frame_to_bars(df: pd.DataFrame) -> List[Bar]:
    """
    Turn a date/open/high/low/close[/volume] frame into Bars, oldest first.

    Rows without a close are dropped, missing open/high/low fall back to the
    close, missing volume is 0, and a repeated date keeps its last row.
    """
    required = {"date", *PRICE_COLS}
    if not required.issubset(set(df.columns)):
        raise RuntimeError(f"Unexpected columns: {list(df.columns)}")

    df = df.copy()
    if "volume" not in df.columns:
        df["volume"] = 0.0

    for c in PRICE_COLS + ["volume"]:
        df[c] = pd.to_numeric(df[c], errors="coerce")
    df["volume"] = df["volume"].fillna(0.0)

    df = df.dropna(subset=["close"])
    for c in ("open", "high", "low"):
        df[c] = df[c].fillna(df["close"])

    df["date"] = pd.to_datetime(df["date"], errors="coerce")
    df = df.dropna(subset=["date"])
    df = df.sort_values("date").drop_duplicates(subset="date", keep="last")

    return [
        Bar(
            d=ts.date(),
            open=float(o),
            high=float(h),
            low=float(lo),
            close=float(c),
            volume=float(v),
        )
        for ts, o, h, lo, c, v in zip(df["date"], df["open"], df["high"], df["low"], df["close"], df["volume"])
    ]


def bars_to_frame(bars: Sequence[Bar], decimals: Optional[int] = None) -> pd.DataFrame:
    """JSON-ready frame: ISO date strings, prices optionally rounded, integer volume."""
    df = pd.DataFrame(
        {
            "date": [b.d.isoformat() for b in bars],
            "open": [b.open for b in bars],
            "high": [b.high for b in bars],
            "low": [b.low for b in bars],
            "close": [b.close for b in bars],
            "volume": [b.volume for b in bars],
        },
        columns=FRAME_COLS,
    )
    if decimals is not None:
        df[PRICE_COLS] = df[PRICE_COLS].round(decimals)
    df["volume"] = df["volume"].fillna(0).astype("int64")
    return df
