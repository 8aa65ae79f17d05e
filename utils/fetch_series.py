#!/usr/bin/env python3
"""
fetch_series.py

Refresh the dataset bundled with the game.

Downloads daily bars with the same yfinance adapter the game uses and writes
them as JSON records ({date, open, high, low, close, volume}) that
BundledSeriesProvider reads back.

Run it from an environment where the project is installed (pip install -e .)
so the stock_game package is importable.

Usage examples:
  python utils/fetch_series.py
  python utils/fetch_series.py --symbol BIOCON.NS --start 2024-08-07 --out stock_game/data/biocon_ns_sample.json
"""

from __future__ import annotations

import argparse
import logging
from datetime import date
from pathlib import Path

from stock_game.adapters.frames import bars_to_frame
from stock_game.adapters.yfinance_provider import YFinanceMarketDataProvider
from stock_game.config.settings import Settings
from stock_game.domain.series_verify import summarize_series, verify_series


def build_arg_parser() -> argparse.ArgumentParser:
    defaults = Settings()
    p = argparse.ArgumentParser(description="Download daily bars (yfinance) into the bundled JSON format.")
    p.add_argument("--symbol", default=defaults.symbol, help=f"Ticker (default: {defaults.symbol}).")
    p.add_argument(
        "--start",
        default=defaults.start_date.isoformat(),
        help=f"First day, YYYY-MM-DD (default: {defaults.start_date.isoformat()}).",
    )
    p.add_argument("--end", default="", help="Last day, YYYY-MM-DD (default: latest session).")
    p.add_argument("--out", default=str(defaults.bundled_data_path), help="Output JSON path.")
    p.add_argument("--retries", type=int, default=3, help="Download attempts (default: 3).")
    p.add_argument("--log-level", default="INFO", help="Logging level (DEBUG/INFO/WARNING/ERROR).")
    return p


def main() -> None:
    args = build_arg_parser().parse_args()

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )

    start = date.fromisoformat(args.start)
    end = date.fromisoformat(args.end) if args.end else None

    provider = YFinanceMarketDataProvider(cache_dir=None, max_retries=max(1, int(args.retries)))
    bars = provider.get_daily_bars(args.symbol.strip().upper(), start, end)

    ok, problems = verify_series(bars)
    if not ok:
        for p in problems[:20]:
            logging.error("%s", p)
        raise SystemExit(f"Downloaded series failed validation ({len(problems)} problems); nothing written.")

    df = bars_to_frame(bars, decimals=4)

    out = Path(args.out)
    out.parent.mkdir(parents=True, exist_ok=True)
    tmp = out.with_suffix(out.suffix + ".tmp")
    df.to_json(tmp, orient="records", indent=2)
    tmp.replace(out)

    logging.info("Wrote %s: %s", out, summarize_series(bars))


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        raise SystemExit(130)
