from __future__ import annotations

from typing import List, Sequence, Tuple

from stock_game.ports.data_provider import Bar


def verify_series(bars: Sequence[Bar]) -> Tuple[bool, List[str]]:
    problems: List[str] = []

    if not bars:
        problems.append("series has no bars")
        return False, problems

    # 1) Strictly increasing dates
    for i in range(1, len(bars)):
        if not (bars[i].d > bars[i - 1].d):
            problems.append(f"dates not strictly increasing at index {i - 1}->{i} ({bars[i - 1].d} -> {bars[i].d})")

    # 2) Price sanity per bar
    for i, b in enumerate(bars):
        if min(b.open, b.high, b.low, b.close) <= 0:
            problems.append(f"bar {i} ({b.d}) has a non-positive price")
            continue
        if not (b.low <= b.open <= b.high and b.low <= b.close <= b.high):
            problems.append(f"bar {i} ({b.d}) open/close outside low..high")
        if b.volume < 0:
            problems.append(f"bar {i} ({b.d}) has negative volume")

    return (len(problems) == 0), problems


def summarize_series(bars: Sequence[Bar]) -> str:
    if not bars:
        return "empty"
    closes = [b.close for b in bars]
    return (
        f"{len(bars)} bars {bars[0].d.isoformat()}->{bars[-1].d.isoformat()} "
        f"close {min(closes):.2f}..{max(closes):.2f} last={closes[-1]:.2f}"
    )
