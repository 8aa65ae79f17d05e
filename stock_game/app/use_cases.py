from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from stock_game.app.dto import LoadSeriesRequest, LoadSeriesResponse
from stock_game.domain.errors import LoadFailure
from stock_game.domain.series_verify import summarize_series, verify_series
from stock_game.ports.data_provider import Bar, MarketDataProvider

logger = logging.getLogger(__name__)


class LoadSeriesUseCase:
    """Fetch the replay series, falling back to the bundled dataset on any remote problem."""

    def __init__(self, remote: Optional[MarketDataProvider], bundled: MarketDataProvider) -> None:
        self._remote = remote
        self._bundled = bundled

    def execute(self, req: LoadSeriesRequest) -> LoadSeriesResponse:
        reason: Optional[str] = None

        if self._remote is None:
            reason = "remote data disabled"
        else:
            try:
                bars = self._fetch_valid(self._remote, req)
                logger.info("%s (remote): %s", req.symbol, summarize_series(bars))
                return LoadSeriesResponse(bars=bars, source="remote")
            except Exception as exc:  # any remote failure means fallback
                reason = str(exc) or exc.__class__.__name__
                logger.warning("%s: remote load failed (%s); using bundled series", req.symbol, reason)

        try:
            bars = self._fetch_valid(self._bundled, req)
        except Exception as exc:
            raise LoadFailure(f"No usable series for {req.symbol}: {exc}") from exc

        logger.info("%s (bundled): %s", req.symbol, summarize_series(bars))
        return LoadSeriesResponse(bars=bars, source="bundled", fallback_reason=reason)

    @staticmethod
    def _fetch_valid(provider: MarketDataProvider, req: LoadSeriesRequest) -> List[Bar]:
        bars: Sequence[Bar] = provider.get_daily_bars(req.symbol, req.start, req.end)
        ok, problems = verify_series(bars)
        if not ok:
            shown = "; ".join(problems[:3])
            more = f" (+{len(problems) - 3} more)" if len(problems) > 3 else ""
            raise LoadFailure(f"invalid series: {shown}{more}")
        return list(bars)
