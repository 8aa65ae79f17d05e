from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from PySide6.QtWidgets import QApplication

from stock_game.adapters.bundled_provider import BundledSeriesProvider
from stock_game.adapters.file_preferences import FilePreferenceRepository
from stock_game.adapters.yfinance_provider import YFinanceMarketDataProvider
from stock_game.app.services import AppServices
from stock_game.app.use_cases import LoadSeriesUseCase
from stock_game.config.settings import SKINS, Settings
from stock_game.gui.main_window import GameWindow


def build_app(settings: Settings) -> GameWindow:
    # Ports/adapters
    remote = None
    if settings.use_remote_data:
        remote = YFinanceMarketDataProvider(
            auto_adjust=True,
            cache_dir=settings.cache_dir,
            cache_ttl_seconds=settings.cache_ttl_seconds,
        )
    bundled = BundledSeriesProvider(settings.bundled_data_path)
    preferences = FilePreferenceRepository(settings.preferences_path)

    # Use cases
    load_uc = LoadSeriesUseCase(remote=remote, bundled=bundled)

    services = AppServices(load_series=load_uc, preferences=preferences, settings=settings)

    # GUI
    return GameWindow(services=services)


def build_arg_parser() -> argparse.ArgumentParser:
    defaults = Settings()
    p = argparse.ArgumentParser(description="Replay a stock's daily closes and guess where it goes next.")
    p.add_argument("--symbol", default=defaults.symbol, help=f"Ticker to replay (default: {defaults.symbol}).")
    p.add_argument("--skin", choices=sorted(SKINS), default=defaults.skin_name, help="Presentation skin.")
    p.add_argument("--offline", action="store_true", help="Skip Yahoo Finance and use the bundled series.")
    p.add_argument(
        "--interval-ms",
        type=int,
        default=defaults.playback_interval_ms,
        help=f"Milliseconds per replayed day (default: {defaults.playback_interval_ms}).",
    )
    p.add_argument("--sound-dir", default=str(defaults.sound_dir), help="Directory holding the WAV sound cues.")
    p.add_argument("--log-level", default="INFO", help="Logging level (DEBUG/INFO/WARNING/ERROR).")
    return p


def settings_from_args(args: argparse.Namespace) -> Settings:
    return Settings(
        symbol=args.symbol.strip().upper(),
        skin_name=args.skin,
        use_remote_data=not args.offline,
        playback_interval_ms=max(1, int(args.interval_ms)),
        sound_dir=Path(args.sound_dir),
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    settings = settings_from_args(args)
    app = QApplication(sys.argv[:1])
    window = build_app(settings)
    window.resize(1100, 820)
    window.show()
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
