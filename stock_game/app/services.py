from __future__ import annotations

from dataclasses import dataclass

from stock_game.app.use_cases import LoadSeriesUseCase
from stock_game.config.settings import Settings
from stock_game.ports.preferences import PreferenceRepository


@dataclass(frozen=True)
class AppServices:
    load_series: LoadSeriesUseCase
    preferences: PreferenceRepository
    settings: Settings
