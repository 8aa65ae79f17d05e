from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Dict

_PACKAGE_DIR = Path(__file__).resolve().parent.parent


@dataclass(frozen=True)
class SkinConfig:
    name: str
    title: str

    # Playback halts on a revealed close above pause_price;
    # guesses are judged against target_price on the following bar.
    pause_price: float
    target_price: float

    currency: str = "₹"
    narrated: bool = False  # avatar overlay + sound cues


CLASSIC_SKIN = SkinConfig(
    name="classic",
    title="BIOCON.NS Stock Game",
    pause_price=390.0,
    target_price=400.0,
)

AVATAR_SKIN = SkinConfig(
    name="avatar",
    title="BIOCON.NS: Ride Toruk Makto",
    pause_price=390.0,
    target_price=400.0,
    narrated=True,
)

SKINS: Dict[str, SkinConfig] = {s.name: s for s in (CLASSIC_SKIN, AVATAR_SKIN)}


def skin_by_name(name: str) -> SkinConfig:
    try:
        return SKINS[name.strip().lower()]
    except KeyError:
        raise ValueError(f"Unknown skin {name!r}; expected one of {sorted(SKINS)}") from None


@dataclass(frozen=True)
class Settings:
    # Series
    symbol: str = "BIOCON.NS"
    start_date: date = date(2024, 8, 7)
    use_remote_data: bool = True  # False = bundled dataset only

    # Playback
    playback_interval_ms: int = 300
    skin_name: str = "classic"

    # yfinance cache
    cache_dir: str = ".cache/yf"
    cache_ttl_seconds: int = 6 * 60 * 60

    # Files
    bundled_data_path: Path = _PACKAGE_DIR / "data" / "biocon_ns_sample.json"
    preferences_path: Path = Path.home() / ".stock_game" / "sound_enabled.txt"
    sound_dir: Path = Path("sounds")

    @property
    def skin(self) -> SkinConfig:
        return skin_by_name(self.skin_name)
