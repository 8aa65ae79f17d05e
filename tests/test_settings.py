from __future__ import annotations

import pytest

from stock_game.config.settings import AVATAR_SKIN, CLASSIC_SKIN, Settings, skin_by_name


def test_skin_lookup() -> None:
    assert skin_by_name("classic") is CLASSIC_SKIN
    assert skin_by_name(" Avatar ") is AVATAR_SKIN
    with pytest.raises(ValueError, match="Unknown skin"):
        skin_by_name("noir")


def test_both_skins_share_thresholds() -> None:
    assert (CLASSIC_SKIN.pause_price, CLASSIC_SKIN.target_price) == (390.0, 400.0)
    assert (AVATAR_SKIN.pause_price, AVATAR_SKIN.target_price) == (390.0, 400.0)
    assert AVATAR_SKIN.narrated and not CLASSIC_SKIN.narrated


def test_defaults() -> None:
    s = Settings()
    assert s.symbol == "BIOCON.NS"
    assert s.playback_interval_ms == 300
    assert s.skin is CLASSIC_SKIN
    assert s.bundled_data_path.name == "biocon_ns_sample.json"
    assert s.bundled_data_path.exists()
