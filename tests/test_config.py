from __future__ import annotations

import pytest

from tracker_sync.core.config import ConfigurationError, Settings
from tracker_sync.core.logging_config import resolve_log_level
from tracker_sync.core.text import normalize_name, season_label


def test_require_keys_raise_configuration_error() -> None:
    s = Settings(api_football_key=None, balldontlie_api_key="")

    with pytest.raises(ConfigurationError):
        s.require_api_football_key()
    with pytest.raises(ConfigurationError):
        s.require_balldontlie_key()


def test_require_keys_return_configured_secret() -> None:
    s = Settings(api_football_key="af", balldontlie_api_key="bdl")

    assert s.require_api_football_key() == "af"
    assert s.require_balldontlie_key() == "bdl"


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("API_FOOTBALL_TEAM_IDS", '{"Galatasaray": 645}')
    monkeypatch.setenv("SYNC_DELAY_SECONDS", "0")

    s = Settings()

    assert s.api_football_team_ids == {"Galatasaray": 645}
    assert s.sync_delay_seconds == 0.0


def test_season_label() -> None:
    assert season_label(2024) == "2024/25"
    assert season_label(1999) == "1999/00"


def test_normalize_name_strips_accents() -> None:
    assert normalize_name("  Eintracht  Frankfurt ") == "eintracht frankfurt"
    assert normalize_name("Arda Güler") == "arda guler"


def test_resolve_log_level_defaults_by_environment() -> None:
    assert resolve_log_level(None, "production") == 20
    assert resolve_log_level(None, "development") == 10
    assert resolve_log_level("warning", "production") == 30
