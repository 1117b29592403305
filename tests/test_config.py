from datetime import date

import pytest

from tourney_stats.config import get_settings, reset_settings_cache


def test_defaults(monkeypatch):
    for name in ("TS_BIG_WIN_ANCHORS", "TS_BIG_WIN_MONTHS", "TS_MONTH_LOCALE", "TS_DB_DSN"):
        monkeypatch.delenv(name, raising=False)
    reset_settings_cache()
    settings = get_settings()
    first, second = settings.big_win_windows
    assert (first.name, first.anchor_date, first.duration_months) == ("first", date(2022, 5, 23), 6)
    assert second.anchor_date == date(2023, 4, 6)
    assert settings.month_locale == "pt"
    assert settings.db_dsn is None
    assert settings.db_table == "tournaments"
    reset_settings_cache()


def test_env_override(monkeypatch):
    monkeypatch.setenv("TS_BIG_WIN_ANCHORS", "2024-01-31, 2024-06-01")
    monkeypatch.setenv("TS_BIG_WIN_MONTHS", "1")
    monkeypatch.setenv("TS_MONTH_LOCALE", "EN")
    reset_settings_cache()
    settings = get_settings()
    assert settings.big_win_windows[0].end_date == date(2024, 2, 29)
    assert settings.month_locale == "en"
    assert get_settings() is settings
    reset_settings_cache()


@pytest.mark.parametrize(
    "name,value",
    [
        ("TS_BIG_WIN_ANCHORS", "2024-01-01"),
        ("TS_BIG_WIN_ANCHORS", "2024-01-01,yesterday"),
        ("TS_BIG_WIN_MONTHS", "0"),
        ("TS_MONTH_LOCALE", "fr"),
    ],
)
def test_invalid_values(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    reset_settings_cache()
    with pytest.raises(ValueError):
        get_settings()
    reset_settings_cache()
