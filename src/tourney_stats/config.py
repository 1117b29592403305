from __future__ import annotations

"""Settings loader with environment variables.

``get_settings`` reads environment variables and caches the resulting
``Settings`` object.  Tests may call ``reset_settings_cache`` to force a
reload when they modify environment variables at runtime.
"""

from dataclasses import dataclass
from datetime import date
import os
from functools import lru_cache
from typing import Tuple

from .core.windows import BigWinWindow

DEFAULT_BIG_WIN_ANCHORS = "2022-05-23,2023-04-06"
DEFAULT_BIG_WIN_MONTHS = 6
WINDOW_NAMES = ("first", "second")
MONTH_LOCALES = ("pt", "en")


@dataclass(frozen=True)
class Settings:
    big_win_windows: Tuple[BigWinWindow, ...]
    month_locale: str = "pt"
    log_level: str = "INFO"
    task_workers: int = 2
    db_dsn: str | None = None
    db_table: str = "tournaments"


def _parse_windows(raw: str, months: int) -> Tuple[BigWinWindow, ...]:
    anchors = [part.strip() for part in raw.split(",") if part.strip()]
    if len(anchors) != len(WINDOW_NAMES):
        raise ValueError(
            f"TS_BIG_WIN_ANCHORS must list {len(WINDOW_NAMES)} dates, got {len(anchors)}"
        )
    if months <= 0:
        raise ValueError("TS_BIG_WIN_MONTHS must be positive")
    windows = []
    for name, anchor in zip(WINDOW_NAMES, anchors):
        try:
            anchor_date = date.fromisoformat(anchor)
        except ValueError as exc:
            raise ValueError(f"Invalid big-win anchor date: {anchor!r}") from exc
        windows.append(BigWinWindow(name=name, anchor_date=anchor_date, duration_months=months))
    return tuple(windows)


@lru_cache()
def get_settings() -> Settings:
    """Return settings loaded from environment variables."""

    months_raw = os.getenv("TS_BIG_WIN_MONTHS", str(DEFAULT_BIG_WIN_MONTHS))
    try:
        months = int(months_raw)
    except ValueError as exc:
        raise ValueError(f"TS_BIG_WIN_MONTHS must be an integer, got {months_raw!r}") from exc
    windows = _parse_windows(os.getenv("TS_BIG_WIN_ANCHORS", DEFAULT_BIG_WIN_ANCHORS), months)

    month_locale = os.getenv("TS_MONTH_LOCALE", "pt").lower()
    if month_locale not in MONTH_LOCALES:
        raise ValueError(f"TS_MONTH_LOCALE must be one of {MONTH_LOCALES}, got {month_locale!r}")

    return Settings(
        big_win_windows=windows,
        month_locale=month_locale,
        log_level=os.getenv("TS_LOG_LEVEL", "INFO").upper(),
        task_workers=int(os.getenv("TS_TASK_WORKERS", "2")),
        db_dsn=os.getenv("TS_DB_DSN"),
        db_table=os.getenv("TS_DB_TABLE", "tournaments"),
    )


def reset_settings_cache() -> None:
    """Clear the settings cache (mainly for tests)."""

    get_settings.cache_clear()
