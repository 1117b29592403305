"""Calendar-month reporting windows anchored on big cash results."""
from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, List, TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from .records import TournamentRecord


def add_months(dt: date, months: int) -> date:
    """Shift ``dt`` by whole calendar months, clamping to the month's last day."""

    month = dt.month - 1 + months
    year = dt.year + month // 12
    month = month % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


@dataclass(frozen=True)
class BigWinWindow:
    """A fixed period starting at a large cash result."""

    name: str
    anchor_date: date
    duration_months: int = 6

    @property
    def end_date(self) -> date:
        return add_months(self.anchor_date, self.duration_months)

    def contains(self, value: date) -> bool:
        return in_window(value, self.anchor_date, self.duration_months)


def in_window(value: date, window_start: date, duration_months: int) -> bool:
    """Return ``True`` when ``window_start <= value <= window_start + months``."""

    if isinstance(value, datetime):
        value = value.date()
    return window_start <= value <= add_months(window_start, duration_months)


def filter_window(
    records: Iterable["TournamentRecord"], window: BigWinWindow
) -> List["TournamentRecord"]:
    """Return the records dated inside ``window`` (both ends inclusive)."""

    end = window.end_date
    return [r for r in records if window.anchor_date <= r.date <= end]


__all__ = ["BigWinWindow", "add_months", "in_window", "filter_window"]
