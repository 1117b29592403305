"""In-the-money rates, overall, per month and per big-win window."""
from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

from ..config import get_settings
from ..core.records import TournamentRecord, records_frame
from ..core.windows import BigWinWindow, filter_window
from .classifiers import is_cashed
from .estimators import pct
from .monthly import DEFAULT_LOCALE, month_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ITMSummary:
    total_count: int
    itm_count: int
    itm_percentage: float
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None


@dataclass(frozen=True)
class MonthlyITM:
    month_key: str
    total_count: int
    itm_count: int
    itm_percentage: float


@dataclass(frozen=True)
class ITMAnalysis:
    overall: ITMSummary
    windows: Dict[str, ITMSummary] = field(default_factory=dict)
    monthly: List[MonthlyITM] = field(default_factory=list)


def summarise_itm(records: Sequence[TournamentRecord]) -> ITMSummary:
    total = len(records)
    itm = sum(1 for r in records if is_cashed(r))
    return ITMSummary(total_count=total, itm_count=itm, itm_percentage=pct(itm, total))


def monthly_itm(records: Sequence[TournamentRecord], locale: str = DEFAULT_LOCALE) -> List[MonthlyITM]:
    df = records_frame(records)
    if df.empty:
        return []
    df["itm"] = [is_cashed(r) for r in records]
    grouped = (
        df.groupby(["year", "month"], sort=True)
        .agg(total_count=("itm", "size"), itm_count=("itm", "sum"))
        .reset_index()
    )
    return [
        MonthlyITM(
            month_key=month_key(int(row["year"]), int(row["month"]), locale),
            total_count=int(row["total_count"]),
            itm_count=int(row["itm_count"]),
            itm_percentage=pct(int(row["itm_count"]), int(row["total_count"])),
        )
        for row in grouped.to_dict("records")
    ]


def compute_itm_stats(
    records: Iterable[TournamentRecord],
    windows: Sequence[BigWinWindow] | None = None,
    locale: str = DEFAULT_LOCALE,
) -> ITMAnalysis:
    """ITM summary for all records, each big-win window and each month."""

    records = list(records)
    if windows is None:
        windows = get_settings().big_win_windows
    per_window: Dict[str, ITMSummary] = {}
    for window in windows:
        subset = filter_window(records, window)
        summary = summarise_itm(subset)
        logger.debug(
            "ITM window %s [%s, %s]: %d records, %d cashed",
            window.name,
            window.anchor_date,
            window.end_date,
            summary.total_count,
            summary.itm_count,
        )
        per_window[window.name] = ITMSummary(
            total_count=summary.total_count,
            itm_count=summary.itm_count,
            itm_percentage=summary.itm_percentage,
            start_date=window.anchor_date,
            end_date=window.end_date,
        )
    return ITMAnalysis(
        overall=summarise_itm(records),
        windows=per_window,
        monthly=monthly_itm(records, locale),
    )


__all__ = ["ITMSummary", "MonthlyITM", "ITMAnalysis", "summarise_itm", "monthly_itm", "compute_itm_stats"]
