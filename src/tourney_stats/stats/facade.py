"""Report bundles assembled from the individual aggregators.

Every builder takes the full record list (``TournamentRecord`` objects or
raw mappings), validates it once, and returns a frozen dataclass.  The
builders keep no state between calls and never mutate their input, so the
same function serves inline HTTP calls and offloaded tasks.  Window and
locale settings come from :func:`tourney_stats.config.get_settings` unless
passed explicitly.
"""
from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..config import get_settings
from ..core.records import TournamentRecord, normalise_records, records_frame
from ..core.windows import BigWinWindow, filter_window
from ..io.artifacts import to_plain
from .categories import CategoryStat, aggregate_by_buy_in_range, aggregate_by_tournament_type
from .classifiers import is_cashed
from .estimators import pct, roi_pct, safe_ratio
from .itm import ITMAnalysis, compute_itm_stats
from .monthly import (
    MonthlyROIPoint,
    MonthlyStat,
    ProfitPoint,
    aggregate_by_month,
    best_month_by_roi,
    cumulative_profit_series,
    monthly_roi_series,
)
from .phases import PhaseAnalysis, compute_elimination_phases

logger = logging.getLogger(__name__)

RecordInput = Iterable[TournamentRecord | Mapping[str, Any]]

TOP_MONTHS = 5
BIG_HITS_LIMIT = 20


@dataclass(frozen=True)
class PrizeHighlight:
    prize: float
    date: Optional[dt.date]


@dataclass(frozen=True)
class WindowMonthlyStats:
    window: str
    start_date: dt.date
    end_date: dt.date
    record_count: int
    months: List[MonthlyStat] = field(default_factory=list)


class _Bundle:
    def to_dict(self) -> Dict[str, Any]:
        return to_plain(self)


@dataclass(frozen=True)
class DashboardBundle(_Bundle):
    total_tournaments: int
    total_profit: float
    total_buy_in: float
    roi: float
    itm_rate: float
    avg_buy_in: float
    highest_prize: PrizeHighlight
    best_monthly_roi: MonthlyStat
    cumulative_profit: List[ProfitPoint]
    monthly_roi: List[MonthlyROIPoint]
    monthly_stats: List[MonthlyStat]
    buy_in_range_stats: List[CategoryStat]
    type_stats: List[CategoryStat]
    post_big_win: Dict[str, WindowMonthlyStats]


@dataclass(frozen=True)
class DossierBundle(_Bundle):
    monthly_stats: List[MonthlyStat]
    post_big_win: Dict[str, WindowMonthlyStats]
    buy_in_range_stats: List[CategoryStat]
    type_stats: List[CategoryStat]
    itm: ITMAnalysis
    elimination_phases: PhaseAnalysis


@dataclass(frozen=True)
class MonthlyAnalysisBundle(_Bundle):
    monthly_stats: List[MonthlyStat]
    best_months: List[MonthlyStat]
    worst_months: List[MonthlyStat]
    highest_volume_months: List[MonthlyStat]
    monthly_roi: List[MonthlyROIPoint]
    post_big_win: Dict[str, WindowMonthlyStats]


@dataclass(frozen=True)
class RoiBundle(_Bundle):
    total_profit: float
    total_buy_in: float
    roi: float
    monthly_stats: List[MonthlyStat]
    monthly_roi: List[MonthlyROIPoint]
    buy_in_range_stats: List[CategoryStat]
    type_stats: List[CategoryStat]


@dataclass(frozen=True)
class YearlyBigHitStat:
    year: int
    count: int
    total_prize: float
    total_profit: float
    roi: float


@dataclass(frozen=True)
class BigHitsBundle(_Bundle):
    big_hits: List[TournamentRecord]
    total_prize: float
    total_profit: float
    roi: float
    yearly_stats: List[YearlyBigHitStat]


def _settings_for(
    windows: Sequence[BigWinWindow] | None, locale: str | None
) -> Tuple[Tuple[BigWinWindow, ...], str]:
    if windows is None or locale is None:
        settings = get_settings()
        windows = settings.big_win_windows if windows is None else windows
        locale = settings.month_locale if locale is None else locale
    return tuple(windows), locale


def highest_prize(records: Iterable[TournamentRecord]) -> PrizeHighlight:
    """Largest single prize; the earliest date wins ties."""

    best: Optional[TournamentRecord] = None
    for r in records:
        if r.prize is None or r.prize <= 0:
            continue
        if best is None or r.prize > best.prize or (r.prize == best.prize and r.date < best.date):
            best = r
    if best is None:
        return PrizeHighlight(prize=0.0, date=None)
    return PrizeHighlight(prize=float(best.prize), date=best.date)


def post_big_win_stats(
    records: Sequence[TournamentRecord],
    windows: Sequence[BigWinWindow],
    locale: str,
) -> Dict[str, WindowMonthlyStats]:
    """Monthly stats restricted to each big-win window."""

    out: Dict[str, WindowMonthlyStats] = {}
    for window in windows:
        subset = filter_window(records, window)
        logger.debug(
            "Big-win window %s: %s to %s, %d records",
            window.name,
            window.anchor_date,
            window.end_date,
            len(subset),
        )
        out[window.name] = WindowMonthlyStats(
            window=window.name,
            start_date=window.anchor_date,
            end_date=window.end_date,
            record_count=len(subset),
            months=aggregate_by_month(subset, locale),
        )
    return out


def build_dashboard_bundle(
    records: RecordInput,
    windows: Sequence[BigWinWindow] | None = None,
    locale: str | None = None,
) -> DashboardBundle:
    recs = normalise_records(records)
    windows, locale = _settings_for(windows, locale)

    total = len(recs)
    total_profit = float(sum(r.profit for r in recs))
    total_buy_in = float(sum(r.buy_in for r in recs))
    itm = sum(1 for r in recs if is_cashed(r))
    monthly = aggregate_by_month(recs, locale)

    return DashboardBundle(
        total_tournaments=total,
        total_profit=total_profit,
        total_buy_in=total_buy_in,
        roi=roi_pct(total_profit, total_buy_in),
        itm_rate=pct(itm, total),
        avg_buy_in=safe_ratio(total_buy_in, total),
        highest_prize=highest_prize(recs),
        best_monthly_roi=best_month_by_roi(monthly),
        cumulative_profit=cumulative_profit_series(recs),
        monthly_roi=monthly_roi_series(monthly),
        monthly_stats=monthly,
        buy_in_range_stats=aggregate_by_buy_in_range(recs),
        type_stats=aggregate_by_tournament_type(recs),
        post_big_win=post_big_win_stats(recs, windows, locale),
    )


def build_dossier_bundle(
    records: RecordInput,
    windows: Sequence[BigWinWindow] | None = None,
    locale: str | None = None,
) -> DossierBundle:
    recs = normalise_records(records)
    windows, locale = _settings_for(windows, locale)
    return DossierBundle(
        monthly_stats=aggregate_by_month(recs, locale),
        post_big_win=post_big_win_stats(recs, windows, locale),
        buy_in_range_stats=aggregate_by_buy_in_range(recs),
        type_stats=aggregate_by_tournament_type(recs),
        itm=compute_itm_stats(recs, windows, locale),
        elimination_phases=compute_elimination_phases(recs, windows, locale),
    )


def build_monthly_analysis_bundle(
    records: RecordInput,
    windows: Sequence[BigWinWindow] | None = None,
    locale: str | None = None,
) -> MonthlyAnalysisBundle:
    recs = normalise_records(records)
    windows, locale = _settings_for(windows, locale)
    monthly = aggregate_by_month(recs, locale)
    # sorted() is stable, so equal values keep calendar order
    return MonthlyAnalysisBundle(
        monthly_stats=monthly,
        best_months=sorted(monthly, key=lambda s: s.avg_roi, reverse=True)[:TOP_MONTHS],
        worst_months=sorted(monthly, key=lambda s: s.avg_roi)[:TOP_MONTHS],
        highest_volume_months=sorted(monthly, key=lambda s: s.count, reverse=True)[:TOP_MONTHS],
        monthly_roi=monthly_roi_series(monthly),
        post_big_win=post_big_win_stats(recs, windows, locale),
    )


def build_roi_bundle(records: RecordInput, locale: str | None = None) -> RoiBundle:
    """ROI-only slice of the dashboard: totals, monthly ROI and category ROI."""

    recs = normalise_records(records)
    if locale is None:
        locale = get_settings().month_locale
    total_profit = float(sum(r.profit for r in recs))
    total_buy_in = float(sum(r.buy_in for r in recs))
    monthly = aggregate_by_month(recs, locale)
    return RoiBundle(
        total_profit=total_profit,
        total_buy_in=total_buy_in,
        roi=roi_pct(total_profit, total_buy_in),
        monthly_stats=monthly,
        monthly_roi=monthly_roi_series(monthly),
        buy_in_range_stats=aggregate_by_buy_in_range(recs),
        type_stats=aggregate_by_tournament_type(recs),
    )


def build_big_hits_bundle(records: RecordInput, limit: int = BIG_HITS_LIMIT) -> BigHitsBundle:
    recs = normalise_records(records)
    hits = sorted(
        (r for r in recs if r.prize is not None and r.prize > 0),
        key=lambda r: (-r.prize, r.date),
    )[: max(limit, 0)]

    total_prize = float(sum(r.prize for r in hits))
    total_profit = float(sum(r.profit for r in hits))
    total_buy_in = float(sum(r.buy_in for r in hits))

    yearly: List[YearlyBigHitStat] = []
    df = records_frame(hits)
    if not df.empty:
        df["prize"] = df["prize"].astype(float)
        grouped = (
            df.groupby("year", sort=True)
            .agg(
                count=("prize", "size"),
                total_prize=("prize", "sum"),
                total_profit=("profit", "sum"),
                total_buy_in=("buy_in", "sum"),
            )
            .reset_index()
        )
        for row in grouped.to_dict("records"):
            yearly.append(
                YearlyBigHitStat(
                    year=int(row["year"]),
                    count=int(row["count"]),
                    total_prize=float(row["total_prize"]),
                    total_profit=float(row["total_profit"]),
                    roi=roi_pct(float(row["total_profit"]), float(row["total_buy_in"])),
                )
            )

    return BigHitsBundle(
        big_hits=hits,
        total_prize=total_prize,
        total_profit=total_profit,
        roi=roi_pct(total_profit, total_buy_in),
        yearly_stats=yearly,
    )


BUNDLE_BUILDERS: Dict[str, Callable[..., _Bundle]] = {
    "dashboard": build_dashboard_bundle,
    "dossier": build_dossier_bundle,
    "monthly_analysis": build_monthly_analysis_bundle,
    "roi": build_roi_bundle,
    "big_hits": build_big_hits_bundle,
}


def build_bundle(kind: str, records: RecordInput) -> _Bundle:
    """Dispatch to the builder registered for ``kind``."""

    try:
        builder = BUNDLE_BUILDERS[kind]
    except KeyError as exc:
        raise ValueError(f"Unknown bundle kind: {kind!r}") from exc
    return builder(records)


__all__ = [
    "PrizeHighlight",
    "WindowMonthlyStats",
    "DashboardBundle",
    "DossierBundle",
    "MonthlyAnalysisBundle",
    "RoiBundle",
    "YearlyBigHitStat",
    "BigHitsBundle",
    "BUNDLE_BUILDERS",
    "highest_prize",
    "post_big_win_stats",
    "build_dashboard_bundle",
    "build_dossier_bundle",
    "build_monthly_analysis_bundle",
    "build_roi_bundle",
    "build_big_hits_bundle",
    "build_bundle",
]
