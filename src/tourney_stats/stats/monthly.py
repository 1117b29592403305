"""Calendar-month aggregation of tournament results."""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Dict, Iterable, List

from ..core.records import TournamentRecord, records_frame
from .estimators import roi_pct, safe_ratio

DEFAULT_LOCALE = "pt"

MONTH_ABBREVIATIONS: Dict[str, List[str]] = {
    "pt": ["Jan", "Fev", "Mar", "Abr", "Mai", "Jun", "Jul", "Ago", "Set", "Out", "Nov", "Dez"],
    "en": ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"],
}


@dataclass(frozen=True)
class MonthlyStat:
    month_key: str
    year: int
    month: int
    count: int
    entries: int
    profit: float
    total_buy_in: float
    avg_buy_in: float
    avg_roi: float

    @classmethod
    def empty(cls) -> "MonthlyStat":
        return cls("", 0, 0, 0, 0, 0.0, 0.0, 0.0, 0.0)


@dataclass(frozen=True)
class ProfitPoint:
    date: dt.date
    cumulative_profit: float


@dataclass(frozen=True)
class MonthlyROIPoint:
    month_key: str
    roi: float


def month_key(year: int, month: int, locale: str = DEFAULT_LOCALE) -> str:
    """Return the ``"Mon/YY"`` label for a calendar month."""

    try:
        names = MONTH_ABBREVIATIONS[locale]
    except KeyError as exc:
        raise ValueError(f"Unsupported month locale: {locale!r}") from exc
    return f"{names[month - 1]}/{year % 100:02d}"


def aggregate_by_month(
    records: Iterable[TournamentRecord], locale: str = DEFAULT_LOCALE
) -> List[MonthlyStat]:
    """Group records by calendar month, ascending by (year, month)."""

    df = records_frame(records)
    if df.empty:
        return []
    grouped = (
        df.groupby(["year", "month"], sort=True)
        .agg(
            count=("profit", "size"),
            entries=("entries", "sum"),
            profit=("profit", "sum"),
            total_buy_in=("buy_in", "sum"),
        )
        .reset_index()
    )
    out: List[MonthlyStat] = []
    for row in grouped.to_dict("records"):
        year = int(row["year"])
        month = int(row["month"])
        count = int(row["count"])
        profit = float(row["profit"])
        total_buy_in = float(row["total_buy_in"])
        out.append(
            MonthlyStat(
                month_key=month_key(year, month, locale),
                year=year,
                month=month,
                count=count,
                entries=int(row["entries"]),
                profit=profit,
                total_buy_in=total_buy_in,
                avg_buy_in=safe_ratio(total_buy_in, count),
                avg_roi=roi_pct(profit, total_buy_in),
            )
        )
    return out


def cumulative_profit_series(records: Iterable[TournamentRecord]) -> List[ProfitPoint]:
    """Running profit total, one point per record in date order."""

    df = records_frame(records)
    if df.empty:
        return []
    df = df.sort_values("date", kind="mergesort")
    running = df["profit"].cumsum()
    return [
        ProfitPoint(date=d, cumulative_profit=float(total))
        for d, total in zip(df["date"], running)
    ]


def best_month_by_roi(monthly_stats: List[MonthlyStat]) -> MonthlyStat:
    """Month with the highest ROI; a zero sentinel for empty input."""

    if not monthly_stats:
        return MonthlyStat.empty()
    return max(monthly_stats, key=lambda s: s.avg_roi)


def monthly_roi_series(monthly_stats: List[MonthlyStat]) -> List[MonthlyROIPoint]:
    return [MonthlyROIPoint(month_key=s.month_key, roi=s.avg_roi) for s in monthly_stats]


__all__ = [
    "DEFAULT_LOCALE",
    "MONTH_ABBREVIATIONS",
    "MonthlyStat",
    "ProfitPoint",
    "MonthlyROIPoint",
    "month_key",
    "aggregate_by_month",
    "cumulative_profit_series",
    "best_month_by_roi",
    "monthly_roi_series",
]
