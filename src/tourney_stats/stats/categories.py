"""Per-bucket aggregation for any record classifier."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, List, Sequence

from ..core.records import TournamentRecord, records_frame
from .classifiers import BUY_IN_RANGE_ORDER, TOURNAMENT_TYPE_ORDER, buy_in_range_of, tournament_type_of
from .estimators import roi_pct

Classifier = Callable[[TournamentRecord], object]


def _bucket_key(key: object) -> str:
    return str(key.value) if isinstance(key, Enum) else str(key)


@dataclass(frozen=True)
class CategoryStat:
    bucket_key: str
    count: int
    profit: float
    total_buy_in: float
    roi: float


def aggregate_by_category(
    records: Iterable[TournamentRecord],
    classifier: Classifier,
    order: Sequence[str] | None = None,
) -> List[CategoryStat]:
    """Group records by ``classifier`` and sum count, profit and buy-in.

    Only buckets with at least one record are returned.  With ``order`` the
    buckets follow that sequence (unknown keys last, by name), otherwise
    they are sorted by key.
    """

    records = list(records)
    df = records_frame(records)
    if df.empty:
        return []
    df["bucket"] = [_bucket_key(classifier(r)) for r in records]
    grouped = (
        df.groupby("bucket", sort=True)
        .agg(count=("profit", "size"), profit=("profit", "sum"), total_buy_in=("buy_in", "sum"))
        .reset_index()
    )
    stats = [
        CategoryStat(
            bucket_key=row["bucket"],
            count=int(row["count"]),
            profit=float(row["profit"]),
            total_buy_in=float(row["total_buy_in"]),
            roi=roi_pct(float(row["profit"]), float(row["total_buy_in"])),
        )
        for row in grouped.to_dict("records")
    ]
    if order is not None:
        rank = {key: idx for idx, key in enumerate(order)}
        stats.sort(key=lambda s: (rank.get(s.bucket_key, len(rank)), s.bucket_key))
    return stats


def aggregate_by_buy_in_range(records: Iterable[TournamentRecord]) -> List[CategoryStat]:
    return aggregate_by_category(records, buy_in_range_of, BUY_IN_RANGE_ORDER)


def aggregate_by_tournament_type(records: Iterable[TournamentRecord]) -> List[CategoryStat]:
    return aggregate_by_category(records, tournament_type_of, TOURNAMENT_TYPE_ORDER)


__all__ = [
    "CategoryStat",
    "Classifier",
    "aggregate_by_category",
    "aggregate_by_buy_in_range",
    "aggregate_by_tournament_type",
]
