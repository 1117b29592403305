"""Compatibility backfill for histories tagged with the old type labels.

Older exports only distinguish ``psko``, ``vanilla`` and ``hyper`` (plus
``other``).  Those buckets cannot be reclassified record by record, so
their totals are split across the current taxonomy with fixed
proportions.  This is a heuristic for charts only; the classifiers never
see the legacy labels.
"""
from __future__ import annotations

import math
from typing import Dict, Iterable, List, Tuple

from .categories import CategoryStat
from .classifiers import TOURNAMENT_TYPE_ORDER, TournamentType
from .estimators import roi_pct

LEGACY_PROPORTIONS: Dict[str, List[Tuple[TournamentType, float]]] = {
    "psko": [
        (TournamentType.BOUNTY_NORMAL, 0.8),
        (TournamentType.BOUNTY_HYPER, 0.2),
    ],
    "vanilla": [
        (TournamentType.VANILLA_NORMAL, 0.9),
        (TournamentType.VANILLA_HYPER, 0.1),
    ],
    "hyper": [
        (TournamentType.BOUNTY_HYPER, 0.6),
        (TournamentType.VANILLA_HYPER, 0.3),
        (TournamentType.SATELLITE_HYPER, 0.1),
    ],
    "other": [
        (TournamentType.SATELLITE_NORMAL, 0.8),
        (TournamentType.SATELLITE_HYPER, 0.2),
    ],
}

_CURRENT_KEYS = {t.value for t in TournamentType if t is not TournamentType.OTHER}


def redistribute_legacy_types(stats: Iterable[CategoryStat]) -> List[CategoryStat]:
    """Spread legacy type buckets over the current six-bucket taxonomy.

    Input already keyed by current buckets is returned as-is.  Counts are
    rounded half up per share; profit and buy-in are scaled and ROI is recomputed
    from the merged sums.
    """

    stats = list(stats)
    if any(s.bucket_key in _CURRENT_KEYS for s in stats):
        return [CategoryStat(s.bucket_key, s.count, s.profit, s.total_buy_in, s.roi) for s in stats]

    merged: Dict[str, List[float]] = {}
    for stat in stats:
        shares = LEGACY_PROPORTIONS.get(stat.bucket_key)
        if shares is None:
            shares = [(stat.bucket_key, 1.0)]
        for bucket, proportion in shares:
            key = bucket.value if isinstance(bucket, TournamentType) else str(bucket)
            count = math.floor(stat.count * proportion + 0.5)
            acc = merged.setdefault(key, [0, 0.0, 0.0])
            acc[0] += count
            acc[1] += stat.profit * proportion
            acc[2] += stat.total_buy_in * proportion

    rank = {key: idx for idx, key in enumerate(TOURNAMENT_TYPE_ORDER)}
    out = [
        CategoryStat(
            bucket_key=key,
            count=int(count),
            profit=profit,
            total_buy_in=buy_in,
            roi=roi_pct(profit, buy_in),
        )
        for key, (count, profit, buy_in) in merged.items()
    ]
    out.sort(key=lambda s: (rank.get(s.bucket_key, len(rank)), s.bucket_key))
    return out


__all__ = ["LEGACY_PROPORTIONS", "redistribute_legacy_types"]
