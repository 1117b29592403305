"""Tournament statistics aggregation engine."""
from __future__ import annotations

from .categories import CategoryStat, aggregate_by_category
from .classifiers import (
    Phase,
    TournamentType,
    classify_buy_in_range,
    classify_elimination_phase,
    classify_tournament_type,
    is_cashed,
)
from .facade import (
    BUNDLE_BUILDERS,
    build_big_hits_bundle,
    build_bundle,
    build_dashboard_bundle,
    build_dossier_bundle,
    build_monthly_analysis_bundle,
    build_roi_bundle,
)
from .itm import compute_itm_stats
from .monthly import MonthlyStat, aggregate_by_month, best_month_by_roi, cumulative_profit_series
from .phases import compute_elimination_phases

__all__ = [
    "CategoryStat",
    "MonthlyStat",
    "Phase",
    "TournamentType",
    "BUNDLE_BUILDERS",
    "aggregate_by_category",
    "aggregate_by_month",
    "best_month_by_roi",
    "build_big_hits_bundle",
    "build_bundle",
    "build_dashboard_bundle",
    "build_dossier_bundle",
    "build_monthly_analysis_bundle",
    "build_roi_bundle",
    "classify_buy_in_range",
    "classify_elimination_phase",
    "classify_tournament_type",
    "compute_elimination_phases",
    "compute_itm_stats",
    "cumulative_profit_series",
    "is_cashed",
]
