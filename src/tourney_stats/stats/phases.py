"""Elimination-phase distribution of finishing positions.

Each finish with a usable (position, entries) pair falls in exactly one
percentile band (``final_table`` <= 15%, ``late`` <= 50%, ``middle`` <= 85%,
``early`` otherwise).  Podium finishes are additionally counted under the
``top3`` and ``winner`` overlays, so the six percentages do not sum to 100.
Percentages are relative to ``valid_count``; records without phase data are
left out of the distribution but still reported in ``total_count``.
"""
from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, Sequence

from ..config import get_settings
from ..core.records import TournamentRecord
from ..core.windows import BigWinWindow, filter_window
from .classifiers import PHASE_ORDER, classify_elimination_phase, phase_descriptions
from .estimators import pct

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PhaseStat:
    count: int
    percentage: float
    description: str


@dataclass(frozen=True)
class PhaseDistribution:
    phases: Dict[str, PhaseStat]
    valid_count: int
    total_count: int
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None


@dataclass(frozen=True)
class PhaseAnalysis:
    overall: PhaseDistribution
    windows: Dict[str, PhaseDistribution] = field(default_factory=dict)


def phase_distribution(
    records: Sequence[TournamentRecord],
    start_date: Optional[dt.date] = None,
    end_date: Optional[dt.date] = None,
    locale: str = "pt",
) -> PhaseDistribution:
    descriptions = phase_descriptions(locale)
    counts = {phase: 0 for phase in PHASE_ORDER}
    valid = 0
    for record in records:
        phases = classify_elimination_phase(record.position, record.entries)
        if phases is None:
            continue
        valid += 1
        for phase in phases:
            counts[phase] += 1
    return PhaseDistribution(
        phases={
            phase.value: PhaseStat(
                count=counts[phase],
                percentage=pct(counts[phase], valid),
                description=descriptions[phase],
            )
            for phase in PHASE_ORDER
        },
        valid_count=valid,
        total_count=len(records),
        start_date=start_date,
        end_date=end_date,
    )


def compute_elimination_phases(
    records: Iterable[TournamentRecord],
    windows: Sequence[BigWinWindow] | None = None,
    locale: str = "pt",
) -> PhaseAnalysis:
    records = list(records)
    if windows is None:
        windows = get_settings().big_win_windows
    per_window: Dict[str, PhaseDistribution] = {}
    for window in windows:
        dist = phase_distribution(
            filter_window(records, window),
            start_date=window.anchor_date,
            end_date=window.end_date,
            locale=locale,
        )
        logger.debug(
            "Phase window %s: %d valid of %d records", window.name, dist.valid_count, dist.total_count
        )
        per_window[window.name] = dist
    return PhaseAnalysis(overall=phase_distribution(records, locale=locale), windows=per_window)


__all__ = [
    "PhaseStat",
    "PhaseDistribution",
    "PhaseAnalysis",
    "phase_distribution",
    "compute_elimination_phases",
]
