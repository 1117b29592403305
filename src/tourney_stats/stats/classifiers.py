"""Categorical buckets derived from a single tournament record."""
from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional, Tuple

from ..core.records import TournamentRecord

# Upper bounds are inclusive and checked in order.  Nothing is dedicated to
# (450, 500]: those buy-ins fall through to "500-990".
BUY_IN_RANGES: List[Tuple[float, str]] = [
    (33, "0-33"),
    (60, "33-60"),
    (130, "60-130"),
    (450, "130-450"),
    (990, "500-990"),
]
BUY_IN_TOP_RANGE = "1k+"
BUY_IN_RANGE_ORDER = [name for _, name in BUY_IN_RANGES] + [BUY_IN_TOP_RANGE]

ITM_FIELD_FRACTION = 0.15


class TournamentType(str, Enum):
    BOUNTY_HYPER = "BountyHyper"
    BOUNTY_NORMAL = "BountyNormal"
    VANILLA_HYPER = "VanillaHyper"
    VANILLA_NORMAL = "VanillaNormal"
    SATELLITE_HYPER = "SatelliteHyper"
    SATELLITE_NORMAL = "SatelliteNormal"
    OTHER = "Other"


TOURNAMENT_TYPE_ORDER = [t.value for t in TournamentType]


class Phase(str, Enum):
    EARLY = "early"
    MIDDLE = "middle"
    LATE = "late"
    FINAL_TABLE = "final_table"
    TOP3 = "top3"
    WINNER = "winner"


# (upper percentile bound, band); a position lands in exactly one band.
PHASE_BANDS: List[Tuple[float, Phase]] = [
    (15, Phase.FINAL_TABLE),
    (50, Phase.LATE),
    (85, Phase.MIDDLE),
]
PHASE_ORDER = [Phase.EARLY, Phase.MIDDLE, Phase.LATE, Phase.FINAL_TABLE, Phase.TOP3, Phase.WINNER]
PHASE_DESCRIPTIONS: Dict[str, Dict[Phase, str]] = {
    "pt": {
        Phase.EARLY: "Eliminação precoce (85%+ do field)",
        Phase.MIDDLE: "Fase média (85-50% do field)",
        Phase.LATE: "Fase tardia (50-15% do field)",
        Phase.FINAL_TABLE: "Mesa final (15% do field)",
        Phase.TOP3: "Top 3 (posições 1-3)",
        Phase.WINNER: "Campeão (posição 1)",
    },
    "en": {
        Phase.EARLY: "Early elimination (bottom 15% of the field)",
        Phase.MIDDLE: "Middle phase (50-85% of the field)",
        Phase.LATE: "Late phase (15-50% of the field)",
        Phase.FINAL_TABLE: "Final table (top 15% of the field)",
        Phase.TOP3: "Top 3 (positions 1-3)",
        Phase.WINNER: "Winner (position 1)",
    },
}


def phase_descriptions(locale: str = "pt") -> Dict[Phase, str]:
    try:
        return PHASE_DESCRIPTIONS[locale]
    except KeyError as exc:
        raise ValueError(f"Unsupported description locale: {locale!r}") from exc


def classify_buy_in_range(buy_in: float | None) -> str:
    value = buy_in or 0.0
    for upper, name in BUY_IN_RANGES:
        if value <= upper:
            return name
    return BUY_IN_TOP_RANGE


def classify_tournament_type(label: str | None) -> TournamentType:
    """Map a free-text tournament label onto the six-bucket taxonomy.

    Substring tests are case sensitive and checked in priority order:
    ``Bounty``, then ``Satellite``, then the Vanilla fall-through which
    accepts labels naming ``Vanilla`` or ``Hyper``.  Anything else,
    including the lowercase legacy labels, is ``Other``.
    """

    if not label:
        return TournamentType.OTHER
    hyper = "Hyper" in label
    if "Bounty" in label:
        return TournamentType.BOUNTY_HYPER if hyper else TournamentType.BOUNTY_NORMAL
    if "Satellite" in label:
        return TournamentType.SATELLITE_HYPER if hyper else TournamentType.SATELLITE_NORMAL
    if "Vanilla" in label or hyper:
        return TournamentType.VANILLA_HYPER if hyper else TournamentType.VANILLA_NORMAL
    return TournamentType.OTHER


def is_cashed(record: TournamentRecord) -> bool:
    """In-the-money predicate: a positive prize or a top-15% finish."""

    if record.prize is not None and record.prize > 0:
        return True
    if record.position is not None and record.entries:
        return record.position <= record.entries * ITM_FIELD_FRACTION
    return False


def has_phase_data(position: int | None, entries: int | None) -> bool:
    return position is not None and position >= 1 and bool(entries) and position <= entries


def classify_elimination_phase(position: int | None, entries: int | None) -> Optional[List[Phase]]:
    """Return the phases a finish counts towards, or ``None`` without valid data.

    The result always holds exactly one percentile band and, for podium
    finishes, the ``top3`` and ``winner`` overlays.
    """

    if not has_phase_data(position, entries):
        return None
    percentile = position / entries * 100
    band = Phase.EARLY
    for upper, phase in PHASE_BANDS:
        if percentile <= upper:
            band = phase
            break
    phases = [band]
    if position <= 3:
        phases.append(Phase.TOP3)
    if position == 1:
        phases.append(Phase.WINNER)
    return phases


def buy_in_range_of(record: TournamentRecord) -> str:
    return classify_buy_in_range(record.buy_in)


def tournament_type_of(record: TournamentRecord) -> str:
    return classify_tournament_type(record.tournament_type).value


__all__ = [
    "BUY_IN_RANGES",
    "BUY_IN_RANGE_ORDER",
    "TOURNAMENT_TYPE_ORDER",
    "PHASE_BANDS",
    "PHASE_ORDER",
    "PHASE_DESCRIPTIONS",
    "phase_descriptions",
    "TournamentType",
    "Phase",
    "classify_buy_in_range",
    "classify_tournament_type",
    "is_cashed",
    "has_phase_data",
    "classify_elimination_phase",
    "buy_in_range_of",
    "tournament_type_of",
]
