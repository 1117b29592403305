from datetime import date

import pytest

from tourney_stats.core.records import TournamentRecord
from tourney_stats.core.windows import BigWinWindow
from tourney_stats.stats.phases import compute_elimination_phases, phase_distribution


def _rec(d, position, entries):
    return TournamentRecord(date=d, profit=0.0, position=position, entries=entries)


def test_distribution_counts_overlays():
    records = [
        _rec(date(2024, 1, 1), 1, 100),
        _rec(date(2024, 1, 2), 2, 100),
        _rec(date(2024, 1, 3), 40, 100),
        _rec(date(2024, 1, 4), 95, 100),
        _rec(date(2024, 1, 5), None, 100),
        _rec(date(2024, 1, 6), 7, 0),
    ]
    dist = phase_distribution(records)
    assert dist.valid_count == 4
    assert dist.total_count == 6
    phases = dist.phases
    assert list(phases) == ["early", "middle", "late", "final_table", "top3", "winner"]
    assert phases["final_table"].count == 2
    assert phases["final_table"].percentage == pytest.approx(50.0)
    assert phases["late"].count == 1
    assert phases["early"].count == 1
    assert phases["middle"].count == 0
    assert phases["top3"].count == 2
    assert phases["winner"].count == 1
    assert phases["winner"].percentage == pytest.approx(25.0)
    band_total = sum(phases[k].count for k in ("early", "middle", "late", "final_table"))
    assert band_total == dist.valid_count


def test_windows_and_empty_distribution():
    records = [_rec(date(2022, 6, 1), 80, 100), _rec(date(2020, 1, 1), 1, 10)]
    windows = (BigWinWindow("first", date(2022, 5, 23)), BigWinWindow("second", date(2023, 4, 6)))
    analysis = compute_elimination_phases(records, windows=windows)
    assert analysis.overall.valid_count == 2
    assert analysis.windows["first"].phases["middle"].count == 1
    assert analysis.windows["first"].start_date == date(2022, 5, 23)
    empty = analysis.windows["second"]
    assert empty.valid_count == 0
    assert all(p.percentage == 0.0 for p in empty.phases.values())


def test_descriptions_follow_locale():
    records = [_rec(date(2024, 1, 1), 1, 10)]
    pt = phase_distribution(records)
    en = phase_distribution(records, locale="en")
    assert pt.phases["winner"].description == "Campeão (posição 1)"
    assert en.phases["winner"].description == "Winner (position 1)"
    with pytest.raises(ValueError):
        phase_distribution(records, locale="fr")
