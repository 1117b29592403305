import logging
from datetime import date, datetime
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from tourney_stats.core.dataset import load_records
from tourney_stats.core.records import (
    FRAME_COLUMNS,
    MalformedRecordError,
    TournamentRecord,
    normalise_records,
    records_frame,
)

DATA = Path(__file__).parent / "data"


def test_from_mapping_accepts_source_headers():
    rec = TournamentRecord.from_mapping(
        {
            "Data": "06/04/2023",
            "Rede": "GGPoker",
            "Entradas": "400",
            "Posição": 3,
            "Prize": 5200,
            "Buy-In": "320",
            "Tipo de Torneio": "Bounty",
            "Profit": 4880,
        }
    )
    assert rec == TournamentRecord(
        date=date(2023, 4, 6),
        profit=4880.0,
        network="GGPoker",
        entries=400,
        position=3,
        prize=5200.0,
        buy_in=320.0,
        tournament_type="Bounty",
    )


def test_from_mapping_defaults_and_absent_values():
    rec = TournamentRecord.from_mapping(
        {"date": datetime(2024, 1, 5, 21, 0), "profit": "-11", "position": 0, "prize": "", "buyIn": float("nan")}
    )
    assert rec.date == date(2024, 1, 5)
    assert rec.position is None
    assert rec.prize is None
    assert rec.entries == 0
    assert rec.buy_in == 0.0


def test_from_mapping_unwraps_numpy_and_pandas_values():
    rec = TournamentRecord.from_mapping(
        {"date": pd.Timestamp("2024-03-01"), "profit": np.float64(1.5), "entries": np.int64(10), "position": np.float64(2.0)}
    )
    assert rec.date == date(2024, 3, 1)
    assert rec.entries == 10
    assert rec.position == 2


@pytest.mark.parametrize(
    "row",
    [
        {"profit": 1.0},
        {"date": "2024-01-01"},
        {"date": "not a date", "profit": 1.0},
        {"date": "2024-01-01", "profit": "abc"},
        {"date": "2024-01-01", "profit": 1.0, "entries": -5},
        {"date": "2024-01-01", "profit": 1.0, "buy_in": -1},
        {"date": "2024-01-01", "profit": "nan"},
        {"date": "2024-01-01", "profit": "inf"},
        {"date": "2024-01-01", "profit": 1.0, "prize": "-inf"},
        {"date": "2024-01-01", "profit": 1.0, "buy_in": float("inf")},
    ],
)
def test_from_mapping_rejects_malformed_rows(row):
    with pytest.raises(MalformedRecordError):
        TournamentRecord.from_mapping(row)


def test_normalise_records_skips_bad_rows(caplog):
    existing = TournamentRecord(date=date(2024, 1, 1), profit=1.0)
    rows = [existing, {"date": "2024-01-02", "profit": 2}, {"profit": 3}, "garbage"]
    with caplog.at_level(logging.WARNING):
        out = normalise_records(rows)
    assert [r.profit for r in out] == [1.0, 2.0]
    assert out[0] is existing
    assert "Skipped 2 malformed rows" in caplog.text


def test_to_dict_round_trips_through_from_mapping():
    rec = TournamentRecord(date=date(2024, 1, 1), profit=1.0, position=2, entries=9, prize=3.0)
    assert rec.to_dict()["date"] == "2024-01-01"
    assert TournamentRecord.from_mapping(rec.to_dict()) == rec


def test_records_frame_columns():
    assert list(records_frame([]).columns) == FRAME_COLUMNS
    df = records_frame([TournamentRecord(date=date(2024, 5, 2), profit=1.0)])
    assert df.loc[0, "year"] == 2024
    assert df.loc[0, "month"] == 5


def test_load_records_csv_skips_malformed_line():
    records = load_records(DATA / "tournaments.csv")
    assert len(records) == 7
    first = records[0]
    assert first.date == date(2022, 5, 23)
    assert first.position == 1
    assert first.prize == 134000
    assert records[2].prize is None
    assert records[5].position is None


def test_load_records_json():
    records = load_records(DATA / "tournaments.json")
    assert [r.date for r in records] == [date(2024, 1, 5), date(2024, 1, 20), date(2024, 2, 2)]
    assert records[0].buy_in == 55
    assert records[1].tournament_type == "Hyper Turbo"
    assert records[2].position is None
    assert records[2].tournament_type is None


def test_load_records_rejects_unknown_format(tmp_path):
    path = tmp_path / "records.txt"
    path.write_text("")
    with pytest.raises(ValueError):
        load_records(path)


def test_non_finite_rows_are_skipped_before_aggregation():
    from tourney_stats.stats.facade import build_dashboard_bundle

    rows = [
        {"date": "2024-01-01", "profit": "inf", "buy_in": 10},
        {"date": "2024-01-02", "profit": "nan", "buy_in": 10},
        {"date": "2024-01-03", "profit": 5, "buy_in": 10},
    ]
    bundle = build_dashboard_bundle(rows, windows=(), locale="en")
    assert bundle.total_tournaments == 1
    assert bundle.total_profit == 5
    assert bundle.roi == 50
