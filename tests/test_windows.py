from datetime import date, datetime

from tourney_stats.core.records import TournamentRecord
from tourney_stats.core.windows import BigWinWindow, add_months, filter_window, in_window


def test_add_months_clamps_to_month_end():
    assert add_months(date(2022, 5, 23), 6) == date(2022, 11, 23)
    assert add_months(date(2023, 8, 31), 6) == date(2024, 2, 29)
    assert add_months(date(2022, 12, 15), 1) == date(2023, 1, 15)


def test_big_win_window_bounds_are_inclusive():
    anchor = TournamentRecord(
        date=date(2022, 5, 23), profit=133785, buy_in=134000, position=1, entries=500
    )
    window = BigWinWindow("first", anchor.date)
    records = [
        anchor,
        TournamentRecord(date=date(2022, 5, 22), profit=1),
        TournamentRecord(date=date(2022, 11, 23), profit=2),
        TournamentRecord(date=date(2022, 11, 24), profit=3),
    ]
    inside = filter_window(records, window)
    assert [r.profit for r in inside] == [133785, 2]
    assert window.end_date == date(2022, 11, 23)
    assert window.contains(date(2022, 11, 23))
    assert not window.contains(date(2022, 11, 24))


def test_in_window_accepts_datetimes():
    assert in_window(datetime(2022, 11, 23, 23, 59), date(2022, 5, 23), 6)
    assert not in_window(datetime(2022, 11, 24, 0, 0), date(2022, 5, 23), 6)
