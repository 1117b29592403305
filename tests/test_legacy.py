import pytest

from tourney_stats.stats.categories import CategoryStat
from tourney_stats.stats.legacy import redistribute_legacy_types


def test_single_legacy_bucket_is_split():
    out = redistribute_legacy_types([CategoryStat("psko", 10, 100.0, 50.0, 200.0)])
    assert [s.bucket_key for s in out] == ["BountyHyper", "BountyNormal"]
    hyper, normal = out
    assert (hyper.count, normal.count) == (2, 8)
    assert hyper.profit == pytest.approx(20.0)
    assert normal.total_buy_in == pytest.approx(40.0)
    assert normal.roi == pytest.approx(200.0)


def test_shared_targets_are_merged():
    out = redistribute_legacy_types(
        [
            CategoryStat("psko", 10, 100.0, 50.0, 200.0),
            CategoryStat("hyper", 5, 50.0, 20.0, 250.0),
        ]
    )
    by_key = {s.bucket_key: s for s in out}
    bounty_hyper = by_key["BountyHyper"]
    # 10 * 0.2 = 2, 5 * 0.6 = 3.0 -> 3
    assert bounty_hyper.count == 5
    assert bounty_hyper.profit == pytest.approx(50.0)
    assert bounty_hyper.total_buy_in == pytest.approx(22.0)
    assert bounty_hyper.roi == pytest.approx(50.0 / 22.0 * 100)
    # 5 * 0.3 = 1.5 rounds half up
    assert by_key["VanillaHyper"].count == 2
    assert by_key["SatelliteHyper"].count == 1
    assert [s.bucket_key for s in out] == [
        "BountyHyper",
        "BountyNormal",
        "VanillaHyper",
        "SatelliteHyper",
    ]


def test_current_taxonomy_passes_through():
    stats = [CategoryStat("VanillaNormal", 3, 5.0, 30.0, 16.0), CategoryStat("psko", 1, 1.0, 1.0, 100.0)]
    out = redistribute_legacy_types(stats)
    assert out == stats
    assert out[0] is not stats[0]
