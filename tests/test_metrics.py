import pytest

from linus_law_ca.model.grid import GridMap
from linus_law_ca.model.metrics import compute_metrics


def test_fresh_grid_metrics():
    m = compute_metrics(GridMap(4, 4, 40.0), tick=0)
    assert m.existing_count == 16
    assert m.mapped_count == 0
    assert m.mean_quality == 0.0
    assert m.mean_version == 0.0
    assert m.version_buckets == (100.0, 0.0, 0.0, 0.0, 0.0, 0.0)
    assert m.quality_bands == (100.0, 0.0, 0.0, 0.0, 0.0, 0.0)
    assert m.quality_histogram.sum() == 0


def test_buckets_bands_and_means():
    g = GridMap(5, 2, 40.0)
    g.apply_edit(0, 0, 3.0)
    g.apply_edit(1, 0, 14.0)
    g.apply_edit(1, 0, 12.0)
    g.apply_edit(2, 0, 25.0)
    for q in (30.0, 20.0, 17.0, 9.0, 8.0, 7.0):
        g.apply_edit(3, 0, q)
    g.exists[1, 4] = False  # not counted anywhere

    m = compute_metrics(g, tick=7)
    assert m.tick == 7
    assert m.existing_count == 9
    assert m.mapped_count == 4
    assert m.mean_quality == pytest.approx((3.0 + 12.0 + 25.0 + 7.0) / 4)
    assert m.mean_version == pytest.approx((1 + 2 + 1 + 6) / 9)

    pct = 100.0 / 9
    assert m.version_buckets == pytest.approx(
        (5 * pct, 2 * pct, pct, 0.0, 0.0, pct))
    # unmapped, [0,5), [5,10), [10,15), [15,20), >=20
    assert m.quality_bands == pytest.approx(
        (5 * pct, pct, pct, pct, 0.0, pct))
    assert sum(m.version_buckets) == pytest.approx(100.0)
    assert sum(m.quality_bands) == pytest.approx(100.0)

    assert m.quality_histogram.sum() == 4
    assert len(m.quality_bin_edges) == 41
    assert m.quality_histogram[3] == 1 and m.quality_histogram[25] == 1


def test_no_existing_objects():
    g = GridMap(3, 3, 40.0)
    g.exists[:, :] = False
    m = compute_metrics(g, tick=0)
    assert m.existing_count == 0
    assert m.mean_quality == 0.0 and m.mean_version == 0.0
    assert m.version_buckets == (0.0,) * 6
    assert m.quality_bands == (0.0,) * 6


def test_compute_metrics_is_read_only():
    g = GridMap(4, 4, 40.0)
    g.apply_edit(1, 1, 5.0)
    before = (g.quality.copy(), g.version.copy(), g.exists.copy())
    compute_metrics(g, tick=0)
    assert (g.quality == before[0]).all()
    assert (g.version == before[1]).all()
    assert (g.exists == before[2]).all()


def test_as_row_flattens_snapshot():
    row = compute_metrics(GridMap(2, 2, 40.0), tick=3).as_row()
    assert row['tick'] == 3
    assert row['existing'] == 4
    assert row['pct_v0'] == 100.0
    assert row['pct_unmapped'] == 100.0
    assert row['pct_q20plus'] == 0.0
