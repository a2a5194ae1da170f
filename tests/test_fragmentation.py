import pytest

from arena.fragmentation import compute_metrics, needs_compaction
from arena.tracker import RegionTracker


def test_metrics_single_extent():
    m = compute_metrics([(0, 10)])
    assert m.total_free == 10
    assert m.lfe == 10
    assert m.hole_count == 1
    assert m.external_frag == 0.0
    assert m.entropy == 0.0


def test_metrics_no_free_space():
    m = compute_metrics([])
    assert m.total_free == 0
    assert m.lfe == 0
    assert m.external_frag == 0.0
    assert m.entropy == 0.0


def test_metrics_from_tracker():
    tracker = RegionTracker(10)
    tracker.add_metadata(1, 0, 3)
    tracker.add_metadata(2, 5, 2)
    m = compute_metrics(tracker.extents_free())
    assert m.total_free == 5
    assert m.lfe == 3
    assert m.hole_count == 2
    assert m.external_frag == pytest.approx(0.4)
    assert m.entropy > 0.0


def test_even_split_entropy():
    m = compute_metrics([(0, 4), (10, 4), (20, 4), (30, 4)])
    assert m.entropy == pytest.approx(2.0)
    assert m.external_frag == pytest.approx(0.75)


def test_needs_compaction():
    split = compute_metrics([(0, 10), (20, 10)])
    assert needs_compaction(split, need=15)
    assert not needs_compaction(split, need=25, frag_threshold=0.9)
    assert not needs_compaction(split, need=5, frag_threshold=0.9)
    assert needs_compaction(split, frag_threshold=0.45)
    assert not needs_compaction(compute_metrics([(0, 30)]), need=10)
