from arena.tracker import RegionTracker
from viz.ascii_map import render_map, render_tracker


def _packed_tracker():
    tracker = RegionTracker(10)
    tracker.add_metadata(1, 0, 3)
    tracker.add_metadata(2, 5, 2)
    tracker.add_metadata(3, 3, 2)
    return tracker


def test_render_tracker_lines():
    lines = render_tracker(_packed_tracker()).split("\n")
    assert lines == [
        "Metadata: {1: (start=0, length=3), 3: (start=3, length=2), 2: (start=5, length=2)}",
        "1--3-2-   ",
        "0123456789",
        "0         ",
    ]


def test_render_uses_last_digit_of_id():
    tracker = RegionTracker(12)
    tracker.add_metadata(47, 0, 2)
    tracker.add_metadata(-13, 4, 1)
    lines = render_tracker(tracker).split("\n")
    assert lines[1] == "7-  3       "
    assert lines[3] == "0         10"


def test_str_matches_render():
    tracker = _packed_tracker()
    assert str(tracker) == render_tracker(tracker)


def test_render_empty_tracker():
    lines = render_tracker(RegionTracker(3)).split("\n")
    assert lines == ["Metadata: {}", "   ", "012", "0  "]


def test_render_map_scales_to_width():
    tracker = RegionTracker(100)
    tracker.add_metadata(1, 0, 50)
    assert render_map(tracker, width=10) == "11111....."
    assert render_map(RegionTracker(0), width=4) == "...."
