"""
Region Tracker — Occupancy Visualizer

Replays a JSONL region trace and draws a Matplotlib heatmap of which
offsets are occupied after every event. Compaction events are marked as
horizontal lines.

How to run (recommended, from repo root):
    python -m tools.visualize_occupancy --trace traces/fragmentation_stressor.jsonl --capacity 100 --out out_occupancy.png
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Ensure repo root is on sys.path when running as a script:
# (python -m tools.visualize_occupancy already works without this,
#  but this makes `python tools/visualize_occupancy.py ...` work too.)
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

import numpy as np
import matplotlib.pyplot as plt

from arena.tracker import RegionTracker
from arena.fragmentation import compute_metrics
from run_trace import load_trace, replay


def render_state(tracker: RegionTracker, width: int) -> np.ndarray:
    """
    Return a 1D occupancy array over the address space, binned to 'width'.
    Each occupied bin holds (id % 9 + 1) so neighbouring regions get
    different shades; free bins are 0.
    """
    cap = tracker.capacity
    bins = np.zeros(width, dtype=np.float32)
    if cap <= 0:
        return bins
    scale = cap / width

    for rid, (start, length) in sorted(tracker.get_all_metadata().items(), key=lambda kv: kv[1][0]):
        a = int(start / scale)
        b = int((start + length - 1) / scale)
        a = max(0, min(width - 1, a))
        b = max(0, min(width - 1, b))
        bins[a : b + 1] = abs(rid) % 9 + 1

    return bins


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--trace", required=True, help="Path to JSONL trace")
    ap.add_argument("--out", default="out_occupancy.png", help="Output image file")
    ap.add_argument("--capacity", type=int, default=100, help="Tracker capacity (cells)")
    ap.add_argument("--width", type=int, default=140, help="Heatmap width (bins)")
    ap.add_argument("--compact-on-miss", action="store_true")
    args = ap.parse_args()

    trace_path = Path(args.trace)
    if not trace_path.exists():
        raise SystemExit(f"Trace not found: {trace_path}")

    tracker = RegionTracker(args.capacity)

    frames: list[np.ndarray] = []
    compact_marks: list[int] = []

    for ev in load_trace(str(trace_path)):
        # one event at a time so a frame can be captured after each
        stats = replay([ev], tracker, compact_on_miss=args.compact_on_miss)
        if stats.compactions:
            compact_marks.append(len(frames))
        frames.append(render_state(tracker, args.width))

    if not frames:
        raise SystemExit("No frames captured. Check trace path.")

    H = np.stack(frames, axis=0)  # (time, width)

    fig = plt.figure(figsize=(10.5, 4.6))
    ax = fig.add_subplot(111)
    ax.imshow(H, aspect="auto", interpolation="nearest", cmap="tab10", vmin=0, vmax=9)
    ax.set_title("Region Occupancy Heatmap (Trace-driven)")
    ax.set_xlabel("offset (binned)")
    ax.set_ylabel("time (events)")

    for t in compact_marks:
        ax.axhline(t, linewidth=1)

    m = compute_metrics(tracker.extents_free())
    caption = (
        f"Final usage={tracker.get_usage_percentage():.3f}, LFE={m.lfe}, holes={m.hole_count}, "
        f"external_frag={m.external_frag:.3f}, entropy={m.entropy:.3f}"
    )
    fig.text(0.01, 0.01, caption, fontsize=9)

    fig.tight_layout()
    out_path = Path(args.out)
    fig.savefig(str(out_path), dpi=220)
    print(f"Wrote: {out_path.resolve()}")


if __name__ == "__main__":
    main()
