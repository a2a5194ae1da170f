from __future__ import annotations
import argparse, json, logging
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Optional
from arena.tracker import InsertResult, LogMode, RegionTracker
from arena.fragmentation import compute_metrics, needs_compaction
from viz.ascii_map import render_map

LOG = logging.getLogger("run_trace")

def load_trace(path: str):
    with open(path,'r',encoding='utf-8') as f:
        for line in f:
            line=line.strip()
            if line:
                yield json.loads(line)

@dataclass
class ReplayStats:
    events: int = 0
    results: Counter = field(default_factory=Counter)
    removes: int = 0
    compactions: int = 0
    alloc_fail: int = 0
    offsets: Dict[int, int] = field(default_factory=dict)

def replay(events: Iterable[dict], tracker: RegionTracker, compact_on_miss: bool=False,
           frag_threshold: float=0.45) -> ReplayStats:
    stats=ReplayStats()

    def compact():
        tracker.compact()
        stats.compactions += 1

    def alloc(rid: int, length: int) -> Optional[int]:
        start = tracker.find_contiguous_space(length)
        if start is None and compact_on_miss:
            m = compute_metrics(tracker.extents_free())
            if needs_compaction(m, need=length, frag_threshold=frag_threshold):
                LOG.debug("compacting for id=%d length=%d lfe=%d", rid, length, m.lfe)
                compact()
                start = tracker.find_contiguous_space(length)
        return start

    for ev in events:
        stats.events += 1
        et=ev.get('event')

        if et=='add':
            rid=int(ev['id'])
            res=tracker.add_metadata(rid, int(ev['start']), int(ev['length']))
            stats.results[res] += 1
            continue

        if et=='alloc':
            rid=int(ev['id']); length=int(ev['length'])
            start=alloc(rid, length)
            if start is None:
                stats.alloc_fail += 1
                continue
            res=tracker.add_metadata(rid, start, length)
            stats.results[res] += 1
            if res:
                stats.offsets[rid]=start
            continue

        if et=='remove':
            tracker.remove_metadata(int(ev['id']))
            stats.removes += 1
            continue

        if et=='compact':
            compact()
            continue

        raise ValueError(f"Unknown trace event {et!r} at event {stats.events}")

    return stats

def main(argv=None):
    ap=argparse.ArgumentParser(description="Replay a JSONL region trace against a fixed-capacity tracker.")
    ap.add_argument('--trace', required=True)
    ap.add_argument('--capacity', type=int, default=100)
    ap.add_argument('--compact-on-miss', action='store_true',
                    help="When an alloc finds no gap, compact if fragmentation metrics say it would help, then retry.")
    ap.add_argument('--frag-threshold', type=float, default=0.45)
    ap.add_argument('--show-map', action='store_true')
    ap.add_argument('--width', type=int, default=80)
    ap.add_argument('--trace-log', action='store_true', help="Log every tracker mutation.")
    ap.add_argument('--log-level', default='WARNING')
    args=ap.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(), format='[%(levelname)s] %(name)s: %(message)s')

    if not Path(args.trace).exists():
        raise SystemExit(f"Trace not found: {args.trace}")

    tracker=RegionTracker(args.capacity, LogMode.ENABLED if args.trace_log else LogMode.DISABLED)
    stats=replay(load_trace(args.trace), tracker, args.compact_on_miss, args.frag_threshold)

    m=compute_metrics(tracker.extents_free())
    print("="*72)
    print("Region Tracker — Trace Summary")
    print("="*72)
    print(f"Capacity: {tracker.capacity}  Used: {tracker.used()}  Free: {tracker.free_bytes()}  "
          f"Usage: {tracker.get_usage_percentage()*100:.1f}%")
    print(f"Events: {stats.events}  Regions: {len(tracker)}  Removes: {stats.removes}  Compactions: {stats.compactions}")
    print("Inserts: " + ' '.join(f"{r.name.lower()}={stats.results[r]}" for r in InsertResult))
    print(f"Alloc failures: {stats.alloc_fail}")
    print("-"*72)
    print(f"Fragmentation: LFE={m.lfe} holes={m.hole_count} external_frag={m.external_frag:.3f} entropy={m.entropy:.3f}")
    if args.show_map:
        print("-"*72)
        print("Memory map (ASCII):")
        print(render_map(tracker, args.width))
        print("-"*72)
        print(tracker)
    print("="*72)
    return 0

if __name__=='__main__':
    raise SystemExit(main())
