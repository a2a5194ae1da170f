from __future__ import annotations
import subprocess
import sys
import re
from pathlib import Path

PY = sys.executable  # respects venv if activated, otherwise uses current python
ROOT = Path(__file__).resolve().parent

SCENARIOS = [
    ("fragmentation_stressor.jsonl", 100, False),
    ("fragmentation_stressor.jsonl", 100, True),
    ("record_packing.jsonl", 64, False),
    ("record_packing.jsonl", 64, True),
]

PATTERNS = {
    "used": re.compile(r"Used:\s+(\d+)"),
    "usage": re.compile(r"Usage:\s+([0-9\.]+)%"),
    "compactions": re.compile(r"Compactions:\s+(\d+)"),
    "ok": re.compile(r"ok=(\d+)"),
    "alloc_fail": re.compile(r"Alloc failures:\s+(\d+)"),
    "lfe": re.compile(r"Fragmentation: LFE=(\d+)"),
    "holes": re.compile(r"holes=(\d+)"),
    "external_frag": re.compile(r"external_frag=([0-9\.]+)"),
}

def run(trace: str, capacity: int, compact: bool) -> str:
    cmd = [PY, str(ROOT / "run_trace.py"), "--trace", str(ROOT / "traces" / trace), "--capacity", str(capacity)]
    if compact:
        cmd.append("--compact-on-miss")
    return subprocess.check_output(cmd, stderr=subprocess.STDOUT, text=True)

def parse(out: str):
    def get(key, default=None):
        m = PATTERNS[key].search(out)
        return m.group(1) if m else default
    return {
        "used": int(get("used", 0)),
        "usage": float(get("usage", 0.0)),
        "compactions": int(get("compactions", 0)),
        "ok": int(get("ok", 0)),
        "alloc_fail": int(get("alloc_fail", 0)),
        "lfe": int(get("lfe", 0)),
        "holes": int(get("holes", 0)),
        "external_frag": float(get("external_frag", 0.0)),
    }

def main():
    rows=[]
    for trace, capacity, compact in SCENARIOS:
        rows.append((trace, capacity, compact, parse(run(trace, capacity, compact))))

    header = ["trace","cap","compact","used","usage%","inserts","alloc_fail","compactions","LFE","holes","ext_frag"]
    print("="*118)
    print("Region Tracker — Compaction Benchmark")
    print("="*118)
    print("{:<30} {:>5} {:>8} {:>6} {:>7} {:>8} {:>11} {:>12} {:>6} {:>6} {:>8}".format(*header))
    for trace, capacity, compact, m in rows:
        print("{:<30} {:>5} {:>8} {:>6} {:>7.1f} {:>8} {:>11} {:>12} {:>6} {:>6} {:>8.3f}".format(
            trace, capacity, "on" if compact else "off", m["used"], m["usage"], m["ok"],
            m["alloc_fail"], m["compactions"], m["lfe"], m["holes"], m["external_frag"]
        ))
    print("="*118)
    print("Tip: add --show-map for the cell-level layout of a single run.")
    print("  python run_trace.py --trace traces/fragmentation_stressor.jsonl --capacity 100 --compact-on-miss --show-map")

if __name__ == "__main__":
    main()
