from __future__ import annotations
import logging
from bisect import bisect_left, insort
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, List, Optional, Tuple

from viz.ascii_map import render_tracker

LOG = logging.getLogger("arena.tracker")

Interval = Tuple[int, int]


class LogMode(Enum):
    DISABLED = "disabled"
    ENABLED = "enabled"


class InsertResult(Enum):
    """Outcome of add_metadata. Only OK is truthy."""
    OK = "ok"
    DUPLICATE_ID = "duplicate identifier"
    EMPTY_REGION = "empty region"
    OUT_OF_BOUNDS = "out of bounds"
    COLLISION = "collision"

    def __bool__(self) -> bool:
        return self is InsertResult.OK

    @property
    def ok(self) -> bool:
        return self is InsertResult.OK


@dataclass(frozen=True)
class Region:
    offset: int
    length: int

    @property
    def end(self) -> int:
        return self.offset + self.length

    @property
    def interval(self) -> Interval:
        return (self.offset, self.end)


class RegionTracker:
    """Bookkeeping for named, non-overlapping regions in [0, capacity).

    Region store (id -> Region) and interval index (sorted list of
    [start, end) tuples) are always updated together; nothing here touches
    backing storage.
    """

    def __init__(self, capacity: int, log_mode: LogMode = LogMode.DISABLED,
                 logger: Optional[logging.Logger] = None):
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity < 0:
            raise ValueError(f"capacity must be a non-negative int, got {capacity!r}")
        self._capacity = capacity
        self.log_mode = log_mode
        self.logger = logger if logger is not None else LOG
        self._regions: Dict[int, Region] = {}
        self._intervals: List[Interval] = []

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def intervals(self) -> List[Interval]:
        return list(self._intervals)

    def __len__(self) -> int:
        return len(self._regions)

    def __contains__(self, region_id: int) -> bool:
        return region_id in self._regions

    def __str__(self) -> str:
        return render_tracker(self)

    def _trace(self, msg: str, *args):
        if self.log_mode is not LogMode.ENABLED:
            return
        self.logger.info(msg, *args)
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug("state:\n%s", self)

    # -- reads -------------------------------------------------------------

    def find_contiguous_space(self, length: int) -> Optional[int]:
        last_end = 0
        for start, end in self._intervals:
            if start - last_end >= length:
                return last_end
            last_end = end
        if self._capacity - last_end >= length:
            return last_end
        return None

    def get_metadata(self, region_id: int) -> Optional[Tuple[int, int]]:
        region = self._regions.get(region_id)
        if region is None:
            return None
        return (region.offset, region.length)

    def get_all_metadata(self) -> Dict[int, Tuple[int, int]]:
        return {rid: (r.offset, r.length) for rid, r in self._regions.items()}

    def used(self) -> int:
        return sum(r.length for r in self._regions.values())

    def free_bytes(self) -> int:
        return self._capacity - self.used()

    def get_usage_percentage(self) -> float:
        # fraction in [0, 1], not [0, 100]
        if self._capacity == 0:
            return 0.0
        return self.used() / self._capacity

    def extents_free(self) -> List[Tuple[int, int]]:
        ext = []
        cur = 0
        for start, end in self._intervals:
            if start > cur:
                ext.append((cur, start - cur))
            cur = max(cur, end)
        if cur < self._capacity:
            ext.append((cur, self._capacity - cur))
        return ext

    def largest_free_extent(self) -> int:
        return max((s for _, s in self.extents_free()), default=0)

    # -- mutations ---------------------------------------------------------

    def _reject(self, result: InsertResult, region_id: int, start: int, length: int) -> InsertResult:
        self._trace("add rejected (%s) id=%d start=%d length=%d",
                    result.value, region_id, start, length)
        return result

    def _validate(self, region_id: int, start: int, length: int) -> InsertResult:
        if region_id in self._regions:
            return InsertResult.DUPLICATE_ID
        if length == 0:
            return InsertResult.EMPTY_REGION
        if start < 0 or length < 0 or start + length > self._capacity:
            return InsertResult.OUT_OF_BOUNDS
        end = start + length
        # linear scan, fine for the small region counts this is used with
        for other_start, other_end in self._intervals:
            if not (end <= other_start or start >= other_end):
                return InsertResult.COLLISION
        return InsertResult.OK

    def add_metadata(self, region_id: int, start: int, length: int) -> InsertResult:
        result = self._validate(region_id, start, length)
        if not result:
            return self._reject(result, region_id, start, length)
        region = Region(start, length)
        self._regions[region_id] = region
        insort(self._intervals, region.interval)
        self._trace("add id=%d start=%d length=%d", region_id, start, length)
        return result

    def remove_metadata(self, region_id: int) -> None:
        region = self._regions.pop(region_id, None)
        if region is None:
            self._trace("remove id=%d not found", region_id)
            return
        del self._intervals[bisect_left(self._intervals, region.interval)]
        self._trace("remove id=%d start=%d length=%d", region_id, region.offset, region.length)

    def compact(self) -> None:
        ordered = sorted(self._regions.items(), key=lambda item: item[1].offset)
        cursor = 0
        regions: Dict[int, Region] = {}
        for rid, region in ordered:
            regions[rid] = replace(region, offset=cursor)
            cursor += region.length
        self._regions = regions
        self._intervals = [r.interval for r in regions.values()]
        self._trace("compact regions=%d used=%d", len(regions), cursor)
