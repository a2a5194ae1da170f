from __future__ import annotations
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from arena.tracker import RegionTracker

def _by_offset(tracker: RegionTracker):
    return sorted(tracker.get_all_metadata().items(), key=lambda kv: kv[1][0])

def render_tracker(tracker: RegionTracker, fill: str='-') -> str:
    """Listing, cell map, digit ruler and offset ruler, one cell per offset."""
    cap=tracker.capacity
    entries=', '.join(f'{rid}: (start={s}, length={n})' for rid,(s,n) in _by_offset(tracker))
    buf=[' ']*cap
    for rid,(s,n) in _by_offset(tracker):
        if n<=0:
            continue
        buf[s]=str(abs(rid)%10)
        buf[s+1:s+n]=fill*(n-1)
    digits=''.join(str(i%10) for i in range(cap))
    labels=[]
    i=0
    while i<cap:
        if i%10==0:
            label=str(i)
            labels.append(label)
            # wide labels eat into the following cells
            i+=max(1, len(label))
        else:
            labels.append(' ')
            i+=1
    return '\n'.join([f'Metadata: {{{entries}}}', ''.join(buf), digits, ''.join(labels)])

def render_map(tracker: RegionTracker, width: int=80) -> str:
    cap=tracker.capacity
    buf=['.']*width
    if cap<=0:
        return ''.join(buf)
    for rid,(s,n) in tracker.get_all_metadata().items():
        a=int((s/cap)*width)
        e=int(((s+n)/cap)*width)
        ch=str(abs(rid)%10)
        for i in range(max(0,a), min(width, max(a+1,e))):
            buf[i]=ch
    return ''.join(buf)
