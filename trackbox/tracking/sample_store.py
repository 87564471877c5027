from __future__ import annotations

import threading
from bisect import bisect_left, bisect_right
from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional, Tuple

from trackbox.tracking.types import BBox

Sample = Tuple[float, BBox]


@dataclass(frozen=True)
class _Snapshot:
    keys: Tuple[float, ...] = ()
    boxes: Dict[float, BBox] = field(default_factory=dict)


class TimeSampleStore:
    """
    Ordered ``time -> BBox`` mapping.

    Writers build a fresh snapshot under a lock and swap it in, so readers
    holding the previous snapshot never see a half-applied change.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._snap = _Snapshot()

    def __len__(self) -> int:
        return len(self._snap.keys)

    def __contains__(self, time: float) -> bool:
        return time in self._snap.boxes

    def __iter__(self) -> Iterator[float]:
        return iter(self._snap.keys)

    def insert(self, time: float, box: BBox) -> None:
        """Insert or overwrite (last write wins)."""
        with self._lock:
            snap = self._snap
            boxes = dict(snap.boxes)
            keys = snap.keys
            if time not in boxes:
                idx = bisect_left(keys, time)
                keys = keys[:idx] + (time,) + keys[idx:]
            boxes[time] = box
            self._snap = _Snapshot(keys=keys, boxes=boxes)

    def remove(self, time: float) -> bool:
        with self._lock:
            snap = self._snap
            if time not in snap.boxes:
                return False
            boxes = dict(snap.boxes)
            del boxes[time]
            idx = bisect_left(snap.keys, time)
            self._snap = _Snapshot(keys=snap.keys[:idx] + snap.keys[idx + 1 :], boxes=boxes)
            return True

    def clear(self) -> None:
        with self._lock:
            self._snap = _Snapshot()

    def get(self, time: float) -> Optional[BBox]:
        return self._snap.boxes.get(time)

    def keys(self) -> Tuple[float, ...]:
        return self._snap.keys

    def items(self) -> Iterator[Sample]:
        snap = self._snap
        for key in snap.keys:
            yield key, snap.boxes[key]

    def first(self) -> Optional[Sample]:
        snap = self._snap
        if not snap.keys:
            return None
        return snap.keys[0], snap.boxes[snap.keys[0]]

    def last(self) -> Optional[Sample]:
        snap = self._snap
        if not snap.keys:
            return None
        return snap.keys[-1], snap.boxes[snap.keys[-1]]

    def bracket(self, target: float) -> Tuple[Optional[Sample], Optional[Sample]]:
        """
        Nearest samples with key <= target (left) and key >= target (right).
        Either side is None when target lies outside the recorded range; on
        an exact hit both sides are the same sample.
        """
        snap = self._snap
        keys = snap.keys
        left = right = None
        lo = bisect_right(keys, target)
        if lo > 0:
            k = keys[lo - 1]
            left = (k, snap.boxes[k])
        hi = bisect_left(keys, target)
        if hi < len(keys):
            k = keys[hi]
            right = (k, snap.boxes[k])
        return left, right
