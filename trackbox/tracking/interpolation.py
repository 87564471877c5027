from __future__ import annotations

from typing import Optional

import numpy as np

from trackbox.tracking.sample_store import TimeSampleStore
from trackbox.tracking.types import BBox


def interpolate_boxes(t1: float, t2: float, left: BBox, right: BBox, target: float) -> BBox:
    """
    Field-wise linear interpolation between two samples.

    The angle follows the raw linear path: 350 -> 10 passes through 180,
    there is no shortest-arc wrap at 0/360.
    """
    if t1 == t2:
        return left
    f = (target - t1) / (t2 - t1)
    a = np.asarray(left.as_tuple(), dtype=np.float64)
    b = np.asarray(right.as_tuple(), dtype=np.float64)
    values = a + f * (b - a)
    return BBox(*(float(v) for v in values))


def resolve_base_box(store: TimeSampleStore, target: float) -> Optional[BBox]:
    """
    Geometry at ``target`` before any adjustment curves, or None when the
    store is empty. Outside the recorded range the nearest sample is used.
    """
    left, right = store.bracket(target)
    if left is None and right is None:
        return None
    if left is None:
        return right[1]
    if right is None:
        return left[1]

    t1, left_box = left
    t2, right_box = right
    if t1 == t2:
        return left_box
    return interpolate_boxes(t1, t2, left_box, right_box, target)
