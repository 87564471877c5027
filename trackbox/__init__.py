"""trackbox - time-indexed bounding-box tracking store."""

from trackbox.errors import InvalidJSON, InvalidState, IOFailure, TrackboxError
from trackbox.tracking.keyframe_bbox import KeyFrameBBox
from trackbox.tracking.types import BBox, FrameRate

__all__ = [
    "BBox",
    "FrameRate",
    "InvalidJSON",
    "InvalidState",
    "IOFailure",
    "KeyFrameBBox",
    "TrackboxError",
]
