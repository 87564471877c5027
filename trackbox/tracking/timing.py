from __future__ import annotations

from trackbox.errors import InvalidState
from trackbox.tracking.types import FrameRate


def frame_to_time(frame_number: int, base_fps: FrameRate, time_scale: float = 1.0) -> float:
    """
    Map a clip frame number onto the time axis the samples are keyed by:
      time = frame_number * (den / num) * time_scale
    """
    if not base_fps.is_valid:
        raise InvalidState(f"Base frame rate {base_fps} is degenerate (zero numerator or denominator)")
    return float(frame_number) * base_fps.reciprocal().to_float() * time_scale


def time_to_frame(time: float, base_fps: FrameRate, time_scale: float = 1.0) -> float:
    """Inverse of frame_to_time; the result is fractional between frames."""
    if not base_fps.is_valid:
        raise InvalidState(f"Base frame rate {base_fps} is degenerate (zero numerator or denominator)")
    if time_scale == 0:
        raise InvalidState("Time scale must be non-zero to map time back to frames")
    return time / time_scale * base_fps.to_float()
