from __future__ import annotations

import threading
from bisect import bisect_left
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from trackbox.errors import InvalidJSON
from trackbox.tracking.types import json_number


class InterpolationType(str, Enum):
    BEZIER = "bezier"  # ease in/out, zero tangents at both ends
    LINEAR = "linear"
    CONSTANT = "constant"  # hold until the next point

    @classmethod
    def parse(cls, value: Any) -> "InterpolationType":
        if isinstance(value, cls):
            return value
        # Integer codes used by older project files
        codes = {0: cls.BEZIER, 1: cls.LINEAR, 2: cls.CONSTANT}
        if isinstance(value, int) and not isinstance(value, bool) and value in codes:
            return codes[value]
        if isinstance(value, str):
            try:
                return cls(value.lower())
            except ValueError:
                pass
        raise InvalidJSON(f"Unknown interpolation type: {value!r}")


@dataclass(frozen=True)
class Point:
    frame: float
    value: float
    interpolation: InterpolationType = InterpolationType.LINEAR

    def json_value(self) -> Dict[str, Any]:
        return {"frame": self.frame, "value": self.value, "interpolation": self.interpolation.value}

    @classmethod
    def from_json_value(cls, root: Any) -> "Point":
        if not isinstance(root, dict):
            raise InvalidJSON("Keyframe point must be an object")
        try:
            frame = root["frame"]
            value = root["value"]
        except KeyError as exc:
            raise InvalidJSON(f"Keyframe point is missing {exc.args[0]!r}") from exc
        frame = json_number(frame, "frame")
        value = json_number(value, "value")
        interp = InterpolationType.parse(root.get("interpolation", InterpolationType.LINEAR))
        return cls(frame=frame, value=value, interpolation=interp)


def _ease(u: float) -> float:
    return u * u * (3.0 - 2.0 * u)


class Curve:
    """
    Scalar animation curve keyed by frame number.

    Points are held in an immutable tuple that is swapped on every edit, so
    ``get_value`` can run concurrently with a single writer.
    """

    def __init__(self, default: float = 0.0, points: Optional[Iterable[Point]] = None):
        self.default = float(default)
        self._lock = threading.Lock()
        self._points: Tuple[Point, ...] = ()
        if points:
            self.set_points(points)

    def __len__(self) -> int:
        return len(self._points)

    def __repr__(self) -> str:
        return f"Curve(default={self.default}, points={list(self._points)})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Curve):
            return NotImplemented
        return self.default == other.default and self._points == other._points

    @property
    def points(self) -> Tuple[Point, ...]:
        return self._points

    def get_count(self) -> int:
        return len(self._points)

    def set_points(self, points: Iterable[Point]) -> None:
        by_frame = {p.frame: p for p in points}
        with self._lock:
            self._points = tuple(by_frame[k] for k in sorted(by_frame))

    def add_point(
        self,
        frame: float,
        value: float,
        interpolation: InterpolationType | str = InterpolationType.LINEAR,
    ) -> None:
        """Add a point, replacing any point already at ``frame``."""
        point = Point(float(frame), float(value), InterpolationType.parse(interpolation))
        with self._lock:
            pts = [p for p in self._points if p.frame != point.frame]
            idx = bisect_left([p.frame for p in pts], point.frame)
            pts.insert(idx, point)
            self._points = tuple(pts)

    def remove_point(self, frame: float) -> bool:
        with self._lock:
            pts = tuple(p for p in self._points if p.frame != frame)
            removed = len(pts) != len(self._points)
            self._points = pts
        return removed

    def clear(self) -> None:
        with self._lock:
            self._points = ()

    def contains(self, frame: float) -> bool:
        return any(p.frame == frame for p in self._points)

    def get_value(self, frame: float) -> float:
        pts = self._points
        if not pts:
            return self.default
        if frame <= pts[0].frame:
            return pts[0].value
        if frame >= pts[-1].frame:
            return pts[-1].value

        idx = bisect_left([p.frame for p in pts], frame)
        b = pts[idx]
        if b.frame == frame:
            return b.value
        a = pts[idx - 1]
        if a.interpolation is InterpolationType.CONSTANT:
            return a.value
        u = (frame - a.frame) / (b.frame - a.frame)
        if a.interpolation is InterpolationType.BEZIER:
            u = _ease(u)
        return a.value + u * (b.value - a.value)

    @staticmethod
    def _closest_index(pts: Tuple[Point, ...], frame: float) -> int:
        idx = bisect_left([p.frame for p in pts], frame)
        return min(idx, len(pts) - 1)

    def get_closest_point(self, frame: float) -> Optional[Point]:
        """First point at or after ``frame``; the last point when past the end."""
        pts = self._points
        if not pts:
            return None
        return pts[self._closest_index(pts, frame)]

    def get_previous_point(self, frame: float) -> Optional[Point]:
        pts = self._points
        if not pts:
            return None
        idx = self._closest_index(pts, frame)
        return pts[idx - 1] if idx > 0 else pts[idx]

    def json_value(self) -> List[Dict[str, Any]]:
        return [p.json_value() for p in self._points]

    def set_json_value(self, root: Any) -> None:
        """Replace all points; nothing changes if any point is malformed."""
        if isinstance(root, dict) and "points" in root:
            root = root["points"]
        if not isinstance(root, list):
            raise InvalidJSON("Curve JSON must be a list of points")
        self.set_points([Point.from_json_value(p) for p in root])
