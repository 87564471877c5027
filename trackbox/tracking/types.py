from __future__ import annotations

import json
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Tuple

from trackbox.errors import InvalidJSON

UNSET = -1.0


def json_number(value: Any, key: str) -> float:
    """Float from a decoded JSON value; anything else, or an int too large for a float, is InvalidJSON."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidJSON(f"'{key}' must be a number, got {type(value).__name__}")
    try:
        return float(value)
    except OverflowError as exc:
        raise InvalidJSON(f"'{key}' is out of range for a float") from exc


@dataclass(frozen=True)
class BBox:
    """
    A (possibly rotated) rectangle described by its center.

    Units are whatever the tracker produced (normalized or pixels) and are
    never converted here. ``angle`` is in degrees, clockwise-positive in image
    coordinates (y pointing down), the same convention as OpenCV's RotatedRect.
    Every field at -1 is the "no data" sentinel.
    """

    cx: float = UNSET
    cy: float = UNSET
    width: float = UNSET
    height: float = UNSET
    angle: float = UNSET

    @classmethod
    def sentinel(cls) -> "BBox":
        return cls()

    @property
    def is_sentinel(self) -> bool:
        return self == BBox()

    def as_tuple(self) -> Tuple[float, float, float, float, float]:
        return (self.cx, self.cy, self.width, self.height, self.angle)

    def to_xyxy(self) -> Tuple[float, float, float, float]:
        """Axis-aligned corners, ignoring the angle."""
        half_w = self.width / 2.0
        half_h = self.height / 2.0
        return (self.cx - half_w, self.cy - half_h, self.cx + half_w, self.cy + half_h)

    def json(self) -> str:
        return json.dumps(self.json_value(), indent=2)

    def json_value(self) -> Dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def with_json_value(self, root: Dict[str, Any]) -> "BBox":
        """Return a copy with every field present in ``root`` replaced."""
        if not isinstance(root, dict):
            raise InvalidJSON("BBox JSON must be an object")
        changes = {f.name: json_number(root[f.name], f.name) for f in fields(self) if root.get(f.name) is not None}
        return replace(self, **changes)

    @classmethod
    def from_json_value(cls, root: Dict[str, Any]) -> "BBox":
        return cls().with_json_value(root)

    @classmethod
    def from_json(cls, value: str) -> "BBox":
        try:
            root = json.loads(value)
        except (TypeError, ValueError) as exc:
            raise InvalidJSON("JSON is invalid (missing keys or invalid data types)") from exc
        return cls.from_json_value(root)


@dataclass(frozen=True)
class FrameRate:
    """Rational frame rate, e.g. ``FrameRate(30000, 1001)``."""

    num: int = 30
    den: int = 1

    @property
    def is_valid(self) -> bool:
        return self.num != 0 and self.den != 0

    def to_float(self) -> float:
        return self.num / self.den

    def reciprocal(self) -> "FrameRate":
        return FrameRate(self.den, self.num)

    def json_value(self) -> Dict[str, int]:
        return {"num": self.num, "den": self.den}

    def __str__(self) -> str:
        return f"{self.num}/{self.den}"


@dataclass(frozen=True)
class TrackerRecord:
    """One decoded tracker sample in center form."""

    frame: int
    cx: float
    cy: float
    width: float
    height: float
    angle: float = 0.0

    @classmethod
    def from_corners(cls, frame: int, x1: float, y1: float, x2: float, y2: float, angle: float = 0.0) -> "TrackerRecord":
        width = x2 - x1
        height = y2 - y1
        return cls(frame=frame, cx=x1 + width / 2.0, cy=y1 + height / 2.0, width=width, height=height, angle=angle)

    def json_value(self) -> Dict[str, Any]:
        return {"id": self.frame, "cx": self.cx, "cy": self.cy, "width": self.width, "height": self.height, "angle": self.angle}

    @property
    def is_valid(self) -> bool:
        return self.cx >= 0.0 and self.cy >= 0.0 and self.width >= 0.0 and self.height >= 0.0
