from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, Tuple

from trackbox.animation.curve import Curve
from trackbox.tracking.types import BBox

# Curve name -> identity value
CURVE_DEFAULTS: Dict[str, float] = {
    "delta_x": 0.0,
    "delta_y": 0.0,
    "scale_x": 1.0,
    "scale_y": 1.0,
    "rotation": 0.0,
}


@dataclass
class Adjustment:
    delta_x: float = 0.0
    delta_y: float = 0.0
    scale_x: float = 1.0
    scale_y: float = 1.0
    rotation: float = 0.0


class AdjustmentComposer:
    """
    Layers the five user curves on top of a base box.

    Order is fixed:
      1. translate  cx += delta_x, cy += delta_y
      2. scale      width *= scale_x, height *= scale_y (about the new center)
      3. rotate     angle += rotation
    Scaling is about the center, so it never moves cx/cy and the translation
    lands unscaled.
    """

    def __init__(self):
        self.delta_x = Curve(CURVE_DEFAULTS["delta_x"])
        self.delta_y = Curve(CURVE_DEFAULTS["delta_y"])
        self.scale_x = Curve(CURVE_DEFAULTS["scale_x"])
        self.scale_y = Curve(CURVE_DEFAULTS["scale_y"])
        self.rotation = Curve(CURVE_DEFAULTS["rotation"])

    def curves(self) -> Iterator[Tuple[str, Curve]]:
        for name in CURVE_DEFAULTS:
            yield name, getattr(self, name)

    def evaluate(self, frame_number: int) -> Adjustment:
        return Adjustment(
            delta_x=self.delta_x.get_value(frame_number),
            delta_y=self.delta_y.get_value(frame_number),
            scale_x=self.scale_x.get_value(frame_number),
            scale_y=self.scale_y.get_value(frame_number),
            rotation=self.rotation.get_value(frame_number),
        )

    def apply(self, base_box: BBox, frame_number: int) -> BBox:
        adj = self.evaluate(frame_number)
        cx = base_box.cx + adj.delta_x
        cy = base_box.cy + adj.delta_y
        width = base_box.width * adj.scale_x
        height = base_box.height * adj.scale_y
        angle = base_box.angle + adj.rotation
        return BBox(cx=cx, cy=cy, width=width, height=height, angle=angle)
