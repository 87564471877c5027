from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import Any, Dict, Optional

from trackbox.animation.adjustments import AdjustmentComposer
from trackbox.animation.curve import Curve
from trackbox.errors import InvalidJSON, IOFailure
from trackbox.io.tracker_codec import JsonTrackerCodec, TrackerCodec, codec_for_path
from trackbox.tracking.interpolation import interpolate_boxes, resolve_base_box
from trackbox.tracking.properties import add_property_choice_json, add_property_json
from trackbox.tracking.sample_store import TimeSampleStore
from trackbox.tracking.timing import frame_to_time, time_to_frame
from trackbox.tracking.types import BBox, FrameRate, TrackerRecord, json_number
from trackbox.utils.config import TrackingConfig
from trackbox.utils.logger import get_logger

logger = get_logger(__name__)

# Samples are keyed in the time space they were recorded in.
RECORDED_TIME_SCALE = 1.0


class KeyFrameBBox:
    """
    Trajectory of one tracked region over a clip.

    Raw tracker samples live in a time-indexed store; five adjustment curves
    (delta_x, delta_y, scale_x, scale_y, rotation) are layered on top when a
    box is requested, never baked into the samples.

    Thread model: one writer at a time (guarded by ``_write_lock``), any number
    of concurrent ``get_box`` readers.
    """

    def __init__(self, base_fps: FrameRate | None = None, time_scale: float = 1.0, visible: bool = True):
        self._write_lock = threading.RLock()
        self._store = TimeSampleStore()
        self._adjustments = AdjustmentComposer()
        self._base_fps = base_fps or FrameRate(30, 1)
        self._time_scale = float(time_scale)
        self._visible = bool(visible)
        self.data_path: str = ""

    @classmethod
    def from_config(cls, cfg: TrackingConfig) -> "KeyFrameBBox":
        return cls(base_fps=cfg.base_fps, time_scale=cfg.time_scale, visible=cfg.visible)

    def __len__(self) -> int:
        return len(self._store)

    def __repr__(self) -> str:
        return f"KeyFrameBBox(samples={len(self._store)}, base_fps={self._base_fps}, time_scale={self._time_scale})"

    # ---- adjustment curves ----
    @property
    def adjustments(self) -> AdjustmentComposer:
        return self._adjustments

    @property
    def delta_x(self) -> Curve:
        return self._adjustments.delta_x

    @property
    def delta_y(self) -> Curve:
        return self._adjustments.delta_y

    @property
    def scale_x(self) -> Curve:
        return self._adjustments.scale_x

    @property
    def scale_y(self) -> Curve:
        return self._adjustments.scale_y

    @property
    def rotation(self) -> Curve:
        return self._adjustments.rotation

    # ---- timing ----
    @property
    def base_fps(self) -> FrameRate:
        return self._base_fps

    def set_base_fps(self, fps: FrameRate) -> None:
        if not fps.is_valid:
            logger.warning("Base fps set to degenerate value %s; frame lookups will fail", fps)
        with self._write_lock:
            self._base_fps = fps

    def get_base_fps(self) -> FrameRate:
        return self._base_fps

    @property
    def time_scale(self) -> float:
        return self._time_scale

    def scale_points(self, scale: float) -> None:
        """Rescale the read-side frame->time mapping (e.g. after a clip speed change)."""
        with self._write_lock:
            self._time_scale = float(scale)

    @property
    def visible(self) -> bool:
        return self._visible

    def set_visible(self, visible: bool) -> None:
        with self._write_lock:
            self._visible = bool(visible)

    def frame_to_time(self, frame_number: int, time_scale: float) -> float:
        return frame_to_time(frame_number, self._base_fps, time_scale)

    # ---- samples ----
    def add_box(self, frame_number: int, cx: float, cy: float, width: float, height: float, angle: float) -> None:
        if frame_number < 0:
            logger.debug("Ignoring box for negative frame %d", frame_number)
            return
        time = self.frame_to_time(frame_number, RECORDED_TIME_SCALE)
        with self._write_lock:
            self._store.insert(time, BBox(float(cx), float(cy), float(width), float(height), float(angle)))

    def remove_box(self, frame_number: int) -> None:
        time = self.frame_to_time(frame_number, RECORDED_TIME_SCALE)
        with self._write_lock:
            self._store.remove(time)

    def contains(self, frame_number: int) -> bool:
        return self.frame_to_time(frame_number, RECORDED_TIME_SCALE) in self._store

    def get_length(self) -> int:
        return len(self._store)

    def clear(self) -> None:
        with self._write_lock:
            self._store.clear()

    @staticmethod
    def interpolate_boxes(t1: float, t2: float, left: BBox, right: BBox, target: float) -> BBox:
        return interpolate_boxes(t1, t2, left, right, target)

    def get_base_box(self, frame_number: int) -> BBox:
        """Interpolated geometry at ``frame_number`` without the adjustment curves."""
        target = self.frame_to_time(frame_number, self._time_scale)
        base = resolve_base_box(self._store, target)
        return base if base is not None else BBox.sentinel()

    def get_box(self, frame_number: int) -> BBox:
        target = self.frame_to_time(frame_number, self._time_scale)
        base = resolve_base_box(self._store, target)
        if base is None:
            return BBox.sentinel()
        return self._adjustments.apply(base, frame_number)

    def get_box_values(self, frame_number: int) -> Dict[str, float]:
        box = self.get_box(frame_number)
        adj = self._adjustments.evaluate(frame_number)
        return {
            "cx": box.cx,
            "cy": box.cy,
            "w": box.width,
            "h": box.height,
            "ang": box.angle,
            "sx": adj.scale_x,
            "sy": adj.scale_y,
            "dx": adj.delta_x,
            "dy": adj.delta_y,
            "r": adj.rotation,
        }

    # ---- tracker data ----
    def load_box_data(self, path: str | Path, codec: Optional[TrackerCodec] = None) -> bool:
        """
        Bulk-load tracker samples. Returns False when the file is missing or
        malformed; records added before the failure are kept.
        """
        codec = codec or codec_for_path(path)
        loaded = skipped = 0
        try:
            with self._write_lock:
                for record in codec.decode(path):
                    if not record.is_valid:
                        skipped += 1
                        continue
                    self.add_box(record.frame, record.cx, record.cy, record.width, record.height, record.angle)
                    loaded += 1
        except IOFailure as exc:
            logger.warning("Could not load tracker data: %s", exc)
            return False
        except (ValueError, OverflowError, OSError) as exc:
            logger.warning("Tracker data %s is malformed after %d records: %s", path, loaded, exc)
            return False

        self.data_path = str(path)
        logger.info("Loaded %d boxes from %s (%d skipped)", loaded, path, skipped)
        return True

    def samples_json_value(self) -> Dict[str, Any]:
        return {"frames": [r.json_value() for r in self._records()]}

    def export_samples(self, path: str | Path) -> Path:
        """Write the raw samples in a form JsonTrackerCodec reads back."""
        return JsonTrackerCodec().encode(path, self._records())

    def _records(self):
        for time, box in self._store.items():
            frame = round(time_to_frame(time, self._base_fps, RECORDED_TIME_SCALE))
            yield TrackerRecord(frame, box.cx, box.cy, box.width, box.height, box.angle)

    # ---- metadata JSON ----
    def json(self) -> str:
        return json.dumps(self.json_value(), indent=2)

    def json_value(self) -> Dict[str, Any]:
        root: Dict[str, Any] = {
            "BaseFPS": self._base_fps.json_value(),
            "TimeScale": self._time_scale,
            "visible": self._visible,
            "data_path": self.data_path,
        }
        for name, curve in self._adjustments.curves():
            root[name] = curve.json_value()
        return root

    def set_json(self, value: str) -> None:
        try:
            root = json.loads(value)
        except (TypeError, ValueError) as exc:
            raise InvalidJSON("JSON is invalid (missing keys or invalid data types)") from exc
        self.set_json_value(root)

    def set_json_value(self, root: Dict[str, Any]) -> None:
        """
        Apply every recognised key, in the order BaseFPS, TimeScale, visible,
        data_path, delta_x, delta_y, scale_x, scale_y, rotation. The first bad
        field raises InvalidJSON; fields before it stay applied.
        """
        if not isinstance(root, dict):
            raise InvalidJSON("Tracking metadata must be a JSON object")

        with self._write_lock:
            fps = root.get("BaseFPS")
            if fps is not None:
                if not isinstance(fps, dict):
                    raise InvalidJSON("'BaseFPS' must be an object with 'num' and 'den'")
                num = fps.get("num", self._base_fps.num)
                den = fps.get("den", self._base_fps.den)
                if any(isinstance(v, bool) or not isinstance(v, int) for v in (num, den)):
                    raise InvalidJSON("'BaseFPS' num/den must be integers")
                self.set_base_fps(FrameRate(num, den))

            scale = root.get("TimeScale")
            if scale is not None:
                self.scale_points(json_number(scale, "TimeScale"))

            visible = root.get("visible")
            if visible is not None:
                if not isinstance(visible, bool):
                    raise InvalidJSON("'visible' must be a boolean")
                self.set_visible(visible)

            data_path = root.get("data_path")
            if data_path is not None:
                if not isinstance(data_path, str):
                    raise InvalidJSON("'data_path' must be a string")
                self.data_path = data_path

            for name, curve in self._adjustments.curves():
                if root.get(name) is not None:
                    curve.set_json_value(root[name])

    # ---- UI introspection ----
    def properties_json(self, requested_frame: int) -> Dict[str, Any]:
        """Every editable property at ``requested_frame``. Geometry bounds assume normalized coordinates."""
        box = self.get_box(requested_frame)
        if box.is_sentinel:
            x1 = y1 = x2 = y2 = -1.0
        else:
            x1, y1, x2, y2 = box.to_xyxy()

        root: Dict[str, Any] = {}
        for key, label, value in (
            ("x1", "X1", x1),
            ("y1", "Y1", y1),
            ("x2", "X2", x2),
            ("y2", "Y2", y2),
            ("cx", "Center X", box.cx),
            ("cy", "Center Y", box.cy),
            ("width", "Width", box.width),
            ("height", "Height", box.height),
        ):
            root[key] = add_property_json(label, value, "float", "Tracked box geometry", None, 0.0, 1.0, True, requested_frame)
        root["angle"] = add_property_json("Angle", box.angle, "float", "Tracked box angle (degrees)", None, 0.0, 360.0, True, requested_frame)

        root["visible"] = add_property_json(
            "Visible",
            int(self._visible),
            "int",
            "Whether the tracked region is shown",
            None,
            0,
            1,
            False,
            requested_frame,
            choices=[
                add_property_choice_json("Yes", 1, int(self._visible)),
                add_property_choice_json("No", 0, int(self._visible)),
            ],
        )

        adj = self._adjustments
        root["delta_x"] = add_property_json(
            "Displacement X-axis", adj.delta_x.get_value(requested_frame), "float", "Offset added to the center x",
            adj.delta_x, -1.0, 1.0, False, requested_frame,
        )
        root["delta_y"] = add_property_json(
            "Displacement Y-axis", adj.delta_y.get_value(requested_frame), "float", "Offset added to the center y",
            adj.delta_y, -1.0, 1.0, False, requested_frame,
        )
        root["scale_x"] = add_property_json(
            "Scale (Width)", adj.scale_x.get_value(requested_frame), "float", "Width multiplier",
            adj.scale_x, 0.0, 10.0, False, requested_frame,
        )
        root["scale_y"] = add_property_json(
            "Scale (Height)", adj.scale_y.get_value(requested_frame), "float", "Height multiplier",
            adj.scale_y, 0.0, 10.0, False, requested_frame,
        )
        root["rotation"] = add_property_json(
            "Rotation", adj.rotation.get_value(requested_frame), "float", "Degrees added to the box angle",
            adj.rotation, 0.0, 360.0, False, requested_frame,
        )
        return root
