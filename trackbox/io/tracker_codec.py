from __future__ import annotations

import csv
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, Optional, Protocol, runtime_checkable

from trackbox.errors import InvalidJSON, IOFailure
from trackbox.tracking.types import TrackerRecord, json_number
from trackbox.utils.logger import get_logger

logger = get_logger(__name__)


@runtime_checkable
class TrackerCodec(Protocol):
    """Turns a tracker output file into an ordered stream of records."""

    def decode(self, path: str | Path) -> Iterator[TrackerRecord]:
        ...


def _number(obj: Dict[str, Any], key: str, default: Optional[float] = None) -> float:
    return json_number(obj.get(key, default), key)


class JsonTrackerCodec:
    """
    Tracker output as JSON:
      {"frames": [{"id": 1, "rotation": 0.0,
                   "bounding_box": {"x1": .., "y1": .., "x2": .., "y2": ..}}, ...],
       "last_updated": "2024-01-01T00:00:00Z"}
    Frames may also carry center form fields (cx, cy, width, height, angle)
    instead of ``bounding_box``.
    """

    def decode(self, path: str | Path) -> Iterator[TrackerRecord]:
        path = Path(path)
        if not path.exists():
            raise IOFailure(f"Tracker data not found: {path}")
        try:
            root = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as exc:
            raise IOFailure(f"Could not read tracker data {path}: {exc}") from exc
        except ValueError as exc:
            raise InvalidJSON(f"Tracker data {path} is not valid JSON: {exc}") from exc

        frames = root.get("frames") if isinstance(root, dict) else None
        if not isinstance(frames, list):
            raise InvalidJSON(f"Tracker data {path} has no 'frames' list")
        if root.get("last_updated"):
            logger.info("Tracker data %s saved at %s", path, root["last_updated"])

        for frame in frames:
            yield self._record(frame)

    @staticmethod
    def _record(frame: Any) -> TrackerRecord:
        if not isinstance(frame, dict):
            raise InvalidJSON("Tracker frame must be an object")
        frame_id = frame.get("id")
        if isinstance(frame_id, bool) or not isinstance(frame_id, int):
            raise InvalidJSON("Tracker frame 'id' must be an integer")
        json_number(frame_id, "id")

        box = frame.get("bounding_box")
        if box is not None:
            if not isinstance(box, dict):
                raise InvalidJSON("'bounding_box' must be an object")
            return TrackerRecord.from_corners(
                frame_id,
                _number(box, "x1"),
                _number(box, "y1"),
                _number(box, "x2"),
                _number(box, "y2"),
                angle=_number(frame, "rotation", 0.0),
            )
        return TrackerRecord(
            frame=frame_id,
            cx=_number(frame, "cx"),
            cy=_number(frame, "cy"),
            width=_number(frame, "width"),
            height=_number(frame, "height"),
            angle=_number(frame, "angle", 0.0),
        )

    def encode(self, path: str | Path, records: Iterable[TrackerRecord]) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            "frames": [r.json_value() for r in records],
            "last_updated": datetime.now(timezone.utc).isoformat(),
        }
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        return path


class MotTrackerCodec:
    """
    MOT-challenge style text: ``frame,id,left,top,width,height[,conf,...]``.
    Rows of other tracks are skipped when ``track_id`` is set. Lines starting
    with '#' are comments.
    """

    def __init__(self, track_id: Optional[int] = None):
        self.track_id = track_id

    def decode(self, path: str | Path) -> Iterator[TrackerRecord]:
        path = Path(path)
        if not path.exists():
            raise IOFailure(f"Tracker data not found: {path}")
        try:
            with path.open("r", encoding="utf-8", newline="") as f:
                for lineno, row in enumerate(csv.reader(f), start=1):
                    if not row or row[0].lstrip().startswith("#"):
                        continue
                    if len(row) < 6:
                        raise ValueError(f"{path}:{lineno}: expected at least 6 columns, got {len(row)}")
                    frame, track, left, top, width, height = row[:6]
                    if self.track_id is not None and _mot_int(track, path, lineno) != self.track_id:
                        continue
                    try:
                        frame_n = int(float(frame))
                        left_f, top_f, w_f, h_f = float(left), float(top), float(width), float(height)
                    except (ValueError, OverflowError) as exc:
                        raise ValueError(f"{path}:{lineno}: {exc}") from exc
                    yield TrackerRecord.from_corners(frame_n, left_f, top_f, left_f + w_f, top_f + h_f)
        except UnicodeDecodeError as exc:
            raise IOFailure(f"Could not read tracker data {path}: {exc}") from exc


def _mot_int(text: str, path: Path, lineno: int) -> int:
    try:
        return int(float(text))
    except (ValueError, OverflowError) as exc:
        raise ValueError(f"{path}:{lineno}: {exc}") from exc


def codec_for_path(path: str | Path) -> TrackerCodec:
    suffix = Path(path).suffix.lower()
    if suffix in (".txt", ".csv"):
        return MotTrackerCodec()
    return JsonTrackerCodec()
