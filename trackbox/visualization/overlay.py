from __future__ import annotations

from typing import Any, Optional, Tuple

import numpy as np

try:
    import cv2
except ImportError:  # pragma: no cover
    cv2 = None

from trackbox.tracking.types import BBox


def box_corners(box: BBox, frame_size: Optional[Tuple[int, int]] = None) -> np.ndarray:
    """
    4x2 corner array (clockwise from top-left before rotation).
    ``frame_size`` (width, height) scales normalized boxes to pixels.
    """
    sx, sy = frame_size if frame_size else (1.0, 1.0)
    cx, cy = box.cx * sx, box.cy * sy
    half_w, half_h = box.width * sx / 2.0, box.height * sy / 2.0
    local = np.array([[-half_w, -half_h], [half_w, -half_h], [half_w, half_h], [-half_w, half_h]], dtype=np.float64)
    theta = np.deg2rad(box.angle)
    # y points down, so a positive angle turns clockwise on screen
    rot = np.array([[np.cos(theta), -np.sin(theta)], [np.sin(theta), np.cos(theta)]])
    return local @ rot.T + np.array([cx, cy])


def draw_box(
    frame: Any,
    box: BBox,
    color: Tuple[int, int, int] = (255, 200, 0),
    thickness: int = 2,
    label: Optional[str] = None,
    normalized: bool = True,
) -> Any:
    if cv2 is None or box.is_sentinel:
        return frame
    render = frame.copy()
    h, w = render.shape[:2]
    pts = box_corners(box, (w, h) if normalized else None)
    pts = np.round(pts).astype(np.int32).reshape((-1, 1, 2))
    cv2.polylines(render, [pts], isClosed=True, color=color, thickness=thickness)
    if label:
        x, y = int(pts[:, 0, 0].min()), int(pts[:, 0, 1].min())
        cv2.putText(render, label, (x, max(12, y - 6)), cv2.FONT_HERSHEY_SIMPLEX, 0.55, color, 2)
    return render


def draw_hud(frame: Any, frame_number: int, box: BBox, visible: bool = True) -> Any:
    """Frame number and box geometry in the top-left corner."""
    if cv2 is None:
        return frame
    render = frame.copy()
    cv2.putText(render, f"frame {frame_number}", (15, 25), cv2.FONT_HERSHEY_SIMPLEX, 0.7, (255, 255, 255), 2)
    if box.is_sentinel:
        txt = "no box"
    else:
        txt = f"c=({box.cx:.3f},{box.cy:.3f}) wh=({box.width:.3f},{box.height:.3f}) a={box.angle:.1f}"
    if not visible:
        txt += " [hidden]"
    cv2.putText(render, txt, (15, 50), cv2.FONT_HERSHEY_SIMPLEX, 0.6, (220, 220, 220), 2)
    return render
