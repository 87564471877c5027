from __future__ import annotations

import argparse
import json
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

try:
    import cv2
except ImportError:  # pragma: no cover
    cv2 = None

from rich.console import Console
from tqdm import tqdm

from trackbox.errors import TrackboxError
from trackbox.inputs.video_input import VideoInput
from trackbox.tracking.keyframe_bbox import KeyFrameBBox
from trackbox.utils.config import DEFAULT_CONFIG, TrackingConfig, get, load_yaml
from trackbox.utils.logger import setup_logger
from trackbox.visualization.overlay import draw_box, draw_hud


def make_run_dir(base_dir: str | Path) -> Path:
    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    run_dir = Path(base_dir) / f"run_{ts}"
    run_dir.mkdir(parents=True, exist_ok=True)
    return run_dir


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="trackbox - resolve tracked boxes per frame")
    parser.add_argument("--config", default=str(DEFAULT_CONFIG), help="Path to YAML config")
    parser.add_argument("--boxes", required=True, help="Tracker output (.json or MOT .txt/.csv)")
    parser.add_argument("--metadata", help="Tracking metadata JSON (base fps, time scale, curves)")
    parser.add_argument("--input", help="Optional video; enables overlay output and sets the frame count")
    parser.add_argument("--frames", type=int, help="Number of frames to resolve when no video is given")
    parser.add_argument("--time-scale", type=float, help="Override the time scale")
    return parser


def main(argv: Optional[list] = None) -> int:
    args = build_parser().parse_args(argv)

    cfg: Dict[str, Any] = load_yaml(args.config)
    run_dir = make_run_dir(get(cfg, "runtime.output_dir", "results"))
    logger = setup_logger(log_dir=run_dir, level=get(cfg, "runtime.log_level", "INFO"))

    console = Console()
    console.print(f"[bold]trackbox[/bold] run dir: {run_dir}")

    tracked = KeyFrameBBox.from_config(TrackingConfig.from_dict(cfg))
    if args.metadata:
        try:
            tracked.set_json(Path(args.metadata).read_text(encoding="utf-8"))
        except (OSError, TrackboxError) as exc:
            logger.error("Could not apply metadata %s: %s", args.metadata, exc)
            return 1
    if args.time_scale is not None:
        tracked.scale_points(args.time_scale)

    if not tracked.load_box_data(args.boxes):
        console.print(f"[red]Failed to load tracker data from {args.boxes}[/red]")
        return 1
    logger.info("Tracked region: %r", tracked)

    vin = VideoInput(args.input) if args.input else None
    total = args.frames
    if vin is not None and vin.meta and vin.meta.frame_count > 0:
        total = vin.meta.frame_count
    if total is None:
        last = tracked.samples_json_value()["frames"][-1:]
        total = last[0]["id"] if last else 0

    writer = None
    save_video = bool(get(cfg, "runtime.save_video", True))
    overlay_enabled = bool(get(cfg, "runtime.overlay.enabled", True))
    color = tuple(get(cfg, "runtime.overlay.color", [255, 200, 0]))
    thickness = int(get(cfg, "runtime.overlay.thickness", 2))
    if vin is not None and vin.meta and save_video:
        if cv2 is None:
            raise ImportError("opencv-python is required to save video output")
        fourcc = cv2.VideoWriter_fourcc(*"mp4v")
        writer = cv2.VideoWriter(str(run_dir / "overlay.mp4"), fourcc, vin.meta.fps, (vin.meta.width, vin.meta.height))
        if not writer.isOpened():
            raise RuntimeError("Could not open VideoWriter (mp4v). Try a different codec/container.")

    boxes = []
    frame_iter = vin.frames() if vin is not None else ((n, None) for n in range(1, total + 1))
    for frame_number, frame in tqdm(frame_iter, total=total or None, desc="Resolving"):
        box = tracked.get_box(frame_number)
        boxes.append({"frame": frame_number, "visible": tracked.visible, **box.json_value()})
        if writer is not None and frame is not None:
            render = frame
            if overlay_enabled:
                if tracked.visible:
                    render = draw_box(render, box, color=color, thickness=thickness, label=f"#{frame_number}")
                render = draw_hud(render, frame_number, box, visible=tracked.visible)
            writer.write(render)

    if vin is not None:
        vin.stop()
    if writer is not None:
        writer.release()
        logger.info("Saved video: %s", run_dir / "overlay.mp4")

    boxes_path = run_dir / "boxes.json"
    boxes_path.write_text(json.dumps({"metadata": tracked.json_value(), "boxes": boxes}, indent=2), encoding="utf-8")
    logger.info("Saved boxes: %s", boxes_path)

    props_path = run_dir / "properties.json"
    props_path.write_text(json.dumps(tracked.properties_json(1), indent=2), encoding="utf-8")
    logger.info("Saved properties: %s", props_path)

    logger.info("Done.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
