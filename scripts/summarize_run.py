#!/usr/bin/env python3
import json
import sys
from pathlib import Path
from statistics import mean


def safe_mean(xs):
    xs = [x for x in xs if x is not None]
    return mean(xs) if xs else None


def pct(n, d):
    return (100.0 * n / d) if d else 0.0


def main():
    if len(sys.argv) < 2:
        print("Usage: python scripts/summarize_run.py results/run_YYYYMMDD_HHMMSS")
        sys.exit(1)

    run_dir = Path(sys.argv[1])
    boxes_path = run_dir / "boxes.json"
    if not boxes_path.exists():
        raise FileNotFoundError(f"Missing: {boxes_path}")

    data = json.loads(boxes_path.read_text())
    boxes = data.get("boxes", [])
    n = len(boxes)
    if n == 0:
        print("No frames found in boxes.json")
        return

    with_box = [b for b in boxes if b.get("cx", -1) != -1]
    hidden = sum(1 for b in boxes if not b.get("visible", True))
    meta = data.get("metadata", {})
    fps = meta.get("BaseFPS", {})

    print("\n================ TRACKBOX RUN SUMMARY ================")
    print(f"Run dir: {run_dir}")
    print(f"Frames: {n}")
    print(f"Base fps: {fps.get('num', '?')}/{fps.get('den', '?')}  time scale: {meta.get('TimeScale', '?')}")

    print("\nCoverage:")
    print(f"  frames with box: {len(with_box)}/{n} ({pct(len(with_box), n):.1f}%)")
    print(f"  hidden frames:   {hidden}/{n} ({pct(hidden, n):.1f}%)")

    if with_box:
        print("\nGeometry (avg):")
        for key in ("cx", "cy", "width", "height", "angle"):
            print(f"  {key:7s}: {safe_mean([b.get(key) for b in with_box]):.4f}")

    curves = [k for k in ("delta_x", "delta_y", "scale_x", "scale_y", "rotation") if meta.get(k)]
    print("\nAnimated curves: " + (", ".join(curves) if curves else "(none)"))
    print("======================================================\n")


if __name__ == "__main__":
    main()
