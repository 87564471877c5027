from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

import yaml

from trackbox.tracking.types import FrameRate

DEFAULT_CONFIG = Path(__file__).resolve().parents[1] / "configs" / "tracking.yaml"


def load_yaml(path: str | Path) -> Dict[str, Any]:
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config not found: {config_path.resolve()}")
    with config_path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def get(cfg: Dict[str, Any], key: str, default: Any = None) -> Any:
    """
    Dot-access helper:
      get(cfg, "tracking.base_fps.num", 30)
    """
    cur: Any = cfg
    for part in key.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return default
        cur = cur[part]
    return cur


@dataclass
class TrackingConfig:
    base_fps: FrameRate = FrameRate(30, 1)
    time_scale: float = 1.0
    visible: bool = True

    @classmethod
    def from_dict(cls, cfg: Dict[str, Any]) -> "TrackingConfig":
        return cls(
            base_fps=FrameRate(
                int(get(cfg, "tracking.base_fps.num", 30)),
                int(get(cfg, "tracking.base_fps.den", 1)),
            ),
            time_scale=float(get(cfg, "tracking.time_scale", 1.0)),
            visible=bool(get(cfg, "tracking.visible", True)),
        )

    @classmethod
    def load(cls, path: str | Path = DEFAULT_CONFIG) -> "TrackingConfig":
        return cls.from_dict(load_yaml(path))
