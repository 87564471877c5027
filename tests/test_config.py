from pathlib import Path

import pytest

import trackbox
from trackbox.app import build_parser
from trackbox.tracking.types import FrameRate
from trackbox.utils.config import DEFAULT_CONFIG, TrackingConfig, get, load_yaml


def test_get_dot_access():
    cfg = {"tracking": {"base_fps": {"num": 24}}}
    assert get(cfg, "tracking.base_fps.num") == 24
    assert get(cfg, "tracking.base_fps.den", 1) == 1
    assert get(cfg, "runtime.missing", "x") == "x"


def test_load_yaml_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_yaml(tmp_path / "none.yaml")


def test_tracking_config_from_yaml(tmp_path):
    path = tmp_path / "cfg.yaml"
    path.write_text("tracking:\n  base_fps: {num: 24000, den: 1001}\n  time_scale: 0.5\n", encoding="utf-8")
    cfg = TrackingConfig.load(path)
    assert cfg.base_fps == FrameRate(24000, 1001)
    assert cfg.time_scale == 0.5
    assert cfg.visible is True


def test_shipped_defaults():
    cfg = TrackingConfig.load()
    assert cfg.base_fps == FrameRate(30, 1)
    assert cfg.time_scale == 1.0


def test_default_config_ships_inside_package():
    package_dir = Path(trackbox.__file__).resolve().parent
    assert DEFAULT_CONFIG.is_file()
    assert package_dir in DEFAULT_CONFIG.parents
    assert build_parser().parse_args(["--boxes", "x.json"]).config == str(DEFAULT_CONFIG)
