import json

import pytest

from trackbox import FrameRate, InvalidJSON, KeyFrameBBox


def _configured():
    tracked = KeyFrameBBox(base_fps=FrameRate(30000, 1001), time_scale=0.5)
    tracked.set_visible(False)
    tracked.delta_x.add_point(1, 0.1)
    tracked.delta_x.add_point(30, -0.2, "bezier")
    tracked.rotation.add_point(10, 45.0, "constant")
    return tracked


def test_json_round_trip_is_idempotent():
    source = _configured()
    target = KeyFrameBBox()
    target.set_json(source.json())
    assert target.json_value() == source.json_value()
    target.set_json(target.json())
    assert target.json_value() == source.json_value()


def test_json_layout():
    root = _configured().json_value()
    assert root["BaseFPS"] == {"num": 30000, "den": 1001}
    assert root["TimeScale"] == 0.5
    assert root["visible"] is False
    assert root["scale_x"] == []
    assert root["rotation"] == [{"frame": 10.0, "value": 45.0, "interpolation": "constant"}]


def test_absent_keys_leave_values_and_unknown_keys_are_ignored():
    tracked = _configured()
    before = tracked.json_value()
    tracked.set_json_value({"TimeScale": 2.0, "colour": "red"})
    after = tracked.json_value()
    assert after["TimeScale"] == 2.0
    after["TimeScale"] = before["TimeScale"]
    assert after == before


def test_raw_samples_are_not_part_of_metadata():
    tracked = KeyFrameBBox()
    tracked.add_box(1, 1, 1, 1, 1, 0)
    other = KeyFrameBBox()
    other.set_json(tracked.json())
    assert other.get_length() == 0
    assert "frames" not in tracked.json_value()


def test_unparseable_text_changes_nothing():
    tracked = _configured()
    before = tracked.json_value()
    with pytest.raises(InvalidJSON):
        tracked.set_json("{'TimeScale': 3")
    with pytest.raises(InvalidJSON):
        tracked.set_json("[1, 2]")
    assert tracked.json_value() == before


def test_bad_field_keeps_fields_applied_before_it():
    tracked = _configured()
    payload = {
        "BaseFPS": {"num": 25, "den": 1},
        "TimeScale": 3.0,
        "visible": "yes",
        "delta_x": [],
    }
    with pytest.raises(InvalidJSON):
        tracked.set_json(json.dumps(payload))
    # applied: BaseFPS, TimeScale; failed: visible; never reached: data_path and curves
    assert tracked.base_fps == FrameRate(25, 1)
    assert tracked.time_scale == 3.0
    assert tracked.visible is False
    assert tracked.delta_x.get_count() == 2


def test_bad_curve_is_not_half_applied():
    tracked = _configured()
    payload = {"delta_y": [{"frame": 1, "value": 2.0}], "rotation": [{"frame": 1}]}
    with pytest.raises(InvalidJSON):
        tracked.set_json_value(payload)
    assert tracked.delta_y.get_count() == 1
    assert tracked.rotation.get_count() == 1
    assert tracked.rotation.get_value(10) == 45.0


@pytest.mark.parametrize(
    "payload",
    [
        {"BaseFPS": 30},
        {"BaseFPS": {"num": 30.5}},
        {"TimeScale": "fast"},
        {"data_path": 7},
        {"scale_x": {"frame": 1}},
    ],
)
def test_structural_errors_raise_invalid_json(payload):
    with pytest.raises(InvalidJSON):
        KeyFrameBBox().set_json_value(payload)


def test_huge_time_scale_is_invalid_json():
    tracked = KeyFrameBBox(time_scale=0.5)
    with pytest.raises(InvalidJSON):
        tracked.set_json('{"TimeScale": 1' + "0" * 400 + "}")
    assert tracked.time_scale == 0.5


def test_huge_keyframe_frame_leaves_curve_unchanged():
    tracked = KeyFrameBBox()
    tracked.delta_x.add_point(1, 0.1)
    before = tracked.delta_x.json_value()
    with pytest.raises(InvalidJSON):
        tracked.set_json('{"delta_x": [{"frame": 1' + "0" * 400 + ', "value": 0.5}]}')
    assert tracked.delta_x.json_value() == before
