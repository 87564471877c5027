import pytest

from trackbox import KeyFrameBBox


def test_properties_cover_box_and_curves():
    tracked = KeyFrameBBox()
    tracked.add_box(1, 0.5, 0.5, 0.2, 0.4, 0)
    tracked.delta_x.add_point(1, 0.1)
    tracked.delta_x.add_point(10, 0.3)
    props = tracked.properties_json(1)

    assert {"x1", "y1", "x2", "y2", "cx", "cy", "width", "height", "angle", "visible"} <= set(props)
    assert {"delta_x", "delta_y", "scale_x", "scale_y", "rotation"} <= set(props)
    assert props["x1"]["value"] == pytest.approx(0.5)
    assert props["x2"]["value"] == pytest.approx(0.7)
    assert props["cx"]["readonly"] is True

    dx = props["delta_x"]
    assert dx["value"] == pytest.approx(0.1)
    assert dx["keyframe"] is True
    assert dx["points"] == 2
    assert dx["readonly"] is False
    assert dx["keyframe_points"][1] == {"frame": 10.0, "value": 0.3, "interpolation": "linear"}
    for key in ("name", "value", "type", "description", "min", "max", "readonly", "keyframe_points"):
        assert key in dx


def test_properties_without_points_report_identity():
    props = KeyFrameBBox().properties_json(5)
    assert props["scale_x"]["value"] == 1.0
    assert props["rotation"]["value"] == 0.0
    assert props["rotation"]["closest_point_x"] == -1
    assert props["cx"]["value"] == -1
    assert props["x1"]["value"] == -1


def test_visible_choices():
    tracked = KeyFrameBBox(visible=False)
    choices = tracked.properties_json(1)["visible"]["choices"]
    assert [c["name"] for c in choices] == ["Yes", "No"]
    assert [c["selected"] for c in choices] == [False, True]
