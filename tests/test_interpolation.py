import pytest

from trackbox.tracking.interpolation import interpolate_boxes, resolve_base_box
from trackbox.tracking.sample_store import TimeSampleStore
from trackbox.tracking.types import BBox


def test_interpolate_midpoint_all_fields():
    left = BBox(0, 0, 10, 20, 0)
    right = BBox(100, 50, 30, 40, 90)
    box = interpolate_boxes(0.0, 1.0, left, right, 0.5)
    assert box.as_tuple() == pytest.approx((50, 25, 20, 30, 45))


def test_interpolate_angle_takes_linear_path_across_wrap():
    box = interpolate_boxes(0.0, 1.0, BBox(0, 0, 1, 1, 350), BBox(0, 0, 1, 1, 10), 0.5)
    assert box.angle == pytest.approx(180.0)


def test_interpolate_degenerate_interval_returns_left():
    left = BBox(1, 1, 1, 1, 1)
    assert interpolate_boxes(2.0, 2.0, left, BBox(5, 5, 5, 5, 5), 2.0) is left


def test_resolve_clamps_outside_range():
    store = TimeSampleStore()
    store.insert(1.0, BBox(10, 10, 1, 1, 0))
    store.insert(2.0, BBox(20, 20, 1, 1, 0))
    assert resolve_base_box(store, 0.0).cx == 10
    assert resolve_base_box(store, 9.0).cx == 20
    assert resolve_base_box(store, 1.25).cx == pytest.approx(12.5)


def test_resolve_empty_store_is_none():
    assert resolve_base_box(TimeSampleStore(), 1.0) is None
