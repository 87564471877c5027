import numpy as np
import pytest

from trackbox.tracking.types import BBox
from trackbox.visualization.overlay import box_corners, draw_box


def test_box_corners_axis_aligned():
    corners = box_corners(BBox(10, 10, 4, 2, 0))
    np.testing.assert_allclose(corners, [[8, 9], [12, 9], [12, 11], [8, 11]], atol=1e-9)


def test_box_corners_rotate_clockwise_on_screen():
    corners = box_corners(BBox(10, 10, 4, 2, 90))
    # top-left corner swings to the top-right of the center
    assert corners[0].tolist() == pytest.approx([11, 8])


def test_box_corners_scale_normalized_boxes():
    corners = box_corners(BBox(0.5, 0.5, 0.5, 0.5, 0), frame_size=(200, 100))
    assert corners[0].tolist() == pytest.approx([50, 25])


def test_draw_box_leaves_input_frame_alone():
    pytest.importorskip("cv2")
    frame = np.zeros((100, 100, 3), dtype=np.uint8)
    render = draw_box(frame, BBox(0.5, 0.5, 0.4, 0.2, 15), label="obj")
    assert render.any()
    assert not frame.any()


def test_draw_box_ignores_sentinel():
    frame = np.zeros((10, 10, 3), dtype=np.uint8)
    assert draw_box(frame, BBox()) is frame
