from trackbox.inputs.video_input import VideoInput, VideoMeta
from trackbox.tracking.types import FrameRate


def test_video_input_stays_inert_when_missing():
    vi = VideoInput("/tmp/does-not-exist.mp4", allow_missing=True)
    assert str(vi.path) == "/tmp/does-not-exist.mp4"
    assert vi.meta is None
    assert list(vi.frames()) == []


def test_video_meta_frame_rate_is_rational():
    assert VideoMeta(fps=25.0, width=1, height=1, frame_count=0).frame_rate() == FrameRate(25, 1)
    assert VideoMeta(fps=30000 / 1001, width=1, height=1, frame_count=0).frame_rate() == FrameRate(30000, 1001)
