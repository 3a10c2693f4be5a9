"""Tests for art content sources."""

import io

import pytest
from PIL import Image

from wallart.models.source import (
    DEFAULT_FRAME_DURATION_MS,
    AnimatedImageSource,
    CallbackSource,
    StaticImageSource,
)


@pytest.fixture
def three_frames():
    return [
        Image.new("RGBA", (8, 4), (255, 0, 0, 255)),
        Image.new("RGBA", (8, 4), (0, 255, 0, 255)),
        Image.new("RGBA", (8, 4), (0, 0, 255, 255)),
    ]


class TestStaticImageSource:
    def test_same_frame_at_any_time(self, solid_red_image):
        source = StaticImageSource(solid_red_image)
        assert source.frame_at(0) is solid_red_image
        assert source.frame_at(12345) is solid_red_image
        assert (source.width, source.height) == (64, 64)


class TestAnimatedImageSource:
    """Test frame selection by timestamp."""

    def test_frame_index(self, three_frames):
        source = AnimatedImageSource(three_frames, durations=[100, 200, 300])
        assert source.frame_index_at(0) == 0
        assert source.frame_index_at(99) == 0
        assert source.frame_index_at(100) == 1
        assert source.frame_index_at(299) == 1
        assert source.frame_index_at(300) == 2
        assert source.frame_index_at(599) == 2

    def test_loops(self, three_frames):
        source = AnimatedImageSource(three_frames, durations=[100, 200, 300])
        assert source.frame_index_at(600) == 0
        assert source.frame_index_at(750) == 1

    def test_no_loop_holds_last_frame(self, three_frames):
        source = AnimatedImageSource(three_frames, durations=[100, 200, 300], loop=False)
        assert source.frame_index_at(5000) == 2
        assert source.frame_index_at(-10) == 0

    def test_frame_at(self, three_frames):
        source = AnimatedImageSource(three_frames, durations=[100, 200, 300])
        assert source.frame_at(150) is three_frames[1]

    def test_default_durations(self, three_frames):
        source = AnimatedImageSource(three_frames)
        assert source.durations == [DEFAULT_FRAME_DURATION_MS] * 3
        assert source.total_duration == 300

    def test_zero_duration_replaced(self, three_frames):
        source = AnimatedImageSource(three_frames, durations=[0, 50, 50])
        assert source.durations == [DEFAULT_FRAME_DURATION_MS, 50, 50]

    def test_mismatched_durations(self, three_frames):
        with pytest.raises(ValueError):
            AnimatedImageSource(three_frames, durations=[100])

    def test_size_from_first_frame(self, three_frames):
        source = AnimatedImageSource(three_frames)
        assert (source.width, source.height) == (8, 4)

    def test_empty_animation(self):
        source = AnimatedImageSource([])
        assert source.frame_at(0) is None
        assert source.width == 0

    def test_from_gif(self, three_frames):
        buffer = io.BytesIO()
        first, *rest = [f.convert("RGB") for f in three_frames]
        first.save(buffer, format="GIF", save_all=True, append_images=rest, duration=[50, 150, 200], loop=0)
        buffer.seek(0)

        source = AnimatedImageSource.from_image(Image.open(buffer))

        assert len(source.frames) == 3
        assert source.durations == [50, 150, 200]
        assert source.frames[0].mode == "RGBA"
        assert source.frame_at(60).getpixel((0, 0))[:3] == (0, 255, 0)


class TestCallbackSource:
    def test_passes_timestamp(self, solid_red_image):
        calls = []

        def provider(timestamp):
            calls.append(timestamp)
            return solid_red_image

        source = CallbackSource(64, 64, provider)
        assert source.frame_at(42) is solid_red_image
        assert calls == [42]

    def test_may_be_not_ready(self):
        assert CallbackSource(10, 10, lambda t: None).frame_at(0) is None
