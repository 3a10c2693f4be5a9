"""Content sources for art layers.

Static images, animations and video-like streams all expose the same
capability: a size and a raster for a given timestamp. The compositor asks
for one frame per render and never inspects the concrete type.
"""

from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol

from PIL import Image, ImageSequence

# Used when an animation frame carries no duration
DEFAULT_FRAME_DURATION_MS = 100


class ContentSource(Protocol):
    """Raster content that may change over time."""

    @property
    def width(self) -> int:
        ...

    @property
    def height(self) -> int:
        ...

    def frame_at(self, timestamp: float) -> Optional[Image.Image]:
        """Raster to draw at ``timestamp`` (milliseconds), or None if not ready."""
        ...


@dataclass
class StaticImageSource:
    """A single still image."""

    image: Image.Image

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    def frame_at(self, timestamp: float) -> Optional[Image.Image]:
        return self.image


@dataclass
class AnimatedImageSource:
    """A looping frame sequence, e.g. a decoded GIF."""

    frames: list[Image.Image]
    durations: list[int] = field(default_factory=list)  # Milliseconds per frame
    loop: bool = True

    def __post_init__(self):
        if not self.durations:
            self.durations = [DEFAULT_FRAME_DURATION_MS] * len(self.frames)
        if len(self.durations) != len(self.frames):
            raise ValueError(
                f"Got {len(self.durations)} durations for {len(self.frames)} frames"
            )
        self.durations = [d if d > 0 else DEFAULT_FRAME_DURATION_MS for d in self.durations]

    @classmethod
    def from_image(cls, image: Image.Image, loop: bool = True) -> "AnimatedImageSource":
        """Read every frame of a multi-frame Pillow image (GIF, APNG, WebP)."""
        frames = []
        durations = []
        for frame in ImageSequence.Iterator(image):
            frames.append(frame.convert("RGBA"))
            durations.append(int(frame.info.get("duration", DEFAULT_FRAME_DURATION_MS)))
        return cls(frames=frames, durations=durations, loop=loop)

    @property
    def total_duration(self) -> int:
        return sum(self.durations)

    @property
    def width(self) -> int:
        return self.frames[0].width if self.frames else 0

    @property
    def height(self) -> int:
        return self.frames[0].height if self.frames else 0

    def frame_index_at(self, timestamp: float) -> int:
        """Index of the frame showing at ``timestamp`` milliseconds."""
        if not self.frames:
            raise ValueError("Animation has no frames")

        total = self.total_duration
        if self.loop:
            t = timestamp % total
        else:
            t = min(max(timestamp, 0), total - 1)

        elapsed = 0
        for index, duration in enumerate(self.durations):
            elapsed += duration
            if t < elapsed:
                return index
        return len(self.frames) - 1

    def frame_at(self, timestamp: float) -> Optional[Image.Image]:
        if not self.frames:
            return None
        return self.frames[self.frame_index_at(timestamp)]


@dataclass
class CallbackSource:
    """A video-like stream whose frames come from a provider callable.

    The provider may return None while the stream is still buffering.
    """

    source_width: int
    source_height: int
    provider: Callable[[float], Optional[Image.Image]]

    @property
    def width(self) -> int:
        return self.source_width

    @property
    def height(self) -> int:
        return self.source_height

    def frame_at(self, timestamp: float) -> Optional[Image.Image]:
        return self.provider(timestamp)
