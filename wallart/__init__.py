"""Wall art and wall paint compositing for video frames."""

__version__ = "0.1.0"
