"""Batch conversion of .mp4 videos into vertical shorts using FFmpeg."""

__version__ = "0.1.0"

__all__ = ["__version__"]