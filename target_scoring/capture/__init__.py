"""
Capture module - threaded video frame source.
"""
from .video_source import VideoFrameSource, CaptureConfig

__all__ = [
    "VideoFrameSource",
    "CaptureConfig",
]
