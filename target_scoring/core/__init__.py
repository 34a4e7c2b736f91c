"""
Core module - shared data types, YAML loading, and frame pacing.
"""
from .types import (
    Frame,
    Target,
    GridArea,
    HitEvent,
    LinePrimitive,
    CirclePrimitive,
    TextPrimitive,
)
from .io_utils import load_yaml
from .frame_timer import FrameTimer

__all__ = [
    # Types
    "Frame",
    "Target",
    "GridArea",
    "HitEvent",
    "LinePrimitive",
    "CirclePrimitive",
    "TextPrimitive",
    # I/O
    "load_yaml",
    # Scheduling
    "FrameTimer",
]
