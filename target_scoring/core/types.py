"""
Core data types for the target scoring pipeline.
Defines contracts between modules to ensure stable interfaces.
"""
from dataclasses import dataclass
from typing import Optional, Tuple
import numpy as np
from numpy.typing import NDArray


# Index of (red, green, blue) inside the last image axis
CHANNEL_INDICES = {
    "bgr": (2, 1, 0),
    "bgra": (2, 1, 0),
    "rgb": (0, 1, 2),
    "rgba": (0, 1, 2),
}


@dataclass
class Frame:
    """
    Represents a single captured frame with metadata.
    """
    image: NDArray[np.uint8]  # Raw image data (H, W, C) or (H, W)
    timestamp: float  # Capture time in seconds
    frame_id: int  # Sequential frame counter
    fps: Optional[float] = None  # Frames per second at capture time
    color_order: str = "bgr"  # OpenCV sources deliver BGR

    def __post_init__(self):
        self.color_order = self.color_order.lower()
        if self.color_order not in CHANNEL_INDICES:
            raise ValueError(f"Unsupported color order: {self.color_order}")

    @property
    def shape(self) -> Tuple[int, ...]:
        return self.image.shape

    @property
    def width(self) -> int:
        return self.image.shape[1]

    @property
    def height(self) -> int:
        return self.image.shape[0]

    @property
    def is_grayscale(self) -> bool:
        return len(self.image.shape) == 2

    def color_planes(
            self,
            stride: int = 1
    ) -> Tuple[NDArray[np.int16], NDArray[np.int16], NDArray[np.int16]]:
        """
        Return (red, green, blue) planes, optionally subsampled.

        Alpha is ignored. Grayscale images yield the same plane three times.
        Planes are widened to int16 so channel differences cannot wrap.
        """
        sampled = self.image[::stride, ::stride].astype(np.int16)
        if sampled.ndim == 2:
            return sampled, sampled, sampled

        r_idx, g_idx, b_idx = CHANNEL_INDICES[self.color_order]
        return sampled[..., r_idx], sampled[..., g_idx], sampled[..., b_idx]


@dataclass(frozen=True)
class Target:
    """
    Circular target located in a single frame.
    Radius is an area-equivalent estimate from the classified sample count.
    """
    center_x: float
    center_y: float
    radius: float
    pixel_count: int = 0  # Classified samples the estimate is based on

    def __post_init__(self):
        if self.radius < 0:
            raise ValueError("Target radius must be non-negative")

    @property
    def center(self) -> Tuple[float, float]:
        return (self.center_x, self.center_y)


@dataclass(frozen=True)
class GridArea:
    """
    Axis-aligned square scoring area, split into a 3x3 grid.
    """
    min_x: float
    max_x: float
    min_y: float
    max_y: float

    def __post_init__(self):
        if self.max_x < self.min_x or self.max_y < self.min_y:
            raise ValueError("Grid area bounds are inverted")

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> Tuple[float, float]:
        return ((self.min_x + self.max_x) / 2, (self.min_y + self.max_y) / 2)

    @property
    def cell_width(self) -> float:
        return self.width / 3

    @property
    def cell_height(self) -> float:
        return self.height / 3


@dataclass(frozen=True)
class HitEvent:
    """
    Accepted scoring decision for one frame.
    """
    row: int  # Grid row (0 = top)
    col: int  # Grid column (0 = left)
    points: int  # Value from the point table

    # Motion centroid in image coordinates
    x: float
    y: float

    motion_pixels: int = 0  # Size of the motion set behind this hit
    timestamp: Optional[float] = None

    @property
    def cell(self) -> Tuple[int, int]:
        return (self.row, self.col)


@dataclass(frozen=True)
class LinePrimitive:
    """Line segment annotation."""
    x1: float
    y1: float
    x2: float
    y2: float
    color: str


@dataclass(frozen=True)
class CirclePrimitive:
    """Circle annotation (ring or filled disc)."""
    x: float
    y: float
    radius: float
    color: str
    filled: bool = False


@dataclass(frozen=True)
class TextPrimitive:
    """Text label annotation, anchored at its baseline origin."""
    x: float
    y: float
    text: str
    color: str
