"""
Red target localisation by color segmentation.
"""
import math
from dataclasses import dataclass
from typing import Optional
import numpy as np
import logging

from target_scoring.core import Frame, Target

logger = logging.getLogger(__name__)


@dataclass
class TargetConfig:
    """
    Color rule and sampling for target localisation.

    Tuned for a saturated red marker. The count threshold applies to
    sampled pixels, so it goes together with sample_stride.
    """
    sample_stride: int = 2  # Every 2nd pixel in each axis

    # A pixel is target-colored if R > red_min, G < green_max, B < blue_max
    red_min: int = 150
    green_max: int = 100
    blue_max: int = 100

    # Fewer classified samples than this (inclusive) = no target
    min_pixel_count: int = 100


class TargetLocator:
    """
    Finds the target's centre and area-equivalent radius in a frame.

    The centre is the mean of classified sample coordinates and the radius
    is sqrt(count / pi). Results depend only on the frame; counters are
    kept for statistics.
    """

    def __init__(self, config: Optional[TargetConfig] = None):
        """
        Args:
            config: Target localisation configuration
        """
        self.config = config or TargetConfig()

        # Statistics
        self.frame_count = 0
        self.target_found_count = 0

        logger.info(
            f"TargetLocator initialized: stride={self.config.sample_stride}, "
            f"rule=R>{self.config.red_min} G<{self.config.green_max} "
            f"B<{self.config.blue_max}, minPixels={self.config.min_pixel_count}"
        )

    def classify(self, frame: Frame) -> np.ndarray:
        """
        Classify sampled pixels.

        Returns:
            (N, 2) array of full-resolution (x, y) coordinates of
            target-colored samples
        """
        stride = self.config.sample_stride
        red, green, blue = frame.color_planes(stride)

        mask = (
            (red > self.config.red_min)
            & (green < self.config.green_max)
            & (blue < self.config.blue_max)
        )
        ys, xs = np.nonzero(mask)
        return np.column_stack((xs, ys)).astype(np.int32) * stride

    def locate(self, frame: Frame) -> Optional[Target]:
        """
        Locate the target in a frame.

        Args:
            frame: Input frame

        Returns:
            Target, or None if too few target-colored samples were found
        """
        self.frame_count += 1

        pixels = self.classify(frame)
        count = len(pixels)

        if count <= self.config.min_pixel_count:
            logger.debug(f"No target: {count} target-colored samples")
            return None

        center_x = float(pixels[:, 0].mean())
        center_y = float(pixels[:, 1].mean())
        radius = math.sqrt(count / math.pi)

        self.target_found_count += 1
        return Target(
            center_x=center_x,
            center_y=center_y,
            radius=radius,
            pixel_count=count,
        )

    @property
    def detection_rate(self) -> float:
        """Percentage of frames where a target was found."""
        if self.frame_count == 0:
            return 0.0
        return (self.target_found_count / self.frame_count) * 100.0

    def reset(self) -> None:
        """Reset statistics."""
        self.frame_count = 0
        self.target_found_count = 0

    def get_stats(self) -> dict:
        return {
            "frames_processed": self.frame_count,
            "target_found": self.target_found_count,
            "detection_rate_percent": self.detection_rate,
        }
