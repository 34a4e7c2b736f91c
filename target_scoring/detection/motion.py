"""
Motion detection by frame differencing.
Compares each frame against the one before it on a sparse sample grid.
"""
import numpy as np
from typing import Optional
from dataclasses import dataclass
import logging

from target_scoring.core import Frame

logger = logging.getLogger(__name__)


@dataclass
class MotionConfig:
    """
    Configuration for motion detection.

    Summed absolute channel difference, not Euclidean distance:
    |dR| + |dG| + |dB| > diff_threshold marks a sample as moving.
    """
    sample_stride: int = 2  # Same stride as target localisation
    diff_threshold: int = 100


def empty_motion() -> np.ndarray:
    """Empty motion pixel set."""
    return np.empty((0, 2), dtype=np.int32)


class MotionDetector:
    """
    Frame-difference motion detector.

    Produces the set of sampled coordinates whose colour changed beyond the
    threshold since the previous frame. The set is rebuilt from scratch
    every call; the previous frame is owned by the caller.
    """

    def __init__(self, config: Optional[MotionConfig] = None):
        """
        Initialize motion detector.

        Args:
            config: Motion detection configuration
        """
        self.config = config or MotionConfig()

        # Statistics
        self.frame_count = 0
        self.motion_detected_count = 0
        self.mismatched_frames = 0

        logger.info(
            f"MotionDetector initialized: "
            f"stride={self.config.sample_stride}, "
            f"diffThreshold={self.config.diff_threshold}"
        )

    def detect(self, current: Frame, previous: Optional[Frame]) -> np.ndarray:
        """
        Detect motion between two consecutive frames.

        Args:
            current: Frame being processed
            previous: Frame before it (None on the first frame of a session)

        Returns:
            (N, 2) int32 array of (x, y) motion coordinates
        """
        self.frame_count += 1

        if previous is None:
            return empty_motion()

        if current.shape != previous.shape:
            # Malformed pair: behave as if there were no previous frame
            self.mismatched_frames += 1
            logger.warning(
                f"Frame shape changed {previous.shape} -> {current.shape}, "
                f"skipping motion detection"
            )
            return empty_motion()

        stride = self.config.sample_stride
        cur_r, cur_g, cur_b = current.color_planes(stride)
        prev_r, prev_g, prev_b = previous.color_planes(stride)

        diff = (
            np.abs(cur_r - prev_r)
            + np.abs(cur_g - prev_g)
            + np.abs(cur_b - prev_b)
        )

        ys, xs = np.nonzero(diff > self.config.diff_threshold)
        pixels = np.column_stack((xs, ys)).astype(np.int32) * stride

        if len(pixels):
            self.motion_detected_count += 1
            logger.debug(f"Motion detected: {len(pixels)} samples")

        return pixels

    def reset(self) -> None:
        """Reset statistics."""
        self.frame_count = 0
        self.motion_detected_count = 0
        self.mismatched_frames = 0
        logger.info("Motion statistics reset")

    @property
    def motion_rate(self) -> float:
        """Get percentage of frames with motion detected."""
        if self.frame_count == 0:
            return 0.0
        return (self.motion_detected_count / self.frame_count) * 100.0

    def get_stats(self) -> dict:
        """Get detection statistics."""
        return {
            "frames_processed": self.frame_count,
            "motion_detected": self.motion_detected_count,
            "motion_rate_percent": self.motion_rate,
            "mismatched_frames": self.mismatched_frames,
        }
