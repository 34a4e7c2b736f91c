"""
Hit resolution - turns a frame's motion into at most one scored hit.

Flow:
1. Cooldown since last hit still running? -> no hit
2. No motion? -> no hit
3. Motion centroid -> grid cell
4. Inside grid and enough motion? -> hit

Missed detections are never caught up later.
"""
from dataclasses import dataclass
from typing import Optional
import numpy as np
import logging

from target_scoring.core import GridArea, HitEvent
from target_scoring.board import GridMapper
from target_scoring.game import ScoringState

logger = logging.getLogger(__name__)


@dataclass
class HitResolverConfig:
    """Configuration for hit resolution."""
    # Minimum time between two accepted hits
    debounce_sec: float = 0.5

    # Motion set must be strictly larger than this (sampled pixels)
    min_motion_pixels: int = 50


class HitResolver:
    """
    Decides whether a frame's motion is a scoring impact.

    The scoring state is only read here (for the cooldown); applying an
    accepted hit is the caller's job, which reports it back via accept().
    """

    def __init__(self, config: Optional[HitResolverConfig] = None):
        """
        Args:
            config: Hit resolution configuration
        """
        self.config = config or HitResolverConfig()

        # Statistics
        self.frames_processed = 0
        self.debounced = 0
        self.empty_motion = 0
        self.out_of_grid = 0
        self.insufficient_motion = 0
        self.hits = 0

        logger.info(
            f"HitResolver initialized: debounce={self.config.debounce_sec}s, "
            f"minMotionPixels={self.config.min_motion_pixels}"
        )

    def resolve(
            self,
            grid_area: GridArea,
            motion_pixels: np.ndarray,
            state: ScoringState,
            now: float
    ) -> Optional[HitEvent]:
        """
        Resolve at most one hit for the current frame.

        Args:
            grid_area: Scoring square for this frame
            motion_pixels: (N, 2) array of motion coordinates
            state: Scoring state (read for the cooldown only)
            now: Current monotonic time in seconds

        Returns:
            HitEvent if a hit was accepted, None otherwise
        """
        self.frames_processed += 1

        # Step 1: Cooldown after the last accepted hit
        if (state.last_hit_time is not None
                and now - state.last_hit_time < self.config.debounce_sec):
            self.debounced += 1
            return None

        # Step 2: Anything moving at all?
        count = len(motion_pixels)
        if count == 0:
            self.empty_motion += 1
            return None

        # Step 3: Motion centroid
        centroid_x = float(motion_pixels[:, 0].mean())
        centroid_y = float(motion_pixels[:, 1].mean())

        # Step 4: Map into the grid
        mapper = GridMapper(grid_area)
        cell = mapper.pixel_to_cell(centroid_x, centroid_y)

        # Step 5: Accept only inside the grid with enough motion
        if cell is None:
            self.out_of_grid += 1
            logger.debug(
                f"Motion centroid ({centroid_x:.0f}, {centroid_y:.0f}) "
                f"outside grid"
            )
            return None

        if count <= self.config.min_motion_pixels:
            self.insufficient_motion += 1
            logger.debug(f"Motion too small for a hit ({count} samples)")
            return None

        # Step 6: Build the hit
        row, col = cell
        hit = HitEvent(
            row=row,
            col=col,
            points=mapper.cell_points(row, col),
            x=centroid_x,
            y=centroid_y,
            motion_pixels=count,
            timestamp=now,
        )
        logger.debug(f"Hit candidate: cell ({row}, {col})")
        return hit

    def accept(self, hit: HitEvent) -> None:
        """Count a hit once the caller has applied it to the scoring state."""
        self.hits += 1
        logger.info(
            f"HIT: cell ({hit.row}, {hit.col}) = {hit.points} points "
            f"at ({hit.x:.1f}, {hit.y:.1f})"
        )

    def reset(self) -> None:
        """Reset statistics."""
        self.frames_processed = 0
        self.debounced = 0
        self.empty_motion = 0
        self.out_of_grid = 0
        self.insufficient_motion = 0
        self.hits = 0

    def get_stats(self) -> dict:
        """Get resolution statistics."""
        return {
            "frames_processed": self.frames_processed,
            "debounced": self.debounced,
            "empty_motion": self.empty_motion,
            "out_of_grid": self.out_of_grid,
            "insufficient_motion": self.insufficient_motion,
            "hits": self.hits,
        }
