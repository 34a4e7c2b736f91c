"""
Per-frame analysis and scoring pipeline.

One cycle: locate target -> detect motion -> build grid -> resolve hit ->
commit (score + previous frame) -> overlay annotations (debug adds diagnostics).
"""
from dataclasses import dataclass, field
from typing import Callable, Optional, Tuple
import threading
import time
import logging

from target_scoring.core import Frame, Target, GridArea, HitEvent
from target_scoring.board import AnnotationEmitter, build_grid_area
from target_scoring.board.annotations import Primitive
from target_scoring.board.grid import DEFAULT_EXTENT_FACTOR
from target_scoring.game import ScoringState
from .target_locator import TargetLocator, TargetConfig
from .motion import MotionDetector, MotionConfig
from .hit_resolver import HitResolver, HitResolverConfig

logger = logging.getLogger(__name__)


@dataclass
class PipelineConfig:
    """Configuration for the full scoring pipeline."""
    target_config: TargetConfig = field(default_factory=TargetConfig)
    motion_config: MotionConfig = field(default_factory=MotionConfig)
    resolver_config: HitResolverConfig = field(default_factory=HitResolverConfig)

    # Grid half-extent in target radii
    grid_extent_factor: float = DEFAULT_EXTENT_FACTOR


@dataclass
class FrameResult:
    """Outcome of one pipeline cycle (a snapshot, safe to hand out)."""
    frame_id: int
    target: Optional[Target]
    grid_area: Optional[GridArea]
    motion_pixel_count: int
    hit: Optional[HitEvent]
    total_score: int
    annotations: Tuple[Primitive, ...] = ()


class ScoringPipeline:
    """
    Frame-synchronous scoring pipeline.

    Owns the previous-frame buffer and the scoring state. Both are only
    changed in the commit step at the end of a cycle (or by reset()), under
    one lock, so a concurrent reader never sees half a cycle.

    Example:
        pipeline = ScoringPipeline()
        for frame in frames:
            result = pipeline.process_frame(frame, debug=True)
            if result.hit:
                print(f"+{result.hit.points} -> {result.total_score}")
    """

    def __init__(
            self,
            config: Optional[PipelineConfig] = None,
            state: Optional[ScoringState] = None,
            clock: Callable[[], float] = time.monotonic
    ):
        """
        Args:
            config: Pipeline configuration
            state: Scoring state to update (default: new ScoringState)
            clock: Monotonic clock in seconds, used for the hit cooldown
        """
        self.config = config or PipelineConfig()
        self.state = state if state is not None else ScoringState()
        self._clock = clock

        self.locator = TargetLocator(self.config.target_config)
        self.motion_detector = MotionDetector(self.config.motion_config)
        self.resolver = HitResolver(self.config.resolver_config)
        self.emitter = AnnotationEmitter()

        self._previous_frame: Optional[Frame] = None
        self._lock = threading.RLock()
        self._generation = 0  # Bumped on reset; stale cycles don't commit

        self.frames_processed = 0

        logger.info("ScoringPipeline initialized")

    @property
    def previous_frame(self) -> Optional[Frame]:
        """Last committed frame (None at session start)."""
        return self._previous_frame

    @property
    def score(self) -> int:
        """Current total score."""
        return self.state.total_score

    def process_frame(
            self,
            frame: Frame,
            debug: bool = False,
            now: Optional[float] = None
    ) -> FrameResult:
        """
        Run one full cycle on a frame.

        Args:
            frame: Current frame
            debug: Include diagnostic annotation primitives
            now: Cycle time in seconds (default: pipeline clock)

        Returns:
            FrameResult for this frame
        """
        if now is None:
            now = self._clock()

        with self._lock:
            previous = self._previous_frame
            generation = self._generation

        target = self.locator.locate(frame)
        motion = self.motion_detector.detect(frame, previous)

        grid_area = None
        hit = None
        if target is not None:
            grid_area = build_grid_area(target, self.config.grid_extent_factor)
            hit = self.resolver.resolve(grid_area, motion, self.state, now)

        with self._lock:
            if generation != self._generation:
                # Session was reset mid-cycle; drop this frame's outcome
                logger.debug(f"Discarding frame {frame.frame_id} after reset")
                hit = None
            else:
                if hit is not None:
                    self.state.record_hit(now)
                    self.state.add_points(hit.points)
                    self.resolver.accept(hit)
                self._previous_frame = frame
            total_score = self.state.total_score

        self.frames_processed += 1

        annotations = self.emitter.emit(target, grid_area, motion, hit, debug=debug)

        return FrameResult(
            frame_id=frame.frame_id,
            target=target,
            grid_area=grid_area,
            motion_pixel_count=len(motion),
            hit=hit,
            total_score=total_score,
            annotations=annotations,
        )

    def reset(self) -> None:
        """Start a new session: clear previous frame and score."""
        with self._lock:
            self._generation += 1
            self._previous_frame = None
            self.state.reset()
            self.resolver.reset()

        self.locator.reset()
        self.motion_detector.reset()
        self.frames_processed = 0
        logger.info("Pipeline reset")

    def get_stats(self) -> dict:
        """Combined statistics of all stages."""
        return {
            "frames_processed": self.frames_processed,
            "total_score": self.state.total_score,
            "hit_count": self.state.hit_count,
            "target": self.locator.get_stats(),
            "motion": self.motion_detector.get_stats(),
            "resolver": self.resolver.get_stats(),
        }
