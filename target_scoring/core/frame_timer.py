"""
Frame pacing for the scheduler loop.
"""
import time
from typing import Callable
import logging

logger = logging.getLogger(__name__)


class FrameTimer:
    """
    Paces pipeline cycles to a target frame rate.

    Plays the role of the host's "request next frame" primitive: the
    scheduler calls wait() once per cycle and the timer sleeps off whatever
    is left of the frame budget.

    Usage:
        timer = FrameTimer(target_fps=60)

        while running:
            run_cycle()
            timer.wait()
    """

    def __init__(
            self,
            target_fps: float = 60.0,
            clock: Callable[[], float] = time.monotonic,
            sleep: Callable[[float], None] = time.sleep
    ):
        """
        Args:
            target_fps: Target cycles per second (0 = unlimited)
            clock: Monotonic clock in seconds
            sleep: Sleep function (injectable for tests)
        """
        self._clock = clock
        self._sleep = sleep
        self.set_target_fps(target_fps)

        self.last_tick = self._clock()
        self.start_time = self.last_tick
        self.tick_count = 0
        self.actual_fps = 0.0

    def set_target_fps(self, target_fps: float) -> None:
        """Update target rate (0 = unlimited)."""
        self.target_fps = target_fps
        self.frame_time = 1.0 / target_fps if target_fps > 0 else 0.0
        logger.debug(f"Frame timer target: {target_fps} FPS")

    def wait(self) -> float:
        """
        Sleep until the current frame budget is used up.

        Returns:
            Seconds elapsed since the previous tick
        """
        now = self._clock()
        elapsed = now - self.last_tick

        remaining = self.frame_time - elapsed
        if remaining > 0:
            self._sleep(remaining)
            now = self._clock()
            elapsed = now - self.last_tick

        self.last_tick = now
        self.tick_count += 1

        running_for = now - self.start_time
        if running_for > 0:
            self.actual_fps = self.tick_count / running_for

        return elapsed

    def reset(self) -> None:
        """Restart statistics from now."""
        self.last_tick = self._clock()
        self.start_time = self.last_tick
        self.tick_count = 0
        self.actual_fps = 0.0

    def get_stats(self) -> dict:
        return {
            "target_fps": self.target_fps,
            "actual_fps": self.actual_fps,
            "tick_count": self.tick_count,
        }
