"""
Session control and frame scheduling.

A ScoringSession owns one frame source and one ScoringPipeline and exposes
the playback commands (load, play, pause, toggle debug). run() is the
scheduler: it pulls a frame, runs one pipeline cycle, paces itself with a
FrameTimer and checks for cancellation before scheduling the next cycle.

Frame sources are duck-typed: start() -> bool, stop(), read(timeout) ->
Optional[Frame]. An optional `finished` attribute signals end of stream.
"""
import threading
import logging
from typing import Any, Callable, Optional

from target_scoring.core import FrameTimer
from target_scoring.detection import ScoringPipeline, FrameResult
from target_scoring.game import ScoringState

logger = logging.getLogger(__name__)


class ScoringSession:
    """
    Playback session around a scoring pipeline.

    Usage:
        session = ScoringSession(
            lambda path: VideoFrameSource(CaptureConfig(source=path))
        )
        session.load_source("videos/throws.mp4")
        session.play()
        session.run(on_result=show)
    """

    def __init__(
            self,
            source_factory: Callable[[Any], Any],
            pipeline: Optional[ScoringPipeline] = None,
            target_fps: float = 60.0,
            read_timeout: float = 0.1,
            timer: Optional[FrameTimer] = None
    ):
        """
        Args:
            source_factory: Builds a frame source from a camera index or path
            pipeline: Scoring pipeline (default: ScoringPipeline())
            target_fps: Scheduler rate (0 = as fast as frames arrive)
            read_timeout: Max seconds to wait for a frame per cycle
            timer: Frame timer (default: FrameTimer(target_fps))
        """
        self._source_factory = source_factory
        self.pipeline = pipeline or ScoringPipeline()
        self.read_timeout = read_timeout
        self.timer = timer or FrameTimer(target_fps)

        self._source = None
        self._stop_event = threading.Event()

        self.playing = False
        self.debug = False
        self.last_result: Optional[FrameResult] = None

    @property
    def state(self) -> ScoringState:
        return self.pipeline.state

    @property
    def score(self) -> int:
        """Current total score."""
        return self.pipeline.score

    @property
    def has_source(self) -> bool:
        return self._source is not None

    def load_source(self, source: Any) -> bool:
        """
        Replace the frame source and start a fresh session.

        Score and previous-frame buffer are reset; playback is paused.

        Returns:
            True if the new source started
        """
        self._release_source()
        self.playing = False
        self._stop_event.clear()
        self.pipeline.reset()
        self.last_result = None

        new_source = self._source_factory(source)
        if not new_source.start():
            logger.error(f"Failed to start source: {source}")
            return False

        self._source = new_source
        logger.info(f"Source loaded: {source}")
        return True

    def play(self) -> None:
        if self._source is None:
            logger.warning("Cannot play: no source loaded")
            return
        self._stop_event.clear()
        self.playing = True
        self.timer.reset()
        logger.info("Playing")

    def pause(self) -> None:
        self.playing = False
        logger.info("Paused")

    def toggle_play(self) -> None:
        if self.playing:
            self.pause()
        else:
            self.play()

    def toggle_debug(self) -> bool:
        """Flip diagnostic annotations. Returns the new debug flag."""
        self.debug = not self.debug
        logger.info(f"Debug: {'ON' if self.debug else 'OFF'}")
        return self.debug

    def stop(self) -> None:
        """Cancel the scheduler loop after the current cycle (play() resumes)."""
        self._stop_event.set()
        self.playing = False

    def close(self) -> None:
        """Stop scheduling and release the frame source."""
        self.stop()
        self._release_source()

    def run_cycle(self, timeout: Optional[float] = None) -> Optional[FrameResult]:
        """
        Pull one frame and process it.

        A frame that arrives after playback was paused or stopped during
        the wait is discarded, leaving pipeline state untouched.

        Returns:
            FrameResult, or None if no frame was processed
        """
        source = self._source
        if not self.playing or source is None:
            return None

        frame = source.read(self.read_timeout if timeout is None else timeout)

        if frame is None:
            if getattr(source, "finished", False):
                logger.info("Source finished")
                self.playing = False
            return None

        if not self.playing or self._stop_event.is_set() or source is not self._source:
            logger.debug(f"Dropping frame {frame.frame_id}: playback interrupted")
            return None

        result = self.pipeline.process_frame(frame, debug=self.debug)
        self.last_result = result
        return result

    def run(
            self,
            on_result: Optional[Callable[[FrameResult], None]] = None,
            max_cycles: Optional[int] = None,
            on_tick: Optional[Callable[[], None]] = None
    ) -> int:
        """
        Scheduler loop. Returns when stop() is called or max_cycles is hit.

        A stop() issued before run() starts is honoured; play() or
        load_source() re-arm the session.

        Args:
            on_result: Called with every FrameResult
            max_cycles: Optional cycle limit (paused cycles count too)
            on_tick: Called once per cycle, also while paused (UI polling)

        Returns:
            Number of cycles run
        """
        cycles = 0

        while not self._stop_event.is_set():
            if max_cycles is not None and cycles >= max_cycles:
                break

            result = self.run_cycle()
            if result is not None and on_result is not None:
                on_result(result)
            if on_tick is not None:
                on_tick()

            cycles += 1
            self.timer.wait()

        return cycles

    def _release_source(self) -> None:
        if self._source is not None:
            self._source.stop()
            self._source = None
