"""
Tests for session control and the scheduler loop.
"""
import itertools
import numpy as np
import cv2

from target_scoring.core import Frame, FrameTimer
from target_scoring.detection import ScoringPipeline
from target_scoring.session import ScoringSession


def scene(with_impact: bool = False) -> np.ndarray:
    image = np.zeros((240, 320, 3), dtype=np.uint8)
    cv2.circle(image, (100, 100), 40, (0, 0, 255), -1)
    if with_impact:
        image[162:178, 162:178] = 255
    return image


def make_frames(*impacts: bool):
    return [
        Frame(image=scene(impact), timestamp=float(i), frame_id=i)
        for i, impact in enumerate(impacts)
    ]


class FakeSource:
    """In-memory frame source."""

    def __init__(self, frames, start_ok: bool = True):
        self.frames = list(frames)
        self.start_ok = start_ok
        self.started = False
        self.stopped = False
        self.on_read = None

    def start(self) -> bool:
        self.started = True
        return self.start_ok

    def stop(self) -> None:
        self.stopped = True

    def read(self, timeout: float = 1.0):
        if self.on_read is not None:
            self.on_read()
        return self.frames.pop(0) if self.frames else None

    @property
    def finished(self) -> bool:
        return not self.frames


def make_session(sources):
    """Session whose factory hands out the given sources by name."""
    clock = itertools.count(start=0.0, step=1.0)
    pipeline = ScoringPipeline(clock=lambda: next(clock))
    timer = FrameTimer(target_fps=0)
    return ScoringSession(lambda name: sources[name], pipeline=pipeline, timer=timer)


def test_load_source_starts_paused():
    """Loading a source does not start playback."""
    source = FakeSource(make_frames(False, True))
    session = make_session({"a": source})

    assert session.load_source("a")
    assert source.started
    assert not session.playing
    assert session.run_cycle() is None
    assert len(source.frames) == 2


def test_play_processes_frames():
    """Playing pulls one frame per cycle."""
    session = make_session({"a": FakeSource(make_frames(False, True))})
    session.load_source("a")
    session.play()

    first = session.run_cycle()
    second = session.run_cycle()

    assert first.hit is None
    assert second.hit.points == 9
    assert session.score == 9
    assert session.last_result is second


def test_play_without_source_is_ignored():
    """Nothing to play before a source is loaded."""
    session = make_session({})

    session.play()

    assert not session.playing
    assert session.run_cycle() is None


def test_load_new_source_resets_score():
    """Loading a new source resets score and stops the old source."""
    old = FakeSource(make_frames(False, True))
    new = FakeSource(make_frames(True))
    session = make_session({"old": old, "new": new})
    seen = []
    session.state.subscribe(seen.append)

    session.load_source("old")
    session.play()
    session.run_cycle()
    session.run_cycle()
    assert session.score == 9

    session.load_source("new")

    assert old.stopped
    assert session.score == 0
    assert seen[-1] == 0
    assert session.pipeline.previous_frame is None

    # First frame of the new source is never scored
    session.play()
    assert session.run_cycle().hit is None


def test_failed_source_start():
    """A source that fails to open leaves the session without source."""
    session = make_session({"bad": FakeSource([], start_ok=False)})

    assert not session.load_source("bad")
    assert not session.has_source


def test_pause_during_wait_discards_frame():
    """Frame arriving after pause does not touch pipeline state."""
    source = FakeSource(make_frames(False))
    session = make_session({"a": source})
    session.load_source("a")
    session.play()
    source.on_read = session.pause

    assert session.run_cycle() is None
    assert session.pipeline.previous_frame is None
    assert session.pipeline.frames_processed == 0


def test_resume_uses_last_committed_frame():
    """After pause/play the next cycle diffs against the last committed frame."""
    session = make_session({"a": FakeSource(make_frames(False, True))})
    session.load_source("a")
    session.play()
    session.run_cycle()

    session.pause()
    assert session.run_cycle() is None
    session.play()

    assert session.run_cycle().hit.points == 9


def test_toggle_debug_only_affects_annotations():
    """Debug switches primitives on, scoring stays the same."""
    session = make_session({"a": FakeSource(make_frames(False, True))})
    session.load_source("a")
    session.play()

    assert session.toggle_debug() is True
    session.run_cycle()
    result = session.run_cycle()

    assert result.annotations
    assert result.total_score == 9

    assert session.toggle_debug() is False


def test_run_loop_with_cycle_limit():
    """Scheduler runs the requested number of cycles."""
    session = make_session({"a": FakeSource(make_frames(False, True, False))})
    session.load_source("a")
    session.play()
    results = []
    ticks = []

    cycles = session.run(on_result=results.append, max_cycles=2, on_tick=lambda: ticks.append(1))

    assert cycles == 2
    assert len(results) == 2
    assert len(ticks) == 2
    assert session.timer.tick_count == 2


def test_run_loop_stops_on_cancel():
    """stop() ends the loop before the next cycle is scheduled."""
    session = make_session({"a": FakeSource(make_frames(False, True, False, True))})
    session.load_source("a")
    session.play()
    results = []

    def on_result(result):
        results.append(result)
        if result.hit:
            session.stop()

    session.run(on_result=on_result, max_cycles=100)

    assert len(results) == 2
    assert not session.playing
    assert session.score == 9


def test_play_after_stop_resumes_processing():
    """A stopped session picks up again from the last committed frame."""
    source = FakeSource(make_frames(False, True, False))
    session = make_session({"a": source})
    session.load_source("a")
    session.play()
    session.run_cycle()

    session.stop()
    session.play()
    result = session.run_cycle()

    assert result is not None
    assert result.hit.points == 9
    assert len(source.frames) == 1


def test_stop_before_run_is_honoured():
    """A stop() that lands before the loop starts is not lost."""
    session = make_session({"a": FakeSource(make_frames(False, True))})
    session.load_source("a")
    session.play()

    session.stop()

    assert session.run(max_cycles=5) == 0

    session.play()
    assert session.run(max_cycles=1) == 1


def test_finished_source_pauses_playback():
    """End of stream switches playback off."""
    session = make_session({"a": FakeSource(make_frames(False))})
    session.load_source("a")
    session.play()

    session.run_cycle()
    assert session.run_cycle() is None
    assert not session.playing


def test_close_releases_source():
    """close() stops the frame source."""
    source = FakeSource(make_frames(False))
    session = make_session({"a": source})
    session.load_source("a")

    session.close()

    assert source.stopped
    assert not session.has_source
