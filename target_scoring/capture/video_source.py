"""
Threaded video frame source with bounded queue and graceful frame dropping.
Supports both video files and live cameras.
"""
import cv2
import threading
import queue
import time
import logging
from typing import Optional, Tuple, Union
from pathlib import Path
from dataclasses import dataclass

from target_scoring.core import Frame

logger = logging.getLogger(__name__)


@dataclass
class CaptureConfig:
    """Configuration for the frame source."""
    source: Union[int, str, Path] = 0  # Camera index or video file path

    # Every frame is resized to this canvas, fixed for the session
    width: int = 1280
    height: int = 720

    loop_video: bool = False  # Restart video files when they end
    queue_size: int = 3  # Smaller = lower latency

    def __post_init__(self):
        """Convert Path to string."""
        if isinstance(self.source, Path):
            self.source = str(self.source)

    def is_video_file(self) -> bool:
        """Check if source is a video file (vs camera)."""
        return isinstance(self.source, str) and Path(self.source).exists()


class VideoFrameSource:
    """
    Pull-based frame source backed by a capture thread.

    Decoding runs in a daemon thread and fills a small queue; read() pulls
    one frame per pipeline cycle. When processing falls behind, the oldest
    queued frame is dropped.

    Example:
        with VideoFrameSource(CaptureConfig(source="videos/throws.mp4")) as src:
            frame = src.read(timeout=1.0)
    """

    def __init__(self, config: Optional[CaptureConfig] = None):
        """
        Args:
            config: Capture configuration (default: CaptureConfig())
        """
        self.config = config or CaptureConfig()

        self._frame_queue: queue.Queue = queue.Queue(maxsize=self.config.queue_size)
        self._capture_thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._capture: Optional[cv2.VideoCapture] = None

        self._is_video_file = self.config.is_video_file()
        self._is_running = False
        self._finished = False

        # Statistics
        self._frames_read = 0
        self._dropped_frames = 0
        self._total_frames = 0

    def start(self) -> bool:
        """
        Open the source and start the capture thread.

        Returns:
            True if started successfully, False otherwise
        """
        if self._is_running:
            logger.warning("Capture already running")
            return True

        if self._is_video_file:
            self._capture = cv2.VideoCapture(str(self.config.source))
            source_name = Path(self.config.source).name
        else:
            self._capture = cv2.VideoCapture(self.config.source)
            source_name = f"Camera {self.config.source}"

        if not self._capture.isOpened():
            logger.error(f"Failed to open {source_name}")
            self._capture.release()
            self._capture = None
            return False

        if self._is_video_file:
            self._total_frames = int(self._capture.get(cv2.CAP_PROP_FRAME_COUNT))

        logger.info(
            f"Opened {source_name}: "
            f"{int(self._capture.get(cv2.CAP_PROP_FRAME_WIDTH))}x"
            f"{int(self._capture.get(cv2.CAP_PROP_FRAME_HEIGHT))} "
            f"@ {self._capture.get(cv2.CAP_PROP_FPS):.0f} FPS, "
            f"resized to {self.config.width}x{self.config.height}"
        )

        self._stop_event.clear()
        self._finished = False
        self._capture_thread = threading.Thread(
            target=self._capture_loop,
            daemon=True,
            name="VideoCapture" if self._is_video_file else "CameraCapture"
        )
        self._capture_thread.start()
        self._is_running = True
        return True

    def stop(self) -> None:
        """Stop capture thread and release resources."""
        if not self._is_running:
            return

        self._stop_event.set()
        if self._capture_thread:
            self._capture_thread.join(timeout=2.0)

        if self._capture:
            self._capture.release()
            self._capture = None

        while not self._frame_queue.empty():
            try:
                self._frame_queue.get_nowait()
            except queue.Empty:
                break

        self._is_running = False
        logger.info(
            f"Capture stopped: {self._frames_read} frames read, "
            f"{self._dropped_frames} dropped"
        )

    def read(self, timeout: float = 1.0) -> Optional[Frame]:
        """
        Pull the next frame.

        Args:
            timeout: Maximum wait time in seconds

        Returns:
            Frame, or None on timeout / end of stream
        """
        try:
            return self._frame_queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def _capture_loop(self) -> None:
        """Main capture loop (runs in separate thread)."""
        frame_id = 0
        fps = self._capture.get(cv2.CAP_PROP_FPS) or None

        while not self._stop_event.is_set():
            ret, image = self._capture.read()

            if not ret or image is None:
                if self._is_video_file and self.config.loop_video:
                    logger.debug("Video ended, looping...")
                    self._capture.set(cv2.CAP_PROP_POS_FRAMES, 0)
                    continue
                if self._is_video_file:
                    logger.info("Video ended")
                    self._finished = True
                    break
                time.sleep(0.01)  # Camera hiccup, retry
                continue

            if image.shape[1] != self.config.width or image.shape[0] != self.config.height:
                image = cv2.resize(image, (self.config.width, self.config.height))

            frame = Frame(
                image=image,
                timestamp=time.monotonic(),
                frame_id=frame_id,
                fps=fps,
                color_order="bgr",
            )
            frame_id += 1
            self._frames_read += 1

            self._enqueue(frame)

    def _enqueue(self, frame: Frame) -> None:
        """Queue a frame, dropping the oldest one when full."""
        while not self._stop_event.is_set():
            try:
                self._frame_queue.put_nowait(frame)
                return
            except queue.Full:
                try:
                    self._frame_queue.get_nowait()
                    self._dropped_frames += 1
                    if self._dropped_frames % 10 == 0:
                        logger.warning(
                            f"Frame dropping active ({self._dropped_frames} total). "
                            "Processing too slow!"
                        )
                except queue.Empty:
                    pass

    @property
    def is_running(self) -> bool:
        return self._is_running

    @property
    def finished(self) -> bool:
        """True once a non-looping video has been fully read and drained."""
        return self._finished and self._frame_queue.empty()

    @property
    def dropped_frames(self) -> int:
        return self._dropped_frames

    @property
    def size(self) -> Tuple[int, int]:
        """Canvas size (width, height) of every delivered frame."""
        return (self.config.width, self.config.height)

    def get_stats(self) -> dict:
        return {
            "frames_read": self._frames_read,
            "dropped_frames": self._dropped_frames,
            "total_frames": self._total_frames,
            "is_video": self._is_video_file,
        }

    def __enter__(self):
        """Context manager support."""
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager cleanup."""
        self.stop()
