"""
Play a video and score impacts on the red target live.

Integrates all modules:
- Threaded video capture
- Target localisation and grid overlay
- Motion-based hit detection
- Scoring and debug visualization

Usage:
    python scripts/play_video.py -v videos/throws.mp4
    python scripts/play_video.py -c 0 --debug
    python scripts/play_video.py -v videos/throws.mp4 --config config/default_config.yaml
"""
import cv2
import sys
import argparse
from pathlib import Path
import numpy as np

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from target_scoring.capture import VideoFrameSource, CaptureConfig
from target_scoring.board import OverlayRenderer
from target_scoring.detection import (
    ScoringPipeline,
    FrameResult,
    apply_overrides,
    build_pipeline_config,
    load_pipeline_settings,
)
from target_scoring.session import ScoringSession
import logging

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

WINDOW_NAME = "Target Scoring"


class VideoScoringDemo:
    """Interactive player: video, grid overlay, and running score."""

    def __init__(
            self,
            session: ScoringSession,
            source,
            renderer: OverlayRenderer
    ):
        """
        Args:
            session: Scoring session (source not yet loaded)
            source: Camera index or video path
            renderer: Overlay renderer for emitted primitives
        """
        self.session = session
        self.source = source
        self.renderer = renderer

        self.hits = []
        self.display: np.ndarray = None

        session.state.subscribe(
            lambda total: logger.info(f"Score: {total}")
        )

    def run(self):
        """Run the player until 'q' is pressed."""
        print("\n" + "=" * 60)
        print("Target Scoring - Video Player")
        print("=" * 60)
        print("Controls:")
        print("  'p' / space: Play/Pause")
        print("  'd': Toggle debug overlay")
        print("  'r': Reload source (resets score)")
        print("  's': Show statistics")
        print("  'q': Quit")
        print("=" * 60 + "\n")

        if not self._load():
            return

        cv2.namedWindow(WINDOW_NAME)
        self.session.play()

        try:
            self.session.run(on_result=self._on_result, on_tick=self._on_tick)
        except KeyboardInterrupt:
            logger.info("Interrupted by user")
        finally:
            self.session.close()
            cv2.destroyAllWindows()
            self._print_summary()

    def _load(self) -> bool:
        self.hits.clear()
        self.display = None
        if not self.session.load_source(self.source):
            logger.error(f"Could not open source: {self.source}")
            return False
        return True

    def _on_result(self, result: FrameResult):
        if result.hit:
            self.hits.append(result.hit)

        frame = self.session.pipeline.previous_frame
        if frame is None:
            return

        display = frame.image
        if result.annotations:
            display = self.renderer.render(display, result.annotations)
        self.display = self._draw_hud(display, result)

    def _on_tick(self):
        if self.display is not None:
            cv2.imshow(WINDOW_NAME, self.display)

        key = cv2.waitKey(1) & 0xFF

        if key == ord('q'):
            self.session.stop()
        elif key in (ord('p'), ord(' ')):
            self.session.toggle_play()
        elif key == ord('d'):
            self.session.toggle_debug()
        elif key == ord('r'):
            if self._load():
                self.session.play()
        elif key == ord('s'):
            self._print_stats()

    def _draw_hud(self, image: np.ndarray, result: FrameResult) -> np.ndarray:
        info = {
            "Score": result.total_score,
            "Hits": len(self.hits),
            "Target": "yes" if result.target else "no",
        }
        if self.session.debug:
            info["Motion"] = result.motion_pixel_count
        if not self.session.playing:
            info["Status"] = "PAUSED"

        return self.renderer.draw_score_panel(image, info, position=(10, 30))

    def _print_stats(self):
        stats = self.session.pipeline.get_stats()

        print("\n" + "=" * 60)
        print("Pipeline Statistics")
        print("=" * 60)
        print(f"Frames processed:      {stats['frames_processed']}")
        print(f"Target found:          {stats['target']['detection_rate_percent']:.1f}%")
        print(f"Motion frames:         {stats['motion']['motion_rate_percent']:.1f}%")
        print(f"Debounced:             {stats['resolver']['debounced']}")
        print(f"Out of grid:           {stats['resolver']['out_of_grid']}")
        print(f"Too little motion:     {stats['resolver']['insufficient_motion']}")
        print(f"Hits:                  {stats['resolver']['hits']}")
        print(f"Scheduler FPS:         {self.session.timer.actual_fps:.1f}")
        print("=" * 60 + "\n")

    def _print_summary(self):
        print("\n" + "=" * 60)
        print("Session Summary")
        print("=" * 60)
        print(f"Total hits:            {len(self.hits)}")
        print(f"Total score:           {self.session.score}")

        if self.hits:
            print(f"Average per hit:       {self.session.score / len(self.hits):.1f}")
            print("\nLast 5 hits:")
            for i, hit in enumerate(self.hits[-5:], 1):
                print(f"  {i}. cell ({hit.row}, {hit.col}) = {hit.points} points")

        print("=" * 60)


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Score target impacts in a video"
    )

    source_group = parser.add_mutually_exclusive_group()
    source_group.add_argument(
        "-c", "--camera",
        type=int,
        default=None,
        help="Camera index"
    )
    source_group.add_argument(
        "-v", "--video",
        type=str,
        default=None,
        help="Video file path"
    )

    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Pipeline config YAML (default: config/default_config.yaml)"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Start with debug overlay enabled"
    )
    parser.add_argument(
        "--loop",
        action="store_true",
        help="Loop video files"
    )
    parser.add_argument(
        "--fps",
        type=float,
        default=60.0,
        help="Scheduler rate (default: 60)"
    )

    return parser.parse_args()


def main():
    """Run the video scoring player."""
    args = parse_args()

    settings = load_pipeline_settings(Path(args.config) if args.config else None)
    pipeline = ScoringPipeline(build_pipeline_config(settings))

    capture_overrides = settings.get("capture") or {}

    def make_source(source):
        config = CaptureConfig(source=source)
        apply_overrides(config, capture_overrides)
        config.source = source
        config.loop_video = config.loop_video or args.loop
        return VideoFrameSource(config)

    if args.video:
        source = args.video
    elif args.camera is not None:
        source = args.camera
    else:
        source = 0  # Default camera

    session = ScoringSession(make_source, pipeline=pipeline, target_fps=args.fps)
    if args.debug:
        session.toggle_debug()

    demo = VideoScoringDemo(session, source, OverlayRenderer())
    demo.run()


if __name__ == "__main__":
    main()
