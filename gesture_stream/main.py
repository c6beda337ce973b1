"""
Main application: camera loop that prints debounced gestures to stdout.
"""
import argparse
import logging
import sys
import time
from typing import List, Optional

import cv2
import numpy as np

from .config import Cfg, load_config
from .gestures import GesturePipeline
from .sinks import StdoutSink
from .types import FrameResult, GestureSinkProto

logger = logging.getLogger(__name__)


def draw_overlay(frame: np.ndarray, result: FrameResult) -> np.ndarray:
    """
    Draw the hand contour, centroid and labels on the frame.

    Args:
        frame: Frame the result was computed from
        result: Output of GesturePipeline.process_frame

    Returns:
        The same frame, drawn on in place
    """
    if result.shape is None:
        cv2.putText(frame, "No hand detected", (10, 30), cv2.FONT_HERSHEY_SIMPLEX, 0.7, (0, 0, 255), 2)
        return frame

    shape = result.shape
    cv2.drawContours(frame, [shape.contour], -1, (0, 255, 0), 2)
    cx, cy = int(shape.centroid[0]), int(shape.centroid[1])
    cv2.circle(frame, (cx, cy), 5, (255, 0, 0), -1)

    cv2.putText(frame, f"Fingers: {shape.finger_count}", (10, 30),
                cv2.FONT_HERSHEY_SIMPLEX, 1, (0, 255, 0), 2)
    cv2.putText(frame, f"Gesture: {result.classification.resolved}", (10, 70),
                cv2.FONT_HERSHEY_SIMPLEX, 1, (0, 255, 0), 2)
    return frame


class GestureRecognitionApp:
    """Main application class for the gesture event stream."""

    def __init__(self, config: Cfg, sink: Optional[GestureSinkProto] = None):
        """Initialize the application with configuration."""
        self.config = config
        self.sink = sink or StdoutSink()
        self.pipeline = GesturePipeline.from_config(config, started_at=time.monotonic())

        # Initialize camera
        self.cap = cv2.VideoCapture(self.config.camera.index)
        self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.config.camera.width)
        self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.config.camera.height)
        self.cap.set(cv2.CAP_PROP_FPS, self.config.camera.fps)

        if not self.cap.isOpened():
            self.cap.release()
            raise RuntimeError(f"Failed to open camera {self.config.camera.index}")

    def step(self) -> bool:
        """
        Run one cycle.

        Returns:
            False when the user asked to quit, True otherwise
        """
        ret, frame = self.cap.read()
        if not ret or frame is None:
            logger.warning("Failed to read frame from camera, skipping cycle")
            return True

        result = self.pipeline.process_frame(frame, t_now=time.monotonic())
        if result.event is not None:
            self.sink.emit(result.event)

        display = self.config.display
        if not display.show_windows:
            return True

        cv2.imshow(display.window_name, draw_overlay(frame, result))
        if display.show_mask and result.mask.size > 0:
            cv2.imshow(display.mask_window_name, result.mask)

        return (cv2.waitKey(1) & 0xFF) != ord('q')

    def run(self) -> None:
        """Run the main application loop."""
        logger.info("🚀 Gesture detection started. Show your hand to the camera.")
        if self.config.display.show_windows:
            logger.info("Press 'q' in the video window to quit")

        interval_s = self.config.loop.frame_interval_ms / 1000.0
        try:
            while self.step():
                time.sleep(interval_s)
        finally:
            self.close()

    def close(self) -> None:
        """Release the camera and close windows."""
        if self.cap.isOpened():
            self.cap.release()
        if self.config.display.show_windows:
            cv2.destroyAllWindows()


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Print hand gesture events from a webcam, one per line.")
    parser.add_argument("--config", default=None, help="Path to YAML config (default: config.default.yaml)")
    parser.add_argument("--headless", action="store_true", help="Do not open any windows")
    parser.add_argument("--camera", type=int, default=None, help="Camera index override")
    parser.add_argument("--log-level", default=None, help="Logging level override (DEBUG, INFO, ...)")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the application."""
    args = parse_args(argv)

    try:
        config = load_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if args.headless:
        config.display.show_windows = False
    if args.camera is not None:
        config.camera.index = args.camera

    level = (args.log_level or config.logging.level).upper()
    logging.basicConfig(level=getattr(logging, level, logging.INFO), stream=sys.stderr)

    try:
        app = GestureRecognitionApp(config)
    except RuntimeError as e:
        logger.error(f"❌ {e}")
        return 1

    try:
        app.run()
    except KeyboardInterrupt:
        logger.info("Application interrupted by user")
    return 0


if __name__ == "__main__":
    sys.exit(main())
