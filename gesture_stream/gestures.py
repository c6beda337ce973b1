"""
Gesture classification and debouncing that turn hand shapes into events.
"""
import logging
import time
from typing import Optional

import numpy as np

from .config import Cfg
from .segmentation import HsvSkinSegmenter, empty_mask, is_valid_frame
from .shape import ShapeExtractor
from .types import (
    Classification,
    DebounceState,
    FingerCounterProto,
    FrameResult,
    GestureEvent,
    GestureLabel,
    HandShape,
    MotionState,
    Point,
    SegmenterProto,
)

logger = logging.getLogger(__name__)


FINGER_COUNT_LABELS = {
    1: GestureLabel.ZOOM_OUT,
    2: GestureLabel.ROTATE_RIGHT,
    3: GestureLabel.ROTATE_LEFT,
    4: GestureLabel.ROTATE_UP,
    5: GestureLabel.ZOOM_IN,
}


class GestureClassifier:
    """
    Maps hand shapes and centroid motion to gesture labels.

    Features:
    - Static label from the finger count
    - Motion label from the centroid displacement between frames
    - Motion wins over the static label whenever it is not NONE
    """

    def __init__(self, motion_threshold_px: float = 30.0):
        self.motion_threshold_px = motion_threshold_px

    def static_label(self, finger_count: int) -> GestureLabel:
        return FINGER_COUNT_LABELS.get(finger_count, GestureLabel.NONE)

    def motion_label(self, current: Optional[Point], previous: Optional[Point]) -> GestureLabel:
        """
        Classify the displacement from `previous` to `current`.

        Either centroid being None means no detection and gives NONE.
        Displacements within the threshold on both axes are ignored; the
        horizontal axis wins ties. Centroids are sub-pixel floats and are not
        rounded, so a 30.4 px shift already counts as motion.
        """
        if current is None or previous is None:
            return GestureLabel.NONE

        dx = current[0] - previous[0]
        dy = current[1] - previous[1]
        threshold = self.motion_threshold_px

        if abs(dx) <= threshold and abs(dy) <= threshold:
            return GestureLabel.NONE

        if abs(dx) >= abs(dy):
            return GestureLabel.ROTATE_RIGHT if dx > 0 else GestureLabel.ROTATE_LEFT
        return GestureLabel.ROTATE_DOWN if dy > 0 else GestureLabel.ROTATE_UP

    @staticmethod
    def resolve(static: GestureLabel, motion: GestureLabel) -> GestureLabel:
        return motion if motion != GestureLabel.NONE else static

    def classify(self, shape: Optional[HandShape], previous_centroid: Optional[Point]) -> Classification:
        """
        Classify one frame.

        Args:
            shape: Hand shape for this frame (None if no hand detected)
            previous_centroid: Centroid from the last detection, or None

        Returns:
            Static, motion and resolved labels
        """
        if shape is None:
            return Classification()

        static = self.static_label(shape.finger_count)
        motion = self.motion_label(shape.centroid, previous_centroid)
        return Classification(static=static, motion=motion, resolved=self.resolve(static, motion))


class Debouncer:
    """
    Edge-triggered, rate-limited gesture emitter.

    Features:
    - NONE is never emitted
    - A held gesture is emitted once, not every frame
    - No two emissions closer than the cooldown, whatever the labels
    """

    def __init__(self, cooldown_ms: int = 500, started_at: Optional[float] = None):
        """
        Args:
            cooldown_ms: Minimum gap between two emissions
            started_at: If given, the cooldown also applies against this
                start time, as if something had been emitted then
        """
        self.cooldown_ms = cooldown_ms
        self._started_at = started_at
        self.state = DebounceState(last_emission_time=started_at)

    def reset(self) -> None:
        """Return to the initial state."""
        self.state = DebounceState(last_emission_time=self._started_at)

    def in_cooldown(self, t_now: float) -> bool:
        last = self.state.last_emission_time
        if last is None:
            return False
        return (t_now - last) * 1000.0 < self.cooldown_ms

    def update(self, label: GestureLabel, t_now: float) -> Optional[GestureEvent]:
        """
        Feed the resolved label for one frame.

        Args:
            label: Resolved gesture label
            t_now: Current timestamp in seconds

        Returns:
            GestureEvent if the label should be delivered, None otherwise
        """
        if label == GestureLabel.NONE:
            return None

        if label == self.state.last_label:
            return None

        if self.in_cooldown(t_now):
            return None

        self.state = DebounceState(last_label=label, last_emission_time=t_now)
        return GestureEvent(label=label, timestamp=t_now)


class GesturePipeline:
    """
    Per-camera pipeline: segment, extract, classify, debounce.

    Owns the only cross-frame state (previous centroid and debounce state),
    so several pipelines can run side by side. Not thread-safe.
    """

    def __init__(self, segmenter: SegmenterProto, extractor: ShapeExtractor,
                 classifier: GestureClassifier, debouncer: Debouncer):
        self.segmenter = segmenter
        self.extractor = extractor
        self.classifier = classifier
        self.debouncer = debouncer
        self.motion = MotionState()

    @classmethod
    def from_config(cls, cfg: Cfg, started_at: Optional[float] = None,
                    segmenter: Optional[SegmenterProto] = None,
                    finger_counter: Optional[FingerCounterProto] = None) -> "GesturePipeline":
        """Build a pipeline from configuration, optionally swapping strategies."""
        return cls(
            segmenter=segmenter or HsvSkinSegmenter.from_config(cfg.segmentation),
            extractor=ShapeExtractor.from_config(cfg.shape, finger_counter=finger_counter),
            classifier=GestureClassifier(motion_threshold_px=cfg.gestures.motion_threshold_px),
            debouncer=Debouncer(cooldown_ms=cfg.gestures.cooldown_ms, started_at=started_at)
        )

    def reset(self) -> None:
        self.motion = MotionState()
        self.debouncer.reset()

    def process_mask(self, mask: np.ndarray, t_now: float) -> FrameResult:
        """Run everything after segmentation on an already computed mask."""
        shape = self.extractor.extract(mask)
        if shape is None:
            # Previous centroid is kept so motion is measured from the last sighting
            return FrameResult(mask=mask)

        classification = self.classifier.classify(shape, self.motion.previous_centroid)
        event = self.debouncer.update(classification.resolved, t_now)
        self.motion = MotionState(previous_centroid=shape.centroid)

        logger.debug(
            f"fingers={shape.finger_count} centroid=({shape.centroid[0]:.1f}, {shape.centroid[1]:.1f}) "
            f"static={classification.static} motion={classification.motion}"
        )
        if event is not None:
            logger.info(f"Gesture emitted: {event.label}")

        return FrameResult(mask=mask, shape=shape, classification=classification, event=event)

    def process_frame(self, frame: np.ndarray, t_now: Optional[float] = None) -> FrameResult:
        """
        Process a frame and return the detected shape, labels and event.

        Args:
            frame: Input frame in BGR format
            t_now: Current timestamp in seconds (defaults to time.monotonic())

        Returns:
            FrameResult; an empty or invalid frame is skipped and leaves the
            pipeline state untouched
        """
        if not is_valid_frame(frame):
            return FrameResult(mask=empty_mask())

        if t_now is None:
            t_now = time.monotonic()

        mask = self.segmenter.segment(frame)
        return self.process_mask(mask, t_now)
