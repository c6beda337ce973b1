"""
Hand Gesture Event Stream

Reads color video frames, segments skin-colored regions, counts fingers from
contour geometry and tracks hand motion, then emits debounced gesture names
(ZOOM_IN, ROTATE_LEFT, ...) for a downstream control surface.
"""

__version__ = "0.1.0"

from .types import (
    GestureLabel,
    GestureEvent,
    HandShape,
    Region,
    Classification,
    FrameResult,
    MotionState,
    DebounceState,
    SegmenterProto,
    FingerCounterProto,
    GestureSinkProto,
)
from .config import load_config, default_config, Cfg
from .segmentation import HsvSkinSegmenter
from .shape import ShapeExtractor, ConvexityDefectFingerCounter, find_regions, centroid
from .gestures import GestureClassifier, Debouncer, GesturePipeline
from .sinks import StdoutSink, MockSink

__all__ = [
    "GestureLabel",
    "GestureEvent",
    "HandShape",
    "Region",
    "Classification",
    "FrameResult",
    "MotionState",
    "DebounceState",
    "SegmenterProto",
    "FingerCounterProto",
    "GestureSinkProto",
    "load_config",
    "default_config",
    "Cfg",
    "HsvSkinSegmenter",
    "ShapeExtractor",
    "ConvexityDefectFingerCounter",
    "find_regions",
    "centroid",
    "GestureClassifier",
    "Debouncer",
    "GesturePipeline",
    "StdoutSink",
    "MockSink",
]
