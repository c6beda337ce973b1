"""
Type definitions for the gesture event pipeline.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Protocol, Tuple, runtime_checkable

import numpy as np


Point = Tuple[float, float]


class GestureLabel(str, Enum):
    """Closed set of gesture names delivered downstream."""
    NONE = "NONE"
    ZOOM_IN = "ZOOM_IN"
    ZOOM_OUT = "ZOOM_OUT"
    ROTATE_LEFT = "ROTATE_LEFT"
    ROTATE_RIGHT = "ROTATE_RIGHT"
    ROTATE_UP = "ROTATE_UP"
    ROTATE_DOWN = "ROTATE_DOWN"

    def __str__(self) -> str:
        return self.value


@dataclass
class Region:
    """External boundary of one connected foreground blob."""
    contour: np.ndarray  # (N, 1, 2) int32, as returned by cv2.findContours
    area: float


@dataclass
class HandShape:
    """Features of the dominant region in one frame."""
    centroid: Point
    finger_count: int  # always within [0, 5]
    area: float
    contour: np.ndarray


@dataclass
class Classification:
    """Labels produced for a single frame."""
    static: GestureLabel = GestureLabel.NONE
    motion: GestureLabel = GestureLabel.NONE
    resolved: GestureLabel = GestureLabel.NONE


@dataclass
class GestureEvent:
    """A debounced gesture emitted by the pipeline."""
    label: GestureLabel
    timestamp: float  # seconds, same clock as the t_now passed to the pipeline


@dataclass
class MotionState:
    """Centroid carried between cycles. None means no previous detection."""
    previous_centroid: Optional[Point] = None


@dataclass
class DebounceState:
    """Last emission. A None time means nothing was emitted or started yet."""
    last_label: GestureLabel = GestureLabel.NONE
    last_emission_time: Optional[float] = None


@dataclass
class FrameResult:
    """Everything produced by one pipeline cycle."""
    mask: np.ndarray
    shape: Optional[HandShape] = None
    classification: Classification = field(default_factory=Classification)
    event: Optional[GestureEvent] = None

    @property
    def hand_detected(self) -> bool:
        return self.shape is not None


@runtime_checkable
class SegmenterProto(Protocol):
    """Turns a BGR frame into a binary 0/255 mask of hand-colored pixels."""

    def segment(self, frame: np.ndarray) -> np.ndarray:
        ...


@runtime_checkable
class FingerCounterProto(Protocol):
    """Estimates the number of raised fingers from a hand contour."""

    def count(self, contour: np.ndarray) -> int:
        ...


@runtime_checkable
class GestureSinkProto(Protocol):
    """Receives debounced gesture events."""

    def emit(self, event: GestureEvent) -> None:
        ...
