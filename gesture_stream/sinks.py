"""
Gesture event sinks.
"""
import sys
from typing import List, Optional, TextIO

from .types import GestureEvent, GestureLabel


class StdoutSink:
    """Writes one gesture name per line and flushes right away."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream

    def emit(self, event: GestureEvent) -> None:
        # Resolved at call time so redirected sys.stdout is honoured
        stream = self.stream or sys.stdout
        stream.write(f"{event.label}\n")
        stream.flush()


class MockSink:
    """Mock sink that records events instead of delivering them."""

    def __init__(self):
        """Initialize the mock sink."""
        self.events: List[GestureEvent] = []

    def emit(self, event: GestureEvent) -> None:
        self.events.append(event)

    @property
    def labels(self) -> List[GestureLabel]:
        return [e.label for e in self.events]

    def reset(self) -> None:
        """Forget recorded events."""
        self.events.clear()
