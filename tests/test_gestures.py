"""
Test cases for gesture classification, debouncing and the frame pipeline.
"""
import unittest
import random
import sys
from pathlib import Path

import numpy as np

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from gesture_stream.gestures import Debouncer, GestureClassifier, GesturePipeline
from gesture_stream.types import GestureLabel, HandShape, MotionState
from gesture_stream.config import default_config
from tests.helpers import blank_mask, frame_from_mask, open_hand_mask, two_finger_mask

L = GestureLabel


def shape_at(x, y, fingers=0):
    return HandShape(centroid=(x, y), finger_count=fingers, area=10000.0,
                     contour=np.zeros((0, 1, 2), dtype=np.int32))


class TestGestureClassifier(unittest.TestCase):
    """Test static, motion and resolved labels."""

    def setUp(self):
        self.classifier = GestureClassifier(motion_threshold_px=30)

    def test_static_mapping(self):
        expected = {
            1: L.ZOOM_OUT,
            2: L.ROTATE_RIGHT,
            3: L.ROTATE_LEFT,
            4: L.ROTATE_UP,
            5: L.ZOOM_IN,
        }
        for count, label in expected.items():
            self.assertEqual(self.classifier.static_label(count), label)

    def test_static_none_outside_one_to_five(self):
        for count in (-3, -1, 0, 6, 7, 100):
            self.assertEqual(self.classifier.static_label(count), L.NONE)

    def test_motion_none_without_previous(self):
        self.assertEqual(self.classifier.motion_label((300, 200), None), L.NONE)
        self.assertEqual(self.classifier.motion_label(None, (300, 200)), L.NONE)

    def test_motion_within_threshold(self):
        """Displacements up to the threshold on both axes are not motion."""
        for dx, dy in [(0, 0), (30, 0), (-30, 30), (29, -30), (30, 30)]:
            self.assertEqual(self.classifier.motion_label((100 + dx, 100 + dy), (100, 100)), L.NONE)

    def test_motion_directions(self):
        cases = [
            ((31, 0), L.ROTATE_RIGHT),
            ((-31, 0), L.ROTATE_LEFT),
            ((0, 31), L.ROTATE_DOWN),
            ((0, -31), L.ROTATE_UP),
            ((50, 40), L.ROTATE_RIGHT),
            ((10, -60), L.ROTATE_UP),
        ]
        for (dx, dy), label in cases:
            self.assertEqual(self.classifier.motion_label((200 + dx, 200 + dy), (200, 200)), label)

    def test_fractional_displacement_at_threshold(self):
        """Sub-pixel centroids are compared unrounded against the threshold."""
        self.assertEqual(self.classifier.motion_label((130.0, 100.0), (100.0, 100.0)), L.NONE)
        self.assertEqual(self.classifier.motion_label((130.5, 100.0), (100.0, 100.0)), L.ROTATE_RIGHT)
        self.assertEqual(self.classifier.motion_label((100.25, 69.5), (100.0, 100.0)), L.ROTATE_UP)

    def test_motion_tie_goes_horizontal(self):
        self.assertEqual(self.classifier.motion_label((240, 240), (200, 200)), L.ROTATE_RIGHT)
        self.assertEqual(self.classifier.motion_label((160, 240), (200, 200)), L.ROTATE_LEFT)

    def test_origin_is_a_valid_centroid(self):
        """A previous centroid at (0, 0) is a real position, not 'no detection'."""
        self.assertEqual(self.classifier.motion_label((100, 0), (0, 0)), L.ROTATE_RIGHT)

    def test_motion_takes_priority(self):
        """Resolved label equals the motion label whenever motion is not NONE."""
        for fingers in range(0, 6):
            result = self.classifier.classify(shape_at(300, 100, fingers), (200, 100))
            self.assertEqual(result.motion, L.ROTATE_RIGHT)
            self.assertEqual(result.resolved, L.ROTATE_RIGHT)

    def test_static_used_without_motion(self):
        result = self.classifier.classify(shape_at(205, 100, 5), (200, 100))
        self.assertEqual(result.motion, L.NONE)
        self.assertEqual(result.static, L.ZOOM_IN)
        self.assertEqual(result.resolved, L.ZOOM_IN)

    def test_no_shape(self):
        result = self.classifier.classify(None, (200, 100))
        self.assertEqual((result.static, result.motion, result.resolved), (L.NONE, L.NONE, L.NONE))


class TestDebouncer(unittest.TestCase):
    """Test edge-triggered, rate-limited emission."""

    def setUp(self):
        self.debouncer = Debouncer(cooldown_ms=500)

    def feed(self, debouncer, sequence):
        events = []
        for label, t in sequence:
            event = debouncer.update(label, t)
            if event is not None:
                events.append(event)
        return events

    def test_reference_sequence(self):
        """NONE, ZOOM_IN, ZOOM_IN, ROTATE_LEFT at 0/50/520/540 ms, then ROTATE_LEFT held."""
        sequence = [
            (L.NONE, 0.000),
            (L.ZOOM_IN, 0.050),
            (L.ZOOM_IN, 0.520),
            (L.ROTATE_LEFT, 0.540),
            (L.ROTATE_LEFT, 0.560),
            (L.ROTATE_LEFT, 0.600),
        ]
        events = self.feed(self.debouncer, sequence)
        self.assertEqual([(e.label, e.timestamp) for e in events],
                         [(L.ZOOM_IN, 0.050), (L.ROTATE_LEFT, 0.560)])

    def test_never_emits_none(self):
        events = self.feed(self.debouncer, [(L.NONE, t) for t in (0.0, 1.0, 2.0)])
        self.assertEqual(events, [])

    def test_held_gesture_emitted_once(self):
        events = self.feed(self.debouncer, [(L.ZOOM_OUT, t * 0.25) for t in range(20)])
        self.assertEqual(len(events), 1)

    def test_none_does_not_rearm(self):
        """A label interrupted only by NONE is still a repeat."""
        events = self.feed(self.debouncer, [(L.ZOOM_IN, 0.0), (L.NONE, 1.0), (L.ZOOM_IN, 2.0)])
        self.assertEqual([e.label for e in events], [L.ZOOM_IN])

    def test_cooldown_boundary(self):
        """Exactly the cooldown apart is allowed."""
        events = self.feed(self.debouncer, [(L.ZOOM_IN, 1.0), (L.ZOOM_OUT, 1.25), (L.ZOOM_OUT, 1.5)])
        self.assertEqual([(e.label, e.timestamp) for e in events],
                         [(L.ZOOM_IN, 1.0), (L.ZOOM_OUT, 1.5)])

    def test_start_time_counts_as_emission(self):
        """With a start time, the first label also waits out the cooldown."""
        debouncer = Debouncer(cooldown_ms=500, started_at=0.0)
        events = self.feed(debouncer, [(L.ZOOM_IN, 0.25), (L.ZOOM_IN, 0.5)])
        self.assertEqual([(e.label, e.timestamp) for e in events], [(L.ZOOM_IN, 0.5)])

    def test_state_only_changes_on_emission(self):
        self.debouncer.update(L.ZOOM_IN, 0.0)
        self.debouncer.update(L.ZOOM_OUT, 0.1)
        self.assertEqual(self.debouncer.state.last_label, L.ZOOM_IN)
        self.assertEqual(self.debouncer.state.last_emission_time, 0.0)

    def test_reset(self):
        self.debouncer.update(L.ZOOM_IN, 0.0)
        self.debouncer.reset()
        self.assertEqual(self.debouncer.state.last_label, L.NONE)
        self.assertIsNone(self.debouncer.state.last_emission_time)
        self.assertIsNotNone(self.debouncer.update(L.ZOOM_IN, 0.1))

    def test_random_sequences_respect_invariants(self):
        """No repeats, no NONE, no two events inside the cooldown."""
        rng = random.Random(1234)
        labels = list(GestureLabel)
        for _ in range(50):
            debouncer = Debouncer(cooldown_ms=500)
            t = 0.0
            sequence = []
            for _ in range(200):
                t += rng.choice([0.01, 0.033, 0.1, 0.25, 0.6])
                sequence.append((rng.choice(labels), t))
            events = self.feed(debouncer, sequence)
            for prev, cur in zip(events, events[1:]):
                self.assertNotEqual(prev.label, cur.label)
                self.assertGreaterEqual((cur.timestamp - prev.timestamp) * 1000.0, 500 - 1e-6)
            self.assertNotIn(L.NONE, [e.label for e in events])


class TestGesturePipeline(unittest.TestCase):
    """Test the per-frame pipeline on synthetic masks and frames."""

    def setUp(self):
        self.cfg = default_config()
        self.pipeline = GesturePipeline.from_config(self.cfg)

    def test_open_hand_over_five_frames(self):
        """Five frames of an open hand: ZOOM_IN every frame, one event."""
        mask = open_hand_mask()
        results = [self.pipeline.process_mask(mask, t_now=i * 0.033) for i in range(5)]
        for result in results:
            self.assertEqual(result.shape.finger_count, 5)
            self.assertEqual(result.classification.static, L.ZOOM_IN)
            self.assertEqual(result.classification.resolved, L.ZOOM_IN)
        events = [r.event for r in results if r.event is not None]
        self.assertEqual([e.label for e in events], [L.ZOOM_IN])

    def test_empty_mask_no_detection(self):
        result = self.pipeline.process_mask(blank_mask(), t_now=0.0)
        self.assertFalse(result.hand_detected)
        self.assertIsNone(result.event)
        self.assertEqual(result.classification.resolved, L.NONE)

    def test_motion_overrides_shape(self):
        """Moving the open hand 60px right reads as ROTATE_RIGHT."""
        self.pipeline.process_mask(open_hand_mask(), t_now=0.0)
        result = self.pipeline.process_mask(open_hand_mask(dx=60), t_now=1.0)
        self.assertEqual(result.classification.static, L.ZOOM_IN)
        self.assertEqual(result.classification.motion, L.ROTATE_RIGHT)
        self.assertEqual(result.event.label, L.ROTATE_RIGHT)

    def test_upward_motion(self):
        self.pipeline.process_mask(two_finger_mask(dy=80), t_now=0.0)
        result = self.pipeline.process_mask(two_finger_mask(), t_now=1.0)
        self.assertEqual(result.classification.motion, L.ROTATE_UP)

    def test_previous_centroid_survives_missed_frames(self):
        """Frames without a hand keep the last seen centroid."""
        first = self.pipeline.process_mask(open_hand_mask(), t_now=0.0)
        self.pipeline.process_mask(blank_mask(), t_now=0.1)
        self.assertEqual(self.pipeline.motion.previous_centroid, first.shape.centroid)

    def test_empty_frame_skips_cycle(self):
        """An empty frame produces nothing and leaves state untouched."""
        self.pipeline.process_mask(open_hand_mask(), t_now=0.0)
        motion_before = self.pipeline.motion
        debounce_before = self.pipeline.debouncer.state
        result = self.pipeline.process_frame(np.zeros((0, 0, 3), dtype=np.uint8), t_now=5.0)
        self.assertEqual(result.mask.size, 0)
        self.assertFalse(result.hand_detected)
        self.assertIsNone(result.event)
        self.assertIs(self.pipeline.motion, motion_before)
        self.assertIs(self.pipeline.debouncer.state, debounce_before)

    def test_frame_end_to_end(self):
        """A skin colored hand drawn on a black frame emits ZOOM_IN."""
        frame = frame_from_mask(open_hand_mask())
        result = self.pipeline.process_frame(frame, t_now=0.0)
        self.assertTrue(result.hand_detected)
        self.assertEqual(result.shape.finger_count, 5)
        self.assertEqual(result.event.label, L.ZOOM_IN)

    def test_pipelines_are_independent(self):
        other = GesturePipeline.from_config(self.cfg)
        self.pipeline.process_mask(open_hand_mask(), t_now=0.0)
        self.assertIsNone(other.motion.previous_centroid)
        self.assertEqual(other.debouncer.state.last_label, L.NONE)

    def test_reset(self):
        self.pipeline.process_mask(open_hand_mask(), t_now=0.0)
        self.pipeline.reset()
        self.assertEqual(self.pipeline.motion, MotionState())
        self.assertEqual(self.pipeline.debouncer.state.last_label, L.NONE)


if __name__ == '__main__':
    unittest.main()
