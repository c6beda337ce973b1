"""
Hand region extraction and finger counting from a binary mask.
"""
import logging
import math
from typing import List, Optional

import cv2
import numpy as np

from .config import ShapeConfig
from .types import FingerCounterProto, HandShape, Point, Region

logger = logging.getLogger(__name__)

MAX_FINGERS = 5


def find_regions(mask: np.ndarray) -> List[Region]:
    """
    Find the external boundary of every connected foreground blob.

    Args:
        mask: Binary uint8 mask (0 background, non-zero foreground)

    Returns:
        One Region per external contour; nested contours are ignored
    """
    if mask is None or mask.size == 0:
        return []

    contours, _ = cv2.findContours(mask, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE)
    return [Region(contour=c, area=float(cv2.contourArea(c))) for c in contours]


def largest_region(regions: List[Region]) -> Optional[Region]:
    """Region with the maximum enclosed area, first one wins on ties."""
    if not regions:
        return None
    return max(regions, key=lambda r: r.area)


def centroid(contour: np.ndarray) -> Optional[Point]:
    """
    Area-weighted centroid of a contour.

    Returns:
        (x, y) in pixels, or None for an empty or zero-area contour
    """
    if contour is None or len(contour) == 0:
        return None
    m = cv2.moments(contour)
    if m["m00"] == 0:
        return None
    return (m["m10"] / m["m00"], m["m01"] / m["m00"])


def angle_at_far_point(start, end, far) -> Optional[float]:
    """
    Angle in degrees at `far` in the triangle (start, end, far).

    Uses the law of cosines. Returns None when a side adjacent to `far`
    has zero length.
    """
    a = math.hypot(end[0] - start[0], end[1] - start[1])
    b = math.hypot(far[0] - start[0], far[1] - start[1])
    c = math.hypot(end[0] - far[0], end[1] - far[1])
    if b == 0 or c == 0:
        return None
    cos_angle = (b * b + c * c - a * a) / (2 * b * c)
    cos_angle = max(-1.0, min(1.0, cos_angle))
    return math.degrees(math.acos(cos_angle))


def count_finger_gaps(contour: np.ndarray, defects: Optional[np.ndarray],
                      defect_depth_min: float = 20.0,
                      finger_depth_min: float = 30.0,
                      max_gap_angle_deg: float = 90.0) -> int:
    """
    Count the convexity defects that look like valleys between fingers.

    A defect first has to be deeper than `defect_depth_min`; it is then
    counted only if the angle at its far point is at most
    `max_gap_angle_deg` and it is deeper than `finger_depth_min`.

    Args:
        contour: Contour the defects were computed on, shape (N, 1, 2)
        defects: Output of cv2.convexityDefects, shape (K, 1, 4), or None
    """
    if defects is None or len(defects) == 0:
        return 0

    points = contour.reshape(-1, 2)
    gaps = 0
    for start_idx, end_idx, far_idx, fixpt_depth in defects.reshape(-1, 4):
        depth = fixpt_depth / 256.0
        if depth <= defect_depth_min:
            continue

        angle = angle_at_far_point(points[start_idx], points[end_idx], points[far_idx])
        if angle is None:
            continue

        if angle <= max_gap_angle_deg and depth > finger_depth_min:
            gaps += 1

    return gaps


class ConvexityDefectFingerCounter:
    """
    Approximate finger count from convex hull defects.

    Fingers = qualifying gaps + 1, clamped to [0, 5]. A closed fist and an
    open hand with bent fingers can both come out as one finger.
    """

    def __init__(self, min_contour_points: int = 10, defect_depth_min: float = 20.0,
                 finger_depth_min: float = 30.0, max_gap_angle_deg: float = 90.0):
        self.min_contour_points = min_contour_points
        self.defect_depth_min = defect_depth_min
        self.finger_depth_min = finger_depth_min
        self.max_gap_angle_deg = max_gap_angle_deg

    @classmethod
    def from_config(cls, cfg: ShapeConfig) -> "ConvexityDefectFingerCounter":
        return cls(
            min_contour_points=cfg.min_contour_points,
            defect_depth_min=cfg.defect_depth_min,
            finger_depth_min=cfg.finger_depth_min,
            max_gap_angle_deg=cfg.max_gap_angle_deg
        )

    def count(self, contour: np.ndarray) -> int:
        if contour is None or len(contour) < self.min_contour_points:
            return 0

        hull = cv2.convexHull(contour, returnPoints=False)
        if hull is None or len(hull) < 3:
            return 0

        try:
            defects = cv2.convexityDefects(contour, hull)
        except cv2.error as e:
            # Self-intersecting contours give non-monotonic hull indices
            logger.debug(f"convexityDefects rejected contour of {len(contour)} points: {e}")
            return 0

        gaps = count_finger_gaps(
            contour, defects,
            defect_depth_min=self.defect_depth_min,
            finger_depth_min=self.finger_depth_min,
            max_gap_angle_deg=self.max_gap_angle_deg
        )
        return max(0, min(gaps + 1, MAX_FINGERS))


class ShapeExtractor:
    """Selects the dominant region of a mask and measures it."""

    def __init__(self, min_area: float = 5000.0,
                 finger_counter: Optional[FingerCounterProto] = None):
        self.min_area = min_area
        self.finger_counter = finger_counter or ConvexityDefectFingerCounter()

    @classmethod
    def from_config(cls, cfg: ShapeConfig,
                    finger_counter: Optional[FingerCounterProto] = None) -> "ShapeExtractor":
        return cls(
            min_area=cfg.min_area,
            finger_counter=finger_counter or ConvexityDefectFingerCounter.from_config(cfg)
        )

    def extract(self, mask: np.ndarray) -> Optional[HandShape]:
        """
        Extract the hand shape from a mask.

        Args:
            mask: Binary mask from a segmenter

        Returns:
            HandShape of the largest region, or None if there is no region,
            the largest one is smaller than min_area, or it has no centroid
        """
        region = largest_region(find_regions(mask))
        if region is None or region.area < self.min_area:
            return None

        center = centroid(region.contour)
        if center is None:
            return None

        fingers = self.finger_counter.count(region.contour)
        return HandShape(
            centroid=center,
            finger_count=max(0, min(int(fingers), MAX_FINGERS)),
            area=region.area,
            contour=region.contour
        )
