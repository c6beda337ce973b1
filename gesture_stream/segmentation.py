"""
Skin color segmentation of BGR frames into a binary hand mask.
"""
import logging
from typing import Optional, Tuple

import cv2
import numpy as np

from .config import SegmentationConfig

logger = logging.getLogger(__name__)


def empty_mask() -> np.ndarray:
    """Mask returned for a missing or unusable frame."""
    return np.zeros((0, 0), dtype=np.uint8)


def is_valid_frame(frame: Optional[np.ndarray]) -> bool:
    """True for a non-empty (H, W, 3) color image."""
    return (
        frame is not None
        and isinstance(frame, np.ndarray)
        and frame.size > 0
        and frame.ndim == 3
        and frame.shape[2] == 3
    )


def disk_kernel(radius: int) -> np.ndarray:
    """Elliptical structuring element spanning 2 * radius samples."""
    size = max(1, 2 * radius)
    return cv2.getStructuringElement(cv2.MORPH_ELLIPSE, (size, size))


class HsvSkinSegmenter:
    """
    Fixed-range HSV skin segmenter.

    Thresholds every pixel against an inclusive HSV range, then removes
    isolated noise with a morphological opening and fills small holes
    with a closing, both using the same disk kernel.
    """

    def __init__(self, lower_hsv: Tuple[int, int, int] = (0, 30, 60),
                 upper_hsv: Tuple[int, int, int] = (20, 150, 255),
                 kernel_radius: int = 4):
        self.lower = np.array(lower_hsv, dtype=np.uint8)
        self.upper = np.array(upper_hsv, dtype=np.uint8)
        self.kernel = disk_kernel(kernel_radius)

    @classmethod
    def from_config(cls, cfg: SegmentationConfig) -> "HsvSkinSegmenter":
        return cls(lower_hsv=cfg.lower_hsv, upper_hsv=cfg.upper_hsv,
                   kernel_radius=cfg.kernel_radius)

    def threshold(self, frame_bgr: np.ndarray) -> np.ndarray:
        """Raw in-range mask before any morphology."""
        hsv = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2HSV)
        return cv2.inRange(hsv, self.lower, self.upper)

    def segment(self, frame: np.ndarray) -> np.ndarray:
        """
        Segment hand-colored pixels.

        Args:
            frame: Input frame in BGR format

        Returns:
            uint8 mask (0 or 255) with the frame's height and width, or an
            empty mask if the frame is missing or not a 3-channel image
        """
        if not is_valid_frame(frame):
            logger.debug("Skipping segmentation of empty or invalid frame")
            return empty_mask()

        mask = self.threshold(frame)
        mask = cv2.morphologyEx(mask, cv2.MORPH_OPEN, self.kernel)
        mask = cv2.morphologyEx(mask, cv2.MORPH_CLOSE, self.kernel)
        return mask
