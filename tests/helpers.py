"""
Synthetic masks and frames shared by the test modules.
"""
import cv2
import numpy as np

FRAME_H, FRAME_W = 480, 640

# (x_left, y_top) of each 20px wide finger; tops follow a convex arc so
# every finger contributes its own hull vertex.
OPEN_HAND_FINGERS = [(90, 120), (150, 80), (210, 60), (270, 80), (330, 120)]
FINGER_WIDTH = 20
PALM_TOP, PALM_BOTTOM = 200, 350


def blank_mask() -> np.ndarray:
    return np.zeros((FRAME_H, FRAME_W), dtype=np.uint8)


def draw_hand(fingers, palm_left: int, palm_right: int, dx: int = 0, dy: int = 0) -> np.ndarray:
    """Mask with a rectangular palm and rectangular fingers standing on it."""
    mask = blank_mask()
    cv2.rectangle(mask, (palm_left + dx, PALM_TOP + dy), (palm_right + dx, PALM_BOTTOM + dy), 255, -1)
    for x, top in fingers:
        cv2.rectangle(mask, (x + dx, top + dy), (x + FINGER_WIDTH + dx, PALM_TOP + dy), 255, -1)
    return mask


def open_hand_mask(dx: int = 0, dy: int = 0) -> np.ndarray:
    """Five fingers flush with the palm edges: four valleys between them."""
    return draw_hand(OPEN_HAND_FINGERS, 90, 350, dx, dy)


def two_finger_mask(dx: int = 0, dy: int = 0) -> np.ndarray:
    """Two fingers flush with a narrow palm: one valley."""
    return draw_hand([(150, 80), (210, 60)], 150, 230, dx, dy)


def block_mask(x: int = 200, y: int = 150, w: int = 150, h: int = 150) -> np.ndarray:
    """Plain rectangle, four contour points: too few to count fingers."""
    mask = blank_mask()
    cv2.rectangle(mask, (x, y), (x + w, y + h), 255, -1)
    return mask


def skin_bgr(h: int = 10, s: int = 100, v: int = 200):
    """BGR color well inside the default skin range."""
    hsv = np.uint8([[[h, s, v]]])
    b, g, r = cv2.cvtColor(hsv, cv2.COLOR_HSV2BGR)[0, 0]
    return int(b), int(g), int(r)


def frame_from_mask(mask: np.ndarray) -> np.ndarray:
    """Black frame with skin colored pixels wherever the mask is set."""
    frame = np.zeros((mask.shape[0], mask.shape[1], 3), dtype=np.uint8)
    frame[mask > 0] = skin_bgr()
    return frame
