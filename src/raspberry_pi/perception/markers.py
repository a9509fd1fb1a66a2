"""
Color marker detection with OpenCV.

Finds colored blobs in a frame by HSV thresholding:
- Red (two hue ranges, red wraps around hue)
- Green
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import cv2
import numpy as np

from config import MARKER_COLORS

logger = logging.getLogger(__name__)


@dataclass
class ColorMarker:
    """Detected colored region."""

    color: str  # "red", "green"
    x: int  # Bounding box left
    y: int  # Bounding box top
    width: int
    height: int
    area: int  # Contour area in pixels

    @property
    def bbox(self) -> tuple[int, int, int, int]:
        return self.x, self.y, self.width, self.height


class MarkerDetector:
    """
    HSV color marker detector.

    Reads its thresholds from the shared Parameters on every call,
    so ranges tuned over the web apply to the next frame.

    Usage:
        detector = MarkerDetector(params)
        for marker in detector.detect(frame):
            print(marker.color, marker.bbox)
    """

    def __init__(self, params, colors: tuple[str, ...] = MARKER_COLORS):
        self.params = params
        self.colors = colors

    def detect(self, frame: np.ndarray) -> list[ColorMarker]:
        """Detect markers of every configured color, largest first."""
        hsv = cv2.cvtColor(frame, cv2.COLOR_BGR2HSV)
        markers = []
        for color in self.colors:
            markers.extend(self._find_markers(self._mask_hsv(hsv, color), color))
        markers.sort(key=lambda m: m.area, reverse=True)
        return markers

    def mask(self, frame: np.ndarray, color: str) -> np.ndarray:
        """Binary mask of one color."""
        hsv = cv2.cvtColor(frame, cv2.COLOR_BGR2HSV)
        return self._mask_hsv(hsv, color)

    def _mask_hsv(self, hsv: np.ndarray, color: str) -> np.ndarray:
        if color == "red":
            rl1, ru1 = self._range("red1")
            rl2, ru2 = self._range("red2")
            return cv2.bitwise_or(cv2.inRange(hsv, rl1, ru1), cv2.inRange(hsv, rl2, ru2))
        if color == "green":
            lower, upper = self._range(color)
            return cv2.inRange(hsv, lower, upper)
        raise ValueError(f"Unknown marker color: {color}")

    def _range(self, color: str):
        """Get (lower, upper) HSV numpy arrays for a color from Parameters."""
        p = self.params
        if color == "red1":
            return (np.array([p.red_h_min1, p.red_s_min1, p.red_v_min1]),
                    np.array([p.red_h_max1, p.red_s_max1, p.red_v_max1]))
        if color == "red2":
            return (np.array([p.red_h_min2, p.red_s_min2, p.red_v_min2]),
                    np.array([p.red_h_max2, p.red_s_max2, p.red_v_max2]))
        return (np.array([p.green_h_min, p.green_s_min, p.green_v_min]),
                np.array([p.green_h_max, p.green_s_max, p.green_v_max]))

    def _find_markers(self, mask: np.ndarray, color: str) -> list[ColorMarker]:
        """Find markers in a binary mask."""
        markers = []

        # Clean up mask
        kernel = np.ones((5, 5), np.uint8)
        mask = cv2.erode(mask, kernel, iterations=1)
        mask = cv2.dilate(mask, kernel, iterations=2)

        contours, _ = cv2.findContours(mask, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE)

        for contour in contours:
            area = cv2.contourArea(contour)
            if area < self.params.min_contour_area:
                continue

            x, y, w, h = cv2.boundingRect(contour)
            markers.append(ColorMarker(color=color, x=x, y=y, width=w, height=h, area=int(area)))

        return markers


# BGR drawing colors for debug overlays
DRAW_COLORS = {
    "red": (0, 0, 255),
    "green": (0, 255, 0),
}


def draw_markers(frame: np.ndarray, markers: list[ColorMarker]) -> np.ndarray:
    """Draw bounding boxes and labels onto frame (in place)."""
    for marker in markers:
        bgr = DRAW_COLORS.get(marker.color, (255, 255, 255))
        cv2.rectangle(
            frame,
            (marker.x, marker.y),
            (marker.x + marker.width, marker.y + marker.height),
            bgr,
            2,
        )
        cv2.putText(
            frame,
            marker.color,
            (marker.x, marker.y - 8),
            cv2.FONT_HERSHEY_SIMPLEX,
            0.5,
            bgr,
            1,
        )
    return frame
