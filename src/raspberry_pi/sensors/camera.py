"""
Overhead arena camera - one frame per snapshot.

The controller pulls frames on demand instead of streaming: every
control sample must come from a frame taken after the last actuator
pulse finished.
"""

from __future__ import annotations

import asyncio
import logging
import threading

import cv2
import numpy as np

from config import CAMERA_INDEX
from errors import CollaboratorFailure
from perception.markers import ColorMarker, draw_markers

logger = logging.getLogger(__name__)


class Camera:
    """
    USB overhead camera via OpenCV.

    Usage:
        params = Parameters.load()
        camera = Camera(params=params)
        camera.connect()

        frame = await camera.snapshot()

        camera.release()
    """

    def __init__(self, params, index: int = CAMERA_INDEX):
        self.params = params
        self.index = index
        self.width = params.camera_width
        self.height = params.camera_height

        self._cap: cv2.VideoCapture | None = None
        self._lock = threading.Lock()
        self._frame: np.ndarray | None = None

    @property
    def is_connected(self) -> bool:
        return self._cap is not None

    def connect(self):
        """Open the capture device. Raises CollaboratorFailure on failure."""
        if self._cap is not None:
            logger.warning("Camera already connected")
            return

        # Read resolution from params (may have changed since __init__)
        self.width = self.params.camera_width
        self.height = self.params.camera_height

        cap = cv2.VideoCapture(self.index)
        if not cap.isOpened():
            cap.release()
            raise CollaboratorFailure("camera", f"cannot open device {self.index}")

        cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
        cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)
        # Keep only the newest frame; stale buffered frames would lag the pulses
        cap.set(cv2.CAP_PROP_BUFFERSIZE, 1)

        self._cap = cap
        logger.info(f"Camera connected (OpenCV): {self.width}x{self.height}")

    def release(self):
        """Close the capture device."""
        if self._cap:
            self._cap.release()
            self._cap = None
        logger.info("Camera released")

    async def snapshot(self) -> np.ndarray:
        """Capture exactly one frame (BGR)."""
        if self._cap is None:
            raise CollaboratorFailure("camera", "not connected")

        frame = await asyncio.to_thread(self._read)

        with self._lock:
            self._frame = frame
        return frame.copy()

    def _read(self) -> np.ndarray:
        ret, frame = self._cap.read()
        if not ret or frame is None:
            raise CollaboratorFailure("camera", "frame capture failed")
        return frame

    def get_frame(self) -> np.ndarray | None:
        """Get latest captured frame (BGR format)."""
        with self._lock:
            if self._frame is not None:
                return self._frame.copy()
            return None

    def get_jpeg_frame(self, markers: list[ColorMarker] | None = None, quality: int = 80) -> bytes | None:
        """Get latest frame as JPEG bytes, optionally with marker boxes drawn.

        Args:
            markers: Markers to outline, or None for the bare frame.
            quality: JPEG compression quality (0-100).

        Returns:
            JPEG bytes, or None if no frame available.
        """
        frame = self.get_frame()
        if frame is None:
            return None

        if markers:
            draw_markers(frame, markers)

        ret, jpeg = cv2.imencode(".jpg", frame, [cv2.IMWRITE_JPEG_QUALITY, quality])
        if not ret:
            return None
        return jpeg.tobytes()

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.release()
