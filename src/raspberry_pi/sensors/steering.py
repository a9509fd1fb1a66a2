"""
Steering servo on the shared ESP32 link.
"""

from __future__ import annotations

import logging
from enum import Enum

from comm import ESP32Serial
from config import STEERING_CENTER

logger = logging.getLogger(__name__)


class Steer(Enum):
    """Named wheel positions."""

    LEFT = "left"
    RIGHT = "right"
    STRAIGHT = "straight"


class Steering:
    """Front-wheel steering. Low servo values steer left, high steer right."""

    def __init__(self, link: ESP32Serial, params=None):
        self.link = link
        self.params = params

    @property
    def angle(self) -> int:
        return self.link.steering

    def angle_for(self, direction: Steer) -> int:
        offset = self.params.steer_offset if self.params else 45
        if direction == Steer.LEFT:
            return STEERING_CENTER - offset
        if direction == Steer.RIGHT:
            return STEERING_CENTER + offset
        return STEERING_CENTER

    async def set(self, direction: Steer):
        """Turn the wheels, keeping the current speed."""
        angle = self.angle_for(direction)
        self.link.send_command(self.link.speed, angle)
        logger.debug(f"Steering {direction.value} ({angle})")
