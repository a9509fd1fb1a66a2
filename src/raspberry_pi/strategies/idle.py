"""
Idle strategies - sit on the target until it moves away.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod

from perception.map_state import MapState, TeamColors

logger = logging.getLogger(__name__)


class IdleStrategy(ABC):
    """Base class for idle maneuvers."""

    @abstractmethod
    async def run(self, colors: TeamColors, camera, motor, steering) -> None:
        """Block until the car should start chasing the target again."""
        ...


class WatchTargetIdle(IdleStrategy):
    """Stand still and poll the camera until the target leaves its spot."""

    def __init__(self, detector, params):
        self.detector = detector
        self.params = params

    async def run(self, colors: TeamColors, camera, motor, steering) -> None:
        await motor.stop()

        anchor = (await MapState.infer(camera, self.detector, colors)).target
        logger.info(f"Idle: watching target at ({anchor.x:.0f}, {anchor.y:.0f})")

        while True:
            await asyncio.sleep(self.params.idle_poll_s)
            state = await MapState.infer(camera, self.detector, colors)
            moved = anchor.distance_to(state.target)
            if moved > self.params.idle_move_radius_px:
                logger.info(f"Idle: target moved {moved:.0f}px")
                return
