"""
Approach strategies - drive up to the target once the car faces it.

Runs a whole maneuver and reports a Hint telling the state machine
whether the target was reached or the car needs to turn again.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum, auto

from perception.map_state import MapState, TeamColors
from sensors.steering import Steer

logger = logging.getLogger(__name__)


class Hint(Enum):
    """Outcome of an approach maneuver."""

    TARGET_WAS_HIT = auto()
    ORIENTATION_IS_OFF = auto()


class ApproachStrategy(ABC):
    """Base class for approach maneuvers."""

    @abstractmethod
    async def run(self, colors: TeamColors, camera, motor, steering) -> Hint:
        """
        Drive towards the target until it is hit or the heading is lost.

        Args:
            colors: Car and target marker colors.
            camera, motor, steering: Hardware handles owned by the caller.

        Returns:
            Hint for the state machine.
        """
        ...


class IncrementalApproach(ApproachStrategy):
    """
    Short forward pulses interleaved with measurements.

    Each pulse must bring the car closer to the target. If it does not,
    the heading is off and the car has to turn again.
    """

    def __init__(self, detector, params):
        self.detector = detector
        self.params = params

    async def run(self, colors: TeamColors, camera, motor, steering) -> Hint:
        p = self.params
        await steering.set(Steer.STRAIGHT)

        state = await MapState.infer(camera, self.detector, colors)
        before = state.distance
        if before <= p.hit_radius_px:
            logger.info(f"Approach: already on target ({before:.0f}px)")
            return Hint.TARGET_WAS_HIT

        while True:
            await motor.move_for(p.drive_speed, p.approach_pulse_s)
            state = await MapState.infer(camera, self.detector, colors)
            after = state.distance

            if after <= p.hit_radius_px:
                logger.info(f"Approach: target hit ({after:.0f}px)")
                return Hint.TARGET_WAS_HIT

            if before - after <= p.approach_min_progress_px:
                logger.info(
                    f"Approach: no progress ({before:.0f}px -> {after:.0f}px), "
                    f"orientation is off"
                )
                return Hint.ORIENTATION_IS_OFF

            logger.debug(f"Approach: {before:.0f}px -> {after:.0f}px")
            before = after
