"""
State machine for target navigation.

Sequences three behaviors:
- TURNING: wiggle forward/backward until the car faces the target
- APPROACHING: drive up to the target (delegated to a strategy)
- IDLE: wait on the target until it moves (delegated to a strategy)

One call to execute() runs one full step of the current mode and
commits the next mode only once the step has succeeded.
"""

from __future__ import annotations

import logging
import math
from enum import Enum, auto

from perception import MapState, TeamColors, Vector
from sensors.steering import Steer
from strategies import (
    ApproachStrategy,
    Hint,
    IdleStrategy,
    IncrementalApproach,
    WatchTargetIdle,
)

logger = logging.getLogger(__name__)


class NavigationMode(Enum):
    """Navigation mode enumeration."""

    TURNING = auto()
    APPROACHING = auto()
    IDLE = auto()


# Approach outcome -> next mode
_AFTER_APPROACH = {
    Hint.TARGET_WAS_HIT: NavigationMode.IDLE,
    Hint.ORIENTATION_IS_OFF: NavigationMode.TURNING,
}


class StateMachine:
    """
    Navigation state machine.

    Usage:
        sm = StateMachine(camera, motor, steering, detector, params)

        # In control loop:
        mode = await sm.execute()

        # With custom maneuvers:
        sm = StateMachine(..., approach=MyApproach(), idle=MyIdle())
    """

    def __init__(
        self,
        camera,
        motor,
        steering,
        detector,
        params,
        colors: TeamColors = TeamColors(),
        approach: ApproachStrategy = None,
        idle: IdleStrategy = None,
    ):
        self.mode = NavigationMode.TURNING
        self.camera = camera
        self.motor = motor
        self.steering = steering
        self.detector = detector
        self.params = params
        self.colors = colors

        # Strategies
        self.approach = approach or IncrementalApproach(detector, params)
        self.idle = idle or WatchTargetIdle(detector, params)

        # Latest sample (for web access)
        self.last_map: MapState | None = None

    async def execute(self) -> NavigationMode:
        """Run one step of the current mode and return the next mode."""
        logger.info(f"Mode: {self.mode.name}")
        last_pos = await self._infer()

        if self.mode == NavigationMode.TURNING:
            self.mode = await self._turn(last_pos)

        elif self.mode == NavigationMode.APPROACHING:
            hint = await self.approach.run(self.colors, self.camera, self.motor, self.steering)
            logger.info(f"Approach result: {hint.name}")
            self.mode = _AFTER_APPROACH[hint]

        elif self.mode == NavigationMode.IDLE:
            await self.idle.run(self.colors, self.camera, self.motor, self.steering)
            self.mode = NavigationMode.TURNING

        return self.mode

    async def _infer(self) -> MapState:
        state = await MapState.infer(self.camera, self.detector, self.colors)
        self.last_map = state
        return state

    async def _turn(self, last_pos: MapState) -> NavigationMode:
        """
        Turn until the car's heading points at the target.

        The car cannot turn in place, so each round drives forward to
        measure the heading, then reverses with the wheels turned one
        way and sets them the other way for the next forward pulse.
        """
        p = self.params

        while True:
            await self.motor.move_for(p.drive_speed, p.turn_pulse_s)
            cur_pos = await self._infer()

            car_vec = Vector.between(last_pos.car, cur_pos.car)
            target_vec = Vector.between(cur_pos.car, cur_pos.target)
            angle = car_vec.angle(target_vec)
            last_pos = cur_pos

            if abs(angle) < p.turn_tolerance_deg:
                logger.info(f"Turning: on target (angle={angle:.1f}°)")
                await self.steering.set(Steer.STRAIGHT)
                return NavigationMode.APPROACHING

            # Sign bit decides: 0.0 turns right, -0.0 turns left
            if math.copysign(1.0, angle) > 0:
                first, second = Steer.RIGHT, Steer.LEFT
            else:
                first, second = Steer.LEFT, Steer.RIGHT

            logger.info(f"Turning: angle={angle:.1f}°, steering {first.value}")
            await self.steering.set(first)
            await self.motor.move_for(-p.drive_speed, p.turn_pulse_s)
            await self.steering.set(second)
