"""
Main controller - Coordinates all layers.

This is the process loop that:
1. Connects camera and ESP32
2. Runs one StateMachine step
3. Logs the resulting mode
4. Repeats forever

Any error escaping a step stops the controller.
"""

import logging
from typing import Optional

from comm import ESP32Serial
from params import Parameters
from perception import MapState, MarkerDetector
from sensors import Camera, Motor, Steer, Steering
from decision import NavigationMode, StateMachine
from errors import CollaboratorFailure

logger = logging.getLogger(__name__)


class Controller:
    """
    Main robot controller.

    Coordinates:
    - Sensor layer (Camera, Motor, Steering)
    - Perception layer (MarkerDetector, MapState)
    - Decision layer (StateMachine)

    Usage:
        controller = Controller()
        asyncio.run(controller.run())
    """

    def __init__(
        self,
        params: Optional[Parameters] = None,
        link: Optional[ESP32Serial] = None,
        camera=None,
        detector=None,
    ):
        # Runtime parameters (shared, tunable via web)
        self.params = params or Parameters.load()

        # Hardware
        self.link = link or ESP32Serial()
        self.camera = camera or Camera(params=self.params)
        self.motor = Motor(self.link)
        self.steering = Steering(self.link, params=self.params)

        # Perception
        self.detector = detector or MarkerDetector(self.params)

        # Decision
        self.state_machine = StateMachine(
            self.camera,
            self.motor,
            self.steering,
            self.detector,
            self.params,
        )

        self._steps = 0

    @property
    def mode(self) -> NavigationMode:
        return self.state_machine.mode

    @property
    def steps(self) -> int:
        return self._steps

    @property
    def last_map(self) -> Optional[MapState]:
        """Latest MapState for web access."""
        return self.state_machine.last_map

    async def run(self):
        """Run the control loop until a step fails."""
        logger.info("Controller starting...")

        try:
            self._init_hardware()

            logger.info("Entering main control loop")
            while True:
                mode = await self.state_machine.execute()
                self._steps += 1
                logger.debug(f"Step {self._steps}: {mode.name}")

        except Exception as e:
            logger.error(f"Controller error: {e}")
            raise
        finally:
            self._cleanup()

    def _init_hardware(self):
        """Connect all hardware. Failures propagate."""
        logger.info("Initializing hardware...")
        self.link.connect()
        self.camera.connect()
        logger.info("Hardware initialized")

    def _cleanup(self):
        """Stop the car and release hardware."""
        logger.info("Cleaning up...")

        # Each action runs even if an earlier one fails; errors here must
        # not replace the one that stopped the loop.
        if self.link.is_connected:
            try:
                self.link.send_command(0, self.steering.angle_for(Steer.STRAIGHT))
            except CollaboratorFailure as e:
                logger.warning(f"Cleanup: stop command failed: {e}")
            try:
                self.link.disconnect()
            except CollaboratorFailure as e:
                logger.warning(f"Cleanup: disconnect failed: {e}")

        if self.camera.is_connected:
            self.camera.release()

        logger.info("Cleanup complete")
