"""
Drive motor - timed pulses over the ESP32 link.

A pulse is fixed-length: it always runs to completion before the
caller gets control back. The command is repeated during the pulse
so the ESP32 watchdog keeps the motor running.
"""

from __future__ import annotations

import asyncio
import logging

from comm import ESP32Serial
from config import KEEPALIVE_INTERVAL
from errors import CollaboratorFailure

logger = logging.getLogger(__name__)


class Motor:
    """
    Drive motor on the shared ESP32 link.

    Usage:
        link = ESP32Serial()
        link.connect()
        motor = Motor(link)

        await motor.move_for(40, 0.5)    # forward pulse
        await motor.move_for(-40, 0.5)   # backward pulse
    """

    def __init__(self, link: ESP32Serial, keepalive: float = KEEPALIVE_INTERVAL):
        self.link = link
        self.keepalive = keepalive

    @property
    def speed(self) -> int:
        return self.link.speed

    async def move_for(self, speed: int, duration: float):
        """Drive at speed for duration seconds, then stop."""
        logger.debug(f"Pulse: speed={speed} for {duration:.2f}s")
        loop = asyncio.get_running_loop()
        deadline = loop.time() + duration

        self.link.send_command(speed, self.link.steering)
        try:
            while True:
                remaining = deadline - loop.time()
                if remaining <= 0:
                    break
                await asyncio.sleep(min(self.keepalive, remaining))
                if loop.time() < deadline:
                    self.link.resend()
        except BaseException:
            self._stop_after_error()
            raise

        self.link.send_command(0, self.link.steering)

    def _stop_after_error(self):
        """Best-effort stop while another error is already propagating."""
        if not self.link.is_connected:
            return
        try:
            self.link.send_command(0, self.link.steering)
        except CollaboratorFailure as e:
            logger.warning(f"Stop after failed pulse also failed: {e}")

    async def stop(self):
        """Stop motor (speed = 0, maintain steering)."""
        self.link.send_command(0, self.link.steering)
        logger.info("Motor stopped")
