"""
Serial communication with the ESP32 motor controller.

One link carries both drive speed and steering angle, so the motor and
the steering actuator share it.

Protocol (Pi -> ESP32):
    C:<speed>,<steer>\\n  - speed: -100..100, steer: 0..180
    E\\n                  - emergency stop
"""

from __future__ import annotations

import logging

import serial

from config import (
    ESP32_BAUDRATE,
    ESP32_PORT,
    SPEED_MAX,
    SPEED_MIN,
    STEERING_CENTER,
    STEERING_MAX,
    STEERING_MIN,
)
from errors import CollaboratorFailure

logger = logging.getLogger(__name__)


class ESP32Serial:
    """Serial link to the ESP32 motor controller."""

    def __init__(self, port: str = ESP32_PORT, baudrate: int = ESP32_BAUDRATE):
        self.port = port
        self.baudrate = baudrate
        self._serial: serial.Serial | None = None
        self._speed = 0
        self._steering = STEERING_CENTER

    @property
    def is_connected(self) -> bool:
        return self._serial is not None

    @property
    def speed(self) -> int:
        return self._speed

    @property
    def steering(self) -> int:
        return self._steering

    def connect(self):
        """Open the serial port. Raises CollaboratorFailure if it cannot."""
        try:
            self._serial = serial.Serial(
                port=self.port,
                baudrate=self.baudrate,
                timeout=0.005,
            )
        except serial.SerialException as e:
            raise CollaboratorFailure("esp32", f"cannot open {self.port}: {e}") from e
        logger.info(f"Connected to ESP32 on {self.port}")

    def disconnect(self):
        """Stop the motor and close the port."""
        if self._serial:
            try:
                self.emergency_stop()
            finally:
                self._serial.close()
                self._serial = None
        logger.info("Disconnected from ESP32")

    def send_command(self, speed: int, steering: int):
        """
        Send speed and steering to the ESP32.

        Args:
            speed: -100 to 100 (negative = reverse)
            steering: 0 to 180 (90 = center, low = left)
        """
        self._speed = max(SPEED_MIN, min(SPEED_MAX, int(speed)))
        self._steering = max(STEERING_MIN, min(STEERING_MAX, int(steering)))

        # Servo is wired inverted: 0=right, 180=left. Flip to match
        # convention where low values=left, high values=right.
        hw_steering = STEERING_MAX - self._steering
        self._write(f"C:{self._speed},{hw_steering}\n")

    def resend(self):
        """Repeat the last command to feed the ESP32 watchdog."""
        self.send_command(self._speed, self._steering)

    def emergency_stop(self):
        """Emergency stop - sends E command."""
        self._write("E\n")
        self._speed = 0
        logger.warning("EMERGENCY STOP")

    def _write(self, command: str):
        if not self._serial:
            raise CollaboratorFailure("esp32", "not connected")
        try:
            self._serial.write(command.encode())
        except serial.SerialException as e:
            raise CollaboratorFailure("esp32", f"write failed: {e}") from e
        logger.debug(f"Sent: {command.strip()}")

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()
