"""Hardware fakes shared by the tests."""

import pytest
import serial

from errors import CollaboratorFailure
from params import Parameters
from perception import ColorMarker


class FakeCamera:
    """
    Camera replaying a script of samples.

    Each entry is ((car_x, car_y) or None, (target_x, target_y) or None),
    an exception to raise, or anything else to hand to the detector as is.
    """

    def __init__(self, script):
        self.script = list(script)
        self.connected = False
        self.snapshots = 0

    @property
    def is_connected(self):
        return self.connected

    def connect(self):
        self.connected = True

    def release(self):
        self.connected = False

    async def snapshot(self):
        self.snapshots += 1
        if not self.script:
            raise CollaboratorFailure("camera", "script exhausted")
        entry = self.script.pop(0)
        if isinstance(entry, Exception):
            raise entry
        return entry


class FakeDetector:
    """Turns scripted (car, target) centers into zero-size markers."""

    def __init__(self, car_color="red", target_color="green"):
        self.car_color = car_color
        self.target_color = target_color

    def detect(self, frame):
        car, target = frame
        markers = []
        if car is not None:
            markers.append(ColorMarker(self.car_color, car[0], car[1], 0, 0, 100))
        if target is not None:
            markers.append(ColorMarker(self.target_color, target[0], target[1], 0, 0, 100))
        return markers


class FakeMotor:
    def __init__(self, log):
        self.log = log

    async def move_for(self, speed, duration):
        self.log.append(("move", speed, duration))

    async def stop(self):
        self.log.append(("stop",))


class FakeSteering:
    def __init__(self, log):
        self.log = log

    async def set(self, direction):
        self.log.append(("steer", direction))


class FakeSerial:
    """Stands in for serial.Serial on the ESP32 link."""

    def __init__(self, *args, **kwargs):
        self.written = []
        self.closed = False

    def write(self, data):
        self.written.append(data)
        return len(data)

    def close(self):
        self.closed = True


class BrokenSerial(FakeSerial):
    """Serial port that fails every write after the first `good_writes`."""

    good_writes = 0

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.attempts = 0

    def write(self, data):
        self.attempts += 1
        if self.attempts > self.good_writes:
            raise serial.SerialException("cable pulled")
        return super().write(data)


@pytest.fixture
def params():
    p = Parameters()
    p.turn_pulse_s = 0.0
    p.approach_pulse_s = 0.0
    p.idle_poll_s = 0.0
    return p


@pytest.fixture
def commands():
    return []


@pytest.fixture
def motor(commands):
    return FakeMotor(commands)


@pytest.fixture
def steering(commands):
    return FakeSteering(commands)


@pytest.fixture
def detector():
    return FakeDetector()
