import asyncio

import pytest
import serial

from comm import ESP32Serial
from conftest import BrokenSerial, FakeCamera, FakeSerial
from control import Controller
from decision import NavigationMode
from errors import CollaboratorFailure, DetectionFailure


@pytest.fixture
def serial_port(monkeypatch):
    ports = []

    def make(*args, **kwargs):
        port = FakeSerial()
        ports.append(port)
        return port

    monkeypatch.setattr(serial, "Serial", make)
    return ports


def make_controller(script, params, detector):
    camera = FakeCamera(script)
    controller = Controller(params=params, link=ESP32Serial(), camera=camera, detector=detector)
    return controller, camera


def test_runs_steps_until_failure(serial_port, params, detector):
    script = [((0, 0), (100, 0)), ((10, 0), (100, 0))]
    controller, camera = make_controller(script, params, detector)

    with pytest.raises(CollaboratorFailure):
        asyncio.run(controller.run())

    assert controller.steps == 1
    assert controller.mode == NavigationMode.APPROACHING
    assert not camera.is_connected


def test_detection_failure_is_fatal_and_cleans_up(serial_port, params, detector):
    controller, _ = make_controller([((0, 0), None)], params, detector)

    with pytest.raises(DetectionFailure):
        asyncio.run(controller.run())

    port = serial_port[0]
    assert controller.steps == 0
    assert port.written == [b"C:0,90\n", b"E\n"]
    assert port.closed


def test_hardware_failure_propagates(monkeypatch, params, detector):
    def refuse(*args, **kwargs):
        raise serial.SerialException("no such port")

    monkeypatch.setattr(serial, "Serial", refuse)
    controller, camera = make_controller([], params, detector)

    with pytest.raises(CollaboratorFailure):
        asyncio.run(controller.run())

    assert camera.snapshots == 0


def test_last_map_exposed(serial_port, params, detector):
    script = [((0, 0), (100, 0)), ((10, 0), (100, 0))]
    controller, _ = make_controller(script, params, detector)

    with pytest.raises(CollaboratorFailure):
        asyncio.run(controller.run())

    assert controller.last_map.target.x == 100


def test_link_failure_keeps_step_error_and_releases_camera(monkeypatch, params, detector):
    ports = []

    def make(*args, **kwargs):
        port = BrokenSerial()
        ports.append(port)
        return port

    monkeypatch.setattr(serial, "Serial", make)
    controller, camera = make_controller([((0, 0), (100, 0))], params, detector)

    with pytest.raises(CollaboratorFailure) as excinfo:
        asyncio.run(controller.run())

    # The error from the first pulse, not one raised during cleanup
    assert isinstance(excinfo.value.__context__, serial.SerialException)
    assert not camera.is_connected
    assert ports[0].closed
    assert not controller.link.is_connected
